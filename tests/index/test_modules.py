"""Tests for DirectoryModule and ArchiveModule."""

from __future__ import annotations

from pathlib import Path

import pytest

from definition_helpers import (
    break_central_directory,
    corrupt_archive_entry,
    rule_payload,
    write_archive,
    write_definition,
)
from defdeploy.errors import ModuleLoadError
from defdeploy.index.modules import ArchiveModule, DirectoryModule
from defdeploy.index.types import ModuleSource


class TestDirectoryModule:
    def test_satisfies_module_source(self, tmp_path: Path) -> None:
        assert isinstance(DirectoryModule(1, "m", tmp_path), ModuleSource)

    def test_not_a_directory_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ModuleLoadError):
            DirectoryModule(1, "m", tmp_path / "missing")

    def test_find_entries_recursive_and_sorted(self, tmp_path: Path) -> None:
        write_definition(tmp_path, "rules/b.json", rule_payload("b"))
        write_definition(tmp_path, "rules/a.json", rule_payload("a"))
        write_definition(tmp_path, "rules/nested/c.json", rule_payload("c"))
        module = DirectoryModule(1, "m", tmp_path)
        assert module.find_entries("META-INF/cxs/rules", ".json") == [
            "META-INF/cxs/rules/a.json",
            "META-INF/cxs/rules/b.json",
            "META-INF/cxs/rules/nested/c.json",
        ]

    def test_find_entries_filters_extension(self, tmp_path: Path) -> None:
        write_definition(tmp_path, "rules/a.json", rule_payload("a"))
        write_definition(tmp_path, "rules/notes.txt", "not a definition")
        module = DirectoryModule(1, "m", tmp_path)
        assert module.find_entries("META-INF/cxs/rules", ".json") == ["META-INF/cxs/rules/a.json"]

    def test_prefix_is_a_directory_not_a_string_prefix(self, tmp_path: Path) -> None:
        write_definition(tmp_path, "rulesets/x.json", rule_payload("x"))
        module = DirectoryModule(1, "m", tmp_path)
        assert module.find_entries("META-INF/cxs/rules", ".json") == []

    def test_missing_prefix_is_empty(self, tmp_path: Path) -> None:
        assert DirectoryModule(1, "m", tmp_path).find_entries("META-INF/cxs/goals", ".json") == []

    def test_read(self, tmp_path: Path) -> None:
        write_definition(tmp_path, "rules/a.json", '{"x": 1}')
        module = DirectoryModule(1, "m", tmp_path)
        assert module.read("META-INF/cxs/rules/a.json") == b'{"x": 1}'

    def test_read_outside_module_rejected(self, tmp_path: Path) -> None:
        inner = tmp_path / "inner"
        inner.mkdir()
        (tmp_path / "secret.json").write_text("{}")
        module = DirectoryModule(1, "m", inner)
        with pytest.raises(FileNotFoundError):
            module.read("../secret.json")


class TestArchiveModule:
    def test_not_an_archive_raises(self, tmp_path: Path) -> None:
        bogus = tmp_path / "bogus.jar"
        bogus.write_text("plain text")
        with pytest.raises(ModuleLoadError):
            ArchiveModule(1, "m", bogus)

    def test_corrupt_central_directory_raises(self, tmp_path: Path) -> None:
        archive = break_central_directory(write_archive(tmp_path / "mod.jar", {"META-INF/cxs/rules/a.json": "{}"}))
        with pytest.raises(ModuleLoadError) as exc_info:
            ArchiveModule(1, "mod", archive)
        assert exc_info.value.details["reason"] == "corrupt archive"

    def test_find_entries(self, tmp_path: Path) -> None:
        archive = write_archive(
            tmp_path / "mod.jar",
            {
                "META-INF/cxs/rules/b.json": rule_payload("b"),
                "META-INF/cxs/rules/a.json": rule_payload("a"),
                "META-INF/cxs/segments/s.json": "{}",
                "META-INF/MANIFEST.MF": "Manifest-Version: 1.0",
            },
        )
        module = ArchiveModule(7, "mod", archive)
        assert module.module_id == 7
        assert module.find_entries("META-INF/cxs/rules", ".json") == [
            "META-INF/cxs/rules/a.json",
            "META-INF/cxs/rules/b.json",
        ]
        assert module.find_entries("META-INF/cxs/", ".json") == [
            "META-INF/cxs/rules/a.json",
            "META-INF/cxs/rules/b.json",
            "META-INF/cxs/segments/s.json",
        ]

    def test_read(self, tmp_path: Path) -> None:
        archive = write_archive(tmp_path / "mod.zip", {"META-INF/cxs/rules/a.json": '{"k": "v"}'})
        module = ArchiveModule(1, "mod", archive)
        assert module.read("META-INF/cxs/rules/a.json") == b'{"k": "v"}'

    def test_read_missing_entry(self, tmp_path: Path) -> None:
        archive = write_archive(tmp_path / "mod.zip", {"META-INF/cxs/rules/a.json": "{}"})
        module = ArchiveModule(1, "mod", archive)
        with pytest.raises(FileNotFoundError):
            module.read("META-INF/cxs/rules/zzz.json")

    def test_read_corrupt_entry(self, tmp_path: Path) -> None:
        archive = write_archive(tmp_path / "mod.jar", {"META-INF/cxs/rules/a.json": rule_payload("a")})
        module = ArchiveModule(1, "mod", archive)
        corrupt_archive_entry(archive, "META-INF/cxs/rules/a.json")
        with pytest.raises(OSError, match="Cannot read entry META-INF/cxs/rules/a.json"):
            module.read("META-INF/cxs/rules/a.json")
