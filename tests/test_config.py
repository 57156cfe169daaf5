"""Tests for Config."""

from __future__ import annotations

from pathlib import Path

import pytest

from defdeploy.config import Config
from defdeploy.errors import ConfigError, ConfigNotFoundError


class TestDefaults:
    def test_defaults_present(self) -> None:
        config = Config()
        assert config.get("definitions.root") == "META-INF/cxs/"
        assert config.get("definitions.extension") == ".json"
        assert config.get("modules.dirs") == ["./modules"]
        assert config.get("prompt.max_attempts") is None
        assert config.get("services.factory") is None

    def test_missing_key_returns_default(self) -> None:
        assert Config().get("nope.nothing", "fallback") == "fallback"

    def test_override_merges_over_defaults(self) -> None:
        config = Config({"definitions": {"extension": ".yaml"}})
        assert config.get("definitions.extension") == ".yaml"
        assert config.get("definitions.root") == "META-INF/cxs/"

    def test_root_gets_trailing_slash(self) -> None:
        assert Config({"definitions": {"root": "defs"}}).get("definitions.root") == "defs/"

    def test_single_modules_dir_string_becomes_list(self) -> None:
        assert Config({"modules": {"dirs": "./bundles"}}).get("modules.dirs") == ["./bundles"]


class TestValidation:
    @pytest.mark.parametrize("value", [0, -1, "3", True])
    def test_bad_max_attempts(self, value: object) -> None:
        with pytest.raises(ConfigError):
            Config({"prompt": {"max_attempts": value}})

    def test_bad_extension(self) -> None:
        with pytest.raises(ConfigError):
            Config({"definitions": {"extension": "json"}})

    def test_empty_root(self) -> None:
        with pytest.raises(ConfigError):
            Config({"definitions": {"root": ""}})

    def test_set_validates(self) -> None:
        config = Config()
        with pytest.raises(ConfigError):
            config.set("prompt.max_attempts", 0)

    def test_set_creates_sections(self) -> None:
        config = Config()
        config.set("extra.section.value", 5)
        assert config.get("extra.section.value") == 5


class TestLoad:
    def test_load_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "defdeploy.yaml"
        path.write_text("prompt:\n  max_attempts: 3\nmodules:\n  dirs: [a, b]\n")
        config = Config.load(path)
        assert config.get("prompt.max_attempts") == 3
        assert config.get("modules.dirs") == ["a", "b"]

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert Config.load(path).get("definitions.extension") == ".json"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigNotFoundError):
            Config.load(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("prompt: [unclosed\n")
        with pytest.raises(ConfigError):
            Config.load(path)

    def test_non_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError):
            Config.load(path)
