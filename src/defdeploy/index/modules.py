"""Module sources backed by a directory tree or a zip/jar archive."""

from __future__ import annotations

import logging
import os
import zipfile
import zlib
from pathlib import Path

from defdeploy.errors import ModuleLoadError

logger = logging.getLogger(__name__)

__all__ = ["DirectoryModule", "ArchiveModule", "ARCHIVE_SUFFIXES"]

ARCHIVE_SUFFIXES = {".zip", ".jar"}

_SKIP_DIR_NAMES = {"__pycache__", "node_modules"}


def _as_dir_prefix(prefix: str) -> str:
    prefix = prefix.strip("/")
    return prefix + "/" if prefix else ""


class DirectoryModule:
    """A module whose resources live in a directory tree."""

    def __init__(self, module_id: int, name: str, root: str | Path) -> None:
        self._module_id = module_id
        self._name = name
        self._root = Path(root).resolve()
        if not self._root.is_dir():
            raise ModuleLoadError(module_path=str(root), reason="not a directory")

    @property
    def module_id(self) -> int:
        return self._module_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def root(self) -> Path:
        return self._root

    def find_entries(self, prefix: str, extension: str) -> list[str]:
        start = self._root / _as_dir_prefix(prefix)
        if not start.is_dir():
            return []

        results: list[str] = []

        def _scan_dir(dir_path: Path) -> None:
            try:
                entries = list(os.scandir(dir_path))
            except PermissionError as e:
                logger.error("Permission denied scanning %s: %s", dir_path, e)
                return
            except OSError as e:
                logger.error("OS error scanning %s: %s", dir_path, e)
                return

            for entry in entries:
                if entry.name in _SKIP_DIR_NAMES:
                    continue
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                    is_file = entry.is_file(follow_symlinks=False)
                except OSError as e:
                    logger.error("OS error accessing %s: %s", entry.path, e)
                    continue

                entry_path = Path(entry.path)
                if is_dir:
                    _scan_dir(entry_path)
                elif is_file and entry.name.endswith(extension):
                    results.append(entry_path.relative_to(self._root).as_posix())

        _scan_dir(start)
        return sorted(results)

    def read(self, path: str) -> bytes:
        target = (self._root / path).resolve()
        if self._root not in target.parents:
            raise FileNotFoundError(f"Entry outside module {self._name}: {path}")
        return target.read_bytes()

    def __repr__(self) -> str:
        return f"DirectoryModule(module_id={self._module_id!r}, name={self._name!r})"


class ArchiveModule:
    """A module packaged as a zip or jar archive."""

    def __init__(self, module_id: int, name: str, archive_path: str | Path) -> None:
        self._module_id = module_id
        self._name = name
        self._path = Path(archive_path).resolve()
        if not zipfile.is_zipfile(self._path):
            raise ModuleLoadError(module_path=str(archive_path), reason="not a zip archive")
        try:
            with zipfile.ZipFile(self._path) as zf:
                self._names = [n for n in zf.namelist() if not n.endswith("/")]
        except zipfile.BadZipFile as e:
            raise ModuleLoadError(module_path=str(archive_path), reason="corrupt archive", cause=e) from e

    @property
    def module_id(self) -> int:
        return self._module_id

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> Path:
        return self._path

    def find_entries(self, prefix: str, extension: str) -> list[str]:
        dir_prefix = _as_dir_prefix(prefix)
        return sorted(n for n in self._names if n.startswith(dir_prefix) and n.endswith(extension))

    def read(self, path: str) -> bytes:
        """Return the entry at *path*.

        Raises:
            FileNotFoundError: If the archive has no such entry.
            OSError: If the entry is corrupt or cannot be decompressed.
        """
        try:
            with zipfile.ZipFile(self._path) as zf:
                return zf.read(path)
        except KeyError:
            raise FileNotFoundError(f"No entry {path} in module {self._name}") from None
        except (zipfile.BadZipFile, zlib.error, RuntimeError) as e:
            # RuntimeError is what zipfile raises for encrypted entries
            raise OSError(f"Cannot read entry {path} in module {self._name}: {e}") from e

    def __repr__(self) -> str:
        return f"ArchiveModule(module_id={self._module_id!r}, name={self._name!r})"
