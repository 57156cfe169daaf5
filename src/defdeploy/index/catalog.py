"""Catalog of loaded modules, keyed by integer module id."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterator

import yaml

from defdeploy.errors import ConfigNotFoundError, InvalidInputError, ModuleLoadError
from defdeploy.index.modules import ARCHIVE_SUFFIXES, ArchiveModule, DirectoryModule
from defdeploy.index.types import ModuleSource

logger = logging.getLogger(__name__)

__all__ = ["ModuleCatalog", "load_manifest", "MANIFEST_NAME"]

MANIFEST_NAME = "module.yaml"
_ARCHIVE_MANIFEST_SUFFIX = "_module.yaml"


def load_manifest(manifest_path: Path) -> dict[str, Any]:
    """Load a module manifest (``id`` and ``name`` keys, both optional).

    Returns empty dict if the file does not exist.
    """
    if not manifest_path.exists():
        return {}

    try:
        parsed = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ModuleLoadError(module_path=str(manifest_path), reason="invalid YAML in manifest", cause=e) from e

    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ModuleLoadError(module_path=str(manifest_path), reason="manifest must be a YAML mapping")

    module_id = parsed.get("id")
    if module_id is not None and (isinstance(module_id, bool) or not isinstance(module_id, int)):
        raise ModuleLoadError(module_path=str(manifest_path), reason="manifest 'id' must be an integer")
    return parsed


def _manifest_path_for(path: Path) -> Path:
    if path.is_dir():
        return path / MANIFEST_NAME
    return path.with_name(path.stem + _ARCHIVE_MANIFEST_SUFFIX)


class ModuleCatalog:
    """The set of currently loaded modules."""

    def __init__(self, modules: list[ModuleSource] | None = None) -> None:
        self._modules: dict[int, ModuleSource] = {}
        for module in modules or []:
            self.add(module)

    def add(self, module: ModuleSource) -> None:
        """Add a module to the catalog.

        Raises:
            InvalidInputError: If a module with the same id is already loaded.
        """
        if module.module_id in self._modules:
            raise InvalidInputError(message=f"Module id already loaded: {module.module_id}")
        self._modules[module.module_id] = module

    def get(self, module_id: int) -> ModuleSource | None:
        """Look up a module by id. Returns None if not loaded."""
        return self._modules.get(module_id)

    def has(self, module_id: int) -> bool:
        return module_id in self._modules

    def modules(self) -> list[ModuleSource]:
        """Loaded modules in id order."""
        return [self._modules[k] for k in sorted(self._modules)]

    def __iter__(self) -> Iterator[ModuleSource]:
        return iter(self.modules())

    def __len__(self) -> int:
        return len(self._modules)

    # ----- Discovery -----

    def discover(self, roots: list[str | Path]) -> int:
        """Load every module directory and archive found directly under *roots*.

        A module's id and name come from its manifest when present; otherwise
        the name is the directory or archive stem and the id is the next free
        integer, assigned in discovery order.

        Returns:
            Number of modules added in this pass.

        Raises:
            ConfigNotFoundError: If a root does not exist.
        """
        candidates: list[tuple[Path, dict[str, Any]]] = []
        for root in roots:
            root_path = Path(root).resolve()
            if not root_path.is_dir():
                raise ConfigNotFoundError(config_path=str(root_path))

            for entry in sorted(os.scandir(root_path), key=lambda e: e.name):
                name = entry.name
                if name.startswith(".") or name.startswith("_"):
                    continue
                path = Path(entry.path)
                if not (entry.is_dir() or path.suffix.lower() in ARCHIVE_SUFFIXES):
                    continue
                try:
                    manifest = load_manifest(_manifest_path_for(path))
                except ModuleLoadError as e:
                    logger.warning("Skipping module at %s: %s", path, e)
                    continue
                candidates.append((path, manifest))

        # Explicit ids are claimed before sequential ones are handed out
        claimed: dict[int, Path] = {}
        skipped: set[Path] = set()
        for path, manifest in candidates:
            explicit = manifest.get("id")
            if explicit is None:
                continue
            if explicit in self._modules or explicit in claimed:
                logger.error(
                    "Duplicate module id %d at %s, already taken by %s. Skipping.",
                    explicit,
                    path,
                    claimed.get(explicit, self._modules.get(explicit)),
                )
                skipped.add(path)
                continue
            claimed[explicit] = path

        next_id = 1
        added = 0
        for path, manifest in candidates:
            if path in skipped:
                continue
            module_id = manifest.get("id")
            if module_id is None:
                while next_id in self._modules or next_id in claimed:
                    next_id += 1
                module_id = next_id
                next_id += 1
            name = manifest.get("name") or path.stem

            try:
                if path.is_dir():
                    module: ModuleSource = DirectoryModule(module_id, name, path)
                else:
                    module = ArchiveModule(module_id, name, path)
            except ModuleLoadError as e:
                logger.warning("Skipping module at %s: %s", path, e)
                continue

            self._modules[module_id] = module
            logger.debug("Loaded module %s [%d] from %s", name, module_id, path)
            added += 1

        if added == 0:
            logger.warning("No modules discovered under %s", ", ".join(str(r) for r in roots))
        return added
