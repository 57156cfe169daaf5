"""Resource lookup across the loaded modules."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

from defdeploy.errors import ModuleNotFoundError
from defdeploy.index.catalog import ModuleCatalog
from defdeploy.index.types import ModuleScope, ModuleSource, ResourceLocation
from defdeploy.kinds import DEFINITIONS_ROOT, DefinitionKind, path_for

if TYPE_CHECKING:
    from defdeploy.config import Config

logger = logging.getLogger(__name__)

__all__ = ["ResourceIndex"]


class ResourceIndex:
    """Finds definition resources under a path prefix in one or all modules."""

    def __init__(
        self,
        catalog: ModuleCatalog,
        root: str = DEFINITIONS_ROOT,
        extension: str = ".json",
    ) -> None:
        self._catalog = catalog
        self._root = root
        self._extension = extension

    @classmethod
    def from_config(cls, catalog: ModuleCatalog, config: Config) -> ResourceIndex:
        return cls(
            catalog,
            root=config.get("definitions.root", DEFINITIONS_ROOT),
            extension=config.get("definitions.extension", ".json"),
        )

    @property
    def root(self) -> str:
        return self._root

    @property
    def extension(self) -> str:
        return self._extension

    def path_for(self, kind: DefinitionKind) -> str:
        return path_for(kind, self._root)

    def module(self, module_id: int) -> ModuleSource:
        """Return the loaded module with *module_id*.

        Raises:
            ModuleNotFoundError: If no such module is loaded.
        """
        module = self._catalog.get(module_id)
        if module is None:
            raise ModuleNotFoundError(module_id=module_id)
        return module

    def find(self, scope: ModuleScope, prefix: str) -> list[ResourceLocation]:
        """Return resources under *prefix* for every module in *scope*, in scope order.

        An empty list means nothing matched.
        """
        results: list[ResourceLocation] = []
        for module in scope.modules:
            entries = module.find_entries(prefix, self._extension)
            results.extend(ResourceLocation.of(module, path) for path in entries)
        logger.debug("Found %d resource(s) under %s in %s", len(results), prefix, scope.module_ids)
        return results

    def has_resources(self, module: ModuleSource, prefix: str) -> bool:
        return bool(module.find_entries(prefix, self._extension))

    def modules_with_definitions(self, kinds: Iterable[DefinitionKind] = DefinitionKind) -> list[ModuleSource]:
        """Loaded modules exposing at least one resource under any of *kinds*' paths."""
        prefixes = [self.path_for(k) for k in kinds]
        found: list[ModuleSource] = []
        for module in self._catalog.modules():
            if not self.has_resources(module, self._root):
                continue
            if any(self.has_resources(module, p) for p in prefixes):
                found.append(module)
        return found

    def kinds_in_scope(self, scope: ModuleScope) -> list[DefinitionKind]:
        """Kinds, in declaration order, with at least one resource somewhere in *scope*."""
        return [
            kind
            for kind in DefinitionKind
            if any(self.has_resources(m, self.path_for(kind)) for m in scope.modules)
        ]
