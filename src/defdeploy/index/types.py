"""Index types: ResourceLocation, ModuleScope, ModuleSource."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

__all__ = [
    "ModuleSource",
    "ModuleScope",
    "ResourceLocation",
]


@runtime_checkable
class ModuleSource(Protocol):
    """A loaded module that can be queried for packaged resources."""

    @property
    def module_id(self) -> int: ...

    @property
    def name(self) -> str: ...

    def find_entries(self, prefix: str, extension: str) -> list[str]:
        """Return sorted entry paths under *prefix* ending with *extension*, recursively."""
        ...

    def read(self, path: str) -> bytes:
        """Return the raw content of the entry at *path*."""
        ...


@dataclass(frozen=True)
class ResourceLocation:
    """One packaged resource: owning module, path inside the module, file name."""

    module_id: int
    module_name: str
    path: str
    file_name: str

    @classmethod
    def of(cls, module: ModuleSource, path: str) -> ResourceLocation:
        return cls(
            module_id=module.module_id,
            module_name=module.name,
            path=path,
            file_name=path.rsplit("/", 1)[-1],
        )

    @property
    def url(self) -> str:
        return f"module://{self.module_id}/{self.path}"

    def matches(self, normalized_name: str) -> bool:
        """Whether this location's path ends with *normalized_name*."""
        return ("/" + self.path).endswith(normalized_name)

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class ModuleScope:
    """The set of modules a selection is restricted to."""

    modules: tuple[ModuleSource, ...]
    is_wildcard: bool = False

    @classmethod
    def all(cls, modules: list[ModuleSource] | tuple[ModuleSource, ...]) -> ModuleScope:
        return cls(modules=tuple(modules), is_wildcard=True)

    @classmethod
    def one(cls, module: ModuleSource) -> ModuleScope:
        return cls(modules=(module,), is_wildcard=False)

    @property
    def module_ids(self) -> list[int]:
        return [m.module_id for m in self.modules]

    def describe(self) -> str:
        return ", ".join(f"{m.name} [{m.module_id}]" for m in self.modules)
