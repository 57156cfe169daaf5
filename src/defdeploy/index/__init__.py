"""Module catalog and definition resource lookup.

Usage::

    from defdeploy.index import ModuleCatalog, ResourceIndex

    catalog = ModuleCatalog()
    catalog.discover(["./modules"])
    index = ResourceIndex(catalog)
"""

from __future__ import annotations

from defdeploy.index.catalog import MANIFEST_NAME, ModuleCatalog, load_manifest
from defdeploy.index.modules import ArchiveModule, DirectoryModule
from defdeploy.index.resource_index import ResourceIndex
from defdeploy.index.types import ModuleScope, ModuleSource, ResourceLocation

__all__ = [
    "ArchiveModule",
    "DirectoryModule",
    "MANIFEST_NAME",
    "ModuleCatalog",
    "ModuleScope",
    "ModuleSource",
    "ResourceIndex",
    "ResourceLocation",
    "load_manifest",
]
