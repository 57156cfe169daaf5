"""Interactive narrowing of module, definition kind and file down to resources.

Each axis is resolved by its own step. A step takes a :class:`SelectionState`
and returns a new one, so every axis can be exercised on its own::

    state = SelectionState.start(module_id=None, kind="rule")
    state = resolver.resolve_module(state)
    state = resolver.resolve_kind(state)
    state = resolver.resolve_file(state)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from defdeploy.errors import DefinitionFileNotFoundError, NoDefinitionsFoundError
from defdeploy.index.resource_index import ResourceIndex
from defdeploy.index.types import ModuleScope, ResourceLocation
from defdeploy.kinds import DefinitionKind, parse_kind
from defdeploy.prompt import WILDCARD_LABEL, Prompter, ask_choice

logger = logging.getLogger(__name__)

__all__ = [
    "SelectionState",
    "Selection",
    "SelectionResolver",
    "normalize_file_name",
    "MODULE_QUESTION",
    "KIND_QUESTION",
    "FILE_QUESTION",
]

MODULE_QUESTION = "Which module ?"
KIND_QUESTION = "Which kind of definition do you want to load?"
FILE_QUESTION = "Which file do you want to load ?"


def normalize_file_name(file_name: str, extension: str = ".json") -> str:
    """Prefix *file_name* with ``/`` if it has no separator and append *extension* if missing."""
    if "/" not in file_name:
        file_name = "/" + file_name
    if not file_name.endswith(extension):
        file_name += extension
    return file_name


@dataclass(frozen=True)
class SelectionState:
    """In-progress narrowing of one invocation."""

    requested_module_id: int | None = None
    requested_kind: str | None = None
    requested_file: str | None = None
    scope: ModuleScope | None = None
    kind: DefinitionKind | None = None
    resources: tuple[ResourceLocation, ...] = ()
    module_wildcard: bool = False
    file_wildcard: bool = False

    @classmethod
    def start(
        cls,
        module_id: int | None = None,
        kind: str | None = None,
        file_name: str | None = None,
    ) -> SelectionState:
        return cls(requested_module_id=module_id, requested_kind=kind, requested_file=file_name)


@dataclass(frozen=True)
class Selection:
    """Final outcome of the narrowing: one kind, one or more resources."""

    kind: DefinitionKind
    locations: tuple[ResourceLocation, ...]
    wildcard: bool = False

    def __len__(self) -> int:
        return len(self.locations)


class SelectionResolver:
    """Resolves the module, kind and file axes, prompting where a value is missing."""

    def __init__(
        self,
        index: ResourceIndex,
        prompter: Prompter,
        max_attempts: int | None = None,
    ) -> None:
        self._index = index
        self._prompter = prompter
        self._max_attempts = max_attempts

    def resolve(
        self,
        module_id: int | None = None,
        kind: str | None = None,
        file_name: str | None = None,
    ) -> Selection:
        """Run all three axes and return the selected resources.

        Raises:
            InvalidKindError: If *kind* is given and unknown.
            ModuleNotFoundError: If *module_id* is given and not loaded.
            NoDefinitionsFoundError: If an axis has no candidates.
            DefinitionFileNotFoundError: If *file_name* matches no candidate.
            PromptAbortedError: If the operator gives up on a prompt.
        """
        state = SelectionState.start(module_id, kind, file_name)
        if state.requested_kind is not None:
            # unknown kinds fail before any module is looked at
            parse_kind(state.requested_kind)
        state = self.resolve_module(state)
        state = self.resolve_kind(state)
        state = self.resolve_file(state)
        return Selection(
            kind=state.kind,  # type: ignore[arg-type]
            locations=state.resources,
            wildcard=state.file_wildcard,
        )

    # ----- Module axis -----

    def resolve_module(self, state: SelectionState) -> SelectionState:
        if state.requested_module_id is not None:
            module = self._index.module(state.requested_module_id)
            return replace(state, scope=ModuleScope.one(module), module_wildcard=False)

        modules = self._index.modules_with_definitions()
        if not modules:
            raise NoDefinitionsFoundError(
                axis="module",
                message="Couldn't find any module with definitions",
            )

        labels = [WILDCARD_LABEL] + [m.name for m in modules]
        choice = self._ask(MODULE_QUESTION, labels)
        if choice == 1:
            return replace(state, scope=ModuleScope.all(modules), module_wildcard=True)
        return replace(state, scope=ModuleScope.one(modules[choice - 2]), module_wildcard=False)

    # ----- Kind axis -----

    def resolve_kind(self, state: SelectionState) -> SelectionState:
        scope = self._require_scope(state)
        if state.requested_kind is not None:
            return replace(state, kind=parse_kind(state.requested_kind))

        kinds = self._index.kinds_in_scope(scope)
        if not kinds:
            raise NoDefinitionsFoundError(
                axis="kind",
                message=f"Couldn't find definitions in module : {scope.describe()}",
                details={"module_ids": scope.module_ids},
            )

        choice = self._ask(KIND_QUESTION, [k.value for k in kinds])
        return replace(state, kind=kinds[choice - 1])

    # ----- File axis -----

    def resolve_file(self, state: SelectionState) -> SelectionState:
        scope = self._require_scope(state)
        if state.kind is None:
            raise ValueError("resolve_kind must run before resolve_file")

        path = self._index.path_for(state.kind)
        candidates = self._index.find(scope, path)
        if not candidates:
            raise NoDefinitionsFoundError(
                axis="file",
                message=(
                    f"Couldn't find definitions in module with id: "
                    f"{state.requested_module_id} and definition path: {path}"
                ),
                details={"module_ids": scope.module_ids, "path": path},
            )

        requested = state.requested_file
        if requested is None:
            ordered = sorted(candidates, key=lambda loc: loc.file_name)
            labels = [WILDCARD_LABEL] + [loc.file_name for loc in ordered]
            choice = self._ask(FILE_QUESTION, labels)
            if choice == 1:
                return replace(state, resources=tuple(candidates), file_wildcard=True)
            return replace(state, resources=(ordered[choice - 2],), file_wildcard=False)

        if requested.startswith("*"):
            return replace(state, resources=tuple(candidates), file_wildcard=True)

        normalized = normalize_file_name(requested, self._index.extension)
        for location in candidates:
            if location.matches(normalized):
                return replace(state, resources=(location,), file_wildcard=False)
        raise DefinitionFileNotFoundError(file_name=normalized)

    # ----- Helpers -----

    def _ask(self, question: str, labels: list[str]) -> int:
        return ask_choice(self._prompter, question, labels, max_attempts=self._max_attempts)

    @staticmethod
    def _require_scope(state: SelectionState) -> ModuleScope:
        if state.scope is None:
            raise ValueError("resolve_module must run before the kind and file axes")
        return state.scope
