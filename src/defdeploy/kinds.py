"""Definition kinds and their resource path prefixes."""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType

from defdeploy.errors import InvalidKindError

__all__ = [
    "DefinitionKind",
    "DEFINITIONS_ROOT",
    "KIND_PATHS",
    "path_for",
    "parse_kind",
    "kind_names",
]

DEFINITIONS_ROOT = "META-INF/cxs/"


class DefinitionKind(str, Enum):
    """The closed set of definition kinds a module can ship."""

    CONDITION = "condition"
    ACTION = "action"
    GOAL = "goal"
    CAMPAIGN = "campaign"
    PERSONA = "persona"
    PROPERTY = "property"
    RULE = "rule"
    SEGMENT = "segment"
    SCORING = "scoring"
    PATCH = "patch"

    def __str__(self) -> str:
        return self.value


KIND_PATHS = MappingProxyType(
    {
        DefinitionKind.CONDITION: "conditions",
        DefinitionKind.ACTION: "actions",
        DefinitionKind.GOAL: "goals",
        DefinitionKind.CAMPAIGN: "campaigns",
        DefinitionKind.PERSONA: "personas",
        DefinitionKind.PROPERTY: "properties",
        DefinitionKind.RULE: "rules",
        DefinitionKind.SEGMENT: "segments",
        DefinitionKind.SCORING: "scoring",
        DefinitionKind.PATCH: "patches",
    }
)

_missing = set(DefinitionKind) - set(KIND_PATHS)
if _missing:
    raise RuntimeError(f"No resource path for definition kinds: {sorted(k.value for k in _missing)}")


def kind_names() -> list[str]:
    """Kind identifiers in declaration order."""
    return [k.value for k in DefinitionKind]


def path_for(kind: DefinitionKind, root: str = DEFINITIONS_ROOT) -> str:
    """Return the resource path prefix for *kind* under *root*."""
    return root + KIND_PATHS[kind]


def parse_kind(value: str | DefinitionKind) -> DefinitionKind:
    """Convert a kind identifier into a :class:`DefinitionKind`.

    Raises:
        InvalidKindError: If *value* is not one of the known identifiers.
    """
    if isinstance(value, DefinitionKind):
        return value
    try:
        return DefinitionKind(value)
    except ValueError:
        raise InvalidKindError(kind=str(value), allowed=kind_names()) from None
