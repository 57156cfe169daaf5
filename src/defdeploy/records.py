"""Typed definition records, one pydantic model per definition kind.

JSON payloads use camelCase keys. Only identifying fields are required;
anything else a payload carries is kept as an extra field so that the
receiving service sees the full definition.
"""

from __future__ import annotations

from datetime import datetime
from types import MappingProxyType
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from defdeploy.kinds import DefinitionKind

__all__ = [
    "Metadata",
    "Condition",
    "Action",
    "Parameter",
    "ConditionType",
    "ActionType",
    "Goal",
    "Campaign",
    "Persona",
    "PersonaWithSessions",
    "PropertyType",
    "Rule",
    "Segment",
    "ScoringElement",
    "Scoring",
    "Patch",
    "DefinitionRecord",
    "RECORD_MODELS",
    "record_id",
]


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class Metadata(_Model):
    """Common identification block shared by most definitions."""

    id: str
    name: str | None = None
    description: str | None = None
    scope: str | None = None
    tags: list[str] = Field(default_factory=list)
    system_tags: list[str] = Field(default_factory=list)
    enabled: bool = True
    hidden: bool = False
    read_only: bool = False


class Condition(_Model):
    type: str
    parameter_values: dict[str, Any] = Field(default_factory=dict)


class Action(_Model):
    type: str
    parameter_values: dict[str, Any] = Field(default_factory=dict)


class Parameter(_Model):
    id: str
    type: str | None = None
    multivalued: bool = False
    default_value: Any = None


class ConditionType(_Model):
    metadata: Metadata
    condition_evaluator: str | None = None
    query_builder: str | None = None
    parent_condition: Condition | None = None
    parameters: list[Parameter] = Field(default_factory=list)


class ActionType(_Model):
    metadata: Metadata
    action_executor: str | None = None
    parameters: list[Parameter] = Field(default_factory=list)


class Goal(_Model):
    metadata: Metadata
    start_event: Condition | None = None
    target_event: Condition | None = None
    campaign_id: str | None = None


class Campaign(_Model):
    metadata: Metadata
    start_date: datetime | None = None
    end_date: datetime | None = None
    entry_condition: Condition | None = None
    cost: float | None = None
    currency: str | None = None
    primary_goal: str | None = None
    timezone: str | None = None


class Persona(_Model):
    item_id: str
    properties: dict[str, Any] = Field(default_factory=dict)
    segments: list[str] = Field(default_factory=list)
    scores: dict[str, int] = Field(default_factory=dict)


class PersonaWithSessions(_Model):
    persona: Persona
    sessions: list[dict[str, Any]] = Field(default_factory=list)


class PropertyType(_Model):
    metadata: Metadata
    target: str | None = None
    value_type_id: str | None = Field(default=None, alias="type")
    default_value: Any = None
    multivalued: bool = False
    rank: float | None = None
    merge_strategy: str | None = None
    automatic_mappings_from: list[str] = Field(default_factory=list)


class Rule(_Model):
    metadata: Metadata
    condition: Condition | None = None
    actions: list[Action] = Field(default_factory=list)
    priority: int = 0
    raise_event_only_once: bool = False
    raise_event_only_once_for_profile: bool = False
    raise_event_only_once_for_session: bool = False


class Segment(_Model):
    metadata: Metadata
    condition: Condition | None = None


class ScoringElement(_Model):
    condition: Condition
    value: int = 0


class Scoring(_Model):
    metadata: Metadata
    elements: list[ScoringElement] = Field(default_factory=list)


class Patch(_Model):
    item_id: str
    patched_item_id: str | None = None
    patched_item_type: str | None = None
    operation: str = "override"
    data: Any = None


DefinitionRecord = Union[
    ConditionType,
    ActionType,
    Goal,
    Campaign,
    PersonaWithSessions,
    PropertyType,
    Rule,
    Segment,
    Scoring,
    Patch,
]

RECORD_MODELS: MappingProxyType[DefinitionKind, type[BaseModel]] = MappingProxyType(
    {
        DefinitionKind.CONDITION: ConditionType,
        DefinitionKind.ACTION: ActionType,
        DefinitionKind.GOAL: Goal,
        DefinitionKind.CAMPAIGN: Campaign,
        DefinitionKind.PERSONA: PersonaWithSessions,
        DefinitionKind.PROPERTY: PropertyType,
        DefinitionKind.RULE: Rule,
        DefinitionKind.SEGMENT: Segment,
        DefinitionKind.SCORING: Scoring,
        DefinitionKind.PATCH: Patch,
    }
)

_missing = set(DefinitionKind) - set(RECORD_MODELS)
if _missing:
    raise RuntimeError(f"No record model for definition kinds: {sorted(k.value for k in _missing)}")


def record_id(record: BaseModel) -> str:
    """Best-effort identifier of a record, for log and report lines."""
    if isinstance(record, PersonaWithSessions):
        return record.persona.item_id
    if isinstance(record, Patch):
        return record.item_id
    metadata = getattr(record, "metadata", None)
    if isinstance(metadata, Metadata):
        return metadata.id
    return "?"
