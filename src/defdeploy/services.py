"""Registration services that receive deployed definitions.

The real services live outside this package; they are described here as
protocols and bundled in :class:`Services`. :func:`in_memory_services` builds a
recording implementation, and :func:`load_services` resolves a custom bundle
from a ``"package.module:callable"`` target.
"""

from __future__ import annotations

import importlib
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Protocol

from defdeploy.errors import ConfigError
from defdeploy.kinds import DEFINITIONS_ROOT, DefinitionKind, path_for
from defdeploy.records import (
    ActionType,
    Campaign,
    ConditionType,
    Goal,
    Patch,
    PersonaWithSessions,
    PropertyType,
    Rule,
    Scoring,
    Segment,
    record_id,
)

if TYPE_CHECKING:
    from defdeploy.config import Config
    from defdeploy.index.types import ResourceLocation

logger = logging.getLogger(__name__)

__all__ = [
    "DefinitionsService",
    "GoalsService",
    "ProfileService",
    "RulesService",
    "SegmentService",
    "PatchService",
    "Services",
    "RegistrationLog",
    "in_memory_services",
    "load_services",
    "property_target",
]


class DefinitionsService(Protocol):
    def set_condition_type(self, condition_type: ConditionType) -> None: ...

    def set_action_type(self, action_type: ActionType) -> None: ...


class GoalsService(Protocol):
    def set_goal(self, goal: Goal) -> None: ...

    def set_campaign(self, campaign: Campaign) -> None: ...


class ProfileService(Protocol):
    def save_persona_with_sessions(self, persona: PersonaWithSessions) -> None: ...

    def set_property_type_target(self, location: ResourceLocation, property_type: PropertyType) -> None: ...

    def set_property_type(self, property_type: PropertyType) -> None: ...


class RulesService(Protocol):
    def set_rule(self, rule: Rule) -> None: ...


class SegmentService(Protocol):
    def set_segment_definition(self, segment: Segment) -> None: ...

    def set_scoring_definition(self, scoring: Scoring) -> None: ...


class PatchService(Protocol):
    def patch(self, patch: Patch) -> None: ...


@dataclass
class Services:
    """The downstream services, one per registration concern."""

    definitions: DefinitionsService
    goals: GoalsService
    profiles: ProfileService
    rules: RulesService
    segments: SegmentService
    patches: PatchService


def property_target(location: ResourceLocation, root: str = DEFINITIONS_ROOT) -> str | None:
    """Target of a property type taken from its path, e.g. ``properties/profiles/x.json`` -> ``profiles``.

    Returns None when the resource sits directly in the properties directory.
    """
    prefix = path_for(DefinitionKind.PROPERTY, root).strip("/") + "/"
    path = location.path.lstrip("/")
    if not path.startswith(prefix):
        return None
    parts = path[len(prefix) :].split("/")
    if len(parts) < 2 or not parts[0]:
        return None
    return parts[0]


# ---------------------------------------------------------------------------
# In-memory implementation
# ---------------------------------------------------------------------------


@dataclass
class RegistrationLog:
    """Ordered record of every registration call, shared by the in-memory services."""

    calls: list[tuple[str, str]] = field(default_factory=list)
    records: dict[str, dict[str, Any]] = field(default_factory=dict)

    def record(self, operation: str, record: Any) -> None:
        rid = record_id(record)
        self.calls.append((operation, rid))
        self.records.setdefault(operation, {})[rid] = record
        logger.info("%s: %s", operation, rid)


class _InMemoryDefinitions:
    def __init__(self, log: RegistrationLog) -> None:
        self._log = log

    def set_condition_type(self, condition_type: ConditionType) -> None:
        self._log.record("set_condition_type", condition_type)

    def set_action_type(self, action_type: ActionType) -> None:
        self._log.record("set_action_type", action_type)


class _InMemoryGoals:
    def __init__(self, log: RegistrationLog) -> None:
        self._log = log

    def set_goal(self, goal: Goal) -> None:
        self._log.record("set_goal", goal)

    def set_campaign(self, campaign: Campaign) -> None:
        self._log.record("set_campaign", campaign)


class _InMemoryProfiles:
    def __init__(self, log: RegistrationLog, root: str) -> None:
        self._log = log
        self._root = root

    def save_persona_with_sessions(self, persona: PersonaWithSessions) -> None:
        self._log.record("save_persona_with_sessions", persona)

    def set_property_type_target(self, location: ResourceLocation, property_type: PropertyType) -> None:
        if not property_type.target:
            target = property_target(location, self._root)
            if target:
                property_type.target = target
        self._log.record("set_property_type_target", property_type)

    def set_property_type(self, property_type: PropertyType) -> None:
        self._log.record("set_property_type", property_type)


class _InMemoryRules:
    def __init__(self, log: RegistrationLog) -> None:
        self._log = log

    def set_rule(self, rule: Rule) -> None:
        self._log.record("set_rule", rule)


class _InMemorySegments:
    def __init__(self, log: RegistrationLog) -> None:
        self._log = log

    def set_segment_definition(self, segment: Segment) -> None:
        self._log.record("set_segment_definition", segment)

    def set_scoring_definition(self, scoring: Scoring) -> None:
        self._log.record("set_scoring_definition", scoring)


class _InMemoryPatches:
    def __init__(self, log: RegistrationLog) -> None:
        self._log = log

    def patch(self, patch: Patch) -> None:
        self._log.record("patch", patch)


def in_memory_services(
    log: RegistrationLog | None = None,
    root: str = DEFINITIONS_ROOT,
) -> tuple[Services, RegistrationLog]:
    """Build a Services bundle that only records what it receives."""
    log = log if log is not None else RegistrationLog()
    services = Services(
        definitions=_InMemoryDefinitions(log),
        goals=_InMemoryGoals(log),
        profiles=_InMemoryProfiles(log, root),
        rules=_InMemoryRules(log),
        segments=_InMemorySegments(log),
        patches=_InMemoryPatches(log),
    )
    return services, log


def _resolve_factory(target: str) -> Callable[..., Any]:
    if ":" not in target:
        raise ConfigError(message=f"Invalid services factory '{target}'. Expected format: 'module.path:callable_name'.")

    module_path, callable_name = target.split(":", 1)
    try:
        mod = importlib.import_module(module_path)
    except ImportError as exc:
        raise ConfigError(message=f"Cannot import module '{module_path}'.", cause=exc) from exc

    try:
        factory = getattr(mod, callable_name)
    except AttributeError as exc:
        raise ConfigError(
            message=f"Cannot find callable '{callable_name}' in module '{module_path}'.", cause=exc
        ) from exc

    if not callable(factory):
        raise ConfigError(message=f"Resolved target '{target}' is not callable.")
    return factory


def load_services(config: Config) -> Services:
    """Build the services bundle named by ``services.factory``, or an in-memory one.

    The factory is called with the Config and must return a :class:`Services`.

    Raises:
        ConfigError: If the factory cannot be resolved, raises, or returns
            something else.
    """
    target = config.get("services.factory")
    if not target:
        services, _ = in_memory_services(root=config.get("definitions.root", DEFINITIONS_ROOT))
        return services

    factory = _resolve_factory(target)
    try:
        services = factory(config)
    except ConfigError:
        raise
    except Exception as exc:
        raise ConfigError(message=f"Services factory '{target}' failed: {exc}", cause=exc) from exc
    if not isinstance(services, Services):
        raise ConfigError(message=f"Services factory '{target}' did not return a Services bundle")
    return services
