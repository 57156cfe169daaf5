"""Routes each definition record to the service call registered for its kind."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Callable

from defdeploy.errors import RegistrationError
from defdeploy.index.types import ResourceLocation
from defdeploy.kinds import DefinitionKind
from defdeploy.services import Services

logger = logging.getLogger(__name__)

__all__ = ["DispatchRouter", "DISPATCH_TABLE"]

Registration = Callable[[Services, Any, ResourceLocation], None]


def _register_property(services: Services, record: Any, location: ResourceLocation) -> None:
    services.profiles.set_property_type_target(location, record)
    services.profiles.set_property_type(record)


DISPATCH_TABLE: MappingProxyType[DefinitionKind, Registration] = MappingProxyType(
    {
        DefinitionKind.CONDITION: lambda s, r, _: s.definitions.set_condition_type(r),
        DefinitionKind.ACTION: lambda s, r, _: s.definitions.set_action_type(r),
        DefinitionKind.GOAL: lambda s, r, _: s.goals.set_goal(r),
        DefinitionKind.CAMPAIGN: lambda s, r, _: s.goals.set_campaign(r),
        DefinitionKind.PERSONA: lambda s, r, _: s.profiles.save_persona_with_sessions(r),
        DefinitionKind.PROPERTY: _register_property,
        DefinitionKind.RULE: lambda s, r, _: s.rules.set_rule(r),
        DefinitionKind.SEGMENT: lambda s, r, _: s.segments.set_segment_definition(r),
        DefinitionKind.SCORING: lambda s, r, _: s.segments.set_scoring_definition(r),
        DefinitionKind.PATCH: lambda s, r, _: s.patches.patch(r),
    }
)

_missing = set(DefinitionKind) - set(DISPATCH_TABLE)
if _missing:
    raise RuntimeError(f"No registration for definition kinds: {sorted(k.value for k in _missing)}")


class DispatchRouter:
    """Invokes the registration bound to a definition kind."""

    def __init__(self, services: Services) -> None:
        self._services = services

    def dispatch(self, kind: DefinitionKind, record: Any, location: ResourceLocation) -> None:
        """Register *record* with the service responsible for *kind*.

        Raises:
            RegistrationError: If the service raises.
        """
        registration = DISPATCH_TABLE[kind]
        try:
            registration(self._services, record, location)
        except Exception as e:
            raise RegistrationError(kind=kind.value, location=location, reason=str(e), cause=e) from e
        logger.debug("Dispatched %s definition %s", kind.value, location.url)
