"""Tests for definition record models."""

from __future__ import annotations

import json
from datetime import datetime

import pytest
from pydantic import ValidationError

from definition_helpers import property_payload, rule_payload
from defdeploy.kinds import DefinitionKind
from defdeploy.records import (
    RECORD_MODELS,
    Campaign,
    Patch,
    PersonaWithSessions,
    PropertyType,
    Rule,
    record_id,
)


class TestRecordModels:
    def test_every_kind_has_a_model(self) -> None:
        assert set(RECORD_MODELS) == set(DefinitionKind)

    def test_camel_case_keys(self) -> None:
        rule = Rule.model_validate(rule_payload("r1") | {"raiseEventOnlyOnceForProfile": True})
        assert rule.metadata.id == "r1"
        assert rule.metadata.scope == "systemscope"
        assert rule.condition.parameter_values == {"eventTypeId": "view"}
        assert rule.actions[0].type == "setPropertyAction"
        assert rule.raise_event_only_once_for_profile is True

    def test_unknown_fields_kept(self) -> None:
        payload = rule_payload("r1")
        payload["linkedItems"] = ["x"]
        rule = Rule.model_validate(payload)
        assert rule.model_extra == {"linkedItems": ["x"]}

    def test_metadata_id_required(self) -> None:
        with pytest.raises(ValidationError):
            Rule.model_validate({"metadata": {"name": "no id"}})

    def test_property_value_type(self) -> None:
        prop = PropertyType.model_validate(property_payload("age") | {"type": "integer", "rank": 10.0})
        assert prop.value_type_id == "integer"
        assert prop.target is None
        assert prop.rank == 10.0

    def test_campaign_dates(self) -> None:
        campaign = Campaign.model_validate_json(
            json.dumps({"metadata": {"id": "c"}, "startDate": "2024-01-01T00:00:00Z", "cost": 12.5})
        )
        assert isinstance(campaign.start_date, datetime)
        assert campaign.end_date is None
        assert campaign.cost == 12.5

    def test_persona_with_sessions(self) -> None:
        persona = PersonaWithSessions.model_validate(
            {"persona": {"itemId": "p1", "properties": {"firstName": "Ada"}}, "sessions": [{"itemId": "s1"}]}
        )
        assert persona.persona.item_id == "p1"
        assert persona.sessions == [{"itemId": "s1"}]

    def test_patch_defaults(self) -> None:
        patch = Patch.model_validate({"itemId": "patch1", "patchedItemId": "rule1", "data": {"priority": 3}})
        assert patch.operation == "override"
        assert patch.patched_item_id == "rule1"


class TestRecordId:
    def test_metadata_id(self) -> None:
        assert record_id(Rule.model_validate(rule_payload("r9"))) == "r9"

    def test_persona_item_id(self) -> None:
        assert record_id(PersonaWithSessions.model_validate({"persona": {"itemId": "p1"}})) == "p1"

    def test_patch_item_id(self) -> None:
        assert record_id(Patch.model_validate({"itemId": "patch1"})) == "patch1"
