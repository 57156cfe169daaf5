"""Shared test fixtures: module trees on disk, index, recording services."""

from __future__ import annotations

from pathlib import Path

import pytest

from defdeploy.index import ModuleCatalog, ResourceIndex
from defdeploy.services import RegistrationLog, Services, in_memory_services
from definition_helpers import (
    condition_payload,
    property_payload,
    rule_payload,
    segment_payload,
    write_definition,
)


@pytest.fixture
def modules_dir(tmp_path: Path) -> Path:
    """Three modules on disk.

    - ``core`` (manifest id 10, name core-definitions): two rules, a
      condition and a profiles property
    - ``empty`` (id 1): no definitions at all
    - ``marketing`` (id 2): one rule and one segment
    """
    root = tmp_path / "modules"
    root.mkdir()

    core = root / "core"
    core.mkdir()
    (core / "module.yaml").write_text("id: 10\nname: core-definitions\n")
    write_definition(core, "rules/a.json", rule_payload("ruleA"))
    write_definition(core, "rules/b.json", rule_payload("ruleB"))
    write_definition(core, "conditions/visitCondition.json", condition_payload("visitCondition"))
    write_definition(core, "properties/profiles/firstName.json", property_payload("firstName"))

    empty = root / "empty"
    empty.mkdir()
    (empty / "README.txt").write_text("nothing here")

    marketing = root / "marketing"
    marketing.mkdir()
    write_definition(marketing, "rules/c.json", rule_payload("ruleC"))
    write_definition(marketing, "segments/leads.json", segment_payload("leads"))

    return root


@pytest.fixture
def catalog(modules_dir: Path) -> ModuleCatalog:
    cat = ModuleCatalog()
    cat.discover([modules_dir])
    return cat


@pytest.fixture
def index(catalog: ModuleCatalog) -> ResourceIndex:
    return ResourceIndex(catalog)


@pytest.fixture
def recording() -> tuple[Services, RegistrationLog]:
    return in_memory_services()


@pytest.fixture
def services(recording: tuple[Services, RegistrationLog]) -> Services:
    return recording[0]


@pytest.fixture
def registrations(recording: tuple[Services, RegistrationLog]) -> RegistrationLog:
    return recording[1]
