"""One deploy invocation: resolve the selection, then load and dispatch each resource."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from defdeploy.dispatch import DispatchRouter
from defdeploy.errors import DeployError, DeserializationError, RegistrationError
from defdeploy.index.types import ResourceLocation
from defdeploy.loader import DefinitionLoader
from defdeploy.resolver import Selection, SelectionResolver

if TYPE_CHECKING:
    from defdeploy.config import Config
    from defdeploy.index.resource_index import ResourceIndex
    from defdeploy.prompt import Prompter
    from defdeploy.services import Services

logger = logging.getLogger(__name__)

__all__ = ["Deployer", "DeployOutcome", "DeployReport"]


@dataclass
class DeployOutcome:
    """Result of deploying one resource."""

    location: ResourceLocation
    error: DeployError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class DeployReport:
    """Everything one invocation did."""

    selection: Selection | None = None
    outcomes: list[DeployOutcome] = field(default_factory=list)
    aborted_error: DeployError | None = None

    @property
    def aborted(self) -> bool:
        return self.aborted_error is not None

    @property
    def succeeded(self) -> list[DeployOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[DeployOutcome]:
        return [o for o in self.outcomes if not o.ok]


class Deployer:
    """Resolves a selection of definitions and registers each of them.

    Per-resource failures are reported and skipped. Resources registered
    before a failure stay registered.
    """

    def __init__(
        self,
        index: ResourceIndex,
        prompter: Prompter,
        services: Services,
        config: Config | None = None,
        output: Any = None,
    ) -> None:
        max_attempts = config.get("prompt.max_attempts") if config is not None else None
        self._resolver = SelectionResolver(index, prompter, max_attempts=max_attempts)
        self._loader = DefinitionLoader(index)
        self._router = DispatchRouter(services)
        self._output = output if output is not None else sys.stdout

    def deploy(
        self,
        module_id: int | None = None,
        kind: str | None = None,
        file_name: str | None = None,
    ) -> DeployReport:
        """Deploy the definitions selected by the arguments and the operator's answers."""
        report = DeployReport()
        try:
            selection = self._resolver.resolve(module_id, kind, file_name)
        except DeployError as e:
            logger.info("Deploy aborted: %s", e)
            self._emit(e.message)
            report.aborted_error = e
            return report

        report.selection = selection
        logger.info("Deploying %d %s definition(s)", len(selection), selection.kind.value)
        for location in selection.locations:
            report.outcomes.append(self._deploy_one(selection, location))
        return report

    def _deploy_one(self, selection: Selection, location: ResourceLocation) -> DeployOutcome:
        try:
            record = self._loader.load(selection.kind, location)
            self._router.dispatch(selection.kind, record, location)
        except (DeserializationError, RegistrationError) as e:
            logger.error("Error while saving definition %s: %s", location.url, e)
            self._emit(f"Error while saving definition {location.url}")
            self._emit(e.message)
            return DeployOutcome(location=location, error=e)

        self._emit(f"Predefined definition registered : {location.path}")
        return DeployOutcome(location=location)

    def _emit(self, line: str) -> None:
        self._output.write(line + "\n")
