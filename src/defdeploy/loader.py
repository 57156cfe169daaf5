"""Reads a packaged resource and parses it into its kind's record."""

from __future__ import annotations

import logging

from pydantic import BaseModel, ValidationError

from defdeploy.errors import DeployError, DeserializationError
from defdeploy.index.resource_index import ResourceIndex
from defdeploy.index.types import ResourceLocation
from defdeploy.kinds import DefinitionKind
from defdeploy.records import RECORD_MODELS

logger = logging.getLogger(__name__)

__all__ = ["DefinitionLoader", "format_validation_error"]


def format_validation_error(error: ValidationError) -> str:
    """Condense a pydantic ValidationError into one line."""
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return "; ".join(parts)


class DefinitionLoader:
    """Loads definition records from the modules known to a ResourceIndex."""

    def __init__(self, index: ResourceIndex) -> None:
        self._index = index

    def load(self, kind: DefinitionKind, location: ResourceLocation) -> BaseModel:
        """Read *location* and validate it as a record of *kind*.

        Raises:
            DeserializationError: If the resource cannot be read or does not
                match the record shape of *kind*.
        """
        try:
            raw = self._index.module(location.module_id).read(location.path)
        except (OSError, DeployError) as e:
            raise DeserializationError(location=location, reason=str(e), cause=e) from e

        model = RECORD_MODELS[kind]
        try:
            record = model.model_validate_json(raw)
        except ValidationError as e:
            raise DeserializationError(location=location, reason=format_validation_error(e), cause=e) from e

        logger.debug("Loaded %s definition from %s", kind.value, location.url)
        return record
