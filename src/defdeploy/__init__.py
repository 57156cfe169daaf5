"""defdeploy - deploy definitions packaged in modules to their registration services."""

from __future__ import annotations

# Kinds
from defdeploy.kinds import DEFINITIONS_ROOT, DefinitionKind, parse_kind, path_for

# Config
from defdeploy.config import Config

# Index
from defdeploy.index import (
    ArchiveModule,
    DirectoryModule,
    ModuleCatalog,
    ModuleScope,
    ModuleSource,
    ResourceIndex,
    ResourceLocation,
)

# Pipeline
from defdeploy.prompt import ConsolePrompter, Prompter, ScriptedPrompter, ask_choice
from defdeploy.resolver import Selection, SelectionResolver, SelectionState, normalize_file_name
from defdeploy.loader import DefinitionLoader
from defdeploy.dispatch import DISPATCH_TABLE, DispatchRouter
from defdeploy.deployer import Deployer, DeployOutcome, DeployReport
from defdeploy.services import RegistrationLog, Services, in_memory_services, load_services

# Errors
from defdeploy.errors import (
    ConfigError,
    ConfigNotFoundError,
    DefinitionFileNotFoundError,
    DeployError,
    DeserializationError,
    ErrorCodes,
    InvalidInputError,
    InvalidKindError,
    ModuleLoadError,
    ModuleNotFoundError,
    NoDefinitionsFoundError,
    PromptAbortedError,
    RegistrationError,
)

__version__ = "0.1.0"

__all__ = [
    # Kinds
    "DefinitionKind",
    "DEFINITIONS_ROOT",
    "parse_kind",
    "path_for",
    # Config
    "Config",
    # Index
    "ArchiveModule",
    "DirectoryModule",
    "ModuleCatalog",
    "ModuleScope",
    "ModuleSource",
    "ResourceIndex",
    "ResourceLocation",
    # Pipeline
    "Prompter",
    "ConsolePrompter",
    "ScriptedPrompter",
    "ask_choice",
    "Selection",
    "SelectionResolver",
    "SelectionState",
    "normalize_file_name",
    "DefinitionLoader",
    "DispatchRouter",
    "DISPATCH_TABLE",
    "Deployer",
    "DeployOutcome",
    "DeployReport",
    # Services
    "Services",
    "RegistrationLog",
    "in_memory_services",
    "load_services",
    # Errors
    "ErrorCodes",
    "DeployError",
    "ConfigError",
    "ConfigNotFoundError",
    "InvalidInputError",
    "ModuleLoadError",
    "ModuleNotFoundError",
    "InvalidKindError",
    "NoDefinitionsFoundError",
    "DefinitionFileNotFoundError",
    "PromptAbortedError",
    "DeserializationError",
    "RegistrationError",
]
