"""
defdeploy command-line interface.

Deploys definitions packaged in modules to their registration services,
asking for whatever the arguments leave open.

Usage:
    defdeploy                          # pick module, kind and file interactively
    defdeploy 12                       # module 12, pick kind and file
    defdeploy 12 rule                  # rules of module 12, pick a file or all
    defdeploy 12 property firstName    # deploy properties/**/firstName.json
    defdeploy 12 rule '*'              # every rule of module 12
    defdeploy --modules-dir ./bundles  # look for modules somewhere else
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Sequence

from defdeploy import __version__
from defdeploy.config import Config
from defdeploy.deployer import Deployer
from defdeploy.errors import DeployError
from defdeploy.index import ModuleCatalog, ResourceIndex
from defdeploy.kinds import kind_names
from defdeploy.prompt import ConsolePrompter, Prompter
from defdeploy.services import Services, load_services

logger = logging.getLogger(__name__)

__all__ = ["main", "build_parser", "run"]

EXIT_OK = 0
EXIT_ABORTED = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="defdeploy",
        description="Deploy definitions packaged in modules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"Definition kinds: {', '.join(kind_names())}",
    )
    parser.add_argument(
        "module_id",
        nargs="?",
        type=int,
        help="Identifier of the module where to find the definition",
    )
    parser.add_argument(
        "kind",
        nargs="?",
        help="The kind of definitions to load (e.g.: condition, action, ..)",
    )
    parser.add_argument(
        "file_name",
        nargs="?",
        help="File containing the definition, extension optional (e.g.: firstName), or '*' for all",
    )
    parser.add_argument(
        "--modules-dir",
        action="append",
        dest="modules_dirs",
        metavar="DIR",
        help="Directory holding module directories or archives (repeatable)",
    )
    parser.add_argument("--config", "-c", help="YAML configuration file")
    parser.add_argument(
        "--max-attempts",
        type=int,
        help="Give up a prompt after this many invalid answers (default: ask until answered)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for diagnostics on stderr",
    )
    parser.add_argument("--version", "-v", action="version", version=f"defdeploy {__version__}")
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        stream=sys.stderr,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def load_config(args: argparse.Namespace) -> Config:
    config = Config.load(args.config) if args.config else Config()
    if args.modules_dirs:
        config.set("modules.dirs", args.modules_dirs)
    if args.max_attempts is not None:
        config.set("prompt.max_attempts", args.max_attempts)
    if args.log_level:
        config.set("logging.level", args.log_level)
    return config


def run(
    args: argparse.Namespace,
    config: Config,
    prompter: Prompter | None = None,
    services: Services | None = None,
    output: Any = None,
) -> int:
    """Discover modules and run one deploy invocation. Returns the exit code."""
    output = output if output is not None else sys.stdout
    try:
        catalog = ModuleCatalog()
        catalog.discover(config.get("modules.dirs"))
        index = ResourceIndex.from_config(catalog, config)
        if services is None:
            services = load_services(config)
    except DeployError as e:
        output.write(e.message + "\n")
        return EXIT_ABORTED

    deployer = Deployer(
        index,
        prompter or ConsolePrompter(),
        services,
        config=config,
        output=output,
    )
    report = deployer.deploy(args.module_id, args.kind, args.file_name)
    if report.aborted:
        return EXIT_ABORTED
    logger.info("%d definition(s) registered, %d failed", len(report.succeeded), len(report.failed))
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except DeployError as e:
        print(e.message, file=sys.stderr)
        return EXIT_ABORTED

    configure_logging(config.get("logging.level", "WARNING"))
    return run(args, config)


if __name__ == "__main__":
    sys.exit(main())
