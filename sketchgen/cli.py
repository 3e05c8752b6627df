# File: sketchgen/cli.py
"""
Sketchgen - Command-Line Interface
====================================

Built with the standard-library ``argparse`` module.

Usage examples::

    # Generate every artifact for a schema
    sketchgen generate -f resources/blueprints/Post.yaml

    # Overwrite existing files, then scaffold a service and repository
    sketchgen generate -f Post.yaml --force --service-repository

    # Check a schema without writing anything
    sketchgen validate -f Post.yaml

    # Write a starter schema to edit
    sketchgen make-blueprint Blog/Post --soft-delete

Exit codes:
    0 — success
    1 — schema validation error
    2 — generation error
    3 — write error (including an existing blueprint)
    4 — input/argument error (missing or unreadable file, bad config)
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, List, NoReturn, Optional, Sequence

import yaml

from sketchgen.errors import (
    ArtifactWriteError,
    ConfigError,
    FileConflictError,
    GenerationError,
    SchemaError,
    SchemaReadError,
)
from sketchgen.models import GeneratorConfig, SchemaDefinition

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_GENERATION_ERROR: int = 2
EXIT_EXPORT_ERROR: int = 3
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(verbosity: int) -> None:
    """
    Configure the sketchgen logger based on verbosity level.

    Args:
        verbosity: 0 = WARNING, 1 = INFO, 2+ = DEBUG.
    """
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity >= 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)

    fmt: str = "%(asctime)s │ %(levelname)-8s │ %(name)s │ %(message)s"
    datefmt: str = "%H:%M:%S"
    handler.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root_logger: logging.Logger = logging.getLogger("sketchgen")
    root_logger.setLevel(level)

    # Remove existing handlers to prevent duplication
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.propagate = False


def _error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _verbosity_parent() -> argparse.ArgumentParser:
    parent: argparse.ArgumentParser = argparse.ArgumentParser(add_help=False)
    verbosity_group = parent.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress log output; status lines and errors are still printed.",
    )
    return parent


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    config_group = parser.add_argument_group("configuration")
    config_group.add_argument(
        "-c", "--config",
        type=str,
        default=None,
        metavar="PATH",
        help="YAML configuration file (settings under a top-level 'sketch:' key).",
    )
    config_group.add_argument(
        "--base-path",
        type=str,
        default=None,
        metavar="DIR",
        help="Application root the output paths are relative to.",
    )


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from sketchgen import __version__

    parent: argparse.ArgumentParser = _verbosity_parent()

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="sketchgen",
        description=(
            "Sketchgen — Laravel code generator.\n\n"
            "Turns a YAML model schema into an Eloquent model, a migration, "
            "create/update form requests and an action class."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s generate -f resources/blueprints/Post.yaml\n"
            "  %(prog)s generate -f Post.yaml --force --service-repository\n"
            "  %(prog)s validate -f Post.yaml\n"
            "  %(prog)s make-blueprint Blog/Post --soft-delete\n"
        ),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"sketchgen v{__version__}",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    # --- generate ---
    generate = subparsers.add_parser(
        "generate",
        parents=[parent],
        help="Generate model, migration, requests and action from a schema.",
    )
    generate.add_argument(
        "-f", "--file",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the YAML schema file.",
    )
    generate.add_argument(
        "--force",
        action="store_true",
        default=False,
        help="Overwrite artifacts that already exist.",
    )
    _add_config_arguments(generate)

    scaffold_group = generate.add_argument_group("service/repository scaffolding")
    scaffold_modes = scaffold_group.add_mutually_exclusive_group()
    scaffold_modes.add_argument(
        "--service-repository",
        action="store_true",
        default=False,
        help="Also scaffold a service and a repository for the model.",
    )
    scaffold_modes.add_argument(
        "--service-only",
        action="store_true",
        default=False,
        help="Also scaffold a service for the model.",
    )
    scaffold_modes.add_argument(
        "--repository-only",
        action="store_true",
        default=False,
        help="Also scaffold a repository for the model.",
    )

    # --- validate ---
    validate = subparsers.add_parser(
        "validate",
        parents=[parent],
        help="Validate a schema file without writing anything.",
    )
    validate.add_argument(
        "-f", "--file",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the YAML schema file.",
    )

    # --- make-blueprint ---
    blueprint = subparsers.add_parser(
        "make-blueprint",
        parents=[parent],
        help="Write a starter schema file.",
    )
    blueprint.add_argument(
        "name",
        metavar="NAME",
        help="Model name, optionally nested (e.g. Blog/Post).",
    )
    blueprint.add_argument(
        "--soft-delete",
        action="store_true",
        default=False,
        help="Enable soft deletes in the starter schema.",
    )
    _add_config_arguments(blueprint)

    return parser


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


def _load_config(args: argparse.Namespace) -> GeneratorConfig:
    from sketchgen.generator import load_config_file

    config: GeneratorConfig = load_config_file(args.config)
    if args.base_path is not None:
        config = config.with_overrides(base_path=Path(args.base_path))
    logger.info("Base path: %s", config.base_path)
    return config


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def _run_generate(args: argparse.Namespace) -> int:
    """Run the full generation pipeline and return the exit code."""
    from sketchgen.generator import GenerationReport, SketchGenerator
    from sketchgen.scaffolding import CommandScaffolder, NullScaffolder, ScaffoldOptions

    try:
        config: GeneratorConfig = _load_config(args)
    except ConfigError as exc:
        _error(str(exc))
        return EXIT_INPUT_ERROR

    options: ScaffoldOptions = ScaffoldOptions(
        service_repository=args.service_repository,
        service_only=args.service_only,
        repository_only=args.repository_only,
    )
    scaffolder = CommandScaffolder(config.scaffold_command) if options.requested else NullScaffolder()
    generator: SketchGenerator = SketchGenerator(config, scaffolder=scaffolder)

    exit_code: int = EXIT_SUCCESS
    try:
        generator.generate_from_file(Path(args.file), force=args.force, scaffold_options=options)
    except (FileNotFoundError, SchemaReadError) as exc:
        _error(str(exc))
        return EXIT_INPUT_ERROR
    except SchemaError as exc:
        for message in exc.errors:
            _error(message)
        return EXIT_VALIDATION_ERROR
    except GenerationError as exc:
        _error(str(exc))
        exit_code = EXIT_GENERATION_ERROR
    except ArtifactWriteError as exc:
        _error(str(exc))
        exit_code = EXIT_EXPORT_ERROR

    report: Optional[GenerationReport] = generator.last_report
    if report is not None:
        for line in report.status_lines():
            print(line)
        if report.scaffold is not None and not report.scaffold.ok:
            _error(f"service/repository scaffolding failed: {report.scaffold.detail}")
        logger.info("\n%s", report.summary())

    return exit_code


def _run_validate(args: argparse.Namespace) -> int:
    """Validate a schema file and print the report."""
    from sketchgen.generator import read_schema_text
    from sketchgen.validators import ValidationResult, schema_from_dict, validate_schema_dict

    try:
        text: str = read_schema_text(args.file)
    except (FileNotFoundError, SchemaReadError) as exc:
        _error(str(exc))
        return EXIT_INPUT_ERROR
    except SchemaError as exc:
        _error(str(exc))
        return EXIT_VALIDATION_ERROR

    try:
        raw: Any = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        _error(f"Invalid YAML: {exc}")
        return EXIT_VALIDATION_ERROR

    result: ValidationResult = validate_schema_dict(raw)
    print(result.format_report())
    if not result.is_valid:
        return EXIT_VALIDATION_ERROR

    try:
        schema: SchemaDefinition = schema_from_dict(raw)
    except SchemaError as exc:
        for message in exc.errors:
            _error(message)
        return EXIT_VALIDATION_ERROR

    print(
        f"valid: {schema.model} ({len(schema.fields)} fields, "
        f"{len(schema.relationships)} relationships, table {schema.table_name})"
    )
    return EXIT_SUCCESS


def _run_make_blueprint(args: argparse.Namespace) -> int:
    from sketchgen.blueprint import create_blueprint

    try:
        config: GeneratorConfig = _load_config(args)
    except ConfigError as exc:
        _error(str(exc))
        return EXIT_INPUT_ERROR

    try:
        path: Path = create_blueprint(args.name, config, soft_deletes=args.soft_delete)
    except ValueError as exc:
        _error(str(exc))
        return EXIT_INPUT_ERROR
    except (FileConflictError, ArtifactWriteError) as exc:
        _error(str(exc))
        return EXIT_EXPORT_ERROR

    print(f"created: {path}")
    return EXIT_SUCCESS


_COMMANDS = {
    "generate": _run_generate,
    "validate": _run_validate,
    "make-blueprint": _run_make_blueprint,
}


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.quiet:
        verbosity: int = -1
        logging.disable(logging.CRITICAL)
    else:
        verbosity = args.verbose
        logging.disable(logging.NOTSET)

    _setup_logging(verbosity)
    logger.info("Command: %s", args.command)

    exit_code: int = _COMMANDS[args.command](args)

    if exit_code == EXIT_SUCCESS:
        logger.info("%s completed successfully.", args.command)
    else:
        logger.debug("%s failed with exit code %d.", args.command, exit_code)

    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_GENERATION_ERROR",
    "EXIT_EXPORT_ERROR",
    "EXIT_INPUT_ERROR",
]

logger.debug("sketchgen.cli loaded.")
