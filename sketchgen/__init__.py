# File: sketchgen/__init__.py
"""
Sketchgen — Schema-Driven Laravel Code Generator
==================================================

Turns a YAML description of one data model (fields, primary key,
relationships, timestamps / soft-delete flags) into the boilerplate of a
Laravel application's persistence and validation layers: an Eloquent
model, a create-table migration, create/update form requests and an
action class.

Architecture overview::

    ┌──────────────┐     ┌─────────────────┐     ┌────────────────────┐
    │  CLI / Entry │────▶│ SketchGenerator │────▶│ ArtifactGenerators │
    │   (cli.py)   │     │ (generator.py)  │     │  + StubRenderer    │
    └──────────────┘     └────────┬────────┘     │  (templates.py)    │
                                  │              └────────────────────┘
                    ┌─────────────┼─────────────┐
                    ▼             ▼             ▼
             ┌───────────┐ ┌─────────────┐ ┌───────────┐
             │validators │ │relationships│ │ exporters │
             │  (.py)    │ │  + rules    │ │   (.py)   │
             └───────────┘ └─────────────┘ └───────────┘

Usage::

    # As a library
    from sketchgen import GeneratorConfig, SketchGenerator
    report = SketchGenerator(GeneratorConfig(base_path="app-root")).generate_from_file(
        "resources/blueprints/Post.yaml"
    )

    # From the command line
    sketchgen generate -f resources/blueprints/Post.yaml --force -v

Public API:
    - SketchGenerator    — Orchestrator
    - GeneratorConfig    — Output paths, namespace, stubs
    - SchemaDefinition   — Parsed schema model
    - parse_schema       — YAML text to SchemaDefinition
    - resolve_relationship — Relationship declaration to key/method descriptor
    - rules_for          — Validation rules for one field
    - create_blueprint   — Starter schema file
"""

from __future__ import annotations

__version__: str = "0.1.0"
__license__: str = "MIT"

from sketchgen.action_generator import ActionGenerator
from sketchgen.blueprint import create_blueprint
from sketchgen.errors import (
    ArtifactWriteError,
    ConfigError,
    FileConflictError,
    GenerationError,
    SchemaError,
    SchemaReadError,
    SketchError,
    UnsupportedRelationshipError,
)
from sketchgen.generator import (
    GenerationReport,
    SketchGenerator,
    load_config_file,
    load_schema_file,
)
from sketchgen.migration_generator import MigrationGenerator
from sketchgen.model_generator import ModelGenerator
from sketchgen.models import (
    FieldDefinition,
    FieldType,
    GeneratorConfig,
    RelationshipDefinition,
    RelationshipKind,
    SchemaDefinition,
    ValidationMode,
)
from sketchgen.relationships import resolve_relationship, resolve_relationships
from sketchgen.request_generator import RequestGenerator
from sketchgen.rules import rule_sets, rules_for
from sketchgen.scaffolding import CommandScaffolder, NullScaffolder, ScaffoldOptions
from sketchgen.templates import Artifact, StubRenderer
from sketchgen.validators import ValidationResult, parse_schema, validate_schema_dict

# ---------------------------------------------------------------------------
# Public API surface
# ---------------------------------------------------------------------------

__all__: list[str] = [
    # Version info
    "__version__",
    "__license__",
    # Orchestrator
    "SketchGenerator",
    "GenerationReport",
    "load_schema_file",
    "load_config_file",
    # Models
    "FieldDefinition",
    "FieldType",
    "GeneratorConfig",
    "RelationshipDefinition",
    "RelationshipKind",
    "SchemaDefinition",
    "ValidationMode",
    # Parsing and resolution
    "parse_schema",
    "validate_schema_dict",
    "ValidationResult",
    "resolve_relationship",
    "resolve_relationships",
    "rules_for",
    "rule_sets",
    # Artifact generators
    "Artifact",
    "StubRenderer",
    "ModelGenerator",
    "MigrationGenerator",
    "RequestGenerator",
    "ActionGenerator",
    # Scaffolding
    "create_blueprint",
    "ScaffoldOptions",
    "NullScaffolder",
    "CommandScaffolder",
    # Errors
    "SketchError",
    "SchemaError",
    "UnsupportedRelationshipError",
    "SchemaReadError",
    "FileConflictError",
    "ArtifactWriteError",
    "GenerationError",
    "ConfigError",
]
