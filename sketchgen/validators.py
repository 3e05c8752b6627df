# File: sketchgen/validators.py
"""
Sketchgen - Schema Validation & Parsing
=========================================
Turns raw schema text into a ``SchemaDefinition`` or fails with a
``SchemaError`` carrying a specific, user-facing message.

Validation runs in two layers:

1. ``validate_schema_dict`` walks the decoded YAML once and collects
   structural errors (missing model, missing field type, incomplete
   relationship) and semantic warnings (non snake_case names, unknown
   referential actions) into a ``ValidationResult``.  It sees the raw
   dictionary, so it can report every problem at once and name the
   offending field.
2. Pydantic builds the immutable ``SchemaDefinition`` and fills defaults.

Usage:
    from sketchgen.validators import parse_schema
    schema = parse_schema(path.read_text())
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Set

import yaml
from pydantic import ValidationError as PydanticValidationError

from sketchgen.errors import SchemaError, UnsupportedRelationshipError
from sketchgen.models import (
    FOREIGN_KEY_KINDS,
    REFERENTIAL_ACTIONS,
    RELATIONSHIP_MODELS,
    THROUGH_KINDS,
    FieldDefinition,
    FieldType,
    RelationshipKind,
    SchemaDefinition,
)
from sketchgen.utils import class_basename, is_snake_case, to_singular, to_snake_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.validators")

# ---------------------------------------------------------------------------
# Validation result container
# ---------------------------------------------------------------------------


class ValidationError:
    """Lightweight error descriptor (no Pydantic overhead)."""

    __slots__ = ("level", "code", "message", "context")

    def __init__(
        self,
        level: str,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.level: str = level  # "error" | "warning"
        self.code: str = code
        self.message: str = message
        self.context: Dict[str, Any] = context or {}

    @property
    def is_error(self) -> bool:
        return self.level == "error"

    @property
    def is_warning(self) -> bool:
        return self.level == "warning"

    def __repr__(self) -> str:
        return f"[{self.level.upper()}] {self.code}: {self.message}"

    def __str__(self) -> str:
        return self.__repr__()


class ValidationResult:
    """Accumulates ``ValidationError`` instances produced by the checks."""

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: List[ValidationError] = []

    # -- Mutation -----------------------------------------------------------

    def add_error(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("error", code, message, context))

    def add_warning(
        self,
        code: str,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._items.append(ValidationError("warning", code, message, context))

    # -- Query --------------------------------------------------------------

    @property
    def errors(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_error]

    @property
    def warnings(self) -> List[ValidationError]:
        return [e for e in self._items if e.is_warning]

    @property
    def codes(self) -> List[str]:
        return [e.code for e in self._items]

    @property
    def has_errors(self) -> bool:
        return any(e.is_error for e in self._items)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    def summary(self) -> str:
        return (
            f"Validation: {len(self.errors)} error(s), "
            f"{len(self.warnings)} warning(s)."
        )

    def __repr__(self) -> str:
        return f"<ValidationResult {self.summary()}>"

    def __bool__(self) -> bool:
        """Truthy when there are NO errors (i.e. valid)."""
        return self.is_valid

    def __len__(self) -> int:
        return len(self._items)

    def format_report(self) -> str:
        """Human-readable multi-line report."""
        lines: List[str] = [self.summary()]
        for item in self._items:
            prefix: str = "✗" if item.is_error else "⚠"
            lines.append(f"  {prefix} [{item.code}] {item.message}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# Structural checks on the raw dictionary
# ---------------------------------------------------------------------------


def _allowed_keys(model: Any) -> Set[str]:
    allowed: Set[str] = set()
    for name, info in model.model_fields.items():
        allowed.add(name)
        allowed.add(info.alias or name)
    return allowed


def _allowed_relationship_keys(kind: RelationshipKind) -> Set[str]:
    return _allowed_keys(RELATIONSHIP_MODELS[kind])


def _lookup(mapping: Mapping[str, Any], key: str) -> Any:
    """Read a camelCase schema key, accepting its snake_case spelling too."""
    if key in mapping:
        return mapping[key]
    return mapping.get(to_snake_case(key))


def _validate_fields(raw_fields: Any, result: ValidationResult) -> List[str]:
    """Check the ``fields`` list; return the names seen, in order."""
    names: List[str] = []
    if not isinstance(raw_fields, list) or not raw_fields:
        result.add_error("FIELDS_REQUIRED", "At least one field is required")
        return names

    known_types: Set[str] = {t.value for t in FieldType}
    field_keys: Set[str] = _allowed_keys(FieldDefinition)
    for index, field in enumerate(raw_fields):
        if not isinstance(field, Mapping):
            result.add_error(
                "FIELD_NOT_MAPPING",
                f"Field #{index + 1} must be a mapping",
                {"index": index},
            )
            continue

        name: Any = field.get("name")
        if not name:
            result.add_error("FIELD_NAME_REQUIRED", "Field name is required", {"index": index})
            continue
        name = str(name)

        if name in names:
            result.add_error(
                "DUPLICATE_FIELD_NAME",
                f"Duplicate field name: {name}",
                {"field": name},
            )
        names.append(name)

        if not is_snake_case(name):
            result.add_warning(
                "FIELD_NAME_NOT_SNAKE_CASE",
                f"Field name '{name}' is not snake_case",
                {"field": name},
            )

        field_type: Any = field.get("type")
        if not field_type:
            result.add_error(
                "FIELD_TYPE_REQUIRED",
                f"Field type is required for field {name}",
                {"field": name},
            )
        elif field_type == FieldType.ENUM.value and not field.get("options"):
            result.add_error(
                "ENUM_OPTIONS_REQUIRED",
                f"Enum options are required for field {name}",
                {"field": name},
            )
        elif str(field_type) not in known_types:
            result.add_warning(
                "UNKNOWN_FIELD_TYPE",
                f"Field '{name}' uses type '{field_type}', passed through as a column type",
                {"field": name, "type": field_type},
            )

        unknown: List[str] = sorted(str(key) for key in field if key not in field_keys)
        if unknown:
            result.add_warning(
                "FIELD_UNKNOWN_KEY",
                f"Field '{name}' ignores key(s): {', '.join(unknown)}",
                {"field": name, "keys": unknown},
            )
    return names


def _validate_relationship(
    index: int,
    relation: Any,
    field_names: List[str],
    result: ValidationResult,
) -> None:
    if not isinstance(relation, Mapping):
        result.add_error(
            "RELATIONSHIP_NOT_MAPPING",
            f"Relationship #{index + 1} must be a mapping",
            {"index": index},
        )
        return

    rel_type: Any = relation.get("type")
    if not rel_type:
        result.add_error("RELATIONSHIP_TYPE_REQUIRED", "Relationship type is required", {"index": index})
        return
    try:
        kind: RelationshipKind = RelationshipKind(rel_type)
    except ValueError:
        result.add_error(
            "UNSUPPORTED_RELATIONSHIP_TYPE",
            f"Unsupported relationship type: {rel_type}",
            {"index": index, "type": rel_type},
        )
        return

    if not relation.get("model"):
        result.add_error("RELATED_MODEL_REQUIRED", "Related model is required", {"index": index})

    foreign_key: Any = _lookup(relation, "foreignKey")
    if kind in FOREIGN_KEY_KINDS and not foreign_key:
        result.add_error("FOREIGN_KEY_REQUIRED", "Foreign key is required", {"index": index})
    if kind in THROUGH_KINDS and not _lookup(relation, "through"):
        result.add_error("THROUGH_MODEL_REQUIRED", "Through model is required", {"index": index})

    if foreign_key and foreign_key in field_names:
        result.add_warning(
            "FOREIGN_KEY_SHADOWS_FIELD",
            f"Foreign key '{foreign_key}' is also declared as a field",
            {"index": index, "foreignKey": foreign_key},
        )

    for action_key in ("onUpdate", "onDelete"):
        action: Any = _lookup(relation, action_key)
        if action is not None and str(action).lower() not in REFERENTIAL_ACTIONS:
            result.add_warning(
                "UNKNOWN_REFERENTIAL_ACTION",
                f"{action_key} '{action}' is not one of {sorted(REFERENTIAL_ACTIONS)}",
                {"index": index, action_key: action},
            )

    if kind is RelationshipKind.BELONGS_TO_MANY:
        pivot_columns: Any = _lookup(relation, "pivotColumns") or []
        for column in pivot_columns if isinstance(pivot_columns, list) else []:
            if not isinstance(column, Mapping) or not column.get("name") or not column.get("type"):
                result.add_error(
                    "PIVOT_COLUMN_INCOMPLETE",
                    "Pivot column requires a name and a type",
                    {"index": index},
                )

    allowed: Set[str] = _allowed_relationship_keys(kind)
    unknown: List[str] = sorted(str(key) for key in relation if key not in allowed)
    if unknown:
        result.add_warning(
            "UNKNOWN_RELATIONSHIP_KEY",
            f"{rel_type} relationship ignores key(s): {', '.join(unknown)}",
            {"index": index, "keys": unknown},
        )


def validate_schema_dict(raw: Any) -> ValidationResult:
    """
    Run every structural check against a decoded schema.

    Never raises; problems are reported through the returned result.
    """
    result: ValidationResult = ValidationResult()

    if not isinstance(raw, Mapping):
        result.add_error("SCHEMA_NOT_MAPPING", "Schema must be a mapping at the top level")
        return result

    model: Any = raw.get("model")
    if not model:
        result.add_error("MODEL_REQUIRED", "Model name is required")
    else:
        basename: str = class_basename(str(model))
        if to_singular(basename) != basename:
            result.add_warning(
                "MODEL_NAME_PLURAL",
                f"Model name '{model}' looks plural; Eloquent models are usually singular",
                {"model": model},
            )

    field_names: List[str] = _validate_fields(raw.get("fields"), result)

    relationships: Any = raw.get("relationships")
    if relationships is None:
        relationships = []
    if not isinstance(relationships, list):
        result.add_error("RELATIONSHIPS_NOT_LIST", "Relationships must be a list")
        relationships = []
    for index, relation in enumerate(relationships):
        _validate_relationship(index, relation, field_names, result)

    return result


# ---------------------------------------------------------------------------
# Parsing entry points
# ---------------------------------------------------------------------------


def _format_pydantic_errors(exc: PydanticValidationError) -> List[str]:
    messages: List[str] = []
    for err in exc.errors():
        location: str = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return messages


def schema_from_dict(raw: Any) -> SchemaDefinition:
    """
    Validate an already-decoded schema and build the ``SchemaDefinition``.

    Raises:
        UnsupportedRelationshipError: a relationship ``type`` is unknown.
        SchemaError: any other structural problem.
    """
    result: ValidationResult = validate_schema_dict(raw)

    for warning in result.warnings:
        logger.warning("%s", warning)

    for error in result.errors:
        if error.code == "UNSUPPORTED_RELATIONSHIP_TYPE":
            raise UnsupportedRelationshipError(error.context["type"])

    if result.has_errors:
        messages: List[str] = [e.message for e in result.errors]
        for error in result.errors:
            logger.error("%s", error)
        raise SchemaError(messages[0], messages)

    try:
        schema: SchemaDefinition = SchemaDefinition.model_validate(raw)
    except PydanticValidationError as exc:
        messages = _format_pydantic_errors(exc)
        raise SchemaError(f"Schema validation failed: {messages[0]}", messages) from exc

    logger.info(
        "Parsed schema for %s: %d field(s), %d relationship(s).",
        schema.model,
        len(schema.fields),
        len(schema.relationships),
    )
    return schema


def parse_schema(raw_text: str) -> SchemaDefinition:
    """
    Decode YAML schema text and return the validated ``SchemaDefinition``.

    Touches nothing but the string it is given.
    """
    try:
        raw: Any = yaml.safe_load(raw_text)
    except yaml.YAMLError as exc:
        raise SchemaError(f"Invalid YAML: {exc}") from exc
    return schema_from_dict(raw)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ValidationError",
    "ValidationResult",
    "validate_schema_dict",
    "schema_from_dict",
    "parse_schema",
]

logger.debug("sketchgen.validators loaded.")
