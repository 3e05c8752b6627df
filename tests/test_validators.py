"""
tests/test_validators.py
Unit tests for sketchgen.validators.

Tests cover:
- Required keys (model, fields, field name/type, enum options)
- Relationship declarations (type, model, foreignKey, through)
- Unsupported relationship kinds
- Semantic warnings (snake_case, pass-through types, referential actions)
- parse_schema end to end, including YAML and pydantic failures
"""

from __future__ import annotations

from typing import Any, Dict

import pytest
import yaml
from pydantic import ValidationError as PydanticValidationError

from sketchgen.errors import SchemaError, UnsupportedRelationshipError
from sketchgen.models import (
    BelongsToManyRelationship,
    BelongsToRelationship,
    HasManyThroughRelationship,
    SchemaDefinition,
)
from sketchgen.validators import (
    ValidationResult,
    parse_schema,
    schema_from_dict,
    validate_schema_dict,
)


def _dump(data: Dict[str, Any]) -> str:
    return yaml.safe_dump(data, sort_keys=False)


# ===========================================================================
# ValidationResult container
# ===========================================================================


class TestValidationResult:
    """Accumulation and reporting."""

    def test_empty_result_is_valid(self) -> None:
        result = ValidationResult()
        assert result.is_valid
        assert bool(result)
        assert len(result) == 0

    def test_errors_and_warnings_are_separated(self) -> None:
        result = ValidationResult()
        result.add_error("E1", "broken")
        result.add_warning("W1", "suspicious")
        assert not result.is_valid
        assert [e.code for e in result.errors] == ["E1"]
        assert [w.code for w in result.warnings] == ["W1"]
        assert result.codes == ["E1", "W1"]

    def test_format_report_lists_every_item(self) -> None:
        result = ValidationResult()
        result.add_error("E1", "broken")
        result.add_warning("W1", "suspicious")
        report = result.format_report()
        assert "1 error(s), 1 warning(s)" in report
        assert "✗ [E1] broken" in report
        assert "⚠ [W1] suspicious" in report


# ===========================================================================
# Required keys
# ===========================================================================


class TestRequiredKeys:
    """Missing or empty mandatory keys are errors."""

    def test_valid_schema_passes(self, post_schema_dict: Dict[str, Any]) -> None:
        result = validate_schema_dict(post_schema_dict)
        assert result.is_valid, result.format_report()

    def test_top_level_must_be_mapping(self) -> None:
        result = validate_schema_dict(["model", "Post"])
        assert result.codes == ["SCHEMA_NOT_MAPPING"]

    def test_missing_model(self, post_schema_dict: Dict[str, Any]) -> None:
        del post_schema_dict["model"]
        with pytest.raises(SchemaError, match="Model name is required"):
            parse_schema(_dump(post_schema_dict))

    def test_empty_model(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["model"] = ""
        assert "MODEL_REQUIRED" in validate_schema_dict(post_schema_dict).codes

    def test_missing_fields(self, post_schema_dict: Dict[str, Any]) -> None:
        del post_schema_dict["fields"]
        with pytest.raises(SchemaError, match="At least one field is required"):
            parse_schema(_dump(post_schema_dict))

    def test_empty_fields(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["fields"] = []
        assert "FIELDS_REQUIRED" in validate_schema_dict(post_schema_dict).codes

    def test_field_without_name(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["fields"].append({"type": "string"})
        with pytest.raises(SchemaError, match="Field name is required"):
            parse_schema(_dump(post_schema_dict))

    def test_field_without_type(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["fields"][0] = {"name": "title"}
        with pytest.raises(SchemaError, match="Field type is required for field title"):
            parse_schema(_dump(post_schema_dict))

    def test_enum_without_options(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["fields"][2] = {"name": "status", "type": "enum"}
        with pytest.raises(SchemaError, match="Enum options are required for field status"):
            parse_schema(_dump(post_schema_dict))

    def test_duplicate_field_names(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["fields"].append({"name": "title", "type": "text"})
        result = validate_schema_dict(post_schema_dict)
        assert "DUPLICATE_FIELD_NAME" in result.codes
        assert not result.is_valid

    def test_every_error_is_attached(self, post_schema_dict: Dict[str, Any]) -> None:
        del post_schema_dict["model"]
        post_schema_dict["fields"][0] = {"name": "title"}
        with pytest.raises(SchemaError) as exc_info:
            parse_schema(_dump(post_schema_dict))
        assert exc_info.value.errors == [
            "Model name is required",
            "Field type is required for field title",
        ]


# ===========================================================================
# Relationships
# ===========================================================================


class TestRelationshipDeclarations:
    """Relationship structural checks."""

    def test_all_six_kinds_parse(self, author_schema_dict: Dict[str, Any]) -> None:
        schema = parse_schema(_dump(author_schema_dict))
        assert [r.type for r in schema.relationships] == [
            "belongsTo",
            "hasOne",
            "hasMany",
            "belongsToMany",
            "hasOneThrough",
            "hasManyThrough",
        ]
        assert isinstance(schema.relationships[0], BelongsToRelationship)
        assert isinstance(schema.relationships[3], BelongsToManyRelationship)
        assert isinstance(schema.relationships[5], HasManyThroughRelationship)

    def test_relationship_without_type(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["relationships"] = [{"model": "User", "foreignKey": "user_id"}]
        with pytest.raises(SchemaError, match="Relationship type is required"):
            parse_schema(_dump(post_schema_dict))

    def test_relationship_without_model(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["relationships"] = [{"type": "belongsTo", "foreignKey": "user_id"}]
        with pytest.raises(SchemaError, match="Related model is required"):
            parse_schema(_dump(post_schema_dict))

    @pytest.mark.parametrize("kind", ["belongsTo", "hasOne", "hasMany"])
    def test_foreign_key_required(self, post_schema_dict: Dict[str, Any], kind: str) -> None:
        post_schema_dict["relationships"] = [{"type": kind, "model": "User"}]
        with pytest.raises(SchemaError, match="Foreign key is required"):
            parse_schema(_dump(post_schema_dict))

    @pytest.mark.parametrize("kind", ["hasOneThrough", "hasManyThrough"])
    def test_through_required(self, post_schema_dict: Dict[str, Any], kind: str) -> None:
        post_schema_dict["relationships"] = [{"type": kind, "model": "Comment"}]
        with pytest.raises(SchemaError, match="Through model is required"):
            parse_schema(_dump(post_schema_dict))

    def test_unsupported_type_raises_dedicated_error(
        self, post_schema_dict: Dict[str, Any]
    ) -> None:
        post_schema_dict["relationships"] = [{"type": "morphTo", "model": "Imageable"}]
        with pytest.raises(UnsupportedRelationshipError) as exc_info:
            parse_schema(_dump(post_schema_dict))
        assert exc_info.value.relationship_type == "morphTo"
        assert str(exc_info.value) == "Unsupported relationship type: morphTo"
        assert isinstance(exc_info.value, SchemaError)

    def test_unsupported_type_wins_over_other_errors(
        self, post_schema_dict: Dict[str, Any]
    ) -> None:
        del post_schema_dict["model"]
        post_schema_dict["relationships"] = [{"type": "morphMany", "model": "Comment"}]
        with pytest.raises(UnsupportedRelationshipError):
            schema_from_dict(post_schema_dict)

    def test_incomplete_pivot_column(self, author_schema_dict: Dict[str, Any]) -> None:
        author_schema_dict["relationships"][3]["pivotColumns"] = [{"name": "featured"}]
        assert "PIVOT_COLUMN_INCOMPLETE" in validate_schema_dict(author_schema_dict).codes


# ===========================================================================
# Warnings
# ===========================================================================


class TestWarnings:
    """Semantic problems that are reported but do not block generation."""

    def test_non_snake_case_field_name(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["fields"].append({"name": "publishedAt", "type": "datetime"})
        result = validate_schema_dict(post_schema_dict)
        assert result.is_valid
        assert "FIELD_NAME_NOT_SNAKE_CASE" in result.codes

    def test_pass_through_field_type(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["fields"].append({"name": "external_id", "type": "uuid"})
        result = validate_schema_dict(post_schema_dict)
        assert result.is_valid
        assert "UNKNOWN_FIELD_TYPE" in result.codes

    def test_unknown_referential_action(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["relationships"][0]["onDelete"] = "explode"
        assert "UNKNOWN_REFERENTIAL_ACTION" in validate_schema_dict(post_schema_dict).codes

    def test_foreign_key_shadowing_a_field(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["fields"].append({"name": "user_id", "type": "integer"})
        assert "FOREIGN_KEY_SHADOWS_FIELD" in validate_schema_dict(post_schema_dict).codes

    def test_plural_model_name(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["model"] = "Posts"
        assert "MODEL_NAME_PLURAL" in validate_schema_dict(post_schema_dict).codes

    def test_key_of_another_kind_is_ignored(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["relationships"][0]["localKey"] = "uuid"
        result = validate_schema_dict(post_schema_dict)
        assert "UNKNOWN_RELATIONSHIP_KEY" in result.codes
        schema = schema_from_dict(post_schema_dict)
        assert schema.relationships[0].owner_key == "id"

    def test_unknown_field_key_is_ignored(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["fields"][0]["label"] = "Title"
        result = validate_schema_dict(post_schema_dict)
        assert result.is_valid
        assert "FIELD_UNKNOWN_KEY" in result.codes
        warning = next(w for w in result.warnings if w.code == "FIELD_UNKNOWN_KEY")
        assert warning.message == "Field 'title' ignores key(s): label"
        schema = schema_from_dict(post_schema_dict)
        assert schema.fields[0].name == "title"

    def test_known_field_keys_raise_no_warning(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["fields"][0].update({"nullable": False, "rules": ["max:120"]})
        assert "FIELD_UNKNOWN_KEY" not in validate_schema_dict(post_schema_dict).codes


# ===========================================================================
# parse_schema
# ===========================================================================


class TestParseSchema:
    """End-to-end parsing into SchemaDefinition."""

    def test_parses_into_immutable_model(self, post_schema_dict: Dict[str, Any]) -> None:
        schema = parse_schema(_dump(post_schema_dict))
        assert isinstance(schema, SchemaDefinition)
        assert schema.class_name == "Post"
        assert schema.table_name == "posts"
        assert schema.soft_deletes is True
        assert schema.primary_key.type == "id"
        assert schema.field_names == ["title", "body", "status", "meta"]
        with pytest.raises(PydanticValidationError):
            schema.model = "Article"  # type: ignore[misc]

    def test_defaults(self) -> None:
        schema = parse_schema("model: Tag\nfields:\n  - {name: label, type: string}\n")
        assert schema.primary_key.name == "id"
        assert schema.primary_key.type == "integer"
        assert schema.timestamps is True
        assert schema.soft_deletes is False
        assert schema.relationships == []

    def test_snake_case_keys_are_accepted(self) -> None:
        schema = parse_schema(
            "model: Tag\n"
            "soft_deletes: true\n"
            "primary_key: {name: uuid, type: uuid}\n"
            "fields:\n  - {name: label, type: string}\n"
        )
        assert schema.soft_deletes is True
        assert schema.primary_key.name == "uuid"

    def test_single_custom_rule_becomes_list(self) -> None:
        schema = parse_schema(
            "model: Tag\nfields:\n  - {name: label, type: string, rules: 'alpha_dash'}\n"
        )
        assert schema.fields[0].rules == ["alpha_dash"]

    def test_empty_keys_fall_back_to_defaults(self) -> None:
        schema = parse_schema(
            "model: Post\n"
            "fields:\n"
            "  - name: title\n"
            "    type: string\n"
            "    nullable:\n"
            "    rules:\n"
            "    options:\n"
            "relationships:\n"
        )
        assert schema.relationships == []
        assert schema.fields[0].nullable is False
        assert schema.fields[0].rules == []
        assert schema.fields[0].options == []

    def test_empty_relationship_keys_fall_back_to_defaults(self) -> None:
        schema = parse_schema(
            "model: Post\n"
            "fields:\n  - {name: title, type: string}\n"
            "relationships:\n"
            "  - type: belongsTo\n"
            "    model: User\n"
            "    foreignKey: user_id\n"
            "    nullable:\n"
            "  - type: belongsToMany\n"
            "    model: Tag\n"
            "    pivotColumns:\n"
        )
        belongs_to, belongs_to_many = schema.relationships
        assert belongs_to.nullable is False
        assert isinstance(belongs_to_many, BelongsToManyRelationship)
        assert belongs_to_many.pivot_columns == []

    def test_invalid_yaml(self) -> None:
        with pytest.raises(SchemaError, match="^Invalid YAML"):
            parse_schema("model: [unclosed\n")

    def test_pydantic_failure_is_wrapped(self, post_schema_dict: Dict[str, Any]) -> None:
        post_schema_dict["fields"][0]["nullable"] = "sometimes"
        with pytest.raises(SchemaError, match="^Schema validation failed"):
            parse_schema(_dump(post_schema_dict))
