# File: sketchgen/models.py
"""
Sketchgen - Core Data Models
==============================
Pydantic V2 models for the two inputs of a generation run:

    * ``SchemaDefinition`` — one data model described in YAML (fields,
      primary key, relationships, timestamps / soft-delete flags).
    * ``GeneratorConfig`` — where artifacts go and which namespace they use.

Relationships are a closed, tagged union over the six supported kinds
(``RelationshipDefinition``), discriminated on the ``type`` key.  Each
variant carries only the attributes meaningful for that kind.

Schema keys are camelCase in YAML (``primaryKey``, ``foreignKey``,
``softDeletes``) and snake_case in Python; both spellings are accepted on
input.  Every model is frozen: a parsed schema is never mutated.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Dict, FrozenSet, List, Literal, Optional, Set, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from sketchgen.utils import class_basename, table_name as derive_table_name

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.models")

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class FieldType(str, Enum):
    """Field types with dedicated handling; any other token is passed through."""

    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    DECIMAL = "decimal"
    FLOAT = "float"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    EMAIL = "email"
    URL = "url"
    ENUM = "enum"
    JSON = "json"


class RelationshipKind(str, Enum):
    """The six Eloquent relationship kinds a schema may declare."""

    BELONGS_TO = "belongsTo"
    HAS_ONE = "hasOne"
    HAS_MANY = "hasMany"
    BELONGS_TO_MANY = "belongsToMany"
    HAS_ONE_THROUGH = "hasOneThrough"
    HAS_MANY_THROUGH = "hasManyThrough"


class KeyType(str, Enum):
    """Column type of a foreign key (selects foreignId / foreignUuid / foreignUlid)."""

    INTEGER = "integer"
    UUID = "uuid"
    ULID = "ulid"


class ValidationMode(str, Enum):
    """Which request a rule set is built for."""

    CREATE = "create"
    UPDATE = "update"


# Kinds that put a foreign-key column on the owning table's migration
FOREIGN_KEY_KINDS: FrozenSet[RelationshipKind] = frozenset({
    RelationshipKind.BELONGS_TO,
    RelationshipKind.HAS_ONE,
    RelationshipKind.HAS_MANY,
})

THROUGH_KINDS: FrozenSet[RelationshipKind] = frozenset({
    RelationshipKind.HAS_ONE_THROUGH,
    RelationshipKind.HAS_MANY_THROUGH,
})

REFERENTIAL_ACTIONS: FrozenSet[str] = frozenset({
    "cascade", "restrict", "set null", "no action",
})


# ---------------------------------------------------------------------------
# Shared model configuration
# ---------------------------------------------------------------------------

_SCHEMA_CONFIG: ConfigDict = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="forbid",
    coerce_numbers_to_str=True,
    str_strip_whitespace=True,
)

# Fields and relationship declarations tolerate unknown keys (e.g. ``ownerKey``
# on a hasMany); the validator reports them as warnings.
_TOLERANT_CONFIG: ConfigDict = ConfigDict(
    alias_generator=to_camel,
    populate_by_name=True,
    frozen=True,
    extra="ignore",
    coerce_numbers_to_str=True,
    str_strip_whitespace=True,
)


# An empty YAML key (``relationships:``) decodes to None; treat it as absent.
def _none_as_list(value: Any) -> Any:
    return [] if value is None else value


def _none_as_false(value: Any) -> Any:
    return False if value is None else value


# ---------------------------------------------------------------------------
# Schema primitives
# ---------------------------------------------------------------------------


class PrimaryKeyDefinition(BaseModel):
    """Primary key column; defaults to an integer ``id``."""

    model_config = _SCHEMA_CONFIG

    name: str = Field(default="id", min_length=1)
    type: str = Field(default="integer", min_length=1)


class FieldDefinition(BaseModel):
    """One column of the generated table."""

    model_config = _TOLERANT_CONFIG

    name: str = Field(..., min_length=1, description="Column / attribute name.")
    type: str = Field(..., min_length=1, description="Field type token.")
    nullable: bool = False
    options: List[str] = Field(
        default_factory=list, description="Allowed values (enum fields only)."
    )
    rules: List[str] = Field(
        default_factory=list,
        description="Extra validation rules appended after the computed ones.",
    )

    @field_validator("rules", mode="before")
    @classmethod
    def _rules_as_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return _none_as_list(value)

    @field_validator("options", mode="before")
    @classmethod
    def _empty_options(cls, value: Any) -> Any:
        return _none_as_list(value)

    @field_validator("nullable", mode="before")
    @classmethod
    def _empty_nullable(cls, value: Any) -> Any:
        return _none_as_false(value)

    @model_validator(mode="after")
    def _enum_requires_options(self) -> "FieldDefinition":
        if self.type == FieldType.ENUM.value and not self.options:
            raise ValueError(f"Enum options are required for field {self.name}")
        return self

    @property
    def field_type(self) -> Optional[FieldType]:
        """Recognised ``FieldType`` or ``None`` for pass-through column types."""
        try:
            return FieldType(self.type)
        except ValueError:
            return None


class PivotKeyDefinition(BaseModel):
    """One side of a many-to-many pivot table."""

    model_config = _SCHEMA_CONFIG

    key: Optional[str] = None
    type: str = KeyType.INTEGER.value
    references: str = "id"
    table: Optional[str] = None


class PivotColumnDefinition(BaseModel):
    """Extra column stored on a pivot table."""

    model_config = _SCHEMA_CONFIG

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    nullable: bool = False

    @field_validator("nullable", mode="before")
    @classmethod
    def _empty_nullable(cls, value: Any) -> Any:
        return _none_as_false(value)


# ---------------------------------------------------------------------------
# Relationship variants
# ---------------------------------------------------------------------------


class _RelationshipBase(BaseModel):
    model_config = _TOLERANT_CONFIG

    model: str = Field(..., min_length=1, description="Related model class.")
    nullable: bool = False
    on_update: str = "cascade"
    on_delete: str = "cascade"
    table: Optional[str] = Field(
        default=None, description="Table used by the exists: validation rule."
    )
    references: Optional[str] = Field(
        default=None, description="Column used by the exists: validation rule."
    )

    @field_validator("nullable", mode="before")
    @classmethod
    def _empty_nullable(cls, value: Any) -> Any:
        return _none_as_false(value)

    @property
    def kind(self) -> RelationshipKind:
        return RelationshipKind(getattr(self, "type"))


class BelongsToRelationship(_RelationshipBase):
    type: Literal["belongsTo"] = "belongsTo"
    foreign_key: str = Field(..., min_length=1)
    owner_key: str = "id"
    key_type: str = KeyType.INTEGER.value


class HasOneRelationship(_RelationshipBase):
    type: Literal["hasOne"] = "hasOne"
    foreign_key: Optional[str] = None
    local_key: str = "id"
    key_type: str = KeyType.INTEGER.value


class HasManyRelationship(_RelationshipBase):
    type: Literal["hasMany"] = "hasMany"
    foreign_key: Optional[str] = None
    local_key: str = "id"
    key_type: str = KeyType.INTEGER.value


class HasOneThroughRelationship(_RelationshipBase):
    type: Literal["hasOneThrough"] = "hasOneThrough"
    through: str = Field(..., min_length=1)
    first_key: Optional[str] = None
    second_key: Optional[str] = None
    local_key: str = "id"
    second_local_key: str = "id"


class HasManyThroughRelationship(_RelationshipBase):
    type: Literal["hasManyThrough"] = "hasManyThrough"
    through: str = Field(..., min_length=1)
    first_key: Optional[str] = None
    second_key: Optional[str] = None
    local_key: str = "id"
    second_local_key: str = "id"


class BelongsToManyRelationship(_RelationshipBase):
    type: Literal["belongsToMany"] = "belongsToMany"
    pivot_table: Optional[str] = None
    pivot_table_key_type: str = KeyType.INTEGER.value
    foreign_pivot: PivotKeyDefinition = Field(default_factory=PivotKeyDefinition)
    related_pivot: PivotKeyDefinition = Field(default_factory=PivotKeyDefinition)
    pivot_columns: List[PivotColumnDefinition] = Field(default_factory=list)
    with_timestamps: bool = False

    @field_validator("pivot_columns", mode="before")
    @classmethod
    def _empty_pivot_columns(cls, value: Any) -> Any:
        return _none_as_list(value)


RelationshipDefinition = Annotated[
    Union[
        BelongsToRelationship,
        HasOneRelationship,
        HasManyRelationship,
        BelongsToManyRelationship,
        HasOneThroughRelationship,
        HasManyThroughRelationship,
    ],
    Field(discriminator="type"),
]

RELATIONSHIP_MODELS: Dict[RelationshipKind, type] = {
    RelationshipKind.BELONGS_TO: BelongsToRelationship,
    RelationshipKind.HAS_ONE: HasOneRelationship,
    RelationshipKind.HAS_MANY: HasManyRelationship,
    RelationshipKind.BELONGS_TO_MANY: BelongsToManyRelationship,
    RelationshipKind.HAS_ONE_THROUGH: HasOneThroughRelationship,
    RelationshipKind.HAS_MANY_THROUGH: HasManyThroughRelationship,
}


# ---------------------------------------------------------------------------
# Root schema
# ---------------------------------------------------------------------------


class SchemaDefinition(BaseModel):
    """
    Root entity: one model and everything needed to generate its artifacts.

    Constructed once per run by ``sketchgen.validators.parse_schema`` and
    shared read-only by every generator.
    """

    model_config = _SCHEMA_CONFIG

    model: str = Field(..., min_length=1, description="Model class name.")
    primary_key: PrimaryKeyDefinition = Field(default_factory=PrimaryKeyDefinition)
    fields: List[FieldDefinition] = Field(..., min_length=1)
    timestamps: bool = True
    soft_deletes: bool = False
    relationships: List[RelationshipDefinition] = Field(default_factory=list)

    @field_validator("relationships", mode="before")
    @classmethod
    def _empty_relationships(cls, value: Any) -> Any:
        return _none_as_list(value)

    @model_validator(mode="after")
    def _unique_field_names(self) -> "SchemaDefinition":
        seen: Set[str] = set()
        for fld in self.fields:
            if fld.name in seen:
                raise ValueError(f"Duplicate field name: {fld.name}")
            seen.add(fld.name)
        return self

    @computed_field  # type: ignore[misc]
    @property
    def class_name(self) -> str:
        return class_basename(self.model)

    @computed_field  # type: ignore[misc]
    @property
    def table_name(self) -> str:
        return derive_table_name(self.model)

    @property
    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def __repr__(self) -> str:
        return (
            f"<SchemaDefinition {self.model}: {len(self.fields)} fields, "
            f"{len(self.relationships)} relationships>"
        )


# ---------------------------------------------------------------------------
# Generator configuration
# ---------------------------------------------------------------------------


class OutputPaths(BaseModel):
    """Artifact directories, relative to ``GeneratorConfig.base_path`` unless absolute."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    models: str = "app/Models"
    migrations: str = "database/migrations"
    requests: str = "app/Http/Requests"
    actions: str = "app/Actions"
    blueprints: str = "resources/blueprints"


class GeneratorConfig(BaseModel):
    """
    Immutable settings passed explicitly into every generator.

    Defaults follow a stock Laravel application layout.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        protected_namespaces=(),
    )

    base_path: Path = Field(default=Path("."))
    paths: OutputPaths = Field(default_factory=OutputPaths)
    model_namespace: str = Field(default="App\\Models", min_length=1)
    stubs_path: Optional[Path] = Field(
        default=None, description="Directory whose *.stub files override the built-ins."
    )
    timestamps: bool = Field(
        default=True, description="Default timestamps flag for new blueprints."
    )
    scaffold_command: List[str] = Field(
        default_factory=lambda: ["php", "artisan", "sketch:service-repository"],
        description="External command used for service/repository scaffolding.",
    )

    @field_validator("model_namespace")
    @classmethod
    def _strip_namespace(cls, value: str) -> str:
        return value.strip("\\")

    def output_dir(self, kind: str) -> Path:
        """Absolute-or-base-relative directory for one artifact kind."""
        configured: Path = Path(getattr(self.paths, kind))
        if configured.is_absolute():
            return configured
        return self.base_path / configured

    @property
    def models_dir(self) -> Path:
        return self.output_dir("models")

    @property
    def migrations_dir(self) -> Path:
        return self.output_dir("migrations")

    @property
    def requests_dir(self) -> Path:
        return self.output_dir("requests")

    @property
    def actions_dir(self) -> Path:
        return self.output_dir("actions")

    @property
    def blueprints_dir(self) -> Path:
        return self.output_dir("blueprints")

    def with_overrides(self, **overrides: Any) -> "GeneratorConfig":
        """Return a re-validated copy with *overrides* applied (``None`` values ignored)."""
        data: Dict[str, Any] = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return GeneratorConfig.model_validate(data)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FieldType",
    "RelationshipKind",
    "KeyType",
    "ValidationMode",
    "FOREIGN_KEY_KINDS",
    "THROUGH_KINDS",
    "REFERENTIAL_ACTIONS",
    "PrimaryKeyDefinition",
    "FieldDefinition",
    "PivotKeyDefinition",
    "PivotColumnDefinition",
    "BelongsToRelationship",
    "HasOneRelationship",
    "HasManyRelationship",
    "HasOneThroughRelationship",
    "HasManyThroughRelationship",
    "BelongsToManyRelationship",
    "RelationshipDefinition",
    "RELATIONSHIP_MODELS",
    "SchemaDefinition",
    "OutputPaths",
    "GeneratorConfig",
]

logger.debug("sketchgen.models loaded.")
