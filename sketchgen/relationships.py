# File: sketchgen/relationships.py
"""
Sketchgen - Relationship Resolver
===================================
Maps one declared relationship onto a fully-defaulted, immutable
descriptor: accessor method name, keys, referenced table, cascade
behaviour and, for many-to-many, the synthesized pivot table.

The model, migration and validation generators each call
``resolve_relationship`` on their own.  Resolution is a pure function of
(relationship, owning model), so all three see identical keys and table
names for the same schema.

Defaults per kind:

    belongsTo       ownerKey "id"
    hasOne/hasMany  foreignKey snake(owner)_id, localKey "id"
    *Through        firstKey snake(owner)_id, secondKey snake(through)_id,
                    localKey / secondLocalKey "id"
    belongsToMany   pivotTable sorted(plural tables), pivot keys
                    snake(model)_id, pivot tables table_name(model)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Tuple, Union

from pydantic import ValidationError as PydanticValidationError

from sketchgen.errors import SchemaError, UnsupportedRelationshipError
from sketchgen.models import (
    RELATIONSHIP_MODELS,
    BelongsToManyRelationship,
    BelongsToRelationship,
    HasManyRelationship,
    HasManyThroughRelationship,
    HasOneRelationship,
    HasOneThroughRelationship,
    PivotColumnDefinition,
    PivotKeyDefinition,
    RelationshipDefinition,
    RelationshipKind,
    SchemaDefinition,
)
from sketchgen.utils import (
    class_basename,
    default_foreign_key,
    pivot_table_name,
    relation_method_name,
    table_name,
    to_plural,
    to_snake_case,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.relationships")

# Kinds whose accessor returns a collection (method name is pluralized)
_COLLECTION_KINDS = frozenset({
    RelationshipKind.HAS_MANY,
    RelationshipKind.BELONGS_TO_MANY,
    RelationshipKind.HAS_MANY_THROUGH,
})


# ---------------------------------------------------------------------------
# Resolved descriptors
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class _ResolvedBase:
    kind: RelationshipKind
    model: str
    class_name: str
    method: str
    nullable: bool

    @property
    def relation_class(self) -> str:
        """Eloquent relation class returned by the accessor, e.g. ``HasManyThrough``."""
        return self.kind.value[0].upper() + self.kind.value[1:]

    @property
    def related_table(self) -> str:
        return table_name(self.model)


@dataclass(frozen=True, slots=True)
class ResolvedBelongsTo(_ResolvedBase):
    foreign_key: str
    owner_key: str
    key_type: str
    on_update: str
    on_delete: str
    exists_table: str
    exists_column: str

    @property
    def references(self) -> str:
        return self.owner_key


@dataclass(frozen=True, slots=True)
class ResolvedHasOneOrMany(_ResolvedBase):
    foreign_key: str
    local_key: str
    key_type: str
    on_update: str
    on_delete: str
    exists_table: str
    exists_column: str

    @property
    def references(self) -> str:
        return self.local_key


@dataclass(frozen=True, slots=True)
class ResolvedThrough(_ResolvedBase):
    through: str
    through_class: str
    first_key: str
    second_key: str
    local_key: str
    second_local_key: str


@dataclass(frozen=True, slots=True)
class ResolvedPivotKey:
    """One foreign key column of a pivot table."""

    key: str
    type: str
    references: str
    table: str


@dataclass(frozen=True, slots=True)
class ResolvedBelongsToMany(_ResolvedBase):
    pivot_table: str
    pivot_key_type: str
    foreign_pivot: ResolvedPivotKey
    related_pivot: ResolvedPivotKey
    pivot_columns: Tuple[PivotColumnDefinition, ...]
    with_timestamps: bool
    validation_key: str

    @property
    def pivot_column_names(self) -> List[str]:
        return [column.name for column in self.pivot_columns]


ResolvedRelationship = Union[
    ResolvedBelongsTo,
    ResolvedHasOneOrMany,
    ResolvedThrough,
    ResolvedBelongsToMany,
]

# Descriptors that put a foreign-key column on the owning table
ForeignKeyRelationship = Union[ResolvedBelongsTo, ResolvedHasOneOrMany]


# ---------------------------------------------------------------------------
# Per-kind resolvers
# ---------------------------------------------------------------------------


def _common(relation: Any, kind: RelationshipKind) -> Dict[str, Any]:
    return {
        "kind": kind,
        "model": relation.model,
        "class_name": class_basename(relation.model),
        "method": relation_method_name(relation.model, plural=kind in _COLLECTION_KINDS),
        "nullable": relation.nullable,
    }


def _resolve_belongs_to(relation: BelongsToRelationship, owner: str) -> ResolvedBelongsTo:
    return ResolvedBelongsTo(
        **_common(relation, RelationshipKind.BELONGS_TO),
        foreign_key=relation.foreign_key,
        owner_key=relation.owner_key,
        key_type=relation.key_type,
        on_update=relation.on_update,
        on_delete=relation.on_delete,
        exists_table=relation.table or table_name(relation.model),
        exists_column=relation.references or "id",
    )


def _resolve_has_one_or_many(
    relation: Union[HasOneRelationship, HasManyRelationship],
    owner: str,
) -> ResolvedHasOneOrMany:
    return ResolvedHasOneOrMany(
        **_common(relation, relation.kind),
        foreign_key=relation.foreign_key or default_foreign_key(owner),
        local_key=relation.local_key,
        key_type=relation.key_type,
        on_update=relation.on_update,
        on_delete=relation.on_delete,
        exists_table=relation.table or table_name(relation.model),
        exists_column=relation.references or "id",
    )


def _resolve_through(
    relation: Union[HasOneThroughRelationship, HasManyThroughRelationship],
    owner: str,
) -> ResolvedThrough:
    return ResolvedThrough(
        **_common(relation, relation.kind),
        through=relation.through,
        through_class=class_basename(relation.through),
        first_key=relation.first_key or default_foreign_key(owner),
        second_key=relation.second_key or default_foreign_key(relation.through),
        local_key=relation.local_key,
        second_local_key=relation.second_local_key,
    )


def _resolve_pivot_key(pivot: PivotKeyDefinition, model: str) -> ResolvedPivotKey:
    return ResolvedPivotKey(
        key=pivot.key or default_foreign_key(model),
        type=pivot.type,
        references=pivot.references,
        table=pivot.table or table_name(model),
    )


def _resolve_belongs_to_many(
    relation: BelongsToManyRelationship,
    owner: str,
) -> ResolvedBelongsToMany:
    return ResolvedBelongsToMany(
        **_common(relation, RelationshipKind.BELONGS_TO_MANY),
        pivot_table=relation.pivot_table or pivot_table_name(owner, relation.model),
        pivot_key_type=relation.pivot_table_key_type,
        foreign_pivot=_resolve_pivot_key(relation.foreign_pivot, owner),
        related_pivot=_resolve_pivot_key(relation.related_pivot, relation.model),
        pivot_columns=tuple(relation.pivot_columns),
        with_timestamps=relation.with_timestamps,
        validation_key=to_plural(to_snake_case(class_basename(relation.model))),
    )


_RESOLVERS: Dict[RelationshipKind, Callable[[Any, str], ResolvedRelationship]] = {
    RelationshipKind.BELONGS_TO: _resolve_belongs_to,
    RelationshipKind.HAS_ONE: _resolve_has_one_or_many,
    RelationshipKind.HAS_MANY: _resolve_has_one_or_many,
    RelationshipKind.HAS_ONE_THROUGH: _resolve_through,
    RelationshipKind.HAS_MANY_THROUGH: _resolve_through,
    RelationshipKind.BELONGS_TO_MANY: _resolve_belongs_to_many,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def coerce_relationship(raw: Mapping[str, Any]) -> RelationshipDefinition:
    """
    Build a typed relationship from a raw mapping.

    Raises:
        UnsupportedRelationshipError: ``type`` is not one of the six kinds.
        SchemaError: the declaration is missing required attributes.
    """
    rel_type: Any = raw.get("type")
    try:
        kind: RelationshipKind = RelationshipKind(rel_type)
    except ValueError:
        raise UnsupportedRelationshipError(rel_type) from None

    try:
        return RELATIONSHIP_MODELS[kind].model_validate(raw)
    except PydanticValidationError as exc:
        messages: List[str] = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        ]
        raise SchemaError(f"Invalid {kind.value} relationship: {messages[0]}", messages) from exc


def resolve_relationship(
    relation: Union[RelationshipDefinition, Mapping[str, Any]],
    owning_model: str,
) -> ResolvedRelationship:
    """
    Fill every optional attribute of *relation* with its default.

    Args:
        relation: Typed relationship, or a raw mapping straight from YAML.
        owning_model: Name of the model that declares the relationship.
    """
    if isinstance(relation, Mapping):
        relation = coerce_relationship(relation)

    kind: Any = getattr(relation, "type", None)
    try:
        resolver = _RESOLVERS[RelationshipKind(kind)]
    except (KeyError, ValueError):
        raise UnsupportedRelationshipError(kind) from None

    resolved: ResolvedRelationship = resolver(relation, owning_model)
    logger.debug(
        "Resolved %s %s -> %s as %s().",
        resolved.kind.value,
        owning_model,
        resolved.model,
        resolved.method,
    )
    return resolved


def resolve_relationships(schema: SchemaDefinition) -> List[ResolvedRelationship]:
    """Resolve every relationship of *schema*, in declaration order."""
    return [resolve_relationship(rel, schema.model) for rel in schema.relationships]


def foreign_key_relationships(schema: SchemaDefinition) -> List[ForeignKeyRelationship]:
    """Resolved relationships that own a foreign-key column (belongsTo / hasOne / hasMany)."""
    return [
        rel
        for rel in resolve_relationships(schema)
        if isinstance(rel, (ResolvedBelongsTo, ResolvedHasOneOrMany))
    ]


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "ResolvedBelongsTo",
    "ResolvedHasOneOrMany",
    "ResolvedThrough",
    "ResolvedPivotKey",
    "ResolvedBelongsToMany",
    "ResolvedRelationship",
    "ForeignKeyRelationship",
    "coerce_relationship",
    "resolve_relationship",
    "resolve_relationships",
    "foreign_key_relationships",
]

logger.debug("sketchgen.relationships loaded.")
