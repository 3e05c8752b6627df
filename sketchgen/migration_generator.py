# File: sketchgen/migration_generator.py
"""
Sketchgen - Migration Generator
=================================
Composes ``database/migrations/{Y_m_d_His}_create_{table}_table.php``.

Column order inside ``Schema::create`` is fixed:

    1. primary key
    2. one column per field, in declaration order
    3. one foreign-key block per belongsTo / hasOne / hasMany
    4. ``timestamps()`` then ``softDeletes()`` when enabled

Through relationships add nothing: they relate via an intermediate table.
Every belongsToMany adds its own ``Schema::create`` pivot block after the
main table; ``down()`` drops the pivot tables before the main one.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Union

from sketchgen.models import (
    FieldDefinition,
    FieldType,
    GeneratorConfig,
    KeyType,
    PivotColumnDefinition,
    PrimaryKeyDefinition,
    SchemaDefinition,
)
from sketchgen.relationships import (
    ForeignKeyRelationship,
    ResolvedBelongsTo,
    ResolvedBelongsToMany,
    ResolvedHasOneOrMany,
    ResolvedPivotKey,
    resolve_relationships,
)
from sketchgen.templates import ArtifactGenerator, ArtifactKind, StubRenderer
from sketchgen.utils import AUTO_INCREMENT_TYPES, indent_lines, php_string_list

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.migration_generator")

MIGRATION_TIMESTAMP_FORMAT: str = "%Y_%m_%d_%H%M%S"

# Field types that are not Blueprint column methods themselves
_COLUMN_METHODS: Dict[str, str] = {
    FieldType.EMAIL.value: "string",
    FieldType.URL.value: "string",
    FieldType.DATETIME.value: "dateTime",
}

_FOREIGN_KEY_METHODS: Dict[str, str] = {
    KeyType.INTEGER.value: "foreignId",
    KeyType.UUID.value: "foreignUuid",
    KeyType.ULID.value: "foreignUlid",
}

# Columns inside Schema::create sit three levels deep in the stub
_COLUMN_LEVEL: int = 3


# ---------------------------------------------------------------------------
# Column fragments
# ---------------------------------------------------------------------------


def primary_key_line(primary_key: PrimaryKeyDefinition) -> str:
    """
    ``$table->integer('id')->primary();`` style primary key.

    Auto-incrementing Blueprint types already declare the key, so they
    skip the ``->primary()`` modifier.
    """
    if primary_key.type in AUTO_INCREMENT_TYPES:
        if primary_key.type == "id" and primary_key.name == "id":
            return "$table->id();"
        return f"$table->{primary_key.type}('{primary_key.name}');"
    return f"$table->{primary_key.type}('{primary_key.name}')->primary();"


def column_line(field: Union[FieldDefinition, PivotColumnDefinition]) -> str:
    """One column definition; enum fields are constrained to their options."""
    if field.type == FieldType.ENUM.value:
        column: str = (
            f"$table->enum('{field.name}', [{php_string_list(getattr(field, 'options', []))}])"
        )
    else:
        method: str = _COLUMN_METHODS.get(field.type, field.type)
        column = f"$table->{method}('{field.name}')"
    if field.nullable:
        column += "->nullable()"
    return column + ";"


def _foreign_key_method(key_type: str) -> str:
    return _FOREIGN_KEY_METHODS.get(key_type, "foreignId")


def _constraint_lines(
    first_line: str,
    modifiers: Sequence[str],
) -> List[str]:
    """A chained Blueprint statement split one modifier per line."""
    lines: List[str] = [first_line]
    lines.extend(f"    {modifier}" for modifier in modifiers)
    lines[-1] += ";"
    return lines


def foreign_key_lines(relation: ForeignKeyRelationship) -> List[str]:
    """Foreign-key block for a belongsTo / hasOne / hasMany relationship."""
    modifiers: List[str] = ["->nullable()"] if relation.nullable else []
    modifiers.extend([
        f"->references('{relation.references}')",
        f"->on('{relation.related_table}')",
        f"->onUpdate('{relation.on_update}')",
        f"->onDelete('{relation.on_delete}')",
    ])
    first: str = f"$table->{_foreign_key_method(relation.key_type)}('{relation.foreign_key}')"
    return _constraint_lines(first, modifiers)


def pivot_primary_key_line(key_type: str) -> str:
    if key_type == KeyType.INTEGER.value:
        return "$table->id();"
    if key_type in AUTO_INCREMENT_TYPES:
        return f"$table->{key_type}('id');"
    return f"$table->{key_type}('id')->primary();"


def pivot_key_lines(pivot: ResolvedPivotKey) -> List[str]:
    """Pivot foreign keys always cascade on update and delete."""
    first: str = f"$table->{_foreign_key_method(pivot.type)}('{pivot.key}')"
    return _constraint_lines(
        first,
        [
            f"->references('{pivot.references}')",
            f"->on('{pivot.table}')",
            "->onUpdate('cascade')",
            "->onDelete('cascade')",
        ],
    )


def pivot_table_lines(relation: ResolvedBelongsToMany) -> List[str]:
    lines: List[str] = [pivot_primary_key_line(relation.pivot_key_type)]
    lines.extend(pivot_key_lines(relation.foreign_pivot))
    lines.extend(pivot_key_lines(relation.related_pivot))
    lines.extend(column_line(column) for column in relation.pivot_columns)
    if relation.with_timestamps:
        lines.append("$table->timestamps();")
    return lines


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class MigrationGenerator(ArtifactGenerator):
    """
    Generates the create-table migration.

    ``clock`` supplies the timestamp prefix of the file name; tests pass a
    fixed one.
    """

    kind = ArtifactKind.MIGRATION

    def __init__(
        self,
        config: GeneratorConfig,
        renderer: Optional[StubRenderer] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        super().__init__(config, renderer)
        self._clock: Callable[[], datetime] = clock

    @staticmethod
    def file_suffix(schema: SchemaDefinition) -> str:
        """Part of the file name that does not depend on the clock."""
        return f"_create_{schema.table_name}_table.php"

    def output_path(self, schema: SchemaDefinition) -> Path:
        stamp: str = self._clock().strftime(MIGRATION_TIMESTAMP_FORMAT)
        return self.config.migrations_dir / f"{stamp}{self.file_suffix(schema)}"

    def column_lines(self, schema: SchemaDefinition) -> List[str]:
        """Statements of the main ``Schema::create`` block, unindented."""
        lines: List[str] = [primary_key_line(schema.primary_key)]
        lines.extend(column_line(field) for field in schema.fields)
        for relation in resolve_relationships(schema):
            if isinstance(relation, (ResolvedBelongsTo, ResolvedHasOneOrMany)):
                lines.extend(foreign_key_lines(relation))
        if schema.timestamps:
            lines.append("$table->timestamps();")
        if schema.soft_deletes:
            lines.append("$table->softDeletes();")
        return lines

    def pivot_tables(self, schema: SchemaDefinition) -> List[Dict[str, str]]:
        return [
            {
                "table": relation.pivot_table,
                "columns": "\n".join(indent_lines(pivot_table_lines(relation), _COLUMN_LEVEL)),
            }
            for relation in resolve_relationships(schema)
            if isinstance(relation, ResolvedBelongsToMany)
        ]

    def render(self, schema: SchemaDefinition) -> str:
        pivots: List[Dict[str, str]] = self.pivot_tables(schema)
        content: str = self._renderer.render(
            "migration",
            {
                "table": schema.table_name,
                "columns": "\n".join(indent_lines(self.column_lines(schema), _COLUMN_LEVEL)),
                "pivots": pivots,
            },
        )
        logger.info(
            "Rendered migration for table %s with %d pivot table(s).",
            schema.table_name,
            len(pivots),
        )
        return content


__all__: List[str] = [
    "MIGRATION_TIMESTAMP_FORMAT",
    "MigrationGenerator",
    "primary_key_line",
    "column_line",
    "foreign_key_lines",
    "pivot_primary_key_line",
    "pivot_key_lines",
    "pivot_table_lines",
]

logger.debug("sketchgen.migration_generator loaded.")
