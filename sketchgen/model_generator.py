# File: sketchgen/model_generator.py
"""
Sketchgen - Eloquent Model Generator
======================================
Composes ``app/Models/{Model}.php``: fillable list, cast map, optional
``SoftDeletes`` trait and one accessor per relationship.

Each relationship kind has its own accessor stub under ``stubs/relations``
(six shapes); keys and method names come from the relationship resolver.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Union

from sketchgen.models import FieldType, RelationshipDefinition, SchemaDefinition
from sketchgen.relationships import (
    ResolvedBelongsTo,
    ResolvedBelongsToMany,
    ResolvedHasOneOrMany,
    ResolvedRelationship,
    ResolvedThrough,
    resolve_relationship,
)
from sketchgen.templates import ArtifactGenerator, ArtifactKind, class_reference, php_array_lines
from sketchgen.utils import class_basename, php_string_list, to_snake_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.model_generator")

_CASTS: Dict[FieldType, str] = {
    FieldType.ENUM: "string",
    FieldType.JSON: "array",
    FieldType.DATETIME: "datetime",
    FieldType.BOOLEAN: "boolean",
}

_ELOQUENT: str = "Illuminate\\Database\\Eloquent"


class ModelGenerator(ArtifactGenerator):
    """Generates the Eloquent model class."""

    kind = ArtifactKind.MODEL

    def output_path(self, schema: SchemaDefinition) -> Path:
        return self.config.models_dir / f"{schema.class_name}.php"

    # -----------------------------------------------------------------
    # Fragments
    # -----------------------------------------------------------------

    @staticmethod
    def fillable(schema: SchemaDefinition) -> str:
        """Inner text of ``$fillable``: one quoted name per line, declaration order."""
        if not schema.fields:
            return ""
        entries: str = php_array_lines([f"'{name}'" for name in schema.field_names], level=2)
        return f"\n{entries}\n    "

    @staticmethod
    def casts(schema: SchemaDefinition) -> str:
        entries: List[str] = [
            f"'{field.name}' => '{_CASTS[field.field_type]}'"
            for field in schema.fields
            if field.field_type in _CASTS
        ]
        return php_array_lines(entries, level=2)

    def render_accessor(
        self,
        relation: Union[RelationshipDefinition, Mapping[str, Any]],
        owning_model: str,
    ) -> str:
        """
        Render one relationship accessor method.

        Raises ``UnsupportedRelationshipError`` (via the resolver) for an
        unknown relationship kind.
        """
        resolved: ResolvedRelationship = resolve_relationship(relation, owning_model)
        return self._render_resolved(resolved, owning_model)

    def _render_resolved(self, resolved: ResolvedRelationship, owning_model: str) -> str:
        context: Dict[str, Any] = {
            "method": resolved.method,
            "related": class_reference(resolved.model),
            "owner": class_basename(owning_model),
            "relation_class": resolved.relation_class,
        }

        if isinstance(resolved, ResolvedBelongsTo):
            context.update(foreign_key=resolved.foreign_key, owner_key=resolved.owner_key)
        elif isinstance(resolved, ResolvedHasOneOrMany):
            context.update(foreign_key=resolved.foreign_key, local_key=resolved.local_key)
        elif isinstance(resolved, ResolvedThrough):
            context.update(
                through=class_reference(resolved.through),
                through_name=resolved.through_class,
                first_key=resolved.first_key,
                second_key=resolved.second_key,
                local_key=resolved.local_key,
                second_local_key=resolved.second_local_key,
            )
        elif isinstance(resolved, ResolvedBelongsToMany):
            pivot_columns: List[str] = resolved.pivot_column_names
            context.update(
                pivot_table=resolved.pivot_table,
                foreign_pivot_key=resolved.foreign_pivot.key,
                related_pivot_key=resolved.related_pivot.key,
                with_pivot=php_string_list(pivot_columns) if pivot_columns else "",
                with_timestamps=resolved.with_timestamps,
            )

        stub: str = f"relations/{to_snake_case(resolved.kind.value)}"
        return self._renderer.render(stub, context).rstrip("\n")

    @staticmethod
    def imports(schema: SchemaDefinition, resolved: List[ResolvedRelationship]) -> List[str]:
        names = {
            f"{_ELOQUENT}\\Factories\\HasFactory",
            f"{_ELOQUENT}\\Model",
        }
        if schema.soft_deletes:
            names.add(f"{_ELOQUENT}\\SoftDeletes")
        for relation in resolved:
            names.add(f"{_ELOQUENT}\\Relations\\{relation.relation_class}")
        return sorted(names)

    # -----------------------------------------------------------------
    # Artifact
    # -----------------------------------------------------------------

    def render(self, schema: SchemaDefinition) -> str:
        resolved: List[ResolvedRelationship] = [
            resolve_relationship(rel, schema.model) for rel in schema.relationships
        ]
        traits: List[str] = ["HasFactory"] + (["SoftDeletes"] if schema.soft_deletes else [])

        content: str = self._renderer.render(
            "model",
            {
                "php_namespace": self.config.model_namespace,
                "imports": self.imports(schema, resolved),
                "class_name": schema.class_name,
                "traits": ", ".join(traits),
                "fillable": self.fillable(schema),
                "casts": self.casts(schema),
                "relationships": [self._render_resolved(r, schema.model) for r in resolved],
            },
        )
        logger.info(
            "Rendered model %s: %d fillable, %d relationship(s).",
            schema.class_name,
            len(schema.fields),
            len(resolved),
        )
        return content


__all__: List[str] = ["ModelGenerator"]

logger.debug("sketchgen.model_generator loaded.")
