# File: sketchgen/rules.py
"""
Sketchgen - Field-Rule Mapper
===============================
Computes Laravel validation rule tokens for fields and relationships.

Every rule list starts with a presence rule:

    create  -> ["required"] or ["nullable"]
    update  -> ["sometimes", "required"] or ["sometimes", "nullable"]

followed by the type rules for the field and, last, any custom rules the
schema lists for it.  Unknown field types get the presence rule only.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Tuple

from sketchgen.models import (
    FieldDefinition,
    FieldType,
    SchemaDefinition,
    ValidationMode,
)
from sketchgen.relationships import (
    ResolvedBelongsTo,
    ResolvedBelongsToMany,
    ResolvedHasOneOrMany,
    ResolvedRelationship,
    resolve_relationships,
)

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.rules")

# (attribute key, rule tokens) in output order
RuleSet = Tuple[str, List[str]]

_TYPE_RULES: Dict[FieldType, Tuple[str, ...]] = {
    FieldType.STRING: ("string", "max:255"),
    FieldType.TEXT: ("string",),
    FieldType.INTEGER: ("integer",),
    FieldType.DECIMAL: ("numeric",),
    FieldType.FLOAT: ("numeric",),
    FieldType.DOUBLE: ("numeric",),
    FieldType.BOOLEAN: ("boolean",),
    FieldType.DATE: ("date",),
    FieldType.DATETIME: ("date",),
    FieldType.EMAIL: ("email:rfc,dns",),
    FieldType.URL: ("url",),
    FieldType.JSON: ("json",),
}

# Pivot columns only understand a narrower set of types
_PIVOT_TYPE_RULES: Dict[str, Tuple[str, ...]] = {
    "timestamp": ("date",),
    "boolean": ("boolean",),
}


def presence_rules(nullable: bool, mode: ValidationMode) -> List[str]:
    """``required``/``nullable``, prefixed with ``sometimes`` in update mode."""
    rules: List[str] = ["sometimes"] if ValidationMode(mode) is ValidationMode.UPDATE else []
    rules.append("nullable" if nullable else "required")
    return rules


def rules_for(field: FieldDefinition, mode: ValidationMode) -> List[str]:
    """
    Ordered validation rules for one field.

    >>> rules_for(FieldDefinition(name="title", type="string"), ValidationMode.CREATE)
    ['required', 'string', 'max:255']
    """
    rules: List[str] = presence_rules(field.nullable, mode)

    field_type = field.field_type
    if field_type is FieldType.ENUM:
        if field.options:
            rules.append("in:" + ",".join(field.options))
    elif field_type is not None:
        rules.extend(_TYPE_RULES[field_type])

    rules.extend(field.rules)
    return rules


def relationship_rules(
    resolved: ResolvedRelationship,
    mode: ValidationMode,
) -> List[RuleSet]:
    """
    Rule sets contributed by one resolved relationship.

    Through relationships add no column to the owning table and therefore
    contribute nothing.
    """
    if isinstance(resolved, (ResolvedBelongsTo, ResolvedHasOneOrMany)):
        exists: str = f"exists:{resolved.exists_table},{resolved.exists_column}"
        return [(resolved.foreign_key, presence_rules(resolved.nullable, mode) + [exists])]

    if isinstance(resolved, ResolvedBelongsToMany):
        related = resolved.related_pivot
        result: List[RuleSet] = [
            (resolved.validation_key, presence_rules(resolved.nullable, mode) + ["array"]),
            (f"{resolved.validation_key}.*", [f"exists:{related.table},{related.references}"]),
        ]
        for column in resolved.pivot_columns:
            rules: List[str] = presence_rules(column.nullable, mode)
            rules.extend(_PIVOT_TYPE_RULES.get(column.type, ()))
            result.append((column.name, rules))
        return result

    return []


def rule_sets(schema: SchemaDefinition, mode: ValidationMode) -> List[RuleSet]:
    """All rule sets for *schema*: fields first, then relationships, in declaration order."""
    mode = ValidationMode(mode)
    result: List[RuleSet] = [(field.name, rules_for(field, mode)) for field in schema.fields]
    for resolved in resolve_relationships(schema):
        result.extend(relationship_rules(resolved, mode))
    logger.debug("Built %d %s rule set(s) for %s.", len(result), mode.value, schema.model)
    return result


__all__: List[str] = [
    "RuleSet",
    "presence_rules",
    "rules_for",
    "relationship_rules",
    "rule_sets",
]

logger.debug("sketchgen.rules loaded.")
