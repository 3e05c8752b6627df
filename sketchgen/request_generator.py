# File: sketchgen/request_generator.py
"""
Sketchgen - Form Request Generator
====================================
Composes the two validation artifacts of a model:

    app/Http/Requests/{Model}/{Model}CreateRequest.php
    app/Http/Requests/{Model}/{Model}UpdateRequest.php

Both rule bodies come from ``sketchgen.rules``; only the mode differs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from sketchgen.models import SchemaDefinition, ValidationMode
from sketchgen.rules import RuleSet, rule_sets
from sketchgen.templates import (
    ArtifactGenerator,
    ArtifactKind,
    PlannedArtifact,
    php_array_lines,
    sibling_namespace,
)
from sketchgen.utils import php_string_list

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.request_generator")

_MODE_KINDS: Dict[ValidationMode, ArtifactKind] = {
    ValidationMode.CREATE: ArtifactKind.CREATE_REQUEST,
    ValidationMode.UPDATE: ArtifactKind.UPDATE_REQUEST,
}


@dataclass(frozen=True, slots=True)
class RuleSets:
    """Create and update rule sets for one schema."""

    create: List[RuleSet]
    update: List[RuleSet]


def render_rules(sets: List[RuleSet]) -> str:
    """``'key' => ['rule', 'rule']`` lines, comma-separated, indented for ``rules()``."""
    return php_array_lines([f"'{key}' => [{php_string_list(rules)}]" for key, rules in sets])


def request_class_name(schema: SchemaDefinition, mode: ValidationMode) -> str:
    return f"{schema.class_name}{ValidationMode(mode).value.capitalize()}Request"


def request_namespace(model_namespace: str, schema: SchemaDefinition) -> str:
    """``App\\Models`` -> ``App\\Http\\Requests\\{Model}``."""
    return sibling_namespace(model_namespace, f"Http\\Requests\\{schema.class_name}")


class RequestGenerator(ArtifactGenerator):
    """Generates the create/update FormRequest classes."""

    kind = ArtifactKind.CREATE_REQUEST

    def rule_sets(self, schema: SchemaDefinition) -> RuleSets:
        return RuleSets(
            create=rule_sets(schema, ValidationMode.CREATE),
            update=rule_sets(schema, ValidationMode.UPDATE),
        )

    def request_path(self, schema: SchemaDefinition, mode: ValidationMode) -> Path:
        name: str = request_class_name(schema, mode)
        return self.config.requests_dir / schema.class_name / f"{name}.php"

    def output_path(self, schema: SchemaDefinition) -> Path:
        return self.request_path(schema, ValidationMode.CREATE)

    def render_request(self, schema: SchemaDefinition, mode: ValidationMode) -> str:
        mode = ValidationMode(mode)
        sets: List[RuleSet] = rule_sets(schema, mode)
        logger.info(
            "Rendered %s request for %s: %d rule set(s).",
            mode.value,
            schema.class_name,
            len(sets),
        )
        return self._renderer.render(
            "request",
            {
                "php_namespace": request_namespace(self.config.model_namespace, schema),
                "class_name": request_class_name(schema, mode),
                "rules": render_rules(sets),
            },
        )

    def render(self, schema: SchemaDefinition) -> str:
        return self.render_request(schema, ValidationMode.CREATE)

    def plan(self, schema: SchemaDefinition) -> List[PlannedArtifact]:
        return [
            PlannedArtifact(
                _MODE_KINDS[mode],
                self.request_path(schema, mode),
                lambda mode=mode: self.render_request(schema, mode),
            )
            for mode in (ValidationMode.CREATE, ValidationMode.UPDATE)
        ]


__all__: List[str] = [
    "RuleSets",
    "RequestGenerator",
    "render_rules",
    "request_class_name",
    "request_namespace",
]

logger.debug("sketchgen.request_generator loaded.")
