# File: sketchgen/action_generator.py
"""
Sketchgen - Action Generator
==============================
Composes ``app/Actions/{Model}/{Model}Action.php``: a thin create / update /
delete wrapper that validates input against the generated form requests
before touching the model.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from sketchgen.models import SchemaDefinition, ValidationMode
from sketchgen.request_generator import request_class_name, request_namespace
from sketchgen.templates import ArtifactGenerator, ArtifactKind, sibling_namespace

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.action_generator")


def action_namespace(model_namespace: str, schema: SchemaDefinition) -> str:
    """``App\\Models`` -> ``App\\Actions\\{Model}``."""
    return f"{sibling_namespace(model_namespace, 'Actions')}\\{schema.class_name}"


class ActionGenerator(ArtifactGenerator):
    """Generates the CRUD action class."""

    kind = ArtifactKind.ACTION

    def output_path(self, schema: SchemaDefinition) -> Path:
        return self.config.actions_dir / schema.class_name / f"{schema.class_name}Action.php"

    def render(self, schema: SchemaDefinition) -> str:
        namespace: str = self.config.model_namespace
        content: str = self._renderer.render(
            "action",
            {
                "php_namespace": action_namespace(namespace, schema),
                "class_name": f"{schema.class_name}Action",
                "model": schema.class_name,
                "model_class": f"{namespace}\\{schema.class_name}",
                "request_namespace": request_namespace(namespace, schema),
                "create_request": request_class_name(schema, ValidationMode.CREATE),
                "update_request": request_class_name(schema, ValidationMode.UPDATE),
            },
        )
        logger.info("Rendered action for %s.", schema.class_name)
        return content


__all__: List[str] = ["ActionGenerator", "action_namespace"]

logger.debug("sketchgen.action_generator loaded.")
