# File: sketchgen/templates.py
"""
Sketchgen - Stub Rendering
============================
One rendering abstraction shared by every artifact generator.

Stubs are Jinja2 templates stored as ``*.stub`` files.  The built-in set
ships in ``sketchgen/stubs``; a project may point ``stubs_path`` at its own
directory, and any stub found there wins over the built-in of the same
name (``ChoiceLoader`` order).

Generators compute text fragments (rule lines, column definitions,
accessor bodies) in Python and hand them to ``StubRenderer.render`` as a
named-value map.  Stubs stay logic-light: substitution, plus the odd
``{% if %}`` / ``{% for %}`` for optional sections.

**Determinism contract:** rendering is a pure function of (stub, context),
so re-running with the same schema produces byte-identical files.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, ClassVar, List, Mapping, Optional

from jinja2 import ChoiceLoader, Environment, FileSystemLoader, StrictUndefined

from sketchgen.models import GeneratorConfig, SchemaDefinition
from sketchgen.utils import count_lines, sha256_hex

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.templates")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

STUBS_DIR: Path = Path(__file__).resolve().parent / "stubs"

_INDENT: str = "    "


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class StubRenderer:
    """
    ``render(name, context) -> text`` over a directory of ``*.stub`` files.

    Undefined placeholders raise instead of rendering as empty strings, so
    a stub/generator mismatch fails loudly.
    """

    def __init__(self, custom_dir: Optional[Path] = None) -> None:
        loaders: List[FileSystemLoader] = []
        if custom_dir is not None:
            loaders.append(FileSystemLoader(str(custom_dir)))
            logger.info("Using custom stubs from %s.", custom_dir)
        loaders.append(FileSystemLoader(str(STUBS_DIR)))

        self._env: Environment = Environment(
            loader=ChoiceLoader(loaders),
            undefined=StrictUndefined,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render(self, name: str, context: Mapping[str, Any]) -> str:
        """Render stub *name* (without the ``.stub`` suffix) with *context*."""
        template = self._env.get_template(f"{name}.stub")
        return template.render(**context)


# ---------------------------------------------------------------------------
# Artifacts
# ---------------------------------------------------------------------------


class ArtifactKind(str, Enum):
    """Files produced for one schema, in generation order."""

    MODEL = "model"
    MIGRATION = "migration"
    CREATE_REQUEST = "create request"
    UPDATE_REQUEST = "update request"
    ACTION = "action"


@dataclass(frozen=True, slots=True)
class Artifact:
    """One generated file: destination path plus content."""

    kind: ArtifactKind
    path: Path
    content: str

    @property
    def sha256(self) -> str:
        return sha256_hex(self.content)

    @property
    def line_count(self) -> int:
        return count_lines(self.content)


@dataclass(frozen=True, slots=True)
class PlannedArtifact:
    """An artifact whose path is known but whose content is not rendered yet."""

    kind: ArtifactKind
    path: Path
    render: Callable[[], str]

    def build(self, path: Optional[Path] = None) -> Artifact:
        return Artifact(self.kind, path or self.path, self.render())


# ---------------------------------------------------------------------------
# PHP rendering helpers
# ---------------------------------------------------------------------------


def class_reference(model: str) -> str:
    """
    PHP class reference for a related model.

    Bare names resolve in the current namespace; namespaced names
    (``App\\Models\\User`` or ``Billing/Invoice``) become fully qualified.
    """
    if "\\" not in model and "/" not in model:
        return model
    return "\\" + model.replace("/", "\\").lstrip("\\")


def sibling_namespace(model_namespace: str, segment: str) -> str:
    """
    Swap the ``Models`` segment of *model_namespace* for *segment*.

        >>> sibling_namespace("App\\\\Models", "Actions")
        'App\\\\Actions'

    Namespaces without a ``Models`` segment get *segment* appended to
    their root.
    """
    parts: List[str] = model_namespace.split("\\")
    if "Models" in parts:
        index: int = len(parts) - 1 - parts[::-1].index("Models")
        parts[index] = segment
        return "\\".join(parts)
    return f"{parts[0]}\\{segment}"


def php_array_lines(entries: List[str], level: int = 3) -> str:
    """Join pre-rendered ``'key' => value`` entries, one per line, comma-separated."""
    prefix: str = _INDENT * level
    return ",\n".join(prefix + entry for entry in entries)


# ---------------------------------------------------------------------------
# Generator base class
# ---------------------------------------------------------------------------


class ArtifactGenerator:
    """
    Base for the per-artifact generators.

    Subclasses set ``kind`` and implement ``output_path`` and ``render``;
    generators producing more than one file override ``plan``.  The
    configuration is passed in explicitly and never read from globals.
    """

    kind: ClassVar[ArtifactKind]

    def __init__(
        self,
        config: GeneratorConfig,
        renderer: Optional[StubRenderer] = None,
    ) -> None:
        self._config: GeneratorConfig = config
        self._renderer: StubRenderer = renderer or StubRenderer(config.stubs_path)

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    def output_path(self, schema: SchemaDefinition) -> Path:
        raise NotImplementedError

    def render(self, schema: SchemaDefinition) -> str:
        raise NotImplementedError

    def plan(self, schema: SchemaDefinition) -> List[PlannedArtifact]:
        """Paths this generator will write, with deferred rendering."""
        return [
            PlannedArtifact(self.kind, self.output_path(schema), lambda: self.render(schema))
        ]

    def generate(self, schema: SchemaDefinition) -> List[Artifact]:
        """Render every artifact of this generator without touching the disk."""
        artifacts: List[Artifact] = [planned.build() for planned in self.plan(schema)]
        for artifact in artifacts:
            logger.debug(
                "Rendered %s for %s: %d lines.",
                artifact.kind.value,
                schema.model,
                artifact.line_count,
            )
        return artifacts


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "STUBS_DIR",
    "StubRenderer",
    "ArtifactKind",
    "Artifact",
    "PlannedArtifact",
    "ArtifactGenerator",
    "class_reference",
    "sibling_namespace",
    "php_array_lines",
]

logger.debug("sketchgen.templates loaded.")
