# File: sketchgen/errors.py
"""
Sketchgen - Exception Taxonomy
================================
Every failure the pipeline raises derives from ``SketchError`` so callers
(CLI, tests, embedding applications) can catch the whole family at once.

Propagation policy:
    - ``SchemaError`` / ``UnsupportedRelationshipError`` abort the run
      before any artifact is written.
    - ``SchemaReadError`` aborts the run when the schema file exists but
      cannot be read.
    - ``FileConflictError`` is downgraded to a per-artifact skip by the
      orchestrator.
    - ``ArtifactWriteError`` aborts the run and names the failing path.
    - ``GenerationError`` wraps anything unexpected raised while rendering,
      with the artifact kind and model name attached.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence, Union

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.errors")


class SketchError(Exception):
    """Base class for all sketchgen errors."""


class SchemaError(SketchError):
    """
    The input schema is malformed or incomplete.

    ``errors`` holds every problem found; ``str(exc)`` is the first one,
    which is what the user sees on the console.
    """

    def __init__(self, message: str, errors: Optional[Sequence[str]] = None) -> None:
        super().__init__(message)
        self.errors: List[str] = list(errors) if errors else [message]


class UnsupportedRelationshipError(SchemaError):
    """A relationship declares a ``type`` outside the six known kinds."""

    def __init__(self, relationship_type: object) -> None:
        self.relationship_type: str = str(relationship_type)
        super().__init__(f"Unsupported relationship type: {self.relationship_type}")


class SchemaReadError(SketchError):
    """A schema file exists but could not be read."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path: Path = Path(path)
        self.reason: str = reason
        super().__init__(f"Cannot read schema file {self.path}: {reason}")


class FileConflictError(SketchError):
    """Target file already exists and overwriting was not requested."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path: Path = Path(path)
        super().__init__(f"File already exists: {self.path}")


class ArtifactWriteError(SketchError):
    """A directory could not be created or a file could not be written."""

    def __init__(self, path: Union[str, Path], reason: str) -> None:
        self.path: Path = Path(path)
        self.reason: str = reason
        super().__init__(f"Cannot write {self.path}: {reason}")


class GenerationError(SketchError):
    """Unexpected failure while rendering one artifact."""

    def __init__(self, artifact: str, model: str, cause: BaseException) -> None:
        self.artifact: str = artifact
        self.model: str = model
        self.cause: BaseException = cause
        super().__init__(
            f"Failed to generate {artifact} for {model}: "
            f"{type(cause).__name__}: {cause}"
        )


class ConfigError(SketchError):
    """Generator configuration file is unreadable or invalid."""


__all__: List[str] = [
    "SketchError",
    "SchemaError",
    "UnsupportedRelationshipError",
    "SchemaReadError",
    "FileConflictError",
    "ArtifactWriteError",
    "GenerationError",
    "ConfigError",
]

logger.debug("sketchgen.errors loaded.")
