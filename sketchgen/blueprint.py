# File: sketchgen/blueprint.py
"""
Sketchgen - Blueprint Files
=============================
Writes a starter YAML schema that users edit before running ``generate``.

``Blog/Post`` lands in ``{blueprints}/Blog/Post.yaml`` and describes model
``Post``; each path segment is StudlyCased.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List

import yaml

from sketchgen.errors import ArtifactWriteError, FileConflictError
from sketchgen.models import GeneratorConfig
from sketchgen.utils import ensure_directory, to_studly_case

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.blueprint")


def blueprint_segments(name: str) -> List[str]:
    """``"blog/post"`` -> ``["Blog", "Post"]``."""
    segments: List[str] = [to_studly_case(part) for part in name.replace("\\", "/").split("/")]
    segments = [segment for segment in segments if segment]
    if not segments:
        raise ValueError(f"Invalid blueprint name: {name!r}")
    return segments


def blueprint_data(model: str, *, timestamps: bool = True, soft_deletes: bool = False) -> Dict[str, Any]:
    """Starter schema: two fields and a belongsTo User."""
    return {
        "model": model,
        "primaryKey": {"name": "id", "type": "integer"},
        "fields": [
            {"name": "title", "type": "string", "nullable": False},
            {"name": "content", "type": "text", "nullable": True},
        ],
        "timestamps": timestamps,
        "softDeletes": soft_deletes,
        "relationships": [
            {
                "type": "belongsTo",
                "model": "User",
                "foreignKey": "user_id",
                "ownerKey": "id",
                "onUpdate": "cascade",
                "onDelete": "cascade",
            }
        ],
    }


def create_blueprint(name: str, config: GeneratorConfig, *, soft_deletes: bool = False) -> Path:
    """
    Write a starter blueprint for *name* and return its path.

    Raises:
        FileConflictError: the blueprint file already exists.
        ArtifactWriteError: the directory or file cannot be written.
    """
    segments: List[str] = blueprint_segments(name)
    target: Path = config.blueprints_dir.joinpath(*segments[:-1]) / f"{segments[-1]}.yaml"

    if target.exists():
        raise FileConflictError(target)

    data: Dict[str, Any] = blueprint_data(
        segments[-1], timestamps=config.timestamps, soft_deletes=soft_deletes
    )
    try:
        ensure_directory(target.parent)
        target.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    except OSError as exc:
        raise ArtifactWriteError(target, str(exc)) from exc

    logger.info("Created blueprint %s for model %s.", target, segments[-1])
    return target


__all__: List[str] = ["create_blueprint", "blueprint_data", "blueprint_segments"]

logger.debug("sketchgen.blueprint loaded.")
