"""
tests/conftest.py
Shared fixtures for the sketchgen test suite.

No external mocking libraries are used; real file I/O is performed
inside temporary directories managed by pytest's tmp_path fixtures.
"""

from __future__ import annotations

import copy
import pathlib
from datetime import datetime
from typing import Any, Callable, Dict

import pytest
import yaml

from sketchgen.models import GeneratorConfig, SchemaDefinition


# ---------------------------------------------------------------------------
# Raw schema data fixtures
# ---------------------------------------------------------------------------

_POST_SCHEMA: Dict[str, Any] = {
    "model": "Post",
    "primaryKey": {"name": "id", "type": "id"},
    "fields": [
        {"name": "title", "type": "string"},
        {"name": "body", "type": "text", "nullable": True},
        {"name": "status", "type": "enum", "options": ["draft", "published"]},
        {"name": "meta", "type": "json", "nullable": True},
    ],
    "timestamps": True,
    "softDeletes": True,
    "relationships": [
        {"type": "belongsTo", "model": "User", "foreignKey": "user_id"},
    ],
}

_AUTHOR_SCHEMA: Dict[str, Any] = {
    "model": "Author",
    "fields": [
        {"name": "name", "type": "string"},
    ],
    "timestamps": False,
    "relationships": [
        {
            "type": "belongsTo",
            "model": "Country",
            "foreignKey": "country_id",
            "nullable": True,
            "onDelete": "set null",
        },
        {"type": "hasOne", "model": "Profile", "foreignKey": "profile_id"},
        {"type": "hasMany", "model": "Book", "foreignKey": "book_id"},
        {
            "type": "belongsToMany",
            "model": "Tag",
            "pivotColumns": [{"name": "featured", "type": "boolean"}],
            "withTimestamps": True,
        },
        {"type": "hasOneThrough", "model": "Publisher", "through": "Book"},
        {"type": "hasManyThrough", "model": "Review", "through": "Book"},
    ],
}


@pytest.fixture()
def post_schema_dict() -> Dict[str, Any]:
    """Post with every common field type and one belongsTo; safe to mutate."""
    return copy.deepcopy(_POST_SCHEMA)


@pytest.fixture()
def author_schema_dict() -> Dict[str, Any]:
    """Author declaring one relationship of each of the six kinds."""
    return copy.deepcopy(_AUTHOR_SCHEMA)


@pytest.fixture()
def post_schema(post_schema_dict: Dict[str, Any]) -> SchemaDefinition:
    return SchemaDefinition.model_validate(post_schema_dict)


@pytest.fixture()
def author_schema(author_schema_dict: Dict[str, Any]) -> SchemaDefinition:
    return SchemaDefinition.model_validate(author_schema_dict)


# ---------------------------------------------------------------------------
# File fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def write_yaml(tmp_path: pathlib.Path) -> Callable[[str, Any], pathlib.Path]:
    """Return a helper that dumps data to ``tmp_path/<name>`` and returns the path."""

    def _write(name: str, data: Any) -> pathlib.Path:
        path = tmp_path / name
        with open(path, "w", encoding="utf-8") as fh:
            yaml.safe_dump(data, fh, default_flow_style=False, sort_keys=False)
        return path

    return _write


@pytest.fixture()
def post_schema_path(
    post_schema_dict: Dict[str, Any],
    write_yaml: Callable[[str, Any], pathlib.Path],
) -> pathlib.Path:
    return write_yaml("Post.yaml", post_schema_dict)


@pytest.fixture()
def app_root(tmp_path: pathlib.Path) -> pathlib.Path:
    """Empty Laravel application root the artifacts are written into."""
    root = tmp_path / "app-root"
    root.mkdir()
    return root


@pytest.fixture()
def config(app_root: pathlib.Path) -> GeneratorConfig:
    return GeneratorConfig(base_path=app_root)


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------

FIXED_NOW: datetime = datetime(2024, 1, 2, 3, 4, 5)


@pytest.fixture()
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW
