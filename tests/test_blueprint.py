"""
tests/test_blueprint.py
Unit tests for sketchgen.blueprint.
"""

from __future__ import annotations

import pathlib

import pytest
import yaml

from sketchgen.blueprint import blueprint_segments, create_blueprint
from sketchgen.errors import FileConflictError
from sketchgen.models import GeneratorConfig
from sketchgen.validators import schema_from_dict


class TestBlueprintSegments:
    def test_nested_names(self) -> None:
        assert blueprint_segments("blog/post") == ["Blog", "Post"]
        assert blueprint_segments("Admin\\blog_post") == ["Admin", "BlogPost"]

    def test_empty_name(self) -> None:
        with pytest.raises(ValueError):
            blueprint_segments("//")


class TestCreateBlueprint:
    """Starter schema files."""

    def test_writes_valid_schema(self, config: GeneratorConfig, app_root: pathlib.Path) -> None:
        path = create_blueprint("Blog/Post", config)

        assert path == app_root / "resources" / "blueprints" / "Blog" / "Post.yaml"
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert list(data) == [
            "model",
            "primaryKey",
            "fields",
            "timestamps",
            "softDeletes",
            "relationships",
        ]
        schema = schema_from_dict(data)
        assert schema.model == "Post"
        assert schema.field_names == ["title", "content"]
        assert schema.soft_deletes is False
        assert schema.relationships[0].foreign_key == "user_id"

    def test_flags_come_from_arguments_and_config(self, app_root: pathlib.Path) -> None:
        config = GeneratorConfig(base_path=app_root, timestamps=False)
        path = create_blueprint("Post", config, soft_deletes=True)
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert data["softDeletes"] is True
        assert data["timestamps"] is False

    def test_existing_blueprint_is_kept(self, config: GeneratorConfig) -> None:
        path = create_blueprint("Post", config)
        path.write_text("model: Edited\n", encoding="utf-8")

        with pytest.raises(FileConflictError):
            create_blueprint("Post", config)
        assert path.read_text(encoding="utf-8") == "model: Edited\n"
