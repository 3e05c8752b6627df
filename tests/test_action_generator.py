"""
tests/test_action_generator.py
Unit tests for sketchgen.action_generator.
"""

from __future__ import annotations

import pathlib

from sketchgen.action_generator import ActionGenerator, action_namespace
from sketchgen.models import GeneratorConfig, SchemaDefinition


class TestActionGenerator:
    """Action class path and body."""

    def test_namespace(self, post_schema: SchemaDefinition) -> None:
        assert action_namespace("App\\Models", post_schema) == "App\\Actions\\Post"

    def test_output_path(self, config: GeneratorConfig, post_schema: SchemaDefinition, app_root: pathlib.Path) -> None:
        assert ActionGenerator(config).output_path(post_schema) == (
            app_root / "app" / "Actions" / "Post" / "PostAction.php"
        )

    def test_imports(self, config: GeneratorConfig, post_schema: SchemaDefinition) -> None:
        content = ActionGenerator(config).render(post_schema)
        assert "namespace App\\Actions\\Post;" in content
        assert "use App\\Models\\Post;" in content
        assert "use App\\Http\\Requests\\Post\\PostCreateRequest;" in content
        assert "use App\\Http\\Requests\\Post\\PostUpdateRequest;" in content
        assert "class PostAction" in content

    def test_crud_methods_validate_input(self, config: GeneratorConfig, post_schema: SchemaDefinition) -> None:
        content = ActionGenerator(config).render(post_schema)
        assert "public function create(array $data): Post" in content
        assert "(new PostCreateRequest())->rules()" in content
        assert "public function update(Post $model, array $data): Post" in content
        assert "(new PostUpdateRequest())->rules()" in content
        assert "public function delete(Post $model): bool" in content

    def test_custom_namespace(self, app_root: pathlib.Path, post_schema: SchemaDefinition) -> None:
        config = GeneratorConfig(base_path=app_root, model_namespace="Domain\\Models")
        content = ActionGenerator(config).render(post_schema)
        assert "namespace Domain\\Actions\\Post;" in content
        assert "use Domain\\Models\\Post;" in content
        assert "use Domain\\Http\\Requests\\Post\\PostCreateRequest;" in content
