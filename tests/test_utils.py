"""
tests/test_utils.py
Unit tests for sketchgen.utils naming conventions and helpers.
"""

from __future__ import annotations

import pathlib

import pytest

from sketchgen.utils import (
    Timer,
    class_basename,
    count_lines,
    default_foreign_key,
    ensure_directory,
    indent_lines,
    is_snake_case,
    php_string_list,
    pivot_table_name,
    relation_method_name,
    table_name,
    to_camel_case,
    to_plural,
    to_singular,
    to_snake_case,
    to_studly_case,
)


# ===========================================================================
# Case conversions
# ===========================================================================


class TestCaseConversions:
    """snake / Studly / camel conversions."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("BlogPost", "blog_post"),
            ("HTTPResponse", "http_response"),
            ("already_snake", "already_snake"),
            ("userProfile", "user_profile"),
            ("", ""),
        ],
    )
    def test_to_snake_case(self, name: str, expected: str) -> None:
        assert to_snake_case(name) == expected

    def test_to_studly_case(self) -> None:
        assert to_studly_case("blog_post") == "BlogPost"
        assert to_studly_case("BlogPost") == "BlogPost"
        assert to_studly_case("post") == "Post"

    def test_to_camel_case(self) -> None:
        assert to_camel_case("BlogPost") == "blogPost"
        assert to_camel_case("user") == "user"

    def test_is_snake_case(self) -> None:
        assert is_snake_case("created_at")
        assert not is_snake_case("createdAt")
        assert not is_snake_case("")


# ===========================================================================
# Inflection
# ===========================================================================


class TestInflection:
    """Pluralization and singularization."""

    @pytest.mark.parametrize(
        "singular, plural",
        [
            ("Post", "Posts"),
            ("Category", "Categories"),
            ("Box", "Boxes"),
            ("Person", "People"),
            ("Child", "Children"),
            ("BlogPost", "BlogPosts"),
            ("Status", "Statuses"),
            ("day", "days"),
            ("Gas", "Gases"),
            ("Canvas", "Canvases"),
            ("Alias", "Aliases"),
            ("bus", "buses"),
        ],
    )
    def test_to_plural(self, singular: str, plural: str) -> None:
        assert to_plural(singular) == plural

    def test_uncountable_words_stay(self) -> None:
        assert to_plural("Equipment") == "Equipment"
        assert to_plural("news") == "news"

    def test_to_singular(self) -> None:
        assert to_singular("Categories") == "Category"
        assert to_singular("People") == "Person"
        assert to_singular("Posts") == "Post"
        assert to_singular("Status") == "Status"


# ===========================================================================
# Laravel naming conventions
# ===========================================================================


class TestLaravelNames:
    """Table, pivot, key and accessor names derived from model names."""

    def test_class_basename(self) -> None:
        assert class_basename("App\\Models\\User") == "User"
        assert class_basename("Blog/Post") == "Post"
        assert class_basename("Post") == "Post"

    def test_table_name(self) -> None:
        assert table_name("Post") == "posts"
        assert table_name("BlogPost") == "blog_posts"
        assert table_name("Category") == "categories"
        assert table_name("App\\Models\\User") == "users"
        assert table_name("Alias") == "aliases"
        assert table_name("GasStation") == "gas_stations"

    def test_singular_models_ending_in_s(self) -> None:
        assert pivot_table_name("Alias", "Tag") == "aliases_tags"
        assert relation_method_name("Canvas", plural=True) == "canvases"

    def test_pivot_table_name_is_order_independent(self) -> None:
        assert pivot_table_name("Tag", "Post") == "posts_tags"
        assert pivot_table_name("Post", "Tag") == "posts_tags"

    def test_default_foreign_key(self) -> None:
        assert default_foreign_key("User") == "user_id"
        assert default_foreign_key("BlogPost") == "blog_post_id"
        assert default_foreign_key("App\\Models\\User") == "user_id"

    def test_relation_method_name(self) -> None:
        assert relation_method_name("User") == "user"
        assert relation_method_name("BlogPost", plural=True) == "blogPosts"


# ===========================================================================
# Helpers
# ===========================================================================


class TestHelpers:
    """Rendering and file-system helpers."""

    def test_php_string_list(self) -> None:
        assert php_string_list(["a", "b"]) == "'a', 'b'"
        assert php_string_list([]) == ""

    def test_indent_lines_keeps_blank_lines(self) -> None:
        assert indent_lines(["a", "", "b"], level=2) == ["        a", "", "        b"]

    def test_count_lines(self) -> None:
        assert count_lines("") == 0
        assert count_lines("one") == 1
        assert count_lines("one\ntwo\n") == 2

    def test_ensure_directory_creates_parents(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "a" / "b" / "c"
        ensure_directory(target)
        ensure_directory(target)
        assert target.is_dir()

    def test_timer_measures_elapsed(self) -> None:
        with Timer("noop") as t:
            pass
        assert t.elapsed >= 0.0
        assert "noop" in repr(t)
