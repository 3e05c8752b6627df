"""
tests/test_exporters.py
Unit tests for sketchgen.exporters.ArtifactWriter and conflict detection.
"""

from __future__ import annotations

import pathlib

import pytest

from sketchgen.errors import ArtifactWriteError, FileConflictError
from sketchgen.exporters import ArtifactWriter, find_existing, migration_pattern
from sketchgen.templates import Artifact, ArtifactKind, PlannedArtifact
from sketchgen.utils import sha256_hex


def _planned(kind: ArtifactKind, path: pathlib.Path, content: str = "<?php\n") -> PlannedArtifact:
    return PlannedArtifact(kind, path, lambda: content)


# ===========================================================================
# Conflict detection
# ===========================================================================


class TestFindExisting:
    """Existing files, with migrations matched by table name."""

    def test_migration_pattern(self) -> None:
        path = pathlib.Path("2024_01_02_030405_create_posts_table.php")
        assert migration_pattern(path) == "*_create_posts_table.php"

    def test_plain_file(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "Post.php"
        planned = _planned(ArtifactKind.MODEL, target)
        assert find_existing(planned) is None
        target.write_text("x", encoding="utf-8")
        assert find_existing(planned) == target

    def test_migration_with_other_timestamp(self, tmp_path: pathlib.Path) -> None:
        old = tmp_path / "2023_05_05_101010_create_posts_table.php"
        old.write_text("x", encoding="utf-8")
        (tmp_path / "2023_05_05_101010_create_post_tags_table.php").write_text("x", encoding="utf-8")

        planned = _planned(ArtifactKind.MIGRATION, tmp_path / "2024_01_02_030405_create_posts_table.php")
        assert find_existing(planned) == old

    def test_migration_directory_missing(self, tmp_path: pathlib.Path) -> None:
        planned = _planned(
            ArtifactKind.MIGRATION, tmp_path / "none" / "2024_01_02_030405_create_posts_table.php"
        )
        assert find_existing(planned) is None

    def test_check_conflict(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "Post.php"
        target.write_text("x", encoding="utf-8")
        planned = _planned(ArtifactKind.MODEL, target)
        writer = ArtifactWriter()

        with pytest.raises(FileConflictError) as exc_info:
            writer.check_conflict(planned)
        assert exc_info.value.path == target
        assert writer.check_conflict(planned, force=True) == target


# ===========================================================================
# Writing
# ===========================================================================


class TestWrite:
    """File writes and records."""

    @pytest.mark.parametrize("atomic", [True, False])
    def test_write_creates_parents(self, tmp_path: pathlib.Path, atomic: bool) -> None:
        writer = ArtifactWriter(atomic_writes=atomic)
        target = tmp_path / "app" / "Models" / "Post.php"
        record = writer.write(Artifact(ArtifactKind.MODEL, target, "<?php\n\nclass Post {}\n"))

        assert target.read_text(encoding="utf-8") == "<?php\n\nclass Post {}\n"
        assert record.size_bytes == len("<?php\n\nclass Post {}\n")
        assert record.line_count == 3
        assert record.sha256 == sha256_hex("<?php\n\nclass Post {}\n")
        assert writer.records == [record]
        assert writer.total_bytes == record.size_bytes

    def test_atomic_write_leaves_no_temp_files(self, tmp_path: pathlib.Path) -> None:
        target = tmp_path / "Post.php"
        target.write_text("old", encoding="utf-8")
        ArtifactWriter().write(Artifact(ArtifactKind.MODEL, target, "new"))
        assert [p.name for p in tmp_path.iterdir()] == ["Post.php"]
        assert target.read_text(encoding="utf-8") == "new"

    def test_write_failure(self, tmp_path: pathlib.Path) -> None:
        blocker = tmp_path / "app"
        blocker.write_text("file, not directory", encoding="utf-8")
        target = blocker / "Post.php"

        with pytest.raises(ArtifactWriteError) as exc_info:
            ArtifactWriter().write(Artifact(ArtifactKind.MODEL, target, "x"))
        assert exc_info.value.path == target

    def test_ensure_directories_failure(self, tmp_path: pathlib.Path) -> None:
        blocker = tmp_path / "models"
        blocker.write_text("x", encoding="utf-8")
        with pytest.raises(ArtifactWriteError, match="Cannot write"):
            ArtifactWriter.ensure_directories([tmp_path / "ok", blocker])
        assert (tmp_path / "ok").is_dir()
