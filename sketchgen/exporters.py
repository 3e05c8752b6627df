# File: sketchgen/exporters.py
"""
Sketchgen - Artifact Writer (File-System Manager)
===================================================

Responsible for:
    1. Creating artifact directories on demand.
    2. Detecting artifacts that already exist (migrations by table name,
       whatever their timestamp prefix).
    3. Refusing to overwrite unless forced.
    4. Writing each file atomically (write-to-temp then rename).

Writes are not transactional across artifacts: if one write fails, files
written earlier in the run stay on disk.  Each individual file is atomic.
"""

from __future__ import annotations

import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from sketchgen.errors import ArtifactWriteError, FileConflictError
from sketchgen.templates import Artifact, ArtifactKind, PlannedArtifact
from sketchgen.utils import ensure_directory

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.exporters")

# Migration file names are "{timestamp}_create_{table}_table.php"
_MIGRATION_MARKER: str = "_create_"


@dataclass(frozen=True, slots=True)
class FileRecord:
    """Immutable record of a single written file."""

    kind: ArtifactKind
    path: Path
    size_bytes: int
    line_count: int
    sha256: str


def migration_pattern(path: Path) -> str:
    """Glob matching any migration that creates the same table as *path*."""
    _, marker, rest = path.name.partition(_MIGRATION_MARKER)
    if not marker:
        return path.name
    return f"*{marker}{rest}"


def find_existing(planned: PlannedArtifact) -> Optional[Path]:
    """
    Path of an already generated file for *planned*, or ``None``.

    A migration counts as existing when any file in the migrations
    directory creates the same table, regardless of its timestamp.
    """
    if planned.kind is ArtifactKind.MIGRATION:
        directory: Path = planned.path.parent
        if not directory.is_dir():
            return None
        matches: List[Path] = sorted(directory.glob(migration_pattern(planned.path)))
        return matches[0] if matches else None
    return planned.path if planned.path.exists() else None


class ArtifactWriter:
    """
    Writes rendered artifacts to disk.

    Usage::

        writer = ArtifactWriter()
        writer.ensure_directories([config.models_dir, config.migrations_dir])
        if writer.check_conflict(planned, force=force) is None:
            record = writer.write(planned.build())

    NOT thread-safe; one writer per run.
    """

    def __init__(self, *, atomic_writes: bool = True) -> None:
        self._atomic_writes: bool = atomic_writes
        self._records: List[FileRecord] = []

    @property
    def records(self) -> List[FileRecord]:
        return list(self._records)

    @property
    def total_bytes(self) -> int:
        return sum(record.size_bytes for record in self._records)

    # -----------------------------------------------------------------
    # Directories
    # -----------------------------------------------------------------

    @staticmethod
    def ensure_directories(directories: Iterable[Path]) -> None:
        """Create every directory in *directories*; ``ArtifactWriteError`` on failure."""
        for directory in directories:
            try:
                ensure_directory(directory)
            except OSError as exc:
                raise ArtifactWriteError(directory, str(exc)) from exc
            logger.debug("Ensured directory: %s", directory)

    # -----------------------------------------------------------------
    # Files
    # -----------------------------------------------------------------

    def check_conflict(self, planned: PlannedArtifact, *, force: bool = False) -> Optional[Path]:
        """
        Existing path for *planned*, if any.

        Raises ``FileConflictError`` when the artifact exists and *force*
        is not set.
        """
        existing: Optional[Path] = find_existing(planned)
        if existing is not None and not force:
            raise FileConflictError(existing)
        return existing

    def write(self, artifact: Artifact) -> FileRecord:
        """Write *artifact* to its path and return the record."""
        encoded: bytes = artifact.content.encode("utf-8")
        try:
            ensure_directory(artifact.path.parent)
            if self._atomic_writes:
                self._atomic_write(artifact.path, encoded)
            else:
                artifact.path.write_bytes(encoded)
        except OSError as exc:
            raise ArtifactWriteError(artifact.path, str(exc)) from exc

        record: FileRecord = FileRecord(
            kind=artifact.kind,
            path=artifact.path,
            size_bytes=len(encoded),
            line_count=artifact.line_count,
            sha256=artifact.sha256,
        )
        self._records.append(record)
        logger.debug(
            "Wrote file: %s (%d bytes, %d lines).",
            artifact.path,
            record.size_bytes,
            record.line_count,
        )
        return record

    @staticmethod
    def _atomic_write(target_path: Path, data: bytes) -> None:
        """
        Write data to target_path atomically using a temporary file.

        The temp file lives in the target directory so ``os.replace`` stays
        on one filesystem.  On failure the temp file is removed and the
        error propagates.
        """
        fd: int = -1
        tmp_path: str = ""
        try:
            fd, tmp_path = tempfile.mkstemp(
                dir=str(target_path.parent),
                prefix=f".{target_path.name}.",
                suffix=".tmp",
            )
            os.write(fd, data)
            os.fsync(fd)
            os.close(fd)
            fd = -1

            os.replace(tmp_path, str(target_path))
            tmp_path = ""
        finally:
            if fd >= 0:
                os.close(fd)
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "FileRecord",
    "ArtifactWriter",
    "find_existing",
    "migration_pattern",
]

logger.debug("sketchgen.exporters loaded.")
