# File: sketchgen/generator.py
"""
Sketchgen - Generation Pipeline (Orchestrator)
================================================

Connects every phase of a run:

    YAML schema → Validation → Artifact rendering → File writes → Scaffolding

Workflow::

    1. Load the schema file and parse it into a ``SchemaDefinition``
       (validators.py).  Any schema error aborts before a file is touched.
    2. Create the output directories.
    3. For each artifact (model, migration, create request, update request,
       action): plan its path, skip it when it already exists and ``force``
       is off, otherwise render and write it.
    4. Optionally hand the model over to a ``Scaffolder``.
    5. Return a ``GenerationReport`` with per-artifact outcomes and timings.

Error handling strategy:
    - ``SchemaError`` propagates unchanged; nothing has been written.
    - An existing artifact is a per-artifact skip, not an error.
    - ``ArtifactWriteError`` propagates; earlier writes stay on disk.
    - Anything unexpected raised while rendering is wrapped in
      ``GenerationError`` naming the artifact and the model.
    - Scaffolding failures are recorded in the report, never raised.

Run state moves ``IDLE → VALIDATED → DONE``, or to ``FAILED`` on any
propagated error.  Each artifact moves ``PLANNED → SKIPPED | WRITTEN``.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from sketchgen.action_generator import ActionGenerator
from sketchgen.errors import (
    ConfigError,
    FileConflictError,
    GenerationError,
    SchemaError,
    SchemaReadError,
    SketchError,
)
from sketchgen.exporters import ArtifactWriter
from sketchgen.migration_generator import MigrationGenerator
from sketchgen.model_generator import ModelGenerator
from sketchgen.models import GeneratorConfig, SchemaDefinition
from sketchgen.request_generator import RequestGenerator
from sketchgen.scaffolding import NullScaffolder, ScaffoldOptions, Scaffolder, ScaffoldResult
from sketchgen.templates import (
    Artifact,
    ArtifactGenerator,
    ArtifactKind,
    PlannedArtifact,
    StubRenderer,
)
from sketchgen.utils import Timer
from sketchgen.validators import parse_schema

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.generator")


# ---------------------------------------------------------------------------
# States
# ---------------------------------------------------------------------------


class RunState(str, Enum):
    IDLE = "idle"
    VALIDATED = "validated"
    DONE = "done"
    FAILED = "failed"


class ArtifactOutcome(str, Enum):
    PLANNED = "planned"
    SKIPPED = "skipped"
    WRITTEN = "written"


# ---------------------------------------------------------------------------
# Generation report
# ---------------------------------------------------------------------------


@dataclass(frozen=False, slots=True)
class ArtifactStatus:
    """Outcome of one planned artifact."""

    kind: ArtifactKind
    path: Path
    outcome: ArtifactOutcome = ArtifactOutcome.PLANNED
    reason: str = ""

    def status_line(self) -> str:
        """Console line for this artifact: ``generated: …`` or ``skipped: …``."""
        if self.outcome is ArtifactOutcome.SKIPPED:
            return f"skipped: {self.reason}"
        return f"generated: {self.path}"


@dataclass(frozen=False, slots=True)
class GenerationStepMetric:
    """Timing and outcome for a single pipeline step."""

    step_name: str = ""
    success: bool = True
    elapsed_seconds: float = 0.0
    detail: str = ""


@dataclass(frozen=False, slots=True)
class GenerationReport:
    """
    Report produced by ``SketchGenerator.generate()``.

    Holds the per-artifact outcomes, step timings, warnings and the
    scaffolding result, if scaffolding was requested.
    """

    model: str = ""
    state: RunState = RunState.IDLE
    total_elapsed_seconds: float = 0.0

    artifacts: List[ArtifactStatus] = field(default_factory=list)
    step_metrics: List[GenerationStepMetric] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    scaffold: Optional[ScaffoldResult] = None

    @property
    def success(self) -> bool:
        return self.state is RunState.DONE

    @property
    def written(self) -> List[ArtifactStatus]:
        return [a for a in self.artifacts if a.outcome is ArtifactOutcome.WRITTEN]

    @property
    def skipped(self) -> List[ArtifactStatus]:
        return [a for a in self.artifacts if a.outcome is ArtifactOutcome.SKIPPED]

    def status_lines(self) -> List[str]:
        return [a.status_line() for a in self.artifacts if a.outcome is not ArtifactOutcome.PLANNED]

    def summary(self) -> str:
        """Return a human-readable summary string."""
        lines: List[str] = []
        status: str = "✅ SUCCESS" if self.success else "❌ FAILED"
        lines.append(f"{'='*60}")
        lines.append("  Sketchgen — Generation Report")
        lines.append(f"{'='*60}")
        lines.append(f"  Status:           {status}")
        lines.append(f"  Model:            {self.model}")
        lines.append(f"  Files written:    {len(self.written)}")
        lines.append(f"  Files skipped:    {len(self.skipped)}")
        lines.append(f"  Total time:       {self.total_elapsed_seconds:.3f}s")
        lines.append(f"{'─'*60}")

        if self.step_metrics:
            lines.append("  Pipeline Steps:")
            for step in self.step_metrics:
                icon: str = "✓" if step.success else "✗"
                lines.append(
                    f"    {icon} {step.step_name:<28s} "
                    f"{step.elapsed_seconds:>7.3f}s  "
                    f"{step.detail}"
                )

        if self.skipped:
            lines.append(f"{'─'*60}")
            lines.append(f"  Skipped Artifacts ({len(self.skipped)}):")
            for artifact in self.skipped:
                lines.append(f"    ⊘ {artifact.kind.value}: {artifact.path}")

        if self.warnings:
            lines.append(f"{'─'*60}")
            lines.append(f"  Warnings ({len(self.warnings)}):")
            for warn in self.warnings:
                lines.append(f"    ⚠ {warn}")

        if self.errors:
            lines.append(f"{'─'*60}")
            lines.append(f"  Errors ({len(self.errors)}):")
            for err in self.errors:
                lines.append(f"    ✗ {err}")

        lines.append(f"{'='*60}")
        return "\n".join(lines)


# ---------------------------------------------------------------------------
# File loaders
# ---------------------------------------------------------------------------


def read_schema_text(path: Union[str, Path]) -> str:
    """
    Return the UTF-8 text of a schema file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SchemaReadError: If the file cannot be opened or read.
        SchemaError: If the bytes are not valid UTF-8.
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Schema file not found: {path}")
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise SchemaError(f"Schema file is not valid UTF-8: {path}: {exc}") from exc
    except OSError as exc:
        raise SchemaReadError(path, exc.strerror or str(exc)) from exc


def load_schema_file(path: Union[str, Path]) -> SchemaDefinition:
    """
    Read and parse a YAML schema file.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SchemaReadError: If the file cannot be read.
        SchemaError: If the content is not a valid schema.
    """
    path = Path(path)
    schema: SchemaDefinition = parse_schema(read_schema_text(path))
    logger.info("Loaded schema file: %s.", path)
    return schema


def load_config_file(path: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """
    Build a ``GeneratorConfig`` from an optional YAML file.

    The settings live under a top-level ``sketch:`` key, or make up the
    whole mapping.  Without a path the Laravel defaults are returned.
    """
    if path is None:
        return GeneratorConfig()

    path = Path(path)
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Config file is not valid UTF-8: {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc.strerror or exc}") from exc

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(
            f"Expected a YAML mapping at top level of {path}, got {type(raw).__name__}."
        )

    data: Any = raw.get("sketch", raw)
    if not isinstance(data, dict):
        raise ConfigError(f"'sketch' section of {path} must be a mapping.")

    try:
        config: GeneratorConfig = GeneratorConfig.model_validate(data)
    except PydanticValidationError as exc:
        raise ConfigError(f"Config validation failed for {path}: {exc}") from exc

    logger.info("Loaded config file: %s.", path)
    return config


# ---------------------------------------------------------------------------
# SketchGenerator — orchestrator
# ---------------------------------------------------------------------------


class SketchGenerator:
    """
    Pipeline orchestrator for one schema per run.

    Usage::

        generator = SketchGenerator(config)
        report = generator.generate_from_file(Path("blueprints/Post.yaml"))
        print(report.summary())

    The generator is reusable; ``state`` and ``last_report`` describe the
    most recent run, including a failed one.
    """

    def __init__(
        self,
        config: GeneratorConfig,
        *,
        scaffolder: Optional[Scaffolder] = None,
        clock: Callable[[], datetime] = datetime.now,
        renderer: Optional[StubRenderer] = None,
    ) -> None:
        self._config: GeneratorConfig = config
        self._scaffolder: Scaffolder = scaffolder or NullScaffolder()
        stubs: StubRenderer = renderer or StubRenderer(config.stubs_path)

        self._generators: List[ArtifactGenerator] = [
            ModelGenerator(config, stubs),
            MigrationGenerator(config, stubs, clock),
            RequestGenerator(config, stubs),
            ActionGenerator(config, stubs),
        ]
        self._state: RunState = RunState.IDLE
        self._report: Optional[GenerationReport] = None

        logger.debug(
            "SketchGenerator initialised: base_path=%s, scaffolder=%s.",
            config.base_path,
            type(self._scaffolder).__name__,
        )

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def last_report(self) -> Optional[GenerationReport]:
        return self._report

    # -----------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------

    def generate_from_file(
        self,
        path: Union[str, Path],
        *,
        force: bool = False,
        scaffold_options: Optional[ScaffoldOptions] = None,
    ) -> GenerationReport:
        """Full pipeline: load file → validate → write artifacts → scaffold."""
        self._state = RunState.IDLE
        self._report = None
        with Timer("load_schema"):
            try:
                schema: SchemaDefinition = load_schema_file(path)
            except (OSError, SketchError):
                self._state = RunState.FAILED
                raise
        return self.generate(schema, force=force, scaffold_options=scaffold_options)

    def generate(
        self,
        schema: SchemaDefinition,
        *,
        force: bool = False,
        scaffold_options: Optional[ScaffoldOptions] = None,
    ) -> GenerationReport:
        """Write every artifact for an already parsed *schema*."""
        pipeline_start: float = time.perf_counter()
        report: GenerationReport = GenerationReport(model=schema.model)
        self._report = report
        self._state = report.state = RunState.VALIDATED

        try:
            writer: ArtifactWriter = ArtifactWriter()
            self._step_prepare_directories(schema, writer, report)
            self._step_write_artifacts(schema, writer, report, force)
        except SketchError as exc:
            report.errors.append(str(exc))
            self._state = report.state = RunState.FAILED
            report.total_elapsed_seconds = time.perf_counter() - pipeline_start
            logger.error("Generation failed for %s: %s", schema.model, exc)
            raise

        if scaffold_options is not None and scaffold_options.requested:
            self._step_scaffold(schema, scaffold_options, report)

        self._state = report.state = RunState.DONE
        report.total_elapsed_seconds = time.perf_counter() - pipeline_start
        logger.info(
            "Generation complete for %s: %d written, %d skipped in %.3fs.",
            schema.model,
            len(report.written),
            len(report.skipped),
            report.total_elapsed_seconds,
        )
        return report

    # -----------------------------------------------------------------
    # Pipeline steps
    # -----------------------------------------------------------------

    def _step_prepare_directories(
        self,
        schema: SchemaDefinition,
        writer: ArtifactWriter,
        report: GenerationReport,
    ) -> None:
        directories: Dict[Path, None] = {}
        for generator in self._generators:
            for planned in generator.plan(schema):
                directories.setdefault(planned.path.parent, None)

        with Timer("prepare_directories") as t:
            writer.ensure_directories(directories)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Prepare Directories",
            elapsed_seconds=t.elapsed,
            detail=f"{len(directories)} directories",
        ))

    def _step_write_artifacts(
        self,
        schema: SchemaDefinition,
        writer: ArtifactWriter,
        report: GenerationReport,
        force: bool,
    ) -> None:
        with Timer("write_artifacts") as t:
            for generator in self._generators:
                for planned in generator.plan(schema):
                    status: ArtifactStatus = ArtifactStatus(planned.kind, planned.path)
                    report.artifacts.append(status)
                    self._emit(schema, planned, status, writer, force)

        report.step_metrics.append(GenerationStepMetric(
            step_name="Write Artifacts",
            elapsed_seconds=t.elapsed,
            detail=(
                f"{len(report.written)} written, {len(report.skipped)} skipped, "
                f"{writer.total_bytes:,} bytes"
            ),
        ))

    def _emit(
        self,
        schema: SchemaDefinition,
        planned: PlannedArtifact,
        status: ArtifactStatus,
        writer: ArtifactWriter,
        force: bool,
    ) -> None:
        """Skip, or render and write, one planned artifact."""
        try:
            existing: Optional[Path] = writer.check_conflict(planned, force=force)
        except FileConflictError as exc:
            status.outcome = ArtifactOutcome.SKIPPED
            status.path = exc.path
            status.reason = f"already exists: {exc.path}"
            logger.warning("Skipping %s, %s.", planned.kind.value, status.reason)
            return

        try:
            artifact: Artifact = planned.build(existing)
        except SketchError:
            raise
        except Exception as exc:
            raise GenerationError(planned.kind.value, schema.model, exc) from exc

        writer.write(artifact)
        status.path = artifact.path
        status.outcome = ArtifactOutcome.WRITTEN
        logger.info("Generated %s: %s", planned.kind.value, artifact.path)

    def _step_scaffold(
        self,
        schema: SchemaDefinition,
        options: ScaffoldOptions,
        report: GenerationReport,
    ) -> None:
        with Timer("scaffold") as t:
            result: ScaffoldResult = self._scaffolder.generate(schema.class_name, options)

        report.scaffold = result
        if not result.ok:
            report.warnings.append(f"Service/repository scaffolding failed: {result.detail}")

        report.step_metrics.append(GenerationStepMetric(
            step_name="Scaffold Service/Repository",
            success=result.ok,
            elapsed_seconds=t.elapsed,
            detail=result.status.value,
        ))


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "RunState",
    "ArtifactOutcome",
    "ArtifactStatus",
    "GenerationStepMetric",
    "GenerationReport",
    "SketchGenerator",
    "read_schema_text",
    "load_schema_file",
    "load_config_file",
]

logger.debug("sketchgen.generator loaded.")
