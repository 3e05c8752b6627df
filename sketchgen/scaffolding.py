# File: sketchgen/scaffolding.py
"""
Sketchgen - Service/Repository Scaffolding
============================================
Optional hand-off to an external tool that creates service and repository
classes for the generated model.

The orchestrator only talks to the ``Scaffolder`` protocol.  Two
implementations ship here:

    NullScaffolder      feature disabled; always reports "skipped"
    CommandScaffolder   runs a configured command (``php artisan ...``)

Scaffolding is best effort: a failing command is logged and recorded in
the result, it never aborts a generation run.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from enum import Enum
from typing import List, Protocol, Sequence

# ---------------------------------------------------------------------------
# Logger
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("sketchgen.scaffolding")


@dataclass(frozen=True, slots=True)
class ScaffoldOptions:
    """Which scaffolding modes the caller asked for."""

    service_repository: bool = False
    service_only: bool = False
    repository_only: bool = False

    @property
    def requested(self) -> bool:
        return self.service_repository or self.service_only or self.repository_only

    @property
    def flags(self) -> List[str]:
        """Command-line flags, one per requested mode."""
        flags: List[str] = []
        if self.service_repository:
            flags.append("--service-repository")
        if self.service_only:
            flags.append("--service-only")
        if self.repository_only:
            flags.append("--repository-only")
        return flags


class ScaffoldStatus(str, Enum):
    SKIPPED = "skipped"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class ScaffoldResult:
    model: str
    status: ScaffoldStatus
    detail: str = ""

    @property
    def ok(self) -> bool:
        return self.status is not ScaffoldStatus.FAILED


class Scaffolder(Protocol):
    def generate(self, model_name: str, options: ScaffoldOptions) -> ScaffoldResult:
        ...


class NullScaffolder:
    """Scaffolding disabled."""

    def generate(self, model_name: str, options: ScaffoldOptions) -> ScaffoldResult:
        logger.debug("Scaffolding disabled; nothing to do for %s.", model_name)
        return ScaffoldResult(model_name, ScaffoldStatus.SKIPPED, "scaffolding disabled")


class CommandScaffolder:
    """
    Runs ``command + [model_name] + flags`` in a subprocess.

    A missing executable or a non-zero exit status yields a FAILED result
    with the captured stderr as detail.
    """

    def __init__(self, command: Sequence[str], *, timeout: float = 120.0) -> None:
        if not command:
            raise ValueError("Scaffold command must not be empty.")
        self._command: List[str] = list(command)
        self._timeout: float = timeout

    @property
    def command(self) -> List[str]:
        return list(self._command)

    def generate(self, model_name: str, options: ScaffoldOptions) -> ScaffoldResult:
        if not options.requested:
            return ScaffoldResult(model_name, ScaffoldStatus.SKIPPED, "no mode requested")

        argv: List[str] = [*self._command, model_name, *options.flags]
        logger.info("Running scaffold command: %s", " ".join(argv))
        try:
            completed = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                check=False,
                timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.error("Scaffold command failed for %s: %s", model_name, exc)
            return ScaffoldResult(model_name, ScaffoldStatus.FAILED, str(exc))

        if completed.returncode != 0:
            detail: str = (completed.stderr or completed.stdout).strip()
            logger.error(
                "Scaffold command exited with %d for %s: %s",
                completed.returncode,
                model_name,
                detail,
            )
            return ScaffoldResult(
                model_name,
                ScaffoldStatus.FAILED,
                detail or f"exit status {completed.returncode}",
            )

        logger.info("Scaffolded service/repository for %s.", model_name)
        return ScaffoldResult(model_name, ScaffoldStatus.SUCCEEDED, completed.stdout.strip())


__all__: List[str] = [
    "ScaffoldOptions",
    "ScaffoldStatus",
    "ScaffoldResult",
    "Scaffolder",
    "NullScaffolder",
    "CommandScaffolder",
]

logger.debug("sketchgen.scaffolding loaded.")
