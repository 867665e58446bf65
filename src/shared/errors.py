"""Error types and per-run failure reporting.

Every build step raises a subclass of ``PressroomError``. Steps that
isolate failures (announcement propagation, the orchestrator) record them
on a ``PipelineReport`` instead of raising, so the CLI can print one
summary and exit non-zero.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class PressroomError(Exception):
    """Base class for all pipeline failures."""


class DiscoveryError(PressroomError):
    """A content source could not be found, read, or identified uniquely."""


class MetadataError(PressroomError):
    """A YAML metadata file failed to parse or has the wrong shape."""


class FetchError(PressroomError):
    """An external catalog request failed."""


class RenderError(PressroomError):
    """A template could not be loaded or rendered into its output file."""

    def __init__(self, template: str, output_file: Path, reason: str) -> None:
        self.template = template
        self.output_file = output_file
        super().__init__(f"Failed to render {template} -> {output_file}: {reason}")


class UnsortedItemsError(PressroomError):
    """Items passed to an order-sensitive view are not in the declared order."""


class PipelineError(BaseModel):
    """One recorded failure."""

    step: str
    message: str
    path: str = ""


class PipelineReport(BaseModel):
    """Failures and outputs collected over one build run."""

    errors: list[PipelineError] = Field(default_factory=list)
    written: dict[str, list[str]] = Field(default_factory=dict)

    def add_error(self, step: str, message: str, path: Path | str = "") -> None:
        logger.error("[%s] %s%s", step, message, f" ({path})" if path else "")
        self.errors.append(PipelineError(step=step, message=message, path=str(path)))

    def add_written(self, step: str, paths: list[Path]) -> None:
        self.written.setdefault(step, []).extend(str(p) for p in paths)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    def summary(self) -> str:
        total = sum(len(v) for v in self.written.values())
        if not self.errors:
            return f"{total} file(s) written, no errors"
        return f"{total} file(s) written, {len(self.errors)} error(s)"
