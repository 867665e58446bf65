"""Top-level orchestration — runs the build steps and reports failures.

Steps write to disjoint output trees, so they run concurrently, each in a
worker thread. A failing step does not cancel its siblings; every failure
lands on the report and the run as a whole counts as failed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from pathlib import Path

from pressroom.integrations.youtube import VideoCatalog, YouTubeCatalog
from pressroom.pipeline.announcement import STEP as ANNOUNCEMENT_STEP
from pressroom.pipeline.announcement import propagate_announcement
from pressroom.pipeline.context import BuildContext
from pressroom.pipeline.sections import SECTIONS, run_section
from pressroom.pipeline.shows import build_shows
from pressroom.shared.errors import PipelineReport, PressroomError

logger = logging.getLogger(__name__)

SHOWS_STEP = "shows"
DEFAULT_STEPS = [
    ANNOUNCEMENT_STEP,
    "fundamentals",
    "showcase",
    "tools",
    "updates",
    SHOWS_STEP,
    "site-kit",
]


def available_steps() -> list[str]:
    return list(DEFAULT_STEPS)


def _step_runner(
    step: str, ctx: BuildContext, catalog: VideoCatalog | None
) -> Callable[[], list[Path]]:
    if step == ANNOUNCEMENT_STEP:
        return lambda: propagate_announcement(ctx)
    if step == SHOWS_STEP:
        video_catalog = catalog or YouTubeCatalog(ctx.config.youtube)
        return lambda: build_shows(ctx, video_catalog)
    if step in SECTIONS:
        spec = SECTIONS[step]
        return lambda: run_section(spec, ctx)
    raise ValueError(f"Unknown build step: {step!r}")


async def _run_step(step: str, runner: Callable[[], list[Path]], report: PipelineReport) -> None:
    logger.info("Starting %s", step)
    try:
        written = await asyncio.to_thread(runner)
    except (PressroomError, OSError) as exc:
        report.add_error(step, str(exc))
        return
    report.add_written(step, written)
    logger.info("Finished %s (%d file(s))", step, len(written))


async def run_build(
    ctx: BuildContext,
    steps: list[str] | None = None,
    *,
    catalog: VideoCatalog | None = None,
) -> PipelineReport:
    """Run ``steps`` (default: all) concurrently and return the report.

    Raises:
        ValueError: If a step name is unknown (checked before anything runs).
    """
    selected = steps or DEFAULT_STEPS
    runners = {step: _step_runner(step, ctx, catalog) for step in selected}
    await asyncio.gather(
        *(_run_step(step, runner, ctx.report) for step, runner in runners.items())
    )
    return ctx.report


def build(
    ctx: BuildContext,
    steps: list[str] | None = None,
    *,
    catalog: VideoCatalog | None = None,
) -> PipelineReport:
    """Synchronous entry point for ``run_build``."""
    return asyncio.run(run_build(ctx, steps, catalog=catalog))
