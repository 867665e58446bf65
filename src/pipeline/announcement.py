"""Announcement propagation — one banner record → every _project.yaml.

Each project file ends up in exactly one of two states: it carries an
``announcement`` equal to the global record, or it has no
``announcement`` key at all.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from pressroom.content.discovery import match_patterns
from pressroom.content.models import AnnouncementRecord
from pressroom.pipeline.context import BuildContext
from pressroom.shared.errors import MetadataError, PipelineReport
from pressroom.views.render import _atomic_write

logger = logging.getLogger(__name__)

ANNOUNCEMENT_FILE = "announcement.yaml"
PROJECT_PATTERN = "**/_project.yaml"
DUMP_WIDTH = 1000
STEP = "announcement"


def load_announcement(path: Path) -> AnnouncementRecord:
    """Read the global announcement record.

    Raises:
        MetadataError: If the file is missing, unparseable, or malformed.
    """
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        return AnnouncementRecord.model_validate(raw)
    except (OSError, yaml.YAMLError, ValidationError) as exc:
        raise MetadataError(f"Could not load announcement {path}: {exc}") from exc


def find_project_files(content_dir: Path) -> list[Path]:
    relative = [p.relative_to(content_dir).as_posix() for p in content_dir.rglob("_project.yaml")]
    return [content_dir / rel for rel in match_patterns(relative, [PROJECT_PATTERN])]


def dump_yaml(data: dict[str, Any]) -> str:
    return yaml.safe_dump(
        data,
        width=DUMP_WIDTH,
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )


def with_announcement(project: dict[str, Any], record: AnnouncementRecord) -> dict[str, Any]:
    """Return ``project`` with its announcement replaced or removed.

    An existing ``announcement`` key keeps its position in the file.
    """
    if not record.enabled:
        return {k: v for k, v in project.items() if k != "announcement"}
    banner: dict[str, str] = {"description": record.description}
    if record.background:
        banner["background"] = record.background
    updated = dict(project)
    updated["announcement"] = banner
    return updated


def apply_announcement(
    record: AnnouncementRecord,
    project_files: list[Path],
    *,
    report: PipelineReport | None = None,
) -> list[Path]:
    """Add or remove the announcement in each file.

    A file that cannot be parsed is logged (and recorded on ``report``)
    without stopping the rest. Files whose bytes would not change are
    left untouched.

    Returns:
        Paths of files that were rewritten.
    """
    changed: list[Path] = []
    for path in project_files:
        try:
            original = path.read_text(encoding="utf-8")
            project = yaml.safe_load(original) or {}
            if not isinstance(project, dict):
                raise MetadataError(f"{path} is not a YAML mapping")
        except (OSError, yaml.YAMLError, MetadataError) as exc:
            logger.warning("Skipping project file %s: %s", path, exc)
            if report is not None:
                report.add_error(STEP, str(exc), path)
            continue

        text = dump_yaml(with_announcement(project, record))
        if text == original:
            continue
        _atomic_write(path, text)
        changed.append(path)

    logger.info(
        "Announcement %s in %d of %d project file(s)",
        "applied" if record.enabled else "removed",
        len(changed),
        len(project_files),
    )
    return changed


def propagate_announcement(ctx: BuildContext) -> list[Path]:
    """Read ``<data>/announcement.yaml`` and apply it across the content tree."""
    record = load_announcement(ctx.config.paths.data_dir / ANNOUNCEMENT_FILE)
    files = find_project_files(ctx.content_dir)
    return apply_announcement(record, files, report=ctx.report)
