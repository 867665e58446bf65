"""Jinja2 template rendering — the one primitive that writes view files."""

from __future__ import annotations

import logging
import os
import re
import tempfile
import unicodedata
from datetime import datetime
from pathlib import Path
from typing import Any

from jinja2 import (
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateError,
)

from pressroom.shared.errors import RenderError

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"


def slugify(value: str) -> str:
    """Lowercase, hyphen-separated ASCII form of a tag or title for file names."""
    ascii_value = unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")
    slug = re.sub(r"[^a-z0-9]+", "-", ascii_value.lower()).strip("-")
    return slug or "untitled"


def _format_date(value: datetime | None, fmt: str = "%Y-%m-%d") -> str:
    return value.strftime(fmt) if value else ""


def _atomic_write(path: Path, content: str) -> None:
    """Write via a temp file in the same directory, then rename into place."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


class TemplateRenderer:
    """Loads templates from a site directory, falling back to the bundled ones.

    Template names are relative to the templates directory
    (e.g. ``"shows/latest.html"``).
    """

    def __init__(self, templates_dir: Path | None = None) -> None:
        search: list[Path] = []
        if templates_dir is not None:
            search.append(Path(templates_dir))
        search.append(DEFAULT_TEMPLATES_DIR)
        self.templates_dir = search[0]
        self.env = Environment(
            loader=ChoiceLoader([FileSystemLoader(str(p)) for p in search]),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self.env.filters["slugify"] = slugify
        self.env.filters["format_date"] = _format_date

    def render(self, template: str, context: dict[str, Any]) -> str:
        return self.env.get_template(template).render(**context)

    def render_template(
        self, template: str, context: dict[str, Any], output_file: Path
    ) -> Path:
        """Bind ``context`` into ``template`` and write ``output_file``.

        Raises:
            RenderError: If the template is missing or fails to render.
        """
        try:
            text = self.render(template, context)
        except (TemplateError, TypeError) as exc:
            raise RenderError(template, output_file, str(exc)) from exc
        try:
            _atomic_write(output_file, text)
        except OSError as exc:
            raise RenderError(template, output_file, str(exc)) from exc
        logger.debug("Rendered %s -> %s", template, output_file)
        return output_file
