"""CLI interface for pressroom."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from pressroom.config import load_config, merge_cli_overrides
from pressroom.logging_setup import configure_logging, console
from pressroom.pipeline.build import available_steps, build
from pressroom.pipeline.context import BuildContext
from pressroom.shared.errors import PipelineReport

app = typer.Typer(
    name="pressroom",
    help="Build listing pages, tag pages, TOCs, widgets and feeds for the docs site.",
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        from pressroom import __version__

        console.print(f"pressroom {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = False,
) -> None:
    """Pressroom - generated views for the documentation site."""
    pass


def _print_report(report: PipelineReport) -> None:
    for step, paths in sorted(report.written.items()):
        console.print(f"  - {step}: {len(paths)} file(s)")
    if report.has_errors:
        console.print()
        console.print("[bold red]Failures:[/bold red]")
        for error in report.errors:
            where = f" ({error.path})" if error.path else ""
            console.print(f"  - [red]{error.step}[/red]: {error.message}{where}")
    console.print()
    colour = "red" if report.has_errors else "green"
    console.print(f"[bold {colour}]{report.summary()}[/bold {colour}]")


@app.command("build")
def build_cmd(
    steps: Annotated[
        Optional[list[str]],
        typer.Argument(help="Steps to run (default: all). See `pressroom steps`."),
    ] = None,
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .pressroom.toml file."),
    ] = None,
    content_dir: Annotated[
        Optional[str],
        typer.Option("--content-dir", help="Content root (e.g. src/content/en)."),
    ] = None,
    templates_dir: Annotated[
        Optional[str],
        typer.Option("--templates-dir", help="Site templates overriding the bundled ones."),
    ] = None,
    data_dir: Annotated[
        Optional[str],
        typer.Option("--data-dir", help="Directory holding announcement.yaml."),
    ] = None,
    build_rss: Annotated[
        Optional[bool],
        typer.Option("--rss/--no-rss", help="Build RSS/Atom feeds (the expensive path)."),
    ] = None,
    min_feed_date: Annotated[
        Optional[int],
        typer.Option("--min-feed-date", help="Oldest year that gets a yearly feed."),
    ] = None,
    build_type: Annotated[
        Optional[str],
        typer.Option("--build-type", help="development or production."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Debug logging."),
    ] = False,
) -> None:
    """Build the generated views.

    Runs every step concurrently and exits with status 1 if any failed.
    """
    configure_logging(verbose)

    unknown = [s for s in steps or [] if s not in available_steps()]
    if unknown:
        console.print(f"[red]Error:[/red] Unknown step(s): {', '.join(unknown)}")
        console.print(f"Available: {', '.join(available_steps())}")
        raise typer.Exit(2)

    config = merge_cli_overrides(
        load_config(config_path),
        content_dir=content_dir,
        templates_dir=templates_dir,
        data_dir=data_dir,
        build_rss=build_rss,
        min_feed_date=min_feed_date,
        build_type=build_type,
    )
    ctx = BuildContext.from_config(config)

    console.print(f"Building from: {config.paths.content_dir}")
    report = build(ctx, steps or None)
    _print_report(report)
    if report.has_errors:
        raise typer.Exit(1)


@app.command("announcement")
def announcement_cmd(
    config_path: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to a .pressroom.toml file."),
    ] = None,
) -> None:
    """Add or remove the site announcement in every _project.yaml."""
    build_cmd(steps=["announcement"], config_path=config_path)


@app.command("steps")
def steps_cmd() -> None:
    """List the available build steps."""
    for step in available_steps():
        console.print(step)
