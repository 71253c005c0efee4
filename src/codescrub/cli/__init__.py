"""
CLI for codescrub.

Provides the command-line interface for converting source trees into
scrubbed plain-text mirrors.
"""

import logging
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
)

from codescrub.cli.prompts import ask_options
from codescrub.cli.ui import render_error, render_header, render_languages, render_outcome
from codescrub.core.config import ConverterConfig, LoggingConfig, load_config
from codescrub.core.errors import CodescrubError, ConfigError
from codescrub.core.models import OutputLayout
from codescrub.core.path_utils import validate_source_root
from codescrub.core.projects import is_project_root
from codescrub.core.scanners.registry import get_default_registry
from codescrub.services import ConversionService

# Initialize Rich Console
console = Console()

app = typer.Typer(
    name="codescrub",
    help="Convert source trees into plain-text mirrors without comments",
    add_completion=False,
)


def configure_logging(config: LoggingConfig, verbose: bool = False) -> None:
    """Configure the root logger once for the CLI run."""
    level = logging.DEBUG if verbose else getattr(logging, config.level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=config.format, force=True)


def _load(config_path: Optional[Path]) -> ConverterConfig:
    load_dotenv()
    try:
        return load_config(config_path)
    except (FileNotFoundError, ConfigError) as e:
        render_error(str(e), console)
        raise typer.Exit(1)


def _apply_flags(config: ConverterConfig, **flags) -> ConverterConfig:
    """Overlay command-line flags that were given; None means 'not given'."""
    sections: dict[str, dict] = {}
    owners = {
        "include_migrations": "filters",
        "migrations_folder": "filters",
        "include_interfaces": "filters",
        "include_tests": "filters",
        "include_generated": "filters",
        "respect_gitignore": "filters",
        "strip_docs": "scrub",
        "strip_regions": "scrub",
        "strip_empty_lines": "scrub",
        "optimize_whitespace": "scrub",
        "layout": "output",
        "destination": "output",
    }
    for key, value in flags.items():
        if value is not None:
            sections.setdefault(owners[key], {})[key] = value

    for section, changes in sections.items():
        config = replace(config, **{section: replace(getattr(config, section), **changes)})
    return config


@app.command()
def convert(
    source: Path = typer.Argument(..., help="Project directory to convert"),
    dest: Optional[Path] = typer.Option(None, "--dest", "-d", help="Destination directory"),
    layout: Optional[str] = typer.Option(
        None, "--layout", "-l", help="Output layout: super-flat, flat or structured"
    ),
    strip_docs: Optional[bool] = typer.Option(
        None, "--strip-docs/--keep-docs", help="Remove documentation comments"
    ),
    strip_empty_lines: Optional[bool] = typer.Option(
        None, "--strip-empty-lines/--keep-empty-lines", help="Remove empty lines"
    ),
    strip_regions: Optional[bool] = typer.Option(
        None, "--strip-regions/--keep-regions", help="Remove region marker lines"
    ),
    optimize_whitespace: Optional[bool] = typer.Option(
        None, "--optimize-whitespace/--keep-whitespace", help="Compact whitespace"
    ),
    exclude_migrations: bool = typer.Option(
        False, "--exclude-migrations", help="Skip the migrations folder"
    ),
    migrations_folder: Optional[str] = typer.Option(
        None, "--migrations-folder", help="Name of the migrations folder"
    ),
    exclude_interfaces: bool = typer.Option(
        False, "--exclude-interfaces", help="Skip interface files"
    ),
    exclude_tests: bool = typer.Option(False, "--exclude-tests", help="Skip test files and folders"),
    exclude_generated: bool = typer.Option(
        False, "--exclude-generated", help="Skip generated files"
    ),
    respect_gitignore: bool = typer.Option(
        False, "--respect-gitignore", help="Skip files ignored by .gitignore"
    ),
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON configuration file"
    ),
    interactive: bool = typer.Option(
        False, "--interactive", "-i", help="Ask for the options interactively"
    ),
    force: bool = typer.Option(
        False, "--force", "-f", help="Convert even if no project descriptor is found"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """Convert a project directory into scrubbed text files."""
    config = _load(config_path)

    try:
        config = _apply_flags(
            config,
            include_migrations=False if exclude_migrations else None,
            migrations_folder=migrations_folder,
            include_interfaces=False if exclude_interfaces else None,
            include_tests=False if exclude_tests else None,
            include_generated=False if exclude_generated else None,
            respect_gitignore=True if respect_gitignore else None,
            strip_docs=strip_docs,
            strip_regions=strip_regions,
            strip_empty_lines=strip_empty_lines,
            optimize_whitespace=optimize_whitespace,
            layout=OutputLayout.parse(layout) if layout is not None else None,
            destination=str(dest) if dest is not None else None,
        )
    except ConfigError as e:
        render_error(str(e), console)
        raise typer.Exit(1)

    configure_logging(config.logging, verbose)

    validation = validate_source_root(source)
    if not validation.valid:
        render_error(validation.error_message, console)
        raise typer.Exit(1)

    if not force and not is_project_root(source):
        render_error(
            f"'{source}' is not a project directory. It should contain a .sln file, "
            "an angular.json or package.json file, or a pyproject.toml. Use --force to convert anyway.",
            console,
        )
        raise typer.Exit(1)

    if interactive:
        render_header(console)
        config = ask_options(config, console)

    if not config.output.destination:
        render_error("No destination directory given. Use --dest or set output.destination.", console)
        raise typer.Exit(1)

    console.print(f"[bold blue]Converting[/bold blue] {source} -> {config.output.destination}...")

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TaskProgressColumn(),
            console=console,
            transient=True,
        ) as progress:
            task = progress.add_task("Scanning files...", total=None)

            def update_progress(current: int, total: int, message: str) -> None:
                progress.update(
                    task, completed=current, total=total, description=f"Converting {current}/{total}"
                )

            service = ConversionService(progress_callback=update_progress)
            outcome = service.convert(source, config)
    except CodescrubError as e:
        render_error(str(e), console)
        raise typer.Exit(1)

    render_outcome(outcome, console)
    if outcome.has_failures:
        raise typer.Exit(1)


@app.command()
def languages():
    """Show the supported source kinds and their filename patterns."""
    render_languages(get_default_registry(), console)


@app.command()
def config(
    config_path: Optional[Path] = typer.Option(
        None, "--config", "-c", help="YAML or JSON configuration file"
    ),
    output_format: str = typer.Option("yaml", "--format", help="Output format: yaml or json"),
):
    """Print the effective configuration (defaults, file and environment)."""
    cfg = _load(config_path)
    if output_format == "json":
        console.print_json(cfg.to_json())
    elif output_format == "yaml":
        console.print(cfg.to_yaml(), markup=False, highlight=False)
    else:
        render_error(f"Unsupported format: {output_format}. Use yaml or json.", console)
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
