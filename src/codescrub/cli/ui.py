"""
UI components for the codescrub CLI.

Provides styled terminal output using Rich: the header, conversion
summary, error list and the capability table.
"""

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from codescrub import __version__
from codescrub.core.scanners.registry import ScannerRegistry
from codescrub.services.conversion_models import ConversionOutcome

# Errors listed before the rest are summarised as a count
MAX_ERRORS_SHOWN = 20


def render_header(console: Console) -> None:
    """Render the application header."""
    header = Text()
    header.append("Code File Converter", style="bold cyan")
    header.append(f" v{__version__}\n", style="dim")
    header.append("Supports .NET solutions, Angular/web projects and Python packages", style="white")
    console.print(Panel(header, border_style="cyan", padding=(0, 2), expand=False))


def render_outcome(outcome: ConversionOutcome, console: Console) -> None:
    """
    Render the conversion summary and, if any, the error details.

    Args:
        outcome: Result of the conversion run.
        console: Rich Console instance for output.
    """
    summary = Table.grid(padding=1)
    summary.add_column(style="bold")
    summary.add_column()

    summary.add_row("Total files processed:", str(outcome.total))
    summary.add_row("Successfully converted:", f"[green]{outcome.succeeded}[/green]")
    failed_style = "red" if outcome.failed else "green"
    summary.add_row("Errors encountered:", f"[{failed_style}]{outcome.failed}[/{failed_style}]")

    if outcome.has_failures:
        title = "[bold yellow]Conversion Completed With Errors[/bold yellow]"
        border = "yellow"
    else:
        title = "[bold green]Conversion Complete[/bold green]"
        border = "green"
    console.print(Panel(summary, title=title, border_style=border, expand=False))

    if outcome.errors:
        console.print("\n[bold red]Error details:[/bold red]")
        for message in outcome.errors[:MAX_ERRORS_SHOWN]:
            console.print(f"  - {message}", markup=False, highlight=False)
        if len(outcome.errors) > MAX_ERRORS_SHOWN:
            console.print(f"  ... and {len(outcome.errors) - MAX_ERRORS_SHOWN} more")


def render_languages(registry: ScannerRegistry, console: Console) -> None:
    """Render the registered source kinds and their filename patterns."""
    table = Table(
        title="Supported Source Kinds",
        title_style="bold cyan",
        border_style="blue",
        show_header=True,
        header_style="bold white",
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Kind", style="green", no_wrap=True)
    table.add_column("Patterns", style="white")

    for i, kind in enumerate(registry.kinds, start=1):
        table.add_row(str(i), kind.value, ", ".join(registry.patterns_for(kind)))

    console.print(table)


def render_error(message: str, console: Console) -> None:
    """Render an error message in the CLI's error style."""
    console.print(f"[bold red]Error:[/bold red] {escape(message)}")
