"""
Interactive question flow for ``codescrub convert --interactive``.

Asks the same questions as the classic console converter and folds the
answers into a ConverterConfig.
"""

from dataclasses import replace

from rich.console import Console
from rich.prompt import Confirm, IntPrompt, Prompt

from codescrub.core.config import ConverterConfig
from codescrub.core.models import OutputLayout

LAYOUT_CHOICES: dict[int, tuple[OutputLayout, str]] = {
    1: (OutputLayout.SUPER_FLAT, "Super Flat (all files in one folder, prefixed with project name)"),
    2: (OutputLayout.FLAT, "Flat (organized by project name folders)"),
    3: (OutputLayout.STRUCTURED, "Structured (maintains original folder structure)"),
}


def ask_layout(console: Console, default: OutputLayout) -> OutputLayout:
    """Ask for the output layout by number until a valid choice is given."""
    console.print("\n[bold]Choose output structure:[/bold]")
    for number, (_, description) in LAYOUT_CHOICES.items():
        console.print(f"  {number}. {description}")

    default_number = next(n for n, (layout, _) in LAYOUT_CHOICES.items() if layout is default)
    choice = IntPrompt.ask(
        "Enter your choice",
        choices=[str(n) for n in LAYOUT_CHOICES],
        default=default_number,
        console=console,
    )
    return LAYOUT_CHOICES[choice][0]


def ask_options(config: ConverterConfig, console: Console) -> ConverterConfig:
    """
    Ask the processing questions and return the updated configuration.

    Current values of ``config`` are offered as defaults.

    Args:
        config: Configuration to start from (file, env and flags applied).
        console: Rich Console instance for input and output.

    Returns:
        A new ConverterConfig reflecting the answers.
    """
    filters = config.filters
    scrub = config.scrub
    output = config.output

    console.print("\n[bold cyan]=== File Processing Options ===[/bold cyan]")

    include_migrations = Confirm.ask(
        "Include migration files?", default=filters.include_migrations, console=console
    )
    migrations_folder = filters.migrations_folder
    if not include_migrations:
        migrations_folder = Prompt.ask(
            "Enter the migrations folder name", default=migrations_folder, console=console
        ).strip() or migrations_folder

    filters = replace(
        filters,
        include_migrations=include_migrations,
        migrations_folder=migrations_folder,
        include_interfaces=Confirm.ask(
            "Include interface files (I*.cs, *.interface.ts)?",
            default=filters.include_interfaces,
            console=console,
        ),
        include_tests=Confirm.ask(
            "Include test files (*.test.*, *.spec.*)?", default=filters.include_tests, console=console
        ),
        include_generated=Confirm.ask(
            "Include generated files?", default=filters.include_generated, console=console
        ),
    )

    scrub = replace(
        scrub,
        strip_docs=Confirm.ask(
            "Remove documentation comments?", default=scrub.strip_docs, console=console
        ),
        strip_empty_lines=Confirm.ask(
            "Remove empty lines?", default=scrub.strip_empty_lines, console=console
        ),
        optimize_whitespace=Confirm.ask(
            "Optimize whitespace?", default=scrub.optimize_whitespace, console=console
        ),
        strip_regions=Confirm.ask(
            "Remove region markers?", default=scrub.strip_regions, console=console
        ),
    )

    destination = ""
    while not destination:
        destination = Prompt.ask(
            "\nEnter the destination directory path",
            default=output.destination or None,
            console=console,
        )
        destination = (destination or "").strip()
        if not destination:
            console.print("[red]A destination directory is required.[/red]")

    output = replace(output, destination=destination, layout=ask_layout(console, output.layout))

    return replace(config, filters=filters, scrub=scrub, output=output)
