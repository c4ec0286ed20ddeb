"""
CLI Interface
=============
Command-line interface for the fruit parser engine.

Usage:
    python -m fruit_parser parse <yaml_path> [options]
    python -m fruit_parser scan <yaml_path>
    python -m fruit_parser emit [--output FILE]

Use "-" (the default) as the path to read from stdin.
"""

from __future__ import annotations

import json
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from . import __version__
from .emitter import SAMPLE_FRUITS, emit_fruits
from .engine import ParserConfig, ParserEngine
from .errors import FruitParserError
from .events import format_scan, yaml_events

console = Console()

STDIN = "-"


@click.group()
@click.version_option(version=__version__, prog_name="fruit-parser")
def cli():
    """Fruit Parser: event-driven YAML fruit inventory parser."""
    pass


@cli.command()
@click.argument(
    "yaml_path",
    default=STDIN,
    type=click.Path(exists=True, dir_okay=False, allow_dash=True),
)
@click.option(
    "--output", "-o",
    default=None,
    help="Directory to write <name>_parsed.json into",
)
@click.option(
    "--log-level",
    default="WARNING",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level",
)
@click.option(
    "--log-file",
    default=None,
    help="Path to log file",
)
@click.option(
    "--trace",
    is_flag=True,
    default=False,
    help="Log every state transition",
)
@click.option(
    "--plain",
    is_flag=True,
    default=False,
    help="Print one line per fruit and variety",
)
@click.option(
    "--json-output",
    is_flag=True,
    default=False,
    help="Output only JSON result to stdout (for programmatic use)",
)
def parse(
    yaml_path: str,
    output: str,
    log_level: str,
    log_file: str,
    trace: bool,
    plain: bool,
    json_output: bool,
):
    """Parse a fruit YAML document into structured records."""

    if json_output:
        # Suppress console output for JSON mode
        log_level = "ERROR"
        trace = False

    config = ParserConfig(
        log_level=log_level,
        log_file=log_file,
        trace_events=trace,
        output_dir=output,
    )

    try:
        engine = ParserEngine(config)
        if yaml_path == STDIN:
            result = engine.parse_stream(
                click.get_text_stream("stdin"), source="<stdin>"
            )
        else:
            result = engine.parse(yaml_path)
    except (FruitParserError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/] {escape(str(e))}")
        sys.exit(1)

    if json_output:
        print(json.dumps(
            result.model_dump(),
            indent=2,
            ensure_ascii=False,
            default=str,
        ))
    elif plain:
        _print_plain(result.fruits)
    else:
        _display_results(result)


@cli.command()
@click.argument(
    "yaml_path",
    default=STDIN,
    type=click.Path(exists=True, dir_okay=False, allow_dash=True),
)
def scan(yaml_path: str):
    """Print the YAML event stream of a document, indented by depth."""

    with click.open_file(yaml_path, "rb") as f:
        try:
            for line in format_scan(yaml_events(f)):
                click.echo(line)
        except FruitParserError as e:
            console.print(f"[red]Failed to parse:[/] {escape(str(e))}")
            sys.exit(1)


@cli.command()
@click.option(
    "--output", "-o",
    default=STDIN,
    type=click.Path(dir_okay=False, writable=True, allow_dash=True),
    help="File to write (default: stdout)",
)
def emit(output: str):
    """Write the sample fruit inventory as YAML."""

    with click.open_file(output, "w", encoding="utf-8") as f:
        emit_fruits(SAMPLE_FRUITS, f)


# ─── Display Helpers ──────────────────────────────────────────────────────────


def _print_plain(fruits):
    """One line per fruit, indented line per variety."""
    for fruit in fruits:
        click.echo(
            f"fruit: name={fruit.name}, color={fruit.color}, "
            f"count={fruit.count}"
        )
        for variety in fruit.varieties:
            seedless = "true" if variety.seedless else "false"
            click.echo(
                f"  variety: name={variety.name}, color={variety.color}, "
                f"seedless={seedless}"
            )


def _display_results(result):
    """Display parse results in formatted tables."""
    console.print()
    console.print(
        Panel.fit(
            f"[bold cyan]Fruit Parser v{__version__}[/]\n"
            f"[dim]Source: {result.source}[/]",
            border_style="cyan",
        )
    )

    table = Table(title="Fruits", border_style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Color")
    table.add_column("Count", justify="right")
    table.add_column("Varieties")

    for fruit in result.fruits:
        varieties = ", ".join(
            f"{escape(v.name)} ({escape(v.color)}{', seedless' if v.seedless else ''})"
            for v in fruit.varieties
        )
        table.add_row(
            escape(fruit.name),
            escape(fruit.color),
            str(fruit.count),
            varieties or "[dim]-[/]",
        )

    console.print(table)
    console.print()

    _display_validation_table(result.validation.model_dump())

    pv = result.parse_version
    console.print(
        f"[dim]Parser v{pv.parser_version} | "
        f"Events: {pv.event_count} | "
        f"Fruits: {pv.fruit_count} | "
        f"Timestamp: {pv.parse_timestamp}[/]"
    )
    console.print()


def _display_validation_table(validation: dict):
    """Display validation report as a rich table."""
    table = Table(title="Inventory Report", border_style="green")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Status", justify="center")

    def status_icon(count, threshold=0):
        if count <= threshold:
            return "[green]✓[/]"
        return "[yellow]⚠[/]"

    total = validation.get("total_fruits", 0)
    table.add_row(
        "Total Fruits",
        str(total),
        "[green]✓[/]" if total > 0 else "[red]✗[/]",
    )
    table.add_row(
        "Total Varieties",
        str(validation.get("total_varieties", 0)),
        "",
    )

    for label, key in [
        ("Fruits Without Varieties", "fruits_without_varieties"),
        ("Fruits With Zero Count", "fruits_with_zero_count"),
        ("Duplicate Fruit Names", "duplicate_names"),
    ]:
        items = validation.get(key, [])
        table.add_row(label, str(len(items)), status_icon(len(items)))

    console.print(table)
    console.print()

    breakdown = validation.get("anomaly_breakdown", {})
    if breakdown:
        anomaly_table = Table(
            title="Anomaly Breakdown",
            border_style="yellow",
        )
        anomaly_table.add_column("Type", style="bold")
        anomaly_table.add_column("Count", justify="right")

        for atype, count in sorted(breakdown.items()):
            anomaly_table.add_row(atype, str(count))

        console.print(anomaly_table)
        console.print()


# ─── Entry point (for python -m fruit_parser.cli) ─────────────────────────────


if __name__ == "__main__":
    cli()
