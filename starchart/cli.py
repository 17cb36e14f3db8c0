"""
Command-line interface for body classification and strategy expansion.

This module provides a CLI for inspecting a body graph and expanding strategy
templates from the terminal.
"""

import logging
import sys
from pathlib import Path
from typing import List, Tuple

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from .classification import BodyKind
from .expander import ExpandedRecord
from .models import ExpansionReport
from .policies import BodyPolicy, CompositePolicy, DefaultPolicy, KindPolicy, SolidSurfacePolicy
from .processor import ExpansionProcessor
from .programs import ProgramId


console = Console()

KIND_CHOICES = [kind.value for kind in BodyKind]
PROGRAM_CHOICES = [program.value for program in ProgramId]


def setup_logging(verbose: int) -> None:
    """
    Route log records through rich.

    Args:
        verbose: 0 for warnings only, 1 for info, 2 or more for debug
    """
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def create_policy(kinds: Tuple[str, ...] = (), solid_only: bool = False) -> BodyPolicy:
    """
    Create a body policy based on CLI options.

    Args:
        kinds: Body kinds to keep (all classifiable bodies when empty)
        solid_only: Whether to require a solid surface

    Returns:
        Configured body policy
    """
    policies = []

    if kinds:
        policies.append(KindPolicy(*(BodyKind(k) for k in kinds)))

    if solid_only:
        policies.append(SolidSurfacePolicy())

    if policies:
        return CompositePolicy(*policies)
    else:
        return DefaultPolicy()


def open_processor(ctx: click.Context, templates: List[Path] = None) -> ExpansionProcessor:
    """Load the system document, exiting with an error message if it is invalid."""
    try:
        return ExpansionProcessor(
            system_path=ctx.obj["system"],
            template_paths=templates,
            verbose=ctx.obj["verbose"],
        )
    except (ValueError, FileNotFoundError) as e:
        console.print(f"[red]Error loading input: {escape(str(e))}[/red]")
        sys.exit(1)


def display_report(report: ExpansionReport, timing_summary: str = None) -> None:
    """
    Display the outcome of an expansion run.

    Args:
        report: Report returned by the processor
        timing_summary: Optional per-template timing breakdown
    """
    if report.disabled_reason:
        console.print(Panel(report.disabled_reason, title="Expansion disabled", border_style="yellow"))
        return

    if report.failures:
        lines = [f"  ✗ {f.template} ({f.selector}): {escape(f.error)}" for f in report.failures]
        console.print(
            Panel("\n".join(lines), title=f"{len(report.failures)} failure(s)", border_style="red")
        )

    console.print(f"[green]Expanded {report.records} record(s)[/green]")

    if timing_summary:
        console.print(Panel(timing_summary, title="Timings", border_style="blue"))


def display_records(records: List[ExpandedRecord]) -> None:
    """Print every expanded record as ConfigNode text."""
    for record in records:
        console.print(
            Panel(
                Text(record.node.to_text()),
                title=f"{record.unique_name} ({record.template} / {record.selector})",
                border_style="blue",
            )
        )


@click.group()
@click.option(
    "--system",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    required=True,
    help="Path to the body graph JSON file",
)
@click.option(
    "-v", "--verbose",
    count=True,
    help="Increase verbosity (-v, -vv)",
)
@click.pass_context
def main(ctx: click.Context, system: Path, verbose: int):
    """
    Body classification and strategy template expansion.

    Examples:

        # Show the classified hierarchy
        starchart --system system.json classify

        # List the bodies a program targets
        starchart --system system.json programs --program GasGiantProgram

        # Expand strategy templates into a file
        starchart --system system.json -v expand --templates strategies.cfg --output out.cfg
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["system"] = system
    ctx.obj["verbose"] = verbose


@main.command()
@click.option(
    "--kind",
    "kinds",
    type=click.Choice(KIND_CHOICES),
    multiple=True,
    help="Only list bodies of this kind (repeatable)",
)
@click.option(
    "--solid",
    is_flag=True,
    help="Only list bodies with a solid surface",
)
@click.pass_context
def classify(ctx: click.Context, kinds: Tuple[str, ...], solid: bool):
    """Show every body with its inferred kind."""
    with open_processor(ctx) as processor:
        console.print(Panel(Text(processor.format_tree()), title=str(ctx.obj["system"]), border_style="blue"))

        policy = create_policy(kinds, solid)
        selected = [b for b in processor.graph if policy.accept(b, processor.classifier)]
        if not selected:
            console.print("[yellow]No bodies match the given filters[/yellow]")
            return
        for body in selected:
            console.print(f"  • {body.name}: {processor.classifier.classify(body).value}")


@main.command()
@click.option(
    "--program",
    "program_ids",
    type=click.Choice(PROGRAM_CHOICES),
    multiple=True,
    help="Program to resolve (repeatable, defaults to all)",
)
@click.option(
    "--home",
    type=str,
    default=None,
    help="Name of the body to treat as home",
)
@click.pass_context
def programs(ctx: click.Context, program_ids: Tuple[str, ...], home: str):
    """List the bodies each program targets."""
    with open_processor(ctx) as processor:
        for program_id in program_ids or PROGRAM_CHOICES:
            try:
                bodies = processor.resolve_program(program_id, home)
            except ValueError as e:
                console.print(f"[red]{escape(str(e))}[/red]")
                sys.exit(1)

            content = "\n".join(f"  • {b.name}" for b in bodies) or "No bodies"
            border_style = "green" if bodies else "yellow"
            console.print(Panel(content, title=program_id, border_style=border_style))


@main.command()
@click.option(
    "--templates",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    multiple=True,
    required=True,
    help="Strategy template file (repeatable)",
)
@click.option(
    "--output",
    type=click.Path(path_type=Path),
    default=None,
    help="Optional output file for the expanded records",
)
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["json", "cfg"]),
    default=None,
    help="Output format (detected from the output suffix by default)",
)
@click.pass_context
def expand(ctx: click.Context, templates: Tuple[Path, ...], output: Path, fmt: str):
    """Expand strategy templates over the body graph."""
    verbose = ctx.obj["verbose"]
    with open_processor(ctx, list(templates)) as processor:
        records, report = processor.expand()
        display_report(
            report, processor.orchestrator.format_timing_summary() if verbose else None
        )

        if verbose and records:
            display_records(records)

        if output and not report.disabled_reason:
            processor.export_results(records, output, fmt)
            console.print(f"[green]Results saved to {output}[/green]")

        if report.failures:
            sys.exit(1)


if __name__ == "__main__":
    main()
