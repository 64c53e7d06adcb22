"""CLI entry point for grammar-converters.

Invoked as::

    grammar-converters [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m grammarconv.cli.main

Commands
--------
export      Convert grammar files and write one output file per grammar
check       Run the reachability closure and list its diagnostics
version     Show version information
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from grammarconv.diagnostics import Diagnostic
    from grammarconv.model.nodes import Catalogs, Grammar

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

_TARGET_CHOICES = ["bnf", "srgs", "abnf"]


def _configure_logging(verbose: bool) -> None:
    """Route library logging through rich when ``--verbose`` is given."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _severity_color(severity_name: str) -> str:
    """Map a DiagnosticSeverity name to a Rich color string."""
    colors = {
        "ERROR": "red",
        "WARNING": "yellow",
        "INFORMATION": "blue",
        "HINT": "dim",
    }
    return colors.get(severity_name, "white")


def _print_diagnostics(title: str, diagnostics: list["Diagnostic"]) -> None:
    table = Table(title=title, show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=6)
    table.add_column("Rule", min_width=10)
    table.add_column("Message")

    for d in diagnostics:
        color = _severity_color(d.severity.name)
        table.add_row(
            f"[{color}]{d.severity.name}[/{color}]",
            d.code,
            d.rule,
            escape(d.message) + (f"\n[dim]hint: {escape(d.suggestion)}[/dim]" if d.suggestion else ""),
        )
    err_console.print(table)


def _load_catalogs_or_exit(path: str | None) -> "Catalogs":
    """Load catalogs from ``path``; empty catalogs when no path is given."""
    from grammarconv import load_catalogs
    from grammarconv.model import Catalogs

    if path is None:
        err_console.print(
            "[yellow]Warning:[/yellow] No --catalogs file given; "
            "terminal rules will be empty."
        )
        return Catalogs()
    try:
        return load_catalogs(path)
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except (OSError, ValueError) as exc:
        err_console.print(f"[red]Error:[/red] Cannot load catalogs from {path}: {escape(str(exc))}")
        sys.exit(1)


def _load_grammar(path: str) -> "Grammar | None":
    """Load one grammar file, printing the reason and returning None on failure."""
    from grammarconv import load_grammar
    from grammarconv.parser import GrammarParseErrorCollection

    try:
        return load_grammar(path)
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
    except GrammarParseErrorCollection as exc:
        err_console.print(f"[red]Parse errors[/red] in {path}:")
        for error in exc.errors:
            err_console.print(f"  {escape(str(error))}")
    except (OSError, ValueError) as exc:
        err_console.print(f"[red]Error:[/red] Cannot load {path}: {escape(str(exc))}")
    return None


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="grammar-converters")
def cli() -> None:
    """Export command-generator grammars as BNF or SRGS speech grammars."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from grammarconv import __version__
    from grammarconv.converters import available_targets

    table = Table(show_header=False, box=None)
    table.add_row("[bold]grammar-converters[/bold]", f"v{__version__}")
    table.add_row("Targets", ", ".join(available_targets()))
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# export command
# ---------------------------------------------------------------------------


@cli.command(name="export")
@click.argument("output_path", type=click.Path(dir_okay=False))
@click.argument("grammar_files", nargs=-1, required=True, type=click.Path())
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(_TARGET_CHOICES, case_sensitive=False),
    default="bnf",
    help="Output format (default: bnf).",
)
@click.option("--catalogs", "-c", "catalogs_path", default=None, help="YAML or JSON catalogs file.")
@click.option("--overwrite", "-w", is_flag=True, default=False, help="Overwrite existing files without asking.")
@click.option(
    "--answers/--no-answers",
    default=False,
    help="Add the hand-written answer rules (BNF only).",
)
@click.option("--no-comments", is_flag=True, default=False, help="Omit section comments (BNF only).")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log conversion progress.")
def export_command(
    output_path: str,
    grammar_files: tuple[str, ...],
    output_format: str,
    catalogs_path: str | None,
    overwrite: bool,
    answers: bool,
    no_comments: bool,
    verbose: bool,
) -> None:
    """Convert GRAMMAR_FILES and write one file per grammar.

    OUTPUT_PATH is a file path whose stem prefixes every output file;
    the grammar name and the format's extension are appended.

    Examples:

    \b
        grammar-converters export out/gpsr.bnf cat1.txt cat2.txt -c catalogs.yaml
        grammar-converters export out/gpsr cat1.yaml --format srgs -w
    """
    from grammarconv.converters import ConverterOptions, export_path, get_target, save
    from grammarconv.diagnostics import DiagnosticCollector
    from grammarconv.errors import ConversionError

    _configure_logging(verbose)
    output_format = output_format.lower()
    options = ConverterOptions(
        include_comments=not no_comments,
        include_manual_answers=answers,
    )
    catalogs = _load_catalogs_or_exit(catalogs_path)
    extension = get_target(output_format, options).extension

    failed = 0
    written = 0
    for grammar_file in grammar_files:
        grammar = _load_grammar(grammar_file)
        if grammar is None:
            failed += 1
            continue

        destination = export_path(output_path, grammar.name, extension)
        if destination.exists() and not overwrite:
            if not click.confirm(f"File {destination} already exists. Overwrite?", default=False):
                console.print(f"[dim]Skipped[/dim] {destination}")
                continue

        logger.debug("Exporting %r from %s to %s", grammar.name, grammar_file, destination)
        collector = DiagnosticCollector(log=False)
        try:
            output = save(grammar, catalogs, destination, target=output_format, options=options, sink=collector)
        except (ConversionError, NotImplementedError, OSError) as exc:
            err_console.print(f"[red]Failed[/red] {grammar_file}: {escape(str(exc))}")
            failed += 1
            continue
        finally:
            if len(collector):
                _print_diagnostics(f"Diagnostics: {grammar.name}", collector.diagnostics)

        written += 1
        console.print(f"[green]Written:[/green] {destination} [dim]({output.summary()})[/dim]")

    console.print(
        f"\n[bold]{written}[/bold] grammar(s) exported, "
        f"[bold]{failed}[/bold] failed [dim]→ format: {output_format}[/dim]"
    )
    if failed:
        sys.exit(1)


# ---------------------------------------------------------------------------
# check command
# ---------------------------------------------------------------------------


@cli.command(name="check")
@click.argument("grammar_file", type=click.Path())
@click.option(
    "--catalogs",
    "-c",
    "catalogs_path",
    default=None,
    help="YAML or JSON catalogs file; only checked to load, the closure does not use it.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log closure steps.")
def check_command(grammar_file: str, catalogs_path: str | None, verbose: bool) -> None:
    """Check that every rule reachable from $Main is defined.

    GRAMMAR_FILE is a grammar text, YAML or JSON file.

    A --catalogs file is loaded so that a broken file is reported here
    rather than at export time; its contents do not affect the check.
    """
    from grammarconv.closure import ReachabilityClosure
    from grammarconv.diagnostics import DiagnosticCollector
    from grammarconv.errors import ConversionError
    from grammarconv.scanner import report_id_collisions, srgs_rule_id, valid_replacements

    _configure_logging(verbose)
    if catalogs_path is not None:
        _load_catalogs_or_exit(catalogs_path)

    grammar = _load_grammar(grammar_file)
    if grammar is None:
        sys.exit(1)

    collector = DiagnosticCollector(log=False)
    try:
        closure = ReachabilityClosure(grammar, sink=collector).run()
    except ConversionError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)

    # Rules the closure never reaches are still validated.
    reached = set(closure.non_terminals)
    for rule in grammar:
        if rule.non_terminal not in reached:
            valid_replacements(rule, collector)
    report_id_collisions((rule.non_terminal for rule in grammar), srgs_rule_id, collector)

    unreachable = len(grammar) - len(reached)
    if not len(collector):
        console.print(
            f"[green]OK[/green] {grammar_file}: {len(reached)} reachable rule(s), "
            f"{unreachable} unreachable, {len(closure.wildcards)} wildcard class(es)"
        )
        sys.exit(0)

    _print_diagnostics(f"Check: {grammar_file}", collector.diagnostics)
    console.print(
        f"\n[bold]Summary:[/bold] {len(collector)} diagnostic(s), "
        f"{len(reached)} reachable rule(s), {unreachable} unreachable"
    )
    if collector.has_warnings:
        sys.exit(1)


if __name__ == "__main__":
    cli()
