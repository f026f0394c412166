"""Rich presenters for parsed bibliographies and their diagnostics."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from rich import box
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from bibsmith.core import BibFormat, CanonicalEntry, ConversionWarning, ParseResult
from bibsmith.core.codecs import latex

from .state import CLIState


_SEVERITY_STYLES = {"error": "red", "warning": "yellow", "info": "dim"}
_MAX_AUTHORS = 3


def _build_table(title: str | None, columns: Sequence[str]) -> Table:
    """Create a Rich table with the house style."""
    table = Table(
        title=title or None,
        box=box.SQUARE,
        show_edge=True,
        header_style="bold cyan",
    )
    for column in columns:
        table.add_column(column)
    return table


def format_authors(entry: CanonicalEntry) -> str:
    """Summarise the creators of an entry, shortening long author lists."""
    people = entry.author or entry.editor or ()
    names = [person.display_name() for person in people[:_MAX_AUTHORS]]
    if len(people) > _MAX_AUTHORS:
        names.append("et al.")
    return "; ".join(names)


def format_title(entry: CanonicalEntry) -> str:
    title = entry.title or entry.container_title or ""
    return latex.strip(title)


def build_entries_table(entries: Iterable[CanonicalEntry]) -> Table:
    """Tabulate the key bibliographic fields of each entry."""
    table = _build_table("Entries", ("ID", "Type", "Authors", "Year", "Title"))
    for entry in entries:
        year = entry.issued.year if entry.issued is not None else None
        table.add_row(
            Text(entry.id, style="bold green"),
            entry.type,
            format_authors(entry),
            "" if year is None else str(year),
            Text(format_title(entry), overflow="fold"),
        )
    return table


def build_statistics_table(result: ParseResult, fmt: BibFormat) -> Table:
    stats = result.stats
    table = _build_table(f"Statistics ({fmt})", ("Category", "Count"))
    table.columns[1].justify = "right"
    table.add_row("Records found", str(stats.total))
    table.add_row("Converted", str(stats.successful))
    table.add_row("Dropped", str(stats.failed))
    table.add_row("Warnings", str(stats.with_warnings))
    return table


def build_warnings_table(warnings: Iterable[ConversionWarning]) -> Table:
    """Tabulate diagnostics with one row per warning, coloured by severity."""
    table = _build_table("Diagnostics", ("Entry", "Severity", "Type", "Field", "Message"))
    for warning in warnings:
        style = _SEVERITY_STYLES.get(warning.severity, "")
        table.add_row(
            warning.entry_id,
            Text(warning.severity, style=style),
            warning.type,
            warning.field or "—",
            Text(warning.message, style=style),
        )
    return table


def present_parse_result(state: CLIState, result: ParseResult, fmt: BibFormat) -> None:
    """Render the entries, statistics and diagnostics of a parse."""
    console = state.console
    if result.entries:
        console.print(build_entries_table(result.entries))
    else:
        console.print("[dim]No entries found.[/]")
    console.print(build_statistics_table(result, fmt))
    if result.warnings:
        console.print(build_warnings_table(result.warnings))


def present_validation(
    state: CLIState, warnings: Sequence[ConversionWarning], fmt: BibFormat, source: str
) -> None:
    """Report the outcome of a syntax check."""
    console = state.console
    if warnings:
        console.print(build_warnings_table(warnings))
    errors = sum(1 for warning in warnings if warning.is_error)
    if errors:
        summary = Text(f"{source}: {errors} error(s) found ({fmt}).", style="bold red")
    else:
        summary = Text(f"{source}: valid {fmt} document.", style="bold green")
    console.print(Panel(summary, box=box.SIMPLE))


def build_formats_table(formats: Iterable[BibFormat]) -> Table:
    table = _build_table("Supported Formats", ("Identifier", "Family"))
    for fmt in formats:
        family = "BibTeX" if fmt.is_bibtex_family else ""
        table.add_row(Text(fmt.value, style="bold"), family)
    return table


__all__ = [
    "build_entries_table",
    "build_formats_table",
    "build_statistics_table",
    "build_warnings_table",
    "format_authors",
    "format_title",
    "present_parse_result",
    "present_validation",
]
