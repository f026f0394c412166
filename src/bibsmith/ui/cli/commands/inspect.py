"""Read-only commands: `validate`, `show` and `formats`."""

from __future__ import annotations

from pathlib import Path

import typer

from bibsmith.core import BibFormat, BibsmithError, parse, supported_formats, validate as check

from .._options import InputPathArgument, SourceFormatOption
from ..presenter import build_formats_table, present_parse_result, present_validation
from ..state import emit_error, get_cli_state
from ..utils import read_input, resolve_source_format


def _load(input_path: Path, explicit: str | None) -> tuple[str, BibFormat]:
    try:
        text = read_input(input_path)
        return text, resolve_source_format(text, explicit, input_path)
    except (OSError, BibsmithError) as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def validate(
    input_path: InputPathArgument,
    from_: SourceFormatOption = None,
) -> None:
    """Check a bibliography file for syntax problems without converting it."""
    text, fmt = _load(input_path, from_)
    warnings = check(text, fmt)
    present_validation(get_cli_state(), warnings, fmt, input_path.name)
    if any(warning.is_error for warning in warnings):
        raise typer.Exit(code=1)


def show(
    input_path: InputPathArgument,
    from_: SourceFormatOption = None,
) -> None:
    """Parse a bibliography file and display its entries and diagnostics."""
    text, fmt = _load(input_path, from_)
    result = parse(text, fmt)
    present_parse_result(get_cli_state(), result, fmt)
    if result.stats.total == 0 and result.errors:
        raise typer.Exit(code=1)


def formats() -> None:
    """List the bibliography formats that can be read and written."""
    get_cli_state().console.print(build_formats_table(supported_formats()))


__all__ = ["formats", "show", "validate"]
