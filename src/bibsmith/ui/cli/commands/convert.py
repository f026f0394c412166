"""Implementation of the `bibsmith convert` command."""

from __future__ import annotations

import typer

from bibsmith.core import BibsmithError, convert as convert_document

from .._options import (
    ConfigOption,
    CrlfOption,
    IncludeMetadataOption,
    IndentOption,
    InputPathArgument,
    OutputPathOption,
    ProtectTitlesOption,
    SortOption,
    SourceFormatOption,
    TargetFormatOption,
)
from ..diagnostics import CliEmitter
from ..state import emit_error, get_cli_state, render_message
from ..utils import (
    build_options,
    parse_format_option,
    read_input,
    resolve_source_format,
    write_output_file,
)


def convert(
    input_path: InputPathArgument,
    to: TargetFormatOption,
    from_: SourceFormatOption = None,
    output: OutputPathOption = None,
    config: ConfigOption = None,
    sort: SortOption = None,
    indent: IndentOption = None,
    crlf: CrlfOption = None,
    protect_titles: ProtectTitlesOption = None,
    include_metadata: IncludeMetadataOption = None,
) -> None:
    """Convert a bibliography file into another format."""
    state = get_cli_state()
    target = parse_format_option(to, param_hint="--to")

    try:
        text = read_input(input_path)
        source = resolve_source_format(text, from_, input_path)
        options = build_options(
            config,
            crlf=crlf,
            sort=sort,
            indent=indent,
            protect_titles=protect_titles,
            include_metadata=include_metadata,
        )
    except (OSError, BibsmithError) as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    outcome = convert_document(text, source, target, options, emitter=CliEmitter(state))
    stats = outcome.result.stats
    if stats.total == 0 and outcome.result.errors:
        raise typer.Exit(code=1)

    if output is None:
        typer.echo(outcome.output, nl=False)
        return

    try:
        write_output_file(output, outcome.output)
    except OSError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    render_message(
        "info",
        f"Wrote {stats.successful} of {stats.total} entries to {output.name} ({target}).",
    )


__all__ = ["convert"]
