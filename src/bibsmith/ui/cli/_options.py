"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
OUTPUT_PANEL = "Output"
FORMATTING_PANEL = "Formatting"
DIAGNOSTICS_PANEL = "Diagnostics"

InputPathArgument = Annotated[
    Path,
    typer.Argument(
        metavar="INPUT",
        help="Bibliography file to read (BibTeX, BibLaTeX, RIS, EndNote XML or CSL JSON).",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

SourceFormatOption = Annotated[
    str | None,
    typer.Option(
        "--from",
        "-f",
        help="Format of the input file. Detected from the content when omitted.",
        rich_help_panel=INPUTS_PANEL,
    ),
]

TargetFormatOption = Annotated[
    str,
    typer.Option(
        "--to",
        "-t",
        help="Format to write: bibtex, biblatex, csl-json, ris or endnote.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

OutputPathOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="Write the converted bibliography to this file instead of stdout.",
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML file providing generator options. Command-line flags take precedence.",
        exists=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=FORMATTING_PANEL,
    ),
]

SortOption = Annotated[
    bool | None,
    typer.Option(
        "--sort/--no-sort",
        help="Order entries by citation key.",
        show_default=False,
        rich_help_panel=FORMATTING_PANEL,
    ),
]

IndentOption = Annotated[
    str | None,
    typer.Option(
        "--indent",
        help="Indentation unit used by the generator (defaults to two spaces).",
        rich_help_panel=FORMATTING_PANEL,
    ),
]

CrlfOption = Annotated[
    bool | None,
    typer.Option(
        "--crlf/--lf",
        help="Terminate output lines with CRLF instead of LF.",
        show_default=False,
        rich_help_panel=FORMATTING_PANEL,
    ),
]

ProtectTitlesOption = Annotated[
    bool | None,
    typer.Option(
        "--protect-titles/--no-protect-titles",
        help="Brace runs of capitals in BibTeX titles so styles keep their case.",
        show_default=False,
        rich_help_panel=FORMATTING_PANEL,
    ),
]

IncludeMetadataOption = Annotated[
    bool | None,
    typer.Option(
        "--include-metadata/--no-include-metadata",
        help="Keep provenance metadata (_formatMetadata) in CSL JSON output.",
        show_default=False,
        rich_help_panel=FORMATTING_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]


__all__ = [
    "DIAGNOSTICS_PANEL",
    "FORMATTING_PANEL",
    "INPUTS_PANEL",
    "OUTPUT_PANEL",
    "ConfigOption",
    "CrlfOption",
    "DebugOption",
    "IncludeMetadataOption",
    "IndentOption",
    "InputPathArgument",
    "OutputPathOption",
    "ProtectTitlesOption",
    "SortOption",
    "SourceFormatOption",
    "TargetFormatOption",
    "VerboseOption",
]
