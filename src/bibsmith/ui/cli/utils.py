"""File and option helpers shared by the CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer

from bibsmith.core import BibFormat, GeneratorOptions, detect_format, load_options
from bibsmith.core.exceptions import FormatDetectionError, UnsupportedFormatError


_SUFFIX_FORMATS = {
    ".bib": BibFormat.BIBTEX,
    ".ris": BibFormat.RIS,
    ".xml": BibFormat.ENDNOTE,
    ".json": BibFormat.CSL_JSON,
}


def parse_format_option(value: str, *, param_hint: str) -> BibFormat:
    """Resolve a format given on the command line or report it as a bad parameter."""
    try:
        return BibFormat.coerce(value)
    except UnsupportedFormatError as exc:
        raise typer.BadParameter(str(exc), param_hint=param_hint) from exc


def read_input(path: Path) -> str:
    """Read a bibliography file as UTF-8, tolerating a byte order mark."""
    try:
        return path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError as exc:
        raise OSError(f"'{path.name}' is not valid UTF-8 text.") from exc
    except OSError as exc:
        raise OSError(f"Unable to read '{path}': {exc.strerror or exc}") from exc


def resolve_source_format(text: str, explicit: str | None, path: Path) -> BibFormat:
    """Return the format named on the command line, or infer it.

    The content is inspected first; the file extension is only a fallback.
    """
    if explicit:
        return parse_format_option(explicit, param_hint="--from")
    detected = detect_format(text)
    if detected is not None:
        return detected
    by_suffix = _SUFFIX_FORMATS.get(path.suffix.lower())
    if by_suffix is not None:
        return by_suffix
    raise FormatDetectionError(
        f"Unable to detect the format of '{path.name}'; pass it with --from."
    )


def build_options(
    config: Path | None, *, crlf: bool | None = None, **overrides: Any
) -> GeneratorOptions:
    """Merge options from ``config`` with the flags given on the command line."""
    base = load_options(config) if config is not None else GeneratorOptions()
    if crlf is not None:
        overrides["line_ending"] = "\r\n" if crlf else "\n"
    return base.merged(**overrides)


def write_output_file(target: Path, content: str) -> None:
    """Persist converted content to disk, creating parent directories as needed."""
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise OSError(f"Failed to write output to '{target}': {exc}") from exc


__all__ = [
    "build_options",
    "parse_format_option",
    "read_input",
    "resolve_source_format",
    "write_output_file",
]
