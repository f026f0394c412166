"""Conversion entry points.

Every format is reached through the two dispatch tables below; callers name a
format once and never instantiate parsers or generators themselves. Parsers
and generators keep no state between calls, so the shared instances may be
used from several threads at once.

Conversion notes

`convert` appends ``info`` diagnostics to the parse result describing what the
target format could not hold:

- ``type-downgrade`` when the entry type falls back to a less specific one.
- ``field-loss`` for populated fields (and format-specific custom fields) the
  target has no place for.
- ``encoding-loss`` when a BibTeX-family target would still carry non-ASCII
  characters after LaTeX encoding.

The parse statistics are left untouched by these notes.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
import json
import logging
import re
from types import MappingProxyType

from .codecs import latex
from .config import GeneratorOptions
from .diagnostics import DiagnosticEmitter, emit_warnings
from .formats import BibFormat
from .generators import (
    BibLaTeXGenerator,
    BibTeXGenerator,
    CslJsonGenerator,
    EndNoteGenerator,
    Generator,
    RISGenerator,
)
from .issues import ConversionWarning, ParseResult, WarningType
from .mappings import representable_in
from .mappings.entry_types import BIBLATEX_ONLY_TYPES
from .models import CanonicalEntry
from .parsers import (
    BibLaTeXParser,
    BibTeXParser,
    CslJsonParser,
    EndNoteParser,
    Parser,
    RISParser,
)


logger = logging.getLogger(__name__)

PARSERS: Mapping[BibFormat, Parser] = MappingProxyType(
    {
        BibFormat.BIBTEX: BibTeXParser(),
        BibFormat.BIBLATEX: BibLaTeXParser(),
        BibFormat.CSL_JSON: CslJsonParser(),
        BibFormat.RIS: RISParser(),
        BibFormat.ENDNOTE: EndNoteParser(),
    }
)

GENERATORS: Mapping[BibFormat, Generator] = MappingProxyType(
    {
        BibFormat.BIBTEX: BibTeXGenerator(),
        BibFormat.BIBLATEX: BibLaTeXGenerator(),
        BibFormat.CSL_JSON: CslJsonGenerator(),
        BibFormat.RIS: RISGenerator(),
        BibFormat.ENDNOTE: EndNoteGenerator(),
    }
)

_BIB_ENTRY_RE = re.compile(r"@\s*([A-Za-z][\w-]*)\s*[{(]")
_RIS_TYPE_LINE_RE = re.compile(r"^TY\s{1,2}-", re.MULTILINE)
_VERBATIM_FIELDS = frozenset({"DOI", "URL"})


@dataclass(frozen=True, slots=True)
class ConversionOutput:
    """Rendered document together with the parse result it was built from."""

    result: ParseResult
    output: str

    @property
    def warnings(self) -> tuple[ConversionWarning, ...]:
        return self.result.warnings


def supported_formats() -> list[BibFormat]:
    return list(BibFormat)


def get_parser(fmt: BibFormat | str) -> Parser:
    return PARSERS[BibFormat.coerce(fmt)]


def get_generator(fmt: BibFormat | str) -> Generator:
    return GENERATORS[BibFormat.coerce(fmt)]


def parse(text: str, fmt: BibFormat | str) -> ParseResult:
    """Parse ``text`` written in ``fmt`` into canonical entries."""
    return get_parser(fmt).parse(text)


def generate(
    entries: Iterable[CanonicalEntry],
    fmt: BibFormat | str,
    options: GeneratorOptions | None = None,
) -> str:
    """Render canonical entries in ``fmt``."""
    return get_generator(fmt).generate(entries, options)


def validate(text: str, fmt: BibFormat | str) -> list[ConversionWarning]:
    """Run the syntax checks of ``fmt`` without building entries."""
    return get_parser(fmt).validate(text)


def detect_format(text: str) -> BibFormat | None:
    """Guess the format of ``text`` from its content, or return ``None``."""
    trimmed = text.lstrip("\ufeff").strip()
    if not trimmed:
        return None

    if trimmed[0] in "[{":
        try:
            document = json.loads(trimmed)
        except json.JSONDecodeError:
            logger.debug("Content starts like JSON but does not parse as JSON")
        else:
            item = document[0] if isinstance(document, list) and document else document
            if isinstance(item, Mapping) and "id" in item and "type" in item:
                return BibFormat.CSL_JSON

    entry_types = {match.group(1).lower() for match in _BIB_ENTRY_RE.finditer(trimmed)}
    entry_types -= {"comment", "preamble", "string"}
    if entry_types:
        if entry_types & BIBLATEX_ONLY_TYPES:
            return BibFormat.BIBLATEX
        return BibFormat.BIBTEX

    if _RIS_TYPE_LINE_RE.search(trimmed):
        return BibFormat.RIS

    lowered = trimmed.lower()
    if "<record" in lowered and (lowered.startswith("<?xml") or "<records" in lowered):
        return BibFormat.ENDNOTE

    return None


def conversion_notes(
    entries: Sequence[CanonicalEntry], generator: Generator
) -> list[ConversionWarning]:
    """Describe what writing ``entries`` with ``generator`` cannot preserve."""
    target = generator.format
    notes: list[ConversionWarning] = []
    for entry in entries:
        resolution = generator.resolve_type(entry)
        if resolution.lossy:
            notes.append(
                _note(
                    entry,
                    "type-downgrade",
                    f"Type '{entry.type}' is written as '{resolution.type}' in {target}.",
                    "type",
                )
            )
        if target is BibFormat.CSL_JSON:
            continue

        for name, value in entry.populated_fields():
            if not representable_in(name, target):
                notes.append(
                    _note(entry, "field-loss", f"Field '{name}' has no {target} equivalent.", name)
                )
            elif target.is_bibtex_family and _loses_encoding(name, value):
                notes.append(
                    _note(
                        entry,
                        "encoding-loss",
                        f"Field '{name}' keeps characters without a LaTeX equivalent.",
                        name,
                    )
                )

        source = entry.source_format
        if source is not None and source is not target and not (
            source.is_bibtex_family and target.is_bibtex_family
        ):
            for name in entry.custom_fields:
                notes.append(
                    _note(
                        entry,
                        "field-loss",
                        f"Custom {source} field '{name}' is not carried over to {target}.",
                        name,
                    )
                )
    return notes


def convert(
    text: str,
    source: BibFormat | str,
    target: BibFormat | str,
    options: GeneratorOptions | None = None,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> ConversionOutput:
    """Parse ``text`` from ``source`` and render the entries in ``target``.

    Records that fail to parse are dropped and reported in the returned
    result; they never abort the conversion.
    """
    source_format = BibFormat.coerce(source)
    target_format = BibFormat.coerce(target)
    generator = get_generator(target_format)

    parsed = parse(text, source_format)
    output = generator.generate(parsed.entries, options)
    result = parsed.with_warnings(conversion_notes(parsed.entries, generator))
    logger.debug(
        "Converted %d entries from %s to %s with %d diagnostics",
        len(result.entries),
        source_format,
        target_format,
        len(result.warnings),
    )

    if emitter is not None:
        emit_warnings(emitter, result.warnings)
        emitter.event(
            "conversion",
            {
                "source": source_format.value,
                "target": target_format.value,
                **result.stats.to_dict(),
            },
        )
    return ConversionOutput(result=result, output=output)


def _note(
    entry: CanonicalEntry, kind: WarningType, message: str, field: str
) -> ConversionWarning:
    return ConversionWarning(
        entry_id=entry.id,
        severity="info",
        type=kind,
        message=message,
        field=field,
    )


def _loses_encoding(name: str, value: object) -> bool:
    if name in _VERBATIM_FIELDS or not isinstance(value, str):
        return False
    return any(ord(char) > 127 for char in latex.encode(value))


__all__ = [
    "GENERATORS",
    "PARSERS",
    "ConversionOutput",
    "conversion_notes",
    "convert",
    "detect_format",
    "generate",
    "get_generator",
    "get_parser",
    "parse",
    "supported_formats",
    "validate",
]
