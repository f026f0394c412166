"""EndNote XML writer.

Records are nested the way EndNote exports them: creators under
``contributors``, titles under ``titles``, the year and full publication date
under ``dates`` and the URL under ``urls/related-urls``. Remaining fields are
written as direct children of ``record``.
"""

from __future__ import annotations

from collections.abc import Sequence
import html
import re
from typing import ClassVar

from ..codecs import dates, names
from ..config import GeneratorOptions
from ..formats import BibFormat
from ..mappings import FIELD_MAPPINGS
from ..mappings.entry_types import ENDNOTE_REF_TYPE_NUMBERS, FALLBACK_TYPES
from ..models import CanonicalEntry, Person
from .base import BaseGenerator, flatten


_TITLE_FIELDS = ("title", "container-title", "collection-title", "title-short")
_SECTIONED = frozenset({*_TITLE_FIELDS, "URL", "keyword"})
_CREATOR_SECTIONS = tuple(
    (mapping.canonical, mapping.endnote)
    for mapping in FIELD_MAPPINGS.values()
    if mapping.transform == "name" and mapping.endnote
)
_SCALAR_ELEMENTS = tuple(
    (mapping.canonical, mapping.endnote)
    for mapping in FIELD_MAPPINGS.values()
    if mapping.transform in ("none", "number", "page-range")
    and mapping.endnote
    and mapping.canonical not in _SECTIONED
)
_KEYWORD_SPLIT_RE = re.compile(r"[;,]")

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'


def _element(tag: str, value: object) -> str:
    return f"<{tag}>{html.escape(flatten(value))}</{tag}>"


class EndNoteGenerator(BaseGenerator):
    """Render canonical entries as an EndNote XML document."""

    format: ClassVar[BibFormat] = BibFormat.ENDNOTE

    def _render_entry(self, entry: CanonicalEntry, options: GeneratorOptions) -> list[str]:
        step = options.indent
        body: list[tuple[int, str]] = []

        ref_type = self.resolve_type(entry).type
        number = ENDNOTE_REF_TYPE_NUMBERS.get(
            ref_type, ENDNOTE_REF_TYPE_NUMBERS[FALLBACK_TYPES[self.format]]
        )
        body.append((0, f'<ref-type name="{html.escape(ref_type)}">{number}</ref-type>'))

        creators = [
            (section, people)
            for canonical, section in _CREATOR_SECTIONS
            if (people := entry.get(canonical))
        ]
        if creators:
            body.append((0, "<contributors>"))
            for section, people in creators:
                body.extend(self._people(section, people))
            body.append((0, "</contributors>"))

        titles = [
            (FIELD_MAPPINGS[name].endnote, entry.get(name))
            for name in _TITLE_FIELDS
            if entry.get(name)
        ]
        if titles:
            body.append((0, "<titles>"))
            body.extend((1, _element(tag, value)) for tag, value in titles)
            body.append((0, "</titles>"))

        if entry.issued is not None:
            body.append((0, "<dates>"))
            body.extend(self._dates(entry))
            body.append((0, "</dates>"))

        for canonical, tag in _SCALAR_ELEMENTS:
            value = entry.get(canonical)
            if isinstance(value, (str, int)) and not isinstance(value, bool):
                body.append((0, _element(tag, value)))

        if entry.keyword:
            keywords = [item.strip() for item in _KEYWORD_SPLIT_RE.split(entry.keyword)]
            body.append((0, "<keywords>"))
            body.extend((1, _element("keyword", keyword)) for keyword in keywords if keyword)
            body.append((0, "</keywords>"))

        if entry.url:
            body.append((0, "<urls>"))
            body.append((1, "<related-urls>"))
            body.append((2, _element("url", entry.url)))
            body.append((1, "</related-urls>"))
            body.append((0, "</urls>"))

        if entry.accessed is not None:
            body.append((0, _element("access-date", dates.serialize(entry.accessed))))

        if entry.source_format is BibFormat.ENDNOTE:
            for tag, value in entry.custom_fields.items():
                if isinstance(value, str) and value:
                    body.append((0, _element(tag, value)))

        record_indent = step * 2
        lines = [f"{record_indent}<record>"]
        lines.extend(f"{record_indent}{step * (depth + 1)}{text}" for depth, text in body)
        lines.append(f"{record_indent}</record>")
        return lines

    def _assemble(self, records: Sequence[list[str]], options: GeneratorOptions) -> str:
        step = options.indent
        lines = [XML_DECLARATION, "<xml>", f"{step}<records>"]
        for record in records:
            lines.extend(record)
        lines.extend([f"{step}</records>", "</xml>"])
        return options.line_ending.join(lines) + options.line_ending

    # --------------------------------------------------------------------- helpers

    def _people(self, section: str, people: Sequence[Person]) -> list[tuple[int, str]]:
        lines = [(1, f"<{section}>")]
        lines.extend((2, _element("author", names.serialize(person))) for person in people)
        lines.append((1, f"</{section}>"))
        return lines

    def _dates(self, entry: CanonicalEntry) -> list[tuple[int, str]]:
        issued = entry.issued
        year = issued.year
        lines = [(1, _element("year", year if year is not None else issued.raw or ""))]
        start = issued.start
        if start is not None and (len(start) > 1 or issued.is_range):
            lines.append((1, "<pub-dates>"))
            lines.append((2, _element("date", dates.serialize(issued))))
            lines.append((1, "</pub-dates>"))
        return lines


__all__ = ["EndNoteGenerator", "XML_DECLARATION"]
