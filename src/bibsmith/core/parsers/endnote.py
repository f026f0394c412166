"""EndNote XML reader.

Records are located by tag matching rather than with an XML parser, so the
reader copes with the loosely formed exports some reference managers write.
Element text is freed from nested markup (EndNote wraps most values in
``<style>`` elements) and HTML entities are unescaped.
"""

from __future__ import annotations

from collections.abc import Iterator
from functools import lru_cache
import html
import logging
import re
from typing import ClassVar

from ..codecs import dates, names
from ..exceptions import DocumentSyntaxError
from ..formats import BibFormat
from ..issues import ConversionWarning
from ..mappings import FIELD_MAPPINGS, normalize_to_csl_type
from ..mappings.entry_types import ENDNOTE_REF_TYPE_NAMES
from ..models import CanonicalEntry, StructuredDate
from .base import (
    BaseParser,
    EntryDraft,
    RawRecord,
    collapse_whitespace,
    unique_id,
    validation_issue,
)


logger = logging.getLogger(__name__)

_RECORD_OPEN_RE = re.compile(r"<record(?:\s[^>]*)?>", re.IGNORECASE)
_RECORD_CLOSE_RE = re.compile(r"</record\s*>", re.IGNORECASE)
_REF_TYPE_RE = re.compile(
    r"<ref-type(?P<attrs>\s[^>]*)?>(?P<number>[^<]*)</ref-type>", re.IGNORECASE
)
_NAME_ATTR_RE = re.compile(r"""name\s*=\s*["']([^"']*)["']""")
_CHILD_RE = re.compile(r"<([A-Za-z][\w-]*)(?:\s[^>]*)?>(.*?)</\1\s*>", re.DOTALL)
_HTML_TAG_RE = re.compile(r"<[^>]+?>")
_NON_WORD_RE = re.compile(r"\W+")

_DEFAULT_REF_TYPE = "Journal Article"
_STRUCTURAL = frozenset(
    {
        "contributors",
        "titles",
        "dates",
        "urls",
        "keywords",
        "ref-type",
        "periodical",
        "rec-number",
        "foreign-keys",
        "database",
        "source-app",
    }
)
_CREATOR_SECTIONS = tuple(
    (mapping.endnote, mapping.canonical)
    for mapping in FIELD_MAPPINGS.values()
    if mapping.transform == "name" and mapping.endnote
)
_SCALAR_ELEMENTS = tuple(
    (mapping.endnote, mapping.canonical)
    for mapping in FIELD_MAPPINGS.values()
    if mapping.transform in ("none", "number", "page-range")
    and mapping.endnote
    and mapping.canonical != "keyword"
)


@lru_cache(maxsize=None)
def _element_pattern(tag: str) -> re.Pattern[str]:
    return re.compile(rf"<{re.escape(tag)}(?:\s[^>]*)?>(.*?)</{re.escape(tag)}\s*>", re.DOTALL)


def _plain(fragment: str) -> str:
    """Strip nested markup from ``fragment`` and unescape entities."""
    return collapse_whitespace(html.unescape(_HTML_TAG_RE.sub("", fragment)))


def _first(xml: str, tag: str) -> str:
    match = _element_pattern(tag).search(xml)
    return _plain(match.group(1)) if match else ""


def _all(xml: str, tag: str) -> list[str]:
    values = (_plain(match.group(1)) for match in _element_pattern(tag).finditer(xml))
    return [value for value in values if value]


def _section(xml: str, tag: str) -> str:
    match = _element_pattern(tag).search(xml)
    return match.group(1) if match else ""


def _ref_type(xml: str) -> str:
    match = _REF_TYPE_RE.search(xml)
    if match is None:
        return _DEFAULT_REF_TYPE
    attribute = _NAME_ATTR_RE.search(match.group("attrs") or "")
    if attribute and attribute.group(1).strip():
        return html.unescape(attribute.group(1).strip())
    number = match.group("number").strip()
    if number.isdigit() and int(number) in ENDNOTE_REF_TYPE_NAMES:
        return ENDNOTE_REF_TYPE_NAMES[int(number)]
    return _DEFAULT_REF_TYPE


def _issued(xml: str) -> StructuredDate | None:
    dates_xml = _section(xml, "dates")
    year = _first(dates_xml, "year") if dates_xml else _first(xml, "year")
    full = _first(_section(dates_xml, "pub-dates"), "date") if dates_xml else ""
    if full:
        parsed = dates.parse(full)
        if parsed.year is not None and (not year or str(parsed.year) == year):
            return parsed
    if year:
        return dates.parse(year)
    return None


class EndNoteParser(BaseParser):
    """Parse EndNote XML exports into canonical entries."""

    format: ClassVar[BibFormat] = BibFormat.ENDNOTE

    def validate(self, text: str) -> list[ConversionWarning]:
        issues: list[ConversionWarning] = []
        opened = len(_RECORD_OPEN_RE.findall(text))
        closed = len(_RECORD_CLOSE_RE.findall(text))
        if opened == 0:
            issues.append(validation_issue("No <record> elements found in EndNote XML."))
        elif opened != closed:
            issues.append(
                validation_issue(f"Found {opened} <record> tags but {closed} </record> tags.")
            )
        if "<records" not in text.lower():
            issues.append(
                validation_issue("Missing <records> container element.", severity="warning")
            )
        return issues

    # --------------------------------------------------------------------- scanning

    def _locate_records(self, text: str) -> Iterator[RawRecord]:
        openings = list(_RECORD_OPEN_RE.finditer(text))
        if not openings:
            if text.strip():
                raise DocumentSyntaxError("No <record> elements found in EndNote XML.")
            return
        for position, opening in enumerate(openings, start=1):
            limit = openings[position].start() if position < len(openings) else len(text)
            closing = _RECORD_CLOSE_RE.search(text, opening.end(), limit)
            if closing is None:
                logger.debug("EndNote record %d has no closing tag", position)
                yield RawRecord(
                    position=position,
                    text=text[opening.end() : limit],
                    error="Record is missing its closing </record> tag.",
                )
                continue
            yield RawRecord(position=position, text=text[opening.end() : closing.start()])

    # --------------------------------------------------------------------- records

    def _parse_record(
        self, record: RawRecord, seen_ids: set[str]
    ) -> tuple[CanonicalEntry, list[ConversionWarning]]:
        xml = record.text
        type_name = _ref_type(xml)
        draft = EntryDraft(
            id="",
            type=normalize_to_csl_type(type_name, self.format),
            source=self.format,
            original_type=type_name,
        )

        contributors = _section(xml, "contributors") or xml
        for section, canonical in _CREATOR_SECTIONS:
            people = _all(_section(contributors, section), "author")
            draft.set(canonical, tuple(names.parse(person) for person in people))

        for element, canonical in _SCALAR_ELEMENTS:
            draft.set(canonical, _first(xml, element))

        draft.set("issued", _issued(xml))
        accessed = _first(xml, "access-date")
        if accessed:
            draft.set("accessed", dates.parse(accessed))
        keywords = _all(_section(xml, "keywords"), "keyword")
        if keywords:
            draft.set("keyword", ", ".join(keywords))

        known = {element for element, _ in _SCALAR_ELEMENTS} | {"access-date"}
        for match in _CHILD_RE.finditer(xml):
            tag = match.group(1).lower()
            if tag in known or tag in _STRUCTURAL:
                continue
            value = _plain(match.group(2))
            if value:
                draft.custom_fields.setdefault(tag, value)

        draft.id = unique_id(_synthesise_id(draft, record.position), seen_ids)
        return draft.build(), draft.warnings


def _synthesise_id(draft: EntryDraft, position: int) -> str:
    """Build ``<first title word><year>``, falling back to ``entry<N>``."""
    title = draft.fields.get("title") or ""
    issued = draft.fields.get("issued")
    year = issued.year if issued is not None else None
    words = title.split()
    first_word = _NON_WORD_RE.sub("", words[0].lower()) if words else ""
    if first_word and year is not None:
        return f"{first_word}{year}"
    return f"entry{position}"


__all__ = ["EndNoteParser"]
