"""RIS reader.

A record starts at a ``TY`` line and ends at the next ``ER`` line. Repeated
tags accumulate in order, so several ``AU`` lines become an author list, and
lines that do not start with a tag continue the value of the previous one.
"""

from __future__ import annotations

from collections.abc import Iterator
import logging
import re
from typing import ClassVar

from slugify import slugify

from ..codecs import dates, names
from ..exceptions import DocumentSyntaxError
from ..formats import BibFormat
from ..issues import ConversionWarning
from ..mappings import canonical_field_for, get_field_mapping, normalize_to_csl_type
from ..models import CanonicalEntry, Person, StructuredDate
from .base import BaseParser, EntryDraft, RawRecord, unique_id, validation_issue


logger = logging.getLogger(__name__)

_TAG_LINE_RE = re.compile(r"^([A-Z][A-Z0-9])\s{1,2}-\s?(.*)$")
_ISSN_RE = re.compile(r"^\d{4}-?\d{3}[\dXx]$")
_PAGE_TAGS = frozenset({"SP", "EP"})

Tags = list[tuple[str, str]]


def _split_line(line: str) -> tuple[str, str] | None:
    match = _TAG_LINE_RE.match(line.rstrip())
    if match is None:
        return None
    return match.group(1), (match.group(2) or "").strip()


def _most_precise(candidates: list[StructuredDate]) -> StructuredDate | None:
    best: StructuredDate | None = None
    for candidate in candidates:
        if best is None:
            best = candidate
            continue
        if candidate.start is None:
            continue
        if best.start is None or len(candidate.start) > len(best.start):
            best = candidate
    return best


def _page_range(values: dict[str, str]) -> str | None:
    start = values.get("SP")
    end = values.get("EP")
    if start and end and start != end:
        return f"{start}-{end}"
    return start or end


class RISParser(BaseParser):
    """Parse RIS documents into canonical entries."""

    format: ClassVar[BibFormat] = BibFormat.RIS

    def validate(self, text: str) -> list[ConversionWarning]:
        issues: list[ConversionWarning] = []
        opened = 0
        closed = 0
        in_record = False
        for number, line in enumerate(text.lstrip("\ufeff").splitlines(), start=1):
            if not line.strip():
                continue
            parsed = _split_line(line)
            if parsed is None:
                if not in_record:
                    issues.append(
                        validation_issue(
                            f"Line {number} is not a valid RIS tag line.", severity="warning"
                        )
                    )
                continue
            tag, _ = parsed
            if tag == "TY":
                if in_record:
                    issues.append(validation_issue(f"Line {number}: TY found before ER."))
                opened += 1
                in_record = True
            elif tag == "ER":
                if not in_record:
                    issues.append(validation_issue(f"Line {number}: ER without a matching TY."))
                closed += 1
                in_record = False
        if opened == 0:
            issues.append(validation_issue("No RIS records found."))
        elif opened != closed:
            issues.append(validation_issue(f"Found {opened} TY tags but {closed} ER tags."))
        return issues

    # --------------------------------------------------------------------- scanning

    def _locate_records(self, text: str) -> Iterator[RawRecord]:
        position = 0
        current: Tags | None = None
        for line in text.lstrip("\ufeff").splitlines():
            parsed = _split_line(line)
            if parsed is None:
                if current and line.strip():
                    tag, value = current[-1]
                    current[-1] = (tag, f"{value} {line.strip()}".strip())
                continue
            tag, value = parsed
            if tag == "TY":
                if current is not None:
                    position += 1
                    yield self._unterminated(position, current)
                current = [(tag, value)]
            elif tag == "ER":
                if current is None:
                    logger.debug("Ignoring ER line outside of a record")
                    continue
                position += 1
                yield RawRecord(position=position, text="", payload=current)
                current = None
            elif current is not None:
                current.append((tag, value))
            else:
                logger.debug("Ignoring %s line outside of a record", tag)

        if current is not None:
            position += 1
            yield self._unterminated(position, current)
        if position == 0 and text.strip():
            raise DocumentSyntaxError("No RIS records found: expected a 'TY  - ' line.")

    def _unterminated(self, position: int, tags: Tags) -> RawRecord:
        entry_id = next((value for tag, value in tags if tag == "ID" and value), None)
        return RawRecord(
            position=position,
            text="",
            entry_id=entry_id,
            error="Record is not terminated by an 'ER  - ' line.",
        )

    # --------------------------------------------------------------------- records

    def _parse_record(
        self, record: RawRecord, seen_ids: set[str]
    ) -> tuple[CanonicalEntry, list[ConversionWarning]]:
        tags: Tags = record.payload
        type_name = tags[0][1] or "GEN"
        draft = EntryDraft(
            id="",
            type=normalize_to_csl_type(type_name, self.format),
            source=self.format,
            original_type=type_name,
        )
        creators: dict[str, list[Person]] = {}
        issued: list[StructuredDate] = []
        pages: dict[str, str] = {}
        keywords: list[str] = []

        for tag, value in tags[1:]:
            if not value:
                continue
            if tag == "ID":
                draft.id = draft.id or value
                continue
            if tag in _PAGE_TAGS:
                pages.setdefault(tag, value)
                continue
            if tag == "SN":
                draft.set("ISSN" if _ISSN_RE.match(value) else "ISBN", value)
                continue
            canonical = canonical_field_for(tag, self.format)
            if canonical is None:
                _append_custom(draft.custom_fields, tag, value)
                continue
            if canonical == "keyword":
                keywords.append(value)
                continue
            mapping = get_field_mapping(canonical)
            transform = mapping.transform if mapping else "none"
            if transform == "name":
                creators.setdefault(canonical, []).append(names.parse(value))
            elif canonical == "issued":
                issued.append(dates.parse(value))
            elif transform == "date":
                draft.set(canonical, dates.parse(value))
            else:
                draft.set(canonical, value)

        for canonical, persons in creators.items():
            draft.set(canonical, tuple(persons))
        draft.set("issued", _most_precise(issued))
        draft.set("page", _page_range(pages))
        if keywords:
            draft.set("keyword", ", ".join(keywords))
        if not draft.id:
            draft.id = unique_id(_synthesise_id(draft, record.position), seen_ids)
        return draft.build(), draft.warnings


def _synthesise_id(draft: EntryDraft, position: int) -> str:
    """Build ``<family><year>``, ``<family>`` or ``entry<N>`` from the first author."""
    authors = draft.fields.get("author") or ()
    family = ""
    if authors:
        first = authors[0]
        family = slugify(first.family or first.literal or "", separator="")
    issued = draft.fields.get("issued")
    year = issued.year if issued is not None else None
    if family and year is not None:
        return f"{family}{year}"
    return family or f"entry{position}"


def _append_custom(custom: dict[str, object], tag: str, value: str) -> None:
    existing = custom.get(tag)
    if existing is None:
        custom[tag] = value
    elif isinstance(existing, list):
        existing.append(value)
    else:
        custom[tag] = [existing, value]


__all__ = ["RISParser"]
