"""RIS writer."""

from __future__ import annotations

import re
from typing import Any, ClassVar

from ..codecs import dates, names
from ..config import GeneratorOptions
from ..formats import BibFormat
from ..mappings import field_name_for, get_field_mapping
from ..models import CanonicalEntry, StructuredDate
from .base import BaseGenerator, flatten


FIELD_ORDER: tuple[str, ...] = (
    "author",
    "editor",
    "translator",
    "title",
    "title-short",
    "container-title",
    "collection-title",
    "issued",
    "volume",
    "issue",
    "chapter-number",
    "page",
    "edition",
    "publisher",
    "publisher-place",
    "event-place",
    "DOI",
    "ISBN",
    "ISSN",
    "PMID",
    "URL",
    "accessed",
    "medium",
    "genre",
    "call-number",
    "language",
    "abstract",
    "keyword",
    "note",
    "annote",
)

_PAGE_RANGE_RE = re.compile(r"^(\w+)\s*[-–]+\s*(\w+)$")
_KEYWORD_SPLIT_RE = re.compile(r"[;,]")


def tag_line(tag: str, value: object) -> str:
    return f"{tag}  - {flatten(value)}"


class RISGenerator(BaseGenerator):
    """Render canonical entries as RIS records."""

    format: ClassVar[BibFormat] = BibFormat.RIS

    def _render_entry(self, entry: CanonicalEntry, options: GeneratorOptions) -> list[str]:
        lines = [tag_line("TY", self.resolve_type(entry).type), tag_line("ID", entry.id)]
        emitted: set[str] = set()
        for canonical in FIELD_ORDER:
            value = entry.get(canonical)
            if value is None:
                continue
            lines.extend(self._render_field(canonical, value))
            emitted.add(canonical)

        for canonical, value in entry.populated_fields():
            if canonical not in emitted:
                lines.extend(self._render_field(canonical, value))

        if entry.source_format is BibFormat.RIS:
            for tag, value in entry.custom_fields.items():
                values = value if isinstance(value, list) else [value]
                lines.extend(tag_line(tag, item) for item in values if item)

        lines.append("ER  - ")
        return lines

    # --------------------------------------------------------------------- helpers

    def _render_field(self, canonical: str, value: Any) -> list[str]:
        tag = field_name_for(canonical, self.format)
        if tag is None:
            return []
        mapping = get_field_mapping(canonical)
        transform = mapping.transform if mapping else "none"

        match value:
            case tuple() if transform == "name":
                return [tag_line(tag, names.serialize(person)) for person in value]
            case StructuredDate():
                text = dates.serialize_ris(value)
                return [tag_line(tag, text)] if text else []
            case str() if canonical == "page":
                page_range = _PAGE_RANGE_RE.match(value.strip())
                if page_range is None:
                    return [tag_line("SP", value)]
                return [tag_line("SP", page_range.group(1)), tag_line("EP", page_range.group(2))]
            case str() if canonical == "keyword":
                keywords = (item.strip() for item in _KEYWORD_SPLIT_RE.split(value))
                return [tag_line(tag, keyword) for keyword in keywords if keyword]
            case bool():
                return []
            case str() | int():
                return [tag_line(tag, value)]
            case _:
                return []


__all__ = ["FIELD_ORDER", "RISGenerator", "tag_line"]
