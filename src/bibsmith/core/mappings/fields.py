"""Field vocabularies of every format, keyed by canonical field name.

FieldMapping

`canonical` (`str`)
: Wire name of the field in the canonical model (``container-title``,
  ``DOI``).

`bibtex`, `biblatex`, `ris`, `endnote` (`str | None`)
: Spelling of the field in each format. ``None`` means the format has no
  place for it and the value is lost when writing that format.

`transform` (`"none" | "name" | "date" | "number" | "page-range"`)
: Codec applied when moving the value between a format and the canonical
  model.

Type-specific spellings

A few fields change name depending on the target entry type, for example
``container-title`` is written as ``booktitle`` inside ``@inproceedings`` but
as ``journal`` elsewhere. `field_name_for` consults those overrides before the
general table.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal, Mapping

from ..formats import BibFormat


Transform = Literal["none", "name", "date", "number", "page-range"]


@dataclass(frozen=True, slots=True)
class FieldMapping:
    canonical: str
    bibtex: str | None = None
    biblatex: str | None = None
    ris: str | None = None
    endnote: str | None = None
    transform: Transform = "none"

    def for_format(self, fmt: BibFormat) -> str | None:
        if fmt is BibFormat.CSL_JSON:
            return self.canonical
        return getattr(self, fmt.value)


def _table(*mappings: FieldMapping) -> Mapping[str, FieldMapping]:
    return MappingProxyType({mapping.canonical: mapping for mapping in mappings})


FIELD_MAPPINGS: Mapping[str, FieldMapping] = _table(
    # Creators
    FieldMapping("author", "author", "author", "AU", "authors", "name"),
    FieldMapping("editor", "editor", "editor", "ED", "secondary-authors", "name"),
    FieldMapping("translator", "translator", "translator", "A3", "translated-authors", "name"),
    FieldMapping("container-author", None, "bookauthor", None, None, "name"),
    # Titles
    FieldMapping("title", "title", "title", "TI", "title"),
    FieldMapping("container-title", "journal", "journaltitle", "JO", "secondary-title"),
    FieldMapping("collection-title", "series", "series", "T3", "tertiary-title"),
    FieldMapping("title-short", "shorttitle", "shorttitle", "ST", "short-title"),
    # Dates
    FieldMapping("issued", "year", "date", "PY", "year", "date"),
    FieldMapping("accessed", "urldate", "urldate", "Y2", "access-date", "date"),
    FieldMapping("event-date", None, "eventdate", None, None, "date"),
    FieldMapping("original-date", None, "origdate", None, None, "date"),
    # Identifiers
    FieldMapping("DOI", "doi", "doi", "DO", "electronic-resource-num"),
    FieldMapping("ISBN", "isbn", "isbn", "SN", "isbn"),
    FieldMapping("ISSN", "issn", "issn", "SN", None),
    FieldMapping("URL", "url", "url", "UR", "url"),
    FieldMapping("PMID", "pmid", "pmid", "AN", "accession-num"),
    # Publication details
    FieldMapping("publisher", "publisher", "publisher", "PB", "publisher"),
    FieldMapping("publisher-place", "address", "location", "CY", "pub-location"),
    FieldMapping("volume", "volume", "volume", "VL", "volume", "number"),
    FieldMapping("issue", "number", "number", "IS", "number", "number"),
    FieldMapping("page", "pages", "pages", "SP", "pages", "page-range"),
    FieldMapping("number-of-pages", "pagetotal", "pagetotal", None, None, "number"),
    FieldMapping("edition", "edition", "edition", "ET", "edition"),
    FieldMapping("chapter-number", "chapter", "chapter", "CP", "section"),
    # Academic
    FieldMapping("abstract", "abstract", "abstract", "AB", "abstract"),
    FieldMapping("keyword", "keywords", "keywords", "KW", "keywords"),
    FieldMapping("note", "note", "note", "N1", "notes"),
    FieldMapping("annote", "annote", "annotation", "N2", "research-notes"),
    # Events
    FieldMapping("event", "eventtitle", "eventtitle", None, "conference-name"),
    FieldMapping("event-place", "venue", "venue", "C1", "conference-location"),
    # Media and catalogue
    FieldMapping("medium", "howpublished", "howpublished", "M1", "type-of-work"),
    FieldMapping("genre", "type", "type", "M3", "work-type"),
    FieldMapping("status", None, "pubstate", None, None),
    FieldMapping("call-number", None, None, "CN", "call-num"),
    FieldMapping("language", "language", "language", "LA", "language"),
)

# (target format, target entry type) -> canonical field -> spelling.
TYPE_SPECIFIC_FIELDS: Mapping[BibFormat, Mapping[str, Mapping[str, str]]] = MappingProxyType(
    {
        BibFormat.BIBTEX: {
            "article": {"container-title": "journal"},
            "inproceedings": {"container-title": "booktitle"},
            "incollection": {"container-title": "booktitle"},
            "inbook": {"container-title": "booktitle"},
            "phdthesis": {"publisher": "school"},
            "mastersthesis": {"publisher": "school"},
            "techreport": {"publisher": "institution"},
        },
        BibFormat.BIBLATEX: {
            "inproceedings": {"container-title": "booktitle"},
            "incollection": {"container-title": "booktitle"},
            "inbook": {"container-title": "booktitle"},
            "inreference": {"container-title": "booktitle"},
            "thesis": {"publisher": "institution"},
            "report": {"publisher": "institution"},
        },
    }
)

# Spellings that only ever appear on input.
_BIBTEX_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "booktitle": "container-title",
        "journal": "container-title",
        "journaltitle": "container-title",
        "year": "issued",
        "month": "issued",
        "day": "issued",
        "date": "issued",
        "school": "publisher",
        "institution": "publisher",
        "address": "publisher-place",
        "location": "publisher-place",
        "annotation": "annote",
    }
)

_RIS_ALIASES: Mapping[str, str] = MappingProxyType(
    {
        "A1": "author",
        "A2": "editor",
        "T1": "title",
        "Y1": "issued",
        "DA": "issued",
        "JF": "container-title",
        "JA": "container-title",
        "J2": "container-title",
        "T2": "container-title",
        "BT": "container-title",
        "EP": "page",
    }
)


def _reverse(fmt: BibFormat, aliases: Mapping[str, str] | None = None) -> Mapping[str, str]:
    table: dict[str, str] = {}
    for mapping in FIELD_MAPPINGS.values():
        name = mapping.for_format(fmt)
        if name is not None:
            table.setdefault(name.casefold(), mapping.canonical)
    for alias, canonical in (aliases or {}).items():
        table.setdefault(alias.casefold(), canonical)
    return MappingProxyType(table)


def _reverse_bibtex_family() -> Mapping[str, str]:
    table: dict[str, str] = dict(_BIBTEX_ALIASES)
    for fmt in (BibFormat.BIBTEX, BibFormat.BIBLATEX):
        for name, canonical in _reverse(fmt).items():
            table.setdefault(name, canonical)
    return MappingProxyType(table)


_REVERSE: Mapping[BibFormat, Mapping[str, str]] = MappingProxyType(
    {
        BibFormat.BIBTEX: _reverse_bibtex_family(),
        BibFormat.BIBLATEX: _reverse_bibtex_family(),
        BibFormat.RIS: _reverse(BibFormat.RIS, _RIS_ALIASES),
        BibFormat.ENDNOTE: _reverse(BibFormat.ENDNOTE),
    }
)


def get_field_mapping(canonical: str) -> FieldMapping | None:
    return FIELD_MAPPINGS.get(canonical)


def field_name_for(
    canonical: str, fmt: BibFormat, entry_type: str | None = None
) -> str | None:
    """Return the spelling of ``canonical`` in ``fmt`` for an entry of ``entry_type``.

    Canonical JSON keeps every field under its own name. For the other formats
    ``None`` means the field cannot be written.
    """
    if fmt is BibFormat.CSL_JSON:
        return canonical
    if entry_type:
        override = TYPE_SPECIFIC_FIELDS.get(fmt, {}).get(entry_type.lower(), {})
        if canonical in override:
            return override[canonical]
    mapping = FIELD_MAPPINGS.get(canonical)
    if mapping is None:
        return None
    return mapping.for_format(fmt)


def canonical_field_for(name: str, fmt: BibFormat) -> str | None:
    """Return the canonical field read from the format field ``name``, ignoring case.

    The BibTeX and BibLaTeX vocabularies are accepted interchangeably since
    both dialects share one grammar.
    """
    if fmt is BibFormat.CSL_JSON:
        return name
    return _REVERSE[fmt].get(name.strip().casefold())


def representable_in(canonical: str, fmt: BibFormat) -> bool:
    """Return whether ``fmt`` has any place for the canonical field."""
    return field_name_for(canonical, fmt) is not None


__all__ = [
    "FIELD_MAPPINGS",
    "TYPE_SPECIFIC_FIELDS",
    "FieldMapping",
    "Transform",
    "canonical_field_for",
    "field_name_for",
    "get_field_mapping",
    "representable_in",
]
