"""Canonical bibliography model shared by every parser and generator.

Every format is converted through a single hub representation modelled on
CSL JSON. The models are frozen pydantic models so an entry returned by a
parser can be handed to any number of generators without defensive copies;
updates go through ``model_copy(update=...)`` and produce new values.

Field names
: Python attributes use snake_case. The hyphenated and camel-cased keys of
  the JSON wire format (``container-title``, ``date-parts``,
  ``non-dropping-particle``, ``_formatMetadata``) are declared as aliases and
  are what ``to_json_dict`` emits.

Extra keys
: `CanonicalEntry` accepts keys it does not declare. They come from canonical
  JSON documents and are kept verbatim so they survive a JSON round trip; the
  other generators ignore them.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .formats import BibFormat


ItemType = Literal[
    "article",
    "article-journal",
    "article-magazine",
    "article-newspaper",
    "bill",
    "book",
    "broadcast",
    "chapter",
    "dataset",
    "entry",
    "entry-dictionary",
    "entry-encyclopedia",
    "figure",
    "graphic",
    "interview",
    "legal_case",
    "legislation",
    "manuscript",
    "map",
    "motion_picture",
    "musical_score",
    "paper-conference",
    "patent",
    "personal_communication",
    "post",
    "post-weblog",
    "report",
    "review",
    "review-book",
    "song",
    "speech",
    "thesis",
    "treaty",
    "webpage",
    "software",
]

ITEM_TYPES: frozenset[str] = frozenset(get_args(ItemType))

DatePart = tuple[int, ...]


class Person(BaseModel):
    """A personal or corporate name.

    A person is either opaque (``literal``, used for organisations and names
    that could not be split) or structured. The two shapes never mix.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    family: str | None = None
    given: str | None = None
    literal: str | None = None
    non_dropping_particle: str | None = Field(default=None, alias="non-dropping-particle")
    dropping_particle: str | None = Field(default=None, alias="dropping-particle")
    suffix: str | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> Person:
        structured = any(
            value is not None
            for value in (
                self.family,
                self.given,
                self.non_dropping_particle,
                self.dropping_particle,
                self.suffix,
            )
        )
        if self.literal is not None and structured:
            raise ValueError("a literal name cannot carry family, given, particle or suffix parts")
        if self.literal is None and not structured:
            raise ValueError("a name needs either a literal value or at least one name part")
        return self

    @property
    def is_literal(self) -> bool:
        return self.literal is not None

    @property
    def sort_key(self) -> str:
        """Return the family (or literal) name used when ordering entries."""
        return self.family or self.literal or ""

    def display_name(self) -> str:
        if self.literal is not None:
            return self.literal
        parts = [
            self.given,
            self.non_dropping_particle,
            self.dropping_particle,
            self.family,
        ]
        text = " ".join(part for part in parts if part)
        return f"{text}, {self.suffix}" if self.suffix else text


class StructuredDate(BaseModel):
    """A date expressed as one or two ``(year, month?, day?)`` triples, or as raw text."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    date_parts: tuple[DatePart, ...] | None = Field(default=None, alias="date-parts")
    raw: str | None = None
    circa: bool | None = None
    season: int | str | None = None

    @model_validator(mode="after")
    def _check_shape(self) -> StructuredDate:
        if (self.date_parts is None) == (self.raw is None):
            raise ValueError("a date holds exactly one of 'date-parts' or 'raw'")
        if self.date_parts is not None:
            if not 1 <= len(self.date_parts) <= 2:
                raise ValueError("'date-parts' holds one date or a two-date range")
            for part in self.date_parts:
                if not 1 <= len(part) <= 3:
                    raise ValueError("each date in 'date-parts' is (year[, month[, day]])")
        return self

    @classmethod
    def from_parts(
        cls, year: int, month: int | None = None, day: int | None = None
    ) -> StructuredDate:
        """Build a single date; ``day`` is ignored unless ``month`` is given."""
        parts: list[int] = [year]
        if month is not None:
            parts.append(month)
            if day is not None:
                parts.append(day)
        return cls(date_parts=(tuple(parts),))

    @classmethod
    def from_raw(cls, text: str) -> StructuredDate:
        return cls(raw=text)

    @property
    def start(self) -> DatePart | None:
        if not self.date_parts:
            return None
        return self.date_parts[0]

    @property
    def year(self) -> int | None:
        start = self.start
        return start[0] if start else None

    @property
    def is_range(self) -> bool:
        return self.date_parts is not None and len(self.date_parts) == 2


class FormatMetadata(BaseModel):
    """Provenance of an entry: where it came from and what could not be mapped."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    source: BibFormat
    original_type: str | None = Field(default=None, alias="originalType")
    custom_fields: dict[str, Any] = Field(default_factory=dict, alias="customFields")


class CanonicalEntry(BaseModel):
    """One bibliographic record in the hub representation."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, extra="allow", coerce_numbers_to_str=True
    )

    id: str = Field(min_length=1)
    type: ItemType

    # Creators
    author: tuple[Person, ...] | None = None
    editor: tuple[Person, ...] | None = None
    translator: tuple[Person, ...] | None = None
    composer: tuple[Person, ...] | None = None
    director: tuple[Person, ...] | None = None
    illustrator: tuple[Person, ...] | None = None
    interviewer: tuple[Person, ...] | None = None
    collection_editor: tuple[Person, ...] | None = Field(default=None, alias="collection-editor")
    container_author: tuple[Person, ...] | None = Field(default=None, alias="container-author")

    # Titles
    title: str | None = None
    container_title: str | None = Field(default=None, alias="container-title")
    collection_title: str | None = Field(default=None, alias="collection-title")
    title_short: str | None = Field(default=None, alias="title-short")

    # Dates
    issued: StructuredDate | None = None
    accessed: StructuredDate | None = None
    submitted: StructuredDate | None = None
    event_date: StructuredDate | None = Field(default=None, alias="event-date")
    original_date: StructuredDate | None = Field(default=None, alias="original-date")

    # Identifiers
    doi: str | None = Field(default=None, alias="DOI")
    isbn: str | None = Field(default=None, alias="ISBN")
    issn: str | None = Field(default=None, alias="ISSN")
    pmid: str | None = Field(default=None, alias="PMID")
    pmcid: str | None = Field(default=None, alias="PMCID")
    url: str | None = Field(default=None, alias="URL")

    # Publication details
    publisher: str | None = None
    publisher_place: str | None = Field(default=None, alias="publisher-place")
    volume: int | str | None = None
    issue: int | str | None = None
    page: str | None = None
    number_of_pages: int | str | None = Field(default=None, alias="number-of-pages")
    edition: int | str | None = None
    chapter_number: int | str | None = Field(default=None, alias="chapter-number")

    # Academic
    abstract: str | None = None
    keyword: str | None = None
    note: str | None = None
    annote: str | None = None

    # Events
    event: str | None = None
    event_place: str | None = Field(default=None, alias="event-place")

    # Legal
    authority: str | None = None
    jurisdiction: str | None = None
    call_number: str | None = Field(default=None, alias="call-number")

    # Media
    medium: str | None = None
    genre: str | None = None
    status: str | None = None

    language: str | None = None

    format_metadata: FormatMetadata | None = Field(default=None, alias="_formatMetadata")

    def get(self, name: str, default: Any = None) -> Any:
        """Return a field by its canonical (wire) name, falling back to extra keys."""
        attribute = _ATTRIBUTE_BY_NAME.get(name)
        if attribute is not None:
            value = getattr(self, attribute)
            return default if value is None else value
        extra = self.model_extra or {}
        return extra.get(name, default)

    def populated_fields(self) -> Iterator[tuple[str, Any]]:
        """Yield ``(canonical name, value)`` for every populated data field.

        ``id``, ``type`` and the provenance record are not data fields and are
        skipped. Declared fields come first in declaration order, then extras.
        """
        for name in CANONICAL_FIELDS:
            value = getattr(self, _ATTRIBUTE_BY_NAME[name])
            if value is None:
                continue
            yield name, value
        for name, value in (self.model_extra or {}).items():
            if value is not None:
                yield name, value

    @property
    def custom_fields(self) -> dict[str, Any]:
        if self.format_metadata is None:
            return {}
        return self.format_metadata.custom_fields

    @property
    def source_format(self) -> BibFormat | None:
        return self.format_metadata.source if self.format_metadata else None

    def to_json_dict(self, *, include_metadata: bool = False) -> dict[str, Any]:
        """Serialise the entry using the canonical JSON key names."""
        exclude = None if include_metadata else {"format_metadata"}
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, exclude=exclude)


def _attribute_map() -> dict[str, str]:
    mapping: dict[str, str] = {}
    for attribute, info in CanonicalEntry.model_fields.items():
        mapping[info.alias or attribute] = attribute
    return mapping


_ATTRIBUTE_BY_NAME: dict[str, str] = _attribute_map()
_NON_DATA_FIELDS = frozenset({"id", "type", "_formatMetadata"})

CANONICAL_FIELDS: tuple[str, ...] = tuple(
    name for name in _ATTRIBUTE_BY_NAME if name not in _NON_DATA_FIELDS
)
CREATOR_FIELDS: tuple[str, ...] = (
    "author",
    "editor",
    "translator",
    "composer",
    "director",
    "illustrator",
    "interviewer",
    "collection-editor",
    "container-author",
)
DATE_FIELDS: tuple[str, ...] = (
    "issued",
    "accessed",
    "submitted",
    "event-date",
    "original-date",
)


__all__ = [
    "CANONICAL_FIELDS",
    "CREATOR_FIELDS",
    "DATE_FIELDS",
    "ITEM_TYPES",
    "CanonicalEntry",
    "DatePart",
    "FormatMetadata",
    "ItemType",
    "Person",
    "StructuredDate",
]
