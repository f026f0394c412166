"""Helpers to read, query and edit lists of canonical entries.

Every helper returns new values. Entries are frozen, so edits produce fresh
copies and the input sequences are never modified.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any, Literal

from .converter import detect_format, parse
from .exceptions import FormatDetectionError
from .formats import BibFormat
from .models import CanonicalEntry


SortKey = Literal["id", "author", "year"]
DedupeKey = Literal["id", "doi"]


def read_entries(text: str, fmt: BibFormat | str | None = None) -> list[CanonicalEntry]:
    """Parse ``text`` and return its entries, detecting the format when omitted."""
    if fmt is None:
        fmt = detect_format(text)
        if fmt is None:
            raise FormatDetectionError("Unable to detect the bibliography format.")
    return list(parse(text, fmt).entries)


def _creator_text(entry: CanonicalEntry) -> Iterable[str]:
    for person in entry.author or ():
        yield " ".join(
            part
            for part in (person.given, person.non_dropping_particle, person.family, person.literal)
            if part
        ).lower()


def filter_entries(
    entries: Iterable[CanonicalEntry],
    *,
    entry_id: str | None = None,
    author: str | None = None,
    year: int | None = None,
    entry_type: str | None = None,
    keyword: str | None = None,
) -> list[CanonicalEntry]:
    """Return the entries matching every criterion that is given.

    ``author`` and ``keyword`` match case-insensitive substrings; ``year``
    compares against the start of ``issued``.
    """
    selected: list[CanonicalEntry] = []
    for entry in entries:
        if entry_id is not None and entry.id != entry_id:
            continue
        if author and not any(author.lower() in name for name in _creator_text(entry)):
            continue
        if year is not None and (entry.issued is None or entry.issued.year != year):
            continue
        if entry_type is not None and entry.type != entry_type:
            continue
        if keyword and keyword.lower() not in (entry.keyword or "").lower():
            continue
        selected.append(entry)
    return selected


def create_entry(data: Mapping[str, Any]) -> CanonicalEntry:
    """Build an entry from a mapping using canonical (wire) field names."""
    if not data.get("id"):
        raise ValueError("An entry needs an 'id'.")
    if not data.get("type"):
        raise ValueError("An entry needs a 'type'.")
    return CanonicalEntry.model_validate(dict(data))


def update_entry(entry: CanonicalEntry, updates: Mapping[str, Any]) -> CanonicalEntry:
    """Return a copy of ``entry`` with ``updates`` applied; the ``id`` never changes.

    A ``None`` value removes the field.
    """
    payload = entry.model_dump(by_alias=True, exclude_none=True)
    for name, value in updates.items():
        if name == "id":
            continue
        if value is None:
            payload.pop(name, None)
        else:
            payload[name] = value
    return CanonicalEntry.model_validate(payload)


def delete_entries(entries: Iterable[CanonicalEntry], ids: Iterable[str]) -> list[CanonicalEntry]:
    doomed = set(ids)
    return [entry for entry in entries if entry.id not in doomed]


def _dedupe_key(entry: CanonicalEntry, by: DedupeKey) -> str:
    if by == "doi" and entry.doi:
        return f"doi:{entry.doi.strip().lower()}"
    return f"id:{entry.id}"


def merge_entries(
    collections: Iterable[Sequence[CanonicalEntry]], by: DedupeKey = "id"
) -> list[CanonicalEntry]:
    """Concatenate ``collections``, keeping the first entry seen for each key.

    With ``by="doi"`` entries without a DOI fall back to their ``id``.
    """
    seen: set[str] = set()
    merged: list[CanonicalEntry] = []
    for collection in collections:
        for entry in collection:
            key = _dedupe_key(entry, by)
            if key in seen:
                continue
            seen.add(key)
            merged.append(entry)
    return merged


def _first_author(entry: CanonicalEntry) -> str:
    if not entry.author:
        return ""
    return entry.author[0].sort_key.lower()


def sort_entries(entries: Iterable[CanonicalEntry], by: SortKey = "id") -> list[CanonicalEntry]:
    """Return ``entries`` sorted by key, first author, or year (newest first).

    The sort is stable; entries without a year come last when sorting by year.
    """
    match by:
        case "id":
            return sorted(entries, key=lambda entry: entry.id)
        case "author":
            return sorted(entries, key=_first_author)
        case "year":
            return sorted(
                entries,
                key=lambda entry: -(entry.issued.year or 0) if entry.issued else 0,
            )
        case _:
            raise ValueError(f"Unknown sort key '{by}'.")


__all__ = [
    "create_entry",
    "delete_entries",
    "filter_entries",
    "merge_entries",
    "read_entries",
    "sort_entries",
    "update_entry",
]
