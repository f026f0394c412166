"""Parse and serialise dates across ISO, BibTeX and RIS conventions."""

from __future__ import annotations

import calendar
import re

from ..models import DatePart, StructuredDate


_MONTH_NAME_TO_INT = {
    "jan": 1,
    "january": 1,
    "feb": 2,
    "february": 2,
    "mar": 3,
    "march": 3,
    "apr": 4,
    "april": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "august": 8,
    "sep": 9,
    "sept": 9,
    "september": 9,
    "oct": 10,
    "october": 10,
    "nov": 11,
    "november": 11,
    "dec": 12,
    "december": 12,
}

MONTH_MACROS: tuple[str, ...] = (
    "jan",
    "feb",
    "mar",
    "apr",
    "may",
    "jun",
    "jul",
    "aug",
    "sep",
    "oct",
    "nov",
    "dec",
)

_ISO_RE = re.compile(r"^(\d{4})(?:-(\d{1,2})(?:-(\d{1,2}))?)?$")
_RIS_RE = re.compile(r"^(\d{4})/(\d{0,2})(?:/(\d{0,2}))?(?:/[^/]*)?$")
_DAY_MONTH_YEAR_RE = re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?,?\s+(\d{4})$")
_MONTH_DAY_YEAR_RE = re.compile(r"^([A-Za-z]+)\.?\s+(\d{1,2}),?\s+(\d{4})$")
_MONTH_YEAR_RE = re.compile(r"^([A-Za-z]+)\.?,?\s+(\d{4})$")


def month_from_name(value: str) -> int | None:
    """Resolve an English month name or abbreviation, ignoring case and a final dot."""
    return _MONTH_NAME_TO_INT.get(value.strip().rstrip(".").lower())


def _valid_part(year: int, month: int | None, day: int | None) -> DatePart | None:
    if month is None:
        return (year,)
    if not 1 <= month <= 12:
        return None
    if day is None:
        return (year, month)
    if year >= 1:
        last_day = calendar.monthrange(year, month)[1]
    else:
        last_day = 31
    if not 1 <= day <= last_day:
        return None
    return (year, month, day)


def _optional_int(value: str | None) -> int | None:
    return int(value) if value else None


def _parse_single(text: str) -> DatePart | None:
    match = _ISO_RE.match(text)
    if match:
        year, month, day = match.groups()
        return _valid_part(int(year), _optional_int(month), _optional_int(day))

    match = _RIS_RE.match(text)
    if match:
        year, month, day = match.groups()
        month_value = _optional_int(month)
        day_value = _optional_int(day) if month_value is not None else None
        return _valid_part(int(year), month_value, day_value)

    match = _DAY_MONTH_YEAR_RE.match(text)
    if match:
        day, name, year = match.groups()
        month_value = month_from_name(name)
        if month_value is None:
            return None
        return _valid_part(int(year), month_value, int(day))

    match = _MONTH_DAY_YEAR_RE.match(text)
    if match:
        name, day, year = match.groups()
        month_value = month_from_name(name)
        if month_value is None:
            return None
        return _valid_part(int(year), month_value, int(day))

    match = _MONTH_YEAR_RE.match(text)
    if match:
        name, year = match.groups()
        month_value = month_from_name(name)
        if month_value is None:
            return None
        return _valid_part(int(year), month_value, None)

    return None


def parse(text: str) -> StructuredDate:
    """Parse a free-form date string; unrecognised input is kept as ``raw``."""
    normalised = " ".join(text.split())
    if not normalised:
        return StructuredDate.from_raw(text)

    single = _parse_single(normalised)
    if single is not None:
        return StructuredDate(date_parts=(single,))

    halves = normalised.split("/")
    if len(halves) == 2:
        start = _parse_single(halves[0].strip())
        end = _parse_single(halves[1].strip())
        if start is not None and end is not None:
            return StructuredDate(date_parts=(start, end))

    return StructuredDate.from_raw(normalised)


def parse_bibtex(
    year: str | int | None,
    month: str | int | None = None,
    day: str | int | None = None,
) -> StructuredDate | None:
    """Combine separate BibTeX ``year``/``month``/``day`` fields.

    Returns ``None`` only when no year is given. A year that is not a number
    becomes a raw date; an unusable month or day is dropped.
    """
    if year is None:
        return None
    year_text = str(year).strip()
    if not year_text:
        return None
    if not year_text.isdigit():
        return StructuredDate.from_raw(year_text)
    year_value = int(year_text)

    month_value: int | None = None
    if month is not None and str(month).strip():
        month_text = str(month).strip()
        if month_text.isdigit():
            month_value = int(month_text)
        else:
            month_value = month_from_name(month_text)
        if month_value is not None and not 1 <= month_value <= 12:
            month_value = None

    day_value: int | None = None
    if month_value is not None and day is not None and str(day).strip().isdigit():
        day_value = int(str(day).strip())

    part = _valid_part(year_value, month_value, day_value) or _valid_part(
        year_value, month_value, None
    )
    return StructuredDate(date_parts=(part,))


def _iso_part(part: DatePart, separator: str = "-") -> str:
    pieces = [f"{part[0]:04d}"]
    pieces.extend(f"{value:02d}" for value in part[1:])
    return separator.join(pieces)


def serialize(date: StructuredDate) -> str:
    """Return the ISO form of ``date``; ranges are joined with ``/``."""
    if not date.date_parts:
        return date.raw or ""
    return "/".join(_iso_part(part) for part in date.date_parts)


def serialize_bibtex(date: StructuredDate) -> dict[str, str]:
    """Split the start of ``date`` into BibTeX ``year``, ``month`` macro and ``day``."""
    start = date.start
    if start is None:
        return {"year": date.raw} if date.raw else {}
    fields = {"year": str(start[0])}
    if len(start) > 1:
        month = start[1]
        fields["month"] = MONTH_MACROS[month - 1] if 1 <= month <= 12 else str(month)
    if len(start) > 2:
        fields["day"] = f"{start[2]:02d}"
    return fields


def serialize_ris(date: StructuredDate) -> str:
    """Return the RIS ``YYYY/MM/DD`` form of the start of ``date``."""
    start = date.start
    if start is None:
        return date.raw or ""
    return _iso_part(start, "/")


__all__ = [
    "MONTH_MACROS",
    "month_from_name",
    "parse",
    "parse_bibtex",
    "serialize",
    "serialize_bibtex",
    "serialize_ris",
]
