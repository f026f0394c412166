"""Primitives shared by the format parsers."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
import logging
from typing import Any, ClassVar, Protocol

from pydantic import ValidationError

from ..exceptions import DocumentSyntaxError, RecordSyntaxError
from ..formats import BibFormat
from ..issues import UNKNOWN_ENTRY, ConversionWarning, ParseResult, Severity
from ..models import CanonicalEntry


logger = logging.getLogger(__name__)


class Parser(Protocol):
    """Protocol implemented by every format parser."""

    format: BibFormat

    def parse(self, text: str) -> ParseResult: ...

    def validate(self, text: str) -> list[ConversionWarning]: ...


@dataclass(frozen=True, slots=True)
class RawRecord:
    """One record located in a document, before it is interpreted.

    A record whose boundaries are broken is still located so it can be
    counted; ``error`` then describes the problem and the record is dropped.
    """

    position: int
    text: str
    entry_id: str | None = None
    error: str | None = None
    payload: Any = None


@dataclass(slots=True)
class EntryDraft:
    """Mutable accumulator used while a single record is being interpreted."""

    id: str
    type: str
    source: BibFormat
    original_type: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)
    custom_fields: dict[str, Any] = field(default_factory=dict)
    warnings: list[ConversionWarning] = field(default_factory=list)

    def set(self, name: str, value: Any) -> bool:
        """Store a canonical field unless it is empty or already populated."""
        if value is None or value == "" or value == ():
            return False
        if name in self.fields:
            return False
        self.fields[name] = value
        return True

    def warn(self, message: str, *, field_name: str | None = None) -> None:
        self.warnings.append(
            ConversionWarning(
                entry_id=self.id,
                severity="warning",
                type="validation-error",
                message=message,
                field=field_name,
            )
        )

    def build(self) -> CanonicalEntry:
        payload: dict[str, Any] = {"id": self.id, "type": self.type, **self.fields}
        payload["_formatMetadata"] = {
            "source": self.source,
            "originalType": self.original_type,
            "customFields": dict(self.custom_fields),
        }
        return build_entry(payload, entry_id=self.id)


def build_entry(payload: dict[str, Any], *, entry_id: str | None = None) -> CanonicalEntry:
    """Validate ``payload`` into an entry, reporting failures as record errors."""
    try:
        return CanonicalEntry.model_validate(payload)
    except ValidationError as exc:
        raise RecordSyntaxError(_describe_validation_error(exc), entry_id=entry_id) from exc


def _describe_validation_error(exc: ValidationError) -> str:
    details = exc.errors()
    if not details:
        return "Entry failed validation."
    first = details[0]
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "invalid value")
    if location:
        return f"Invalid value for '{location}': {message}"
    return f"Invalid entry: {message}"


def record_error(entry_id: str | None, message: str) -> ConversionWarning:
    return ConversionWarning(
        entry_id=entry_id or UNKNOWN_ENTRY,
        severity="error",
        type="parse-error",
        message=message,
    )


def validation_issue(
    message: str,
    *,
    severity: Severity = "error",
    entry_id: str | None = None,
) -> ConversionWarning:
    return ConversionWarning(
        entry_id=entry_id or UNKNOWN_ENTRY,
        severity=severity,
        type="validation-error",
        message=message,
    )


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def unique_id(candidate: str, seen: set[str]) -> str:
    """Return ``candidate``, or ``candidate`` plus a letter when it is taken."""
    if candidate not in seen:
        seen.add(candidate)
        return candidate
    for suffix in "abcdefghijklmnopqrstuvwxyz":
        alternative = f"{candidate}{suffix}"
        if alternative not in seen:
            seen.add(alternative)
            return alternative
    counter = 2
    while f"{candidate}-{counter}" in seen:
        counter += 1
    alternative = f"{candidate}-{counter}"
    seen.add(alternative)
    return alternative


class BaseParser:
    """Base class running the record loop shared by every text format.

    Subclasses locate records with `_locate_records` and interpret one record
    with `_parse_record`. A record that fails is dropped with a ``parse-error``
    warning and the loop moves on; a document in which nothing can be located
    yields a single error and no entries.
    """

    format: ClassVar[BibFormat]

    def parse(self, text: str) -> ParseResult:
        try:
            records = list(self._locate_records(text))
        except DocumentSyntaxError as exc:
            logger.debug("No %s records located: %s", self.format.value, exc)
            return ParseResult.document_error(str(exc))

        entries: list[CanonicalEntry] = []
        warnings: list[ConversionWarning] = []
        seen_ids: set[str] = set()
        failed = 0
        for record in records:
            try:
                if record.error is not None:
                    raise RecordSyntaxError(record.error, entry_id=record.entry_id)
                entry, notes = self._parse_record(record, seen_ids)
            except RecordSyntaxError as exc:
                failed += 1
                entry_id = exc.entry_id or record.entry_id
                logger.debug("Dropped %s record %s: %s", self.format.value, entry_id, exc)
                warnings.append(record_error(entry_id, str(exc)))
                continue
            seen_ids.add(entry.id)
            entries.append(entry)
            warnings.extend(notes)

        warnings.extend(_duplicate_notes(entries))
        logger.debug(
            "Parsed %d of %d %s records", len(entries), len(records), self.format.value
        )
        return ParseResult.build(entries, warnings, total=len(records), failed=failed)

    def validate(self, text: str) -> list[ConversionWarning]:
        raise NotImplementedError

    # --------------------------------------------------------------------- hooks

    def _locate_records(self, text: str) -> Iterable[RawRecord]:
        """Sub-classes must split ``text`` into records."""
        raise NotImplementedError

    def _parse_record(
        self, record: RawRecord, seen_ids: set[str]
    ) -> tuple[CanonicalEntry, Iterable[ConversionWarning]]:
        """Sub-classes must turn one record into an entry.

        ``seen_ids`` holds the keys of the entries parsed so far in the
        document; parsers that invent keys use it to keep them unique.
        """
        raise NotImplementedError


def _duplicate_notes(entries: Iterable[CanonicalEntry]) -> list[ConversionWarning]:
    seen: set[str] = set()
    notes: list[ConversionWarning] = []
    for entry in entries:
        if entry.id in seen:
            notes.append(
                ConversionWarning(
                    entry_id=entry.id,
                    severity="warning",
                    type="validation-error",
                    message=f"Duplicate citation key '{entry.id}'.",
                )
            )
        seen.add(entry.id)
    return notes


__all__ = [
    "BaseParser",
    "EntryDraft",
    "Parser",
    "RawRecord",
    "build_entry",
    "collapse_whitespace",
    "record_error",
    "unique_id",
    "validation_issue",
]
