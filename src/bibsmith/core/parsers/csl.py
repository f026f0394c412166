"""Canonical JSON reader.

The document is either an array of entry objects or a single object. Entries
are validated against the canonical model; an unknown ``type`` does not drop
the entry but falls back to ``article`` with a warning.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
import json
import logging
from typing import Any, ClassVar

from ..codecs import dates, names
from ..exceptions import DocumentSyntaxError, RecordSyntaxError
from ..formats import BibFormat
from ..issues import ConversionWarning
from ..mappings.entry_types import DEFAULT_CANONICAL_TYPE
from ..models import CREATOR_FIELDS, DATE_FIELDS, ITEM_TYPES, CanonicalEntry
from .base import BaseParser, RawRecord, build_entry, validation_issue


logger = logging.getLogger(__name__)


def _load(text: str) -> Any:
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise DocumentSyntaxError(
            f"Invalid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})."
        ) from exc


def _items(document: Any) -> list[Any]:
    if isinstance(document, list):
        return document
    if isinstance(document, Mapping):
        return [document]
    raise DocumentSyntaxError("Canonical JSON must be an array of entries or a single entry.")


def resolve_item_type(value: str) -> str | None:
    """Match ``value`` against the canonical vocabulary, tolerating case and separators."""
    candidate = value.strip().lower()
    for variant in (candidate, candidate.replace("_", "-"), candidate.replace("-", "_")):
        if variant in ITEM_TYPES:
            return variant
    return None


def _normalise_date(value: Any) -> Any:
    if isinstance(value, str):
        return dates.parse(value)
    if not isinstance(value, Mapping):
        return value
    payload = dict(value)
    if "literal" in payload and "raw" not in payload and "date-parts" not in payload:
        payload["raw"] = payload.pop("literal")
    if payload.get("date-parts") is not None and "raw" in payload:
        payload.pop("raw")
    return payload


def _normalise_names(value: Any) -> Any:
    if isinstance(value, str):
        return names.parse_list(value)
    if isinstance(value, list):
        return [names.parse(item) if isinstance(item, str) else item for item in value]
    return value


class CslJsonParser(BaseParser):
    """Parse canonical JSON documents."""

    format: ClassVar[BibFormat] = BibFormat.CSL_JSON

    def validate(self, text: str) -> list[ConversionWarning]:
        try:
            items = _items(_load(text))
        except DocumentSyntaxError as exc:
            return [validation_issue(str(exc))]
        issues: list[ConversionWarning] = []
        if not items:
            issues.append(validation_issue("Document contains no entries.", severity="warning"))
        for index, item in enumerate(items, start=1):
            if not isinstance(item, Mapping):
                issues.append(validation_issue(f"Item {index} is not an object."))
                continue
            entry_id = str(item["id"]) if item.get("id") not in (None, "") else None
            if entry_id is None:
                issues.append(validation_issue(f"Item {index} is missing 'id'."))
            if not item.get("type"):
                issues.append(validation_issue("Entry is missing 'type'.", entry_id=entry_id))
        return issues

    # --------------------------------------------------------------------- scanning

    def _locate_records(self, text: str) -> Iterator[RawRecord]:
        if not text.strip():
            return
        for position, item in enumerate(_items(_load(text)), start=1):
            entry_id = None
            if isinstance(item, Mapping) and item.get("id") not in (None, ""):
                entry_id = str(item["id"])
            yield RawRecord(position=position, text="", entry_id=entry_id, payload=item)

    # --------------------------------------------------------------------- records

    def _parse_record(
        self, record: RawRecord, seen_ids: set[str]
    ) -> tuple[CanonicalEntry, list[ConversionWarning]]:
        item = record.payload
        if not isinstance(item, Mapping):
            raise RecordSyntaxError(f"Item {record.position} is not an object.")
        if record.entry_id is None:
            raise RecordSyntaxError(f"Item {record.position} is missing 'id'.")
        entry_id = record.entry_id
        raw_type = item.get("type")
        if not isinstance(raw_type, str) or not raw_type.strip():
            raise RecordSyntaxError("Entry is missing 'type'.", entry_id=entry_id)

        notes: list[ConversionWarning] = []
        item_type = resolve_item_type(raw_type)
        if item_type is None:
            item_type = DEFAULT_CANONICAL_TYPE
            notes.append(
                ConversionWarning(
                    entry_id=entry_id,
                    severity="warning",
                    type="validation-error",
                    message=f"Unknown type '{raw_type}', using '{item_type}'.",
                    field="type",
                )
            )

        payload = dict(item)
        payload["id"] = entry_id
        payload["type"] = item_type
        for name in DATE_FIELDS:
            if name in payload:
                payload[name] = _normalise_date(payload[name])
        for name in CREATOR_FIELDS:
            if name in payload:
                payload[name] = _normalise_names(payload[name])
        payload.setdefault(
            "_formatMetadata",
            {"source": self.format, "originalType": raw_type, "customFields": {}},
        )
        logger.debug("Validated canonical entry %s", entry_id)
        return build_entry(payload, entry_id=entry_id), notes


__all__ = ["CslJsonParser", "resolve_item_type"]
