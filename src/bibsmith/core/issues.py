"""Structured diagnostics returned by parsers and the converter."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from .models import CanonicalEntry


Severity = Literal["info", "warning", "error"]
WarningType = Literal[
    "type-downgrade",
    "field-loss",
    "encoding-loss",
    "parse-error",
    "validation-error",
]

UNKNOWN_ENTRY = "unknown"


@dataclass(frozen=True, slots=True)
class ConversionWarning:
    """Represents a problem, or a lossy decision, tied to one entry or the document."""

    entry_id: str
    severity: Severity
    type: WarningType
    message: str
    field: str | None = None

    @property
    def is_error(self) -> bool:
        return self.severity == "error"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "entryId": self.entry_id,
            "severity": self.severity,
            "type": self.type,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        return payload


@dataclass(frozen=True, slots=True)
class ConversionStats:
    """Per-document counters.

    ``total`` counts the records located in the document, ``successful`` the
    ones turned into entries and ``failed`` the ones dropped. ``with_warnings``
    counts warning-severity diagnostics.
    """

    total: int = 0
    successful: int = 0
    with_warnings: int = 0
    failed: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "total": self.total,
            "successful": self.successful,
            "withWarnings": self.with_warnings,
            "failed": self.failed,
        }


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Entries parsed from one document, with the diagnostics raised on the way."""

    entries: tuple[CanonicalEntry, ...] = ()
    warnings: tuple[ConversionWarning, ...] = ()
    stats: ConversionStats = field(default_factory=ConversionStats)

    @classmethod
    def build(
        cls,
        entries: Sequence[CanonicalEntry],
        warnings: Sequence[ConversionWarning],
        *,
        total: int,
        failed: int,
    ) -> ParseResult:
        stats = ConversionStats(
            total=total,
            successful=len(entries),
            with_warnings=sum(1 for warning in warnings if warning.severity == "warning"),
            failed=failed,
        )
        return cls(entries=tuple(entries), warnings=tuple(warnings), stats=stats)

    @classmethod
    def document_error(cls, message: str) -> ParseResult:
        """Return the result for a document in which no record could be located."""
        warning = ConversionWarning(
            entry_id=UNKNOWN_ENTRY,
            severity="error",
            type="parse-error",
            message=message,
        )
        return cls(warnings=(warning,))

    def with_warnings(self, extra: Iterable[ConversionWarning]) -> ParseResult:
        """Return a copy carrying additional warnings; statistics are left untouched."""
        return ParseResult(
            entries=self.entries,
            warnings=self.warnings + tuple(extra),
            stats=self.stats,
        )

    @property
    def errors(self) -> tuple[ConversionWarning, ...]:
        return tuple(warning for warning in self.warnings if warning.is_error)


__all__ = [
    "UNKNOWN_ENTRY",
    "ConversionStats",
    "ConversionWarning",
    "ParseResult",
    "Severity",
    "WarningType",
]
