"""Custom exception hierarchy for the citation conversion pipeline."""

from __future__ import annotations


class BibsmithError(RuntimeError):
    """Base exception for bibliography conversion failures."""


class UnsupportedFormatError(BibsmithError, ValueError):
    """Raised when a format identifier does not name a known bibliography format."""

    def __init__(self, value: object) -> None:
        from .formats import BibFormat

        supported = ", ".join(fmt.value for fmt in BibFormat)
        super().__init__(f"Unsupported format '{value}'. Supported formats: {supported}")
        self.value = value


class ConfigurationError(BibsmithError):
    """Raised when a configuration file cannot be read or validated."""


class FormatDetectionError(BibsmithError, ValueError):
    """Raised when the format of a document cannot be inferred from its content."""


class DocumentSyntaxError(BibsmithError):
    """Raised when no record at all can be located in a document."""


class RecordSyntaxError(BibsmithError):
    """Raised when a single source record cannot be turned into an entry."""

    def __init__(self, message: str, *, entry_id: str | None = None) -> None:
        super().__init__(message)
        self.entry_id = entry_id


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "BibsmithError",
    "ConfigurationError",
    "DocumentSyntaxError",
    "FormatDetectionError",
    "RecordSyntaxError",
    "UnsupportedFormatError",
    "exception_hint",
    "exception_messages",
]
