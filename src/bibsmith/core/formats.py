"""Closed enumeration of the bibliography formats handled by the converter."""

from __future__ import annotations

from enum import Enum

from .exceptions import UnsupportedFormatError


class BibFormat(str, Enum):
    """Format identifiers accepted by parsers, generators and the CLI."""

    BIBTEX = "bibtex"
    BIBLATEX = "biblatex"
    CSL_JSON = "csl-json"
    RIS = "ris"
    ENDNOTE = "endnote"

    @classmethod
    def coerce(cls, value: BibFormat | str) -> BibFormat:
        """Resolve ``value`` into a format, tolerating case and surrounding spaces."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            normalised = value.strip().lower()
            for member in cls:
                if member.value == normalised:
                    return member
        raise UnsupportedFormatError(value)

    @property
    def is_bibtex_family(self) -> bool:
        return self in (BibFormat.BIBTEX, BibFormat.BIBLATEX)

    def __str__(self) -> str:
        return self.value


__all__ = ["BibFormat"]
