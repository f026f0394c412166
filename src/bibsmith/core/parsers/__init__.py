"""Format readers producing canonical entries."""

from __future__ import annotations

from .base import BaseParser, Parser, RawRecord
from .bibtex import BibLaTeXParser, BibTeXParser
from .csl import CslJsonParser
from .endnote import EndNoteParser
from .ris import RISParser


__all__ = [
    "BaseParser",
    "BibLaTeXParser",
    "BibTeXParser",
    "CslJsonParser",
    "EndNoteParser",
    "Parser",
    "RISParser",
    "RawRecord",
]
