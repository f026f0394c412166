"""Format writers rendering canonical entries."""

from __future__ import annotations

from .base import BaseGenerator, Generator
from .bibtex import BibLaTeXGenerator, BibTeXGenerator
from .csl import CslJsonGenerator
from .endnote import EndNoteGenerator
from .ris import RISGenerator


__all__ = [
    "BaseGenerator",
    "BibLaTeXGenerator",
    "BibTeXGenerator",
    "CslJsonGenerator",
    "EndNoteGenerator",
    "Generator",
    "RISGenerator",
]
