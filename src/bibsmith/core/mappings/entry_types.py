"""Entry type vocabularies of every format, keyed by canonical item type.

The canonical type is the hub: parsers normalise a format type into it and
generators denormalise it into the target vocabulary. Lookups never fail;
unknown types resolve to documented fallbacks instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from ..formats import BibFormat
from ..models import ITEM_TYPES


@dataclass(frozen=True, slots=True)
class TypeMapping:
    """Spellings of one canonical type in each concrete format."""

    canonical: str
    bibtex: str
    biblatex: str
    ris: str
    endnote: str
    lossy_to_bibtex: bool = False

    def for_format(self, fmt: BibFormat) -> str:
        if fmt is BibFormat.CSL_JSON:
            return self.canonical
        return getattr(self, fmt.value)


@dataclass(frozen=True, slots=True)
class TypeResolution:
    """A target-format type and whether choosing it loses information."""

    type: str
    lossy: bool


def _table(*mappings: TypeMapping) -> Mapping[str, TypeMapping]:
    return MappingProxyType({mapping.canonical: mapping for mapping in mappings})


ENTRY_TYPES: Mapping[str, TypeMapping] = _table(
    TypeMapping("article-journal", "article", "article", "JOUR", "Journal Article"),
    TypeMapping("article", "article", "article", "JOUR", "Journal Article"),
    TypeMapping("book", "book", "book", "BOOK", "Book"),
    TypeMapping("chapter", "incollection", "incollection", "CHAP", "Book Section"),
    TypeMapping(
        "paper-conference", "inproceedings", "inproceedings", "CONF", "Conference Paper"
    ),
    TypeMapping("thesis", "phdthesis", "thesis", "THES", "Thesis"),
    TypeMapping("report", "techreport", "report", "RPRT", "Report"),
    TypeMapping("article-magazine", "article", "article", "MGZN", "Magazine Article"),
    TypeMapping("article-newspaper", "article", "article", "NEWS", "Newspaper Article"),
    TypeMapping("dataset", "misc", "dataset", "DATA", "Dataset", lossy_to_bibtex=True),
    TypeMapping("software", "misc", "software", "COMP", "Computer Program", lossy_to_bibtex=True),
    TypeMapping("webpage", "misc", "online", "ELEC", "Web Page", lossy_to_bibtex=True),
    TypeMapping("patent", "misc", "patent", "PAT", "Patent", lossy_to_bibtex=True),
    TypeMapping("entry-encyclopedia", "incollection", "inreference", "ENCYC", "Encyclopedia"),
    TypeMapping("entry-dictionary", "incollection", "inreference", "DICT", "Dictionary"),
    TypeMapping(
        "legal_case",
        "misc",
        "jurisdiction",
        "CASE",
        "Legal Rule or Regulation",
        lossy_to_bibtex=True,
    ),
    TypeMapping("legislation", "misc", "legislation", "STAT", "Bill", lossy_to_bibtex=True),
    TypeMapping(
        "motion_picture", "misc", "movie", "MPCT", "Film or Broadcast", lossy_to_bibtex=True
    ),
    TypeMapping("broadcast", "misc", "audio", "MPCT", "Film or Broadcast", lossy_to_bibtex=True),
    TypeMapping("song", "misc", "music", "SOUND", "Music", lossy_to_bibtex=True),
    TypeMapping("graphic", "misc", "artwork", "ART", "Artwork", lossy_to_bibtex=True),
    TypeMapping("map", "misc", "misc", "MAP", "Map", lossy_to_bibtex=True),
    TypeMapping("manuscript", "unpublished", "unpublished", "UNPB", "Manuscript"),
    TypeMapping("review-book", "article", "review", "JOUR", "Journal Article"),
    TypeMapping("review", "article", "review", "JOUR", "Journal Article"),
    TypeMapping("speech", "misc", "misc", "HEAR", "Hearing", lossy_to_bibtex=True),
    TypeMapping("interview", "misc", "misc", "INPR", "Interview", lossy_to_bibtex=True),
    TypeMapping(
        "personal_communication",
        "misc",
        "letter",
        "PCOMM",
        "Personal Communication",
        lossy_to_bibtex=True,
    ),
    TypeMapping("post", "misc", "online", "BLOG", "Blog", lossy_to_bibtex=True),
    TypeMapping("post-weblog", "misc", "online", "BLOG", "Blog", lossy_to_bibtex=True),
)

FALLBACK_TYPES: Mapping[BibFormat, str] = MappingProxyType(
    {
        BibFormat.BIBTEX: "misc",
        BibFormat.BIBLATEX: "misc",
        BibFormat.RIS: "GEN",
        BibFormat.ENDNOTE: "Generic",
    }
)

DEFAULT_CANONICAL_TYPE = "article"

# `misc` maps to "article" for compatibility with existing libraries, which
# makes a dataset exported as @misc indistinguishable from a journal article.
BIBTEX_TO_CANONICAL: Mapping[str, str] = MappingProxyType(
    {
        "article": "article-journal",
        "book": "book",
        "booklet": "book",
        "inbook": "chapter",
        "incollection": "chapter",
        "inproceedings": "paper-conference",
        "conference": "paper-conference",
        "manual": "book",
        "mastersthesis": "thesis",
        "phdthesis": "thesis",
        "proceedings": "book",
        "techreport": "report",
        "unpublished": "manuscript",
        "misc": "article",
    }
)

BIBLATEX_TO_CANONICAL: Mapping[str, str] = MappingProxyType(
    {
        **BIBTEX_TO_CANONICAL,
        "collection": "book",
        "mvbook": "book",
        "mvcollection": "book",
        "mvproceedings": "book",
        "bookinbook": "chapter",
        "suppbook": "chapter",
        "suppcollection": "chapter",
        "reference": "book",
        "inreference": "entry-encyclopedia",
        "thesis": "thesis",
        "report": "report",
        "dataset": "dataset",
        "software": "software",
        "online": "webpage",
        "electronic": "webpage",
        "www": "webpage",
        "patent": "patent",
        "jurisdiction": "legal_case",
        "legislation": "legislation",
        "movie": "motion_picture",
        "video": "motion_picture",
        "audio": "broadcast",
        "music": "song",
        "artwork": "graphic",
        "image": "graphic",
        "review": "review",
        "letter": "personal_communication",
    }
)

# Types a BibTeX-only toolchain does not know about.
BIBLATEX_ONLY_TYPES: frozenset[str] = frozenset(BIBLATEX_TO_CANONICAL) - frozenset(
    BIBTEX_TO_CANONICAL
)

RIS_TO_CANONICAL: Mapping[str, str] = MappingProxyType(
    {
        "JOUR": "article-journal",
        "JFULL": "article-journal",
        "EJOUR": "article-journal",
        "BOOK": "book",
        "EBOOK": "book",
        "EDBOOK": "book",
        "CHAP": "chapter",
        "ECHAP": "chapter",
        "CONF": "paper-conference",
        "CPAPER": "paper-conference",
        "THES": "thesis",
        "RPRT": "report",
        "MGZN": "article-magazine",
        "NEWS": "article-newspaper",
        "DATA": "dataset",
        "COMP": "software",
        "ELEC": "webpage",
        "PAT": "patent",
        "ENCYC": "entry-encyclopedia",
        "DICT": "entry-dictionary",
        "CASE": "legal_case",
        "STAT": "legislation",
        "MPCT": "motion_picture",
        "SOUND": "song",
        "ART": "graphic",
        "MAP": "map",
        "UNPB": "manuscript",
        "HEAR": "speech",
        "INPR": "interview",
        "PCOMM": "personal_communication",
        "BLOG": "post-weblog",
        "GEN": "article",
    }
)

ENDNOTE_TO_CANONICAL: Mapping[str, str] = MappingProxyType(
    {
        "Journal Article": "article-journal",
        "Book": "book",
        "Edited Book": "book",
        "Book Section": "chapter",
        "Conference Paper": "paper-conference",
        "Conference Proceedings": "paper-conference",
        "Thesis": "thesis",
        "Report": "report",
        "Magazine Article": "article-magazine",
        "Newspaper Article": "article-newspaper",
        "Dataset": "dataset",
        "Computer Program": "software",
        "Web Page": "webpage",
        "Patent": "patent",
        "Encyclopedia": "entry-encyclopedia",
        "Dictionary": "entry-dictionary",
        "Legal Rule or Regulation": "legal_case",
        "Bill": "legislation",
        "Film or Broadcast": "motion_picture",
        "Music": "song",
        "Artwork": "graphic",
        "Map": "map",
        "Manuscript": "manuscript",
        "Hearing": "speech",
        "Interview": "interview",
        "Personal Communication": "personal_communication",
        "Blog": "post-weblog",
        "Generic": "article",
    }
)

# Numeric ``ref-type`` codes written by EndNote next to (or instead of) the name.
ENDNOTE_REF_TYPE_NUMBERS: Mapping[str, int] = MappingProxyType(
    {
        "Artwork": 2,
        "Bill": 4,
        "Book Section": 5,
        "Book": 6,
        "Computer Program": 9,
        "Conference Proceedings": 10,
        "Web Page": 12,
        "Generic": 13,
        "Hearing": 14,
        "Journal Article": 17,
        "Magazine Article": 19,
        "Map": 20,
        "Film or Broadcast": 21,
        "Newspaper Article": 23,
        "Patent": 25,
        "Personal Communication": 26,
        "Report": 27,
        "Edited Book": 28,
        "Thesis": 32,
        "Manuscript": 36,
        "Conference Paper": 47,
        "Legal Rule or Regulation": 50,
        "Dictionary": 52,
        "Encyclopedia": 53,
        "Blog": 56,
        "Dataset": 59,
        "Music": 61,
    }
)
ENDNOTE_REF_TYPE_NAMES: Mapping[int, str] = MappingProxyType(
    {number: name for name, number in ENDNOTE_REF_TYPE_NUMBERS.items()}
)

_ENDNOTE_FOLDED: Mapping[str, str] = MappingProxyType(
    {name.casefold(): canonical for name, canonical in ENDNOTE_TO_CANONICAL.items()}
)


def lookup_canonical_type(type_name: str, fmt: BibFormat) -> str | None:
    """Return the canonical type for a format type, or ``None`` when unknown."""
    value = type_name.strip()
    if fmt.is_bibtex_family:
        # Both dialects share one grammar, so BibTeX files may use BibLaTeX types.
        return BIBLATEX_TO_CANONICAL.get(value.lower())
    if fmt is BibFormat.RIS:
        return RIS_TO_CANONICAL.get(value.upper())
    if fmt is BibFormat.ENDNOTE:
        return _ENDNOTE_FOLDED.get(value.casefold())
    normalised = value.lower()
    return normalised if normalised in ITEM_TYPES else None


def normalize_to_csl_type(type_name: str, fmt: BibFormat) -> str:
    """Map a format type onto the canonical vocabulary, defaulting to ``article``."""
    return lookup_canonical_type(type_name, fmt) or DEFAULT_CANONICAL_TYPE


def denormalize_from_csl_type(canonical: str, fmt: BibFormat) -> TypeResolution:
    """Map a canonical type onto ``fmt``.

    Unmapped canonical types fall back to the format's miscellaneous type and
    are always lossy. Mapped types are lossy only when narrowing into BibTeX;
    BibLaTeX covers every mapped type.
    """
    if fmt is BibFormat.CSL_JSON:
        return TypeResolution(canonical, False)
    mapping = ENTRY_TYPES.get(canonical)
    if mapping is None:
        return TypeResolution(FALLBACK_TYPES[fmt], True)
    lossy = mapping.lossy_to_bibtex and fmt is BibFormat.BIBTEX
    return TypeResolution(mapping.for_format(fmt), lossy)


__all__ = [
    "BIBLATEX_ONLY_TYPES",
    "BIBLATEX_TO_CANONICAL",
    "BIBTEX_TO_CANONICAL",
    "DEFAULT_CANONICAL_TYPE",
    "ENDNOTE_REF_TYPE_NAMES",
    "ENDNOTE_REF_TYPE_NUMBERS",
    "ENDNOTE_TO_CANONICAL",
    "ENTRY_TYPES",
    "FALLBACK_TYPES",
    "RIS_TO_CANONICAL",
    "TypeMapping",
    "TypeResolution",
    "denormalize_from_csl_type",
    "lookup_canonical_type",
    "normalize_to_csl_type",
]
