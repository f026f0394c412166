"""BibTeX and BibLaTeX writers.

Field order
: Fields follow the conventional order (creators, titles, date, volume,
  pages, publisher, identifiers, notes) and any other populated field with a
  spelling in the target dialect comes afterwards.

Dates
: BibTeX spreads ``issued`` over ``year``, ``month`` (as an unbraced month
  macro) and ``day``. BibLaTeX writes a single ISO ``date`` field. A raw date
  that could not be parsed is written to ``year`` in both dialects.

Text
: Text values are LaTeX-encoded. ``doi`` and ``url`` are written verbatim
  because BibTeX styles typeset them with ``\\url``.
"""

from __future__ import annotations

from typing import Any, ClassVar

from ..codecs import dates, latex, names
from ..config import GeneratorOptions
from ..formats import BibFormat
from ..mappings import (
    TypeResolution,
    denormalize_from_csl_type,
    field_name_for,
    get_field_mapping,
    lookup_canonical_type,
)
from ..models import CanonicalEntry, StructuredDate
from .base import BaseGenerator


FIELD_ORDER: tuple[str, ...] = (
    "author",
    "editor",
    "translator",
    "container-author",
    "title",
    "title-short",
    "container-title",
    "collection-title",
    "issued",
    "volume",
    "issue",
    "chapter-number",
    "page",
    "number-of-pages",
    "edition",
    "publisher",
    "publisher-place",
    "event",
    "event-place",
    "event-date",
    "original-date",
    "medium",
    "genre",
    "status",
    "DOI",
    "ISBN",
    "ISSN",
    "PMID",
    "URL",
    "accessed",
    "language",
    "abstract",
    "keyword",
    "note",
    "annote",
)

_VERBATIM_FIELDS = frozenset({"DOI", "URL"})

Field = tuple[str, str]


def _braced(value: str) -> str:
    return f"{{{value}}}"


class BibTeXGenerator(BaseGenerator):
    """Render canonical entries as BibTeX."""

    format: ClassVar[BibFormat] = BibFormat.BIBTEX

    def resolve_type(self, entry: CanonicalEntry) -> TypeResolution:
        """Return the entry type to write, keeping the source spelling when possible.

        An entry read from this very dialect keeps its original type when that
        type still maps onto the entry's canonical type, so ``@mastersthesis``
        does not turn into ``@phdthesis`` on a round trip.
        """
        metadata = entry.format_metadata
        if (
            metadata is not None
            and metadata.source is self.format
            and metadata.original_type
            and lookup_canonical_type(metadata.original_type, self.format) == entry.type
        ):
            return TypeResolution(metadata.original_type.lower(), False)
        return denormalize_from_csl_type(entry.type, self.format)

    def _render_entry(self, entry: CanonicalEntry, options: GeneratorOptions) -> list[str]:
        entry_type = self.resolve_type(entry).type
        fields: list[Field] = []
        emitted: set[str] = set()

        for canonical in FIELD_ORDER:
            value = entry.get(canonical)
            if value is None:
                continue
            fields.extend(self._render_field(canonical, value, entry_type, options))
            emitted.add(canonical)

        for canonical, value in entry.populated_fields():
            if canonical in emitted:
                continue
            fields.extend(self._render_field(canonical, value, entry_type, options))

        source = entry.source_format
        if source is not None and source.is_bibtex_family:
            written = {name for name, _ in fields}
            for name, value in entry.custom_fields.items():
                if isinstance(value, str) and value and name not in written:
                    fields.append((name, _braced(value)))

        lines = [f"@{entry_type}{{{entry.id},"]
        lines.extend(f"{options.indent}{name} = {value}," for name, value in fields)
        if fields:
            lines[-1] = lines[-1][:-1]
        lines.append("}")
        return lines

    # --------------------------------------------------------------------- helpers

    def _render_field(
        self, canonical: str, value: Any, entry_type: str, options: GeneratorOptions
    ) -> list[Field]:
        if canonical == "issued":
            return self._issued_fields(value)
        name = field_name_for(canonical, self.format, entry_type)
        if name is None:
            return []
        mapping = get_field_mapping(canonical)
        transform = mapping.transform if mapping else "none"

        match value:
            case tuple() if transform == "name":
                if not value:
                    return []
                return [(name, _braced(latex.encode(names.serialize_list(value))))]
            case StructuredDate():
                return [(name, _braced(dates.serialize(value)))]
            case bool():
                return []
            case int():
                return [(name, _braced(str(value)))]
            case str() if canonical in _VERBATIM_FIELDS:
                return [(name, _braced(value.strip()))]
            case str():
                text = value
                if canonical == "title" and options.protect_titles:
                    text = latex.protect(text)
                return [(name, _braced(latex.encode(text)))]
            case _:
                return []

    def _issued_fields(self, issued: StructuredDate) -> list[Field]:
        parts = dates.serialize_bibtex(issued)
        fields: list[Field] = []
        if "year" in parts:
            fields.append(("year", _braced(latex.encode(parts["year"]))))
        if "month" in parts:
            month = parts["month"]
            fields.append(("month", month if month.isalpha() else _braced(month)))
        if "day" in parts:
            fields.append(("day", _braced(parts["day"])))
        return fields


class BibLaTeXGenerator(BibTeXGenerator):
    """Render canonical entries as BibLaTeX."""

    format: ClassVar[BibFormat] = BibFormat.BIBLATEX

    def _issued_fields(self, issued: StructuredDate) -> list[Field]:
        if issued.date_parts:
            return [("date", _braced(dates.serialize(issued)))]
        return [("year", _braced(latex.encode(issued.raw or "")))]


__all__ = ["FIELD_ORDER", "BibLaTeXGenerator", "BibTeXGenerator"]
