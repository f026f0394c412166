"""Primitives shared by the format generators."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import ClassVar, Protocol

from ..config import DEFAULT_OPTIONS, GeneratorOptions
from ..formats import BibFormat
from ..mappings import TypeResolution, denormalize_from_csl_type
from ..models import CanonicalEntry


class Generator(Protocol):
    """Protocol implemented by every format generator."""

    format: BibFormat

    def generate(
        self, entries: Iterable[CanonicalEntry], options: GeneratorOptions | None = None
    ) -> str: ...

    def resolve_type(self, entry: CanonicalEntry) -> TypeResolution: ...


def order_entries(
    entries: Iterable[CanonicalEntry], options: GeneratorOptions
) -> list[CanonicalEntry]:
    """Return ``entries`` as a list, ordered by key when ``options.sort`` is set."""
    ordered = list(entries)
    if options.sort:
        ordered.sort(key=lambda entry: entry.id)
    return ordered


def flatten(value: object) -> str:
    """Render a scalar on a single line."""
    return " ".join(str(value).split())


class BaseGenerator:
    """Base class rendering entries one at a time.

    Sub-classes turn one entry into a list of lines with `_render_entry`; the
    base class orders the entries, joins each record with the configured line
    ending and separates records with a blank line. The entries themselves are
    never modified.
    """

    format: ClassVar[BibFormat]

    def generate(
        self, entries: Iterable[CanonicalEntry], options: GeneratorOptions | None = None
    ) -> str:
        opts = options or DEFAULT_OPTIONS
        records = [self._render_entry(entry, opts) for entry in order_entries(entries, opts)]
        return self._assemble(records, opts)

    def resolve_type(self, entry: CanonicalEntry) -> TypeResolution:
        """Return the target entry type of ``entry`` and whether it is a downgrade."""
        return denormalize_from_csl_type(entry.type, self.format)

    # --------------------------------------------------------------------- hooks

    def _render_entry(self, entry: CanonicalEntry, options: GeneratorOptions) -> list[str]:
        """Sub-classes must render a single entry."""
        raise NotImplementedError

    def _assemble(self, records: Sequence[list[str]], options: GeneratorOptions) -> str:
        if not records:
            return ""
        newline = options.line_ending
        blocks = [newline.join(lines) for lines in records]
        return (newline * 2).join(blocks) + newline


__all__ = ["BaseGenerator", "Generator", "flatten", "order_entries"]
