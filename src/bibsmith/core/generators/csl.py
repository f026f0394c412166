"""Canonical JSON writer."""

from __future__ import annotations

from collections.abc import Iterable
import json
from typing import ClassVar

from ..config import DEFAULT_OPTIONS, GeneratorOptions
from ..formats import BibFormat
from ..models import CanonicalEntry
from .base import BaseGenerator, order_entries


class CslJsonGenerator(BaseGenerator):
    """Serialise canonical entries as a JSON array.

    Provenance metadata is dropped unless ``include_metadata`` is set. Keys
    the model does not declare are written back unchanged.
    """

    format: ClassVar[BibFormat] = BibFormat.CSL_JSON

    def generate(
        self, entries: Iterable[CanonicalEntry], options: GeneratorOptions | None = None
    ) -> str:
        opts = options or DEFAULT_OPTIONS
        payload = [
            entry.to_json_dict(include_metadata=opts.include_metadata)
            for entry in order_entries(entries, opts)
        ]
        text = json.dumps(payload, indent=opts.indent, ensure_ascii=False)
        return text.replace("\n", opts.line_ending) + opts.line_ending


__all__ = ["CslJsonGenerator"]
