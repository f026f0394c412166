"""Static, read-only vocabularies linking the canonical model to each format."""

from __future__ import annotations

from .entry_types import (
    ENTRY_TYPES,
    FALLBACK_TYPES,
    TypeMapping,
    TypeResolution,
    denormalize_from_csl_type,
    lookup_canonical_type,
    normalize_to_csl_type,
)
from .fields import (
    FIELD_MAPPINGS,
    TYPE_SPECIFIC_FIELDS,
    FieldMapping,
    canonical_field_for,
    field_name_for,
    get_field_mapping,
    representable_in,
)


__all__ = [
    "ENTRY_TYPES",
    "FALLBACK_TYPES",
    "FIELD_MAPPINGS",
    "TYPE_SPECIFIC_FIELDS",
    "FieldMapping",
    "TypeMapping",
    "TypeResolution",
    "canonical_field_for",
    "denormalize_from_csl_type",
    "field_name_for",
    "get_field_mapping",
    "lookup_canonical_type",
    "normalize_to_csl_type",
    "representable_in",
]
