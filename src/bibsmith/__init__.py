"""Primary public API for bibsmith."""

from __future__ import annotations

from bibsmith.core import (
    DEFAULT_OPTIONS,
    BibFormat,
    BibsmithError,
    CanonicalEntry,
    ConfigurationError,
    ConversionOutput,
    ConversionStats,
    ConversionWarning,
    FormatDetectionError,
    FormatMetadata,
    GeneratorOptions,
    ParseResult,
    Person,
    StructuredDate,
    UnsupportedFormatError,
    convert,
    create_entry,
    delete_entries,
    detect_format,
    filter_entries,
    generate,
    load_options,
    merge_entries,
    parse,
    read_entries,
    sort_entries,
    supported_formats,
    update_entry,
    validate,
)

from bibsmith.version import get_version


__version__ = get_version()

__all__ = [
    "DEFAULT_OPTIONS",
    "BibFormat",
    "BibsmithError",
    "CanonicalEntry",
    "ConfigurationError",
    "ConversionOutput",
    "ConversionStats",
    "ConversionWarning",
    "FormatDetectionError",
    "FormatMetadata",
    "GeneratorOptions",
    "ParseResult",
    "Person",
    "StructuredDate",
    "UnsupportedFormatError",
    "__version__",
    "convert",
    "create_entry",
    "delete_entries",
    "detect_format",
    "filter_entries",
    "generate",
    "load_options",
    "merge_entries",
    "parse",
    "read_entries",
    "sort_entries",
    "supported_formats",
    "update_entry",
    "validate",
]
