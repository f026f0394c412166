"""Conversion core exposed through the bibsmith public API.

Architecture
: Every format is read into `CanonicalEntry` values and written back from
  them, so adding a format means one parser, one generator and one line in
  each dispatch table of `converter.py`.
: The codecs (`codecs.latex`, `codecs.names`, `codecs.dates`) and the static
  vocabularies in `mappings` are shared by every parser and generator.
: Nothing in this package touches the file system or terminates the process.
  Malformed input is reported as `ConversionWarning` values inside a
  `ParseResult`.

Usage Example

```pycon
>>> from bibsmith.core import convert
>>> payload = \"\"\"@article{doe2023,
...   author = {Doe, Jane},
...   title = {A Study},
...   year = {2023}
... }\"\"\"
>>> converted = convert(payload, "bibtex", "ris")
>>> converted.output.splitlines()[:2]
['TY  - JOUR', 'ID  - doe2023']
```
"""

from __future__ import annotations

from .collection import (
    create_entry,
    delete_entries,
    filter_entries,
    merge_entries,
    read_entries,
    sort_entries,
    update_entry,
)
from .config import DEFAULT_OPTIONS, GeneratorOptions, load_options, options_from_mapping
from .converter import (
    ConversionOutput,
    conversion_notes,
    convert,
    detect_format,
    generate,
    get_generator,
    get_parser,
    parse,
    supported_formats,
    validate,
)
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .exceptions import (
    BibsmithError,
    ConfigurationError,
    FormatDetectionError,
    RecordSyntaxError,
    UnsupportedFormatError,
)
from .formats import BibFormat
from .issues import ConversionStats, ConversionWarning, ParseResult
from .models import CanonicalEntry, FormatMetadata, Person, StructuredDate


__all__ = [
    "DEFAULT_OPTIONS",
    "BibFormat",
    "BibsmithError",
    "CanonicalEntry",
    "ConfigurationError",
    "ConversionOutput",
    "ConversionStats",
    "ConversionWarning",
    "DiagnosticEmitter",
    "FormatDetectionError",
    "FormatMetadata",
    "GeneratorOptions",
    "LoggingEmitter",
    "NullEmitter",
    "ParseResult",
    "Person",
    "RecordSyntaxError",
    "StructuredDate",
    "UnsupportedFormatError",
    "conversion_notes",
    "convert",
    "create_entry",
    "delete_entries",
    "detect_format",
    "filter_entries",
    "generate",
    "get_generator",
    "get_parser",
    "load_options",
    "merge_entries",
    "options_from_mapping",
    "parse",
    "read_entries",
    "sort_entries",
    "supported_formats",
    "update_entry",
    "validate",
]
