"""Configuration models used by the bibliography generators.

GeneratorOptions

`indent` (`str`)
: Indentation unit used for BibTeX field lines, EndNote XML nesting and the
  canonical JSON pretty-printer. Defaults to two spaces.

`line_ending` (`"\\n" | "\\r\\n"`)
: Line terminator written between every output line.

`sort` (`bool`)
: Emit entries ordered by citation key. The sort is stable, so entries sharing
  a key keep their input order.

`include_metadata` (`bool`)
: Keep the `_formatMetadata` provenance record when writing canonical JSON.

`protect_titles` (`bool`)
: Wrap runs of two or more capital letters in braces inside BibTeX and
  BibLaTeX titles so bibliography styles do not lowercase acronyms.

Configuration files

The command line accepts YAML documents whose top-level mapping (or the
mapping stored under a `bibsmith` key) carries the options above. Hyphenated
spellings such as `line-ending` are accepted, and `line_ending` also takes the
symbolic values `lf` and `crlf`.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
import yaml

from .exceptions import ConfigurationError


_LINE_ENDING_ALIASES = {"lf": "\n", "crlf": "\r\n", "\\n": "\n", "\\r\\n": "\r\n"}


class GeneratorOptions(BaseModel):
    """Formatting options shared by every generator."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    indent: str = "  "
    line_ending: Literal["\n", "\r\n"] = "\n"
    sort: bool = False
    include_metadata: bool = False
    protect_titles: bool = False

    @field_validator("line_ending", mode="before")
    @classmethod
    def _resolve_line_ending(cls, value: Any) -> Any:
        if isinstance(value, str):
            return _LINE_ENDING_ALIASES.get(value.strip().lower(), value)
        return value

    def merged(self, **overrides: Any) -> GeneratorOptions:
        """Return a copy with every non-``None`` override applied and validated."""
        payload = self.model_dump()
        payload.update({key: value for key, value in overrides.items() if value is not None})
        return GeneratorOptions.model_validate(payload)


DEFAULT_OPTIONS = GeneratorOptions()


def options_from_mapping(data: Mapping[str, Any] | None) -> GeneratorOptions:
    """Validate a loosely spelled mapping into `GeneratorOptions`."""
    if not data:
        return GeneratorOptions()
    if "bibsmith" in data and isinstance(data["bibsmith"], Mapping):
        data = data["bibsmith"]
    normalised = {str(key).replace("-", "_"): value for key, value in data.items()}
    try:
        return GeneratorOptions.model_validate(normalised)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid generator options: {exc}") from exc


def load_options(path: Path | str) -> GeneratorOptions:
    """Read generator options from a YAML configuration file."""
    config_path = Path(path)
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Unable to read configuration file '{config_path}'.") from exc
    try:
        payload = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in '{config_path}': {exc}") from exc
    if not isinstance(payload, Mapping):
        raise ConfigurationError(
            f"Configuration file '{config_path}' must contain a mapping of options."
        )
    return options_from_mapping(payload)


__all__ = [
    "DEFAULT_OPTIONS",
    "GeneratorOptions",
    "load_options",
    "options_from_mapping",
]
