"""Text, name and date codecs shared by the format parsers and generators."""

from __future__ import annotations

from . import dates, latex, names


__all__ = ["dates", "latex", "names"]
