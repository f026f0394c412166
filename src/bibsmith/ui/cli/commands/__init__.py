"""Command implementations registered on the `bibsmith` Typer application."""

from __future__ import annotations

from .convert import convert
from .inspect import formats, show, validate


__all__ = ["convert", "formats", "show", "validate"]
