"""Public CLI exports for bibsmith."""

from __future__ import annotations

from .app import app, main
from .commands import convert, formats, show, validate
from .state import debug_enabled, emit_error, emit_warning, get_cli_state


__all__ = [
    "app",
    "convert",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "formats",
    "get_cli_state",
    "main",
    "show",
    "validate",
]
