"""User-facing entry points for bibsmith."""
