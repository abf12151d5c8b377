"""User-facing output."""
