"""Core engine for SchemaCompat (schema trees, compat layers, providers)."""

from . import config, errors

__all__ = ["config", "errors"]
