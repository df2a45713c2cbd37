"""Compat rules for Gemini models.

Gemini accepts string and number bounds in its response schema but does not
reliably respect them, while it does follow them when they appear in the
description; so those checks are moved into descriptions. Array bounds are
honored and kept.
"""
from __future__ import annotations

from .base import JSON_SCHEMA_7, SchemaCompatLayer, SchemaTarget
from .model_families import is_google_model


class GoogleSchemaCompatLayer(SchemaCompatLayer):
    optional_inner_kinds = frozenset({"object", "array", "union", "string", "number"})
    array_checks = ()

    def get_schema_target(self) -> SchemaTarget:
        return JSON_SCHEMA_7

    def should_apply(self) -> bool:
        return is_google_model(self.model)
