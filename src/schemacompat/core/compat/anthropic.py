"""Compat rules for Claude models."""
from __future__ import annotations

from typing import Collection

from ..models.schema_defs import OptionalType, SchemaNode
from .base import JSON_SCHEMA_7, SchemaCompatLayer, SchemaTarget
from .model_families import accepts_optional_strings, is_anthropic_model


class AnthropicSchemaCompatLayer(SchemaCompatLayer):
    optional_inner_kinds = frozenset({"object", "array", "union", "never", "undefined", "tuple"})

    def get_schema_target(self) -> SchemaTarget:
        return JSON_SCHEMA_7

    def should_apply(self) -> bool:
        return is_anthropic_model(self.model)

    def handle_optional(self, node: OptionalType, allowed_kinds: Collection[str] | None = None) -> SchemaNode:
        if allowed_kinds is None and accepts_optional_strings(self.model):
            allowed_kinds = self.optional_inner_kinds | {"string"}
        return super().handle_optional(node, allowed_kinds)
