"""Compat rules for OpenAI models without structured outputs."""
from __future__ import annotations

from typing import Collection

from ..models.schema_defs import SchemaNode, StringType
from .base import JSON_SCHEMA_7, SchemaCompatLayer, SchemaTarget
from .model_families import is_openai_model, is_openai_reasoning_model, rejects_regex_checks


class OpenAISchemaCompatLayer(SchemaCompatLayer):
    optional_inner_kinds = frozenset({"object", "array", "union", "string", "never", "undefined", "tuple"})
    # Numeric bounds are accepted as-is by the function-calling API.
    number_checks = ()

    def get_schema_target(self) -> SchemaTarget:
        return JSON_SCHEMA_7

    def should_apply(self) -> bool:
        if self.model.supports_structured_outputs or is_openai_reasoning_model(self.model):
            return False
        return is_openai_model(self.model)

    def handle_string(self, node: StringType, degrade: Collection[str] | None = None) -> SchemaNode:
        if degrade is None:
            degrade = ["emoji"]
            if rejects_regex_checks(self.model):
                degrade.append("regex")
        return super().handle_string(node, degrade)
