"""Compat rules for OpenAI models with structured outputs (incl. o-series)."""
from __future__ import annotations

from .base import OPEN_API_3, SchemaCompatLayer, SchemaTarget
from .model_families import is_openai_model, is_openai_reasoning_model


class OpenAIReasoningSchemaCompatLayer(SchemaCompatLayer):
    """Strict structured-output dialect.

    Optionals unwrap straight to nullable types and ``any`` is cast to a
    string, since an unconstrained type cannot be expressed in strict mode.
    Every other construct follows the default handlers.
    """

    def get_schema_target(self) -> SchemaTarget:
        return OPEN_API_3

    def is_reasoning_model(self) -> bool:
        return is_openai_reasoning_model(self.model)

    def should_apply(self) -> bool:
        return (self.model.supports_structured_outputs or self.is_reasoning_model()) and is_openai_model(self.model)
