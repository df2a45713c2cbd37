from .anthropic import AnthropicSchemaCompatLayer
from .base import ANY_CAST_NOTE, JSON_SCHEMA_7, OPEN_API_3, SchemaCompatLayer, SchemaTarget, merge_parameter_description
from .google import GoogleSchemaCompatLayer
from .openai import OpenAISchemaCompatLayer
from .openai_reasoning import OpenAIReasoningSchemaCompatLayer
from .registry import (
    DEFAULT_COMPAT_LAYERS,
    CompatResult,
    PassthroughCompatLayer,
    apply_compat_layer,
    select_compat_layer,
)

__all__ = [
    "ANY_CAST_NOTE",
    "JSON_SCHEMA_7",
    "OPEN_API_3",
    "SchemaTarget",
    "SchemaCompatLayer",
    "merge_parameter_description",
    "OpenAIReasoningSchemaCompatLayer",
    "OpenAISchemaCompatLayer",
    "AnthropicSchemaCompatLayer",
    "GoogleSchemaCompatLayer",
    "PassthroughCompatLayer",
    "DEFAULT_COMPAT_LAYERS",
    "CompatResult",
    "select_compat_layer",
    "apply_compat_layer",
]
