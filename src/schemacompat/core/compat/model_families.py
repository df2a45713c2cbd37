"""Model-family detection heuristics.

Providers do not expose which schema features a model accepts, so layers pick
themselves by substring matching on the provider name and model id. These
rules need revisiting whenever a vendor ships a family whose id does not
contain one of the markers below (a future ``o5`` will not match
:func:`is_openai_reasoning_model`, for example).
"""
from __future__ import annotations

from ..providers.base import ModelDescriptor

OPENAI_MARKER = "openai"
OPENAI_REASONING_MARKERS = ("o3", "o4")
OPENAI_REGEX_RESTRICTED_MARKERS = ("gpt-4o-mini",)
ANTHROPIC_MARKER = "claude"
ANTHROPIC_OPTIONAL_STRING_MARKERS = ("claude-3.5-haiku",)
GOOGLE_MARKER = "google"
GEMINI_MARKER = "gemini"


def is_openai_model(model: ModelDescriptor) -> bool:
    return OPENAI_MARKER in model.provider or OPENAI_MARKER in model.model_id


def is_openai_reasoning_model(model: ModelDescriptor) -> bool:
    """o-series reasoning models; only detectable from the model id."""
    return any(marker in model.model_id for marker in OPENAI_REASONING_MARKERS)


def rejects_regex_checks(model: ModelDescriptor) -> bool:
    """OpenAI models that fail on ``pattern`` even in non-strict tool schemas."""
    return any(marker in model.model_id for marker in OPENAI_REGEX_RESTRICTED_MARKERS)


def is_anthropic_model(model: ModelDescriptor) -> bool:
    return ANTHROPIC_MARKER in model.model_id


def accepts_optional_strings(model: ModelDescriptor) -> bool:
    """Claude models that keep optional string arguments as-is."""
    return any(marker in model.model_id for marker in ANTHROPIC_OPTIONAL_STRING_MARKERS)


def is_google_model(model: ModelDescriptor) -> bool:
    return (
        GOOGLE_MARKER in model.provider
        or GOOGLE_MARKER in model.model_id
        or GEMINI_MARKER in model.model_id
    )
