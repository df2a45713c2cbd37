"""Provider abstraction: model identity plus a text-generation protocol."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ModelDescriptor:
    """Identity and capability flags a compat layer branches on."""

    provider: str
    model_id: str
    supports_structured_outputs: bool = False


@dataclass
class ProviderOptions:
    model_name: str | None = None
    temperature: float | None = None
    max_output_tokens: int | None = None

    def merged(self, override: "ProviderOptions | None") -> "ProviderOptions":
        if override is None:
            return self
        return ProviderOptions(
            model_name=override.model_name or self.model_name,
            temperature=self.temperature if override.temperature is None else override.temperature,
            max_output_tokens=self.max_output_tokens
            if override.max_output_tokens is None
            else override.max_output_tokens,
        )


@runtime_checkable
class LanguageModel(Protocol):
    model: ModelDescriptor

    def generate_text(self, prompt: str, options: ProviderOptions | None = None) -> Any:
        """Return the completion for ``prompt``; implementations may return non-text."""
        ...
