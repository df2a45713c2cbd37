"""Stub language model for local/dev runs and tests.

Answers every prompt through a responder callable and records what it was
asked, so callers can check prompts without a network round trip.
"""
from __future__ import annotations

from typing import Any, Callable, List

from .base import LanguageModel, ModelDescriptor, ProviderOptions


def _first_words(prompt: str) -> str:
    words = prompt.split()
    return " ".join(words[:6])


class StubLanguageModel(LanguageModel):
    def __init__(
        self,
        responder: Callable[[str], Any] | None = None,
        model: ModelDescriptor | None = None,
    ) -> None:
        self.model = model or ModelDescriptor(provider="stub", model_id="stub-model")
        self.responder = responder or _first_words
        self.prompts: List[str] = []
        self.last_options: ProviderOptions | None = None
        self.last_usage = {"note": "stub"}
        self.last_model = self.model.model_id

    def generate_text(self, prompt: str, options: ProviderOptions | None = None) -> Any:
        self.prompts.append(prompt)
        self.last_options = options
        return self.responder(prompt)
