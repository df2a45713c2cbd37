"""Prompt templates for title extraction."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..errors import ExtractionError


@dataclass(frozen=True)
class PromptTemplate:
    template: str
    template_vars: Tuple[str, ...] = ("context",)

    def format(self, **values: str) -> str:
        missing = [name for name in self.template_vars if name not in values]
        if missing:
            raise ExtractionError(f"Missing template variables: {', '.join(missing)}")
        try:
            return self.template.format(**{name: values[name] for name in self.template_vars})
        except (KeyError, IndexError) as exc:
            raise ExtractionError(f"Template references an undeclared variable: {exc}") from exc


DEFAULT_TITLE_EXTRACTOR_TEMPLATE = PromptTemplate(
    template=(
        "{context}\n"
        "Give a title that summarizes all of the unique entities, titles or themes found in the context.\n"
        "Title: "
    ),
)

DEFAULT_TITLE_COMBINE_TEMPLATE = PromptTemplate(
    template=(
        "{context}\n"
        "Based on the above candidate titles and contents, what is the comprehensive title for this document?\n"
        "Title: "
    ),
)
