from .prompts import DEFAULT_TITLE_COMBINE_TEMPLATE, DEFAULT_TITLE_EXTRACTOR_TEMPLATE, PromptTemplate
from .title import TitleExtractor, TitleResult

__all__ = [
    "PromptTemplate",
    "DEFAULT_TITLE_EXTRACTOR_TEMPLATE",
    "DEFAULT_TITLE_COMBINE_TEMPLATE",
    "TitleExtractor",
    "TitleResult",
]
