"""Document nodes consumed by the title extractor."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BaseNode:
    node_id: str
    text: str = ""
    # Id of the document this chunk was split from, if any.
    source_id: str | None = None

    def get_content(self) -> str:
        return self.text

    @property
    def group_key(self) -> str:
        return self.source_id or self.node_id


@dataclass
class TextNode(BaseNode):
    pass


@dataclass
class ImageNode(BaseNode):
    """Image chunk; ``text`` holds its caption or OCR output."""

    image_uri: str | None = None
