"""Document title extraction."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

from .. import config
from ..errors import ExtractionError, ProviderError
from ..models.documents import BaseNode, TextNode
from ..providers.base import LanguageModel, ProviderOptions
from ..utils.logging import get_logger
from .prompts import DEFAULT_TITLE_COMBINE_TEMPLATE, DEFAULT_TITLE_EXTRACTOR_TEMPLATE, PromptTemplate

logger = get_logger(__name__)


@dataclass
class TitleResult:
    document_title: str

    def to_dict(self) -> dict:
        return {"document_title": self.document_title}


def _as_template(value: PromptTemplate | str | None, default: PromptTemplate) -> PromptTemplate:
    if value is None:
        return default
    if isinstance(value, PromptTemplate):
        return value
    return PromptTemplate(template=value, template_vars=("context",))


class TitleExtractor:
    """Give every node the title of the document it belongs to.

    Each document's first ``nodes`` chunks produce a candidate title. The
    candidates are then combined into one title per document.
    """

    def __init__(
        self,
        llm: LanguageModel,
        nodes: int = config.DEFAULTS.title_nodes,
        node_template: PromptTemplate | str | None = None,
        combine_template: PromptTemplate | str | None = None,
        is_text_node_only: bool = False,
        options: ProviderOptions | None = None,
    ) -> None:
        if nodes < 1:
            raise ExtractionError("nodes must be at least 1")
        self.llm = llm
        self.nodes = nodes
        self.node_template = _as_template(node_template, DEFAULT_TITLE_EXTRACTOR_TEMPLATE)
        self.combine_template = _as_template(combine_template, DEFAULT_TITLE_COMBINE_TEMPLATE)
        self.is_text_node_only = is_text_node_only
        self.options = ProviderOptions(model_name=llm.model.model_id).merged(options)

    # --- public API ---

    def extract(self, nodes: Sequence[BaseNode]) -> List[TitleResult]:
        """Return one result per input node, in input order."""
        results: List[TitleResult] = [TitleResult(document_title="") for _ in nodes]

        indexed = [
            (idx, node)
            for idx, node in enumerate(nodes)
            if node.get_content() and node.get_content().strip()
        ]
        indexed = [(idx, node) for idx, node in indexed if self._keep(node)]
        if not indexed:
            return results

        titles = self._extract_titles(self._separate_by_document([node for _, node in indexed]))
        for idx, node in indexed:
            results[idx] = TitleResult(document_title=titles.get(node.group_key, ""))
        return results

    # --- internal helpers ---

    def _keep(self, node: BaseNode) -> bool:
        return not self.is_text_node_only or isinstance(node, TextNode)

    def _separate_by_document(self, nodes: Sequence[BaseNode]) -> Dict[str, List[BaseNode]]:
        by_document: Dict[str, List[BaseNode]] = {}
        for node in nodes:
            by_document.setdefault(node.group_key, []).append(node)
        return by_document

    def _extract_titles(self, nodes_by_document: Dict[str, List[BaseNode]]) -> Dict[str, str]:
        titles: Dict[str, str] = {}
        for key, doc_nodes in nodes_by_document.items():
            candidates = [self._candidate_title(node) for node in doc_nodes[: self.nodes]]
            prompt = self.combine_template.format(context=config.TITLE_CANDIDATE_SEPARATOR.join(candidates))
            titles[key] = self._generate(prompt, "Title extraction")
        return titles

    def _candidate_title(self, node: BaseNode) -> str:
        prompt = self.node_template.format(context=node.get_content())
        return self._generate(prompt, "Title candidate extraction")

    def _generate(self, prompt: str, stage: str) -> str:
        try:
            completion: Any = self.llm.generate_text(prompt, self.options)
        except ProviderError:
            raise
        except Exception as exc:
            raise ProviderError(f"{stage} failed: {exc}") from exc
        if isinstance(completion, str):
            return completion.strip()
        logger.warning("%s LLM output was not a string: %r", stage, completion)
        return ""
