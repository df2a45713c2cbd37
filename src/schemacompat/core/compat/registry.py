"""Compat layer selection."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Sequence, Type

from .. import config
from ..models.schema_defs import SchemaNode, node_to_dict
from ..providers.base import ModelDescriptor
from ..utils.logging import get_logger
from .anthropic import AnthropicSchemaCompatLayer
from .base import SchemaCompatLayer, SchemaTarget
from .google import GoogleSchemaCompatLayer
from .openai import OpenAISchemaCompatLayer
from .openai_reasoning import OpenAIReasoningSchemaCompatLayer

logger = get_logger(__name__)


class PassthroughCompatLayer(SchemaCompatLayer):
    """Fallback for models no other layer claims: the tree is left as authored."""

    def get_schema_target(self) -> SchemaTarget:
        return config.DEFAULTS.schema_target

    def should_apply(self) -> bool:
        return True

    def transform(self, root: SchemaNode) -> SchemaNode:
        return root


# Priority order: the first layer whose predicate holds wins.
DEFAULT_COMPAT_LAYERS: Sequence[Type[SchemaCompatLayer]] = (
    OpenAIReasoningSchemaCompatLayer,
    OpenAISchemaCompatLayer,
    AnthropicSchemaCompatLayer,
    GoogleSchemaCompatLayer,
)


@dataclass
class CompatResult:
    target: SchemaTarget
    schema: SchemaNode
    layer: str

    def to_dict(self) -> Dict[str, Any]:
        return {"target": self.target, "layer": self.layer, "schema": node_to_dict(self.schema)}


def select_compat_layer(
    model: ModelDescriptor,
    layers: Sequence[Type[SchemaCompatLayer]] = DEFAULT_COMPAT_LAYERS,
) -> SchemaCompatLayer:
    for layer_cls in layers:
        layer = layer_cls(model)
        if layer.should_apply():
            logger.debug("Selected %s for %s/%s", layer.name, model.provider, model.model_id)
            return layer
    logger.debug("No compat layer applies to %s/%s; passing schema through", model.provider, model.model_id)
    return PassthroughCompatLayer(model)


def apply_compat_layer(
    model: ModelDescriptor,
    schema: SchemaNode,
    layers: Sequence[Type[SchemaCompatLayer]] = DEFAULT_COMPAT_LAYERS,
) -> CompatResult:
    """Select the layer for ``model`` and rewrite ``schema`` with it."""
    layer = select_compat_layer(model, layers)
    return CompatResult(target=layer.get_schema_target(), schema=layer.transform(schema), layer=layer.name)
