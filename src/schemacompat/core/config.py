"""Core defaults (no environment reads)."""
from dataclasses import dataclass

DEFAULT_PROVIDER = "openai"
DEFAULT_MODEL_ID = "gpt-4o"
# Dialect used when no provider-specific layer applies.
DEFAULT_SCHEMA_TARGET = "jsonSchema7"
DEFAULT_TITLE_NODES = 5
TITLE_CANDIDATE_SEPARATOR = ", "


@dataclass(frozen=True)
class CoreDefaults:
    provider: str = DEFAULT_PROVIDER
    model_id: str = DEFAULT_MODEL_ID
    schema_target: str = DEFAULT_SCHEMA_TARGET
    title_nodes: int = DEFAULT_TITLE_NODES


DEFAULTS = CoreDefaults()
