"""Schema document loading."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import yaml

from ..errors import SchemaError
from ..models.schema_defs import SchemaNode
from .json_schema import parse_json_schema


def load_structured(path: str | Path) -> Dict[str, Any]:
    """Read a JSON or YAML mapping (picked by file suffix)."""
    p = Path(path)
    try:
        data = p.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaError(f"Failed to read {p}: {exc}") from exc
    try:
        if p.suffix.lower() in {".yaml", ".yml"}:
            loaded = yaml.safe_load(data) or {}
        else:
            loaded = json.loads(data)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise SchemaError(f"Invalid schema document {p}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise SchemaError(f"Schema document {p} must contain a mapping")
    return loaded


def load_schema_document(path: str | Path) -> SchemaNode:
    return parse_json_schema(load_structured(path))
