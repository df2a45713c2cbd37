"""SDK configuration loader."""
from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from schemacompat.core import config as core_config
from schemacompat.core.providers.base import ModelDescriptor
from .errors import ConfigError

OUTPUT_FORMATS = {"print", "json"}
_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


@dataclass
class SdkConfig:
    provider: str = core_config.DEFAULTS.provider
    model_id: str = core_config.DEFAULTS.model_id
    supports_structured_outputs: bool = False
    default_output_format: str = "print"
    default_output_dir: Optional[Path] = None

    def to_descriptor(self) -> ModelDescriptor:
        return ModelDescriptor(
            provider=self.provider,
            model_id=self.model_id,
            supports_structured_outputs=self.supports_structured_outputs,
        )


DEFAULT_CONFIG_PATH = Path.home() / ".schemacompat" / "config.toml"


def _load_toml(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        return tomllib.loads(path.read_bytes().decode("utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid config file {path}: {exc}") from exc


def _parse_bool(value: object, source: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"Invalid boolean for {source}: {value}")


def load_config(path: Path | None = None) -> SdkConfig:
    cfg = SdkConfig()
    cfg_path = path or DEFAULT_CONFIG_PATH
    file_data = _load_toml(cfg_path)
    section = file_data.get("schemacompat", file_data) if isinstance(file_data, dict) else {}

    cfg.provider = os.environ.get("SCHEMACOMPAT_PROVIDER") or section.get("provider") or cfg.provider
    cfg.model_id = os.environ.get("SCHEMACOMPAT_MODEL") or section.get("model") or section.get("model_id") or cfg.model_id

    env_structured = os.environ.get("SCHEMACOMPAT_STRUCTURED_OUTPUTS")
    if env_structured:
        cfg.supports_structured_outputs = _parse_bool(env_structured, "SCHEMACOMPAT_STRUCTURED_OUTPUTS")
    elif "supports_structured_outputs" in section:
        cfg.supports_structured_outputs = _parse_bool(section["supports_structured_outputs"], "supports_structured_outputs")

    output_format = section.get("default_output_format", cfg.default_output_format)
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"Invalid default_output_format: {output_format}")
    cfg.default_output_format = output_format
    out_dir_val = section.get("default_output_dir")
    if out_dir_val:
        cfg.default_output_dir = Path(out_dir_val).expanduser()

    return cfg


def merge_cli_overrides(
    config: SdkConfig,
    provider: str | None = None,
    model_id: str | None = None,
    supports_structured_outputs: bool | None = None,
) -> SdkConfig:
    updated = replace(config)
    if provider:
        updated.provider = provider
    if model_id:
        updated.model_id = model_id
    if supports_structured_outputs is not None:
        updated.supports_structured_outputs = supports_structured_outputs
    return updated
