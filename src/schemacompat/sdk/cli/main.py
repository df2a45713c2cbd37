"""SchemaCompat CLI entrypoint."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer

from schemacompat.core.compat.registry import DEFAULT_COMPAT_LAYERS, apply_compat_layer
from schemacompat.core.errors import SchemaError
from schemacompat.core.utils.io import load_schema_document
from schemacompat.core.utils.logging import LOGGER_NAMESPACE, get_logger
from schemacompat.sdk.config import (
    DEFAULT_CONFIG_PATH,
    OUTPUT_FORMATS,
    SdkConfig,
    load_config,
    merge_cli_overrides,
)
from schemacompat.sdk.errors import ConfigError

app = typer.Typer(add_completion=False, help="SchemaCompat CLI")


class Context:
    def __init__(self) -> None:
        self.config = load_config()
        self.verbose = False


# --- utility helpers ---

def _write_json(path: Path, payload: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False, default=str), encoding="utf-8")


def _print_output(payload: Any, output_format: str, output_path: Path | None) -> None:
    if output_format not in OUTPUT_FORMATS:
        typer.echo(f"Unsupported output format: {output_format}")
        raise typer.Exit(code=1)
    if output_format == "json" and output_path:
        _write_json(output_path, payload)
        typer.echo(f"Wrote {output_path}")
    else:
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def _handle_exc(err: Exception) -> None:
    """Print a concise error and exit non-zero."""
    typer.echo(f"Error: {err}", err=True)
    raise typer.Exit(code=1)


def _effective_config(
    ctx: Context,
    provider: str | None,
    model: str | None,
    structured_outputs: bool | None,
) -> SdkConfig:
    return merge_cli_overrides(
        ctx.config,
        provider=provider,
        model_id=model,
        supports_structured_outputs=structured_outputs,
    )


# --- CLI commands ---


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Log layer selection and degradations"),
) -> None:
    if ctx.obj is None:
        try:
            ctx.obj = Context()
        except ConfigError as exc:
            _handle_exc(exc)
    ctx.obj.verbose = verbose
    if verbose:
        get_logger(LOGGER_NAMESPACE, level=logging.DEBUG)


@app.command()
def init(
    ctx: typer.Context,
    provider: str = typer.Option("", "--provider", help="Default provider name"),
    model: str = typer.Option("", "--model", help="Default model id"),
    structured_outputs: bool = typer.Option(False, "--structured-outputs/--no-structured-outputs"),
    default_output_format: str = typer.Option("print", "--default-output-format", help="print|json"),
    default_output_dir: Optional[Path] = typer.Option(
        None, "--default-output-dir", help="Where json output goes by default"
    ),
) -> None:
    context: Context = ctx.obj
    cfg_dir = DEFAULT_CONFIG_PATH.parent
    cfg_dir.mkdir(parents=True, exist_ok=True)
    lines = ["[schemacompat]"]
    # JSON string escapes are valid TOML basic-string escapes.
    lines.append(f"provider = {json.dumps(provider or context.config.provider)}")
    lines.append(f"model = {json.dumps(model or context.config.model_id)}")
    lines.append(f"supports_structured_outputs = {'true' if structured_outputs else 'false'}")
    lines.append(f"default_output_format = {json.dumps(default_output_format)}")
    if default_output_dir:
        lines.append(f"default_output_dir = {json.dumps(str(default_output_dir))}")
    DEFAULT_CONFIG_PATH.write_text("\n".join(lines) + "\n", encoding="utf-8")
    typer.echo(f"Wrote TOML config to {DEFAULT_CONFIG_PATH}")


@app.command()
def transform(
    ctx: typer.Context,
    schema_file: Path = typer.Argument(..., help="JSON or YAML schema document"),
    provider: Optional[str] = typer.Option(None, "--provider", help="Provider name, e.g. openai"),
    model: Optional[str] = typer.Option(None, "--model", help="Model id, e.g. gpt-4o-mini"),
    structured_outputs: Optional[bool] = typer.Option(
        None, "--structured-outputs/--no-structured-outputs", help="Whether the model supports structured outputs"
    ),
    output_format: Optional[str] = typer.Option(None, "--output-format", help="print|json"),
    output_path: Optional[Path] = typer.Option(None, "--output-path", help="Write output to file"),
) -> None:
    """Rewrite SCHEMA_FILE for the given model and print the result tree."""
    context: Context = ctx.obj
    cfg = _effective_config(context, provider, model, structured_outputs)
    try:
        schema = load_schema_document(schema_file)
        result = apply_compat_layer(cfg.to_descriptor(), schema)
    except SchemaError as exc:
        _handle_exc(exc)
    output_format = output_format or cfg.default_output_format
    if output_format == "json" and output_path is None and cfg.default_output_dir:
        output_path = cfg.default_output_dir / f"{schema_file.stem}.compat.json"
    _print_output(result.to_dict(), output_format, output_path)


@app.command()
def layers(
    ctx: typer.Context,
    provider: Optional[str] = typer.Option(None, "--provider", help="Provider name"),
    model: Optional[str] = typer.Option(None, "--model", help="Model id"),
    structured_outputs: Optional[bool] = typer.Option(None, "--structured-outputs/--no-structured-outputs"),
) -> None:
    """Show which compat layers apply to a model, in priority order."""
    context: Context = ctx.obj
    descriptor = _effective_config(context, provider, model, structured_outputs).to_descriptor()
    for layer_cls in DEFAULT_COMPAT_LAYERS:
        layer = layer_cls(descriptor)
        mark = "applies" if layer.should_apply() else "-"
        typer.echo(f"{layer.name} [{layer.get_schema_target()}] {mark}")


if __name__ == "__main__":  # pragma: no cover
    app()
