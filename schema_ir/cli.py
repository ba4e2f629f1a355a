"""
Command line interface for schema_ir.
"""

from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path
from typing import Any, TypeVar

import click
from pydantic import ValidationError

from .builder import build, validate
from .config import BuilderConfig, EmitterConfig, OutputConfig, OutputMode
from .emitter import BACKENDS, CodeEmitter
from .exceptions import SchemaIRError, SchemaLoadError
from .importer import import_root
from .ir import dumps_root, load_root
from .log import configure_logging
from .writer import write_output

ConfigT = TypeVar("ConfigT", BuilderConfig, EmitterConfig)


def resolve_reference(reference: str) -> Any:
    """
    Resolve a ``package.module:attribute`` reference.

    Raises:
        SchemaLoadError: If the module cannot be imported or lacks the attribute
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise SchemaLoadError(f"Expected MODULE:ATTRIBUTE, got {reference!r}")

    # Allow models defined next to the working directory
    if "" not in sys.path:
        sys.path.insert(0, "")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise SchemaLoadError(f"Cannot import module {module_name!r}: {e}") from e

    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as e:
            raise SchemaLoadError(f"Module {module_name!r} has no attribute {attribute!r}") from e
    return target


def load_config(path: str | None, config_class: type[ConfigT]) -> ConfigT:
    """Read a JSON config file into ``config_class``, or return its defaults."""
    if path is None:
        return config_class()
    with open(path, encoding="utf-8") as f:
        try:
            return config_class.from_dict(json.load(f))
        except (json.JSONDecodeError, AttributeError, ValueError, TypeError) as e:
            raise click.BadParameter(f"Invalid config file {path}: {e}", param_hint="--config") from e


@click.group()
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log fallback decisions at debug level")
@click.option("--json-logs", is_flag=True, default=False, help="Write log events as JSON lines")
@click.version_option(package_name="schema_ir")
def main(verbose, json_logs):
    """Translate between schema IR documents and validation schemas."""
    configure_logging(verbose=verbose, json_output=json_logs)


@main.command("emit")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--language", "-l", default=None, type=click.Choice(sorted(BACKENDS)))
@click.option("--force", is_flag=True, default=False, help="Overwrite OUTPUT if it exists")
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("output", type=click.Path(resolve_path=True))
def emit_command(config, language, force, path, output):
    """Generate zod or pydantic source code from an IR document."""
    emitter_config = load_config(config, EmitterConfig)
    if language is not None:
        emitter_config.language = language
    if force:
        emitter_config.output.mode = OutputMode.FORCE

    try:
        root = load_root(path)
        code = CodeEmitter(emitter_config).emit(root)
        if not code.endswith("\n"):
            code += "\n"
        write_output(Path(output), code, emitter_config.output)
    except SchemaIRError as e:
        raise click.ClickException(str(e)) from e


@main.command("check")
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.argument("path", type=click.Path(exists=True, resolve_path=True))
@click.argument("data", type=click.Path(exists=True, resolve_path=True))
def check_command(config, path, data):
    """Validate a JSON DATA file against the schema described by an IR document."""
    builder_config = load_config(config, BuilderConfig)
    try:
        model = build(load_root(path), builder_config)
    except SchemaIRError as e:
        raise click.ClickException(str(e)) from e

    with open(data, encoding="utf-8") as f:
        try:
            value = json.load(f)
        except json.JSONDecodeError as e:
            raise click.ClickException(f"{data}: invalid JSON: {e}") from e

    try:
        result = validate(model, value)
    except ValidationError as e:
        click.echo(str(e), err=True)
        sys.exit(1)
    click.echo(result.model_dump_json(by_alias=True, indent=2))


@main.command("import")
@click.option("--force", is_flag=True, default=False, help="Overwrite OUTPUT if it exists")
@click.argument("reference")
@click.argument("output", type=click.Path(resolve_path=True))
def import_command(force, reference, output):
    """Write the IR document for a pydantic model given as MODULE:ATTRIBUTE."""
    mode = OutputMode.FORCE if force else OutputMode.ERROR_IF_EXISTS
    try:
        schema = resolve_reference(reference)
        root = import_root(schema)
        write_output(Path(output), dumps_root(root) + "\n", OutputConfig(mode=mode))
    except SchemaIRError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    main()
