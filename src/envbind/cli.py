"""
envbind CLI: envbind check | describe
"""
import importlib
import sys
from typing import Any

import click

from envbind.config.settings import EnvBindSettings, _project_version, configure_logging
from envbind.core.binder import bind_env, describe as describe_schema
from envbind.core.exceptions import BindError, SchemaError
from envbind.core.extraction import as_schema


def _load_target(target: str) -> Any:
    """Import ``package.module:Attr`` (attribute may be dotted)."""
    module_name, sep, attr_path = target.partition(":")
    if not sep or not module_name or not attr_path:
        raise click.BadParameter("expected the form 'package.module:ConfigClass'", param_hint="TARGET")

    if "" not in sys.path:
        sys.path.insert(0, "")
    try:
        obj: Any = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import '{module_name}': {e}", param_hint="TARGET") from e

    for part in attr_path.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise click.BadParameter(f"'{module_name}' has no attribute '{attr_path}'", param_hint="TARGET") from e
    return obj


def _schema_or_exit(target: str):
    try:
        return as_schema(_load_target(target))
    except SchemaError as e:
        click.echo(f"Invalid schema: {e.message}", err=True)
        raise SystemExit(2)


@click.group()
@click.version_option(version=_project_version(), prog_name="envbind")
def cli() -> None:
    """envbind: bind configuration schemas to environment variables."""
    configure_logging(EnvBindSettings())


@cli.command()
@click.argument("target")
@click.option("--prefix", default="", help="Root prefix prepended to every key")
def check(target: str, prefix: str) -> None:
    """Bind TARGET against the current environment and report the result."""
    schema = _schema_or_exit(target)
    try:
        bind_env(schema, prefix=prefix)
    except BindError as e:
        click.echo(str(e), err=True)
        raise SystemExit(1)
    click.echo(f"OK: {schema.name} resolved")


@cli.command()
@click.argument("target")
@click.option("--prefix", default="", help="Root prefix prepended to every key")
def describe(target: str, prefix: str) -> None:
    """List every environment variable TARGET reads."""
    schema = _schema_or_exit(target)
    for spec in describe_schema(schema, prefix=prefix):
        if spec.optional:
            rule = "optional"
        elif spec.default is not None:
            rule = f"default={spec.default!r}"
        elif spec.required:
            rule = "required"
        else:
            rule = "model default"
        click.echo(f"{spec.key}\t{spec.field_path}\t{rule}")


if __name__ == "__main__":
    cli()
