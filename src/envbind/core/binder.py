"""
Binder
======

Resolves a Schema against a ValueSource into a fully built value.

For every field, in declaration order:

    final_key = prefix + schema.env_prefix + field.key_name

- nested fields recurse with ``prefix + schema.env_prefix + fragment``
- a present value is parsed; failure raises ParseError(final_key)
- an absent optional field becomes None
- an absent field with a default literal parses the literal
- an absent field with a model default is left to the model
- anything else raises EnvVarMissingError(final_key)

The first failure, depth-first, aborts the whole bind. The target value is
only constructed once every one of its fields resolved, so a caller either
gets a complete value or an exception, never a half-filled object.
"""

import sys
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional

from pydantic import ValidationError

from envbind.config.sources import EnvironmentSource, MapSource, ValueSource
from envbind.core.exceptions import BindError, EnvVarMissingError, ParseError
from envbind.core.extraction import as_schema
from envbind.core.schema import FieldDescriptor, Schema
from envbind.core.structured_logger import StructuredLogger, TraceContext

logger = StructuredLogger("envbind.binder")


@dataclass(frozen=True)
class KeySpec:
    """One key a schema reads, as reported by ``describe``"""
    key: str
    field_path: str
    required: bool
    optional: bool = False
    default: str | None = None


def _as_source(source: Any) -> ValueSource:
    if isinstance(source, ValueSource):
        return source
    if isinstance(source, Mapping):
        return MapSource(source)
    raise TypeError(f"Expected a ValueSource or a mapping, got {type(source).__name__}")


def _parse(descriptor: FieldDescriptor, key: str, raw: str) -> Any:
    try:
        return descriptor.parser(raw)
    except BindError:
        raise
    except Exception as exc:
        raise ParseError(key) from exc


def _failed_field(exc: Exception) -> str | None:
    if isinstance(exc, ValidationError):
        for error in exc.errors():
            if error.get('loc'):
                return str(error['loc'][0])
    return None


def _first_key(schema: Schema, prefix: str) -> str:
    specs = describe(schema, prefix)
    return specs[0].key if specs else prefix + schema.env_prefix


def _construct(schema: Schema, values: dict[str, Any], prefix: str) -> Any:
    try:
        return schema.factory(values)
    except BindError:
        raise
    except Exception as exc:
        # the factory rejected assembled values; blame the first offending field
        effective_prefix = prefix + schema.env_prefix
        name = _failed_field(exc)
        name = schema.aliases.get(name, name)
        key = _first_key(schema, prefix)
        for descriptor in schema:
            if descriptor.target_field != name:
                continue
            if descriptor.is_nested:
                key = _first_key(descriptor.child_schema, effective_prefix + descriptor.prefix_fragment)
            else:
                key = effective_prefix + descriptor.key_name
            break
        raise ParseError(key) from exc


def _bind_schema(schema: Schema, source: ValueSource, prefix: str) -> Any:
    effective_prefix = prefix + schema.env_prefix
    values: dict[str, Any] = {}

    for descriptor in schema:
        if descriptor.is_nested:
            child_prefix = effective_prefix + descriptor.prefix_fragment
            values[descriptor.target_field] = _bind_schema(descriptor.child_schema, source, child_prefix)
            logger.debug(
                "Resolved nested schema",
                field=descriptor.target_field,
                schema=descriptor.child_schema.name,
                prefix=child_prefix,
            )
            continue

        key = effective_prefix + descriptor.key_name
        raw = source.lookup(key)

        if raw is not None:
            values[descriptor.target_field] = _parse(descriptor, key, raw)
            origin = "source"
        elif descriptor.is_optional:
            values[descriptor.target_field] = None
            origin = "optional"
        elif descriptor.default_literal is not None:
            values[descriptor.target_field] = _parse(descriptor, key, descriptor.default_literal)
            origin = "default"
        elif descriptor.has_target_default:
            origin = "target_default"
        else:
            raise EnvVarMissingError(key)

        logger.debug("Resolved key", key=key, field=descriptor.target_field, origin=origin)

    return _construct(schema, values, prefix)


def bind(schema: Any, source: Any, prefix: str = "") -> Any:
    """
    Bind a schema against a source

    Args:
        schema: A Schema or a pydantic model class
        source: A ValueSource, or a plain mapping (wrapped in MapSource)
        prefix: Prefix prepended to every key of the schema

    Returns:
        The fully constructed configuration value

    Raises:
        EnvVarMissingError: A required key is absent
        ParseError: A sourced or default value could not be parsed
    """
    schema = as_schema(schema)
    source = _as_source(source)

    with TraceContext():
        logger.debug("Binding configuration", schema=schema.name, source=source.name, prefix=prefix)
        try:
            value = _bind_schema(schema, source, prefix)
        except BindError as exc:
            logger.warning(
                "Configuration binding failed",
                schema=schema.name,
                source=source.name,
                key=exc.key,
                error_code=int(exc.error_code),
            )
            raise
        logger.info("Configuration bound", schema=schema.name, source=source.name)
        return value


def bind_env(schema: Any, prefix: str = "") -> Any:
    """Bind against the live process environment"""
    return bind(schema, EnvironmentSource(), prefix)


def bind_mapping(schema: Any, mapping: Mapping[str, str], prefix: str = "") -> Any:
    """Bind against an explicit string-to-string mapping"""
    return bind(schema, MapSource(mapping), prefix)


def bind_or_exit(schema: Any, source: Optional[Any] = None, prefix: str = "") -> Any:
    """
    Bind, or print the error to stderr and exit with status 1

    Meant for application entry points where a missing setting should stop
    start-up with a one-line diagnostic.
    """
    source = EnvironmentSource() if source is None else source
    try:
        return bind(schema, source, prefix)
    except BindError as exc:
        print(exc, file=sys.stderr)
        raise SystemExit(1) from exc


def describe(schema: Any, prefix: str = "") -> list[KeySpec]:
    """
    List every scalar key a schema reads, in resolution order

    Args:
        schema: A Schema or a pydantic model class
        prefix: Root prefix, as it would be passed to ``bind``

    Returns:
        KeySpecs with fully qualified keys; nested fields are expanded
        depth-first and reported with dotted field paths
    """
    specs: list[KeySpec] = []
    _describe(as_schema(schema), prefix, "", specs)
    return specs


def _describe(schema: Schema, prefix: str, path: str, specs: list[KeySpec]) -> None:
    effective_prefix = prefix + schema.env_prefix
    for descriptor in schema:
        field_path = f"{path}{descriptor.target_field}"
        if descriptor.is_nested:
            _describe(
                descriptor.child_schema,
                effective_prefix + descriptor.prefix_fragment,
                f"{field_path}.",
                specs,
            )
            continue
        specs.append(KeySpec(
            key=effective_prefix + descriptor.key_name,
            field_path=field_path,
            required=descriptor.is_required,
            optional=descriptor.is_optional,
            default=descriptor.default_literal,
        ))
