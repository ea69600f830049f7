"""
envbind
=======

Bind typed configuration schemas to environment variables or to an explicit
key-value mapping, with defaults, optional fields, prefixes and nesting.
"""

from envbind.config.sources import EnvironmentSource, MapSource, ValueSource
from envbind.core import (
    BindError,
    Env,
    EnvBindError,
    EnvConfig,
    EnvVarMissingError,
    FieldDescriptor,
    ParseError,
    Schema,
    SchemaBuilder,
    SchemaError,
    bind,
    bind_env,
    bind_mapping,
    bind_or_exit,
    describe,
)

__all__ = [
    "bind",
    "bind_env",
    "bind_mapping",
    "bind_or_exit",
    "BindError",
    "describe",
    "Env",
    "EnvBindError",
    "EnvConfig",
    "EnvironmentSource",
    "EnvVarMissingError",
    "FieldDescriptor",
    "MapSource",
    "ParseError",
    "Schema",
    "SchemaBuilder",
    "SchemaError",
    "ValueSource",
]
