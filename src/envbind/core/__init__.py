"""Core envbind module: canonical public API."""

from envbind.core.binder import KeySpec, bind, bind_env, bind_mapping, bind_or_exit, describe
from envbind.core.exceptions import (
    BindError,
    EnvBindError,
    EnvVarMissingError,
    ErrorCode,
    ParseError,
    SchemaError,
)
from envbind.core.extraction import Env, EnvConfig, as_schema, schema_for
from envbind.core.schema import FieldDescriptor, FieldKind, Schema, SchemaBuilder

__all__ = [
    "as_schema",
    "bind",
    "bind_env",
    "bind_mapping",
    "bind_or_exit",
    "BindError",
    "describe",
    "Env",
    "EnvBindError",
    "EnvConfig",
    "EnvVarMissingError",
    "ErrorCode",
    "FieldDescriptor",
    "FieldKind",
    "KeySpec",
    "ParseError",
    "Schema",
    "SchemaBuilder",
    "SchemaError",
    "schema_for",
]
