"""
Schema Extraction
=================

Builds a ``Schema`` from a pydantic model by reflection. Fields are
declared with ordinary annotations; resolution options ride along as an
``Env`` marker inside ``Annotated``:

    class DBConfig(EnvConfig):
        host: Annotated[str, Env(from_="HOST")]
        port: Annotated[int, Env(from_="PORT", default="5432")]

    class AppConfig(EnvConfig):
        env_prefix: ClassVar[str] = "APP_"

        db: Annotated[DBConfig, Env(prefix="DB_")]
        debug: bool | None = None

Rules:
- no marker: key is the upper-cased field name, value required
- ``T | None``: optional, absence gives None; a non-None default is rejected
- a field typed with another model and no scalar options is nested
- a pydantic default (``port: int = 5432``) is used when the key is absent

Schemas are extracted once per class and cached.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from functools import cache
from inspect import isclass
from types import NoneType, UnionType
from typing import Any, ClassVar, Optional, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict
from pydantic.fields import FieldInfo

from envbind.core.exceptions import SchemaError
from envbind.core.parsing import parser_for
from envbind.core.schema import FieldDescriptor, Parser, Schema
from envbind.core.structured_logger import StructuredLogger

logger = StructuredLogger("envbind.extraction")

_extracting: set[type] = set()


@dataclass(frozen=True)
class Env:
    """
    Per-field resolution options

    Args:
        from_: Explicit key name (defaults to the upper-cased field name)
        default: Raw string used when the key is absent, parsed like a sourced value
        nested: Recurse into the field's model without a prefix fragment
        prefix: Recurse into the field's model with this fragment appended (implies nested)
        parser: Explicit parse-from-string callable for the field
    """

    from_: str | None = None
    default: str | None = None
    nested: bool = False
    prefix: str | None = None
    parser: Parser | None = None

    @property
    def is_nested(self) -> bool:
        return self.nested or self.prefix is not None

    @property
    def has_scalar_options(self) -> bool:
        return self.from_ is not None or self.default is not None or self.parser is not None


def _split_optional(annotation: Any) -> tuple[Any, bool]:
    """Strip ``None`` from a union; report whether it was there"""
    origin = get_origin(annotation)
    if origin is Union or origin is UnionType:
        args = get_args(annotation)
        if NoneType in args:
            rest = tuple(a for a in args if a is not NoneType)
            inner = rest[0] if len(rest) == 1 else Union[rest]
            return inner, True
    return annotation, False


def _is_model(annotation: Any) -> bool:
    return isclass(annotation) and issubclass(annotation, BaseModel)


def _marker_for(model: type[BaseModel], name: str, info: FieldInfo) -> Env:
    markers = [m for m in info.metadata if isinstance(m, Env)]
    if len(markers) > 1:
        raise SchemaError(
            f"Found multiple `Env` markers on field `{model.__name__}.{name}`",
            {'schema': model.__name__, 'field': name},
        )
    return markers[0] if markers else Env()


def _descriptor_for(model: type[BaseModel], name: str, info: FieldInfo) -> FieldDescriptor:
    marker = _marker_for(model, name, info)
    inner, optional = _split_optional(info.annotation)

    nested = marker.is_nested or (_is_model(inner) and not optional and not marker.has_scalar_options)
    if nested:
        if not _is_model(inner):
            raise SchemaError(
                f"Field `{model.__name__}.{name}` is nested but `{inner!r}` is not a model",
                {'schema': model.__name__, 'field': name},
            )
        if optional:
            raise SchemaError(
                f"Nested field `{model.__name__}.{name}` cannot be optional",
                {'schema': model.__name__, 'field': name},
            )
        return FieldDescriptor(
            target_field=name,
            key_name=marker.from_ or "",
            default_literal=marker.default,
            child_schema=schema_for(inner),
            prefix_fragment=marker.prefix or "",
        )

    if optional and not info.is_required() and info.default is not None:
        raise SchemaError(
            f"Optional type on field `{model.__name__}.{name}` with a non-None default "
            "does not make sense and therefore is not allowed",
            {'schema': model.__name__, 'field': name},
        )

    return FieldDescriptor(
        target_field=name,
        key_name=marker.from_ or "",
        parser=marker.parser or parser_for(inner),
        default_literal=marker.default,
        is_optional=optional,
        has_target_default=not info.is_required() and not optional and marker.default is None,
    )


def _error_aliases(model: type[BaseModel]) -> dict[str, str]:
    """Names pydantic may report in an error ``loc``, mapped back to fields"""
    aliases: dict[str, str] = {}
    for name, info in model.model_fields.items():
        for alias in (info.alias, info.validation_alias):
            if isinstance(alias, str) and alias != name:
                aliases[alias] = name
    return aliases


def _model_factory(model: type[BaseModel]):
    aliases = {
        name: info.alias
        for name, info in model.model_fields.items()
        if isinstance(info.alias, str)
    }

    def build(values: Mapping[str, Any]) -> BaseModel:
        return model.model_validate({aliases.get(k, k): v for k, v in values.items()})

    build.__qualname__ = f"{model.__name__}.model_validate"
    return build


@cache
def schema_for(model: type[BaseModel]) -> Schema:
    """Extract (once) the schema of a pydantic model class"""
    if not _is_model(model):
        raise SchemaError(f"Cannot extract a schema from {model!r}: not a pydantic model")
    if model in _extracting:
        raise SchemaError(
            f"Model `{model.__name__}` nests itself",
            {'schema': model.__name__},
        )

    env_prefix = getattr(model, 'env_prefix', "") if 'env_prefix' in model.__class_vars__ else ""
    if not isinstance(env_prefix, str):
        raise SchemaError(f"env_prefix of `{model.__name__}` must be a string")

    _extracting.add(model)
    try:
        fields = tuple(
            _descriptor_for(model, name, info)
            for name, info in model.model_fields.items()
        )
    finally:
        _extracting.discard(model)

    schema = Schema(
        name=model.__name__,
        fields=fields,
        factory=_model_factory(model),
        env_prefix=env_prefix,
        aliases=_error_aliases(model),
    )
    logger.debug(
        "Extracted schema",
        schema=schema.name,
        fields=len(schema),
        env_prefix=env_prefix,
    )
    return schema


def as_schema(target: Any) -> Schema:
    """Accept a Schema or a model class wherever a schema is expected"""
    if isinstance(target, Schema):
        return target
    if _is_model(target):
        return schema_for(target)
    raise SchemaError(f"Cannot derive a schema from {target!r}")


class EnvConfig(BaseModel):
    """
    Base class for configuration models bound from environment variables.

    Subclasses are ordinary frozen pydantic models; the classmethods below
    bind them against a source.
    """

    env_prefix: ClassVar[str] = ""

    model_config = ConfigDict(frozen=True, extra='forbid')

    @classmethod
    def envbind_schema(cls) -> Schema:
        return schema_for(cls)

    @classmethod
    def init_from_env(cls, prefix: str = ""):
        """Initialize from the process environment"""
        from envbind.core.binder import bind_env
        return bind_env(cls, prefix=prefix)

    @classmethod
    def init_from_mapping(cls, mapping: Mapping[str, str], prefix: str = ""):
        """Initialize from an explicit key-value mapping (handy in tests)"""
        from envbind.core.binder import bind_mapping
        return bind_mapping(cls, mapping, prefix=prefix)

    @classmethod
    def init(cls, prefix: str = ""):
        return cls.init_from_env(prefix=prefix)

    @classmethod
    def init_or_exit(cls, source: Optional[Any] = None, prefix: str = ""):
        """Initialize or terminate the process with a readable error message"""
        from envbind.core.binder import bind_or_exit
        return bind_or_exit(cls, source=source, prefix=prefix)
