"""
Schema Data Model
=================

A Schema is the static description of one configuration type: an ordered
tuple of FieldDescriptors plus the factory that builds the final value.
Schemas come either from reflection over an ``EnvConfig`` model
(see ``envbind.core.extraction``) or from ``SchemaBuilder``.

Every contradiction in a declaration (an optional field with a default, a
nested field with a key name, two fields with the same name) is rejected
here with ``SchemaError``, so a schema that exists can always be bound.
"""

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field as dataclass_field
from enum import Enum
from typing import Any

from envbind.core.exceptions import SchemaError

Parser = Callable[[str], Any]
Factory = Callable[[Mapping[str, Any]], Any]


class FieldKind(Enum):
    """How a field is resolved when its key is absent"""
    PLAIN = "plain"
    OPTIONAL = "optional"
    DEFAULT = "default"
    NESTED = "nested"


def derive_key_name(identifier: str) -> str:
    """Key used when a field declares no explicit name"""
    return identifier.upper()


@dataclass(frozen=True)
class FieldDescriptor:
    """Resolution rule for a single field"""

    target_field: str
    key_name: str = ""
    parser: Parser = str
    default_literal: str | None = None
    is_optional: bool = False
    has_target_default: bool = False
    child_schema: "Schema | None" = None
    prefix_fragment: str = ""

    def __post_init__(self) -> None:
        name = self.target_field
        if not isinstance(name, str) or not name:
            raise SchemaError("Field name must be a non-empty string", {'field': repr(name)})

        if self.child_schema is not None:
            if not isinstance(self.child_schema, Schema):
                raise SchemaError(
                    f"Nested field `{name}` must reference a Schema",
                    {'field': name},
                )
            if self.key_name or self.default_literal is not None or self.is_optional:
                raise SchemaError(
                    f"Nested field `{name}` cannot declare a key name, a default or be optional",
                    {'field': name},
                )
            if not isinstance(self.prefix_fragment, str):
                raise SchemaError(f"Prefix of field `{name}` must be a string", {'field': name})
            return

        if self.prefix_fragment:
            raise SchemaError(
                f"Field `{name}` declares a prefix but is not nested",
                {'field': name},
            )
        if self.is_optional and self.default_literal is not None:
            raise SchemaError(
                f"Optional type on field `{name}` with default value does not make sense "
                "and therefore is not allowed",
                {'field': name},
            )
        if self.default_literal is not None and not isinstance(self.default_literal, str):
            raise SchemaError(
                f"Default of field `{name}` must be a string literal, "
                f"got {type(self.default_literal).__name__}",
                {'field': name},
            )
        if not callable(self.parser):
            raise SchemaError(f"Parser of field `{name}` is not callable", {'field': name})
        if not self.key_name:
            object.__setattr__(self, 'key_name', derive_key_name(name))

    @property
    def is_nested(self) -> bool:
        return self.child_schema is not None

    @property
    def kind(self) -> FieldKind:
        if self.is_nested:
            return FieldKind.NESTED
        if self.is_optional:
            return FieldKind.OPTIONAL
        if self.default_literal is not None:
            return FieldKind.DEFAULT
        return FieldKind.PLAIN

    @property
    def is_required(self) -> bool:
        """True when absence of the key is an error"""
        return self.kind is FieldKind.PLAIN and not self.has_target_default


def _dict_factory(values: Mapping[str, Any]) -> dict[str, Any]:
    return dict(values)


@dataclass(frozen=True)
class Schema:
    """Ordered field descriptors for one configuration type"""

    name: str
    fields: tuple[FieldDescriptor, ...] = ()
    factory: Factory = _dict_factory
    env_prefix: str = ""
    # factory-side name (e.g. a pydantic alias) -> target_field
    aliases: Mapping[str, str] = dataclass_field(default_factory=dict, repr=False, compare=False)
    _index: dict[str, FieldDescriptor] = dataclass_field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        fields = tuple(self.fields)
        object.__setattr__(self, 'fields', fields)

        if not isinstance(self.env_prefix, str):
            raise SchemaError(f"env_prefix of schema `{self.name}` must be a string")
        if not callable(self.factory):
            raise SchemaError(f"Factory of schema `{self.name}` is not callable")

        index: dict[str, FieldDescriptor] = {}
        for descriptor in fields:
            if not isinstance(descriptor, FieldDescriptor):
                raise SchemaError(
                    f"Schema `{self.name}` contains a non-descriptor entry: {descriptor!r}"
                )
            if descriptor.target_field in index:
                raise SchemaError(
                    f"Field `{descriptor.target_field}` declared twice in schema `{self.name}`",
                    {'schema': self.name, 'field': descriptor.target_field},
                )
            index[descriptor.target_field] = descriptor
        object.__setattr__(self, '_index', index)

    def __iter__(self) -> Iterator[FieldDescriptor]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def field(self, name: str) -> FieldDescriptor:
        try:
            return self._index[name]
        except KeyError:
            raise KeyError(f"Schema `{self.name}` has no field `{name}`") from None


class SchemaBuilder:
    """
    Fluent construction of a Schema without a model class

    Example:
        db = (
            SchemaBuilder("db")
            .field("host", from_="HOST")
            .field("port", from_="PORT", default="5432", parser=int)
            .build()
        )
        app = SchemaBuilder("app").nested("db", db, prefix="DB_").build()
    """

    def __init__(self, name: str, factory: Factory = _dict_factory, env_prefix: str = ""):
        self.name = name
        self.factory = factory
        self.env_prefix = env_prefix
        self._fields: list[FieldDescriptor] = []

    def field(
        self,
        name: str,
        from_: str | None = None,
        default: str | None = None,
        optional: bool = False,
        parser: Parser = str,
    ) -> "SchemaBuilder":
        self._fields.append(FieldDescriptor(
            target_field=name,
            key_name=from_ or "",
            parser=parser,
            default_literal=default,
            is_optional=optional,
        ))
        return self

    def nested(self, name: str, schema: Any, prefix: str = "") -> "SchemaBuilder":
        """Add a nested field; ``schema`` may be a Schema or an EnvConfig class"""
        from envbind.core.extraction import as_schema

        self._fields.append(FieldDescriptor(
            target_field=name,
            child_schema=as_schema(schema),
            prefix_fragment=prefix,
        ))
        return self

    def build(self) -> Schema:
        return Schema(
            name=self.name,
            fields=tuple(self._fields),
            factory=self.factory,
            env_prefix=self.env_prefix,
        )
