"""
Parser boundary: turns raw strings into typed field values.

The binder never looks at concrete types. Each descriptor carries a
parser; for reflected models that parser wraps a pydantic ``TypeAdapter``
for the field annotation. Scalars are validated from the string in lax
mode, containers and models are decoded from JSON.
"""

from collections.abc import Mapping, Sequence, Set
from inspect import isclass
from typing import Annotated, Any, get_args, get_origin

from pydantic import BaseModel, TypeAdapter


_JSON_CONTAINERS = (list, tuple, set, frozenset, dict)
_JSON_ABCS = (Sequence, Mapping, Set)


def _unwrap_annotated(annotation: Any) -> Any:
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation


def expects_json(annotation: Any) -> bool:
    """True when values of this type are written as JSON documents"""
    annotation = _unwrap_annotated(annotation)
    if annotation in (str, bytes):
        return False
    origin = get_origin(annotation) or annotation
    if not isclass(origin):
        return False
    if issubclass(origin, (str, bytes)):
        return False
    return issubclass(origin, _JSON_CONTAINERS + _JSON_ABCS + (BaseModel,))


class TypeParser:
    """Callable parser backed by a pydantic TypeAdapter"""

    def __init__(self, annotation: Any):
        self.annotation = annotation
        self.adapter = TypeAdapter(annotation)
        self.json = expects_json(annotation)

    def __call__(self, raw: str) -> Any:
        if self.json:
            return self.adapter.validate_json(raw)
        return self.adapter.validate_python(raw)

    def __repr__(self) -> str:
        mode = "json" if self.json else "str"
        return f"TypeParser({self.annotation!r}, mode={mode})"


def parser_for(annotation: Any) -> TypeParser:
    return TypeParser(annotation)
