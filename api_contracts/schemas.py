"""
Schema combinators - the building blocks of request/response contracts.

A schema field is one of:
- Leaf:   a validator function (path, value, recurse) -> value
- Nested: an ordered mapping of field name -> schema field (an object)
- None:   the value must be null

Usage:
    from api_contracts.schemas import string, number, optional, array

    USER = {
        "name": string(non_empty=True),
        "age": optional(number()),
        "tags": array(string()),
    }

Plain dicts are converted to Nested once, when the schema is built.
Leaf validators never import the engine; child fields are validated through
the `recurse` callback they are handed, so they can be reused in any tree.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional, Union

from dateutil import parser as date_parser

from .errors import (
    ConstraintViolation,
    SchemaError,
    ShapeMismatch,
    TypeMismatch,
    UnionExhausted,
    key_concat,
)


class _Absent:
    """Marker for a key that is not present in the input."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = _Absent()


@dataclass(frozen=True)
class Leaf:
    """A leaf validator. Calling it validates `value` at `path`."""
    fn: Callable[[str, Any, "Recurse"], Any]
    name: str = "leaf"

    def __call__(self, path: str, value: Any, recurse: "Recurse") -> Any:
        return self.fn(path, value, recurse)

    def __repr__(self):
        return f"Leaf({self.name})"


class Nested:
    """An object schema: read-only, ordered field name -> schema field."""

    __slots__ = ("_fields", "empty_response")

    def __init__(self, fields: Mapping[str, Any], empty_response: bool = False):
        converted = {}
        for name, child in fields.items():
            if not isinstance(name, str):
                raise TypeError(f"Schema field names must be strings, got {name!r}")
            converted[name] = as_schema(child)
        object.__setattr__(self, "_fields", MappingProxyType(converted))
        object.__setattr__(self, "empty_response", empty_response)

    def __setattr__(self, name, value):
        raise AttributeError("Nested schemas are immutable")

    def __reduce__(self):
        return (Nested, (dict(self._fields), self.empty_response))

    @property
    def fields(self) -> Mapping[str, "SchemaField"]:
        return self._fields

    def __contains__(self, name) -> bool:
        return name in self._fields

    def __iter__(self):
        return iter(self._fields)

    def __len__(self):
        return len(self._fields)

    def __repr__(self):
        inner = ", ".join(f"{k}: {v!r}" for k, v in self._fields.items())
        return f"Nested({{{inner}}})"


SchemaField = Union[Leaf, Nested, None]
Recurse = Callable[[SchemaField, str, Any], Any]


def as_schema(schema: Any) -> SchemaField:
    """
    Normalize an authored schema into the tagged form.

    Raises:
        TypeError: if `schema` is not a Leaf, Nested, dict or None
    """
    if schema is None or isinstance(schema, (Leaf, Nested)):
        return schema
    if isinstance(schema, dict):
        return Nested(schema)
    raise TypeError(f"Not a schema field: {schema!r}")


# =============================================================================
# PRIMITIVES
# =============================================================================

def number() -> Leaf:
    def validate_number(path, value, recurse):
        # bool is an int subclass but not a JSON number
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
        raise TypeMismatch.at(path, "must be a number", received=_type_name(value))
    return Leaf(validate_number, "number")


def string(non_empty: bool = False) -> Leaf:
    def validate_string(path, value, recurse):
        if not isinstance(value, str):
            raise TypeMismatch.at(path, "must be a string", received=_type_name(value))
        if non_empty and len(value) == 0:
            raise ConstraintViolation.at(path, "cannot be an empty string")
        return value
    return Leaf(validate_string, "string")


def literal(expected: Any) -> Leaf:
    """Accept only `expected`; `1` matches `1.0` but not `True`."""
    def validate_literal(path, value, recurse):
        if isinstance(value, bool) != isinstance(expected, bool) or value != expected:
            raise ConstraintViolation.at(path, f"must be {expected!r}", expected=expected)
        return expected
    return Leaf(validate_literal, f"literal({expected!r})")


def null_() -> Leaf:
    def validate_null(path, value, recurse):
        if value is not None:
            raise TypeMismatch.at(path, "must be null", received=_type_name(value))
        return None
    return Leaf(validate_null, "null")


def boolean(val: Optional[bool] = None) -> Leaf:
    def validate_boolean(path, value, recurse):
        if not isinstance(value, bool):
            raise TypeMismatch.at(path, "must be a boolean", received=_type_name(value))
        if val is not None and value is not val:
            raise ConstraintViolation.at(path, f"must be {str(val).lower()}", expected=val)
        return value
    return Leaf(validate_boolean, "boolean")


def date() -> Leaf:
    """
    Revive a datetime.

    Numbers are epoch milliseconds and yield an aware UTC datetime.
    Strings go through dateutil, so ISO 8601 and common formats are accepted.
    """
    def validate_date(path, value, recurse):
        try:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
            if isinstance(value, str):
                return date_parser.parse(value)
        except (ValueError, OverflowError, OSError) as e:
            raise ConstraintViolation.at(path, "must be a date", received=_preview(value)) from e
        raise ConstraintViolation.at(path, "must be a date", received=_preview(value))
    return Leaf(validate_date, "date")


# =============================================================================
# COMBINATORS
# =============================================================================

def optional(inner: Any) -> Leaf:
    """Accept a missing key. An explicit null is still handed to `inner`."""
    inner = as_schema(inner)

    def validate_optional(path, value, recurse):
        if value is ABSENT:
            return ABSENT
        return recurse(inner, path, value)
    return Leaf(validate_optional, f"optional({_name(inner)})")


def or_(first: Any, second: Any) -> Leaf:
    """
    Try `first`, then `second`. If both fail the second failure is reported.

    Nest calls for wider unions: or_(a, or_(b, c)).
    """
    first = as_schema(first)
    second = as_schema(second)

    def validate_union(path, value, recurse):
        try:
            return recurse(first, path, value)
        except SchemaError as first_error:
            try:
                return recurse(second, path, value)
            except SchemaError as second_error:
                raise UnionExhausted.from_failures(first_error, second_error) from second_error
    return Leaf(validate_union, f"or({_name(first)}, {_name(second)})")


def values(inner: Any) -> Leaf:
    """A mapping with arbitrary keys whose values all match `inner`."""
    inner = as_schema(inner)

    def validate_values(path, value, recurse):
        if not isinstance(value, dict):
            raise ShapeMismatch.at(path, "must be an object", received=_type_name(value))
        return {
            key: recurse(inner, key_concat(path, key), item)
            for key, item in value.items()
        }
    return Leaf(validate_values, f"values({_name(inner)})")


def array(inner: Any) -> Leaf:
    """A list whose elements all match `inner`, validated in order."""
    inner = as_schema(inner)

    def validate_array(path, value, recurse):
        if not isinstance(value, list):
            raise ShapeMismatch.at(path, "must be an array", received=_type_name(value))
        return [recurse(inner, path, item) for item in value]
    return Leaf(validate_array, f"array({_name(inner)})")


def base_array(inner: Leaf) -> Leaf:
    """Like array(), for an element schema that is already a leaf validator."""
    if not isinstance(inner, Leaf):
        raise AssertionError(f"base_array() needs a Leaf, got {inner!r}")
    return array(inner)


# =============================================================================
# HELPERS
# =============================================================================

_JSON_TYPE_NAMES = {
    bool: "boolean",
    int: "number",
    float: "number",
    str: "string",
    list: "array",
    dict: "object",
    type(None): "null",
}


def _type_name(value: Any) -> str:
    if value is ABSENT:
        return "absent"
    return _JSON_TYPE_NAMES.get(type(value), type(value).__name__)


def _preview(value: Any, limit: int = 80) -> str:
    text = repr(value)
    if len(text) > limit:
        return text[:limit] + "..."
    return text


def _name(schema: SchemaField) -> str:
    if schema is None:
        return "null"
    if isinstance(schema, Leaf):
        return schema.name
    return "object"


def describe(schema: Any) -> Union[str, Dict[str, Any]]:
    """Readable outline of a schema, e.g. {'name': 'string', 'age': 'optional(number)'}."""
    schema = as_schema(schema)
    if isinstance(schema, Nested):
        return {name: describe(child) for name, child in schema.fields.items()}
    return _name(schema)
