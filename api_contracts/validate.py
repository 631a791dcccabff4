"""
Schema engine - recursive validation of untyped data against a schema tree.

validate_field() walks a schema tree:
- None schema    -> value must be null; a missing key stays ABSENT
- Leaf schema    -> the leaf validates, recursing through validate_field
- Nested schema  -> value must be an object; extraneous keys are rejected
                    before any declared field is validated

The engine is pure: it never logs and never mutates its inputs. The first
failure found propagates unchanged to the caller.
"""

from typing import Any, Dict

from .errors import ExtraneousField, ShapeMismatch, TypeMismatch, key_concat
from .schemas import ABSENT, Leaf, Nested, SchemaField, as_schema


def validate_field(schema: SchemaField, path: str, value: Any) -> Any:
    """
    Validate `value` at `path` against `schema`.

    Args:
        schema: Leaf, Nested or None
        path: Dotted path of the value ('' for the root)
        value: Parsed JSON value, or ABSENT for a missing key

    Returns:
        The validated value (ABSENT when an optional key was missing)

    Raises:
        SchemaError: If the value does not match
        AssertionError: If `schema` is not a schema field
    """
    if schema is None:
        if value is ABSENT:
            return ABSENT
        if value is not None:
            raise TypeMismatch.at(path, "must be null")
        return None
    if isinstance(schema, Leaf):
        return schema(path, value, validate_field)
    if isinstance(schema, Nested):
        return _validate_object(schema, path, value)
    raise AssertionError(f"Schema at '{path}' is neither a leaf nor an object: {schema!r}")


def _validate_object(schema: Nested, path: str, value: Any) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ShapeMismatch.at(path, "must be an object")

    # Extraneous keys are rejected before any declared field is validated
    extraneous = [name for name in value if name not in schema]
    if extraneous:
        raise ExtraneousField.named(path, extraneous[0], extraneous)

    result = {}
    for name, child in schema.fields.items():
        validated = validate_field(child, key_concat(path, name), value.get(name, ABSENT))
        if validated is not ABSENT:
            result[name] = validated
    return result


def validate(schema: Any, value: Any) -> Any:
    """Validate `value` at the root path. Accepts dict literals as schemas."""
    return validate_field(as_schema(schema), "", value)
