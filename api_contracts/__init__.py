"""
Contract layer for request/response payloads.

Provides schema combinators, the recursive schema engine, and the API
entity that revives raw JSON bodies into validated values.
"""

from .errors import (
    ContractViolation,
    ParseError,
    SchemaError,
    TypeMismatch,
    ConstraintViolation,
    ShapeMismatch,
    ExtraneousField,
    UnionExhausted,
)
from .schemas import (
    ABSENT,
    Leaf,
    Nested,
    as_schema,
    number,
    string,
    literal,
    null_,
    boolean,
    date,
    optional,
    or_,
    values,
    array,
    base_array,
)
from .validate import validate_field, validate
from .registry import (
    API,
    EMPTY_RESPONSE_VALUE,
    EMPTY_RESPONSE_JSON,
    EMPTY_SCHEMA,
    ErrorResponse,
    is_empty_response,
    is_error_response,
    register_api,
    get_api,
    list_apis,
    clear_apis,
    APIS,
)

__all__ = [
    'ContractViolation',
    'ParseError',
    'SchemaError',
    'TypeMismatch',
    'ConstraintViolation',
    'ShapeMismatch',
    'ExtraneousField',
    'UnionExhausted',
    'ABSENT',
    'Leaf',
    'Nested',
    'as_schema',
    'number',
    'string',
    'literal',
    'null_',
    'boolean',
    'date',
    'optional',
    'or_',
    'values',
    'array',
    'base_array',
    'validate_field',
    'validate',
    'API',
    'EMPTY_RESPONSE_VALUE',
    'EMPTY_RESPONSE_JSON',
    'EMPTY_SCHEMA',
    'ErrorResponse',
    'is_empty_response',
    'is_error_response',
    'register_api',
    'get_api',
    'list_apis',
    'clear_apis',
    'APIS',
]
