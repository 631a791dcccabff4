"""
API registry - binds endpoint paths to request/response schemas.

Each endpoint has:
- path: routing key (e.g. "/api/users/create"), opaque to this package
- request_schema: what the client sends
- response_schema: what the server returns

Endpoints without a payload use EMPTY_SCHEMA; an empty body on the wire is
revived as EMPTY_RESPONSE_VALUE.

Usage:
    CREATE_USER = register_api(API(
        "/api/users/create",
        {"name": string(non_empty=True), "age": optional(number())},
        {"id": number()},
    ))

    request = CREATE_USER.revive_request(raw_body)
"""

import json
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

from .config import ContractConfig
from .errors import ContractViolation, ParseError
from .schemas import Nested, as_schema, boolean
from .validate import validate_field

logger = logging.getLogger('api_contracts')


# =============================================================================
# EMPTY RESPONSE SENTINEL
# =============================================================================

EMPTY_RESPONSE_VALUE: Mapping[str, bool] = MappingProxyType({"isEmptyResponse": True})
EMPTY_RESPONSE_JSON = json.dumps(dict(EMPTY_RESPONSE_VALUE))

# Use as the request/response schema for endpoints that carry no data
EMPTY_SCHEMA = Nested({"isEmptyResponse": boolean(val=True)}, empty_response=True)


def is_empty_response(value: Any) -> bool:
    """Check whether a revived value is the empty-response sentinel."""
    return isinstance(value, Mapping) and dict(value) == dict(EMPTY_RESPONSE_VALUE)


# =============================================================================
# ERROR RESPONSE SHAPE
# =============================================================================

@dataclass(frozen=True)
class ErrorResponse:
    """Designated error result a server handler returns instead of a payload."""
    code: int
    message: str

    def to_dict(self) -> Dict[str, str]:
        """Wire body sent with the error status."""
        return {"error": self.message}


def is_error_response(value: Any) -> bool:
    """True for an ErrorResponse or a mapping with exactly `code` and `message`."""
    if isinstance(value, ErrorResponse):
        return True
    return (
        isinstance(value, Mapping)
        and set(value.keys()) == {"code", "message"}
        and isinstance(value["code"], int)
        and not isinstance(value["code"], bool)
        and isinstance(value["message"], str)
    )


# =============================================================================
# API
# =============================================================================

@dataclass(frozen=True)
class API:
    """
    Everything about one endpoint: its path and the shapes of its request
    and response. Immutable once built.
    """
    path: str
    request_schema: Optional[Nested]
    response_schema: Optional[Nested]

    def __post_init__(self):
        # Accept dict literals; store the converted, read-only form
        for attr in ('request_schema', 'response_schema'):
            schema = as_schema(getattr(self, attr))
            if schema is not None and not isinstance(schema, Nested):
                raise TypeError(f"{attr} for {self.path} must be an object schema or None")
            object.__setattr__(self, attr, schema)

    @property
    def has_no_request_body(self) -> bool:
        return self.request_schema is not None and self.request_schema.empty_response

    @property
    def has_no_response_body(self) -> bool:
        return self.response_schema is not None and self.response_schema.empty_response

    def revive_request(self, request: Union[str, bytes]) -> Any:
        """
        Parse and validate the data received from the client.

        Raises:
            ContractViolation: If the body is not JSON or does not match
        """
        return self._revive(request, self.request_schema, 'request')

    def revive_response(self, response: Union[str, bytes]) -> Any:
        """
        Parse and validate the data received from the server.

        Raises:
            ContractViolation: If the body is not JSON or does not match
        """
        return self._revive(response, self.response_schema, 'response')

    def _revive(self, text: Union[str, bytes], schema: Optional[Nested], stage: str) -> Any:
        if text == "" or text == b"":
            text = EMPTY_RESPONSE_JSON
        try:
            return validate_field(schema, "", _parse_json(text))
        except ContractViolation as e:
            e.endpoint = self.path
            e.stage = stage
            _log_violation(self.path, e, stage, text)
            raise


def _reject_constant(name: str):
    raise ValueError(f"{name} is not valid JSON")


def _parse_json(text: Union[str, bytes]) -> Any:
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except (ValueError, TypeError, RecursionError) as e:
        raise ParseError(
            message=f"Invalid JSON: {e}",
            details={"reason": str(e)},
        ) from e


def _log_violation(endpoint: str, violation: ContractViolation, stage: str, text) -> None:
    """Log contract violation for observability."""
    if not ContractConfig.LOG_FAILURES:
        return
    extra = {
        "event": "contract_violation",
        "endpoint": endpoint,
        "stage": stage,
        "error": violation.code,
        "path": getattr(violation, 'path', None),
    }
    if ContractConfig.LOG_PAYLOAD_CHARS:
        if isinstance(text, bytes):
            text = text.decode('utf-8', errors='replace')
        extra["payload"] = text[:ContractConfig.LOG_PAYLOAD_CHARS]
    logger.log(
        ContractConfig.LOG_LEVEL,
        f"Schema validation failed for {stage} {endpoint}: {violation.message}",
        extra=extra,
    )


# =============================================================================
# REGISTRY
# =============================================================================

# Global registry instance
APIS: Dict[str, API] = {}


def register_api(api: API) -> API:
    """
    Register an endpoint so collaborators can look it up by path.

    Re-registering a path replaces the previous entry (tests, hot-reload).

    Returns:
        The registered API, so definitions can be written as assignments
    """
    if api.path in APIS:
        logger.debug(f"Replacing API registered for '{api.path}'")
    APIS[api.path] = api
    return api


def get_api(path: str) -> Optional[API]:
    """Get the API registered for `path`, None if there is none."""
    return APIS.get(path)


def list_apis() -> List[str]:
    """Get list of registered paths."""
    return list(APIS.keys())


def clear_apis() -> None:
    APIS.clear()
