"""
Failure taxonomy for contract validation.

Every failure raised by the combinators, the schema engine or the revive
boundary is a ContractViolation. Collaborators (server glue, HTTP clients)
can catch the base class and use to_dict() for an error body.

    ContractViolation
    ├── ParseError            raw text is not well-formed JSON
    └── SchemaError           value does not match the schema
        ├── TypeMismatch
        ├── ConstraintViolation
        ├── ShapeMismatch
        ├── ExtraneousField
        └── UnionExhausted
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional


@dataclass(eq=False)
class ContractViolation(Exception):
    """Raised when a payload violates its contract."""
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    # Set by API.revive_* so the collaborator knows which endpoint failed
    endpoint: Optional[str] = None
    stage: Optional[str] = None     # "request" | "response"

    code: ClassVar[str] = "contract_violation"

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self):
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        result = {
            "error": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.endpoint is not None:
            result["endpoint"] = self.endpoint
        if self.stage is not None:
            result["stage"] = self.stage
        return result


class ParseError(ContractViolation):
    """Raw text could not be parsed as JSON."""
    code = "parse_error"


@dataclass(eq=False)
class SchemaError(ContractViolation):
    """A value failed validation at a field path."""
    path: str = ""
    reason: str = ""

    code: ClassVar[str] = "schema_error"

    @classmethod
    def at(cls, path: str, reason: str, **details) -> "SchemaError":
        """Build the error for `path`, e.g. "Field 'user.age' must be a number"."""
        return cls(
            message=f"{describe_path(path)} {reason}",
            details=details,
            path=path,
            reason=reason,
        )

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["path"] = self.path
        return result


class TypeMismatch(SchemaError):
    """The runtime type of the value is not the one the validator expects."""
    code = "type_mismatch"


class ConstraintViolation(SchemaError):
    """Right type, but a declared constraint does not hold."""
    code = "constraint_violation"


class ShapeMismatch(SchemaError):
    """Expected an object or an array and got something else."""
    code = "shape_mismatch"


@dataclass(eq=False)
class ExtraneousField(SchemaError):
    """The input mapping carries a key the object schema does not declare."""
    field_name: str = ""

    code: ClassVar[str] = "extraneous_field"

    @classmethod
    def named(cls, path: str, field_name: str, all_fields=None) -> "ExtraneousField":
        field_path = key_concat(path, field_name)
        return cls(
            message=f"Extraneous field '{field_path}'",
            details={"fields": list(all_fields or [field_name])},
            path=field_path,
            reason="is not declared in the schema",
            field_name=field_name,
        )


@dataclass(eq=False)
class UnionExhausted(SchemaError):
    """Both alternatives of an or_() failed; reports the second failure."""
    first_failure: Optional[SchemaError] = None
    last_failure: Optional[SchemaError] = None

    code: ClassVar[str] = "union_exhausted"

    @classmethod
    def from_failures(cls, first: SchemaError, last: SchemaError) -> "UnionExhausted":
        return cls(
            message=last.message,
            details={"alternative": last.code, **last.details},
            path=last.path,
            reason=last.reason,
            first_failure=first,
            last_failure=last,
        )


def key_concat(path: str, name: str) -> str:
    """Join a field name onto a dotted path; the root path is ''."""
    if not path:
        return name
    return f"{path}.{name}"


def describe_path(path: str) -> str:
    if not path:
        return "Value"
    return f"Field '{path}'"
