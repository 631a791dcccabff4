"""
Error taxonomy tests - messages and the dict form collaborators send on.
"""

import pickle

from api_contracts.errors import (
    ConstraintViolation,
    ExtraneousField,
    ParseError,
    ShapeMismatch,
    TypeMismatch,
    UnionExhausted,
    key_concat,
)


class TestMessages:

    def test_field_path_message(self):
        error = TypeMismatch.at("user.age", "must be a number")

        assert str(error) == "Field 'user.age' must be a number"
        assert error.path == "user.age"
        assert error.reason == "must be a number"

    def test_root_path_message(self):
        assert str(ShapeMismatch.at("", "must be an object")) == "Value must be an object"

    def test_extraneous_field_message(self):
        error = ExtraneousField.named("user", "nickname")

        assert str(error) == "Extraneous field 'user.nickname'"
        assert error.field_name == "nickname"
        assert error.details == {"fields": ["nickname"]}

    def test_union_takes_the_second_failure(self):
        first = TypeMismatch.at("v", "must be a string")
        second = ConstraintViolation.at("v", "must be 'x'")
        error = UnionExhausted.from_failures(first, second)

        assert str(error) == str(second)
        assert error.first_failure is first
        assert error.last_failure is second
        assert error.details["alternative"] == "constraint_violation"


class TestToDict:

    def test_schema_error(self):
        assert TypeMismatch.at("a.b", "must be a number").to_dict() == {
            "error": "type_mismatch",
            "message": "Field 'a.b' must be a number",
            "path": "a.b",
        }

    def test_endpoint_context(self):
        error = ParseError(message="Invalid JSON: boom")
        error.endpoint = "/api/x"
        error.stage = "request"

        assert error.to_dict() == {
            "error": "parse_error",
            "message": "Invalid JSON: boom",
            "endpoint": "/api/x",
            "stage": "request",
        }

    def test_errors_are_hashable(self):
        """Loggers and tracebacks keep errors in sets."""
        errors = {TypeMismatch.at("a", "must be a number"), ParseError(message="x")}
        assert len(errors) == 2

    def test_errors_survive_pickling(self):
        """Worker pools and log handlers ship errors across processes."""
        error = TypeMismatch.at("a", "must be a number", received="string")
        error.endpoint = "/api/x"

        restored = pickle.loads(pickle.dumps(error))

        assert type(restored) is TypeMismatch
        assert str(restored) == "Field 'a' must be a number"
        assert restored.path == "a"
        assert restored.to_dict() == error.to_dict()

    def test_union_failure_survives_pickling(self):
        first = TypeMismatch.at("a", "must be a number")
        second = ConstraintViolation.at("a", "must be 'x'")

        restored = pickle.loads(pickle.dumps(UnionExhausted.from_failures(first, second)))

        assert str(restored) == str(second)
        assert restored.last_failure.path == "a"


def test_key_concat():
    assert key_concat("", "a") == "a"
    assert key_concat("a", "b") == "a.b"
    assert key_concat("a.b", "c") == "a.b.c"
