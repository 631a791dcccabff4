"""
Shared fixtures for contract tests.
"""

import pytest

from api_contracts.config import ContractConfig
from api_contracts.registry import APIS
from api_contracts.schemas import Leaf


class RecordingRecurse:
    """
    Stand-in for the schema engine's recursion callback.

    Records every (schema, path, value) it is handed. Leaf schemas are
    invoked with the recorder itself; anything else echoes the value.
    """

    def __init__(self):
        self.calls = []

    def __call__(self, schema, path, value):
        self.calls.append((schema, path, value))
        if isinstance(schema, Leaf):
            return schema(path, value, self)
        return value


@pytest.fixture
def recurse():
    """Stub recursion callback for unit testing combinators in isolation."""
    return RecordingRecurse()


@pytest.fixture
def clean_registry():
    """Empty the API registry for the test, restoring it afterwards."""
    saved = dict(APIS)
    APIS.clear()
    yield APIS
    APIS.clear()
    APIS.update(saved)


@pytest.fixture
def contract_config():
    """Restore ContractConfig class attributes after the test."""
    saved = {
        'LOG_FAILURES': ContractConfig.LOG_FAILURES,
        'LOG_LEVEL': ContractConfig.LOG_LEVEL,
        'LOG_PAYLOAD_CHARS': ContractConfig.LOG_PAYLOAD_CHARS,
    }
    yield ContractConfig
    for name, value in saved.items():
        setattr(ContractConfig, name, value)
