import logging
import os

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('true', '1', 'yes', 'on')


def _env_level(name: str, default: str) -> int:
    raw = os.getenv(name, default).strip().upper()
    level = logging.getLevelName(raw)
    if not isinstance(level, int):
        raise ValueError(f"{name} must be a logging level name, got {raw!r}")
    return level


def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default).strip()
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    return max(value, 0)


class ContractConfig:
    # Log revive failures at the API boundary
    LOG_FAILURES = _env_bool('CONTRACT_LOG_FAILURES', 'true')
    LOG_LEVEL = _env_level('CONTRACT_LOG_LEVEL', 'ERROR')

    # Characters of the raw payload attached to failure logs (0 = none)
    # Keep at 0 in production: payloads may carry user data
    LOG_PAYLOAD_CHARS = _env_int('CONTRACT_LOG_PAYLOAD_CHARS', '0')

    @classmethod
    def from_env(cls) -> None:
        """Re-read settings from the environment."""
        cls.LOG_FAILURES = _env_bool('CONTRACT_LOG_FAILURES', 'true')
        cls.LOG_LEVEL = _env_level('CONTRACT_LOG_LEVEL', 'ERROR')
        cls.LOG_PAYLOAD_CHARS = _env_int('CONTRACT_LOG_PAYLOAD_CHARS', '0')
