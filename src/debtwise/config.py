"""Configuration objects and environment helpers."""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc
    if parsed <= 0:
        raise ValueError(f"{name} must be positive, got {parsed}")
    return parsed


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "debtwise"
    LOG_FILENAME = "debtwise.log"
    DEFAULT_MONTH_CAP = 600

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("DEBTWISE_DEV_MODE", default=True)
        self.LOG_LEVEL = os.getenv("DEBTWISE_LOG_LEVEL", "INFO").strip().upper()
        self.MONTH_CAP = _env_positive_int("DEBTWISE_MONTH_CAP", self.DEFAULT_MONTH_CAP)

    def _resolve_data_dir(self) -> Path:
        """Return the directory that holds logs and other runtime files."""

        data_root = os.getenv("DEBTWISE_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def log_dir(self) -> Path:
        return Path(self.DATA_DIR) / "logs"

    def simulation_options(self) -> dict[str, int]:
        """Keyword arguments forwarded to the payoff simulators."""

        return {"month_cap": self.MONTH_CAP}


class DevConfig(BaseConfig):
    """Development configuration with verbose console logging."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration used by the test-suite."""

    __test__ = False  # keep pytest from collecting this class

    DEBUG = False
    TESTING = True
