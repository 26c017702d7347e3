"""Debt payoff simulation and payment bookkeeping engine."""

from __future__ import annotations

from .config import BaseConfig, DevConfig, TestConfig
from .logging_config import get_logger, setup_logging

__all__ = ["BaseConfig", "DevConfig", "TestConfig", "get_logger", "setup_logging"]
