"""Tests for environment-driven configuration."""

from __future__ import annotations

import pytest

from debtwise.config import BaseConfig, DevConfig, TestConfig


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    for name in ("DEBTWISE_DEV_MODE", "DEBTWISE_LOG_LEVEL", "DEBTWISE_MONTH_CAP"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DEBTWISE_DATA_DIR", str(tmp_path / "data"))


def test_defaults(tmp_path):
    config = BaseConfig()
    assert config.DATA_DIR == (tmp_path / "data").resolve()
    assert config.DATA_DIR.exists()
    assert config.DEV_MODE is True
    assert config.LOG_LEVEL == "INFO"
    assert config.MONTH_CAP == 600
    assert config.simulation_options() == {"month_cap": 600}


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("DEBTWISE_DEV_MODE", "off")
    monkeypatch.setenv("DEBTWISE_LOG_LEVEL", "debug")
    monkeypatch.setenv("DEBTWISE_MONTH_CAP", "120")

    config = BaseConfig()

    assert config.DEV_MODE is False
    assert config.LOG_LEVEL == "DEBUG"
    assert config.MONTH_CAP == 120


@pytest.mark.parametrize("value", ["abc", "0", "-12"])
def test_invalid_month_cap_is_rejected(monkeypatch, value):
    monkeypatch.setenv("DEBTWISE_MONTH_CAP", value)
    with pytest.raises(ValueError, match="DEBTWISE_MONTH_CAP"):
        BaseConfig()


def test_environment_classes():
    assert DevConfig.DEBUG is True
    assert TestConfig.TESTING is True
    assert isinstance(TestConfig(), BaseConfig)


def test_month_cap_feeds_simulators(monkeypatch, debt_factory):
    from debtwise.services.debts import calculate_debt_avalanche

    monkeypatch.setenv("DEBTWISE_MONTH_CAP", "12")
    config = BaseConfig()
    debt = debt_factory(balance=1000, interest_rate=24, minimum_payment=10)

    result = calculate_debt_avalanche([debt], 10, **config.simulation_options())

    assert result.total_months_to_debt_free == 12
    assert result.hit_month_cap
