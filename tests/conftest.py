"""Pytest configuration and shared fixtures for debtwise tests.

Provides debt/payment factories, fixed dates so projections are
deterministic, and an in-memory ledger store standing in for persistence.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Optional

import pytest

from debtwise.models import Debt, Milestone, Payment

START = date(2025, 1, 15)
NOW = datetime(2025, 7, 31, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Factories
# =============================================================================


@pytest.fixture
def debt_factory():
    """Build debts with sensible defaults; override any field by keyword."""

    counter = {"n": 0}

    def _make(**overrides) -> Debt:
        counter["n"] += 1
        values = {
            "id": f"debt-{counter['n']}",
            "name": f"Debt {counter['n']}",
            "balance": 1000,
            "interest_rate": 12,
            "minimum_payment": 50,
        }
        values.update(overrides)
        return Debt(**values)

    return _make


@pytest.fixture
def payment_factory():
    """Build stored payments for progress and ledger tests."""

    counter = {"n": 0}

    def _make(**overrides) -> Payment:
        counter["n"] += 1
        values = {
            "id": f"payment-{counter['n']}",
            "debt_id": "debt-1",
            "amount": 100,
            "payment_date": NOW,
            "principal_portion": overrides.get("amount", 100),
        }
        values.update(overrides)
        return Payment(**values)

    return _make


# =============================================================================
# Ledger store
# =============================================================================


class InMemoryLedgerStore:
    """Dictionary-backed implementation of the LedgerStore protocol."""

    def __init__(self) -> None:
        self.debts: dict[str, Debt] = {}
        self.payments: dict[str, Payment] = {}
        self.milestones: list[Milestone] = []
        self._next_id = 0

    def _allocate(self, prefix: str) -> str:
        self._next_id += 1
        return f"{prefix}-{self._next_id}"

    def get_debt(self, debt_id: str) -> Optional[Debt]:
        return self.debts.get(debt_id)

    def save_debt(self, debt: Debt) -> Debt:
        self.debts[debt.id] = debt
        return debt

    def get_payment(self, payment_id: str) -> Optional[Payment]:
        return self.payments.get(payment_id)

    def list_payments(self, debt_id: str) -> list[Payment]:
        rows = [p for p in self.payments.values() if p.debt_id == debt_id]
        return sorted(rows, key=lambda p: p.payment_date)

    def save_payment(self, payment: Payment) -> Payment:
        if payment.id.startswith("temp-"):
            payment = payment.model_copy(update={"id": self._allocate("pay")})
        self.payments[payment.id] = payment
        return payment

    def delete_payment(self, payment_id: str) -> None:
        self.payments.pop(payment_id, None)

    def list_milestones(self, debt_id: str) -> list[Milestone]:
        return [m for m in self.milestones if m.debt_id == debt_id]

    def add_milestones(self, milestones: list[Milestone]) -> list[Milestone]:
        stored = [m.model_copy(update={"id": self._allocate("ms")}) for m in milestones]
        self.milestones.extend(stored)
        return stored


@pytest.fixture
def ledger_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()
