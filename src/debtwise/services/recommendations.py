"""Flatten a strategy's payment recommendations into (debt, amount) pairs."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ..models import Debt
from . import money
from .debts import calculate_debt_avalanche, calculate_debt_snowball

STRATEGIES = {
    "avalanche": calculate_debt_avalanche,
    "snowball": calculate_debt_snowball,
}


@dataclass(frozen=True, slots=True)
class Recommendation:
    debt_id: str
    amount: Decimal


def generate_recommendations(
    debts: Iterable[Debt], monthly_budget: money.Number, strategy: str
) -> list[Recommendation]:
    """Return next-cycle payment amounts per debt for *strategy*."""

    try:
        simulate = STRATEGIES[strategy]
    except KeyError:
        raise ValueError("Invalid debt payoff strategy.") from None

    result = simulate(debts, monthly_budget)
    return [
        Recommendation(debt_id=rec.debt_id, amount=rec.recommended_payment)
        for rec in result.payment_recommendations
    ]
