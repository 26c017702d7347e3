"""Strategy comparison and portfolio metrics built on the payoff simulators."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from ..models import Debt
from . import money
from .debts import (
    MAX_SIMULATION_MONTHS,
    DebtElimination,
    add_months,
    amortize_minimum_only,
    calculate_debt_avalanche,
    calculate_debt_snowball,
    total_minimum_payments,
)

# Eliminations inside this window count toward the snowball's motivational score.
MOTIVATION_WINDOW_MONTHS = 12


@dataclass(frozen=True, slots=True)
class MinimumPaymentTimeline:
    total_months: int
    total_interest: Decimal
    debt_free_date: date


@dataclass(frozen=True, slots=True)
class StrategySummary:
    total_months_to_debt_free: int
    total_interest_paid: Decimal
    debt_free_date: date


@dataclass(frozen=True, slots=True)
class ComparisonMetrics:
    interest_savings_with_avalanche: Decimal
    time_savings_with_avalanche: int
    motivational_benefit_of_snowball: int


@dataclass(frozen=True, slots=True)
class StrategyComparison:
    avalanche: StrategySummary
    snowball: StrategySummary
    debts_eliminated_by_month: list[DebtElimination]
    comparison: ComparisonMetrics


@dataclass(frozen=True, slots=True)
class BudgetImpact:
    months_saved: int
    interest_saved: Decimal
    percentage_improvement: float


def calculate_total_minimum_payments(debts: Iterable[Debt]) -> Decimal:
    return total_minimum_payments(debts)


def calculate_extra_payment(debts: Iterable[Debt], monthly_budget: money.Number) -> Decimal:
    """Return the budget left after every minimum payment (never negative)."""

    surplus = money.subtract(monthly_budget, total_minimum_payments(debts))
    return money.max_money(money.ZERO, surplus)


def calculate_weighted_average_interest_rate(debts: Iterable[Debt]) -> Decimal:
    """Balance-weighted average annual rate, in percent."""

    debts = list(debts)
    total_balance = money.sum_money(d.balance for d in debts)
    if total_balance == 0:
        return money.ZERO
    weighted = money.sum_money(money.multiply(d.balance, d.interest_rate) for d in debts)
    return money.divide(weighted, total_balance)


def calculate_debt_to_income_ratio(debts: Iterable[Debt], monthly_income: money.Number) -> Decimal:
    """Total outstanding balance divided by annual income."""

    annual_income = money.multiply(monthly_income, 12)
    if annual_income <= 0:
        raise ValueError("Monthly income must be positive")
    total_debt = money.sum_money(d.balance for d in debts)
    return money.divide(total_debt, annual_income)


def estimate_minimum_payment_timeline(
    debts: Iterable[Debt],
    *,
    start: Optional[date] = None,
    month_cap: int = MAX_SIMULATION_MONTHS,
) -> MinimumPaymentTimeline:
    """Baseline where every debt is paid down alone with only its own minimum.

    No budget is shared between debts, so the horizon is the slowest single
    debt and the interest is the sum over all debts. This answers "what if
    nobody coordinated extra payments"; it is not a budget-constrained plan.
    """

    start = start or date.today()
    total_months = 0
    total_interest = money.ZERO
    for debt in debts:
        months, interest = amortize_minimum_only(debt, month_cap=month_cap)
        total_months = max(total_months, months)
        total_interest = money.add(total_interest, interest)

    return MinimumPaymentTimeline(
        total_months=total_months,
        total_interest=total_interest,
        debt_free_date=add_months(start, total_months),
    )


def compare_strategies(
    debts: Iterable[Debt],
    monthly_budget: money.Number,
    *,
    start: Optional[date] = None,
    month_cap: int = MAX_SIMULATION_MONTHS,
) -> StrategyComparison:
    """Run avalanche and snowball side by side.

    ``interest_savings_with_avalanche`` is the snowball's total interest minus
    the avalanche's interest saved against the minimum-only baseline; the two
    simulators report their headline figures on different bases.
    """

    debts = list(debts)
    avalanche = calculate_debt_avalanche(debts, monthly_budget, start=start, month_cap=month_cap)
    snowball = calculate_debt_snowball(debts, monthly_budget, start=start, month_cap=month_cap)

    metrics = ComparisonMetrics(
        interest_savings_with_avalanche=money.subtract(
            snowball.total_interest_paid, avalanche.total_interest_saved
        ),
        time_savings_with_avalanche=(
            snowball.total_months_to_debt_free - avalanche.total_months_to_debt_free
        ),
        motivational_benefit_of_snowball=sum(
            1
            for elimination in snowball.debts_eliminated_by_month
            if elimination.month <= MOTIVATION_WINDOW_MONTHS
        ),
    )
    return StrategyComparison(
        avalanche=StrategySummary(
            total_months_to_debt_free=avalanche.total_months_to_debt_free,
            total_interest_paid=avalanche.total_interest_paid,
            debt_free_date=avalanche.debt_free_date,
        ),
        snowball=StrategySummary(
            total_months_to_debt_free=snowball.total_months_to_debt_free,
            total_interest_paid=snowball.total_interest_paid,
            debt_free_date=snowball.debt_free_date,
        ),
        debts_eliminated_by_month=snowball.debts_eliminated_by_month,
        comparison=metrics,
    )


def calculate_budget_impact(
    debts: Iterable[Debt],
    current_budget: money.Number,
    increased_budget: money.Number,
    *,
    start: Optional[date] = None,
    month_cap: int = MAX_SIMULATION_MONTHS,
) -> BudgetImpact:
    """Months and interest saved by raising the avalanche budget."""

    debts = list(debts)
    current = calculate_debt_avalanche(debts, current_budget, start=start, month_cap=month_cap)
    increased = calculate_debt_avalanche(debts, increased_budget, start=start, month_cap=month_cap)

    months_saved = current.total_months_to_debt_free - increased.total_months_to_debt_free
    interest_saved = money.subtract(current.total_interest_paid, increased.total_interest_paid)
    if current.total_months_to_debt_free:
        percentage = months_saved / current.total_months_to_debt_free * 100
    else:
        percentage = 0.0
    return BudgetImpact(
        months_saved=months_saved,
        interest_saved=interest_saved,
        percentage_improvement=percentage,
    )


def format_time_to_debt_free(months: int) -> str:
    """Render a month count as "2 years and 3 months" style text."""

    if months <= 0:
        return "Already debt-free"
    if months < 12:
        return "1 month" if months == 1 else f"{months} months"

    years, remaining = divmod(months, 12)
    year_text = "1 year" if years == 1 else f"{years} years"
    if remaining == 0:
        return year_text
    month_text = "1 month" if remaining == 1 else f"{remaining} months"
    return f"{year_text} and {month_text}"
