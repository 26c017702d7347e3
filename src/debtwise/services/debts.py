"""Debt payoff simulators (avalanche and snowball).

Both strategies share one month loop, :func:`simulate_payoff`, and differ only
in the :class:`PayoffStrategy` that ranks debts:

- Avalanche: highest interest rate first.
- Snowball: smallest balance first.

Each simulated month accrues interest on every open debt, pays each its
minimum (never more than it owes), then sends whatever is left of the budget
to the single highest-priority debt that still has a balance. The loop stops
when every balance is zero or after ``month_cap`` months, whichever comes
first.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Callable, Iterable, Optional, Sequence

from ..models import Debt
from . import money

logger = logging.getLogger(__name__)

# Fifty years. Guarantees termination when minimums never outpace interest.
MAX_SIMULATION_MONTHS = 600


class InsufficientBudgetError(ValueError):
    """Raised when the monthly budget cannot cover every minimum payment."""


@dataclass(frozen=True, slots=True)
class PayoffStrategy:
    """Ranking rule for a payoff strategy.

    ``priority`` receives a debt and its current remaining balance and returns
    a sort key; the lowest key is paid first. Ties fall back to input order.
    """

    name: str
    priority: Callable[[Debt, Decimal], Any]


AVALANCHE = PayoffStrategy(name="avalanche", priority=lambda debt, balance: -debt.interest_rate)
SNOWBALL = PayoffStrategy(name="snowball", priority=lambda debt, balance: balance)


@dataclass(frozen=True, slots=True)
class PaymentRecommendation:
    """What to pay on one debt in the next payment cycle."""

    debt_id: str
    debt_name: str
    recommended_payment: Decimal
    is_minimum_payment: bool
    priority_rank: int


@dataclass(frozen=True, slots=True)
class DebtPayoffProjection:
    debt_id: str
    debt_name: str
    current_balance: Decimal
    months_to_payoff: int
    total_interest_paid: Decimal
    payoff_date: date
    paid_off: bool


@dataclass(frozen=True, slots=True)
class MonthlyPayment:
    debt_id: str
    debt_name: str
    payment: Decimal
    interest: Decimal
    remaining_balance: Decimal


@dataclass(frozen=True, slots=True)
class MonthlyBreakdown:
    month: int
    date: date
    payments: list[MonthlyPayment]
    total_payment: Decimal
    debts_remaining: int


@dataclass(frozen=True, slots=True)
class DebtElimination:
    month: int
    date: date
    debt_id: str
    debt_name: str


@dataclass(frozen=True, slots=True)
class SimulationRun:
    """Strategy-neutral output of :func:`simulate_payoff`."""

    strategy: str
    payment_recommendations: list[PaymentRecommendation]
    projections: list[DebtPayoffProjection]
    monthly_breakdown: list[MonthlyBreakdown]
    eliminations: list[DebtElimination]
    total_months: int
    total_interest_paid: Decimal
    debt_free_date: date
    hit_month_cap: bool


@dataclass(frozen=True, slots=True)
class AvalancheResult:
    payment_recommendations: list[PaymentRecommendation]
    projections: list[DebtPayoffProjection]
    total_months_to_debt_free: int
    total_interest_saved: Decimal
    total_interest_paid: Decimal
    debt_free_date: date
    monthly_breakdown: list[MonthlyBreakdown]
    hit_month_cap: bool = False


@dataclass(frozen=True, slots=True)
class SnowballResult:
    payment_recommendations: list[PaymentRecommendation]
    projections: list[DebtPayoffProjection]
    total_months_to_debt_free: int
    total_interest_paid: Decimal
    debt_free_date: date
    monthly_breakdown: list[MonthlyBreakdown]
    debts_eliminated_by_month: list[DebtElimination] = field(default_factory=list)
    hit_month_cap: bool = False


@dataclass(frozen=True, slots=True)
class _LedgerState:
    """Per-debt running totals threaded through the month fold."""

    balances: tuple[Decimal, ...]
    interest: tuple[Decimal, ...]
    payoff_months: tuple[Optional[int], ...]

    @classmethod
    def opening(cls, debts: Sequence[Debt]) -> "_LedgerState":
        return cls(
            balances=tuple(money.to_money(d.balance) for d in debts),
            interest=tuple(money.ZERO for _ in debts),
            payoff_months=tuple(0 if d.balance <= 0 else None for d in debts),
        )

    @property
    def settled(self) -> bool:
        return all(balance <= 0 for balance in self.balances)


def add_months(value: date, months: int) -> date:
    """Return *value* shifted by *months*, clamping to the month's last day."""

    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def total_minimum_payments(debts: Iterable[Debt]) -> Decimal:
    return money.sum_money(d.minimum_payment for d in debts)


def rank_debts(debts: Iterable[Debt], strategy: PayoffStrategy) -> list[Debt]:
    """Order *debts* by strategy priority; debts already at zero go last."""

    indexed = list(enumerate(debts))
    indexed.sort(
        key=lambda pair: (pair[1].balance <= 0, strategy.priority(pair[1], pair[1].balance), pair[0])
    )
    return [debt for _, debt in indexed]


def _recommend(ordered: Sequence[Debt], extra_payment: Decimal) -> list[PaymentRecommendation]:
    return [
        PaymentRecommendation(
            debt_id=debt.id,
            debt_name=debt.name,
            recommended_payment=money.add(debt.minimum_payment, extra_payment if rank == 1 else 0),
            is_minimum_payment=rank != 1,
            priority_rank=rank,
        )
        for rank, debt in enumerate(ordered, start=1)
    ]


def _advance_month(
    state: _LedgerState,
    *,
    month: int,
    ordered: Sequence[Debt],
    budget: Decimal,
    strategy: PayoffStrategy,
) -> tuple[_LedgerState, list[MonthlyPayment], list[int]]:
    """Simulate one month and return the next state, its payments and the debts cleared."""

    balances = list(state.balances)
    interest = list(state.interest)
    payoff_months = list(state.payoff_months)
    paid: dict[int, Decimal] = {}
    charged: dict[int, Decimal] = {}
    cleared: list[int] = []
    remaining_budget = budget

    open_debts = [i for i, balance in enumerate(balances) if balance > 0]
    for i in open_debts:
        debt = ordered[i]
        charge = money.calculate_monthly_interest(balances[i], debt.interest_rate)
        owed = money.add(balances[i], charge)
        minimum = money.min_money(debt.minimum_payment, owed)

        interest[i] = money.add(interest[i], charge)
        balances[i] = money.subtract(owed, minimum)
        paid[i] = minimum
        charged[i] = charge
        remaining_budget = money.subtract(remaining_budget, minimum)
        if balances[i] == 0:
            cleared.append(i)

    candidates = [i for i in open_debts if balances[i] > 0]
    if remaining_budget > 0 and candidates:
        target = min(candidates, key=lambda i: (strategy.priority(ordered[i], balances[i]), i))
        extra = money.min_money(remaining_budget, balances[target])
        balances[target] = money.subtract(balances[target], extra)
        paid[target] = money.add(paid[target], extra)
        if balances[target] == 0:
            cleared.append(target)

    for i in cleared:
        payoff_months[i] = month

    payments = [
        MonthlyPayment(
            debt_id=ordered[i].id,
            debt_name=ordered[i].name,
            payment=paid[i],
            interest=charged[i],
            remaining_balance=balances[i],
        )
        for i in open_debts
    ]
    next_state = _LedgerState(
        balances=tuple(balances),
        interest=tuple(interest),
        payoff_months=tuple(payoff_months),
    )
    return next_state, payments, cleared


def simulate_payoff(
    debts: Iterable[Debt],
    monthly_budget: money.Number,
    strategy: PayoffStrategy,
    *,
    start: Optional[date] = None,
    month_cap: int = MAX_SIMULATION_MONTHS,
) -> SimulationRun:
    """Project month-by-month payoff of *debts* under *strategy*.

    Raises :class:`InsufficientBudgetError` when the budget is below the sum
    of minimum payments. An empty debt list yields a zero-valued run. When the
    month cap is reached the partial projection is returned with
    ``hit_month_cap`` set.
    """

    start = start or date.today()
    debts = list(debts)
    budget = money.to_money(monthly_budget)

    if not debts:
        return SimulationRun(
            strategy=strategy.name,
            payment_recommendations=[],
            projections=[],
            monthly_breakdown=[],
            eliminations=[],
            total_months=0,
            total_interest_paid=money.ZERO,
            debt_free_date=start,
            hit_month_cap=False,
        )

    minimums = total_minimum_payments(debts)
    if budget < minimums:
        raise InsufficientBudgetError(
            f"Monthly budget ({money.format_currency(budget)}) is less than "
            f"total minimum payments ({money.format_currency(minimums)})"
        )

    ordered = rank_debts(debts, strategy)
    recommendations = _recommend(ordered, money.subtract(budget, minimums))

    state = _LedgerState.opening(ordered)
    breakdown: list[MonthlyBreakdown] = []
    eliminations: list[DebtElimination] = []
    month = 0
    while not state.settled and month < month_cap:
        month += 1
        month_date = add_months(start, month)
        state, payments, cleared = _advance_month(
            state, month=month, ordered=ordered, budget=budget, strategy=strategy
        )
        breakdown.append(
            MonthlyBreakdown(
                month=month,
                date=month_date,
                payments=payments,
                total_payment=money.sum_money(p.payment for p in payments),
                debts_remaining=sum(1 for balance in state.balances if balance > 0),
            )
        )
        eliminations.extend(
            DebtElimination(
                month=month,
                date=month_date,
                debt_id=ordered[i].id,
                debt_name=ordered[i].name,
            )
            for i in cleared
        )

    hit_cap = not state.settled
    if hit_cap:
        logger.warning(
            "Payoff simulation stopped at month cap",
            extra={"strategy": strategy.name, "month_cap": month_cap, "debts": len(ordered)},
        )

    projections = []
    for i, debt in enumerate(ordered):
        months = state.payoff_months[i]
        projections.append(
            DebtPayoffProjection(
                debt_id=debt.id,
                debt_name=debt.name,
                current_balance=debt.balance,
                months_to_payoff=month if months is None else months,
                total_interest_paid=state.interest[i],
                payoff_date=add_months(start, month if months is None else months),
                paid_off=months is not None,
            )
        )

    total_interest = money.sum_money(state.interest)
    logger.debug(
        "Simulated %s payoff: %d months, %s interest",
        strategy.name,
        month,
        total_interest,
    )
    return SimulationRun(
        strategy=strategy.name,
        payment_recommendations=recommendations,
        projections=projections,
        monthly_breakdown=breakdown,
        eliminations=eliminations,
        total_months=month,
        total_interest_paid=total_interest,
        debt_free_date=add_months(start, month),
        hit_month_cap=hit_cap,
    )


def amortize_minimum_only(
    debt: Debt, *, month_cap: int = MAX_SIMULATION_MONTHS
) -> tuple[int, Decimal]:
    """Return (months, interest) to retire *debt* paying only its own minimum."""

    balance = money.to_money(debt.balance)
    interest = money.ZERO
    months = 0
    while balance > 0 and months < month_cap:
        charge = money.calculate_monthly_interest(balance, debt.interest_rate)
        owed = money.add(balance, charge)
        payment = money.min_money(debt.minimum_payment, owed)
        interest = money.add(interest, charge)
        balance = money.max_money(money.ZERO, money.subtract(owed, payment))
        months += 1
    return months, interest


def calculate_debt_avalanche(
    debts: Iterable[Debt],
    monthly_budget: money.Number,
    *,
    start: Optional[date] = None,
    month_cap: int = MAX_SIMULATION_MONTHS,
) -> AvalancheResult:
    """Run the avalanche strategy and report interest saved versus minimums only."""

    debts = list(debts)
    run = simulate_payoff(debts, monthly_budget, AVALANCHE, start=start, month_cap=month_cap)
    baseline_interest = money.sum_money(
        amortize_minimum_only(debt, month_cap=month_cap)[1] for debt in debts
    )
    return AvalancheResult(
        payment_recommendations=run.payment_recommendations,
        projections=run.projections,
        total_months_to_debt_free=run.total_months,
        total_interest_saved=money.subtract(baseline_interest, run.total_interest_paid),
        total_interest_paid=run.total_interest_paid,
        debt_free_date=run.debt_free_date,
        monthly_breakdown=run.monthly_breakdown,
        hit_month_cap=run.hit_month_cap,
    )


def calculate_debt_snowball(
    debts: Iterable[Debt],
    monthly_budget: money.Number,
    *,
    start: Optional[date] = None,
    month_cap: int = MAX_SIMULATION_MONTHS,
) -> SnowballResult:
    """Run the snowball strategy and report each debt's elimination month."""

    run = simulate_payoff(debts, monthly_budget, SNOWBALL, start=start, month_cap=month_cap)
    return SnowballResult(
        payment_recommendations=run.payment_recommendations,
        projections=run.projections,
        total_months_to_debt_free=run.total_months,
        total_interest_paid=run.total_interest_paid,
        debt_free_date=run.debt_free_date,
        monthly_breakdown=run.monthly_breakdown,
        debts_eliminated_by_month=run.eliminations,
        hit_month_cap=run.hit_month_cap,
    )
