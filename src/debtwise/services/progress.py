"""Progress tracking and milestone detection for individual debts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..models import Debt, DebtStatus, Milestone, MilestoneType, Payment
from . import money
from .debts import add_months

MILESTONE_THRESHOLDS: tuple[tuple[int, MilestoneType], ...] = (
    (25, MilestoneType.QUARTER_PAID),
    (50, MilestoneType.HALF_PAID),
    (75, MilestoneType.THREE_QUARTERS_PAID),
    (100, MilestoneType.PAID_OFF),
)
RECENT_MILESTONE_LIMIT = 5


@dataclass(frozen=True, slots=True)
class DebtProgress:
    percentage_paid: float
    remaining_balance: Decimal
    months_remaining: int
    projected_payoff_date: date
    total_interest_projected: Decimal
    payment_velocity: float  # payments per month


@dataclass(frozen=True, slots=True)
class ProgressReport:
    """Portfolio-wide roll-up of debt progress."""

    total_debts: int
    active_debts: int
    paid_off_debts: int
    total_balance: Decimal
    total_original_balance: Decimal
    overall_progress: float
    projected_debt_free_date: date
    total_interest_paid: Decimal
    recent_milestones: list[Milestone]


def _percent_paid(original: Decimal, balance: Decimal) -> Decimal:
    if original <= 0:
        return Decimal(0)
    return (original - balance) / original * 100


def _whole_months_between(earlier: date, later: date) -> int:
    months = (later.year - earlier.year) * 12 + (later.month - earlier.month)
    if later.day < earlier.day:
        months -= 1
    return max(months, 0)


def _months_remaining(debt: Debt) -> int:
    if debt.minimum_payment <= 0:
        return 0
    return math.ceil(max(debt.balance, money.ZERO) / debt.minimum_payment)


def calculate_progress(
    debt: Debt,
    payments: Sequence[Payment],
    *,
    now: Optional[datetime] = None,
) -> DebtProgress:
    """Summarise how far along *debt* is.

    ``months_remaining`` divides the balance by the minimum payment and
    ignores interest. ``payment_velocity`` is payments per month measured
    from the earliest payment to *now*.
    """

    now = now or datetime.now(timezone.utc)
    original = debt.original_balance if debt.original_balance is not None else debt.balance
    months_remaining = _months_remaining(debt)

    velocity = 0.0
    if len(payments) > 1:
        earliest = min(p.payment_date for p in payments)
        span = max(1, _whole_months_between(earliest.date(), now.date()))
        velocity = len(payments) / span
    elif len(payments) == 1:
        velocity = 1.0

    return DebtProgress(
        percentage_paid=float(_percent_paid(original, debt.balance)),
        remaining_balance=money.max_money(money.ZERO, debt.balance),
        months_remaining=months_remaining,
        projected_payoff_date=add_months(now.date(), months_remaining),
        total_interest_projected=debt.total_interest_paid,
        payment_velocity=velocity,
    )


def detect_milestones(
    debt: Debt,
    new_payment: Payment,
    *,
    now: Optional[datetime] = None,
) -> list[Milestone]:
    """Return a milestone for every threshold reached once *new_payment* lands.

    The post-payment balance is estimated by subtracting the full payment
    amount, not the principal portion the recorder would apply. The function
    is stateless: thresholds passed by earlier payments are reported again,
    so callers must drop types already stored for the debt.
    """

    now = now or datetime.now(timezone.utc)
    original = debt.original_balance if debt.original_balance is not None else debt.balance
    new_balance = money.max_money(money.ZERO, money.subtract(debt.balance, new_payment.amount))
    progress_after = _percent_paid(original, new_balance)

    return [
        Milestone(
            debt_id=debt.id,
            milestone_type=milestone_type,
            achieved_date=now,
            milestone_value=new_balance,
            description=f"{threshold}% of debt paid off",
            created_at=now,
        )
        for threshold, milestone_type in MILESTONE_THRESHOLDS
        if progress_after >= threshold
    ]


def build_progress_report(
    debts: Iterable[Debt],
    milestones: Iterable[Milestone] = (),
    *,
    now: Optional[datetime] = None,
) -> ProgressReport:
    now = now or datetime.now(timezone.utc)
    debts = list(debts)

    total_balance = money.sum_money(d.balance for d in debts)
    total_original = money.sum_money(
        d.original_balance if d.original_balance is not None else d.balance for d in debts
    )
    active = [d for d in debts if d.status == DebtStatus.ACTIVE]
    horizon = max((_months_remaining(d) for d in active), default=0)
    recent = sorted(milestones, key=lambda m: m.achieved_date, reverse=True)

    return ProgressReport(
        total_debts=len(debts),
        active_debts=len(active),
        paid_off_debts=sum(1 for d in debts if d.status == DebtStatus.PAID_OFF),
        total_balance=total_balance,
        total_original_balance=total_original,
        overall_progress=float(_percent_paid(total_original, total_balance)),
        projected_debt_free_date=add_months(now.date(), horizon),
        total_interest_paid=money.sum_money(d.total_interest_paid for d in debts),
        recent_milestones=recent[:RECENT_MILESTONE_LIMIT],
    )
