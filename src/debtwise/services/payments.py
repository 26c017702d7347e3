"""Payment breakdown and bookkeeping.

Interest is a day-prorated share of one month's interest
(``balance * rate / 1200 * days / 30``), not true daily compounding. The
approximation is deliberate and keeps results reproducible to the cent.

None of these helpers mutate their arguments; updated debts and payments are
returned as fresh copies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol, Union
from uuid import uuid4

from ..models import Debt, Payment, PaymentInput, PaymentUpdate
from . import money

logger = logging.getLogger(__name__)

_SECONDS_PER_DAY = Decimal(86400)
_DAYS_PER_MONTH = Decimal(30)


class SupportsInterest(Protocol):
    balance: Decimal
    interest_rate: Decimal


class SupportsPaymentAmount(Protocol):
    amount: Decimal
    payment_date: datetime


@dataclass(frozen=True, slots=True)
class PaymentBreakdown:
    """Split of a payment into interest and principal."""

    interest_portion: Decimal
    principal_portion: Decimal


@dataclass(frozen=True, slots=True)
class AppliedPayment:
    new_balance: Decimal
    breakdown: PaymentBreakdown


@dataclass(frozen=True, slots=True)
class RecordedPayment:
    """Result of recording or editing a payment."""

    updated_debt: Debt
    payment: Payment


def _elapsed_days(payment_date: datetime, last_payment_date: datetime) -> Decimal:
    seconds = (payment_date - last_payment_date).total_seconds()
    return max(Decimal(0), money.to_decimal(seconds) / _SECONDS_PER_DAY)


def calculate_payment_breakdown(
    debt: SupportsInterest,
    amount: money.Number,
    *,
    payment_date: Optional[datetime] = None,
    last_payment_date: Optional[datetime] = None,
) -> PaymentBreakdown:
    """Return the interest and principal portions of *amount*.

    Both dates default to "now", i.e. zero elapsed days and therefore no
    interest. Interest is capped at the payment itself so the principal
    portion is never negative, and the two portions always sum to *amount*.
    """

    payment_date = payment_date or datetime.now(timezone.utc)
    last_payment_date = last_payment_date or payment_date
    value = money.to_decimal(amount)

    days = _elapsed_days(payment_date, last_payment_date)
    monthly_rate = money.to_decimal(debt.interest_rate) / Decimal(1200)
    accrued = money.to_money(money.to_decimal(debt.balance) * monthly_rate * days / _DAYS_PER_MONTH)

    interest = min(accrued, value)
    principal = max(Decimal(0), value - interest)
    return PaymentBreakdown(interest_portion=interest, principal_portion=principal)


def apply_payment(
    debt: Debt,
    payment: SupportsPaymentAmount,
    *,
    last_payment_date: Optional[datetime] = None,
) -> AppliedPayment:
    """Compute the balance *debt* would have after *payment*.

    Only the principal portion reduces the balance; the balance is clamped at
    zero.
    """

    breakdown = calculate_payment_breakdown(
        debt,
        payment.amount,
        payment_date=payment.payment_date,
        last_payment_date=last_payment_date,
    )
    new_balance = money.max_money(
        money.ZERO, money.subtract(debt.balance, breakdown.principal_portion)
    )
    return AppliedPayment(new_balance=new_balance, breakdown=breakdown)


def record_payment(
    debt: Debt,
    payment_input: PaymentInput,
    *,
    last_payment_date: Optional[datetime] = None,
) -> RecordedPayment:
    """Apply a new payment and return the updated debt plus the payment record."""

    applied = apply_payment(debt, payment_input, last_payment_date=last_payment_date)
    breakdown = applied.breakdown

    updated_debt = debt.model_copy(
        update={
            "balance": applied.new_balance,
            "total_interest_paid": money.add(debt.total_interest_paid, breakdown.interest_portion),
            "total_payments_made": money.add(debt.total_payments_made, payment_input.amount),
        }
    )
    payment = Payment(
        id=f"temp-{uuid4().hex}",
        debt_id=debt.id,
        amount=payment_input.amount,
        payment_date=payment_input.payment_date,
        payment_type=payment_input.payment_type,
        interest_portion=breakdown.interest_portion,
        principal_portion=breakdown.principal_portion,
        balance_after_payment=applied.new_balance,
        payment_method=payment_input.payment_method,
        notes=payment_input.notes,
    )
    logger.info(
        "Recorded payment",
        extra={
            "debt_id": debt.id,
            "amount": str(payment.amount),
            "balance_after": str(applied.new_balance),
        },
    )
    return RecordedPayment(updated_debt=updated_debt, payment=payment)


def edit_payment(
    debt: Debt,
    existing: Payment,
    updates: Union[PaymentUpdate, Mapping[str, Any]],
) -> RecordedPayment:
    """Merge *updates* into *existing* and recompute its breakdown.

    The breakdown is recomputed against the debt as it stands now, not as it
    stood before the original payment, so successive edits do not commute.
    Callers wanting a clean redo should ``reverse_payment`` first.
    """

    if not isinstance(updates, PaymentUpdate):
        updates = PaymentUpdate.model_validate(dict(updates))
    changes = updates.model_dump(exclude_unset=True)

    merged = existing.model_copy(update=changes)
    applied = apply_payment(
        debt,
        merged,
        last_payment_date=changes.get("payment_date") or existing.payment_date,
    )

    updated_debt = debt.model_copy(update={"balance": applied.new_balance})
    payment = merged.model_copy(
        update={
            "balance_after_payment": applied.new_balance,
            "interest_portion": applied.breakdown.interest_portion,
            "principal_portion": applied.breakdown.principal_portion,
        }
    )
    logger.info(
        "Edited payment",
        extra={"debt_id": debt.id, "payment_id": existing.id, "fields": sorted(changes)},
    )
    return RecordedPayment(updated_debt=updated_debt, payment=payment)


def reverse_payment(debt: Debt, payment: Payment) -> Debt:
    """Undo *payment*'s effect on the balance and running totals.

    The balance goes back up by the recorded principal portion. When the
    original payment overpaid and ``apply_payment`` clamped the balance at
    zero, that principal exceeds what was owed, so the restored balance ends
    up higher than it was before the payment.
    """

    logger.info("Reversed payment", extra={"debt_id": debt.id, "payment_id": payment.id})
    return debt.model_copy(
        update={
            "balance": money.add(debt.balance, payment.principal_portion),
            "total_interest_paid": money.subtract(debt.total_interest_paid, payment.interest_portion),
            "total_payments_made": money.subtract(debt.total_payments_made, payment.amount),
        }
    )
