"""Payment workflows against a persistence collaborator.

The recorder and milestone detector are pure; this module sequences them the
way a caller has to: look up history, record, settle the debt's status, keep
milestones append-only and unique per type, then hand everything to the store.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Mapping, Optional, Protocol, Union

from ..models import Debt, DebtStatus, Milestone, MilestoneType, Payment, PaymentInput, PaymentUpdate
from .payments import PaymentBreakdown, RecordedPayment, edit_payment, record_payment, reverse_payment
from .progress import detect_milestones

logger = logging.getLogger(__name__)


class DebtNotFoundError(LookupError):
    """Raised when the store has no debt with the requested id."""


class PaymentNotFoundError(LookupError):
    """Raised when the store has no payment with the requested id."""


class LedgerStore(Protocol):
    """Persistence operations the payment workflows rely on."""

    def get_debt(self, debt_id: str) -> Optional[Debt]:  # pragma: no cover - interface
        ...

    def save_debt(self, debt: Debt) -> Debt:  # pragma: no cover - interface
        ...

    def get_payment(self, payment_id: str) -> Optional[Payment]:  # pragma: no cover - interface
        ...

    def list_payments(self, debt_id: str) -> list[Payment]:  # pragma: no cover - interface
        ...

    def save_payment(self, payment: Payment) -> Payment:  # pragma: no cover - interface
        ...

    def delete_payment(self, payment_id: str) -> None:  # pragma: no cover - interface
        ...

    def list_milestones(self, debt_id: str) -> list[Milestone]:  # pragma: no cover - interface
        ...

    def add_milestones(self, milestones: list[Milestone]) -> list[Milestone]:  # pragma: no cover - interface
        ...


@dataclass(frozen=True, slots=True)
class PaymentResult:
    payment: Payment
    new_balance: Decimal
    breakdown: PaymentBreakdown
    milestones_triggered: list[Milestone] = field(default_factory=list)


def _require_debt(store: LedgerStore, debt_id: str) -> Debt:
    debt = store.get_debt(debt_id)
    if debt is None:
        raise DebtNotFoundError(f"Debt {debt_id} not found")
    return debt


def _require_payment(store: LedgerStore, payment_id: str) -> Payment:
    payment = store.get_payment(payment_id)
    if payment is None:
        raise PaymentNotFoundError(f"Payment {payment_id} not found")
    return payment


def _settle_status(debt: Debt, on: date) -> Debt:
    """Flip between active and paid_off to match the balance."""

    if debt.balance == 0 and debt.status == DebtStatus.ACTIVE:
        return debt.model_copy(update={"status": DebtStatus.PAID_OFF, "paid_off_date": on})
    if debt.balance > 0 and debt.status == DebtStatus.PAID_OFF:
        return debt.model_copy(update={"status": DebtStatus.ACTIVE, "paid_off_date": None})
    return debt


def created_milestone(debt: Debt, *, now: Optional[datetime] = None) -> Milestone:
    """Milestone logged when a debt is first added."""

    now = now or datetime.now(timezone.utc)
    return Milestone(
        debt_id=debt.id,
        milestone_type=MilestoneType.CREATED,
        achieved_date=now,
        milestone_value=debt.balance,
        description=f"Started tracking {debt.name or 'debt'}",
        created_at=now,
    )


def process_payment(
    *,
    store: LedgerStore,
    debt_id: str,
    payment_input: PaymentInput,
    now: Optional[datetime] = None,
) -> PaymentResult:
    """Record a payment, persist it and log any newly reached milestones."""

    now = now or datetime.now(timezone.utc)
    debt = _require_debt(store, debt_id)
    history = store.list_payments(debt_id)
    last_payment_date = max((p.payment_date for p in history), default=None)

    recorded = record_payment(debt, payment_input, last_payment_date=last_payment_date)
    updated_debt = _settle_status(recorded.updated_debt, payment_input.payment_date.date())

    candidates = detect_milestones(debt, recorded.payment, now=now)
    if not history:
        candidates.insert(
            0,
            Milestone(
                debt_id=debt.id,
                milestone_type=MilestoneType.FIRST_PAYMENT,
                achieved_date=now,
                milestone_value=recorded.payment.balance_after_payment,
                description="First payment made",
                created_at=now,
            ),
        )

    seen = {m.milestone_type for m in store.list_milestones(debt_id)}
    fresh: list[Milestone] = []
    for milestone in candidates:
        if milestone.milestone_type in seen:
            continue
        seen.add(milestone.milestone_type)
        fresh.append(milestone)

    store.save_debt(updated_debt)
    payment = store.save_payment(recorded.payment)
    saved = store.add_milestones(fresh) if fresh else []

    logger.info(
        "Processed payment",
        extra={
            "debt_id": debt_id,
            "payment_id": payment.id,
            "milestones": [m.milestone_type.value for m in saved],
        },
    )
    return PaymentResult(
        payment=payment,
        new_balance=updated_debt.balance,
        breakdown=PaymentBreakdown(
            interest_portion=payment.interest_portion,
            principal_portion=payment.principal_portion,
        ),
        milestones_triggered=saved,
    )


def amend_payment(
    *,
    store: LedgerStore,
    payment_id: str,
    updates: Union[PaymentUpdate, Mapping[str, Any]],
) -> RecordedPayment:
    """Apply *updates* to a stored payment and persist the recomputed debt."""

    existing = _require_payment(store, payment_id)
    debt = _require_debt(store, existing.debt_id)

    edited = edit_payment(debt, existing, updates)
    updated_debt = _settle_status(edited.updated_debt, edited.payment.payment_date.date())

    saved_debt = store.save_debt(updated_debt)
    saved_payment = store.save_payment(edited.payment)
    return RecordedPayment(updated_debt=saved_debt, payment=saved_payment)


def void_payment(*, store: LedgerStore, payment_id: str, today: Optional[date] = None) -> Debt:
    """Reverse and delete a stored payment; returns the restored debt.

    Voiding an overpayment that was clamped at zero restores the full
    principal portion, not the pre-payment balance. See ``reverse_payment``.
    """

    payment = _require_payment(store, payment_id)
    debt = _require_debt(store, payment.debt_id)

    restored = _settle_status(reverse_payment(debt, payment), today or date.today())
    saved = store.save_debt(restored)
    store.delete_payment(payment_id)
    logger.info("Voided payment", extra={"debt_id": debt.id, "payment_id": payment_id})
    return saved
