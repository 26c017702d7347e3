"""Tests for the SQLModel data models."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError

from debtwise.models import Debt, DebtStatus, Milestone, MilestoneType, Payment, PaymentInput, PaymentUpdate


class TestDebtModel:
    """Debt field normalisation and constraints."""

    def test_money_fields_are_rounded_to_cents(self):
        debt = Debt(balance=100.456, minimum_payment="25.005")
        assert debt.balance == Decimal("100.46")
        assert debt.minimum_payment == Decimal("25.01")

    def test_interest_rate_keeps_its_precision(self):
        assert Debt(balance=10, interest_rate=18.999).interest_rate == Decimal("18.999")

    def test_original_balance_defaults_to_balance(self):
        debt = Debt(balance=2500)
        assert debt.original_balance == Decimal("2500.00")

    def test_explicit_original_balance_is_kept(self):
        assert Debt(balance=100, original_balance=400).original_balance == Decimal("400.00")

    def test_defaults(self):
        debt = Debt(balance=10)
        assert debt.status == DebtStatus.ACTIVE
        assert debt.total_interest_paid == 0
        assert debt.total_payments_made == 0
        assert debt.id

    @pytest.mark.parametrize(
        "field, value",
        [("balance", -1), ("interest_rate", 100.01), ("interest_rate", -0.5), ("minimum_payment", -5)],
    )
    def test_rejects_out_of_range_values(self, field, value):
        with pytest.raises(ValidationError):
            Debt(**{"balance": 100, field: value})

    def test_is_active(self):
        assert Debt(balance=10).is_active
        assert not Debt(balance=0).is_active
        assert not Debt(balance=10, status="archived").is_active


class TestPaymentModels:
    """Payment input validation."""

    def test_amount_must_be_positive(self):
        with pytest.raises(ValidationError):
            PaymentInput(amount=0)

    def test_input_defaults(self):
        payment = PaymentInput(amount="19.999")
        assert payment.amount == Decimal("20.00")
        assert payment.payment_type == "minimum"
        assert payment.payment_method == "manual"
        assert payment.payment_date.tzinfo is not None

    def test_update_tracks_only_set_fields(self):
        update = PaymentUpdate(notes="late fee waived")
        assert update.model_dump(exclude_unset=True) == {"notes": "late fee waived"}

    def test_payment_balance_after_is_nullable(self):
        payment = Payment(id="p", debt_id="d", amount=5, payment_date="2025-01-01T00:00:00Z")
        assert payment.balance_after_payment is None


def test_milestone_type_values():
    assert MilestoneType.QUARTER_PAID.value == "25_percent_paid"
    milestone = Milestone(debt_id="d", milestone_type="paid_off", milestone_value="0")
    assert milestone.milestone_type == MilestoneType.PAID_OFF
    assert milestone.id is None
