"""Tests for progress tracking and milestone detection."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from debtwise.models import DebtStatus, Milestone, MilestoneType, PaymentInput
from debtwise.services.payments import record_payment
from debtwise.services.progress import (
    build_progress_report,
    calculate_progress,
    detect_milestones,
)

NOW = datetime(2025, 7, 10, 9, 30, tzinfo=timezone.utc)


class TestCalculateProgress:
    """Per-debt progress figures."""

    def test_percentage_and_remaining_balance(self, debt_factory, payment_factory):
        debt = debt_factory(balance=750, original_balance=1000, minimum_payment=100)
        progress = calculate_progress(debt, [payment_factory(amount=250)], now=NOW)

        assert progress.percentage_paid == 25.0
        assert progress.remaining_balance == Decimal("750.00")
        assert progress.months_remaining == 8
        assert progress.projected_payoff_date == date(2026, 3, 10)

    def test_zero_original_balance_reports_zero_percent(self, debt_factory):
        debt = debt_factory(balance=0, original_balance=0)
        assert calculate_progress(debt, [], now=NOW).percentage_paid == 0.0

    def test_zero_minimum_payment_reports_zero_months(self, debt_factory):
        debt = debt_factory(balance=500, minimum_payment=0)
        assert calculate_progress(debt, [], now=NOW).months_remaining == 0

    def test_total_interest_projected_mirrors_interest_paid(self, debt_factory):
        debt = debt_factory(total_interest_paid="42.10")
        assert calculate_progress(debt, [], now=NOW).total_interest_projected == Decimal("42.10")

    def test_velocity_without_payments(self, debt_factory):
        assert calculate_progress(debt_factory(), [], now=NOW).payment_velocity == 0

    def test_velocity_with_single_payment(self, debt_factory, payment_factory):
        progress = calculate_progress(debt_factory(), [payment_factory()], now=NOW)
        assert progress.payment_velocity == 1.0

    def test_velocity_spans_from_earliest_payment(self, debt_factory, payment_factory):
        payments = [
            payment_factory(payment_date=datetime(2025, 3, 10, tzinfo=timezone.utc)),
            payment_factory(payment_date=datetime(2025, 1, 10, tzinfo=timezone.utc)),
            payment_factory(payment_date=datetime(2025, 5, 10, tzinfo=timezone.utc)),
        ]
        progress = calculate_progress(debt_factory(), payments, now=NOW)
        assert progress.payment_velocity == 0.5  # 3 payments over 6 months

    def test_velocity_uses_at_least_one_month(self, debt_factory, payment_factory):
        payments = [
            payment_factory(payment_date=NOW - timedelta(days=3)),
            payment_factory(payment_date=NOW - timedelta(days=1)),
        ]
        assert calculate_progress(debt_factory(), payments, now=NOW).payment_velocity == 2.0


class TestDetectMilestones:
    """Threshold detection on a hypothetical post-payment balance."""

    def test_reports_every_threshold_reached(self, debt_factory, payment_factory):
        debt = debt_factory(balance=750, original_balance=1000)
        milestones = detect_milestones(debt, payment_factory(amount=250), now=NOW)

        types = [m.milestone_type for m in milestones]
        assert types == [MilestoneType.QUARTER_PAID, MilestoneType.HALF_PAID]
        assert all(m.milestone_value == Decimal("500.00") for m in milestones)
        assert all(m.achieved_date == NOW for m in milestones)
        assert milestones[1].description == "50% of debt paid off"

    def test_no_threshold_reached(self, debt_factory, payment_factory):
        debt = debt_factory(balance=1000, original_balance=1000)
        assert detect_milestones(debt, payment_factory(amount=100), now=NOW) == []

    def test_overpayment_hits_paid_off(self, debt_factory, payment_factory):
        debt = debt_factory(balance=200, original_balance=1000)
        milestones = detect_milestones(debt, payment_factory(amount=500), now=NOW)

        assert milestones[-1].milestone_type == MilestoneType.PAID_OFF
        assert milestones[-1].milestone_value == 0
        assert len(milestones) == 4

    def test_uses_full_amount_not_principal(self, debt_factory):
        # The recorder applies 91.50 of principal; detection subtracts the full 100.
        debt = debt_factory(balance=850, original_balance=1000, interest_rate=12)
        paid_on = datetime(2025, 7, 31, tzinfo=timezone.utc)
        recorded = record_payment(
            debt,
            PaymentInput(amount=100, payment_date=paid_on),
            last_payment_date=paid_on - timedelta(days=30),
        )

        milestones = detect_milestones(debt, recorded.payment, now=NOW)

        assert recorded.updated_debt.balance > Decimal("750.00")
        assert [m.milestone_type for m in milestones] == [MilestoneType.QUARTER_PAID]


class TestProgressReport:
    """Portfolio roll-up."""

    def test_rolls_up_portfolio(self, debt_factory):
        debts = [
            debt_factory(balance=500, original_balance=1000, minimum_payment=100, total_interest_paid=30),
            debt_factory(balance=0, original_balance=1000, status=DebtStatus.PAID_OFF, total_interest_paid=20),
        ]
        milestones = [
            Milestone(
                debt_id="debt-1",
                milestone_type=MilestoneType.QUARTER_PAID,
                achieved_date=NOW - timedelta(days=days),
            )
            for days in range(7)
        ]

        report = build_progress_report(debts, milestones, now=NOW)

        assert report.total_debts == 2
        assert report.active_debts == 1
        assert report.paid_off_debts == 1
        assert report.total_balance == Decimal("500.00")
        assert report.total_original_balance == Decimal("2000.00")
        assert report.overall_progress == 75.0
        assert report.projected_debt_free_date == date(2025, 12, 10)
        assert report.total_interest_paid == Decimal("50.00")
        assert len(report.recent_milestones) == 5
        assert report.recent_milestones[0].achieved_date == NOW

    def test_empty_portfolio(self):
        report = build_progress_report([], now=NOW)
        assert report.total_debts == 0
        assert report.overall_progress == 0.0
        assert report.projected_debt_free_date == NOW.date()
