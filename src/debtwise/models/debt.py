"""Debt entity consumed by the simulators, recorder and progress tracker."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import field_validator, model_validator
from sqlmodel import Field, SQLModel

from ..services.money import ZERO
from ._fields import cents_or_none, decimal_or_none, new_id, utcnow


class DebtStatus(str, Enum):
    ACTIVE = "active"
    PAID_OFF = "paid_off"
    ARCHIVED = "archived"


class DebtType(str, Enum):
    CREDIT_CARD = "credit_card"
    LOAN = "loan"
    MORTGAGE = "mortgage"
    OTHER = "other"


class Debt(SQLModel):
    """A single liability snapshot.

    Money fields are ``Decimal`` values rounded to the cent on construction.
    ``interest_rate`` is an annual percentage (``18.99`` means 18.99%/yr).
    ``original_balance`` defaults to ``balance`` and is the 100% baseline for
    progress reporting. Persistence layers map this onto a table by
    subclassing with ``table=True``.
    """

    id: str = Field(default_factory=new_id, max_length=64)
    name: str = Field(default="", max_length=80)
    debt_type: DebtType = Field(default=DebtType.OTHER)
    balance: Decimal = Field(default=ZERO, ge=0)
    original_balance: Optional[Decimal] = Field(default=None, ge=0)
    interest_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100)
    minimum_payment: Decimal = Field(default=ZERO, ge=0)
    due_date: Optional[date] = Field(default=None)
    status: DebtStatus = Field(default=DebtStatus.ACTIVE)
    paid_off_date: Optional[date] = Field(default=None)
    total_interest_paid: Decimal = Field(default=ZERO)
    total_payments_made: Decimal = Field(default=ZERO)
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator(
        "balance",
        "original_balance",
        "minimum_payment",
        "total_interest_paid",
        "total_payments_made",
        mode="before",
    )
    @classmethod
    def _round_to_cents(cls, value: Any) -> Any:
        return cents_or_none(value)

    @field_validator("interest_rate", mode="before")
    @classmethod
    def _rate_as_decimal(cls, value: Any) -> Any:
        return decimal_or_none(value)

    @model_validator(mode="after")
    def _default_original_balance(self) -> "Debt":
        if self.original_balance is None:
            self.original_balance = self.balance
        return self

    @property
    def is_active(self) -> bool:
        return self.status == DebtStatus.ACTIVE and self.balance > 0
