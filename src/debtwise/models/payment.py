"""Payment events recorded against a debt."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import ConfigDict, ValidationInfo, field_validator
from sqlmodel import Field, SQLModel

from ..services.money import ZERO
from ._fields import cents_or_none, utcnow


class PaymentType(str, Enum):
    MINIMUM = "minimum"
    EXTRA = "extra"
    FULL = "full"
    MANUAL = "manual"


class PaymentMethod(str, Enum):
    MANUAL = "manual"
    AUTOMATIC = "automatic"
    RECOMMENDED = "recommended"


class PaymentInput(SQLModel):
    """Fields a caller supplies when entering a new payment."""

    amount: Decimal = Field(gt=0)
    payment_date: datetime = Field(default_factory=utcnow)
    # Free-form: the PaymentType values are the common tags.
    payment_type: str = Field(default=PaymentType.MINIMUM.value, max_length=32)
    payment_method: str = Field(default=PaymentMethod.MANUAL.value, max_length=32)
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("amount", mode="before")
    @classmethod
    def _round_amount(cls, value: Any) -> Any:
        return cents_or_none(value)


class PaymentUpdate(SQLModel):
    """Partial update applied by ``edit_payment``; unset fields are left alone."""

    model_config = ConfigDict(extra="forbid")

    amount: Optional[Decimal] = Field(default=None, gt=0)
    payment_date: Optional[datetime] = None
    payment_type: Optional[str] = Field(default=None, max_length=32)
    payment_method: Optional[str] = Field(default=None, max_length=32)
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("amount", mode="before")
    @classmethod
    def _round_amount(cls, value: Any) -> Any:
        return cents_or_none(value)

    @field_validator("amount", "payment_date", "payment_type", "payment_method")
    @classmethod
    def _not_clearable(cls, value: Any, info: ValidationInfo) -> Any:
        # Only notes may be reset to None.
        if value is None:
            raise ValueError(f"{info.field_name} cannot be cleared")
        return value


class Payment(SQLModel):
    """A recorded payment with its interest/principal split."""

    id: str = Field(max_length=64)
    debt_id: str = Field(max_length=64)
    amount: Decimal = Field(gt=0)
    payment_date: datetime
    payment_type: str = Field(default=PaymentType.MINIMUM.value, max_length=32)
    interest_portion: Decimal = Field(default=ZERO)
    principal_portion: Decimal = Field(default=ZERO)
    balance_after_payment: Optional[Decimal] = Field(default=None)
    payment_method: str = Field(default=PaymentMethod.MANUAL.value, max_length=32)
    notes: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator(
        "amount",
        "interest_portion",
        "principal_portion",
        "balance_after_payment",
        mode="before",
    )
    @classmethod
    def _round_to_cents(cls, value: Any) -> Any:
        return cents_or_none(value)
