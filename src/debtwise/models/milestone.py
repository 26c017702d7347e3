"""Append-only milestone log entries."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from ..services.money import ZERO
from ._fields import cents_or_none, utcnow


class MilestoneType(str, Enum):
    CREATED = "created"
    FIRST_PAYMENT = "first_payment"
    QUARTER_PAID = "25_percent_paid"
    HALF_PAID = "50_percent_paid"
    THREE_QUARTERS_PAID = "75_percent_paid"
    PAID_OFF = "paid_off"
    CUSTOM = "custom"


class Milestone(SQLModel):
    """An event marking progress on a debt. Never edited once stored."""

    # Assigned by the persistence layer.
    id: Optional[str] = Field(default=None, max_length=64)
    debt_id: str = Field(max_length=64)
    milestone_type: MilestoneType
    achieved_date: datetime = Field(default_factory=utcnow)
    milestone_value: Decimal = Field(default=ZERO)
    description: str = Field(default="", max_length=255)
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("milestone_value", mode="before")
    @classmethod
    def _round_value(cls, value: Any) -> Any:
        return cents_or_none(value)
