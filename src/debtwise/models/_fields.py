"""Shared field helpers for the SQLModel data models."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any
from uuid import uuid4

from ..services.money import to_decimal, to_money


def new_id() -> str:
    return uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def cents_or_none(value: Any) -> Decimal | None:
    """Normalise incoming money values to cents before pydantic validates them."""

    if value is None or value == "":
        return None
    return to_money(value)


def decimal_or_none(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    return to_decimal(value)
