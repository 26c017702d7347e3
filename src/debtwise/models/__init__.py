"""SQLModel data models exchanged with the payoff engine."""

from .debt import Debt, DebtStatus, DebtType
from .milestone import Milestone, MilestoneType
from .payment import Payment, PaymentInput, PaymentMethod, PaymentType, PaymentUpdate

__all__ = [
    "Debt",
    "DebtStatus",
    "DebtType",
    "Milestone",
    "MilestoneType",
    "Payment",
    "PaymentInput",
    "PaymentMethod",
    "PaymentType",
    "PaymentUpdate",
]
