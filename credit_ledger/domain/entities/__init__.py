"""Domain Entities - Core business objects."""

from .credit import Credit, CreditState
from .customer import CustomerRecord
from .installment import Installment, InstallmentState, InstallmentView
from .payment import Payment, PaymentAllocation, PaymentMethod, PaymentResult

__all__ = [
    "Credit",
    "CreditState",
    "CustomerRecord",
    "Installment",
    "InstallmentState",
    "InstallmentView",
    "Payment",
    "PaymentAllocation",
    "PaymentMethod",
    "PaymentResult",
]
