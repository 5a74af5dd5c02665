"""
Domain Interfaces (Ports)
"""

from .repositories import CreditRepository, PaymentRepository
from .clients import CustomerRegistryClient

__all__ = [
    "CreditRepository",
    "PaymentRepository",
    "CustomerRegistryClient",
]
