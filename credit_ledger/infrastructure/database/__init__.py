"""Database infrastructure."""

from .connection import get_db_session, DatabaseSessionManager, db_manager
from .models import (
    Base,
    CreditModel,
    InstallmentModel,
    PaymentModel,
    PaymentAllocationModel,
)

__all__ = [
    "get_db_session",
    "DatabaseSessionManager",
    "db_manager",
    "Base",
    "CreditModel",
    "InstallmentModel",
    "PaymentModel",
    "PaymentAllocationModel",
]
