"""Dependency injection for FastAPI."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from credit_ledger.core.config import settings
from credit_ledger.domain.interfaces import CustomerRegistryClient
from credit_ledger.infrastructure.database import get_db_session
from credit_ledger.infrastructure.repositories import (
    PostgresCreditRepository,
    PostgresPaymentRepository,
)
from credit_ledger.infrastructure.clients import (
    HttpCustomerRegistryClient,
    PassthroughCustomerRegistryClient,
)
from credit_ledger.application.services import (
    CreditService,
    OverdueService,
    PaymentService,
)
from credit_ledger.service.ledger import LedgerSettings, ledger_settings


# Repository dependencies
async def get_credit_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresCreditRepository:
    """Get a CreditRepository instance."""
    return PostgresCreditRepository(session)


async def get_payment_repository(
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> PostgresPaymentRepository:
    """Get a PaymentRepository instance."""
    return PostgresPaymentRepository(session)


# External client dependencies
def get_registry_client() -> CustomerRegistryClient:
    """Get a CustomerRegistryClient instance."""
    if not settings.customer_registry_enabled:
        return PassthroughCustomerRegistryClient()
    return HttpCustomerRegistryClient()


def get_ledger_settings() -> LedgerSettings:
    return ledger_settings


# Service dependencies
async def get_credit_service(
    credit_repo: Annotated[PostgresCreditRepository, Depends(get_credit_repository)],
    payment_repo: Annotated[PostgresPaymentRepository, Depends(get_payment_repository)],
    registry_client: Annotated[CustomerRegistryClient, Depends(get_registry_client)],
    ledger: Annotated[LedgerSettings, Depends(get_ledger_settings)],
) -> CreditService:
    """Get a CreditService instance with all dependencies."""
    return CreditService(
        credit_repository=credit_repo,
        payment_repository=payment_repo,
        registry_client=registry_client,
        settings=ledger,
    )


async def get_payment_service(
    credit_repo: Annotated[PostgresCreditRepository, Depends(get_credit_repository)],
    payment_repo: Annotated[PostgresPaymentRepository, Depends(get_payment_repository)],
    ledger: Annotated[LedgerSettings, Depends(get_ledger_settings)],
) -> PaymentService:
    """Get a PaymentService instance."""
    return PaymentService(
        credit_repository=credit_repo,
        payment_repository=payment_repo,
        settings=ledger,
    )


async def get_overdue_service(
    credit_repo: Annotated[PostgresCreditRepository, Depends(get_credit_repository)],
    ledger: Annotated[LedgerSettings, Depends(get_ledger_settings)],
) -> OverdueService:
    """Get an OverdueService instance."""
    return OverdueService(credit_repository=credit_repo, settings=ledger)
