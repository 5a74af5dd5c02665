"""Overdue service - due-date sweeps for collections."""

from datetime import date, timedelta
from typing import Callable, List, Optional

import structlog

from credit_ledger.domain.interfaces import CreditRepository
from credit_ledger.application.dto import (
    CreditResponse,
    InstallmentListResponse,
    OutstandingResponse,
    OverdueSummaryResponse,
)
from credit_ledger.core.metrics import record_overdue_sweep
from credit_ledger.service.ledger import (
    LedgerSettings,
    ledger_settings,
    find_due_on,
    find_overdue,
    find_upcoming,
    summarize_overdue,
)

logger = structlog.get_logger(__name__)


class OverdueService:
    """
    Read-only sweep queries over active credits.

    Overdue status is derived at query time from due dates and pending
    amounts; nothing is flagged or stored by a sweep.
    """

    def __init__(
        self,
        credit_repository: CreditRepository,
        settings: LedgerSettings = ledger_settings,
        today: Callable[[], date] = date.today,
    ):
        self._credit_repo = credit_repository
        self._settings = settings
        self._today = today

    async def list_overdue(
        self,
        as_of: Optional[date] = None,
        customer_document: Optional[str] = None,
    ) -> InstallmentListResponse:
        """
        Pending installments past their due date, oldest first.

        Args:
            as_of: Reference date (defaults to today)
            customer_document: Only installments of this customer
        """
        reference = as_of or self._today()
        installments = find_overdue(
            await self._credit_repo.overdue_installments(reference, customer_document),
            reference,
        )

        if customer_document is None:
            record_overdue_sweep(len(installments))

        logger.info(
            "overdue_sweep",
            as_of=reference.isoformat(),
            customer_document=customer_document,
            count=len(installments),
        )

        return InstallmentListResponse.from_entities(installments, reference)

    async def credits_with_overdue(self, as_of: Optional[date] = None) -> List[CreditResponse]:
        reference = as_of or self._today()
        credits = await self._credit_repo.credits_with_overdue(reference)
        return [CreditResponse.from_entity(credit, reference) for credit in credits]

    async def summary(self, as_of: Optional[date] = None) -> OverdueSummaryResponse:
        reference = as_of or self._today()
        installments = await self._credit_repo.overdue_installments(reference)
        return OverdueSummaryResponse.from_summary(summarize_overdue(installments, reference))

    async def due_on(self, on: Optional[date] = None) -> InstallmentListResponse:
        """Pending installments falling due on a date (defaults to today)."""
        reference = on or self._today()
        installments = find_due_on(
            await self._credit_repo.installments_due_between(reference, reference),
            reference,
        )
        return InstallmentListResponse.from_entities(installments, reference)

    async def upcoming(
        self,
        days: Optional[int] = None,
        as_of: Optional[date] = None,
    ) -> InstallmentListResponse:
        """
        Pending installments falling due within the next ``days`` days.

        Args:
            days: Window length (defaults to the configured due-soon window)
            as_of: Start of the window (defaults to today)
        """
        reference = as_of or self._today()
        window = self._settings.due_soon_days if days is None else days
        installments = find_upcoming(
            await self._credit_repo.installments_due_between(
                reference, reference + timedelta(days=window)
            ),
            reference,
            window,
        )
        return InstallmentListResponse.from_entities(installments, reference)

    async def outstanding(self, customer_document: Optional[str] = None) -> OutstandingResponse:
        total = await self._credit_repo.total_outstanding(customer_document)
        return OutstandingResponse(
            customer_document=customer_document,
            outstanding_cents=total,
        )
