"""Credit service - orchestrates credit lifecycle use cases."""

from datetime import date, timedelta
from typing import Callable, List, Optional
from uuid import UUID, uuid4

import structlog

from credit_ledger.domain.entities import Credit, CreditState
from credit_ledger.domain.exceptions import (
    CreditNotFoundError,
    InvalidRequestError,
    InvalidScheduleError,
    InvalidStateTransitionError,
    SaleAlreadyFinancedError,
)
from credit_ledger.domain.interfaces import (
    CreditRepository,
    CustomerRegistryClient,
    PaymentRepository,
)
from credit_ledger.application.dto import (
    CreateCreditRequest,
    CreditResponse,
    InstallmentListResponse,
)
from credit_ledger.core.metrics import record_operation_rejected
from credit_ledger.service.ledger import (
    LedgerSettings,
    ledger_settings,
    add_months,
    apply,
    create_monthly_schedule,
    create_schedule,
    mark_overdue,
    void,
)

logger = structlog.get_logger(__name__)


class CreditService:
    """
    Application service for credit use cases.

    Opens credits with their installment schedule, answers credit
    lookups and runs the void transition.
    """

    def __init__(
        self,
        credit_repository: CreditRepository,
        payment_repository: PaymentRepository,
        registry_client: CustomerRegistryClient,
        settings: LedgerSettings = ledger_settings,
        today: Callable[[], date] = date.today,
    ):
        self._credit_repo = credit_repository
        self._payment_repo = payment_repository
        self._registry = registry_client
        self._settings = settings
        self._today = today

    async def create_credit(self, request: CreateCreditRequest) -> CreditResponse:
        """
        Open a credit on a sale and generate its schedule.

        A "fixed" frequency (or an explicit ``interval_days``) spaces
        installments a fixed number of days apart; otherwise they fall
        monthly. A down payment, when
        given, is applied through the distribution engine right away.

        Args:
            request: The credit request

        Returns:
            CreditResponse with the schedule as of today

        Raises:
            InvalidRequestError: If request validation fails
            InvalidScheduleError: If the schedule parameters are invalid
            SaleAlreadyFinancedError: If the sale already has a credit
            CustomerNotFoundError: If the registry does not know the customer
            CustomerRegistryError: If the registry is unavailable
        """
        errors = request.validate()
        if errors:
            record_operation_rejected("create_credit", "invalid_request")
            raise InvalidRequestError("; ".join(errors))

        start_date = request.start_date or self._today()
        if request.first_due_date is not None and request.first_due_date < start_date:
            record_operation_rejected("create_credit", "invalid_request")
            raise InvalidRequestError(
                f"first_due_date {request.first_due_date.isoformat()} cannot precede "
                f"start_date {start_date.isoformat()}"
            )

        log = logger.bind(
            customer_document=request.customer_document,
            total_cents=request.total_cents,
            installment_count=request.installment_count,
        )
        log.info("credit_requested")

        if request.sale_reference:
            existing = await self._credit_repo.get_by_sale_reference(request.sale_reference)
            if existing is not None:
                record_operation_rejected("create_credit", "sale_already_financed")
                raise SaleAlreadyFinancedError(request.sale_reference)

        customer = await self._registry.lookup(request.customer_document.strip())
        log.info("customer_resolved", document_type=customer.document_type.value)

        credit_id = uuid4()

        try:
            if request.frequency == "fixed" or request.interval_days is not None:
                interval_days = (
                    request.interval_days
                    if request.interval_days is not None
                    else self._settings.default_interval_days
                )
                first_due = request.first_due_date or start_date + timedelta(days=interval_days)
                installments = create_schedule(
                    total_cents=request.total_cents,
                    installment_count=request.installment_count,
                    first_due_date=first_due,
                    interval_days=interval_days,
                    credit_id=credit_id,
                    settings=self._settings,
                )
            else:
                first_due = request.first_due_date or add_months(start_date, 1)
                installments = create_monthly_schedule(
                    total_cents=request.total_cents,
                    installment_count=request.installment_count,
                    first_due_date=first_due,
                    credit_id=credit_id,
                    settings=self._settings,
                )
        except InvalidScheduleError as e:
            record_operation_rejected("create_credit", "invalid_schedule")
            log.warning("credit_rejected", reason=e.message)
            raise

        credit = Credit(
            id=credit_id,
            customer_document=customer.document_number,
            customer_name=customer.full_name or None,
            sale_reference=request.sale_reference,
            total_cents=request.total_cents,
            start_date=start_date,
            installments=installments,
            created_by=request.created_by,
        )

        await self._credit_repo.add(credit)

        if request.down_payment_cents > 0:
            result = apply(
                credit,
                request.down_payment_cents,
                paid_on=start_date,
                method=request.down_payment_method,
                recorded_by=request.created_by,
                notes="Down payment",
                settings=self._settings,
            )
            await self._payment_repo.add(result.payment)
            await self._credit_repo.update(credit)
            log.info(
                "down_payment_applied",
                payment_id=str(result.payment.id),
                amount_cents=result.payment.amount_cents,
            )

        log.info(
            "credit_created",
            credit_id=str(credit.id),
            first_due_date=first_due.isoformat(),
            outstanding_cents=credit.outstanding_cents,
        )

        return CreditResponse.from_entity(credit, self._today())

    async def get_credit(self, credit_id: UUID, as_of: Optional[date] = None) -> CreditResponse:
        """
        Retrieve a credit by ID.

        Raises:
            CreditNotFoundError: If credit not found
        """
        credit = await self._load(credit_id)
        return CreditResponse.from_entity(credit, as_of or self._today())

    async def get_by_sale_reference(self, sale_reference: str) -> CreditResponse:
        """
        Retrieve the credit financing a sale.

        Raises:
            CreditNotFoundError: If the sale has no credit
        """
        credit = await self._credit_repo.get_by_sale_reference(sale_reference)
        if credit is None:
            logger.warning("credit_not_found", sale_reference=sale_reference)
            raise CreditNotFoundError(sale_reference)
        return CreditResponse.from_entity(credit, self._today())

    async def list_credits(
        self,
        state: Optional[CreditState] = None,
        customer_document: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[CreditResponse]:
        credits = await self._credit_repo.list_credits(
            state=state,
            customer_document=customer_document,
            limit=limit,
            offset=offset,
        )
        as_of = self._today()
        return [CreditResponse.from_entity(credit, as_of) for credit in credits]

    async def count_credits(self, state: CreditState = CreditState.ACTIVE) -> int:
        """Number of credits currently in a state (active by default)."""
        return await self._credit_repo.count_by_state(state)

    async def list_installments(
        self,
        credit_id: UUID,
        as_of: Optional[date] = None,
    ) -> InstallmentListResponse:
        """
        Installments of a credit with their derived state.

        Args:
            credit_id: The credit's unique identifier
            as_of: Reference date for the overdue check (defaults to today)
        """
        credit = await self._load(credit_id)
        reference = as_of or self._today()
        views = mark_overdue(credit.installments, reference, voided=credit.is_void)
        return InstallmentListResponse.from_views(views, reference)

    async def void_credit(
        self,
        credit_id: UUID,
        acting_user: str,
        reason: Optional[str] = None,
    ) -> CreditResponse:
        """
        Void an active credit.

        Pending amounts are zeroed and further payments are refused.

        Raises:
            CreditNotFoundError: If credit not found
            InvalidStateTransitionError: If the credit is not ACTIVE
        """
        if not acting_user or not acting_user.strip():
            raise InvalidRequestError("acting user is required")

        credit = await self._load(credit_id, for_update=True)
        log = logger.bind(credit_id=str(credit_id), acting_user=acting_user)

        try:
            void(credit, acting_user, reason=reason)
        except InvalidStateTransitionError:
            record_operation_rejected("void", "invalid_state")
            log.warning("void_rejected", state=credit.state.value)
            raise

        await self._credit_repo.update(credit)
        log.info("credit_voided", reason=reason)

        return CreditResponse.from_entity(credit, self._today())

    async def _load(self, credit_id: UUID, for_update: bool = False) -> Credit:
        credit = await self._credit_repo.get_by_id(credit_id, for_update=for_update)
        if credit is None:
            logger.warning("credit_not_found", credit_id=str(credit_id))
            raise CreditNotFoundError(str(credit_id))
        return credit
