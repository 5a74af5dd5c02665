"""Payment service - applies payments to credits."""

from datetime import date
from typing import Callable, List
from uuid import UUID

import structlog

from credit_ledger.domain.entities import CreditState, PaymentResult
from credit_ledger.domain.exceptions import (
    CreditNotActiveError,
    CreditNotFoundError,
    IdempotencyConflictError,
    InvalidAmountError,
    InvalidRequestError,
    PaymentNotFoundError,
)
from credit_ledger.domain.interfaces import CreditRepository, PaymentRepository
from credit_ledger.application.dto import ApplyPaymentRequest, PaymentDTO, PaymentResponse
from credit_ledger.core.metrics import record_operation_rejected
from credit_ledger.service.ledger import (
    LedgerSettings,
    ledger_settings,
    apply,
    assert_consistent,
)

logger = structlog.get_logger(__name__)


class PaymentService:
    """
    Application service for payment use cases.

    Every payment runs against a row-locked credit so concurrent
    payments on the same credit are applied one after the other.
    """

    def __init__(
        self,
        credit_repository: CreditRepository,
        payment_repository: PaymentRepository,
        settings: LedgerSettings = ledger_settings,
        today: Callable[[], date] = date.today,
    ):
        self._credit_repo = credit_repository
        self._payment_repo = payment_repository
        self._settings = settings
        self._today = today

    async def apply_payment(
        self,
        credit_id: UUID,
        request: ApplyPaymentRequest,
    ) -> PaymentResponse:
        """
        Apply a payment to a credit, oldest installment first.

        A retry carrying an idempotency key already seen on this credit
        returns the stored payment instead of applying it twice.

        Args:
            credit_id: The credit being paid
            request: Amount, method and acting user

        Returns:
            PaymentResponse with allocations, new outstanding balance
            and any excess amount

        Raises:
            InvalidRequestError: If request validation fails
            CreditNotFoundError: If credit not found
            CreditNotActiveError: If the credit is COMPLETED or VOID
            InvalidAmountError: If the amount is not acceptable
            IdempotencyConflictError: If the key was used for another payment
        """
        errors = request.validate()
        if errors:
            record_operation_rejected("payment", "invalid_request")
            raise InvalidRequestError("; ".join(errors))

        log = logger.bind(
            credit_id=str(credit_id),
            amount_cents=request.amount_cents,
            method=request.method.value,
            recorded_by=request.recorded_by,
        )

        credit = await self._credit_repo.get_by_id(credit_id, for_update=True)
        if credit is None:
            log.warning("credit_not_found")
            raise CreditNotFoundError(str(credit_id))

        if request.idempotency_key:
            existing = await self._payment_repo.get_by_idempotency_key(
                credit_id, request.idempotency_key
            )
            if existing is not None:
                if (
                    existing.received_cents != request.amount_cents
                    or existing.method != request.method
                ):
                    record_operation_rejected("payment", "idempotency_conflict")
                    log.warning(
                        "idempotency_conflict",
                        idempotency_key=request.idempotency_key,
                        payment_id=str(existing.id),
                    )
                    raise IdempotencyConflictError(request.idempotency_key)

                log.info("payment_replayed", payment_id=str(existing.id))
                return PaymentResponse.from_result(
                    PaymentResult(
                        payment=existing,
                        outstanding_cents=credit.outstanding_cents,
                        excess_cents=existing.excess_cents,
                        credit_state=credit.state,
                        replayed=True,
                    )
                )

        try:
            result = apply(
                credit,
                request.amount_cents,
                paid_on=request.paid_on or self._today(),
                method=request.method,
                recorded_by=request.recorded_by,
                reference=request.reference,
                notes=request.notes,
                idempotency_key=request.idempotency_key,
                settings=self._settings,
            )
        except CreditNotActiveError:
            record_operation_rejected("payment", "credit_not_active")
            log.warning("payment_rejected", reason="credit_not_active", state=credit.state.value)
            raise
        except InvalidAmountError as e:
            record_operation_rejected("payment", "invalid_amount")
            log.warning("payment_rejected", reason="invalid_amount", message=e.message)
            raise

        assert_consistent(credit)

        await self._payment_repo.add(result.payment)
        await self._credit_repo.update(credit)

        log.info(
            "payment_applied",
            payment_id=str(result.payment.id),
            applied_cents=result.payment.amount_cents,
            excess_cents=result.excess_cents,
            installments_touched=len(result.allocations),
            outstanding_cents=result.outstanding_cents,
        )
        if result.credit_state == CreditState.COMPLETED:
            log.info("credit_completed")

        return PaymentResponse.from_result(result)

    async def list_payments(self, credit_id: UUID) -> List[PaymentDTO]:
        """
        Payments recorded against a credit, newest first.

        Raises:
            CreditNotFoundError: If credit not found
        """
        credit = await self._credit_repo.get_by_id(credit_id)
        if credit is None:
            raise CreditNotFoundError(str(credit_id))

        payments = await self._payment_repo.list_by_credit(credit_id)
        return [PaymentDTO.from_entity(payment) for payment in payments]

    async def get_payment(self, payment_id: UUID) -> PaymentDTO:
        """
        Retrieve a payment by ID.

        Raises:
            PaymentNotFoundError: If payment not found
        """
        payment = await self._payment_repo.get_by_id(payment_id)
        if payment is None:
            logger.warning("payment_not_found", payment_id=str(payment_id))
            raise PaymentNotFoundError(str(payment_id))
        return PaymentDTO.from_entity(payment)
