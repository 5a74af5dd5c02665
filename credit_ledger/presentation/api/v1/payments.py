"""Payment API endpoints."""

from dataclasses import asdict
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Path, Response

from credit_ledger.application.dto import ApplyPaymentRequest
from credit_ledger.application.services import PaymentService
from credit_ledger.core.dependencies import get_payment_service
from credit_ledger.core.metrics import record_payment_applied, track_payment_latency
from credit_ledger.presentation.schemas import (
    ApplyPaymentSchema,
    ErrorResponseSchema,
    PaymentResponseSchema,
    PaymentSchema,
)

payment_router = APIRouter(
    responses={
        404: {"model": ErrorResponseSchema, "description": "Not found"},
    },
)


@payment_router.post(
    "/credits/{credit_id}/payments",
    response_model=PaymentResponseSchema,
    status_code=201,
    summary="Apply Payment",
    description="""
    Apply a payment to a credit.

    The amount is allocated to pending installments oldest first. Any
    amount above the outstanding balance is returned as excess and
    never kept as a balance. Retrying with the same Idempotency-Key
    returns the original result with status 200.
    """,
    responses={
        201: {"description": "Payment applied"},
        200: {"description": "Idempotent replay of a previous payment"},
        400: {"model": ErrorResponseSchema, "description": "Invalid amount"},
        409: {"model": ErrorResponseSchema, "description": "Credit not active or key conflict"},
    },
)
async def apply_payment(
    credit_id: Annotated[UUID, Path(description="UUID of the credit")],
    request: ApplyPaymentSchema,
    acting_user: Annotated[str, Header(alias="X-User", min_length=1)],
    response: Response,
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
    idempotency_key: Annotated[
        Optional[str],
        Header(alias="Idempotency-Key", max_length=255),
    ] = None,
) -> PaymentResponseSchema:
    dto = ApplyPaymentRequest(
        amount_cents=request.amount_cents,
        method=request.method,
        recorded_by=acting_user,
        paid_on=request.paid_on,
        reference=request.reference,
        notes=request.notes,
        idempotency_key=idempotency_key,
    )

    with track_payment_latency():
        result = await payment_service.apply_payment(credit_id, dto)

    if result.replayed:
        response.status_code = 200
    else:
        record_payment_applied(
            method=result.payment.method,
            amount_cents=result.payment.amount_cents,
            excess_cents=result.excess_cents,
            completed=result.credit_state == "completed",
        )

    return PaymentResponseSchema.model_validate(asdict(result))


@payment_router.get(
    "/credits/{credit_id}/payments",
    response_model=list[PaymentSchema],
    summary="List Payments",
    description="Payments recorded against a credit, newest first.",
)
async def list_payments(
    credit_id: Annotated[UUID, Path(description="UUID of the credit")],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> list[PaymentSchema]:
    payments = await payment_service.list_payments(credit_id)
    return [PaymentSchema.model_validate(asdict(p)) for p in payments]


@payment_router.get(
    "/payments/{payment_id}",
    response_model=PaymentSchema,
    summary="Get Payment",
)
async def get_payment(
    payment_id: Annotated[UUID, Path(description="UUID of the payment")],
    payment_service: Annotated[PaymentService, Depends(get_payment_service)],
) -> PaymentSchema:
    payment = await payment_service.get_payment(payment_id)
    return PaymentSchema.model_validate(asdict(payment))
