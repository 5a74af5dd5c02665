"""Credit API endpoints."""

from dataclasses import asdict
from datetime import date
from typing import Annotated, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Header, Path, Query

from credit_ledger.application.dto import CreateCreditRequest
from credit_ledger.application.services import CreditService, OverdueService
from credit_ledger.core.dependencies import get_credit_service, get_overdue_service
from credit_ledger.core.metrics import record_credit_created, record_credit_voided
from credit_ledger.domain.entities import CreditState
from credit_ledger.presentation.schemas import (
    CreateCreditSchema,
    CreditResponseSchema,
    ErrorResponseSchema,
    InstallmentListSchema,
    CreditCountSchema,
    OutstandingSchema,
    VoidCreditSchema,
)

credit_router = APIRouter(
    prefix="/credits",
    responses={
        404: {"model": ErrorResponseSchema, "description": "Credit not found"},
    },
)


@credit_router.post(
    "",
    response_model=CreditResponseSchema,
    status_code=201,
    summary="Open Credit",
    description="""
    Open a credit on a sale and generate its installment schedule.

    The amount is split evenly; the last installment carries any
    remainder so the schedule sums to the total exactly.
    """,
    responses={
        201: {"description": "Credit created"},
        400: {"model": ErrorResponseSchema, "description": "Invalid schedule"},
        409: {"model": ErrorResponseSchema, "description": "Sale already financed"},
        503: {"model": ErrorResponseSchema, "description": "Customer registry unavailable"},
    },
)
async def create_credit(
    request: CreateCreditSchema,
    acting_user: Annotated[str, Header(alias="X-User", min_length=1)],
    credit_service: Annotated[CreditService, Depends(get_credit_service)],
) -> CreditResponseSchema:
    dto = CreateCreditRequest(
        customer_document=request.customer_document,
        total_cents=request.total_cents,
        installment_count=request.installment_count,
        created_by=acting_user,
        start_date=request.start_date,
        first_due_date=request.first_due_date,
        interval_days=request.interval_days,
        frequency=request.frequency,
        sale_reference=request.sale_reference,
        down_payment_cents=request.down_payment_cents,
        down_payment_method=request.down_payment_method,
    )

    response = await credit_service.create_credit(dto)

    record_credit_created(response.total_cents)

    return CreditResponseSchema.model_validate(asdict(response))


@credit_router.get(
    "",
    response_model=list[CreditResponseSchema],
    summary="List Credits",
    description="List credits, newest first, optionally filtered by state or customer.",
)
async def list_credits(
    credit_service: Annotated[CreditService, Depends(get_credit_service)],
    state: Annotated[Optional[CreditState], Query(description="Credit state")] = None,
    customer_document: Annotated[
        Optional[str],
        Query(min_length=8, max_length=11, description="Customer document number"),
    ] = None,
    limit: Annotated[int, Query(ge=1, le=200)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> list[CreditResponseSchema]:
    responses = await credit_service.list_credits(
        state=state,
        customer_document=customer_document,
        limit=limit,
        offset=offset,
    )
    return [CreditResponseSchema.model_validate(asdict(r)) for r in responses]


@credit_router.get(
    "/outstanding",
    response_model=OutstandingSchema,
    summary="Outstanding Balance",
    description="Sum of outstanding balances across active credits.",
)
async def get_outstanding(
    overdue_service: Annotated[OverdueService, Depends(get_overdue_service)],
    customer_document: Annotated[
        Optional[str],
        Query(min_length=8, max_length=11, description="Restrict to one customer"),
    ] = None,
) -> OutstandingSchema:
    response = await overdue_service.outstanding(customer_document)
    return OutstandingSchema.model_validate(asdict(response))


@credit_router.get(
    "/count",
    response_model=CreditCountSchema,
    summary="Count Credits",
    description="Number of credits in a state. Defaults to active credits.",
)
async def count_credits(
    credit_service: Annotated[CreditService, Depends(get_credit_service)],
    state: Annotated[CreditState, Query(description="Credit state")] = CreditState.ACTIVE,
) -> CreditCountSchema:
    count = await credit_service.count_credits(state)
    return CreditCountSchema(state=state, count=count)


@credit_router.get(
    "/sale/{sale_reference}",
    response_model=CreditResponseSchema,
    summary="Get Credit By Sale",
)
async def get_credit_by_sale(
    sale_reference: Annotated[str, Path(max_length=50)],
    credit_service: Annotated[CreditService, Depends(get_credit_service)],
) -> CreditResponseSchema:
    response = await credit_service.get_by_sale_reference(sale_reference)
    return CreditResponseSchema.model_validate(asdict(response))


@credit_router.get(
    "/{credit_id}",
    response_model=CreditResponseSchema,
    summary="Get Credit",
    description="Retrieve a credit with its installments and their current state.",
)
async def get_credit(
    credit_id: Annotated[UUID, Path(description="UUID of the credit")],
    credit_service: Annotated[CreditService, Depends(get_credit_service)],
    as_of: Annotated[Optional[date], Query(description="Reference date")] = None,
) -> CreditResponseSchema:
    response = await credit_service.get_credit(credit_id, as_of)
    return CreditResponseSchema.model_validate(asdict(response))


@credit_router.get(
    "/{credit_id}/installments",
    response_model=InstallmentListSchema,
    summary="List Installments",
    description="""
    Installments of a credit with their state derived as of a date.

    Nothing is stored: a late payment is reflected on the next read.
    """,
)
async def list_installments(
    credit_id: Annotated[UUID, Path(description="UUID of the credit")],
    credit_service: Annotated[CreditService, Depends(get_credit_service)],
    as_of: Annotated[Optional[date], Query(description="Reference date")] = None,
) -> InstallmentListSchema:
    response = await credit_service.list_installments(credit_id, as_of)
    return InstallmentListSchema.model_validate(asdict(response))


@credit_router.post(
    "/{credit_id}/void",
    response_model=CreditResponseSchema,
    summary="Void Credit",
    description="Void an active credit. Pending amounts are zeroed.",
    responses={
        409: {"model": ErrorResponseSchema, "description": "Credit is not active"},
    },
)
async def void_credit(
    credit_id: Annotated[UUID, Path(description="UUID of the credit")],
    acting_user: Annotated[str, Header(alias="X-User", min_length=1)],
    credit_service: Annotated[CreditService, Depends(get_credit_service)],
    request: Annotated[Optional[VoidCreditSchema], Body()] = None,
) -> CreditResponseSchema:
    reason = request.reason if request else None
    response = await credit_service.void_credit(credit_id, acting_user, reason)

    record_credit_voided()

    return CreditResponseSchema.model_validate(asdict(response))
