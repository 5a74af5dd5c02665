"""Due-date sweep API endpoints."""

from dataclasses import asdict
from datetime import date
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from credit_ledger.application.services import OverdueService
from credit_ledger.core.dependencies import get_overdue_service
from credit_ledger.presentation.schemas import (
    CreditResponseSchema,
    InstallmentListSchema,
    OverdueSummarySchema,
)

overdue_router = APIRouter()


@overdue_router.get(
    "/overdue/installments",
    response_model=InstallmentListSchema,
    summary="Overdue Installments",
    description="""
    Pending installments of active credits whose due date has passed,
    oldest first. Defaults to today.
    """,
)
async def list_overdue_installments(
    overdue_service: Annotated[OverdueService, Depends(get_overdue_service)],
    as_of: Annotated[Optional[date], Query(description="Reference date")] = None,
    customer_document: Annotated[
        Optional[str],
        Query(min_length=8, max_length=11, description="Restrict to one customer"),
    ] = None,
) -> InstallmentListSchema:
    response = await overdue_service.list_overdue(as_of, customer_document)
    return InstallmentListSchema.model_validate(asdict(response))


@overdue_router.get(
    "/overdue/credits",
    response_model=list[CreditResponseSchema],
    summary="Credits With Overdue Installments",
)
async def list_overdue_credits(
    overdue_service: Annotated[OverdueService, Depends(get_overdue_service)],
    as_of: Annotated[Optional[date], Query(description="Reference date")] = None,
) -> list[CreditResponseSchema]:
    responses = await overdue_service.credits_with_overdue(as_of)
    return [CreditResponseSchema.model_validate(asdict(r)) for r in responses]


@overdue_router.get(
    "/overdue/summary",
    response_model=OverdueSummarySchema,
    summary="Overdue Summary",
    description="Count and pending total of overdue installments.",
)
async def overdue_summary(
    overdue_service: Annotated[OverdueService, Depends(get_overdue_service)],
    as_of: Annotated[Optional[date], Query(description="Reference date")] = None,
) -> OverdueSummarySchema:
    response = await overdue_service.summary(as_of)
    return OverdueSummarySchema.model_validate(asdict(response))


@overdue_router.get(
    "/installments/due",
    response_model=InstallmentListSchema,
    summary="Installments Due On A Date",
)
async def list_due_installments(
    overdue_service: Annotated[OverdueService, Depends(get_overdue_service)],
    on: Annotated[Optional[date], Query(description="Due date (defaults to today)")] = None,
) -> InstallmentListSchema:
    response = await overdue_service.due_on(on)
    return InstallmentListSchema.model_validate(asdict(response))


@overdue_router.get(
    "/installments/upcoming",
    response_model=InstallmentListSchema,
    summary="Upcoming Installments",
    description="Pending installments falling due within the next N days.",
)
async def list_upcoming_installments(
    overdue_service: Annotated[OverdueService, Depends(get_overdue_service)],
    days: Annotated[Optional[int], Query(ge=0, le=365)] = None,
    as_of: Annotated[Optional[date], Query(description="Start of the window")] = None,
) -> InstallmentListSchema:
    response = await overdue_service.upcoming(days, as_of)
    return InstallmentListSchema.model_validate(asdict(response))
