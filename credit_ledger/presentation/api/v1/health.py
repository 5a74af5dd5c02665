"""Health and readiness endpoints for service monitoring."""

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from credit_ledger import __version__
from credit_ledger.core.config import settings
from credit_ledger.infrastructure.database import get_db_session

logger = structlog.get_logger(__name__)

health_router = APIRouter()


class HealthResponse(BaseModel):
    status: str = "healthy"
    version: str


class ReadinessResponse(BaseModel):
    status: str
    database: str
    customer_registry: str


@health_router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health Check",
    description="Liveness probe. Touches no dependency.",
)
async def health_check() -> HealthResponse:
    return HealthResponse(status="healthy", version=__version__)


@health_router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness Check",
    description="""
    Readiness probe. Runs a trivial query against the ledger database
    and reports whether customer registry lookups are enabled.
    """,
    responses={503: {"model": ReadinessResponse, "description": "Database unreachable"}},
)
async def readiness_check(
    session: Annotated[AsyncSession, Depends(get_db_session)],
    response: Response,
) -> ReadinessResponse:
    registry = "enabled" if settings.customer_registry_enabled else "passthrough"
    try:
        await session.execute(text("SELECT 1"))
    except Exception as e:
        logger.error("readiness_check_failed", error=str(e), error_type=type(e).__name__)
        response.status_code = 503
        return ReadinessResponse(status="unavailable", database="down", customer_registry=registry)

    return ReadinessResponse(status="ready", database="up", customer_registry=registry)
