"""
Credit Ledger - Main Application Entry Point

An installment credit ledger for retail sales: credits with their
payment schedules, payment distribution and overdue sweeps.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from credit_ledger import __version__
from credit_ledger.core.config import settings
from credit_ledger.core.logging import setup_logging
from credit_ledger.core.metrics import get_metrics, get_metrics_content_type
from credit_ledger.infrastructure.database import db_manager
from credit_ledger.presentation.api import api_router
from credit_ledger.service.ledger import ledger_settings
from credit_ledger.presentation.middleware import (
    LoggingMiddleware,
    RequestContextMiddleware,
    error_handler_middleware,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown events:
    - Initialize database connection pool
    - Create the ledger tables when configured to
    - Set up logging
    - Clean up on shutdown
    """
    setup_logging()
    db_manager.init()
    if settings.db_create_tables:
        await db_manager.create_all()

    logger = structlog.get_logger(__name__)
    logger.info(
        "application_started",
        version=__version__,
        customer_registry_enabled=settings.customer_registry_enabled,
        max_installments=ledger_settings.max_installments,
        overpayment_policy=ledger_settings.overpayment_policy,
    )

    yield

    await db_manager.close()
    logger.info("application_stopped")


OPENAPI_TAGS = [
    {"name": "Credits", "description": "Open, read and void credits and their schedules."},
    {"name": "Payments", "description": "Apply payments, oldest installment first."},
    {"name": "Collections", "description": "Overdue and upcoming installment sweeps."},
    {"name": "Health", "description": "Liveness and readiness probes."},
]

app = FastAPI(
    title="Credit Ledger",
    description="Installment Credit Ledger Service",
    version=__version__,
    openapi_tags=OPENAPI_TAGS,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)
app.add_middleware(RequestContextMiddleware)

error_handler_middleware(app)

app.include_router(api_router)


if settings.metrics_enabled:

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus metrics endpoint."""
        return Response(
            content=get_metrics(),
            media_type=get_metrics_content_type(),
        )


@app.get("/", include_in_schema=False)
async def root():
    """Redirect to API documentation."""

    return RedirectResponse(url="/docs")
