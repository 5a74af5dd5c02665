"""Error handling middleware and exception handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from credit_ledger.domain.exceptions import (
    AllocationInvariantError,
    CreditNotActiveError,
    CustomerRegistryError,
    CustomerRegistryTimeoutError,
    DomainException,
    IdempotencyConflictError,
    InvalidAmountError,
    InvalidRequestError,
    InvalidScheduleError,
    InvalidStateTransitionError,
    NotFoundError,
    SaleAlreadyFinancedError,
)
from .request_context import get_acting_user, get_request_id

logger = structlog.get_logger(__name__)


def _error_response(status_code: int, exc: DomainException, message: str | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": exc.code,
            "message": message or exc.message,
            "request_id": get_request_id(),
        },
    )


def error_handler_middleware(app: FastAPI) -> None:
    """
    Register exception handlers with the FastAPI app.

    Maps domain exceptions to appropriate HTTP responses.
    """

    @app.exception_handler(NotFoundError)
    async def not_found_handler(
        request: Request,
        exc: NotFoundError,
    ) -> JSONResponse:
        """Handle unknown credits, payments and customers."""
        return _error_response(404, exc)

    @app.exception_handler(InvalidScheduleError)
    @app.exception_handler(InvalidAmountError)
    @app.exception_handler(InvalidRequestError)
    async def invalid_request_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle invalid schedules, amounts and requests."""
        return _error_response(400, exc)

    @app.exception_handler(CreditNotActiveError)
    @app.exception_handler(InvalidStateTransitionError)
    @app.exception_handler(IdempotencyConflictError)
    @app.exception_handler(SaleAlreadyFinancedError)
    async def conflict_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle operations refused by the credit's current state."""
        logger.info(
            "operation_conflict",
            request_id=get_request_id(),
            acting_user=get_acting_user(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(409, exc)

    @app.exception_handler(CustomerRegistryTimeoutError)
    async def registry_timeout_handler(
        request: Request,
        exc: CustomerRegistryTimeoutError,
    ) -> JSONResponse:
        """Handle customer registry timeout errors."""
        logger.error(
            "customer_registry_timeout",
            request_id=get_request_id(),
        )
        return _error_response(
            503, exc, "Service temporarily unavailable. Please try again."
        )

    @app.exception_handler(CustomerRegistryError)
    async def registry_error_handler(
        request: Request,
        exc: CustomerRegistryError,
    ) -> JSONResponse:
        """Handle customer registry errors."""
        logger.error(
            "customer_registry_error",
            request_id=get_request_id(),
            message=exc.message,
            status_code=exc.status_code,
        )
        return _error_response(
            503, exc, "Unable to verify customer. Please try again later."
        )

    @app.exception_handler(AllocationInvariantError)
    async def invariant_handler(
        request: Request,
        exc: AllocationInvariantError,
    ) -> JSONResponse:
        """Handle ledger inconsistencies; these are defects, never user errors."""
        logger.error(
            "allocation_invariant_violated",
            request_id=get_request_id(),
            message=exc.message,
        )
        return _error_response(500, exc, "Ledger consistency check failed.")

    @app.exception_handler(DomainException)
    async def domain_exception_handler(
        request: Request,
        exc: DomainException,
    ) -> JSONResponse:
        """Handle generic domain exceptions."""
        logger.warning(
            "domain_exception",
            request_id=get_request_id(),
            code=exc.code,
            message=exc.message,
        )
        return _error_response(400, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception(
            "unhandled_exception",
            request_id=get_request_id(),
            error=str(exc),
            error_type=type(exc).__name__,
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred.",
                "request_id": get_request_id(),
            },
        )
