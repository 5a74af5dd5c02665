"""Pydantic schema for API error responses."""

from pydantic import BaseModel, ConfigDict, Field

LEDGER_ERROR_CODES = (
    "CREDIT_NOT_FOUND",
    "PAYMENT_NOT_FOUND",
    "CUSTOMER_NOT_FOUND",
    "INVALID_REQUEST",
    "INVALID_SCHEDULE",
    "INVALID_AMOUNT",
    "CREDIT_NOT_ACTIVE",
    "INVALID_STATE_TRANSITION",
    "IDEMPOTENCY_CONFLICT",
    "SALE_ALREADY_FINANCED",
    "CUSTOMER_REGISTRY_ERROR",
    "CUSTOMER_REGISTRY_TIMEOUT",
    "ALLOCATION_INVARIANT_VIOLATED",
    "INTERNAL_ERROR",
)


class ErrorResponseSchema(BaseModel):
    """Error body returned by every ledger endpoint."""

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "error": "CREDIT_NOT_ACTIVE",
                    "message": "Credit 550e8400-e29b-41d4-a716-446655440000 is not active (state: void)",
                    "request_id": "3f1c2a9e-7d41-4a55-9a0e-2b9f1f6f3e10",
                },
                {
                    "error": "IDEMPOTENCY_CONFLICT",
                    "message": "Idempotency key already used for a different payment: rcpt-0001",
                    "request_id": "3f1c2a9e-7d41-4a55-9a0e-2b9f1f6f3e10",
                },
            ]
        }
    )

    error: str = Field(
        ...,
        description="Error code, one of: " + ", ".join(LEDGER_ERROR_CODES),
        examples=["CREDIT_NOT_FOUND"],
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Credit not found: 550e8400-e29b-41d4-a716-446655440000"],
    )
    request_id: str | None = Field(
        None,
        description="Request ID for tracing, echoed from X-Request-ID when sent",
    )
