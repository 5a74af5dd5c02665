"""Prometheus metrics for the credit ledger service.

Metrics are organized into two categories:

Business Metrics (for Collections/Finance):
- credit_ledger_credits_created_total: Credits opened
- credit_ledger_financed_cents_total: Amount financed
- credit_ledger_payments_applied_total: Payments applied by method
- credit_ledger_payment_amount_cents_total: Amount applied to installments
- credit_ledger_payment_excess_cents_total: Overpayment reported back
- credit_ledger_credits_completed_total: Credits fully paid
- credit_ledger_credits_voided_total: Credits voided
- credit_ledger_overdue_installments: Overdue installments at last sweep

Technical Metrics (for Engineering/SRE):
- credit_ledger_payment_latency_seconds: Payment application latency
- credit_ledger_operations_rejected_total: Rejected ledger operations
- credit_ledger_registry_lookup_latency_seconds: Customer registry latency
- credit_ledger_registry_lookup_failures_total: Customer registry failures
- credit_ledger_http_requests_total: HTTP requests by endpoint/status
"""

import time
from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram, Gauge, REGISTRY, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST


# =============================================================================
# Business Metrics (Collections/Finance dashboards)
# =============================================================================

credits_created = Counter(
    "credit_ledger_credits_created_total",
    "Total number of credits opened",
)

financed_cents = Counter(
    "credit_ledger_financed_cents_total",
    "Total amount financed in cents",
)

payments_applied = Counter(
    "credit_ledger_payments_applied_total",
    "Total number of payments applied",
    ["method"],
)

payment_amount_cents = Counter(
    "credit_ledger_payment_amount_cents_total",
    "Total amount applied to installments in cents",
)

payment_excess_cents = Counter(
    "credit_ledger_payment_excess_cents_total",
    "Total overpayment reported back to the caller in cents",
)

credits_completed = Counter(
    "credit_ledger_credits_completed_total",
    "Total number of credits fully paid",
)

credits_voided = Counter(
    "credit_ledger_credits_voided_total",
    "Total number of credits voided",
)

overdue_installments_gauge = Gauge(
    "credit_ledger_overdue_installments",
    "Overdue installments found by the most recent sweep",
)


# =============================================================================
# Technical Metrics (Engineering/SRE dashboards)
# =============================================================================

payment_latency = Histogram(
    "credit_ledger_payment_latency_seconds",
    "Payment application latency in seconds",
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

operations_rejected = Counter(
    "credit_ledger_operations_rejected_total",
    "Ledger operations rejected by a business rule",
    ["operation", "reason"],
)

registry_lookup_latency = Histogram(
    "credit_ledger_registry_lookup_latency_seconds",
    "Customer registry lookup latency in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
)

registry_lookup_total = Counter(
    "credit_ledger_registry_lookup_total",
    "Total number of customer registry lookups",
    ["status"],  # success, failure
)

registry_lookup_failures = Counter(
    "credit_ledger_registry_lookup_failures_total",
    "Total number of customer registry failures",
    ["error_type"],  # timeout, error, not_found
)

http_requests_total = Counter(
    "credit_ledger_http_requests_total",
    "Total HTTP requests by endpoint and status",
    ["method", "endpoint", "status"],
)

http_request_latency = Histogram(
    "credit_ledger_http_request_latency_seconds",
    "HTTP request latency by endpoint",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)


# =============================================================================
# Helper Functions
# =============================================================================

def record_credit_created(total_cents: int) -> None:
    """Record a newly opened credit."""
    credits_created.inc()
    financed_cents.inc(total_cents)


def record_payment_applied(
    method: str,
    amount_cents: int,
    excess_cents: int,
    completed: bool,
) -> None:
    """Record a payment applied to a credit."""
    payments_applied.labels(method=method).inc()
    payment_amount_cents.inc(amount_cents)
    if excess_cents > 0:
        payment_excess_cents.inc(excess_cents)
    if completed:
        credits_completed.inc()


def record_credit_voided() -> None:
    """Record a voided credit."""
    credits_voided.inc()


def record_operation_rejected(operation: str, reason: str) -> None:
    """Record a ledger operation refused by a business rule."""
    operations_rejected.labels(operation=operation, reason=reason).inc()


def record_overdue_sweep(installment_count: int) -> None:
    """Record the size of the latest overdue sweep."""
    overdue_installments_gauge.set(installment_count)


@contextmanager
def track_payment_latency() -> Generator[None, None, None]:
    """Context manager to track payment application latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        payment_latency.observe(duration)


@contextmanager
def track_registry_lookup_latency() -> Generator[None, None, None]:
    """Context manager to track customer registry latency."""
    start = time.perf_counter()
    try:
        yield
    finally:
        duration = time.perf_counter() - start
        registry_lookup_latency.observe(duration)


def record_registry_lookup_success() -> None:
    """Record a successful registry lookup."""
    registry_lookup_total.labels(status="success").inc()


def record_registry_lookup_failure(error_type: str) -> None:
    """Record a registry lookup failure."""
    registry_lookup_total.labels(status="failure").inc()
    registry_lookup_failures.labels(error_type=error_type).inc()


def record_http_request(method: str, endpoint: str, status: int, duration: float) -> None:
    """Record an HTTP request."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_latency.labels(method=method, endpoint=endpoint).observe(duration)


def get_metrics() -> bytes:
    """Get current metrics in Prometheus format."""
    return generate_latest(REGISTRY)


def get_metrics_content_type() -> str:
    """Get the content type for metrics response."""
    return CONTENT_TYPE_LATEST
