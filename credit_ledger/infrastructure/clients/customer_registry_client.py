"""HTTP implementation of CustomerRegistryClient."""

import asyncio
from typing import Any, Dict

import httpx
import structlog

from credit_ledger.core.config import settings
from credit_ledger.core.metrics import (
    track_registry_lookup_latency,
    record_registry_lookup_success,
    record_registry_lookup_failure,
)
from credit_ledger.domain.entities import CustomerRecord
from credit_ledger.domain.exceptions import (
    CustomerNotFoundError,
    CustomerRegistryError,
    CustomerRegistryTimeoutError,
)
from credit_ledger.domain.interfaces import CustomerRegistryClient

logger = structlog.get_logger(__name__)


class HttpCustomerRegistryClient(CustomerRegistryClient):
    """
    HTTP client for the national identity registry.

    Looks up a document with ``GET {url}?numero=<document>`` using a
    Bearer token, with retry logic and proper error handling.
    """

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout: float | None = None,
        max_retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._base_url = base_url or settings.customer_registry_url
        self._token = token if token is not None else settings.customer_registry_token
        self._timeout = timeout or settings.customer_registry_timeout
        self._max_retries = max_retries
        self._transport = transport

    async def lookup(self, document_number: str) -> CustomerRecord:
        """
        Resolve a document number to a customer record.

        Implements retry logic with exponential backoff. Not-found and
        4xx/5xx answers are not retried.
        """
        params = {"numero": document_number}
        headers = {"Content-Type": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"

        last_exception = None

        for attempt in range(self._max_retries):
            try:
                with track_registry_lookup_latency():
                    async with httpx.AsyncClient(
                        timeout=self._timeout, transport=self._transport
                    ) as client:
                        response = await client.get(
                            self._base_url, params=params, headers=headers
                        )

                        if response.status_code == 404:
                            record_registry_lookup_failure("not_found")
                            raise CustomerNotFoundError(document_number)

                        if response.status_code >= 400:
                            record_registry_lookup_failure("error")
                            raise CustomerRegistryError(
                                message=f"Customer registry error: {response.text}",
                                status_code=response.status_code,
                            )

                        data = response.json()
                        record_registry_lookup_success()
                        return self._parse_record(document_number, data)

            except httpx.TimeoutException:
                record_registry_lookup_failure("timeout")
                last_exception = CustomerRegistryTimeoutError()
                logger.warning(
                    "customer_registry_timeout",
                    document_number=document_number,
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                )
            except (CustomerNotFoundError, CustomerRegistryError):
                raise
            except httpx.HTTPError as e:
                record_registry_lookup_failure("error")
                last_exception = CustomerRegistryError(
                    message=f"Unexpected error: {str(e)}",
                )
                logger.error(
                    "customer_registry_error",
                    document_number=document_number,
                    attempt=attempt + 1,
                    error=str(e),
                )

            # Exponential backoff
            if attempt < self._max_retries - 1:
                await asyncio.sleep(2**attempt * 0.1)

        raise last_exception or CustomerRegistryError("Failed to look up customer")

    def _parse_record(self, document_number: str, data: Dict[str, Any]) -> CustomerRecord:
        """Parse a registry answer for either a person or a business."""
        number = (
            data.get("document_number")
            or data.get("numero_documento")
            or document_number
        )

        full_name = data.get("full_name") or data.get("razon_social")
        if not full_name:
            parts = [
                data.get("first_name", ""),
                data.get("first_last_name", ""),
                data.get("second_last_name", ""),
            ]
            full_name = " ".join(part for part in parts if part)

        return CustomerRecord.from_document(str(number), full_name=full_name or "")


class PassthroughCustomerRegistryClient(CustomerRegistryClient):
    """
    Registry stand-in used when lookups are disabled.

    Attaches the document number as-is without contacting anything.
    """

    async def lookup(self, document_number: str) -> CustomerRecord:
        return CustomerRecord.from_document(document_number)
