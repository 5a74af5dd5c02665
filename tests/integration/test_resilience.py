"""
Integration tests for resilience and error handling.

These tests verify:
1. Customer registry failures return 503 and nothing is persisted
2. Registry lookups are skipped when they are disabled
3. Unexpected errors are answered with a structured 500
"""

import pytest
from httpx import AsyncClient, ASGITransport

from credit_ledger.main import app
from credit_ledger.core.dependencies import (
    get_credit_repository,
    get_payment_repository,
    get_registry_client,
)
from credit_ledger.infrastructure.database import get_db_session
from credit_ledger.infrastructure.clients import PassthroughCustomerRegistryClient
from credit_ledger.infrastructure.repositories import (
    PostgresCreditRepository,
    PostgresPaymentRepository,
)
from tests.integration.conftest import MockCustomerRegistryClient


# =============================================================================
# Customer Registry Failure Tests
# =============================================================================

class TestRegistryFailure:
    """Tests for handling customer registry failures."""

    @pytest.mark.asyncio
    async def test_registry_error_returns_503(
        self,
        client_with_failing_registry: AsyncClient,
        credit_request: dict,
        user_headers: dict,
    ):
        response = await client_with_failing_registry.post(
            "/v1/credits",
            json=credit_request,
            headers=user_headers,
        )

        assert response.status_code == 503
        data = response.json()
        assert data["error"] == "CUSTOMER_REGISTRY_ERROR"
        assert "request_id" in data

    @pytest.mark.asyncio
    async def test_registry_timeout_returns_503(
        self,
        client_with_slow_registry: AsyncClient,
        credit_request: dict,
        user_headers: dict,
    ):
        response = await client_with_slow_registry.post(
            "/v1/credits",
            json=credit_request,
            headers=user_headers,
        )

        assert response.status_code == 503
        assert response.json()["error"] == "CUSTOMER_REGISTRY_TIMEOUT"

    @pytest.mark.asyncio
    async def test_failed_lookup_persists_nothing(
        self,
        client_with_failing_registry: AsyncClient,
        credit_request: dict,
        user_headers: dict,
        failing_registry_client: MockCustomerRegistryClient,
    ):
        await client_with_failing_registry.post(
            "/v1/credits",
            json=credit_request,
            headers=user_headers,
        )

        response = await client_with_failing_registry.get("/v1/credits")

        assert failing_registry_client.call_count == 1
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_reads_do_not_depend_on_registry(
        self,
        client_with_failing_registry: AsyncClient,
    ):
        response = await client_with_failing_registry.get(
            "/v1/overdue/summary",
            params={"as_of": "2025-03-01"},
        )

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_duplicate_sale_rejected_before_lookup(
        self,
        client: AsyncClient,
        credit_request: dict,
        user_headers: dict,
        mock_registry_client: MockCustomerRegistryClient,
    ):
        await client.post("/v1/credits", json=credit_request, headers=user_headers)
        await client.post("/v1/credits", json=credit_request, headers=user_headers)

        assert mock_registry_client.call_count == 1


# =============================================================================
# Disabled Registry Tests
# =============================================================================

class TestPassthroughRegistry:
    """Tests for credits opened with registry lookups disabled."""

    @pytest.mark.asyncio
    async def test_document_accepted_without_lookup(
        self,
        test_session,
        credit_request: dict,
        user_headers: dict,
    ):
        async def override_get_credit_repository():
            return PostgresCreditRepository(test_session)

        async def override_get_payment_repository():
            return PostgresPaymentRepository(test_session)

        app.dependency_overrides[get_credit_repository] = override_get_credit_repository
        app.dependency_overrides[get_payment_repository] = override_get_payment_repository
        app.dependency_overrides[get_registry_client] = PassthroughCustomerRegistryClient

        credit_request["customer_document"] = "99999999"

        try:
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                response = await ac.post("/v1/credits", json=credit_request, headers=user_headers)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 201
        data = response.json()
        assert data["customer_document"] == "99999999"
        assert data["customer_name"] is None


# =============================================================================
# Unexpected Error Tests
# =============================================================================

class TestUnexpectedErrors:
    """Tests for errors outside the domain."""

    @pytest.mark.asyncio
    async def test_unhandled_error_returns_500(
        self,
        test_session,
        credit_request: dict,
        user_headers: dict,
    ):
        class BrokenRegistry(MockCustomerRegistryClient):
            async def lookup(self, document_number: str):
                raise RuntimeError("registry client bug")

        app.dependency_overrides[get_credit_repository] = lambda: PostgresCreditRepository(
            test_session
        )
        app.dependency_overrides[get_payment_repository] = lambda: PostgresPaymentRepository(
            test_session
        )
        app.dependency_overrides[get_registry_client] = lambda: BrokenRegistry()

        try:
            transport = ASGITransport(app=app, raise_app_exceptions=False)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                response = await ac.post("/v1/credits", json=credit_request, headers=user_headers)
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["error"] == "INTERNAL_ERROR"


# =============================================================================
# Health Check Tests
# =============================================================================

class TestHealth:
    """Tests for GET /health."""

    @pytest.mark.asyncio
    async def test_health_does_not_touch_dependencies(
        self,
        client_with_failing_registry: AsyncClient,
    ):
        response = await client_with_failing_registry.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert "X-Request-ID" in response.headers

    @pytest.mark.asyncio
    async def test_readiness_reports_database_up(
        self,
        test_session,
        client: AsyncClient,
    ):
        async def override_get_db_session():
            yield test_session

        app.dependency_overrides[get_db_session] = override_get_db_session

        response = await client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ready"
        assert data["database"] == "up"
        assert data["customer_registry"] in ("enabled", "passthrough")

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, client: AsyncClient):
        response = await client.get("/health", headers={"X-Request-ID": "req-123"})

        assert response.headers["X-Request-ID"] == "req-123"

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, client: AsyncClient):
        response = await client.get(
            "/v1/credits/00000000-0000-0000-0000-000000000000",
            headers={"X-Request-ID": "req-456"},
        )

        assert response.status_code == 404
        assert response.json()["request_id"] == "req-456"
