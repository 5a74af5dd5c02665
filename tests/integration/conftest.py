"""
Fixtures for integration tests.

Provides:
- Test client for FastAPI app
- Mock customer registry client
- In-memory database for testing
"""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from credit_ledger.main import app
from credit_ledger.core.dependencies import (
    get_credit_repository,
    get_payment_repository,
    get_registry_client,
)
from credit_ledger.domain.entities import CustomerRecord
from credit_ledger.domain.exceptions import (
    CustomerNotFoundError,
    CustomerRegistryError,
    CustomerRegistryTimeoutError,
)
from credit_ledger.domain.interfaces import CustomerRegistryClient
from credit_ledger.infrastructure.database import Base
from credit_ledger.infrastructure.repositories import (
    PostgresCreditRepository,
    PostgresPaymentRepository,
)


# =============================================================================
# Mock Clients
# =============================================================================

KNOWN_CUSTOMERS = {
    "45678912": "ANA QUISPE ROJAS",
    "70112233": "LUIS MAMANI CCORI",
    "20123456789": "COMERCIAL ANDINA SAC",
}


class MockCustomerRegistryClient(CustomerRegistryClient):
    """Mock registry that resolves a fixed set of documents."""

    def __init__(self, fail_mode: bool = False, timeout: bool = False):
        self.fail_mode = fail_mode
        self.timeout = timeout
        self.call_count = 0

    async def lookup(self, document_number: str) -> CustomerRecord:
        self.call_count += 1

        if self.timeout:
            raise CustomerRegistryTimeoutError()

        if self.fail_mode:
            raise CustomerRegistryError(
                message="Customer registry unavailable",
                status_code=500,
            )

        if document_number not in KNOWN_CUSTOMERS:
            raise CustomerNotFoundError(document_number)

        return CustomerRecord.from_document(
            document_number,
            full_name=KNOWN_CUSTOMERS[document_number],
        )


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest_asyncio.fixture
async def test_engine():
    """Create an in-memory SQLite async engine for testing."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session."""
    async_session = async_sessionmaker(
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


# =============================================================================
# Mock Client Fixtures
# =============================================================================

@pytest.fixture
def mock_registry_client() -> MockCustomerRegistryClient:
    """Create a mock registry client."""
    return MockCustomerRegistryClient()


@pytest.fixture
def failing_registry_client() -> MockCustomerRegistryClient:
    """Create a registry client that always fails."""
    return MockCustomerRegistryClient(fail_mode=True)


@pytest.fixture
def timing_out_registry_client() -> MockCustomerRegistryClient:
    """Create a registry client that always times out."""
    return MockCustomerRegistryClient(timeout=True)


# =============================================================================
# App Client Fixtures
# =============================================================================

def _override_dependencies(
    session: AsyncSession,
    registry_client: CustomerRegistryClient,
) -> None:
    async def override_get_credit_repository():
        return PostgresCreditRepository(session)

    async def override_get_payment_repository():
        return PostgresPaymentRepository(session)

    def override_get_registry_client():
        return registry_client

    app.dependency_overrides[get_credit_repository] = override_get_credit_repository
    app.dependency_overrides[get_payment_repository] = override_get_payment_repository
    app.dependency_overrides[get_registry_client] = override_get_registry_client


@pytest_asyncio.fixture
async def client(
    test_session: AsyncSession,
    mock_registry_client: MockCustomerRegistryClient,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a test client with mocked dependencies.

    This client:
    - Uses an in-memory SQLite database
    - Mocks the customer registry with a fixed set of customers
    """
    _override_dependencies(test_session, mock_registry_client)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client_with_failing_registry(
    test_session: AsyncSession,
    failing_registry_client: MockCustomerRegistryClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client where the customer registry always fails."""
    _override_dependencies(test_session, failing_registry_client)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client_with_slow_registry(
    test_session: AsyncSession,
    timing_out_registry_client: MockCustomerRegistryClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client where the customer registry always times out."""
    _override_dependencies(test_session, timing_out_registry_client)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def user_headers() -> dict:
    """Headers identifying the acting user."""
    return {"X-User": "cashier01"}


@pytest.fixture
def credit_request() -> dict:
    """Request body for a 1000-cent sale split in three monthly installments."""
    return {
        "customer_document": "45678912",
        "total_cents": 1000,
        "installment_count": 3,
        "start_date": "2025-01-15",
        "sale_reference": "V-000001",
    }


async def create_credit(client: AsyncClient, body: dict, headers: dict) -> dict:
    """Open a credit and return its JSON body."""
    response = await client.post("/v1/credits", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


async def pay(
    client: AsyncClient,
    credit_id: str,
    amount_cents: int,
    headers: dict,
    method: str = "cash",
    paid_on: str = "2025-02-10",
):
    """Apply a payment and return the raw response."""
    return await client.post(
        f"/v1/credits/{credit_id}/payments",
        json={"amount_cents": amount_cents, "method": method, "paid_on": paid_on},
        headers=headers,
    )
