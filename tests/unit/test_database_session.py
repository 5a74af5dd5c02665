"""
Unit tests for the database session manager.

Uses a throwaway SQLite file so commits are visible across sessions.
"""

from datetime import date

import pytest
from sqlalchemy import func, select

from credit_ledger.infrastructure.database import CreditModel, DatabaseSessionManager
from credit_ledger.infrastructure.database.connection import normalize_database_url


def make_credit_model(sale_reference: str) -> CreditModel:
    return CreditModel(
        customer_document="45678912",
        sale_reference=sale_reference,
        total_cents=1000,
        outstanding_cents=1000,
        installment_count=3,
        installment_cents=333,
        start_date=date(2025, 1, 15),
    )


class TestNormalizeDatabaseUrl:
    """Tests for driver selection from plain URLs."""

    def test_postgres_scheme(self):
        assert (
            normalize_database_url("postgres://u:p@db/ledger")
            == "postgresql+asyncpg://u:p@db/ledger"
        )

    def test_postgresql_scheme(self):
        assert (
            normalize_database_url("postgresql://u:p@db/ledger")
            == "postgresql+asyncpg://u:p@db/ledger"
        )

    def test_sqlite_scheme(self):
        assert normalize_database_url("sqlite:///ledger.db") == "sqlite+aiosqlite:///ledger.db"

    def test_explicit_driver_kept(self):
        url = "postgresql+asyncpg://u:p@db/ledger"
        assert normalize_database_url(url) == url


class TestDatabaseSessionManager:
    """Tests for the unit-of-work scope."""

    @pytest.mark.asyncio
    async def test_session_before_init_raises(self):
        manager = DatabaseSessionManager()

        assert manager.is_initialized is False
        with pytest.raises(RuntimeError):
            async with manager.session():
                pass

    @pytest.mark.asyncio
    async def test_commit_on_success_and_rollback_on_error(self, tmp_path):
        manager = DatabaseSessionManager()
        manager.init(f"sqlite:///{tmp_path / 'ledger.db'}")
        await manager.create_all()

        try:
            async with manager.session() as session:
                session.add(make_credit_model("V-1"))

            with pytest.raises(ValueError):
                async with manager.session() as session:
                    session.add(make_credit_model("V-2"))
                    await session.flush()
                    raise ValueError("abort")

            async with manager.session() as session:
                count = await session.scalar(select(func.count()).select_from(CreditModel))
                references = (await session.scalars(select(CreditModel.sale_reference))).all()
        finally:
            await manager.close()

        assert count == 1
        assert references == ["V-1"]
        assert manager.is_initialized is False
