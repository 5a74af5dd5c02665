"""PostgreSQL repository implementation for payments."""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from credit_ledger.domain.entities import Payment, PaymentAllocation, PaymentMethod
from credit_ledger.domain.interfaces import PaymentRepository
from credit_ledger.infrastructure.database.models import PaymentAllocationModel, PaymentModel


class PostgresPaymentRepository(PaymentRepository):
    """PostgreSQL-backed payment repository."""

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, payment: Payment) -> Payment:
        model = PaymentModel(
            id=str(payment.id),
            credit_id=str(payment.credit_id),
            amount_cents=payment.amount_cents,
            excess_cents=payment.excess_cents,
            method=payment.method.value,
            paid_on=payment.paid_on,
            recorded_by=payment.recorded_by,
            reference=payment.reference,
            notes=payment.notes,
            idempotency_key=payment.idempotency_key,
            created_at=payment.created_at,
        )

        for allocation in payment.allocations:
            model.allocations.append(
                PaymentAllocationModel(
                    id=str(allocation.id),
                    payment_id=str(payment.id),
                    installment_id=str(allocation.installment_id),
                    installment_number=allocation.installment_number,
                    amount_cents=allocation.amount_cents,
                )
            )

        self._session.add(model)
        await self._session.flush()

        return payment

    async def get_by_id(self, payment_id: UUID) -> Optional[Payment]:
        stmt = (
            select(PaymentModel)
            .options(selectinload(PaymentModel.allocations))
            .where(PaymentModel.id == str(payment_id))
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def get_by_idempotency_key(self, credit_id: UUID, key: str) -> Optional[Payment]:
        stmt = (
            select(PaymentModel)
            .options(selectinload(PaymentModel.allocations))
            .where(
                PaymentModel.credit_id == str(credit_id),
                PaymentModel.idempotency_key == key,
            )
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def list_by_credit(self, credit_id: UUID) -> List[Payment]:
        stmt = (
            select(PaymentModel)
            .options(selectinload(PaymentModel.allocations))
            .where(PaymentModel.credit_id == str(credit_id))
            .order_by(PaymentModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        models = result.scalars().all()

        return [self._to_entity(model) for model in models]

    def _to_entity(self, model: PaymentModel) -> Payment:
        allocations = [
            PaymentAllocation(
                id=UUID(alloc.id),
                payment_id=UUID(alloc.payment_id),
                installment_id=UUID(alloc.installment_id),
                installment_number=alloc.installment_number,
                amount_cents=alloc.amount_cents,
            )
            for alloc in model.allocations
        ]

        return Payment(
            id=UUID(model.id),
            credit_id=UUID(model.credit_id),
            amount_cents=model.amount_cents,
            excess_cents=model.excess_cents,
            method=PaymentMethod(model.method),
            paid_on=model.paid_on,
            recorded_by=model.recorded_by,
            reference=model.reference,
            notes=model.notes,
            idempotency_key=model.idempotency_key,
            allocations=allocations,
            created_at=model.created_at,
        )
