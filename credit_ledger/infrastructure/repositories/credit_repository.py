"""PostgreSQL implementation of CreditRepository."""

from datetime import date
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from credit_ledger.domain.entities import Credit, CreditState, Installment
from credit_ledger.domain.exceptions import CreditNotFoundError
from credit_ledger.domain.interfaces import CreditRepository
from credit_ledger.infrastructure.database.models import CreditModel, InstallmentModel


class PostgresCreditRepository(CreditRepository):
    """
    PostgreSQL implementation of the Credit repository.

    Credits are always read with their installments eagerly loaded.
    Sweep queries only consider credits in the ``active`` state.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    async def add(self, credit: Credit) -> Credit:
        """Persist a new credit and its schedule."""
        model = CreditModel(
            id=str(credit.id),
            customer_document=credit.customer_document,
            customer_name=credit.customer_name,
            sale_reference=credit.sale_reference,
            total_cents=credit.total_cents,
            outstanding_cents=credit.outstanding_cents,
            installment_count=credit.installment_count,
            installment_cents=credit.installment_cents,
            start_date=credit.start_date,
            state=credit.state.value,
            created_by=credit.created_by,
            created_at=credit.created_at,
            updated_at=credit.updated_at,
        )

        for installment in credit.installments:
            model.installments.append(
                InstallmentModel(
                    id=str(installment.id),
                    credit_id=str(credit.id),
                    number=installment.number,
                    due_date=installment.due_date,
                    amount_cents=installment.amount_cents,
                    paid_cents=installment.paid_cents,
                    pending_cents=installment.pending_cents,
                )
            )

        self._session.add(model)
        await self._session.flush()

        return credit

    async def update(self, credit: Credit) -> Credit:
        """Write back the aggregate fields and installment amounts."""
        model = await self._load(credit.id)
        if model is None:
            raise CreditNotFoundError(str(credit.id))

        model.outstanding_cents = credit.outstanding_cents
        model.state = credit.state.value
        model.voided_at = credit.voided_at
        model.voided_by = credit.voided_by
        model.void_reason = credit.void_reason
        model.updated_at = credit.updated_at

        by_id = {str(inst.id): inst for inst in credit.installments}
        for inst_model in model.installments:
            installment = by_id[inst_model.id]
            inst_model.paid_cents = installment.paid_cents
            inst_model.pending_cents = installment.pending_cents

        await self._session.flush()

        return credit

    async def get_by_id(self, credit_id: UUID, for_update: bool = False) -> Optional[Credit]:
        """Retrieve a credit by ID, optionally locking its row."""
        model = await self._load(credit_id, for_update=for_update)
        if model is None:
            return None

        return self._to_entity(model)

    async def get_by_sale_reference(self, sale_reference: str) -> Optional[Credit]:
        stmt = (
            select(CreditModel)
            .options(selectinload(CreditModel.installments))
            .where(CreditModel.sale_reference == sale_reference)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            return None

        return self._to_entity(model)

    async def list_credits(
        self,
        state: Optional[CreditState] = None,
        customer_document: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Credit]:
        stmt = select(CreditModel).options(selectinload(CreditModel.installments))
        if state is not None:
            stmt = stmt.where(CreditModel.state == state.value)
        if customer_document is not None:
            stmt = stmt.where(CreditModel.customer_document == customer_document)
        stmt = stmt.order_by(CreditModel.created_at.desc()).limit(limit).offset(offset)

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def overdue_installments(
        self,
        as_of: date,
        customer_document: Optional[str] = None,
    ) -> List[Installment]:
        stmt = (
            select(InstallmentModel)
            .join(CreditModel, InstallmentModel.credit_id == CreditModel.id)
            .where(
                CreditModel.state == CreditState.ACTIVE.value,
                InstallmentModel.due_date < as_of,
                InstallmentModel.pending_cents > 0,
            )
        )
        if customer_document is not None:
            stmt = stmt.where(CreditModel.customer_document == customer_document)
        stmt = stmt.order_by(
            InstallmentModel.due_date,
            InstallmentModel.credit_id,
            InstallmentModel.number,
        )

        result = await self._session.execute(stmt)
        return [self._to_installment(model) for model in result.scalars().all()]

    async def installments_due_between(self, start: date, end: date) -> List[Installment]:
        stmt = (
            select(InstallmentModel)
            .join(CreditModel, InstallmentModel.credit_id == CreditModel.id)
            .where(
                CreditModel.state == CreditState.ACTIVE.value,
                InstallmentModel.due_date >= start,
                InstallmentModel.due_date <= end,
                InstallmentModel.pending_cents > 0,
            )
            .order_by(
                InstallmentModel.due_date,
                InstallmentModel.credit_id,
                InstallmentModel.number,
            )
        )

        result = await self._session.execute(stmt)
        return [self._to_installment(model) for model in result.scalars().all()]

    async def credits_with_overdue(self, as_of: date) -> List[Credit]:
        stmt = (
            select(CreditModel)
            .options(selectinload(CreditModel.installments))
            .where(
                CreditModel.state == CreditState.ACTIVE.value,
                CreditModel.installments.any(
                    and_(
                        InstallmentModel.due_date < as_of,
                        InstallmentModel.pending_cents > 0,
                    )
                ),
            )
            .order_by(CreditModel.created_at)
        )

        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars().all()]

    async def total_outstanding(self, customer_document: Optional[str] = None) -> int:
        stmt = select(func.coalesce(func.sum(CreditModel.outstanding_cents), 0)).where(
            CreditModel.state == CreditState.ACTIVE.value
        )
        if customer_document is not None:
            stmt = stmt.where(CreditModel.customer_document == customer_document)

        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def count_by_state(self, state: CreditState) -> int:
        stmt = select(func.count()).select_from(CreditModel).where(
            CreditModel.state == state.value
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def _load(self, credit_id: UUID, for_update: bool = False) -> Optional[CreditModel]:
        stmt = (
            select(CreditModel)
            .options(selectinload(CreditModel.installments))
            .where(CreditModel.id == str(credit_id))
        )
        if for_update:
            stmt = stmt.with_for_update()

        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_installment(self, model: InstallmentModel) -> Installment:
        return Installment(
            id=UUID(model.id),
            credit_id=UUID(model.credit_id),
            number=model.number,
            due_date=model.due_date,
            amount_cents=model.amount_cents,
            paid_cents=model.paid_cents,
            pending_cents=model.pending_cents,
        )

    def _to_entity(self, model: CreditModel) -> Credit:
        """Convert database model to domain entity."""
        return Credit(
            id=UUID(model.id),
            customer_document=model.customer_document,
            customer_name=model.customer_name,
            sale_reference=model.sale_reference,
            total_cents=model.total_cents,
            outstanding_cents=model.outstanding_cents,
            start_date=model.start_date,
            state=CreditState(model.state),
            installments=[self._to_installment(inst) for inst in model.installments],
            created_by=model.created_by,
            voided_at=model.voided_at,
            voided_by=model.voided_by,
            void_reason=model.void_reason,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
