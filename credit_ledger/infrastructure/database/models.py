"""SQLAlchemy ORM models for ledger entities."""

from datetime import datetime, date
from uuid import uuid4

from sqlalchemy import (
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


class CreditModel(Base):
    """Persisted credit (financed sale) record."""

    __tablename__ = "credits"
    __table_args__ = (
        CheckConstraint("outstanding_cents >= 0", name="ck_credits_outstanding_non_negative"),
        CheckConstraint("total_cents > 0", name="ck_credits_total_positive"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    customer_document: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    customer_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    sale_reference: Mapped[str | None] = mapped_column(
        String(50),
        nullable=True,
        unique=True,
    )
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    outstanding_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    installment_count: Mapped[int] = mapped_column(Integer, nullable=False)
    installment_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    state: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="active",
        index=True,
    )
    created_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    voided_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    voided_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    void_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
    )

    installments: Mapped[list["InstallmentModel"]] = relationship(
        "InstallmentModel",
        back_populates="credit",
        cascade="all, delete-orphan",
        order_by="InstallmentModel.number",
    )
    payments: Mapped[list["PaymentModel"]] = relationship(
        "PaymentModel",
        back_populates="credit",
    )


class InstallmentModel(Base):
    """Persisted installment record within a credit."""

    __tablename__ = "installments"
    __table_args__ = (
        UniqueConstraint("credit_id", "number", name="uq_installments_credit_number"),
        CheckConstraint(
            "pending_cents >= 0 AND pending_cents <= amount_cents",
            name="ck_installments_pending_range",
        ),
        CheckConstraint("paid_cents <= amount_cents", name="ck_installments_paid_range"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    credit_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("credits.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    number: Mapped[int] = mapped_column(Integer, nullable=False)
    due_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    paid_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    pending_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    credit: Mapped["CreditModel"] = relationship(
        "CreditModel",
        back_populates="installments",
    )


class PaymentModel(Base):
    """Persisted payment received against a credit."""

    __tablename__ = "payments"
    __table_args__ = (
        UniqueConstraint(
            "credit_id",
            "idempotency_key",
            name="uq_payments_credit_idempotency_key",
        ),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    credit_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("credits.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    excess_cents: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    method: Mapped[str] = mapped_column(String(20), nullable=False)
    paid_on: Mapped[date] = mapped_column(Date, nullable=False)
    recorded_by: Mapped[str] = mapped_column(String(255), nullable=False)
    reference: Mapped[str | None] = mapped_column(String(100), nullable=True)
    notes: Mapped[str | None] = mapped_column(String(255), nullable=True)
    idempotency_key: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=datetime.utcnow,
    )

    credit: Mapped["CreditModel"] = relationship(
        "CreditModel",
        back_populates="payments",
    )
    allocations: Mapped[list["PaymentAllocationModel"]] = relationship(
        "PaymentAllocationModel",
        back_populates="payment",
        cascade="all, delete-orphan",
        order_by="PaymentAllocationModel.installment_number",
    )


class PaymentAllocationModel(Base):
    """Portion of a payment applied to one installment."""

    __tablename__ = "payment_allocations"
    __table_args__ = (
        CheckConstraint("amount_cents > 0", name="ck_payment_allocations_amount_positive"),
    )

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        primary_key=True,
        default=lambda: str(uuid4()),
    )
    payment_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("payments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    installment_id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False),
        ForeignKey("installments.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    installment_number: Mapped[int] = mapped_column(Integer, nullable=False)
    amount_cents: Mapped[int] = mapped_column(Integer, nullable=False)

    payment: Mapped["PaymentModel"] = relationship(
        "PaymentModel",
        back_populates="allocations",
    )
