"""Repository interfaces for data persistence."""

from abc import ABC, abstractmethod
from datetime import date
from typing import List, Optional
from uuid import UUID

from credit_ledger.domain.entities import Credit, CreditState, Installment, Payment


class CreditRepository(ABC):
    """
    Abstract repository for Credit persistence.

    A credit is always loaded and saved together with its installments.
    Implementations may use PostgreSQL, in-memory storage, etc.
    """

    @abstractmethod
    async def add(self, credit: Credit) -> Credit:
        """
        Persist a new credit with its installments.

        Args:
            credit: The credit to save

        Returns:
            The saved credit
        """
        ...

    @abstractmethod
    async def update(self, credit: Credit) -> Credit:
        """
        Persist the mutated aggregate and installment amounts of a credit.

        Args:
            credit: The credit whose state changed

        Returns:
            The updated credit
        """
        ...

    @abstractmethod
    async def get_by_id(self, credit_id: UUID, for_update: bool = False) -> Optional[Credit]:
        """
        Retrieve a credit by ID.

        Args:
            credit_id: The credit's unique identifier
            for_update: Lock the credit and installment rows until the
                end of the transaction

        Returns:
            The credit if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_by_sale_reference(self, sale_reference: str) -> Optional[Credit]:
        """Retrieve the credit financing a given sale."""
        ...

    @abstractmethod
    async def list_credits(
        self,
        state: Optional[CreditState] = None,
        customer_document: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[Credit]:
        """
        List credits, newest first.

        Args:
            state: Only credits in this state
            customer_document: Only credits of this customer
            limit: Maximum number of credits to return
            offset: Number of credits to skip
        """
        ...

    @abstractmethod
    async def overdue_installments(
        self,
        as_of: date,
        customer_document: Optional[str] = None,
    ) -> List[Installment]:
        """
        Installments of active credits with due date before ``as_of``
        and a pending balance, ordered by due date ascending.
        """
        ...

    @abstractmethod
    async def installments_due_between(self, start: date, end: date) -> List[Installment]:
        """Pending installments of active credits due in ``[start, end]``."""
        ...

    @abstractmethod
    async def credits_with_overdue(self, as_of: date) -> List[Credit]:
        """Active credits having at least one overdue installment."""
        ...

    @abstractmethod
    async def total_outstanding(self, customer_document: Optional[str] = None) -> int:
        """Sum of outstanding balances across active credits."""
        ...

    @abstractmethod
    async def count_by_state(self, state: CreditState) -> int:
        """Number of credits in a given state."""
        ...


class PaymentRepository(ABC):
    """
    Abstract repository for Payment persistence.

    Payments are saved together with their installment allocations.
    """

    @abstractmethod
    async def add(self, payment: Payment) -> Payment:
        """
        Persist a payment and its allocations.

        Args:
            payment: The payment to save

        Returns:
            The saved payment
        """
        ...

    @abstractmethod
    async def get_by_id(self, payment_id: UUID) -> Optional[Payment]:
        """Retrieve a payment by ID."""
        ...

    @abstractmethod
    async def get_by_idempotency_key(self, credit_id: UUID, key: str) -> Optional[Payment]:
        """
        Retrieve a payment previously recorded under an idempotency key.

        Args:
            credit_id: The credit the payment was applied to
            key: Caller-supplied deduplication key

        Returns:
            The payment if the key was seen before, None otherwise
        """
        ...

    @abstractmethod
    async def list_by_credit(self, credit_id: UUID) -> List[Payment]:
        """Payments applied to a credit, newest first."""
        ...
