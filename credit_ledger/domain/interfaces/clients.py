"""External client interfaces."""

from abc import ABC, abstractmethod

from credit_ledger.domain.entities import CustomerRecord


class CustomerRegistryClient(ABC):
    """
    Abstract client for the national identity registry.

    Resolves a national ID or tax ID to a customer record so a credit
    can carry a verified customer reference.
    """

    @abstractmethod
    async def lookup(self, document_number: str) -> CustomerRecord:
        """
        Look up a customer by document number.

        Args:
            document_number: National ID (8 digits) or tax ID (11 digits)

        Returns:
            The customer record

        Raises:
            CustomerNotFoundError: If the registry does not know the document
            CustomerRegistryError: If the registry returns an error
            CustomerRegistryTimeoutError: If the request times out
        """
        ...
