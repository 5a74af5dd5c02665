"""Customer record returned by the identity registry."""

from dataclasses import dataclass
from enum import Enum


class DocumentType(str, Enum):
    """Kind of identity document."""

    NATIONAL_ID = "national_id"  # 8-digit personal ID
    TAX_ID = "tax_id"  # 11-digit business tax number


@dataclass(frozen=True)
class CustomerRecord:
    """
    Immutable customer reference attached to a credit.

    Attributes:
        document_number: National ID or tax ID as issued
        document_type: Which kind of document it is
        full_name: Display name (person name or business name)
    """

    document_number: str
    document_type: DocumentType
    full_name: str = ""

    @classmethod
    def from_document(cls, document_number: str, full_name: str = "") -> "CustomerRecord":
        """Build a record, inferring the document type from its length."""
        document_type = (
            DocumentType.TAX_ID if len(document_number) == 11 else DocumentType.NATIONAL_ID
        )
        return cls(
            document_number=document_number,
            document_type=document_type,
            full_name=full_name,
        )
