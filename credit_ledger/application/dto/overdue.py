"""Data transfer objects for due-date sweeps."""

from dataclasses import dataclass
from datetime import date
from typing import List

from credit_ledger.service.ledger import OverdueSummary

from .credit import InstallmentDTO


@dataclass(frozen=True)
class InstallmentListResponse:
    """Installments matched by a sweep as of a reference date."""

    as_of: str
    installments: List[InstallmentDTO]

    @classmethod
    def from_entities(cls, installments: list, as_of: date) -> "InstallmentListResponse":
        return cls(
            as_of=as_of.isoformat(),
            installments=[InstallmentDTO.from_entity(inst, as_of) for inst in installments],
        )

    @classmethod
    def from_views(cls, views: list, as_of: date) -> "InstallmentListResponse":
        return cls(
            as_of=as_of.isoformat(),
            installments=[InstallmentDTO.from_view(view) for view in views],
        )


@dataclass(frozen=True)
class OverdueSummaryResponse:
    """Totals of overdue installments."""

    as_of: str
    installment_count: int
    credit_count: int
    pending_cents: int

    @classmethod
    def from_summary(cls, summary: OverdueSummary) -> "OverdueSummaryResponse":
        return cls(
            as_of=summary.as_of.isoformat(),
            installment_count=summary.installment_count,
            credit_count=summary.credit_count,
            pending_cents=summary.pending_cents,
        )
