"""
Ledger Settings for the credit installment engine.

Environment variables use the LEDGER_ prefix:
    LEDGER_MAX_INSTALLMENTS=24
    LEDGER_DUE_SOON_DAYS=7
    LEDGER_OVERPAYMENT_POLICY=reject

Usage:
    from credit_ledger.service.ledger.settings import ledger_settings

    # Or create custom settings for testing
    custom = LedgerSettings(overpayment_policy="reject")
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerSettings(BaseSettings):
    """
    Configurable parameters for schedules and payment distribution.

    All monetary values are in cents.
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Schedule ===
    max_installments: int = Field(
        default=24,
        ge=1,
        description="Maximum number of installments a credit sale may be split into",
    )
    default_interval_days: int = Field(
        default=30,
        ge=1,
        description="Days between installments when a fixed interval is requested without one",
    )

    # === Reporting ===
    due_soon_days: int = Field(
        default=7,
        ge=0,
        description="Window, in days, for installments considered about to fall due",
    )

    # === Payments ===
    overpayment_policy: Literal["report", "reject"] = Field(
        default="report",
        description=(
            "'report' returns any amount above the outstanding balance as excess; "
            "'reject' refuses payments larger than the outstanding balance"
        ),
    )


@lru_cache
def get_ledger_settings() -> LedgerSettings:
    """Get cached ledger settings instance."""
    return LedgerSettings()


ledger_settings = get_ledger_settings()
