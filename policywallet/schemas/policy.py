"""
Pydantic Schemas for Policies, Coverage Lines and Vault Documents.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import uuid4

from pydantic import Field

from policywallet.core.enums import CoverageType, DocumentCategory, PaymentFrequency
from policywallet.schemas.common import CalendarDay, Money, WalletModel


def _new_id() -> str:
    return uuid4().hex


class PolicyCoverage(WalletModel):
    """One coverage line; owned by its policy."""

    type: CoverageType = Field(..., description="Coverage type")
    sum_assured: Money = Field(default=Decimal("0"), description="Sum assured")
    room_rate: Optional[Money] = Field(
        None, description="Daily room rate (health coverage only)"
    )


class PolicyDocument(WalletModel):
    """Metadata of a file kept in the vault. File content is stored elsewhere."""

    id: str = Field(default_factory=_new_id)
    name: str = Field(..., min_length=1, max_length=255)
    category: DocumentCategory = Field(default=DocumentCategory.OTHER)
    mime_type: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)
    upload_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    size: Optional[int] = Field(None, ge=0, description="File size in bytes")


class Policy(WalletModel):
    """
    An insurance contract.

    ``due_date`` is the next renewal/payment day. ``status`` is whatever the
    client last stored and is never used by business rules; the lifecycle is
    always recomputed from ``due_date``.
    """

    id: str = Field(default_factory=_new_id)
    company: str = Field(..., description="Issuing company")
    plan_name: str = Field(..., description="Plan name")
    coverages: list[PolicyCoverage] = Field(..., min_length=1)
    premium_amount: Money = Field(default=Decimal("0"), description="Premium per payment")
    frequency: PaymentFrequency = Field(default=PaymentFrequency.YEARLY)
    due_date: CalendarDay = Field(..., description="Next due date")
    status: Optional[str] = Field(None, description="Stored status (not authoritative)")
    documents: list[PolicyDocument] = Field(default_factory=list)
    document_url: Optional[str] = Field(None)

    @property
    def annual_premium(self) -> Decimal:
        """Premium normalized to a yearly figure."""
        return self.premium_amount * self.frequency.annual_factor

    def has_coverage(self, *types: CoverageType) -> bool:
        """True if any coverage line is one of ``types``."""
        return any(c.type in types for c in self.coverages)
