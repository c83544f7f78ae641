"""
Pydantic Schemas for Portfolio Rollups and Stored Portfolios.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from policywallet.core.enums import CoverageType, PaymentFrequency, PolicyStatus
from policywallet.schemas.common import Amount, Money, WalletModel
from policywallet.schemas.policy import Policy
from policywallet.schemas.profile import UserProfile

_ZERO = Decimal("0")


class CoverageShare(WalletModel):
    """Share of one coverage type in the distribution."""

    coverage_type: CoverageType
    sum_assured: Money
    percentage: Amount = Field(..., description="Share of the all-types total, 0-100")


class RenewalEntry(WalletModel):
    """One row of the upcoming renewals preview."""

    policy_id: str
    company: str
    plan_name: str
    due_date: date
    status: PolicyStatus
    premium_amount: Money
    frequency: PaymentFrequency


class PremiumMonth(WalletModel):
    """Premium cash flow falling in one calendar month."""

    month: int = Field(..., ge=1, le=12)
    amount: Money = Field(default=_ZERO)


class PortfolioSummary(WalletModel):
    """Dashboard rollups computed against one reference date."""

    reference_date: date

    # Counts
    policy_count: int = 0
    in_force_count: int = 0
    status_counts: dict[PolicyStatus, int] = Field(default_factory=dict)

    # Totals over the active-or-grace set
    total_sum_assured: Money = _ZERO
    total_hospital_benefit: Money = _ZERO
    total_room_rate: Money = _ZERO
    annual_premium: Money = _ZERO

    # Breakdowns
    coverage_distribution: dict[CoverageType, Money] = Field(default_factory=dict)
    coverage_shares: list[CoverageShare] = Field(default_factory=list)
    upcoming_renewals: list[RenewalEntry] = Field(default_factory=list)
    premium_schedule: list[PremiumMonth] = Field(default_factory=list)


class StoredPortfolio(WalletModel):
    """Everything persisted for one user."""

    policies: list[Policy] = Field(default_factory=list)
    profile: Optional[UserProfile] = None
    last_sync: Optional[datetime] = None
