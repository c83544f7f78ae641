"""
Pydantic Schemas for the Policy Wallet.
"""

from policywallet.schemas.analysis import (
    CoverageGap,
    GapAnalysisResult,
    TaxAdviceResult,
    protection_level_for,
)
from policywallet.schemas.common import Count, Money, WalletModel
from policywallet.schemas.policy import Policy, PolicyCoverage, PolicyDocument
from policywallet.schemas.portfolio import (
    CoverageShare,
    PortfolioSummary,
    PremiumMonth,
    RenewalEntry,
    StoredPortfolio,
)
from policywallet.schemas.profile import TaxDeductions, UserProfile
from policywallet.schemas.tax import DeductionBreakdown, TaxComputation

__all__ = [
    "CoverageGap",
    "GapAnalysisResult",
    "TaxAdviceResult",
    "protection_level_for",
    "Count",
    "Money",
    "WalletModel",
    "Policy",
    "PolicyCoverage",
    "PolicyDocument",
    "CoverageShare",
    "PortfolioSummary",
    "PremiumMonth",
    "RenewalEntry",
    "StoredPortfolio",
    "TaxDeductions",
    "UserProfile",
    "DeductionBreakdown",
    "TaxComputation",
]
