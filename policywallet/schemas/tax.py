"""
Pydantic Schemas for the Tax Deduction Estimate.
"""

from decimal import Decimal

from pydantic import Field

from policywallet.schemas.common import Amount, Money, WalletModel

_ZERO = Decimal("0")


class DeductionBreakdown(WalletModel):
    """Every component that makes up the total deduction."""

    # Insurance buckets (after caps)
    life_health_sum: Money = _ZERO
    life_health_used: Money = _ZERO
    pension_sum: Money = _ZERO
    pension_max_limit: Money = _ZERO
    pension_used: Money = _ZERO

    # Personal allowances
    personal: Money = _ZERO
    expense: Money = _ZERO
    spouse: Money = _ZERO
    parent_care: Money = _ZERO
    parent_health: Money = _ZERO
    child: Money = _ZERO
    disabled: Money = _ZERO
    prenatal: Money = _ZERO

    # Funds
    investment_combined: Money = _ZERO
    thai_esg: Money = _ZERO

    # Uncapped
    other: Money = _ZERO


class TaxComputation(WalletModel):
    """Result of one tax estimate."""

    bracket_percent: int = Field(..., ge=0, le=35, description="Marginal rate of the band")
    total_deduction: Money
    taxable_income: Money
    tax_liability: Money
    net_refund_or_payable: Amount = Field(
        ..., description="Positive is a refund, negative is an amount payable"
    )
    estimated_savings: Money = Field(
        default=_ZERO, description="Total deduction valued at the marginal rate"
    )
    breakdown: DeductionBreakdown

    @property
    def is_refund(self) -> bool:
        return self.net_refund_or_payable > 0
