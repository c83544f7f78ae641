"""
Pydantic Schemas for the Policyholder Profile and Tax Deduction Inputs.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from policywallet.core.enums import MaritalStatus, Sex
from policywallet.schemas.common import CalendarDay, Count, Money, WalletModel

_ZERO = Decimal("0")


class TaxDeductions(WalletModel):
    """Itemized deduction inputs for the yearly personal income tax estimate."""

    # Social security and housing
    social_security: Money = Field(default=_ZERO, description="Social security contribution")
    home_loan_interest: Money = Field(default=_ZERO, description="Home loan interest paid")

    # Retirement and investment funds
    ssf: Money = Field(default=_ZERO, description="Super Savings Fund contribution")
    rmf: Money = Field(default=_ZERO, description="Retirement Mutual Fund contribution")
    pvd: Money = Field(default=_ZERO, description="Provident fund contribution")
    thai_esg: Money = Field(default=_ZERO, description="Thai ESG fund contribution")

    # Family
    parent_care_father: bool = Field(default=False)
    parent_care_mother: bool = Field(default=False)
    parent_health_insurance: Money = Field(default=_ZERO, description="Parents' health premium")
    child_count: Count = Field(default=0, description="Children eligible for allowance")
    spouse_no_income: bool = Field(default=False)
    disabled_dependents: Count = Field(default=0)
    prenatal_expense: Money = Field(default=_ZERO)

    # Donations and others
    donation_general: Money = Field(default=_ZERO)
    donation_education: Money = Field(default=_ZERO, description="Counted twice")
    other_deductions: Money = Field(default=_ZERO)

    tax_withheld: Money = Field(default=_ZERO, description="Tax already withheld at source")


class UserProfile(WalletModel):
    """Policyholder financial and demographic context. Replaced wholesale on save."""

    name: str = Field(..., description="Policyholder name")
    sex: Sex = Field(default=Sex.OTHER)
    birth_date: CalendarDay = Field(..., description="Birth date")
    marital_status: MaritalStatus = Field(default=MaritalStatus.SINGLE)
    dependents: Count = Field(default=0)
    annual_income: Money = Field(default=_ZERO)
    monthly_expenses: Money = Field(default=_ZERO)
    total_debt: Money = Field(default=_ZERO)
    family_notes: Optional[str] = Field(None)
    tax_deductions: TaxDeductions = Field(default_factory=TaxDeductions)

    def age_on(self, today: date) -> int:
        """Completed years of age on ``today``."""
        had_birthday = (today.month, today.day) >= (self.birth_date.month, self.birth_date.day)
        return today.year - self.birth_date.year - (0 if had_birthday else 1)

    @field_validator("tax_deductions", mode="before")
    @classmethod
    def default_missing_deductions(cls, v):  # type: ignore[no-untyped-def]
        """A profile saved without deductions gets all-zero inputs."""
        return TaxDeductions() if v is None else v
