"""
Thai Personal Income Tax Deduction Calculator.

Estimates the yearly tax position of a policyholder from their profile and
in-force policies:
1. Split annualized premiums into the pension and life/health buckets
2. Cap each insurance bucket
3. Apply personal, family and fund allowances
4. Apply the progressive rate bands to taxable income
5. Compare the liability with tax already withheld

Source: https://www.rd.go.th/english/6045.html (personal income tax rates)
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from policywallet.core.config import get_settings
from policywallet.core.enums import CoverageType
from policywallet.schemas.policy import Policy
from policywallet.schemas.profile import UserProfile
from policywallet.schemas.tax import DeductionBreakdown, TaxComputation
from policywallet.services.policy_status import classify_status, is_in_force
from policywallet.utils.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# =============================================================================
# Deduction caps (THB)
# =============================================================================

LIFE_HEALTH_CAP = Decimal("100000")
PENSION_CAP = Decimal("200000")
PENSION_INCOME_RATE = Decimal("0.15")

PERSONAL_ALLOWANCE = Decimal("60000")
EXPENSE_RATE = Decimal("0.50")
EXPENSE_CAP = Decimal("100000")
SPOUSE_ALLOWANCE = Decimal("60000")
PARENT_CARE_ALLOWANCE = Decimal("30000")
PARENT_HEALTH_CAP = Decimal("15000")
CHILD_ALLOWANCE = Decimal("30000")
DISABLED_ALLOWANCE = Decimal("60000")
PRENATAL_CAP = Decimal("60000")

INVESTMENT_COMBINED_CAP = Decimal("500000")
THAI_ESG_INCOME_RATE = Decimal("0.30")
THAI_ESG_CAP = Decimal("300000")

EDUCATION_DONATION_MULTIPLIER = 2

PENSION_TYPES = (CoverageType.PENSION,)
LIFE_HEALTH_TYPES = (
    CoverageType.LIFE,
    CoverageType.HEALTH,
    CoverageType.SAVINGS,
    CoverageType.CRITICAL,
)


@dataclass(frozen=True)
class TaxBand:
    """One progressive band on taxable income."""

    lower: Decimal
    upper: Optional[Decimal]
    base_tax: Decimal
    rate_percent: int

    def contains(self, taxable_income: Decimal) -> bool:
        return self.upper is None or taxable_income <= self.upper

    def tax_for(self, taxable_income: Decimal) -> Decimal:
        excess = max(ZERO, taxable_income - self.lower)
        return self.base_tax + excess * Decimal(self.rate_percent) / HUNDRED


TAX_BANDS: tuple[TaxBand, ...] = (
    TaxBand(Decimal("0"), Decimal("150000"), Decimal("0"), 0),
    TaxBand(Decimal("150000"), Decimal("300000"), Decimal("0"), 5),
    TaxBand(Decimal("300000"), Decimal("500000"), Decimal("7500"), 10),
    TaxBand(Decimal("500000"), Decimal("750000"), Decimal("27500"), 15),
    TaxBand(Decimal("750000"), Decimal("1000000"), Decimal("65000"), 20),
    TaxBand(Decimal("1000000"), Decimal("2000000"), Decimal("115000"), 25),
    TaxBand(Decimal("2000000"), Decimal("5000000"), Decimal("365000"), 30),
    TaxBand(Decimal("5000000"), None, Decimal("1265000"), 35),
)


def band_for(taxable_income: Decimal) -> TaxBand:
    for band in TAX_BANDS:
        if band.contains(taxable_income):
            return band
    return TAX_BANDS[-1]


def bracket_percent(taxable_income: Decimal) -> int:
    """Marginal rate of the band ``taxable_income`` falls into."""
    return band_for(taxable_income).rate_percent


def progressive_tax(taxable_income: Decimal) -> Decimal:
    """Cumulative liability over the progressive bands."""
    if taxable_income <= ZERO:
        return ZERO
    return band_for(taxable_income).tax_for(taxable_income).quantize(
        Decimal("0.01"), rounding=ROUND_HALF_UP
    )


class TaxCalculator:
    """Stateless tax estimator; every call is independent."""

    @staticmethod
    def insurance_buckets(policies: Iterable[Policy]) -> tuple[Decimal, Decimal]:
        """
        Annualized premiums split into (life_health_sum, pension_sum).

        A policy with a pension line is counted as pension only, even when it
        also carries life/health lines.
        """
        life_health_sum = ZERO
        pension_sum = ZERO
        for policy in policies:
            if policy.has_coverage(*PENSION_TYPES):
                pension_sum += policy.annual_premium
            elif policy.has_coverage(*LIFE_HEALTH_TYPES):
                life_health_sum += policy.annual_premium
        return life_health_sum, pension_sum

    @staticmethod
    def pension_max_limit(annual_income: Decimal) -> Decimal:
        return min(PENSION_CAP, annual_income * PENSION_INCOME_RATE)

    def deductions(self, profile: UserProfile, policies: Iterable[Policy]) -> DeductionBreakdown:
        """Every deduction component, each already capped."""
        income = profile.annual_income
        inputs = profile.tax_deductions

        life_health_sum, pension_sum = self.insurance_buckets(policies)
        pension_limit = self.pension_max_limit(income)
        pension_used = min(pension_sum, pension_limit)

        investment = min(
            inputs.ssf + inputs.rmf + inputs.pvd + pension_used,
            INVESTMENT_COMBINED_CAP,
        )
        esg_limit = min(income * THAI_ESG_INCOME_RATE, THAI_ESG_CAP)
        parents = int(inputs.parent_care_father) + int(inputs.parent_care_mother)

        return DeductionBreakdown(
            life_health_sum=life_health_sum,
            life_health_used=min(life_health_sum, LIFE_HEALTH_CAP),
            pension_sum=pension_sum,
            pension_max_limit=pension_limit,
            pension_used=pension_used,
            personal=PERSONAL_ALLOWANCE,
            expense=min(income * EXPENSE_RATE, EXPENSE_CAP),
            spouse=SPOUSE_ALLOWANCE if inputs.spouse_no_income else ZERO,
            parent_care=PARENT_CARE_ALLOWANCE * parents,
            parent_health=min(inputs.parent_health_insurance, PARENT_HEALTH_CAP),
            child=CHILD_ALLOWANCE * inputs.child_count,
            disabled=DISABLED_ALLOWANCE * inputs.disabled_dependents,
            prenatal=min(inputs.prenatal_expense, PRENATAL_CAP),
            investment_combined=investment,
            thai_esg=min(inputs.thai_esg, esg_limit),
            other=(
                inputs.social_security
                + inputs.home_loan_interest
                + inputs.donation_general
                + inputs.donation_education * EDUCATION_DONATION_MULTIPLIER
                + inputs.other_deductions
            ),
        )

    @staticmethod
    def total_deduction(breakdown: DeductionBreakdown) -> Decimal:
        # pension_used is already inside investment_combined; only the
        # life/health bucket is added from insurance.
        return (
            breakdown.personal
            + breakdown.expense
            + breakdown.spouse
            + breakdown.parent_care
            + breakdown.parent_health
            + breakdown.child
            + breakdown.disabled
            + breakdown.prenatal
            + breakdown.investment_combined
            + breakdown.thai_esg
            + breakdown.other
            + breakdown.life_health_used
        )

    def calculate(
        self,
        profile: UserProfile,
        policies: Iterable[Policy],
        today: Optional[date] = None,
    ) -> TaxComputation:
        """
        Estimate the tax position.

        Args:
            profile: Policyholder profile with deduction inputs
            policies: In-force policies, or the full list when ``today`` is given
            today: When set, terminated policies are dropped first

        Returns:
            TaxComputation with the component breakdown
        """
        if today is not None:
            grace = get_settings().GRACE_PERIOD_DAYS
            policies = [
                p for p in policies if is_in_force(classify_status(p.due_date, today, grace))
            ]

        breakdown = self.deductions(profile, policies)
        total = self.total_deduction(breakdown)
        taxable = max(ZERO, profile.annual_income - total)
        liability = progressive_tax(taxable)
        net = profile.tax_deductions.tax_withheld - liability
        bracket = bracket_percent(taxable)
        savings = (total * Decimal(bracket) / HUNDRED).quantize(
            Decimal("0.01"), rounding=ROUND_HALF_UP
        )

        logger.debug(
            f"Deductions: life_health={breakdown.life_health_used}, "
            f"pension={breakdown.pension_used}/{breakdown.pension_max_limit}, "
            f"investment={breakdown.investment_combined}, esg={breakdown.thai_esg}"
        )
        logger.info(
            f"Tax estimate complete: income={profile.annual_income}, "
            f"deduction={total}, taxable={taxable}, liability={liability}, net={net}"
        )

        return TaxComputation(
            bracket_percent=bracket,
            total_deduction=total,
            taxable_income=taxable,
            tax_liability=liability,
            net_refund_or_payable=net,
            estimated_savings=savings,
            breakdown=breakdown,
        )


# Singleton instance
_tax_calculator: Optional[TaxCalculator] = None


def get_tax_calculator() -> TaxCalculator:
    """Get or create the singleton tax calculator."""
    global _tax_calculator
    if _tax_calculator is None:
        _tax_calculator = TaxCalculator()
    return _tax_calculator


def compute_tax(
    profile: UserProfile,
    policies: Iterable[Policy],
    today: Optional[date] = None,
) -> TaxComputation:
    """Convenience wrapper around :class:`TaxCalculator`."""
    return get_tax_calculator().calculate(profile, policies, today)
