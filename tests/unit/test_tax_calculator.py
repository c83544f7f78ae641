"""
Unit tests for the Thai tax deduction calculator.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from policywallet.core.enums import CoverageType, PaymentFrequency
from policywallet.schemas.profile import TaxDeductions, UserProfile
from policywallet.services.tax_calculator import (
    TaxCalculator,
    bracket_percent,
    compute_tax,
    progressive_tax,
)


def profile_with(income, **deductions):
    return UserProfile(
        name="Test Taxpayer",
        birth_date=date(1985, 1, 1),
        annual_income=Decimal(str(income)),
        tax_deductions=TaxDeductions(**deductions),
    )


@pytest.fixture
def calculator():
    return TaxCalculator()


@pytest.mark.unit
class TestProgressiveBands:
    """Liability and marginal bracket per band."""

    @pytest.mark.parametrize(
        "taxable,expected",
        [
            ("0", "0"),
            ("150000", "0"),
            ("300000", "7500"),
            ("340000", "11500"),
            ("500000", "27500"),
            ("750000", "65000"),
            ("1000000", "115000"),
            ("2000000", "365000"),
            ("5000000", "1265000"),
            ("6000000", "1615000"),
        ],
    )
    def test_liability(self, taxable, expected):
        assert progressive_tax(Decimal(taxable)) == Decimal(expected)

    @pytest.mark.parametrize(
        "taxable,expected",
        [
            ("0", 0),
            ("150000", 0),
            ("150001", 5),
            ("300000", 5),
            ("340000", 10),
            ("600000", 15),
            ("900000", 20),
            ("1500000", 25),
            ("3000000", 30),
            ("5000001", 35),
        ],
    )
    def test_bracket(self, taxable, expected):
        assert bracket_percent(Decimal(taxable)) == expected


@pytest.mark.unit
class TestStandardCase:
    """Income only, standard allowances."""

    def test_income_500k(self, calculator):
        result = calculator.calculate(profile_with(500_000), [])

        assert result.breakdown.personal == Decimal("60000")
        assert result.breakdown.expense == Decimal("100000")
        assert result.total_deduction == Decimal("160000")
        assert result.taxable_income == Decimal("340000")
        assert result.tax_liability == Decimal("11500")
        assert result.bracket_percent == 10
        assert result.net_refund_or_payable == Decimal("-11500")
        assert not result.is_refund

    def test_estimated_savings_at_marginal_rate(self, calculator):
        result = calculator.calculate(profile_with(500_000), [])
        # 160,000 deducted at the 10% bracket
        assert result.estimated_savings == Decimal("16000")

    def test_wire_format_uses_numbers(self):
        data = compute_tax(profile_with(500_000), []).to_json_dict()

        assert data["bracketPercent"] == 10
        assert data["totalDeduction"] == 160000
        assert data["taxableIncome"] == 340000
        assert data["taxLiability"] == 11500
        assert data["netRefundOrPayable"] == -11500
        assert data["estimatedSavings"] == 16000
        assert data["breakdown"]["personal"] == 60000
        assert not any(isinstance(v, str) for v in data["breakdown"].values())

    def test_expense_is_half_income_below_cap(self, calculator):
        result = calculator.calculate(profile_with(120_000), [])
        assert result.breakdown.expense == Decimal("60000")

    def test_taxable_income_never_negative(self, calculator):
        result = calculator.calculate(profile_with(100_000, tax_withheld=2_000), [])

        assert result.taxable_income == Decimal("0")
        assert result.tax_liability == Decimal("0")
        assert result.bracket_percent == 0
        assert result.net_refund_or_payable == Decimal("2000")
        assert result.is_refund


@pytest.mark.unit
class TestInsuranceBuckets:
    """Life/health and pension premium buckets."""

    def test_life_health_capped(self, calculator, policy_factory):
        policy = policy_factory([(CoverageType.LIFE, 1_000_000)], premium="150000")
        result = calculator.calculate(profile_with(2_000_000), [policy])

        assert result.breakdown.life_health_sum == Decimal("150000")
        assert result.breakdown.life_health_used == Decimal("100000")

    def test_premiums_annualized(self, calculator, policy_factory):
        policy = policy_factory(
            [(CoverageType.HEALTH, 1_000_000)], premium="2000", frequency=PaymentFrequency.MONTHLY
        )
        result = calculator.calculate(profile_with(1_000_000), [policy])
        assert result.breakdown.life_health_used == Decimal("24000")

    def test_critical_illness_counts_as_life_health(self, calculator, policy_factory):
        policy = policy_factory([(CoverageType.CRITICAL, 500_000)], premium="8000")
        result = calculator.calculate(profile_with(1_000_000), [policy])
        assert result.breakdown.life_health_used == Decimal("8000")

    def test_accident_only_policy_not_deductible(self, calculator, policy_factory):
        policy = policy_factory(
            [(CoverageType.ACCIDENT, 500_000), (CoverageType.HOSPITAL_BENEFIT, 1_000)],
            premium="5000",
        )
        result = calculator.calculate(profile_with(1_000_000), [policy])
        assert result.breakdown.life_health_sum == Decimal("0")
        assert result.breakdown.pension_sum == Decimal("0")

    def test_pension_checked_first(self, calculator, policy_factory):
        """A policy with both memberships counts toward pension only."""
        policy = policy_factory(
            [(CoverageType.PENSION, 1_000_000), (CoverageType.LIFE, 100_000)], premium="50000"
        )
        result = calculator.calculate(profile_with(1_000_000), [policy])

        assert result.breakdown.pension_sum == Decimal("50000")
        assert result.breakdown.life_health_sum == Decimal("0")

    def test_pension_limit_by_income(self, calculator):
        result = calculator.calculate(profile_with(1_000_000), [])
        assert result.breakdown.pension_max_limit == Decimal("150000")

    def test_pension_limit_flat_cap(self, calculator):
        result = calculator.calculate(profile_with(3_000_000), [])
        assert result.breakdown.pension_max_limit == Decimal("200000")

    def test_pension_counted_once(self, calculator, policy_factory):
        policy = policy_factory([(CoverageType.PENSION, 1_000_000)], premium="250000")
        result = calculator.calculate(profile_with(2_000_000), [policy])

        assert result.breakdown.pension_used == Decimal("200000")
        assert result.breakdown.investment_combined == Decimal("200000")
        # personal 60k + expense 100k + investment 200k
        assert result.total_deduction == Decimal("360000")
        assert result.taxable_income == Decimal("1640000")
        assert result.tax_liability == Decimal("275000")
        assert result.bracket_percent == 25

    def test_terminated_policies_dropped_when_date_given(self, calculator, policy_factory, today):
        live = policy_factory([(CoverageType.LIFE, 1)], premium="10000", due_date=today)
        dead = policy_factory(
            [(CoverageType.LIFE, 1)], premium="40000", due_date=today - timedelta(days=45)
        )
        result = calculator.calculate(profile_with(1_000_000), [live, dead], today=today)
        assert result.breakdown.life_health_sum == Decimal("10000")

    def test_stored_status_ignored(self, calculator, policy_factory, today):
        stale = policy_factory(
            [(CoverageType.LIFE, 1_000_000)],
            premium="40000",
            due_date=today - timedelta(days=90),
            status="Active",
        )
        result = calculator.calculate(profile_with(1_000_000), [stale], today=today)

        assert result.breakdown.life_health_sum == Decimal("0")
        assert result.breakdown.pension_sum == Decimal("0")


@pytest.mark.unit
class TestPersonalDeductions:
    """Family, fund and uncapped deductions."""

    def test_family_allowances(self, calculator):
        result = calculator.calculate(
            profile_with(
                3_000_000,
                spouse_no_income=True,
                parent_care_father=True,
                parent_care_mother=True,
                parent_health_insurance=20_000,
                child_count=2,
                disabled_dependents=1,
                prenatal_expense=80_000,
            ),
            [],
        )
        breakdown = result.breakdown

        assert breakdown.spouse == Decimal("60000")
        assert breakdown.parent_care == Decimal("60000")
        assert breakdown.parent_health == Decimal("15000")
        assert breakdown.child == Decimal("60000")
        assert breakdown.disabled == Decimal("60000")
        assert breakdown.prenatal == Decimal("60000")

    def test_single_parent_flag(self, calculator):
        result = calculator.calculate(profile_with(1_000_000, parent_care_mother=True), [])
        assert result.breakdown.parent_care == Decimal("30000")

    def test_investment_combined_cap(self, calculator, policy_factory):
        policy = policy_factory([(CoverageType.PENSION, 1)], premium="150000")
        result = calculator.calculate(
            profile_with(5_000_000, ssf=200_000, rmf=200_000, pvd=100_000), [policy]
        )
        assert result.breakdown.investment_combined == Decimal("500000")

    def test_thai_esg_income_limit(self, calculator):
        result = calculator.calculate(profile_with(500_000, thai_esg=200_000), [])
        assert result.breakdown.thai_esg == Decimal("150000")

    def test_thai_esg_flat_cap(self, calculator):
        result = calculator.calculate(profile_with(2_000_000, thai_esg=400_000), [])
        assert result.breakdown.thai_esg == Decimal("300000")

    def test_other_deductions_uncapped(self, calculator):
        result = calculator.calculate(
            profile_with(
                1_000_000,
                social_security=9_000,
                home_loan_interest=100_000,
                donation_general=10_000,
                donation_education=5_000,
                other_deductions=1_000,
            ),
            [],
        )
        assert result.breakdown.other == Decimal("130000")

    def test_negative_inputs_clamped(self, calculator):
        result = calculator.calculate(profile_with(500_000, ssf=-5_000, child_count=-2), [])
        assert result.breakdown.investment_combined == Decimal("0")
        assert result.breakdown.child == Decimal("0")
        assert result.total_deduction == Decimal("160000")

    def test_compute_tax_wrapper(self):
        assert compute_tax(profile_with(500_000), []).tax_liability == Decimal("11500")
