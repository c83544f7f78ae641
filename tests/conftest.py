"""
Pytest Configuration and Fixtures.
Shared test fixtures for all test modules.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from policywallet.core.config import get_settings
from policywallet.core.enums import CoverageType, PaymentFrequency
from policywallet.schemas.policy import Policy, PolicyCoverage
from policywallet.schemas.profile import TaxDeductions, UserProfile
from policywallet.services.storage import InMemoryStore


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch):
    """Isolate every test from the caller's WALLET_* environment."""
    monkeypatch.setenv("WALLET_ENVIRONMENT", "testing")
    monkeypatch.setenv("WALLET_TZ", "Asia/Bangkok")
    monkeypatch.setenv("WALLET_STORAGE_BACKEND", "memory")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def today():
    """Fixed reference day used across the suite."""
    return date(2024, 6, 15)


def make_policy(
    coverages,
    premium="1000",
    frequency=PaymentFrequency.YEARLY,
    due_date=date(2024, 12, 31),
    **kwargs,
):
    """Build a policy from ``(type, sum_assured[, room_rate])`` tuples."""
    lines = [
        PolicyCoverage(
            type=c[0],
            sum_assured=Decimal(str(c[1])),
            room_rate=Decimal(str(c[2])) if len(c) > 2 else None,
        )
        for c in coverages
    ]
    return Policy(
        company=kwargs.pop("company", "FWD Life Insurance"),
        plan_name=kwargs.pop("plan_name", "Test Plan"),
        coverages=lines,
        premium_amount=Decimal(str(premium)),
        frequency=frequency,
        due_date=due_date,
        **kwargs,
    )


@pytest.fixture
def policy_factory():
    return make_policy


@pytest.fixture
def sample_policies(today):
    """Mixed portfolio: two in force, one in grace, one terminated."""
    return [
        make_policy(
            [(CoverageType.HEALTH, 1_000_000, 4_000), (CoverageType.LIFE, 500_000)],
            premium="25000",
            frequency=PaymentFrequency.YEARLY,
            due_date=today + timedelta(days=200),
            plan_name="Health Elite",
        ),
        make_policy(
            [(CoverageType.LIFE, 2_000_000)],
            premium="1500",
            frequency=PaymentFrequency.MONTHLY,
            due_date=today - timedelta(days=10),
            plan_name="Life Protect",
        ),
        make_policy(
            [(CoverageType.CRITICAL, 500_000), (CoverageType.ACCIDENT, 300_000)],
            premium="3000",
            frequency=PaymentFrequency.QUARTERLY,
            due_date=today + timedelta(days=45),
            plan_name="CI Shield",
        ),
        make_policy(
            [(CoverageType.SAVINGS, 800_000)],
            premium="50000",
            frequency=PaymentFrequency.YEARLY,
            due_date=today - timedelta(days=90),
            plan_name="Old Endowment",
        ),
    ]


@pytest.fixture
def sample_profile():
    return UserProfile(
        name="Somchai Jaidee",
        sex="Male",
        birth_date=date(1990, 5, 20),
        marital_status="Married",
        dependents=2,
        annual_income=Decimal("1200000"),
        monthly_expenses=Decimal("45000"),
        total_debt=Decimal("2500000"),
        tax_deductions=TaxDeductions(),
    )


@pytest.fixture
def memory_store():
    return InMemoryStore()


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
