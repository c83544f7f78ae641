"""
Portfolio Aggregation Engine.

Rolls a policy collection up into the dashboard figures:
- Total sum assured (capital-replacement lines only)
- Total hospital benefit
- Total daily room rate
- Annualized premium
- Coverage distribution and shares
- Upcoming renewals preview
- Monthly premium schedule

Every rollup except the renewals preview covers only policies that are not
terminated. The reference day is fixed for the whole pass.
"""

from collections import Counter
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Sequence

from policywallet.core.config import get_settings
from policywallet.core.enums import CoverageType, PaymentFrequency, PolicyStatus
from policywallet.schemas.policy import Policy
from policywallet.schemas.portfolio import (
    CoverageShare,
    PortfolioSummary,
    PremiumMonth,
    RenewalEntry,
)
from policywallet.services.policy_status import classify_status, is_in_force
from policywallet.utils.logging import get_logger

logger = get_logger(__name__)

ZERO = Decimal("0")
HUNDRED = Decimal("100")

# Lines that replace capital; indemnity and benefit lines are excluded.
CAPITAL_COVERAGE_TYPES = frozenset(
    {CoverageType.LIFE, CoverageType.PENSION, CoverageType.SAVINGS}
)


class PortfolioAggregator:
    """
    Computes portfolio rollups against a fixed reference day.

    Stateless apart from its rule parameters; safe to share.
    """

    def __init__(
        self,
        grace_period_days: Optional[int] = None,
        preview_limit: Optional[int] = None,
    ):
        settings = get_settings()
        self.grace_period_days = (
            grace_period_days if grace_period_days is not None else settings.GRACE_PERIOD_DAYS
        )
        self.preview_limit = (
            preview_limit if preview_limit is not None else settings.RENEWAL_PREVIEW_LIMIT
        )

    # =========================================================================
    # Status
    # =========================================================================

    def status_of(self, policy: Policy, today: date) -> PolicyStatus:
        return classify_status(policy.due_date, today, self.grace_period_days)

    def in_force(self, policies: Iterable[Policy], today: date) -> list[Policy]:
        """Policies that are active or in their grace period."""
        return [p for p in policies if is_in_force(self.status_of(p, today))]

    # =========================================================================
    # Rollups over an already filtered set
    # =========================================================================

    @staticmethod
    def total_sum_assured(policies: Iterable[Policy]) -> Decimal:
        return sum(
            (
                c.sum_assured
                for p in policies
                for c in p.coverages
                if c.type in CAPITAL_COVERAGE_TYPES
            ),
            ZERO,
        )

    @staticmethod
    def total_hospital_benefit(policies: Iterable[Policy]) -> Decimal:
        return sum(
            (
                c.sum_assured
                for p in policies
                for c in p.coverages
                if c.type == CoverageType.HOSPITAL_BENEFIT
            ),
            ZERO,
        )

    @staticmethod
    def total_room_rate(policies: Iterable[Policy]) -> Decimal:
        # Not filtered by type: whatever room rates are present are summed.
        return sum((c.room_rate or ZERO for p in policies for c in p.coverages), ZERO)

    @staticmethod
    def annual_premium(policies: Iterable[Policy]) -> Decimal:
        return sum((p.annual_premium for p in policies), ZERO)

    @staticmethod
    def coverage_distribution(policies: Iterable[Policy]) -> dict[CoverageType, Decimal]:
        """Summed sum assured per coverage type, in first-seen order."""
        distribution: dict[CoverageType, Decimal] = {}
        for policy in policies:
            for coverage in policy.coverages:
                distribution[coverage.type] = (
                    distribution.get(coverage.type, ZERO) + coverage.sum_assured
                )
        return distribution

    @staticmethod
    def coverage_shares(distribution: dict[CoverageType, Decimal]) -> list[CoverageShare]:
        """
        Percentage of each type against the all-types total.

        The denominator is the sum over every type in the distribution, not
        the capital-only total sum assured. Zero-valued types are omitted.
        """
        present = {t: v for t, v in distribution.items() if v > ZERO}
        grand_total = sum(present.values(), ZERO)
        if grand_total == ZERO:
            return []
        return [
            CoverageShare(
                coverage_type=coverage_type,
                sum_assured=amount,
                percentage=(amount / grand_total * HUNDRED).quantize(
                    Decimal("0.01"), rounding=ROUND_HALF_UP
                ),
            )
            for coverage_type, amount in present.items()
        ]

    @staticmethod
    def payment_months(policy: Policy) -> list[int]:
        """Calendar months (1-12) in which the policy's premium falls."""
        start = policy.due_date.month - 1
        if policy.frequency == PaymentFrequency.MONTHLY:
            return list(range(1, 13))
        if policy.frequency == PaymentFrequency.QUARTERLY:
            return [(start + i * 3) % 12 + 1 for i in range(4)]
        return [start + 1]

    @classmethod
    def premium_schedule(cls, policies: Iterable[Policy]) -> list[PremiumMonth]:
        """Premium cash flow for each month of the year."""
        buckets = {month: ZERO for month in range(1, 13)}
        for policy in policies:
            for month in cls.payment_months(policy):
                buckets[month] += policy.premium_amount
        return [PremiumMonth(month=m, amount=amount) for m, amount in buckets.items()]

    # =========================================================================
    # Unfiltered
    # =========================================================================

    def upcoming_renewals(
        self,
        policies: Sequence[Policy],
        today: date,
        limit: Optional[int] = None,
    ) -> list[RenewalEntry]:
        """All policies, terminated included, soonest due first."""
        limit = self.preview_limit if limit is None else limit
        ordered = sorted(policies, key=lambda p: p.due_date)
        return [
            RenewalEntry(
                policy_id=p.id,
                company=p.company,
                plan_name=p.plan_name,
                due_date=p.due_date,
                status=self.status_of(p, today),
                premium_amount=p.premium_amount,
                frequency=p.frequency,
            )
            for p in ordered[:limit]
        ]

    # =========================================================================
    # Full pass
    # =========================================================================

    def summarize(self, policies: Sequence[Policy], today: date) -> PortfolioSummary:
        """
        Compute every rollup for ``policies`` as of ``today``.

        Args:
            policies: The user's full policy list
            today: Reference day, read once by the caller

        Returns:
            PortfolioSummary
        """
        statuses = [self.status_of(p, today) for p in policies]
        active = [p for p, s in zip(policies, statuses) if is_in_force(s)]
        distribution = self.coverage_distribution(active)
        counts = Counter(statuses)

        summary = PortfolioSummary(
            reference_date=today,
            policy_count=len(policies),
            in_force_count=len(active),
            status_counts={status: counts.get(status, 0) for status in PolicyStatus},
            total_sum_assured=self.total_sum_assured(active),
            total_hospital_benefit=self.total_hospital_benefit(active),
            total_room_rate=self.total_room_rate(active),
            annual_premium=self.annual_premium(active),
            coverage_distribution=distribution,
            coverage_shares=self.coverage_shares(distribution),
            upcoming_renewals=self.upcoming_renewals(policies, today),
            premium_schedule=self.premium_schedule(active),
        )

        logger.info(
            f"Portfolio summarized: date={today}, policies={summary.policy_count}, "
            f"in_force={summary.in_force_count}, "
            f"sum_assured={summary.total_sum_assured}, "
            f"annual_premium={summary.annual_premium}"
        )
        return summary


# Singleton instance
_portfolio_aggregator: Optional[PortfolioAggregator] = None


def get_portfolio_aggregator() -> PortfolioAggregator:
    """Get or create the singleton aggregator configured from settings."""
    global _portfolio_aggregator
    if _portfolio_aggregator is None:
        _portfolio_aggregator = PortfolioAggregator()
    return _portfolio_aggregator


def summarize_portfolio(
    policies: Sequence[Policy],
    today: date,
    preview_limit: Optional[int] = None,
) -> PortfolioSummary:
    """Convenience wrapper around :class:`PortfolioAggregator`."""
    if preview_limit is None:
        return get_portfolio_aggregator().summarize(policies, today)
    return PortfolioAggregator(preview_limit=preview_limit).summarize(policies, today)
