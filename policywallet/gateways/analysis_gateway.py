"""
Gateway to the External Portfolio Analysis Service.

The service (an LLM behind a provider interface) receives a text summary of
the profile and in-force policies and answers with JSON. The gateway only
shapes that answer into result models; the scores, gaps and advice are
passed through unverified.
"""

import asyncio
import json
import time
from abc import ABC, abstractmethod
from datetime import date
from enum import Enum
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from policywallet.core.config import get_settings
from policywallet.schemas.analysis import (
    FALLBACK_GAP_ANALYSIS,
    GapAnalysisResult,
    TaxAdviceResult,
)
from policywallet.schemas.policy import Policy
from policywallet.schemas.profile import UserProfile
from policywallet.services.portfolio_aggregator import PortfolioAggregator
from policywallet.services.tax_calculator import TaxCalculator
from policywallet.utils.errors import AnalysisGatewayError
from policywallet.utils.logging import get_logger

logger = get_logger(__name__)


class AnalysisTask(str, Enum):
    GAP_ANALYSIS = "gap_analysis"
    TAX_OPTIMIZATION = "tax_optimization"


class AnalysisProvider(ABC):
    """A text-in, JSON-text-out analysis backend."""

    name: str = "provider"

    @abstractmethod
    async def generate(self, prompt: str, task: AnalysisTask) -> str:
        """Return the raw response text for ``prompt``."""


def parse_json(content: str) -> dict[str, Any]:
    """Parse response text as JSON, tolerating markdown code fences."""
    content = content.strip()
    if content.startswith("```json"):
        content = content[7:]
    if content.startswith("```"):
        content = content[3:]
    if content.endswith("```"):
        content = content[:-3]
    data = json.loads(content.strip())
    if not isinstance(data, dict):
        raise ValueError("Expected a JSON object")
    return data


def _money(value: Any) -> str:
    return f"฿{value:,.0f}"


def build_portfolio_prompt(
    policies: Sequence[Policy],
    profile: UserProfile,
    today: date,
) -> str:
    """Profile and policy summary shared by every analysis prompt."""
    policy_lines = []
    for policy in policies:
        coverage_details = ", ".join(
            f"{c.type.label}: Sum Assured {_money(c.sum_assured)}"
            + (f", Room Rate {_money(c.room_rate)}" if c.room_rate else "")
            for c in policy.coverages
        )
        policy_lines.append(f"Policy [{policy.plan_name}]: {coverage_details}")
    portfolio = "; ".join(policy_lines) or "No active policies"

    return (
        "User Profile:\n"
        f"- Age: {profile.age_on(today)} ({profile.birth_date.isoformat()})\n"
        f"- Sex: {profile.sex.label}\n"
        f"- Marital Status: {profile.marital_status.label}\n"
        f"- Dependents: {profile.dependents}\n"
        f"- Annual Income: {_money(profile.annual_income)}\n"
        f"- Monthly Expenses: {_money(profile.monthly_expenses)}\n"
        f"- Total Debt/Liabilities: {_money(profile.total_debt)}\n\n"
        f"Current Portfolio: {portfolio}\n"
    )


GAP_INSTRUCTIONS = """
Identify coverage gaps based on Thai financial planning standards:
1. Life coverage (Sum Assured) should be at least (Total Debt + (Annual Income * Dependents / 2)) OR 5-10x annual income.
2. Health room rate should be appropriate for private hospitals (฿4,000-฿8,000 for standard, ฿10,000+ for premium).
3. Critical illness coverage should be 2-3x annual income to cover lost income and rehabilitation.
4. Accident coverage is high priority if the user is the main breadwinner or has significant debts.
5. Take marital status and number of dependents into account for priority.

Respond with a JSON object: {"score": number 0-100, "gaps": [{"category": str, "description": str, "priority": "High"|"Medium"|"Low"}], "recommendations": [str]}
"""

TAX_INSTRUCTIONS = """
Suggest how to use remaining Thai personal income tax deduction room through insurance and funds.

Respond with a JSON object: {"advice": [str], "suggestedProducts": [str], "estimatedTotalBenefit": number}
"""


class AnalysisGateway:
    """Sends portfolio prompts to a provider and shapes the answers."""

    def __init__(
        self,
        provider: AnalysisProvider,
        timeout_seconds: Optional[float] = None,
        aggregator: Optional[PortfolioAggregator] = None,
        tax_calculator: Optional[TaxCalculator] = None,
    ):
        self.provider = provider
        self.timeout_seconds = (
            timeout_seconds
            if timeout_seconds is not None
            else get_settings().ANALYSIS_TIMEOUT_SECONDS
        )
        self.aggregator = aggregator or PortfolioAggregator()
        self.tax_calculator = tax_calculator or TaxCalculator()

    async def _generate(self, prompt: str, task: AnalysisTask) -> str:
        start_time = time.perf_counter()
        try:
            content = await asyncio.wait_for(
                self.provider.generate(prompt, task), timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            raise AnalysisGatewayError(
                f"{task.value} timed out after {self.timeout_seconds}s",
                provider=self.provider.name,
                original_error=e,
            ) from e
        except AnalysisGatewayError:
            raise
        except Exception as e:
            raise AnalysisGatewayError(
                f"{task.value} failed: {e}", provider=self.provider.name, original_error=e
            ) from e

        latency_ms = (time.perf_counter() - start_time) * 1000
        logger.info(f"Analysis {task.value} via {self.provider.name} in {latency_ms:.0f}ms")
        return content

    async def analyze_gaps(
        self,
        policies: Sequence[Policy],
        profile: UserProfile,
        today: date,
        language: str = "en",
    ) -> GapAnalysisResult:
        """
        Protection score, gaps and recommendations for the in-force portfolio.

        An answer that cannot be parsed yields the fallback result instead of
        an error; provider failures raise AnalysisGatewayError.
        """
        in_force = self.aggregator.in_force(policies, today)
        prompt = (
            "Analyze the following insurance portfolio for a Thai resident.\n"
            + build_portfolio_prompt(in_force, profile, today)
            + GAP_INSTRUCTIONS
            + f"\nOutput Language: {'Thai' if language == 'th' else 'English'}\n"
        )
        content = await self._generate(prompt, AnalysisTask.GAP_ANALYSIS)

        try:
            return GapAnalysisResult.model_validate(parse_json(content))
        except (ValueError, ValidationError) as e:
            logger.error(f"Failed to parse gap analysis response: {e}")
            return FALLBACK_GAP_ANALYSIS.model_copy(deep=True)

    async def analyze_tax(
        self,
        policies: Sequence[Policy],
        profile: UserProfile,
        today: date,
        language: str = "en",
    ) -> TaxAdviceResult:
        """Tax optimization advice; the current estimate is included in the prompt."""
        in_force = self.aggregator.in_force(policies, today)
        estimate = self.tax_calculator.calculate(profile, in_force)
        breakdown = estimate.breakdown

        prompt = (
            "Review the tax position of the following Thai taxpayer.\n"
            + build_portfolio_prompt(in_force, profile, today)
            + "\nCurrent Estimate:\n"
            f"- Life/Health Insurance Deduction: {_money(breakdown.life_health_used)} of ฿100,000\n"
            f"- Pension Insurance Deduction: {_money(breakdown.pension_used)} of {_money(breakdown.pension_max_limit)}\n"
            f"- Total Deduction: {_money(estimate.total_deduction)}\n"
            f"- Taxable Income: {_money(estimate.taxable_income)}\n"
            f"- Tax Bracket: {estimate.bracket_percent}%\n"
            + TAX_INSTRUCTIONS
            + f"\nOutput Language: {'Thai' if language == 'th' else 'English'}\n"
        )
        content = await self._generate(prompt, AnalysisTask.TAX_OPTIMIZATION)

        try:
            return TaxAdviceResult.model_validate(parse_json(content))
        except (ValueError, ValidationError) as e:
            raise AnalysisGatewayError(
                f"Unreadable tax advice response: {e}",
                provider=self.provider.name,
                original_error=e,
            ) from e
