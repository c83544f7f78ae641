"""
Pydantic Schemas for Results Returned by the External Analysis Service.

The content is opaque: it is stored and displayed, never re-derived. Only
the shape is enforced.
"""

from pydantic import Field, field_validator

from policywallet.core.enums import GapPriority, ProtectionLevel
from policywallet.schemas.common import WalletModel

EXCELLENT_SCORE = 80
MEDIUM_SCORE = 50


class CoverageGap(WalletModel):
    category: str
    description: str
    priority: GapPriority = GapPriority.MEDIUM

    @field_validator("priority", mode="before")
    @classmethod
    def coerce_priority(cls, v):  # type: ignore[no-untyped-def]
        """Priorities outside High/Medium/Low are shown as Medium."""
        if isinstance(v, GapPriority):
            return v
        try:
            return GapPriority(v)
        except ValueError:
            return GapPriority.MEDIUM


class GapAnalysisResult(WalletModel):
    """Protection score with the gaps and recommendations behind it."""

    score: float = Field(..., description="Protection score reported by the service (0-100)")
    gaps: list[CoverageGap] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)

    @property
    def protection_level(self) -> ProtectionLevel:
        return protection_level_for(self.score)


class TaxAdviceResult(WalletModel):
    advice: list[str] = Field(default_factory=list)
    suggested_products: list[str] = Field(default_factory=list)
    estimated_total_benefit: float = 0.0


def protection_level_for(score: float) -> ProtectionLevel:
    """Band a protection score: 80+ excellent, 50+ medium, otherwise poor."""
    if score >= EXCELLENT_SCORE:
        return ProtectionLevel.EXCELLENT
    if score >= MEDIUM_SCORE:
        return ProtectionLevel.MEDIUM
    return ProtectionLevel.POOR


# Returned when the service answers with something that is not JSON.
FALLBACK_GAP_ANALYSIS = GapAnalysisResult(
    score=50,
    gaps=[
        CoverageGap(
            category="Analysis Error",
            description="Could not perform detailed analysis.",
            priority=GapPriority.LOW,
        )
    ],
    recommendations=["Consult with your agent for manual review."],
)
