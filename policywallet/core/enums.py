"""
Core Enumerations for the Policy Wallet.

Values are stable internal identifiers. Display labels used by the original
web client ("Life Insurance", "Grace Period", ...) live beside them and are
also accepted on input so legacy JSON keeps loading.
"""

from enum import Enum


class LabelledEnum(str, Enum):
    """String enum that also resolves its display label or any casing."""

    @property
    def label(self) -> str:
        return _LABELS.get(self, self.value.replace("_", " ").title())

    @classmethod
    def _missing_(cls, value):  # type: ignore[no-untyped-def]
        if not isinstance(value, str):
            return None
        needle = value.strip().lower()
        for member in cls:
            if needle in (member.value, member.label.lower(), member.name.lower()):
                return member
        return None


# =============================================================================
# Policy Enums
# =============================================================================


class CoverageType(LabelledEnum):
    """Closed set of coverage lines a policy can carry."""

    LIFE = "life"
    HEALTH = "health"
    ACCIDENT = "accident"
    CRITICAL = "critical_illness"
    SAVINGS = "savings"
    PENSION = "pension"
    HOSPITAL_BENEFIT = "hospital_benefit"


class PaymentFrequency(LabelledEnum):
    """Premium payment cadence."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"

    @property
    def annual_factor(self) -> int:
        """Number of payments per year."""
        return _ANNUAL_FACTORS[self]


class PolicyStatus(LabelledEnum):
    """Policy lifecycle status, always derived from the due date."""

    ACTIVE = "active"
    GRACE_PERIOD = "grace_period"
    TERMINATED = "terminated"


# =============================================================================
# Profile Enums
# =============================================================================


class Sex(LabelledEnum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class MaritalStatus(LabelledEnum):
    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"
    WIDOWED = "widowed"


# =============================================================================
# Analysis and Document Enums
# =============================================================================


class GapPriority(LabelledEnum):
    """Priority attached to an AI-reported coverage gap."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class ProtectionLevel(LabelledEnum):
    """Band of an AI protection score."""

    EXCELLENT = "excellent"
    MEDIUM = "medium"
    POOR = "poor"


class DocumentCategory(LabelledEnum):
    """Kinds of files kept in the policy vault."""

    POLICY = "policy"
    RECEIPT = "receipt"
    MEDICAL = "medical"
    ID_CARD = "id_card"
    OTHER = "other"


_ANNUAL_FACTORS = {
    PaymentFrequency.MONTHLY: 12,
    PaymentFrequency.QUARTERLY: 4,
    PaymentFrequency.YEARLY: 1,
}

_LABELS = {
    CoverageType.LIFE: "Life Insurance",
    CoverageType.HEALTH: "Health Insurance",
    CoverageType.ACCIDENT: "Personal Accident",
    CoverageType.CRITICAL: "Critical Illness",
    CoverageType.SAVINGS: "Savings/Endowment",
    CoverageType.PENSION: "Pension/Retirement",
    CoverageType.HOSPITAL_BENEFIT: "Hospital Benefit",
    DocumentCategory.ID_CARD: "ID Card",
}
