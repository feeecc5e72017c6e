"""
Pulse — Scoring Data Model

Inputs (produced by the extraction layer):
    CanonicalSellerProfile  — profile + marketplace fields + per-field availability
    RecentListing           — up to 5 most recent listings
    CommunityFeedback       — endorsements / flags raised by our own users

Outputs:
    CategoryScore     — one per category, score or "not available"
    ConfidenceMetrics — coverage / recency / consistency / confidence
    ScoringResult     — insufficient_data or success

Nothing here holds state between scoring calls.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Union
from enum import Enum
import math


ENGINE_VERSION = "2.1.0"


def round_half_up(value: float) -> int:
    """Round .5 up. Scores are never negative."""
    return int(math.floor(value + 0.5))


# ── Enums ─────────────────────────────────────────

class Category(str, Enum):
    """The seven scoring dimensions, in report order."""
    VERIFICATION_IDENTITY = "verificationIdentity"
    ACCOUNT_MATURITY      = "accountMaturity"
    LISTING_COMPLETENESS  = "listingCompleteness"
    ACTIVITY_RECENCY      = "activityRecency"
    ENGAGEMENT            = "engagement"
    COMMUNITY_FEEDBACK    = "communityFeedback"
    BEHAVIORAL_RED_FLAGS  = "behavioralRedFlags"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS = {
    Category.VERIFICATION_IDENTITY: "Verification & Identity",
    Category.ACCOUNT_MATURITY:      "Account Maturity",
    Category.LISTING_COMPLETENESS:  "Listing Completeness",
    Category.ACTIVITY_RECENCY:      "Activity & Recency",
    Category.ENGAGEMENT:            "Engagement",
    Category.COMMUNITY_FEEDBACK:    "Community Feedback",
    Category.BEHAVIORAL_RED_FLAGS:  "Behavioral Red Flags",
}


class FieldAvailability(str, Enum):
    AVAILABLE            = "available"
    UNAVAILABLE          = "unavailable"            # platform has the field, seller left it empty
    PLATFORM_UNAVAILABLE = "platform_unavailable"   # platform never exposes the field


class VerificationTier(str, Enum):
    ID_VERIFIED    = "id-verified"
    PHONE_VERIFIED = "phone-verified"
    EMAIL_VERIFIED = "email-verified"
    UNVERIFIED     = "unverified"

    @classmethod
    def parse(cls, raw: Optional[str]) -> "VerificationTier":
        """Normalize a marketplace verification string. Unknown values are unverified."""
        if isinstance(raw, VerificationTier):
            return raw
        if not raw:
            return cls.UNVERIFIED
        return _VERIFICATION_ALIASES.get(str(raw).strip().lower(), cls.UNVERIFIED)


_VERIFICATION_ALIASES = {
    "id-verified":       VerificationTier.ID_VERIFIED,
    "identity verified": VerificationTier.ID_VERIFIED,
    "id verified":       VerificationTier.ID_VERIFIED,
    "phone-verified":    VerificationTier.PHONE_VERIFIED,
    "phone verified":    VerificationTier.PHONE_VERIFIED,
    "email-verified":    VerificationTier.EMAIL_VERIFIED,
    "email verified":    VerificationTier.EMAIL_VERIFIED,
    "unverified":        VerificationTier.UNVERIFIED,
}


class ScoringStatus(str, Enum):
    SUCCESS           = "success"
    INSUFFICIENT_DATA = "insufficient_data"


class TrustLevel(str, Enum):
    EXCELLENT = "Excellent"
    GOOD      = "Good"
    FAIR      = "Fair"
    POOR      = "Poor"
    VERY_POOR = "Very Poor"


class ConfidenceLevel(str, Enum):
    VERY_HIGH = "Very High"
    HIGH      = "High"
    MEDIUM    = "Medium"
    LOW       = "Low"
    VERY_LOW  = "Very Low"


class Severity(str, Enum):
    MEDIUM   = "medium"
    HIGH     = "high"
    CRITICAL = "critical"


# ── Input ─────────────────────────────────────────

@dataclass
class ProfileData:
    name: str = ""
    profile_picture: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None


@dataclass
class MarketplaceData:
    account_age_months: float = 0           # 0 = no data
    total_listings: int = 0
    avg_rating: float = 0.0
    total_reviews: int = 0
    response_rate: float = 0.0              # percentage, 0 = no signal
    verification: VerificationTier = VerificationTier.UNVERIFIED
    last_seen_days: Optional[int] = None    # None = unknown
    followers: int = 0


@dataclass
class CanonicalSellerProfile:
    """
    Everything the extraction layer knows about a seller, marketplace-agnostic.
    No scoring logic here — just data.
    """
    platform: str = ""
    profile: ProfileData = field(default_factory=ProfileData)
    marketplace: MarketplaceData = field(default_factory=MarketplaceData)
    data_availability: Dict[str, FieldAvailability] = field(default_factory=dict)

    def availability(self, field_name: str) -> FieldAvailability:
        """Availability of a field. Fields the extractor did not report count as available."""
        return self.data_availability.get(field_name, FieldAvailability.AVAILABLE)

    def is_platform_unavailable(self, field_name: str) -> bool:
        return self.availability(field_name) == FieldAvailability.PLATFORM_UNAVAILABLE


@dataclass
class RecentListing:
    title: str = ""
    price: Union[str, float, int, None] = None
    image_count: int = 0
    description: str = ""
    rating: Optional[float] = None

    @property
    def description_length(self) -> int:
        return len(self.description or "")

    @property
    def text(self) -> str:
        return f"{self.title or ''} {self.description or ''}"


@dataclass
class CommunityFeedback:
    endorsements: int = 0
    flags: int = 0

    @property
    def net(self) -> int:
        return self.endorsements - self.flags

    @property
    def has_signal(self) -> bool:
        return self.endorsements > 0 or self.flags > 0


# ── Category output ───────────────────────────────

@dataclass(frozen=True)
class CategoryScore:
    """
    score is None  <=>  available is False.
    Available scores are always clamped to 0-100.
    """
    score: Optional[int]
    available: bool
    breakdown: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.available != (self.score is not None):
            raise ValueError("CategoryScore.score must be None exactly when available is False")
        if self.score is not None and not 0 <= self.score <= 100:
            raise ValueError(f"CategoryScore.score out of range: {self.score}")

    @classmethod
    def scored(cls, score: float, breakdown: Optional[Dict[str, Any]] = None) -> "CategoryScore":
        return cls(score=int(min(max(score, 0), 100)), available=True, breakdown=breakdown or {})

    @classmethod
    def not_available(cls, reason: str, **extra: Any) -> "CategoryScore":
        return cls(score=None, available=False, breakdown={"reason": reason, **extra})

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "available": self.available, "breakdown": self.breakdown}


@dataclass
class ConfidenceMetrics:
    confidence: float
    coverage: float
    recency: float
    consistency: float
    available_category_count: int
    total_category_count: int = len(Category)
    missing_categories: List[Category] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "confidence": self.confidence,
            "coverage": round(self.coverage, 2),
            "recency": self.recency,
            "consistency": self.consistency,
            "available_category_count": self.available_category_count,
            "total_category_count": self.total_category_count,
            "missing_categories": [c.value for c in self.missing_categories],
        }


# ── Synthesizer output ────────────────────────────

@dataclass
class Recommendation:
    type: str                     # positive | warning | negative | critical | info
    message: str
    action: str

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "message": self.message, "action": self.action}


@dataclass
class RiskFactor:
    category: Category
    severity: Severity
    message: str
    score: int
    details: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category.value,
            "severity": self.severity.value,
            "message": self.message,
            "score": self.score,
            "details": self.details,
        }


@dataclass
class StrengthArea:
    category: Category
    score: int
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return {"category": self.category.value, "score": self.score, "message": self.message}


@dataclass
class ScoringResult:
    """
    The final output. Either insufficient_data (no score) or success.
    A missing pulse_score is never "zero trust".
    """
    status: ScoringStatus
    confidence_metrics: ConfidenceMetrics
    recommendations: List[Recommendation] = field(default_factory=list)

    # success only
    pulse_score: Optional[int] = None
    confidence_level: Optional[ConfidenceLevel] = None
    trust_level: Optional[TrustLevel] = None
    categories: Dict[Category, CategoryScore] = field(default_factory=dict)
    category_weights: Dict[Category, int] = field(default_factory=dict)
    risk_factors: List[RiskFactor] = field(default_factory=list)
    strength_areas: List[StrengthArea] = field(default_factory=list)

    engine_version: str = ENGINE_VERSION

    @property
    def is_success(self) -> bool:
        return self.status == ScoringStatus.SUCCESS

    @property
    def confidence(self) -> float:
        return self.confidence_metrics.confidence

    @property
    def coverage(self) -> float:
        return self.confidence_metrics.coverage

    @property
    def available_categories(self) -> List[Category]:
        missing = set(self.confidence_metrics.missing_categories)
        return [c for c in Category if c not in missing]

    @property
    def missing_categories(self) -> List[Category]:
        return list(self.confidence_metrics.missing_categories)

    def to_compact(self) -> Dict[str, Any]:
        """Minimal response for listing pages."""
        return {
            "status": self.status.value,
            "pulse_score": self.pulse_score,
            "trust_level": self.trust_level.value if self.trust_level else None,
            "confidence": self.confidence,
            "confidence_level": self.confidence_level.value if self.confidence_level else None,
        }

    def to_dict(self) -> Dict[str, Any]:
        if not self.is_success:
            return {
                "status": self.status.value,
                "confidence": self.confidence,
                "coverage": round(self.coverage, 2),
                "available_categories": [c.value for c in self.available_categories],
                "missing_categories": [c.value for c in self.missing_categories],
                "recommendations": [r.to_dict() for r in self.recommendations],
                "engine_version": self.engine_version,
            }
        return {
            "status": self.status.value,
            "pulse_score": self.pulse_score,
            "confidence": self.confidence,
            "confidence_level": self.confidence_level.value,
            "trust_level": self.trust_level.value,
            "categories": {c.value: s.to_dict() for c, s in self.categories.items()},
            "category_weights": {c.value: w for c, w in self.category_weights.items()},
            "confidence_metrics": self.confidence_metrics.to_dict(),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "risk_factors": [r.to_dict() for r in self.risk_factors],
            "strength_areas": [s.to_dict() for s in self.strength_areas],
            "engine_version": self.engine_version,
        }
