"""
Pulse — Seller Analysis Helpers

Used by the threat feed and seller pages on top of a ScoringResult:
severity bands, a coarse risk level that also weighs user flags, the
one-line threat description, and tri-state trust indicators.
"""
from enum import Enum
from typing import Any, Dict, Optional, Sequence

from pulse.trust.models import (
    CanonicalSellerProfile, Category, ScoringResult, VerificationTier,
)
from pulse.trust.scorers import has_real_location


class ThreatSeverity(str, Enum):
    CRITICAL = "CRITICAL"
    HIGH     = "HIGH"
    MEDIUM   = "MEDIUM"
    LOW      = "LOW"


class RiskLevel(str, Enum):
    LOW       = "Low Risk"
    MEDIUM    = "Medium Risk"
    HIGH      = "High Risk"
    VERY_HIGH = "Very High Risk"


def severity_for_score(pulse_score: int) -> ThreatSeverity:
    if pulse_score < 30:
        return ThreatSeverity.CRITICAL
    if pulse_score < 50:
        return ThreatSeverity.HIGH
    if pulse_score < 70:
        return ThreatSeverity.MEDIUM
    return ThreatSeverity.LOW


def assess_risk_level(pulse_score: int, flag_count: int) -> RiskLevel:
    if pulse_score >= 70 and flag_count == 0:
        return RiskLevel.LOW
    if pulse_score >= 50 and flag_count < 3:
        return RiskLevel.MEDIUM
    if pulse_score >= 30 or flag_count >= 3:
        return RiskLevel.HIGH
    return RiskLevel.VERY_HIGH


def _users(count: int) -> str:
    return f"{count} user{'s' if count > 1 else ''}"


def describe_threat(result: ScoringResult, flag_reasons: Sequence[str] = ()) -> str:
    """
    One line for the threat feed, most specific evidence first:
        1. most recent user flag reason (flag_reasons is newest first)
        2. red flags found in listings
        3. a category under its danger threshold
        4. severity band of the pulse score
    """
    for reason in flag_reasons:
        if reason:
            return reason

    if not result.is_success:
        return "Not enough data to assess this seller"

    red_flags = result.categories[Category.BEHAVIORAL_RED_FLAGS].breakdown.get("red_flags", [])
    if red_flags:
        labels = list(dict.fromkeys(f["label"] for f in red_flags))
        return f"Multiple red flags detected: {', '.join(labels)}"

    def below(category: Category, threshold: int) -> bool:
        score = result.categories[category]
        return score.available and score.score < threshold

    if below(Category.VERIFICATION_IDENTITY, 30):
        return "Unverified seller with multiple fraud indicators"
    if below(Category.ACCOUNT_MATURITY, 40):
        return "New account with suspicious activity"
    if below(Category.BEHAVIORAL_RED_FLAGS, 70):
        return "Suspicious behavior patterns detected in listings"

    flag_count = len(flag_reasons)
    severity = severity_for_score(result.pulse_score)
    if severity == ThreatSeverity.CRITICAL:
        if flag_count:
            return f"Multiple fraud indicators reported by {_users(flag_count)}"
        return "Multiple fraud indicators: new account, unverified, suspicious activity"
    if severity == ThreatSeverity.HIGH:
        if flag_count:
            return f"{_users(flag_count)} reported suspicious activity"
        return "High-risk seller with multiple concerns"
    if severity == ThreatSeverity.MEDIUM:
        return "Seller flagged for review - proceed with caution"
    return "Seller requires attention"


def _tri_state(present: bool, profile: CanonicalSellerProfile, field_name: str) -> Optional[bool]:
    if present:
        return True
    if profile.is_platform_unavailable(field_name):
        return None
    return False


def trust_indicators(profile: CanonicalSellerProfile) -> Dict[str, Any]:
    """None means the marketplace never shows the field, so it says nothing about the seller."""
    m = profile.marketplace
    return {
        "has_profile_picture": _tri_state(bool(profile.profile.profile_picture), profile, "profilePicture"),
        "has_location": _tri_state(has_real_location(profile.profile.location), profile, "location"),
        "has_bio": _tri_state(bool(profile.profile.bio), profile, "bio"),
        "account_age_months": m.account_age_months,
        "total_reviews": m.total_reviews,
        "avg_rating": m.avg_rating,
        "verification": VerificationTier.parse(m.verification).value,
        "followers": m.followers,
        "last_seen_days": m.last_seen_days,
    }
