"""
Pulse — Recommendation & Risk Synthesis

Turns category scores and the final pulse score into what a buyer reads:
trust / confidence labels, ordered recommendations, risk factors and
strength areas.
"""
from typing import Dict, List, Tuple

from pulse.trust.models import (
    Category, CategoryScore, ConfidenceLevel, ConfidenceMetrics,
    Recommendation, RiskFactor, Severity, StrengthArea, TrustLevel,
)

STRENGTH_THRESHOLD = 80

# category -> (threshold, severity, message); strictly below the threshold is a risk factor
RISK_THRESHOLDS: Dict[Category, Tuple[int, Severity, str]] = {
    Category.VERIFICATION_IDENTITY: (30, Severity.HIGH, "Unverified seller identity"),
    Category.ACCOUNT_MATURITY: (40, Severity.MEDIUM, "New or recently created account"),
    Category.BEHAVIORAL_RED_FLAGS: (70, Severity.CRITICAL, "Suspicious language patterns in listings"),
    Category.COMMUNITY_FEEDBACK: (40, Severity.HIGH, "Poor or negative community feedback"),
}

_STRENGTH_MESSAGES = {
    Category.VERIFICATION_IDENTITY: "Strong identity verification",
    Category.ACCOUNT_MATURITY:      "Well-established account",
    Category.LISTING_COMPLETENESS:  "Detailed, complete listings",
    Category.ACTIVITY_RECENCY:      "Recently active",
    Category.ENGAGEMENT:            "Highly responsive to buyers",
    Category.COMMUNITY_FEEDBACK:    "Strong buyer feedback",
    Category.BEHAVIORAL_RED_FLAGS:  "No suspicious listing behavior",
}


def trust_level(pulse_score: int) -> TrustLevel:
    if pulse_score >= 80:
        return TrustLevel.EXCELLENT
    if pulse_score >= 60:
        return TrustLevel.GOOD
    if pulse_score >= 40:
        return TrustLevel.FAIR
    if pulse_score >= 20:
        return TrustLevel.POOR
    return TrustLevel.VERY_POOR


def confidence_level(confidence: float) -> ConfidenceLevel:
    if confidence >= 0.80:
        return ConfidenceLevel.VERY_HIGH
    if confidence >= 0.60:
        return ConfidenceLevel.HIGH
    if confidence >= 0.40:
        return ConfidenceLevel.MEDIUM
    if confidence >= 0.20:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.VERY_LOW


def _overall_recommendation(pulse_score: int) -> Recommendation:
    if pulse_score >= 80:
        return Recommendation(
            type="positive",
            message="High trust score indicates a reliable seller with an excellent track record",
            action="Safe to Purchase",
        )
    if pulse_score >= 60:
        return Recommendation(
            type="positive",
            message="Good trust indicators with minor concerns",
            action="Consider",
        )
    if pulse_score >= 40:
        return Recommendation(
            type="warning",
            message="Mixed trust indicators - proceed with caution",
            action="Review Carefully",
        )
    return Recommendation(
        type="negative",
        message="Low trust score - high risk transaction",
        action="Avoid",
    )


def _below(categories: Dict[Category, CategoryScore], category: Category, threshold: int) -> bool:
    score = categories[category]
    return score.available and score.score < threshold


def build_recommendations(pulse_score: int, categories: Dict[Category, CategoryScore]) -> List[Recommendation]:
    """Overall verdict first, then category-specific advice."""
    recommendations = [_overall_recommendation(pulse_score)]

    if _below(categories, Category.VERIFICATION_IDENTITY, 50):
        recommendations.append(Recommendation(
            type="warning",
            message="Seller identity is not verified - request verification before purchase",
            action="Request Verification",
        ))

    if _below(categories, Category.BEHAVIORAL_RED_FLAGS, 70):
        red_flags = categories[Category.BEHAVIORAL_RED_FLAGS].breakdown.get("red_flags", [])
        labels = sorted({f["label"] for f in red_flags})
        detail = f": {', '.join(labels)}" if labels else ""
        recommendations.append(Recommendation(
            type="critical",
            message=f"Listings contain common scam patterns{detail}",
            action="Do Not Pay Outside the Platform",
        ))

    if _below(categories, Category.COMMUNITY_FEEDBACK, 40):
        recommendations.append(Recommendation(
            type="warning",
            message="Few reviews or negative community feedback",
            action="Check Reviews Carefully",
        ))

    return recommendations


def insufficient_data_recommendation(metrics: ConfidenceMetrics) -> Recommendation:
    missing = ", ".join(c.label for c in metrics.missing_categories) or "none"
    return Recommendation(
        type="info",
        message=(
            f"Not enough data to score this seller reliably "
            f"({metrics.available_category_count}/{metrics.total_category_count} categories available; "
            f"missing: {missing})"
        ),
        action="Gather More Information",
    )


def identify_risk_factors(categories: Dict[Category, CategoryScore]) -> List[RiskFactor]:
    risk_factors = []
    for category, (threshold, severity, message) in RISK_THRESHOLDS.items():
        if not _below(categories, category, threshold):
            continue
        details = []
        if category == Category.BEHAVIORAL_RED_FLAGS:
            details = list(categories[category].breakdown.get("red_flags", []))
        risk_factors.append(RiskFactor(
            category=category,
            severity=severity,
            message=message,
            score=categories[category].score,
            details=details,
        ))
    return risk_factors


def identify_strengths(categories: Dict[Category, CategoryScore]) -> List[StrengthArea]:
    return [
        StrengthArea(category=c, score=categories[c].score, message=_STRENGTH_MESSAGES[c])
        for c in Category
        if categories[c].available and categories[c].score >= STRENGTH_THRESHOLD
    ]
