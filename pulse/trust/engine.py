"""
Pulse — Seller Trust Scoring Engine

Architecture:
    Stage 1 — Category scorers (7 independent, pure)
    Stage 2 — Confidence & coverage (how much do we actually know?)
    Stage 3 — Insufficient-data gate (refuse to score rather than guess)
    Stage 4 — Weighted aggregation, reweighted over available categories
    Stage 5 — Labels, recommendations, risk factors, strengths

Pure and synchronous: no I/O, no shared state, inputs are never mutated.
Identical inputs always give identical output.
"""
from typing import Any, Dict, List, Optional

import structlog

from pulse.config import Settings, get_settings
from pulse.trust.confidence import evaluate_confidence, is_insufficient
from pulse.trust.models import (
    Category, CategoryScore, CanonicalSellerProfile, CommunityFeedback,
    RecentListing, ScoringResult, ScoringStatus,
)
from pulse.trust.recommendations import (
    build_recommendations, confidence_level, identify_risk_factors,
    identify_strengths, insufficient_data_recommendation, trust_level,
)
from pulse.trust.schemas import parse_seller_payload
from pulse.trust.scorers import score_categories
from pulse.trust.weights import DEFAULT_WEIGHTS, CategoryWeights, aggregate

logger = structlog.get_logger()


def finalize_score(
    categories: Dict[Category, CategoryScore],
    profile: CanonicalSellerProfile,
    listings: Optional[List[RecentListing]] = None,
    weights: CategoryWeights = DEFAULT_WEIGHTS,
    settings: Optional[Settings] = None,
) -> ScoringResult:
    """Stages 2-5, starting from already computed category scores."""
    settings = settings or get_settings()
    metrics = evaluate_confidence(categories, profile, listings)

    if is_insufficient(metrics.confidence, metrics.coverage, settings):
        logger.info(
            "pulse_insufficient_data",
            platform=profile.platform,
            confidence=metrics.confidence,
            coverage=round(metrics.coverage, 2),
            missing=[c.value for c in metrics.missing_categories],
        )
        return ScoringResult(
            status=ScoringStatus.INSUFFICIENT_DATA,
            confidence_metrics=metrics,
            recommendations=[insufficient_data_recommendation(metrics)],
        )

    pulse_score, percentages = aggregate(categories, weights)
    result = ScoringResult(
        status=ScoringStatus.SUCCESS,
        confidence_metrics=metrics,
        recommendations=build_recommendations(pulse_score, categories),
        pulse_score=pulse_score,
        confidence_level=confidence_level(metrics.confidence),
        trust_level=trust_level(pulse_score),
        categories=dict(categories),
        category_weights=percentages,
        risk_factors=identify_risk_factors(categories),
        strength_areas=identify_strengths(categories),
    )

    logger.info(
        "pulse_score_computed",
        platform=profile.platform,
        pulse_score=pulse_score,
        trust_level=result.trust_level.value,
        confidence=metrics.confidence,
        available_categories=metrics.available_category_count,
        risk_factors=len(result.risk_factors),
    )
    return result


def compute_pulse_score(
    profile: CanonicalSellerProfile,
    listings: Optional[List[RecentListing]] = None,
    feedback: Optional[CommunityFeedback] = None,
    weights: CategoryWeights = DEFAULT_WEIGHTS,
    settings: Optional[Settings] = None,
) -> ScoringResult:
    """
    THE scoring function.
    Takes a canonical seller profile, its recent listings and optional
    community feedback; returns either a scored result or insufficient_data.
    """
    listings = list(listings or [])
    categories = score_categories(profile, listings, feedback)
    return finalize_score(categories, profile, listings, weights=weights, settings=settings)


def score_seller_payload(
    payload: Dict[str, Any],
    weights: CategoryWeights = DEFAULT_WEIGHTS,
    settings: Optional[Settings] = None,
) -> ScoringResult:
    """Parse an extraction payload and score it in one call."""
    profile, listings, feedback = parse_seller_payload(payload)
    return compute_pulse_score(profile, listings, feedback, weights=weights, settings=settings)
