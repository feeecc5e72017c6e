"""
Pulse — Confidence & Coverage

How much should anyone believe the score we are about to produce?

    coverage    = available categories / 7
    recency     = 1.0 (seen <= 30d), 0.6 (<= 60d or unknown with listings), 0.3 otherwise
    consistency = 1.0, or 0.7 when the bio reads like a business but identity score is 0
    confidence  = 0.5 * coverage + 0.3 * recency + 0.2 * consistency

Below either gate threshold we refuse to score at all.
"""
import re
from typing import Dict, List, Optional

import structlog

from pulse.config import Settings, get_settings
from pulse.trust.errors import ScoringContractError
from pulse.trust.models import (
    Category, CategoryScore, CanonicalSellerProfile, ConfidenceMetrics, RecentListing,
)

logger = structlog.get_logger()

COVERAGE_WEIGHT = 0.5
RECENCY_WEIGHT = 0.3
CONSISTENCY_WEIGHT = 0.2

INCONSISTENT_PROFILE = 0.7

_BUSINESS_LANGUAGE = re.compile(
    r"\bwe\s+(?:supply|sell|deliver|distribute|import|export|offer)\b"
    r"|\bwholesale\b|\bdistributors?\b|\bour\s+(?:company|store|shop|customers)\b",
    re.IGNORECASE,
)


def has_business_language(bio: Optional[str]) -> bool:
    return bool(bio) and bool(_BUSINESS_LANGUAGE.search(bio))


def recency_factor(last_seen_days: Optional[int], listing_count: int) -> float:
    if last_seen_days is not None:
        if last_seen_days <= 30:
            return 1.0
        if last_seen_days <= 60:
            return 0.6
        return 0.3
    if listing_count > 0:
        return 0.6
    return 0.3


def consistency_factor(profile: CanonicalSellerProfile, verification: CategoryScore) -> float:
    # A professional operation with zero identity proof does not add up.
    if has_business_language(profile.profile.bio) and verification.score == 0:
        return INCONSISTENT_PROFILE
    return 1.0


def require_all_categories(categories: Dict[Category, CategoryScore]) -> None:
    if categories is None:
        raise ScoringContractError("Category scores missing", ["categories"])
    missing = [c.value for c in Category if c not in categories]
    if missing:
        raise ScoringContractError("Category scores missing", missing)


def evaluate_confidence(
    categories: Dict[Category, CategoryScore],
    profile: CanonicalSellerProfile,
    listings: Optional[List[RecentListing]] = None,
) -> ConfidenceMetrics:
    require_all_categories(categories)

    missing = [c for c in Category if not categories[c].available]
    available = len(Category) - len(missing)
    coverage = available / len(Category)

    recency = recency_factor(profile.marketplace.last_seen_days, len(listings or []))
    consistency = consistency_factor(profile, categories[Category.VERIFICATION_IDENTITY])

    confidence = round(
        COVERAGE_WEIGHT * coverage + RECENCY_WEIGHT * recency + CONSISTENCY_WEIGHT * consistency,
        2,
    )

    for category in missing:
        logger.debug("category_unavailable", category=category.value,
                     reason=categories[category].breakdown.get("reason"))

    return ConfidenceMetrics(
        confidence=confidence,
        coverage=coverage,
        recency=recency,
        consistency=consistency,
        available_category_count=available,
        missing_categories=missing,
    )


def is_insufficient(confidence: float, coverage: float, settings: Optional[Settings] = None) -> bool:
    """Hard stop. An insufficient seller gets no score, not a low one."""
    settings = settings or get_settings()
    return confidence < settings.MIN_CONFIDENCE or coverage < settings.MIN_COVERAGE
