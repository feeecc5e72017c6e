"""
Pulse — Category Weights & Aggregation

Default weights (sum to 1.00):
    Verification & Identity  25%
    Account Maturity         15%
    Listing Completeness     15%
    Activity & Recency       10%
    Engagement               10%
    Community Feedback       10%
    Behavioral Red Flags     15%

When a category is unavailable its weight is shared out proportionally
among the available ones, so a seller missing one signal is scored on
the rest instead of being capped.
"""
import math
from dataclasses import dataclass, field
from typing import Dict, Mapping, Tuple

from pulse.trust.confidence import require_all_categories
from pulse.trust.models import Category, CategoryScore, round_half_up

WEIGHT_TOLERANCE = 1e-6


def _default_weights() -> Dict[Category, float]:
    return {
        Category.VERIFICATION_IDENTITY: 0.25,
        Category.ACCOUNT_MATURITY:      0.15,
        Category.LISTING_COMPLETENESS:  0.15,
        Category.ACTIVITY_RECENCY:      0.10,
        Category.ENGAGEMENT:            0.10,
        Category.COMMUNITY_FEEDBACK:    0.10,
        Category.BEHAVIORAL_RED_FLAGS:  0.15,
    }


@dataclass(frozen=True)
class CategoryWeights:
    """Fixed weight table. Pass a different one to try another scheme."""
    weights: Mapping[Category, float] = field(default_factory=_default_weights)

    def __post_init__(self):
        missing = [c.value for c in Category if c not in self.weights]
        if missing:
            raise ValueError(f"Weights missing for: {', '.join(missing)}")
        negative = [c.value for c, w in self.weights.items() if w < 0]
        if negative:
            raise ValueError(f"Weights must be non-negative: {', '.join(negative)}")
        total = sum(self.weights[c] for c in Category)
        if abs(total - 1.0) > WEIGHT_TOLERANCE:
            raise ValueError(f"Weights must sum to 1.00, got {total:.4f}")

    def __getitem__(self, category: Category) -> float:
        return self.weights[category]


DEFAULT_WEIGHTS = CategoryWeights()


def normalized_weights(
    categories: Dict[Category, CategoryScore],
    weights: CategoryWeights = DEFAULT_WEIGHTS,
) -> Dict[Category, float]:
    """Share of the final score per category. Unavailable categories get 0."""
    require_all_categories(categories)
    total = sum(weights[c] for c in Category if categories[c].available)
    if total <= 0:
        return {c: 0.0 for c in Category}
    return {
        c: (weights[c] / total if categories[c].available else 0.0)
        for c in Category
    }


def weight_percentages(normalized: Dict[Category, float]) -> Dict[Category, int]:
    """
    Integer percentages that sum to exactly 100 (largest remainder).
    Ties go to the category declared first. All-zero input stays all zero.
    """
    raw = {c: round(normalized.get(c, 0.0) * 100, 9) for c in Category}
    if sum(raw.values()) <= 0:
        return {c: 0 for c in Category}

    floors = {c: int(math.floor(v)) for c, v in raw.items()}
    shortfall = 100 - sum(floors.values())
    order = sorted(Category, key=lambda c: (-(raw[c] - floors[c]), list(Category).index(c)))
    for c in order[:shortfall]:
        floors[c] += 1
    return floors


def aggregate(
    categories: Dict[Category, CategoryScore],
    weights: CategoryWeights = DEFAULT_WEIGHTS,
) -> Tuple[int, Dict[Category, int]]:
    """Returns (pulse_score, category_weight_percentages)."""
    normalized = normalized_weights(categories, weights)
    if not any(normalized.values()):
        return 0, weight_percentages(normalized)

    composite = sum(
        categories[c].score * normalized[c]
        for c in Category
        if categories[c].available
    )
    pulse_score = min(max(round_half_up(composite), 0), 100)
    return pulse_score, weight_percentages(normalized)
