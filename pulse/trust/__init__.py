"""
Pulse — Trust Scoring Package
Re-exports for convenience.
"""
from pulse.trust.engine import compute_pulse_score, finalize_score, score_seller_payload
from pulse.trust.errors import PulseError, ScoringContractError
from pulse.trust.models import (
    Category, CategoryScore, CanonicalSellerProfile, CommunityFeedback,
    ConfidenceLevel, ConfidenceMetrics, FieldAvailability, MarketplaceData,
    ProfileData, RecentListing, ScoringResult, ScoringStatus, TrustLevel,
    VerificationTier,
)
from pulse.trust.schemas import parse_seller_payload
from pulse.trust.weights import DEFAULT_WEIGHTS, CategoryWeights
