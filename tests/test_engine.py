"""
End-to-end tests for the scoring pipeline: scorers -> confidence -> gate ->
aggregation -> synthesis.
"""
import pytest
from structlog.testing import capture_logs

from pulse.trust.engine import compute_pulse_score, finalize_score
from pulse.trust.errors import ScoringContractError
from pulse.trust.models import (
    Category, CategoryScore, CanonicalSellerProfile, CommunityFeedback,
    ConfidenceLevel, RecentListing, ScoringStatus, Severity, TrustLevel,
    VerificationTier,
)

SCAM_TITLE = "URGENT, CASH ONLY, message me on WhatsApp"


class TestSuccessfulScoring:

    def test_established_seller_is_excellent(self, established_profile, make_listing, settings):
        result = compute_pulse_score(established_profile, [make_listing()], settings=settings)
        assert result.status == ScoringStatus.SUCCESS
        assert result.pulse_score == 100
        assert result.trust_level == TrustLevel.EXCELLENT
        assert result.confidence == 1.0
        assert result.confidence_level == ConfidenceLevel.VERY_HIGH
        assert result.risk_factors == []
        assert [s.category for s in result.strength_areas] == list(Category)
        assert result.recommendations[0].action == "Safe to Purchase"
        assert len(result.recommendations) == 1

    @pytest.mark.parametrize("images,listing_score", [(0, 30), (1, 40)])
    def test_established_seller_with_plain_listing_is_still_excellent(
        self, established_profile, make_listing, settings, images, listing_score,
    ):
        # title and price only, short description
        listing = make_listing(images=images, description="Clean, barely used")
        result = compute_pulse_score(established_profile, [listing], settings=settings)
        assert result.categories[Category.LISTING_COMPLETENESS].score == listing_score
        assert result.pulse_score >= 80
        assert result.trust_level == TrustLevel.EXCELLENT
        assert not any(r.category == Category.LISTING_COMPLETENESS for r in result.risk_factors)

    def test_scam_listing_lowers_score_and_raises_critical_risk(self, established_profile, settings):
        result = compute_pulse_score(established_profile, [RecentListing(title=SCAM_TITLE)], settings=settings)
        # 25 + 15 + 10*.15 + 10 + 10 + 10 + 45*.15 = 78.25
        assert result.pulse_score == 78
        assert result.trust_level == TrustLevel.GOOD
        assert result.categories[Category.BEHAVIORAL_RED_FLAGS].score == 45

        risk = result.risk_factors[0]
        assert risk.category == Category.BEHAVIORAL_RED_FLAGS
        assert risk.severity == Severity.CRITICAL
        assert len(risk.details) == 3

        actions = [r.action for r in result.recommendations]
        assert actions == ["Consider", "Do Not Pay Outside the Platform"]
        assert result.recommendations[1].type == "critical"
        assert result.recommendations[1].message.endswith(
            "Cash-only or suspicious payment terms, Off-platform contact solicitation, Urgency language"
        )

    def test_three_categories_is_enough_to_score(self, make_profile, settings):
        profile = make_profile(account_age=5, last_seen=2)
        result = compute_pulse_score(profile, settings=settings)
        assert result.status == ScoringStatus.SUCCESS
        assert result.available_categories == [
            Category.VERIFICATION_IDENTITY, Category.ACCOUNT_MATURITY, Category.ACTIVITY_RECENCY,
        ]
        # weights .25/.15/.10 renormalize to .5/.3/.2: 0 + 12 + 20
        assert result.pulse_score == 32
        assert result.trust_level == TrustLevel.POOR
        assert result.category_weights[Category.VERIFICATION_IDENTITY] == 50
        assert result.category_weights[Category.ENGAGEMENT] == 0

    def test_missing_category_is_reweighted(self, established_profile, make_listing, settings):
        established_profile.marketplace.response_rate = 0
        result = compute_pulse_score(established_profile, [make_listing()], settings=settings)
        assert result.categories[Category.ENGAGEMENT].available is False
        assert result.pulse_score == 100
        assert sum(result.category_weights.values()) == 100
        assert result.category_weights[Category.VERIFICATION_IDENTITY] == 28

    def test_community_feedback_feeds_through(self, established_profile, make_listing, settings):
        clean = compute_pulse_score(established_profile, [make_listing()], settings=settings)
        flagged = compute_pulse_score(
            established_profile, [make_listing()], CommunityFeedback(flags=8), settings=settings,
        )
        assert flagged.categories[Category.COMMUNITY_FEEDBACK].score == 20
        assert flagged.pulse_score == clean.pulse_score - 8
        assert any(r.category == Category.COMMUNITY_FEEDBACK for r in flagged.risk_factors)

    def test_low_thresholds_let_a_thin_profile_score_zero(self, make_profile, settings):
        settings.MIN_COVERAGE = 0.1
        result = compute_pulse_score(make_profile(), settings=settings)
        assert result.status == ScoringStatus.SUCCESS
        assert result.pulse_score == 0
        assert result.trust_level == TrustLevel.VERY_POOR
        assert result.recommendations[0].action == "Avoid"


class TestInsufficientData:

    def test_empty_profile_is_not_scored(self, settings):
        result = compute_pulse_score(CanonicalSellerProfile(), settings=settings)
        assert result.status == ScoringStatus.INSUFFICIENT_DATA
        assert result.pulse_score is None
        assert result.trust_level is None
        assert result.categories == {}

    def test_two_categories_fall_below_coverage(self, make_profile, settings):
        result = compute_pulse_score(make_profile(last_seen=1), settings=settings)
        assert result.status == ScoringStatus.INSUFFICIENT_DATA
        assert result.coverage == pytest.approx(2 / 7)

    def test_all_categories_unavailable(self, make_profile, settings):
        categories = {c: CategoryScore.not_available("nothing") for c in Category}
        result = finalize_score(categories, make_profile(), settings=settings)
        assert result.status == ScoringStatus.INSUFFICIENT_DATA
        assert result.coverage == 0.0
        # 0.3 * 0.3 + 0.2 * 1.0
        assert result.confidence == 0.29
        assert result.missing_categories == list(Category)

    def test_recommendation_lists_missing_categories(self, settings):
        result = compute_pulse_score(CanonicalSellerProfile(), settings=settings)
        assert len(result.recommendations) == 1
        rec = result.recommendations[0]
        assert rec.type == "info"
        assert rec.action == "Gather More Information"
        assert "1/7 categories available" in rec.message
        assert "Account Maturity" in rec.message

    def test_dict_shape(self, settings):
        data = compute_pulse_score(CanonicalSellerProfile(), settings=settings).to_dict()
        assert data["status"] == "insufficient_data"
        assert "pulse_score" not in data
        assert data["available_categories"] == ["verificationIdentity"]
        assert len(data["missing_categories"]) == 6
        assert data["coverage"] == 0.14


class TestContract:

    def test_missing_category_raises(self, make_profile, settings):
        categories = {c: CategoryScore.scored(50) for c in Category}
        del categories[Category.LISTING_COMPLETENESS]
        with pytest.raises(ScoringContractError) as exc:
            finalize_score(categories, make_profile(), settings=settings)
        assert exc.value.fields == ["listingCompleteness"]

    def test_deterministic(self, established_profile, make_listing, settings):
        listings = [make_listing(), RecentListing(title="Quick sale")]
        first = compute_pulse_score(established_profile, listings, CommunityFeedback(2, 1), settings=settings)
        second = compute_pulse_score(established_profile, listings, CommunityFeedback(2, 1), settings=settings)
        assert first.to_dict() == second.to_dict()

    def test_inputs_not_mutated(self, established_profile, make_listing, settings):
        listings = [make_listing(), RecentListing(title=SCAM_TITLE)]
        feedback = CommunityFeedback(endorsements=1, flags=3)
        before = (repr(established_profile), repr(listings), repr(feedback))
        compute_pulse_score(established_profile, listings, feedback, settings=settings)
        assert (repr(established_profile), repr(listings), repr(feedback)) == before

    @pytest.mark.parametrize("tier", list(VerificationTier))
    def test_score_range_and_weight_sum(self, make_profile, make_listing, settings, tier):
        profile = make_profile(verification=tier, account_age=2, response_rate=40, last_seen=90, reviews=2)
        result = compute_pulse_score(profile, [make_listing(title=SCAM_TITLE)], settings=settings)
        assert 0 <= result.pulse_score <= 100
        assert sum(result.category_weights.values()) == 100


class TestSerialization:

    def test_success_dict(self, established_profile, make_listing, settings):
        data = compute_pulse_score(established_profile, [make_listing()], settings=settings).to_dict()
        assert data["status"] == "success"
        assert data["pulse_score"] == 100
        assert data["trust_level"] == "Excellent"
        assert list(data["categories"]) == [c.value for c in Category]
        assert data["categories"]["engagement"] == {
            "score": 100, "available": True, "breakdown": {"response_rate": 92},
        }
        assert data["confidence_metrics"]["total_category_count"] == 7
        assert data["engine_version"] == "2.1.0"

    def test_compact(self, established_profile, make_listing, settings):
        compact = compute_pulse_score(established_profile, [make_listing()], settings=settings).to_compact()
        assert compact == {
            "status": "success",
            "pulse_score": 100,
            "trust_level": "Excellent",
            "confidence": 1.0,
            "confidence_level": "Very High",
        }

    def test_compact_insufficient(self, settings):
        compact = compute_pulse_score(CanonicalSellerProfile(), settings=settings).to_compact()
        assert compact["pulse_score"] is None
        assert compact["trust_level"] is None


class TestLogging:

    def test_success_event(self, established_profile, make_listing, settings):
        with capture_logs() as logs:
            compute_pulse_score(established_profile, [make_listing()], settings=settings)
        events = [e for e in logs if e["event"] == "pulse_score_computed"]
        assert len(events) == 1
        assert events[0]["pulse_score"] == 100
        assert events[0]["platform"] == "jiji"

    def test_insufficient_event(self, settings):
        with capture_logs() as logs:
            compute_pulse_score(CanonicalSellerProfile(), settings=settings)
        events = [e for e in logs if e["event"] == "pulse_insufficient_data"]
        assert len(events) == 1
        assert "engagement" in events[0]["missing"]
