#!/usr/bin/env python3
"""
Pulse — Engine Validation
Run: python3 validate_engine.py

Smoke-validates the scoring engine end to end, no external services needed.
The pytest suite under tests/ is the full check.
"""
import sys
import os

sys.path.insert(0, os.path.dirname(__file__))

PASS = 0
FAIL = 0


def check(name, condition):
    global PASS, FAIL
    if condition:
        PASS += 1
        print(f"  ✓ {name}")
    else:
        FAIL += 1
        print(f"  ✗ {name}")


print("=" * 60)
print("Pulse — Engine Validation")
print("=" * 60)

# ── 1. Imports ────────────────────────────────────────────
print("\n1. Core Imports")
from pulse.logging_config import configure_logging
from pulse.trust import (
    Category, CanonicalSellerProfile, CommunityFeedback, MarketplaceData,
    ProfileData, RecentListing, ScoringStatus, TrustLevel, VerificationTier,
    compute_pulse_score, score_seller_payload,
)
from pulse.trust.analysis import describe_threat, severity_for_score

configure_logging()
check("pulse.trust imports", True)

# ── 2. Established seller ────────────────────────────────
print("\n2. Established Seller")

profile = CanonicalSellerProfile(
    platform="jiji",
    profile=ProfileData(name="Ada Phones", profile_picture="https://img/ada.jpg", location="Lagos"),
    marketplace=MarketplaceData(
        account_age_months=18, total_reviews=85, avg_rating=4.7, response_rate=92,
        verification=VerificationTier.ID_VERIFIED, last_seen_days=2,
    ),
)
listings = [
    RecentListing(title="iPhone 12 128GB", price="₦350,000", image_count=4, description="x" * 150),
    RecentListing(title="Samsung A52", price=180000, image_count=1, description="Clean, barely used"),
]

result = compute_pulse_score(profile, listings, CommunityFeedback(endorsements=3))
check(f"Status: {result.status.value}", result.status == ScoringStatus.SUCCESS)
check(f"Score: {result.pulse_score}/100", 0 <= result.pulse_score <= 100)
check(f"Trust level: {result.trust_level.value}", result.trust_level == TrustLevel.EXCELLENT)
check(f"Confidence: {result.confidence:.2f}", 0 <= result.confidence <= 1)
check("Weights sum to 100", sum(result.category_weights.values()) == 100)
check("Deterministic", compute_pulse_score(profile, listings, CommunityFeedback(endorsements=3)).to_dict()
      == result.to_dict())

# ── 3. Scam-pattern listing ──────────────────────────────
print("\n3. Red Flags")

scam = compute_pulse_score(
    profile,
    [RecentListing(title="URGENT, CASH ONLY, message me on WhatsApp")],
)
red = scam.categories[Category.BEHAVIORAL_RED_FLAGS]
check(f"Red flag score: {red.score}", red.score == 45)
check(f"Red flags found: {len(red.breakdown['red_flags'])}", len(red.breakdown["red_flags"]) == 3)
check(f"Threat line: {describe_threat(scam)}", describe_threat(scam).startswith("Multiple red flags"))

# ── 4. Edge Cases ────────────────────────────────────────
print("\n4. Edge Cases")

empty = compute_pulse_score(CanonicalSellerProfile())
check("Empty seller is insufficient_data", empty.status == ScoringStatus.INSUFFICIENT_DATA)
check("Empty seller has no score", empty.pulse_score is None)
check("Severity of 10 is CRITICAL", severity_for_score(10).value == "CRITICAL")

payload_result = score_seller_payload({
    "platform": "etsy",
    "profileData": {"name": "Shop", "profilePicture": None, "location": "Not specified"},
    "marketplaceData": {"accountAge": 7, "totalReviews": 12, "avgRating": 4.8, "lastSeen": "4"},
    "recentListings": [{"title": "Handmade mug", "price": "$24.00", "images": ["a", "b", "c"]}],
    "dataAvailability": {"profilePicture": "platform_unavailable", "location": "platform_unavailable"},
})
check(f"Payload scored: {payload_result.status.value}", payload_result.status in list(ScoringStatus))

# ── Summary ──────────────────────────────────────────────
print("\n" + "=" * 60)
total = PASS + FAIL
print(f"Results: {PASS}/{total} passed ({FAIL} failed)")
if FAIL == 0:
    print("ALL CHECKS PASSED")
else:
    print(f"{FAIL} check(s) failed — review above")
print("=" * 60)
sys.exit(0 if FAIL == 0 else 1)
