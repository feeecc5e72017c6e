"""
Pulse — Category Scorers

Seven independent scorers, each a pure function of the seller's inputs:

    Verification & Identity  — always available, absence of proof is information
    Account Maturity         — unavailable when account age is unknown
    Listing Completeness     — unavailable with no listings
    Activity & Recency       — unavailable with no last-seen and no listings
    Engagement               — unavailable when response rate is 0 / missing
    Community Feedback       — unavailable with no reviews and no user feedback
    Behavioral Red Flags     — unavailable with no listings

A field the marketplace never exposes (platform_unavailable) is never
held against the seller. A field it exposes but the seller left empty is.
"""
import re
from typing import Callable, Dict, List, Optional

from pulse.trust.models import (
    Category, CategoryScore, CanonicalSellerProfile, CommunityFeedback,
    RecentListing, VerificationTier, round_half_up,
)
from pulse.trust.red_flags import analyze_listings

MAX_RECENT_LISTINGS = 5

Scorer = Callable[
    [CanonicalSellerProfile, List[RecentListing], Optional[CommunityFeedback]],
    CategoryScore,
]

_PLACEHOLDER_LOCATIONS = {"", "not specified", "unknown", "n/a", "na", "none", "-"}
_NUMERIC_PRICE = re.compile(r"\d[\d,]*(?:\.\d+)?")


# ── Verification & Identity ───────────────────────

_VERIFICATION_BASE = {
    VerificationTier.ID_VERIFIED:    100,
    VerificationTier.PHONE_VERIFIED: 70,
    VerificationTier.EMAIL_VERIFIED: 50,
    VerificationTier.UNVERIFIED:     0,
}


def has_real_location(location: Optional[str]) -> bool:
    return bool(location) and location.strip().lower() not in _PLACEHOLDER_LOCATIONS


def score_verification_identity(
    profile: CanonicalSellerProfile,
    listings: List[RecentListing],
    feedback: Optional[CommunityFeedback] = None,
) -> CategoryScore:
    """Category: Is this seller who they claim to be?"""
    tier = VerificationTier.parse(profile.marketplace.verification)
    score = _VERIFICATION_BASE[tier]
    breakdown = {"verification": tier.value, "base": score}

    if profile.profile.profile_picture:
        score = min(score + 10, 100)
        breakdown["profile_picture"] = 10
    elif profile.is_platform_unavailable("profilePicture"):
        breakdown["profile_picture"] = "platform_unavailable"
    else:
        breakdown["profile_picture"] = 0

    if has_real_location(profile.profile.location):
        score = min(score + 10, 100)
        breakdown["location"] = 10
    elif profile.is_platform_unavailable("location"):
        breakdown["location"] = "platform_unavailable"
    else:
        breakdown["location"] = 0

    return CategoryScore.scored(score, breakdown)


# ── Account Maturity ──────────────────────────────

def score_account_maturity(
    profile: CanonicalSellerProfile,
    listings: List[RecentListing],
    feedback: Optional[CommunityFeedback] = None,
) -> CategoryScore:
    """Category: How long has this seller been around?"""
    months = profile.marketplace.account_age_months or 0
    if months <= 0:
        return CategoryScore.not_available("Account age not available")

    if months >= 12:
        score = 100
    elif months >= 6:
        score = 70
    elif months >= 3:
        score = 40
    else:
        score = 10

    return CategoryScore.scored(score, {"account_age_months": months})


# ── Listing Completeness ──────────────────────────

def has_numeric_price(price) -> bool:
    if price is None or isinstance(price, bool):
        return False
    if isinstance(price, (int, float)):
        return price >= 0
    return bool(_NUMERIC_PRICE.search(str(price)))


def listing_points(listing: RecentListing) -> Dict[str, int]:
    """Max 50 points per listing."""
    points = {"title": 0, "price": 0, "images": 0, "description": 0}
    if listing.title and listing.title.strip():
        points["title"] = 5
    if has_numeric_price(listing.price):
        points["price"] = 10
    if listing.image_count >= 3:
        points["images"] = 15
    elif listing.image_count >= 1:
        points["images"] = 5
    if listing.description_length >= 100:
        points["description"] = 20
    return points


def score_listing_completeness(
    profile: CanonicalSellerProfile,
    listings: List[RecentListing],
    feedback: Optional[CommunityFeedback] = None,
) -> CategoryScore:
    """Category: Do listings carry enough detail to judge the item?"""
    recent = (listings or [])[:MAX_RECENT_LISTINGS]
    if not recent:
        if profile.is_platform_unavailable("recentListings"):
            return CategoryScore.not_available("Platform does not expose listings")
        return CategoryScore.not_available("Seller has no listings")

    per_listing = [listing_points(l) for l in recent]
    totals = [sum(p.values()) for p in per_listing]
    average = sum(totals) / len(totals)
    score = min(average / 50 * 100, 100)

    return CategoryScore.scored(round_half_up(score), {
        "listings_evaluated": len(recent),
        "average_points": round(average, 2),
        "per_listing": per_listing,
    })


# ── Activity & Recency ────────────────────────────

def score_activity_recency(
    profile: CanonicalSellerProfile,
    listings: List[RecentListing],
    feedback: Optional[CommunityFeedback] = None,
) -> CategoryScore:
    """Category: Is the seller still active?"""
    days = profile.marketplace.last_seen_days
    if days is not None:
        if days <= 7:
            score = 100
        elif days <= 30:
            score = 70
        elif days <= 60:
            score = 40
        else:
            score = 10
        return CategoryScore.scored(score, {"last_seen_days": days})

    if listings:
        return CategoryScore.scored(50, {
            "last_seen_days": None,
            "reason": "Has activity but recency unknown",
        })

    return CategoryScore.not_available("No activity data")


# ── Engagement ────────────────────────────────────

def score_engagement(
    profile: CanonicalSellerProfile,
    listings: List[RecentListing],
    feedback: Optional[CommunityFeedback] = None,
) -> CategoryScore:
    """Category: Does the seller answer buyers? A 0% rate is no signal, not a bad one."""
    rate = profile.marketplace.response_rate or 0
    if rate <= 0:
        return CategoryScore.not_available("Response rate not available")

    if rate >= 90:
        score = 100
    elif rate >= 80:
        score = 80
    elif rate >= 60:
        score = 60
    else:
        score = 30

    return CategoryScore.scored(score, {"response_rate": rate})


# ── Community Feedback ────────────────────────────

def score_community_feedback(
    profile: CanonicalSellerProfile,
    listings: List[RecentListing],
    feedback: Optional[CommunityFeedback] = None,
) -> CategoryScore:
    """
    Category: What do buyers say?
    Flags pull the score down twice as fast as endorsements push it up.
    """
    reviews = profile.marketplace.total_reviews or 0
    rating = profile.marketplace.avg_rating or 0
    has_reviews = reviews > 0 or rating > 0
    has_feedback = feedback is not None and feedback.has_signal

    if not has_reviews and not has_feedback:
        return CategoryScore.not_available("No reviews or community feedback")

    if reviews >= 10 or rating >= 4.5:
        base = 100
    elif reviews >= 5:
        base = 70
    elif reviews >= 1:
        base = 40
    else:
        base = 0

    breakdown = {"total_reviews": reviews, "avg_rating": rating, "base": base}
    score = base

    if has_feedback:
        net = feedback.net
        if net > 0:
            score = min(base + net * 5, 100)
        elif net < 0:
            score = max(base - abs(net) * 10, 0)
        breakdown.update({
            "endorsements": feedback.endorsements,
            "flags": feedback.flags,
            "net_feedback": net,
            "adjustment": score - base,
        })

    return CategoryScore.scored(score, breakdown)


# ── Behavioral Red Flags ──────────────────────────

def score_behavioral_red_flags(
    profile: CanonicalSellerProfile,
    listings: List[RecentListing],
    feedback: Optional[CommunityFeedback] = None,
) -> CategoryScore:
    """Category: Does the listing language look like a scam?"""
    recent = (listings or [])[:MAX_RECENT_LISTINGS]
    if not recent:
        return CategoryScore.not_available("No listings to analyze")

    score, red_flags = analyze_listings(recent)
    return CategoryScore.scored(score, {
        "listings_analyzed": len(recent),
        "total_penalty": sum(f["penalty"] for f in red_flags),
        "red_flags": red_flags,
    })


# ── Registry ──────────────────────────────────────

SCORERS: Dict[Category, Scorer] = {
    Category.VERIFICATION_IDENTITY: score_verification_identity,
    Category.ACCOUNT_MATURITY:      score_account_maturity,
    Category.LISTING_COMPLETENESS:  score_listing_completeness,
    Category.ACTIVITY_RECENCY:      score_activity_recency,
    Category.ENGAGEMENT:            score_engagement,
    Category.COMMUNITY_FEEDBACK:    score_community_feedback,
    Category.BEHAVIORAL_RED_FLAGS:  score_behavioral_red_flags,
}


def score_categories(
    profile: CanonicalSellerProfile,
    listings: Optional[List[RecentListing]] = None,
    feedback: Optional[CommunityFeedback] = None,
) -> Dict[Category, CategoryScore]:
    """Run every scorer in declaration order."""
    listings = list(listings or [])
    return {category: scorer(profile, listings, feedback) for category, scorer in SCORERS.items()}
