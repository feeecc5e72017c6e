import pytest

from pulse.config import Settings
from pulse.trust.models import (
    CanonicalSellerProfile, FieldAvailability, MarketplaceData, ProfileData,
    RecentListing, VerificationTier,
)


def _profile(
    verification=VerificationTier.UNVERIFIED,
    picture=None,
    location=None,
    bio=None,
    account_age=0,
    reviews=0,
    rating=0.0,
    response_rate=0,
    last_seen=None,
    availability=None,
    platform="jiji",
):
    return CanonicalSellerProfile(
        platform=platform,
        profile=ProfileData(name="Test Seller", profile_picture=picture, location=location, bio=bio),
        marketplace=MarketplaceData(
            account_age_months=account_age,
            total_reviews=reviews,
            avg_rating=rating,
            response_rate=response_rate,
            verification=verification,
            last_seen_days=last_seen,
        ),
        data_availability={k: FieldAvailability(v) for k, v in (availability or {}).items()},
    )


def _listing(title="Samsung Galaxy S21", price="150000", images=3, description="d" * 120, rating=None):
    return RecentListing(title=title, price=price, image_count=images, description=description, rating=rating)


@pytest.fixture
def make_profile():
    return _profile


@pytest.fixture
def make_listing():
    return _listing


@pytest.fixture
def established_profile():
    """ID-verified, photo, location, 18 months, 92% response, 85 reviews at 4.7, seen 3 days ago."""
    return _profile(
        verification=VerificationTier.ID_VERIFIED,
        picture="https://cdn.example.com/p.jpg",
        location="Lagos, Nigeria",
        account_age=18,
        reviews=85,
        rating=4.7,
        response_rate=92,
        last_seen=3,
    )


@pytest.fixture
def settings(monkeypatch):
    for name in ("PULSE_ENV", "PULSE_MIN_CONFIDENCE", "PULSE_MIN_COVERAGE",
                 "PULSE_LOG_LEVEL", "PULSE_LOG_JSON"):
        monkeypatch.delenv(name, raising=False)
    return Settings()
