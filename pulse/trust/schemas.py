"""
Pulse — Extraction Payload Schemas

The extraction layer hands us camelCase JSON, one shape for every
marketplace. These models validate that shape and convert it into the
engine's dataclasses. profileData and marketplaceData must be present
(they may be empty); everything inside them is optional.
"""
from typing import Any, Dict, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pulse.trust.errors import ScoringContractError
from pulse.trust.models import (
    CanonicalSellerProfile, CommunityFeedback, FieldAvailability, MarketplaceData,
    ProfileData, RecentListing, VerificationTier,
)


def _to_number(value: Any) -> Any:
    """
    Scraped numbers arrive as "92%", "1,204" or null. Text that is not a
    number ("N/A", "lots") becomes 0, which the scorers read as no data.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, str):
        cleaned = value.replace("%", "").replace(",", "").strip()
        try:
            float(cleaned)
        except ValueError:
            return 0
        return cleaned
    return value


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ProfileDataSchema(_Model):
    name: Optional[str] = ""
    profile_picture: Optional[str] = Field(default=None, alias="profilePicture")
    location: Optional[str] = None
    bio: Optional[str] = None


class MarketplaceDataSchema(_Model):
    account_age: float = Field(default=0, alias="accountAge")
    total_listings: int = Field(default=0, alias="totalListings")
    avg_rating: float = Field(default=0.0, alias="avgRating")
    total_reviews: int = Field(default=0, alias="totalReviews")
    response_rate: float = Field(default=0.0, alias="responseRate")
    verification_status: Optional[str] = Field(default=None, alias="verificationStatus")
    last_seen: Optional[int] = Field(default=None, alias="lastSeen")
    followers: int = 0

    @field_validator("account_age", "total_listings", "avg_rating", "total_reviews",
                     "response_rate", "followers", mode="before")
    @classmethod
    def _numbers(cls, value):
        return _to_number(value)

    @field_validator("last_seen", mode="before")
    @classmethod
    def _last_seen(cls, value):
        # "3" (days) from most extractors, null when the page shows nothing
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                return None
        if isinstance(value, float):
            value = int(value)
        return value if value >= 0 else None


class ListingSchema(_Model):
    title: Optional[str] = ""
    price: Union[float, str, None] = None
    images: Optional[List[str]] = None
    image_count: Optional[int] = Field(default=None, alias="imageCount")
    description: Optional[str] = ""
    rating: Optional[float] = None

    def to_listing(self) -> RecentListing:
        count = self.image_count if self.image_count is not None else len(self.images or [])
        return RecentListing(
            title=self.title or "",
            price=self.price,
            image_count=count,
            description=self.description or "",
            rating=self.rating,
        )


class CommunityFeedbackSchema(_Model):
    endorsements: Union[int, List[Any]] = 0
    flags: Union[int, List[Any]] = 0

    def to_feedback(self) -> CommunityFeedback:
        def count(value):
            return len(value) if isinstance(value, list) else max(value, 0)
        return CommunityFeedback(endorsements=count(self.endorsements), flags=count(self.flags))


class SellerPayloadSchema(_Model):
    platform: str = ""
    profile_data: ProfileDataSchema = Field(alias="profileData")
    marketplace_data: MarketplaceDataSchema = Field(alias="marketplaceData")
    recent_listings: Optional[List[ListingSchema]] = Field(default=None, alias="recentListings")
    data_availability: Dict[str, FieldAvailability] = Field(default_factory=dict, alias="dataAvailability")
    community_feedback: Optional[CommunityFeedbackSchema] = Field(default=None, alias="communityFeedback")

    def to_profile(self) -> CanonicalSellerProfile:
        p, m = self.profile_data, self.marketplace_data
        return CanonicalSellerProfile(
            platform=self.platform,
            profile=ProfileData(
                name=p.name or "",
                profile_picture=p.profile_picture or None,
                location=p.location or None,
                bio=p.bio or None,
            ),
            marketplace=MarketplaceData(
                account_age_months=m.account_age,
                total_listings=m.total_listings,
                avg_rating=m.avg_rating,
                total_reviews=m.total_reviews,
                response_rate=m.response_rate,
                verification=VerificationTier.parse(m.verification_status),
                last_seen_days=m.last_seen,
                followers=m.followers,
            ),
            data_availability=dict(self.data_availability),
        )


def parse_seller_payload(
    payload: Dict[str, Any],
) -> Tuple[CanonicalSellerProfile, List[RecentListing], Optional[CommunityFeedback]]:
    """Validate an extraction payload. Raises ScoringContractError on a broken shape."""
    if not isinstance(payload, dict):
        raise ScoringContractError("Seller payload must be an object", ["payload"])
    try:
        parsed = SellerPayloadSchema.model_validate(payload)
    except ValidationError as e:
        fields = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        raise ScoringContractError("Seller payload violates the extraction contract", fields) from e

    listings = [l.to_listing() for l in parsed.recent_listings or []]
    feedback = parsed.community_feedback.to_feedback() if parsed.community_feedback else None
    return parsed.to_profile(), listings, feedback
