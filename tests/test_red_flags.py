"""Tests for the red-flag text analyzer."""
import pytest

from pulse.trust.models import RecentListing
from pulse.trust.red_flags import (
    analyze_listing, analyze_listings, count_emoji, is_all_caps_title,
)


def flags_of(listing):
    return [f["flag"] for f in analyze_listing(listing, 0)]


class TestPhraseFamilies:

    def test_urgent_cash_only_whatsapp_scenario(self):
        score, red_flags = analyze_listings([
            RecentListing(title="URGENT, CASH ONLY, message me on WhatsApp"),
        ])
        assert score == 45
        assert len(red_flags) == 3
        assert [f["flag"] for f in red_flags] == [
            "urgency_language", "suspicious_payment", "off_platform_contact",
        ]
        assert all(f["listing_index"] == 0 for f in red_flags)
        assert [f["penalty"] for f in red_flags] == [15, 20, 20]

    @pytest.mark.parametrize("text,flag", [
        ("Selling asap, moving abroad", "urgency_language"),
        ("I need money for school fees", "financial_pressure"),
        ("Must sell this week", "financial_pressure"),
        ("Payment first before delivery", "suspicious_payment"),
        ("Pay with gift cards only", "suspicious_payment"),
        ("First come first serve!", "first_come_first_serve"),
        ("first come, first served", "first_come_first_serve"),
        ("Chat me on telegram for details", "off_platform_contact"),
        ("Call 0801 234 5678 for price", "off_platform_contact"),
        ("Reach me +234-801-234-5678", "off_platform_contact"),
        ("Reach me on 08012345678", "off_platform_contact"),
    ])
    def test_family_detected(self, text, flag):
        assert flag in flags_of(RecentListing(title="Item", description=text))

    def test_family_counted_once_per_listing(self):
        listing = RecentListing(title="Urgent sale", description="urgent urgent, hurry, asap")
        assert flags_of(listing).count("urgency_language") == 1

    @pytest.mark.parametrize("text", [
        "Brand new iPhone 12 128GB, comes with charger and box",
        "Price 250,000 naira, slightly negotiable",
        "Sizes 10 12 14 16 18 available",
        "Broken screen but works fine",
        "Read the context menu in the manual",
        "Price 150000000 naira",
        "Serial no 123456789",
        "IMEI 356938035643",
        "Model 1234-567-890 replacement part",
    ])
    def test_ordinary_listing_text_is_clean(self, text):
        assert flags_of(RecentListing(title="Phone", description=text)) == []

    def test_case_insensitive(self):
        assert "suspicious_payment" in flags_of(RecentListing(title="item", description="CaSh OnLy"))


class TestFormattingFlags:

    def test_all_caps_title(self):
        assert is_all_caps_title("IPHONE FOR SALE") is True
        assert is_all_caps_title("TV") is False            # too short
        assert is_all_caps_title("12345678") is False      # no letters
        assert is_all_caps_title("iPhone for sale") is False

    def test_all_caps_penalty(self):
        score, red_flags = analyze_listings([RecentListing(title="BRAND NEW LAPTOP")])
        assert score == 95
        assert red_flags[0]["flag"] == "all_caps_title"

    def test_emoji_threshold(self):
        assert count_emoji("🔥🔥🔥") == 3
        assert "excessive_emoji" not in flags_of(RecentListing(title="Deal 🔥🔥🔥"))
        assert "excessive_emoji" in flags_of(RecentListing(title="Deal 🔥🔥🔥", description="💯"))


class TestScoring:

    def test_penalties_accumulate_across_listings(self):
        listings = [
            RecentListing(title="item one", description="urgent"),
            RecentListing(title="item two", description="cash only"),
        ]
        score, red_flags = analyze_listings(listings)
        assert score == 65
        assert [f["listing_index"] for f in red_flags] == [0, 1]

    def test_score_floors_at_zero(self):
        listing = RecentListing(
            title="URGENT SALE NOW",
            description="need money, cash only, first come first serve, whatsapp me 🔥🔥🔥🔥",
        )
        score, red_flags = analyze_listings([listing] * 5)
        assert score == 0
        assert len(red_flags) == 35

    def test_only_five_listings_analyzed(self):
        listings = [RecentListing(title="ok")] * 5 + [RecentListing(title="x", description="urgent")]
        score, red_flags = analyze_listings(listings)
        assert score == 100
        assert red_flags == []

    def test_breakdown_entries_are_auditable(self):
        _, red_flags = analyze_listings([RecentListing(title="Sale", description="western union only")])
        entry = red_flags[0]
        assert set(entry) == {"listing_index", "flag", "label", "penalty", "matched"}
        assert entry["matched"].lower() == "western union"
