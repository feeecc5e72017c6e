"""
Pulse — Red-Flag Text Analyzer

Scans listing text for language scammers lean on. Each phrase family is
applied at most once per listing. Every hit is reported with its listing
index and penalty because the list is shown verbatim to buyers.

    urgency_language           -15
    financial_pressure         -15
    suspicious_payment         -20
    first_come_first_serve     -10
    off_platform_contact       -20
    all_caps_title              -5
    excessive_emoji             -5
"""
import re
from dataclasses import dataclass
from typing import Dict, Any, List, Optional, Pattern, Tuple

import structlog

from pulse.trust.models import RecentListing

logger = structlog.get_logger()

MAX_LISTINGS_ANALYZED = 5
STARTING_SCORE = 100
ALL_CAPS_MIN_LENGTH = 5
EMOJI_THRESHOLD = 3


def _phrases(*phrases: str) -> Pattern:
    alternatives = "|".join(re.escape(p).replace(r"\ ", r"[\s,]+") for p in phrases)
    return re.compile(rf"\b(?:{alternatives})\b", re.IGNORECASE)


@dataclass(frozen=True)
class PhraseFamily:
    flag: str
    label: str
    penalty: int
    pattern: Pattern


PHRASE_FAMILIES: Tuple[PhraseFamily, ...] = (
    PhraseFamily(
        flag="urgency_language",
        label="Urgency language",
        penalty=15,
        pattern=_phrases(
            "urgent", "urgently", "asap", "immediately", "hurry", "emergency",
            "quick sale", "fast sale", "today only", "limited time", "act fast",
            "offer ends", "don't miss",
        ),
    ),
    PhraseFamily(
        flag="financial_pressure",
        label="Financial pressure language",
        penalty=15,
        pattern=_phrases(
            "need money", "need cash", "must sell", "need to sell", "pay my bills",
            "bills to pay", "desperate",
        ),
    ),
    PhraseFamily(
        flag="suspicious_payment",
        label="Cash-only or suspicious payment terms",
        penalty=20,
        pattern=_phrases(
            "cash only", "payment first", "pay first", "advance payment",
            "upfront payment", "pay upfront", "western union", "moneygram",
            "gift card", "gift cards", "bank transfer only", "crypto only",
            "bitcoin only",
        ),
    ),
    PhraseFamily(
        flag="first_come_first_serve",
        label="First come first serve pressure",
        penalty=10,
        pattern=re.compile(r"\bfirst[\s-]+come[\s,-]+first[\s-]+serve[ds]?\b", re.IGNORECASE),
    ),
    PhraseFamily(
        flag="off_platform_contact",
        label="Off-platform contact solicitation",
        penalty=20,
        pattern=re.compile(
            r"\b(?:whats\s?app|telegram|signal\s+me|viber|wechat"
            r"|call\s+me|text\s+me|call\s+now|text\s+now|dm\s+me\s+on"
            r"|contact\s+me\s+(?:on|at|via))\b"
            # phone numbers need a "+" country code or a trunk 0:
            # 0801 234 5678, 08012345678, +234-801-234-5678
            r"|(?<![\d.,+])(?:\+\d{1,3}[\s.-]?\d{3,4}|0\d{2,3})[\s.-]?\d{3}[\s.-]?\d{3,4}(?![\d.,])",
            re.IGNORECASE,
        ),
    ),
)

ALL_CAPS_PENALTY = 5
EMOJI_PENALTY = 5

_EMOJI = re.compile(
    "["
    "\U0001F000-\U0001FAFF"   # pictographs, emoticons, transport, symbols
    "\u2600-\u27BF"         # misc symbols, dingbats
    "\u2B00-\u2BFF"         # arrows, stars
    "]"
)


def count_emoji(text: str) -> int:
    return len(_EMOJI.findall(text or ""))


def is_all_caps_title(title: str) -> bool:
    title = (title or "").strip()
    return len(title) > ALL_CAPS_MIN_LENGTH and title == title.upper() and title != title.lower()


def analyze_listing(listing: RecentListing, index: int) -> List[Dict[str, Any]]:
    """All red flags for one listing."""
    flags = []
    text = listing.text

    for family in PHRASE_FAMILIES:
        match = family.pattern.search(text)
        if match:
            flags.append({
                "listing_index": index,
                "flag": family.flag,
                "label": family.label,
                "penalty": family.penalty,
                "matched": match.group(0).strip(),
            })

    if is_all_caps_title(listing.title):
        flags.append({
            "listing_index": index,
            "flag": "all_caps_title",
            "label": "All-caps title",
            "penalty": ALL_CAPS_PENALTY,
            "matched": listing.title.strip(),
        })

    emoji = count_emoji(text)
    if emoji > EMOJI_THRESHOLD:
        flags.append({
            "listing_index": index,
            "flag": "excessive_emoji",
            "label": "Excessive emoji",
            "penalty": EMOJI_PENALTY,
            "matched": f"{emoji} emoji",
        })

    for f in flags:
        logger.debug("red_flag_matched", listing_index=index, flag=f["flag"], matched=f["matched"])
    return flags


def analyze_listings(listings: Optional[List[RecentListing]]) -> Tuple[int, List[Dict[str, Any]]]:
    """Score floor is 0. Returns (score, red_flags)."""
    red_flags = []
    for index, listing in enumerate((listings or [])[:MAX_LISTINGS_ANALYZED]):
        red_flags.extend(analyze_listing(listing, index))

    score = STARTING_SCORE - sum(f["penalty"] for f in red_flags)
    return max(score, 0), red_flags
