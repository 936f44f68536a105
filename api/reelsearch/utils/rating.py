"""Rating tier classification used by result cards."""

from __future__ import annotations

import enum
import re

HIGH_RATING_THRESHOLD = 8.0
MEDIUM_RATING_THRESHOLD = 6.0

_LEADING_NUMBER_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)")


class RatingTier(str, enum.Enum):
    """Color bands for an IMDb-style 0-10 rating."""
    NEUTRAL = "neutral"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


RATING_COLORS: dict[RatingTier, str] = {
    RatingTier.NEUTRAL: "#888",
    RatingTier.HIGH: "#4CAF50",
    RatingTier.MEDIUM: "#FF9800",
    RatingTier.LOW: "#F44336",
}


def parse_rating(value: str | None) -> float | None:
    """Parse the leading decimal of a rating string, e.g. "7.5/10" -> 7.5.

    Returns None for sentinels such as "N/A" or anything without a leading number.
    """
    if not value:
        return None
    match = _LEADING_NUMBER_RE.match(value)
    if not match:
        return None
    return float(match.group(0))


def classify_rating(value: str | None) -> RatingTier:
    """Classify a rating string into neutral/high/medium/low."""
    rating = parse_rating(value)
    if rating is None:
        return RatingTier.NEUTRAL
    if rating >= HIGH_RATING_THRESHOLD:
        return RatingTier.HIGH
    if rating >= MEDIUM_RATING_THRESHOLD:
        return RatingTier.MEDIUM
    return RatingTier.LOW


def rating_color(value: str | None) -> str:
    return RATING_COLORS[classify_rating(value)]
