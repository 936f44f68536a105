from __future__ import annotations

import pytest

from reelsearch.utils.rating import RatingTier, classify_rating, parse_rating, rating_color


@pytest.mark.parametrize(
    "value,expected",
    [
        ("8.8", RatingTier.HIGH),
        ("8.0", RatingTier.HIGH),
        ("10", RatingTier.HIGH),
        ("7.9", RatingTier.MEDIUM),
        ("6.0", RatingTier.MEDIUM),
        ("5.9", RatingTier.LOW),
        ("0.0", RatingTier.LOW),
        ("N/A", RatingTier.NEUTRAL),
        ("", RatingTier.NEUTRAL),
        (None, RatingTier.NEUTRAL),
        ("not rated", RatingTier.NEUTRAL),
    ],
)
def test_classify_rating(value: str | None, expected: RatingTier) -> None:
    assert classify_rating(value) is expected


def test_parse_rating_reads_leading_number() -> None:
    assert parse_rating("7.5/10") == 7.5
    assert parse_rating(" 6 ") == 6.0
    assert parse_rating(".5") == 0.5
    assert parse_rating("N/A") is None


def test_rating_color_matches_tiers() -> None:
    assert rating_color("8.8") == "#4CAF50"
    assert rating_color("6.5") == "#FF9800"
    assert rating_color("3.1") == "#F44336"
    assert rating_color("N/A") == "#888"
