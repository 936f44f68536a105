"""Gallery response schemas for search results."""

from __future__ import annotations

from pydantic import BaseModel

from reelsearch.utils.rating import RatingTier


class MovieCard(BaseModel):
    """Display-ready card for one validated movie."""
    imdb_id: str
    title: str
    year: str
    genre: str
    plot: str
    poster_url: str
    rating: str
    rating_tier: RatingTier
    rating_color: str


class GalleryResponse(BaseModel):
    """Search response wrapper: cards plus status and notices."""
    query: str
    status: str
    message: str | None = None
    notice: str | None = None
    truncated: bool = False
    total_validated: int = 0
    cards: list[MovieCard] = []
