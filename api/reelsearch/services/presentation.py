"""Map pipeline outcomes to the gallery view consumed by clients."""

from __future__ import annotations

from reelsearch.schema.gallery import GalleryResponse, MovieCard
from reelsearch.services.gallery_service import (
    NOT_FOUND_MESSAGE,
    EmptySearch,
    NoLoadablePosters,
    NoUsablePosters,
    PipelineOutcome,
    Results,
    SearchFailed,
    ValidatedDetail,
)
from reelsearch.utils.rating import classify_rating, rating_color

NO_USABLE_POSTERS_MESSAGE = "No valid posters found."
NO_LOADABLE_POSTERS_MESSAGE = "No valid posters could be loaded."


def build_card(item: ValidatedDetail) -> MovieCard:
    detail = item.detail
    return MovieCard(
        imdb_id=detail.identifier,
        title=detail.title,
        year=detail.year,
        genre=detail.genre,
        plot=detail.plot,
        poster_url=detail.poster_url,
        rating=detail.rating_value,
        rating_tier=classify_rating(detail.rating_value),
        rating_color=rating_color(detail.rating_value),
    )


def truncation_notice(shown: int, total: int) -> str:
    return f"Only {shown} of {total} movies shown."


def outcome_message(outcome: PipelineOutcome) -> str | None:
    """User-facing status text for non-result outcomes."""
    if isinstance(outcome, SearchFailed):
        return outcome.message
    if isinstance(outcome, EmptySearch):
        return NOT_FOUND_MESSAGE
    if isinstance(outcome, NoUsablePosters):
        return NO_USABLE_POSTERS_MESSAGE
    if isinstance(outcome, NoLoadablePosters):
        return NO_LOADABLE_POSTERS_MESSAGE
    return None


def render_outcome(query: str, outcome: PipelineOutcome) -> GalleryResponse:
    if isinstance(outcome, Results):
        cards = [build_card(item) for item in outcome.items]
        notice = truncation_notice(len(cards), outcome.validated_count) if outcome.truncated else None
        return GalleryResponse(
            query=query,
            status=outcome.kind,
            notice=notice,
            truncated=outcome.truncated,
            total_validated=outcome.validated_count,
            cards=cards,
        )
    return GalleryResponse(query=query, status=outcome.kind, message=outcome_message(outcome))
