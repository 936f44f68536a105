"""Service-layer helpers for the search pipeline."""

from . import gallery_service, presentation, run_coordinator

__all__ = [
    "gallery_service",
    "presentation",
    "run_coordinator",
]
