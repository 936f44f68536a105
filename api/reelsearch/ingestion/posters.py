"""Poster image verification.

Verification is advisory: every failure mode (bad URL, network error, HTTP
error, oversized or undecodable body) resolves to a negative result instead
of raising.
"""

from __future__ import annotations

import asyncio
import io
import logging
from dataclasses import dataclass
from urllib.parse import urlparse

from PIL import Image, UnidentifiedImageError

from reelsearch.core.config import settings
from reelsearch.ingestion.base import NOT_AVAILABLE
from reelsearch.ingestion.http import fetch_bytes
from reelsearch.utils.redaction import redact_secrets

logger = logging.getLogger("reelsearch.ingestion.posters")


@dataclass(frozen=True, slots=True)
class PosterCheck:
    """Outcome of a single poster verification."""
    url: str
    loaded: bool
    reason: str | None = None


def _decode_image(data: bytes) -> str:
    """Return the decoded image format; raises if Pillow cannot parse the bytes."""
    with Image.open(io.BytesIO(data)) as image:
        image.verify()
        return image.format or "unknown"


class PosterValidator:
    def __init__(self, *, timeout: float | None = None, max_bytes: int | None = None) -> None:
        self.timeout = timeout if timeout is not None else settings.poster_timeout_seconds
        self.max_bytes = max_bytes if max_bytes is not None else settings.poster_max_bytes

    async def check(self, poster_url: str) -> PosterCheck:
        url = (poster_url or "").strip()
        if not url or url == NOT_AVAILABLE:
            return PosterCheck(url=url, loaded=False, reason="missing_url")
        try:
            scheme = urlparse(url).scheme
        except ValueError as exc:
            return self._reject(url, "invalid_url", exc)
        if scheme not in {"http", "https"}:
            return PosterCheck(url=url, loaded=False, reason="unsupported_scheme")
        try:
            data = await fetch_bytes(url, timeout=self.timeout, max_bytes=self.max_bytes)
        except Exception as exc:  # noqa: BLE001
            return self._reject(url, "fetch_failed", exc)
        try:
            await asyncio.to_thread(_decode_image, data)
        except UnidentifiedImageError as exc:
            return self._reject(url, "not_an_image", exc)
        except Exception as exc:  # noqa: BLE001
            # Pillow raises assorted errors on truncated or hostile images.
            return self._reject(url, "decode_failed", exc)
        return PosterCheck(url=url, loaded=True)

    async def verify(self, poster_url: str) -> bool:
        """Return True only if the poster downloads and decodes as an image."""
        return (await self.check(poster_url)).loaded

    @staticmethod
    def _reject(url: str, reason: str, exc: Exception) -> PosterCheck:
        logger.info(
            "Poster rejected",
            extra={"poster_url": redact_secrets(url), "reason": reason, "error": redact_secrets(str(exc))},
        )
        return PosterCheck(url=url, loaded=False, reason=reason)
