from __future__ import annotations

import httpx

from reelsearch.utils.redaction import redact_secrets


class ExternalAPIError(Exception):
    pass


class TransportError(ExternalAPIError):
    """Network, HTTP status, or payload-shape failure talking to an upstream."""


async def fetch_json(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    params: dict | None = None,
    timeout: float = 15.0,
) -> dict:
    """Issue one GET and return the decoded JSON object. Never retries."""
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url, headers=headers, params=params)
            response.raise_for_status()
            payload = response.json()
    except httpx.HTTPError as exc:
        raise TransportError(redact_secrets(str(exc)) or exc.__class__.__name__) from exc
    except ValueError as exc:
        raise TransportError("Malformed JSON response") from exc
    if not isinstance(payload, dict):
        raise TransportError(f"Unexpected JSON payload type {type(payload).__name__}")
    return payload


async def fetch_bytes(url: str, *, timeout: float = 15.0, max_bytes: int | None = None) -> bytes:
    """Download a resource body, following redirects.

    The body is streamed so that ``max_bytes`` bounds what is read even when
    the server declares no content length.
    """
    chunks: list[bytes] = []
    received = 0
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            async with client.stream("GET", url) as response:
                response.raise_for_status()
                declared = response.headers.get("content-length")
                if max_bytes is not None and declared and declared.isdigit() and int(declared) > max_bytes:
                    raise TransportError(f"Body of {declared} bytes exceeds limit of {max_bytes}")
                async for chunk in response.aiter_bytes():
                    received += len(chunk)
                    if max_bytes is not None and received > max_bytes:
                        raise TransportError(f"Body exceeds limit of {max_bytes} bytes")
                    chunks.append(chunk)
    except httpx.HTTPError as exc:
        raise TransportError(redact_secrets(str(exc)) or exc.__class__.__name__) from exc
    if not received:
        raise TransportError("Empty response body")
    return b"".join(chunks)
