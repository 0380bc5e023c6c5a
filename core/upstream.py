"""
Third-party suggestion sources behind /api/joke and /api/quote.
"""
from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx

from core.config import Settings
from core.errors import UpstreamError

logger = logging.getLogger(__name__)


async def fetch_joke(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> str:
    """One single-line, safe-for-work joke from JokeAPI."""
    params = {"type": "single", "blacklistFlags": settings.JOKE_BLACKLIST}
    try:
        async with _client(settings, client) as c:
            resp = await c.get(settings.JOKE_API_URL, params=params)
            resp.raise_for_status()
            data = resp.json()
    except Exception as e:
        logger.error(f"[upstream] joke fetch failed: {e}")
        raise UpstreamError("Failed to fetch joke") from e

    joke = data.get("joke") if isinstance(data, dict) else None
    if not joke:
        raise UpstreamError("No joke returned")
    return str(joke)


async def fetch_quote(settings: Settings, client: Optional[httpx.AsyncClient] = None) -> str:
    """Random quote from ZenQuotes, formatted as "<quote> — <author>"."""
    try:
        async with _client(settings, client) as c:
            resp = await c.get(settings.QUOTE_API_URL)
            resp.raise_for_status()
            data = resp.json()
    except Exception as e:
        logger.error(f"[upstream] quote fetch failed: {e}")
        raise UpstreamError("Failed to fetch quote") from e

    item = data[0] if isinstance(data, list) and data else data
    if not isinstance(item, dict) or not item:
        raise UpstreamError("No quote returned")
    return f"{item.get('q')} — {item.get('a')}"


@asynccontextmanager
async def _client(settings: Settings, client: Optional[httpx.AsyncClient]):
    """Use the caller's client as-is, or open (and close) a short-lived one."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=settings.UPSTREAM_TIMEOUT) as own:
        yield own
