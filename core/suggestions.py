"""
Mood-appropriate follow-ups: jokes for sad, a quote for angry, static copy otherwise.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Optional

import httpx

from core.config import Settings
from core.errors import SuggestionError

logger = logging.getLogger(__name__)

JOKE_INTRO = (
    "Hey — I can tell this is a tough moment. "
    "Here are a couple of light jokes to hopefully lift you up:\n\n"
)
NO_JOKES = "Here's a smile for you!"
QUOTE_FALLBACK = "Breathe. Reset. Refocus."
HAPPY_COPY = "Keep smiling! 🌞"
NEUTRAL_COPY = "I hope you’re doing well ❤️"
ERROR_COPY = "Failed to fetch suggestion. Please try again."

_TITLES = {
    "happy": "You look happy 😄",
    "sad": "You look a bit sad 😢",
    "angry": "You seem angry 😠",
    "surprised": "You look surprised 😮",
    "fearful": "Feeling a bit scared? 😨",
    "disgusted": "Not impressed? 🤢",
    "neutral": "Feeling neutral 🙂",
}


def title_for_emotion(emotion: str) -> str:
    return _TITLES.get(emotion, f"Current mood: {emotion}")


class SuggestionProvider:
    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.s = settings
        self.client = client

    async def suggest(self, emotion: str) -> str:
        """
        Raises:
            SuggestionError: a proxy could not be reached (or the quote proxy failed).
        """
        try:
            if emotion == "sad":
                return await self._jokes()
            if emotion == "angry":
                return await self._quote()
        except SuggestionError:
            raise
        except Exception as e:
            logger.error(f"[suggest] fetch failed for {emotion}: {e}")
            raise SuggestionError(ERROR_COPY) from e
        if emotion == "happy":
            return HAPPY_COPY
        return NEUTRAL_COPY

    async def _get(self, path: str) -> httpx.Response:
        url = f"{self.s.API_BASE_URL}{path}"
        if self.client is not None:
            return await self.client.get(url, timeout=self.s.SUGGESTION_TIMEOUT)
        async with httpx.AsyncClient(timeout=self.s.SUGGESTION_TIMEOUT) as c:
            return await c.get(url)

    async def _jokes(self) -> str:
        a, b = await asyncio.gather(self._get("/api/joke"), self._get("/api/joke"))
        jokes = []
        for resp in (a, b):
            if resp.is_success:
                joke = (resp.json() or {}).get("joke")
                if joke:
                    jokes.append(str(joke))
        logger.debug(f"[suggest] jokes received={len(jokes)}")
        if not jokes:
            return JOKE_INTRO + NO_JOKES
        return JOKE_INTRO + "\n\n".join(f"{i + 1}. {j}" for i, j in enumerate(jokes))

    async def _quote(self) -> str:
        resp = await self._get("/api/quote")
        if not resp.is_success:
            logger.error(f"[suggest] quote proxy returned HTTP {resp.status_code}")
            raise SuggestionError(ERROR_COPY)
        return (resp.json() or {}).get("quote") or QUOTE_FALLBACK
