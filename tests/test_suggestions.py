import asyncio
import httpx
import pytest
from core.errors import SuggestionError
from core.suggestions import (
    HAPPY_COPY, JOKE_INTRO, NEUTRAL_COPY, NO_JOKES, QUOTE_FALLBACK, SuggestionProvider, title_for_emotion,
)


def _suggest(settings, emotion, handler):
    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as c:
            return await SuggestionProvider(settings, client=c).suggest(emotion)
    return asyncio.run(run())


def test_sad_fetches_two_jokes(settings):
    jokes = iter(["Joke A", "Joke B"])
    def handler(request):
        assert request.url.path == "/api/joke"
        return httpx.Response(200, json={"joke": next(jokes)})
    text = _suggest(settings, "sad", handler)
    assert text.startswith(JOKE_INTRO)
    body = text[len(JOKE_INTRO):]
    assert body in ("1. Joke A\n\n2. Joke B", "1. Joke B\n\n2. Joke A")

def test_sad_with_one_failed_joke(settings):
    calls = {"n": 0}
    def handler(request):
        calls["n"] += 1
        if calls["n"] == 1:
            return httpx.Response(502, json={"error": "No joke returned"})
        return httpx.Response(200, json={"joke": "Only one"})
    assert _suggest(settings, "sad", handler) == JOKE_INTRO + "1. Only one"

def test_sad_when_both_jokes_fail(settings):
    handler = lambda request: httpx.Response(502, json={"error": "Failed to fetch joke"})
    assert _suggest(settings, "sad", handler) == JOKE_INTRO + NO_JOKES

def test_angry_quote_and_fallbacks(settings):
    ok = lambda request: httpx.Response(200, json={"quote": "Be water. — Bruce Lee"})
    assert _suggest(settings, "angry", ok) == "Be water. — Bruce Lee"
    empty = lambda request: httpx.Response(200, json={})
    assert _suggest(settings, "angry", empty) == QUOTE_FALLBACK
    bad = lambda request: httpx.Response(502, json={"error": "Failed to fetch quote"})
    with pytest.raises(SuggestionError):
        _suggest(settings, "angry", bad)

def test_network_failure_is_user_visible(settings):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)
    with pytest.raises(SuggestionError, match="Please try again"):
        _suggest(settings, "sad", handler)

def test_static_copy(settings):
    def handler(request):
        raise AssertionError("no network call expected")
    assert _suggest(settings, "happy", handler) == HAPPY_COPY
    assert _suggest(settings, "neutral", handler) == NEUTRAL_COPY
    assert _suggest(settings, "surprised", handler) == NEUTRAL_COPY

def test_titles():
    assert title_for_emotion("sad") == "You look a bit sad 😢"
    assert title_for_emotion("bored") == "Current mood: bored"
