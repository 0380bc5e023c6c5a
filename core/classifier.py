"""
Remote emotion classification through a vision-capable model.

The reply is expected to be a bare JSON object, but the response envelope
varies between API shapes and models, so parsing runs an ordered chain of
strategies (first success wins) and the result is always sanitized.
"""
from __future__ import annotations
import json
import logging
import re
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from core.config import Settings
from core.emotion import EMOTIONS, NEUTRAL, coerce_emotion, safe_confidence
from core.errors import ClassificationUnavailable
from core.models import ClassifyResponse

logger = logging.getLogger(__name__)

LABELS = ", ".join(EMOTIONS)
DEFAULT_REPLY = {"emotion": NEUTRAL, "confidence": 0.5}

VISION_INSTRUCTION = (
    "You are an emotion classifier. Analyze the image and reply ONLY with a JSON object and no other text. "
    "The JSON must contain two keys:\n"
    f"  - emotion: one of [{LABELS}]\n"
    "  - confidence: a number between 0 and 1 (probability).\n"
    'If uncertain, return {"emotion":"neutral","confidence":0.5}. '
    'Example: {"emotion":"happy","confidence":0.92}'
)


def text_instruction(expressions: Mapping[str, float]) -> str:
    """Text-only prompt built from a precomputed expression vector."""
    expr = json.dumps(dict(expressions), separators=(",", ":"))
    return (
        f"You are an emotion classifier. Given face expression probabilities: {expr}, "
        f"determine the primary emotion among [{LABELS}] and a confidence between 0 and 1. "
        'Reply ONLY with a JSON object like {"emotion":"sad","confidence":0.85}. '
        'If uncertain, return {"emotion":"neutral","confidence":0.5}.'
    )


# ---------------------------------------------------------------------------
# Response parsing
# ---------------------------------------------------------------------------
def _as_dict(resp: Any) -> Dict:
    if isinstance(resp, dict):
        return resp
    if hasattr(resp, "model_dump"):
        return resp.model_dump()
    return {}


def _part_text(part: Any) -> str:
    if isinstance(part, str):
        return part
    if isinstance(part, dict):
        if part.get("type") == "output_text" and part.get("text"):
            return str(part["text"])
        if isinstance(part.get("text"), str):
            return part["text"]
    return ""


def _content_text(content: Any) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(_part_text(p) for p in content)
    return ""


def collect_text(body: Mapping) -> str:
    """Concatenate the model's textual output from a Responses or Chat Completions envelope."""
    out = body.get("output")
    if out is None:
        out = body.get("choices")
    text = ""
    if isinstance(out, list):
        for item in out:
            if isinstance(item, str):
                text += item
            elif isinstance(item, dict):
                if item.get("content") is not None:
                    text += _content_text(item["content"])
                elif isinstance(item.get("message"), dict):
                    text += _content_text(item["message"].get("content"))
    elif isinstance(out, dict):
        text = _content_text(out.get("content"))
    return text.strip()


def _loads_object(candidate: str) -> Optional[Dict]:
    try:
        parsed = json.loads(candidate)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def parse_from_output_text(body: Mapping) -> Optional[Dict]:
    """First '{' to last '}' of the collected output text."""
    m = re.search(r"\{.*\}", collect_text(body), re.S)
    return _loads_object(m.group(0)) if m else None


_JSON_LOOKING = re.compile(r"\{[^}]{10,}\}")


def parse_from_raw_body(body: Mapping) -> Optional[Dict]:
    """First JSON-looking object (that actually parses) inside the serialized response body."""
    raw = json.dumps(body, default=str)
    for opening in re.finditer(r"\{", raw):
        m = _JSON_LOOKING.match(raw, opening.start())
        parsed = _loads_object(m.group(0)) if m else None
        if parsed is not None:
            return parsed
    return None


PARSE_STRATEGIES: Sequence[Callable[[Mapping], Optional[Dict]]] = (
    parse_from_output_text,
    parse_from_raw_body,
)


def parse_reply(body: Mapping) -> Dict:
    for strategy in PARSE_STRATEGIES:
        try:
            parsed = strategy(body)
        except Exception:
            logger.debug(f"[classify] parse strategy {strategy.__name__} raised", exc_info=True)
            parsed = None
        if parsed is not None:
            logger.debug(f"[classify] parsed via {strategy.__name__}")
            return parsed
    return dict(DEFAULT_REPLY)


def sanitize(parsed: Mapping) -> ClassifyResponse:
    """Lower-case + enum-coerce the emotion; clamp confidence (non-numeric -> 0.5)."""
    return ClassifyResponse(
        emotion=coerce_emotion(parsed.get("emotion") or NEUTRAL),
        confidence=safe_confidence(parsed.get("confidence"), 0.5),
    )


# ---------------------------------------------------------------------------
# Model calls
# ---------------------------------------------------------------------------
def make_client(settings: Settings):
    from openai import AsyncOpenAI
    return AsyncOpenAI(api_key=settings.OPENAI_API_KEY, base_url=settings.OPENAI_BASE_URL)


def error_detail(err: Exception) -> Any:
    return getattr(err, "body", None) or str(err)


async def _call_vision(client, image: str, settings: Settings):
    return await client.responses.create(
        model=settings.VISION_MODEL,
        input=[{
            "role": "user",
            "content": [
                {"type": "input_text", "text": VISION_INSTRUCTION},
                {"type": "input_image", "image_url": image},
            ],
        }],
        temperature=0,
        max_output_tokens=150,
        timeout=settings.VISION_TIMEOUT,
    )


async def _call_text(client, expressions: Mapping[str, float], settings: Settings):
    return await client.responses.create(
        model=settings.TEXT_MODEL,
        input=[{
            "role": "user",
            "content": [{"type": "input_text", "text": text_instruction(expressions)}],
        }],
        temperature=0,
        max_output_tokens=200,
        timeout=settings.TEXT_TIMEOUT,
    )


async def classify_expression_image(
    image: str,
    expressions: Optional[Mapping[str, float]],
    settings: Settings,
    client=None,
) -> ClassifyResponse:
    """
    Classify a face image (data URL). Falls back to a text-only call on the
    expression vector when the vision call fails.

    Raises:
        ClassificationUnavailable: every model path failed.
    """
    client = client or make_client(settings)
    try:
        resp = await _call_vision(client, image, settings)
    except Exception as e:
        logger.warning(f"[classify] vision call failed: {error_detail(e)}")
        if expressions is None:
            raise ClassificationUnavailable("Failed to classify image (vision model failed)") from e
        try:
            resp = await _call_text(client, expressions, settings)
        except Exception as e2:
            logger.error(f"[classify] text fallback failed: {error_detail(e2)}")
            raise ClassificationUnavailable(
                "Failed to classify image (both vision and text fallbacks failed)",
                detail=error_detail(e2),
            ) from e2

    body = _as_dict(resp)
    logger.debug(f"[classify] resp.data: {json.dumps(body, default=str)[:2000]}")
    result = sanitize(parse_reply(body))
    logger.debug(f"[classify] -> {result.emotion} {result.confidence:.2f}")
    return result
