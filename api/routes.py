"""
REST endpoints: remote emotion classification and suggestion proxies.
"""
from fastapi import APIRouter
from fastapi.responses import JSONResponse
import logging

from core.config import Settings
from core.classifier import classify_expression_image, error_detail
from core.errors import ClassificationUnavailable, UpstreamError
from core.models import ClassifyRequest, ClassifyResponse, JokeResponse, QuoteResponse
from core.upstream import fetch_joke, fetch_quote


router = APIRouter(prefix="/api")
settings = Settings()
logger = logging.getLogger(__name__)


@router.post("/classify")
async def classify(body: ClassifyRequest):
    """
    Classify the emotion of a face image (data URL) with a vision model,
    falling back to a text model over `expressions` when given.

    Returns:
        JSONResponse: {emotion, confidence} (plus note/detail on a safe fallback).
    """
    if not body.image:
        return JSONResponse(status_code=400, content={"error": "Missing image in request body"})
    if not settings.OPENAI_API_KEY:
        return JSONResponse(status_code=500, content={"error": "OpenAI API key not configured"})

    logger.debug(f"[api] /api/classify image_len={len(body.image)} expressions={bool(body.expressions)}")
    try:
        result = await classify_expression_image(body.image, body.expressions, settings)
        return JSONResponse(result.model_dump(exclude_none=True))
    except ClassificationUnavailable as e:
        logger.error(f"[api] classify unavailable: {e}")
        content = {"error": str(e)}
        if e.detail is not None:
            content["detail"] = e.detail
        return JSONResponse(status_code=500, content=content)
    except Exception as e:
        # Upstream unavailable or quota limited: answer neutral so the client keeps working
        logger.exception("[api] classify failed; returning neutral fallback")
        fallback = ClassifyResponse(emotion="neutral", confidence=0.5, note="openai_error", detail=error_detail(e))
        return JSONResponse(fallback.model_dump(exclude_none=True))


@router.get("/joke")
async def joke():
    try:
        text = await fetch_joke(settings)
    except UpstreamError as e:
        return JSONResponse(status_code=502, content={"error": str(e)})
    return JokeResponse(joke=text)


@router.get("/quote")
async def quote():
    try:
        text = await fetch_quote(settings)
    except UpstreamError as e:
        return JSONResponse(status_code=502, content={"error": str(e)})
    return QuoteResponse(quote=text)
