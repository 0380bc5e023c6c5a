"""
MoodMate API: remote emotion classifier and suggestion proxies.

Run with: uvicorn api.main:app --reload
"""
import logging
from fastapi import FastAPI
from api.errors import register_error_handlers
from api.routes import router, settings

logging.basicConfig(level=logging.DEBUG)
app = FastAPI(title="MoodMate API", version="1.0.0")
app.include_router(router)
register_error_handlers(app)

@app.get("/health")
def health() -> dict:
    """
    Liveness probe; also reports whether /api/classify can reach a model.

    Returns:
        dict: {"status": "ok", "classifier": bool}
    """
    return {"status": "ok", "classifier": bool(settings.OPENAI_API_KEY)}
