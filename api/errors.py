# api/errors.py
# centralized error handling: /api/* errors are JSON {"error": ...}

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        logger.debug(f"[api] invalid request on {request.url.path}: {errors}")
        if any(e.get("type") == "missing" and tuple(e.get("loc", ())) == ("body",) for e in errors):
            # No body at all: the only body-carrying endpoint needs an image
            return JSONResponse(status_code=400, content={"error": "Missing image in request body"})
        return JSONResponse(status_code=400, content={"error": "Malformed request body"})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        if request.url.path.startswith("/api/"):
            return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    @app.exception_handler(Exception)
    async def handle_any_error(request: Request, exc: Exception):
        logger.exception(f"[api] unhandled error on {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal Server Error"})
