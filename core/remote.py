"""
Client side of the remote fallback classifier (POST /api/classify).
"""
from __future__ import annotations
import asyncio
import logging
from typing import Dict, Optional

import httpx

from core.config import Settings
from core.models import ClassifyRequest, ClassifyResponse

logger = logging.getLogger(__name__)


class RemoteClassifier:
    """
    Every failure (network, timeout, non-2xx, malformed body) resolves to
    None; the caller keeps its neutral answer.
    """
    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.s = settings
        self.client = client

    async def __call__(self, image_src: str, expressions: Dict[str, float]) -> Optional[ClassifyResponse]:
        return await self.classify(image_src, expressions)

    async def classify(self, image_src: str, expressions: Dict[str, float]) -> Optional[ClassifyResponse]:
        payload = ClassifyRequest(image=image_src, expressions=expressions)
        try:
            return await asyncio.wait_for(self._post(payload), timeout=self.s.REMOTE_CLASSIFY_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning(f"[remote] classify timed out after {self.s.REMOTE_CLASSIFY_TIMEOUT}s")
        except Exception as e:
            logger.warning(f"[remote] classify failed: {e}")
        return None

    async def _post(self, payload: ClassifyRequest) -> Optional[ClassifyResponse]:
        url = f"{self.s.API_BASE_URL}/api/classify"
        body = payload.model_dump(exclude_none=True)
        if self.client is not None:
            resp = await self.client.post(url, json=body)
        else:
            async with httpx.AsyncClient() as c:
                resp = await c.post(url, json=body)
        if resp.status_code >= 400:
            logger.warning(f"[remote] classify returned HTTP {resp.status_code}")
            return None
        return ClassifyResponse(**resp.json())
