"""
Two-tier model loading (fast + full), concurrent and fire-and-forget.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Optional

import numpy as np

from core.config import Settings
from core.landmarks import get_face_mesh

logger = logging.getLogger(__name__)

FAST_LOAD_ERROR = "Failed to load fast face models. Check your connection."

# Tiny blank frame; running the detector on it makes DeepFace fetch and build
# the detector + emotion weights.
_WARMUP_FRAME = np.zeros((48, 48, 3), dtype=np.uint8)


def _warm_deepface(detector_backend: str) -> None:
    from deepface import DeepFace
    DeepFace.analyze(
        _WARMUP_FRAME,
        actions=["emotion"],
        enforce_detection=False,
        detector_backend=detector_backend,
    )


def load_fast_tier(settings: Settings) -> None:
    """Compact detector + expression classifier."""
    _warm_deepface(settings.FAST_DETECTOR_BACKEND)


def load_full_tier(settings: Settings) -> None:
    """Higher-accuracy detector + landmark model."""
    _warm_deepface(settings.FULL_DETECTOR_BACKEND)
    get_face_mesh()


class ModelLoader:
    """Readiness flags are set once and never reset; failures are not retried."""
    def __init__(self, settings: Settings):
        self.s = settings
        self.fast_loaded = False
        self.full_loaded = False
        self.fast_error: Optional[str] = None
        self._tasks: list[asyncio.Task] = []

    def start(self) -> None:
        """Schedule both tiers on the running loop without waiting."""
        if self._tasks:
            return
        self._tasks = [
            asyncio.create_task(self._load_fast()),
            asyncio.create_task(self._load_full()),
        ]

    async def load(self) -> None:
        """Start both tiers (if needed) and wait until both have settled."""
        self.start()
        await asyncio.gather(*self._tasks)

    async def _load_fast(self) -> None:
        try:
            await asyncio.to_thread(load_fast_tier, self.s)
            self.fast_loaded = True
            logger.debug("[loader] fast tier ready")
        except Exception:
            logger.exception("[loader] fast tier failed")
            self.fast_error = FAST_LOAD_ERROR

    async def _load_full(self) -> None:
        try:
            await asyncio.to_thread(load_full_tier, self.s)
            self.full_loaded = True
            logger.debug("[loader] full tier ready")
        except Exception:
            logger.exception("[loader] full tier failed; deep analysis degrades to single-frame fast detection")
