"""
Fast (provisional) estimation: one frame, compact detector, low latency.
"""
from __future__ import annotations
import asyncio
import logging

import numpy as np

from core.config import Settings
from core.emotion import NEUTRAL, clamp, top_emotion
from core.face import detect_single_face
from core.models import DetectionResult

logger = logging.getLogger(__name__)


class FastEstimator:
    def __init__(self, settings: Settings):
        self.s = settings

    def decide(self, expressions, image_src: str) -> DetectionResult:
        """Top label, forced to neutral below the noise floor; confidence in [0.01, 0.99]."""
        key, value = top_emotion(expressions)
        emotion = key if value >= self.s.FAST_NEUTRAL_BELOW else NEUTRAL
        return DetectionResult(emotion=emotion, image_src=image_src, confidence=clamp(value, 0.01, 0.99))

    async def estimate(self, frame: np.ndarray, image_src: str) -> DetectionResult:
        try:
            obs = await asyncio.to_thread(
                detect_single_face,
                frame,
                self.s.FAST_DETECTOR_BACKEND,
                self.s.FAST_MIN_FACE_SCORE,
                self.s.FAST_INPUT_WIDTH,
            )
        except Exception:
            logger.warning("[fast] quick detection failed", exc_info=True)
            return DetectionResult(emotion=NEUTRAL, image_src=image_src, confidence=0.5)

        result = self.decide(obs.expressions if obs else None, image_src)
        logger.debug(f"[fast] provisional emotion={result.emotion} confidence={result.confidence:.2f}")
        return result
