"""
Deep (background) estimation.

Samples several frames with the full detector tier, averages the expression
scores, refines sad/angry with landmark geometry and, when the answer is still
neutral, asks the remote classifier.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

import numpy as np

from core.config import Settings
from core.emotion import NEUTRAL, accumulate, average, clamp, summarize, top_emotion
from core.face import detect_single_face
from core.landmarks import compute_heuristics
from core.loader import ModelLoader
from core.models import ClassifyResponse, DeepOutcome, DetectionResult, FaceObservation, LandmarkHeuristics

logger = logging.getLogger(__name__)

# Heuristic thresholds (inter-eye normalized)
SAD_DEPRESSION_MIN = 0.045
SAD_SCORE_MIN = 0.18
ANGRY_BROW_MIN = 0.03
ANGRY_MOUTH_WIDTH_MAX = 0.45
HEURISTIC_DEFAULT_CONFIDENCE = 0.6

RemoteClassify = Callable[[str, Dict[str, float]], Awaitable[Optional[ClassifyResponse]]]


def apply_heuristics(
    emotion: str,
    confidence: float,
    heur: LandmarkHeuristics,
    expressions: Dict[str, float],
) -> tuple[str, float]:
    """Geometric overrides; they win over the averaged classifier label."""
    sad = expressions.get("sad")
    angry = expressions.get("angry")
    if heur.mouth_depression > SAD_DEPRESSION_MIN or (sad or 0.0) > SAD_SCORE_MIN:
        return "sad", max(confidence, sad if sad is not None else HEURISTIC_DEFAULT_CONFIDENCE)
    if heur.brow_to_eye > ANGRY_BROW_MIN and heur.mouth_width < ANGRY_MOUTH_WIDTH_MAX:
        return "angry", max(confidence, angry if angry is not None else HEURISTIC_DEFAULT_CONFIDENCE)
    return emotion, confidence


class DeepEstimator:
    def __init__(self, settings: Settings, loader: ModelLoader, capturer=None,
                 remote: Optional[RemoteClassify] = None):
        self.s = settings
        self.loader = loader
        self.capturer = capturer
        self.remote = remote

    async def _observe(self, frame: np.ndarray, full: bool, with_landmarks: bool = False) -> Optional[FaceObservation]:
        if full:
            backend, min_score = self.s.FULL_DETECTOR_BACKEND, self.s.FULL_MIN_FACE_SCORE
        else:
            backend, min_score = self.s.FAST_DETECTOR_BACKEND, self.s.FALLBACK_MIN_FACE_SCORE
        try:
            return await asyncio.to_thread(
                detect_single_face, frame, backend, min_score,
                None if full else self.s.FAST_INPUT_WIDTH, with_landmarks,
            )
        except Exception:
            logger.exception("[deep] detection failed; frame contributes no signal")
            return None

    async def _sample(self, index: int, original: np.ndarray) -> Optional[np.ndarray]:
        if index == 0:
            return original
        if self.capturer is None:
            return None
        try:
            return await asyncio.to_thread(self.capturer.read)
        except Exception:
            logger.exception("[deep] re-capture failed")
            return None

    async def estimate(self, frame: np.ndarray, image_src: str) -> DeepOutcome:
        full = self.loader.full_loaded
        frames = max(1, self.s.DEEP_FRAMES) if full else 1
        total: Dict[str, float] = {}

        for i in range(frames):
            sample = await self._sample(i, frame)
            if sample is None:
                continue
            obs = await self._observe(sample, full)
            if obs is not None:
                accumulate(total, obs.expressions)
            if frames > 1:
                await asyncio.sleep(self.s.DEEP_FRAME_SPACING)

        averaged = average(total, frames)
        key, value = top_emotion(averaged)
        confidence = clamp(value)
        emotion = key if confidence >= self.s.DEEP_NEUTRAL_BELOW else NEUTRAL
        logger.debug(f"[deep] frames={frames} averaged: {summarize(averaged)} -> {emotion} {confidence:.2f}")

        heur = None
        if full:
            obs = await self._observe(frame, True, with_landmarks=True)
            if obs is not None and obs.landmarks is not None:
                try:
                    heur = compute_heuristics(obs.landmarks)
                    emotion, confidence = apply_heuristics(emotion, confidence, heur, obs.expressions)
                    logger.debug(f"[deep] heuristics {heur} -> {emotion} {confidence:.2f}")
                except Exception:
                    logger.exception("[deep] landmark heuristics failed; ignoring")

        used_remote = False
        if emotion == NEUTRAL and self.remote is not None:
            used_remote = True
            try:
                reply = await self.remote(image_src, averaged)
            except Exception:
                logger.warning("[deep] remote fallback failed", exc_info=True)
                reply = None
            if reply is not None and reply.confidence >= self.s.REMOTE_MIN_CONFIDENCE:
                emotion = reply.emotion
                confidence = max(confidence, reply.confidence)
                logger.debug(f"[deep] remote fallback adopted {emotion} {confidence:.2f}")

        return DeepOutcome(
            result=DetectionResult(emotion=emotion, image_src=image_src, confidence=confidence),
            averaged=averaged,
            frames=frames,
            heuristics=heur,
            used_remote=used_remote,
        )
