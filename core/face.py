"""
Single dominant face analysis with DeepFace (+ optional FaceMesh landmarks).
"""
# core/face.py
from __future__ import annotations
from typing import Dict, Optional, Tuple
import logging

import cv2
import numpy as np

from core.emotion import expressions_from_scores
from core.landmarks import extract_landmarks
from core.models import FaceObservation

logger = logging.getLogger(__name__)

MIN_BOX = 12          # px at detection scale; smaller boxes are noise


def _resize_for_detect(img: np.ndarray, target_w: Optional[int]) -> Tuple[np.ndarray, float]:
    H, W = img.shape[:2]
    if not target_w or W <= target_w:
        return img, 1.0
    scale = target_w / float(W)
    small = cv2.resize(img, (int(target_w), max(1, int(H * scale))), interpolation=cv2.INTER_AREA)
    return small, scale


def _face_score(r: Dict) -> float:
    # enforce_detection=False reports "no face" as the whole frame with confidence 0
    conf = r.get("face_confidence")
    if conf is None:
        conf = r.get("detector_score")
    if conf is None:
        conf = 1.0
    try:
        return float(conf)
    except Exception:
        return 1.0


def _region(r: Dict, scale: float) -> Dict[str, int]:
    reg = (r or {}).get("region") or {}
    return {k: int(int(reg.get(k, 0) or 0) / scale) for k in ("x", "y", "w", "h")}


def detect_single_face(
    frame: np.ndarray,
    detector_backend: str,
    min_score: float,
    max_width: Optional[int] = None,
    with_landmarks: bool = False,
) -> Optional[FaceObservation]:
    """
    Detect faces, keep the dominant (largest) one above `min_score` and return
    its expression vector. Returns None when no acceptable face is found.

    `max_width` bounds the detector input resolution; regions are reported in
    original frame coordinates. DeepFace is imported lazily so tests can
    inject a fake module.
    """
    from deepface import DeepFace

    img, scale = _resize_for_detect(frame, max_width)
    res = DeepFace.analyze(
        img,
        actions=["emotion"],
        enforce_detection=False,
        detector_backend=detector_backend,
    )
    res = res if isinstance(res, list) else [res]

    candidates = []
    for r in res:
        if not isinstance(r, dict):
            continue
        reg = r.get("region") or {}
        w, h = int(reg.get("w", 0) or 0), int(reg.get("h", 0) or 0)
        if reg and (w < MIN_BOX or h < MIN_BOX):
            continue
        if _face_score(r) < min_score:
            continue
        candidates.append(r)
    logger.debug(f"[face] backend={detector_backend} results={len(res)} accepted={len(candidates)}")
    if not candidates:
        return None

    def _area(r: Dict) -> int:
        reg = r.get("region") or {}
        return int(reg.get("w", 0) or 0) * int(reg.get("h", 0) or 0)

    best = max(candidates, key=_area)
    obs = FaceObservation(
        expressions=expressions_from_scores(best.get("emotion")),
        region=_region(best, scale),
        score=_face_score(best),
    )

    if with_landmarks:
        try:
            obs.landmarks = extract_landmarks(frame)
        except Exception:
            logger.exception("[face] landmark extraction failed; continuing without landmarks")
    return obs
