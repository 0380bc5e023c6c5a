"""Facial landmarks (MediaPipe FaceMesh) and the geometric sad/angry cues."""

from __future__ import annotations

from functools import lru_cache
import logging
import math
from typing import Optional, Sequence

import cv2
import numpy as np

from core.models import LandmarkHeuristics, Landmarks, Point

logger = logging.getLogger(__name__)

# FaceMesh vertex for each point of the classic 68-point layout, per group.
LANDMARK_GROUPS = {
    "left_brow": (71, 63, 105, 66, 107),
    "right_brow": (336, 296, 334, 293, 301),
    "left_eye": (33, 160, 158, 133, 153, 144),
    "right_eye": (362, 385, 387, 263, 373, 380),
    # outer lip 48..59, inner lip 60..67
    "mouth": (61, 39, 37, 0, 267, 269, 291, 405, 314, 17, 84, 181,
              78, 82, 13, 312, 308, 317, 14, 87),
}

MOUTH_LEFT, MOUTH_RIGHT = 0, 6
LIP_TOP, LIP_BOTTOM = 3, 9
EYE_OUTER_LEFT, EYE_OUTER_RIGHT = 0, 3


@lru_cache(maxsize=1)
def get_face_mesh():
    """Build (once) the FaceMesh graph used for still-image landmarks."""
    import mediapipe as mp
    return mp.solutions.face_mesh.FaceMesh(
        static_image_mode=True,
        max_num_faces=1,
        refine_landmarks=False,
        min_detection_confidence=0.5,
    )


def extract_landmarks(frame: np.ndarray) -> Optional[Landmarks]:
    """Landmarks of the dominant face in a BGR frame, or None when no face is found."""
    h, w = frame.shape[:2]
    result = get_face_mesh().process(cv2.cvtColor(frame, cv2.COLOR_BGR2RGB))
    faces = getattr(result, "multi_face_landmarks", None) or []
    if not faces:
        logger.debug("[landmarks] no face mesh found")
        return None
    verts = faces[0].landmark
    groups = {
        name: [(float(verts[i].x * w), float(verts[i].y * h)) for i in idx]
        for name, idx in LANDMARK_GROUPS.items()
    }
    return Landmarks(**groups)


def _dist(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def _mid_y(points: Sequence[Point]) -> float:
    return points[len(points) // 2][1]


def compute_heuristics(lm: Landmarks) -> LandmarkHeuristics:
    """
    Scale-free geometric cues, each normalized by the outer-corner eye distance.

    - mouth_depression: mean corner y minus mouth-center y (positive = corners drop)
    - mouth_width: corner-to-corner distance
    - brow_to_eye: left brow middle y minus eye-line y (positive = brow pulled down)
    """
    eye_l = lm.left_eye[EYE_OUTER_LEFT]
    eye_r = lm.right_eye[EYE_OUTER_RIGHT]
    eye_dist = _dist(eye_l, eye_r) or 1.0

    left_corner = lm.mouth[MOUTH_LEFT]
    right_corner = lm.mouth[MOUTH_RIGHT]
    center_y = (lm.mouth[LIP_TOP][1] + lm.mouth[LIP_BOTTOM][1]) / 2.0

    depression = ((left_corner[1] + right_corner[1]) / 2.0 - center_y) / eye_dist
    width = _dist(left_corner, right_corner) / eye_dist
    eye_line_y = (eye_l[1] + eye_r[1]) / 2.0
    brow_to_eye = (_mid_y(lm.left_brow) - eye_line_y) / eye_dist

    return LandmarkHeuristics(
        mouth_depression=float(depression),
        mouth_width=float(width),
        brow_to_eye=float(brow_to_eye),
    )
