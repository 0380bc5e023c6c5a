"""
Webcam frame capture and data-URL encoding.
"""
from __future__ import annotations
import base64
import logging
from typing import Optional

import cv2
import numpy as np

from core.config import Settings
from core.errors import CaptureError

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/jpeg;base64,"


def encode_data_url(frame: np.ndarray, quality: int = 92) -> str:
    """Encode a BGR frame as a JPEG data URL."""
    ok, buf = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), int(quality)])
    if not ok:
        raise CaptureError("Unable to encode captured frame")
    return DATA_URL_PREFIX + base64.b64encode(buf.tobytes()).decode("ascii")


def decode_data_url(src: str) -> np.ndarray:
    """Decode a data URL (or bare base64) into a BGR frame."""
    b64 = src or ""
    if "," in b64:
        b64 = b64.split(",", 1)[1]
    try:
        raw = base64.b64decode(b64, validate=True)
    except Exception as e:
        raise ValueError(f"Invalid base64 image: {e}") from e
    img = cv2.imdecode(np.frombuffer(raw, np.uint8), cv2.IMREAD_COLOR)
    if img is None:
        raise ValueError("Invalid image data")
    return img


class FrameCapturer:
    """Grabs still frames from the live camera feed on demand."""
    def __init__(self, settings: Settings, camera_index: Optional[int] = None):
        self.s = settings
        self.camera_index = settings.CAMERA_INDEX if camera_index is None else camera_index
        self._cap = None

    def open(self) -> None:
        if self._cap is not None:
            return
        cap = cv2.VideoCapture(self.camera_index)
        if not cap.isOpened():
            raise CaptureError(f"Could not open camera index {self.camera_index}")
        self._cap = cap
        logger.debug(f"[capture] camera {self.camera_index} opened")

    def read(self) -> Optional[np.ndarray]:
        """Next frame from the feed, or None when the camera yields nothing."""
        if self._cap is None:
            return None
        ok, frame = self._cap.read()
        if not ok or frame is None:
            return None
        return frame

    def grab(self) -> np.ndarray:
        """Capture one still frame; raises CaptureError when none is available."""
        frame = self.read()
        if frame is None:
            raise CaptureError("Unable to capture image")
        return frame.copy()

    def release(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None


class StillFrameSource:
    """Capturer stand-in that replays one image (files, uploads, tests)."""
    def __init__(self, frame: np.ndarray):
        self.frame = frame

    @classmethod
    def from_file(cls, path: str) -> "StillFrameSource":
        img = cv2.imread(path, cv2.IMREAD_COLOR)
        if img is None:
            raise CaptureError(f"Could not read image: {path}")
        return cls(img)

    def read(self) -> Optional[np.ndarray]:
        return self.frame.copy()

    def grab(self) -> np.ndarray:
        return self.frame.copy()

    def release(self) -> None:
        pass
