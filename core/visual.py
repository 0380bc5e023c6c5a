"""Preview overlay helpers for the companion window.

- draw_overlays: draw the status line (loading / ready / detecting / error),
  the current mood label and the suggestion text, coloured by theme.
"""
from __future__ import annotations
import cv2
import numpy as np
from typing import Dict, Optional, Tuple

from core.models import DetectionResult

Color = Tuple[int, int, int]

THEME_COLORS: Dict[str, Dict[str, Color]] = {
    "light": {"panel": (245, 240, 235), "text": (60, 40, 30), "accent": (200, 120, 20), "error": (40, 40, 220)},
    "dark": {"panel": (40, 25, 20), "text": (235, 230, 225), "accent": (230, 160, 80), "error": (90, 90, 255)},
}


def _put(img: np.ndarray, text: str, org: Tuple[int, int], color: Color, scale: float = 0.6) -> None:
    # Hershey fonts are ASCII-only
    safe = text.encode("ascii", "ignore").decode("ascii").strip()
    if safe:
        cv2.putText(img, safe, org, cv2.FONT_HERSHEY_SIMPLEX, scale, color, 2, cv2.LINE_AA)


def draw_overlays(frame: np.ndarray,
                  result: Optional[DetectionResult] = None,
                  status: Optional[str] = None,
                  theme: str = "light",
                  message: Optional[str] = None,
                  error: Optional[str] = None) -> np.ndarray:
    """Draw the session state on a copy of the preview frame.

    Args:
        frame: BGR image
        result: currently displayed detection (label + confidence)
        status: short status line, e.g. "Loading models..." / "Capture (c)"
        theme: "light" or "dark"
        message: suggestion text; only the first lines that fit are drawn
        error: user-visible error text (drawn in the error colour)

    Returns:
        Annotated copy of the frame.
    """
    out = frame.copy()
    h, w = out.shape[:2]
    colors = THEME_COLORS.get(theme, THEME_COLORS["light"])

    band = min(h, 34)
    cv2.rectangle(out, (0, 0), (w - 1, band), colors["panel"], -1)
    if status:
        _put(out, status, (10, max(12, band - 10)), colors["text"])

    y = band + 28
    if result is not None:
        _put(out, f"{result.emotion} {result.confidence:.2f}", (10, y), colors["accent"], 0.8)
        y += 28
    if error:
        _put(out, error, (10, min(h - 8, y)), colors["error"])
        y += 24
    elif message:
        for line in [ln for ln in message.splitlines() if ln.strip()][:4]:
            if y > h - 8:
                break
            _put(out, line[:70], (10, y), colors["text"], 0.5)
            y += 20

    return out
