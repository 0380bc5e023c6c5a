"""
Emotion label helpers: the seven-label set, coercion, clamping and
expression-vector arithmetic shared by every estimation stage.
"""
# core/emotion.py
from __future__ import annotations
from typing import Dict, Iterable, Mapping, Tuple

EMOTIONS: Tuple[str, ...] = ("happy", "sad", "angry", "surprised", "fearful", "disgusted", "neutral")
NEUTRAL = "neutral"

# DeepFace (and a few common synonyms) -> canonical label
_ALIAS = {
    "happiness": "happy", "joy": "happy",
    "sadness": "sad",
    "anger": "angry",
    "surprise": "surprised",
    "fear": "fearful", "scared": "fearful",
    "disgust": "disgusted",
    "calm": "neutral",
}


def normalize_label(label) -> str:
    """Lower-case a label and map known aliases; unknown labels pass through."""
    s = str(label or "").strip().lower()
    return _ALIAS.get(s, s)


def coerce_emotion(label) -> str:
    """Always return one of EMOTIONS; anything else (aliases included) becomes neutral."""
    s = str(label or "").strip().lower()
    return s if s in EMOTIONS else NEUTRAL


def clamp(x: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, float(x)))


def safe_confidence(value, default: float = 0.5) -> float:
    """Clamp to [0, 1]; non-numeric (or NaN) values fall back to `default`."""
    try:
        v = float(value)
    except (TypeError, ValueError):
        return default
    if v != v:
        return default
    return clamp(v)


def top_emotion(expressions: Mapping[str, float] | None) -> Tuple[str, float]:
    """
    Pick the label with the strictly greatest positive score.

    Ties keep the first key seen (insertion order). An empty or all-zero
    vector yields ("neutral", 0.0).
    """
    key, value = NEUTRAL, 0.0
    for k, v in (expressions or {}).items():
        if isinstance(v, (int, float)) and v > value:
            key, value = k, float(v)
    return key, value


def expressions_from_scores(raw: Mapping | None) -> Dict[str, float]:
    """
    Convert a DeepFace `emotion` dict into an ExpressionVector.

    DeepFace reports 0..100 for most backends; if the largest value is above
    1.5 the whole vector is rescaled to 0..1.
    """
    scores: Dict[str, float] = {}
    for k, v in (raw or {}).items():
        if v is None:
            continue
        try:
            scores[normalize_label(k)] = float(v)
        except (TypeError, ValueError):
            continue
    max_val = max(scores.values(), default=1.0)
    scale = 100.0 if max_val > 1.5 else 1.0
    return {k: clamp(v / scale) for k, v in scores.items()}


def accumulate(total: Dict[str, float], expressions: Mapping[str, float] | None) -> Dict[str, float]:
    """Add one frame's scores into a running total (in place) and return it."""
    for k, v in (expressions or {}).items():
        total[k] = total.get(k, 0.0) + (float(v) if isinstance(v, (int, float)) else 0.0)
    return total


def average(total: Mapping[str, float], frames: int) -> Dict[str, float]:
    n = max(1, int(frames))
    return {k: v / n for k, v in total.items()}


def summarize(expressions: Mapping[str, float] | None, labels: Iterable[str] = EMOTIONS) -> str:
    """Compact `label=score` string for debug logs."""
    exprs = expressions or {}
    return " ".join(f"{k}={exprs[k]:.2f}" for k in labels if k in exprs)
