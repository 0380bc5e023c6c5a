"""
Pydantic data models for pipeline results and API IO.
"""
from __future__ import annotations
from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Literal, Optional, Tuple

from core.emotion import coerce_emotion, safe_confidence

Emotion = Literal["happy", "sad", "angry", "surprised", "fearful", "disgusted", "neutral"]
Point = Tuple[float, float]


class DetectionResult(BaseModel):
    emotion: Emotion = "neutral"
    image_src: str = ""
    confidence: float = 0.5

    @field_validator("emotion", mode="before")
    @classmethod
    def _coerce_emotion(cls, v):
        return coerce_emotion(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v):
        return safe_confidence(v)


class Landmarks(BaseModel):
    """Facial point groups in 68-point ordering (pixel coordinates)."""
    mouth: List[Point]
    left_eye: List[Point]
    right_eye: List[Point]
    left_brow: List[Point]
    right_brow: List[Point]


class LandmarkHeuristics(BaseModel):
    mouth_depression: float
    mouth_width: float
    brow_to_eye: float


class FaceObservation(BaseModel):
    expressions: Dict[str, float] = Field(default_factory=dict)
    region: Dict[str, int] = Field(default_factory=dict)
    score: float = 1.0
    landmarks: Optional[Landmarks] = None


class DeepOutcome(BaseModel):
    result: DetectionResult
    averaged: Dict[str, float] = Field(default_factory=dict)
    frames: int = 1
    heuristics: Optional[LandmarkHeuristics] = None
    used_remote: bool = False


# API IO

class ClassifyRequest(BaseModel):
    image: Optional[str] = None
    expressions: Optional[Dict[str, float]] = None


class ClassifyResponse(BaseModel):
    emotion: Emotion = "neutral"
    confidence: float = 0.5
    note: Optional[Literal["openai_error"]] = None
    detail: Optional[Any] = None

    @field_validator("emotion", mode="before")
    @classmethod
    def _coerce_emotion(cls, v):
        return coerce_emotion(v)

    @field_validator("confidence", mode="before")
    @classmethod
    def _clamp_confidence(cls, v):
        return safe_confidence(v)


class JokeResponse(BaseModel):
    joke: str


class QuoteResponse(BaseModel):
    quote: str


class ErrorResponse(BaseModel):
    error: str
    detail: Optional[Any] = None
