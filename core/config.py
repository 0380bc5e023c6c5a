"""
Configuration for the mood companion (server + local client).
"""
from pydantic import BaseModel
import os

class Settings(BaseModel):
    """
    Runtime settings with environment-variable overrides.
    """
    # Server: upstream collaborators
    OPENAI_API_KEY: str | None = os.getenv("OPENAI_API_KEY") or None
    OPENAI_BASE_URL: str | None = os.getenv("OPENAI_BASE_URL") or None
    VISION_MODEL: str = os.getenv("VISION_MODEL", "gpt-4o-mini")
    TEXT_MODEL: str = os.getenv("TEXT_MODEL", "gpt-4o-mini")
    VISION_TIMEOUT: float = float(os.getenv("VISION_TIMEOUT", "20"))
    TEXT_TIMEOUT: float = float(os.getenv("TEXT_TIMEOUT", "15"))
    JOKE_API_URL: str = os.getenv("JOKE_API_URL", "https://v2.jokeapi.dev/joke/Any")
    JOKE_BLACKLIST: str = os.getenv("JOKE_BLACKLIST", "nsfw,religious,political,racist,sexist,explicit")
    QUOTE_API_URL: str = os.getenv("QUOTE_API_URL", "https://zenquotes.io/api/random")
    UPSTREAM_TIMEOUT: float = float(os.getenv("UPSTREAM_TIMEOUT", "10"))

    # Client: where the proxy endpoints live
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
    REMOTE_CLASSIFY_TIMEOUT: float = float(os.getenv("REMOTE_CLASSIFY_TIMEOUT", "8"))
    SUGGESTION_TIMEOUT: float = float(os.getenv("SUGGESTION_TIMEOUT", "15"))

    # Capture
    CAMERA_INDEX: int = int(os.getenv("CAMERA_INDEX", "0"))
    JPEG_QUALITY: int = int(os.getenv("JPEG_QUALITY", "92"))

    # Model tiers
    FAST_DETECTOR_BACKEND: str = os.getenv("FAST_DETECTOR_BACKEND", "opencv")
    FULL_DETECTOR_BACKEND: str = os.getenv("FULL_DETECTOR_BACKEND", "ssd")
    FAST_INPUT_WIDTH: int = int(os.getenv("FAST_INPUT_WIDTH", "160"))
    FAST_MIN_FACE_SCORE: float = float(os.getenv("FAST_MIN_FACE_SCORE", "0.5"))
    FALLBACK_MIN_FACE_SCORE: float = float(os.getenv("FALLBACK_MIN_FACE_SCORE", "0.4"))
    FULL_MIN_FACE_SCORE: float = float(os.getenv("FULL_MIN_FACE_SCORE", "0.3"))

    # Estimation policy
    FAST_NEUTRAL_BELOW: float = float(os.getenv("FAST_NEUTRAL_BELOW", "0.2"))
    DEEP_NEUTRAL_BELOW: float = float(os.getenv("DEEP_NEUTRAL_BELOW", "0.35"))
    DEEP_FRAMES: int = int(os.getenv("DEEP_FRAMES", "3"))
    DEEP_FRAME_SPACING: float = float(os.getenv("DEEP_FRAME_SPACING", "0.12"))
    REMOTE_MIN_CONFIDENCE: float = float(os.getenv("REMOTE_MIN_CONFIDENCE", "0.2"))
    UPDATE_MIN_DELTA: float = float(os.getenv("UPDATE_MIN_DELTA", "0.15"))
    UPDATE_MIN_CONFIDENCE: float = float(os.getenv("UPDATE_MIN_CONFIDENCE", "0.5"))

    # Client-persisted state (theme + last known mood)
    SETTINGS_PATH: str = os.getenv("SETTINGS_PATH", os.path.join(os.path.expanduser("~"), ".moodmate", "settings.json"))

    def __init__(self, **data):
        super().__init__(**data)
        # Normalize backends: lower-case, no stray whitespace
        for key in ("FAST_DETECTOR_BACKEND", "FULL_DETECTOR_BACKEND"):
            backend = (getattr(self, key) or "opencv").strip().lower()
            object.__setattr__(self, key, backend)
        object.__setattr__(self, "API_BASE_URL", self.API_BASE_URL.rstrip("/"))
