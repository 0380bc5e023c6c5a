"""Persisted client settings: theme and last known mood in a small JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

THEME_KEY = "theme"
LAST_EMOTION_KEY = "moodmate:lastEmotion"
THEMES = ("light", "dark")


def load_json(path: PathLike) -> Dict[str, Any]:
    """Load JSON and always return a dict, even for missing/empty/malformed files."""
    target = Path(path)
    if not target.exists():
        return {}
    try:
        content = target.read_text(encoding="utf-8").strip()
        if not content:
            return {}
        data = json.loads(content)
    except (OSError, json.JSONDecodeError):
        logger.warning(f"[store] {target} is not valid JSON; starting fresh")
        return {}
    return data if isinstance(data, dict) else {}


class SettingsStore:
    """Key/value settings loaded once at init; every set rewrites the file."""
    def __init__(self, path: PathLike):
        self.path = Path(path)
        self._data: Dict[str, Any] = load_json(self.path)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, indent=2, ensure_ascii=False), encoding="utf-8")

    @property
    def theme(self) -> str:
        theme = self.get(THEME_KEY) or "light"
        return theme if theme in THEMES else "light"

    @theme.setter
    def theme(self, value: str) -> None:
        self.set(THEME_KEY, value if value in THEMES else "light")

    def toggle_theme(self) -> str:
        self.theme = "dark" if self.theme == "light" else "light"
        return self.theme

    @property
    def last_emotion(self) -> str:
        return str(self.get(LAST_EMOTION_KEY) or "")

    @last_emotion.setter
    def last_emotion(self, value: str) -> None:
        if value:
            self.set(LAST_EMOTION_KEY, value)
