# core/companion.py
"""
Local companion client: webcam preview + capture/detect + suggestions.

Keys in the preview window:
- c: capture & detect emotion
- r: try again (clears the result, cancels background analysis)
- t: toggle light/dark theme
- y / n: feedback on the last suggestion
- q: quit
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import cv2

from core.capture import FrameCapturer
from core.config import Settings
from core.deep import DeepEstimator
from core.errors import CaptureError, SessionBusy, SuggestionError
from core.fast import FastEstimator
from core.loader import ModelLoader
from core.models import DetectionResult
from core.remote import RemoteClassifier
from core.session import MoodSession
from core.store import SettingsStore
from core.suggestions import SuggestionProvider, title_for_emotion
from core.visual import draw_overlays

logger = logging.getLogger(__name__)

WINDOW = "MoodMate"
FEEDBACK_PROMPT = "Did that help? [y/n]"
FEEDBACK_COPY = {
    "up": "Thanks! Glad it helped 💙",
    "down": "Thanks for the feedback. We'll try better next time 💜",
}


class CompanionView:
    """What the preview window currently shows."""
    def __init__(self):
        self.result: Optional[DetectionResult] = None
        self.message: str = ""
        self.error: Optional[str] = None
        self.feedback: Optional[str] = None

    def clear(self) -> None:
        self.result = None
        self.message = ""
        self.error = None
        self.feedback = None


def status_line(session: MoodSession, loader: ModelLoader) -> str:
    if loader.fast_error:
        return loader.fast_error
    if not loader.fast_loaded:
        return "Loading models..."
    if session.detecting:
        return "Detecting..."
    return "Capture & Detect Emotion (c)"


async def run_companion_async(settings: Settings, camera_index: Optional[int] = None) -> None:
    store = SettingsStore(settings.SETTINGS_PATH)
    capturer = FrameCapturer(settings, camera_index)
    capturer.open()

    loader = ModelLoader(settings)
    loader.start()
    fast = FastEstimator(settings)
    deep = DeepEstimator(settings, loader, capturer, remote=RemoteClassifier(settings))
    provider = SuggestionProvider(settings)
    view = CompanionView()
    tasks: set[asyncio.Task] = set()
    suggestion_task: Optional[asyncio.Task] = None

    def _spawn(coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        tasks.add(task)
        task.add_done_callback(tasks.discard)
        return task

    async def _suggest(emotion: str) -> None:
        view.message = "Getting something for you…"
        view.error = None
        try:
            view.message = await provider.suggest(emotion)
            print(view.message)
            print(FEEDBACK_PROMPT)
        except SuggestionError as e:
            view.message = ""
            view.error = str(e)
            print(view.error)

    def on_result(result: DetectionResult, final: bool) -> None:
        nonlocal suggestion_task
        view.result = result
        view.feedback = None
        print(f"{title_for_emotion(result.emotion)} (confidence {result.confidence:.2f}{', refined' if final else ''})")
        if suggestion_task is not None and not suggestion_task.done():
            suggestion_task.cancel()
        suggestion_task = _spawn(_suggest(result.emotion))

    session = MoodSession(settings, capturer, loader, fast, deep, store=store, on_result=on_result)

    async def _capture() -> None:
        # Capture is disabled while loading or detecting; the status line says why
        if not session.ready:
            logger.debug(f"[companion] capture ignored: {status_line(session, loader)}")
            return
        view.clear()
        try:
            await session.capture_and_detect()
        except (SessionBusy, CaptureError) as e:
            view.error = str(e) or "Something went wrong while detecting emotion"
            logger.warning(f"[companion] capture refused: {view.error}")

    last = store.last_emotion
    print(f"Last detected mood: {last}" if last else "Let me help brighten your day ✨")

    try:
        while True:
            frame = capturer.read()
            if frame is not None:
                annotated = draw_overlays(
                    frame,
                    result=view.result,
                    status=status_line(session, loader),
                    theme=store.theme,
                    message=(FEEDBACK_COPY.get(view.feedback) if view.feedback else view.message),
                    error=view.error,
                )
                cv2.imshow(WINDOW, annotated)
            key = cv2.waitKey(1) & 0xFF
            if key == ord("q"):
                break
            if key == ord("c"):
                _spawn(_capture())
            elif key == ord("r"):
                session.reset()
                view.clear()
            elif key == ord("t"):
                print(f"Theme: {store.toggle_theme()}")
            elif key in (ord("y"), ord("n")) and view.result is not None and view.feedback is None:
                view.feedback = "up" if key == ord("y") else "down"
                print(FEEDBACK_COPY[view.feedback])
            await asyncio.sleep(0.01)
    finally:
        session.reset()
        for task in list(tasks):
            task.cancel()
        capturer.release()
        cv2.destroyAllWindows()


def run_companion(settings: Settings, camera_index: Optional[int] = None) -> None:
    """Open the webcam preview and run the companion until 'q' is pressed."""
    asyncio.run(run_companion_async(settings, camera_index))
