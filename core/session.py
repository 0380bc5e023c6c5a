"""
One webcam session: capture -> fast estimate -> publish -> background deep
estimate -> arbitrate -> maybe publish again.
"""
from __future__ import annotations
import asyncio
import logging
from typing import Callable, Optional

from core.arbiter import LatestResult, should_update
from core.capture import encode_data_url
from core.config import Settings
from core.deep import DeepEstimator
from core.errors import SessionBusy
from core.fast import FastEstimator
from core.loader import ModelLoader
from core.models import DetectionResult
from core.store import SettingsStore

logger = logging.getLogger(__name__)


class MoodSession:
    """
    `detecting` stays True for the whole fast+deep run so pipelines never
    overlap on the same camera. `reset()` cancels a running background task
    and opens a new generation, so its result (if any) is discarded.
    """
    def __init__(
        self,
        settings: Settings,
        capturer,
        loader: ModelLoader,
        fast: FastEstimator,
        deep: DeepEstimator,
        store: Optional[SettingsStore] = None,
        on_result: Optional[Callable[[DetectionResult, bool], None]] = None,
    ):
        self.s = settings
        self.capturer = capturer
        self.loader = loader
        self.fast = fast
        self.deep = deep
        self.store = store
        self.on_result = on_result
        self.detecting = False
        self.slot = LatestResult()
        self._background: Optional[asyncio.Task] = None

    @property
    def ready(self) -> bool:
        return self.loader.fast_loaded and not self.detecting

    @property
    def current(self) -> Optional[DetectionResult]:
        return self.slot.value

    def _publish(self, generation: int, result: DetectionResult, final: bool) -> None:
        if not self.slot.put(generation, result):
            return
        if self.store is not None and result.emotion:
            self.store.last_emotion = result.emotion
        logger.debug(f"[session] published {'final' if final else 'provisional'} {result.emotion}@{result.confidence:.2f}")
        if self.on_result is not None:
            self.on_result(result, final)

    async def capture_and_detect(self) -> DetectionResult:
        """
        Publish the provisional result and schedule the deep refinement.

        Raises:
            SessionBusy: models not loaded yet or a detection is running.
            CaptureError: no frame available (nothing is published).
        """
        if not self.ready:
            raise SessionBusy(self.loader.fast_error or ("Detecting…" if self.detecting else "Loading models…"))
        self.detecting = True
        generation = self.slot.next_generation()
        try:
            frame = self.capturer.grab()
            image_src = encode_data_url(frame, self.s.JPEG_QUALITY)
            provisional = await self.fast.estimate(frame, image_src)
        except BaseException:
            self.detecting = False
            raise

        self._publish(generation, provisional, final=False)
        self._background = asyncio.create_task(self._refine(generation, frame, image_src, provisional))
        return provisional

    async def _refine(self, generation: int, frame, image_src: str, provisional: DetectionResult) -> None:
        try:
            outcome = await self.deep.estimate(frame, image_src)
            final = outcome.result
            if should_update(provisional, final, self.s.UPDATE_MIN_DELTA, self.s.UPDATE_MIN_CONFIDENCE):
                self._publish(generation, final, final=True)
        except asyncio.CancelledError:
            logger.debug(f"[session] background analysis for generation {generation} cancelled")
            raise
        except Exception:
            logger.exception("[session] background analysis failed")
        finally:
            if generation == self.slot.generation:
                self.detecting = False

    async def wait_idle(self) -> None:
        """Wait for the background refinement (if any) to settle."""
        task = self._background
        if task is not None and not task.done():
            await asyncio.wait({task})

    def reset(self) -> None:
        """Clear the displayed result ("Try Again")."""
        task = self._background
        if task is not None and not task.done():
            task.cancel()
        self._background = None
        self.slot.clear()
        self.detecting = False
