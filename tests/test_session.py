import asyncio
import pytest
from core.capture import StillFrameSource
from core.errors import CaptureError, SessionBusy
from core.models import DeepOutcome, DetectionResult
from core.session import MoodSession
from core.store import SettingsStore


class FakeFast:
    def __init__(self, emotion="neutral", confidence=0.4):
        self.result = (emotion, confidence)
    async def estimate(self, frame, image_src):
        return DetectionResult(emotion=self.result[0], confidence=self.result[1], image_src=image_src)


class FakeDeep:
    def __init__(self, emotion="sad", confidence=0.8, hang=False):
        self.result = (emotion, confidence)
        self.hang = hang
        self.started = asyncio.Event() if hang else None
        self.cancelled = False
    async def estimate(self, frame, image_src):
        if self.hang:
            self.started.set()
            try:
                await asyncio.sleep(60)
            except asyncio.CancelledError:
                self.cancelled = True
                raise
        return DeepOutcome(result=DetectionResult(emotion=self.result[0], confidence=self.result[1], image_src=image_src))


class NoFrame:
    def grab(self):
        raise CaptureError("Unable to capture image")


def _session(settings, frame, loader, fast=None, deep=None, capturer=None, published=None):
    store = SettingsStore(settings.SETTINGS_PATH)
    on_result = (lambda r, final: published.append((r.emotion, r.confidence, final))) if published is not None else None
    return MoodSession(settings, capturer or StillFrameSource(frame), loader, fast or FakeFast(), deep or FakeDeep(),
                       store=store, on_result=on_result)


def test_provisional_then_final(settings, frame, loader_stub):
    published = []
    session = _session(settings, frame, loader_stub(), published=published)

    async def run():
        first = await session.capture_and_detect()
        assert session.detecting
        assert first.image_src.startswith("data:image/jpeg;base64,")
        await session.wait_idle()

    asyncio.run(run())
    assert published == [("neutral", 0.4, False), ("sad", 0.8, True)]
    assert session.current.emotion == "sad"
    assert not session.detecting
    assert SettingsStore(settings.SETTINGS_PATH).last_emotion == "sad"

def test_weak_final_keeps_provisional(settings, frame, loader_stub):
    published = []
    session = _session(settings, frame, loader_stub(), fast=FakeFast("happy", 0.6),
                       deep=FakeDeep("sad", 0.45), published=published)

    async def run():
        await session.capture_and_detect()
        await session.wait_idle()

    asyncio.run(run())
    assert published == [("happy", 0.6, False)]
    assert session.current.emotion == "happy"
    assert not session.detecting

def test_busy_while_loading_or_detecting(settings, frame, loader_stub):
    loading = _session(settings, frame, loader_stub(fast=False))
    with pytest.raises(SessionBusy, match="Loading models"):
        asyncio.run(loading.capture_and_detect())

    failed = loader_stub(fast=False)
    failed.fast_error = "Failed to load fast face models. Check your connection."
    with pytest.raises(SessionBusy, match="Check your connection"):
        asyncio.run(_session(settings, frame, failed).capture_and_detect())

    deep = FakeDeep(hang=True)
    session = _session(settings, frame, loader_stub(), deep=deep)

    async def run():
        await session.capture_and_detect()
        await deep.started.wait()
        with pytest.raises(SessionBusy, match="Detecting"):
            await session.capture_and_detect()
        session.reset()

    asyncio.run(run())

def test_capture_failure_publishes_nothing(settings, frame, loader_stub):
    published = []
    session = _session(settings, frame, loader_stub(), capturer=NoFrame(), published=published)
    with pytest.raises(CaptureError):
        asyncio.run(session.capture_and_detect())
    assert published == []
    assert not session.detecting
    assert session.ready

def test_reset_cancels_background_and_discards_result(settings, frame, loader_stub):
    published = []
    deep = FakeDeep(hang=True)
    session = _session(settings, frame, loader_stub(), deep=deep, published=published)

    async def run():
        await session.capture_and_detect()
        await deep.started.wait()
        task = session._background
        session.reset()
        await asyncio.wait({task})
        return task

    task = asyncio.run(run())
    assert task.cancelled()
    assert deep.cancelled
    assert published == [("neutral", 0.4, False)]
    assert session.current is None
    assert not session.detecting
