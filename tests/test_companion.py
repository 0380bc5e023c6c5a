import asyncio
import sys
import types
import numpy as np
import core.companion as companion
from core.store import SettingsStore


class DummyCap:
    def isOpened(self):
        return True
    def read(self):
        return True, np.full((96, 128, 3), 90, dtype=np.uint8)
    def release(self):
        pass


class ReadyLoader:
    def __init__(self, settings):
        self.fast_loaded = True
        self.full_loaded = False
        self.fast_error = None
    def start(self):
        pass


class DF:
    @staticmethod
    def analyze(img, actions, enforce_detection, detector_backend):
        return [{"emotion": {"happy": 90.0, "neutral": 10.0}, "region": {"x": 20, "y": 10, "w": 40, "h": 40}}]


def _patch_window(monkeypatch, keys):
    shown = {"n": 0}
    monkeypatch.setattr(companion.cv2, "VideoCapture", lambda idx: DummyCap())
    monkeypatch.setattr(companion.cv2, "imshow", lambda *a, **k: shown.update(n=shown["n"] + 1))
    monkeypatch.setattr(companion.cv2, "destroyAllWindows", lambda: None)
    monkeypatch.setattr(companion.cv2, "waitKey", keys)
    monkeypatch.setattr(companion, "ModelLoader", ReadyLoader)
    monkeypatch.setitem(sys.modules, "deepface", types.SimpleNamespace(DeepFace=DF))
    return shown


def test_theme_toggle_is_persisted(monkeypatch, settings):
    keys = iter([ord("t"), ord("q")])
    shown = _patch_window(monkeypatch, lambda d: next(keys))
    companion.run_companion(settings, camera_index=0)
    assert shown["n"] == 2
    assert SettingsStore(settings.SETTINGS_PATH).theme == "dark"

def test_capture_publishes_and_remembers_mood(monkeypatch, settings, capsys):
    state = {"calls": 0}

    def keys(delay):
        state["calls"] += 1
        if state["calls"] == 1:
            return ord("c")
        if SettingsStore(settings.SETTINGS_PATH).last_emotion or state["calls"] > 500:
            return ord("q")
        return -1

    _patch_window(monkeypatch, keys)
    companion.run_companion(settings, camera_index=0)
    assert SettingsStore(settings.SETTINGS_PATH).last_emotion == "happy"
    out = capsys.readouterr().out
    assert "Let me help brighten your day" in out
    assert "You look happy" in out

def test_status_line(settings, loader_stub):
    class Session:
        detecting = False
    loading = loader_stub(fast=False)
    assert companion.status_line(Session(), loading) == "Loading models..."
    loading.fast_error = "Failed to load fast face models. Check your connection."
    assert companion.status_line(Session(), loading) == loading.fast_error
    busy = Session()
    busy.detecting = True
    assert companion.status_line(busy, loader_stub()) == "Detecting..."


class HangingDeep:
    def __init__(self, *args, **kwargs):
        pass
    async def estimate(self, frame, image_src):
        await asyncio.sleep(60)


def test_capture_while_detecting_keeps_displayed_result(monkeypatch, settings):
    draws = []
    state = {"calls": 0, "second": None}

    def fake_draw(frame, **kw):
        draws.append((kw["result"], kw["error"]))
        return frame

    def keys(delay):
        state["calls"] += 1
        if state["calls"] == 1:
            return ord("c")
        if state["second"] is None and draws and draws[-1][0] is not None:
            state["second"] = len(draws)
            return ord("c")
        if state["second"] is not None and len(draws) > state["second"] + 5 or state["calls"] > 500:
            return ord("q")
        return -1

    _patch_window(monkeypatch, keys)
    monkeypatch.setattr(companion, "DeepEstimator", HangingDeep)
    monkeypatch.setattr(companion, "draw_overlays", fake_draw)
    companion.run_companion(settings, camera_index=0)

    assert state["second"] is not None
    after = draws[state["second"]:]
    assert len(after) > 5
    assert all(result is not None and result.emotion == "happy" for result, _ in after)
    assert all(error is None for _, error in after)
