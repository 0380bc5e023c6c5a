import asyncio
import sys
import types
import core.loader as loader_mod
from core.loader import FAST_LOAD_ERROR, ModelLoader


def _fake_deepface(monkeypatch, failing_backends=()):
    seen = []

    class DF:
        @staticmethod
        def analyze(img, actions, enforce_detection, detector_backend):
            seen.append(detector_backend)
            if detector_backend in failing_backends:
                raise OSError("weights download failed")
            return [{"emotion": {"neutral": 100.0}, "region": {"x": 0, "y": 0, "w": 48, "h": 48}}]

    monkeypatch.setitem(sys.modules, "deepface", types.SimpleNamespace(DeepFace=DF))
    return seen


def test_both_tiers_load(monkeypatch, settings):
    seen = _fake_deepface(monkeypatch)
    mesh = {"n": 0}
    monkeypatch.setattr(loader_mod, "get_face_mesh", lambda: mesh.update(n=mesh["n"] + 1))
    loader = ModelLoader(settings)
    asyncio.run(loader.load())
    assert loader.fast_loaded and loader.full_loaded
    assert loader.fast_error is None
    assert sorted(seen) == ["opencv", "ssd"]
    assert mesh["n"] == 1

def test_fast_failure_sets_error(monkeypatch, settings):
    _fake_deepface(monkeypatch, failing_backends=("opencv",))
    monkeypatch.setattr(loader_mod, "get_face_mesh", lambda: None)
    loader = ModelLoader(settings)
    asyncio.run(loader.load())
    assert not loader.fast_loaded
    assert loader.fast_error == FAST_LOAD_ERROR
    assert loader.full_loaded

def test_full_failure_is_silent(monkeypatch, settings):
    _fake_deepface(monkeypatch)
    def broken_mesh():
        raise ImportError("mediapipe missing")
    monkeypatch.setattr(loader_mod, "get_face_mesh", broken_mesh)
    loader = ModelLoader(settings)
    asyncio.run(loader.load())
    assert loader.fast_loaded
    assert not loader.full_loaded
    assert loader.fast_error is None
