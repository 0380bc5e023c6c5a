
from core.config import Settings

def test_Settings():
    s = Settings()
    assert s.DEEP_FRAMES >= 1
    assert 0 < s.FAST_NEUTRAL_BELOW < s.DEEP_NEUTRAL_BELOW
    # override via env-like behavior (construct new instance)
    s2 = Settings(DEEP_FRAMES=5, FULL_DETECTOR_BACKEND="RetinaFace", API_BASE_URL="http://example.test/")
    assert s2.DEEP_FRAMES == 5
    assert s2.FULL_DETECTOR_BACKEND == "retinaface"
    assert s2.API_BASE_URL == "http://example.test"
