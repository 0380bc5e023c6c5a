import pytest
import numpy as np

from core.config import Settings
from core.models import Landmarks


@pytest.fixture
def settings(tmp_path):
    return Settings(
        SETTINGS_PATH=str(tmp_path / "settings.json"),
        API_BASE_URL="http://moodmate.test",
        DEEP_FRAME_SPACING=0.0,
    )

@pytest.fixture
def frame():
    return np.zeros((240, 320, 3), dtype=np.uint8)


class LoaderStub:
    def __init__(self, fast=True, full=True):
        self.fast_loaded = fast
        self.full_loaded = full
        self.fast_error = None


@pytest.fixture
def loader_stub():
    return LoaderStub


def make_landmarks(depression=0.0, width=0.6, brow_to_eye=-0.2) -> Landmarks:
    """Landmarks with eye distance 100 px and the requested (normalized) cues."""
    eye_y, center_y = 0.0, 75.0
    corner_y = center_y + depression * 100.0
    half = width * 50.0
    mouth = [(50.0, center_y)] * 20
    mouth[0] = (50.0 - half, corner_y)
    mouth[6] = (50.0 + half, corner_y)
    mouth[3] = (50.0, center_y - 5.0)
    mouth[9] = (50.0, center_y + 5.0)
    left_eye = [(0.0, eye_y)] + [(10.0, eye_y)] * 5
    right_eye = [(90.0, eye_y)] * 3 + [(100.0, eye_y)] + [(95.0, eye_y)] * 2
    brow = [(20.0, -15.0), (25.0, -18.0), (30.0, brow_to_eye * 100.0), (35.0, -18.0), (40.0, -15.0)]
    return Landmarks(mouth=mouth, left_eye=left_eye, right_eye=right_eye, left_brow=brow, right_brow=brow)


@pytest.fixture
def landmarks_factory():
    return make_landmarks
