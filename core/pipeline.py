# core/pipeline.py
from __future__ import annotations
from typing import Dict, Optional
import asyncio
import logging
import os

import numpy as np

from core.arbiter import should_update
from core.capture import StillFrameSource, encode_data_url
from core.config import Settings
from core.deep import DeepEstimator, RemoteClassify
from core.errors import ModelLoadError
from core.fast import FastEstimator
from core.loader import ModelLoader

logger = logging.getLogger(__name__)


async def analyze_frame(
    frame: np.ndarray,
    settings: Settings,
    loader: ModelLoader,
    source=None,
    remote: Optional[RemoteClassify] = None,
) -> Dict:
    """
    Run fast + deep estimation on one frame and arbitrate, without a UI.
    `source` supplies the extra frames the deep pass samples.
    """
    image_src = encode_data_url(frame, settings.JPEG_QUALITY)
    provisional = await FastEstimator(settings).estimate(frame, image_src)
    logger.debug(f"[pipeline] provisional {provisional.emotion}@{provisional.confidence:.2f}")

    outcome = await DeepEstimator(settings, loader, source, remote=remote).estimate(frame, image_src)
    final = outcome.result
    updated = should_update(provisional, final, settings.UPDATE_MIN_DELTA, settings.UPDATE_MIN_CONFIDENCE)
    shown = final if updated else provisional
    logger.debug(f"[pipeline] final {final.emotion}@{final.confidence:.2f} updated={updated}")

    return {
        "emotion": shown.emotion,
        "confidence": shown.confidence,
        "provisional": provisional.model_dump(exclude={"image_src"}),
        "final": final.model_dump(exclude={"image_src"}),
        "updated": updated,
        "averaged": outcome.averaged,
        "frames": outcome.frames,
        "heuristics": outcome.heuristics.model_dump() if outcome.heuristics else None,
        "used_remote": outcome.used_remote,
        "full_models": loader.full_loaded,
    }


def analyze_image_pipeline(image_path: str, settings: Settings, remote: Optional[RemoteClassify] = None) -> Dict:
    """
    Load both model tiers, then analyze a still image file (replayed for the
    multi-frame deep pass).
    """
    if not os.path.exists(image_path):
        raise FileNotFoundError(f"Image not found: {image_path}")

    async def _run() -> Dict:
        loader = ModelLoader(settings)
        await loader.load()
        if not loader.fast_loaded:
            raise ModelLoadError(loader.fast_error or "fast models unavailable")
        source = StillFrameSource.from_file(image_path)
        return await analyze_frame(source.grab(), settings, loader, source, remote)

    logger.debug(f"[pipeline] analyze_image_pipeline start image_path={image_path}")
    return asyncio.run(_run())
