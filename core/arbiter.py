"""
Arbitration between the provisional (fast) result and the final (deep) one.
"""
from __future__ import annotations
import logging
from typing import Optional

from core.models import DetectionResult

logger = logging.getLogger(__name__)


def should_update(
    provisional: DetectionResult,
    final: DetectionResult,
    min_delta: float = 0.15,
    min_confidence: float = 0.5,
) -> bool:
    """
    Replace the displayed result only when the label differs AND the final
    confidence is either clearly higher or above an absolute floor.
    """
    if not final.emotion or final.emotion == provisional.emotion:
        return False
    if final.confidence >= provisional.confidence + min_delta or final.confidence >= min_confidence:
        return True
    logger.debug(
        f"[arbiter] keeping provisional {provisional.emotion}@{provisional.confidence:.2f}; "
        f"final {final.emotion}@{final.confidence:.2f} not strong enough"
    )
    return False


class LatestResult:
    """
    Single-slot channel for the current result.

    Every capture opens a new generation; a put tagged with an older
    generation is discarded so a late background result never overwrites a
    newer capture (or a reset).
    """
    def __init__(self):
        self.generation = 0
        self.value: Optional[DetectionResult] = None

    def next_generation(self) -> int:
        self.generation += 1
        return self.generation

    def clear(self) -> None:
        self.next_generation()
        self.value = None

    def put(self, generation: int, result: DetectionResult) -> bool:
        if generation != self.generation:
            logger.debug(f"[arbiter] dropping stale result from generation {generation} (now {self.generation})")
            return False
        self.value = result
        return True
