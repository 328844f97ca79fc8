"""Batch helpers: many attacker/target pairs, or every target under an area template."""
from __future__ import annotations

import logging
import math
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from core.cover_levels import CoverLevel
from core.geometry import PointLike, as_point
from entities.spatial_entity import SpatialEntity
from modules.cover.system import CoverDetector

logger = logging.getLogger(__name__)

Pair = Tuple[SpatialEntity, SpatialEntity]


def detect_many(
    detector: CoverDetector,
    pairs: Iterable[Pair],
    *,
    max_workers: Optional[int] = None,
    timeout: Optional[float] = None,
) -> List[CoverLevel]:
    """Evaluate ``pairs`` concurrently; results follow the input order.

    ``timeout`` is each pair's budget in seconds, counted from when a worker
    starts on it. A pair that is not done in time is reported as ``NONE``.
    """

    pairs = list(pairs)
    if not pairs:
        return []

    started: Dict[int, float] = {}
    elapsed: Dict[int, float] = {}

    def run(index: int) -> CoverLevel:
        started[index] = time.monotonic()
        attacker, target = pairs[index]
        try:
            return detector.detect_between_tokens(attacker, target)
        finally:
            elapsed[index] = time.monotonic() - started[index]

    pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cover")
    try:
        futures = [pool.submit(run, index) for index in range(len(pairs))]
        results: List[CoverLevel] = []
        for index, future in enumerate(futures):
            if _finished_in_time(future, started, elapsed, index, timeout):
                results.append(future.result())
                continue
            future.cancel()
            attacker, target = pairs[index]
            logger.warning(
                "Cover detection %s -> %s exceeded %.3fs; using none",
                attacker.entity_id,
                target.entity_id,
                timeout,
            )
            results.append(CoverLevel.NONE)
        return results
    finally:
        pool.shutdown(wait=False, cancel_futures=True)


def _finished_in_time(
    future: Future,
    started: Dict[int, float],
    elapsed: Dict[int, float],
    index: int,
    timeout: Optional[float],
) -> bool:
    if timeout is None:
        wait([future])
        return True
    while True:
        begun = started.get(index)
        remaining = timeout if begun is None else begun + timeout - time.monotonic()
        done, _ = wait([future], timeout=max(0.0, remaining))
        if done:
            return elapsed.get(index, 0.0) <= timeout
        # Still queued behind other pairs: its budget has not started yet.
        if begun is not None:
            return False


def targets_in_radius(
    origin: PointLike, radius: float, targets: Iterable[SpatialEntity]
) -> List[SpatialEntity]:
    point = as_point(origin)
    return [t for t in targets if math.hypot(t.x - point.x, t.y - point.y) <= radius]


def detect_for_template(
    detector: CoverDetector,
    origin: PointLike,
    radius: float,
    targets: Sequence[SpatialEntity],
    elevation: float = 0.0,
) -> Dict[str, CoverLevel]:
    """Cover of each target inside a burst of ``radius`` centred on ``origin``.

    Used for saving throws against area effects, where the effect's origin
    rather than a creature is the source.
    """

    if radius < 0:
        raise ValueError("radius must be non-negative")
    return {
        target.entity_id: detector.detect_from_point(origin, target, elevation=elevation)
        for target in targets_in_radius(origin, radius, targets)
    }


__all__ = ["detect_for_template", "detect_many", "targets_in_radius"]
