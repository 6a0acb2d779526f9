from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rallysim.core import LOGGER_NAME
from rallysim.core.geometry import gap_to_nearest
from rallysim.core.state import LocationState
from rallysim.core.types import RaceSetupError

if TYPE_CHECKING:
    import random

logger = logging.getLogger(LOGGER_NAME)


def location_count(player_count: int) -> int:
    """Odd player counts get two extra locations, even ones get three."""
    return player_count + 2 if player_count & 1 else player_count + 3


def _nudge_inward(value: float, clearance: float, upper: float, nudge: float) -> float:
    if value < clearance:
        value += clearance + nudge
    if value > upper - clearance:
        value -= clearance + nudge
    # Large nudges on small boards could push past the opposite edge.
    return min(max(value, clearance), upper - clearance)


def _sample_center(
    rng: random.Random,
    span_x: float,
    span_y: float,
    width: float,
    height: float,
    clearance: float,
    nudge: float,
) -> tuple[float, float]:
    x = _nudge_inward(rng.uniform(0, span_x), clearance, width, nudge)
    y = _nudge_inward(rng.uniform(0, span_y), clearance, height, nudge)
    return x, y


def generate_layout(
    count: int,
    width: float,
    height: float,
    clearance: float,
    rng: random.Random,
    *,
    nudge: float = 0.1,
    max_resamples: int = 1,
) -> list[LocationState]:
    """
    Place `count` circular locations of radius `clearance` on a width x height board.

    Each location is sampled uniformly; a candidate overlapping an already
    placed location is resampled up to `max_resamples` times. If every attempt
    overlaps, the candidate with the most room is kept, so rare overlaps are
    tolerated rather than failing the setup. Candidates closer than `clearance`
    to an edge are nudged inward before the overlap test.
    """
    if count < 1:
        msg = f"Need at least one location, got {count}."
        raise RaceSetupError(msg)
    if clearance <= 0:
        msg = f"Clearance must be positive, got {clearance}."
        raise RaceSetupError(msg)
    if width <= 2 * clearance or height <= 2 * clearance:
        msg = f"Board {width}x{height} is too small for locations of radius {clearance}."
        raise RaceSetupError(msg)
    if max_resamples < 0:
        msg = f"Resample budget must not be negative, got {max_resamples}."
        raise RaceSetupError(msg)

    span_x = width - 2 * clearance
    span_y = height - 2 * clearance
    min_gap = 2 * clearance

    centers: list[tuple[float, float]] = []
    for k in range(count):
        best = _sample_center(rng, span_x, span_y, width, height, clearance, nudge)
        best_gap = gap_to_nearest(*best, centers)

        resamples = 0
        while best_gap < min_gap and resamples < max_resamples:
            resamples += 1
            x, y = _sample_center(rng, span_x, span_y, width, height, clearance, nudge)
            gap = gap_to_nearest(x, y, centers)
            if gap > best_gap:
                best, best_gap = (x, y), gap

        if best_gap < min_gap:
            logger.warning(
                f"LAYOUT: Location {k} still overlaps after {max_resamples} resample(s); "
                f"accepting best candidate (gap {best_gap:.2f} < {min_gap:.2f}).",
            )
        centers.append(best)

    logger.debug(f"LAYOUT: Placed {count} locations on {width}x{height} board.")
    return [
        LocationState(idx=k, x=x, y=y, radius=clearance)
        for k, (x, y) in enumerate(centers)
    ]
