from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import random

DEFAULT_STAT_BUDGET = 26
DISTANCE_THRESHOLD = 5.0
STAT_MAX = 10


@dataclass(frozen=True, slots=True)
class CarStats:
    """Fixed attributes of a car. Primed once at setup, never changed afterwards."""

    engine: int
    tires: int
    boost: int
    weight: int

    def __post_init__(self) -> None:
        for name in ("engine", "tires", "weight"):
            if getattr(self, name) < 1:
                msg = f"Car stat '{name}' must be at least 1, got {getattr(self, name)}."
                raise ValueError(msg)
        if self.boost < 0:
            msg = f"Car stat 'boost' must not be negative, got {self.boost}."
            raise ValueError(msg)

    @property
    def total(self) -> int:
        return self.engine + self.tires + self.boost + self.weight


def _draw_stat(rng: random.Random, ceiling: int) -> int:
    value = rng.randint(1, STAT_MAX)
    while value > ceiling:
        value = rng.randint(1, STAT_MAX)
    return value


def prime_stats(rng: random.Random, budget: int = DEFAULT_STAT_BUDGET) -> CarStats:
    """
    Randomly distribute `budget` points over the four car stats.

    Engine, tires and weight are drawn from 1-10 (each redrawn while it
    would not fit the remaining points); whatever is left goes to boost.
    """
    if budget < 3:
        msg = f"Stat budget must be at least 3, got {budget}."
        raise ValueError(msg)

    remaining = budget
    engine = _draw_stat(rng, remaining - 2)
    remaining -= engine
    tires = _draw_stat(rng, remaining - 1)
    remaining -= tires
    weight = _draw_stat(rng, remaining)
    remaining -= weight

    return CarStats(engine=engine, tires=tires, boost=remaining, weight=weight)


def compute_move_time(
    distance: float,
    stats: CarStats,
    *,
    boosted: bool = False,
    threshold: float = DISTANCE_THRESHOLD,
) -> float:
    """
    Time needed to drive `distance` with the given stats.

    Long legs (``distance >= threshold``) are governed by the engine, short ones
    by the tires. Weight damps the result on a smaller scale, and an active
    boost can only ever reduce it.
    """
    if distance < 0:
        msg = f"Distance must not be negative, got {distance}."
        raise ValueError(msg)

    if distance >= threshold:
        added = distance / (0.5 + 0.1 * stats.engine)
    else:
        added = distance / (0.5 + 0.1 * stats.tires)

    added = added / (0.9 + 0.02 * stats.weight)

    if boosted:
        added = added / (1 + 0.1 * stats.boost)

    return added


@dataclass(slots=True)
class CarState:
    idx: int
    stats: CarStats
    start_idx: int
    end_idx: int
    location_idx: int = -1
    boosted: bool = False
    time: float = 0.0

    def __post_init__(self) -> None:
        if self.location_idx < 0:
            self.location_idx = self.start_idx

    @property
    def repr(self) -> str:
        return f"Car#{self.idx}"

    def add_time(self, amount: float) -> None:
        if amount < 0:
            msg = f"{self.repr} cannot lose time (got {amount})."
            raise ValueError(msg)
        self.time += amount

    def describe(self) -> str:
        return f"Car #{self.idx}  Time traveled: {self.time:.2f}"
