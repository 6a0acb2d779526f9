from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rallysim.core import LOGGER_NAME
from rallysim.core.types import RaceSetupError

if TYPE_CHECKING:
    import random

logger = logging.getLogger(LOGGER_NAME)


def assign_routes(
    location_count: int,
    player_count: int,
    rng: random.Random,
) -> list[tuple[int, int]]:
    """
    Draw a (start, end) location pair for every car.

    Starts are unique across cars, ends are unique across cars, and no car
    ends where it starts. One car's end may be another car's start.
    """
    if player_count < 1:
        msg = f"Need at least one player, got {player_count}."
        raise RaceSetupError(msg)
    if player_count + 1 > location_count:
        msg = (
            f"{player_count} players need at least {player_count + 1} locations "
            f"for unique starts and ends, only {location_count} available."
        )
        raise RaceSetupError(msg)

    starts: list[int] = []
    ends: list[int] = []
    for car_idx in range(player_count):
        start = rng.randrange(location_count)
        while start in starts:
            start = rng.randrange(location_count)

        end = rng.randrange(location_count)
        while end in ends or end == start:
            end = rng.randrange(location_count)

        starts.append(start)
        ends.append(end)
        logger.debug(f"ROUTE: Car#{car_idx} Location {start} -> Location {end}")

    return list(zip(starts, ends, strict=True))
