"""Race setup: layout, route assignment and car priming wired into a started engine."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from rallysim.core import LOGGER_NAME
from rallysim.core.car import CarState, CarStats, prime_stats
from rallysim.core.state import LocationState, LogContext, RaceRules, RaceState
from rallysim.core.types import RaceSetupError
from rallysim.engine.assignment import assign_routes
from rallysim.engine.layout import generate_layout, location_count
from rallysim.engine.race_engine import RaceEngine

logger = logging.getLogger(LOGGER_NAME)


def initialize_race(
    player_count: int,
    board_width: float,
    board_height: float,
    clearance: float,
    *,
    seed: int | None = None,
    rng: random.Random | None = None,
    rules: RaceRules | None = None,
    verbose: bool = True,
) -> RaceEngine:
    """
    Build a complete race and start it.

    Either pass an explicit `rng` or a `seed` for reproducible races. Raises
    RaceSetupError if the player count or board cannot support a race.
    """
    if player_count < 1:
        msg = f"Need at least one player, got {player_count}."
        raise RaceSetupError(msg)

    rules = rules or RaceRules()
    rng = rng or random.Random(seed)

    locations = generate_layout(
        location_count(player_count),
        board_width,
        board_height,
        clearance,
        rng,
        nudge=rules.edge_nudge,
        max_resamples=rules.max_resamples,
    )
    routes = assign_routes(len(locations), player_count, rng)
    cars = [
        CarState(
            idx=i,
            stats=prime_stats(rng, rules.stat_budget),
            start_idx=start,
            end_idx=end,
        )
        for i, (start, end) in enumerate(routes)
    ]

    engine = RaceEngine(
        RaceState(locations=locations, cars=cars, rules=rules),
        log_context=LogContext(),
        verbose=verbose,
    )
    engine.start()
    return engine


@dataclass
class CarConfig:
    """Fixed route and stats for one car, used to script deterministic races."""

    idx: int
    start: int
    end: int
    stats: CarStats = field(
        default_factory=lambda: CarStats(engine=6, tires=6, boost=8, weight=6),
    )
    boosted: bool = False


def build_race(
    locations: list[tuple[float, float]],
    cars_config: list[CarConfig],
    *,
    radius: float = 0.4,
    rules: RaceRules | None = None,
) -> RaceEngine:
    """Bypass random setup with explicit location centers and car routes."""
    state = RaceState(
        locations=[
            LocationState(idx=k, x=x, y=y, radius=radius)
            for k, (x, y) in enumerate(locations)
        ],
        cars=[
            CarState(
                idx=cfg.idx,
                stats=cfg.stats,
                start_idx=cfg.start,
                end_idx=cfg.end,
                boosted=cfg.boosted,
            )
            for cfg in cars_config
        ],
        rules=rules or RaceRules(),
    )
    engine = RaceEngine(state, log_context=LogContext())
    engine.start()
    return engine


class RaceScenario:
    """
    Wraps a RaceEngine so a race can be played, inspected and restarted.

    Every `new_race` call rebuilds layout, routes and cars from scratch.
    """

    def __init__(
        self,
        player_count: int = 2,
        board_width: float = 10.0,
        board_height: float = 7.0,
        clearance: float = 0.4,
        *,
        seed: int | None = None,
        rules: RaceRules | None = None,
        verbose: bool = True,
    ):
        self.player_count: int = player_count
        self.board_width: float = board_width
        self.board_height: float = board_height
        self.clearance: float = clearance
        self.seed: int | None = seed
        self.rules: RaceRules = rules or RaceRules()
        self.verbose: bool = verbose
        self.engine: RaceEngine = self._build()

    def _build(self) -> RaceEngine:
        return initialize_race(
            self.player_count,
            self.board_width,
            self.board_height,
            self.clearance,
            seed=self.seed,
            rules=self.rules,
            verbose=self.verbose,
        )

    @property
    def state(self) -> RaceState:
        return self.engine.state

    def new_race(self, seed: int | None = None) -> RaceEngine:
        """Discard the current race and build a fresh one."""
        if seed is not None:
            self.seed = seed
        logger.info("=== NEW RACE ===")
        self.engine = self._build()
        return self.engine

    def visit(self, location_idx: int):
        """Visit `location_idx` with whichever car is active."""
        return self.engine.visit_location(self.state.active_car_idx, location_idx)

    def get_car(self, idx: int) -> CarState:
        return self.engine.get_car(idx)
