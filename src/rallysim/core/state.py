from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rallysim.core.car import DEFAULT_STAT_BUDGET, DISTANCE_THRESHOLD

if TYPE_CHECKING:
    from rallysim.core.car import CarState
    from rallysim.core.types import LocationStatus, RaceStatus, RejectReason


@dataclass(frozen=True, slots=True)
class LocationState:
    idx: int
    x: float
    y: float
    radius: float

    @property
    def name(self) -> str:
        return f"Location {self.idx}"


@dataclass(slots=True)
class RaceRules:
    stat_budget: int = DEFAULT_STAT_BUDGET
    distance_threshold: float = DISTANCE_THRESHOLD
    edge_nudge: float = 0.1
    max_resamples: int = 1


@dataclass(frozen=True, slots=True)
class MoveRecord:
    car_idx: int
    from_idx: int
    to_idx: int
    distance: float
    time_added: float
    boosted: bool


@dataclass(slots=True)
class RaceState:
    locations: list[LocationState]
    cars: list[CarState]
    rules: RaceRules = field(default_factory=RaceRules)
    status: RaceStatus = "setup"
    active_car_idx: int = 0
    visited: list[set[int]] = field(default_factory=list)
    location_status: list[LocationStatus] = field(default_factory=list)
    history: list[MoveRecord] = field(default_factory=list)
    winner_idx: int | None = None

    def __post_init__(self) -> None:
        if not self.visited:
            self.visited = [{car.start_idx} for car in self.cars]

    @property
    def location_count(self) -> int:
        return len(self.locations)

    @property
    def active_car(self) -> CarState:
        return self.cars[self.active_car_idx]

    @property
    def race_active(self) -> bool:
        return self.status == "in_progress"

    def route_complete(self, car_idx: int) -> bool:
        return len(self.visited[car_idx]) == self.location_count

    def all_routes_complete(self) -> bool:
        return all(self.route_complete(car.idx) for car in self.cars)


@dataclass(frozen=True, slots=True)
class VisitResult:
    """Outcome of a single visit command. Rejections leave the race untouched."""

    accepted: bool
    active_car_idx: int
    distance: float | None = None
    car: CarState | None = None
    reason: RejectReason | None = None


@dataclass(frozen=True, slots=True)
class RaceSnapshot:
    """Read-only view of the race for presentation layers."""

    status: RaceStatus
    active_car_idx: int
    car_times: tuple[float, ...]
    car_locations: tuple[int, ...]
    distances_from_active: tuple[float, ...]
    visited: tuple[frozenset[int], ...]
    location_status: tuple[LocationStatus, ...]
    winner_idx: int | None


@dataclass(slots=True)
class LogContext:
    """Per-race logging state."""

    total_turn: int = 0
    turn_log_count: int = 0
    current_car_repr: str = "_"

    def new_round(self):
        self.total_turn += 1

    def start_turn_log(self, car_repr: str):
        self.turn_log_count = 0
        self.current_car_repr = car_repr

    def inc_log_count(self):
        self.turn_log_count += 1
