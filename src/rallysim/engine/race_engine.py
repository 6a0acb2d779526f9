from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from rallysim.core import LOGGER_NAME
from rallysim.core.car import compute_move_time
from rallysim.core.geometry import distance
from rallysim.core.state import MoveRecord, RaceSnapshot, VisitResult
from rallysim.engine.logging import ContextFilter

if TYPE_CHECKING:
    from rallysim.core.car import CarState
    from rallysim.core.state import LogContext, RaceState
    from rallysim.core.types import LocationStatus, RejectReason


@dataclass
class RaceEngine:
    state: RaceState
    log_context: LogContext

    verbose: bool = True
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        base = logging.getLogger(LOGGER_NAME)
        self._logger = base.getChild(f"engine.{id(self)}")

        if self.verbose:
            self._logger.addFilter(ContextFilter(self))

    # --- Lifecycle ---
    def start(self) -> None:
        """Move the race from setup into progress with car 0 to act first."""
        if self.state.status != "setup":
            msg = f"Race already started (status: {self.state.status})."
            raise RuntimeError(msg)

        for car in self.state.cars:
            car.location_idx = car.start_idx
            self.state.visited[car.idx].add(car.start_idx)

        self.state.active_car_idx = 0
        self.state.status = "in_progress"
        self._refresh_location_status()
        self.log_context.start_turn_log(self.state.active_car.repr)
        self.log_info(
            f"=== RACE START: {len(self.state.cars)} cars, "
            f"{self.state.location_count} locations ===",
        )
        for car in self.state.cars:
            self.log_info(
                f"{car.repr} Location {car.start_idx} -> Location {car.end_idx} "
                f"(engine={car.stats.engine} tires={car.stats.tires} "
                f"boost={car.stats.boost} weight={car.stats.weight})",
            )

    # --- Commands ---
    def visit_location(
        self,
        car_idx: int,
        location_idx: int,
    ) -> VisitResult:
        """
        Move the active car to `location_idx` and pass the turn on.

        Invalid visits are rejected without touching the race state.
        """
        if (reason := self._check_visit(car_idx, location_idx)) is not None:
            self.log_debug(
                f"Rejected visit of Car#{car_idx} to Location {location_idx}: {reason}",
            )
            return VisitResult(
                accepted=False,
                active_car_idx=self.state.active_car_idx,
                reason=reason,
            )

        car = self.state.active_car
        origin = self.state.locations[car.location_idx]
        target = self.state.locations[location_idx]

        travelled = distance(origin, target)
        added = compute_move_time(
            travelled,
            car.stats,
            boosted=car.boosted,
            threshold=self.state.rules.distance_threshold,
        )
        car.add_time(added)
        car.location_idx = location_idx
        self.state.visited[car.idx].add(location_idx)
        self.state.history.append(
            MoveRecord(
                car_idx=car.idx,
                from_idx=origin.idx,
                to_idx=target.idx,
                distance=travelled,
                time_added=added,
                boosted=car.boosted,
            ),
        )

        boost_note = " Boost" if car.boosted else ""
        self.log_info(
            f"Move: {car.repr} {origin.name} -> {target.name} "
            f"d={travelled:.2f} +{added:.2f}h{boost_note} (total {car.time:.2f}h)",
        )

        if self.state.all_routes_complete():
            self._finish()
        else:
            self._advance_turn()

        return VisitResult(
            accepted=True,
            active_car_idx=self.state.active_car_idx,
            distance=travelled,
            car=copy.copy(car),
        )

    def set_boost(self, car_idx: int, active: bool) -> bool:
        """Toggle the boost flag of the active car. Returns whether it was applied."""
        if not self.state.race_active or car_idx != self.state.active_car_idx:
            return False
        car = self.state.active_car
        car.boosted = active
        self.log_info(f"Boost {'on' if active else 'off'} for {car.repr}")
        return True

    # --- Queries ---
    def get_snapshot(self) -> RaceSnapshot:
        active = self.state.active_car
        here = self.state.locations[active.location_idx]
        return RaceSnapshot(
            status=self.state.status,
            active_car_idx=self.state.active_car_idx,
            car_times=tuple(c.time for c in self.state.cars),
            car_locations=tuple(c.location_idx for c in self.state.cars),
            distances_from_active=tuple(
                distance(here, loc) for loc in self.state.locations
            ),
            visited=tuple(frozenset(v) for v in self.state.visited),
            location_status=tuple(self.state.location_status),
            winner_idx=self.state.winner_idx,
        )

    def get_winner(self) -> int | None:
        if self.state.status != "finished":
            return None
        return self.state.winner_idx

    def get_car(self, idx: int) -> CarState:
        return self.state.cars[idx]

    def standings(self) -> list[CarState]:
        return sorted(self.state.cars, key=lambda c: (c.time, c.idx))

    # --- Internals ---
    def _check_visit(self, car_idx: int, location_idx: int) -> RejectReason | None:
        if not self.state.race_active:
            return "RACE_NOT_IN_PROGRESS"
        if car_idx != self.state.active_car_idx:
            return "NOT_ACTIVE_CAR"
        if not 0 <= location_idx < self.state.location_count:
            return "UNKNOWN_LOCATION"
        if location_idx in self.state.visited[car_idx]:
            return "ALREADY_VISITED"
        if self.state.location_status[location_idx] == "end_locked":
            return "END_NOT_REACHABLE"
        return None

    def _advance_turn(self) -> None:
        curr = self.state.active_car_idx
        next_idx = (curr + 1) % len(self.state.cars)
        if next_idx <= curr:
            self.log_context.new_round()
        self.state.active_car_idx = next_idx
        self._refresh_location_status()
        self.log_context.start_turn_log(self.state.active_car.repr)

    def _refresh_location_status(self) -> None:
        car = self.state.active_car
        visited = self.state.visited[car.idx]
        last_leg = len(visited) + 1 >= self.state.location_count

        statuses: list[LocationStatus] = []
        for loc in self.state.locations:
            if loc.idx in visited:
                statuses.append("visited")
            elif loc.idx == car.end_idx:
                statuses.append("end_reachable" if last_leg else "end_locked")
            else:
                statuses.append("pending")
        self.state.location_status = statuses

    def _finish(self) -> None:
        self.state.status = "finished"
        winner = min(self.state.cars, key=lambda c: (c.time, c.idx))
        self.state.winner_idx = winner.idx
        self.state.location_status = ["visited"] * self.state.location_count
        self.log_final_standings()

    def log_final_standings(self) -> None:
        if not self.verbose:
            return
        self.log_info("=== FINAL STANDINGS ===")
        for rank, car in enumerate(self.standings(), start=1):
            self.log_info(f"Result: {rank}. {car.repr} time={car.time:.2f}h")
        self.log_info(f"{self.state.cars[self.state.winner_idx].repr} WINS!!")

    # --- Logging ---
    def log_debug(self, msg: str) -> None:
        if self.verbose:
            self._logger.debug(msg)

    def log_info(self, msg: str) -> None:
        if self.verbose:
            self._logger.info(msg)
