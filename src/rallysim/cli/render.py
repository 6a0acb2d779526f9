"""Console rendering of race snapshots with rich. Read-only over engine state."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.table import Table
from rich.text import Text

from rallysim.core.palettes import car_palette

if TYPE_CHECKING:
    from rallysim.core.state import RaceSnapshot, RaceState
    from rallysim.core.types import LocationStatus

STATUS_STYLE: dict[LocationStatus, str] = {
    "visited": "dim",
    "pending": "green",
    "end_locked": "red",
    "end_reachable": "bold yellow",
}


def car_label(car_idx: int) -> Text:
    palette = car_palette(car_idx)
    return Text(f"Car #{car_idx} ({palette.name})", style=palette.style)


def location_table(state: RaceState, snapshot: RaceSnapshot) -> Table:
    table = Table(title="Locations")
    table.add_column("Location")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Distance (km)", justify="right")
    table.add_column("Status")

    for loc in state.locations:
        status = snapshot.location_status[loc.idx]
        table.add_row(
            loc.name,
            f"{loc.x:.1f}",
            f"{loc.y:.1f}",
            f"{snapshot.distances_from_active[loc.idx]:.1f}",
            Text(status, style=STATUS_STYLE[status]),
        )
    return table


def car_table(state: RaceState, snapshot: RaceSnapshot) -> Table:
    table = Table(title="Cars")
    table.add_column("Car")
    table.add_column("Time (hr)", justify="right")
    table.add_column("At")
    table.add_column("End")
    table.add_column("Visited", justify="right")
    table.add_column("Stats (E/T/B/W)")

    for car in state.cars:
        stats = car.stats
        boost = " +boost" if car.boosted else ""
        table.add_row(
            car_label(car.idx),
            f"{snapshot.car_times[car.idx]:.1f}",
            state.locations[snapshot.car_locations[car.idx]].name,
            state.locations[car.end_idx].name,
            f"{len(snapshot.visited[car.idx])}/{state.location_count}",
            f"{stats.engine}/{stats.tires}/{stats.boost}/{stats.weight}{boost}",
        )
    return table


def route_table(state: RaceState) -> Table:
    """Route assignment at setup: where every car starts and has to finish."""
    table = Table(title="Routes")
    table.add_column("Car")
    table.add_column("Start")
    table.add_column("End")
    for car in state.cars:
        table.add_row(
            car_label(car.idx),
            state.locations[car.start_idx].name,
            state.locations[car.end_idx].name,
        )
    return table


def trail_lines(state: RaceState) -> list[Text]:
    """One line per car listing the locations it drove through, in order."""
    lines: list[Text] = []
    for car in state.cars:
        stops = [str(car.start_idx)]
        stops.extend(str(m.to_idx) for m in state.history if m.car_idx == car.idx)
        line = car_label(car.idx)
        line.append(": " + " -> ".join(stops))
        lines.append(line)
    return lines


def active_line(state: RaceState, snapshot: RaceSnapshot) -> Text:
    car = state.cars[snapshot.active_car_idx]
    line = Text("Active car  ")
    line.append_text(car_label(car.idx))
    line.append(f"  finish at {state.locations[car.end_idx].name}")
    return line
