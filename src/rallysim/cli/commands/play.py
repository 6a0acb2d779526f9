"""CLI command for playing a race in the console."""

from __future__ import annotations

import logging
import random
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path  # cappa needs this at runtime
from typing import Annotated

import cappa
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt

from rallysim.cli import render
from rallysim.cli.converters import resolve_race_config, validate_player_count
from rallysim.engine.logging import configure_logging
from rallysim.engine.scenario import RaceScenario
from rallysim.simulation.config import RaceConfig

logger = logging.getLogger(__name__)

HELP_LINE = "Location number to drive to (b: toggle boost, n: new race, q: quit)"


def build_scenario(config: RaceConfig) -> RaceScenario:
    try:
        rules = config.build_rules()
        return RaceScenario(
            config.players,
            config.width,
            config.height,
            config.clearance,
            seed=config.seed,
            rules=rules,
        )
    except ValueError as e:
        msg = f"Cannot set up race: {e}"
        raise cappa.Exit(msg, code=1) from e


def show_board(console: Console, scenario: RaceScenario) -> None:
    state = scenario.state
    snapshot = scenario.engine.get_snapshot()
    console.print(render.location_table(state, snapshot))
    console.print(render.car_table(state, snapshot))
    if snapshot.status == "in_progress":
        console.print(render.active_line(state, snapshot))


def run_console_race(
    config: RaceConfig,
    moves: list[str] | None = None,
    console: Console | None = None,
) -> RaceScenario:
    """
    Play one race, reading commands from `moves` if given, else from the prompt.

    Scripted runs stop when the moves are used up, finished or not.
    """
    console = console or Console()
    logger.info(config.repr)
    scenario = build_scenario(config)
    scripted: Iterator[str] | None = iter(moves) if moves is not None else None

    while scenario.state.race_active:
        show_board(console, scenario)
        active = scenario.state.active_car_idx

        if scripted is None:
            answer = Prompt.ask(HELP_LINE, console=console).strip().lower()
        else:
            answer = next(scripted, None)
            if answer is None:
                logger.warning("Out of scripted moves before the race finished.")
                return scenario
            answer = answer.strip().lower()

        if answer == "q":
            logger.info("Race abandoned.")
            return scenario
        if answer == "n":
            scenario.new_race(seed=random.randint(0, 1000000))
            continue
        if answer == "b":
            scenario.engine.set_boost(active, not scenario.state.active_car.boosted)
            continue
        if not answer.isdigit():
            console.print(f"[red]Not a location: {escape(repr(answer))}[/red]")
            continue

        result = scenario.engine.visit_location(active, int(answer))
        if not result.accepted:
            console.print(f"[red]Move rejected ({result.reason})[/red]")

    show_board(console, scenario)
    for line in render.trail_lines(scenario.state):
        console.print(line)
    for car in scenario.engine.standings():
        console.print(car.describe())
    winner = scenario.engine.get_winner()
    if winner is not None:
        console.print(f"[bold green]Car #{winner} WINS!![/bold green]")
    return scenario


@cappa.command(
    name="play",
    help="Play a race in the console. Picks a random seed if not specified.",
)
@dataclass
class PlayCommand:
    players: Annotated[
        int | None,
        cappa.Arg(
            short="-p",
            long="--players",
            parse=validate_player_count,
            help="Number of players.",
        ),
    ] = None
    seed: Annotated[
        int | None,
        cappa.Arg(short="-s", long="--seed", help="RNG seed."),
    ] = None
    config_file: Annotated[
        Path | None,
        cappa.Arg(short="-c", long="--config", help="Path to TOML config file."),
    ] = None
    encoding: Annotated[
        str | None,
        cappa.Arg(short="-e", long="--encoding", help="Base64 encoded configuration."),
    ] = None
    rules: Annotated[
        list[str] | None,
        cappa.Arg(
            short="-R",
            long="--rule",
            num_args=-1,
            help="Rule overrides as key=value.",
        ),
    ] = None
    moves: Annotated[
        list[str] | None,
        cappa.Arg(
            short="-m",
            long="--moves",
            num_args=-1,
            help="Scripted commands instead of prompting.",
        ),
    ] = None
    verbose: Annotated[
        bool,
        cappa.Arg(short="-v", long="--verbose", help="Show debug logging."),
    ] = False

    def __call__(self):
        configure_logging(logging.DEBUG if self.verbose else logging.INFO)
        config = resolve_race_config(
            players=self.players,
            seed=self.seed,
            config_file=self.config_file,
            encoding=self.encoding,
            rules=self.rules,
        )
        run_console_race(config, moves=self.moves)
