"""CLI command for inspecting a generated board without playing it."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path  # cappa needs this at runtime
from typing import Annotated

import cappa
from rich.console import Console

from rallysim.cli import render
from rallysim.cli.commands.play import build_scenario
from rallysim.cli.converters import resolve_race_config, validate_player_count
from rallysim.engine.logging import configure_logging


@cappa.command(name="layout", help="Print the locations and routes generated for a config.")
@dataclass
class LayoutCommand:
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

    def __call__(self):
        configure_logging(logging.WARNING)
        config = resolve_race_config(
            players=self.players,
            seed=self.seed,
            config_file=self.config_file,
            encoding=self.encoding,
            rules=self.rules,
        )
        scenario = build_scenario(config)
        snapshot = scenario.engine.get_snapshot()

        console = Console()
        console.print(config.repr)
        console.print(render.location_table(scenario.state, snapshot))
        console.print(render.route_table(scenario.state))
