from __future__ import annotations

import random
from pathlib import Path

import cappa
import msgspec

from rallysim.simulation.config import (
    DEFAULT_CLEARANCE,
    DEFAULT_HEIGHT,
    DEFAULT_PLAYERS,
    DEFAULT_WIDTH,
    PartialRaceConfig,
    RaceConfig,
)


def validate_player_count(value: str) -> int:
    """Parse a player count, rejecting anything below one."""
    try:
        players = int(value)
    except ValueError:
        msg = f"Player count must be an integer, got '{value}'."
        raise cappa.Exit(msg, code=1) from None
    if players < 1:
        msg = f"Player count must be at least 1, got {players}."
        raise cappa.Exit(msg, code=1)
    return players


def parse_rule_overrides(value: list[str]) -> dict[str, int | float]:
    """
    Parse a list of key=value strings into a dictionary.
    Values must be numeric.
    """
    rules: dict[str, int | float] = {}
    for item in value:
        if "=" not in item:
            msg = f"Invalid rule format '{item}'. Expected 'key=value'."
            raise cappa.Exit(msg, code=1)

        k, v = item.split("=", 1)
        k = k.strip()
        v = v.strip()

        if v.isdigit():
            rules[k] = int(v)
        else:
            try:
                rules[k] = float(v)
            except ValueError:
                msg = f"Rule '{k}' needs a numeric value, got '{v}'."
                raise cappa.Exit(msg, code=1) from None

    return rules


def resolve_race_config(
    *,
    players: int | None,
    seed: int | None,
    config_file: Path | None,
    encoding: str | None,
    rules: list[str] | None,
) -> RaceConfig:
    """
    Merge config sources into one RaceConfig.

    Precedence: defaults < TOML file < encoded string < CLI arguments.
    """
    final_players = DEFAULT_PLAYERS
    final_seed = random.randint(0, 1000000)
    final_width = DEFAULT_WIDTH
    final_height = DEFAULT_HEIGHT
    final_clearance = DEFAULT_CLEARANCE
    final_rules: dict[str, int | float] = {}

    # 1. Load File (Middle Priority)
    if config_file:
        if not config_file.exists():
            msg = f"Config file not found: {config_file}"
            raise cappa.Exit(msg, code=1)
        try:
            file_conf = PartialRaceConfig.from_toml(config_file)
        except msgspec.DecodeError as e:
            msg = f"Invalid TOML config: {e}"
            raise cappa.Exit(msg, code=1) from e

        if file_conf.players is not None:
            final_players = file_conf.players
        if file_conf.seed is not None:
            final_seed = file_conf.seed
        if file_conf.width is not None:
            final_width = file_conf.width
        if file_conf.height is not None:
            final_height = file_conf.height
        if file_conf.clearance is not None:
            final_clearance = file_conf.clearance
        if file_conf.rules:
            final_rules.update(file_conf.rules)

    # 2. Load Encoding (High Priority - Overrides File)
    if encoding:
        try:
            decoded = RaceConfig.from_encoded(encoding)
        except (ValueError, msgspec.DecodeError) as e:
            msg = f"Invalid encoding: {e}"
            raise cappa.Exit(msg, code=1) from e
        final_players = decoded.players
        final_seed = decoded.seed
        final_width = decoded.width
        final_height = decoded.height
        final_clearance = decoded.clearance
        final_rules.update(decoded.rules)

    # 3. CLI Args (Highest Priority - Overrides Everything)
    if players is not None:
        final_players = players
    if seed is not None:
        final_seed = seed
    if rules:
        final_rules.update(parse_rule_overrides(rules))

    return RaceConfig(
        players=final_players,
        seed=final_seed,
        width=final_width,
        height=final_height,
        clearance=final_clearance,
        rules=final_rules,
    )
