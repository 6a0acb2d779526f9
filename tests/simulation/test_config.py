from pathlib import Path

import pytest

from rallysim.core.state import RaceRules
from rallysim.simulation.config import PartialRaceConfig, RaceConfig


def test_encoded_config_decodes_to_same_race():
    config = RaceConfig(players=3, seed=99, width=12.0, rules={"max_resamples": 5})

    decoded = RaceConfig.from_encoded(config.encoded)

    assert decoded == config
    assert decoded.compute_hash() == config.compute_hash()


def test_hash_depends_on_rules():
    plain = RaceConfig(players=2, seed=1)
    tweaked = RaceConfig(players=2, seed=1, rules={"edge_nudge": 0.2})
    assert plain.compute_hash() != tweaked.compute_hash()


def test_build_rules_applies_overrides_with_rule_types():
    config = RaceConfig(players=2, seed=1, rules={"max_resamples": 4.0, "stat_budget": 30})

    rules = config.build_rules()

    assert rules == RaceRules(stat_budget=30, max_resamples=4)
    assert isinstance(rules.max_resamples, int)


@pytest.mark.parametrize("value", [2.5, 1e400, float("nan")])
def test_int_rules_reject_non_integral_values(value: float):
    config = RaceConfig(players=2, seed=1, rules={"max_resamples": value})
    with pytest.raises(ValueError, match="needs a whole number"):
        config.build_rules()


def test_unknown_rule_is_rejected():
    with pytest.raises(ValueError, match="Unknown rule 'turbo'"):
        RaceConfig(players=2, seed=1, rules={"turbo": 1}).build_rules()


def test_repr_mentions_players_and_seed():
    config = RaceConfig(players=4, seed=123)
    assert config.repr.startswith("4 players on 10.0x7.0 (Seed: 123)")


def test_partial_config_from_toml(tmp_path: Path):
    path = tmp_path / "race.toml"
    path.write_text(
        'players = 3\nwidth = 20\n\n[rules]\nmax_resamples = 10\n',
        encoding="utf-8",
    )

    conf = PartialRaceConfig.from_toml(path)

    assert conf.players == 3
    assert conf.width == 20.0
    assert conf.seed is None
    assert conf.rules == {"max_resamples": 10}
