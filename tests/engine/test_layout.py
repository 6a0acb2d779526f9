import itertools
import logging
import random
from unittest.mock import MagicMock

import pytest

from rallysim.core.geometry import circles_overlap
from rallysim.core.types import RaceSetupError
from rallysim.engine.layout import generate_layout, location_count


@pytest.mark.parametrize(
    ("players", "expected"),
    [(1, 3), (2, 5), (3, 5), (4, 7), (5, 7), (6, 9)],
)
def test_location_count_depends_on_player_parity(players: int, expected: int):
    assert location_count(players) == expected


@pytest.mark.parametrize(("players", "seed"), list(itertools.product(range(1, 7), range(5))))
def test_layout_stays_in_bounds(players: int, seed: int):
    width, height, clearance = 10.0, 7.0, 0.4
    locations = generate_layout(
        location_count(players),
        width,
        height,
        clearance,
        random.Random(seed),
    )

    assert len(locations) == location_count(players)
    assert [loc.idx for loc in locations] == list(range(len(locations)))
    for loc in locations:
        assert clearance <= loc.x <= width - clearance
        assert clearance <= loc.y <= height - clearance
        assert loc.radius == clearance


@pytest.mark.parametrize("seed", range(10))
def test_layout_has_no_overlaps_with_generous_resample_budget(seed: int):
    locations = generate_layout(9, 10.0, 7.0, 0.4, random.Random(seed), max_resamples=500)

    for a, b in itertools.combinations(locations, 2):
        assert not circles_overlap(a.x, a.y, b.x, b.y, radius=0.4)


def test_layout_is_reproducible_for_a_seed():
    first = generate_layout(7, 10.0, 7.0, 0.4, random.Random(42))
    second = generate_layout(7, 10.0, 7.0, 0.4, random.Random(42))
    assert first == second


def test_overlapping_candidate_is_resampled_once():
    """The second location first lands on the first one, the resample is clear."""
    rng = MagicMock()
    rng.uniform.side_effect = [3.0, 3.0, 3.0, 3.0, 6.0, 4.0]

    locations = generate_layout(2, 10.0, 7.0, 0.4, rng)

    assert (locations[0].x, locations[0].y) == (3.0, 3.0)
    assert (locations[1].x, locations[1].y) == (6.0, 4.0)
    assert rng.uniform.call_count == 6


def test_exhausted_placement_keeps_best_candidate_and_warns(caplog: pytest.LogCaptureFixture):
    rng = MagicMock()
    # First location at (3, 3); both attempts for the second overlap it,
    # the resample is the one with more room.
    rng.uniform.side_effect = [3.0, 3.0, 3.0, 3.0, 3.5, 3.0]

    with caplog.at_level(logging.WARNING):
        locations = generate_layout(2, 10.0, 7.0, 0.4, rng, max_resamples=1)

    assert len(locations) == 2
    assert (locations[1].x, locations[1].y) == (3.5, 3.0)
    assert circles_overlap(
        locations[0].x, locations[0].y, locations[1].x, locations[1].y, radius=0.4
    )
    assert "accepting best candidate" in caplog.text


def test_edge_candidates_are_nudged_inward():
    rng = MagicMock()
    rng.uniform.side_effect = [0.0, 0.1]

    (loc,) = generate_layout(1, 10.0, 7.0, 0.4, rng, nudge=0.1)

    assert loc.x == pytest.approx(0.5)
    assert loc.y == pytest.approx(0.6)


def test_samples_are_drawn_inside_the_margin():
    rng = MagicMock()
    rng.uniform.side_effect = [9.2, 6.2]

    generate_layout(1, 10.0, 7.0, 0.4, rng)

    rng.uniform.assert_any_call(0, pytest.approx(9.2))
    rng.uniform.assert_any_call(0, pytest.approx(6.2))


@pytest.mark.parametrize(
    ("count", "width", "height", "clearance"),
    [(0, 10.0, 7.0, 0.4), (3, 0.8, 7.0, 0.4), (3, 10.0, 0.5, 0.4), (3, 10.0, 7.0, 0.0)],
)
def test_impossible_boards_fail_setup(count: int, width: float, height: float, clearance: float):
    with pytest.raises(RaceSetupError):
        generate_layout(count, width, height, clearance, random.Random(0))


def test_negative_resample_budget_fails_setup():
    with pytest.raises(RaceSetupError, match="Resample budget"):
        generate_layout(3, 10.0, 7.0, 0.4, random.Random(0), max_resamples=-1)


def test_zero_resample_budget_keeps_first_candidate(caplog: pytest.LogCaptureFixture):
    rng = MagicMock()
    rng.uniform.side_effect = [3.0, 3.0, 6.0, 4.0]

    with caplog.at_level(logging.WARNING):
        locations = generate_layout(2, 10.0, 7.0, 0.4, rng, max_resamples=0)

    assert [(loc.x, loc.y) for loc in locations] == [(3.0, 3.0), (6.0, 4.0)]
    assert "accepting best candidate" not in caplog.text
