import random
from unittest.mock import MagicMock

import pytest

from rallysim.core.car import (
    CarState,
    CarStats,
    compute_move_time,
    prime_stats,
)


@pytest.mark.parametrize("seed", range(25))
def test_primed_stats_add_up_to_budget(seed: int):
    stats = prime_stats(random.Random(seed))

    assert stats.total == 26
    for value in (stats.engine, stats.tires, stats.weight):
        assert 1 <= value <= 10
    assert stats.boost >= 0


def test_primed_stats_redraw_values_that_do_not_fit():
    """
    Engine 10 and tires 10 leave 6 points: a weight draw of 10 is redrawn,
    and the remaining 0 points go to boost.
    """
    rng = MagicMock()
    rng.randint.side_effect = [10, 10, 10, 6]

    stats = prime_stats(rng)

    assert stats == CarStats(engine=10, tires=10, boost=0, weight=6)
    assert rng.randint.call_count == 4


def test_small_budget_still_leaves_room_for_every_stat():
    stats = prime_stats(random.Random(3), budget=3)
    assert stats == CarStats(engine=1, tires=1, boost=0, weight=1)


def test_budget_below_three_is_rejected():
    with pytest.raises(ValueError, match="at least 3"):
        prime_stats(random.Random(0), budget=2)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"engine": 0, "tires": 5, "boost": 5, "weight": 5},
        {"engine": 5, "tires": -1, "boost": 5, "weight": 5},
        {"engine": 5, "tires": 5, "boost": 5, "weight": 0},
        {"engine": 5, "tires": 5, "boost": -1, "weight": 5},
    ],
)
def test_stats_that_could_break_the_time_model_are_rejected(kwargs: dict[str, int]):
    with pytest.raises(ValueError):
        CarStats(**kwargs)


def test_long_leg_uses_engine():
    stats = CarStats(engine=10, tires=1, boost=5, weight=10)
    expected = 8.0 / (0.5 + 0.1 * 10) / (0.9 + 0.02 * 10)
    assert compute_move_time(8.0, stats) == pytest.approx(expected)


def test_short_leg_uses_tires():
    stats = CarStats(engine=10, tires=1, boost=5, weight=10)
    expected = 3.0 / (0.5 + 0.1 * 1) / (0.9 + 0.02 * 10)
    assert compute_move_time(3.0, stats) == pytest.approx(expected)


def test_distance_of_exactly_five_uses_engine():
    stats = CarStats(engine=10, tires=1, boost=5, weight=10)
    engine_branch = 5.0 / (0.5 + 0.1 * 10) / (0.9 + 0.02 * 10)
    tires_branch = 5.0 / (0.5 + 0.1 * 1) / (0.9 + 0.02 * 10)

    result = compute_move_time(5.0, stats)

    assert result == pytest.approx(engine_branch)
    assert result != pytest.approx(tires_branch)


def test_threshold_is_configurable():
    stats = CarStats(engine=10, tires=1, boost=5, weight=10)
    assert compute_move_time(3.0, stats, threshold=2.0) == pytest.approx(
        compute_move_time(8.0, stats) * 3.0 / 8.0,
    )


@pytest.mark.parametrize("boost", [1, 4, 10])
def test_boost_strictly_reduces_time(boost: int):
    stats = CarStats(engine=5, tires=5, boost=boost, weight=5)
    for d in (0.5, 4.9, 5.0, 9.3):
        plain = compute_move_time(d, stats)
        boosted = compute_move_time(d, stats, boosted=True)
        assert boosted < plain
        assert boosted == pytest.approx(plain / (1 + 0.1 * boost))


def test_zero_boost_leaves_time_unchanged():
    stats = CarStats(engine=5, tires=5, boost=0, weight=5)
    assert compute_move_time(7.0, stats, boosted=True) == compute_move_time(7.0, stats)


def test_time_is_zero_for_zero_distance_and_positive_otherwise():
    stats = CarStats(engine=1, tires=1, boost=0, weight=1)
    assert compute_move_time(0.0, stats) == 0.0
    assert compute_move_time(1e-6, stats) > 0


def test_negative_distance_is_rejected():
    with pytest.raises(ValueError, match="negative"):
        compute_move_time(-1.0, CarStats(engine=5, tires=5, boost=5, weight=5))


def test_car_starts_at_its_start_location_with_no_time():
    car = CarState(idx=2, stats=CarStats(6, 6, 8, 6), start_idx=3, end_idx=1)
    assert car.location_idx == 3
    assert car.time == 0.0
    assert car.repr == "Car#2"
    assert car.describe() == "Car #2  Time traveled: 0.00"


def test_car_time_never_decreases():
    car = CarState(idx=0, stats=CarStats(6, 6, 8, 6), start_idx=0, end_idx=1)
    car.add_time(1.5)
    with pytest.raises(ValueError):
        car.add_time(-0.1)
    assert car.time == 1.5
