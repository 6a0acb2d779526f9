import pytest

from rallysim.engine.scenario import CarConfig
from tests.test_utils import RaceHarness


@pytest.fixture
def scenario():
    """Factory fixture to create races with fixed locations and routes."""

    def _builder(cars_config: list[CarConfig], locations=None, rules=None):
        return RaceHarness(cars_config, locations=locations, rules=rules)

    return _builder
