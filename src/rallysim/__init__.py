"""rallysim - turn-based route racing between randomly placed locations."""

__version__ = "0.1.0"
