from typing import NamedTuple


class CarPalette(NamedTuple):
    name: str
    style: str


# Cycled by car index.
CAR_PALETTES: tuple[CarPalette, ...] = (
    CarPalette("red", "bold red"),
    CarPalette("blue", "bold blue"),
    CarPalette("black", "bold bright_black"),
    CarPalette("yellow", "bold yellow"),
    CarPalette("orange", "bold dark_orange"),
)


def car_palette(car_idx: int) -> CarPalette:
    return CAR_PALETTES[car_idx % len(CAR_PALETTES)]
