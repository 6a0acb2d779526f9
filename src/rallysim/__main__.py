from __future__ import annotations

from dataclasses import dataclass

import cappa

from rallysim.cli.commands.layout import LayoutCommand  # noqa: TC001
from rallysim.cli.commands.play import (
    PlayCommand,  # noqa: TC001 # cappa needs to know about this at runtime
)


@dataclass
class Main:
    subcommand: cappa.Subcommands[PlayCommand | LayoutCommand]


def main():
    cappa.invoke(Main)


if __name__ == "__main__":
    main()
