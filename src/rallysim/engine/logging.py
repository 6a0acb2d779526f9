from __future__ import annotations

import logging
import re
import sys
from typing import TYPE_CHECKING

if sys.version_info >= (3, 12):
    from typing import override
else:
    from typing_extensions import override

from rich.highlighter import Highlighter
from rich.logging import RichHandler
from rich.markup import escape

from rallysim.core.palettes import car_palette

if TYPE_CHECKING:
    from rich.text import Text

    from rallysim.core.state import LogContext
    from rallysim.engine.race_engine import RaceEngine


CAR_PATTERN = re.compile(r"\bCar#(?P<idx>\d+)\b")
LOCATION_PATTERN = re.compile(r"\bLocation \d+\b")


COLOR = {
    "move": "bold green",
    "boost": "bold magenta",
    "warning": "bold red",
    "location": "bold blue",
    "prefix": "dim",
    "winner": "bold yellow",
}


class ContextFilter(logging.Filter):
    """Inject per-engine runtime context into every log record."""

    def __init__(self, engine: RaceEngine, name: str = "") -> None:
        super().__init__(name)
        self.engine: RaceEngine = engine

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        logctx: LogContext = self.engine.log_context
        record.total_turn = logctx.total_turn
        record.turn_log_count = logctx.turn_log_count
        record.car_repr = logctx.current_car_repr
        logctx.inc_log_count()
        return True


class RichMarkupFormatter(logging.Formatter):
    @override
    def format(self, record: logging.LogRecord) -> str:
        total_turn = getattr(record, "total_turn", 0)
        turn_log_count = getattr(record, "turn_log_count", 0)
        car_repr = getattr(record, "car_repr", "_")

        prefix = f"{total_turn}.{car_repr}.{turn_log_count}"
        message = escape(record.getMessage())

        if record.levelno >= logging.WARNING:
            message = f"[{COLOR['warning']}]{message}[/{COLOR['warning']}]"

        # Colours on top of this come from RaceLogHighlighter.
        return f"[{COLOR['prefix']}]{prefix}[/{COLOR['prefix']}]  {message}"


class RaceLogHighlighter(Highlighter):
    @override
    def highlight(self, text: Text) -> None:
        text.highlight_regex(r"\bMove\b", COLOR["move"])
        text.highlight_regex(r"\bBoost\b", COLOR["boost"])
        text.highlight_regex(r"\bWINS\b", COLOR["winner"])
        text.highlight_regex(LOCATION_PATTERN, COLOR["location"])

        # Each car in its own palette colour
        for match in CAR_PATTERN.finditer(text.plain):
            style = car_palette(int(match.group("idx"))).style
            text.stylize(style, start=match.start(), end=match.end())


def configure_logging(level: int = logging.INFO) -> None:
    logger = logging.getLogger()
    logger.setLevel(level)
    handler = RichHandler(
        markup=True,
        show_path=False,
        show_time=False,
        highlighter=RaceLogHighlighter(),
    )
    handler.setFormatter(RichMarkupFormatter())
    logger.handlers.clear()
    logger.addHandler(handler)
