from typing import Literal

RaceStatus = Literal["setup", "in_progress", "finished"]

LocationStatus = Literal["visited", "pending", "end_locked", "end_reachable"]

RejectReason = Literal[
    "RACE_NOT_IN_PROGRESS",
    "NOT_ACTIVE_CAR",
    "UNKNOWN_LOCATION",
    "ALREADY_VISITED",
    "END_NOT_REACHABLE",
]


class RaceSetupError(ValueError):
    """Raised when a race cannot be set up with the requested parameters."""
