"""Configuration schema for races using msgspec."""

from __future__ import annotations

import base64
import hashlib
import json
from dataclasses import fields
from pathlib import Path

import msgspec

from rallysim.core.state import RaceRules

DEFAULT_PLAYERS = 2
DEFAULT_WIDTH = 10.0
DEFAULT_HEIGHT = 7.0
DEFAULT_CLEARANCE = 0.4


class RaceConfig(msgspec.Struct, frozen=True):
    """
    Immutable representation of a single race setup.
    Together with the seed it fully determines layout, routes and car stats.
    """

    players: int
    seed: int
    width: float = DEFAULT_WIDTH
    height: float = DEFAULT_HEIGHT
    clearance: float = DEFAULT_CLEARANCE
    rules: dict[str, int | float] = msgspec.field(default_factory=dict)

    def _canonical(self) -> dict[str, object]:
        data: dict[str, object] = {
            "players": self.players,
            "seed": self.seed,
            "width": self.width,
            "height": self.height,
            "clearance": self.clearance,
        }
        if self.rules:
            data["rules"] = dict(sorted(self.rules.items()))
        return data

    def compute_hash(self) -> str:
        """Compute stable SHA-256 hash of this configuration."""
        canonical = json.dumps(self._canonical(), sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()

    @property
    def encoded(self) -> str:
        """Shareable config string (Base64)."""
        canonical = json.dumps(self._canonical(), sort_keys=True, separators=(",", ":"))
        return base64.urlsafe_b64encode(canonical.encode("utf-8")).decode("ascii")

    @classmethod
    def from_encoded(cls, encoded: str) -> RaceConfig:
        """Decode from shareable string."""
        json_str = base64.urlsafe_b64decode(encoded).decode("utf-8")
        return msgspec.json.decode(json_str, type=cls)

    def build_rules(self) -> RaceRules:
        """Apply the rule overrides on top of the default rules."""
        rules = RaceRules()
        known = {f.name for f in fields(RaceRules)}
        for k, v in self.rules.items():
            if k not in known:
                msg = f"Unknown rule '{k}'. Known rules: {', '.join(sorted(known))}."
                raise ValueError(msg)
            if isinstance(getattr(rules, k), int):
                if not float(v).is_integer():
                    msg = f"Rule '{k}' needs a whole number, got {v}."
                    raise ValueError(msg)
                v = int(v)
            setattr(rules, k, type(getattr(rules, k))(v))
        return rules

    @property
    def repr(self) -> str:
        """String representation for logging."""
        return (
            f"{self.players} players on {self.width}x{self.height} "
            f"(Seed: {self.seed}) - {self.encoded}"
        )


class PartialRaceConfig(msgspec.Struct):
    """
    Partial configuration for loading from TOML files.
    """

    players: int | None = None
    seed: int | None = None
    width: float | None = None
    height: float | None = None
    clearance: float | None = None
    rules: dict[str, int | float] | None = None

    @classmethod
    def from_toml(cls, path: str | Path) -> PartialRaceConfig:
        """Load configuration from a TOML file path."""
        with Path(path).open("rb") as f:
            return msgspec.toml.decode(f.read(), type=cls)
