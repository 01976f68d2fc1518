"""Walk settings: defaults, validation and loading from JSON or TOML."""

from __future__ import annotations

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None  # type: ignore

from walka_clock import MAX_SPEED
from walka_errors import InvalidConfiguration
from walka_render import ColorPolicy, TrailMode
from walka_walk import STEP_LENGTH

# --- Canvas ---
WIDTH = 960
HEIGHT = 640

# --- Steps before the counter rolls over ---
STEP_BUDGET = 10_000


def _is_number(value):
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class WalkConfig:
    step_budget: int = STEP_BUDGET
    target_speed: float = 1.0
    trail_mode: TrailMode = TrailMode.FADE
    color_policy: ColorPolicy = ColorPolicy.FIXED
    step_length: float = STEP_LENGTH
    canvas_size: tuple = (WIDTH, HEIGHT)

    def validate(self) -> "WalkConfig":
        if isinstance(self.step_budget, bool) or not isinstance(self.step_budget, int):
            raise InvalidConfiguration(f"step_budget must be an integer, got {self.step_budget!r}")
        if self.step_budget <= 0:
            raise InvalidConfiguration(f"step_budget must be positive, got {self.step_budget}")
        if not _is_number(self.target_speed) or not 0 <= self.target_speed <= MAX_SPEED:
            raise InvalidConfiguration(
                f"target_speed must be within [0, {MAX_SPEED}], got {self.target_speed}"
            )
        if not _is_number(self.step_length) or not self.step_length > 0:
            raise InvalidConfiguration(f"step_length must be positive, got {self.step_length}")
        if not isinstance(self.trail_mode, TrailMode):
            raise InvalidConfiguration(f"unknown trail mode {self.trail_mode!r}")
        if not isinstance(self.color_policy, ColorPolicy):
            raise InvalidConfiguration(f"unknown color policy {self.color_policy!r}")
        size = tuple(self.canvas_size)
        if len(size) != 2 or not all(_is_number(v) and int(v) == v and v > 0 for v in size):
            raise InvalidConfiguration(
                f"canvas_size must be two positive whole dimensions, got {self.canvas_size!r}"
            )
        return self

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "WalkConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidConfiguration(f"unknown options: {', '.join(sorted(unknown))}")

        values = dict(data)
        try:
            if "trail_mode" in values:
                values["trail_mode"] = TrailMode(values["trail_mode"])
            if "color_policy" in values:
                values["color_policy"] = ColorPolicy(values["color_policy"])
        except ValueError as err:
            raise InvalidConfiguration(str(err)) from err
        if "canvas_size" in values:
            values["canvas_size"] = tuple(values["canvas_size"])
        return cls(**values).validate()


def load_config(path) -> WalkConfig:
    """Load walk settings from a JSON or TOML file."""
    path = Path(path)
    data = path.read_bytes()
    suffix = path.suffix.lower()
    if suffix == ".json":
        return WalkConfig.from_mapping(json.loads(data.decode("utf-8")))
    if suffix in {".toml", ".tml"}:
        if tomllib is None:
            raise RuntimeError("tomllib is unavailable; cannot parse TOML files")
        return WalkConfig.from_mapping(tomllib.loads(data.decode("utf-8")))
    raise InvalidConfiguration(f"Unsupported config file format: {suffix}")
