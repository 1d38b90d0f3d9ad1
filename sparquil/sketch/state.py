"""Sketch state and its per-frame update from the environment.

The update reads ``env/color`` from the env cache; when it is absent or
not a number the color keeps cycling on its own.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Protocol

COLOR_KEY = "env/color"
COLOR_STEP = 0.7
COLOR_RANGE = 255
ANGLE_STEP = 0.1

NUMBER_RE = re.compile(r"-?\d+\.?\d*", re.ASCII)


class EnvReader(Protocol):
    """Read-only view of the environment used by the sketch loop."""

    def get(self, key: str, default: str | None = None) -> str | None:
        ...


@dataclass(frozen=True)
class SketchState:
    """Circle color (HSB hue) and position angle in radians."""

    color: float = 0
    angle: float = 0


def setup_state() -> SketchState:
    """Initial state: color 0, angle 0."""
    return SketchState(color=0, angle=0)


def parse_number(s: str | None) -> int | float | None:
    """Read a number from a string. Returns None if not a number.

    Accepts an optional leading ``-``, digits and an optional fractional
    part (``3.`` is allowed). Integers stay ``int``.
    """
    if not s or NUMBER_RE.fullmatch(s) is None:
        return None
    try:
        if "." in s:
            return float(s)
        return int(s)
    except ValueError:
        # int() refuses digit strings past sys.get_int_max_str_digits()
        return None


def update_state_with_env(env: EnvReader, state: SketchState) -> SketchState:
    """Advance the state one frame, taking the color from env when set."""
    color = parse_number(env.get(COLOR_KEY))
    if color is None:
        color = (state.color + COLOR_STEP) % COLOR_RANGE
    return SketchState(color=color, angle=state.angle + ANGLE_STEP)
