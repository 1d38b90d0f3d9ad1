"""Sketch: the animated circle that reads its color from the env cache."""

from sparquil.sketch.draw import CircleFrame, circle_frame, log_frame
from sparquil.sketch.options import SketchOptions
from sparquil.sketch.runner import SketchRunner, new_sketch
from sparquil.sketch.state import (
    EnvReader,
    SketchState,
    parse_number,
    setup_state,
    update_state_with_env,
)

__all__ = [
    "CircleFrame",
    "EnvReader",
    "SketchOptions",
    "SketchRunner",
    "SketchState",
    "circle_frame",
    "log_frame",
    "new_sketch",
    "parse_number",
    "setup_state",
    "update_state_with_env",
]
