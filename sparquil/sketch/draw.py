"""Frame geometry for the spinning circle.

Pixels are the graphics host's job; this module computes what one frame
shows so any backend (or a log line) can render it.
"""

import logging
import math
from dataclasses import dataclass

from sparquil.sketch.state import SketchState

logger = logging.getLogger(__name__)

BACKGROUND_GRAY = 240
ORBIT_RADIUS = 150
CIRCLE_DIAMETER = 100


@dataclass(frozen=True)
class CircleFrame:
    """Everything needed to draw one frame."""

    background: int
    fill_hsb: tuple[float, int, int]
    x: float
    y: float
    diameter: int


def circle_frame(state: SketchState, size: tuple[int, int]) -> CircleFrame:
    """Place the circle on its orbit around the canvas center."""
    width, height = size
    return CircleFrame(
        background=BACKGROUND_GRAY,
        fill_hsb=(state.color, 255, 255),
        x=width / 2 + ORBIT_RADIUS * math.cos(state.angle),
        y=height / 2 + ORBIT_RADIUS * math.sin(state.angle),
        diameter=CIRCLE_DIAMETER,
    )


def log_frame(frame: CircleFrame) -> None:
    """Default draw callable: log the frame at DEBUG."""
    logger.debug(
        "frame: fill=%s center=(%.1f, %.1f) d=%s",
        frame.fill_hsb,
        frame.x,
        frame.y,
        frame.diameter,
    )
