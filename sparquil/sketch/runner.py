"""Sketch runner: fixed-rate update/draw loop on an asyncio task.

The loop reads the env cache through EnvReader.get on every tick and is
not coupled to when the cache changes.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from pydantic import ValidationError

from sparquil.domain.exceptions import SketchOptionsException
from sparquil.sketch.draw import CircleFrame, circle_frame, log_frame
from sparquil.sketch.options import SketchOptions
from sparquil.sketch.state import (
    EnvReader,
    SketchState,
    setup_state,
    update_state_with_env,
)

logger = logging.getLogger(__name__)

DrawFn = Callable[[CircleFrame], None]


class SketchRunner:
    """Runs setup once, then update and draw at options.frame_rate."""

    def __init__(self, options: SketchOptions, draw: DrawFn = log_frame) -> None:
        self.options = options
        self.draw = draw
        self.state: SketchState = setup_state()
        self.frame_count = 0
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def tick(self, env: EnvReader) -> SketchState:
        """Advance one frame and draw it."""
        self.state = update_state_with_env(env, self.state)
        self.draw(circle_frame(self.state, self.options.size))
        self.frame_count += 1
        return self.state

    async def _run(self, env: EnvReader) -> None:
        interval = 1.0 / self.options.frame_rate
        while True:
            try:
                self.tick(env)
            except Exception:
                logger.exception("Sketch frame %s failed", self.frame_count)
            await asyncio.sleep(interval)

    async def start(self, env: EnvReader) -> None:
        """Reset state and start the frame loop."""
        if self.running:
            return
        self.state = setup_state()
        self.frame_count = 0
        self._task = asyncio.create_task(self._run(env), name="sketch-loop")
        logger.info(
            "Sketch %r started at %s fps (%sx%s)",
            self.options.title,
            self.options.frame_rate,
            self.options.width,
            self.options.height,
        )

    async def stop(self) -> None:
        """Stop the frame loop."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Sketch %r stopped after %s frames", self.options.title, self.frame_count)


def new_sketch(opts: dict[str, Any], draw: DrawFn = log_frame) -> SketchRunner:
    """Build a SketchRunner from raw options.

    Raises:
        SketchOptionsException: If opts do not validate.
    """
    try:
        options = SketchOptions.model_validate(opts)
    except ValidationError as e:
        raise SketchOptionsException(str(e)) from e
    return SketchRunner(options, draw=draw)
