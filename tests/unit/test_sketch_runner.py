"""Tests for SketchRunner and sketch option validation."""

import asyncio

import pytest

from sparquil.application.env_cache import EnvCache
from sparquil.domain.exceptions import SketchOptionsException
from sparquil.sketch.draw import CircleFrame
from sparquil.sketch.options import SketchOptions
from sparquil.sketch.runner import SketchRunner, new_sketch


class TestNewSketch:
    """new_sketch validates options before building a runner."""

    def test_valid_options(self) -> None:
        runner = new_sketch({"title": "spin", "size": (320, 240), "frame_rate": 60})
        assert runner.options.width == 320
        assert runner.options.height == 240
        assert runner.options.frame_rate == 60

    def test_defaults(self) -> None:
        runner = new_sketch({"title": "spin"})
        assert runner.options.size == (500, 500)
        assert runner.options.frame_rate == 30

    @pytest.mark.parametrize(
        "opts",
        [
            {},
            {"title": ""},
            {"title": "spin", "size": (0, 100)},
            {"title": "spin", "size": (100,)},
            {"title": "spin", "frame_rate": 0},
        ],
    )
    def test_invalid_options_raise(self, opts: dict) -> None:
        with pytest.raises(SketchOptionsException) as exc_info:
            new_sketch(opts)
        assert exc_info.value.error_code == "INVALID_SKETCH_OPTIONS"


def test_tick_reads_env_and_draws(env_cache: EnvCache) -> None:
    frames: list[CircleFrame] = []
    runner = SketchRunner(SketchOptions(title="t"), draw=frames.append)
    env_cache.on_change("env/color", "42")
    state = runner.tick(env_cache)
    assert state.color == 42
    assert runner.frame_count == 1
    assert frames[0].fill_hsb == (42, 255, 255)


async def test_loop_runs_until_stopped(env_cache: EnvCache) -> None:
    frames: list[CircleFrame] = []
    runner = SketchRunner(SketchOptions(title="t", frame_rate=500), draw=frames.append)
    await runner.start(env_cache)
    assert runner.running
    await asyncio.sleep(0.05)
    await runner.stop()
    assert not runner.running
    count = len(frames)
    assert count > 0
    await asyncio.sleep(0.02)
    assert len(frames) == count


async def test_loop_survives_failing_frames(env_cache: EnvCache) -> None:
    calls: list[CircleFrame] = []

    def draw(frame: CircleFrame) -> None:
        calls.append(frame)
        raise RuntimeError("no display")

    runner = SketchRunner(SketchOptions(title="t", frame_rate=500), draw=draw)
    await runner.start(env_cache)
    await asyncio.sleep(0.05)
    await runner.stop()
    assert len(calls) > 1
    assert runner.frame_count == 0


async def test_stop_without_start_is_noop() -> None:
    runner = SketchRunner(SketchOptions(title="t"))
    await runner.stop()
    assert not runner.running


def test_tick_draws_when_env_color_is_oversized(env_cache: EnvCache) -> None:
    frames: list[CircleFrame] = []
    runner = SketchRunner(SketchOptions(title="t"), draw=frames.append)
    env_cache.on_change("env/color", "9" * 5000)
    runner.tick(env_cache)
    assert runner.frame_count == 1
    assert len(frames) == 1
