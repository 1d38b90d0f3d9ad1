"""System lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Only wiring here: the
store is connected first, the env cache is started against it, and the
sketch reads from the cache. Shutdown runs in reverse order.
"""

import logging
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator

from sparquil.application.env_cache import EnvCache
from sparquil.core.config import Settings, get_settings
from sparquil.infrastructure.kv_store.redis_store import RedisKVStore
from sparquil.sketch.draw import log_frame
from sparquil.sketch.runner import DrawFn, SketchRunner, new_sketch

logger = logging.getLogger(__name__)


@dataclass
class SparquilSystem:
    """Started components, in dependency order."""

    store: RedisKVStore
    env: EnvCache
    sketch: SketchRunner


def build_system(settings: Settings, draw: DrawFn = log_frame) -> SparquilSystem:
    """Construct (but do not start) the components."""
    return SparquilSystem(
        store=RedisKVStore(settings),
        env=EnvCache(pattern=settings.env_pattern),
        sketch=new_sketch(
            {
                "title": settings.sketch_title,
                "size": (settings.sketch_width, settings.sketch_height),
                "frame_rate": settings.sketch_frame_rate,
            },
            draw=draw,
        ),
    )


@asynccontextmanager
async def create_lifespan(
    settings: Settings | None = None,
    draw: DrawFn = log_frame,
    system: SparquilSystem | None = None,
) -> AsyncIterator[SparquilSystem]:
    """Start the system, yield it, and stop it on exit.

    Startup order: store connect, env cache start, sketch start.
    Components that started are stopped even if a later one fails.

    Raises:
        StoreUnavailableException: If the store is unreachable at startup.
    """
    settings = settings or get_settings()
    system = system or build_system(settings, draw=draw)

    async with AsyncExitStack() as stack:
        # ---- Startup ----
        await system.store.connect()
        stack.push_async_callback(system.store.disconnect)

        await system.env.start(system.store)
        stack.push_async_callback(system.env.stop)

        await system.sketch.start(system.env)
        stack.push_async_callback(system.sketch.stop)
        logger.info("%s started", settings.app_name)

        yield system

        # ---- Shutdown (exit stack unwinds in reverse) ----
        logger.info("%s stopping", settings.app_name)
