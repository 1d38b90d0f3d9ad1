"""Run the sketch with its Redis-mirrored environment.

Usage:
    python -m sparquil
Connection and sketch settings come from the environment or .env
(REDIS_HOST, REDIS_PORT, ENV_PATTERN, SKETCH_FRAME_RATE, ...).
"""

import asyncio
import sys

from sparquil.core.config import Settings, get_settings
from sparquil.core.lifespan import create_lifespan
from sparquil.domain.exceptions import StoreUnavailableException
from sparquil.shared.telemetry import get_logger, setup_logging

logger = get_logger(__name__)


async def main(settings: Settings) -> None:
    """Start the system and keep it running until cancelled."""
    async with create_lifespan(settings):
        await asyncio.Event().wait()


def run() -> None:
    settings = get_settings()
    setup_logging(settings)
    try:
        asyncio.run(main(settings))
    except StoreUnavailableException as e:
        logger.error("Startup failed: %s", e.message)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    run()
