# statscore/tasks/reset_watch.py

import asyncio

from statscore.core.constants import RESET_WATCH_INTERVAL
from statscore.core.logger import logger


async def reset_watch_loop(services, interval: float = RESET_WATCH_INTERVAL):
    """Background loop: run the daily reset check even while nobody is online."""
    while True:
        await asyncio.sleep(interval)
        try:
            # the check persists on a reset, keep file I/O off the event loop
            await asyncio.to_thread(services.accumulator.check_reset)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.opt(exception=e).error("[ResetWatch] reset check failed")
