# statscore/core/logger.py
# One console sink and one daily file sink, configured at import.
# Components tag their messages, e.g. "[Playtime] saved playtime_daily.json".

import sys
from loguru import logger

from statscore.core.constants import LOG_FILE_LEVEL, LOG_LEVEL, LOG_STORAGE

LOG_STORAGE.mkdir(parents=True, exist_ok=True)

logger.remove()
logger.add(
    sys.stderr,
    level=LOG_LEVEL,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <7}</level> | {message}",
)
logger.add(
    LOG_STORAGE / "statscore_{time:YYYY-MM-DD}.log",
    level=LOG_FILE_LEVEL,
    format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{line} - {message}",
    encoding="utf-8",
    rotation="00:00",
    retention="7 days",
    compression="zip",
    # request threads, reset watcher and event loop all log here
    enqueue=True,
)

__all__ = ["logger"]
