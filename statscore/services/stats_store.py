# services/stats_store.py
# Reader for the game server's per-player stats files: <world>/stats/<uuid>.json
# The files belong to the host; this module never writes them.

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Optional

from statscore.core.constants import PLAY_TIME_KEYS
from statscore.core.logger import logger
from statscore.core.utils import normalize_uuid


@dataclass(frozen=True)
class StoredPlaytime:
    uuid: str
    ticks: int


class StatFileError(Exception):
    """A stats file that exists but cannot be used."""


def read_play_time_ticks(stats_file: Path) -> Optional[int]:
    """play_time ticks from one stats file; None when the file has no play time entry."""
    try:
        data = json.loads(stats_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise StatFileError(f"{stats_file.name}: {e}") from e
    custom = (data.get("stats") or {}).get("minecraft:custom") if isinstance(data, dict) else None
    if not isinstance(custom, dict):
        return None
    for key in PLAY_TIME_KEYS:
        val = custom.get(key)
        if isinstance(val, bool):
            continue
        if isinstance(val, (int, float)):
            return max(0, int(val))
    return None


class StatsStore:
    def __init__(self, stats_dir: Path):
        self.stats_dir = stats_dir

    def iter_playtimes(self) -> Iterator[StoredPlaytime]:
        """Yield one entry per readable stats file, in file name order.

        Bad files (non-UUID names, unreadable or corrupt JSON) are logged and skipped.
        """
        if not self.stats_dir.is_dir():
            logger.debug(f"[StatsStore] stats dir missing | path={self.stats_dir}")
            return
        for f in sorted(self.stats_dir.glob("*.json")):
            try:
                uuid = normalize_uuid(f.stem)
            except ValueError:
                logger.warning(f"[StatsStore] skipping non-uuid stats file | file={f.name}")
                continue
            try:
                ticks = read_play_time_ticks(f)
            except StatFileError as e:
                logger.error(f"[StatsStore] error reading stat file {e}")
                continue
            if ticks is None:
                logger.debug(f"[StatsStore] no play time entry | file={f.name}")
                continue
            yield StoredPlaytime(uuid, ticks)
