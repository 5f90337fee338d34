# services/playtime_tracker.py
# Daily playtime accumulation.
# - counters are absolute play_time ticks reported by the host (20 ticks = 1 s)
# - daily seconds grow by the positive delta between two samples
# - the snapshot (playtime_daily.json) is written on disconnect, on reset and on shutdown

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, Optional

from statscore.core.constants import DEFAULT_DAILY_RESET_TIME
from statscore.core.locks import RWLock
from statscore.core.logger import logger
from statscore.core.utils import normalize_uuid, parse_utc_iso, ticks_to_seconds, utc_now, write_json_atomic
from statscore.services.daily_reset import DailyResetScheduler


@dataclass
class PlaytimeRecord:
    uuid: str
    daily_seconds: float = 0.0
    last_counter: Optional[int] = None


class PlaytimeAccumulator:
    def __init__(self, data_file: Path, reset_time: str = DEFAULT_DAILY_RESET_TIME,
                 clock: Callable[[], datetime] = utc_now):
        self.data_file = data_file
        self._clock = clock
        self._records: Dict[str, PlaytimeRecord] = {}
        self._scheduler = DailyResetScheduler(reset_time, last_checked=clock())
        self._lock = RWLock()

    # ---------- scheduler ----------

    @property
    def scheduler(self) -> DailyResetScheduler:
        return self._scheduler

    def set_reset_time(self, value: str) -> bool:
        with self._lock.write():
            return self._scheduler.set_reset_time(value)

    def check_reset(self, now: Optional[datetime] = None) -> bool:
        """Run the boundary check; on a crossing zero every player and persist."""
        with self._lock.write():
            return self._check_reset_locked(now or self._clock())

    def _check_reset_locked(self, now: datetime) -> bool:
        if not self._scheduler.check_and_maybe_reset(now):
            return False
        for rec in self._records.values():
            rec.daily_seconds = 0.0
        logger.info(f"[Playtime] daily playtime reset | players={len(self._records)}")
        self._save_locked()
        return True

    # ---------- events ----------

    def on_player_connect(self, uuid: str, counter: int) -> None:
        with self._lock.write():
            rec = self._records.get(uuid)
            if rec is None:
                rec = self._records[uuid] = PlaytimeRecord(uuid)
            # time spent offline must not count, so re-anchor unconditionally
            rec.last_counter = int(counter)
        logger.debug(f"[Playtime] connect | uuid={uuid} counter={counter}")

    def on_periodic_sample(self, uuid: str, counter: int) -> float:
        """Accrue one sample and return the seconds added."""
        with self._lock.write():
            added = self._sample_locked(uuid, int(counter))
            self._check_reset_locked(self._clock())
        return added

    def on_player_disconnect(self, uuid: str, counter: int) -> None:
        with self._lock.write():
            self._sample_locked(uuid, int(counter))
            if not self._check_reset_locked(self._clock()):
                self._save_locked()
        logger.debug(f"[Playtime] disconnect | uuid={uuid} counter={counter}")

    def _sample_locked(self, uuid: str, counter: int) -> float:
        rec = self._records.get(uuid)
        if rec is None:
            rec = self._records[uuid] = PlaytimeRecord(uuid)
        if rec.last_counter is None:
            # never anchored (sample before connect): anchor only
            rec.last_counter = counter
            return 0.0
        delta = max(0, counter - rec.last_counter)
        added = ticks_to_seconds(delta)
        rec.daily_seconds += added
        rec.last_counter = max(rec.last_counter, counter)
        return added

    # ---------- queries ----------

    def get_daily_seconds(self, uuid: str) -> float:
        with self._lock.read():
            rec = self._records.get(uuid)
            return rec.daily_seconds if rec else 0.0

    def daily_snapshot(self) -> Dict[str, float]:
        with self._lock.read():
            return {u: r.daily_seconds for u, r in self._records.items()}

    @property
    def last_checked(self) -> datetime:
        with self._lock.read():
            return self._scheduler.last_checked

    # ---------- persistence ----------

    def load(self) -> None:
        """Read the snapshot once at startup. Missing or corrupt data starts empty."""
        with self._lock.write():
            if not self.data_file.exists():
                self._records = {}
                self._scheduler.restore(self._clock())
                self._save_locked()
                return
            try:
                data = json.loads(self.data_file.read_text(encoding="utf-8"))
                if not isinstance(data, dict):
                    raise ValueError("daily playtime file is not a JSON object")
                records: Dict[str, PlaytimeRecord] = {}
                for key, value in (data.get("daily_seconds") or {}).items():
                    try:
                        uuid = normalize_uuid(key)
                        records[uuid] = PlaytimeRecord(uuid, daily_seconds=max(0.0, float(value)))
                    except (TypeError, ValueError):
                        logger.warning(f"[Playtime] invalid entry in {self.data_file.name} | key={key}")
                last_checked = self._clock()
                if "last_reset_check" in data:
                    try:
                        last_checked = parse_utc_iso(data["last_reset_check"])
                    except (TypeError, ValueError):
                        logger.warning("[Playtime] invalid last_reset_check, using current time")
                self._records = records
                self._scheduler.restore(last_checked)
                logger.info(f"[Playtime] loaded {self.data_file.name} | players={len(records)}")
            except (OSError, ValueError, AttributeError) as e:
                logger.error(f"[Playtime] failed to load {self.data_file.name}: {e}")
                self._records = {}
                self._scheduler.restore(self._clock())

    def save(self) -> None:
        with self._lock.write():
            self._save_locked()

    def _save_locked(self) -> None:
        data = {
            "daily_seconds": {u: r.daily_seconds for u, r in sorted(self._records.items())},
            "last_reset_check": self._scheduler.last_checked.isoformat(),
        }
        try:
            write_json_atomic(self.data_file, data)
            logger.debug(f"[Playtime] saved {self.data_file.name}")
        except OSError as e:
            logger.error(f"[Playtime] failed to save {self.data_file.name}: {e}")
