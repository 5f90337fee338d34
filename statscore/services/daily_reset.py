# services/daily_reset.py

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from typing import Optional

from statscore.core.constants import DEFAULT_DAILY_RESET_TIME
from statscore.core.logger import logger
from statscore.core.utils import ensure_utc, utc_now

_LEGACY_SUFFIX = " UTC"


def parse_reset_time(value: str) -> time:
    """Parse ``HH:MM:SS``. Raises ValueError on anything else."""
    parts = str(value).strip().split(":")
    if len(parts) != 3:
        raise ValueError(f"expected HH:MM:SS, got {value!r}")
    if not all(p.isdigit() and len(p) == 2 for p in parts):
        raise ValueError(f"non-numeric segment in {value!r}")
    hh, mm, ss = (int(p) for p in parts)
    # time() range-checks: hour 0-23, minute/second 0-59
    return time(hh, mm, ss)


class DailyResetScheduler:
    """Decides when the daily counters are zeroed.

    The reset instant is a fixed time of day in UTC. ``last_checked`` only moves
    forward and is persisted by the owner, so a restart neither repeats nor
    skips a reset.
    """

    def __init__(self, reset_time: str = DEFAULT_DAILY_RESET_TIME, last_checked: Optional[datetime] = None):
        self._reset_time = time(0, 0, 0)
        self._last_checked = ensure_utc(last_checked) if last_checked else utc_now()
        self.set_reset_time(reset_time)

    @property
    def reset_time(self) -> time:
        return self._reset_time

    @property
    def reset_time_text(self) -> str:
        return self._reset_time.strftime("%H:%M:%S")

    @property
    def last_checked(self) -> datetime:
        return self._last_checked

    def restore(self, last_checked: datetime) -> None:
        self._last_checked = ensure_utc(last_checked)

    def set_reset_time(self, value: str) -> bool:
        """Returns False (and falls back to 00:00:00) when ``value`` is malformed. Never raises."""
        text = str(value if value is not None else "").strip()
        if text.endswith(_LEGACY_SUFFIX):
            # older configs wrote "HH:MM:SS UTC"; the zone is always UTC anyway
            logger.warning(f"[DailyReset] legacy reset time format {text!r}, ignoring the ' UTC' suffix")
            text = text[:-len(_LEGACY_SUFFIX)].strip()
        try:
            self._reset_time = parse_reset_time(text)
        except ValueError as e:
            logger.error(f"[DailyReset] invalid daily_reset_time {value!r}: {e}. Defaulting to 00:00:00")
            self._reset_time = time(0, 0, 0)
            return False
        logger.info(f"[DailyReset] daily reset time set | time={self.reset_time_text} UTC")
        return True

    def boundary_for(self, day) -> datetime:
        return datetime.combine(day, self._reset_time, tzinfo=timezone.utc)

    def check_and_maybe_reset(self, now: Optional[datetime] = None) -> bool:
        """True when a reset boundary lies in ``(last_checked, now]``.

        Today's boundary is tested first. If the date changed since the last
        check, yesterday's boundary is tested too, so a check that arrives days
        late (or before today's boundary) still fires. One call reports at most
        one reset however many boundaries were crossed.
        """
        now = ensure_utc(now) if now else utc_now()
        last = self._last_checked
        today_boundary = self.boundary_for(now.date())

        due = now >= today_boundary and last < today_boundary
        if not due and now.date() != last.date():
            previous_boundary = today_boundary - timedelta(days=1)
            due = now >= previous_boundary and last < previous_boundary

        if now > last:
            self._last_checked = now
        if due:
            logger.info(f"[DailyReset] reset boundary crossed | now={now.isoformat()} last_checked={last.isoformat()}")
        return due
