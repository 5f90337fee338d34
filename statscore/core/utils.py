# statscore/core/utils.py

import json
import uuid as _uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from statscore.core.constants import TICKS_PER_SECOND


def normalize_uuid(value: Any) -> str:
    """Canonical lowercase hyphenated form. Raises ValueError on anything else."""
    if isinstance(value, _uuid.UUID):
        return str(value)
    text = str(value or "").strip()
    if not text:
        raise ValueError("empty uuid")
    return str(_uuid.UUID(text))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    # naive values are taken as UTC, which is how everything here is stored
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_utc_iso(text: str) -> datetime:
    # Python < 3.11 does not accept the trailing "Z" that Java's Instant writes
    s = str(text).strip()
    if s.endswith("Z"):
        s = s[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(s))


def ticks_to_seconds(ticks: int) -> float:
    return ticks / TICKS_PER_SECOND


def ticks_to_hours(ticks: int) -> float:
    return ticks / TICKS_PER_SECOND / 3600.0


def format_daily_playtime(seconds: float) -> str:
    """e.g. '2h 30min 15sec today'"""
    total = max(0.0, float(seconds))
    h = int(total // 3600)
    remain = total % 3600
    m = int(remain // 60)
    s = int(remain % 60)
    return f"{h}h {m}min {s}sec today"


def write_json_atomic(path: Path, data: object):
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
    tmp.replace(path)
