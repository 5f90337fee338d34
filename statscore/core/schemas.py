# statscore/core/schemas.py
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
import enum

from statscore.core.utils import normalize_uuid


# --- Enums ---
class LineFormat(str, enum.Enum):
    PLAIN = "plain"
    LEGACY = "legacy"
    JSON = "json"


# --- Host events ---
class PlayerEvent(BaseModel):
    uuid: str
    counter: int = Field(..., ge=0, description="absolute play_time ticks")

    @field_validator("uuid", mode="before")
    @classmethod
    def check_uuid(cls, v):
        try:
            return normalize_uuid(v)
        except ValueError:
            raise ValueError("invalid player uuid")


class PlayerConnect(PlayerEvent):
    name: str = Field(..., min_length=1, max_length=64)


class PlayerSample(PlayerEvent):
    pass


class PlayerDisconnect(PlayerEvent):
    pass


class SampleBatch(BaseModel):
    samples: List[PlayerSample]


class SampleResult(BaseModel):
    uuid: str
    added_seconds: float
    daily_seconds: float


# --- Leaderboard ---
class LeaderboardRow(BaseModel):
    rank: int
    uuid: str
    name: str
    lifetime_hours: float
    daily_hours: float


class DailyPlaytime(BaseModel):
    uuid: str
    seconds: float
    text: str


class ResolvedName(BaseModel):
    uuid: str
    name: str
    online: bool


# --- Config ---
class ColorUpdate(BaseModel):
    color: str


class ResetTimeUpdate(BaseModel):
    time: str = Field(..., description="HH:MM:SS, UTC")


class ConfigView(BaseModel):
    daily_reset_time: str
    username_colors: dict
    blacklisted_players: List[str]
    active_reset_time: Optional[str] = None
