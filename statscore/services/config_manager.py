# services/config_manager.py
# statscore_config.json: username colors, leaderboard blacklist, daily reset time.
# Names are stored lowercased; the file is rewritten after every change.

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from statscore.core.constants import DEFAULT_DAILY_RESET_TIME
from statscore.core.logger import logger
from statscore.core.utils import write_json_atomic
from statscore.services.chat import is_chat_color
from statscore.services.daily_reset import parse_reset_time

CONFIG_COMMENT = "Managed by statscore. Prefer the /api/config endpoints over editing by hand."


class StatsConfig(BaseModel):
    daily_reset_time: str = DEFAULT_DAILY_RESET_TIME
    username_colors: Dict[str, str] = Field(default_factory=dict)
    blacklisted_players: List[str] = Field(default_factory=list)

    @field_validator("username_colors", mode="before")
    @classmethod
    def clean_colors(cls, v):
        if v is None:
            return {}
        if not isinstance(v, dict):
            raise ValueError("username_colors must be an object")
        out: Dict[str, str] = {}
        for name, color in v.items():
            key = str(name).strip().lower()
            value = str(color or "").strip().lower()
            if not key:
                continue
            if not is_chat_color(value):
                logger.warning(f"[Config] invalid Minecraft color for {key}: {color}")
                continue
            out[key] = value
        return out

    @field_validator("blacklisted_players", mode="before")
    @classmethod
    def clean_blacklist(cls, v):
        if v is None:
            return []
        if not isinstance(v, list):
            raise ValueError("blacklisted_players must be a list")
        seen: List[str] = []
        for name in v:
            key = str(name).strip().lower()
            if key and key not in seen:
                seen.append(key)
        return seen


def is_valid_reset_time(value: str) -> bool:
    try:
        parse_reset_time(value)
    except ValueError:
        return False
    return True


class ConfigManager:
    def __init__(self, config_file: Path, on_reset_time: Optional[Callable[[str], bool]] = None):
        self.config_file = config_file
        self.on_reset_time = on_reset_time
        self.config = StatsConfig()
        # serializes read-copy-write updates of self.config and the file
        self._lock = threading.Lock()

    # ---------- read-only views ----------

    @property
    def username_colors(self) -> Dict[str, str]:
        return dict(self.config.username_colors)

    @property
    def blacklisted_players(self) -> frozenset:
        return frozenset(self.config.blacklisted_players)

    @property
    def daily_reset_time(self) -> str:
        return self.config.daily_reset_time

    # ---------- load / save ----------

    def load(self) -> bool:
        """Load (creating a default file if needed). Any failure falls back to defaults."""
        with self._lock:
            ok = self._load_locked()
        self._push_reset_time()
        return ok

    def _load_locked(self) -> bool:
        if not self.config_file.exists():
            self._write(StatsConfig())
            logger.info(f"[Config] created default {self.config_file.name} at {self.config_file}")
        ok = True
        try:
            raw = json.loads(self.config_file.read_text(encoding="utf-8"))
            if not isinstance(raw, dict):
                raise ValueError("config file is not a JSON object")
            raw.pop("_comment", None)
            self.config = StatsConfig.model_validate(raw)
            logger.info(
                f"[Config] loaded {self.config_file.name} | colors={len(self.config.username_colors)} "
                f"blacklisted={len(self.config.blacklisted_players)} reset={self.config.daily_reset_time}"
            )
        except (OSError, ValueError, ValidationError) as e:
            logger.error(f"[Config] failed to load {self.config_file.name}: {e}")
            logger.warning("[Config] resetting to default configuration")
            self.config = StatsConfig()
            ok = False
        return ok

    def reload(self) -> bool:
        return self.load()

    def save(self) -> None:
        self._write(self.config)

    def _write(self, cfg: StatsConfig) -> None:
        data = {"_comment": CONFIG_COMMENT, **cfg.model_dump()}
        try:
            write_json_atomic(self.config_file, data)
        except OSError as e:
            logger.error(f"[Config] failed to save {self.config_file.name}: {e}")

    def _push_reset_time(self) -> None:
        if self.on_reset_time is not None:
            self.on_reset_time(self.config.daily_reset_time)

    # ---------- blacklist ----------

    def blacklist(self) -> List[str]:
        return sorted(self.config.blacklisted_players)

    def blacklist_add(self, player: str) -> bool:
        key = (player or "").strip().lower()
        with self._lock:
            if not key or key in self.config.blacklisted_players:
                return False
            self.config = self.config.model_copy(update={"blacklisted_players": [*self.config.blacklisted_players, key]})
            self.save()
        logger.info(f"[Config] blacklist add | player={key}")
        return True

    def blacklist_remove(self, player: str) -> bool:
        key = (player or "").strip().lower()
        with self._lock:
            if key not in self.config.blacklisted_players:
                return False
            remaining = [p for p in self.config.blacklisted_players if p != key]
            self.config = self.config.model_copy(update={"blacklisted_players": remaining})
            self.save()
        logger.info(f"[Config] blacklist remove | player={key}")
        return True

    # ---------- colors ----------

    def color_of(self, player: str) -> str:
        return self.config.username_colors.get((player or "").strip().lower(), "white")

    def set_color(self, player: str, color: str) -> bool:
        key = (player or "").strip().lower()
        value = (color or "").strip().lower()
        if not key or not is_chat_color(value):
            return False
        with self._lock:
            colors = {**self.config.username_colors, key: value}
            self.config = self.config.model_copy(update={"username_colors": colors})
            self.save()
        logger.info(f"[Config] color set | player={key} color={value}")
        return True

    def reset_color(self, player: str) -> bool:
        key = (player or "").strip().lower()
        with self._lock:
            if key not in self.config.username_colors:
                return False
            colors = {k: v for k, v in self.config.username_colors.items() if k != key}
            self.config = self.config.model_copy(update={"username_colors": colors})
            self.save()
        logger.info(f"[Config] color reset | player={key}")
        return True

    # ---------- daily reset time ----------

    def set_daily_reset_time(self, value: str) -> bool:
        text = (value or "").strip()
        if not is_valid_reset_time(text):
            return False
        with self._lock:
            self.config = self.config.model_copy(update={"daily_reset_time": text})
            self.save()
        self._push_reset_time()
        return True
