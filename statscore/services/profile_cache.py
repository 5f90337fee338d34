# services/profile_cache.py
# Read-only view of the game server's own usercache.json:
# [{"name": "...", "uuid": "...", "expiresOn": "..."}, ...]
# The file belongs to the host; it is re-read only when its mtime changes.

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Dict, Optional

from statscore.core.logger import logger
from statscore.core.utils import normalize_uuid


class HostProfileCache:
    def __init__(self, usercache_file: Path):
        self.usercache_file = usercache_file
        self._names: Dict[str, str] = {}
        self._mtime: Optional[float] = None
        self._lock = threading.Lock()

    def get(self, uuid: str) -> Optional[str]:
        with self._lock:
            self._refresh_locked()
            return self._names.get(uuid)

    def _refresh_locked(self) -> None:
        try:
            mtime = self.usercache_file.stat().st_mtime
        except OSError:
            self._names, self._mtime = {}, None
            return
        if mtime == self._mtime:
            return
        names: Dict[str, str] = {}
        try:
            raw = json.loads(self.usercache_file.read_text(encoding="utf-8"))
            if not isinstance(raw, list):
                raise ValueError("usercache is not a JSON list")
            for item in raw:
                if not isinstance(item, dict):
                    continue
                name = item.get("name")
                try:
                    uuid = normalize_uuid(item.get("uuid"))
                except ValueError:
                    continue
                if isinstance(name, str) and name:
                    names[uuid] = name
        except (OSError, ValueError) as e:
            logger.warning(f"[ProfileCache] failed to read {self.usercache_file.name}: {e}")
        self._names, self._mtime = names, mtime
        logger.debug(f"[ProfileCache] loaded {self.usercache_file.name} | entries={len(names)}")
