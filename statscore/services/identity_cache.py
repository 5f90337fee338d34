# services/identity_cache.py
# Durable UUID -> last known player name map (playtime_usernames.json).
# Entries are overwritten, never deleted.

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Optional

from statscore.core.locks import RWLock
from statscore.core.logger import logger
from statscore.core.utils import normalize_uuid, write_json_atomic


class IdentityCache:
    def __init__(self, cache_file: Path):
        self.cache_file = cache_file
        self._names: Dict[str, str] = {}
        self._lock = RWLock()

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._names)

    def get(self, uuid: str) -> Optional[str]:
        with self._lock.read():
            return self._names.get(uuid)

    def snapshot(self) -> Dict[str, str]:
        with self._lock.read():
            return dict(self._names)

    def store(self, uuid: str, name: str) -> None:
        """Remember a confirmed name and write the whole map through to disk."""
        if not name:
            return
        with self._lock.write():
            if self._names.get(uuid) == name:
                return
            self._names[uuid] = name
            self._save_locked()
        logger.debug(f"[IdentityCache] stored | uuid={uuid} name={name}")

    def load(self) -> int:
        """Read the cache file. A missing or unreadable file leaves the cache empty."""
        loaded: Dict[str, str] = {}
        if self.cache_file.exists():
            try:
                raw = json.loads(self.cache_file.read_text(encoding="utf-8"))
                if not isinstance(raw, dict):
                    raise ValueError("username cache is not a JSON object")
                for key, name in raw.items():
                    try:
                        uuid = normalize_uuid(key)
                    except ValueError:
                        logger.warning(f"[IdentityCache] invalid uuid in cache | key={key}")
                        continue
                    if isinstance(name, str) and name:
                        loaded[uuid] = name
            except (OSError, ValueError) as e:
                logger.error(f"[IdentityCache] failed to load {self.cache_file.name}: {e}")
                loaded = {}
        with self._lock.write():
            self._names = loaded
        logger.info(f"[IdentityCache] loaded | entries={len(loaded)}")
        return len(loaded)

    def _save_locked(self) -> None:
        try:
            write_json_atomic(self.cache_file, dict(sorted(self._names.items())))
        except OSError as e:
            logger.error(f"[IdentityCache] failed to save {self.cache_file.name}: {e}")
