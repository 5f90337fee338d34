# services/session_registry.py
# Live session table, kept up to date from the host's connect/sample/disconnect events.

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional

from statscore.core.locks import RWLock


@dataclass(frozen=True)
class LiveSession:
    uuid: str
    name: str
    counter: int


class SessionRegistry:
    def __init__(self):
        self._sessions: Dict[str, LiveSession] = {}
        self._lock = RWLock()

    def connect(self, uuid: str, name: str, counter: int) -> None:
        with self._lock.write():
            self._sessions.pop(uuid, None)  # reconnect moves the player to the end
            self._sessions[uuid] = LiveSession(uuid, name, counter)

    def update_counter(self, uuid: str, counter: int) -> None:
        with self._lock.write():
            s = self._sessions.get(uuid)
            if s is not None:
                self._sessions[uuid] = LiveSession(uuid, s.name, counter)

    def disconnect(self, uuid: str) -> Optional[LiveSession]:
        with self._lock.write():
            return self._sessions.pop(uuid, None)

    def get(self, uuid: str) -> Optional[LiveSession]:
        with self._lock.read():
            return self._sessions.get(uuid)

    def live_name(self, uuid: str) -> Optional[str]:
        s = self.get(uuid)
        return s.name if s else None

    def snapshot(self) -> List[LiveSession]:
        """Sessions in connect order."""
        with self._lock.read():
            return list(self._sessions.values())

    def __contains__(self, uuid: str) -> bool:
        with self._lock.read():
            return uuid in self._sessions

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._sessions)
