# services/name_resolver.py

from __future__ import annotations

import asyncio
from typing import Optional

from statscore.core.constants import UNKNOWN_NAME_PREFIX
from statscore.core.logger import logger
from statscore.services.directory import NameDirectory
from statscore.services.identity_cache import IdentityCache
from statscore.services.profile_cache import HostProfileCache
from statscore.services.session_registry import SessionRegistry


def placeholder_name(uuid: str) -> str:
    return f"{UNKNOWN_NAME_PREFIX}{uuid[:8]}"


class NameResolver:
    """UUID -> display name, first hit wins:

    1. live session name (authoritative, not cached here since it can change)
    2. the game server's usercache.json
    3. identity cache
    4. remote directory; a hit is written through to the identity cache
    5. ``Unknown_<first 8 chars of uuid>``

    The local tiers take thread locks and read files, so they run in a worker
    thread together with the write-through. The remote call is awaited with no
    lock held. There are no retries inside one call.
    """

    def __init__(self, sessions: SessionRegistry, cache: IdentityCache,
                 directory: Optional[NameDirectory] = None,
                 profiles: Optional[HostProfileCache] = None):
        self.sessions = sessions
        self.cache = cache
        self.directory = directory
        self.profiles = profiles

    def local_name(self, uuid: str) -> Optional[str]:
        """Live session, host profile cache, then identity cache. Blocking."""
        name = self.sessions.live_name(uuid)
        if name:
            return name
        if self.profiles is not None:
            name = self.profiles.get(uuid)
            if name:
                return name
        return self.cache.get(uuid)

    async def resolve(self, uuid: str) -> str:
        name = await asyncio.to_thread(self.local_name, uuid)
        if name:
            return name

        if self.directory is not None:
            try:
                name = await self.directory.lookup(uuid)
            except Exception as e:
                # a misbehaving directory must not break the leaderboard
                logger.warning(f"[NameResolver] directory error | uuid={uuid} error={e}")
                name = None
            if name:
                await asyncio.to_thread(self.cache.store, uuid, name)
                return name

        name = placeholder_name(uuid)
        logger.debug(f"[NameResolver] unresolved, using placeholder | uuid={uuid} name={name}")
        return name
