# services/directory.py
# Remote name directory (Mojang session server). Every lookup is bounded by a
# timeout and answers None on any failure; the resolver falls through on None.

from __future__ import annotations

from typing import Optional, Protocol

import httpx

from statscore.core.constants import MOJANG_PROFILE_URL, NAME_LOOKUP_TIMEOUT
from statscore.core.logger import logger


class NameDirectory(Protocol):
    async def lookup(self, uuid: str) -> Optional[str]:
        ...

    async def aclose(self) -> None:
        ...


class MojangDirectory:
    def __init__(self, base_url: str = MOJANG_PROFILE_URL, timeout: float = NAME_LOOKUP_TIMEOUT,
                 client: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def lookup(self, uuid: str) -> Optional[str]:
        # the API wants the UUID without hyphens
        url = f"{self.base_url}/{uuid.replace('-', '')}"
        try:
            r = await self._client.get(url, timeout=self.timeout)
        except httpx.HTTPError as e:
            logger.warning(f"[Directory] lookup failed | uuid={uuid} error={type(e).__name__}: {e}")
            return None
        if r.status_code != 200:
            logger.debug(f"[Directory] lookup miss | uuid={uuid} status={r.status_code}")
            return None
        try:
            data = r.json()
        except ValueError:
            logger.warning(f"[Directory] malformed body | uuid={uuid}")
            return None
        name = data.get("name") if isinstance(data, dict) else None
        if isinstance(name, str) and name:
            logger.debug(f"[Directory] lookup ok | uuid={uuid} name={name}")
            return name
        logger.warning(f"[Directory] response without name | uuid={uuid}")
        return None

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
