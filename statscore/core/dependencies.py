# statscore/core/dependencies.py

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from fastapi import Request

from statscore.core.constants import (
    CONFIG_FILE_NAME, DAILY_PLAYTIME_FILE_NAME, SERVER_USERCACHE_PATH, STORAGE_ROOT_PATH, USERNAME_CACHE_FILE_NAME,
    WORLD_STATS_PATH,
)
from statscore.core.logger import logger
from statscore.core.utils import utc_now
from statscore.services.config_manager import ConfigManager
from statscore.services.directory import MojangDirectory, NameDirectory
from statscore.services.identity_cache import IdentityCache
from statscore.services.leaderboard import LeaderboardAggregator
from statscore.services.leaderboard_renderer import LeaderboardRenderer
from statscore.services.name_resolver import NameResolver
from statscore.services.playtime_tracker import PlaytimeAccumulator
from statscore.services.profile_cache import HostProfileCache
from statscore.services.session_registry import SessionRegistry
from statscore.services.stats_store import StatsStore


@dataclass
class Services:
    sessions: SessionRegistry
    identity_cache: IdentityCache
    directory: Optional[NameDirectory]
    resolver: NameResolver
    accumulator: PlaytimeAccumulator
    stats: StatsStore
    config: ConfigManager
    aggregator: LeaderboardAggregator
    renderer: LeaderboardRenderer

    def startup(self) -> None:
        self.identity_cache.load()
        self.accumulator.load()
        self.config.load()
        logger.info(
            f"[Services] started | cached_names={len(self.identity_cache)} "
            f"colors={len(self.config.username_colors)} blacklisted={len(self.config.blacklisted_players)} "
            f"reset={self.accumulator.scheduler.reset_time_text} UTC"
        )

    async def shutdown(self) -> None:
        self.accumulator.save()
        if self.directory is not None:
            await self.directory.aclose()
        logger.info("[Services] stopped, daily playtime saved")


def build_services(storage_path: Path = STORAGE_ROOT_PATH, stats_path: Path = WORLD_STATS_PATH,
                   directory: Optional[NameDirectory] = None, clock: Callable = utc_now,
                   usercache_path: Path = SERVER_USERCACHE_PATH) -> Services:
    """Wire every service explicitly. ``directory=None`` uses the Mojang session server."""
    storage_path.mkdir(parents=True, exist_ok=True)
    sessions = SessionRegistry()
    identity_cache = IdentityCache(storage_path / USERNAME_CACHE_FILE_NAME)
    directory = directory if directory is not None else MojangDirectory()
    resolver = NameResolver(sessions, identity_cache, directory, HostProfileCache(usercache_path))
    accumulator = PlaytimeAccumulator(storage_path / DAILY_PLAYTIME_FILE_NAME, clock=clock)
    stats = StatsStore(stats_path)
    config = ConfigManager(storage_path / CONFIG_FILE_NAME, on_reset_time=accumulator.set_reset_time)
    aggregator = LeaderboardAggregator(sessions, stats, accumulator, resolver)
    return Services(
        sessions=sessions,
        identity_cache=identity_cache,
        directory=directory,
        resolver=resolver,
        accumulator=accumulator,
        stats=stats,
        config=config,
        aggregator=aggregator,
        renderer=LeaderboardRenderer(),
    )


def get_services(request: Request) -> Services:
    return request.app.state.services
