# services/leaderboard.py
# Ranking: online players (live counters) merged with offline players
# (stats files), names resolved through the NameResolver chain.

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from statscore.core.logger import logger
from statscore.core.utils import ticks_to_hours
from statscore.services.name_resolver import NameResolver
from statscore.services.playtime_tracker import PlaytimeAccumulator
from statscore.services.session_registry import LiveSession, SessionRegistry
from statscore.services.stats_store import StatsStore, StoredPlaytime


@dataclass(frozen=True)
class LeaderboardEntry:
    name: str
    lifetime_hours: float
    daily_hours: float
    uuid: str

    @property
    def daily_seconds(self) -> float:
        return self.daily_hours * 3600.0


def normalize_exclusions(names: Optional[Iterable[str]]) -> frozenset:
    return frozenset((n or "").strip().lower() for n in (names or ()) if (n or "").strip())


def is_excluded(name: str, exclusions: frozenset) -> bool:
    return (name or "").lower() in exclusions


class LeaderboardAggregator:
    def __init__(self, sessions: SessionRegistry, stats: StatsStore,
                 accumulator: PlaytimeAccumulator, resolver: NameResolver):
        self.sessions = sessions
        self.stats = stats
        self.accumulator = accumulator
        self.resolver = resolver

    def _collect(self) -> Tuple[List[LiveSession], List[StoredPlaytime], Dict[str, float]]:
        return self.sessions.snapshot(), list(self.stats.iter_playtimes()), self.accumulator.daily_snapshot()

    async def build_ranking(self, exclusions: Optional[Iterable[str]] = None) -> List[LeaderboardEntry]:
        """Entries sorted by lifetime hours, highest first.

        Ties keep discovery order: online players in connect order, then
        offline players in stats file order.
        """
        excluded = normalize_exclusions(exclusions)
        entries: List[LeaderboardEntry] = []

        # file reads and lock waits stay off the event loop
        online, stored_rows, daily = await asyncio.to_thread(self._collect)
        online_ids = {s.uuid for s in online}
        for s in online:
            entries.append(LeaderboardEntry(
                name=s.name,
                lifetime_hours=ticks_to_hours(s.counter),
                daily_hours=daily.get(s.uuid, 0.0) / 3600.0,
                uuid=s.uuid,
            ))

        offline = 0
        for stored in stored_rows:
            if stored.uuid in online_ids:
                continue
            name = await self.resolver.resolve(stored.uuid)
            entries.append(LeaderboardEntry(
                name=name,
                lifetime_hours=ticks_to_hours(stored.ticks),
                daily_hours=daily.get(stored.uuid, 0.0) / 3600.0,
                uuid=stored.uuid,
            ))
            offline += 1

        ranked = [e for e in entries if not is_excluded(e.name, excluded)]
        ranked.sort(key=lambda e: e.lifetime_hours, reverse=True)
        logger.debug(
            f"[Leaderboard] ranking built | online={len(online)} offline={offline} "
            f"excluded={len(entries) - len(ranked)} total={len(ranked)}"
        )
        return ranked
