from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional

from statscore.core.dependencies import Services, get_services
from statscore.core.responses import ErrorCodes, error, success
from statscore.core.schemas import DailyPlaytime, LeaderboardRow, LineFormat, ResolvedName
from statscore.core.utils import format_daily_playtime, normalize_uuid
from statscore.services.chat import ENCODERS, ListSink

router = APIRouter(prefix="/api", tags=["leaderboard"])


def _exclusions(services: Services, extra: Optional[List[str]]) -> set:
    return set(services.config.blacklisted_players) | {x.lower() for x in (extra or [])}


@router.get("/leaderboard")
async def get_leaderboard(
    format: LineFormat = Query(LineFormat.PLAIN, description="plain, legacy (§ codes) or json (text components)"),
    exclude: Optional[List[str]] = Query(None, description="extra names to hide, on top of the blacklist"),
    services: Services = Depends(get_services),
):
    """The rendered board, one element per chat line, top to bottom."""
    excluded = _exclusions(services, exclude)
    ranking = await services.aggregator.build_ranking(excluded)
    sink = ListSink()
    services.renderer.display(ranking, sink, colors=services.config.username_colors, exclusions=excluded)
    encode = ENCODERS[format.value]
    return success({"format": format.value, "lines": [encode(line) for line in sink.lines]})


@router.get("/leaderboard/ranking", response_model=List[LeaderboardRow])
async def get_ranking(
    exclude: Optional[List[str]] = Query(None),
    services: Services = Depends(get_services),
):
    ranking = await services.aggregator.build_ranking(_exclusions(services, exclude))
    return [
        LeaderboardRow(rank=i, uuid=e.uuid, name=e.name, lifetime_hours=e.lifetime_hours, daily_hours=e.daily_hours)
        for i, e in enumerate(ranking, 1)
    ]


def _path_uuid(uuid: str) -> str:
    try:
        return normalize_uuid(uuid)
    except ValueError:
        raise HTTPException(status_code=422, detail=error(ErrorCodes.VALIDATION_ERROR, f"invalid player uuid: {uuid}"))


@router.get("/players/{uuid}/daily", response_model=DailyPlaytime)
def get_daily(uuid: str, services: Services = Depends(get_services)):
    u = _path_uuid(uuid)
    seconds = services.accumulator.get_daily_seconds(u)
    return DailyPlaytime(uuid=u, seconds=seconds, text=format_daily_playtime(seconds))


@router.get("/players/{uuid}/name", response_model=ResolvedName)
async def get_name(uuid: str, services: Services = Depends(get_services)):
    u = _path_uuid(uuid)
    name = await services.resolver.resolve(u)
    return ResolvedName(uuid=u, name=name, online=u in services.sessions)
