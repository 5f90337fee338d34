from fastapi import APIRouter, Depends

from statscore.core.dependencies import Services, get_services
from statscore.core.logger import logger
from statscore.core.responses import success
from statscore.core.schemas import PlayerConnect, PlayerDisconnect, PlayerSample, SampleBatch, SampleResult

router = APIRouter(prefix="/api/events", tags=["events"])


@router.post("/connect")
def player_connect(payload: PlayerConnect, services: Services = Depends(get_services)):
    """Player logged in: anchor the counter, open the live session, remember the name."""
    services.sessions.connect(payload.uuid, payload.name, payload.counter)
    services.accumulator.on_player_connect(payload.uuid, payload.counter)
    services.identity_cache.store(payload.uuid, payload.name)
    logger.info(f"[Events] connect | uuid={payload.uuid} name={payload.name} online={len(services.sessions)}")
    return success({"uuid": payload.uuid, "online": len(services.sessions)})


def _apply_sample(services: Services, sample: PlayerSample) -> SampleResult:
    added = services.accumulator.on_periodic_sample(sample.uuid, sample.counter)
    services.sessions.update_counter(sample.uuid, sample.counter)
    return SampleResult(
        uuid=sample.uuid,
        added_seconds=added,
        daily_seconds=services.accumulator.get_daily_seconds(sample.uuid),
    )


@router.post("/sample")
def player_sample(payload: PlayerSample, services: Services = Depends(get_services)):
    return success(_apply_sample(services, payload).model_dump())


@router.post("/samples")
def player_samples(payload: SampleBatch, services: Services = Depends(get_services)):
    """Several samples in one request, applied in order."""
    results = [_apply_sample(services, s).model_dump() for s in payload.samples]
    return success(results)


@router.post("/disconnect")
def player_disconnect(payload: PlayerDisconnect, services: Services = Depends(get_services)):
    """Final sample for the player, then the daily snapshot is persisted."""
    services.accumulator.on_player_disconnect(payload.uuid, payload.counter)
    services.sessions.disconnect(payload.uuid)
    daily = services.accumulator.get_daily_seconds(payload.uuid)
    logger.info(f"[Events] disconnect | uuid={payload.uuid} daily_seconds={daily:.1f} online={len(services.sessions)}")
    return success({"uuid": payload.uuid, "daily_seconds": daily})
