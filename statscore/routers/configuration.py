from fastapi import APIRouter, Depends, HTTPException

from statscore.core.dependencies import Services, get_services
from statscore.core.responses import ErrorCodes, error, success
from statscore.core.schemas import ColorUpdate, ConfigView, ResetTimeUpdate

router = APIRouter(prefix="/api/config", tags=["configuration"])


def _view(services: Services) -> dict:
    cfg = services.config
    return ConfigView(
        daily_reset_time=cfg.daily_reset_time,
        username_colors=cfg.username_colors,
        blacklisted_players=cfg.blacklist(),
        active_reset_time=services.accumulator.scheduler.reset_time_text,
    ).model_dump()


@router.get("")
def get_config(services: Services = Depends(get_services)):
    return success(_view(services))


@router.post("/reload")
def reload_config(services: Services = Depends(get_services)):
    """Re-read statscore_config.json. A broken file leaves the defaults in place."""
    ok = services.config.reload()
    if not ok:
        return success(_view(services), message="config file unreadable, defaults loaded")
    return success(_view(services), message="config reloaded")


# --- blacklist ---

@router.get("/blacklist")
def list_blacklist(services: Services = Depends(get_services)):
    return success(services.config.blacklist())


@router.put("/blacklist/{player}")
def add_blacklist(player: str, services: Services = Depends(get_services)):
    if not services.config.blacklist_add(player):
        raise HTTPException(status_code=409, detail=error(ErrorCodes.CONFLICT, f"{player} is already blacklisted"))
    return success(services.config.blacklist(), message=f"added {player} to blacklist")


@router.delete("/blacklist/{player}")
def remove_blacklist(player: str, services: Services = Depends(get_services)):
    if not services.config.blacklist_remove(player):
        raise HTTPException(status_code=404, detail=error(ErrorCodes.NOT_FOUND, f"{player} is not blacklisted"))
    return success(services.config.blacklist(), message=f"removed {player} from blacklist")


# --- username colors ---

@router.get("/colors/{player}")
def show_color(player: str, services: Services = Depends(get_services)):
    return success({"player": player.lower(), "color": services.config.color_of(player)})


@router.put("/colors/{player}")
def set_color(player: str, payload: ColorUpdate, services: Services = Depends(get_services)):
    if not services.config.set_color(player, payload.color):
        raise HTTPException(status_code=422, detail=error(ErrorCodes.VALIDATION_ERROR, f"invalid color: {payload.color}"))
    return success({"player": player.lower(), "color": services.config.color_of(player)})


@router.delete("/colors/{player}")
def reset_color(player: str, services: Services = Depends(get_services)):
    if not services.config.reset_color(player):
        raise HTTPException(status_code=404, detail=error(ErrorCodes.NOT_FOUND, f"{player}'s color is already default"))
    return success({"player": player.lower(), "color": services.config.color_of(player)})


# --- daily reset time ---

@router.get("/daily-reset-time")
def show_reset_time(services: Services = Depends(get_services)):
    return success({
        "daily_reset_time": services.config.daily_reset_time,
        "active": services.accumulator.scheduler.reset_time_text,
    })


@router.put("/daily-reset-time")
def set_reset_time(payload: ResetTimeUpdate, services: Services = Depends(get_services)):
    if not services.config.set_daily_reset_time(payload.time):
        raise HTTPException(status_code=422,
                            detail=error(ErrorCodes.VALIDATION_ERROR, "invalid time format, use HH:MM:SS (UTC)"))
    return success({"daily_reset_time": services.config.daily_reset_time,
                    "active": services.accumulator.scheduler.reset_time_text})
