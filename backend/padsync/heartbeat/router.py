# backend/padsync/heartbeat/router.py
import time
from typing import Any
from fastapi import APIRouter, Body, Depends
from ..deps import get_lock_manager
from ..shared.config import Settings, get_settings, settings
from ..auth.models import User
from ..auth.utils import current_user
from ..locks.manager import LockManager
from ..pads.registry import PadSpec, get_pads
from .hub import HeartbeatContext, hub

router = APIRouter(prefix=f"{settings.API_PREFIX}/heartbeat", tags=["heartbeat"])


@router.post("")
def heartbeat(
    data: dict[str, Any] | None = Body(None),
    user: User = Depends(current_user),
    manager: LockManager = Depends(get_lock_manager),
    pads: dict[str, PadSpec] = Depends(get_pads),
    cfg: Settings = Depends(get_settings),
) -> dict[str, Any]:
    ctx = HeartbeatContext(user=user, manager=manager, pads=pads)
    response = hub.dispatch(data or {}, ctx)
    response["server_time"] = int(time.time())
    response["heartbeat_interval"] = cfg.HEARTBEAT_INTERVAL_SEC
    return response
