# backend/padsync/pads/router.py
from fastapi import APIRouter, Depends, HTTPException
from ..deps import get_documents, get_lock_manager
from ..shared.config import Settings, get_settings, settings
from ..auth.models import User
from ..auth.utils import create_nonce, current_user, verify_nonce
from ..locks.manager import LockManager
from .registry import PadSpec, get_pad, get_pads
from .schemas import PadOut, PadSummaryOut, SaveIn, SaveOut
from .service import save_pad
from .store import DocumentStore

router = APIRouter(prefix=f"{settings.API_PREFIX}/pads", tags=["pads"])


@router.get("", response_model=list[PadSummaryOut])
def list_pads(pads: dict[str, PadSpec] = Depends(get_pads), _: User = Depends(current_user)):
    return [PadSummaryOut(key=p.key, title=p.title) for p in pads.values()]


@router.get("/{key}", response_model=PadOut)
def get_pad_view(
    pad: PadSpec = Depends(get_pad),
    docs: DocumentStore = Depends(get_documents),
    user: User = Depends(current_user),
    cfg: Settings = Depends(get_settings),
):
    return PadOut(
        key=pad.key,
        title=pad.title,
        content=docs.get(pad.key),
        nonce=create_nonce(user.id, pad.save_action, cfg),
        user_id=user.id,
        heartbeat_interval=cfg.HEARTBEAT_INTERVAL_SEC,
    )


@router.post("/{key}/save", response_model=SaveOut)
def save(
    payload: SaveIn,
    pad: PadSpec = Depends(get_pad),
    user: User = Depends(current_user),
    manager: LockManager = Depends(get_lock_manager),
    docs: DocumentStore = Depends(get_documents),
    cfg: Settings = Depends(get_settings),
):
    # nonce 불일치는 재시도 없이 실패
    if not verify_nonce(payload.nonce, user.id, pad.save_action, cfg):
        raise HTTPException(status_code=403, detail="Invalid nonce")

    result = save_pad(manager, docs, pad.key, user.id, payload.content)
    return SaveOut(success=result.ok, message=result.message)
