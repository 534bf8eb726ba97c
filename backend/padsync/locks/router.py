# backend/padsync/locks/router.py
from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from ..deps import get_db, get_lock_manager
from ..shared.config import settings
from ..auth.models import User
from ..auth.utils import current_user, display_name
from ..pads.registry import PadSpec, get_pad
from .manager import LockManager
from .schemas import LockOut
from .store import LockRecord

router = APIRouter(prefix=f"{settings.API_PREFIX}/locks", tags=["locks"])


def _to_out(db: Session, key: str, lock: LockRecord, now) -> LockOut:
    rem = int((lock.expires_at - now).total_seconds())
    return LockOut(
        resource_key=key,
        user_id=lock.holder_id,
        user_name=display_name(db, lock.holder_id),
        acquired_at=lock.acquired_at,
        expires_at=lock.expires_at,
        remaining_sec=max(rem, 0),
    )


# 조회 전용. 잠금 획득/갱신은 하트비트로만
@router.get("/{key}", response_model=Optional[LockOut])
def get_lock(
    pad: PadSpec = Depends(get_pad),
    db: Session = Depends(get_db),
    manager: LockManager = Depends(get_lock_manager),
    _: User = Depends(current_user),
):
    lock = manager.current(pad.key)
    if not lock:
        return None
    return _to_out(db, pad.key, lock, manager.clock())
