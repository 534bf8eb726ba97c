# backend/padsync/deps.py
from datetime import datetime
from typing import Callable
from fastapi import Depends
from sqlalchemy.orm import Session
from .shared.config import Settings, get_settings
from .shared.db import get_db
from .auth.utils import display_name
from .locks.manager import LockManager
from .locks.store import LockStore, SqlLockStore, memory_store, now_utc
from .pads.store import DocumentStore

__all__ = ["get_db", "get_clock", "get_lock_store", "get_documents", "get_lock_manager"]


def get_clock() -> Callable[[], datetime]:
    return now_utc


def get_lock_store(db: Session = Depends(get_db), cfg: Settings = Depends(get_settings)) -> LockStore:
    if cfg.LOCK_BACKEND == "memory":
        return memory_store
    return SqlLockStore(db)


def get_documents(db: Session = Depends(get_db)) -> DocumentStore:
    return DocumentStore(db)


def get_lock_manager(
    db: Session = Depends(get_db),
    store: LockStore = Depends(get_lock_store),
    docs: DocumentStore = Depends(get_documents),
    clock: Callable[[], datetime] = Depends(get_clock),
    cfg: Settings = Depends(get_settings),
) -> LockManager:
    return LockManager(
        store,
        owner_name=lambda uid: display_name(db, uid),
        read_content=docs.get,
        ttl_sec=cfg.LOCK_TTL_SEC,
        clock=clock,
    )
