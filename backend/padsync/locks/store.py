# backend/padsync/locks/store.py
"""
잠금 저장소: resource_key -> LockRecord (TTL 포함)

- 만료는 읽을 때 판단 (백그라운드 정리 없음)
- 같은 키의 get/put 은 locked(key) 안에서만 수행
"""
from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Iterator, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import EditLock


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class LockRecord:
    holder_id: int
    acquired_at: datetime
    expires_at: datetime

    @classmethod
    def renewed(cls, holder_id: int, now: datetime, ttl_sec: int) -> "LockRecord":
        return cls(holder_id=holder_id, acquired_at=now, expires_at=now + timedelta(seconds=ttl_sec))

    def is_live(self, now: datetime) -> bool:
        # acquired_at + TTL 시점까지는 유효, 그 이후에만 만료
        return now <= self.expires_at


class KeyedMutex:
    """키별 threading.Lock"""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, threading.Lock())
        with lock:
            yield


# 프로세스 전체에서 공유 (요청마다 새 store 가 만들어져도 같은 뮤텍스)
_PROCESS_MUTEX = KeyedMutex()


class LockStore:
    def __init__(self, mutex: KeyedMutex | None = None) -> None:
        self._mutex = mutex or _PROCESS_MUTEX

    @contextmanager
    def locked(self, key: str) -> Iterator[None]:
        with self._mutex.hold(key):
            yield

    def get(self, key: str, now: datetime) -> Optional[LockRecord]:
        raise NotImplementedError

    def put(self, key: str, record: LockRecord) -> None:
        raise NotImplementedError


class MemoryLockStore(LockStore):
    """단일 프로세스용. 워커가 여러 개면 SqlLockStore 사용"""

    def __init__(self, mutex: KeyedMutex | None = None) -> None:
        super().__init__(mutex or KeyedMutex())
        self._records: dict[str, LockRecord] = {}

    def get(self, key: str, now: datetime) -> Optional[LockRecord]:
        rec = self._records.get(key)
        if rec is None or not rec.is_live(now):
            return None
        return rec

    def put(self, key: str, record: LockRecord) -> None:
        self._records[key] = record

    def clear(self) -> None:
        self._records.clear()


def _naive(value: datetime) -> datetime:
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlLockStore(LockStore):
    """edit_locks 테이블 사용. 키당 1행 (unique), 가능한 DB 에선 행 잠금"""

    def __init__(self, db: Session, mutex: KeyedMutex | None = None) -> None:
        super().__init__(mutex)
        self.db = db

    @contextmanager
    def locked(self, key: str) -> Iterator[None]:
        with self._mutex.hold(key):
            try:
                yield
            finally:
                # FOR UPDATE 행 잠금은 키 뮤텍스와 같이 놓는다 (쓰기 경로는 이미 commit)
                if self.db.in_transaction():
                    self.db.rollback()

    def _row(self, key: str) -> Optional[EditLock]:
        return self.db.scalar(
            select(EditLock).where(EditLock.resource_key == key).with_for_update()
        )

    def get(self, key: str, now: datetime) -> Optional[LockRecord]:
        row = self._row(key)
        if row is None:
            return None
        rec = LockRecord(
            holder_id=row.user_id,
            acquired_at=_aware(row.acquired_at),
            expires_at=_aware(row.expires_at),
        )
        return rec if rec.is_live(now) else None

    def put(self, key: str, record: LockRecord) -> None:
        row = self._row(key)
        if row is None:
            row = EditLock(resource_key=key)
            self.db.add(row)
        row.user_id = record.holder_id
        row.acquired_at = _naive(record.acquired_at)
        row.expires_at = _naive(record.expires_at)
        self.db.commit()


memory_store = MemoryLockStore()
