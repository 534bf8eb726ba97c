# backend/padsync/locks/manager.py
"""
폴링(하트비트) 1회마다 잠금 판정

- 다른 사람이 유효한 잠금 보유 -> LOCKED (잠금은 건드리지 않음)
- 비어 있거나 내 잠금 + 편집 중 -> 갱신 후 OWNED
- 그 외 -> FREE (내 잠금이었다면 TTL 로 자연 만료)

명시적인 해제는 없음. TTL 만료가 유일한 해제 수단.
"""
from __future__ import annotations

import enum
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, Optional

from .store import LockRecord, LockStore, now_utc

logger = logging.getLogger(__name__)


class LockStatus(str, enum.Enum):
    LOCKED = "locked"
    OWNED = "owned"
    FREE = "free"


@dataclass(frozen=True)
class LockVerdict:
    status: LockStatus
    owner_name: Optional[str] = None
    content: Optional[str] = None


class LockManager:
    def __init__(
        self,
        store: LockStore,
        *,
        owner_name: Callable[[int], str],
        read_content: Callable[[str], str],
        ttl_sec: int = 30,
        clock: Callable[[], datetime] = now_utc,
    ):
        self.store = store
        self.owner_name = owner_name
        self.read_content = read_content
        self.ttl_sec = ttl_sec
        self.clock = clock

    def _blocking(self, key: str, caller_id: int) -> Optional[LockRecord]:
        """caller 가 아닌 사람의 유효한 잠금"""
        rec = self.store.get(key, self.clock())
        if rec and rec.holder_id != caller_id:
            return rec
        return None

    def evaluate(self, key: str, caller_id: int, is_editing: bool) -> LockVerdict:
        with self.store.locked(key):
            now = self.clock()
            rec = self.store.get(key, now)
            if rec and rec.holder_id != caller_id:
                return LockVerdict(
                    LockStatus.LOCKED,
                    owner_name=self.owner_name(rec.holder_id),
                    content=self.read_content(key),
                )

            if not is_editing:
                return LockVerdict(LockStatus.FREE)

            self.store.put(key, LockRecord.renewed(caller_id, now, self.ttl_sec))
            if rec is None:
                logger.info("lock %s acquired by user %s", key, caller_id)
            else:
                logger.debug("lock %s renewed by user %s", key, caller_id)
            return LockVerdict(LockStatus.OWNED)

    def current(self, key: str) -> Optional[LockRecord]:
        with self.store.locked(key):
            return self.store.get(key, self.clock())

    @contextmanager
    def writable(self, key: str, caller_id: int) -> Iterator[bool]:
        """키 뮤텍스를 잡은 채로 쓰기 가능 여부를 넘김 (확인~저장 사이 끼어들기 방지)"""
        with self.store.locked(key):
            yield self._blocking(key, caller_id) is None

    def check_writable(self, key: str, caller_id: int) -> bool:
        with self.writable(key, caller_id) as ok:
            return ok
