# backend/padsync/client/controller.py
"""
패드 하나의 클라이언트 측 잠금 상태

UNLOCKED   : 편집 가능 (owned / free 응답)
LOCKED_OUT : 다른 사람이 편집 중. 편집기 비활성 + 서버 내용으로 덮어씀

첫 하트비트 응답 전에는 UNLOCKED 로 시작한다.
"""
from __future__ import annotations

import enum
import logging
import threading
import time
from typing import Any, Callable, Optional, Protocol

import httpx

from .transport import HttpTransport

logger = logging.getLogger(__name__)

REQUEST_FAILED = "Request failed"


class PadState(str, enum.Enum):
    UNLOCKED = "unlocked"
    LOCKED_OUT = "locked_out"


class EditorView(Protocol):
    def set_disabled(self, disabled: bool) -> None: ...

    def show_owner(self, name: Optional[str]) -> None: ...

    def set_text(self, text: str) -> None: ...

    def notify_saved(self, message: str) -> None: ...

    def notify_error(self, message: str) -> None: ...


class NullView:
    def set_disabled(self, disabled: bool) -> None:
        pass

    def show_owner(self, name: Optional[str]) -> None:
        pass

    def set_text(self, text: str) -> None:
        pass

    def notify_saved(self, message: str) -> None:
        pass

    def notify_error(self, message: str) -> None:
        pass


class PadLockController:
    def __init__(
        self,
        key: str,
        transport: HttpTransport,
        *,
        nonce: str,
        content: str = "",
        idle_timeout: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
        view: Optional[EditorView] = None,
    ):
        self.key = key
        self.transport = transport
        self.nonce = nonce
        self.idle_timeout = idle_timeout
        self.clock = clock
        self.view: EditorView = view or NullView()

        self._mu = threading.RLock()
        self._buffer = content
        self._state = PadState.UNLOCKED
        self._owner_name: Optional[str] = None
        self._idle_deadline: Optional[float] = None

    @classmethod
    def bootstrap(cls, key: str, transport: HttpTransport, **kwargs: Any) -> "PadLockController":
        """서버에서 현재 내용과 nonce 를 받아 생성"""
        data = transport.bootstrap(key)
        return cls(key, transport, nonce=data["nonce"], content=data.get("content", ""), **kwargs)

    # ------------------------
    # 상태
    # ------------------------
    @property
    def state(self) -> PadState:
        return self._state

    @property
    def disabled(self) -> bool:
        return self._state == PadState.LOCKED_OUT

    @property
    def owner_name(self) -> Optional[str]:
        return self._owner_name

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def is_editing(self) -> bool:
        with self._mu:
            return self._idle_deadline is not None and self.clock() < self._idle_deadline

    # ------------------------
    # 로컬 입력
    # ------------------------
    def _touch(self) -> None:
        # 타이머는 하나: 입력마다 다시 건다
        self._idle_deadline = self.clock() + self.idle_timeout

    def on_input(self, text: str) -> bool:
        with self._mu:
            if self.disabled:
                return False
            self._buffer = text
            self._touch()
            return True

    def on_focus(self) -> None:
        with self._mu:
            if not self.disabled:
                self._touch()

    # ------------------------
    # 하트비트
    # ------------------------
    def on_heartbeat_send(self, data: dict[str, Any]) -> None:
        data[f"{self.key}_check"] = True
        data[f"{self.key}_is_editing"] = self.is_editing

    def on_heartbeat_tick(self, data: dict[str, Any]) -> None:
        status = data.get(f"{self.key}_status")
        if not status:
            return

        with self._mu:
            if status == "locked":
                self._lock_out(data.get(f"{self.key}_owner"), data.get(f"{self.key}_content"))
            else:
                self._unlock()

    def _lock_out(self, owner: Optional[str], content: Optional[str]) -> None:
        entering = self._state != PadState.LOCKED_OUT
        self._state = PadState.LOCKED_OUT
        self._owner_name = owner
        # 잠겨 있는 동안 편집 의사는 무효
        self._idle_deadline = None
        if entering:
            logger.info("pad %s locked by %s", self.key, owner)
            self.view.set_disabled(True)
        self.view.show_owner(owner)

        # 서버 내용 우선 (로컬 미저장 내용은 버림)
        if content is not None and content != self._buffer:
            self._buffer = content
            self.view.set_text(content)

    def _unlock(self) -> None:
        if self._state == PadState.LOCKED_OUT:
            logger.info("pad %s unlocked", self.key)
            self._state = PadState.UNLOCKED
            self._owner_name = None
            self.view.set_disabled(False)
            self.view.show_owner(None)

    # ------------------------
    # 저장
    # ------------------------
    def save(self) -> bool:
        content = self._buffer
        try:
            result = self.transport.save(self.key, self.nonce, content)
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("save of %s failed: %s", self.key, exc)
            self.view.notify_error(REQUEST_FAILED)
            return False

        message = result.get("message") or ""
        if result.get("success"):
            self.view.notify_saved(message or "Saved!")
            return True
        self.view.notify_error(message or REQUEST_FAILED)
        return False
