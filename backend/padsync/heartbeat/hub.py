# backend/padsync/heartbeat/hub.py
"""
하트비트 채널: 클라이언트가 보낸 key/value 를 수신자들에게 넘기고,
수신자들이 응답 dict 에 필드를 추가한다.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from ..auth.models import User
from ..locks.manager import LockManager
from ..pads.registry import PadSpec


@dataclass
class HeartbeatContext:
    user: User
    manager: LockManager
    pads: dict[str, PadSpec]


Receiver = Callable[[dict[str, Any], dict[str, Any], HeartbeatContext], None]

_TRUTHY = {"1", "true", "yes", "on"}


def flag(value: Any) -> bool:
    """폼/JSON 어느 쪽에서 와도 같은 의미가 되도록"""
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


class HeartbeatHub:
    def __init__(self) -> None:
        self._receivers: list[Receiver] = []

    def register(self, receiver: Receiver) -> Receiver:
        if receiver not in self._receivers:
            self._receivers.append(receiver)
        return receiver

    def dispatch(self, data: dict[str, Any], ctx: HeartbeatContext) -> dict[str, Any]:
        response: dict[str, Any] = {}
        for receiver in self._receivers:
            receiver(data, response, ctx)
        return response


hub = HeartbeatHub()
