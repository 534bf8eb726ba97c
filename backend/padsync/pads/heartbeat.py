# backend/padsync/pads/heartbeat.py
from typing import Any
from ..heartbeat.hub import HeartbeatContext, flag
from ..locks.manager import LockStatus


def receive_pads(data: dict[str, Any], response: dict[str, Any], ctx: HeartbeatContext) -> None:
    """<key>_check 가 온 패드마다 잠금 판정 결과를 응답에 추가"""
    for key in ctx.pads:
        if not flag(data.get(f"{key}_check")):
            continue
        verdict = ctx.manager.evaluate(key, ctx.user.id, flag(data.get(f"{key}_is_editing")))
        response[f"{key}_status"] = verdict.status.value
        if verdict.status == LockStatus.LOCKED:
            response[f"{key}_owner"] = verdict.owner_name
            # 보는 사람도 최신 내용을 받도록
            response[f"{key}_content"] = verdict.content or ""
