# backend/padsync/pads/schemas.py
from pydantic import BaseModel, Field
from typing import Optional


class PadSummaryOut(BaseModel):
    key: str
    title: str


# 위젯 렌더 + 클라이언트 설정
class PadOut(BaseModel):
    key: str
    title: str
    content: str
    nonce: str
    user_id: int
    heartbeat_interval: int


class SaveIn(BaseModel):
    nonce: str = ""
    content: str = Field(max_length=1_000_000)


class SaveOut(BaseModel):
    success: bool
    message: Optional[str] = None
