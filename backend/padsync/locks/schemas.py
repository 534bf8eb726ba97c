# backend/padsync/locks/schemas.py
from pydantic import BaseModel
from datetime import datetime


class LockOut(BaseModel):
    resource_key: str
    user_id: int
    user_name: str
    acquired_at: datetime  # 마지막 갱신
    expires_at: datetime
    remaining_sec: int
