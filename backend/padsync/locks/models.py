# backend/padsync/locks/models.py
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, DateTime, ForeignKey
from ..shared.db import Base


class EditLock(Base):
    __tablename__ = "edit_locks"
    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    # 리소스당 1행. 만료된 행은 다음 갱신 때 덮어씀
    resource_key: Mapped[str] = mapped_column(String(64), unique=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    # 마지막 갱신 시각 (UTC, naive)
    acquired_at: Mapped[datetime] = mapped_column(DateTime)
    expires_at: Mapped[datetime] = mapped_column(DateTime, index=True)
