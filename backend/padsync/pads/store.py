# backend/padsync/pads/store.py
from typing import Optional
from sqlalchemy import select
from sqlalchemy.orm import Session
from .models import SharedDocument


class DocumentStore:
    """key -> content (영구 저장). 없는 키는 빈 문자열"""

    def __init__(self, db: Session):
        self.db = db

    def _row(self, key: str) -> Optional[SharedDocument]:
        return self.db.scalar(select(SharedDocument).where(SharedDocument.key == key))

    def get(self, key: str) -> str:
        row = self._row(key)
        return row.content if row else ""

    def put(self, key: str, content: str, user_id: int | None = None) -> None:
        row = self._row(key)
        if row is None:
            row = SharedDocument(key=key)
            self.db.add(row)
        row.content = content
        row.updated_by = user_id
        # 한 번의 commit 으로 통째 교체
        self.db.commit()
