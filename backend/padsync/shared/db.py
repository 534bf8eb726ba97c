# backend/padsync/shared/db.py
from __future__ import annotations
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy import create_engine
from .config import settings


class Base(DeclarativeBase):
    pass


DB_URL = settings.DATABASE_URL
connect_args = {"check_same_thread": False} if DB_URL.startswith("sqlite") else {}
engine = create_engine(DB_URL, echo=False, future=True, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)


def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db() -> None:
    """dev 전용: alembic 없이 테이블 생성"""
    # 모델 등록을 위해 import
    from ..auth import models as _auth  # noqa: F401
    from ..locks import models as _locks  # noqa: F401
    from ..pads import models as _pads  # noqa: F401

    Base.metadata.create_all(bind=engine)
