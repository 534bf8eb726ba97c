# backend/padsync/auth/utils.py
from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session
from passlib.hash import bcrypt
import jwt, datetime as dt
from ..shared.config import Settings, get_settings
from ..shared.db import get_db
from .models import User

FALLBACK_NAME = "Another user"

# 토큰 종류. 같은 키로 서명하므로 서로 대신 쓰이지 않게 구분
ACCESS_TYPE = "access"
NONCE_TYPE = "nonce"


def hash_password(raw: str) -> str:
    return bcrypt.hash(raw)


def verify_password(raw: str, hashed: str) -> bool:
    return bcrypt.verify(raw, hashed)


def create_token(user_id: int, cfg: Settings | None = None) -> str:
    cfg = cfg or get_settings()
    now = dt.datetime.now(dt.timezone.utc)
    payload = {"sub": str(user_id), "typ": ACCESS_TYPE, "iat": now, "exp": now + dt.timedelta(minutes=cfg.ACCESS_TTL_MIN)}
    return jwt.encode(payload, cfg.JWT_SECRET, algorithm=cfg.JWT_ALG)


def _bearer(request: Request) -> str:
    authz = request.headers.get("authorization")
    if not authz or not authz.lower().startswith("bearer "):
        raise HTTPException(401, "Not authenticated")
    return authz.split(" ", 1)[1].strip()


def current_user(
    request: Request,
    db: Session = Depends(get_db),
    cfg: Settings = Depends(get_settings),
) -> User:
    token = _bearer(request)
    try:
        data = jwt.decode(token, cfg.JWT_SECRET, algorithms=[cfg.JWT_ALG])
    except jwt.ExpiredSignatureError:
        raise HTTPException(401, "Token expired")
    except jwt.InvalidTokenError:
        raise HTTPException(401, "Invalid token")
    if data.get("typ") != ACCESS_TYPE:
        raise HTTPException(401, "Invalid token")
    try:
        uid = int(data["sub"])
    except (KeyError, TypeError, ValueError):
        raise HTTPException(401, "Invalid token")
    user = db.get(User, uid)
    if not user or not user.is_active:
        raise HTTPException(401, "User disabled")
    return user


# ------------------------
# nonce (저장 요청 위조 방지)
# ------------------------
def create_nonce(user_id: int, action: str, cfg: Settings | None = None) -> str:
    """user + action 에 묶인 짧은 수명의 서명 토큰"""
    cfg = cfg or get_settings()
    now = dt.datetime.now(dt.timezone.utc)
    payload = {
        "sub": str(user_id),
        "typ": NONCE_TYPE,
        "act": action,
        "iat": now,
        "exp": now + dt.timedelta(seconds=cfg.NONCE_TTL_SEC),
    }
    return jwt.encode(payload, cfg.JWT_SECRET, algorithm=cfg.JWT_ALG)


def verify_nonce(nonce: str, user_id: int, action: str, cfg: Settings | None = None) -> bool:
    cfg = cfg or get_settings()
    if not nonce:
        return False
    try:
        data = jwt.decode(nonce, cfg.JWT_SECRET, algorithms=[cfg.JWT_ALG])
    except jwt.InvalidTokenError:
        return False
    return (
        data.get("typ") == NONCE_TYPE
        and data.get("sub") == str(user_id)
        and data.get("act") == action
    )


def display_name(db: Session, user_id: int) -> str:
    u = db.get(User, user_id)
    return u.name if u else FALLBACK_NAME
