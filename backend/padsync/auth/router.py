# backend/padsync/auth/router.py
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from sqlalchemy import select
import datetime as dt
import logging
from ..shared.config import settings
from ..shared.db import get_db
from .models import User
from .schemas import LoginIn, TokenOut, UserOut
from .utils import create_token, current_user, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix=f"{settings.API_PREFIX}/auth", tags=["auth"])


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    user = db.scalar(select(User).where(User.email == payload.email, User.is_active == True))
    if not user or not verify_password(payload.password, user.password_hash):
        logger.info("login failed for %s", payload.email)
        raise HTTPException(status_code=401, detail="invalid credentials")
    token = create_token(user.id)
    # sqlite DateTime 은 naive 로 저장
    user.last_login_at = dt.datetime.now(dt.timezone.utc).replace(tzinfo=None)
    db.commit()
    return {"access_token": token}


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(current_user)):
    return user
