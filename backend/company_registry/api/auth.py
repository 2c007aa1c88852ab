import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from company_registry.db import get_db
from company_registry.core.errors import EmailTakenError
from company_registry.core.security import create_access_token, get_current_user, hash_password, verify_password
from company_registry.models.user import User
from company_registry.schemas.auth import LoginIn, RegisterIn, TokenOut, UserOut


router = APIRouter(prefix="/auth", tags=["auth"])

logger = logging.getLogger(__name__)


@router.post("/register", response_model=UserOut, status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    if db.scalar(select(User).where(User.email == payload.email)):
        raise EmailTakenError()

    u = User(name=payload.name, email=payload.email, password_hash=hash_password(payload.password))
    db.add(u)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise EmailTakenError()
    db.refresh(u)
    logger.info("User registered", extra={"user_id": u.id})
    return u


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, db: Session = Depends(get_db)):
    email = payload.email.strip().lower()
    u = db.scalar(select(User).where(User.email == email))

    if not u or not verify_password(payload.password, u.password_hash):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return TokenOut(access_token=create_access_token(u.id))


@router.get("/me", response_model=UserOut)
def me(user: User = Depends(get_current_user)):
    return user
