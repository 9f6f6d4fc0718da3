"""Module: auth."""

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from innovet.api.v1.routes.deps import get_bearer_token, get_current_user, get_db
from innovet.core.security import hash_password, issue_token, revoke_token, verify_password
from innovet.db.models.user import ROLE_PET_OWNER, ROLE_VETERINARIAN, User
from innovet.services.vet_profiles import VetProfileFields, apply_vet_profile

LOGGER = logging.getLogger(__name__)

router = APIRouter()

# The signup form says "user" for pet owners.
ROLE_ALIASES = {"user": ROLE_PET_OWNER}


class LoginRequest(BaseModel):
    email: str
    password: str


class RegisterRequest(BaseModel):
    email: str = Field(min_length=3)
    password: str = Field(min_length=6)
    name: str = Field(min_length=1)
    role: Literal["user", "pet_owner", "veterinarian", "ngo"] = "user"
    phone: str | None = None
    vet_profile: VetProfileFields | None = None


class UserPayload(BaseModel):
    user_id: str
    email: str
    name: str
    phone: str | None = None
    role: str


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserPayload


def _normalize_email(value: str) -> str:
    return value.strip().lower()


def _as_user_payload(user: User) -> UserPayload:
    return UserPayload(
        user_id=str(user.user_id),
        email=user.email,
        name=user.full_name,
        phone=user.phone,
        role=user.role or ROLE_PET_OWNER,
    )


@router.post("/register", response_model=UserPayload, status_code=201)
def register(payload: RegisterRequest, db: Session = Depends(get_db)):
    normalized_email = _normalize_email(payload.email)

    exists = db.execute(select(User.user_id).where(func.lower(User.email) == normalized_email)).first()
    if exists:
        raise HTTPException(status_code=409, detail="Email already registered")

    role = ROLE_ALIASES.get(payload.role, payload.role)

    user = User(
        email=normalized_email,
        password=hash_password(payload.password),
        role=role,
        full_name=payload.name.strip(),
        phone=(payload.phone or "").strip() or None,
    )
    if role == ROLE_VETERINARIAN:
        apply_vet_profile(user, payload.vet_profile or VetProfileFields())

    db.add(user)
    db.commit()
    db.refresh(user)
    LOGGER.info("Registered %s account %s", role, user.user_id)
    return _as_user_payload(user)


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    normalized_email = _normalize_email(payload.email)
    user = db.execute(
        select(User).where(func.lower(User.email) == normalized_email)
    ).scalar_one_or_none()

    if not user or not verify_password(payload.password, user.password):
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return LoginResponse(
        access_token=issue_token(str(user.user_id)),
        user=_as_user_payload(user),
    )


@router.get("/me", response_model=UserPayload)
def me(user: User = Depends(get_current_user)):
    return _as_user_payload(user)


@router.post("/logout", status_code=204)
def logout(token: str = Depends(get_bearer_token)):
    revoke_token(token)
