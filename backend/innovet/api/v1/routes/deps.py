"""Module: deps."""

import uuid
from typing import Generator

from fastapi import Depends, Header, HTTPException
from sqlalchemy import select
from sqlalchemy.orm import Session

from innovet.core.security import resolve_token
from innovet.db.models.user import User
from innovet.db.session import SessionLocal
from innovet.services.appointments.records import Actor
from innovet.services.appointments.service import AppointmentService
from innovet.services.appointments.store import AppointmentStore

# One store per process; it caches the negotiated appointments table shape.
appointment_store = AppointmentStore()


# Dependency provider: one DB session per request lifecycle.
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    parts = authorization.split(" ", 1)
    if len(parts) != 2 or parts[0].lower() != "bearer":
        raise HTTPException(status_code=401, detail="Invalid Authorization header")

    return parts[1].strip()


def get_current_user(
    token: str = Depends(get_bearer_token),
    db: Session = Depends(get_db),
) -> User:
    user_id = resolve_token(token)
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    user = db.execute(select(User).where(User.user_id == uuid.UUID(user_id))).scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def actor_from_user(user: User) -> Actor:
    return Actor(id=str(user.user_id), email=user.email, name=user.full_name, role=user.role)


def get_current_actor(user: User = Depends(get_current_user)) -> Actor:
    return actor_from_user(user)


def get_appointment_store() -> AppointmentStore:
    return appointment_store


def get_appointment_service(
    db: Session = Depends(get_db),
    store: AppointmentStore = Depends(get_appointment_store),
) -> AppointmentService:
    return AppointmentService(db, store)
