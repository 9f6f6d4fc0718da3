"""Shared fixtures: in-memory SQLite app wired through dependency overrides."""

import os
import uuid
from datetime import date

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, insert
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from innovet.api.v1.routes.deps import get_appointment_store, get_db
from innovet.core import security
from innovet.db.base import Base
from innovet.db.init_db import init_db
from innovet.db.models.appointment import Appointment
from innovet.db.models.user import ROLE_PET_OWNER, ROLE_VETERINARIAN, User
from innovet.main import app
from innovet.services.appointments.records import Actor
from innovet.services.appointments.store import AppointmentStore


@pytest.fixture(autouse=True)
def fast_password_hashing(monkeypatch):
    monkeypatch.setattr(security, "PASSWORD_ITERATIONS", 1_000)
    security.TOKENS.clear()


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def store():
    return AppointmentStore()


@pytest.fixture()
def client(session_factory, store):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_appointment_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def make_user(db, name: str, role: str = ROLE_PET_OWNER, email: str | None = None) -> User:
    user = User(
        email=email or f"{uuid.uuid4().hex[:8]}@example.com",
        password=security.hash_password("secret123"),
        role=role,
        full_name=name,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def actor_for(user: User) -> Actor:
    return Actor(id=str(user.user_id), email=user.email, name=user.full_name, role=user.role)


def insert_appointment(db, owner: User, **fields) -> str:
    values = {
        "id": uuid.uuid4(),
        "owner_id": owner.user_id,
        "pet_name": "Bruno",
        "date": date.today(),
        "time": "10:00 AM",
        "mode": "In-clinic",
        "type": "Consultation",
        "status": "Pending",
    }
    values.update(fields)
    db.execute(insert(Appointment.__table__).values(**values))
    db.commit()
    return str(values["id"])


def auth_headers(client: TestClient, email: str, password: str = "secret123") -> dict:
    response = client.post("/api/v1/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


def register(client: TestClient, name: str, role: str = "user", **extra) -> dict:
    email = f"{name.lower().replace(' ', '.')}@example.com"
    payload = {"email": email, "password": "secret123", "name": name, "role": role, **extra}
    response = client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 201, response.text
    user = response.json()
    user["headers"] = auth_headers(client, email)
    return user


@pytest.fixture()
def owner(db):
    return make_user(db, "Priya Sharma")


@pytest.fixture()
def vet(db):
    return make_user(db, "Sarah Johnson", role=ROLE_VETERINARIAN)
