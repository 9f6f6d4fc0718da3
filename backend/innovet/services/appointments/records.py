"""Module: records.

Typed shapes the appointment logic works on. Rows read from the store may miss
columns (older tables) or carry values from older clients; ``record_from_row``
is the single place that copes with that, so nothing downstream has to.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping

from innovet.services.appointments.lifecycle import (
    AppointmentMode,
    AppointmentStatus,
    AppointmentType,
    normalize_mode,
    normalize_status,
    normalize_type,
)

DEFAULT_PET_NAME = "Pet"
DEFAULT_TIME = "TBD"
DEFAULT_NOTES = "No notes provided."
DEFAULT_OWNER_NAME = "Pet Owner"
DEFAULT_VET_NAME = "Veterinarian"


# Authenticated party making a request; supplied by the session layer.
@dataclass(frozen=True)
class Actor:
    id: str
    email: str
    name: str
    role: str


@dataclass(frozen=True)
class AppointmentRecord:
    id: str
    owner_id: str
    vet_id: str | None
    vet_name: str | None
    pet_name: str
    date: date | None
    time: str
    mode: AppointmentMode
    type: AppointmentType
    status: AppointmentStatus
    notes: str
    # Status exactly as stored, so a conditional update can match legacy values.
    raw_status: str | None = None
    status_reason: str | None = None
    owner_name: str = DEFAULT_OWNER_NAME
    owner_phone: str | None = None
    owner_email: str | None = None
    created_at: datetime | None = None

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "vet_id": self.vet_id,
            "vet_name": self.vet_name or DEFAULT_VET_NAME,
            "pet_name": self.pet_name,
            "date": self.date.isoformat() if self.date else None,
            "time": self.time,
            "mode": self.mode.value,
            "type": self.type.value,
            "status": self.status.value,
            "status_reason": self.status_reason,
            "notes": self.notes,
            "owner_name": self.owner_name,
            "owner_phone": self.owner_phone,
            "owner_email": self.owner_email,
        }


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _as_id(value: Any) -> str | None:
    if isinstance(value, uuid.UUID):
        return str(value)
    return _as_text(value)


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = _as_text(value)
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def record_from_row(row: Mapping[str, Any]) -> AppointmentRecord:
    raw_status = row.get("status")
    return AppointmentRecord(
        id=_as_id(row.get("id")) or "",
        owner_id=_as_id(row.get("owner_id")) or "",
        vet_id=_as_id(row.get("vet_id")),
        vet_name=_as_text(row.get("vet_name")),
        pet_name=_as_text(row.get("pet_name")) or DEFAULT_PET_NAME,
        date=_as_date(row.get("date")),
        time=_as_text(row.get("time")) or DEFAULT_TIME,
        mode=normalize_mode(row.get("mode"), row.get("type")),
        type=normalize_type(row.get("type")),
        status=normalize_status(raw_status),
        notes=_as_text(row.get("notes")) or DEFAULT_NOTES,
        raw_status=raw_status if isinstance(raw_status, str) else None,
        status_reason=_as_text(row.get("status_reason")),
        owner_name=(
            _as_text(row.get("owner_name"))
            or _as_text(row.get("owner_email"))
            or DEFAULT_OWNER_NAME
        ),
        owner_phone=_as_text(row.get("owner_phone")),
        owner_email=_as_text(row.get("owner_email")),
        created_at=row.get("created_at") if isinstance(row.get("created_at"), datetime) else None,
    )
