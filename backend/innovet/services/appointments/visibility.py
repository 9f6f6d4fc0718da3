"""Module: visibility.

Decides which appointment records an actor may see and act on.

Owners see rows they booked. Veterinarians see rows whose ``vet_id`` is their
own id; rows without a ``vet_id`` (written before vets had accounts) fall back
to matching the stored ``vet_name`` against the vet's display name.

The name fallback is a best-effort compatibility shim, NOT a security
boundary: it is a case-insensitive equality-or-substring match, so "chen"
matches both "Dr. Chen" and "Dr. Chen Park", and a typo in the stored name
hides the row entirely.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from innovet.db.models.user import ROLE_PET_OWNER, ROLE_VETERINARIAN

if TYPE_CHECKING:
    from innovet.services.appointments.records import Actor, AppointmentRecord


def vet_name_candidates(display_name: str | None) -> list[str]:
    name = (display_name or "").strip().lower()
    if not name:
        return []
    return [name, f"dr. {name}"]


def matches_vet_name(stored_vet_name: str | None, display_name: str | None) -> bool:
    row_name = (stored_vet_name or "").strip().lower()
    candidates = vet_name_candidates(display_name)
    if not row_name or not candidates:
        return False
    return any(row_name == candidate or candidate in row_name for candidate in candidates)


def is_visible_to_vet(record: AppointmentRecord, actor: Actor) -> bool:
    if record.vet_id:
        return record.vet_id == actor.id
    return matches_vet_name(record.vet_name, actor.name)


def is_visible_to_owner(record: AppointmentRecord, actor: Actor) -> bool:
    return bool(record.owner_id) and record.owner_id == actor.id


def is_visible(record: AppointmentRecord, actor: Actor) -> bool:
    if actor.role == ROLE_VETERINARIAN:
        return is_visible_to_vet(record, actor)
    if actor.role == ROLE_PET_OWNER:
        return is_visible_to_owner(record, actor)
    return False


def resolve_visible(records: Iterable[AppointmentRecord], actor: Actor) -> list[AppointmentRecord]:
    return [record for record in records if is_visible(record, actor)]
