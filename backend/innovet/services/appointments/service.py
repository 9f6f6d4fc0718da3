"""Module: service.

Appointment operations as seen by an actor: scoped listing, booking, the
veterinarian transitions and the video-call check. Each transition commits the
status row, its audit entry and the owner notification together or not at all.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from innovet.core.config import settings
from innovet.core.errors import ForbiddenError, InvalidTransitionError, NotFound
from innovet.db.models.audit_log import AuditLog
from innovet.db.models.user import ROLE_PET_OWNER, ROLE_VETERINARIAN, User
from innovet.services.appointments.lifecycle import (
    Action,
    AppointmentStatus,
    apply_transition,
    can_transition,
    normalize_mode,
    normalize_type,
)
from innovet.services.appointments.records import Actor, AppointmentRecord
from innovet.services.appointments.store import AppointmentStore
from innovet.services.appointments.visibility import is_visible, resolve_visible
from innovet.services.notification_service import notify_appointment_change, notify_new_request

LOGGER = logging.getLogger(__name__)

OWNER_VIEWS = {"all", "upcoming", "past", "cancelled"}
VET_STATUS_FILTERS = {"all", "pending", "approved", "completed"}


def filter_owner_view(
    records: list[AppointmentRecord],
    view: str = "all",
    vet_query: str | None = None,
    type_filter: str | None = None,
    today: date | None = None,
) -> list[AppointmentRecord]:
    today = today or date.today()
    vet_query = (vet_query or "").strip().lower()
    out = []
    for record in records:
        # Rows without a date are treated as happening today.
        when = record.date or today
        if view == "upcoming":
            keep = when >= today and record.status is not AppointmentStatus.REJECTED
        elif view == "past":
            keep = when < today or record.status is AppointmentStatus.COMPLETED
        elif view == "cancelled":
            keep = record.status is AppointmentStatus.REJECTED
        else:
            keep = True

        if keep and vet_query:
            keep = vet_query in (record.vet_name or "").lower()
        if keep and type_filter and type_filter != "All":
            keep = record.type.value == type_filter
        if keep:
            out.append(record)
    return out


def filter_vet_view(records: list[AppointmentRecord], status: str = "all") -> list[AppointmentRecord]:
    if status == "all":
        return list(records)
    return [record for record in records if record.status.value.lower() == status]


class AppointmentService:
    def __init__(self, db: Session, store: AppointmentStore):
        self.db = db
        self.store = store

    # -------------------------
    # Reads
    # -------------------------
    def list_for_actor(
        self,
        actor: Actor,
        view: str = "all",
        vet_query: str | None = None,
        type_filter: str | None = None,
        status: str = "all",
    ) -> list[AppointmentRecord]:
        if actor.role == ROLE_PET_OWNER:
            records = resolve_visible(self.store.list_by_owner(self.db, actor.id), actor)
            return filter_owner_view(records, view, vet_query, type_filter)
        if actor.role == ROLE_VETERINARIAN:
            records = resolve_visible(self.store.list_for_vet(self.db, actor), actor)
            return filter_vet_view(records, status)
        raise ForbiddenError("Only pet owners and veterinarians have appointments.")

    def get_for_actor(self, actor: Actor, appointment_id: str) -> AppointmentRecord:
        record = self.store.get(self.db, appointment_id)
        if not is_visible(record, actor):
            raise ForbiddenError("You are not allowed to view this appointment.")
        return record

    # -------------------------
    # Booking
    # -------------------------
    def book(
        self,
        actor: Actor,
        pet_name: str,
        appointment_date: date | None,
        time: str | None = None,
        mode: str | None = None,
        appointment_type: str | None = None,
        vet_id: str | None = None,
        vet_name: str | None = None,
        notes: str | None = None,
    ) -> AppointmentRecord:
        if actor.role != ROLE_PET_OWNER:
            raise ForbiddenError("Only pet owners can book appointments.")

        vet_uuid = None
        if vet_id:
            try:
                vet_uuid = uuid.UUID(vet_id)
            except ValueError:
                raise NotFound("Veterinarian not found")
            vet = self.db.execute(
                select(User).where(User.user_id == vet_uuid, User.role == ROLE_VETERINARIAN)
            ).scalar_one_or_none()
            if not vet:
                raise NotFound("Veterinarian not found")
            vet_name = (vet_name or "").strip() or vet.full_name

        owner = self.db.execute(select(User).where(User.user_id == uuid.UUID(actor.id))).scalar_one_or_none()

        fields = {
            "owner_id": uuid.UUID(actor.id),
            "vet_id": vet_uuid,
            "vet_name": (vet_name or "").strip() or None,
            "pet_name": pet_name.strip(),
            "date": appointment_date,
            "time": (time or "").strip() or None,
            "mode": normalize_mode(mode, appointment_type).value,
            # "Online" passed as a type is a mode, not a classification.
            "type": normalize_type(appointment_type).value,
            "status": AppointmentStatus.PENDING.value,
            "notes": (notes or "").strip() or None,
            "owner_name": owner.full_name if owner else actor.name,
            "owner_phone": owner.phone if owner else None,
            "owner_email": owner.email if owner else actor.email,
        }
        try:
            record = self.store.create(self.db, fields)
            notify_new_request(self.db, record)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        LOGGER.info("Appointment %s booked by owner %s", record.id, actor.id)
        return record

    # -------------------------
    # Transitions
    # -------------------------
    def transition(
        self,
        actor: Actor,
        appointment_id: str,
        action: Action | str,
        reason: str | None = None,
    ) -> AppointmentRecord:
        action = Action(action)
        current = self.store.get(self.db, appointment_id)
        target = apply_transition(current, action, actor, reason)

        try:
            stored = self.store.update_status(
                self.db,
                current.id,
                target.status,
                expected_raw_status=current.raw_status,
                reason=target.status_reason if action is Action.REJECT else None,
            )
            self.db.add(
                AuditLog(
                    actor_user_id=uuid.UUID(actor.id),
                    action=f"appointment.{action.value}",
                    target_type="appointment",
                    target_id=uuid.UUID(current.id),
                    meta={
                        "from": current.raw_status,
                        "to": target.status.value,
                        "reason": target.status_reason if action is Action.REJECT else None,
                    },
                )
            )
            notify_appointment_change(self.db, stored, action, target.status_reason)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        LOGGER.info(
            "Appointment %s %s -> %s by vet %s",
            current.id,
            current.status.value,
            stored.status.value,
            actor.id,
        )
        return stored

    def approve(self, actor: Actor, appointment_id: str) -> AppointmentRecord:
        return self.transition(actor, appointment_id, Action.APPROVE)

    def reject(self, actor: Actor, appointment_id: str, reason: str | None = None) -> AppointmentRecord:
        return self.transition(actor, appointment_id, Action.REJECT, reason)

    def complete(self, actor: Actor, appointment_id: str) -> AppointmentRecord:
        return self.transition(actor, appointment_id, Action.COMPLETE)

    # -------------------------
    # Video call
    # -------------------------
    def start_call(self, actor: Actor, appointment_id: str) -> dict:
        record = self.get_for_actor(actor, appointment_id)
        if not can_transition(record.status, Action.START_CALL, record.mode):
            raise InvalidTransitionError("Video calls are only available for approved online appointments.")
        return {
            "appointment_id": record.id,
            "room_id": record.id,
            "join_path": f"{settings.video_call_path}?roomID={record.id}",
        }
