"""Module: notification_service.

Notification rows written alongside appointment changes, plus the read-side
shaping used by the notifications routes.
"""

import logging
import uuid

from sqlalchemy.orm import Session

from innovet.db.models.notification import Notification
from innovet.services.appointments.lifecycle import Action
from innovet.services.appointments.records import AppointmentRecord

LOGGER = logging.getLogger(__name__)

NOTIFICATION_TYPES = {"sos", "medical", "appointment", "vaccination", "prescription", "training"}
DEFAULT_NOTIFICATION_TYPE = "medical"

_TITLES = {
    Action.APPROVE: "Appointment approved",
    Action.REJECT: "Appointment declined",
    Action.COMPLETE: "Appointment completed",
}


def normalize_notification_type(raw: str | None) -> str:
    return raw if raw in NOTIFICATION_TYPES else DEFAULT_NOTIFICATION_TYPE


def notification_to_dict(notification: Notification) -> dict:
    return {
        "id": str(notification.notification_id),
        "type": normalize_notification_type(notification.type),
        "title": notification.title or "Notification",
        "description": notification.description or "",
        "pet_name": notification.pet_name or "Pet",
        "is_read": bool(notification.is_read),
        "is_user_triggered": bool(notification.is_user_triggered),
        "created_at": notification.created_at,
    }


def _when(record: AppointmentRecord) -> str:
    day = record.date.isoformat() if record.date else "an unscheduled date"
    return f"{day} at {record.time}"


def notify_appointment_change(
    db: Session,
    record: AppointmentRecord,
    action: Action,
    reason: str | None = None,
) -> Notification:
    """Queue a notification for the owner; committed with the status change."""
    if action is Action.APPROVE:
        description = f"Your {record.type.value.lower()} for {record.pet_name} on {_when(record)} was approved."
    elif action is Action.REJECT:
        description = f"Your appointment for {record.pet_name} on {_when(record)} was declined."
        if reason:
            description = f"{description} Reason: {reason}"
    else:
        description = f"The appointment for {record.pet_name} on {_when(record)} is complete."

    notification = Notification(
        user_id=uuid.UUID(record.owner_id),
        type="appointment",
        title=_TITLES[action],
        description=description,
        pet_name=record.pet_name,
        is_read=False,
        is_user_triggered=False,
    )
    db.add(notification)
    LOGGER.debug("Queued %s notification for owner %s", action.value, record.owner_id)
    return notification


def notify_new_request(db: Session, record: AppointmentRecord) -> Notification | None:
    """Tell the assigned vet about a new booking; name-only bookings have nobody to tell."""
    if not record.vet_id:
        return None
    notification = Notification(
        user_id=uuid.UUID(record.vet_id),
        type="appointment",
        title="New appointment request",
        description=f"{record.owner_name} requested a {record.mode.value.lower()} "
        f"{record.type.value.lower()} for {record.pet_name} on {_when(record)}.",
        pet_name=record.pet_name,
        is_read=False,
        is_user_triggered=False,
    )
    db.add(notification)
    return notification
