"""Module: lifecycle.

Appointment status vocabulary and the transitions a veterinarian may apply.

States: Pending (initial), Approved, Rejected (terminal), Completed (terminal).

    Pending  --approve-->  Approved  --complete-->  Completed
    Pending  --reject--->  Rejected

Starting a video call is allowed on Approved online appointments but is not a
status change. Nothing ever goes back to Pending.
"""

from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import TYPE_CHECKING, Any

from innovet.core.errors import ForbiddenError, InvalidTransitionError
from innovet.db.models.user import ROLE_VETERINARIAN
from innovet.services.appointments.visibility import is_visible_to_vet

if TYPE_CHECKING:
    from innovet.services.appointments.records import Actor, AppointmentRecord


class AppointmentStatus(str, Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    COMPLETED = "Completed"


class AppointmentMode(str, Enum):
    ONLINE = "Online"
    IN_CLINIC = "In-clinic"


class AppointmentType(str, Enum):
    CONSULTATION = "Consultation"
    VACCINATION = "Vaccination"
    TRAINING = "Training"


class Action(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"
    COMPLETE = "complete"
    START_CALL = "start_call"


# Values written by older clients.
LEGACY_STATUSES = {
    "Confirmed": AppointmentStatus.APPROVED,
    "Cancelled": AppointmentStatus.REJECTED,
}

TRANSITIONS: dict[tuple[AppointmentStatus, Action], AppointmentStatus] = {
    (AppointmentStatus.PENDING, Action.APPROVE): AppointmentStatus.APPROVED,
    (AppointmentStatus.PENDING, Action.REJECT): AppointmentStatus.REJECTED,
    (AppointmentStatus.APPROVED, Action.COMPLETE): AppointmentStatus.COMPLETED,
}

TERMINAL_STATUSES = frozenset({AppointmentStatus.REJECTED, AppointmentStatus.COMPLETED})

_CANONICAL_STATUS_VALUES = {status.value: status for status in AppointmentStatus}
_TYPE_VALUES = {kind.value: kind for kind in AppointmentType}


def normalize_status(raw: Any) -> AppointmentStatus:
    if isinstance(raw, AppointmentStatus):
        return raw
    if not isinstance(raw, str):
        return AppointmentStatus.PENDING
    if raw in _CANONICAL_STATUS_VALUES:
        return _CANONICAL_STATUS_VALUES[raw]
    return LEGACY_STATUSES.get(raw, AppointmentStatus.PENDING)


def normalize_mode(raw_mode: Any, raw_type: Any = None) -> AppointmentMode:
    # Some rows carry "Online" in the type column instead of mode.
    if raw_mode == AppointmentMode.ONLINE.value or raw_type == AppointmentMode.ONLINE.value:
        return AppointmentMode.ONLINE
    return AppointmentMode.IN_CLINIC


def normalize_type(raw_type: Any) -> AppointmentType:
    if isinstance(raw_type, AppointmentType):
        return raw_type
    if isinstance(raw_type, str) and raw_type in _TYPE_VALUES:
        return _TYPE_VALUES[raw_type]
    return AppointmentType.CONSULTATION


def can_transition(current: Any, action: Action | str, mode: Any = None) -> bool:
    status = normalize_status(current)
    action = Action(action)
    if action is Action.START_CALL:
        return (
            status is AppointmentStatus.APPROVED
            and mode is not None
            and normalize_mode(mode) is AppointmentMode.ONLINE
        )
    return (status, action) in TRANSITIONS


def apply_transition(
    record: AppointmentRecord,
    action: Action | str,
    actor: Actor,
    reason: str | None = None,
) -> AppointmentRecord:
    """Return ``record`` moved to the status ``action`` leads to.

    Pure: the caller persists the result. Raises ``ForbiddenError`` when the
    actor is not the veterinarian assigned to the appointment and
    ``InvalidTransitionError`` when the current status does not accept
    ``action``.
    """
    action = Action(action)
    if actor.role != ROLE_VETERINARIAN or not is_visible_to_vet(record, actor):
        raise ForbiddenError("Only the assigned veterinarian can update this appointment.")

    if action is Action.START_CALL:
        raise InvalidTransitionError("Starting a call does not change the appointment status.")

    if not can_transition(record.status, action):
        raise InvalidTransitionError(
            f"Cannot {action.value} an appointment that is {record.status.value}."
        )

    new_status = TRANSITIONS[(record.status, action)]
    status_reason = record.status_reason
    if action is Action.REJECT:
        status_reason = (reason or "").strip() or None
    return replace(record, status=new_status, status_reason=status_reason)
