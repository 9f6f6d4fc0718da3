"""Module: appointments."""

from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import AliasChoices, BaseModel, Field

from innovet.api.v1.routes.deps import get_appointment_service, get_current_actor
from innovet.services.appointments.records import Actor
from innovet.services.appointments.service import (
    OWNER_VIEWS,
    VET_STATUS_FILTERS,
    AppointmentService,
)

router = APIRouter()


class AppointmentCreatePayload(BaseModel):
    pet_name: str = Field(min_length=1, max_length=120)
    appointment_date: date | None = Field(
        default=None,
        validation_alias=AliasChoices("date", "appointment_date"),
    )
    time: str | None = None
    mode: str | None = None
    type: str | None = None
    vet_id: str | None = None
    vet_name: str | None = None
    notes: str | None = None


class AppointmentRejectPayload(BaseModel):
    reason: str | None = Field(default=None, max_length=1000)


# Endpoint: owner sees own bookings, vet sees assigned ones.
@router.get("", summary="List appointments for the current actor")
def list_appointments(
    view: str = Query(default="all"),
    vet: str | None = Query(default=None),
    type: str | None = Query(default=None),
    status: str = Query(default="all"),
    actor: Actor = Depends(get_current_actor),
    service: AppointmentService = Depends(get_appointment_service),
):
    if view not in OWNER_VIEWS:
        raise HTTPException(status_code=400, detail=f"Invalid view (one of {', '.join(sorted(OWNER_VIEWS))})")
    if status not in VET_STATUS_FILTERS:
        raise HTTPException(
            status_code=400, detail=f"Invalid status (one of {', '.join(sorted(VET_STATUS_FILTERS))})"
        )

    records = service.list_for_actor(actor, view=view, vet_query=vet, type_filter=type, status=status)
    return [r.as_dict() for r in records]


@router.post("", status_code=201, summary="Book an appointment")
def create_appointment(
    payload: AppointmentCreatePayload,
    actor: Actor = Depends(get_current_actor),
    service: AppointmentService = Depends(get_appointment_service),
):
    record = service.book(
        actor,
        pet_name=payload.pet_name,
        appointment_date=payload.appointment_date,
        time=payload.time,
        mode=payload.mode,
        appointment_type=payload.type,
        vet_id=payload.vet_id,
        vet_name=payload.vet_name,
        notes=payload.notes,
    )
    return record.as_dict()


@router.get("/{appointment_id}", summary="Get appointment detail")
def get_appointment(
    appointment_id: str,
    actor: Actor = Depends(get_current_actor),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.get_for_actor(actor, appointment_id).as_dict()


@router.post("/{appointment_id}/approve", summary="Approve a pending appointment")
def approve_appointment(
    appointment_id: str,
    actor: Actor = Depends(get_current_actor),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.approve(actor, appointment_id).as_dict()


@router.post("/{appointment_id}/reject", summary="Reject a pending appointment")
def reject_appointment(
    appointment_id: str,
    payload: AppointmentRejectPayload | None = None,
    actor: Actor = Depends(get_current_actor),
    service: AppointmentService = Depends(get_appointment_service),
):
    reason = payload.reason if payload else None
    return service.reject(actor, appointment_id, reason).as_dict()


@router.post("/{appointment_id}/complete", summary="Mark an approved appointment completed")
def complete_appointment(
    appointment_id: str,
    actor: Actor = Depends(get_current_actor),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.complete(actor, appointment_id).as_dict()


@router.post("/{appointment_id}/call", summary="Video-call room for an approved online appointment")
def start_call(
    appointment_id: str,
    actor: Actor = Depends(get_current_actor),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.start_call(actor, appointment_id)
