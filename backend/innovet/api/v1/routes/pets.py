"""Module: pets."""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy import desc, select
from sqlalchemy.orm import Session

from innovet.api.v1.routes.deps import get_current_user, get_db
from innovet.core.config import settings
from innovet.core.errors import ForbiddenError, NotFound
from innovet.db.models.pet import Pet
from innovet.db.models.user import ROLE_PET_OWNER, User

LOGGER = logging.getLogger(__name__)

router = APIRouter()


class PetPayload(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    species: str = "Dog"
    breed: str | None = None
    gender: str | None = None
    color: str | None = None
    age_years: int | None = Field(default=None, ge=0)
    age_months: int | None = Field(default=None, ge=0, le=11)
    weight: float | None = Field(default=None, ge=0)
    profile_image: str | None = None
    microchip_id: str | None = None
    is_neutered: bool = False
    is_rescue: bool = False
    notes: str | None = None


# -------------------------
# Helpers
# -------------------------
def _parse_uuid(value: str, field_name: str = "id") -> uuid.UUID:
    try:
        return uuid.UUID(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid {field_name} (must be UUID)")


def _normalize_optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned if cleaned else None


def generate_pet_code() -> str:
    # Last eight digits of the epoch millisecond clock.
    return f"PET-{str(time.time_ns() // 1_000_000)[-8:]}"


def _require_owner(user: User) -> User:
    if user.role != ROLE_PET_OWNER:
        raise ForbiddenError("Only pet owners manage pet profiles.")
    return user


def _owned_pet(db: Session, user: User, pet_id: str) -> Pet:
    pid = _parse_uuid(pet_id, "pet_id")
    pet = db.execute(select(Pet).where(Pet.pet_id == pid)).scalar_one_or_none()
    if not pet:
        raise NotFound("Pet not found")
    if pet.owner_id != user.user_id:
        raise ForbiddenError("You are not allowed to access this pet.")
    return pet


def _apply(pet: Pet, payload: PetPayload) -> Pet:
    pet.name = payload.name.strip()
    pet.species = _normalize_optional(payload.species) or "Dog"
    pet.breed = _normalize_optional(payload.breed) or "Not specified"
    pet.gender = _normalize_optional(payload.gender) or "unknown"
    pet.color = _normalize_optional(payload.color) or "Not specified"
    pet.age_years = payload.age_years
    pet.age_months = payload.age_months
    pet.weight = payload.weight
    pet.profile_image = _normalize_optional(payload.profile_image) or settings.default_pet_image
    pet.microchip_id = _normalize_optional(payload.microchip_id)
    pet.is_neutered = payload.is_neutered
    pet.is_rescue = payload.is_rescue
    pet.notes = _normalize_optional(payload.notes) or "No additional notes."
    return pet


def pet_to_dict(pet: Pet) -> dict:
    return {
        "id": str(pet.pet_id),
        "pet_code": pet.pet_code,
        "owner_id": str(pet.owner_id),
        "name": pet.name,
        "species": pet.species,
        "breed": pet.breed,
        "gender": pet.gender,
        "color": pet.color,
        "age_years": pet.age_years,
        "age_months": pet.age_months,
        "weight": float(pet.weight) if pet.weight is not None else None,
        "profile_image": pet.profile_image or settings.default_pet_image,
        "microchip_id": pet.microchip_id,
        "is_neutered": bool(pet.is_neutered),
        "is_rescue": bool(pet.is_rescue),
        "notes": pet.notes,
        "created_at": pet.created_at,
    }


# -------------------------
# Endpoints
# -------------------------

@router.get("", summary="List the current owner's pets")
def list_pets(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _require_owner(user)
    pets = db.execute(
        select(Pet).where(Pet.owner_id == user.user_id).order_by(desc(Pet.created_at))
    ).scalars().all()
    return [pet_to_dict(p) for p in pets]


@router.post("", status_code=201, summary="Create a pet profile")
def create_pet(
    payload: PetPayload,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _require_owner(user)
    pet = _apply(Pet(owner_id=user.user_id, pet_code=generate_pet_code()), payload)
    db.add(pet)
    db.commit()
    db.refresh(pet)
    LOGGER.info("Pet %s created for owner %s", pet.pet_code, user.user_id)
    return pet_to_dict(pet)


@router.get("/{pet_id}", summary="Get pet detail")
def get_pet(
    pet_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _require_owner(user)
    return pet_to_dict(_owned_pet(db, user, pet_id))


@router.put("/{pet_id}", summary="Update pet details")
def update_pet(
    pet_id: str,
    payload: PetPayload,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _require_owner(user)
    pet = _apply(_owned_pet(db, user, pet_id), payload)
    db.commit()
    db.refresh(pet)
    return pet_to_dict(pet)


@router.delete("/{pet_id}", status_code=204, summary="Delete a pet profile")
def delete_pet(
    pet_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    _require_owner(user)
    pet = _owned_pet(db, user, pet_id)
    db.delete(pet)
    db.commit()
