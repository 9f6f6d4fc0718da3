"""Module: vet_profiles.

Veterinarian profile fields stored on the users row.
"""

from typing import Literal

from pydantic import BaseModel, Field

from innovet.db.models.user import User

VET_AVAILABILITY = ("Available", "Busy", "On Leave")
DEFAULT_AVAILABILITY = "Available"


class VetProfileFields(BaseModel):
    specialty: str | None = None
    experience_years: int | None = Field(default=None, ge=0)
    clinic_name: str | None = None
    clinic_address: str | None = None
    city: str | None = None
    consultation_fee: float | None = Field(default=None, ge=0)
    availability: Literal["Available", "Busy", "On Leave"] = DEFAULT_AVAILABILITY
    description: str | None = None
    image_url: str | None = None


def normalize_availability(raw: str | None) -> str:
    return raw if raw in VET_AVAILABILITY else DEFAULT_AVAILABILITY


def _clean(value: str | None) -> str | None:
    return (value or "").strip() or None


def apply_vet_profile(user: User, profile: VetProfileFields) -> User:
    user.vet_specialty = _clean(profile.specialty)
    user.vet_experience_years = profile.experience_years
    user.vet_clinic_name = _clean(profile.clinic_name)
    user.vet_clinic_address = _clean(profile.clinic_address)
    user.vet_city = _clean(profile.city)
    user.vet_consultation_fee = profile.consultation_fee
    user.vet_availability = normalize_availability(profile.availability)
    user.vet_description = _clean(profile.description)
    user.vet_image_url = _clean(profile.image_url)
    return user


def vet_to_dict(user: User) -> dict:
    fee = user.vet_consultation_fee
    return {
        "user_id": str(user.user_id),
        "name": user.full_name,
        "email": user.email,
        "phone": user.phone,
        "specialty": user.vet_specialty,
        "experience_years": user.vet_experience_years,
        "clinic_name": user.vet_clinic_name,
        "clinic_address": user.vet_clinic_address,
        "city": user.vet_city,
        "consultation_fee": float(fee) if fee is not None else None,
        "availability": normalize_availability(user.vet_availability),
        "description": user.vet_description,
        "image_url": user.vet_image_url,
    }
