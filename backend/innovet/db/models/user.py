"""Module: user."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from innovet.db.base import Base

ROLE_PET_OWNER = "pet_owner"
ROLE_VETERINARIAN = "veterinarian"
ROLE_NGO = "ngo"


# Account row for every actor; vet_* columns are only filled for veterinarians.
class User(Base):
    __tablename__ = "users"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )

    email: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    password: Mapped[str] = mapped_column(String, nullable=False)
    role: Mapped[str] = mapped_column(String, nullable=False, default=ROLE_PET_OWNER)
    full_name: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=True)

    # Veterinarian profile
    vet_specialty: Mapped[str] = mapped_column(String, nullable=True)
    vet_experience_years: Mapped[int] = mapped_column(Integer, nullable=True)
    vet_clinic_name: Mapped[str] = mapped_column(String, nullable=True)
    vet_clinic_address: Mapped[str] = mapped_column(String, nullable=True)
    vet_city: Mapped[str] = mapped_column(String, nullable=True)
    vet_consultation_fee: Mapped[float] = mapped_column(Numeric(10, 2), nullable=True)
    vet_availability: Mapped[str] = mapped_column(String, nullable=True)
    vet_description: Mapped[str] = mapped_column(String, nullable=True)
    vet_image_url: Mapped[str] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )
