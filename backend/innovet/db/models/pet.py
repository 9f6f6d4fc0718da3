"""Module: pet."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from innovet.db.base import Base


# Pet profile owned by a single pet-owner account.
class Pet(Base):
    __tablename__ = "pets"

    # Primary Key
    pet_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4
    )
    # Short human-facing code printed on the pet passport (PET-XXXXXXXX).
    pet_code: Mapped[str] = mapped_column(String, nullable=False)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False
    )

    # Basic Info
    name: Mapped[str] = mapped_column(String, nullable=False)
    species: Mapped[str] = mapped_column(String, nullable=False, default="Dog")
    breed: Mapped[str] = mapped_column(String, nullable=False, default="Not specified")
    gender: Mapped[str] = mapped_column(String, nullable=False, default="unknown")
    color: Mapped[str] = mapped_column(String, nullable=False, default="Not specified")

    # Optional Info
    age_years: Mapped[int] = mapped_column(Integer, nullable=True)
    age_months: Mapped[int] = mapped_column(Integer, nullable=True)
    weight: Mapped[float] = mapped_column(Numeric(6, 2), nullable=True)
    profile_image: Mapped[str] = mapped_column(String, nullable=True)
    microchip_id: Mapped[str] = mapped_column(String, nullable=True)
    is_neutered: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_rescue: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[str] = mapped_column(String, nullable=False, default="No additional notes.")

    # Audit
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow
    )
