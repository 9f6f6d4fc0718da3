"""Module: pet_nanny."""

import uuid

from sqlalchemy import Integer, JSON, Numeric, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from innovet.db.base import Base


# Directory listing for pet sitters. services/pet_types were historically stored
# as comma separated strings, so both shapes are read back.
class PetNanny(Base):
    __tablename__ = "pet_nannies"

    nanny_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    image: Mapped[str] = mapped_column(String, nullable=True)
    description: Mapped[str] = mapped_column(String, nullable=True)
    experience: Mapped[str] = mapped_column(String, nullable=True)
    available_times: Mapped[str] = mapped_column(String, nullable=True)
    availability: Mapped[str] = mapped_column(String, nullable=True)  # available, busy

    distance_km: Mapped[float] = mapped_column(Numeric(6, 2), nullable=True)
    rating: Mapped[float] = mapped_column(Numeric(3, 2), nullable=True)
    reviews_count: Mapped[int] = mapped_column(Integer, nullable=True)
    price_per_hour: Mapped[float] = mapped_column(Numeric(10, 2), nullable=True)
    price_per_day: Mapped[float] = mapped_column(Numeric(10, 2), nullable=True)

    services: Mapped[list] = mapped_column(JSON, nullable=True)
    pet_types: Mapped[list] = mapped_column(JSON, nullable=True)
    reviews_list: Mapped[list] = mapped_column(JSON, nullable=True)
