"""Module: appointment."""

import uuid
import datetime as dt
from datetime import datetime

from sqlalchemy import Date, DateTime, ForeignKey, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column

from innovet.db.base import Base


# Owner-booked appointment with a veterinarian. Rows written by older clients may
# lack vet_id (only vet_name) or carry legacy statuses (Confirmed/Cancelled).
class Appointment(Base):
    __tablename__ = "appointments"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False
    )
    vet_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.user_id", ondelete="SET NULL"),
        nullable=True
    )
    vet_name: Mapped[str] = mapped_column(String, nullable=True)

    pet_name: Mapped[str] = mapped_column(String, nullable=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=True)
    time: Mapped[str] = mapped_column(String, nullable=True)
    mode: Mapped[str] = mapped_column(String, nullable=True)  # Online, In-clinic
    type: Mapped[str] = mapped_column(String, nullable=True)  # Consultation, Vaccination, Training
    status: Mapped[str] = mapped_column(String, nullable=False, default="Pending")
    status_reason: Mapped[str] = mapped_column(String, nullable=True)
    notes: Mapped[str] = mapped_column(String, nullable=True)

    # Contact details copied from the owner at booking time.
    owner_name: Mapped[str] = mapped_column(String, nullable=True)
    owner_phone: Mapped[str] = mapped_column(String, nullable=True)
    owner_email: Mapped[str] = mapped_column(String, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=True)
