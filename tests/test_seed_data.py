"""Development seed pipeline."""

import csv

from sqlalchemy import func, select

from innovet.core.security import verify_password
from innovet.db.models.appointment import Appointment
from innovet.db.models.user import User
from innovet.scripts import seed_data
from innovet.services.appointments.store import AppointmentStore


def test_seed_run_populates_every_table(db) -> None:
    """A full run fills each table and leaves appointments readable through the store."""

    counts = seed_data.run(db, export=False)
    assert counts["users"] == 50
    assert counts["pets"] >= 40
    assert counts["appointments"] == 120
    assert counts["nannies"] == 15

    records = AppointmentStore().list_all(db)
    assert len(records) == 120
    assert {r.status.value for r in records} <= {"Pending", "Approved", "Rejected", "Completed"}


def test_seed_includes_legacy_rows(db) -> None:
    """Some bookings are name-only; reseeding replaces rather than appends."""

    seed_data.run(db, export=False)
    seed_data.run(db, export=False)

    assert db.scalar(select(func.count()).select_from(User)) == 50
    name_only = db.scalar(select(func.count()).select_from(Appointment).where(Appointment.vet_id.is_(None)))
    assert name_only > 0


def test_export_credentials(db, tmp_path) -> None:
    """The CSV holds the plaintext password that verifies against the stored hash."""

    credentials = seed_data.seed_users(db, n_owners=2, n_vets=1, n_ngos=0)
    path = seed_data.export_credentials(credentials, tmp_path / "creds.csv")

    with path.open(encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert [r["role"] for r in rows] == ["pet_owner", "pet_owner", "veterinarian"]
    user, password = credentials[0]
    assert rows[0]["password"] == password
    assert verify_password(password, user.password)
