"""Appointment store against full and older table shapes."""

import logging
import uuid
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import column, create_engine, insert, table, text
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from innovet.core.errors import InvalidTransitionError, NotFound, SchemaMismatch, StoreUnavailable
from innovet.db.models.appointment import Appointment
from innovet.services.appointments.lifecycle import AppointmentStatus
from innovet.services.appointments.records import Actor
from innovet.services.appointments.visibility import resolve_visible
from innovet.services.appointments.store import AppointmentStore, StoreCapabilities, _translate

from conftest import actor_for, insert_appointment, make_user


@pytest.fixture()
def legacy_db():
    """Session on a bare SQLite database with no tables yet."""

    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    session = sessionmaker(bind=engine)()
    yield session
    session.close()
    engine.dispose()


def _create_table(session, columns: str) -> None:
    session.execute(text(f"CREATE TABLE appointments ({columns})"))
    session.commit()


def _legacy_row(session, **values) -> uuid.UUID:
    values.setdefault("id", uuid.uuid4())
    values.setdefault("owner_id", uuid.uuid4())
    values.setdefault("status", "Pending")
    # Only the columns given, so no model defaults are added.
    target = table("appointments", *[column(name, Appointment.__table__.c[name].type) for name in values])
    session.execute(insert(target).values(**values))
    session.commit()
    return values["id"]


def test_list_is_sorted_by_date(db, store, owner) -> None:
    """Rows come back in ascending date order."""

    today = date.today()
    later = insert_appointment(db, owner, date=today + timedelta(days=5))
    sooner = insert_appointment(db, owner, date=today - timedelta(days=2))
    middle = insert_appointment(db, owner, date=today)

    records = store.list_by_owner(db, str(owner.user_id))
    assert [r.id for r in records] == [sooner, middle, later]
    assert store.capabilities(db).sort_column == "date"


def test_list_by_owner_excludes_other_owners(db, store, owner) -> None:
    """Owner listing is filtered in SQL."""

    other = make_user(db, "Rahul Verma")
    mine = insert_appointment(db, owner)
    insert_appointment(db, other)
    assert [r.id for r in store.list_by_owner(db, str(owner.user_id))] == [mine]
    assert len(store.list_all(db)) == 2


def test_list_for_vet_prefilters_by_id_and_name(db, store, owner, vet) -> None:
    """Assigned rows and name-only rows are fetched; rows for another vet id are not."""

    assigned = insert_appointment(db, owner, vet_id=vet.user_id, vet_name="Someone")
    by_name = insert_appointment(db, owner, vet_id=None, vet_name="Dr. Sarah Johnson")
    insert_appointment(db, owner, vet_id=uuid.uuid4(), vet_name="Sarah Johnson")
    insert_appointment(db, owner, vet_id=None, vet_name="Dr. Mike Chen")

    ids = {r.id for r in store.list_for_vet(db, actor_for(vet))}
    assert ids == {assigned, by_name}


def test_name_match_treats_wildcards_literally(db, store, owner) -> None:
    """A vet named with LIKE wildcards only matches literally."""

    odd = make_user(db, "100%", role="veterinarian")
    insert_appointment(db, owner, vet_id=None, vet_name="Dr. 1000")
    assert store.list_for_vet(db, actor_for(odd)) == []


def test_name_match_folds_non_ascii_case(db, store, owner) -> None:
    """Accented names match regardless of case, the same way the resolver matches them."""

    elodie = make_user(db, "ÉLODIE Martin", role="veterinarian")
    mine = insert_appointment(db, owner, vet_id=None, vet_name="Dr. élodie martin")
    insert_appointment(db, owner, vet_id=None, vet_name="Dr. Mike Chen")

    records = store.list_for_vet(db, actor_for(elodie))
    assert [r.id for r in records] == [mine]
    assert [r.id for r in resolve_visible(store.list_all(db), actor_for(elodie))] == [mine]


def test_degrades_to_created_at_sort(legacy_db, caplog) -> None:
    """Without a date column rows are ordered by created_at and a warning is logged."""

    _create_table(
        legacy_db,
        "id CHAR(32) PRIMARY KEY, owner_id CHAR(32), status VARCHAR, vet_name VARCHAR, created_at DATETIME",
    )
    now = datetime.utcnow()
    second = _legacy_row(legacy_db, created_at=now, status="Confirmed")
    first = _legacy_row(legacy_db, created_at=now - timedelta(hours=1))

    store = AppointmentStore()
    with caplog.at_level(logging.WARNING, logger="innovet.services.appointments.store"):
        records = store.list_all(legacy_db)

    assert [r.id for r in records] == [str(first), str(second)]
    assert records[1].status is AppointmentStatus.APPROVED
    assert records[0].date is None
    assert records[0].pet_name == "Pet"
    assert store.capabilities(legacy_db).sort_column == "created_at"
    assert "instead of date" in caplog.text


def test_unsorted_when_no_sort_column(legacy_db) -> None:
    """No date and no created_at still returns every row."""

    _create_table(legacy_db, "id CHAR(32) PRIMARY KEY, owner_id CHAR(32), status VARCHAR")
    _legacy_row(legacy_db)
    _legacy_row(legacy_db)

    store = AppointmentStore()
    assert len(store.list_all(legacy_db)) == 2
    assert store.capabilities(legacy_db).sort_column is None


def test_missing_table_is_schema_mismatch(legacy_db) -> None:
    """No appointments table at all reads as setup pending."""

    with pytest.raises(SchemaMismatch) as excinfo:
        AppointmentStore().list_all(legacy_db)
    assert "setup pending" in excinfo.value.message


def test_missing_required_column_is_schema_mismatch(legacy_db) -> None:
    """A table without status cannot be used."""

    _create_table(legacy_db, "id CHAR(32) PRIMARY KEY, owner_id CHAR(32)")
    with pytest.raises(SchemaMismatch):
        AppointmentStore().list_all(legacy_db)


def test_vet_listing_without_vet_id_column(legacy_db) -> None:
    """Older tables only have vet_name; the vet still finds rows by name."""

    _create_table(legacy_db, "id CHAR(32) PRIMARY KEY, owner_id CHAR(32), status VARCHAR, vet_name VARCHAR")
    mine = _legacy_row(legacy_db, vet_name="Dr. Sarah Johnson")
    _legacy_row(legacy_db, vet_name="Dr. Mike Chen")

    sarah = Actor(id=str(uuid.uuid4()), email="s@example.com", name="Sarah Johnson", role="veterinarian")
    assert [r.id for r in AppointmentStore().list_for_vet(legacy_db, sarah)] == [str(mine)]


def test_capabilities_are_probed_once(db, store, owner, monkeypatch) -> None:
    """Repeated reads reuse the negotiated shape."""

    calls = []
    original = store._probe

    def counting_probe(session):
        calls.append(1)
        return original(session)

    monkeypatch.setattr(store, "_probe", counting_probe)
    insert_appointment(db, owner)
    store.list_all(db)
    store.list_by_owner(db, str(owner.user_id))
    store.list_all(db)
    assert len(calls) == 1


def test_stale_capabilities_are_reprobed(legacy_db) -> None:
    """A cached shape naming a dropped column is replaced after one failed query."""

    _create_table(legacy_db, "id CHAR(32) PRIMARY KEY, owner_id CHAR(32), status VARCHAR, created_at DATETIME")
    _legacy_row(legacy_db, created_at=datetime.utcnow())

    store = AppointmentStore()
    store._capabilities = StoreCapabilities(
        columns=frozenset(Appointment.__table__.c.keys()),
        sort_column="date",
    )
    assert len(store.list_all(legacy_db)) == 1
    assert not store.capabilities(legacy_db).supports("date")


def test_create_drops_unknown_columns(legacy_db) -> None:
    """Inserts only write columns the table has."""

    _create_table(legacy_db, "id CHAR(32) PRIMARY KEY, owner_id CHAR(32), status VARCHAR, pet_name VARCHAR")
    store = AppointmentStore()
    record = store.create(
        legacy_db,
        {"owner_id": uuid.uuid4(), "status": "Pending", "pet_name": "Milo", "vet_id": uuid.uuid4()},
    )
    assert record.pet_name == "Milo"
    assert record.vet_id is None


def test_conditional_update_refuses_stale_status(db, store, owner, vet) -> None:
    """The second of two racing writers fails and the first write stands."""

    appointment_id = insert_appointment(db, owner, vet_id=vet.user_id)
    seen_by_a = store.get(db, appointment_id)
    seen_by_b = store.get(db, appointment_id)

    store.update_status(db, appointment_id, AppointmentStatus.APPROVED, seen_by_a.raw_status)
    db.commit()

    with pytest.raises(InvalidTransitionError) as excinfo:
        store.update_status(db, appointment_id, AppointmentStatus.REJECTED, seen_by_b.raw_status, "busy")
    assert "Approved" in excinfo.value.message
    db.rollback()

    stored = store.get(db, appointment_id)
    assert stored.status is AppointmentStatus.APPROVED
    assert stored.status_reason is None


def test_update_matches_legacy_raw_status(db, store, owner, vet) -> None:
    """A Confirmed row completes when the expected value is the stored one."""

    appointment_id = insert_appointment(db, owner, vet_id=vet.user_id, status="Confirmed")
    current = store.get(db, appointment_id)
    assert current.raw_status == "Confirmed"

    updated = store.update_status(db, appointment_id, AppointmentStatus.COMPLETED, current.raw_status)
    assert updated.status is AppointmentStatus.COMPLETED
    assert updated.raw_status == "Completed"


def test_unknown_or_malformed_id_is_not_found(db, store) -> None:
    """Both a well-formed unknown id and garbage map to NotFound."""

    with pytest.raises(NotFound):
        store.get(db, str(uuid.uuid4()))
    with pytest.raises(NotFound):
        store.get(db, "not-a-uuid")


def test_status_update_on_reduced_table(legacy_db) -> None:
    """Transitions write only status when the table has no reason or timestamp columns."""

    _create_table(legacy_db, "id CHAR(32) PRIMARY KEY, owner_id CHAR(32), status VARCHAR")
    appointment_id = str(_legacy_row(legacy_db))
    store = AppointmentStore()

    updated = store.update_status(legacy_db, appointment_id, AppointmentStatus.REJECTED, "Pending", "busy")
    assert updated.status is AppointmentStatus.REJECTED
    assert updated.status_reason is None


def test_connection_failures_are_store_unavailable() -> None:
    """Errors with no statement come from connecting, whatever their text says."""

    refused = OperationalError(None, None, Exception('FATAL: database "innovet" does not exist'))
    assert isinstance(_translate(refused), StoreUnavailable)

    dropped = OperationalError("SELECT 1", {}, Exception("server closed the connection"), connection_invalidated=True)
    assert isinstance(_translate(dropped), StoreUnavailable)


def test_statement_errors_on_missing_objects_are_schema_mismatch() -> None:
    """Missing tables and columns reported by a query read as setup pending."""

    for message in (
        "no such table: appointments",
        'relation "appointments" does not exist',
        "table appointments has no column named created_at",
    ):
        error = OperationalError("SELECT id FROM appointments", {}, Exception(message))
        assert isinstance(_translate(error), SchemaMismatch)

    timeout = OperationalError("SELECT id FROM appointments", {}, Exception("canceling statement due to statement timeout"))
    assert isinstance(_translate(timeout), StoreUnavailable)
