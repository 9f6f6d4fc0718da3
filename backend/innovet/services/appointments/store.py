"""Module: store.

SQLAlchemy-backed access to the ``appointments`` table.

Deployed databases do not all have the same columns: older ones lack
``vet_id``, ``status_reason`` or even ``date``. Instead of catching a column
error at every call site, the store probes the table once, caches the column
set it found (``StoreCapabilities``) and only ever selects, filters, sorts and
writes on those columns. If a query still trips over a missing column (the
table changed under a running process) the cache is dropped and the query is
retried once against a fresh probe.

Status writes are conditional on the status the caller last read, so two
veterinarians acting on the same pending row cannot both win.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

from sqlalchemy import Select, Table, and_, column, insert, inspect, or_, select, table, update
from sqlalchemy.exc import DBAPIError, NoSuchTableError
from sqlalchemy.orm import Session

from innovet.core.errors import InvalidTransitionError, NotFound, SchemaMismatch, StoreUnavailable
from innovet.db.models.appointment import Appointment
from innovet.services.appointments.lifecycle import AppointmentStatus
from innovet.services.appointments.records import Actor, AppointmentRecord, record_from_row
from innovet.services.appointments.visibility import is_visible_to_vet

LOGGER = logging.getLogger(__name__)

REQUIRED_COLUMNS = frozenset({"id", "owner_id", "status"})
# First present column wins; none present means unsorted results.
SORT_PREFERENCE = ("date", "created_at")


@dataclass(frozen=True)
class StoreCapabilities:
    columns: frozenset[str]
    sort_column: str | None

    def supports(self, column: str) -> bool:
        return column in self.columns


def _as_uuid(value: Any) -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise NotFound("Appointment not found")


def _error_text(exc: DBAPIError) -> str:
    return str(exc.orig or exc).lower()


def _is_missing_column(exc: DBAPIError) -> bool:
    if getattr(exc.orig, "pgcode", None) == "42703":
        return True
    text = _error_text(exc)
    return "no such column" in text or ("column" in text and "does not exist" in text)


# undefined_table, undefined_column, insufficient_privilege
SETUP_PGCODES = frozenset({"42P01", "42703", "42501"})
SETUP_MARKERS = ("no such table", "no such column", "has no column named", "permission denied")


def _is_connection_failure(exc: DBAPIError) -> bool:
    # Errors raised while checking out a connection carry no statement.
    return exc.connection_invalidated or exc.statement is None


def _is_setup_pending(exc: DBAPIError) -> bool:
    if getattr(exc.orig, "pgcode", None) in SETUP_PGCODES:
        return True
    text = _error_text(exc)
    if any(marker in text for marker in SETUP_MARKERS):
        return True
    return ("relation" in text or "column" in text) and "does not exist" in text


def _translate(exc: DBAPIError) -> Exception:
    if _is_connection_failure(exc):
        LOGGER.error("Appointments store unavailable: %s", _error_text(exc))
        return StoreUnavailable()
    if _is_setup_pending(exc):
        LOGGER.error("Appointments table not usable: %s", _error_text(exc))
        return SchemaMismatch()
    LOGGER.error("Appointments store unavailable: %s", _error_text(exc))
    return StoreUnavailable()


class AppointmentStore:
    def __init__(self, table: Table = Appointment.__table__):
        self._table = table
        self._capabilities: StoreCapabilities | None = None

    # -------------------------
    # Capability negotiation
    # -------------------------
    def capabilities(self, db: Session) -> StoreCapabilities:
        if self._capabilities is None:
            self._capabilities = self._probe(db)
        return self._capabilities

    def reset_capabilities(self) -> None:
        self._capabilities = None

    def _probe(self, db: Session) -> StoreCapabilities:
        try:
            present = {column["name"] for column in inspect(db.connection()).get_columns(self._table.name)}
        except NoSuchTableError:
            present = set()
        except DBAPIError as exc:
            raise _translate(exc) from exc

        missing = REQUIRED_COLUMNS - present
        if missing:
            LOGGER.error("Appointments table is missing required columns: %s", sorted(missing))
            raise SchemaMismatch()

        known = frozenset(name for name in present if name in self._table.c)
        sort_column = next((name for name in SORT_PREFERENCE if name in known), None)
        absent = sorted(set(self._table.c.keys()) - known)
        if absent:
            LOGGER.warning("Appointments table lacks optional columns %s; using reduced shape", absent)
        if sort_column != SORT_PREFERENCE[0]:
            LOGGER.warning("Appointments sorted by %s instead of date", sort_column or "nothing")
        return StoreCapabilities(columns=known, sort_column=sort_column)

    # -------------------------
    # Reads
    # -------------------------
    def _base_select(self, caps: StoreCapabilities) -> Select:
        stmt = select(*[self._table.c[name] for name in sorted(caps.columns)])
        if caps.sort_column:
            stmt = stmt.order_by(self._table.c[caps.sort_column].asc())
        return stmt

    def _fetch(
        self,
        db: Session,
        build: Callable[[StoreCapabilities], Select | None],
        retry: bool = True,
    ) -> list[AppointmentRecord]:
        while True:
            caps = self.capabilities(db)
            stmt = build(caps)
            if stmt is None:
                return []
            try:
                rows = db.execute(stmt).mappings().all()
            except DBAPIError as exc:
                if retry and _is_missing_column(exc):
                    LOGGER.warning("Appointments schema changed; probing again")
                    db.rollback()
                    self.reset_capabilities()
                    retry = False
                    continue
                raise _translate(exc) from exc
            return [record_from_row(row) for row in rows]

    def list_all(self, db: Session) -> list[AppointmentRecord]:
        return self._fetch(db, self._base_select)

    def list_by_owner(self, db: Session, owner_id: str) -> list[AppointmentRecord]:
        oid = _as_uuid(owner_id)
        return self._fetch(db, lambda caps: self._base_select(caps).where(self._table.c.owner_id == oid))

    def list_for_vet(self, db: Session, actor: Actor) -> list[AppointmentRecord]:
        """Rows that may belong to ``actor``.

        Narrowed in SQL to the actor's vet_id plus every name-only row. Name
        matching happens in Python because database ``lower()`` does not fold
        non-ASCII letters the same way ``str.lower()`` does.
        """
        has_name = bool((actor.name or "").strip())

        def build(caps: StoreCapabilities) -> Select | None:
            t = self._table
            conditions = []
            if caps.supports("vet_id"):
                conditions.append(t.c.vet_id == _as_uuid(actor.id))
            if has_name and caps.supports("vet_name"):
                name_only = t.c.vet_name.is_not(None)
                if caps.supports("vet_id"):
                    name_only = and_(t.c.vet_id.is_(None), name_only)
                conditions.append(name_only)
            if not conditions:
                return None
            return self._base_select(caps).where(or_(*conditions))

        return [record for record in self._fetch(db, build) if is_visible_to_vet(record, actor)]

    def get(self, db: Session, appointment_id: str, retry: bool = True) -> AppointmentRecord:
        aid = _as_uuid(appointment_id)
        rows = self._fetch(
            db,
            lambda caps: self._base_select(caps).where(self._table.c.id == aid),
            retry=retry,
        )
        if not rows:
            raise NotFound("Appointment not found")
        return rows[0]

    # -------------------------
    # Writes (caller commits)
    # -------------------------
    def _write_target(self, names: Any) -> Any:
        """Lightweight table naming only ``names``.

        Writing through the model table would add its Python-side defaults
        (``created_at``) even when the deployed table lacks those columns.
        """
        return table(self._table.name, *[column(name, self._table.c[name].type) for name in names])

    def create(self, db: Session, fields: dict[str, Any]) -> AppointmentRecord:
        caps = self.capabilities(db)
        appointment_id = uuid.uuid4()
        values = {"id": appointment_id}
        for name, value in fields.items():
            if caps.supports(name):
                values[name] = value
            elif value is not None:
                LOGGER.warning("Dropping %s on new appointment: column not in table", name)
        if caps.supports("created_at"):
            values["created_at"] = datetime.utcnow()

        try:
            db.execute(insert(self._write_target(values)).values(**values))
        except DBAPIError as exc:
            raise _translate(exc) from exc
        return self.get(db, str(appointment_id), retry=False)

    def update_status(
        self,
        db: Session,
        appointment_id: str,
        status: AppointmentStatus,
        expected_raw_status: str | None,
        reason: str | None = None,
    ) -> AppointmentRecord:
        """Write ``status`` only if the row still holds ``expected_raw_status``.

        Raises ``NotFound`` for unknown ids and ``InvalidTransitionError`` when
        someone else changed the status first.
        """
        caps = self.capabilities(db)
        aid = _as_uuid(appointment_id)
        values: dict[str, Any] = {"status": status.value}
        if reason is not None and caps.supports("status_reason"):
            values["status_reason"] = reason
        if caps.supports("updated_at"):
            values["updated_at"] = datetime.utcnow()

        t = self._write_target({"id", *values})
        stmt = update(t).where(t.c.id == aid)
        if expected_raw_status is None:
            stmt = stmt.where(t.c.status.is_(None))
        else:
            stmt = stmt.where(t.c.status == expected_raw_status)

        try:
            result = db.execute(stmt.values(**values))
        except DBAPIError as exc:
            raise _translate(exc) from exc

        current = self.get(db, appointment_id, retry=False)
        if result.rowcount == 0:
            LOGGER.warning(
                "Status update on appointment %s lost a race; now %s", appointment_id, current.status.value
            )
            raise InvalidTransitionError(
                f"Appointment was already updated to {current.status.value}."
            )
        return current
