"""Availability slot store.

Red is the default status of every hour and is represented by the absence of
a row: writing red deletes the row for that key, and a key without a row
reads as red (see ``SlotStatus.from_row``). Green and yellow are upserted on
the ``(user_id, date, hour)`` unique key.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from typing import Any, Iterable, NamedTuple, Optional, Union

from sqlmodel import Session, delete, select

from weekgrid.core.errors import InputError
from weekgrid.db import storage_errors, upsert_statement
from weekgrid.models import AvailabilitySlot, SlotStatus, User
from weekgrid.models.user import utcnow

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
MIN_HOUR = 0
MAX_HOUR = 23

DateLike = Union[str, dt.date]


class SlotChange(NamedTuple):
    """A validated request to set one hour to a status."""

    date: dt.date
    hour: int
    status: SlotStatus


def parse_slot_date(value: Any) -> dt.date:
    if isinstance(value, dt.datetime):
        raise InputError("Date must be a calendar date in YYYY-MM-DD format")
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value):
        raise InputError("Date must be a calendar date in YYYY-MM-DD format")
    try:
        return dt.date.fromisoformat(value)
    except ValueError:
        raise InputError(f"Invalid date: {value}") from None


def validate_slot(date: Any, hour: Any, status: Any) -> SlotChange:
    """Check one slot before anything is written."""
    day = parse_slot_date(date)
    if not isinstance(hour, int) or isinstance(hour, bool) or not MIN_HOUR <= hour <= MAX_HOUR:
        raise InputError("Hour must be between 0 and 23")
    try:
        slot_status = SlotStatus(status)
    except ValueError:
        raise InputError("Invalid status. Must be green, yellow, or red") from None
    return SlotChange(date=day, hour=hour, status=slot_status)


def query(session: Session, start_date: DateLike, end_date: DateLike) -> list[tuple[AvailabilitySlot, str]]:
    """Every stored slot between the two dates (inclusive) with its owner's display name.

    Ordered by date, then hour, then display name.
    """
    start = parse_slot_date(start_date)
    end = parse_slot_date(end_date)
    if start > end:
        return []

    statement = (
        select(AvailabilitySlot, User.display_name)
        .join(User, AvailabilitySlot.user_id == User.id)
        .where(AvailabilitySlot.date >= start, AvailabilitySlot.date <= end)
        .order_by(AvailabilitySlot.date, AvailabilitySlot.hour, User.display_name)
    )
    with storage_errors(session, f"load availability {start}..{end}"):
        rows = session.exec(statement).all()
    return [(slot, display_name) for slot, display_name in rows]


def get_status(session: Session, user_id: int, date: DateLike, hour: int) -> SlotStatus:
    change = validate_slot(date, hour, SlotStatus.RED)
    with storage_errors(session, f"load slot for user {user_id}"):
        slot = _find(session, user_id, change.date, change.hour)
    return SlotStatus.from_row(slot)


def _find(session: Session, user_id: int, day: dt.date, hour: int) -> Optional[AvailabilitySlot]:
    statement = select(AvailabilitySlot).where(
        AvailabilitySlot.user_id == user_id,
        AvailabilitySlot.date == day,
        AvailabilitySlot.hour == hour,
    )
    return session.exec(statement).first()


def _delete(session: Session, user_id: int, day: dt.date, hour: int) -> None:
    session.exec(
        delete(AvailabilitySlot).where(
            AvailabilitySlot.user_id == user_id,
            AvailabilitySlot.date == day,
            AvailabilitySlot.hour == hour,
        )
    )


def _upsert(session: Session, user_id: int, change: SlotChange, now: dt.datetime) -> AvailabilitySlot:
    statement = upsert_statement(session, AvailabilitySlot).values(
        [
            {
                "user_id": user_id,
                "date": change.date,
                "hour": change.hour,
                "status": change.status.value,
                "updated_at": now,
            }
        ]
    )
    statement = statement.on_conflict_do_update(
        index_elements=["user_id", "date", "hour"],
        set_={"status": statement.excluded.status, "updated_at": statement.excluded.updated_at},
    )
    # Plain column rows: each upsert keeps its own result even when a batch
    # writes the same key twice.
    row = session.connection().execute(statement.returning(*AvailabilitySlot.__table__.c)).one()
    return AvailabilitySlot(**row._mapping)


def save(session: Session, user_id: int, date: DateLike, hour: int, status: Union[str, SlotStatus]) -> Optional[AvailabilitySlot]:
    """Set one hour for ``user_id``.

    Red deletes the row (a no-op when there is none) and returns None.
    Green and yellow insert or update the row and return it.
    """
    change = validate_slot(date, hour, status)

    with storage_errors(session, f"save slot for user {user_id}"):
        if not change.status.persisted:
            _delete(session, user_id, change.date, change.hour)
            session.commit()
            logger.debug(f"Cleared slot {change.date} {change.hour}:00 for user {user_id}")
            return None

        slot = _upsert(session, user_id, change, utcnow())
        session.commit()
    logger.debug(f"Saved slot {change.date} {change.hour}:00 as {change.status.value} for user {user_id}")
    return slot


def batch_save(session: Session, user_id: int, slots: Iterable[Any]) -> list[AvailabilitySlot]:
    """Apply many slot changes for ``user_id`` in one transaction.

    ``slots`` items expose ``date``, ``hour`` and ``status`` attributes. All
    of them are validated before anything is written. Red slots are deleted
    first, then the rest are upserted in input order. Returns the upserted
    rows in that order; deletions are not reported. A storage failure rolls
    back the whole batch.
    """
    changes = [validate_slot(slot.date, slot.hour, slot.status) for slot in slots]
    if not changes:
        return []

    deletes = [change for change in changes if not change.status.persisted]
    upserts = [change for change in changes if change.status.persisted]
    now = utcnow()

    with storage_errors(session, f"batch save {len(changes)} slots for user {user_id}"):
        for change in deletes:
            _delete(session, user_id, change.date, change.hour)

        saved = [_upsert(session, user_id, change, now) for change in upserts]
        session.commit()

    logger.info(f"Batch saved availability for user {user_id}: {len(saved)} upserted, {len(deletes)} cleared")
    return saved
