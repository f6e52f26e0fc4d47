from __future__ import annotations

import logging
from typing import Optional

from sqlmodel import Session

from weekgrid.db import storage_errors, upsert_statement
from weekgrid.models import User
from weekgrid.models.user import utcnow

logger = logging.getLogger(__name__)


def get_user(session: Session, user_id: int) -> Optional[User]:
    with storage_errors(session, f"load user {user_id}"):
        return session.get(User, user_id)


def get_or_create_user(session: Session, user_id: int, display_name: str) -> User:
    """Return the user row for ``user_id``, creating it or refreshing its name.

    The write is a single INSERT .. ON CONFLICT DO UPDATE, so two first
    requests for the same id cannot both insert. Concurrent name changes
    resolve last-writer-wins, which is fine for a display name.
    """
    existing = get_user(session, user_id)
    if existing is not None and existing.display_name == display_name:
        return existing

    with storage_errors(session, f"save user {user_id}"):
        statement = upsert_statement(session, User).values(
            [{"id": user_id, "display_name": display_name, "created_at": utcnow()}]
        )
        statement = statement.on_conflict_do_update(
            index_elements=["id"],
            set_={"display_name": statement.excluded.display_name},
        )
        user = session.scalars(
            statement.returning(User),
            execution_options={"populate_existing": True},
        ).one()
        session.commit()
        session.refresh(user)

    if existing is None:
        logger.info(f"Created user {user_id}")
    else:
        logger.info(f"Updated display name for user {user_id}")
    return user
