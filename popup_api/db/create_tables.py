"""Create the ``popups`` table on the configured DATABASE_URL.

Run ``python -m popup_api.db.create_tables`` once per database, or let the SQL
repository do it on startup.
"""
from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError

from .models import PopupRecord
from .session import Base, get_engine

logger = logging.getLogger(__name__)


def create_all() -> None:
    """Idempotent: existing tables are left untouched."""
    Base.metadata.create_all(bind=get_engine(), tables=[PopupRecord.__table__], checkfirst=True)
    logger.debug("Ensured table %s", PopupRecord.__tablename__)


if __name__ == "__main__":
    try:
        create_all()
    except SQLAlchemyError as exc:
        raise SystemExit(f"Could not create the popups table: {exc}") from exc
    print(f"Table '{PopupRecord.__tablename__}' is ready.")
