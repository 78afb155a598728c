"""Popup repository backed by SQLAlchemy."""
from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from popup_api.db.create_tables import create_all
from popup_api.db.models import PopupRecord
from popup_api.db.session import get_session
from popup_api.domain import popups as rules
from popup_api.repositories.base import StorageError

logger = logging.getLogger(__name__)


class SQLPopupRepository:
    """Keeps each popup as a JSON payload row; ``position`` preserves list order."""

    def initialize(self) -> None:
        try:
            create_all()
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot create popup table: {exc}") from exc

    def list(self) -> list[dict]:
        try:
            with get_session() as session:
                stmt = select(PopupRecord.payload).order_by(PopupRecord.position)
                return [dict(payload) for payload in session.execute(stmt).scalars().all()]
        except (SQLAlchemyError, ValueError) as exc:
            raise StorageError(f"cannot list popups: {exc}") from exc

    def save(self, popup: dict) -> dict:
        key = rules.id_key(popup.get("id"))
        try:
            with get_session() as session:
                entity = None
                if rules.has_id(popup) and rules.is_comparable_id(popup["id"]):
                    stmt = (
                        select(PopupRecord)
                        .where(PopupRecord.popup_key == key)
                        .order_by(PopupRecord.position)
                        .limit(1)
                    )
                    entity = session.execute(stmt).scalar_one_or_none()
                if entity is None:
                    session.add(PopupRecord(popup_key=key, payload=popup))
                else:
                    entity.payload = popup
                session.commit()
        except (SQLAlchemyError, ValueError) as exc:
            raise StorageError(f"cannot save popup: {exc}") from exc
        return popup

    def delete(self, popup_id: Any) -> int:
        try:
            with get_session() as session:
                result = session.execute(delete(PopupRecord).where(PopupRecord.popup_key == rules.id_key(popup_id)))
                session.commit()
                return int(result.rowcount or 0)
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot delete popup {popup_id}: {exc}") from exc
