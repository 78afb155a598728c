"""Popup use cases: list, create/update, delete, list active."""
from __future__ import annotations

import logging
from typing import Any, Callable

from popup_api.domain import popups as rules
from popup_api.repositories.base import PopupRepository

logger = logging.getLogger(__name__)


class PopupService:
    """Orchestrates a ``PopupRepository``; every call is one read-modify-write cycle."""

    def __init__(
        self,
        repository: PopupRepository,
        *,
        today: Callable[[], str] = rules.today_utc,
        next_id: Callable[[], int] | None = None,
    ) -> None:
        self.repository = repository
        self._today = today
        self._next_id = next_id or rules.MonotonicIdGenerator()

    def list_popups(self) -> list[dict]:
        return self.repository.list()

    def save_popup(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Store ``payload``, generating an id when it has none. Returns the saved record."""
        popup = dict(payload)
        if not rules.has_id(popup):
            popup["id"] = self._next_id()
        saved = self.repository.save(popup)
        logger.info("Saved popup %s", saved.get("id"))
        return saved

    def delete_popup(self, raw_id: str) -> int:
        """Remove popups whose id equals the integer read from ``raw_id``.

        Unknown or unparseable ids remove nothing; callers report success either way.
        """
        popup_id = rules.parse_popup_id(raw_id)
        if popup_id is None:
            logger.info("Ignoring delete for non-numeric popup id %r", raw_id)
            return 0
        removed = self.repository.delete(popup_id)
        logger.info("Deleted popup %s (%d record(s))", popup_id, removed)
        return removed

    def list_active(self) -> list[dict]:
        return rules.active_popups(self.repository.list(), self._today())
