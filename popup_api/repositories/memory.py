"""In-memory popup store for tests and throwaway runs."""
from __future__ import annotations

import copy
import threading
from typing import Any, Iterable

from popup_api.domain import popups as rules


class InMemoryPopupRepository:
    """List-backed repository; records are deep-copied on the way in and out."""

    def __init__(self, popups: Iterable[dict] | None = None) -> None:
        self._popups: list[dict] = copy.deepcopy(list(popups or []))
        self._lock = threading.Lock()

    def initialize(self) -> None:
        return None

    def list(self) -> list[dict]:
        with self._lock:
            return copy.deepcopy(self._popups)

    def save(self, popup: dict) -> dict:
        with self._lock:
            self._popups = rules.upsert(self._popups, copy.deepcopy(popup))
        return popup

    def delete(self, popup_id: Any) -> int:
        with self._lock:
            self._popups, removed = rules.remove(self._popups, popup_id)
        return removed
