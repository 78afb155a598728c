"""Storage contract shared by every popup backend."""
from __future__ import annotations

from typing import Any, Protocol


class StorageError(Exception):
    """Raised when the backing store cannot be read, parsed or written."""


class PopupRepository(Protocol):
    def initialize(self) -> None:
        """Create missing backing resources (directory, file, tables)."""

    def list(self) -> list[dict]:
        """Return every stored record in stored order."""

    def save(self, popup: dict) -> dict:
        """Replace the first record with the same id, or append; returns the stored record."""

    def delete(self, popup_id: Any) -> int:
        """Remove all records with ``popup_id``; returns how many were removed."""
