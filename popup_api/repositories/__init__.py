"""
Persistence adapters.

Each module implements the ``PopupRepository`` protocol from ``base`` (JSON
file today, SQL or memory when configured). Services depend on the protocol
rather than touching the JSON file.
"""

from popup_api.repositories.base import PopupRepository, StorageError

__all__ = ["PopupRepository", "StorageError"]
