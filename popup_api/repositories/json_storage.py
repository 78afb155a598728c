"""
JSON file persistence adapter.

The whole collection lives in one file holding a top-level array. Every call
reads the file, works on an in-memory copy and rewrites the file through a
temporary sibling plus ``os.replace`` so readers never see a half-written
array. A lock serializes read-modify-write cycles inside the process; other
processes writing the same file still race (last writer wins).
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from popup_api.domain import popups as rules
from popup_api.repositories.base import StorageError

logger = logging.getLogger(__name__)


class JsonPopupRepository:
    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def initialize(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            if not self.path.exists():
                self._write([])
                logger.info("Initialized empty popup store at %s", self.path)
        except OSError as exc:
            raise StorageError(f"cannot initialize {self.path}: {exc}") from exc

    def list(self) -> list[dict]:
        return self._read()

    def save(self, popup: dict) -> dict:
        with self._lock:
            self._write(rules.upsert(self._read(), popup))
        return popup

    def delete(self, popup_id: Any) -> int:
        with self._lock:
            kept, removed = rules.remove(self._read(), popup_id)
            self._write(kept)
        return removed

    def _read(self) -> list[dict]:
        try:
            text = self.path.read_text(encoding="utf-8")
            data = rules.loads_strict(text)
        except (OSError, ValueError) as exc:
            raise StorageError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, list):
            raise StorageError(f"{self.path} does not hold a JSON array")
        return data

    def _write(self, popups: list[dict]) -> None:
        try:
            content = rules.dumps_strict(popups, indent=2)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"refusing to write {self.path}: {exc}") from exc
        try:
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), prefix=self.path.name, suffix=".tmp")
        except OSError as exc:
            raise StorageError(f"cannot write {self.path}: {exc}") from exc
        try:
            try:
                handle = os.fdopen(fd, "w", encoding="utf-8")
            except OSError:
                os.close(fd)
                raise
            with handle:
                handle.write(content)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise StorageError(f"cannot write {self.path}: {exc}") from exc
