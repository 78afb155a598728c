"""Domain rules for popup records (id matching, upsert, visibility window, ordering)."""
from __future__ import annotations

import json
import math
import re
import threading
import time
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Mapping

# ASCII digits only: "١٢" is not an id
INTEGER_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")


def _reject_constant(name: str) -> float:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"{text} is out of range for a JSON number")
    return value


def loads_strict(text: str | bytes) -> Any:
    """``json.loads`` that refuses NaN, Infinity and numbers that overflow to infinity."""
    return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)


def dumps_strict(value: Any, **kwargs: Any) -> str:
    """``json.dumps`` that raises ValueError instead of emitting NaN or Infinity."""
    return json.dumps(value, ensure_ascii=False, allow_nan=False, **kwargs)


def has_id(popup: Mapping[str, Any]) -> bool:
    """Return True when the record carries a usable id.

    Missing, null, 0, "" and false do not count. Lists and objects do, even empty
    ones, although they never match a stored id (see ``ids_match``).
    """
    value = popup.get("id")
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


def is_comparable_id(value: Any) -> bool:
    return not isinstance(value, (list, dict))


def ids_match(left: Any, right: Any) -> bool:
    """Strict id equality: 1 == 1.0, but "1" != 1, booleans only equal booleans
    and lists/objects never equal anything."""
    if not (is_comparable_id(left) and is_comparable_id(right)):
        return False
    if isinstance(left, bool) or isinstance(right, bool):
        return type(left) is type(right) and left == right
    return left == right


def id_key(value: Any) -> str:
    """Stable string form of an id, used where ids must be indexed (SQL backend)."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return json.dumps(value, sort_keys=True, ensure_ascii=False)


def parse_popup_id(raw: str | None) -> int | None:
    """Read the leading integer of a path segment ("12abc" -> 12); None when there is none."""
    match = INTEGER_PREFIX.match(raw or "")
    if not match:
        return None
    return int(match.group(1))


def upsert(popups: Iterable[dict], popup: dict) -> list[dict]:
    """Replace the first record sharing ``popup``'s id, or append it."""
    result = list(popups)
    if has_id(popup):
        for index, current in enumerate(result):
            if isinstance(current, dict) and ids_match(current.get("id"), popup["id"]):
                result[index] = popup
                return result
    result.append(popup)
    return result


def remove(popups: Iterable[dict], popup_id: Any) -> tuple[list[dict], int]:
    """Drop every record whose id equals ``popup_id``; returns (kept, removed_count)."""
    kept: list[dict] = []
    removed = 0
    for current in popups:
        if isinstance(current, dict) and ids_match(current.get("id"), popup_id):
            removed += 1
            continue
        kept.append(current)
    return kept, removed


def today_utc() -> str:
    return datetime.now(timezone.utc).date().isoformat()


def is_active(popup: Mapping[str, Any], today: str) -> bool:
    """Inclusive [startDate, endDate] check on ISO date strings; empty bounds are open."""
    start = popup.get("startDate")
    if start and today < str(start):
        return False
    end = popup.get("endDate")
    if end and today > str(end):
        return False
    return True


def saved_at_millis(popup: Mapping[str, Any]) -> float:
    """Epoch milliseconds of ``savedAt``; missing or unreadable values count as the epoch."""
    value = popup.get("savedAt")
    if not value or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return float(value)
    text = str(value).strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp() * 1000


def active_popups(popups: Iterable[dict], today: str) -> list[dict]:
    """Records visible on ``today``, newest ``savedAt`` first (stable for ties)."""
    visible = [p for p in popups if isinstance(p, dict) and is_active(p, today)]
    return sorted(visible, key=saved_at_millis, reverse=True)


class MonotonicIdGenerator:
    """Millisecond-timestamp ids that never repeat within one generator."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        candidate = int(self._clock() * 1000)
        with self._lock:
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate
