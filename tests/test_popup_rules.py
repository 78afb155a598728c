from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

# make the package importable without installing it
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from popup_api.domain import popups as rules  # noqa: E402


def test_has_id_treats_falsy_values_as_missing():
    assert rules.has_id({"id": 5})
    assert rules.has_id({"id": "abc"})
    for value in (None, 0, "", False):
        assert not rules.has_id({"id": value})
    assert not rules.has_id({"name": "A"})


def test_ids_match_is_strict_about_types():
    assert rules.ids_match(1, 1)
    assert rules.ids_match(1, 1.0)
    assert not rules.ids_match(1, "1")
    assert not rules.ids_match(True, 1)
    assert rules.ids_match(True, True)


def test_upsert_replaces_first_match_in_place():
    stored = [{"id": 1, "title": "a"}, {"id": 2, "title": "b"}, {"id": 3, "title": "c"}]
    result = rules.upsert(stored, {"id": 2, "title": "B"})
    assert [p["id"] for p in result] == [1, 2, 3]
    assert result[1] == {"id": 2, "title": "B"}
    assert stored[1]["title"] == "b"


def test_upsert_appends_unmatched_and_idless_records():
    stored = [{"id": 1}]
    assert rules.upsert(stored, {"id": 99})[-1] == {"id": 99}
    assert rules.upsert(stored, {"title": "x"}) == [{"id": 1}, {"title": "x"}]


def test_upsert_only_touches_first_duplicate():
    stored = [{"id": 7, "v": 1}, {"id": 7, "v": 2}]
    assert rules.upsert(stored, {"id": 7, "v": 3}) == [{"id": 7, "v": 3}, {"id": 7, "v": 2}]


def test_remove_drops_every_match_and_counts_them():
    stored = [{"id": 1}, {"id": 2}, {"id": 1}]
    kept, removed = rules.remove(stored, 1)
    assert kept == [{"id": 2}]
    assert removed == 2

    kept, removed = rules.remove(stored, 42)
    assert kept == stored
    assert removed == 0


def test_parse_popup_id_reads_leading_integer():
    assert rules.parse_popup_id("1700000000000") == 1700000000000
    assert rules.parse_popup_id(" 12abc") == 12
    assert rules.parse_popup_id("-3") == -3
    assert rules.parse_popup_id("abc") is None
    assert rules.parse_popup_id("") is None


def test_is_active_uses_inclusive_bounds():
    today = "2024-06-15"
    assert rules.is_active({}, today)
    assert rules.is_active({"startDate": "2024-06-15", "endDate": "2024-06-15"}, today)
    assert rules.is_active({"startDate": "", "endDate": None}, today)
    assert not rules.is_active({"startDate": "2024-06-16"}, today)
    assert not rules.is_active({"endDate": "2024-06-14"}, today)


def test_future_start_date_is_never_active_before_it():
    assert rules.active_popups([{"id": 1, "startDate": "2099-01-01"}], "2024-06-15") == []


def test_saved_at_millis_handles_strings_numbers_and_garbage():
    assert rules.saved_at_millis({}) == 0.0
    assert rules.saved_at_millis({"savedAt": "not a date"}) == 0.0
    assert rules.saved_at_millis({"savedAt": 1500}) == 1500.0
    assert rules.saved_at_millis({"savedAt": "1970-01-01T00:00:01Z"}) == 1000.0
    assert rules.saved_at_millis({"savedAt": "1970-01-01T00:00:02"}) == 2000.0


def test_active_popups_sorted_newest_first_with_missing_saved_at_last():
    popups = [
        {"id": 1},
        {"id": 2, "savedAt": "2024-01-01T00:00:00.000Z"},
        {"id": 3, "savedAt": "2024-05-01T10:00:00.000Z"},
        {"id": 4, "savedAt": "2024-03-01T00:00:00.000Z", "endDate": "2024-01-01"},
        {"id": 5},
    ]
    result = rules.active_popups(popups, "2024-06-15")
    assert [p["id"] for p in result] == [3, 2, 1, 5]


def test_id_generator_never_repeats_on_a_frozen_clock():
    gen = rules.MonotonicIdGenerator(clock=lambda: 1_700_000_000.0)
    ids = [gen() for _ in range(5)]
    assert ids[0] == 1_700_000_000_000
    assert ids == sorted(set(ids))


def test_id_generator_is_thread_safe():
    gen = rules.MonotonicIdGenerator(clock=lambda: 1.0)
    seen: list[int] = []
    lock = threading.Lock()

    def worker():
        for _ in range(200):
            value = gen()
            with lock:
                seen.append(value)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(seen) == len(set(seen)) == 800


def test_id_key_normalizes_integral_floats():
    assert rules.id_key(5) == rules.id_key(5.0)
    assert rules.id_key(5) != rules.id_key("5")
    assert rules.id_key(True) != rules.id_key(1)


def test_parse_popup_id_ignores_non_ascii_digits():
    assert rules.parse_popup_id("١٢") is None
    assert rules.parse_popup_id("12١") == 12


def test_container_ids_count_as_present_but_never_match():
    assert rules.has_id({"id": []})
    assert rules.has_id({"id": {}})
    assert not rules.ids_match([], [])
    assert not rules.ids_match({"a": 1}, {"a": 1})

    stored = [{"id": [], "v": 1}]
    assert rules.upsert(stored, {"id": [], "v": 2}) == [{"id": [], "v": 1}, {"id": [], "v": 2}]
    assert rules.remove(stored, []) == (stored, 0)


def test_loads_strict_rejects_non_finite_numbers():
    assert rules.loads_strict('{"w": 1.5, "n": 10}') == {"w": 1.5, "n": 10}
    for text in ('{"w": NaN}', '{"w": Infinity}', '[-Infinity]', '{"w": 1e999}'):
        with pytest.raises(ValueError):
            rules.loads_strict(text)


def test_dumps_strict_refuses_nan_and_keeps_non_ascii():
    assert rules.dumps_strict({"title": "팝업"}) == '{"title": "팝업"}'
    with pytest.raises(ValueError):
        rules.dumps_strict([{"w": float("nan")}])
