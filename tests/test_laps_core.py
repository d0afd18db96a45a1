from __future__ import annotations

import json

import pytest

from lapwatch.laps import LapDataError, LapEntry, LapStore, parse_laps


def test_record_lap_zero_is_ignored() -> None:
    store = LapStore()
    assert store.record_lap(0) is None
    assert len(store) == 0
    assert store.laps() == ()


def test_record_lap_assigns_sequential_ordinals_most_recent_first() -> None:
    store = LapStore()
    a = store.record_lap(1500)
    b = store.record_lap(2300)
    c = store.record_lap(2300)

    assert (a, b, c) == (LapEntry(1, 1500), LapEntry(2, 2300), LapEntry(3, 2300))
    assert [e.ordinal for e in store.laps()] == [3, 2, 1]
    assert store.latest() == c


def test_negative_elapsed_is_a_programming_error() -> None:
    with pytest.raises(ValueError):
        LapStore().record_lap(-1)


def test_lap_entries_are_immutable() -> None:
    entry = LapStore().record_lap(10)
    assert entry is not None
    with pytest.raises(AttributeError):
        entry.elapsed_ms = 20  # type: ignore[misc]


def test_clear_then_record_starts_at_one() -> None:
    store = LapStore()
    store.record_lap(5)
    store.record_lap(6)
    store.clear_laps()
    assert len(store) == 0
    entry = store.record_lap(7)
    assert entry is not None and entry.ordinal == 1


def test_serialize_load_round_trip() -> None:
    store = LapStore()
    for ms in (1500, 61_010, 125_430):
        store.record_lap(ms)
    raw = store.serialize()

    restored = LapStore()
    assert restored.load(raw) is True
    assert restored.laps() == store.laps()

    nxt = restored.record_lap(130_000)
    assert nxt is not None and nxt.ordinal == 4


def test_serialized_form_is_most_recent_first_with_display_text() -> None:
    store = LapStore()
    store.record_lap(1500)
    store.record_lap(125_430)

    payload = json.loads(store.serialize())
    assert payload == [
        {"ordinal": 2, "elapsed_ms": 125_430, "formatted": "02:05.43"},
        {"ordinal": 1, "elapsed_ms": 1500, "formatted": "00:01.50"},
    ]


def test_load_absent_is_empty_and_ok() -> None:
    store = LapStore()
    store.record_lap(100)
    assert store.load(None) is True
    assert len(store) == 0


@pytest.mark.parametrize(
    "raw",
    [
        "",
        "not json",
        "{}",
        "[1, 2]",
        '[{"ordinal": 1}]',
        '[{"ordinal": "1", "elapsed_ms": 10}]',
        '[{"ordinal": true, "elapsed_ms": 10}]',
        '[{"ordinal": 0, "elapsed_ms": 10}]',
        '[{"ordinal": 1, "elapsed_ms": -5}]',
        '[{"ordinal": 1, "elapsed_ms": 1.5}]',
        '[{"ordinal": 1, "elapsed_ms": 10}, {"ordinal": 1, "elapsed_ms": 20}]',
        "[" * 100_000,
    ],
)
def test_malformed_load_equals_no_persisted_data(raw: str) -> None:
    store = LapStore()
    store.record_lap(999)

    assert store.load(raw) is False
    assert store.laps() == ()
    entry = store.record_lap(50)
    assert entry is not None and entry.ordinal == 1


def test_parse_laps_raises_lap_data_error() -> None:
    with pytest.raises(LapDataError):
        parse_laps("[{")


def test_parse_laps_orders_by_ordinal_and_ignores_formatted_text() -> None:
    raw = json.dumps(
        [
            {"ordinal": 3, "elapsed_ms": 30, "formatted": "garbage"},
            {"ordinal": 1, "elapsed_ms": 10},
            {"ordinal": 2, "elapsed_ms": 20},
        ]
    )
    assert parse_laps(raw) == [LapEntry(1, 10), LapEntry(2, 20), LapEntry(3, 30)]


def test_ordinal_continues_from_max_after_gappy_history() -> None:
    store = LapStore()
    store.load(json.dumps([{"ordinal": 2, "elapsed_ms": 20}, {"ordinal": 5, "elapsed_ms": 50}]))
    entry = store.record_lap(60)
    assert entry is not None and entry.ordinal == 6
