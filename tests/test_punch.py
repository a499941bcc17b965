import asyncio
from datetime import datetime, timedelta

import pytest

from conftest import NOW, make_entry


def test_clock_in_creates_open_entry(punch, store):
    result = asyncio.run(punch.clock_in(1, "front register"))
    assert result.success is True
    assert result.entry.is_open
    assert result.entry.clock_in == NOW
    assert store.entries[result.entry.entry_id].notes == "front register"


def test_clock_in_unknown_or_inactive_employee(punch):
    assert asyncio.run(punch.clock_in(99)).success is False
    result = asyncio.run(punch.clock_in(2))
    assert result.success is False
    assert "not an active employee" in result.message


def test_double_clock_in_rejected(punch, store):
    store.add(make_entry(1, datetime(2026, 3, 10, 9, 0)))
    result = asyncio.run(punch.clock_in(1))
    assert result.success is False
    assert "already clocked in" in result.message
    assert len(store.entries) == 1


def test_clock_in_cooldown(punch, store, clock):
    store.add(make_entry(1, datetime(2026, 3, 10, 9, 0), datetime(2026, 3, 10, 15, 0)))
    result = asyncio.run(punch.clock_in(1))
    assert result.success is False
    assert "Must wait" in result.message
    clock.set(datetime(2026, 3, 10, 19, 0))
    assert asyncio.run(punch.clock_in(1)).success is True


def test_clock_out_computes_totals(punch, store):
    store.add(make_entry(1, datetime(2026, 3, 10, 9, 0), notes="opened"))
    result = asyncio.run(punch.clock_out(1, "closing duties"))
    assert result.success is True
    saved = store.entries[1]
    assert saved.clock_out == NOW
    assert saved.total_hours == pytest.approx(9.0)
    assert saved.gross_pay == pytest.approx(135.0)
    assert saved.notes == "opened; closing duties"


def test_clock_out_cross_midnight(punch, store, clock):
    store.add(make_entry(1, datetime(2026, 3, 10, 23, 30)))
    clock.set(datetime(2026, 3, 11, 1, 0))
    result = asyncio.run(punch.clock_out(1))
    assert result.success is True
    assert result.entry.total_hours == pytest.approx(1.5)
    assert result.entry.shift_date == datetime(2026, 3, 10).date()


def test_clock_out_without_open_entry(punch):
    result = asyncio.run(punch.clock_out(1))
    assert result.success is False
    assert result.message == "Not currently clocked in"


def test_clock_out_too_soon(punch, store):
    store.add(make_entry(1, NOW - timedelta(seconds=30)))
    result = asyncio.run(punch.clock_out(1))
    assert result.success is False
    assert "at least 1 minute" in result.message


def test_clock_out_after_max_shift_needs_manager(punch, store):
    store.add(make_entry(1, NOW - timedelta(hours=17)))
    result = asyncio.run(punch.clock_out(1))
    assert result.success is False
    assert "manager" in result.message
    assert store.entries[1].is_open


def test_failed_save_reported(punch, store):
    store.add(make_entry(1, datetime(2026, 3, 10, 9, 0)))
    store.update_result = False
    result = asyncio.run(punch.clock_out(1))
    assert result.success is False
    assert store.entries[1].is_open
