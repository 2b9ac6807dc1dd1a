from datetime import date, datetime

import pytest

from shiftpay.models import Settings, Shift, TaxSettings
from shiftpay.storage import DataStore
from shiftpay.time_tracking import (
    ActiveClockError,
    ShiftOverlapError,
    ShiftValidationError,
    add_shift,
    clock_in,
    clock_out,
    delete_shift,
    edit_shift,
    import_shifts,
    update_active_clock,
    week_bounds,
    weekly_stats,
)


def build_store(tmp_path) -> DataStore:
    store = DataStore(tmp_path / "data")
    store.settings = Settings(hourly_rate=10, tax_settings=TaxSettings(is_1099=True))
    return store


def test_week_bounds_sunday_start():
    assert week_bounds(date(2024, 1, 3), 0) == (date(2023, 12, 31), date(2024, 1, 6))
    assert week_bounds(date(2023, 12, 31), 0) == (date(2023, 12, 31), date(2024, 1, 6))


def test_week_bounds_monday_start():
    assert week_bounds(date(2024, 1, 3), 1) == (date(2024, 1, 1), date(2024, 1, 7))
    assert week_bounds(date(2024, 1, 7), 1) == (date(2024, 1, 1), date(2024, 1, 7))


def test_add_shift_rejects_overlap(tmp_path):
    store = build_store(tmp_path)
    add_shift(store, shift_date="2024-01-01", start_time="08:00", end_time="12:00", shift_id="a")

    with pytest.raises(ShiftOverlapError) as excinfo:
        add_shift(store, shift_date="2024-01-01", start_time="11:00", end_time="15:00")

    assert str(excinfo.value) == "This shift overlaps with an existing entry."
    assert excinfo.value.conflict.id == "a"
    assert list(store.shifts) == ["a"]


def test_add_shift_rejects_existing_id(tmp_path):
    store = build_store(tmp_path)
    add_shift(store, shift_date="2024-01-01", start_time="08:00", end_time="12:00", shift_id="x")

    with pytest.raises(ShiftValidationError) as excinfo:
        add_shift(store, shift_date="2024-01-05", start_time="08:00", end_time="12:00", shift_id="x")

    assert str(excinfo.value) == "Shift id x already exists"
    assert store.shifts["x"].date == "2024-01-01"
    assert DataStore(tmp_path).shifts["x"].date == "2024-01-01"


def test_back_to_back_shift_is_accepted(tmp_path):
    store = build_store(tmp_path)
    add_shift(store, shift_date="2024-01-01", start_time="08:00", end_time="12:00")
    add_shift(store, shift_date="2024-01-01", start_time="12:00", end_time="15:00")

    assert len(store.shifts) == 2


def test_add_shift_requires_all_fields(tmp_path):
    store = build_store(tmp_path)

    with pytest.raises(ShiftValidationError):
        add_shift(store, shift_date="2024-01-01", start_time="", end_time="12:00")


def test_edit_shift_ignores_its_own_previous_range(tmp_path):
    store = build_store(tmp_path)
    add_shift(store, shift_date="2024-01-01", start_time="08:00", end_time="12:00", shift_id="a")
    add_shift(store, shift_date="2024-01-01", start_time="13:00", end_time="17:00", shift_id="b")

    updated = edit_shift(store, "a", end_time="12:30")

    assert updated == Shift(id="a", date="2024-01-01", start_time="08:00", end_time="12:30")
    with pytest.raises(ShiftOverlapError):
        edit_shift(store, "a", end_time="14:00")


def test_delete_unknown_shift_raises(tmp_path):
    store = build_store(tmp_path)

    with pytest.raises(ShiftValidationError):
        delete_shift(store, "missing")


def test_delete_shift_persists(tmp_path):
    store = build_store(tmp_path)
    add_shift(store, shift_date="2024-01-01", start_time="08:00", end_time="12:00", shift_id="a")

    delete_shift(store, "a")

    assert DataStore(tmp_path / "data").shifts == {}


def test_clock_in_then_out_saves_a_shift(tmp_path):
    store = build_store(tmp_path)
    clock_in(store, datetime(2024, 1, 2, 8, 5))

    with pytest.raises(ActiveClockError):
        clock_in(store, datetime(2024, 1, 2, 9, 0))

    shift = clock_out(store, datetime(2024, 1, 2, 16, 35))

    assert (shift.date, shift.start_time, shift.end_time) == ("2024-01-02", "08:05", "16:35")
    reloaded = DataStore(tmp_path / "data")
    assert reloaded.active_clock is None
    assert shift.id in reloaded.shifts


def test_clock_out_without_clock_in_raises(tmp_path):
    with pytest.raises(ActiveClockError):
        clock_out(build_store(tmp_path), datetime(2024, 1, 2, 16, 0))


def test_overnight_clock_out_rolls_over(tmp_path):
    store = build_store(tmp_path)
    clock_in(store, datetime(2024, 1, 2, 22, 0))
    clock_out(store, datetime(2024, 1, 3, 6, 30))

    stats = weekly_stats(store, date(2024, 1, 2), datetime(2024, 1, 3, 7, 0))

    assert stats.total_hours == 8.5


def test_update_active_clock_corrects_start(tmp_path):
    store = build_store(tmp_path)
    clock_in(store, datetime(2024, 1, 2, 9, 0))

    clock = update_active_clock(store, "2024-01-02", "08:30")

    assert (clock.date, clock.time) == ("2024-01-02", "08:30")
    assert DataStore(tmp_path / "data").active_clock.time == "08:30"


def test_weekly_stats_include_running_shift(tmp_path):
    store = build_store(tmp_path)
    add_shift(store, shift_date="2024-01-01", start_time="08:00", end_time="12:00")
    clock_in(store, datetime(2024, 1, 2, 8, 0))

    stats = weekly_stats(store, date(2024, 1, 2), datetime(2024, 1, 2, 10, 0))

    assert stats.total_hours == 6
    assert stats.gross_pay == 60


def test_weekly_stats_ignore_other_weeks(tmp_path):
    store = build_store(tmp_path)
    add_shift(store, shift_date="2024-01-01", start_time="08:00", end_time="12:00")
    add_shift(store, shift_date="2024-01-09", start_time="08:00", end_time="12:00")
    clock_in(store, datetime(2024, 1, 10, 8, 0))

    stats = weekly_stats(store, date(2024, 1, 3), datetime(2024, 1, 10, 9, 0))

    assert stats.total_hours == 4


def test_import_assigns_fresh_ids_without_overlap_check(tmp_path):
    store = build_store(tmp_path)
    add_shift(store, shift_date="2024-01-01", start_time="08:00", end_time="12:00")
    incoming = [Shift(id="", date="2024-01-01", start_time="09:00", end_time="10:00")]

    imported = import_shifts(store, incoming)

    assert imported[0].id
    assert len(store.shifts) == 2
