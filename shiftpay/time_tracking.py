from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional, Tuple
from uuid import uuid4

from .calculator import calculate_weekly_stats
from .logging import get_logger
from .models import ActiveClock, Shift, ShiftStats
from .shifts import find_overlap
from .storage import DataStore
from .tax_tables import TaxTable
from .time_range import local_instant

logger = get_logger(__name__)

ACTIVE_SHIFT_ID = "active"


class TimeTrackingError(ValueError):
    """A shift or clock operation was refused; the message is user-facing."""


class ShiftValidationError(TimeTrackingError):
    pass


class ShiftOverlapError(TimeTrackingError):
    def __init__(self, conflict: Shift):
        super().__init__("This shift overlaps with an existing entry.")
        self.conflict = conflict


class ActiveClockError(TimeTrackingError):
    pass


def week_bounds(anchor: date, week_start_day: int = 0) -> Tuple[date, date]:
    """Inclusive first and last day of the week holding ``anchor``.

    ``week_start_day`` counts from Sunday (0) to Saturday (6).
    """

    sunday_based = (anchor.weekday() + 1) % 7
    start = anchor - timedelta(days=(sunday_based - week_start_day) % 7)
    return start, start + timedelta(days=6)


def _in_week(date_value: str, start: date, end: date) -> bool:
    try:
        return start <= date.fromisoformat(date_value) <= end
    except ValueError:
        return False


def shifts_in_week(shifts: Iterable[Shift], anchor: date, week_start_day: int = 0) -> List[Shift]:
    start, end = week_bounds(anchor, week_start_day)
    return [shift for shift in shifts if _in_week(shift.date, start, end)]


def active_shift(clock: ActiveClock, now: datetime) -> Shift:
    now = local_instant(now)
    return Shift(id=ACTIVE_SHIFT_ID, date=clock.date, start_time=clock.time, end_time=f"{now:%H:%M}")


def clock_in(store: DataStore, now: datetime) -> ActiveClock:
    now = local_instant(now)
    if store.active_clock is not None:
        raise ActiveClockError(f"Already clocked in since {store.active_clock.date} {store.active_clock.time}")
    clock = ActiveClock(date=now.date().isoformat(), time=f"{now:%H:%M}", timestamp=now.timestamp())
    store.active_clock = clock
    store.save()
    logger.info("clocked_in", date=clock.date, time=clock.time)
    return clock


def clock_out(store: DataStore, now: datetime) -> Shift:
    clock = store.active_clock
    if clock is None:
        raise ActiveClockError("Not clocked in")
    shift = replace(active_shift(clock, now), id=str(uuid4()))
    store.add_shift(shift)
    store.active_clock = None
    store.save()
    logger.info("clocked_out", shift_id=shift.id, date=shift.date, start=shift.start_time, end=shift.end_time)
    return shift


def update_active_clock(store: DataStore, clock_date: str, clock_time: str) -> ActiveClock:
    if store.active_clock is None:
        raise ActiveClockError("Not clocked in")
    store.active_clock = replace(store.active_clock, date=clock_date, time=clock_time)
    store.save()
    logger.info("active_clock_corrected", date=clock_date, time=clock_time)
    return store.active_clock


def _check_shift(store: DataStore, shift: Shift, exclude_id: Optional[str] = None) -> None:
    if not (shift.date and shift.start_time and shift.end_time):
        raise ShiftValidationError("Please fill in all required fields.")
    conflict = find_overlap(shift, store.shifts.values(), exclude_id=exclude_id)
    if conflict is not None:
        logger.warning("overlap_rejected", shift_date=shift.date, conflict_id=conflict.id)
        raise ShiftOverlapError(conflict)


def add_shift(store: DataStore, *, shift_date: str, start_time: str, end_time: str, shift_id: str | None = None) -> Shift:
    if shift_id is not None and shift_id in store.shifts:
        raise ShiftValidationError(f"Shift id {shift_id} already exists")
    shift = Shift(id=shift_id or str(uuid4()), date=shift_date, start_time=start_time, end_time=end_time)
    _check_shift(store, shift)
    store.add_shift(shift)
    store.save()
    logger.info("shift_added", shift_id=shift.id, date=shift.date)
    return shift


def edit_shift(
    store: DataStore,
    shift_id: str,
    *,
    shift_date: str | None = None,
    start_time: str | None = None,
    end_time: str | None = None,
) -> Shift:
    if shift_id not in store.shifts:
        raise ShiftValidationError(f"No shift with id {shift_id}")
    current = store.shifts[shift_id]
    updated = Shift(
        id=shift_id,
        date=shift_date or current.date,
        start_time=start_time or current.start_time,
        end_time=end_time or current.end_time,
    )
    _check_shift(store, updated, exclude_id=shift_id)
    store.add_shift(updated)
    store.save()
    logger.info("shift_updated", shift_id=shift_id)
    return updated


def delete_shift(store: DataStore, shift_id: str) -> Shift:
    if shift_id not in store.shifts:
        raise ShiftValidationError(f"No shift with id {shift_id}")
    shift = store.remove_shift(shift_id)
    store.save()
    logger.info("shift_deleted", shift_id=shift_id)
    return shift


def import_shifts(store: DataStore, shifts: Iterable[Shift]) -> List[Shift]:
    """Append imported shifts under fresh ids; bulk import is not overlap-checked."""

    imported = [replace(shift, id=str(uuid4())) for shift in shifts]
    for shift in imported:
        store.add_shift(shift)
    store.save()
    logger.info("shifts_imported", count=len(imported))
    return imported


def active_clock_in_week(store: DataStore, anchor: date) -> Optional[ActiveClock]:
    clock = store.active_clock
    if clock is None:
        return None
    start, end = week_bounds(anchor, store.settings.week_start_day)
    return clock if _in_week(clock.date, start, end) else None


def weekly_shifts(store: DataStore, anchor: date) -> List[Shift]:
    return shifts_in_week(store.list_shifts(), anchor, store.settings.week_start_day)


def weekly_stats(store: DataStore, anchor: date, now: datetime, tax_table: Optional[TaxTable] = None) -> ShiftStats:
    shifts = weekly_shifts(store, anchor)
    clock = active_clock_in_week(store, anchor)
    if clock is not None:
        shifts.append(active_shift(clock, now))
    return calculate_weekly_stats(shifts, store.settings, tax_table)
