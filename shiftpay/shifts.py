from __future__ import annotations

from typing import Iterable, List, Optional

from .models import Shift
from .time_range import ShiftRange, shift_range


def range_of(shift: Shift) -> ShiftRange:
    return shift_range(shift.date, shift.start_time, shift.end_time)


def shift_hours(shift: Shift) -> float:
    span = range_of(shift)
    if not span.valid:
        return 0.0
    minutes = int((span.end - span.start).total_seconds() // 60)
    return minutes / 60


def shifts_overlap(first: Shift, second: Shift) -> bool:
    """Strict overlap; a shift ending exactly when the other starts does not count."""

    a = range_of(first)
    b = range_of(second)
    if not (a.valid and b.valid):
        return False
    return a.start < b.end and b.start < a.end


def find_overlap(candidate: Shift, shifts: Iterable[Shift], exclude_id: Optional[str] = None) -> Optional[Shift]:
    for existing in shifts:
        if exclude_id is not None and existing.id == exclude_id:
            continue
        if shifts_overlap(existing, candidate):
            return existing
    return None


def invalid_shifts(shifts: Iterable[Shift]) -> List[Shift]:
    return [shift for shift in shifts if not range_of(shift).valid]
