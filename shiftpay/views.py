from __future__ import annotations

from collections import defaultdict
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional

from .models import ActiveClock, Settings, Shift, ShiftStats
from .shifts import shift_hours
from .time_range import local_instant, parse_instant


def day_label(date_value: str) -> str:
    try:
        day = date.fromisoformat(date_value)
    except ValueError:
        return date_value
    return f"{day:%a}, {day:%b} {day.day}"


def elapsed_seconds(clock: ActiveClock, now: datetime) -> int:
    now = local_instant(now)
    start = parse_instant(clock.date, clock.time)
    if start is None:
        return 0
    return max(0, int((now - start).total_seconds()))


def format_elapsed(clock: ActiveClock, now: datetime) -> str:
    seconds = elapsed_seconds(clock, now)
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def _shift_lines(shifts: Iterable[Shift], active_clock: Optional[ActiveClock], now: Optional[datetime]) -> List[str]:
    rows = []
    for shift in sorted(shifts, key=lambda s: s.date):
        rows.append(f"{day_label(shift.date)}: {shift.start_time} - {shift.end_time} ({shift_hours(shift):.2f}h)")
    if active_clock is not None:
        if now is None:
            raise ValueError("now is required to report a running shift")
        now = local_instant(now)
        running_hours = (elapsed_seconds(active_clock, now) // 60) / 60
        rows.append(
            f"{day_label(active_clock.date)}: {active_clock.time} - {now:%H:%M} (Running... {running_hours:.2f}h)"
        )
    return rows


def format_share_text(
    shifts: Iterable[Shift],
    settings: Settings,
    stats: ShiftStats,
    active_clock: Optional[ActiveClock] = None,
    now: Optional[datetime] = None,
) -> str:
    rows = _shift_lines(shifts, active_clock, now)
    rows.extend(["", f"Total Hours: {stats.total_hours:.2f}h"])
    return "\n".join(rows)


def format_detailed_share_text(
    shifts: Iterable[Shift],
    settings: Settings,
    stats: ShiftStats,
    active_clock: Optional[ActiveClock] = None,
    now: Optional[datetime] = None,
) -> str:
    rows = _shift_lines(shifts, active_clock, now)
    rows.extend(["", "--- Summary ---", f"Total Hours: {stats.total_hours:.2f}h"])
    if stats.overtime_hours > 0:
        rows.append(f"Regular: {stats.regular_hours:.2f}h | Overtime: {stats.overtime_hours:.2f}h")
    rows.append(f"Gross Pay: ${stats.gross_pay:.2f}")
    rows.append(f"Net Pay (Est): ${stats.net_pay:.2f}")
    return "\n".join(rows)


def format_week_log(shifts: Iterable[Shift], start: date, end: date) -> str:
    """Day-grouped listing of a week's shifts, most recent day first."""

    groups: Dict[str, List[Shift]] = defaultdict(list)
    for shift in shifts:
        groups[shift.date].append(shift)

    rows = [f"Week of {start:%b} {start.day} - {end:%b} {end.day}, {end.year}"]
    if not groups:
        rows.append("No shifts logged")
    for shift_date in sorted(groups, reverse=True):
        rows.append(day_label(shift_date))
        for shift in sorted(groups[shift_date], key=lambda s: s.start_time):
            rows.append(f"  {shift.id}  {shift.start_time} - {shift.end_time}  {shift_hours(shift):>5.2f}h")
    return "\n".join(rows)


def format_stats(stats: ShiftStats) -> str:
    gross_note = " (minimum guarantee)" if stats.guarantee_applied else ""
    rows = [
        f"Total hours:    {stats.total_hours:>10.2f}",
        f"Regular hours:  {stats.regular_hours:>10.2f}",
        f"Overtime hours: {stats.overtime_hours:>10.2f}",
        f"Regular pay:    {stats.regular_pay:>10.2f}",
        f"Overtime pay:   {stats.overtime_pay:>10.2f}",
        f"Gross pay:      {stats.gross_pay:>10.2f}{gross_note}",
        f"Federal tax:    {stats.estimated_federal_tax:>10.2f}",
        f"State tax:      {stats.estimated_state_tax:>10.2f}",
        f"FICA:           {stats.estimated_fica:>10.2f}",
        f"Net pay (est):  {stats.net_pay:>10.2f}",
    ]
    return "\n".join(rows)
