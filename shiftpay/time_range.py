"""Turn a shift's date and wall-clock times into concrete instants.

Shifts whose end time is earlier than their start time are taken to cross
midnight. Anything that does not parse yields an invalid range instead of an
exception, so callers can treat the shift as zero hours.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

INSTANT_FORMAT = "%Y-%m-%d %H:%M"


@dataclass(frozen=True)
class ShiftRange:
    start: Optional[datetime]
    end: Optional[datetime]

    @property
    def valid(self) -> bool:
        return self.start is not None and self.end is not None

    @classmethod
    def invalid(cls) -> "ShiftRange":
        return cls(start=None, end=None)


def normalize_time(value: str | None) -> str:
    if not value or ":" not in value:
        return value or "00:00"
    hours, minutes = value.split(":")[:2]
    return f"{hours.strip().zfill(2)}:{minutes.strip().zfill(2)}"


def local_instant(value: datetime) -> datetime:
    """Naive local wall-clock time for ``value``; offset-aware instants are converted."""

    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_instant(date_value: str, time_value: str) -> Optional[datetime]:
    try:
        return datetime.strptime(f"{date_value} {normalize_time(time_value)}", INSTANT_FORMAT)
    except (TypeError, ValueError):
        return None


def shift_range(date_value: str, start_time: str, end_time: str) -> ShiftRange:
    start = parse_instant(date_value, start_time)
    end = parse_instant(date_value, end_time)
    if start is None or end is None:
        return ShiftRange.invalid()
    if end < start:
        end += timedelta(days=1)
    return ShiftRange(start=start, end=end)
