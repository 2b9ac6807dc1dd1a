"""Bulk import of shifts pasted as text.

Two line shapes are understood: the share-report format produced by
``views.format_share_text`` (``Mon, Oct 24: 08:00 - 17:00 (9.00h)``) and
separated columns whose order is configurable
(``2024-10-24, 08:00, 17:00`` by default).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import List, Optional, Sequence

from .logging import get_logger
from .models import Shift

logger = get_logger(__name__)

SHARE_LINE = re.compile(r"^([a-zA-Z]+, [a-zA-Z]+ \d+):\s*(\d{1,2}:\d{2})\s*-\s*(\d{1,2}:\d{2})")
DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%m/%d/%y", "%b %d %Y", "%B %d %Y", "%b %d, %Y")
COLUMN_TYPES = ("date", "start", "end", "ignore")
DEFAULT_COLUMNS = ("date", "start", "end")


@dataclass
class ImportResult:
    shifts: List[Shift] = field(default_factory=list)
    skipped: int = 0

    @property
    def message(self) -> Optional[str]:
        if not self.shifts and self.skipped:
            return "No shifts detected. Ensure the format matches your CSV settings."
        if self.skipped:
            return f"Detected {len(self.shifts)} shifts. Skipped {self.skipped} lines."
        return None


def normalize_import_time(value: str) -> str:
    if len(value) == 4 and ":" not in value:
        return f"{value[:2]}:{value[2:]}"
    if ":" in value and len(value.split(":")[0]) == 1:
        return f"0{value}"
    return value


def parse_import_date(value: str) -> Optional[date]:
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(value.strip(), fmt).date()
        except ValueError:
            continue
    return None


def _parse_share_line(line: str, year: int) -> Optional[Shift]:
    match = SHARE_LINE.match(line)
    if not match:
        return None
    day_part, start, end = match.groups()
    try:
        parsed = datetime.strptime(f"{day_part} {year}", "%a, %b %d %Y").date()
    except ValueError:
        return None
    return Shift(id="", date=parsed.isoformat(), start_time=start.zfill(5), end_time=end.zfill(5))


def _parse_columns(line: str, separator: str, columns: Sequence[str]) -> Optional[Shift]:
    parts = [part.strip() for part in line.split(separator)]
    values = {}
    for index, column in enumerate(columns):
        if index < len(parts) and parts[index]:
            values[column] = parts[index]
    parsed = parse_import_date(values.get("date", ""))
    if parsed is None or not values.get("start") or not values.get("end"):
        return None
    return Shift(
        id="",
        date=parsed.isoformat(),
        start_time=normalize_import_time(values["start"]),
        end_time=normalize_import_time(values["end"]),
    )


def parse_import_text(
    text: str,
    *,
    year: int,
    separator: str = ",",
    columns: Sequence[str] = DEFAULT_COLUMNS,
) -> ImportResult:
    """Parse pasted lines into id-less shifts.

    ``year`` fills in the share format, which carries no year of its own.
    Blank lines are ignored; any other line that matches neither shape is
    counted in ``skipped``.
    """

    unknown = [column for column in columns if column not in COLUMN_TYPES]
    if unknown:
        raise ValueError(f"Unknown import column(s): {', '.join(unknown)}")

    result = ImportResult()
    for line in text.strip().splitlines():
        if not line.strip():
            continue
        shift = _parse_share_line(line, year) or _parse_columns(line, separator, columns)
        if shift is None:
            result.skipped += 1
        else:
            result.shifts.append(shift)

    if result.skipped:
        logger.warning("import_lines_skipped", skipped=result.skipped, detected=len(result.shifts))
    return result
