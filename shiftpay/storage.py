from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from .logging import get_logger
from .models import ActiveClock, Settings, Shift

logger = get_logger(__name__)

SHIFTS_FILE = "shifts.json"
SETTINGS_FILE = "settings.json"
ACTIVE_CLOCK_FILE = "active_clock.json"


class DataStore:
    """Shifts, settings and the open clock, each kept as its own JSON file."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir
        self.shifts: Dict[str, Shift] = {}
        self.settings = Settings()
        self.active_clock: Optional[ActiveClock] = None
        if data_dir.exists():
            self.load()

    @property
    def shifts_path(self) -> Path:
        return self.data_dir / SHIFTS_FILE

    @property
    def settings_path(self) -> Path:
        return self.data_dir / SETTINGS_FILE

    @property
    def active_clock_path(self) -> Path:
        return self.data_dir / ACTIVE_CLOCK_FILE

    def load(self) -> None:
        shifts = self._read(self.shifts_path) or []
        self.shifts = {s["id"]: Shift(**s) for s in shifts}
        self.settings = Settings.from_dict(self._read(self.settings_path) or {})
        clock = self._read(self.active_clock_path)
        self.active_clock = ActiveClock(**clock) if clock else None
        logger.debug("store_loaded", data_dir=str(self.data_dir), shifts=len(self.shifts))

    def save(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._write(self.shifts_path, [asdict(s) for s in self.shifts.values()])
        self._write(self.settings_path, self.settings.to_dict())
        self._write(self.active_clock_path, asdict(self.active_clock) if self.active_clock else None)

    def add_shift(self, shift: Shift) -> None:
        self.shifts[shift.id] = shift

    def remove_shift(self, shift_id: str) -> Shift:
        return self.shifts.pop(shift_id)

    def list_shifts(self) -> List[Shift]:
        return sorted(self.shifts.values(), key=lambda s: (s.date, s.start_time))

    @staticmethod
    def _read(path: Path) -> Any:
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    @staticmethod
    def _write(path: Path, payload: Any) -> None:
        path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
