from __future__ import annotations

import json
import math
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from .models import FilingStatus, StateCode

DEFAULT_TABLES_PATH = Path(__file__).resolve().parent / "data" / "tax_tables"
DEFAULT_VERSION = "2026"


@dataclass(frozen=True)
class TaxBracket:
    up_to: float
    rate: float


class StateTaxCategory(str, Enum):
    """How a work state's income tax is estimated, in resolution order."""

    NO_TAX = "no_tax"
    CUSTOM = "custom"
    BRACKETED = "bracketed"
    FLAT = "flat"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class JurisdictionTable:
    code: str
    deduction: Dict[str, float]
    brackets: Dict[str, List[TaxBracket]]
    is_flat: bool = False

    def deduction_for(self, filing_status: FilingStatus) -> float:
        return float(self.deduction.get(filing_status.value, self.deduction.get("single", 0)))

    def brackets_for(self, filing_status: FilingStatus) -> List[TaxBracket]:
        return self.brackets.get(filing_status.value) or self.brackets["single"]


def _parse_brackets(rows: List[dict]) -> List[TaxBracket]:
    # A null upper bound marks the open-ended top bracket.
    return [
        TaxBracket(up_to=math.inf if row["up_to"] is None else float(row["up_to"]), rate=float(row["rate"]))
        for row in rows
    ]


def _parse_jurisdiction(code: str, data: dict) -> JurisdictionTable:
    return JurisdictionTable(
        code=code,
        deduction={status: float(value) for status, value in data.get("deduction", {}).items()},
        brackets={status: _parse_brackets(rows) for status, rows in data["brackets"].items()},
        is_flat=bool(data.get("is_flat", False)),
    )


class TaxTable:
    def __init__(
        self,
        version: str,
        federal: JurisdictionTable,
        states: Dict[str, JurisdictionTable],
        flat_rates: Dict[str, float],
        no_income_tax: List[str],
        fallback_rate: float = 0.04,
        fica_rate: float = 0.0765,
        weeks_per_year: int = 52,
    ):
        self.version = version
        self.federal = federal
        self.states = states
        self.flat_rates = flat_rates
        self.no_income_tax = set(no_income_tax)
        self.fallback_rate = fallback_rate
        self.fica_rate = fica_rate
        self.weeks_per_year = weeks_per_year

    @classmethod
    def from_dict(cls, data: dict) -> "TaxTable":
        return cls(
            version=data["version"],
            federal=_parse_jurisdiction("federal", data["federal"]),
            states={code: _parse_jurisdiction(code, table) for code, table in data.get("states", {}).items()},
            flat_rates={code: float(rate) for code, rate in data.get("flat_rates", {}).items()},
            no_income_tax=data.get("no_income_tax", []),
            fallback_rate=float(data.get("fallback_rate", 0.04)),
            fica_rate=float(data.get("fica_rate", 0.0765)),
            weeks_per_year=int(data.get("weeks_per_year", 52)),
        )

    def federal_deduction(self, filing_status: FilingStatus) -> float:
        return self.federal.deduction_for(filing_status)

    def federal_brackets(self, filing_status: FilingStatus) -> List[TaxBracket]:
        return self.federal.brackets_for(filing_status)

    def state_table(self, state_code: StateCode) -> Optional[JurisdictionTable]:
        return self.states.get(state_code.value)

    def flat_rate(self, state_code: StateCode) -> Optional[float]:
        return self.flat_rates.get(state_code.value)

    def category_for(self, state_code: StateCode) -> StateTaxCategory:
        if state_code is StateCode.NONE or state_code.value in self.no_income_tax:
            return StateTaxCategory.NO_TAX
        if state_code is StateCode.CUSTOM:
            return StateTaxCategory.CUSTOM
        if state_code.value in self.states:
            return StateTaxCategory.BRACKETED
        if self.flat_rates.get(state_code.value):
            return StateTaxCategory.FLAT
        return StateTaxCategory.FALLBACK


class TaxTableRepository:
    def __init__(self, base_path: Path = DEFAULT_TABLES_PATH):
        self.base_path = base_path

    def available_versions(self) -> List[str]:
        return sorted([p.stem for p in self.base_path.glob("*.json")])

    def load(self, version: str) -> TaxTable:
        file_path = self.base_path / f"{version}.json"
        if not file_path.exists():
            raise FileNotFoundError(f"Tax table version {version} not found at {file_path}")
        with file_path.open("r", encoding="utf-8") as handle:
            data = json.load(handle)
        return TaxTable.from_dict(data)


@lru_cache(maxsize=None)
def load_tax_table(version: str = DEFAULT_VERSION) -> TaxTable:
    return TaxTableRepository().load(version)
