from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict


class FilingStatus(str, Enum):
    SINGLE = "single"
    MARRIED_JOINT = "mfj"
    HEAD_OF_HOUSEHOLD = "hoh"
    MARRIED_SEPARATE = "mfs"


class StateCode(str, Enum):
    AL = "AL"
    AK = "AK"
    AZ = "AZ"
    AR = "AR"
    CA = "CA"
    CO = "CO"
    CT = "CT"
    DE = "DE"
    DC = "DC"
    FL = "FL"
    GA = "GA"
    HI = "HI"
    ID = "ID"
    IL = "IL"
    IN = "IN"
    IA = "IA"
    KS = "KS"
    KY = "KY"
    LA = "LA"
    ME = "ME"
    MD = "MD"
    MA = "MA"
    MI = "MI"
    MN = "MN"
    MS = "MS"
    MO = "MO"
    MT = "MT"
    NE = "NE"
    NV = "NV"
    NH = "NH"
    NJ = "NJ"
    NM = "NM"
    NY = "NY"
    NC = "NC"
    ND = "ND"
    OH = "OH"
    OK = "OK"
    OR = "OR"
    PA = "PA"
    RI = "RI"
    SC = "SC"
    SD = "SD"
    TN = "TN"
    TX = "TX"
    UT = "UT"
    VT = "VT"
    VA = "VA"
    WA = "WA"
    WV = "WV"
    WI = "WI"
    WY = "WY"
    NONE = "NONE"  # federal only
    CUSTOM = "CUSTOM"  # custom flat percentage


@dataclass(frozen=True)
class Shift:
    id: str
    date: str  # YYYY-MM-DD
    start_time: str  # HH:MM
    end_time: str  # HH:MM


@dataclass(frozen=True)
class ActiveClock:
    date: str
    time: str
    timestamp: float


@dataclass
class TaxSettings:
    filing_status: FilingStatus = FilingStatus.SINGLE
    state_code: StateCode = StateCode.GA
    state_tax_rate: float = 5.49  # percent, only used for CUSTOM
    use_standard_deduction: bool = True
    custom_deduction: float = 0.0
    include_fica: bool = True
    additional_withholding: float = 0.0  # weekly
    is_1099: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TaxSettings":
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known}
        if "filing_status" in values:
            values["filing_status"] = FilingStatus(values["filing_status"])
        if "state_code" in values:
            values["state_code"] = StateCode(values["state_code"])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["filing_status"] = self.filing_status.value
        payload["state_code"] = self.state_code.value
        return payload


@dataclass
class Settings:
    company_name: str = ""
    hourly_rate: float = 0.0
    overtime_threshold: float = 40.0  # hours per week
    overtime_multiplier: float = 1.5
    week_start_day: int = 0  # 0 = Sunday .. 6 = Saturday
    min_weekly_guarantee: float = 0.0
    tax_settings: TaxSettings = field(default_factory=TaxSettings)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Settings":
        """Merge a saved (possibly partial) mapping over the defaults.

        Keys this version does not know about are dropped, so older saves that
        still carry theme settings load cleanly.
        """

        known = {f.name for f in fields(cls)} - {"tax_settings"}
        values = {key: value for key, value in data.items() if key in known}
        return cls(**values, tax_settings=TaxSettings.from_dict(data.get("tax_settings") or {}))

    def to_dict(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["tax_settings"] = self.tax_settings.to_dict()
        return payload


@dataclass(frozen=True)
class ShiftStats:
    total_hours: float
    regular_hours: float
    overtime_hours: float
    gross_pay: float
    regular_pay: float
    overtime_pay: float
    estimated_federal_tax: float
    estimated_state_tax: float
    estimated_fica: float
    net_pay: float
    guarantee_applied: bool

    @property
    def total_withheld(self) -> float:
        return self.gross_pay - self.net_pay
