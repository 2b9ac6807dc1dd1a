from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


class AppConfig(BaseSettings):
    data_dir: Path = Field(default=Path("data"), description="Directory holding shifts, settings and the open clock")
    log_level: str = "WARNING"
    log_json: bool = Field(default=False, description="Render log events as JSON lines")
    tax_table_version: str = Field(default="2026", description="Tax table file under shiftpay/data/tax_tables")

    model_config = SettingsConfigDict(env_prefix="SHIFTPAY_", env_file=".env", extra="ignore")

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {sorted(LOG_LEVELS)}")
        return level


@lru_cache
def get_config() -> AppConfig:
    return AppConfig()
