from pathlib import Path

import pytest
from pydantic import ValidationError

from shiftpay.config import AppConfig, get_config


def test_environment_overrides_defaults(monkeypatch, tmp_path):
    monkeypatch.setenv("SHIFTPAY_DATA_DIR", str(tmp_path / "elsewhere"))
    monkeypatch.setenv("SHIFTPAY_LOG_LEVEL", "debug")
    get_config.cache_clear()

    config = get_config()

    assert config.data_dir == Path(tmp_path / "elsewhere")
    assert config.log_level == "DEBUG"
    assert config.tax_table_version == "2026"


def test_unknown_log_level_is_rejected():
    with pytest.raises(ValidationError):
        AppConfig(log_level="chatty")
