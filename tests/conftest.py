import pytest

from shiftpay.config import get_config
from shiftpay.logging import configure_logging


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    configure_logging("WARNING")


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    monkeypatch.setenv("SHIFTPAY_DATA_DIR", str(tmp_path / "data"))
    get_config.cache_clear()
    yield
    get_config.cache_clear()
