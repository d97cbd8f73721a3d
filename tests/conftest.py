"""Shared test fixtures."""

import json
import logging
from pathlib import Path

import httpx
import pytest

from aemet_forecast.weather.directory import MunicipalityDirectory
from aemet_forecast.weather.models import Forecast

FIXTURE_DIR = Path(__file__).parent / "fixtures"

BASE_URL = "https://test-aemet.example.com/opendata"
DATA_URL = "https://test-aemet.example.com/opendata/sh/abc123"
TEST_API_KEY = "test-key"


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return FIXTURE_DIR


@pytest.fixture
def forecast_payload() -> list:
    with open(FIXTURE_DIR / "forecast_madrid.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def stations_payload() -> list:
    with open(FIXTURE_DIR / "stations.json", encoding="utf-8") as f:
        return json.load(f)


@pytest.fixture
def madrid_forecast(forecast_payload: list) -> Forecast:
    return Forecast.model_validate(forecast_payload[0])


@pytest.fixture
def small_dataset(tmp_path: Path) -> Path:
    """Write a tiny municipality dataset and return its path."""
    records = [
        {"id": "id08019", "nombre": "Barcelona", "capital": "Barcelona", "num_hab": "1620343",
         "altitud": "12", "latitud_dec": "41.38333333", "longitud_dec": "2.18333333"},
        {"id": "id28079", "nombre": "Madrid", "capital": "Madrid", "num_hab": "3223334",
         "altitud": "657", "latitud_dec": "40.41666667", "longitud_dec": "-3.70388889"},
        {"id": "id28005", "nombre": "Alcalá de Henares", "capital": "Alcalá de Henares"},
        {"id": "id41004", "nombre": "Alcalá de Guadaíra", "capital": "Alcalá de Guadaíra"},
        {"id": "id99999", "nombre": "Madrid", "capital": "Duplicate"},
    ]
    path = tmp_path / "municipalities.json"
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


@pytest.fixture
def directory(small_dataset: Path) -> MunicipalityDirectory:
    return MunicipalityDirectory(str(small_dataset))


@pytest.fixture
def http_client():
    with httpx.Client() as client:
        yield client


@pytest.fixture
def api_key_env(monkeypatch: pytest.MonkeyPatch) -> str:
    monkeypatch.setenv("AEMET_API_KEY", TEST_API_KEY)
    return TEST_API_KEY


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo handler changes made by configure_logging() in CLI tests."""
    loggers = [logging.getLogger(), logging.getLogger("httpx"), logging.getLogger("httpcore")]
    saved = [(lg, lg.handlers[:], lg.level, lg.propagate) for lg in loggers]
    yield
    for lg, handlers, level, propagate in saved:
        lg.handlers[:] = handlers
        lg.setLevel(level)
        lg.propagate = propagate


@pytest.fixture(autouse=True)
def bundled_municipalities(monkeypatch: pytest.MonkeyPatch):
    """Keep a local AEMET_MUNICIPALITIES_PATH from leaking into tests."""
    monkeypatch.delenv("AEMET_MUNICIPALITIES_PATH", raising=False)
