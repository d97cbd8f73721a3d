"""Tests for the AEMET client with mocked httpx."""

import logging
from unittest.mock import patch

import httpx
import pytest
import respx

from aemet_forecast.weather.client import AemetClient
from aemet_forecast.weather.directory import MunicipalityDirectory
from aemet_forecast.weather.exceptions import (
    ConfigError, DataUnavailableError, DecodeError, NoDataError, NotFoundError, TransportError
)
from conftest import BASE_URL, DATA_URL, TEST_API_KEY

STATIONS_URL = f"{BASE_URL}/api/valores/climatologicos/inventarioestaciones/todasestaciones"
FORECAST_URL = f"{BASE_URL}/api/prediccion/especifica/municipio/diaria/"


@pytest.fixture
def aemet(http_client: httpx.Client, directory: MunicipalityDirectory) -> AemetClient:
    return AemetClient(
        api_key=TEST_API_KEY,
        http_client=http_client,
        directory=directory,
        base_url=BASE_URL,
        max_retries=1,
        base_backoff=0.01,  # Fast retries in tests
    )


def mock_forecast(municipality_id: str, payload) -> respx.Route:
    respx.get(FORECAST_URL + municipality_id).mock(
        return_value=httpx.Response(200, json={"datos": DATA_URL})
    )
    return respx.get(DATA_URL).mock(return_value=httpx.Response(200, json=payload))


class TestConstruction:
    def test_missing_api_key(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("AEMET_API_KEY", raising=False)
        with pytest.raises(ConfigError, match="AEMET_API_KEY"):
            AemetClient()

    def test_api_key_from_environment(self, api_key_env: str):
        with AemetClient() as client:
            assert client.api_key == api_key_env

    def test_explicit_key_wins(self, api_key_env: str):
        with AemetClient(api_key="explicit") as client:
            assert client.api_key == "explicit"

    def test_default_http_client_timeout(self, api_key_env: str):
        with AemetClient(timeout=12.0) as client:
            assert client.client.timeout.connect == 12.0
            assert "aemet-forecast" in client.client.headers["user-agent"]

    def test_injected_client_is_not_closed(self, http_client: httpx.Client):
        with AemetClient(api_key=TEST_API_KEY, http_client=http_client):
            pass
        assert not http_client.is_closed

    def test_owned_client_is_closed(self, api_key_env: str):
        client = AemetClient()
        client.close()
        assert client.client.is_closed

    def test_custom_logger(self, http_client: httpx.Client):
        custom = logging.getLogger("custom.sink")
        client = AemetClient(api_key=TEST_API_KEY, http_client=http_client, logger=custom)
        assert client.fetcher.logger is custom

    def test_injected_empty_directory_is_kept(self, http_client: httpx.Client, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("[]", encoding="utf-8")
        directory = MunicipalityDirectory(str(path))

        client = AemetClient(api_key=TEST_API_KEY, http_client=http_client, directory=directory)

        assert client.directory is directory
        with pytest.raises(NotFoundError):
            client.get_forecast_by_name("Madrid")

    @respx.mock
    def test_unreadable_directory_does_not_break_construction(
        self, http_client: httpx.Client, tmp_path, stations_payload: list
    ):
        directory = MunicipalityDirectory(str(tmp_path / "missing.json"))
        client = AemetClient(
            api_key=TEST_API_KEY, http_client=http_client, directory=directory, base_url=BASE_URL
        )
        respx.get(STATIONS_URL).mock(return_value=httpx.Response(200, json={"datos": DATA_URL}))
        respx.get(DATA_URL).mock(return_value=httpx.Response(200, json=stations_payload))

        assert client.directory is directory
        assert len(client.get_stations()) == 3
        with pytest.raises(DataUnavailableError):
            client.get_forecast_by_name("Madrid")


class TestGetStations:
    @respx.mock
    def test_success(self, aemet: AemetClient, stations_payload: list):
        respx.get(STATIONS_URL).mock(return_value=httpx.Response(200, json={"datos": DATA_URL}))
        respx.get(DATA_URL).mock(return_value=httpx.Response(200, json=stations_payload))

        stations = aemet.get_stations()
        assert len(stations) == 3
        assert stations[0].name == "ESCORCA, LLUC"

    @respx.mock
    def test_not_retried(self, aemet: AemetClient):
        route = respx.get(STATIONS_URL).mock(return_value=httpx.Response(503))

        with patch("aemet_forecast.weather.fetcher.time.sleep") as sleep:
            with pytest.raises(TransportError, match="get_stations") as excinfo:
                aemet.get_stations()

        assert route.call_count == 1
        sleep.assert_not_called()
        assert excinfo.value.operation == "get_stations"


class TestGetForecastById:
    @respx.mock
    def test_success(self, aemet: AemetClient, forecast_payload: list):
        mock_forecast("28079", forecast_payload)

        forecast = aemet.get_forecast_by_id("28079")
        assert forecast.name == "Madrid"
        assert len(forecast.days) == 3

    @respx.mock
    def test_empty_list_is_no_data(self, aemet: AemetClient):
        mock_forecast("28079", [])

        with pytest.raises(NoDataError, match="28079") as excinfo:
            aemet.get_forecast_by_id("28079")
        assert excinfo.value.target == "28079"

    @respx.mock
    def test_retries_then_reports_attempts(self, aemet: AemetClient):
        route = respx.get(FORECAST_URL + "28079").mock(
            side_effect=httpx.ConnectError("connection refused")
        )

        with patch("aemet_forecast.weather.fetcher.time.sleep"):
            with pytest.raises(TransportError) as excinfo:
                aemet.get_forecast_by_id("28079")

        assert route.call_count == 2
        message = str(excinfo.value)
        assert message.startswith("get_forecast_by_id(28079): ")
        assert "2 attempts" in message
        assert excinfo.value.attempts == 2

    @respx.mock
    def test_schema_mismatch(self, aemet: AemetClient):
        mock_forecast("28079", [{"provincia": "Madrid"}])

        with patch("aemet_forecast.weather.fetcher.time.sleep"):
            with pytest.raises(DecodeError):
                aemet.get_forecast_by_id("28079")


class TestGetForecastByName:
    @respx.mock
    def test_resolves_name(self, aemet: AemetClient, forecast_payload: list):
        mock_forecast("28079", forecast_payload)

        forecast = aemet.get_forecast_by_name(" madrid ")
        assert forecast.id == 28079

    def test_unknown_name(self, aemet: AemetClient):
        with respx.mock(assert_all_called=False) as router:
            with pytest.raises(NotFoundError, match="Atlantis"):
                aemet.get_forecast_by_name("Atlantis")
            assert not router.calls

    @respx.mock
    def test_every_dataset_name_resolves(self, aemet: AemetClient, forecast_payload: list):
        respx.get(url__startswith=FORECAST_URL).mock(
            return_value=httpx.Response(200, json={"datos": DATA_URL})
        )
        respx.get(DATA_URL).mock(return_value=httpx.Response(200, json=forecast_payload))

        for record in aemet.directory.all():
            assert aemet.get_forecast_by_name(record.name).name == "Madrid"
