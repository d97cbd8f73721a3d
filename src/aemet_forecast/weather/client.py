"""HTTP client for the AEMET OpenData API."""

import logging
import os
from typing import List, Optional

import httpx

from aemet_forecast.config import (
    AEMET_API_BASE_URL, AEMET_API_KEY_ENV, USER_AGENT, HTTP_TIMEOUT_SECONDS,
    MAX_RETRIES, BASE_BACKOFF_SECONDS, STATIONS_ENDPOINT, FORECAST_ENDPOINT
)
from aemet_forecast.weather.directory import MunicipalityDirectory, default_directory
from aemet_forecast.weather.exceptions import AemetError, ConfigError, NoDataError
from aemet_forecast.weather.fetcher import DataFetcher
from aemet_forecast.weather.models import Forecast, StationInfo


class AemetClient:
    """Client for AEMET weather stations and municipality forecasts."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        http_client: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
        directory: Optional[MunicipalityDirectory] = None,
        base_url: str = AEMET_API_BASE_URL,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        max_retries: int = MAX_RETRIES,
        base_backoff: float = BASE_BACKOFF_SECONDS
    ):
        """Initialize the AEMET client.

        Args:
            api_key: AEMET OpenData API key (falls back to AEMET_API_KEY)
            http_client: Custom httpx client; one with a fixed timeout is created if None
            logger: Custom logger; module logger if None
            directory: Municipality directory used for name lookups
            base_url: Base URL of the OpenData API
            timeout: Timeout for the default httpx client, in seconds
            max_retries: Retries for forecast requests
            base_backoff: Delay before the first retry, in seconds

        Raises:
            ConfigError: If no API key is given and the environment has none
        """
        api_key = api_key or os.getenv(AEMET_API_KEY_ENV)
        if not api_key:
            raise ConfigError(
                f"AEMET API key is required (pass api_key or set the {AEMET_API_KEY_ENV} environment variable)"
            )

        self.api_key = api_key
        self.logger = logger or logging.getLogger(__name__)
        self.directory = directory if directory is not None else default_directory()
        self.max_retries = max_retries
        self.base_backoff = base_backoff

        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(
            headers={"User-Agent": USER_AGENT},
            timeout=timeout
        )
        self.fetcher = DataFetcher(self.client, api_key, base_url=base_url, logger=self.logger)

    def get_stations(self) -> List[StationInfo]:
        """Fetch the inventory of every AEMET weather station.

        Returns:
            List of stations with location and identification codes

        Raises:
            TransportError: If a request fails
            DecodeError: If a response is malformed
        """
        self.logger.info("Fetching weather station inventory")
        try:
            stations = self.fetcher.fetch_redirected(STATIONS_ENDPOINT, List[StationInfo])
        except AemetError as e:
            raise e.with_context("get_stations") from e

        self.logger.info(f"Fetched {len(stations)} weather stations")
        return stations

    def get_forecast_by_id(self, municipality_id: str) -> Forecast:
        """Fetch the daily forecast for a municipality by INE code.

        The request is retried with exponential backoff.

        Args:
            municipality_id: Bare municipality code, e.g. '28079'

        Returns:
            Forecast with one entry per forecast day

        Raises:
            TransportError: If the requests keep failing
            DecodeError: If the responses keep being malformed
            NoDataError: If the API returns no forecast
        """
        endpoint = FORECAST_ENDPOINT.format(municipality_id=municipality_id)
        self.logger.info(f"Fetching forecast for municipality {municipality_id}")

        try:
            forecasts = self.fetcher.fetch_redirected_with_retry(
                endpoint,
                List[Forecast],
                max_attempts=self.max_retries,
                base_backoff=self.base_backoff
            )
        except AemetError as e:
            raise e.with_context("get_forecast_by_id", municipality_id) from e

        if not forecasts:
            raise NoDataError(
                f"get_forecast_by_id({municipality_id}): no data found for municipality {municipality_id}",
                operation="get_forecast_by_id",
                target=municipality_id
            )

        return forecasts[0]

    def get_forecast_by_name(self, name: str) -> Forecast:
        """Fetch the daily forecast for a municipality by its exact name.

        Args:
            name: Municipality name, matched ignoring case and surrounding spaces

        Returns:
            Forecast for the first municipality with that name

        Raises:
            NotFoundError: If no municipality has that name
        """
        municipality_id = self.directory.find_id_by_exact_name(name)
        self.logger.debug(f"Resolved '{name}' to municipality {municipality_id}")
        return self.get_forecast_by_id(municipality_id)

    def close(self):
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
