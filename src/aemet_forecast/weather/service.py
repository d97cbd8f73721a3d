"""Forecast use cases built on the AEMET client and municipality directory."""

import logging
from typing import List, Optional

from aemet_forecast.presentation import format_day_summary
from aemet_forecast.weather.client import AemetClient
from aemet_forecast.weather.directory import MunicipalityDirectory
from aemet_forecast.weather.exceptions import NoDataError, NotFoundError
from aemet_forecast.weather.models import Forecast, MunicipalityRecord

logger = logging.getLogger(__name__)


class ForecastService:
    """Resolves partial municipality names and builds day summaries."""

    def __init__(
        self,
        client: AemetClient,
        directory: Optional[MunicipalityDirectory] = None
    ):
        """Initialize the forecast service.

        Args:
            client: AEMET client used for forecast requests
            directory: Municipality directory (the client's directory if None)
        """
        self.client = client
        self.directory = directory if directory is not None else client.directory

    def find_municipalities(self, partial_name: str) -> List[MunicipalityRecord]:
        """Find municipalities whose name contains ``partial_name``.

        Raises:
            NotFoundError: If nothing matches
        """
        municipalities = self.directory.find_by_partial_name(partial_name)
        if not municipalities:
            raise NotFoundError(
                f"no municipalities found matching '{partial_name}'",
                target=partial_name
            )

        logger.debug(f"Found {len(municipalities)} municipalities matching '{partial_name}'")
        return municipalities

    def get_forecast(self, municipality: MunicipalityRecord) -> Forecast:
        """Fetch the forecast for a resolved municipality record."""
        return self.client.get_forecast_by_id(municipality.id)

    def day_summary_by_name(self, partial_name: str) -> str:
        """One-line summary of today for the first municipality matching a partial name."""
        municipality = self.find_municipalities(partial_name)[0]
        return self._summarize(self.get_forecast(municipality))

    def day_summary_by_id(self, municipality_id: str) -> str:
        """One-line summary of today for a municipality code."""
        return self._summarize(self.client.get_forecast_by_id(municipality_id))

    def _summarize(self, forecast: Forecast) -> str:
        if not forecast.days:
            raise NoDataError("no forecast data available", target=forecast.name)
        return format_day_summary(forecast)
