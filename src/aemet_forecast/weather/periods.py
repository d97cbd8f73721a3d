"""Period analysis for forecast days.

Near-term days report half-day periods (``00-12`` and ``12-24``); later days
collapse to a single ``00-24`` entry or to entries without a period, which
count as whole-day data too.
"""

from typing import Dict

from pydantic import BaseModel, Field

from aemet_forecast.weather.models import ForecastDay

MORNING = "00-12"
AFTERNOON = "12-24"
WHOLE_DAY = "00-24"
DEFAULT_PERIOD = "default"


class PeriodData(BaseModel):
    """Weather for one period of a day."""
    rain_probability: int = 0
    sky_description: str = ""
    wind_direction: str = ""
    wind_speed: int = 0


class DaySummary(PeriodData):
    """Single-line view of a day."""
    min_temperature: int = 0
    max_temperature: int = 0


class DayPeriods(BaseModel):
    """Per-period data of a day plus which periods were reported."""
    periods: Dict[str, PeriodData] = Field(default_factory=dict)
    has_morning: bool = False
    has_afternoon: bool = False
    has_whole_day: bool = False

    @property
    def has_half_day_data(self) -> bool:
        return self.has_morning and self.has_afternoon

    @property
    def has_whole_day_data(self) -> bool:
        return not self.has_half_day_data and self.has_whole_day

    def get(self, period: str) -> PeriodData:
        return self.periods.get(period) or PeriodData()

    def whole_day(self) -> PeriodData:
        """Combine the ``00-24`` entry with entries that carry no period.

        The ``00-24`` values win; entries without a period only fill gaps.
        """
        data = self.get(WHOLE_DAY).model_copy()

        fallback = self.periods.get(DEFAULT_PERIOD)
        if fallback is not None:
            if data.rain_probability == 0 and fallback.rain_probability > 0:
                data.rain_probability = fallback.rain_probability
            if not data.sky_description and fallback.sky_description:
                data.sky_description = fallback.sky_description
            if not data.wind_direction and fallback.wind_direction:
                data.wind_direction = fallback.wind_direction
                data.wind_speed = fallback.wind_speed

        return data


def extract_periods(day: ForecastDay) -> DayPeriods:
    """Group precipitation, sky and wind entries of a day by period.

    Args:
        day: Forecast day as returned by the API

    Returns:
        DayPeriods with the merged data and presence flags
    """
    result = DayPeriods()

    def slot(period: str) -> PeriodData:
        key = period or DEFAULT_PERIOD
        if period in ("", WHOLE_DAY):
            result.has_whole_day = True
        elif period == MORNING:
            result.has_morning = True
        elif period == AFTERNOON:
            result.has_afternoon = True
        return result.periods.setdefault(key, PeriodData())

    for prob in day.precipitation_probability:
        slot(prob.period).rain_probability = prob.value

    for sky in day.sky:
        slot(sky.period).sky_description = sky.description

    for wind in day.wind:
        data = slot(wind.period)
        data.wind_direction = wind.direction
        data.wind_speed = wind.speed

    return result


def summarize_day(day: ForecastDay) -> DaySummary:
    """Reduce a day to one set of values for a one-line summary.

    With both half-day periods, sky and rain come from the period with the
    higher rain probability and wind from the windier period; ties go to the
    afternoon.

    Args:
        day: Forecast day as returned by the API

    Returns:
        DaySummary, empty apart from temperatures when no period data exists
    """
    day_periods = extract_periods(day)
    summary = DaySummary(
        min_temperature=day.temperature.min,
        max_temperature=day.temperature.max
    )

    if day_periods.has_half_day_data:
        morning = day_periods.get(MORNING)
        afternoon = day_periods.get(AFTERNOON)

        rainiest = morning if morning.rain_probability > afternoon.rain_probability else afternoon
        summary.rain_probability = rainiest.rain_probability
        summary.sky_description = rainiest.sky_description

        windiest = morning if morning.wind_speed > afternoon.wind_speed else afternoon
        summary.wind_direction = windiest.wind_direction
        summary.wind_speed = windiest.wind_speed
    elif day_periods.has_whole_day:
        data = day_periods.whole_day()
        summary.rain_probability = data.rain_probability
        summary.sky_description = data.sky_description
        summary.wind_direction = data.wind_direction
        summary.wind_speed = data.wind_speed

    return summary
