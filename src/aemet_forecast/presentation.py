"""Human-readable rendering of forecasts for the CLI."""

from datetime import datetime
from typing import List, Optional

from aemet_forecast.weather.models import Forecast, ForecastDay
from aemet_forecast.weather.periods import (
    AFTERNOON, MORNING, PeriodData, extract_periods, summarize_day
)

SEPARATOR = "=============================================="

# Arrows point where the wind blows to, not where it comes from
WIND_DIRECTION_EMOJI = {
    "N": "⬇️",
    "NE": "↙️",
    "E": "⬅️",
    "SE": "↖️",
    "S": "⬆️",
    "SO": "↗️",
    "SW": "↗️",
    "O": "➡️",
    "W": "➡️",
    "NO": "↘️",
    "NW": "↘️",
    "C": "🔄",  # calm
}


def format_date(date_str: str) -> str:
    """Format an API date like '2025-05-20T00:00:00' as 'Tuesday, May 20'.

    Unparsable input is returned unchanged.
    """
    try:
        parsed = datetime.strptime(date_str, "%Y-%m-%dT%H:%M:%S")
    except ValueError:
        return date_str
    return parsed.strftime("%A, %b %d")


def wind_direction_emoji(direction: str) -> str:
    """Arrow emoji for an English or Spanish compass code, a generic wind emoji otherwise."""
    return WIND_DIRECTION_EMOJI.get(direction, "💨")


def weather_emoji(description: str, rain_probability: int) -> str:
    """Pick an emoji from the Spanish sky description and rain probability."""
    desc = description.lower()
    if rain_probability > 70:
        return "🌧️"
    if rain_probability > 30:
        return "🌦️"
    if "tormenta" in desc:
        return "⛈️"
    if "nieve" in desc:
        return "❄️"
    if "niebla" in desc:
        return "🌫️"
    if "nubos" in desc:
        if "poco" in desc:
            return "🌤️"
        if "muy" in desc:
            return "☁️"
        return "⛅"
    if "despejado" in desc:
        return "☀️"
    if "lluvia" in desc:
        return "🌦️" if "escasa" in desc else "🌧️"
    return "☀️"


def format_period(label: str, data: PeriodData) -> str:
    """Render one period line, e.g. 'Morning (00-12h): ⛅ Nuboso (💧 20%)'."""
    line = f"{label}: {weather_emoji(data.sky_description, data.rain_probability)} "
    if data.sky_description:
        line += data.sky_description
    if data.rain_probability > 0:
        line += f" (💧 {data.rain_probability}%)"
    if data.wind_direction and data.wind_speed > 0:
        line += f" {wind_direction_emoji(data.wind_direction)} {data.wind_direction} at {data.wind_speed} km/h"
    return line


def format_day(day: ForecastDay) -> List[str]:
    """Render a forecast day as a date line followed by its period lines."""
    lines = [
        f"📅 {format_date(day.date)} (🌡️ {day.temperature.min}°C to {day.temperature.max}°C)"
    ]

    day_periods = extract_periods(day)
    if day_periods.has_half_day_data:
        lines.append(format_period("Morning (00-12h)", day_periods.get(MORNING)))
        lines.append(format_period("Afternoon (12-24h)", day_periods.get(AFTERNOON)))
    elif day_periods.has_whole_day:
        lines.append(format_period("All day", day_periods.whole_day()))

    return lines


def format_forecast(forecast: Forecast, now: Optional[datetime] = None) -> str:
    """Render a full multi-day forecast with header."""
    now = now or datetime.now()
    lines = [
        "",
        f"🌤️  Weather forecast for {forecast.name} ({forecast.province})",
        f"📊 Forecast updated on {now.strftime('%A, %B %d at %H:%M')}",
        SEPARATOR,
    ]
    for day in forecast.days:
        lines.append("")
        lines.extend(format_day(day))
    return "\n".join(lines)


def format_day_summary(forecast: Forecast) -> str:
    """Render today's weather of a forecast on one line.

    The forecast must contain at least one day.
    """
    summary = summarize_day(forecast.days[0])

    line = (
        f"{weather_emoji(summary.sky_description, summary.rain_probability)} {forecast.name}: "
        f"{summary.sky_description} {summary.min_temperature}°C-{summary.max_temperature}°C"
    )
    if summary.rain_probability > 0:
        line += f" (💧 {summary.rain_probability}%)"
    if summary.wind_direction and summary.wind_speed > 0:
        line += f" {wind_direction_emoji(summary.wind_direction)} {summary.wind_speed} km/h"
    return line


def format_failure(target: str, error: Exception) -> str:
    """Line reporting that one city could not be summarized."""
    return f"❌ {target}: {error}"
