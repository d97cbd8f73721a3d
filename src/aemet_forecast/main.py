"""Command-line entry point for AEMET weather forecasts."""

import argparse
import logging
import sys
from typing import List, Optional

from aemet_forecast.config import LOG_LEVEL
from aemet_forecast.logging_config import configure_logging
from aemet_forecast.presentation import SEPARATOR, format_failure, format_forecast
from aemet_forecast.weather.client import AemetClient
from aemet_forecast.weather.exceptions import AemetError
from aemet_forecast.weather.service import ForecastService

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    """Build the `aemet` argument parser with its forecast and day subcommands."""
    parser = argparse.ArgumentParser(
        prog="aemet",
        description="AEMET weather data CLI tool",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    sub = parser.add_subparsers(dest="command")

    # forecast
    forecast_p = sub.add_parser(
        "forecast", aliases=["f"], help="Get weather forecast for a municipality"
    )
    forecast_p.add_argument(
        "-n", "--name", required=True, help="Municipality name (partial match)"
    )
    forecast_p.add_argument(
        "-i", "--non-interactive", action="store_true",
        help="Non-interactive mode (automatically selects first match)",
    )
    forecast_p.set_defaults(handler=_cmd_forecast)

    # day
    day_p = sub.add_parser(
        "day", aliases=["d"], help="Get today's weather summary for multiple cities"
    )
    day_p.add_argument(
        "-c", "--cities", required=True, action="extend", nargs="+",
        help="City names (partial match allowed), space or comma separated",
    )
    day_p.add_argument(
        "--use-ids", "--ids", dest="use_ids", action="store_true",
        help="Treat cities as municipality IDs instead of names",
    )
    day_p.set_defaults(handler=_cmd_day)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI.

    Args:
        argv: Command-line arguments; sys.argv is used if None

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    configure_logging("DEBUG" if args.verbose else LOG_LEVEL)

    try:
        with AemetClient() as client:
            return args.handler(ForecastService(client), args)
    except AemetError as e:
        logger.debug(f"Command {args.command} failed: {e!r}")
        print(f"❌ {e}", file=sys.stderr)
        return 1


def _cmd_forecast(service: ForecastService, args) -> int:
    """Print the multi-day forecast, asking which match to use when several fit."""
    partial_name = args.name.strip()
    if not partial_name:
        print("❌ municipality name is required", file=sys.stderr)
        return 1

    municipalities = service.find_municipalities(partial_name)

    selected = municipalities[0]
    if len(municipalities) > 1 and not args.non_interactive:
        print(f"Found {len(municipalities)} municipalities matching '{partial_name}':\n")
        for i, muni in enumerate(municipalities, start=1):
            print(f"{i}. {muni.name} ({muni.capital})")

        try:
            answer = input(f"\nSelect a municipality (1-{len(municipalities)}): ")
        except EOFError:
            answer = ""
        try:
            selection = int(answer.strip())
        except ValueError:
            selection = 0

        if selection < 1 or selection > len(municipalities):
            print("❌ invalid selection", file=sys.stderr)
            return 1
        selected = municipalities[selection - 1]
    elif len(municipalities) > 1:
        print(
            f"Found {len(municipalities)} municipalities matching '{partial_name}', "
            f"using first match: {selected.name}"
        )

    forecast = service.get_forecast(selected)
    print(format_forecast(forecast))
    return 0


def _cmd_day(service: ForecastService, args) -> int:
    """Print a one-line summary of today for each city, reporting failures inline."""
    cities = [city.strip() for value in args.cities for city in value.split(",") if city.strip()]
    if not cities:
        print("❌ at least one city name is required", file=sys.stderr)
        return 1

    print("🌤️  El tiempo hoy")
    print(SEPARATOR)

    for city in cities:
        try:
            if args.use_ids:
                summary = service.day_summary_by_id(city)
            else:
                summary = service.day_summary_by_name(city)
        except AemetError as e:
            logger.debug(f"Summary for {city} failed: {e!r}")
            print(format_failure(city, e))
            continue
        print(summary)

    return 0


if __name__ == "__main__":
    sys.exit(main())
