"""Command-line trigger for a single weather lookup.

Reads the city from the first argument (or ``WEATHER_CITY``) and the API
key from ``OPENWEATHER_API_KEY``, then prints the four display fields.
"""

from typing import List, Optional
import asyncio
import logging
import os
import sys

from dotenv import load_dotenv

from services.display import ConsoleDisplay
from services.weather_service import OPENWEATHER_URL, WeatherLookup, WeatherReading, handle_search


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Helper to read environment variables with a default value."""
    val = os.getenv(name)
    return val if val is not None and val != "" else default


def main(argv: Optional[List[str]] = None) -> int:
    """Entrypoint for the command-line lookup."""
    argv = sys.argv[1:] if argv is None else argv
    load_dotenv()
    logging.basicConfig(level=_get_env("LOG_LEVEL", "WARNING"), format="%(levelname)s %(name)s: %(message)s")

    api_key = _get_env("OPENWEATHER_API_KEY")
    if not api_key:
        print("OPENWEATHER_API_KEY is not set", file=sys.stderr)
        return 1

    city = " ".join(argv) if argv else _get_env("WEATHER_CITY", "")
    lookup = WeatherLookup(api_key, base_url=_get_env("OPENWEATHER_URL", OPENWEATHER_URL) or OPENWEATHER_URL)
    outcome = asyncio.run(handle_search(city, lookup, ConsoleDisplay()))
    return 0 if isinstance(outcome, WeatherReading) else 1


if __name__ == "__main__":
    sys.exit(main())
