import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union

import requests

from services.display import DisplaySurface, show_reading
from services.errors import CityNotFoundError, WeatherFetchError

logger = logging.getLogger(__name__)

OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"

NOT_FOUND_CODE = "404"

CITY_NOT_FOUND_MESSAGE = "City not found!"
FETCH_FAILED_MESSAGE = "Failed to fetch weather data."
EMPTY_CITY_MESSAGE = "Enter your city"


@dataclass
class WeatherReading:
    """
    Current weather for one city, as reported by the provider.

    Attributes
    ----------
    city : str
        Display name returned by the provider.
    tempC : float
        Current temperature in Celsius degrees.
    description : str
        First weather description of the response.
    humidityPercent : float
        Current relative humidity in percent.
    """

    city: str
    tempC: float
    description: str
    humidityPercent: float


class LookupFailure(Enum):
    """Reason a lookup did not produce a reading."""

    NOT_FOUND = "not_found"
    FETCH_ERROR = "fetch_error"


def sanitize_city(city: Optional[str]) -> str:
    """
    Normalize a user-provided city string.

    Parameters
    ----------
    city : str | None
        Raw city input.

    Returns
    -------
    str
        City name with surrounding whitespace removed.
    """
    return (city or "").strip()


def parse_reading(data: Dict[str, Any]) -> WeatherReading:
    """
    Extract a reading from a successful provider body.

    Missing fields surface as the underlying ``KeyError``, ``IndexError``
    or ``TypeError``.
    """
    main = data["main"]
    return WeatherReading(
        city=data["name"],
        tempC=main["temp"],
        description=data["weather"][0]["description"],
        humidityPercent=main["humidity"],
    )


class WeatherLookup:
    """Current-weather client bound to one API credential."""

    def __init__(
        self,
        api_key: str,
        base_url: str = OPENWEATHER_URL,
        session_factory: Optional[Callable[[], requests.Session]] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the lookup.

        Parameters
        ----------
        api_key : str
            Provider credential sent as ``appid``.
        base_url : str
            Current-weather endpoint.
        session_factory : Optional[Callable[[], requests.Session]]
            Builds the HTTP session for one request. Defaults to
            ``requests.Session``.
        timeout : Optional[float]
            Request timeout in seconds. ``None`` waits until the transport
            resolves or fails.
        """
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._session_factory = session_factory or requests.Session

    def build_params(self, city: str) -> Dict[str, str]:
        """Query parameters for one current-weather request."""
        return {"q": city, "appid": self.api_key, "units": "metric"}

    def _get_json(self, city: str) -> Any:
        # Runs in a worker thread; overlapping lookups never share a session.
        with self._session_factory() as session:
            response = session.get(self.base_url, params=self.build_params(city), timeout=self.timeout)
            return response.json()

    async def fetch(self, city: str) -> WeatherReading:
        """
        Request and parse the current weather for a city.

        Parameters
        ----------
        city : str
            City name, already sanitized and non-empty.

        Returns
        -------
        WeatherReading
            Parsed reading.

        Raises
        ------
        CityNotFoundError
            The body carries the not-found code ``"404"``.
        WeatherFetchError
            Transport failed, or the body could not be parsed into a reading.
        """
        try:
            data = await asyncio.to_thread(self._get_json, city)
        except (requests.RequestException, ValueError) as err:
            raise WeatherFetchError(f"Request for {city!r} failed: {err}") from err

        # The provider sends the not-found code as a string.
        if isinstance(data, dict) and data.get("cod") == NOT_FOUND_CODE:
            raise CityNotFoundError(city)

        try:
            return parse_reading(data)
        except (KeyError, IndexError, TypeError) as err:
            raise WeatherFetchError(f"Unexpected response for {city!r}: {err!r}") from err

    async def lookup(self, city: str, display: DisplaySurface) -> Union[WeatherReading, LookupFailure]:
        """
        Fetch the weather for a city and update a display surface.

        Display fields are written only on success. Failures are reported
        through ``display.alert`` and leave the fields untouched.

        Parameters
        ----------
        city : str
            City name, already sanitized and non-empty.
        display : DisplaySurface
            Surface receiving the reading or the failure notice.

        Returns
        -------
        WeatherReading | LookupFailure
            The reading shown, or the reason nothing was shown.
        """
        try:
            reading = await self.fetch(city)
        except CityNotFoundError:
            logger.info("City not found: %s", city)
            display.alert(CITY_NOT_FOUND_MESSAGE)
            return LookupFailure.NOT_FOUND
        except WeatherFetchError:
            logger.exception("Error fetching weather for %s", city)
            display.alert(FETCH_FAILED_MESSAGE)
            return LookupFailure.FETCH_ERROR

        show_reading(display, reading)

        logger.info("Weather in %s:", city)
        logger.info("Temperature: %s °C", reading.tempC)
        logger.info("Description: %s", reading.description)
        logger.info("Humidity: %s %%", reading.humidityPercent)
        return reading


async def handle_search(
    raw_city: Optional[str], lookup: WeatherLookup, display: DisplaySurface
) -> Optional[Union[WeatherReading, LookupFailure]]:
    """
    Run a search triggered from an input field.

    Parameters
    ----------
    raw_city : str | None
        Current value of the input field.
    lookup : WeatherLookup
        Client performing the request.
    display : DisplaySurface
        Surface to update.

    Returns
    -------
    WeatherReading | LookupFailure | None
        Outcome of the lookup, or ``None`` when the input was empty and no
        request was made.
    """
    city = sanitize_city(raw_city)
    if not city:
        display.alert(EMPTY_CITY_MESSAGE)
        return None
    return await lookup.lookup(city, display)
