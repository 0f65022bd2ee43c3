"""Error types raised while fetching a weather reading."""


class WeatherLookupError(Exception):
    """Base error for weather lookup failures."""


class CityNotFoundError(WeatherLookupError):
    """The provider reported that the city is unknown."""

    def __init__(self, city: str):
        super().__init__(f"City not found: {city}")
        self.city = city


class WeatherFetchError(WeatherLookupError):
    """Transport or response parsing failed."""
