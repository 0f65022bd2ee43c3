"""Display surfaces that receive weather readings and user notices."""

import math
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, List, Protocol

if TYPE_CHECKING:
    from services.weather_service import WeatherReading

CITY_REGION = "city"
TEMPERATURE_REGION = "tem"
DESCRIPTION_REGION = "des"
HUMIDITY_REGION = "hum"

REGIONS = (CITY_REGION, TEMPERATURE_REGION, DESCRIPTION_REGION, HUMIDITY_REGION)


class DisplaySurface(Protocol):
    """Output regions plus a blocking notice channel."""

    def render(self, region_id: str, text: str) -> None:
        ...

    def alert(self, message: str) -> None:
        ...


def _format_number(value: float) -> str:
    # Matches browser number-to-string output for ints, integral floats,
    # NaN and infinities. Exponent notation may still differ.
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer():
            return str(int(value))
    return str(value)


def format_temperature(value: float) -> str:
    """Render a temperature as ``"<number> °C"``."""
    return f"{_format_number(value)} °C"


def format_humidity(value: float) -> str:
    """Render a humidity percentage as ``"<number>%"``."""
    return f"{_format_number(value)}%"


def show_reading(display: DisplaySurface, reading: "WeatherReading") -> None:
    """
    Write the four fields of a reading to a display surface.

    Parameters
    ----------
    display : DisplaySurface
        Target surface.
    reading : WeatherReading
        Successfully parsed reading.
    """
    display.render(CITY_REGION, reading.city)
    display.render(TEMPERATURE_REGION, format_temperature(reading.tempC))
    display.render(DESCRIPTION_REGION, reading.description)
    display.render(HUMIDITY_REGION, format_humidity(reading.humidityPercent))


@dataclass
class MemoryDisplay:
    """
    Display surface kept in memory.

    Attributes
    ----------
    fields : Dict[str, str]
        Current text of each region, keyed by region id.
    alerts : List[str]
        Notices raised since the last drain.
    """

    fields: Dict[str, str] = field(default_factory=lambda: {region: "" for region in REGIONS})
    alerts: List[str] = field(default_factory=list)

    def render(self, region_id: str, text: str) -> None:
        self.fields[region_id] = text

    def alert(self, message: str) -> None:
        self.alerts.append(message)

    def drain_alerts(self) -> List[str]:
        """Return pending alerts and clear them."""
        pending, self.alerts = self.alerts, []
        return pending


class ConsoleDisplay:
    """Display surface that prints to the terminal."""

    def render(self, region_id: str, text: str) -> None:
        print(f"{region_id}: {text}")

    def alert(self, message: str) -> None:
        print(f"! {message}")
