from dataclasses import asdict
from typing import Any, Dict
import json

from services.display import MemoryDisplay
from services.weather_service import WeatherLookup, WeatherReading, handle_search, sanitize_city


async def weather_resource_handler(_uri: Any, variables: Dict[str, Any], lookup: WeatherLookup) -> Dict[str, Any]:
    """
    Build the resource contents for the current weather.

    Parameters
    ----------
    _uri : Any
        Parsed URI of the requested resource. Unused.
    variables : Dict[str, Any]
        Variables extracted from the resource template, expected to contain a "city" entry.
    lookup : WeatherLookup
        Client used to query the provider.

    Returns
    -------
    Dict[str, Any]
        MCP resource response with the JSON reading, or an error object.
    """
    raw = variables.get("city")
    city_param = raw[0] if isinstance(raw, list) and raw else raw
    city = sanitize_city(str(city_param or ""))
    display = MemoryDisplay()
    outcome = await handle_search(city, lookup, display)

    if isinstance(outcome, WeatherReading):
        body = asdict(outcome)
    else:
        body = {"error": " ".join(display.drain_alerts())}
    return {
        "contents": [
            {
                "uri": f"weather://current/{city}",
                "text": json.dumps(body),
                "mimeType": "application/json",
            }
        ]
    }
