from typing import Any, Dict

from services.display import MemoryDisplay
from services.weather_service import WeatherLookup, WeatherReading, handle_search, sanitize_city


async def weather_tool_handler(args: Dict[str, Any], lookup: WeatherLookup) -> Dict[str, Any]:
    """
    Handle the MCP tool call for the current weather of a city.

    Parameters
    ----------
    args : Dict[str, Any]
        Tool arguments. Must include the "city" string parameter.
    lookup : WeatherLookup
        Client used to query the provider.

    Returns
    -------
    Dict[str, Any]
        MCP tool response with a human-readable summary and, on success,
        a resource link.
    """
    city = sanitize_city(str(args.get("city") or ""))
    display = MemoryDisplay()
    outcome = await handle_search(city, lookup, display)

    if not isinstance(outcome, WeatherReading):
        return {"content": [{"type": "text", "text": " ".join(display.drain_alerts())}], "isError": True}

    fields = display.fields
    text = (
        f"Weather for {fields['city']}: {fields['des']}, "
        f"temperature {fields['tem']}, humidity {fields['hum']}"
    )
    return {
        "content": [
            {"type": "text", "text": text},
            {
                "type": "resource_link",
                "uri": f"weather://current/{city}",
                "name": f"weather current {city}",
                "mimeType": "application/json",
                "description": "Raw JSON for the current weather",
            },
        ]
    }
