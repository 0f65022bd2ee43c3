"""Tests for the MCP tool and resource handlers."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

from local_mcp.handlers.weather_resource import weather_resource_handler
from local_mcp.handlers.weather_tool import weather_tool_handler
from services.weather_service import WeatherLookup

from conftest import NOT_FOUND_BODY, PARIS_BODY


class TestWeatherTool:
    """Tests for the weather.current tool."""

    async def test_summary_and_link(self, lookup: WeatherLookup, respond) -> None:
        respond(PARIS_BODY)

        res = await weather_tool_handler({"city": "Paris"}, lookup)

        text, link = res["content"]
        assert text["text"] == "Weather for Paris: clear sky, temperature 18.5 °C, humidity 60%"
        assert link["type"] == "resource_link"
        assert link["uri"] == "weather://current/Paris"
        assert "isError" not in res

    async def test_not_found(self, lookup: WeatherLookup, respond) -> None:
        respond(NOT_FOUND_BODY)

        res = await weather_tool_handler({"city": "Atlantis"}, lookup)

        assert res["isError"] is True
        assert res["content"] == [{"type": "text", "text": "City not found!"}]

    async def test_missing_city(self, lookup: WeatherLookup, mock_session: MagicMock) -> None:
        res = await weather_tool_handler({}, lookup)

        assert res["content"][0]["text"] == "Enter your city"
        mock_session.get.assert_not_called()


class TestWeatherResource:
    """Tests for the weather://current/{city} resource."""

    async def test_reading_json(self, lookup: WeatherLookup, respond) -> None:
        respond(PARIS_BODY)

        res = await weather_resource_handler(None, {"city": ["Paris"]}, lookup)

        item = res["contents"][0]
        assert item["uri"] == "weather://current/Paris"
        assert item["mimeType"] == "application/json"
        assert json.loads(item["text"]) == {
            "city": "Paris",
            "tempC": 18.5,
            "description": "clear sky",
            "humidityPercent": 60,
        }

    async def test_fetch_error_json(self, lookup: WeatherLookup, mock_session: MagicMock) -> None:
        import requests

        mock_session.get.side_effect = requests.ConnectionError("down")

        res = await weather_resource_handler(None, {"city": "Paris"}, lookup)

        assert json.loads(res["contents"][0]["text"]) == {"error": "Failed to fetch weather data."}
