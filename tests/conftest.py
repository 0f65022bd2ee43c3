"""Pytest configuration and fixtures for the weather lookup tests."""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import MagicMock

import pytest
import requests

from services.display import MemoryDisplay
from services.weather_service import WeatherLookup

PARIS_BODY: dict[str, Any] = {
    "cod": 200,
    "name": "Paris",
    "main": {"temp": 18.5, "humidity": 60},
    "weather": [{"description": "clear sky"}, {"description": "mist"}],
}

NOT_FOUND_BODY: dict[str, Any] = {"cod": "404", "message": "city not found"}


def create_mock_response(
    json_data: Any = None,
    json_error: Exception | None = None,
    status: int = 200,
) -> MagicMock:
    """Create a configured mock requests response.

    Args:
        json_data: Data to return from json() call
        json_error: Exception raised by json() instead
        status: HTTP status code

    Returns:
        Configured MagicMock response
    """
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock requests Session usable as a context manager."""
    session = MagicMock(spec=requests.Session)
    session.__enter__.return_value = session
    session.__exit__.return_value = False
    return session


@pytest.fixture
def respond(mock_session: MagicMock) -> Callable[..., MagicMock]:
    """Make the mock session answer every GET with the given body."""

    def _respond(json_data: Any = None, **kwargs: Any) -> MagicMock:
        response = create_mock_response(json_data, **kwargs)
        mock_session.get.return_value = response
        return response

    return _respond


@pytest.fixture
def lookup(mock_session: MagicMock) -> WeatherLookup:
    """WeatherLookup wired to the mock session."""
    return WeatherLookup(
        "test-key", base_url="https://weather.test/data", session_factory=lambda: mock_session
    )


@pytest.fixture
def display() -> MemoryDisplay:
    """Display seeded with a previous reading."""
    return MemoryDisplay(
        fields={"city": "Oslo", "tem": "3 °C", "des": "snow", "hum": "90%"},
    )
