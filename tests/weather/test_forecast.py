# ABOUTME: Tests for the Open-Meteo hourly forecast client
# ABOUTME: Uses mocked responses to avoid real API calls in tests

from datetime import datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

from dawnpatrol.weather.forecast import ForecastClient
from dawnpatrol.weather.models import ForecastPoint

MOCK_RESPONSE = {
    "hourly": {
        "time": ["2025-01-16T03:00", "2025-01-16T04:00"],
        "temperature_2m": [2.5, 2.1],
        "precipitation_probability": [5, 10],
        "cloud_cover": [12, None],
        "pressure_msl": [1018.2, 1018.9],
        "wind_speed_10m": [3.1, 3.4],
        "wind_direction_10m": [300, 310],
    }
}


def test_fetch_hourly_parses_points():
    """fetch_hourly returns ForecastPoints with local timestamps"""
    with patch('requests.get') as mock_get:
        mock_get.return_value.status_code = 200
        mock_get.return_value.json.return_value = MOCK_RESPONSE

        points = ForecastClient().fetch_hourly(39.65, -105.19)

        assert len(points) == 2
        assert isinstance(points[0], ForecastPoint)
        assert points[0].timestamp == datetime(2025, 1, 16, 3, 0, tzinfo=ZoneInfo("America/Denver"))
        assert points[0].temperature == 2.5
        assert points[1].pressure == 1018.9
        assert points[1].precipitation_probability == 10.0
        assert points[1].cloud_cover is None


def test_fetch_hourly_sends_location_and_elevation():
    with patch('requests.get') as mock_get:
        mock_get.return_value.status_code = 200
        mock_get.return_value.json.return_value = MOCK_RESPONSE

        ForecastClient(forecast_days=3).fetch_hourly(39.63, -105.32, elevation=2200)

        params = mock_get.call_args.kwargs["params"]
        assert params["latitude"] == 39.63
        assert params["longitude"] == -105.32
        assert params["elevation"] == 2200
        assert params["forecast_days"] == 3
        assert "pressure_msl" in params["hourly"]


def test_elevation_omitted_when_not_given():
    with patch('requests.get') as mock_get:
        mock_get.return_value.status_code = 200
        mock_get.return_value.json.return_value = MOCK_RESPONSE

        ForecastClient().fetch_hourly(39.63, -105.32)

        assert "elevation" not in mock_get.call_args.kwargs["params"]


def test_short_series_fill_with_none():
    response = {"hourly": {"time": ["2025-01-16T03:00", "2025-01-16T04:00"], "temperature_2m": [1.0]}}

    with patch('requests.get') as mock_get:
        mock_get.return_value.status_code = 200
        mock_get.return_value.json.return_value = response

        points = ForecastClient().fetch_hourly(39.65, -105.19)

        assert points[1].temperature is None
        assert points[0].pressure is None


def test_http_error_returns_empty():
    with patch('requests.get') as mock_get:
        mock_get.return_value.status_code = 500
        mock_get.return_value.text = "Server error"

        assert ForecastClient().fetch_hourly(39.65, -105.19) == []


def test_network_error_returns_empty():
    with patch('requests.get') as mock_get:
        mock_get.side_effect = Exception("Network error")

        assert ForecastClient().fetch_hourly(39.65, -105.19) == []


def test_malformed_response_returns_empty():
    with patch('requests.get') as mock_get:
        mock_get.return_value.status_code = 200
        mock_get.return_value.json.return_value = {"error": True, "reason": "bad latitude"}

        assert ForecastClient().fetch_hourly(999, -105.19) == []
