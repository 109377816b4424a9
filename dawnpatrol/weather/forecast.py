# ABOUTME: Open-Meteo client for hourly valley and mountain forecasts (no API key)
# ABOUTME: Feeds the katabatic predictor with rain, cloud, pressure and temperature

import logging
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

import requests

from dawnpatrol.analysis.normalizer import parse_number
from dawnpatrol.weather.models import ForecastPoint

log = logging.getLogger(__name__)

HOURLY_FIELDS = [
    "temperature_2m",
    "precipitation_probability",
    "cloud_cover",
    "pressure_msl",
    "wind_speed_10m",
    "wind_direction_10m",
]


class ForecastClient:
    """Client for Open-Meteo hourly forecasts"""

    BASE_URL = "https://api.open-meteo.com/v1/forecast"

    def __init__(self, timezone_name: str = "America/Denver", forecast_days: int = 7, timeout: int = 15):
        self.timezone_name = timezone_name
        self.forecast_days = forecast_days
        self.timeout = timeout

    def fetch_hourly(
        self,
        lat: float,
        lon: float,
        elevation: Optional[float] = None
    ) -> list[ForecastPoint]:
        """
        Fetch the hourly forecast for one location.

        Returns:
            ForecastPoints with local (timezone-aware) timestamps,
            or an empty list on any error.
        """
        params = {
            "latitude": lat,
            "longitude": lon,
            "hourly": ",".join(HOURLY_FIELDS),
            "timezone": self.timezone_name,
            "forecast_days": self.forecast_days,
            "temperature_unit": "celsius",
            "wind_speed_unit": "ms",
        }
        if elevation is not None:
            params["elevation"] = elevation

        try:
            response = requests.get(self.BASE_URL, params=params, timeout=self.timeout)

            if response.status_code != 200:
                log.error(f"Open-Meteo HTTP error: {response.status_code} - {response.text}")
                return []

            return self._parse_response(response.json())

        except Exception as e:
            log.error(f"Open-Meteo request failed: {e}")
            return []

    def _parse_response(self, data: dict) -> list[ForecastPoint]:
        try:
            hourly = data["hourly"]
            times = hourly["time"]
            tz = ZoneInfo(self.timezone_name)

            def series(name: str, index: int) -> Optional[float]:
                values = hourly.get(name) or []
                return parse_number(values[index]) if index < len(values) else None

            points = []
            for i, time_text in enumerate(times):
                # Open-Meteo returns local wall-clock times without an offset
                timestamp = datetime.fromisoformat(time_text).replace(tzinfo=tz)
                points.append(ForecastPoint(
                    timestamp=timestamp,
                    temperature=series("temperature_2m", i),
                    pressure=series("pressure_msl", i),
                    precipitation_probability=series("precipitation_probability", i),
                    cloud_cover=series("cloud_cover", i),
                    wind_speed=series("wind_speed_10m", i),
                    wind_direction=series("wind_direction_10m", i),
                ))
            return points

        except (KeyError, IndexError, TypeError, ValueError) as e:
            log.error(f"Open-Meteo response parsing failed: {e}")
            return []
