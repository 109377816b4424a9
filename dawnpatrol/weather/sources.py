# ABOUTME: WeatherFlow graph client for the last ~24 hours of station wind history
# ABOUTME: Same feed the WindAlert spot page charts; returns raw WindSamples

import json
import logging
import re
import time

import requests

from dawnpatrol.analysis.direction import kph_to_mph
from dawnpatrol.analysis.normalizer import parse_number
from dawnpatrol.weather.models import WindSample

log = logging.getLogger(__name__)

JSONP_PATTERN = re.compile(r"^[^(]+\((.*)\)\s*;?\s*$", re.DOTALL)
DAY_MS = 24 * 60 * 60 * 1000


class WindHistoryClient:
    """
    Client for hourly-ish wind history from the WeatherFlow graph API.

    This is the endpoint windalert.com calls for its spot graphs. It answers
    in JSONP, wind in km/h.
    """

    BASE_URL = "https://api.weatherflow.com/wxengine/rest/graph/getGraph"
    REFERER_URL = "https://windalert.com/spot"
    DEFAULT_SPOT_ID = "149264"  # Soda Lake Dam 1

    def __init__(self, wf_token: str, spot_id: str = None, timeout: int = 15, convert_to_mph: bool = True):
        self.wf_token = wf_token
        self.spot_id = spot_id or self.DEFAULT_SPOT_ID
        self.timeout = timeout
        self.convert_to_mph = convert_to_mph

    def fetch(self, hours: int = 25) -> list[WindSample]:
        """
        Fetch recent wind history.

        Args:
            hours: How far back to ask the API for

        Returns:
            WindSamples from the 24 hours before the newest reading,
            or an empty list on any error.
        """
        now_ms = int(time.time() * 1000)
        params = {
            "callback": f"jQuery_{now_ms}",
            "units_wind": "kph",
            "units_temp": "c",
            "units_distance": "km",
            "units_precip": "mm",
            "fields": "wind",
            "format": "json",
            "null_ob_min_from_now": 30,
            "show_virtual_obs": "true",
            "spot_id": self.spot_id,
            "time_start_offset_hours": -hours,
            "time_end_offset_hours": 0,
            "type": "dataonly",
            "model_ids": -101,
            "wf_token": self.wf_token,
            "_": now_ms,
        }

        headers = {
            "Accept": "*/*",
            "Referer": f"{self.REFERER_URL}/{self.spot_id}",
            "X-Requested-With": "XMLHttpRequest",
            "User-Agent": "Mozilla/5.0 (compatible; DawnPatrolAlarm/1.0)",
        }

        try:
            response = requests.get(self.BASE_URL, params=params, headers=headers, timeout=self.timeout)

            if response.status_code != 200:
                log.error(f"WeatherFlow graph HTTP error: {response.status_code} - {response.text}")
                return []

            return self._parse_response(response.text)

        except Exception as e:
            log.error(f"WeatherFlow graph request failed: {e}")
            return []

    def _parse_response(self, text: str) -> list[WindSample]:
        """Unwrap JSONP and zip the avg/gust/direction series into WindSamples."""
        try:
            match = JSONP_PATTERN.match(text.strip())
            payload = json.loads(match.group(1) if match else text)

            avg_series = payload.get("wind_avg_data") or []
            gust_series = payload.get("wind_gust_data") or []
            dir_series = (
                payload.get("wind_dir_data")
                or payload.get("wind_direction_data")
                or payload.get("wind_dir_text_data")
                or []
            )

            if not avg_series or not gust_series:
                raise ValueError("Missing wind data in response")

            latest_ms = avg_series[-1][0]
            cutoff_ms = latest_ms - DAY_MS

            samples = []
            for i, (timestamp_ms, avg) in enumerate(avg_series):
                if timestamp_ms < cutoff_ms:
                    continue
                gust = gust_series[i][1] if i < len(gust_series) else None
                direction = dir_series[i][1] if i < len(dir_series) else None
                samples.append(WindSample(
                    timestamp=timestamp_ms,
                    speed=self._convert(avg),
                    gust=self._convert(gust),
                    direction=direction,
                ))
            return samples

        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as e:
            log.error(f"WeatherFlow graph parsing failed: {e}")
            return []

    def _convert(self, value):
        """kph -> mph when asked; unparseable values pass through for the normalizer to reject."""
        if not self.convert_to_mph:
            return value
        number = parse_number(value)
        if number is None:
            return value
        return round(kph_to_mph(number), 2)
