# ABOUTME: Tests for wind and forecast data models
# ABOUTME: Validates defaults, immutability and display formatting

import dataclasses
from datetime import datetime

import pytest

from dawnpatrol.weather.models import ForecastPoint, NormalizedSample, WindSample


def test_wind_sample_accepts_loose_types():
    """Raw samples keep whatever the scraper handed over"""
    sample = WindSample(timestamp="2025-01-15T03:00:00", speed="12.5", direction="NW")

    assert sample.speed == "12.5"
    assert sample.gust is None


def test_wind_sample_is_frozen():
    sample = WindSample(timestamp=0, speed=1)
    with pytest.raises(dataclasses.FrozenInstanceError):
        sample.speed = 2


def test_normalized_sample_str():
    sample = NormalizedSample(datetime(2025, 1, 15, 3, 0), 12.34, None, 315.0)
    assert str(sample) == "2025-01-15T03:00:00 12.3 @ 315°"


def test_normalized_sample_str_with_missing_fields():
    sample = NormalizedSample(None, None, None, None)
    assert str(sample) == "?? -- @ --"


def test_forecast_point_defaults():
    point = ForecastPoint(timestamp=datetime(2025, 1, 16, 3, 0))

    assert point.temperature is None
    assert point.pressure is None
    assert point.cloud_cover is None
