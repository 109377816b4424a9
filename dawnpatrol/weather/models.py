# ABOUTME: Data models for wind telemetry and hourly forecast points
# ABOUTME: Raw samples carry loose types; normalized samples are strictly typed

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

RawNumber = Union[str, int, float, None]
RawTimestamp = Union[datetime, str, int, float, None]


@dataclass(frozen=True)
class WindSample:
    """One telemetry reading as scraped - fields may be strings or numbers"""
    timestamp: RawTimestamp
    speed: RawNumber
    gust: RawNumber = None
    direction: RawNumber = None  # degrees (meteorological "from") or compass text


@dataclass(frozen=True)
class NormalizedSample:
    """WindSample with every field parsed; anything unparseable is None"""
    timestamp: Optional[datetime]
    speed: Optional[float]
    gust: Optional[float]
    direction: Optional[float]

    def __str__(self) -> str:
        when = self.timestamp.isoformat() if self.timestamp else "??"
        speed = f"{self.speed:.1f}" if self.speed is not None else "--"
        direction = f"{self.direction:.0f}°" if self.direction is not None else "--"
        return f"{when} {speed} @ {direction}"


@dataclass(frozen=True)
class ForecastPoint:
    """One hourly forecast value set for a single location"""
    timestamp: datetime
    temperature: Optional[float] = None            # Celsius
    pressure: Optional[float] = None               # hPa, sea level
    precipitation_probability: Optional[float] = None  # 0-100 %
    cloud_cover: Optional[float] = None            # 0-100 %
    wind_speed: Optional[float] = None             # m/s
    wind_direction: Optional[float] = None         # degrees
