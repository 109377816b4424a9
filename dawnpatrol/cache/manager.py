# ABOUTME: In-memory cache for wind history and katabatic forecasts
# ABOUTME: Wind data has a 2 hour TTL, forecasts 6 hours; last good data survives outages

from datetime import datetime, timezone
from typing import Optional

from dawnpatrol.weather.models import ForecastPoint, WindSample


class CacheManager:
    """
    Split cache for wind history and forecasts.

    Wind history: default 2 hour TTL, refetched when stale
    Forecasts: default 6 hour TTL, valley + mountain stored together
    Offline: when a fetch fails the last known wind data is kept for display
    """

    def __init__(self, wind_ttl_seconds: int = 7200, forecast_ttl_seconds: int = 21600):
        self.wind_ttl_seconds = wind_ttl_seconds
        self.forecast_ttl_seconds = forecast_ttl_seconds

        self._wind_cache: Optional[dict] = None
        self._forecast_cache: Optional[dict] = None

        self._is_offline: bool = False
        self._last_known_samples: list[WindSample] = []

    # ==================== Wind Cache ====================

    def set_wind(self, samples: list[WindSample]) -> None:
        """Store a fresh batch of wind samples and mark the source online."""
        self._wind_cache = {
            "samples": list(samples),
            "fetched_at": datetime.now(timezone.utc)
        }
        self._is_offline = False
        self._last_known_samples = list(samples)

    def get_wind(self) -> Optional[list[WindSample]]:
        """Cached samples, or None if stale/empty."""
        if self.is_wind_stale():
            return None
        return self._wind_cache["samples"]

    def get_wind_fetched_at(self) -> Optional[datetime]:
        if self._wind_cache is None:
            return None
        return self._wind_cache.get("fetched_at")

    def is_wind_stale(self) -> bool:
        return self._is_stale(self._wind_cache, self.wind_ttl_seconds)

    # ==================== Forecast Cache ====================

    def set_forecast(self, valley: list[ForecastPoint], mountain: list[ForecastPoint]) -> None:
        self._forecast_cache = {
            "valley": list(valley),
            "mountain": list(mountain),
            "fetched_at": datetime.now(timezone.utc)
        }

    def get_forecast(self) -> Optional[dict]:
        """{"valley": [...], "mountain": [...], "fetched_at": datetime} or None if stale/empty."""
        if self.is_forecast_stale():
            return None
        return self._forecast_cache

    def is_forecast_stale(self) -> bool:
        return self._is_stale(self._forecast_cache, self.forecast_ttl_seconds)

    # ==================== Offline State ====================

    def set_offline(self) -> None:
        """Mark the wind source offline; the last known samples stay available."""
        self._is_offline = True

    def is_offline(self) -> bool:
        return self._is_offline

    def get_last_known_samples(self) -> list[WindSample]:
        """Last good wind data regardless of age (for offline display)."""
        return self._last_known_samples

    def clear(self) -> None:
        """Clear all caches."""
        self._wind_cache = None
        self._forecast_cache = None
        self._is_offline = False
        self._last_known_samples = []

    @staticmethod
    def _is_stale(entry: Optional[dict], ttl_seconds: int) -> bool:
        if entry is None:
            return True

        fetched_at = entry.get("fetched_at")
        if fetched_at is None:
            return True

        age = datetime.now(timezone.utc) - fetched_at
        return age.total_seconds() > ttl_seconds
