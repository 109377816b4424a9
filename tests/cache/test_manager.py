# ABOUTME: Tests for cache management and refresh logic
# ABOUTME: Validates wind/forecast TTLs and the offline last-known fallback

from datetime import datetime, timedelta, timezone

from dawnpatrol.cache.manager import CacheManager
from dawnpatrol.weather.models import ForecastPoint, WindSample

SAMPLES = [WindSample(1736935200000, 12.0, 15.0, 315), WindSample(1736938800000, 13.0, 16.0, 310)]
POINT = ForecastPoint(timestamp=datetime(2025, 1, 16, 3, 0), temperature=2.0)


def age(manager, attr, minutes):
    """Backdate a cache entry"""
    getattr(manager, attr)["fetched_at"] = datetime.now(timezone.utc) - timedelta(minutes=minutes)


class TestWindCache:
    """Tests for the wind history cache"""

    def test_empty_cache_is_stale(self):
        manager = CacheManager()

        assert manager.is_wind_stale() is True
        assert manager.get_wind() is None
        assert manager.get_wind_fetched_at() is None

    def test_returns_fresh_samples(self):
        manager = CacheManager(wind_ttl_seconds=600)
        manager.set_wind(SAMPLES)

        assert manager.get_wind() == SAMPLES
        assert manager.is_wind_stale() is False
        assert manager.get_wind_fetched_at() is not None

    def test_returns_none_when_stale(self):
        """Wind data older than the TTL is not served"""
        manager = CacheManager(wind_ttl_seconds=600)
        manager.set_wind(SAMPLES)
        age(manager, "_wind_cache", 11)

        assert manager.get_wind() is None
        assert manager.is_wind_stale() is True

    def test_default_ttl_is_two_hours(self):
        manager = CacheManager()
        manager.set_wind(SAMPLES)
        age(manager, "_wind_cache", 119)

        assert manager.get_wind() == SAMPLES

    def test_set_wind_copies_input(self):
        samples = list(SAMPLES)
        manager = CacheManager()
        manager.set_wind(samples)
        samples.clear()

        assert len(manager.get_wind()) == 2


class TestForecastCache:
    def test_round_trip(self):
        manager = CacheManager()
        manager.set_forecast([POINT], [POINT, POINT])

        forecast = manager.get_forecast()
        assert forecast["valley"] == [POINT]
        assert len(forecast["mountain"]) == 2

    def test_stale_after_six_hours(self):
        manager = CacheManager()
        manager.set_forecast([POINT], [POINT])
        age(manager, "_forecast_cache", 6 * 60 + 1)

        assert manager.get_forecast() is None
        assert manager.is_forecast_stale() is True

    def test_wind_and_forecast_are_independent(self):
        manager = CacheManager()
        manager.set_forecast([POINT], [POINT])

        assert manager.get_wind() is None
        assert manager.get_forecast() is not None


class TestOfflineState:
    def test_offline_keeps_last_known(self):
        """Going offline leaves the last good samples available"""
        manager = CacheManager()
        manager.set_wind(SAMPLES)
        manager.set_offline()

        assert manager.is_offline() is True
        assert manager.get_last_known_samples() == SAMPLES

    def test_last_known_survives_staleness(self):
        manager = CacheManager(wind_ttl_seconds=60)
        manager.set_wind(SAMPLES)
        age(manager, "_wind_cache", 10)

        assert manager.get_wind() is None
        assert manager.get_last_known_samples() == SAMPLES

    def test_fresh_data_clears_offline(self):
        manager = CacheManager()
        manager.set_offline()
        manager.set_wind(SAMPLES)

        assert manager.is_offline() is False

    def test_clear(self):
        manager = CacheManager()
        manager.set_wind(SAMPLES)
        manager.set_forecast([POINT], [POINT])
        manager.set_offline()

        manager.clear()

        assert manager.get_wind() is None
        assert manager.get_forecast() is None
        assert manager.is_offline() is False
        assert manager.get_last_known_samples() == []
