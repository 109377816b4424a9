# ABOUTME: Tests for application configuration and station settings
# ABOUTME: Validates Soda Lake ids, Morrison/Evergreen coordinates and default thresholds

from dawnpatrol.analysis.models import AlarmCriteria, KatabaticConfig
from dawnpatrol.analysis.windows import TimeWindow
from dawnpatrol.config import (
    Config,
    alarm_window,
    default_alarm_criteria,
    default_katabatic_config,
    verify_window,
)


def test_config_has_soda_lake_station():
    """Soda Lake Dam 1 is the wind station"""
    assert Config.SPOT_NAME == "Soda Lake"
    assert Config.WF_SPOT_ID == "149264"


def test_config_has_valley_and_mountain_sites():
    """Valley sits below the mountain reference"""
    assert Config.VALLEY_NAME == "Morrison, CO"
    assert Config.MOUNTAIN_NAME == "Evergreen, CO"
    assert Config.VALLEY_ELEVATION_M < Config.MOUNTAIN_ELEVATION_M


def test_config_timezone():
    assert Config.TIMEZONE == "America/Denver"


def test_config_windows():
    assert alarm_window() == TimeWindow(3, 5)
    assert verify_window() == TimeWindow(6, 8)


def test_cache_ttls():
    """Wind is refetched more often than forecasts"""
    assert Config.WIND_CACHE_TTL_SECONDS == 7200
    assert Config.FORECAST_CACHE_TTL_SECONDS == 21600


def test_default_alarm_criteria_from_config():
    criteria = default_alarm_criteria()

    assert isinstance(criteria, AlarmCriteria)
    assert criteria.minimum_average_speed == 10.0
    assert criteria.direction_consistency_threshold == 70.0
    assert criteria.minimum_consecutive_points == 4
    assert criteria.preferred_direction == 315.0
    assert criteria.alarm_time == "05:00"
    criteria.validate()


def test_default_katabatic_config_from_config():
    config = default_katabatic_config()

    assert isinstance(config, KatabaticConfig)
    assert config.max_precipitation_probability == 25.0
    assert config.min_clear_sky_percentage == 45.0
    assert config.min_pressure_change == 1.0
    assert config.min_temperature_differential == 3.5
    assert config.weights.precipitation == 0.25
    assert config.go_threshold == 70
    assert config.maybe_threshold == 40
