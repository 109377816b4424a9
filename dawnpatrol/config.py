# ABOUTME: Application configuration including station ids, coordinates and thresholds
# ABOUTME: Everything is env-overridable; analysis code receives values, never reads this

import os
from dotenv import load_dotenv

from dawnpatrol.analysis.models import AlarmCriteria, FactorWeights, KatabaticConfig
from dawnpatrol.analysis.windows import TimeWindow

load_dotenv()


def _env_float(name: str, default: str) -> float:
    return float(os.getenv(name, default))


def _env_optional_float(name: str, default: str):
    value = os.getenv(name, default)
    if value is None or value.strip().lower() in ("", "none", "off"):
        return None
    return float(value)


class Config:
    """Application configuration"""

    # Wind station: Soda Lake Dam 1 on WindAlert / WeatherFlow
    SPOT_NAME = "Soda Lake"
    WF_SPOT_ID = os.getenv("WF_SPOT_ID", "149264")
    WF_TOKEN = os.getenv("WF_TOKEN", "")

    # Valley (Morrison) and mountain (Evergreen) reference points for katabatic prediction
    VALLEY_NAME = "Morrison, CO"
    VALLEY_LAT = 39.6533
    VALLEY_LON = -105.1942
    VALLEY_ELEVATION_M = 1740

    MOUNTAIN_NAME = "Evergreen, CO"
    MOUNTAIN_LAT = 39.6364
    MOUNTAIN_LON = -105.3283
    MOUNTAIN_ELEVATION_M = 2200

    TIMEZONE = os.getenv("TIMEZONE", "America/Denver")

    # Alarm window (3-5am) and verification window (6-8am), hours inclusive
    ALARM_WINDOW_START = int(os.getenv("ALARM_WINDOW_START", "3"))
    ALARM_WINDOW_END = int(os.getenv("ALARM_WINDOW_END", "5"))
    VERIFY_WINDOW_START = int(os.getenv("VERIFY_WINDOW_START", "6"))
    VERIFY_WINDOW_END = int(os.getenv("VERIFY_WINDOW_END", "8"))

    # Default alarm criteria (mph)
    MINIMUM_AVERAGE_SPEED = _env_float("MINIMUM_AVERAGE_SPEED", "10")
    DIRECTION_CONSISTENCY_THRESHOLD = _env_float("DIRECTION_CONSISTENCY_THRESHOLD", "70")
    MINIMUM_CONSECUTIVE_POINTS = int(os.getenv("MINIMUM_CONSECUTIVE_POINTS", "4"))
    DIRECTION_DEVIATION_THRESHOLD = _env_float("DIRECTION_DEVIATION_THRESHOLD", "45")
    PREFERRED_DIRECTION = _env_optional_float("PREFERRED_DIRECTION", "315")  # Northwest
    PREFERRED_DIRECTION_RANGE = _env_float("PREFERRED_DIRECTION_RANGE", "45")
    USE_WIND_DIRECTION = os.getenv("USE_WIND_DIRECTION", "true").lower() == "true"
    ALARM_ENABLED = os.getenv("ALARM_ENABLED", "false").lower() == "true"
    ALARM_TIME = os.getenv("ALARM_TIME", "05:00")

    # Katabatic thresholds
    MAX_PRECIPITATION_PROBABILITY = _env_float("MAX_PRECIPITATION_PROBABILITY", "25")
    MIN_CLEAR_SKY_PERCENTAGE = _env_float("MIN_CLEAR_SKY_PERCENTAGE", "45")
    MIN_PRESSURE_CHANGE = _env_float("MIN_PRESSURE_CHANGE", "1.0")  # hPa
    MIN_TEMPERATURE_DIFFERENTIAL = _env_float("MIN_TEMPERATURE_DIFFERENTIAL", "3.5")  # Celsius
    CLEAR_CLOUD_COVER = _env_float("CLEAR_CLOUD_COVER", "30")  # hour counts as clear below this

    # Katabatic weights - normalized by their sum, so they need not add to 1
    PRECIPITATION_WEIGHT = _env_float("PRECIPITATION_WEIGHT", "0.25")
    SKY_CONDITIONS_WEIGHT = _env_float("SKY_CONDITIONS_WEIGHT", "0.25")
    PRESSURE_CHANGE_WEIGHT = _env_float("PRESSURE_CHANGE_WEIGHT", "0.20")
    TEMPERATURE_DIFFERENTIAL_WEIGHT = _env_float("TEMPERATURE_DIFFERENTIAL_WEIGHT", "0.15")

    # Recommendation cutoffs (probability %)
    GO_THRESHOLD = int(os.getenv("GO_THRESHOLD", "70"))
    MAYBE_THRESHOLD = int(os.getenv("MAYBE_THRESHOLD", "40"))

    # Caching
    WIND_CACHE_TTL_SECONDS = int(os.getenv("WIND_CACHE_TTL_SECONDS", "7200"))  # 2 hours
    FORECAST_CACHE_TTL_SECONDS = int(os.getenv("FORECAST_CACHE_TTL_SECONDS", "21600"))  # 6 hours

    # HTTP
    REQUEST_TIMEOUT_SECONDS = int(os.getenv("REQUEST_TIMEOUT_SECONDS", "15"))

    # Debug mode
    DEBUG = os.getenv("DEBUG", "false").lower() == "true"


def default_alarm_criteria() -> AlarmCriteria:
    """AlarmCriteria snapshot built from the current Config values."""
    return AlarmCriteria(
        minimum_average_speed=Config.MINIMUM_AVERAGE_SPEED,
        direction_consistency_threshold=Config.DIRECTION_CONSISTENCY_THRESHOLD,
        minimum_consecutive_points=Config.MINIMUM_CONSECUTIVE_POINTS,
        direction_deviation_threshold=Config.DIRECTION_DEVIATION_THRESHOLD,
        preferred_direction=Config.PREFERRED_DIRECTION,
        preferred_direction_range=Config.PREFERRED_DIRECTION_RANGE,
        use_wind_direction=Config.USE_WIND_DIRECTION,
        alarm_enabled=Config.ALARM_ENABLED,
        alarm_time=Config.ALARM_TIME,
    )


def default_katabatic_config() -> KatabaticConfig:
    """KatabaticConfig built from the current Config values."""
    return KatabaticConfig(
        max_precipitation_probability=Config.MAX_PRECIPITATION_PROBABILITY,
        min_clear_sky_percentage=Config.MIN_CLEAR_SKY_PERCENTAGE,
        min_pressure_change=Config.MIN_PRESSURE_CHANGE,
        min_temperature_differential=Config.MIN_TEMPERATURE_DIFFERENTIAL,
        clear_cloud_cover=Config.CLEAR_CLOUD_COVER,
        weights=FactorWeights(
            precipitation=Config.PRECIPITATION_WEIGHT,
            sky_conditions=Config.SKY_CONDITIONS_WEIGHT,
            pressure_change=Config.PRESSURE_CHANGE_WEIGHT,
            temperature_differential=Config.TEMPERATURE_DIFFERENTIAL_WEIGHT,
        ),
        go_threshold=Config.GO_THRESHOLD,
        maybe_threshold=Config.MAYBE_THRESHOLD,
    )


def alarm_window() -> TimeWindow:
    return TimeWindow(Config.ALARM_WINDOW_START, Config.ALARM_WINDOW_END)


def verify_window() -> TimeWindow:
    return TimeWindow(Config.VERIFY_WINDOW_START, Config.VERIFY_WINDOW_END)
