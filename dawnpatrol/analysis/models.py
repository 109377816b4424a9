# ABOUTME: Value objects for alarm criteria, analysis results and katabatic predictions
# ABOUTME: Everything is frozen - results are rebuilt on every call, never mutated

from dataclasses import dataclass, field
from datetime import date
from typing import Literal, Optional

from dawnpatrol.analysis.windows import TimeWindow

Confidence = Literal["low", "medium", "high"]
Recommendation = Literal["go", "maybe", "skip"]
PressureTrend = Literal["rising", "falling", "stable"]


@dataclass(frozen=True)
class AlarmCriteria:
    """User-configured thresholds for waking up; passed by value into each check"""
    minimum_average_speed: float = 10.0
    direction_consistency_threshold: float = 70.0   # %
    minimum_consecutive_points: int = 4
    direction_deviation_threshold: float = 45.0     # degrees
    preferred_direction: Optional[float] = None     # degrees
    preferred_direction_range: float = 45.0         # +/- degrees
    use_wind_direction: bool = True
    alarm_enabled: bool = False
    alarm_time: str = "05:00"
    speed_unit: str = "mph"

    def validate(self) -> None:
        """
        Raise ValueError listing every out-of-range field.

        Analysis never calls this; it is for the settings layer that
        accepts user input.
        """
        problems = []
        if self.minimum_average_speed < 0:
            problems.append("minimum_average_speed must be >= 0")
        if not 0 <= self.direction_consistency_threshold <= 100:
            problems.append("direction_consistency_threshold must be 0-100")
        if self.minimum_consecutive_points < 0:
            problems.append("minimum_consecutive_points must be >= 0")
        if not 0 <= self.direction_deviation_threshold <= 360:
            problems.append("direction_deviation_threshold must be 0-360")
        if self.preferred_direction is not None and not 0 <= self.preferred_direction <= 360:
            problems.append("preferred_direction must be 0-360")
        if not 0 <= self.preferred_direction_range <= 360:
            problems.append("preferred_direction_range must be 0-360")
        if self.alarm_hour_minute() is None:
            problems.append(f"alarm_time must be HH:MM, got {self.alarm_time!r}")
        if problems:
            raise ValueError("; ".join(problems))

    def alarm_hour_minute(self) -> Optional[tuple[int, int]]:
        """Parse alarm_time ("05:00") into (hour, minute), None if malformed."""
        try:
            hour_text, minute_text = self.alarm_time.split(":")
            hour, minute = int(hour_text), int(minute_text)
        except (AttributeError, ValueError):
            return None
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            return None
        return hour, minute


@dataclass(frozen=True)
class WindAnalysisResult:
    """Verdict for one window of wind samples"""
    is_alarm_worthy: bool
    average_speed: float
    direction_consistency: float  # 0-100 %
    consecutive_good_points: int
    analysis: str
    average_direction: Optional[float] = None
    sample_count: int = 0


# ==================== Katabatic ====================

@dataclass(frozen=True)
class EnvironmentalSamples:
    """
    Inputs for one forecast day, already cut to the relevant windows.

    precipitation_probability: 0-100 % per hour
    sky_clear_percentage: 0-100 % per hour (100 = clear)
    pressure: hPa, in time order
    temperature_differential: valley minus mountain, Celsius
    """
    precipitation_probability: tuple[float, ...] = ()
    sky_clear_percentage: tuple[float, ...] = ()
    pressure: tuple[float, ...] = ()
    temperature_differential: Optional[float] = None


@dataclass(frozen=True)
class FactorWeights:
    precipitation: float = 0.25
    sky_conditions: float = 0.25
    pressure_change: float = 0.20
    temperature_differential: float = 0.15

    def total(self) -> float:
        return (
            self.precipitation
            + self.sky_conditions
            + self.pressure_change
            + self.temperature_differential
        )


@dataclass(frozen=True)
class KatabaticConfig:
    """Thresholds, weights and cutoffs for the multi-factor predictor"""
    max_precipitation_probability: float = 25.0
    min_clear_sky_percentage: float = 45.0
    min_pressure_change: float = 1.0
    min_temperature_differential: float = 3.5
    stable_pressure_band: float = 1.0
    clear_cloud_cover: float = 30.0
    weights: FactorWeights = field(default_factory=FactorWeights)
    go_threshold: int = 70
    maybe_threshold: int = 40
    high_confidence_factors: int = 3
    medium_confidence_factors: int = 2
    min_samples_per_series: int = 3
    clear_sky_window: TimeWindow = TimeWindow(start_hour=2, end_hour=5)
    prediction_window: TimeWindow = TimeWindow(start_hour=6, end_hour=8)

    def __post_init__(self):
        for name in ("precipitation", "sky_conditions", "pressure_change", "temperature_differential"):
            if getattr(self.weights, name) < 0:
                raise ValueError(f"Weight {name} must be >= 0, got {getattr(self.weights, name)}")
        if self.maybe_threshold > self.go_threshold:
            raise ValueError(
                f"maybe_threshold ({self.maybe_threshold}) must not exceed go_threshold ({self.go_threshold})"
            )


@dataclass(frozen=True)
class PrecipitationFactor:
    meets: bool
    value: float        # max probability %
    threshold: float
    sample_count: int


@dataclass(frozen=True)
class SkyConditionsFactor:
    meets: bool
    value: float        # mean clear %
    threshold: float
    sample_count: int


@dataclass(frozen=True)
class PressureChangeFactor:
    meets: bool
    value: float        # hPa, last - first
    threshold: float
    sample_count: int
    trend: PressureTrend


@dataclass(frozen=True)
class TemperatureDifferentialFactor:
    meets: bool
    value: float        # Celsius
    threshold: float
    sample_count: int


@dataclass(frozen=True)
class KatabaticFactors:
    precipitation: PrecipitationFactor
    sky_conditions: SkyConditionsFactor
    pressure_change: PressureChangeFactor
    temperature_differential: TemperatureDifferentialFactor

    def as_dict(self) -> dict:
        return {
            "precipitation": self.precipitation,
            "sky_conditions": self.sky_conditions,
            "pressure_change": self.pressure_change,
            "temperature_differential": self.temperature_differential,
        }

    def met_count(self) -> int:
        return sum(1 for factor in self.as_dict().values() if factor.meets)


@dataclass(frozen=True)
class Prediction:
    """Katabatic outlook for one day"""
    probability: int  # 0-100
    confidence: Confidence
    recommendation: Recommendation
    explanation: str
    factors: KatabaticFactors
    day: Optional[date] = None

    def __post_init__(self):
        if not 0 <= self.probability <= 100:
            raise ValueError(f"Probability must be 0-100, got {self.probability}")
