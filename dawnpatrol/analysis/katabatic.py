# ABOUTME: Multi-factor katabatic wind predictor (rain, clear sky, pressure, temp differential)
# ABOUTME: The single shared formula - every caller imports this instead of re-implementing it

import logging
from datetime import date, timedelta
from statistics import mean
from typing import Iterable, Optional, Sequence

from dawnpatrol.analysis.models import (
    Confidence,
    EnvironmentalSamples,
    KatabaticConfig,
    KatabaticFactors,
    Prediction,
    PrecipitationFactor,
    PressureChangeFactor,
    Recommendation,
    SkyConditionsFactor,
    TemperatureDifferentialFactor,
)
from dawnpatrol.analysis.normalizer import parse_number
from dawnpatrol.analysis.windows import TimeWindow
from dawnpatrol.weather.models import ForecastPoint

log = logging.getLogger(__name__)

FACTOR_LABELS = {
    "precipitation": "rain",
    "sky_conditions": "clear sky",
    "pressure_change": "pressure",
    "temperature_differential": "temp diff",
}


def _clean(values: Iterable) -> list[float]:
    cleaned = []
    for value in values:
        number = parse_number(value)
        if number is not None:
            cleaned.append(number)
    return cleaned


def analyze_precipitation(values: Sequence[float], config: KatabaticConfig) -> PrecipitationFactor:
    """Worst (highest) rain probability across the night must stay under the cap."""
    probabilities = _clean(values)
    worst = max(probabilities) if probabilities else 0.0
    return PrecipitationFactor(
        meets=bool(probabilities) and worst <= config.max_precipitation_probability,
        value=worst,
        threshold=config.max_precipitation_probability,
        sample_count=len(probabilities),
    )


def analyze_sky_conditions(values: Sequence[float], config: KatabaticConfig) -> SkyConditionsFactor:
    clear = _clean(values)
    coverage = mean(clear) if clear else 0.0
    return SkyConditionsFactor(
        meets=bool(clear) and coverage >= config.min_clear_sky_percentage,
        value=coverage,
        threshold=config.min_clear_sky_percentage,
        sample_count=len(clear),
    )


def analyze_pressure_change(values: Sequence[float], config: KatabaticConfig) -> PressureChangeFactor:
    pressures = _clean(values)
    change = pressures[-1] - pressures[0] if len(pressures) >= 2 else 0.0

    if abs(change) < config.stable_pressure_band:
        trend = "stable"
    elif change > 0:
        trend = "rising"
    else:
        trend = "falling"

    return PressureChangeFactor(
        meets=len(pressures) >= 2 and abs(change) >= config.min_pressure_change,
        value=change,
        threshold=config.min_pressure_change,
        sample_count=len(pressures),
        trend=trend,
    )


def analyze_temperature_differential(
    value: Optional[float],
    config: KatabaticConfig
) -> TemperatureDifferentialFactor:
    differential = parse_number(value)
    return TemperatureDifferentialFactor(
        meets=differential is not None and differential >= config.min_temperature_differential,
        value=differential if differential is not None else 0.0,
        threshold=config.min_temperature_differential,
        sample_count=0 if differential is None else 1,
    )


def calculate_probability(factors: KatabaticFactors, config: KatabaticConfig) -> int:
    """Weighted share of met factors, 0-100."""
    weights = config.weights
    total = weights.total()
    if total <= 0:
        return 0
    score = (
        weights.precipitation * factors.precipitation.meets
        + weights.sky_conditions * factors.sky_conditions.meets
        + weights.pressure_change * factors.pressure_change.meets
        + weights.temperature_differential * factors.temperature_differential.meets
    )
    return int(round(100 * score / total))


def determine_confidence(factors: KatabaticFactors, config: KatabaticConfig) -> Confidence:
    """
    Tier from how many factors are met and how complete the data is.

    high: enough factors met and every series has min_samples_per_series
    medium: enough factors met and at least three factors have any data
    """
    met = factors.met_count()
    series_counts = [
        factors.precipitation.sample_count,
        factors.sky_conditions.sample_count,
        factors.pressure_change.sample_count,
    ]
    has_differential = factors.temperature_differential.sample_count > 0
    complete = has_differential and all(
        count >= config.min_samples_per_series for count in series_counts
    )
    with_data = sum(1 for count in series_counts if count > 0) + int(has_differential)

    if met >= config.high_confidence_factors and complete:
        return "high"
    if met >= config.medium_confidence_factors and with_data >= 3:
        return "medium"
    return "low"


def determine_recommendation(probability: int, config: KatabaticConfig) -> Recommendation:
    if probability >= config.go_threshold:
        return "go"
    if probability >= config.maybe_threshold:
        return "maybe"
    return "skip"


def generate_explanation(
    factors: KatabaticFactors,
    probability: int,
    recommendation: Recommendation
) -> str:
    met = [FACTOR_LABELS[name] for name, factor in factors.as_dict().items() if factor.meets]
    total = len(FACTOR_LABELS)
    met_text = ", ".join(met) if met else "none"

    if recommendation == "go":
        return f"Strong conditions! {len(met)}/{total} factors favorable ({met_text}). {probability}% katabatic probability."
    if recommendation == "maybe":
        return (
            f"Mixed conditions. {len(met)}/{total} factors favorable ({met_text}). "
            f"{probability}% katabatic probability - check closer to dawn."
        )
    return (
        f"Poor conditions. Only {len(met)}/{total} factors favorable. "
        f"{probability}% katabatic probability suggests waiting for better conditions."
    )


def predict_day(
    samples: EnvironmentalSamples,
    config: KatabaticConfig,
    day: Optional[date] = None
) -> Prediction:
    """Run the four-factor katabatic prediction for one day."""
    factors = KatabaticFactors(
        precipitation=analyze_precipitation(samples.precipitation_probability, config),
        sky_conditions=analyze_sky_conditions(samples.sky_clear_percentage, config),
        pressure_change=analyze_pressure_change(samples.pressure, config),
        temperature_differential=analyze_temperature_differential(samples.temperature_differential, config),
    )
    probability = calculate_probability(factors, config)
    confidence = determine_confidence(factors, config)
    recommendation = determine_recommendation(probability, config)

    log.info(
        f"Katabatic {day or 'prediction'}: {probability}% {recommendation} "
        f"({confidence} confidence, {factors.met_count()}/4 factors)"
    )

    return Prediction(
        probability=probability,
        confidence=confidence,
        recommendation=recommendation,
        explanation=generate_explanation(factors, probability, recommendation),
        factors=factors,
        day=day,
    )


# ==================== Forecast windowing ====================

def _points_in_window(
    forecast: Iterable[ForecastPoint],
    day: date,
    window: TimeWindow
) -> list[ForecastPoint]:
    """
    Forecast points for the given window ending on `day`.

    A window that wraps midnight (22 -> 4) starts on the previous evening.
    """
    points = []
    for point in forecast:
        hour = point.timestamp.hour
        if not window.contains_hour(hour):
            continue
        point_day = point.timestamp.date()
        if window.end_hour < window.start_hour and hour >= window.start_hour:
            point_day = point_day + timedelta(days=1)
        if point_day == day:
            points.append(point)
    return sorted(points, key=lambda p: p.timestamp)


def build_environmental_samples(
    valley: Sequence[ForecastPoint],
    mountain: Sequence[ForecastPoint],
    day: date,
    config: KatabaticConfig
) -> EnvironmentalSamples:
    """
    Cut valley and mountain hourly forecasts down to the inputs for one day.

    Rain is checked across the clear-sky and prediction windows at the valley,
    clear sky across the clear-sky window at both sites, pressure over the
    whole night at the valley, and the temperature differential over the
    prediction window.
    """
    valley_clear = _points_in_window(valley, day, config.clear_sky_window)
    mountain_clear = _points_in_window(mountain, day, config.clear_sky_window)
    valley_prediction = _points_in_window(valley, day, config.prediction_window)
    mountain_prediction = _points_in_window(mountain, day, config.prediction_window)

    precipitation = tuple(
        p.precipitation_probability
        for p in valley_clear + valley_prediction
        if p.precipitation_probability is not None
    )
    sky_clear = tuple(
        100.0 if p.cloud_cover < config.clear_cloud_cover else 0.0
        for p in valley_clear + mountain_clear
        if p.cloud_cover is not None
    )
    night = sorted(
        {p.timestamp: p for p in valley_clear + valley_prediction}.values(),
        key=lambda p: p.timestamp,
    )
    pressure = tuple(p.pressure for p in night if p.pressure is not None)

    valley_temps = [p.temperature for p in valley_prediction if p.temperature is not None]
    mountain_temps = [p.temperature for p in mountain_prediction if p.temperature is not None]
    differential = None
    if valley_temps and mountain_temps:
        differential = mean(valley_temps) - mean(mountain_temps)

    return EnvironmentalSamples(
        precipitation_probability=precipitation,
        sky_clear_percentage=sky_clear,
        pressure=pressure,
        temperature_differential=differential,
    )


def forecast_days(forecast: Iterable[ForecastPoint]) -> list[date]:
    return sorted({point.timestamp.date() for point in forecast})


def predict_week(
    valley: Sequence[ForecastPoint],
    mountain: Sequence[ForecastPoint],
    config: KatabaticConfig
) -> list[Prediction]:
    """One prediction per distinct date in the valley forecast."""
    predictions = []
    for day in forecast_days(valley):
        samples = build_environmental_samples(valley, mountain, day, config)
        predictions.append(predict_day(samples, config, day=day))
    return predictions
