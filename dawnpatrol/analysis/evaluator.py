# ABOUTME: Alarm evaluator deciding whether a wind window is worth waking up for
# ABOUTME: Combines average speed, direction consistency and the longest good run

import logging
from datetime import datetime, tzinfo
from typing import Iterable, Optional, Sequence

from dawnpatrol.analysis.direction import (
    circular_mean,
    compass_name,
    direction_stats,
    is_in_range,
    reference_direction,
)
from dawnpatrol.analysis.models import AlarmCriteria, WindAnalysisResult
from dawnpatrol.analysis.normalizer import normalize_samples
from dawnpatrol.analysis.windows import ALARM_WINDOW, VERIFY_WINDOW, TimeWindow, filter_by_window, filter_occurrence
from dawnpatrol.weather.models import NormalizedSample, WindSample

log = logging.getLogger(__name__)


def _is_good_point(
    sample: NormalizedSample,
    criteria: AlarmCriteria,
    reference: Optional[float],
    tolerance: float
) -> bool:
    if sample.speed is None or sample.speed < criteria.minimum_average_speed:
        return False
    if not criteria.use_wind_direction:
        return True
    return is_in_range(sample.direction, reference, tolerance)


def count_consecutive_good_points(
    samples: Sequence[NormalizedSample],
    criteria: AlarmCriteria
) -> int:
    """
    Longest unbroken run of samples meeting both speed and direction.

    Direction is judged against the preferred direction when one is set,
    otherwise against the circular mean of the whole window.
    """
    reference, tolerance = reference_direction(
        circular_mean(sample.direction for sample in samples),
        criteria.direction_deviation_threshold,
        criteria.preferred_direction,
        criteria.preferred_direction_range,
    )

    max_run = 0
    current_run = 0
    for sample in samples:
        if _is_good_point(sample, criteria, reference, tolerance):
            current_run += 1
            max_run = max(max_run, current_run)
        else:
            current_run = 0
    return max_run


def evaluate(samples: Sequence[NormalizedSample], criteria: AlarmCriteria) -> WindAnalysisResult:
    """
    Judge an already-filtered window against the criteria.

    All three conditions must hold. A window with no usable speeds, or an
    average of exactly zero, is never alarm-worthy even if thresholds are 0.
    """
    unit = criteria.speed_unit

    if not samples:
        return WindAnalysisResult(
            is_alarm_worthy=False,
            average_speed=0.0,
            direction_consistency=0.0,
            consecutive_good_points=0,
            analysis="Insufficient data: no wind samples in window",
        )

    speeds = [s.speed for s in samples if s.speed is not None]
    average_speed = sum(speeds) / len(speeds) if speeds else 0.0

    stats = direction_stats(
        (s.direction for s in samples),
        criteria.direction_deviation_threshold,
        criteria.preferred_direction,
        criteria.preferred_direction_range,
    )
    consecutive = count_consecutive_good_points(samples, criteria)

    failures = []
    if not speeds:
        failures.append("no valid wind speeds")
    elif average_speed == 0:
        failures.append("average speed is zero")
    elif average_speed < criteria.minimum_average_speed:
        failures.append(
            f"average speed {average_speed:.1f}{unit} below {criteria.minimum_average_speed:g}{unit}"
        )

    if criteria.use_wind_direction:
        if stats.valid_count == 0:
            failures.append("no valid wind directions")
        elif stats.consistency < criteria.direction_consistency_threshold:
            failures.append(
                f"direction consistency {stats.consistency:.1f}% below "
                f"{criteria.direction_consistency_threshold:g}%"
            )

    if consecutive < criteria.minimum_consecutive_points:
        failures.append(
            f"only {consecutive} consecutive good points, need {criteria.minimum_consecutive_points}"
        )

    is_alarm_worthy = not failures

    if stats.mean is None:
        direction_text = "Direction: N/A"
    else:
        direction_text = f"Direction: {stats.mean:.0f}° ({compass_name(stats.mean)})"

    analysis = (
        f"Avg Speed: {average_speed:.1f}{unit}, "
        f"{direction_text}, "
        f"Direction Consistency: {stats.consistency:.1f}%, "
        f"Consecutive Good Points: {consecutive}"
    )
    if failures:
        analysis += ". Not alarm-worthy: " + "; ".join(failures)
    else:
        analysis += ". Alarm-worthy: all criteria met"

    return WindAnalysisResult(
        is_alarm_worthy=is_alarm_worthy,
        average_speed=average_speed,
        direction_consistency=stats.consistency,
        consecutive_good_points=consecutive,
        analysis=analysis,
        average_direction=stats.mean,
        sample_count=len(samples),
    )


def _select(
    samples: Iterable[WindSample],
    window: TimeWindow,
    reference_time: Optional[datetime],
    tz: Optional[tzinfo]
) -> list[NormalizedSample]:
    normalized = normalize_samples(samples, tz)
    if reference_time is not None:
        if tz is not None and reference_time.tzinfo is not None:
            reference_time = reference_time.astimezone(tz)
        return filter_occurrence(normalized, window, reference_time)
    return filter_by_window(normalized, window)


def _evaluate_window(
    selected: list[NormalizedSample],
    criteria: AlarmCriteria,
    label: str,
    window: TimeWindow
) -> WindAnalysisResult:
    if not selected:
        return WindAnalysisResult(
            is_alarm_worthy=False,
            average_speed=0.0,
            direction_consistency=0.0,
            consecutive_good_points=0,
            analysis=f"Insufficient data: no wind samples in {label} ({window})",
        )
    return evaluate(selected, criteria)


def analyze(
    samples: Iterable[WindSample],
    criteria: AlarmCriteria,
    reference_time: Optional[datetime] = None,
    window: TimeWindow = ALARM_WINDOW,
    tz: Optional[tzinfo] = None
) -> WindAnalysisResult:
    """
    Evaluate the alarm window (3-5am by default).

    When reference_time is given only that day's occurrence of the window,
    up to reference_time, is considered; without it every sample in the
    window hours counts.
    """
    selected = _select(samples, window, reference_time, tz)
    result = _evaluate_window(selected, criteria, "alarm window", window)
    log.info(f"Alarm window {window}: worthy={result.is_alarm_worthy} ({len(selected)} samples)")
    return result


def verify(
    samples: Iterable[WindSample],
    criteria: AlarmCriteria,
    reference_time: Optional[datetime] = None,
    window: TimeWindow = VERIFY_WINDOW,
    tz: Optional[tzinfo] = None
) -> WindAnalysisResult:
    """Evaluate the verification window (6-8am by default) to check the call."""
    selected = _select(samples, window, reference_time, tz)
    return _evaluate_window(selected, criteria, "verification window", window)
