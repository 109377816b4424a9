# ABOUTME: Circular statistics for wind direction - mean, consistency, range checks
# ABOUTME: All angle differences use the shortest arc so 350° and 10° are 20° apart

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from dawnpatrol.analysis.normalizer import COMPASS_POINTS


@dataclass(frozen=True)
class DirectionStats:
    """Circular mean plus consistency around the reference direction"""
    mean: Optional[float]        # None when there are no valid directions
    consistency: float           # 0-100 %
    reference: Optional[float]   # direction consistency was measured against
    tolerance: float
    valid_count: int


def angular_distance(a: float, b: float) -> float:
    """Shortest arc between two bearings, 0-180."""
    diff = abs(a - b) % 360
    return min(diff, 360 - diff)


def circular_mean(directions: Iterable[Optional[float]]) -> Optional[float]:
    """Circular mean in [0, 360), or None if there is nothing to average."""
    sum_sin = 0.0
    sum_cos = 0.0
    count = 0
    for direction in directions:
        if direction is None:
            continue
        radians = math.radians(direction)
        sum_sin += math.sin(radians)
        sum_cos += math.cos(radians)
        count += 1

    if count == 0:
        return None

    degrees = math.degrees(math.atan2(sum_sin, sum_cos)) % 360
    # -0.0 and 360.0 can fall out of the modulo on rounding
    if degrees >= 360 or degrees == 0:
        return 0.0
    return degrees


def is_in_range(direction: Optional[float], center: Optional[float], tolerance: float) -> bool:
    if direction is None or center is None:
        return False
    return angular_distance(direction, center) <= tolerance


def direction_consistency(
    directions: Iterable[Optional[float]],
    reference: Optional[float],
    tolerance: float
) -> float:
    """Percentage of valid directions within tolerance of the reference."""
    valid = [d for d in directions if d is not None]
    if not valid or reference is None:
        return 0.0
    within = sum(1 for d in valid if angular_distance(d, reference) <= tolerance)
    return within / len(valid) * 100


def reference_direction(
    mean: Optional[float],
    deviation_threshold: float,
    preferred_direction: Optional[float] = None,
    preferred_range: Optional[float] = None
) -> tuple[Optional[float], float]:
    """
    Pick the bearing and tolerance directions are judged against.

    A preferred direction wins (with its own range, falling back to the
    deviation threshold); otherwise the circular mean of the samples is used.
    """
    if preferred_direction is not None:
        tolerance = preferred_range if preferred_range is not None else deviation_threshold
        return preferred_direction, tolerance
    return mean, deviation_threshold


def direction_stats(
    directions: Iterable[Optional[float]],
    deviation_threshold: float,
    preferred_direction: Optional[float] = None,
    preferred_range: Optional[float] = None
) -> DirectionStats:
    valid = [d for d in directions if d is not None]
    mean = circular_mean(valid)
    reference, tolerance = reference_direction(
        mean, deviation_threshold, preferred_direction, preferred_range
    )
    return DirectionStats(
        mean=mean,
        consistency=direction_consistency(valid, reference, tolerance) if mean is not None else 0.0,
        reference=reference,
        tolerance=tolerance,
        valid_count=len(valid),
    )


def compass_name(degrees: Optional[float]) -> str:
    """16-point compass label, "N/A" when unknown."""
    if degrees is None:
        return "N/A"
    index = int(round((degrees % 360) / 22.5)) % 16
    return COMPASS_POINTS[index]


def _in_arc(angle: float, start: float, end: float) -> bool:
    angle, start, end = angle % 360, start % 360, end % 360
    if start <= end:
        return start <= angle <= end
    return angle >= start or angle <= end


def assess_direction(
    direction: Optional[float],
    range_min: float,
    range_max: float,
    perfect: float,
    perfect_tolerance: float = 10
) -> Optional[str]:
    """
    Rate a bearing against a station's ideal wind arc.

    Returns "perfect" within perfect_tolerance of the perfect bearing, "good"
    inside the [range_min, range_max] arc (which may cross north), else None.
    """
    if direction is None:
        return None
    if angular_distance(direction, perfect) <= perfect_tolerance:
        return "perfect"
    if _in_arc(direction, range_min, range_max):
        return "good"
    return None


def kph_to_mph(kph: float) -> float:
    return kph * 0.621371
