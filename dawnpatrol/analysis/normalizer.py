# ABOUTME: Normalization boundary turning loosely typed wind samples into strict records
# ABOUTME: Never raises - unparseable fields become None so they drop out of statistics

import math
from datetime import datetime, timezone, tzinfo
from typing import Iterable, Optional

from dawnpatrol.weather.models import NormalizedSample, WindSample

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]
COMPASS_DEGREES = {name: i * 22.5 for i, name in enumerate(COMPASS_POINTS)}

# Epoch values above this are milliseconds (1e11 s is the year 5138)
EPOCH_MILLIS_CUTOFF = 1e11


def parse_number(value) -> Optional[float]:
    """Parse a string or number into a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(number):
        return None
    return number


def parse_direction(value) -> Optional[float]:
    """Parse degrees or a 16-point compass name ("NW", "nne") into degrees."""
    if isinstance(value, str):
        compass = COMPASS_DEGREES.get(value.strip().upper())
        if compass is not None:
            return compass
    return parse_number(value)


def parse_timestamp(value, tz: Optional[tzinfo] = None) -> Optional[datetime]:
    """
    Parse a timestamp into a datetime.

    Accepts datetimes, ISO-8601 strings (a trailing "Z" is fine) and epoch
    numbers in seconds or milliseconds. Epoch numbers are UTC. When tz is
    given, aware results are converted into it; naive results are assumed to
    already be local and are left alone.
    """
    parsed: Optional[datetime] = None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            epoch = parse_number(text)
            if epoch is not None:
                parsed = _from_epoch(epoch)
    else:
        epoch = parse_number(value)
        if epoch is not None:
            parsed = _from_epoch(epoch)

    if parsed is None:
        return None
    if tz is not None and parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed


def _from_epoch(epoch: float) -> Optional[datetime]:
    if abs(epoch) > EPOCH_MILLIS_CUTOFF:
        epoch = epoch / 1000.0
    try:
        return datetime.fromtimestamp(epoch, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def _non_negative(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return max(0.0, value)


def normalize_sample(sample: WindSample, tz: Optional[tzinfo] = None) -> NormalizedSample:
    """Normalize one raw sample."""
    return NormalizedSample(
        timestamp=parse_timestamp(sample.timestamp, tz),
        speed=_non_negative(parse_number(sample.speed)),
        gust=_non_negative(parse_number(sample.gust)),
        direction=parse_direction(sample.direction),
    )


def normalize_samples(
    samples: Iterable[WindSample],
    tz: Optional[tzinfo] = None
) -> list[NormalizedSample]:
    """Normalize every sample; output has the same length and order as input."""
    return [normalize_sample(sample, tz) for sample in samples]
