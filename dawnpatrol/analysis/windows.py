# ABOUTME: Hour-of-day windows for the alarm and verification checks
# ABOUTME: Windows are inclusive and may wrap past midnight (e.g. 22 -> 4)

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional

from dawnpatrol.weather.models import NormalizedSample


@dataclass(frozen=True)
class TimeWindow:
    """Inclusive hour range; end_hour < start_hour means the window crosses midnight"""
    start_hour: int
    end_hour: int

    def contains_hour(self, hour: int) -> bool:
        if self.end_hour < self.start_hour:
            return hour >= self.start_hour or hour <= self.end_hour
        return self.start_hour <= hour <= self.end_hour

    def contains(self, when: Optional[datetime]) -> bool:
        if when is None:
            return False
        return self.contains_hour(when.hour)

    def __str__(self) -> str:
        return f"{_hour_label(self.start_hour)}-{_hour_label(self.end_hour)}"


def _hour_label(hour: int) -> str:
    if hour == 0:
        return "12am"
    if hour < 12:
        return f"{hour}am"
    if hour == 12:
        return "12pm"
    return f"{hour - 12}pm"


ALARM_WINDOW = TimeWindow(start_hour=3, end_hour=5)
VERIFY_WINDOW = TimeWindow(start_hour=6, end_hour=8)


def filter_by_window(
    samples: Iterable[NormalizedSample],
    window: TimeWindow
) -> list[NormalizedSample]:
    """Keep samples whose local hour falls inside the window, in input order."""
    return [sample for sample in samples if window.contains(sample.timestamp)]


def window_occurrence(window: TimeWindow, reference_time: datetime) -> tuple[datetime, datetime]:
    """
    Bounds [start, end) of the window's occurrence for reference_time's day.

    A plain window sits on the reference date. A window that wraps midnight
    starts on the previous evening until reference_time reaches start_hour,
    then on the reference date. The end is exclusive (end_hour + 1 hour).
    """
    start = reference_time.replace(hour=window.start_hour, minute=0, second=0, microsecond=0)
    if window.end_hour < window.start_hour:
        if reference_time.hour < window.start_hour:
            start -= timedelta(days=1)
        end_day = start + timedelta(days=1)
    else:
        end_day = start
    end = end_day.replace(hour=window.end_hour) + timedelta(hours=1)
    return start, end


def filter_occurrence(
    samples: Iterable[NormalizedSample],
    window: TimeWindow,
    reference_time: datetime
) -> list[NormalizedSample]:
    """
    Keep samples inside the window's occurrence, up to reference_time.

    Only one occurrence is ever kept, so the same hours from the previous
    day never join today's run. Naive and aware timestamps are not mixed: a
    sample whose awareness differs from reference_time borrows (or drops)
    reference_time's tzinfo before comparing.
    """
    start, end = window_occurrence(window, reference_time)
    kept = []
    for sample in samples:
        when = sample.timestamp
        if when is None:
            continue
        if (when.tzinfo is None) != (reference_time.tzinfo is None):
            when = when.replace(tzinfo=reference_time.tzinfo)
        if start <= when < end and when <= reference_time:
            kept.append(sample)
    return kept
