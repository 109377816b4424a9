# ABOUTME: In-memory track record of alarm-window calls and what the morning delivered
# ABOUTME: One entry per day; reports accuracy, false alarms and missed sessions

from dataclasses import dataclass, replace
from datetime import date, timedelta
from typing import Optional

MAX_TRACKED_DAYS = 100


@dataclass(frozen=True)
class TrackedPrediction:
    """The alarm-window call for one day, plus the verified outcome once known"""
    day: date
    predicted: bool
    actual: Optional[bool] = None

    @property
    def correct(self) -> Optional[bool]:
        if self.actual is None:
            return None
        return self.predicted == self.actual


@dataclass(frozen=True)
class PredictionAccuracy:
    total: int
    correct: int
    false_alarms: int      # predicted worthy, wasn't
    missed_sessions: int   # predicted calm, was worthy
    accuracy: float        # 0-100 %


class PredictionTracker:
    """
    Keeps the last MAX_TRACKED_DAYS predictions.

    Logging a prediction twice for the same day replaces the earlier call
    (the latest check wins), and drops any outcome already attached.
    """

    def __init__(self, max_days: int = MAX_TRACKED_DAYS):
        self.max_days = max_days
        self._entries: dict[date, TrackedPrediction] = {}

    def log_prediction(self, day: date, predicted: bool) -> TrackedPrediction:
        entry = TrackedPrediction(day=day, predicted=predicted)
        self._entries[day] = entry
        self._trim()
        return entry

    def record_outcome(self, day: date, actual: bool) -> Optional[TrackedPrediction]:
        """Attach the verified outcome; None if no prediction was logged for that day."""
        entry = self._entries.get(day)
        if entry is None:
            return None
        entry = replace(entry, actual=actual)
        self._entries[day] = entry
        return entry

    def get(self, day: date) -> Optional[TrackedPrediction]:
        return self._entries.get(day)

    def entries(self) -> list[TrackedPrediction]:
        return [self._entries[day] for day in sorted(self._entries)]

    def recent(self, days: int, today: date) -> list[TrackedPrediction]:
        """Entries for the `days` days ending on `today`, oldest first."""
        cutoff = today - timedelta(days=days - 1)
        return [entry for entry in self.entries() if cutoff <= entry.day <= today]

    def accuracy(self, days: Optional[int] = None, today: Optional[date] = None) -> PredictionAccuracy:
        """
        Accuracy over verified entries, optionally limited to the last `days` days.

        Entries still waiting for an outcome are not counted.
        """
        if days is not None:
            entries = self.recent(days, today or date.today())
        else:
            entries = self.entries()

        verified = [entry for entry in entries if entry.actual is not None]
        correct = sum(1 for entry in verified if entry.correct)
        false_alarms = sum(1 for entry in verified if entry.predicted and not entry.actual)
        missed = sum(1 for entry in verified if not entry.predicted and entry.actual)

        return PredictionAccuracy(
            total=len(verified),
            correct=correct,
            false_alarms=false_alarms,
            missed_sessions=missed,
            accuracy=correct / len(verified) * 100 if verified else 0.0,
        )

    def clear(self) -> None:
        self._entries = {}

    def _trim(self) -> None:
        for day in sorted(self._entries)[:-self.max_days]:
            del self._entries[day]
