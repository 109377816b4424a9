# ABOUTME: Main orchestrator wiring fetchers, cache and the analysis core together
# ABOUTME: Handles wind fetch with cached fallback, alarm checks, verification and forecasts

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from dawnpatrol.analysis.evaluator import analyze, verify
from dawnpatrol.analysis.katabatic import predict_week
from dawnpatrol.analysis.models import AlarmCriteria, Prediction, WindAnalysisResult
from dawnpatrol.cache.manager import CacheManager
from dawnpatrol.cache.tracker import PredictionAccuracy, PredictionTracker
from dawnpatrol.config import (
    Config,
    alarm_window,
    default_alarm_criteria,
    default_katabatic_config,
    verify_window,
)
from dawnpatrol.debug import debug_log
from dawnpatrol.weather.forecast import ForecastClient
from dawnpatrol.weather.models import WindSample
from dawnpatrol.weather.sources import WindHistoryClient

log = logging.getLogger(__name__)


class AlarmOrchestrator:
    """Orchestrates data fetching and analysis for the dawn patrol alarm"""

    def __init__(self, wf_token: str = None, criteria: Optional[AlarmCriteria] = None):
        self.wind_client = WindHistoryClient(
            wf_token=wf_token if wf_token is not None else Config.WF_TOKEN,
            spot_id=Config.WF_SPOT_ID,
            timeout=Config.REQUEST_TIMEOUT_SECONDS
        )
        self.forecast_client = ForecastClient(
            timezone_name=Config.TIMEZONE,
            timeout=Config.REQUEST_TIMEOUT_SECONDS
        )
        self.cache = CacheManager(
            wind_ttl_seconds=Config.WIND_CACHE_TTL_SECONDS,
            forecast_ttl_seconds=Config.FORECAST_CACHE_TTL_SECONDS
        )
        self.tracker = PredictionTracker()
        self.criteria = criteria or default_alarm_criteria()
        self.katabatic_config = default_katabatic_config()
        self.alarm_window = alarm_window()
        self.verify_window = verify_window()
        self.tz = ZoneInfo(Config.TIMEZONE)

    # ==================== Settings ====================

    def update_criteria(self, **changes) -> AlarmCriteria:
        """
        Replace the criteria snapshot with some fields changed.

        Raises:
            ValueError: if the new criteria are out of range; the old
                snapshot is kept in that case.
        """
        updated = replace(self.criteria, **changes)
        updated.validate()
        self.criteria = updated
        debug_log(f"Criteria updated: {changes}", "ORCHESTRATOR")
        return updated

    # ==================== Wind Data ====================

    def get_wind_data(self) -> list[WindSample]:
        """
        Cached wind history, refetching when stale.

        Falls back to the last known samples (and marks the cache offline)
        when the fetch comes back empty.
        """
        cached = self.cache.get_wind()
        if cached is not None:
            return cached

        self._refresh_wind()
        if self.cache.is_offline():
            return self.cache.get_last_known_samples()
        return self.cache.get_wind() or []

    def _refresh_wind(self) -> None:
        debug_log("Fetching wind history...", "WIND")
        samples = self.wind_client.fetch()

        if not samples:
            log.error("Wind history fetch returned nothing - using last known data")
            self.cache.set_offline()
            return

        self.cache.set_wind(samples)
        debug_log(f"Cached {len(samples)} wind samples", "WIND")

    # ==================== Alarm ====================

    def check_alarm(self, reference_time: Optional[datetime] = None) -> WindAnalysisResult:
        """
        Analyze the alarm window for the day of reference_time (default now).

        A verdict backed by samples is logged with the tracker so the
        verification window can score it later.
        """
        reference_time = reference_time or datetime.now(self.tz)
        result = analyze(
            self.get_wind_data(),
            self.criteria,
            reference_time=reference_time,
            window=self.alarm_window,
            tz=self.tz
        )
        if result.sample_count:
            self.tracker.log_prediction(self._local_day(reference_time), result.is_alarm_worthy)
        debug_log(result.analysis, "ALARM")
        return result

    def verify_prediction(self, reference_time: Optional[datetime] = None) -> dict:
        """
        Compare the alarm-window call with what the verification window delivered.

        The outcome is recorded with the tracker once the verification window
        has samples.

        Returns:
            {
                "predicted": WindAnalysisResult,
                "actual": WindAnalysisResult,
                "prediction_correct": bool,
                "tracked": TrackedPrediction or None
            }
        """
        reference_time = reference_time or datetime.now(self.tz)
        samples = self.get_wind_data()

        predicted = analyze(samples, self.criteria, reference_time, self.alarm_window, self.tz)
        actual = verify(samples, self.criteria, reference_time, self.verify_window, self.tz)
        correct = predicted.is_alarm_worthy == actual.is_alarm_worthy

        day = self._local_day(reference_time)
        tracked = self.tracker.get(day)
        if tracked is None and predicted.sample_count:
            tracked = self.tracker.log_prediction(day, predicted.is_alarm_worthy)
        if tracked is not None and actual.sample_count:
            tracked = self.tracker.record_outcome(day, actual.is_alarm_worthy)

        log.info(
            f"Verification: predicted={predicted.is_alarm_worthy} "
            f"actual={actual.is_alarm_worthy} correct={correct}"
        )
        return {
            "predicted": predicted,
            "actual": actual,
            "prediction_correct": correct,
            "tracked": tracked
        }

    def get_track_record(self, days: int = 7, today: Optional[date] = None) -> PredictionAccuracy:
        """Accuracy of verified alarm calls over the last `days` days."""
        return self.tracker.accuracy(days, today or datetime.now(self.tz).date())

    def _local_day(self, when: datetime) -> date:
        if when.tzinfo is not None:
            when = when.astimezone(self.tz)
        return when.date()

    def should_check_alarm(self, now: datetime, last_checked: Optional[datetime] = None) -> bool:
        """
        True once per day when the configured alarm time has been reached.

        Args:
            now: Current local time
            last_checked: When the alarm was last evaluated, if ever
        """
        if not self.criteria.alarm_enabled:
            return False

        alarm_at = self.criteria.alarm_hour_minute()
        if alarm_at is None:
            log.error(f"Invalid alarm time: {self.criteria.alarm_time!r}")
            return False

        if (now.hour, now.minute) < alarm_at:
            return False

        return last_checked is None or last_checked.date() != now.date()

    # ==================== Katabatic Forecast ====================

    def get_forecast_predictions(self) -> list[Prediction]:
        """One katabatic prediction per forecast day, empty if forecasts are unavailable."""
        forecast = self.cache.get_forecast()
        if forecast is None:
            valley = self.forecast_client.fetch_hourly(
                Config.VALLEY_LAT, Config.VALLEY_LON, Config.VALLEY_ELEVATION_M
            )
            mountain = self.forecast_client.fetch_hourly(
                Config.MOUNTAIN_LAT, Config.MOUNTAIN_LON, Config.MOUNTAIN_ELEVATION_M
            )
            if not valley or not mountain:
                log.error("Forecast unavailable for valley or mountain - no predictions")
                return []
            self.cache.set_forecast(valley, mountain)
            forecast = self.cache.get_forecast()

        return predict_week(forecast["valley"], forecast["mountain"], self.katabatic_config)
