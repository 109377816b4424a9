# ABOUTME: Tests for the command-line report helpers
# ABOUTME: Direction rating, data status banner and the --date range check

from datetime import datetime, timedelta, timezone

import pytest

from dawnpatrol.analysis.models import AlarmCriteria, WindAnalysisResult
from dawnpatrol.cache.manager import CacheManager
from dawnpatrol.weather.models import WindSample
from scripts.dawn_patrol_report import (
    direction_label,
    print_alarm_report,
    print_data_status,
    reference_time_for,
)

NOW = datetime(2025, 1, 16, 9, 30, tzinfo=timezone.utc)
NW = AlarmCriteria(preferred_direction=315, preferred_direction_range=45)


def result_from(direction):
    return WindAnalysisResult(
        is_alarm_worthy=True,
        average_speed=15.0,
        direction_consistency=100.0,
        consecutive_good_points=3,
        analysis="Avg Speed: 15.0mph",
        average_direction=direction,
        sample_count=3,
    )


class TestDirectionLabel:
    def test_perfect(self):
        assert direction_label(result_from(318), NW) == "318° NW (perfect)"

    def test_good(self):
        assert direction_label(result_from(285), NW) == "285° WNW (good)"

    def test_off(self):
        assert direction_label(result_from(180), NW) == "180° S (off)"

    def test_no_preferred_direction(self):
        assert direction_label(result_from(90), AlarmCriteria()) == "90° E"

    def test_no_direction(self):
        assert direction_label(result_from(None), NW) == "N/A"


def test_alarm_report_shows_direction(capsys):
    print_alarm_report(result_from(315), "Alarm window (3am-5am)", NW)

    out = capsys.readouterr().out
    assert "Alarm window (3am-5am)" in out
    assert "315° NW (perfect)" in out
    assert "YES" in out


class TestDataStatus:
    def test_fresh_data_shows_fetch_time(self, capsys):
        cache = CacheManager()
        cache.set_wind([WindSample(0, 1.0)])

        print_data_status(cache, timezone.utc)

        assert "Wind data fetched at" in capsys.readouterr().out

    def test_offline_with_old_data(self, capsys):
        cache = CacheManager()
        cache.set_wind([WindSample(0, 1.0)])
        cache.set_offline()

        print_data_status(cache, timezone.utc)

        assert "offline - showing data from" in capsys.readouterr().out

    def test_offline_without_data(self, capsys):
        cache = CacheManager()
        cache.set_offline()

        print_data_status(cache, timezone.utc)

        assert "offline - no data" in capsys.readouterr().out


class TestReferenceTime:
    def test_today(self):
        assert reference_time_for("2025-01-16", NOW) == datetime(2025, 1, 16, 23, 59, tzinfo=timezone.utc)

    def test_yesterday(self):
        assert reference_time_for("2025-01-15", NOW).date() == (NOW - timedelta(days=1)).date()

    def test_older_than_history_rejected(self):
        with pytest.raises(ValueError, match="today or yesterday"):
            reference_time_for("2025-01-14", NOW)

    def test_future_rejected(self):
        with pytest.raises(ValueError, match="future"):
            reference_time_for("2025-01-17", NOW)

    def test_bad_format_rejected(self):
        with pytest.raises(ValueError):
            reference_time_for("16/01/2025", NOW)
