import argparse
import logging
from datetime import datetime, timedelta

from dawnpatrol.analysis.direction import assess_direction, compass_name
from dawnpatrol.config import Config
from dawnpatrol.orchestrator import AlarmOrchestrator

# WindHistoryClient only returns about a day of history
MAX_DAYS_BACK = 1

# =============================================================================
# REPORT FUNCTIONS
# =============================================================================
RECOMMENDATION_ICONS = {"go": "🟢", "maybe": "🟡", "skip": "🔴"}


def direction_label(result, criteria):
    """e.g. "315° NW (perfect)"; the rating needs a preferred direction."""
    if result.average_direction is None:
        return "N/A"
    label = f"{result.average_direction:.0f}° {compass_name(result.average_direction)}"
    if criteria.preferred_direction is None:
        return label
    rating = assess_direction(
        result.average_direction,
        criteria.preferred_direction - criteria.preferred_direction_range,
        criteria.preferred_direction + criteria.preferred_direction_range,
        criteria.preferred_direction
    )
    return f"{label} ({rating or 'off'})"


def print_alarm_report(result, title, criteria):
    """Print one window's analysis."""
    print("\n" + "=" * 60)
    print(f"⏰ {title}")
    print("=" * 60)
    print(f"Alarm worthy:         {'YES' if result.is_alarm_worthy else 'no'}")
    print(f"Average speed:        {result.average_speed:.1f} mph")
    print(f"Direction:            {direction_label(result, criteria)}")
    print(f"Direction consistency:{result.direction_consistency:6.1f}%")
    print(f"Consecutive good:     {result.consecutive_good_points}")
    print("-" * 60)
    print(result.analysis)


def print_data_status(cache, tz):
    """Offline banner, or when the wind data was fetched."""
    fetched_at = cache.get_wind_fetched_at()
    if cache.is_offline():
        if fetched_at is None:
            print("⚠️  Wind feed offline - no data")
        else:
            print(f"⚠️  Wind feed offline - showing data from {fetched_at.astimezone(tz):%H:%M}")
    elif fetched_at is not None:
        print(f"Wind data fetched at {fetched_at.astimezone(tz):%H:%M}")


def print_forecast_report(predictions):
    """Print the katabatic outlook, one line per day."""
    print("\n" + "=" * 60)
    print(f"🏔️  Katabatic outlook ({Config.VALLEY_NAME} vs {Config.MOUNTAIN_NAME})")
    print("=" * 60)
    if not predictions:
        print("No forecast available!")
        return
    for prediction in predictions:
        icon = RECOMMENDATION_ICONS[prediction.recommendation]
        day = prediction.day.strftime("%a %b %d") if prediction.day else "?"
        print(f"{icon} {day}: {prediction.probability:3d}% {prediction.recommendation.upper():5s} "
              f"({prediction.confidence} confidence)")
        print(f"   {prediction.explanation}")


def reference_time_for(date_text, now):
    """
    End of the given day (YYYY-MM-DD) in now's timezone.

    Raises:
        ValueError: bad format, a future date, or older than the wind history
    """
    day = datetime.strptime(date_text, "%Y-%m-%d").date()
    if day > now.date():
        raise ValueError(f"{date_text} is in the future")
    if day < now.date() - timedelta(days=MAX_DAYS_BACK):
        raise ValueError(f"{date_text} is older than the available wind history (today or yesterday only)")
    return datetime(day.year, day.month, day.day, 23, 59, tzinfo=now.tzinfo)


# =============================================================================
# MAIN
# =============================================================================
if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Dawn patrol wind report for Soda Lake")
    parser.add_argument("--date", help="Check yesterday's morning (YYYY-MM-DD); only today or yesterday")
    parser.add_argument("--no-forecast", action="store_true", help="Skip the katabatic forecast")
    parser.add_argument("--verbose", action="store_true", help="Show log output")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    orchestrator = AlarmOrchestrator()

    reference_time = None
    if args.date:
        try:
            reference_time = reference_time_for(args.date, datetime.now(orchestrator.tz))
        except ValueError as e:
            parser.error(str(e))

    print(f"Fetching wind history for {Config.SPOT_NAME}...")
    outcome = orchestrator.verify_prediction(reference_time)
    print_data_status(orchestrator.cache, orchestrator.tz)

    print_alarm_report(outcome["predicted"], f"Alarm window ({orchestrator.alarm_window})", orchestrator.criteria)
    print_alarm_report(outcome["actual"], f"Verification window ({orchestrator.verify_window})", orchestrator.criteria)
    print(f"\nPrediction held: {'yes' if outcome['prediction_correct'] else 'no'}")

    if not args.no_forecast:
        print_forecast_report(orchestrator.get_forecast_predictions())
