"""Active days, streaks, weekend share and heatmap levels from a contribution calendar."""

from datetime import date

from gh_recap.models import ContributionDay
from gh_recap.utils.math import clamp01


def _parse_date(value):
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _dated(days):
    """Pair each raw day with its parsed date, dropping unparseable ones."""
    parsed = []
    for d in days:
        dt = _parse_date(d.get("date"))
        if dt is not None:
            parsed.append((dt, d.get("contributionCount", 0) or 0))
    return parsed


def flatten_calendar_weeks(calendar):
    """Flatten GraphQL contributionCalendar.weeks[].contributionDays[] into one list."""
    if not calendar:
        return []
    days = []
    for week in calendar.get("weeks") or []:
        days.extend(week.get("contributionDays") or [])
    return days


def compute_active_days_and_streak(days):
    """Count active days and the longest run of consecutive active dates.

    Args:
        days: list of {"date": "YYYY-MM-DD", "contributionCount": int}

    Returns:
        tuple: (active_days, max_streak_days)
    """
    active_days = 0
    max_streak = 0
    current = 0
    prev_active = None

    for dt, count in sorted(_dated(days), key=lambda pair: pair[0]):
        if count <= 0:
            continue
        active_days += 1
        if prev_active is not None and (dt - prev_active).days == 1:
            current += 1
        else:
            current = 1
        max_streak = max(max_streak, current)
        prev_active = dt

    return active_days, max_streak


def compute_weekend_rate(days):
    """Share of active days that fall on Saturday or Sunday (0 with no active days)."""
    active = [dt for dt, count in _dated(days) if count > 0]
    if not active:
        return 0.0
    weekend = sum(1 for dt in active if dt.weekday() >= 5)
    return clamp01(weekend / len(active))


def contribution_level(count, max_count):
    """Bucket a day's count into heatmap level 0-4 relative to the busiest day."""
    if count <= 0:
        return 0
    ratio = count / max(max_count, 1)
    if ratio <= 0.25:
        return 1
    if ratio <= 0.5:
        return 2
    if ratio <= 0.75:
        return 3
    return 4


def build_contribution_calendar(days):
    """Level every day against the set's maximum, preserving input order."""
    max_count = max([d.get("contributionCount", 0) or 0 for d in days] + [1])
    return [
        ContributionDay(
            date=d.get("date"),
            count=d.get("contributionCount", 0) or 0,
            level=contribution_level(d.get("contributionCount", 0) or 0, max_count),
        )
        for d in days
    ]
