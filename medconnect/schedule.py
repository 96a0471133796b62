# medconnect/schedule.py
"""Weekly schedule shape shared by doctor profiles.

A schedule is always seven entries, Monday to Sunday, each of the form
``{"day", "startTime", "endTime", "isAvailable"}``. Stored data and request
bodies may carry older shapes; ``normalize_schedule`` is the only place
those get coerced.
"""
import re
from typing import Any, Dict, List, Optional

DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"
_TIME_RE = re.compile(TIME_PATTERN)

WEEKDAY_HOURS = ("09:00", "17:00")
WEEKEND_HOURS = ("09:00", "14:00")


def is_valid_time(value: Any) -> bool:
    return isinstance(value, str) and bool(_TIME_RE.match(value))


def default_schedule(start: Optional[str] = None, end: Optional[str] = None) -> List[Dict[str, Any]]:
    """Mon-Fri available, Sat/Sun off. ``start``/``end`` override every day's hours."""
    entries = []
    for i, day in enumerate(DAYS):
        weekday = i < 5
        day_start, day_end = WEEKDAY_HOURS if weekday else WEEKEND_HOURS
        entries.append({
            "day": day,
            "startTime": start or day_start,
            "endTime": end or day_end,
            "isAvailable": weekday,
        })
    return entries


def _canonical_day(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    wanted = value.strip().lower()
    for day in DAYS:
        if day.lower() == wanted:
            return day
    return None


def _time_or(value: Any, fallback: str) -> str:
    return value if is_valid_time(value) else fallback


def normalize_schedule(raw: Any, open_days: Optional[List[str]] = None) -> List[Dict[str, Any]]:
    """Coerce any accepted schedule shape into the seven-entry form.

    - nothing, a non-list or an empty list gives the default template
    - exactly two strings is the legacy ``[start, end]`` pair, applied to every day;
      ``open_days`` (the stored available days of a legacy row) picks which days
      are open, otherwise Mon-Fri
    - otherwise each item updates one day: strings open the day at that
      position from that start time until 17:00, mappings are matched by
      ``day`` (or position)
    """
    if not isinstance(raw, (list, tuple)) or not raw:
        return default_schedule()

    if len(raw) == 2 and all(isinstance(t, str) for t in raw):
        start, end = _time_or(raw[0], WEEKDAY_HOURS[0]), _time_or(raw[1], WEEKDAY_HOURS[1])
        known = [d for d in open_days if _canonical_day(d)] if isinstance(open_days, (list, tuple)) else []
        if known:
            return schedule_from_days(known, start, end)
        return default_schedule(start, end)

    by_day = {entry["day"]: entry for entry in default_schedule()}
    for index, item in enumerate(raw):
        positional = DAYS[index % 7]
        if isinstance(item, str):
            by_day[positional] = {
                "day": positional,
                "startTime": _time_or(item, by_day[positional]["startTime"]),
                "endTime": WEEKDAY_HOURS[1],
                "isAvailable": True,
            }
        elif isinstance(item, dict):
            day = _canonical_day(item.get("day")) or positional
            base = by_day[day]
            available = item.get("isAvailable")
            by_day[day] = {
                "day": day,
                "startTime": _time_or(item.get("startTime"), base["startTime"]),
                "endTime": _time_or(item.get("endTime"), base["endTime"]),
                "isAvailable": available if isinstance(available, bool) else True,
            }
    return [by_day[day] for day in DAYS]


def available_days(schedule: List[Dict[str, Any]]) -> List[str]:
    return [entry["day"] for entry in schedule if entry.get("isAvailable")]


def schedule_from_days(days: List[str], start: Optional[str] = None, end: Optional[str] = None) -> List[Dict[str, Any]]:
    """Build a schedule that is open exactly on ``days``, same hours every day."""
    open_days = {_canonical_day(d) for d in days}
    return [
        {**entry, "isAvailable": entry["day"] in open_days}
        for entry in default_schedule(start, end)
    ]
