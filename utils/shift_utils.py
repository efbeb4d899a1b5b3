import numpy as np
from datetime import timedelta, date as dt_date
from typing import List, Tuple
from core.enums import SHIFT_ORDER
from utils.constants import DAYS_PER_WEEK, SHIFT_HOURS, SHIFT_START_HOURS


def date_range(start: dt_date, end: dt_date) -> List[dt_date]:
    """All dates from `start` to `end`, both inclusive."""
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def shift_tables() -> Tuple[np.ndarray, np.ndarray]:
    """`(hours, start_hour)` arrays over the shift axis, in chronological order."""
    hours = np.array([SHIFT_HOURS[s.value] for s in SHIFT_ORDER], dtype=float)
    starts = np.array([SHIFT_START_HOURS[s.value] for s in SHIFT_ORDER], dtype=float)
    return hours, starts


def week_windows(dates: List[dt_date], week_start: int = 0) -> Tuple[np.ndarray, np.ndarray]:
    """
    Bucket dates into fixed 7-day windows starting on `week_start` (Monday=0).

    Returns `(week_index, week_complete)`: the window of every date, and which
    windows have all seven of their days inside `dates`.
    """
    if not dates:
        return np.zeros(0, dtype=int), np.zeros(0, dtype=bool)

    first, last = dates[0], dates[-1]
    anchor = first - timedelta(days=(first.weekday() - week_start) % DAYS_PER_WEEK)
    week_index = np.array([(d - anchor).days // DAYS_PER_WEEK for d in dates], dtype=int)

    num_weeks = int(week_index[-1]) + 1
    week_complete = np.array(
        [
            anchor + timedelta(days=wk * DAYS_PER_WEEK) >= first
            and anchor + timedelta(days=wk * DAYS_PER_WEEK + DAYS_PER_WEEK - 1) <= last
            for wk in range(num_weeks)
        ],
        dtype=bool,
    )
    return week_index, week_complete


def longest_streak(flags) -> int:
    """Length of the longest run of truthy values."""
    best = current = 0
    for flag in flags:
        current = current + 1 if flag else 0
        best = max(best, current)
    return best
