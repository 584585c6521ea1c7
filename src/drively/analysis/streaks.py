"""
Daily-streak and freeze-day calculations.

Everything here is recomputed from the full drive list on each call rather
than maintained incrementally, so edits and deletes can never leave a stale
count behind. Drives are treated as an unordered set keyed by calendar date;
several drives on the same day count once.

"Today" is always passed in (or defaults to the local date) so callers can
inject a clock.
"""
from datetime import date, timedelta
from typing import Iterable, List, Optional, Protocol

MAX_FREEZE_DAYS_PER_MONTH = 10
FREEZE_SUGGESTION_GAP_DAYS = 2


class _Dated(Protocol):
    date: date


def unique_drive_dates(drives: Iterable[_Dated]) -> List[date]:
    """Distinct calendar dates across drives, ascending."""
    return sorted({d.date for d in drives if d.date is not None})


def calculate_current_streak(drives: Iterable[_Dated], today: Optional[date] = None) -> int:
    """
    Count consecutive drive days ending today or yesterday.

    Walks unique dates newest-first. The first counted date must be today or
    yesterday; after that each date must be exactly one day before the
    previous one. The first gap ends the walk. Dates after today (bad device
    clock) are skipped without counting or breaking the streak.

    Returns:
        Streak length in days; 0 for no drives or when the latest drive is
        older than yesterday.
    """
    today = today or date.today()
    yesterday = today - timedelta(days=1)

    streak = 0
    check_date = today
    for day in reversed(unique_drive_dates(drives)):
        if day > check_date:
            continue
        if day == check_date or (streak == 0 and day == yesterday):
            streak += 1
            check_date = day - timedelta(days=1)
        else:
            break
    return streak


def calculate_longest_streak(drives: Iterable[_Dated]) -> int:
    """
    Longest run of consecutive drive days ever recorded.

    Returns:
        0 for no drives, 1 for a single date, otherwise the longest run.
    """
    dates = unique_drive_dates(drives)
    if not dates:
        return 0

    longest = 1
    run = 1
    for prev, curr in zip(dates, dates[1:]):
        if (curr - prev).days == 1:
            run += 1
            longest = max(longest, run)
        else:
            run = 1
    return longest


def can_use_freeze_day(freeze_days_this_month: int, cap: int = MAX_FREEZE_DAYS_PER_MONTH) -> bool:
    return freeze_days_this_month < cap


def should_reset_monthly_freeze_counter(
    last_reset: Optional[date], today: Optional[date] = None
) -> bool:
    """True if the counter was never reset or was last reset in another month."""
    if last_reset is None:
        return True
    today = today or date.today()
    return (last_reset.year, last_reset.month) != (today.year, today.month)


def effective_freeze_days_this_month(
    freeze_days_this_month: int, last_reset: Optional[date], today: Optional[date] = None
) -> int:
    """The month's count as USE_FREEZE_DAY would see it: 0 once the month has rolled over."""
    if should_reset_monthly_freeze_counter(last_reset, today):
        return 0
    return freeze_days_this_month


def days_since_last_drive(last_drive_date: Optional[date], today: Optional[date] = None) -> int:
    """Calendar-day difference (midnight to midnight); 0 if there is no drive."""
    if last_drive_date is None:
        return 0
    today = today or date.today()
    return (today - last_drive_date).days


def should_suggest_freeze_day(
    last_drive_date: Optional[date],
    freeze_days_this_month: int,
    today: Optional[date] = None,
    cap: int = MAX_FREEZE_DAYS_PER_MONTH,
) -> bool:
    """Suggest a freeze day after 2+ idle days, if one is still available."""
    gap = days_since_last_drive(last_drive_date, today)
    return gap >= FREEZE_SUGGESTION_GAP_DAYS and can_use_freeze_day(freeze_days_this_month, cap)
