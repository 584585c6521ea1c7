"""Tests for derived hour totals and streak refresh."""
from datetime import date

from drively.analysis.aggregator import (
    completed_hours,
    latest_drive_date,
    refresh_derived,
    refresh_streaks,
)
from drively.models.document import Drive, StreakState, default_document

TODAY = date(2024, 6, 15)


def _drive(drive_id, day, duration=30, night=False):
    return Drive(
        id=drive_id,
        date=day,
        start_time="10:00",
        end_time="10:30",
        duration=duration,
        is_night_drive=night,
    )


class TestCompletedHours:
    def test_empty(self):
        assert completed_hours([]) == (0, 0)

    def test_splits_day_and_night(self):
        drives = [_drive("1", TODAY, 90), _drive("2", TODAY, 30, night=True)]
        assert completed_hours(drives) == (1.5, 0.5)

    def test_order_does_not_change_totals(self):
        drives = [_drive(str(i), TODAY, 7 + i) for i in range(10)]
        assert completed_hours(drives) == completed_hours(list(reversed(drives)))


class TestLatestDriveDate:
    def test_none_for_empty(self):
        assert latest_drive_date([]) is None

    def test_maximum_not_last_inserted(self):
        drives = [_drive("1", date(2024, 6, 10)), _drive("2", date(2024, 6, 1))]
        assert latest_drive_date(drives) == date(2024, 6, 10)


class TestRefreshStreaks:
    def test_longest_never_decreases(self):
        streaks = StreakState(longest=12)
        refreshed = refresh_streaks(streaks, [_drive("1", TODAY)], TODAY)
        assert refreshed.longest == 12
        assert refreshed.current == 1

    def test_longest_grows(self):
        drives = [_drive(str(i), date(2024, 6, 13 + i)) for i in range(3)]
        refreshed = refresh_streaks(StreakState(longest=1), drives, TODAY)
        assert refreshed.longest == 3
        assert refreshed.current == 3
        assert refreshed.last_drive_date == TODAY

    def test_freeze_counters_untouched(self):
        streaks = StreakState(freeze_days_used=4, freeze_days_this_month=2, last_freeze_reset=date(2024, 6, 1))
        refreshed = refresh_streaks(streaks, [], TODAY)
        assert refreshed.freeze_days_used == 4
        assert refreshed.freeze_days_this_month == 2
        assert refreshed.last_freeze_reset == date(2024, 6, 1)
        assert refreshed.last_drive_date is None


class TestRefreshDerived:
    def test_rebuilds_from_drives(self):
        document = default_document().model_copy(update={
            "drives": [_drive("1", TODAY, 90), _drive("2", TODAY, 60, night=True)],
        })
        refreshed = refresh_derived(document, TODAY)
        assert refreshed.user.completed_day_hours == 1.5
        assert refreshed.user.completed_night_hours == 1.0
        assert refreshed.streaks.current == 1

    def test_does_not_mutate_input(self):
        document = default_document().model_copy(update={"drives": [_drive("1", TODAY, 90)]})
        refresh_derived(document, TODAY)
        assert document.user.completed_day_hours == 0
        assert document.streaks.current == 0
