"""Tests for the pure document reducer."""
from datetime import date

import pytest

from drively.errors import FreezeCapReachedError, StateError
from drively.models.actions import Action, ActionType, GoalPreset, SettingsUpdate, UserInfoUpdate
from drively.models.document import Drive, LicenseType, default_document
from drively.state.reducer import reduce

TODAY = date(2024, 6, 15)


def _drive(drive_id, day=TODAY, duration=30, night=False):
    return Drive(id=drive_id, date=day, start_time="10:00", end_time="10:30",
                 duration=duration, is_night_drive=night)


def _apply(state, action_type, payload=None, today=TODAY, **kwargs):
    return reduce(state, Action(action_type, payload), today=today, **kwargs)


class TestDriveTransitions:
    def test_add_updates_hours_and_streaks(self):
        state = _apply(default_document(), ActionType.ADD_DRIVE, _drive("1", duration=90))
        assert len(state.drives) == 1
        assert state.user.completed_day_hours == 1.5
        assert state.streaks.current == 1
        assert state.streaks.longest == 1
        assert state.streaks.last_drive_date == TODAY

    def test_add_then_delete_restores_hours(self):
        state = _apply(default_document(), ActionType.ADD_DRIVE, _drive("1", duration=90))
        state = _apply(state, ActionType.DELETE_DRIVE, "1")
        assert state.drives == []
        assert state.user.completed_day_hours == 0
        assert state.streaks.current == 0
        assert state.streaks.last_drive_date is None

    def test_longest_survives_delete(self):
        state = default_document()
        for i, day in enumerate([date(2024, 6, 13), date(2024, 6, 14), TODAY]):
            state = _apply(state, ActionType.ADD_DRIVE, _drive(str(i), day))
        assert state.streaks.longest == 3
        state = _apply(state, ActionType.DELETE_DRIVE, "1")
        assert state.streaks.longest == 3
        assert state.streaks.current == 1

    def test_add_duplicate_id_rejected(self):
        state = _apply(default_document(), ActionType.ADD_DRIVE, _drive("1"))
        with pytest.raises(StateError):
            _apply(state, ActionType.ADD_DRIVE, _drive("1"))

    def test_add_accepts_stored_shape_dict(self):
        payload = {"id": "1", "date": "2024-06-15", "startTime": "20:00", "endTime": "21:00",
                   "duration": 60, "isNightDrive": True}
        state = _apply(default_document(), ActionType.ADD_DRIVE, payload)
        assert state.user.completed_night_hours == 1.0

    def test_add_invalid_payload_rejected(self):
        with pytest.raises(StateError):
            _apply(default_document(), ActionType.ADD_DRIVE, {"id": "1", "duration": 0})

    def test_update_replaces_wholesale(self):
        state = _apply(default_document(), ActionType.ADD_DRIVE, _drive("1", duration=30))
        state = _apply(state, ActionType.UPDATE_DRIVE, _drive("1", duration=120, night=True))
        assert state.drives[0].duration == 120
        assert state.user.completed_day_hours == 0
        assert state.user.completed_night_hours == 2.0

    def test_update_unknown_id_rejected(self):
        with pytest.raises(StateError):
            _apply(default_document(), ActionType.UPDATE_DRIVE, _drive("missing"))

    def test_delete_unknown_id_rejected(self):
        with pytest.raises(StateError):
            _apply(default_document(), ActionType.DELETE_DRIVE, "missing")

    def test_input_not_mutated(self):
        original = default_document()
        _apply(original, ActionType.ADD_DRIVE, _drive("1"))
        assert original.drives == []
        assert original.user.completed_day_hours == 0


class TestFreezeDays:
    def test_ten_uses_then_cap(self):
        state = default_document()
        for _ in range(10):
            state = _apply(state, ActionType.USE_FREEZE_DAY)
        assert state.streaks.freeze_days_this_month == 10
        assert state.streaks.freeze_days_used == 10

        with pytest.raises(FreezeCapReachedError):
            _apply(state, ActionType.USE_FREEZE_DAY)
        assert state.streaks.freeze_days_this_month == 10

    def test_cap_error_is_state_error(self):
        assert issubclass(FreezeCapReachedError, StateError)

    def test_first_use_stamps_reset_month(self):
        state = _apply(default_document(), ActionType.USE_FREEZE_DAY)
        assert state.streaks.last_freeze_reset == TODAY
        assert state.streaks.freeze_days_this_month == 1

    def test_new_month_resets_counter(self):
        state = default_document()
        for _ in range(10):
            state = _apply(state, ActionType.USE_FREEZE_DAY)

        state = _apply(state, ActionType.USE_FREEZE_DAY, today=date(2024, 7, 1))

        assert state.streaks.freeze_days_this_month == 1
        assert state.streaks.freeze_days_used == 11
        assert state.streaks.last_freeze_reset == date(2024, 7, 1)

    def test_custom_cap(self):
        state = _apply(default_document(), ActionType.USE_FREEZE_DAY, freeze_cap=1)
        with pytest.raises(FreezeCapReachedError):
            _apply(state, ActionType.USE_FREEZE_DAY, freeze_cap=1)

    def test_freeze_does_not_change_streak(self):
        state = _apply(default_document(), ActionType.ADD_DRIVE, _drive("1"))
        frozen = _apply(state, ActionType.USE_FREEZE_DAY)
        assert frozen.streaks.current == state.streaks.current


class TestUserInfo:
    def test_partial_update(self):
        state = _apply(default_document(), ActionType.SET_USER_INFO,
                       {"license_type": "learners", "goalDayHours": 40})
        assert state.user.license_type == LicenseType.LEARNER
        assert state.user.goal_day_hours == 40
        assert state.user.goal_night_hours == 10

    def test_typed_payload(self):
        update = UserInfoUpdate(license_date=date(2024, 3, 1))
        state = _apply(default_document(), ActionType.SET_USER_INFO, update)
        assert state.user.license_date == date(2024, 3, 1)

    def test_derived_hours_cannot_be_set(self):
        with pytest.raises(StateError):
            _apply(default_document(), ActionType.SET_USER_INFO, {"completed_day_hours": 99})

    def test_negative_goal_rejected(self):
        with pytest.raises(StateError):
            _apply(default_document(), ActionType.SET_USER_INFO, {"goal_night_hours": -1})

    def test_zero_total_goal_rejected(self):
        with pytest.raises(StateError):
            _apply(default_document(), ActionType.SET_USER_INFO,
                   {"goal_day_hours": 0, "goal_night_hours": 0})

    def test_zero_night_goal_allowed(self):
        state = _apply(default_document(), ActionType.SET_USER_INFO, {"goal_night_hours": 0})
        assert state.user.goal_night_hours == 0

    def test_goal_cannot_be_cleared(self):
        with pytest.raises(StateError):
            _apply(default_document(), ActionType.SET_USER_INFO, {"goal_day_hours": None})

    def test_license_fixed_after_onboarding(self):
        state = _apply(default_document(), ActionType.SET_USER_INFO, {"license_type": "learners"})
        state = _apply(state, ActionType.COMPLETE_ONBOARDING)
        with pytest.raises(StateError):
            _apply(state, ActionType.SET_USER_INFO, {"license_type": "restricted"})

    def test_same_license_after_onboarding_allowed(self):
        state = _apply(default_document(), ActionType.SET_USER_INFO, {"license_type": "learners"})
        state = _apply(state, ActionType.COMPLETE_ONBOARDING)
        state = _apply(state, ActionType.SET_USER_INFO,
                       {"license_type": "learners", "goal_day_hours": 70})
        assert state.user.goal_day_hours == 70

    def test_goal_preset(self):
        state = _apply(default_document(), ActionType.SET_USER_INFO, {"preset": "basic"})
        assert state.user.goal_day_hours == 25
        assert state.user.goal_night_hours == 0

    def test_typed_preset(self):
        update = UserInfoUpdate(preset=GoalPreset.STANDARD)
        state = _apply(default_document(), ActionType.SET_USER_INFO, update)
        assert (state.user.goal_day_hours, state.user.goal_night_hours) == (40, 10)

    def test_preset_and_goal_hours_exclusive(self):
        with pytest.raises(StateError, match="preset"):
            _apply(default_document(), ActionType.SET_USER_INFO,
                   {"preset": "comprehensive", "goal_night_hours": 5})


class TestSettings:
    def test_update_night_window(self):
        state = _apply(default_document(), ActionType.UPDATE_SETTINGS,
                       SettingsUpdate(night_time_start="21:00"))
        assert state.settings.night_time_start == "21:00"
        assert state.settings.night_time_end == "06:00"

    def test_invalid_time_rejected(self):
        with pytest.raises(StateError):
            _apply(default_document(), ActionType.UPDATE_SETTINGS, {"night_time_end": "6am"})

    def test_existing_drives_not_reclassified(self):
        state = _apply(default_document(), ActionType.ADD_DRIVE, _drive("1", night=False))
        state = _apply(state, ActionType.UPDATE_SETTINGS,
                       {"night_time_start": "09:00", "night_time_end": "11:00"})
        assert state.drives[0].is_night_drive is False

    def test_last_backup_date_can_be_cleared(self):
        state = _apply(default_document(), ActionType.UPDATE_SETTINGS, {"last_backup_date": TODAY})
        state = _apply(state, ActionType.UPDATE_SETTINGS, {"last_backup_date": None})
        assert state.settings.last_backup_date is None

    def test_unknown_field_rejected(self):
        with pytest.raises(StateError):
            _apply(default_document(), ActionType.UPDATE_SETTINGS, {"theme": "dark"})


class TestOnboardingAndReset:
    def test_complete_onboarding(self):
        state = _apply(default_document(), ActionType.COMPLETE_ONBOARDING)
        assert state.user.onboarding_complete is True

    def test_reset_returns_defaults(self):
        state = _apply(default_document(), ActionType.ADD_DRIVE, _drive("1"))
        state = _apply(state, ActionType.USE_FREEZE_DAY)
        state = _apply(state, ActionType.RESET)
        assert state == default_document()

    def test_action_type_as_string(self):
        state = reduce(default_document(), Action("COMPLETE_ONBOARDING"), today=TODAY)
        assert state.user.onboarding_complete is True

    def test_unknown_action_rejected(self):
        with pytest.raises(StateError):
            reduce(default_document(), Action("FLY"), today=TODAY)
