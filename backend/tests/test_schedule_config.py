import pytest

from iqamah_timetable.services.iqamah.rules import (
    FixedRule, PrayerSchedule, ValidationError, VariableRule, rule_from_dict
)
from iqamah_timetable.services.iqamah.schedule_config import (
    add_rule, change_rule_type, remove_rule, update_rule
)


@pytest.fixture
def schedule():
    return PrayerSchedule({
        "fajr": [FixedRule(1, 15, "6:00 am"), FixedRule(16, 31, "6:15 am")],
        "zuhr": [VariableRule(1, 31, 10)],
    })


# --- rule construction ---

def test_fixed_rule_normalizes_time():
    assert FixedRule(1, 5, "06:00 AM").time == "6:00 am"

@pytest.mark.parametrize("kwargs", [
    {"start_day": 0, "end_day": 5, "time": "6:00 am"},
    {"start_day": 1, "end_day": 32, "time": "6:00 am"},
    {"start_day": 10, "end_day": 5, "time": "6:00 am"},
    {"start_day": 1, "end_day": 5, "time": "25:00"},
    {"start_day": True, "end_day": 5, "time": "6:00 am"},
])
def test_fixed_rule_rejects_invalid_fields(kwargs):
    with pytest.raises(ValidationError):
        FixedRule(**kwargs)

def test_variable_rule_rejects_negative_offset():
    with pytest.raises(ValidationError):
        VariableRule(1, 5, -5)

def test_rule_from_dict_accepts_legacy_positional_form():
    rule = rule_from_dict([1, 10, "5:45 am"])
    assert rule == FixedRule(1, 10, "5:45 am")

def test_rule_from_dict_variable_defaults_offset():
    rule = rule_from_dict({"type": "variable", "startDay": 1, "endDay": 31})
    assert rule == VariableRule(1, 31, 0)

def test_rule_from_dict_rejects_unknown_type():
    with pytest.raises(ValidationError):
        rule_from_dict({"type": "weekly", "startDay": 1, "endDay": 31})

def test_schedule_from_dict_accepts_ranges_wrapper():
    schedule = PrayerSchedule.from_dict({
        "fajr": {"ranges": [[1, 15, "6:00 am"]]},
        "dhuhr": [{"type": "variable", "startDay": 1, "endDay": 31, "offsetMinutes": 5}],
    })
    assert schedule.rules_for("fajr") == (FixedRule(1, 15, "6:00 am"),)
    assert schedule.rules_for("zuhr") == (VariableRule(1, 31, 5),)
    assert schedule.rules_for("isha") == ()

def test_schedule_rejects_unknown_prayer():
    with pytest.raises(ValidationError):
        PrayerSchedule.from_dict({"tahajjud": []})

def test_schedule_dict_round_trip(schedule):
    assert PrayerSchedule.from_dict(schedule.to_dict()) == schedule


# --- editing ---

def test_add_rule_appends_and_leaves_input_untouched(schedule):
    updated = add_rule(schedule, "isha", FixedRule(1, 31, "8:30 pm"))
    assert updated.rules_for("isha") == (FixedRule(1, 31, "8:30 pm"),)
    assert schedule.rules_for("isha") == ()

def test_add_rule_goes_to_the_end(schedule):
    updated = add_rule(schedule, "fajr", FixedRule(10, 12, "5:50 am"))
    assert updated.rules_for("fajr")[-1] == FixedRule(10, 12, "5:50 am")

def test_update_rule_changes_time(schedule):
    updated = update_rule(schedule, "fajr", 0, time="5:55 am")
    assert updated.rules_for("fajr")[0] == FixedRule(1, 15, "5:55 am")

def test_update_rule_accepts_wire_field_names(schedule):
    updated = update_rule(schedule, "zuhr", 0, endDay=20, offsetMinutes=15)
    assert updated.rules_for("zuhr")[0] == VariableRule(1, 20, 15)

def test_update_rule_rejects_inverted_range(schedule):
    with pytest.raises(ValidationError):
        update_rule(schedule, "fajr", 0, start_day=20, end_day=5)
    assert schedule.rules_for("fajr")[0] == FixedRule(1, 15, "6:00 am")

def test_update_rule_rejects_field_of_other_variant(schedule):
    with pytest.raises(ValidationError):
        update_rule(schedule, "fajr", 0, offset_minutes=10)

@pytest.mark.parametrize("index", [-1, 2, True])
def test_update_rule_rejects_bad_index(schedule, index):
    with pytest.raises(ValidationError):
        update_rule(schedule, "fajr", index, time="6:00 am")

def test_remove_last_rule_leaves_empty_list(schedule):
    updated = remove_rule(schedule, "zuhr", 0)
    assert updated.rules_for("zuhr") == ()
    assert updated.has_any_rules() is True
    assert remove_rule(remove_rule(updated, "fajr", 1), "fajr", 0).has_any_rules() is False

def test_remove_rule_keeps_order_of_remaining(schedule):
    schedule = add_rule(schedule, "fajr", FixedRule(20, 25, "6:20 am"))
    updated = remove_rule(schedule, "fajr", 1)
    assert [rule.time for rule in updated.rules_for("fajr")] == ["6:00 am", "6:20 am"]

def test_change_to_variable_drops_time(schedule):
    updated = change_rule_type(schedule, "fajr", 1, "variable", offset_minutes=20)
    rule = updated.rules_for("fajr")[1]
    assert rule == VariableRule(16, 31, 20)
    assert "time" not in rule.to_dict()

def test_change_to_variable_uses_prayer_default_offset(schedule):
    updated = change_rule_type(schedule, "fajr", 0, "variable")
    assert updated.rules_for("fajr")[0].offset_minutes == 10

    maghrib = add_rule(schedule, "maghrib", FixedRule(1, 31, "6:30 pm"))
    assert change_rule_type(maghrib, "maghrib", 0, "variable").rules_for("maghrib")[0].offset_minutes == 0

def test_change_to_variable_explicit_zero_offset(schedule):
    updated = change_rule_type(schedule, "fajr", 0, "variable", offset_minutes=0)
    assert updated.rules_for("fajr")[0].offset_minutes == 0

def test_change_to_fixed_requires_time(schedule):
    with pytest.raises(ValidationError):
        change_rule_type(schedule, "zuhr", 0, "fixed")
    updated = change_rule_type(schedule, "zuhr", 0, "fixed", time="1:30 pm")
    assert updated.rules_for("zuhr")[0].to_dict() == {
        "type": "fixed", "startDay": 1, "endDay": 31, "time": "1:30 pm",
    }

def test_edit_rejects_unknown_prayer(schedule):
    with pytest.raises(ValidationError):
        add_rule(schedule, "witr", FixedRule(1, 31, "9:00 pm"))
