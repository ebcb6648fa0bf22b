# iqamah_timetable/services/iqamah/schedule_config.py
"""
Editing operations over a PrayerSchedule.

Every operation takes a schedule value and returns a new one; the input is
never modified. Invalid edits raise ValidationError and produce nothing, so a
caller that only stores the returned schedule can never persist a half-applied
change.

An update that would put start_day after end_day is rejected, not clamped.
"""
from typing import Any, Optional

from ...utils.constants import DEFAULT_OFFSETS, PrayerKey, RuleType
from .rules import FixedRule, IqamahRule, PrayerSchedule, ValidationError, VariableRule

# Field names accepted by update_rule, in both wire and attribute spelling.
_FIELD_ALIASES = {
    'startDay': 'start_day',
    'endDay': 'end_day',
    'offsetMinutes': 'offset_minutes',
    'start_day': 'start_day',
    'end_day': 'end_day',
    'offset_minutes': 'offset_minutes',
    'time': 'time',
}


def _prayer_key(prayer: str) -> str:
    key = PrayerKey.normalize(prayer)
    if key is None:
        raise ValidationError(f"Unknown prayer: {prayer!r}")
    return key


def _check_index(rules, index: int, prayer: str) -> None:
    if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(rules):
        raise ValidationError(f"No {prayer} rule at index {index!r}")


def add_rule(schedule: PrayerSchedule, prayer: str, rule: IqamahRule) -> PrayerSchedule:
    """Appends a rule to the end of the prayer's list."""
    key = _prayer_key(prayer)
    if not isinstance(rule, (FixedRule, VariableRule)):
        raise ValidationError(f"Not an Iqamah rule: {rule!r}")
    return schedule.with_rules(key, schedule.rules_for(key) + (rule,))


def update_rule(schedule: PrayerSchedule, prayer: str, index: int, **fields: Any) -> PrayerSchedule:
    """
    Merges fields into the rule at index.

    Only the fields that belong to the rule's variant may be set: "time" for
    a fixed rule, "offset_minutes" for a variable rule. Use change_rule_type
    to switch variants.
    """
    key = _prayer_key(prayer)
    rules = schedule.rules_for(key)
    _check_index(rules, index, key)
    current = rules[index]

    merged = {'start_day': current.start_day, 'end_day': current.end_day}
    if isinstance(current, FixedRule):
        merged['time'] = current.time
    else:
        merged['offset_minutes'] = current.offset_minutes

    for name, value in fields.items():
        attr = _FIELD_ALIASES.get(name)
        if attr is None or attr not in merged:
            raise ValidationError(f"Field {name!r} cannot be set on a {current.type} rule")
        merged[attr] = value

    updated_rule = type(current)(**merged)
    updated = list(rules)
    updated[index] = updated_rule
    return schedule.with_rules(key, updated)


def remove_rule(schedule: PrayerSchedule, prayer: str, index: int) -> PrayerSchedule:
    """Removes the rule at index. An empty list means no Iqamah for that prayer."""
    key = _prayer_key(prayer)
    rules = schedule.rules_for(key)
    _check_index(rules, index, key)
    return schedule.with_rules(key, rules[:index] + rules[index + 1:])


def change_rule_type(schedule: PrayerSchedule, prayer: str, index: int, rule_type: str,
                     time: Optional[str] = None, offset_minutes: Optional[int] = None) -> PrayerSchedule:
    """
    Switches the rule at index between the fixed and variable variants.

    The day range is kept. The field of the old variant is dropped; the new
    variant's field comes from the arguments. A missing offset falls back to
    the prayer's entry in DEFAULT_OFFSETS.
    """
    key = _prayer_key(prayer)
    rules = schedule.rules_for(key)
    _check_index(rules, index, key)
    current = rules[index]

    if rule_type == RuleType.FIXED:
        if time is None:
            raise ValidationError("A fixed rule needs a time")
        replacement = FixedRule(start_day=current.start_day, end_day=current.end_day, time=time)
    elif rule_type == RuleType.VARIABLE:
        replacement = VariableRule(
            start_day=current.start_day,
            end_day=current.end_day,
            offset_minutes=DEFAULT_OFFSETS[key] if offset_minutes is None else offset_minutes,
        )
    else:
        raise ValidationError(f"Unknown rule type: {rule_type!r}")

    updated = list(rules)
    updated[index] = replacement
    return schedule.with_rules(key, updated)
