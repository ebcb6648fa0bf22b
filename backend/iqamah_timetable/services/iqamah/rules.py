# iqamah_timetable/services/iqamah/rules.py
"""
Iqamah rule types and the per-prayer schedule value.

A rule covers an inclusive range of days of the month and is one of two
variants:

- FixedRule: the congregation time is a literal clock time.
- VariableRule: the congregation time is the day's raw prayer time plus a
  number of minutes.

Rules for a prayer are kept in insertion order. That order is significant:
when ranges overlap, the earliest rule wins, and the position of a rule is
the range index used by the renderer for alternating row treatment.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from ...utils.constants import MAX_DAY_OF_MONTH, MIN_DAY_OF_MONTH, PrayerKey, RuleType
from ...utils.time_utils import FormatError, normalize_clock


class ValidationError(ValueError):
    """Raised when a rule or a schedule mutation would produce an invalid schedule."""


def _validate_day(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer, got {value!r}")
    if not MIN_DAY_OF_MONTH <= value <= MAX_DAY_OF_MONTH:
        raise ValidationError(f"{name} must be between {MIN_DAY_OF_MONTH} and {MAX_DAY_OF_MONTH}, got {value}")
    return value


def _validate_range(start_day: Any, end_day: Any) -> None:
    _validate_day("start_day", start_day)
    _validate_day("end_day", end_day)
    if start_day > end_day:
        raise ValidationError(f"start_day ({start_day}) must not be after end_day ({end_day})")


@dataclass(frozen=True)
class FixedRule:
    start_day: int
    end_day: int
    time: str
    type: str = field(default=RuleType.FIXED, init=False)

    def __post_init__(self):
        _validate_range(self.start_day, self.end_day)
        try:
            object.__setattr__(self, 'time', normalize_clock(self.time))
        except FormatError as e:
            raise ValidationError(str(e)) from e

    def covers(self, day: int) -> bool:
        return self.start_day <= day <= self.end_day

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.type, "startDay": self.start_day, "endDay": self.end_day, "time": self.time}


@dataclass(frozen=True)
class VariableRule:
    start_day: int
    end_day: int
    offset_minutes: int
    type: str = field(default=RuleType.VARIABLE, init=False)

    def __post_init__(self):
        _validate_range(self.start_day, self.end_day)
        if isinstance(self.offset_minutes, bool) or not isinstance(self.offset_minutes, int):
            raise ValidationError(f"offset_minutes must be an integer, got {self.offset_minutes!r}")
        if self.offset_minutes < 0:
            raise ValidationError(f"offset_minutes must not be negative, got {self.offset_minutes}")

    def covers(self, day: int) -> bool:
        return self.start_day <= day <= self.end_day

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "startDay": self.start_day,
            "endDay": self.end_day,
            "offsetMinutes": self.offset_minutes,
        }


IqamahRule = Union[FixedRule, VariableRule]


def rule_from_dict(data: Any) -> IqamahRule:
    """
    Builds a rule from its wire form.

    Accepts the tagged object form ({"type": "fixed", "startDay": .., "endDay": ..,
    "time": ..}) and the legacy positional form [startDay, endDay, "H:MM am"],
    which is always a fixed rule.
    """
    if isinstance(data, (list, tuple)):
        if len(data) != 3:
            raise ValidationError(f"Positional rule must have 3 items, got {len(data)}")
        start_day, end_day, time_str = data
        return FixedRule(start_day=start_day, end_day=end_day, time=time_str)

    if not isinstance(data, Mapping):
        raise ValidationError(f"Rule must be an object, got {type(data).__name__}")

    rule_type = data.get("type", RuleType.FIXED)
    start_day = data.get("startDay", data.get("start_day"))
    end_day = data.get("endDay", data.get("end_day"))

    if rule_type == RuleType.FIXED:
        return FixedRule(start_day=start_day, end_day=end_day, time=data.get("time"))
    if rule_type == RuleType.VARIABLE:
        offset = data.get("offsetMinutes", data.get("offset_minutes", 0))
        return VariableRule(start_day=start_day, end_day=end_day, offset_minutes=offset)
    raise ValidationError(f"Unknown rule type: {rule_type!r}")


class PrayerSchedule:
    """
    Immutable mapping of prayer key to its ordered tuple of rules.

    Configuration operations return a new schedule instead of mutating this one.
    """

    def __init__(self, rules: Optional[Mapping[str, Iterable[IqamahRule]]] = None):
        self._rules: Dict[str, Tuple[IqamahRule, ...]] = {prayer: () for prayer in PrayerKey.ALL}
        for prayer, prayer_rules in (rules or {}).items():
            key = PrayerKey.normalize(prayer)
            if key is None:
                raise ValidationError(f"Unknown prayer: {prayer!r}")
            self._rules[key] = tuple(prayer_rules)

    def rules_for(self, prayer: str) -> Tuple[IqamahRule, ...]:
        key = PrayerKey.normalize(prayer)
        if key is None:
            raise ValidationError(f"Unknown prayer: {prayer!r}")
        return self._rules[key]

    def with_rules(self, prayer: str, rules: Iterable[IqamahRule]) -> "PrayerSchedule":
        key = PrayerKey.normalize(prayer)
        if key is None:
            raise ValidationError(f"Unknown prayer: {prayer!r}")
        updated = dict(self._rules)
        updated[key] = tuple(rules)
        return PrayerSchedule(updated)

    def has_any_rules(self) -> bool:
        return any(self._rules[prayer] for prayer in PrayerKey.ALL)

    def items(self):
        return ((prayer, self._rules[prayer]) for prayer in PrayerKey.ALL)

    def to_dict(self) -> Dict[str, list]:
        return {prayer: [rule.to_dict() for rule in rules] for prayer, rules in self.items()}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "PrayerSchedule":
        """
        Builds a schedule from its wire form. Each prayer maps either to a list
        of rules or to an object with a "ranges" list (the shape the editing
        form sends).
        """
        if not data:
            return cls()
        if not isinstance(data, Mapping):
            raise ValidationError("Schedule must be an object keyed by prayer")
        rules = {}
        for prayer, entries in data.items():
            if isinstance(entries, Mapping):
                entries = entries.get("ranges") or []
            if entries is None:
                entries = []
            if not isinstance(entries, (list, tuple)):
                raise ValidationError(f"Rules for {prayer!r} must be a list")
            rules[prayer] = [rule_from_dict(entry) for entry in entries]
        return cls(rules)

    def __eq__(self, other):
        if not isinstance(other, PrayerSchedule):
            return NotImplemented
        return self._rules == other._rules

    def __repr__(self):
        counts = ", ".join(f"{prayer}={len(rules)}" for prayer, rules in self.items())
        return f"<PrayerSchedule {counts}>"
