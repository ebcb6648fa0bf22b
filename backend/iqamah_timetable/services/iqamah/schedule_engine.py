# iqamah_timetable/services/iqamah/schedule_engine.py
"""
Resolves a month of Iqamah times.

For every day and each of the five prayers the engine finds the governing
rule (first match wins, see range_resolver), computes the congregation time
and decides whether the renderer should print it on that row.

Two display policies are supported:

- DisplayPolicy.ALL_DAYS: the time is visible on every day the rule covers.
- DisplayPolicy.MIDPOINT_ONLY: the time is visible once per range, on the
  middle day ceil((start_day + end_day) / 2).

A bad raw timing from the provider only blanks the affected cell; the rest
of the month is still resolved.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ...utils.constants import DisplayPolicy, PrayerKey
from ...utils.time_utils import FormatError, add_minutes
from .range_resolver import resolve_rule
from .rules import FixedRule, IqamahRule, PrayerSchedule, VariableRule

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolvedIqamah:
    time: str
    range_index: int
    visible: bool

    def to_dict(self) -> Dict[str, Any]:
        return {"time": self.time, "rangeIndex": self.range_index, "visible": self.visible}


@dataclass
class MonthlyIqamah:
    cells: List[Dict[str, Optional[ResolvedIqamah]]] = field(default_factory=list)
    has_any_iqamah: bool = False

    def cell(self, day_position: int, prayer: str) -> Optional[ResolvedIqamah]:
        """Returns the cell for a 0-based row position and a prayer key."""
        return self.cells[day_position].get(PrayerKey.normalize(prayer))


def midpoint_day(rule: IqamahRule) -> int:
    """The representative day of a range, rounding up on ties."""
    return (rule.start_day + rule.end_day + 1) // 2


def is_visible(day: int, rule: IqamahRule, policy: str) -> bool:
    if policy == DisplayPolicy.ALL_DAYS:
        return True
    if policy == DisplayPolicy.MIDPOINT_ONLY:
        return day == midpoint_day(rule)
    raise ValueError(f"Unknown display policy: {policy!r}")


def has_any_iqamah(schedule: PrayerSchedule) -> bool:
    """True if any prayer has at least one rule, regardless of per-day visibility."""
    return schedule.has_any_rules()


def _raw_timing(timings: Mapping[str, Any], prayer: str) -> Optional[str]:
    value = timings.get(prayer)
    if value is None and prayer == PrayerKey.ZUHR:
        value = timings.get('dhuhr')
    return value


def resolve_day(day: int, timings: Mapping[str, Any], schedule: PrayerSchedule, policy: str) -> Dict[str, Optional[ResolvedIqamah]]:
    """Resolves all five prayers for a single day."""
    resolved = {}
    for prayer in PrayerKey.ALL:
        match = resolve_rule(day, schedule.rules_for(prayer))
        if match is None:
            resolved[prayer] = None
            continue

        rule = match.rule
        if isinstance(rule, FixedRule):
            time_str = rule.time
        elif isinstance(rule, VariableRule):
            raw_time = _raw_timing(timings, prayer)
            if not raw_time:
                logger.warning(f"Engine: No raw {prayer} time for day {day}; Iqamah left blank.")
                resolved[prayer] = None
                continue
            try:
                time_str = add_minutes(raw_time, rule.offset_minutes)
            except FormatError as e:
                logger.warning(f"Engine: Could not compute {prayer} Iqamah for day {day}: {e}")
                resolved[prayer] = None
                continue
        else:
            raise TypeError(f"Unsupported rule type: {type(rule).__name__}")

        resolved[prayer] = ResolvedIqamah(
            time=time_str,
            range_index=match.index,
            visible=is_visible(day, rule, policy),
        )
    return resolved


def resolve_month(days: Sequence[Mapping[str, Any]], schedule: PrayerSchedule, policy: str = DisplayPolicy.ALL_DAYS) -> MonthlyIqamah:
    """
    Resolves the Iqamah cells for a month.

    Args:
        days: Per-day records in table order. Each has a "day" number and a
              "timings" mapping of prayer key to a canonical clock string.
              Records without "day" are numbered by position (1-based).
        schedule: The prayer schedule to apply. It is not modified.
        policy: One of DisplayPolicy.ALL.

    Returns:
        MonthlyIqamah with one cell mapping per input day and the month-level
        has_any_iqamah flag.
    """
    if policy not in DisplayPolicy.ALL:
        raise ValueError(f"Unknown display policy: {policy!r}")

    cells = []
    for position, day_record in enumerate(days, start=1):
        day = day_record.get("day") or position
        try:
            day = int(day)
        except (TypeError, ValueError):
            logger.warning(f"Engine: Invalid day value {day!r} at row {position}; using row number.")
            day = position
        timings = day_record.get("timings") or {}
        cells.append(resolve_day(day, timings, schedule, policy))

    return MonthlyIqamah(cells=cells, has_any_iqamah=has_any_iqamah(schedule))
