# iqamah_timetable/services/iqamah/range_resolver.py
from typing import NamedTuple, Optional, Sequence

from .rules import IqamahRule


class RangeMatch(NamedTuple):
    index: int
    rule: IqamahRule


def resolve_rule(day: int, rules: Sequence[IqamahRule]) -> Optional[RangeMatch]:
    """
    Finds the rule that governs a day of the month.

    Ordering contract: the FIRST rule in sequence order whose range contains
    the day wins. To override part of a broad range, place the narrower rule
    before it in the list.

    Args:
        day: Day of the month (1-31).
        rules: The prayer's rules in insertion order.

    Returns:
        RangeMatch with the rule and its position in the sequence, or None if
        no rule covers the day.
    """
    for index, rule in enumerate(rules or ()):
        if rule.covers(day):
            return RangeMatch(index=index, rule=rule)
    return None
