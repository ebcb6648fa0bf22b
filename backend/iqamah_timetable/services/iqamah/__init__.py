from .rules import FixedRule, VariableRule, PrayerSchedule, ValidationError, rule_from_dict
from .range_resolver import RangeMatch, resolve_rule
from .schedule_engine import MonthlyIqamah, ResolvedIqamah, resolve_month, has_any_iqamah
from .schedule_config import add_rule, update_rule, remove_rule, change_rule_type
