# -*- coding: utf-8 -*-
"""
Service for assembling the display-ready monthly timetable.

It glues the provider data to the Iqamah engine and shapes the result for the
renderer:

- Raw prayer times per day (optionally without am/pm for compact cells).
- Iqamah cells per day and prayer, or None where no congregation time applies.
- Hijri labels and the list of Hijri months the Gregorian month spans.
- The month-level hasAnyIqamah flag that decides whether Iqamah columns are shown.
"""

import calendar
from typing import Any, Dict, List, Optional

from flask import current_app

from ..metrics import TIMETABLES_GENERATED_TOTAL
from ..utils.constants import PrayerKey
from ..utils.hijri import hijri_label
from ..utils.time_utils import FormatError, normalize_clock, strip_meridiem
from .iqamah.rules import PrayerSchedule
from .iqamah.schedule_engine import resolve_month
from .prayer_time_service import get_monthly_prayer_timings

MISSING_TIME = '-'
EXTRA_DISPLAY_KEYS = ('sunrise', 'duha')


def _display_time(clock_str: Optional[str], compact: bool) -> str:
    if not clock_str:
        return MISSING_TIME
    try:
        return strip_meridiem(clock_str) if compact else normalize_clock(clock_str)
    except FormatError:
        return MISSING_TIME


def _hijri_months(days: List[Dict[str, Any]]) -> List[str]:
    """Unique Hijri month names in the order they appear."""
    months = []
    for day in days:
        month_name = day.get("hijri_month")
        if month_name and month_name not in months:
            months.append(month_name)
    return months


def build_rows(days: List[Dict[str, Any]], monthly_iqamah, compact_times: bool = False) -> List[Dict[str, Any]]:
    """Combines raw day records with their resolved Iqamah cells into table rows."""
    rows = []
    for position, day in enumerate(days):
        timings = day.get("timings") or {}
        times = {key: _display_time(timings.get(key), compact_times) for key in PrayerKey.ALL}
        for key in EXTRA_DISPLAY_KEYS:
            if key in timings:
                times[key] = _display_time(timings.get(key), compact_times)

        cells = monthly_iqamah.cells[position]
        rows.append({
            "day": day["day"],
            "date": day.get("gregorian_date") or str(day["day"]),
            "weekday": day.get("weekday") or '',
            "hijri": hijri_label(day.get("hijri_day"), day.get("hijri_month"), is_first_row=(position == 0)),
            "times": times,
            "iqamah": {prayer: (cell.to_dict() if cell else None) for prayer, cell in cells.items()},
        })
    return rows


def generate_monthly_timetable(latitude: float, longitude: float, month: int, year: int,
                               schedule: PrayerSchedule, display_policy: str,
                               fajr_angle: Optional[float] = None, isha_angle: Optional[float] = None,
                               asr_method: int = 0, compact_times: bool = False,
                               mosque: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Fetches a month of prayer times and overlays the Iqamah schedule.

    Raises:
        ProviderUnavailable: if no provider could deliver the month.
    """
    current_app.logger.info(f"Generating timetable for {year}-{month} at ({latitude}, {longitude}) with policy '{display_policy}'")

    fetched = get_monthly_prayer_timings(
        latitude=latitude,
        longitude=longitude,
        month=month,
        year=year,
        fajr_angle=fajr_angle,
        isha_angle=isha_angle,
        asr_method=asr_method,
    )
    days = fetched["days"]

    monthly_iqamah = resolve_month(days, schedule, display_policy)
    TIMETABLES_GENERATED_TOTAL.labels(display_policy=display_policy).inc()

    return {
        "monthName": calendar.month_name[month],
        "month": month,
        "year": year,
        "hijriMonths": _hijri_months(days),
        "source": fetched["source"],
        "displayPolicy": display_policy,
        "customAngles": {"fajr": fajr_angle, "isha": isha_angle},
        "hasAnyIqamah": monthly_iqamah.has_any_iqamah,
        "mosque": mosque,
        "rows": build_rows(days, monthly_iqamah, compact_times),
    }
