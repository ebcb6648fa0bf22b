# This module defines the base interface for all prayer time API adapters.
import datetime
from abc import ABC, abstractmethod

from flask import current_app

from ...utils.constants import PrayerKey
from ...utils.time_utils import FormatError, to_clock_string

# Non-prayer timings that are carried through for the table.
EXTRA_TIMING_KEYS = ('sunrise', 'sunset', 'duha')


class BasePrayerAdapter(ABC):
    """
    Abstract base class for prayer time API adapters. It ensures that all adapters
    adhere to a common interface, returning a month of days in a standardized format:

        {
            "day": 1,
            "gregorian_date": "10/1/2026",
            "weekday": "Thu",
            "hijri_day": 10, "hijri_month": "Rabi' al-thani", "hijri_year": 1448,
            "timings": {"fajr": "5:41 am", "zuhr": "12:49 pm", ...},
        }
    """
    name = "BasePrayerAdapter"

    def __init__(self, base_url, api_key=None, timeout=10):
        self.base_url = base_url.rstrip('/') if base_url else base_url
        self.api_key = api_key
        self.timeout = timeout

    @abstractmethod
    def fetch_monthly_calendar(self, latitude, longitude, month, year, fajr_angle=None, isha_angle=None, asr_method=0):
        """Fetches one Gregorian month of prayer times. Returns a list of day dicts, or None on failure."""
        pass

    def _convert_time(self, raw_time, label):
        """
        Converts a provider time to the canonical clock form. A value that cannot
        be converted is passed through untouched so that only its own cell is
        blanked later.
        """
        try:
            return to_clock_string(raw_time)
        except FormatError:
            current_app.logger.warning(f"{self.name}: Unrecognized time for {label}: {raw_time!r}")
            return raw_time

    def _build_day(self, date_obj, raw_timings, hijri_day=None, hijri_month=None, hijri_year=None):
        """Builds a standardized day dict from a date and the provider's raw timing mapping (prayer key -> raw string)."""
        timings = {}
        for key in PrayerKey.ALL + EXTRA_TIMING_KEYS:
            if key in raw_timings:
                timings[key] = self._convert_time(raw_timings.get(key), f"{date_obj.isoformat()} {key}")

        return {
            "day": date_obj.day,
            "gregorian_date": f"{date_obj.month}/{date_obj.day}/{date_obj.year}",
            "weekday": date_obj.strftime("%a"),
            "hijri_day": _to_int(hijri_day),
            "hijri_month": hijri_month or None,
            "hijri_year": _to_int(hijri_year),
            "timings": timings,
        }


def _to_int(value):
    try:
        return int(value) if value not in (None, '') else None
    except (TypeError, ValueError):
        return None


def parse_iso_date(date_str):
    """Parses a "YYYY-MM-DD" provider date. Returns None if it is malformed."""
    try:
        return datetime.datetime.strptime(str(date_str).strip(), "%Y-%m-%d").date()
    except (TypeError, ValueError):
        return None
