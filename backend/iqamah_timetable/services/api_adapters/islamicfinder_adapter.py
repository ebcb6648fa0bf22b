# iqamah_timetable/services/api_adapters/islamicfinder_adapter.py

import requests
from flask import current_app

from .base_adapter import BasePrayerAdapter, parse_iso_date
from ...utils.constants import PrayerKey
from ...utils.hijri import hijri_month_name


class IslamicFinderAdapter(BasePrayerAdapter):
    """
    API Adapter for the IslamicFinder v3 calendar API.
    Timings may come at the top level of each day or nested under "prayer_times".
    """
    name = "IslamicFinderAdapter"

    TIMING_KEYS = {
        'fajr': PrayerKey.FAJR,
        'sunrise': 'sunrise',
        'dhuhr': PrayerKey.ZUHR,
        'asr': PrayerKey.ASR,
        'sunset': 'sunset',
        'maghrib': PrayerKey.MAGHRIB,
        'isha': PrayerKey.ISHA,
    }

    def fetch_monthly_calendar(self, latitude, longitude, month, year, fajr_angle=None, isha_angle=None, asr_method=0):
        current_app.logger.info(f"IslamicFinderAdapter: Fetching calendar for {year}-{month} at ({latitude}, {longitude})")

        endpoint = f"{self.base_url}/calendar"
        params = {
            "latitude": latitude,
            "longitude": longitude,
            "month": month,
            "year": year,
            "method": 99,
            "fajr_angle": fajr_angle,
            "isha_angle": isha_angle,
            "madhab": 'hanafi' if asr_method == 1 else 'shafi',
            "key": self.api_key,
        }
        # Remove None values from params
        params = {k: v for k, v in params.items() if v is not None}

        try:
            response = requests.get(endpoint, params=params, timeout=self.timeout,
                                    headers={'User-Agent': 'Mozilla/5.0 (Prayer Times App)', 'Accept': 'application/json'})
            response.raise_for_status()
            data = response.json()

            if not data or not isinstance(data.get("data"), list):
                current_app.logger.warning(f"IslamicFinderAdapter: API returned error or no data: {data.get('status', 'Unknown') if data else 'Empty'}")
                return None

            days = []
            for day_data in data["data"]:
                date_obj = parse_iso_date(day_data.get("date_for") or day_data.get("date"))
                if not date_obj:
                    current_app.logger.warning(f"IslamicFinderAdapter: Skipping day with unreadable date: {day_data.get('date_for')!r}")
                    continue

                nested = day_data.get("prayer_times") or {}
                raw_timings = {
                    our_key: day_data.get(their_key) or nested.get(their_key)
                    for their_key, our_key in self.TIMING_KEYS.items()
                }

                hijri = day_data.get("hijri") or {}
                month_name = hijri.get("month_name") or hijri_month_name(hijri.get("month"))
                days.append(self._build_day(
                    date_obj,
                    raw_timings,
                    hijri_day=hijri.get("day") or day_data.get("hijri_day"),
                    hijri_month=month_name,
                    hijri_year=hijri.get("year") or day_data.get("hijri_year"),
                ))

            if not days:
                current_app.logger.error(f"IslamicFinderAdapter: No usable days for {year}-{month}.")
                return None

            days.sort(key=lambda d: d["day"])
            return days

        except requests.exceptions.Timeout:
            current_app.logger.error("IslamicFinderAdapter: Request timed out.")
            return None
        except requests.exceptions.RequestException as e:
            current_app.logger.error(f"IslamicFinderAdapter: Request error: {e}", exc_info=True)
            return None
        except (ValueError, KeyError, AttributeError) as e:
            current_app.logger.error(f"IslamicFinderAdapter: JSON parsing or key access error during fetch: {e}", exc_info=True)
            return None
