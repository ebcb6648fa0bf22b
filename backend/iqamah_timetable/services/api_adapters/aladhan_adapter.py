# iqamah_timetable/services/api_adapters/aladhan_adapter.py

import datetime

import requests
from flask import current_app

from .base_adapter import BasePrayerAdapter
from ...utils.constants import PrayerKey

# AlAdhan method id for ISNA, used when no custom angles are given.
ISNA_METHOD_ID = 2
CUSTOM_METHOD_ID = 99


class AlAdhanAdapter(BasePrayerAdapter):
    """
    API Adapter for AlAdhan.com Prayer Times API.
    """
    name = "AlAdhanAdapter"

    TIMING_KEYS = {
        'Fajr': PrayerKey.FAJR,
        'Sunrise': 'sunrise',
        'Dhuhr': PrayerKey.ZUHR,
        'Asr': PrayerKey.ASR,
        'Sunset': 'sunset',
        'Maghrib': PrayerKey.MAGHRIB,
        'Isha': PrayerKey.ISHA,
    }

    def fetch_monthly_calendar(self, latitude, longitude, month, year, fajr_angle=None, isha_angle=None, asr_method=0):
        """
        Fetches one month of prayer times from the AlAdhan.com calendar endpoint.
        """
        current_app.logger.info(f"AlAdhanAdapter: Fetching calendar for {year}-{month} at ({latitude}, {longitude})")

        endpoint = f"{self.base_url}/calendar/{year}/{month}"
        params = {
            "latitude": str(latitude),
            "longitude": str(longitude),
            "school": asr_method,
            "adjustment": 0,
        }
        if fajr_angle is not None and isha_angle is not None:
            params["method"] = CUSTOM_METHOD_ID
            params["methodSettings"] = f"{fajr_angle},null,{isha_angle}"
        else:
            params["method"] = ISNA_METHOD_ID

        current_app.logger.debug(f"AlAdhanAdapter: Fetching month with params: {params}")

        try:
            response = requests.get(endpoint, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()

            if data.get("code") == 200 and isinstance(data.get("data"), list):
                days = []
                for day_data in data["data"]:
                    date_info = day_data.get("date", {})
                    gregorian = date_info.get("gregorian", {})
                    hijri = date_info.get("hijri", {})
                    date_obj = datetime.datetime.strptime(gregorian.get("date"), "%d-%m-%Y").date()

                    raw = day_data.get("timings", {})
                    raw_timings = {our_key: raw.get(their_key) for their_key, our_key in self.TIMING_KEYS.items()}
                    days.append(self._build_day(
                        date_obj,
                        raw_timings,
                        hijri_day=hijri.get("day"),
                        hijri_month=hijri.get("month", {}).get("en"),
                        hijri_year=hijri.get("year"),
                    ))

                if not days:
                    current_app.logger.error(f"AlAdhanAdapter: API returned empty data for {year}-{month}.")
                    return None

                current_app.logger.info(f"AlAdhanAdapter: Successfully fetched {len(days)} days for {year}-{month}.")
                return days
            else:
                current_app.logger.error(f"AlAdhanAdapter: API error for {year}-{month}. Code: {data.get('code')}, Status: {data.get('status')}")
                return None

        except requests.exceptions.Timeout:
            current_app.logger.error(f"AlAdhanAdapter: Timeout error fetching prayer times for {year}-{month}.")
            return None
        except requests.exceptions.RequestException as e:
            current_app.logger.error(f"AlAdhanAdapter: RequestException for {year}-{month}: {e}", exc_info=True)
            return None
        except (ValueError, TypeError, AttributeError) as e:
            current_app.logger.error(f"AlAdhanAdapter: Could not parse response for {year}-{month}: {e}", exc_info=True)
            return None
