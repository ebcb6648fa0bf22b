# iqamah_timetable/services/api_adapters/salahhour_adapter.py

import requests
from flask import current_app

from .base_adapter import BasePrayerAdapter, parse_iso_date
from ...utils.constants import PrayerKey


class SalahHourAdapter(BasePrayerAdapter):
    """
    API Adapter for the salahhour.com prayer times API.
    Supports custom Fajr/Isha angles (method 99) and returns a whole month per request.
    SalahHour does not return Hijri dates.
    """
    name = "SalahHourAdapter"

    # SalahHour key -> our timing key
    TIMING_KEYS = {
        'Fajr': PrayerKey.FAJR,
        'Sunrise': 'sunrise',
        'Dhuhr': PrayerKey.ZUHR,
        'Asr': PrayerKey.ASR,
        'Maghrib': PrayerKey.MAGHRIB,
        'Isha': PrayerKey.ISHA,
        'Duha': 'duha',
    }

    def __init__(self, base_url, api_key=None, timeout=30, timezone='America/Chicago'):
        super().__init__(base_url, api_key, timeout)
        self.timezone = timezone

    def fetch_monthly_calendar(self, latitude, longitude, month, year, fajr_angle=None, isha_angle=None, asr_method=0):
        """
        Fetches a full month of prayer times from SalahHour.
        """
        current_app.logger.info(f"SalahHourAdapter: Fetching {year}-{month} at ({latitude}, {longitude})")

        endpoint = f"{self.base_url}/prayer_times"
        params = {
            "latitude": str(latitude),
            "longitude": str(longitude),
            "timezone": self.timezone,
            "date": f"{month}/1/{year}",
            "show_entire_month": 1,
            "method": 99,
            "fajir_angle": fajr_angle,
            "isha_angle": isha_angle,
            "juristic": asr_method,
            "format": "json",
        }
        params = {k: v for k, v in params.items() if v is not None}

        current_app.logger.debug(f"SalahHourAdapter: Fetching month with params: {params}")

        try:
            response = requests.get(endpoint, params=params, timeout=self.timeout,
                                    headers={'User-Agent': 'Mozilla/5.0', 'Accept': 'application/json'})
            response.raise_for_status()
            data = response.json()

            results = data.get("results") if isinstance(data, dict) else None
            if not results or not isinstance(results, dict):
                current_app.logger.error(f"SalahHourAdapter: API returned no results for {year}-{month}.")
                return None

            days = []
            for date_key, day_data in results.items():
                date_obj = parse_iso_date(date_key)
                if not date_obj or date_obj.month != int(month):
                    current_app.logger.debug(f"SalahHourAdapter: Skipping entry {date_key!r} outside {year}-{month}.")
                    continue
                raw_timings = {our_key: day_data.get(their_key) for their_key, our_key in self.TIMING_KEYS.items()}
                days.append(self._build_day(date_obj, raw_timings))

            if not days:
                current_app.logger.error(f"SalahHourAdapter: No usable days in response for {year}-{month}.")
                return None

            days.sort(key=lambda d: d["day"])
            current_app.logger.info(f"SalahHourAdapter: Successfully fetched {len(days)} days for {year}-{month}.")
            return days

        except requests.exceptions.Timeout:
            current_app.logger.error(f"SalahHourAdapter: Timeout error fetching prayer times for {year}-{month}.")
            return None
        except requests.exceptions.RequestException as e:
            current_app.logger.error(f"SalahHourAdapter: RequestException for {year}-{month}: {e}", exc_info=True)
            return None
        except (ValueError, AttributeError) as e:
            current_app.logger.error(f"SalahHourAdapter: Could not parse response for {year}-{month}: {e}", exc_info=True)
            return None
