import datetime
import time
from typing import Any, Dict, List, Optional

from flask import current_app

from .api_adapters.aladhan_adapter import AlAdhanAdapter
from .api_adapters.islamicfinder_adapter import IslamicFinderAdapter
from .api_adapters.salahhour_adapter import SalahHourAdapter
from ..metrics import API_REQUESTS_TOTAL, API_REQUEST_DURATION_SECONDS, PROVIDER_FALLBACKS_TOTAL
from ..utils.hijri import hijri_for_date


class ProviderUnavailable(RuntimeError):
    """Raised when no configured prayer time provider returned a usable month."""


def get_api_adapter(adapter_name: str):
    """
    Instantiates the API adapter with the given name from the app configuration.
    Returns None if the adapter is unknown or not configured.
    """
    config = current_app.config
    timeout = config.get('PROVIDER_TIMEOUT_SECONDS', 10)

    if adapter_name == "SalahHourAdapter":
        base_url = config.get('SALAHHOUR_BASE_URL')
        if not base_url:
            current_app.logger.error("SalahHour API base URL is not configured.")
            return None
        return SalahHourAdapter(base_url=base_url, timeout=timeout, timezone=config.get('PROVIDER_TIMEZONE', 'America/Chicago'))

    if adapter_name == "AlAdhanAdapter":
        base_url = config.get('ALADHAN_BASE_URL')
        if not base_url:
            current_app.logger.error("AlAdhan API base URL is not configured.")
            return None
        return AlAdhanAdapter(base_url=base_url, timeout=timeout)

    if adapter_name == "IslamicFinderAdapter":
        base_url = config.get('ISLAMICFINDER_BASE_URL')
        if not base_url:
            current_app.logger.error("IslamicFinder API base URL is not configured.")
            return None
        return IslamicFinderAdapter(base_url=base_url, api_key=config.get('ISLAMICFINDER_API_KEY'), timeout=timeout)

    current_app.logger.error(f"Unsupported Prayer API Adapter: {adapter_name}")
    return None


def _fill_missing_hijri(days: List[Dict[str, Any]], year: int, month: int) -> None:
    """Fills in Hijri data for days where the provider did not supply it."""
    for day in days:
        if day.get("hijri_day") and day.get("hijri_month"):
            continue
        try:
            hijri = hijri_for_date(datetime.date(year, month, day["day"]))
        except OverflowError:
            current_app.logger.warning(f"No Hijri date available for {year}-{month}-{day['day']}; label left blank.")
            continue
        day["hijri_day"] = hijri["day"]
        day["hijri_month"] = hijri["month"]
        day["hijri_year"] = hijri["year"]


def get_monthly_prayer_timings(latitude: float, longitude: float, month: int, year: int,
                               fajr_angle: Optional[float] = None, isha_angle: Optional[float] = None,
                               asr_method: int = 0) -> Dict[str, Any]:
    """
    Fetches a month of raw prayer timings, trying each provider in
    PROVIDER_FALLBACK_ORDER until one succeeds.

    Returns:
        dict with "source" (the adapter that answered) and "days".

    Raises:
        ProviderUnavailable: if every provider failed.
    """
    adapter_order = current_app.config.get('PROVIDER_FALLBACK_ORDER') or ["SalahHourAdapter", "AlAdhanAdapter"]

    for attempt, adapter_name in enumerate(adapter_order):
        adapter = get_api_adapter(adapter_name)
        if not adapter:
            continue
        if attempt > 0:
            PROVIDER_FALLBACKS_TOTAL.labels(adapter_name=adapter_name).inc()
            current_app.logger.warning(f"Falling back to {adapter_name} for {year}-{month}.")

        start = time.monotonic()
        days = adapter.fetch_monthly_calendar(
            latitude=latitude,
            longitude=longitude,
            month=month,
            year=year,
            fajr_angle=fajr_angle,
            isha_angle=isha_angle,
            asr_method=asr_method,
        )
        API_REQUEST_DURATION_SECONDS.labels(adapter_name=adapter_name).observe(time.monotonic() - start)

        if days:
            API_REQUESTS_TOTAL.labels(adapter_name=adapter_name, status='success').inc()
            _fill_missing_hijri(days, year, month)
            return {"source": adapter_name, "days": days}

        API_REQUESTS_TOTAL.labels(adapter_name=adapter_name, status='failure').inc()
        current_app.logger.error(f"{adapter_name} returned no data for {year}-{month}.")

    raise ProviderUnavailable(f"Failed to fetch prayer times for {year}-{month} from all providers.")
