# backend/tests/test_api_adapters.py

from unittest.mock import patch, MagicMock

import requests

from iqamah_timetable.services.api_adapters.aladhan_adapter import AlAdhanAdapter
from iqamah_timetable.services.api_adapters.islamicfinder_adapter import IslamicFinderAdapter
from iqamah_timetable.services.api_adapters.salahhour_adapter import SalahHourAdapter


def _response(payload):
    response = MagicMock()
    response.json.return_value = payload
    response.raise_for_status.return_value = None
    return response


@patch('iqamah_timetable.services.api_adapters.salahhour_adapter.requests.get')
def test_salahhour_parses_month_and_skips_other_months(mock_get, app):
    mock_get.return_value = _response({"results": {
        "2026-10-02": {"Fajr": "5:42%am%", "Dhuhr": "12:49%pm%", "Asr": "4:02%pm%", "Maghrib": "6:25%pm%", "Isha": "7:39%pm%"},
        "2026-10-01": {"Fajr": "5:41%am%", "Dhuhr": "12:49%pm%", "Asr": "4:03%pm%", "Maghrib": "6:27%pm%", "Isha": "7:41%pm%"},
        "2026-11-01": {"Fajr": "6:10%am%"},
    }})

    with app.app_context():
        adapter = SalahHourAdapter("https://example.test/api")
        days = adapter.fetch_monthly_calendar(41.8796, -88.0658, 10, 2026, fajr_angle=18, isha_angle=10)

    assert [d["day"] for d in days] == [1, 2]
    assert days[0]["timings"]["fajr"] == "5:41 am"
    assert days[0]["timings"]["zuhr"] == "12:49 pm"
    assert days[0]["gregorian_date"] == "10/1/2026"
    assert days[0]["weekday"] == "Thu"
    assert days[0]["hijri_day"] is None

    params = mock_get.call_args.kwargs["params"]
    assert params["date"] == "10/1/2026"
    assert params["fajir_angle"] == 18
    assert params["method"] == 99

@patch('iqamah_timetable.services.api_adapters.salahhour_adapter.requests.get')
def test_salahhour_timeout_returns_none(mock_get, app):
    mock_get.side_effect = requests.exceptions.Timeout()
    with app.app_context():
        assert SalahHourAdapter("https://example.test/api").fetch_monthly_calendar(41.8, -88.0, 10, 2026) is None

@patch('iqamah_timetable.services.api_adapters.salahhour_adapter.requests.get')
def test_salahhour_empty_results_returns_none(mock_get, app):
    mock_get.return_value = _response({"results": {}})
    with app.app_context():
        assert SalahHourAdapter("https://example.test/api").fetch_monthly_calendar(41.8, -88.0, 10, 2026) is None

@patch('iqamah_timetable.services.api_adapters.aladhan_adapter.requests.get')
def test_aladhan_parses_calendar(mock_get, app):
    mock_get.return_value = _response({"code": 200, "data": [{
        "timings": {"Fajr": "05:41 (CDT)", "Sunrise": "06:58 (CDT)", "Dhuhr": "12:49 (CDT)",
                    "Asr": "16:03 (CDT)", "Maghrib": "18:27 (CDT)", "Isha": "19:41 (CDT)"},
        "date": {
            "gregorian": {"date": "01-10-2026"},
            "hijri": {"day": "19", "month": {"en": "Rabīʿ al-thānī"}, "year": "1448"},
        },
    }]})

    with app.app_context():
        days = AlAdhanAdapter("https://example.test/v1").fetch_monthly_calendar(41.8, -88.0, 10, 2026, 18, 10, asr_method=1)

    assert days[0]["timings"]["asr"] == "4:03 pm"
    assert days[0]["timings"]["sunrise"] == "6:58 am"
    assert days[0]["hijri_day"] == 19
    assert days[0]["hijri_year"] == 1448

    assert mock_get.call_args.args[0] == "https://example.test/v1/calendar/2026/10"
    params = mock_get.call_args.kwargs["params"]
    assert params["method"] == 99
    assert params["methodSettings"] == "18,null,10"
    assert params["school"] == 1

@patch('iqamah_timetable.services.api_adapters.aladhan_adapter.requests.get')
def test_aladhan_without_angles_uses_isna(mock_get, app):
    mock_get.return_value = _response({"code": 400, "status": "BAD_REQUEST", "data": "bad"})
    with app.app_context():
        assert AlAdhanAdapter("https://example.test/v1").fetch_monthly_calendar(41.8, -88.0, 10, 2026) is None
    assert mock_get.call_args.kwargs["params"]["method"] == 2

@patch('iqamah_timetable.services.api_adapters.islamicfinder_adapter.requests.get')
def test_islamicfinder_reads_nested_timings(mock_get, app):
    mock_get.return_value = _response({"data": [{
        "date_for": "2026-10-03",
        "prayer_times": {"fajr": "5:43 am", "dhuhr": "12:48 pm", "asr": "4:01 pm", "maghrib": "6:23 pm", "isha": "7:37 pm"},
        "hijri": {"day": 21, "month": 4, "year": 1448},
    }]})

    with app.app_context():
        days = IslamicFinderAdapter("https://example.test/v3", api_key="k").fetch_monthly_calendar(41.8, -88.0, 10, 2026, asr_method=1)

    assert days[0]["day"] == 3
    assert days[0]["timings"]["isha"] == "7:37 pm"
    assert days[0]["hijri_month"] == "Rabi' al-thani"
    assert mock_get.call_args.kwargs["params"]["madhab"] == "hanafi"

@patch('iqamah_timetable.services.api_adapters.salahhour_adapter.requests.get')
def test_unreadable_time_is_passed_through(mock_get, app):
    mock_get.return_value = _response({"results": {
        "2026-10-01": {"Fajr": "soon", "Dhuhr": "12:49%pm%"},
    }})
    with app.app_context():
        days = SalahHourAdapter("https://example.test/api").fetch_monthly_calendar(41.8, -88.0, 10, 2026)
    assert days[0]["timings"]["fajr"] == "soon"
    assert days[0]["timings"]["zuhr"] == "12:49 pm"
