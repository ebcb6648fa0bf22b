# backend/tests/conftest.py

import pytest
from iqamah_timetable import create_app, db as _db


@pytest.fixture(scope='session')
def app():
    """Session-wide application for testing."""
    app = create_app('testing')
    return app

@pytest.fixture(scope='function')
def db(app):
    """Function-level database setup. Creates and tears down tables for each test function."""
    with app.app_context():
        _db.create_all()

        yield _db

        _db.session.remove()
        _db.drop_all()

@pytest.fixture(scope='function')
def test_client(app, db):
    """A test client for the app, ensuring the DB is initialized."""
    return app.test_client()


def make_day(day, fajr="5:30 am", zuhr="1:15 pm", asr="4:45 pm", maghrib="6:20 pm", isha="7:40 pm"):
    """Builds a standardized day record as the provider adapters return it."""
    return {
        "day": day,
        "gregorian_date": f"10/{day}/2026",
        "weekday": "Thu",
        "hijri_day": day + 9 if day + 9 <= 29 else day - 20,
        "hijri_month": "Rabi' al-thani" if day + 9 <= 29 else "Jumada al-awwal",
        "hijri_year": 1448,
        "timings": {
            "fajr": fajr, "sunrise": "6:55 am", "zuhr": zuhr, "asr": asr,
            "maghrib": maghrib, "isha": isha,
        },
    }

@pytest.fixture
def month_days():
    """Thirty-one days of plausible provider timings."""
    return [make_day(day) for day in range(1, 32)]

@pytest.fixture
def mock_prayer_timings(mocker, month_days):
    """Mocks the provider fetch used by the timetable service."""
    return mocker.patch(
        'iqamah_timetable.services.timetable_service.get_monthly_prayer_timings',
        return_value={"source": "SalahHourAdapter", "days": month_days},
    )
