import os
from dotenv import load_dotenv

from .utils.constants import DisplayPolicy

# Load .env file
dotenv_path = os.path.join(os.path.dirname(os.path.dirname(__file__)), '.env')
if os.path.exists(dotenv_path):
    load_dotenv(dotenv_path)
else:
    print("Warning: .env file not found. Using defaults or environment variables.")


def _list_from_env(name, default):
    value = os.environ.get(name)
    if not value:
        return default
    return [item.strip() for item in value.split(',') if item.strip()]


class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'a_default_fallback_secret_key_for_development_only'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = "INFO"

    # Sentry Configuration
    SENTRY_DSN = os.environ.get('SENTRY_DSN')

    # Prayer Time Provider Configuration
    # Providers are tried in this order until one returns a usable month.
    PROVIDER_FALLBACK_ORDER = _list_from_env('PROVIDER_FALLBACK_ORDER', ["SalahHourAdapter", "AlAdhanAdapter"])
    PROVIDER_TIMEOUT_SECONDS = int(os.environ.get('PROVIDER_TIMEOUT_SECONDS', 30))
    PROVIDER_TIMEZONE = os.environ.get('PROVIDER_TIMEZONE', 'America/Chicago')
    SALAHHOUR_BASE_URL = os.environ.get('SALAHHOUR_BASE_URL') or "https://www.salahhour.com/api"
    ALADHAN_BASE_URL = os.environ.get('ALADHAN_BASE_URL') or "https://api.aladhan.com/v1"
    ISLAMICFINDER_BASE_URL = os.environ.get('ISLAMICFINDER_BASE_URL') or "https://api.islamicfinder.org/v3"
    ISLAMICFINDER_API_KEY = os.environ.get('ISLAMICFINDER_API_KEY')

    # Geocoding Configuration
    NOMINATIM_BASE_URL = os.environ.get('NOMINATIM_BASE_URL') or "https://nominatim.openstreetmap.org"
    NOMINATIM_USER_AGENT = os.environ.get('NOMINATIM_USER_AGENT', 'iqamah-timetable')

    # Timetable Defaults
    DEFAULT_FAJR_ANGLE = float(os.environ.get('DEFAULT_FAJR_ANGLE', 18))
    DEFAULT_ISHA_ANGLE = float(os.environ.get('DEFAULT_ISHA_ANGLE', 10))
    DEFAULT_DISPLAY_POLICY = os.environ.get('DEFAULT_DISPLAY_POLICY', DisplayPolicy.ALL_DAYS)

    # Rate limit for the timetable endpoint (each request hits an external provider)
    TIMETABLE_RATE_LIMIT = os.environ.get('TIMETABLE_RATE_LIMIT', "30 per hour")


class DevelopmentConfig(Config):
    FLASK_ENV = 'development'
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///iqamah_timetable.db'
    LOG_LEVEL = "DEBUG"


class ProductionConfig(Config):
    FLASK_ENV = 'production'
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL')


class TestingConfig(Config):
    TESTING = True
    # Use an in-memory SQLite database for tests to ensure speed and isolation.
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    RATELIMIT_ENABLED = False # Disable rate limiting for tests
    SECRET_KEY = 'test-secret-key'
    PROVIDER_TIMEOUT_SECONDS = 5


config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def validate_production_config(config_obj):
    """Fails fast when production is started without its critical settings."""
    if not config_obj.SECRET_KEY or config_obj.SECRET_KEY == 'a_default_fallback_secret_key_for_development_only':
        raise ValueError("CRITICAL: SECRET_KEY not found in environment!")
    if not config_obj.SQLALCHEMY_DATABASE_URI:
        raise ValueError("CRITICAL: DATABASE_URL for production is not set!")
    if config_obj.DEFAULT_DISPLAY_POLICY not in DisplayPolicy.ALL:
        raise ValueError(f"CRITICAL: DEFAULT_DISPLAY_POLICY must be one of {DisplayPolicy.ALL}, got {config_obj.DEFAULT_DISPLAY_POLICY!r}")
    if not config_obj.SENTRY_DSN:
        print("Warning: SENTRY_DSN not found. Error tracking will be disabled.")
