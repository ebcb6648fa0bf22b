# iqamah_timetable/utils/constants.py

class PrayerKey:
    """
    Defines the five prayer keys used throughout the application.
    The order of ALL is the display order of the timetable columns.
    """
    FAJR = 'fajr'
    ZUHR = 'zuhr'
    ASR = 'asr'
    MAGHRIB = 'maghrib'
    ISHA = 'isha'

    ALL = (FAJR, ZUHR, ASR, MAGHRIB, ISHA)

    # Providers (and older saved schedules) spell Zuhr as Dhuhr.
    ALIASES = {'dhuhr': ZUHR, 'zohr': ZUHR}

    @classmethod
    def normalize(cls, value):
        """Returns the canonical key for a prayer name, or None if it is not one of the five."""
        if not value:
            return None
        key = str(value).strip().lower()
        key = cls.ALIASES.get(key, key)
        return key if key in cls.ALL else None


class DisplayPolicy:
    """Selects on which days of a range the Iqamah time is printed."""
    ALL_DAYS = 'all_days'
    MIDPOINT_ONLY = 'midpoint_only'

    ALL = (ALL_DAYS, MIDPOINT_ONLY)


class RuleType:
    FIXED = 'fixed'
    VARIABLE = 'variable'

    ALL = (FIXED, VARIABLE)


MIN_DAY_OF_MONTH = 1
MAX_DAY_OF_MONTH = 31
MAX_NOTES = 3

# Offset in minutes used when a rule is switched to variable without one.
DEFAULT_OFFSETS = {
    PrayerKey.FAJR: 10,
    PrayerKey.ZUHR: 5,
    PrayerKey.ASR: 5,
    PrayerKey.MAGHRIB: 0,
    PrayerKey.ISHA: 10,
}

HIJRI_MONTHS = [
    'Muharram', 'Safar', "Rabi' al-awwal", "Rabi' al-thani",
    'Jumada al-awwal', 'Jumada al-thani', 'Rajab', "Sha'ban",
    'Ramadan', 'Shawwal', "Dhu al-Qi'dah", 'Dhu al-Hijjah',
]
