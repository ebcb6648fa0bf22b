import datetime

from hijridate import Gregorian

from .constants import HIJRI_MONTHS


def hijri_month_name(month_number):
    if not month_number:
        return ''
    try:
        return HIJRI_MONTHS[int(month_number) - 1]
    except (ValueError, IndexError):
        return ''


def hijri_label(hijri_day, hijri_month, is_first_row=False):
    """
    Builds the compact Hijri cell label used in the timetable.

    The month name is shown on the first row and whenever a new Hijri month
    starts; every other row shows only the day number.
    """
    if not hijri_day:
        return '-'
    if hijri_month and (is_first_row or int(hijri_day) == 1):
        return f"{int(hijri_day)} {hijri_month}"
    return str(int(hijri_day))


def hijri_for_date(date_obj):
    """
    Returns a dict with day, month name and year for a Gregorian date, using
    the Umm al-Qura calendar.

    Raises:
        OverflowError: if the date is outside the range the calendar covers.
    """
    if isinstance(date_obj, datetime.datetime):
        date_obj = date_obj.date()
    hijri = Gregorian.fromdate(date_obj).to_hijri()
    return {'day': hijri.day, 'month': hijri_month_name(hijri.month), 'year': hijri.year}
