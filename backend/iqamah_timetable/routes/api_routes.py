# iqamah_timetable/routes/api_routes.py
import datetime

from flask import current_app
from flask_smorest import Blueprint, abort
from prometheus_client import generate_latest

from ..extensions import limiter
from ..schemas import MessageSchema, TimetableArgsSchema, TimetableSchema
from ..services.geocoding_service import geocode_city
from ..services.iqamah.rules import PrayerSchedule, ValidationError as ScheduleValidationError
from ..services.prayer_time_service import ProviderUnavailable
from ..services.profile_service import get_profile, get_saved_schedule, profile_to_dict
from ..services.timetable_service import generate_monthly_timetable
from ..utils.constants import DisplayPolicy

api_bp = Blueprint('API', __name__, url_prefix='/api', description="Monthly prayer timetable generation.")

@api_bp.route('/metrics')
def metrics():
    return generate_latest(), 200, {'Content-Type': 'text/plain; version=0.0.4; charset=utf-8'}


def _timetable_rate_limit():
    return current_app.config.get('TIMETABLE_RATE_LIMIT', "30 per hour")


@api_bp.route('/timetable', methods=['POST'])
@limiter.limit(_timetable_rate_limit)
@api_bp.arguments(TimetableArgsSchema)
@api_bp.response(200, TimetableSchema, description="The monthly timetable with Iqamah cells.")
@api_bp.alt_response(404, schema=MessageSchema, description="The city could not be geocoded.")
@api_bp.alt_response(422, schema=MessageSchema, description="The Iqamah schedule in the request is invalid.")
@api_bp.alt_response(502, schema=MessageSchema, description="No prayer time provider could deliver the month.")
def timetable(args):
    """
    Generate a monthly prayer timetable.

    Prayer times are fetched from the configured providers (with fallback) and
    the Iqamah schedule is overlaid. If the request carries no "schedule", the
    saved profile schedule is used.

    Rule order matters: when ranges overlap, the rule listed first wins.
    """
    mosque = profile_to_dict(get_profile())

    try:
        if args.get('schedule') is not None:
            schedule = PrayerSchedule.from_dict(args['schedule'])
        else:
            schedule = get_saved_schedule()
    except ScheduleValidationError as e:
        abort(422, message=f"Invalid Iqamah schedule: {e}")

    display_policy = (
        args.get('displayPolicy')
        or (mosque or {}).get('displayPolicy')
        or current_app.config.get('DEFAULT_DISPLAY_POLICY')
    )
    if display_policy not in DisplayPolicy.ALL:
        current_app.logger.warning(f"Unknown display policy '{display_policy}' configured; using '{DisplayPolicy.ALL_DAYS}'.")
        display_policy = DisplayPolicy.ALL_DAYS

    latitude, longitude = args.get('latitude'), args.get('longitude')
    if latitude is None or longitude is None:
        location = geocode_city(args.get('city'), args.get('state'))
        if location.get("error"):
            abort(404, message=location["error"])
        latitude, longitude = location['lat'], location['lon']

    fajr_angle = args.get('fajrAngle')
    isha_angle = args.get('ishaAngle')
    if fajr_angle is None:
        fajr_angle = current_app.config.get('DEFAULT_FAJR_ANGLE')
    if isha_angle is None:
        isha_angle = current_app.config.get('DEFAULT_ISHA_ANGLE')

    today = datetime.date.today()
    month = args.get('month') or today.month
    year = args.get('year') or today.year

    try:
        return generate_monthly_timetable(
            latitude=latitude,
            longitude=longitude,
            month=month,
            year=year,
            schedule=schedule,
            display_policy=display_policy,
            fajr_angle=fajr_angle,
            isha_angle=isha_angle,
            asr_method=args.get('asrMethod', 0),
            compact_times=args.get('compactTimes', False),
            mosque=mosque,
        )
    except ProviderUnavailable as e:
        current_app.logger.error(f"Timetable generation failed: {e}")
        abort(502, message="Failed to fetch prayer times. Please try again later.")
