# iqamah_timetable/routes/profile_routes.py

from flask_smorest import Blueprint, abort

from ..schemas import (
    MessageSchema, MosqueProfileSchema, RuleSchema, RuleTypeChangeSchema, RuleUpdateSchema, ScheduleSchema
)
from ..services import profile_service
from ..services.iqamah.rules import ValidationError as ScheduleValidationError, rule_from_dict
from ..services.iqamah.schedule_config import add_rule, change_rule_type, remove_rule, update_rule
from ..services.iqamah.schedule_engine import has_any_iqamah
from ..utils.constants import PrayerKey

profile_bp = Blueprint(
    'Profile',
    __name__,
    url_prefix='/api/profile',
    description="Mosque profile and Iqamah schedule editing."
)


def _schedule_response(schedule):
    return {"schedule": schedule.to_dict(), "hasAnyIqamah": has_any_iqamah(schedule)}


def _prayer_or_404(prayer):
    key = PrayerKey.normalize(prayer)
    if key is None:
        abort(404, message=f"Unknown prayer '{prayer}'.")
    return key


def _edit_schedule(operation, edit):
    """Runs an edit against the stored schedule, turning validation failures into 422s."""
    try:
        return _schedule_response(profile_service.apply_schedule_edit(operation, edit))
    except ScheduleValidationError as e:
        abort(422, message=str(e))


@profile_bp.route('', methods=['GET'])
@profile_bp.response(200, MosqueProfileSchema, description="The saved mosque profile.")
@profile_bp.alt_response(404, schema=MessageSchema, description="No profile has been saved yet.")
def get_profile():
    """Get the mosque profile."""
    profile = profile_service.get_profile()
    if not profile:
        abort(404, message="No mosque profile saved yet.")
    return profile_service.profile_to_dict(profile)


@profile_bp.route('', methods=['PUT'])
@profile_bp.arguments(MosqueProfileSchema)
@profile_bp.response(200, MosqueProfileSchema, description="The updated mosque profile.")
def put_profile(args):
    """Create or update the mosque profile (identity, notes and Friday salat block)."""
    profile = profile_service.save_profile(args)
    return profile_service.profile_to_dict(profile)


@profile_bp.route('/schedule', methods=['GET'])
@profile_bp.response(200, ScheduleSchema, description="The saved Iqamah schedule.")
def get_schedule():
    """Get the saved Iqamah schedule."""
    return _schedule_response(profile_service.get_saved_schedule())


@profile_bp.route('/schedule/<string:prayer>/rules', methods=['POST'])
@profile_bp.arguments(RuleSchema)
@profile_bp.response(201, ScheduleSchema, description="The schedule with the rule appended.")
@profile_bp.alt_response(422, schema=MessageSchema, description="The rule is invalid.")
def post_rule(args, prayer):
    """
    Append an Iqamah rule for a prayer.

    Rules are checked in order and the first one covering a day wins, so a
    rule added after a broader range only applies to days the earlier rules
    leave uncovered.
    """
    key = _prayer_or_404(prayer)
    return _edit_schedule('add', lambda schedule: add_rule(schedule, key, rule_from_dict(args)))


@profile_bp.route('/schedule/<string:prayer>/rules/<int:index>', methods=['PATCH'])
@profile_bp.arguments(RuleUpdateSchema)
@profile_bp.response(200, ScheduleSchema, description="The schedule with the rule updated.")
@profile_bp.alt_response(422, schema=MessageSchema, description="The update would make the rule invalid.")
def patch_rule(args, prayer, index):
    """Update fields of an existing rule."""
    key = _prayer_or_404(prayer)
    return _edit_schedule('update', lambda schedule: update_rule(schedule, key, index, **args))


@profile_bp.route('/schedule/<string:prayer>/rules/<int:index>', methods=['DELETE'])
@profile_bp.response(200, ScheduleSchema, description="The schedule with the rule removed.")
@profile_bp.alt_response(422, schema=MessageSchema, description="No rule at that index.")
def delete_rule(prayer, index):
    """Remove a rule."""
    key = _prayer_or_404(prayer)
    return _edit_schedule('remove', lambda schedule: remove_rule(schedule, key, index))


@profile_bp.route('/schedule/<string:prayer>/rules/<int:index>/type', methods=['PUT'])
@profile_bp.arguments(RuleTypeChangeSchema)
@profile_bp.response(200, ScheduleSchema, description="The schedule with the rule switched to the new type.")
@profile_bp.alt_response(422, schema=MessageSchema, description="The new rule is invalid.")
def put_rule_type(args, prayer, index):
    """Switch a rule between fixed and variable, keeping its day range."""
    key = _prayer_or_404(prayer)
    return _edit_schedule('change_type', lambda schedule: change_rule_type(
        schedule, key, index, args['type'],
        time=args.get('time'),
        offset_minutes=args.get('offsetMinutes'),
    ))
