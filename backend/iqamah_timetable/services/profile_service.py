from typing import Any, Callable, Dict, Optional

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from .. import db
from ..metrics import SCHEDULE_EDITS_TOTAL
from ..models import MosqueProfile
from ..utils.constants import DisplayPolicy
from .iqamah.rules import PrayerSchedule, ValidationError

PROFILE_ID = 1


def get_profile() -> Optional[MosqueProfile]:
    return db.session.get(MosqueProfile, PROFILE_ID)


def profile_to_dict(profile: Optional[MosqueProfile]) -> Optional[Dict[str, Any]]:
    """Serializes the profile to the camelCase shape used by the API."""
    if not profile:
        return None
    return {
        "name": profile.name,
        "address": profile.address,
        "phone": profile.phone,
        "website": profile.website,
        "logoUrl": profile.logo_url,
        "notes": profile.notes or [],
        "fridaySalat": profile.friday_salat,
        "displayPolicy": profile.display_policy or DisplayPolicy.ALL_DAYS,
    }


def _get_or_create_profile() -> MosqueProfile:
    profile = get_profile()
    if not profile:
        profile = MosqueProfile(id=PROFILE_ID, notes=[], iqamah_schedule={})
        db.session.add(profile)
    return profile


def save_profile(data: Dict[str, Any]) -> MosqueProfile:
    """Creates or updates the mosque identity, notes and Friday block. The schedule is left alone."""
    profile = _get_or_create_profile()
    profile.name = data['name']
    profile.address = data['address']
    profile.phone = data.get('phone')
    profile.website = data.get('website')
    profile.logo_url = data.get('logoUrl')
    profile.notes = data.get('notes') or []
    profile.friday_salat = data.get('fridaySalat')
    profile.display_policy = data.get('displayPolicy') or DisplayPolicy.ALL_DAYS

    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Profile save failed: {e}", exc_info=True)
        raise
    current_app.logger.info(f"Saved mosque profile '{profile.name}'.")
    return profile


def get_saved_schedule() -> PrayerSchedule:
    """Loads the stored schedule. A missing profile means an empty schedule."""
    profile = get_profile()
    if not profile or not profile.iqamah_schedule:
        return PrayerSchedule()
    return PrayerSchedule.from_dict(profile.iqamah_schedule)


def apply_schedule_edit(operation: str, edit: Callable[[PrayerSchedule], PrayerSchedule]) -> PrayerSchedule:
    """
    Applies an edit function to the stored schedule and saves the result.

    The edit runs before anything is written, so a ValidationError leaves the
    stored schedule exactly as it was.
    """
    current = get_saved_schedule()
    try:
        updated = edit(current)
    except ValidationError as e:
        SCHEDULE_EDITS_TOTAL.labels(operation=operation, status='rejected').inc()
        current_app.logger.info(f"Schedule edit '{operation}' rejected: {e}")
        raise

    profile = _get_or_create_profile()
    profile.iqamah_schedule = updated.to_dict()
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        SCHEDULE_EDITS_TOTAL.labels(operation=operation, status='error').inc()
        current_app.logger.error(f"Schedule edit '{operation}' could not be saved: {e}", exc_info=True)
        raise

    SCHEDULE_EDITS_TOTAL.labels(operation=operation, status='success').inc()
    current_app.logger.info(f"Schedule edit '{operation}' saved: {updated!r}")
    return updated
