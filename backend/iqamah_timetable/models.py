# iqamah_timetable/models.py

from datetime import datetime

from . import db
from .utils.constants import DisplayPolicy


class MosqueProfile(db.Model):
    """
    The mosque profile shown on the timetable header, with its saved Iqamah schedule.

    The application keeps a single profile row; it plays the role of a small
    local key-value store rather than a multi-tenant table.
    """
    __tablename__ = 'mosque_profile'

    id = db.Column(db.Integer, primary_key=True)

    # --- Identity ---
    name = db.Column(db.String(200), nullable=False, default='')
    address = db.Column(db.String(255), nullable=False, default='')
    phone = db.Column(db.String(50), nullable=True)
    website = db.Column(db.String(255), nullable=True)
    logo_url = db.Column(db.String(500), nullable=True)

    # --- Free-text content ---
    # List of up to three {"heading": str, "body": str} notes.
    notes = db.Column(db.JSON, nullable=False, default=list)
    # {"title": str, "firstLabel": str, "firstTime": str, "secondLabel": str, "secondTime": str}
    friday_salat = db.Column(db.JSON, nullable=True)

    # --- Iqamah configuration ---
    # Wire form of PrayerSchedule: {"fajr": [{"type": "fixed", ...}], ...}
    iqamah_schedule = db.Column(db.JSON, nullable=False, default=dict)
    display_policy = db.Column(db.String(20), nullable=False, default=DisplayPolicy.ALL_DAYS)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<MosqueProfile ID:{self.id} Name:{self.name}>'
