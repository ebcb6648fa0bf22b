# iqamah_timetable/schemas.py

from marshmallow import Schema, fields, validate, validates_schema, ValidationError

from .utils.constants import DisplayPolicy, MAX_DAY_OF_MONTH, MAX_NOTES, MIN_DAY_OF_MONTH, RuleType
from .utils.time_utils import FormatError, normalize_clock

DAY_RANGE = validate.Range(min=MIN_DAY_OF_MONTH, max=MAX_DAY_OF_MONTH)


def validate_clock(value):
    """Accepts only "H:MM am|pm" clock strings."""
    try:
        normalize_clock(value)
    except FormatError:
        raise ValidationError("Time must look like 'H:MM am' or 'H:MM pm'.")


class MessageSchema(Schema):
    message = fields.Str(required=True)


# --- Iqamah Rule Schemas ---

class RuleSchema(Schema):
    """A single Iqamah range rule as sent by the editing form."""
    type = fields.Str(load_default=RuleType.FIXED, validate=validate.OneOf(RuleType.ALL))
    startDay = fields.Int(required=True, validate=DAY_RANGE)
    endDay = fields.Int(required=True, validate=DAY_RANGE)
    time = fields.Str(validate=validate_clock)
    offsetMinutes = fields.Int(validate=validate.Range(min=0))

    @validates_schema
    def validate_rule(self, data, **kwargs):
        if data['startDay'] > data['endDay']:
            raise ValidationError("startDay must not be after endDay.", field_name="endDay")
        if data.get('type') == RuleType.FIXED and not data.get('time'):
            raise ValidationError("A fixed rule needs a time.", field_name="time")
        if data.get('type') == RuleType.VARIABLE and data.get('time'):
            raise ValidationError("A variable rule takes offsetMinutes, not time.", field_name="time")
        if data.get('type') == RuleType.FIXED and data.get('offsetMinutes') is not None:
            raise ValidationError("A fixed rule takes time, not offsetMinutes.", field_name="offsetMinutes")


class RuleUpdateSchema(Schema):
    """Partial update of a rule. Cross-field checks happen against the stored rule."""
    startDay = fields.Int(validate=DAY_RANGE)
    endDay = fields.Int(validate=DAY_RANGE)
    time = fields.Str(validate=validate_clock)
    offsetMinutes = fields.Int(validate=validate.Range(min=0))


class RuleTypeChangeSchema(Schema):
    type = fields.Str(required=True, validate=validate.OneOf(RuleType.ALL))
    time = fields.Str(validate=validate_clock)
    offsetMinutes = fields.Int(validate=validate.Range(min=0))


class ScheduleSchema(Schema):
    """A saved schedule with its month-level flag."""
    schedule = fields.Dict(keys=fields.Str(), values=fields.List(fields.Dict()), required=True)
    hasAnyIqamah = fields.Bool(required=True)


# --- Mosque Profile Schemas ---

class NoteSchema(Schema):
    heading = fields.Str(load_default='')
    body = fields.Str(load_default='')


class FridaySalatSchema(Schema):
    title = fields.Str(load_default='Friday Salat')
    firstLabel = fields.Str(load_default='1st English Talk:')
    firstTime = fields.Str(load_default='1:10 PM')
    secondLabel = fields.Str(load_default='1st Khutbah:')
    secondTime = fields.Str(load_default='1:30 PM')


class MosqueProfileSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1))
    address = fields.Str(required=True, validate=validate.Length(min=1))
    phone = fields.Str(allow_none=True)
    website = fields.Str(allow_none=True)
    logoUrl = fields.Str(allow_none=True)
    notes = fields.List(fields.Nested(NoteSchema), load_default=list, validate=validate.Length(max=MAX_NOTES))
    fridaySalat = fields.Nested(FridaySalatSchema, allow_none=True)
    displayPolicy = fields.Str(load_default=DisplayPolicy.ALL_DAYS, validate=validate.OneOf(DisplayPolicy.ALL))


# --- Timetable Schemas ---

class TimetableArgsSchema(Schema):
    """Request body for generating a monthly timetable."""
    city = fields.Str()
    state = fields.Str()
    latitude = fields.Float(validate=validate.Range(min=-90, max=90))
    longitude = fields.Float(validate=validate.Range(min=-180, max=180))
    month = fields.Int(validate=validate.Range(min=1, max=12))
    year = fields.Int(validate=validate.Range(min=1900, max=2200))
    fajrAngle = fields.Float(allow_none=True, validate=validate.Range(min=0, max=30))
    ishaAngle = fields.Float(allow_none=True, validate=validate.Range(min=0, max=30))
    asrMethod = fields.Int(load_default=0, validate=validate.OneOf([0, 1]))
    displayPolicy = fields.Str(allow_none=True, validate=validate.OneOf(DisplayPolicy.ALL))
    # Optional schedule; when missing, the saved profile schedule is used.
    schedule = fields.Dict(allow_none=True)
    compactTimes = fields.Bool(load_default=False)

    @validates_schema
    def validate_location(self, data, **kwargs):
        has_coords = data.get('latitude') is not None and data.get('longitude') is not None
        has_city = bool(data.get('city')) and bool(data.get('state'))
        if not has_coords and not has_city:
            raise ValidationError("Provide latitude/longitude or city/state.")


class IqamahCellSchema(Schema):
    time = fields.Str(required=True)
    rangeIndex = fields.Int(required=True)
    visible = fields.Bool(required=True)


class TimetableRowSchema(Schema):
    day = fields.Int(required=True)
    date = fields.Str(required=True)
    weekday = fields.Str(required=True)
    hijri = fields.Str(required=True)
    times = fields.Dict(keys=fields.Str(), values=fields.Str(), required=True)
    iqamah = fields.Dict(keys=fields.Str(), values=fields.Nested(IqamahCellSchema, allow_none=True), required=True)


class TimetableSchema(Schema):
    monthName = fields.Str(required=True)
    month = fields.Int(required=True)
    year = fields.Int(required=True)
    hijriMonths = fields.List(fields.Str(), required=True)
    source = fields.Str(required=True)
    displayPolicy = fields.Str(required=True)
    customAngles = fields.Dict(required=True)
    hasAnyIqamah = fields.Bool(required=True)
    mosque = fields.Nested(MosqueProfileSchema, allow_none=True)
    rows = fields.List(fields.Nested(TimetableRowSchema), required=True)
