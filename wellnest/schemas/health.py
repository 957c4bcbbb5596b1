"""Health log and reminder schemas."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates_schema
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from ..models import HealthLog, Reminder, ReminderFrequency, ReminderStatus, ReminderType
from .common import QuerySchema


class HealthLogSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``HealthLog`` objects."""

    class Meta:
        model = HealthLog
        include_fk = True


class HealthLogCreateSchema(Schema):
    date = fields.Date(required=True)
    calories = fields.Integer(validate=validate.Range(min=0, max=10000))
    steps = fields.Integer(validate=validate.Range(min=0, max=100000))
    hydration_ml = fields.Integer(validate=validate.Range(min=0, max=10000))
    sleep_hours = fields.Float(validate=validate.Range(min=0, max=24))
    vitamin_summary = fields.String(validate=validate.Length(max=500))
    additional_metrics = fields.Dict(keys=fields.String())


class HealthLogUpdateSchema(HealthLogCreateSchema):
    date = fields.Date()


class ReminderSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Reminder`` objects."""

    type = fields.Enum(ReminderType, by_value=True)
    frequency = fields.Enum(ReminderFrequency, by_value=True)
    status = fields.Enum(ReminderStatus, by_value=True)
    time = fields.Time(format="%H:%M")
    metadata = fields.Raw(attribute="metadata_")

    class Meta:
        model = Reminder
        include_fk = True
        exclude = ("metadata_",)


class ReminderCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(validate=validate.Length(max=1000))
    type = fields.Enum(ReminderType, by_value=True, required=True)
    frequency = fields.Enum(ReminderFrequency, by_value=True, required=True)
    time = fields.Time(format="%H:%M", required=True)
    start_date = fields.Date()
    end_date = fields.Date()
    custom_schedule = fields.Dict(keys=fields.String())
    is_notification_enabled = fields.Boolean(load_default=True)
    metadata = fields.Dict(keys=fields.String())

    @validates_schema
    def check_dates(self, data, **kwargs):
        start, end = data.get("start_date"), data.get("end_date")
        if start and end and end <= start:
            raise ValidationError("end_date must be after start_date.", "end_date")


class ReminderUpdateSchema(ReminderCreateSchema):
    title = fields.String(validate=validate.Length(min=1, max=200))
    type = fields.Enum(ReminderType, by_value=True)
    frequency = fields.Enum(ReminderFrequency, by_value=True)
    time = fields.Time(format="%H:%M")
    is_notification_enabled = fields.Boolean()


class ReminderStatusSchema(Schema):
    status = fields.Enum(ReminderStatus, by_value=True, required=True)


class SnoozeSchema(Schema):
    minutes = fields.Integer(load_default=10, validate=validate.Range(min=1, max=1440))


class ReminderListQuerySchema(QuerySchema):
    status = fields.Enum(ReminderStatus, by_value=True)
    type = fields.Enum(ReminderType, by_value=True)
