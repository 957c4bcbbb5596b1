"""Analytics schemas."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates_schema
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from ..models import Analytics, AnalyticsType, DashboardSettings, PeriodType
from .common import QuerySchema, non_empty_mapping


class AnalyticsSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Analytics`` objects."""

    type = fields.Enum(AnalyticsType, by_value=True)
    period_type = fields.Enum(PeriodType, by_value=True)

    class Meta:
        model = Analytics
        include_fk = True


class DashboardSettingsSchema(SQLAlchemyAutoSchema):
    class Meta:
        model = DashboardSettings
        include_fk = True


class AnalyticsCreateSchema(Schema):
    type = fields.Enum(AnalyticsType, by_value=True, required=True)
    period_type = fields.Enum(PeriodType, by_value=True, required=True)
    period_start = fields.Date(required=True)
    period_end = fields.Date(required=True)
    metrics = fields.Dict(keys=fields.String(), required=True, validate=non_empty_mapping)
    insights = fields.Dict(keys=fields.String())
    score = fields.Float(validate=validate.Range(min=0, max=100))
    goals_progress = fields.Dict(keys=fields.String())
    comparisons = fields.Dict(keys=fields.String())

    @validates_schema
    def check_period(self, data, **kwargs):
        start, end = data.get("period_start"), data.get("period_end")
        if start and end and end < start:
            raise ValidationError("period_end must not be before period_start.", "period_end")


class AnalyticsUpdateSchema(AnalyticsCreateSchema):
    type = fields.Enum(AnalyticsType, by_value=True)
    period_type = fields.Enum(PeriodType, by_value=True)
    period_start = fields.Date()
    period_end = fields.Date()
    metrics = fields.Dict(keys=fields.String(), validate=non_empty_mapping)


class AnalyticsListQuerySchema(QuerySchema):
    type = fields.Enum(AnalyticsType, by_value=True)
    period_type = fields.Enum(PeriodType, by_value=True)
    start_date = fields.Date()
    end_date = fields.Date()


class DashboardQuerySchema(QuerySchema):
    period = fields.Enum(PeriodType, by_value=True, load_default=PeriodType.MONTHLY)


class DashboardSettingsUpdateSchema(Schema):
    widget_preferences = fields.Dict(keys=fields.String())
    chart_preferences = fields.Dict(keys=fields.String())
    notification_preferences = fields.Dict(keys=fields.String())
    theme = fields.String(validate=validate.OneOf(("light", "dark", "auto")))
    units_preference = fields.String(validate=validate.OneOf(("metric", "imperial")))
