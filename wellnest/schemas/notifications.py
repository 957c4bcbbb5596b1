"""Notification schemas."""

from __future__ import annotations

from datetime import timezone

from marshmallow import Schema, fields, validate
from marshmallow_sqlalchemy import SQLAlchemyAutoSchema

from ..models import DeliveryChannel, Notification, NotificationPreference, NotificationPriority, NotificationType
from .common import QuerySchema, UserSummarySchema


class NotificationSchema(SQLAlchemyAutoSchema):
    """Schema for serialising ``Notification`` objects."""

    type = fields.Enum(NotificationType, by_value=True)
    priority = fields.Enum(NotificationPriority, by_value=True)
    triggered_by_user = fields.Nested(UserSummarySchema, allow_none=True)

    class Meta:
        model = Notification
        include_fk = True


class NotificationPreferenceSchema(SQLAlchemyAutoSchema):
    notification_type = fields.Enum(NotificationType, by_value=True)
    delivery_channel = fields.Enum(DeliveryChannel, by_value=True)

    class Meta:
        model = NotificationPreference
        include_fk = True


class NotificationCreateSchema(Schema):
    user_id = fields.UUID(required=True)
    triggered_by_user_id = fields.UUID()
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    message = fields.String(required=True, validate=validate.Length(min=1, max=2000))
    type = fields.Enum(NotificationType, by_value=True, required=True)
    priority = fields.Enum(NotificationPriority, by_value=True, load_default=NotificationPriority.MEDIUM)
    data = fields.Dict(keys=fields.String())
    action_url = fields.String(validate=validate.Length(max=500))
    action_text = fields.String(validate=validate.Length(max=200))
    image_url = fields.URL()
    category = fields.String(validate=validate.Length(max=100))
    scheduled_for = fields.NaiveDateTime(timezone=timezone.utc)


class BulkNotificationSchema(Schema):
    notifications = fields.List(
        fields.Nested(NotificationCreateSchema), required=True, validate=validate.Length(min=1, max=100)
    )


class NotificationUpdateSchema(Schema):
    mark_as_read = fields.Boolean()
    mark_as_clicked = fields.Boolean()
    data = fields.Dict(keys=fields.String())
    is_active = fields.Boolean()


class NotificationListQuerySchema(QuerySchema):
    unread_only = fields.Boolean(load_default=False)
    category = fields.String(validate=validate.Length(max=100))


class PreferenceSchema(Schema):
    notification_type = fields.Enum(NotificationType, by_value=True, required=True)
    delivery_channel = fields.Enum(DeliveryChannel, by_value=True, required=True)
    is_enabled = fields.Boolean(load_default=True)
    settings = fields.Dict(keys=fields.String())


class PreferenceToggleSchema(Schema):
    notification_type = fields.Enum(NotificationType, by_value=True, required=True)
    delivery_channel = fields.Enum(DeliveryChannel, by_value=True, required=True)


class WorkoutReminderSchema(Schema):
    workout_id = fields.String(required=True, validate=validate.Length(min=1, max=100))
    type = fields.String(required=True, validate=validate.Length(min=1, max=100))
    scheduled_for = fields.NaiveDateTime(timezone=timezone.utc)


class AchievementSchema(Schema):
    id = fields.String(required=True, validate=validate.Length(min=1, max=100))
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    description = fields.String(validate=validate.Length(max=1000))


class SocialActivitySchema(Schema):
    # Recipient of the notification; the caller is recorded as the trigger.
    user_id = fields.UUID(required=True)
    message = fields.String(required=True, validate=validate.Length(min=1, max=2000))
    action_url = fields.String(validate=validate.Length(max=500))
    action_text = fields.String(validate=validate.Length(max=200))
