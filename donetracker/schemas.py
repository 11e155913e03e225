"""Marshmallow schemas for the Task wire format."""

from datetime import timezone

from marshmallow import EXCLUDE, Schema, ValidationError, fields, pre_load


class UTCDateTime(fields.DateTime):
    """Naive UTC timestamps dumped as ISO-8601 with a Z suffix."""

    def _serialize(self, value, attr, obj, **kwargs):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')


def not_blank(value):
    if not value or not value.strip():
        raise ValidationError('Task text is required')


class TaskSchema(Schema):
    """Schema for task serialization."""

    id = fields.Int(dump_only=True)
    text = fields.Str()
    time_spent = fields.Int(data_key='timeSpent')
    difficulty = fields.Str()
    date_completed = UTCDateTime(data_key='dateCompleted')
    created_at = UTCDateTime(data_key='createdAt', dump_only=True)


class TaskCreateSchema(Schema):
    """Schema for task creation.

    Optional fields that arrive empty fall back to the model defaults.
    """

    class Meta:
        unknown = EXCLUDE

    text = fields.Str(required=True, validate=not_blank)
    time_spent = fields.Int(data_key='timeSpent')
    difficulty = fields.Str()
    date_completed = fields.DateTime(data_key='dateCompleted')

    @pre_load
    def drop_empty(self, data, **kwargs):
        return {
            key: value for key, value in data.items()
            if key == 'text' or value not in (None, '', 0)
        }


class TaskUpdateSchema(Schema):
    """Schema for partial task updates. Unknown keys such as id are ignored."""

    class Meta:
        unknown = EXCLUDE

    text = fields.Str(validate=not_blank)
    time_spent = fields.Int(data_key='timeSpent')
    difficulty = fields.Str()
    date_completed = fields.DateTime(data_key='dateCompleted')

    @pre_load
    def drop_empty_date(self, data, **kwargs):
        if not data.get('dateCompleted'):
            data = {key: value for key, value in data.items() if key != 'dateCompleted'}
        return data


task_schema = TaskSchema()
tasks_schema = TaskSchema(many=True)
