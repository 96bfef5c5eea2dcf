# promptshare/api/notifications/schemas.py
from marshmallow import Schema, fields

from promptshare.api.users.schemas import AuthorSchema

class RelatedPromptSchema(Schema):
    prompt_id = fields.Str()
    title = fields.Str()

class NotificationResponseSchema(Schema):
    notification_id = fields.Str(required=True)
    type = fields.Str(required=True)
    message = fields.Str(required=True)
    read = fields.Bool(required=True)
    from_user = fields.Nested(AuthorSchema, allow_none=True)
    related_prompt = fields.Nested(RelatedPromptSchema, allow_none=True)
    created_at = fields.DateTime(required=True)

class NotificationUpdateSchema(Schema):
    """PATCH /api/notifications/{notification_id}"""
    read = fields.Bool(load_default=True)
