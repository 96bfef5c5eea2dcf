# promptshare/api/follows/schemas.py
from marshmallow import Schema, fields

class FollowStatusSchema(Schema):
    """GET /api/users/{user_id}/follow-status 응답 형식"""
    is_following = fields.Bool(required=True)
