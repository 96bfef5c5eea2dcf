# promptshare/api/users/schemas.py
from marshmallow import Schema, fields, validate

class AuthorSchema(Schema):
    """프롬프트/댓글/알림 응답에 포함될 작성자 정보 스키마."""
    user_id = fields.Str(required=True)
    username = fields.Str(allow_none=True)
    avatar_url = fields.Str(allow_none=True)

class UserPublicResponseSchema(Schema):
    """
    GET /api/users/{user_id}
    다른 사용자의 프로필 정보를 응답할 때 사용하는 스키마.
    민감한 정보(email, notification_settings)는 제외합니다.
    """
    user_id = fields.Str(required=True, dump_only=True)
    username = fields.Str(required=True)
    avatar_url = fields.Str(allow_none=True)
    role = fields.Str()
    prompt_count = fields.Int()
    follower_count = fields.Int()
    following_count = fields.Int()
    total_likes = fields.Int()
    created_at = fields.DateTime()

class UserStatsSchema(Schema):
    prompt_count = fields.Int(required=True)
    follower_count = fields.Int(required=True)
    following_count = fields.Int(required=True)
    total_likes = fields.Int(required=True)

class CreatorResponseSchema(Schema):
    """GET /api/users/discover 응답 항목"""
    user_id = fields.Str(required=True)
    username = fields.Str(required=True)
    avatar_url = fields.Str(allow_none=True)
    role = fields.Str()
    prompt_count = fields.Int(required=True)
    follower_count = fields.Int(required=True)

class UserSettingsSchema(Schema):
    """
    PATCH /api/users/me/settings
    사용자 이름과 알림 설정 변경 요청 본문의 유효성을 검사합니다.
    """
    username = fields.Str(validate=[
        validate.Length(min=3, max=30, error="사용자 이름은 3~30자 사이여야 합니다."),
        validate.Regexp(r'^[A-Za-z0-9_.]+$', error="사용자 이름에는 영문, 숫자, '_', '.'만 사용할 수 있습니다.")
    ])
    notification_settings = fields.Dict(
        keys=fields.Str(validate=validate.OneOf(["like", "comment", "follow"])),
        values=fields.Bool()
    )
