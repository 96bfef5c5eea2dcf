# promptshare/api/auth/schemas.py
from marshmallow import Schema, fields, validate

# 현재 연동된 외부 ID 제공자
SUPPORTED_PROVIDERS = ["google"]

class SocialLoginSchema(Schema):
    """POST /api/auth/social 요청 본문. 인증 코드는 외부 ID 제공자와 교환됩니다."""
    provider = fields.Str(
        required=True,
        validate=validate.OneOf(SUPPORTED_PROVIDERS, error="지원하지 않는 로그인 제공자입니다.")
    )
    auth_code = fields.Str(required=True, validate=validate.Length(min=1))

class LogoutRequestSchema(Schema):
    """무효화할 Access/Refresh 토큰 한 쌍"""
    access_token = fields.Str(required=True, validate=validate.Length(min=1))
    refresh_token = fields.Str(required=True, validate=validate.Length(min=1))
