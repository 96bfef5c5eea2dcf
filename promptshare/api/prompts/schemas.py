# promptshare/api/prompts/schemas.py
from marshmallow import Schema, fields, validate

from promptshare.api.users.schemas import AuthorSchema
from promptshare.models.prompt import CATEGORIES, DIFFICULTIES

class PromptCreateSchema(Schema):
    """POST /api/prompts 요청 본문의 유효성을 검사합니다."""
    title = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    body = fields.Str(required=True, validate=validate.Length(min=1, max=10000))
    tags = fields.List(fields.Str(validate=validate.Length(min=1, max=50)), load_default=list,
                       validate=validate.Length(max=20))
    category = fields.Str(load_default="other", validate=validate.OneOf(CATEGORIES))
    difficulty = fields.Str(load_default="beginner", validate=validate.OneOf(DIFFICULTIES))
    is_template = fields.Bool(load_default=False)
    sample_result = fields.Str(allow_none=True, validate=validate.Length(max=10000))

class PromptUpdateSchema(Schema):
    """PATCH /api/prompts/{prompt_id} 부분 업데이트용 스키마."""
    title = fields.Str(validate=validate.Length(min=1, max=200))
    body = fields.Str(validate=validate.Length(min=1, max=10000))
    tags = fields.List(fields.Str(validate=validate.Length(min=1, max=50)), validate=validate.Length(max=20))
    category = fields.Str(validate=validate.OneOf(CATEGORIES))
    difficulty = fields.Str(validate=validate.OneOf(DIFFICULTIES))
    is_template = fields.Bool()
    sample_result = fields.Str(allow_none=True, validate=validate.Length(max=10000))

class PromptResponseSchema(Schema):
    """프롬프트 응답을 위한 최종 JSON 형식을 정의합니다."""
    prompt_id = fields.Str(dump_only=True)
    creator = fields.Nested(AuthorSchema)
    title = fields.Str()
    body = fields.Str()
    tags = fields.List(fields.Str())
    category = fields.Str()
    difficulty = fields.Str()
    likes = fields.List(fields.Str())
    like_count = fields.Int()
    views = fields.Int()
    trending_score = fields.Float()
    is_template = fields.Bool()
    featured = fields.Bool()
    sample_result = fields.Str(allow_none=True)
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    is_liked = fields.Bool(dump_only=True, dump_default=False)
