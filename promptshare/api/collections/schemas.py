# promptshare/api/collections/schemas.py
from marshmallow import Schema, fields, validate

from promptshare.api.users.schemas import AuthorSchema

class CollectionCreateSchema(Schema):
    """POST /api/collections 요청 본문의 유효성을 검사합니다."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100, error="컬렉션 이름은 1~100자 사이여야 합니다."))
    description = fields.Str(allow_none=True, validate=validate.Length(max=500))
    is_public = fields.Bool(load_default=True)
    tags = fields.List(fields.Str(), load_default=list)

class CollectionResponseSchema(Schema):
    collection_id = fields.Str(required=True)
    creator = fields.Nested(AuthorSchema)
    name = fields.Str(required=True)
    description = fields.Str(allow_none=True)
    is_public = fields.Bool()
    tags = fields.List(fields.Str())
    prompts = fields.List(fields.Str())
    created_at = fields.DateTime()
