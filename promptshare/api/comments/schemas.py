# promptshare/api/comments/schemas.py
from marshmallow import Schema, fields, validate
from promptshare.api.users.schemas import AuthorSchema

class CommentCreateSchema(Schema):
    """
    POST /api/prompts/{prompt_id}/comments
    댓글 생성을 요청할 때의 데이터 형식을 정의하고 유효성을 검사합니다.
    """
    content = fields.Str(required=True, validate=validate.Length(min=1, max=500, error="댓글은 1~500자 사이여야 합니다."))
    parent_comment_id = fields.Str(allow_none=True, load_default=None)

class CommentUpdateSchema(Schema):
    content = fields.Str(required=True, validate=validate.Length(min=1, max=500, error="댓글은 1~500자 사이여야 합니다."))

class CommentResponseSchema(Schema):
    """
    댓글 정보 응답을 위한 최종 JSON 형식을 정의합니다.
    """
    comment_id = fields.Str(required=True)
    prompt_id = fields.Str(required=True)
    author = fields.Nested(AuthorSchema, required=True)
    content = fields.Str(required=True)
    parent_comment_id = fields.Str(allow_none=True)
    like_count = fields.Int(required=True)
    is_edited = fields.Bool()
    created_at = fields.DateTime(required=True)
    updated_at = fields.DateTime()

    # 서비스 로직에서 채워주는 응답 전용 필드
    is_liked = fields.Bool(dump_only=True, dump_default=False)

class CommentThreadSchema(CommentResponseSchema):
    """루트 댓글과 그 답글 목록"""
    replies = fields.List(fields.Nested(CommentResponseSchema), dump_default=list)
