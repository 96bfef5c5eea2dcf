# promptshare/api/comments/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from promptshare.api.comments.schemas import (
    CommentCreateSchema, CommentUpdateSchema, CommentResponseSchema, CommentThreadSchema
)
from promptshare.core.security import get_current_user, get_optional_user_id

comments_bp = Blueprint('comments_bp', __name__)

@comments_bp.route('/prompts/<string:prompt_id>/comments', methods=['POST'])
@jwt_required()
def create_comment(prompt_id: str):
    """
    특정 프롬프트에 댓글 또는 답글을 작성합니다.
    - 성공 시, 작성자 정보가 포함된 댓글을 201 Created 상태 코드와 함께 반환합니다.
    - 프롬프트 작성자에게 댓글 알림이 생성됩니다.
    """
    comment_service = current_app.services['comments']
    user = get_current_user()
    try:
        data = CommentCreateSchema().load(request.get_json())
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    new_comment = comment_service.create_comment(
        user['user_id'], prompt_id, data['content'], data.get('parent_comment_id')
    )
    return jsonify(CommentResponseSchema().dump(new_comment)), 201


@comments_bp.route('/prompts/<string:prompt_id>/comments', methods=['GET'])
def get_comments(prompt_id: str):
    """루트 댓글(최신순)과 각 댓글의 답글(작성순)을 조회합니다."""
    comment_service = current_app.services['comments']
    threads = comment_service.list_comments(prompt_id, get_optional_user_id())
    return jsonify(CommentThreadSchema(many=True).dump(threads)), 200


@comments_bp.route('/comments/<string:comment_id>', methods=['PATCH'])
@jwt_required()
def edit_comment(comment_id: str):
    comment_service = current_app.services['comments']
    user = get_current_user()
    try:
        data = CommentUpdateSchema().load(request.get_json())
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    updated = comment_service.edit_comment(user['user_id'], comment_id, data['content'])
    return jsonify(CommentResponseSchema().dump(updated)), 200


@comments_bp.route('/comments/<string:comment_id>', methods=['DELETE'])
@jwt_required()
def delete_comment(comment_id: str):
    """
    댓글을 삭제합니다. (작성자 본인 또는 관리자만 가능)
    - 루트 댓글이면 답글도 함께 삭제됩니다.
    """
    comment_service = current_app.services['comments']
    user = get_current_user()
    deleted = comment_service.delete_comment(user, comment_id)
    return jsonify({"message": "댓글이 삭제되었습니다.", "deleted_count": deleted}), 200


@comments_bp.route('/comments/<string:comment_id>/like', methods=['POST'])
@jwt_required()
def toggle_comment_like(comment_id: str):
    comment_service = current_app.services['comments']
    user = get_current_user()
    comment = comment_service.toggle_comment_like(user['user_id'], comment_id)
    return jsonify(CommentResponseSchema().dump(comment)), 200
