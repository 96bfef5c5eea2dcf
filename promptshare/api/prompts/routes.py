# promptshare/api/prompts/routes.py
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from promptshare.api.prompts.schemas import PromptCreateSchema, PromptUpdateSchema, PromptResponseSchema
from promptshare.core.security import get_current_user, get_optional_user_id

prompts_bp = Blueprint('prompts_bp', __name__)

@prompts_bp.route('', methods=['POST'])
@jwt_required()
def create_prompt():
    """새 프롬프트를 작성합니다. 작성자는 토큰의 사용자입니다."""
    prompt_service = current_app.services['prompts']
    user = get_current_user()
    try:
        data = PromptCreateSchema().load(request.get_json())
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    new_prompt = prompt_service.create_prompt(user['user_id'], data)
    return jsonify(PromptResponseSchema().dump(new_prompt)), 201


@prompts_bp.route('/saved', methods=['GET'])
@jwt_required()
def get_saved_prompts():
    prompt_service = current_app.services['prompts']
    user = get_current_user()
    prompts = prompt_service.list_saved(user['user_id'])
    return jsonify(PromptResponseSchema(many=True).dump(prompts)), 200


@prompts_bp.route('/user/<string:user_id>', methods=['GET'])
def get_user_prompts(user_id: str):
    """특정 사용자가 작성한 프롬프트 목록 (최신순)"""
    prompt_service = current_app.services['prompts']
    prompts = prompt_service.list_by_creator(user_id, get_optional_user_id())
    return jsonify(PromptResponseSchema(many=True).dump(prompts)), 200


@prompts_bp.route('/<string:prompt_id>', methods=['GET'])
def get_prompt(prompt_id: str):
    """
    프롬프트 상세 조회. 조회할 때마다 조회수가 1 증가합니다.
    """
    prompt_service = current_app.services['prompts']
    prompt = prompt_service.get_prompt(prompt_id, get_optional_user_id())
    return jsonify(PromptResponseSchema().dump(prompt)), 200


@prompts_bp.route('/<string:prompt_id>', methods=['PATCH'])
@jwt_required()
def update_prompt(prompt_id: str):
    prompt_service = current_app.services['prompts']
    user = get_current_user()
    try:
        data = PromptUpdateSchema().load(request.get_json())
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    updated = prompt_service.update_prompt(user['user_id'], prompt_id, data)
    return jsonify(PromptResponseSchema().dump(updated)), 200


@prompts_bp.route('/<string:prompt_id>', methods=['DELETE'])
@jwt_required()
def delete_prompt(prompt_id: str):
    """프롬프트 삭제 (작성자 본인 또는 관리자)"""
    prompt_service = current_app.services['prompts']
    user = get_current_user()
    prompt_service.delete_prompt(user, prompt_id)
    return jsonify({"message": "프롬프트가 삭제되었습니다."}), 200


@prompts_bp.route('/<string:prompt_id>/like', methods=['POST'])
@jwt_required()
def toggle_prompt_like(prompt_id: str):
    """
    프롬프트 좋아요를 누르거나 취소합니다.
    - 응답에는 갱신된 프롬프트와 like_count, is_liked 가 포함됩니다.
    """
    prompt_service = current_app.services['prompts']
    user = get_current_user()
    prompt = prompt_service.toggle_like(user['user_id'], prompt_id)
    return jsonify(PromptResponseSchema().dump(prompt)), 200


@prompts_bp.route('/<string:prompt_id>/save', methods=['POST'])
@jwt_required()
def save_prompt(prompt_id: str):
    prompt_service = current_app.services['prompts']
    user = get_current_user()
    created = prompt_service.save_prompt(user['user_id'], prompt_id)
    message = "프롬프트를 저장했습니다." if created else "이미 저장된 프롬프트입니다."
    return jsonify({"message": message, "is_saved": True}), 200


@prompts_bp.route('/<string:prompt_id>/save', methods=['DELETE'])
@jwt_required()
def unsave_prompt(prompt_id: str):
    prompt_service = current_app.services['prompts']
    user = get_current_user()
    prompt_service.unsave_prompt(user['user_id'], prompt_id)
    return jsonify({"message": "저장을 취소했습니다.", "is_saved": False}), 200
