# promptshare/api/users/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required
from marshmallow import ValidationError

from promptshare.api.users.schemas import UserPublicResponseSchema, UserSettingsSchema, UserStatsSchema
from promptshare.core.security import get_current_user

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/<string:user_id>', methods=['GET'])
def get_user_profile(user_id: str):
    """특정 사용자의 공개 프로필 정보(통계 포함)를 조회합니다."""
    user_service = current_app.services['users']
    user_profile = user_service.get_user_profile(user_id)
    if not user_profile:
        return jsonify({"error_code": "RESOURCE_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserPublicResponseSchema().dump(user_profile)), 200


@users_bp.route('/<string:user_id>/stats', methods=['GET'])
def get_user_stats(user_id: str):
    user_service = current_app.services['users']
    stats = user_service.get_user_stats(user_id)
    return jsonify(UserStatsSchema().dump(stats)), 200


@users_bp.route('/me/settings', methods=['PATCH'])
@jwt_required()
def update_my_settings():
    """
    현재 로그인된 사용자의 이름과 알림 설정을 변경합니다.
    """
    user_service = current_app.services['users']
    user = get_current_user()
    try:
        data = UserSettingsSchema().load(request.get_json())
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    user_service.update_settings(user['user_id'], data)
    logging.info(f"사용자 설정 변경 요청 처리 (user_id: {user['user_id']})")
    return jsonify({"message": "설정이 저장되었습니다."}), 200
