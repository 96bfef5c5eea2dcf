# promptshare/api/follows/routes.py
from flask import Blueprint, jsonify, current_app
from flask_jwt_extended import jwt_required

from promptshare.api.follows.schemas import FollowStatusSchema
from promptshare.core.security import get_current_user, get_optional_user_id

follows_bp = Blueprint('follows_bp', __name__)

@follows_bp.route('/<string:user_id>/follow', methods=['POST'])
@jwt_required()
def follow_user(user_id: str):
    """
    사용자를 팔로우합니다. 이미 팔로우 중이면 아무것도 바뀌지 않습니다.
    """
    follow_service = current_app.services['follows']
    user = get_current_user()
    created = follow_service.follow(user['user_id'], user_id)
    message = "팔로우했습니다." if created else "이미 팔로우 중입니다."
    return jsonify({"message": message}), 200


@follows_bp.route('/<string:user_id>/follow', methods=['DELETE'])
@jwt_required()
def unfollow_user(user_id: str):
    follow_service = current_app.services['follows']
    user = get_current_user()
    follow_service.unfollow(user['user_id'], user_id)
    return jsonify({"message": "언팔로우했습니다."}), 200


@follows_bp.route('/<string:user_id>/follow-status', methods=['GET'])
def follow_status(user_id: str):
    follow_service = current_app.services['follows']
    is_following = follow_service.is_following(get_optional_user_id(), user_id)
    return jsonify(FollowStatusSchema().dump({"is_following": is_following})), 200
