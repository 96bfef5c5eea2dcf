# promptshare/api/auth/routes.py

import logging
import jwt
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity
)
from marshmallow import ValidationError

from promptshare.api.auth.schemas import SocialLoginSchema, LogoutRequestSchema
from promptshare.services.google_auth_service import GoogleAuthService

auth_bp = Blueprint('auth_bp', __name__)

@auth_bp.route('/social', methods=['POST'])
def social_login():
    """
    소셜 로그인 및 회원가입을 처리하는 엔드포인트입니다.
    외부 ID 제공자로 확인된 이메일로 사용자를 찾고, 없으면 새로 만듭니다.
    """
    auth_service = current_app.services['auth']
    try:
        validated_data = SocialLoginSchema().load(request.get_json())
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400

    client_secrets_path = current_app.config['GOOGLE_CLIENT_SECRETS_PATH']
    if not client_secrets_path:
        raise ValueError("GOOGLE_CLIENT_SECRETS_PATH is not configured.")

    google_user_info = GoogleAuthService.exchange_code_for_user_info(
        auth_code=validated_data['auth_code'],
        client_secrets_path=client_secrets_path
    )
    if not google_user_info or not google_user_info.get('email'):
        return jsonify({"error_code": "INVALID_AUTH_CODE", "message": "유효하지 않은 인증 코드이거나 사용자 정보 조회에 실패했습니다."}), 401

    user, is_new_user = auth_service.get_or_create_user(google_user_info)

    identity = user['user_id']
    return jsonify({
        "access_token": create_access_token(identity=identity),
        "refresh_token": create_refresh_token(identity=identity),
        "user_id": identity,
        "is_new_user": is_new_user,
        "user_info": {
            "user_id": identity,
            "email": user['email'],
            "username": user['username'],
            "avatar_url": user.get('avatar_url')
        }
    }), 200


# --- 토큰 재발급 엔드포인트 ---
@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True) # Refresh Token만 허용하는 데코레이터
def refresh_token():
    """유효한 Refresh Token으로 새로운 Access Token을 발급합니다."""
    current_user_id = get_jwt_identity()
    new_access_token = create_access_token(identity=current_user_id)
    return jsonify(access_token=new_access_token), 200


# --- 로그아웃 엔드포인트 ---
@auth_bp.route('/logout', methods=['POST'])
def logout():
    """로그아웃. 전달받은 Access/Refresh 토큰을 무효화 목록에 추가합니다."""
    auth_service = current_app.services['auth']
    try:
        data = LogoutRequestSchema().load(request.get_json())
    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400

    secret_key = current_app.config['JWT_SECRET_KEY']
    algorithm = current_app.config.get('JWT_ALGORITHM', 'HS256')
    try:
        # 만료된 토큰도 무효화할 수 있도록 만료 검사는 하지 않습니다.
        decoded_access = jwt.decode(data['access_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})
        decoded_refresh = jwt.decode(data['refresh_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})
    except jwt.PyJWTError as e:
        logging.error(f"JWT 해독 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INVALID_TOKEN", "message": "유효하지 않은 토큰입니다."}), 422

    auth_service.logout_user(decoded_access['jti'], decoded_access['exp'],
                             decoded_refresh['jti'], decoded_refresh['exp'])
    return jsonify({"message": "로그아웃 되었습니다."}), 200
