# promptshare/core/security.py
import logging
from typing import Any, Dict, Optional

from flask import current_app
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import InvalidTokenError

from promptshare.core.errors import UnauthorizedError


def get_current_user() -> Dict[str, Any]:
    """
    검증된 JWT 에서 행위자 ID 를 꺼내고, 매 요청마다 users 컬렉션에서 다시 조회합니다.
    - 클라이언트가 보낸 식별자는 신뢰하지 않습니다.
    - 토큰은 유효하지만 사용자 문서가 없으면 UnauthorizedError 를 발생시킵니다.
    """
    user_id = get_jwt_identity()
    if not user_id:
        raise UnauthorizedError()

    user = current_app.services['users'].get_user_by_id(user_id)
    if user is None:
        raise UnauthorizedError("토큰의 사용자 정보를 찾을 수 없습니다.")
    return user


def get_optional_user_id() -> Optional[str]:
    """
    공개 조회 API 에서 사용합니다.
    토큰이 없거나 만료/무효화/손상된 경우 401 대신 익명(None)으로 처리합니다.
    """
    try:
        verify_jwt_in_request(optional=True)
    except (InvalidTokenError, JWTExtendedException) as e:
        logging.info(f"공개 API 요청의 토큰을 무시하고 익명으로 처리합니다: {type(e).__name__}")
        return None
    return get_jwt_identity()


def is_admin(user: Dict[str, Any]) -> bool:
    return user.get('role') == 'admin'
