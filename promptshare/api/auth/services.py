# promptshare/api/auth/services.py
import logging
from datetime import datetime, timezone
from typing import Dict, Any, Optional, Tuple
from dataclasses import asdict

from google.cloud.firestore_v1.base_query import FieldFilter

from promptshare.models.user import User, UserRole, make_user_id_for_email
from promptshare.services.firestore_service import EntityStore, USERS, REVOKED_TOKENS
from promptshare.utils.datetime_utils import DateTimeUtils

class AuthService:
    """
    외부 ID 제공자로 확인된 사용자 정보를 User 문서와 연결하고, 토큰 무효화 목록을 관리합니다.
    """
    def __init__(self, store: EntityStore):
        self.store = store
        self.users_ref = store.collection(USERS)
        self.revoked_tokens_ref = store.collection(REVOKED_TOKENS)

    @staticmethod
    def _username_from_profile(profile: Dict[str, Any]) -> str:
        name = profile.get('name') or profile.get('email', '').split('@')[0]
        return name.replace(" ", "").lower()

    def get_or_create_user(self, profile: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
        """
        이메일로 사용자를 찾고, 없으면 최초 로그인으로 보고 새로 생성합니다.
        - 사용자 문서 ID 는 이메일에서 결정되므로, 동시에 들어온 최초 로그인이
          여러 개여도 create() 는 하나만 성공하고 나머지는 그 문서를 다시 읽습니다.
        :return: (사용자 딕셔너리, 신규 생성 여부)
        """
        email = profile.get('email')
        if not email:
            raise ValueError("외부 ID 제공자의 사용자 정보에 email 이 없습니다.")

        user_id = make_user_id_for_email(email)
        existing = self.store.get(USERS, user_id) or self._find_by_email(email)
        if existing is not None:
            return existing, False

        new_user = User(
            user_id=user_id,
            email=email,
            username=self._username_from_profile(profile),
            avatar_url=profile.get('picture'),
            role=UserRole.USER.value
        )
        user_data = asdict(new_user)
        if not self.store.create_unique(USERS, user_id, user_data):
            return self.store.get(USERS, user_id), False

        logging.info(f"신규 사용자 생성 (user_id: {user_id})")
        return user_data, True

    def _find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """이메일 기반 ID 가 아닌 문서(직접 등록된 관리자 계정 등)를 이메일로 찾습니다."""
        query = self.users_ref.where(filter=FieldFilter('email', '==', email)).limit(1).stream()
        user_doc = next(query, None)
        if user_doc is None:
            return None
        return DateTimeUtils.from_firestore(user_doc.to_dict())

    # --- Blocklist 관련 로직 ---
    def add_token_to_blocklist(self, jti: str, expires: datetime):
        """전달받은 토큰의 jti를 만료 시간과 함께 Firestore에 저장합니다."""
        try:
            self.store.set(REVOKED_TOKENS, jti, {
                'revoked_at': DateTimeUtils.now(),
                'expires_at': expires
            })
        except Exception as e:
            logging.error(f"Blocklist 토큰 추가 실패 (jti: {jti}): {e}", exc_info=True)
            raise

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        """jti를 이용해 해당 토큰이 무효화 목록에 있는지 확인합니다."""
        jti = jwt_payload.get('jti')
        if not jti:
            return False
        return self.store.get(REVOKED_TOKENS, jti) is not None

    def logout_user(self, access_jti: str, access_exp: int, refresh_jti: str, refresh_exp: int):
        """Access 토큰과 Refresh 토큰을 모두 Blocklist에 추가합니다."""
        self.add_token_to_blocklist(access_jti, datetime.fromtimestamp(access_exp, tz=timezone.utc))
        self.add_token_to_blocklist(refresh_jti, datetime.fromtimestamp(refresh_exp, tz=timezone.utc))
        logging.info(f"사용자 로그아웃 처리 완료. JTI: {access_jti[:8]}..., {refresh_jti[:8]}...")
