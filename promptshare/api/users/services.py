# promptshare/api/users/services.py
import logging
from typing import Optional, Dict, Any

from google.cloud.firestore_v1.base_query import FieldFilter

from promptshare.api.follows.services import FollowService
from promptshare.api.prompts.services import PromptService
from promptshare.core.errors import ConflictError, NotFoundError
from promptshare.services.firestore_service import EntityStore, USERS

class UserService:
    """
    사용자 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 프롬프트 수/팔로워 수 같은 통계는 저장하지 않고 다른 서비스에서 집계해 옵니다.
    """
    def __init__(self, store: EntityStore, prompt_service: PromptService, follow_service: FollowService):
        self.store = store
        self.users_ref = store.collection(USERS)
        self.prompt_service = prompt_service
        self.follow_service = follow_service

    def get_user_by_id(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        사용자 ID로 Firestore에서 사용자 문서를 찾아 딕셔너리로 반환합니다.
        """
        try:
            return self.store.get(USERS, user_id)
        except Exception as e:
            logging.error(f"ID로 사용자 조회 실패 (user_id: {user_id}): {e}", exc_info=True)
            raise

    def get_user_stats(self, user_id: str) -> Dict[str, int]:
        return {
            'prompt_count': self.prompt_service.count_by_creator(user_id),
            'follower_count': self.follow_service.count_followers(user_id),
            'following_count': self.follow_service.count_following(user_id),
            'total_likes': self.prompt_service.total_likes_by_creator(user_id),
        }

    def get_user_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """공개 프로필 정보와 통계를 함께 조회합니다."""
        user = self.get_user_by_id(user_id)
        if user is None:
            return None
        user.update(self.get_user_stats(user_id))
        return user

    def update_settings(self, user_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """사용자 이름과 알림 설정을 변경합니다."""
        user = self.get_user_by_id(user_id)
        if user is None:
            raise NotFoundError("사용자를 찾을 수 없습니다.")

        update_data = {}
        username = data.get('username')
        if username and username != user.get('username'):
            query = self.users_ref.where(filter=FieldFilter('username', '==', username)).limit(1)
            if any(doc.id != user_id for doc in query.stream()):
                raise ConflictError("이미 사용 중인 사용자 이름입니다.")
            update_data['username'] = username
        if 'notification_settings' in data:
            settings = dict(user.get('notification_settings') or {})
            settings.update(data['notification_settings'])
            update_data['notification_settings'] = settings

        if update_data:
            self.store.update(USERS, user_id, update_data)
            user.update(update_data)
            logging.info(f"사용자 설정 변경 완료 (user_id: {user_id}, fields: {sorted(update_data)})")
        return user
