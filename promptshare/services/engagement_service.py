# promptshare/services/engagement_service.py
import logging
from enum import Enum
from typing import Dict, Any

from promptshare.core.errors import NotFoundError
from promptshare.models.notification import NotificationType
from promptshare.services.firestore_service import EntityStore, PROMPTS, COMMENTS
from promptshare.services.notification_service import NotificationService

class LikeTarget(Enum):
    PROMPT = "prompt"
    COMMENT = "comment"

_COLLECTION_BY_TARGET = {
    LikeTarget.PROMPT: PROMPTS,
    LikeTarget.COMMENT: COMMENTS,
}

class EngagementLedger:
    """
    프롬프트/댓글의 좋아요 집합(likes)을 관리합니다.
    - likes 배열 자체가 유일한 원본이며, 좋아요 수는 len(likes) 로만 계산합니다.
    - 추가/제거는 ArrayUnion / ArrayRemove 로 처리하여 동시에 좋아요를 누른
      서로 다른 사용자의 변경이 유실되지 않도록 합니다.
    """
    def __init__(self, store: EntityStore, notification_service: NotificationService):
        self.store = store
        self.notification_service = notification_service

    def toggle_like(self, actor_id: str, target_id: str, target: LikeTarget) -> Dict[str, Any]:
        """
        좋아요를 누르거나 취소합니다.

        :return: {'target': 갱신된 문서, 'like_count': int, 'is_liked': bool}
        :raises NotFoundError: 대상 문서가 없는 경우
        """
        collection_name = _COLLECTION_BY_TARGET[target]
        target_data = self.store.get(collection_name, target_id)
        if target_data is None:
            raise NotFoundError(f"좋아요를 누를 {target.value}을(를) 찾을 수 없습니다.")

        was_liked = actor_id in target_data.get('likes', [])
        if was_liked:
            # 이미 누른 상태 -> 좋아요 취소 (알림 없음)
            self.store.remove_from_set(collection_name, target_id, 'likes', actor_id)
        else:
            self.store.add_to_set(collection_name, target_id, 'likes', actor_id)

        updated = self.store.get(collection_name, target_id) or target_data
        likes = updated.get('likes', [])
        is_liked = actor_id in likes

        # 프롬프트에 대한 새 좋아요만 알림 대상 (댓글 좋아요는 알림 없음)
        creator_id = target_data.get('creator_id')
        if not was_liked and target is LikeTarget.PROMPT and creator_id != actor_id:
            actor_name = self.notification_service.display_name(actor_id)
            self.notification_service.notify(
                recipient_id=creator_id,
                actor_id=actor_id,
                n_type=NotificationType.LIKE,
                message=f'{actor_name}님이 회원님의 프롬프트 "{target_data.get("title")}"에 좋아요를 눌렀습니다.',
                related_prompt_id=target_id
            )

        logging.info(f"좋아요 토글 ({target.value}: {target_id}, user_id: {actor_id}, is_liked: {is_liked})")
        return {'target': updated, 'like_count': len(likes), 'is_liked': is_liked}
