# promptshare/services/notification_service.py
import logging
from dataclasses import asdict
from datetime import datetime
from typing import Optional, Dict, Any, List

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from promptshare.models.notification import Notification, NotificationType
from promptshare.services.firestore_service import EntityStore, NOTIFICATIONS, USERS, PROMPTS
from promptshare.utils.ids import new_id

class NotificationService:
    """
    알림 생성(fan-out)과 조회/읽음 처리를 담당하는 공용 서비스 클래스.
    - 알림은 좋아요/댓글/팔로우 서비스가 변경을 마친 뒤 동기적으로 요청합니다.
    - 자기 자신의 행동에 대한 알림은 절대 생성하지 않습니다.
    - 알림 생성 실패는 로그만 남기고 호출자에게 전파하지 않습니다.
    """
    def __init__(self, store: EntityStore, page_size: int = 50):
        self.store = store
        self.notifications_ref = store.collection(NOTIFICATIONS)
        self.users_ref = store.collection(USERS)
        self.page_size = page_size

    def display_name(self, user_id: str) -> str:
        """알림 메시지에 표시할 사용자 이름을 조회합니다. 조회 실패는 알림 흐름을 막지 않습니다."""
        try:
            user = self.store.get(USERS, user_id)
        except Exception as e:
            logging.error(f"알림 발신자 조회 실패 (user_id: {user_id}): {e}", exc_info=True)
            user = None
        return user.get('username') if user else "알 수 없는 사용자"

    def notify(self, recipient_id: str, actor_id: Optional[str], n_type: NotificationType,
               message: str, related_prompt_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        알림 한 건을 생성합니다.

        :param recipient_id: 알림을 받을 사용자 ID
        :param actor_id: 알림을 유발한 사용자 ID (시스템 알림은 None)
        :param n_type: 알림 유형 (NotificationType Enum)
        :param message: 알림 문구
        :param related_prompt_id: 관련 프롬프트 ID
        :return: 생성된 알림 딕셔너리. 생성하지 않았거나 실패하면 None
        """
        if recipient_id == actor_id:
            return None  # 자기 자신에게는 알림을 생성하지 않음

        try:
            notification = Notification(
                notification_id=new_id(),
                user_id=recipient_id,
                type=n_type,
                message=message,
                from_user_id=actor_id,
                related_prompt_id=related_prompt_id
            )

            # Enum 멤버를 문자열 값으로 변환하여 저장
            notification_dict = asdict(notification)
            notification_dict['type'] = notification.type.value

            self.store.set(NOTIFICATIONS, notification.notification_id, notification_dict)
            logging.info(f"{n_type.value} 알림 생성 완료: {actor_id} -> {recipient_id}")
            return notification_dict

        except Exception as e:
            logging.error(f"알림 생성 중 오류 발생 ({n_type.value}: {actor_id} -> {recipient_id}): {e}", exc_info=True)
            return None

    def list_notifications(self, user_id: str, before: Optional[datetime] = None) -> List[Dict[str, Any]]:
        """
        최신순으로 최대 page_size 개의 알림을 발신자/관련 프롬프트 정보와 함께 반환합니다.
        before 를 주면 그 시각보다 먼저 생성된 알림만 조회합니다. (다음 페이지)
        """
        query = self.notifications_ref.where(filter=FieldFilter('user_id', '==', user_id))
        if before is not None:
            query = query.where(filter=FieldFilter('created_at', '<', before))
        query = query.order_by('created_at', direction=firestore.Query.DESCENDING).limit(self.page_size)
        notifications = self.store.docs(query)

        users_cache: Dict[str, Optional[Dict[str, Any]]] = {}
        prompts_cache: Dict[str, Optional[Dict[str, Any]]] = {}
        for notification in notifications:
            from_user_id = notification.get('from_user_id')
            if from_user_id:
                if from_user_id not in users_cache:
                    users_cache[from_user_id] = self.store.get(USERS, from_user_id)
                notification['from_user'] = users_cache[from_user_id]

            prompt_id = notification.get('related_prompt_id')
            if prompt_id:
                if prompt_id not in prompts_cache:
                    prompts_cache[prompt_id] = self.store.get(PROMPTS, prompt_id)
                notification['related_prompt'] = prompts_cache[prompt_id]
        return notifications

    def count_unread(self, user_id: str) -> int:
        query = (self.notifications_ref
                 .where(filter=FieldFilter('user_id', '==', user_id))
                 .where(filter=FieldFilter('read', '==', False)))
        return self.store.count(query)

    def mark_read(self, user_id: str, notification_id: str, read: bool = True) -> Optional[Dict[str, Any]]:
        """
        알림의 읽음 상태를 변경합니다.
        - 알림이 없거나 호출자의 알림이 아니면 아무것도 하지 않고 None 을 반환합니다.
        """
        notification = self.store.get(NOTIFICATIONS, notification_id)
        if notification is None or notification.get('user_id') != user_id:
            return None
        self.store.update(NOTIFICATIONS, notification_id, {'read': read})
        notification['read'] = read
        return notification

    def mark_all_read(self, user_id: str) -> int:
        """호출자의 읽지 않은 알림을 배치 쓰기로 한 번에 읽음 처리합니다."""
        query = (self.notifications_ref
                 .where(filter=FieldFilter('user_id', '==', user_id))
                 .where(filter=FieldFilter('read', '==', False)))
        refs = [doc.reference for doc in query.stream()]
        updated = self.store.update_in_batches(refs, {'read': True})
        logging.info(f"알림 일괄 읽음 처리 완료 (user_id: {user_id}, count: {updated})")
        return updated
