# promptshare/api/follows/services.py
import logging
from dataclasses import asdict
from typing import Optional

from google.cloud.firestore_v1.base_query import FieldFilter

from promptshare.core.errors import InvalidOperationError, NotFoundError
from promptshare.models.follow import Follow, make_follow_id
from promptshare.models.notification import NotificationType
from promptshare.services.firestore_service import EntityStore, FOLLOWS, USERS
from promptshare.services.notification_service import NotificationService

class FollowService:
    """
    팔로우 관계(방향 그래프)를 관리하는 서비스 클래스.
    - 팔로우 문서 ID 를 '{follower_id}_{following_id}' 로 고정해 쌍의 유일성을 저장소 수준에서 보장합니다.
    - 팔로워/팔로잉 수는 저장하지 않고 매번 count 집계로 계산합니다.
    """
    def __init__(self, store: EntityStore, notification_service: NotificationService):
        self.store = store
        self.follows_ref = store.collection(FOLLOWS)
        self.notification_service = notification_service

    def follow(self, follower_id: str, target_id: str) -> bool:
        """
        target_id 사용자를 팔로우합니다.
        :return: 새로 팔로우했으면 True, 이미 팔로우 중이었으면 False
        """
        if follower_id == target_id:
            raise InvalidOperationError("자기 자신은 팔로우할 수 없습니다.")
        if self.store.get(USERS, target_id) is None:
            raise NotFoundError("팔로우할 사용자를 찾을 수 없습니다.")

        follow_id = make_follow_id(follower_id, target_id)
        new_follow = Follow(follow_id=follow_id, follower_id=follower_id, following_id=target_id)
        created = self.store.create_unique(FOLLOWS, follow_id, asdict(new_follow))
        if not created:
            return False  # 이미 팔로우 중이면 중복 생성/중복 알림 없이 성공 처리

        logging.info(f"팔로우 생성: {follower_id} -> {target_id}")
        follower_name = self.notification_service.display_name(follower_id)
        self.notification_service.notify(
            recipient_id=target_id,
            actor_id=follower_id,
            n_type=NotificationType.FOLLOW,
            message=f"{follower_name}님이 회원님을 팔로우하기 시작했습니다."
        )
        return True

    def unfollow(self, follower_id: str, target_id: str) -> bool:
        """팔로우 관계를 삭제합니다. 관계가 없으면 아무것도 하지 않습니다."""
        follow_id = make_follow_id(follower_id, target_id)
        if self.store.get(FOLLOWS, follow_id) is None:
            return False
        self.store.delete(FOLLOWS, follow_id)
        logging.info(f"언팔로우: {follower_id} -> {target_id}")
        return True

    def is_following(self, follower_id: Optional[str], target_id: str) -> bool:
        """비로그인 호출자(follower_id=None)는 항상 False."""
        if not follower_id:
            return False
        return self.store.get(FOLLOWS, make_follow_id(follower_id, target_id)) is not None

    def count_followers(self, user_id: str) -> int:
        query = self.follows_ref.where(filter=FieldFilter('following_id', '==', user_id))
        return self.store.count(query)

    def count_following(self, user_id: str) -> int:
        query = self.follows_ref.where(filter=FieldFilter('follower_id', '==', user_id))
        return self.store.count(query)
