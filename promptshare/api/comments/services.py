# promptshare/api/comments/services.py

import logging
from dataclasses import asdict
from typing import Optional, Dict, Any, List

from google.cloud.firestore_v1.base_query import FieldFilter

from promptshare.core.errors import ForbiddenError, InternalError, InvalidOperationError, NotFoundError
from promptshare.core.security import is_admin
from promptshare.models.comment import Comment
from promptshare.models.notification import NotificationType
from promptshare.services.engagement_service import EngagementLedger, LikeTarget
from promptshare.services.firestore_service import EntityStore, COMMENTS, PROMPTS, USERS, MAX_BATCH_WRITES
from promptshare.services.notification_service import NotificationService
from promptshare.utils.datetime_utils import DateTimeUtils
from promptshare.utils.ids import new_id

class CommentService:
    """
    댓글 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 루트 댓글과 그 답글, 두 단계까지만 허용합니다.
    - 루트 댓글 삭제 시 답글을 함께 삭제합니다.
    - 댓글 알림은 프롬프트 작성자에게만 보냅니다.
    """
    def __init__(self, store: EntityStore, engagement: EngagementLedger, notification_service: NotificationService):
        self.store = store
        self.comments_ref = store.collection(COMMENTS)
        self.engagement = engagement
        self.notification_service = notification_service

    def _author_info(self, author_id: str, cache: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """응답에 포함할 작성자 정보 (user_id, username, avatar_url)."""
        if cache is not None and author_id in cache:
            return cache[author_id]
        user = self.store.get(USERS, author_id) or {}
        info = {"user_id": author_id, "username": user.get("username"), "avatar_url": user.get("avatar_url")}
        if cache is not None:
            cache[author_id] = info
        return info

    def _decorate(self, comment: Dict[str, Any], current_user_id: Optional[str], cache=None) -> Dict[str, Any]:
        likes = comment.get('likes', [])
        comment['author'] = self._author_info(comment['author_id'], cache)
        comment['like_count'] = len(likes)
        comment['is_liked'] = bool(current_user_id) and current_user_id in likes
        return comment

    def create_comment(self, author_id: str, prompt_id: str, content: str,
                       parent_comment_id: Optional[str] = None) -> Dict[str, Any]:
        """새로운 댓글(또는 답글)을 생성하고 프롬프트 작성자에게 알림을 보냅니다."""
        prompt = self.store.get(PROMPTS, prompt_id)
        if prompt is None:
            raise NotFoundError("댓글을 작성할 프롬프트가 존재하지 않습니다.")

        if parent_comment_id:
            parent = self.store.get(COMMENTS, parent_comment_id)
            if parent is None:
                raise NotFoundError("답글을 달 댓글을 찾을 수 없습니다.")
            if parent.get('prompt_id') != prompt_id:
                raise InvalidOperationError("다른 프롬프트의 댓글에는 답글을 달 수 없습니다.")
            if parent.get('parent_comment_id'):
                raise InvalidOperationError("답글에는 다시 답글을 달 수 없습니다.")

        new_comment = Comment(
            comment_id=new_id(),
            prompt_id=prompt_id,
            author_id=author_id,
            content=content,
            parent_comment_id=parent_comment_id or None
        )
        comment_dict = asdict(new_comment)
        self.store.set(COMMENTS, new_comment.comment_id, comment_dict)

        creator_id = prompt.get('creator_id')
        if creator_id != author_id:
            author_name = self.notification_service.display_name(author_id)
            self.notification_service.notify(
                recipient_id=creator_id,
                actor_id=author_id,
                n_type=NotificationType.COMMENT,
                message=f'{author_name}님이 회원님의 프롬프트 "{prompt.get("title")}"에 댓글을 남겼습니다.',
                related_prompt_id=prompt_id
            )

        return self._decorate(comment_dict, author_id)

    def list_comments(self, prompt_id: str, current_user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        루트 댓글은 최신순, 각 루트의 답글(replies)은 작성순으로 정렬하여 반환합니다.
        """
        query = self.comments_ref.where(filter=FieldFilter('prompt_id', '==', prompt_id))
        comments = self.store.docs(query)

        cache: Dict[str, Any] = {}
        roots: List[Dict[str, Any]] = []
        replies_by_parent: Dict[str, List[Dict[str, Any]]] = {}
        for comment in comments:
            self._decorate(comment, current_user_id, cache)
            parent_id = comment.get('parent_comment_id')
            if parent_id:
                replies_by_parent.setdefault(parent_id, []).append(comment)
            else:
                roots.append(comment)

        def chronological(c):
            return (c['created_at'], c['comment_id'])

        roots.sort(key=chronological, reverse=True)
        for root in roots:
            root['replies'] = sorted(replies_by_parent.get(root['comment_id'], []), key=chronological)
        return roots

    def edit_comment(self, actor_id: str, comment_id: str, content: str) -> Dict[str, Any]:
        comment = self.store.get(COMMENTS, comment_id)
        if comment is None:
            raise NotFoundError("수정할 댓글이 없습니다.")
        if comment.get('author_id') != actor_id:
            raise ForbiddenError("댓글을 수정할 권한이 없습니다.")

        update_data = {'content': content, 'is_edited': True, 'updated_at': DateTimeUtils.now()}
        self.store.update(COMMENTS, comment_id, update_data)
        comment.update(update_data)
        return self._decorate(comment, actor_id)

    def delete_comment(self, actor: Dict[str, Any], comment_id: str) -> int:
        """
        댓글을 삭제합니다. (작성자 본인 또는 관리자만 가능)
        루트 댓글이면 답글과 함께 하나의 배치로 삭제합니다.

        :return: 삭제된 문서 수
        """
        comment = self.store.get(COMMENTS, comment_id)
        if comment is None:
            raise NotFoundError("삭제할 댓글이 없습니다.")
        if comment.get('author_id') != actor.get('user_id') and not is_admin(actor):
            raise ForbiddenError("댓글을 삭제할 권한이 없습니다.")

        comment_ref = self.store.document(COMMENTS, comment_id)
        if comment.get('parent_comment_id'):
            comment_ref.delete()
            return 1

        reply_refs = self._reply_refs(comment_id)
        try:
            if len(reply_refs) + 1 <= MAX_BATCH_WRITES:
                self.store.delete_atomically(reply_refs + [comment_ref])
            else:
                self._delete_large_thread(comment_id, comment_ref, reply_refs)
        except InternalError:
            raise
        except Exception as e:
            logging.error(f"댓글 삭제 실패 (comment_id: {comment_id}): {e}", exc_info=True)
            raise InternalError("댓글 삭제 중 오류가 발생했습니다.")

        # 삭제 도중 새로 달린 답글이 고아로 남지 않도록 한 번 더 정리합니다.
        leftovers = self._reply_refs(comment_id)
        if leftovers:
            logging.warning(f"삭제 중 추가된 답글 정리 (comment_id: {comment_id}, count: {len(leftovers)})")
            self.store.delete_in_batches(leftovers)

        deleted = len(reply_refs) + len(leftovers) + 1
        logging.info(f"댓글 스레드 삭제 완료 (comment_id: {comment_id}, deleted: {deleted})")
        return deleted

    def _reply_refs(self, root_comment_id: str) -> List[Any]:
        query = self.comments_ref.where(filter=FieldFilter('parent_comment_id', '==', root_comment_id))
        return [doc.reference for doc in query.stream()]

    def _delete_large_thread(self, comment_id: str, comment_ref, reply_refs: List[Any]) -> None:
        """
        한 배치에 담을 수 없는 스레드: 답글을 먼저 모두 삭제하고, 남은 답글이 없음을
        확인한 뒤에만 루트를 삭제합니다. 중간 실패는 수동 정합성 복구 대상입니다.
        """
        try:
            self.store.delete_in_batches(reply_refs)
        except Exception as e:
            logging.error(
                f"댓글 연쇄 삭제 중단 - 정합성 복구 필요 (comment_id: {comment_id}): {e}", exc_info=True
            )
            raise InternalError("댓글 삭제 중 오류가 발생했습니다.")

        remaining = self.store.count(
            self.comments_ref.where(filter=FieldFilter('parent_comment_id', '==', comment_id))
        )
        if remaining:
            logging.error(f"댓글 연쇄 삭제 검증 실패 - 정합성 복구 필요 (comment_id: {comment_id}, remaining: {remaining})")
            raise InternalError("댓글 삭제 중 오류가 발생했습니다.")
        comment_ref.delete()

    def toggle_comment_like(self, actor_id: str, comment_id: str) -> Dict[str, Any]:
        """댓글 좋아요를 토글합니다. 댓글 좋아요는 알림을 만들지 않습니다."""
        result = self.engagement.toggle_like(actor_id, comment_id, LikeTarget.COMMENT)
        comment = self._decorate(result['target'], actor_id)
        return comment
