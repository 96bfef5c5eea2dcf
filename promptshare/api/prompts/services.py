# promptshare/api/prompts/services.py
import logging
from dataclasses import asdict
from typing import Optional, Dict, Any, List

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from promptshare.api.discovery.ranking import like_count, trending_score
from promptshare.core.errors import ForbiddenError, NotFoundError
from promptshare.core.security import is_admin
from promptshare.models.prompt import Prompt
from promptshare.models.saved_prompt import SavedPrompt, make_saved_id
from promptshare.services.engagement_service import EngagementLedger, LikeTarget
from promptshare.services.firestore_service import EntityStore, PROMPTS, SAVED_PROMPTS, USERS
from promptshare.utils.datetime_utils import DateTimeUtils
from promptshare.utils.ids import new_id

class PromptService:
    """
    프롬프트 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 프롬프트 CRUD, 좋아요 토글 위임, 북마크(저장) 기능을 포함합니다.
    """
    def __init__(self, store: EntityStore, engagement: EngagementLedger):
        self.store = store
        self.prompts_ref = store.collection(PROMPTS)
        self.saved_ref = store.collection(SAVED_PROMPTS)
        self.engagement = engagement

    def present(self, prompt: Dict[str, Any], current_user_id: Optional[str] = None,
                creators_cache: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """응답용으로 작성자 정보와 파생 값(좋아요 수, 트렌딩 점수, 좋아요 여부)을 채웁니다."""
        creator_id = prompt.get('creator_id')
        if creators_cache is not None and creator_id in creators_cache:
            creator = creators_cache[creator_id]
        else:
            user = self.store.get(USERS, creator_id) or {}
            creator = {"user_id": creator_id, "username": user.get("username"), "avatar_url": user.get("avatar_url")}
            if creators_cache is not None:
                creators_cache[creator_id] = creator
        prompt['creator'] = creator
        prompt['like_count'] = like_count(prompt)
        prompt['trending_score'] = trending_score(prompt)
        prompt['is_liked'] = bool(current_user_id) and current_user_id in prompt.get('likes', [])
        return prompt

    def present_many(self, prompts: List[Dict[str, Any]], current_user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        cache: Dict[str, Any] = {}
        return [self.present(p, current_user_id, cache) for p in prompts]

    def create_prompt(self, creator_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        new_prompt = Prompt(
            prompt_id=new_id(),
            creator_id=creator_id,
            title=data['title'],
            body=data['body'],
            tags=data.get('tags') or [],
            category=data.get('category', 'other'),
            difficulty=data.get('difficulty', 'beginner'),
            is_template=data.get('is_template', False),
            sample_result=data.get('sample_result')
        )
        prompt_dict = asdict(new_prompt)
        self.store.set(PROMPTS, new_prompt.prompt_id, prompt_dict)
        logging.info(f"프롬프트 생성 완료 (prompt_id: {new_prompt.prompt_id}, creator_id: {creator_id})")
        return self.present(prompt_dict, creator_id)

    def get_prompt(self, prompt_id: str, current_user_id: Optional[str] = None) -> Dict[str, Any]:
        """프롬프트를 조회합니다. 조회 시 views 를 원자적으로 1 증가시킵니다."""
        prompt = self.store.get(PROMPTS, prompt_id)
        if prompt is None:
            raise NotFoundError("프롬프트를 찾을 수 없습니다.")
        self.store.increment(PROMPTS, prompt_id, 'views', 1)
        prompt['views'] = prompt.get('views', 0) + 1
        return self.present(prompt, current_user_id)

    def update_prompt(self, actor_id: str, prompt_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        prompt = self.store.get(PROMPTS, prompt_id)
        if prompt is None:
            raise NotFoundError("프롬프트를 찾을 수 없습니다.")
        if prompt.get('creator_id') != actor_id:
            raise ForbiddenError("프롬프트를 수정할 권한이 없습니다.")

        # likes / views / featured 는 이 경로로 변경할 수 없습니다.
        update_data = {k: v for k, v in data.items()
                       if k in ('title', 'body', 'tags', 'category', 'difficulty', 'is_template', 'sample_result')}
        update_data['updated_at'] = DateTimeUtils.now()
        self.store.update(PROMPTS, prompt_id, update_data)
        prompt.update(update_data)
        return self.present(prompt, actor_id)

    def delete_prompt(self, actor: Dict[str, Any], prompt_id: str) -> None:
        prompt = self.store.get(PROMPTS, prompt_id)
        if prompt is None:
            raise NotFoundError("프롬프트를 찾을 수 없습니다.")
        if prompt.get('creator_id') != actor.get('user_id') and not is_admin(actor):
            raise ForbiddenError("프롬프트를 삭제할 권한이 없습니다.")
        self.store.delete(PROMPTS, prompt_id)
        logging.info(f"프롬프트 삭제 완료 (prompt_id: {prompt_id}, actor: {actor.get('user_id')})")

    def list_by_creator(self, creator_id: str, current_user_id: Optional[str] = None) -> List[Dict[str, Any]]:
        query = (self.prompts_ref
                 .where(filter=FieldFilter('creator_id', '==', creator_id))
                 .order_by('created_at', direction=firestore.Query.DESCENDING))
        return self.present_many(self.store.docs(query), current_user_id)

    def count_by_creator(self, creator_id: str) -> int:
        query = self.prompts_ref.where(filter=FieldFilter('creator_id', '==', creator_id))
        return self.store.count(query)

    def total_likes_by_creator(self, creator_id: str) -> int:
        """사용자가 작성한 모든 프롬프트의 좋아요 수 합계."""
        query = self.prompts_ref.where(filter=FieldFilter('creator_id', '==', creator_id)).select(['likes'])
        return sum(len(doc.to_dict().get('likes', [])) for doc in query.stream())

    def toggle_like(self, actor_id: str, prompt_id: str) -> Dict[str, Any]:
        result = self.engagement.toggle_like(actor_id, prompt_id, LikeTarget.PROMPT)
        return self.present(result['target'], actor_id)

    # --- 북마크(저장) ---
    def save_prompt(self, user_id: str, prompt_id: str) -> bool:
        """
        프롬프트를 저장합니다. 이미 저장된 경우 아무것도 하지 않습니다.
        :return: 새로 저장했으면 True
        """
        if self.store.get(PROMPTS, prompt_id) is None:
            raise NotFoundError("저장할 프롬프트를 찾을 수 없습니다.")
        saved_id = make_saved_id(user_id, prompt_id)
        saved = SavedPrompt(saved_id=saved_id, user_id=user_id, prompt_id=prompt_id)
        return self.store.create_unique(SAVED_PROMPTS, saved_id, asdict(saved))

    def unsave_prompt(self, user_id: str, prompt_id: str) -> bool:
        saved_id = make_saved_id(user_id, prompt_id)
        if self.store.get(SAVED_PROMPTS, saved_id) is None:
            return False
        self.store.delete(SAVED_PROMPTS, saved_id)
        return True

    def list_saved(self, user_id: str) -> List[Dict[str, Any]]:
        """최근 저장한 순서로 프롬프트를 반환합니다. 삭제된 프롬프트는 건너뜁니다."""
        query = (self.saved_ref
                 .where(filter=FieldFilter('user_id', '==', user_id))
                 .order_by('created_at', direction=firestore.Query.DESCENDING))
        prompts = []
        for saved in self.store.docs(query):
            prompt = self.store.get(PROMPTS, saved['prompt_id'])
            if prompt is not None:
                prompts.append(prompt)
        return self.present_many(prompts, user_id)
