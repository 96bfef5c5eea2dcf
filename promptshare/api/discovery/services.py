# promptshare/api/discovery/services.py
import logging
import random
from typing import Optional, Dict, Any, List, Iterator

from google.cloud.firestore_v1.base_query import FieldFilter

from promptshare.api.discovery.ranking import (
    PromptFilters, SORT_NEWEST, pick_uniform, pick_weighted, sampling_weight, sort_prompts,
)
from promptshare.api.follows.services import FollowService
from promptshare.core.errors import NotFoundError
from promptshare.services.firestore_service import EntityStore, PROMPTS, USERS
from promptshare.utils.datetime_utils import DateTimeUtils

# Firestore 'in' 조건이 허용하는 최대 값 개수
MAX_IN_VALUES = 30

class DiscoveryService:
    """
    프롬프트 탐색(필터/정렬/무작위)과 크리에이터 탐색을 담당합니다.
    읽기 전용이며 어떤 문서도 변경하지 않습니다.
    """
    def __init__(self, store: EntityStore, follow_service: FollowService, rng: Optional[random.Random] = None):
        self.store = store
        self.prompts_ref = store.collection(PROMPTS)
        self.follow_service = follow_service
        self.rng = rng or random.Random()

    def _base_query(self, filters: PromptFilters):
        """
        Firestore 에서 처리할 수 있는 조건(카테고리, 템플릿/추천 여부, 작성 기간)은
        쿼리로 내려보내고, 나머지는 스트리밍하면서 걸러냅니다.
        """
        query = self.prompts_ref
        allowed = filters.allowed_categories()
        if allowed is not None and 0 < len(allowed) <= MAX_IN_VALUES:
            query = query.where(filter=FieldFilter('category', 'in', allowed))
        if filters.is_template:
            query = query.where(filter=FieldFilter('is_template', '==', True))
        if filters.featured:
            query = query.where(filter=FieldFilter('featured', '==', True))
        if filters.created_after is not None:
            query = query.where(filter=FieldFilter('created_at', '>=', filters.created_after))
        return query

    def _stream_matching(self, filters: PromptFilters) -> Iterator[Dict[str, Any]]:
        if filters.allowed_categories() == []:
            return
        for doc in self._base_query(filters).stream():
            prompt = DateTimeUtils.from_firestore(doc.to_dict())
            if filters.matches(prompt):
                yield prompt

    def list_prompts(self, filters: PromptFilters, sort_by: str = SORT_NEWEST,
                     limit: Optional[int] = None) -> List[Dict[str, Any]]:
        prompts = sort_prompts(list(self._stream_matching(filters)), sort_by)
        if limit is not None:
            prompts = prompts[:limit]
        return prompts

    def pick_random(self, filters: PromptFilters, trending: bool = False) -> Dict[str, Any]:
        """
        필터에 맞는 프롬프트 하나를 무작위로 고릅니다.
        - 결과 집합을 한 번만 훑는 저수지 샘플링을 사용하므로 전체를 메모리에 올리지 않습니다.
        - trending=True 이면 트렌딩 점수가 높을수록 뽑힐 확률이 커집니다.
        """
        candidates = self._stream_matching(filters)
        if trending:
            chosen = pick_weighted(candidates, self.rng, sampling_weight)
        else:
            chosen = pick_uniform(candidates, self.rng)
        if chosen is None:
            raise NotFoundError("조건에 맞는 프롬프트가 없습니다.")
        return chosen

    def discover_creators(self, limit: int = 20) -> List[Dict[str, Any]]:
        """
        프롬프트를 하나 이상 작성한 사용자를 팔로워 수, 프롬프트 수 내림차순으로 반환합니다.
        """
        prompt_counts: Dict[str, int] = {}
        for doc in self.prompts_ref.select(['creator_id']).stream():
            creator_id = doc.to_dict().get('creator_id')
            if creator_id:
                prompt_counts[creator_id] = prompt_counts.get(creator_id, 0) + 1

        creators = []
        for creator_id, prompt_count in prompt_counts.items():
            user = self.store.get(USERS, creator_id)
            if user is None:
                logging.warning(f"프롬프트 작성자 문서를 찾을 수 없음 (user_id: {creator_id})")
                continue
            user['prompt_count'] = prompt_count
            user['follower_count'] = self.follow_service.count_followers(creator_id)
            creators.append(user)

        creators.sort(key=lambda u: (u['follower_count'], u['prompt_count']), reverse=True)
        return creators[:limit]
