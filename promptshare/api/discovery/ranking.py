# promptshare/api/discovery/ranking.py
"""
탐색 화면의 필터/정렬/무작위 선택 로직.

트렌딩 점수는 좋아요 수 + 0.1 × 조회수 입니다. 시간 감쇠는 적용하지 않습니다.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional

from promptshare.utils.datetime_utils import DateTimeUtils

VIEW_WEIGHT = 0.1

# 'creative' 필터가 허용하는 카테고리
CREATIVE_CATEGORIES = ("writing", "design", "entertainment")

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_MOST_LIKED = "most-liked"
SORT_TRENDING = "trending"
SORT_OPTIONS = (SORT_NEWEST, SORT_OLDEST, SORT_MOST_LIKED, SORT_TRENDING)


def like_count(prompt: Dict[str, Any]) -> int:
    return len(prompt.get('likes') or [])


def trending_score(prompt: Dict[str, Any]) -> float:
    return like_count(prompt) + VIEW_WEIGHT * (prompt.get('views') or 0)


@dataclass
class PromptFilters:
    """
    탐색 필터. 서로 다른 조건끼리는 AND, 여러 값을 받는 조건 내부는 OR 로 결합합니다.
    """
    categories: List[str] = field(default_factory=list)
    difficulties: List[str] = field(default_factory=list)
    min_likes: int = 0
    is_template: bool = False
    featured: bool = False
    time_range: str = "all"
    creative: bool = False
    search: Optional[str] = None
    created_after: Optional[datetime] = None

    def __post_init__(self):
        if self.created_after is None:
            self.created_after = DateTimeUtils.cutoff_for_time_range(self.time_range)

    def allowed_categories(self) -> Optional[List[str]]:
        """
        카테고리 조건을 하나의 집합으로 합칩니다.
        None 은 '제한 없음', 빈 리스트는 '어떤 카테고리도 허용하지 않음' 입니다.
        """
        if self.creative:
            if self.categories:
                return [c for c in self.categories if c in CREATIVE_CATEGORIES]
            return list(CREATIVE_CATEGORIES)
        return list(self.categories) if self.categories else None

    def matches(self, prompt: Dict[str, Any]) -> bool:
        allowed = self.allowed_categories()
        if allowed is not None and prompt.get('category') not in allowed:
            return False
        if self.difficulties and prompt.get('difficulty') not in self.difficulties:
            return False
        if self.min_likes and like_count(prompt) < self.min_likes:
            return False
        if self.is_template and not prompt.get('is_template'):
            return False
        if self.featured and not prompt.get('featured'):
            return False
        if self.created_after is not None:
            created_at = prompt.get('created_at')
            if created_at is None or created_at < self.created_after:
                return False
        if self.search:
            term = self.search.lower()
            haystacks = [prompt.get('title') or '', prompt.get('body') or ''] + list(prompt.get('tags') or [])
            if not any(term in text.lower() for text in haystacks):
                return False
        return True


def sort_prompts(prompts: List[Dict[str, Any]], sort_by: str = SORT_NEWEST) -> List[Dict[str, Any]]:
    """정렬된 새 리스트를 반환합니다. 점수가 같으면 최신 글이 먼저 옵니다."""
    if sort_by not in SORT_OPTIONS:
        raise ValueError(f"지원하지 않는 정렬 옵션입니다: {sort_by}")

    newest_first = sorted(prompts, key=lambda p: (p.get('created_at'), p.get('prompt_id')), reverse=True)
    if sort_by == SORT_NEWEST:
        return newest_first
    if sort_by == SORT_OLDEST:
        return list(reversed(newest_first))
    if sort_by == SORT_MOST_LIKED:
        return sorted(newest_first, key=like_count, reverse=True)
    return sorted(newest_first, key=trending_score, reverse=True)


def pick_uniform(items: Iterable[Dict[str, Any]], rng: random.Random) -> Optional[Dict[str, Any]]:
    """
    크기 1 저수지 샘플링. 스트림을 한 번만 훑으며 각 항목을 같은 확률로 고릅니다.
    """
    chosen = None
    for seen, item in enumerate(items, start=1):
        if rng.randrange(seen) == 0:
            chosen = item
    return chosen


def pick_weighted(items: Iterable[Dict[str, Any]], rng: random.Random,
                  weight: Callable[[Dict[str, Any]], float]) -> Optional[Dict[str, Any]]:
    """
    가중 저수지 샘플링 (Efraimidis-Spirakis A-Res, k=1).
    각 항목에 u^(1/w) 키를 부여하고 가장 큰 키를 가진 항목을 고릅니다.
    """
    chosen = None
    best_key = -1.0
    for item in items:
        w = weight(item)
        if w <= 0:
            continue
        key = rng.random() ** (1.0 / w)
        if key > best_key:
            best_key = key
            chosen = item
    return chosen


def sampling_weight(prompt: Dict[str, Any]) -> float:
    """트렌딩 가중치. 점수가 0 인 프롬프트도 뽑힐 수 있도록 1 을 더합니다."""
    return 1.0 + trending_score(prompt)
