# promptshare/models/prompt.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from promptshare.utils.datetime_utils import DateTimeUtils

CATEGORIES = [
    "writing", "coding", "marketing", "design", "business",
    "education", "entertainment", "productivity", "research", "other",
]

DIFFICULTIES = ["beginner", "intermediate", "advanced"]

@dataclass
class Prompt:
    """
    Firestore 'prompts' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    - likes 는 좋아요를 누른 user_id 집합입니다. 좋아요 수는 별도로 저장하지 않고 len(likes) 로 계산합니다.
    """
    prompt_id: str
    creator_id: str
    title: str
    body: str
    tags: List[str] = field(default_factory=list)
    category: str = "other"
    difficulty: str = "beginner"
    likes: List[str] = field(default_factory=list)
    views: int = 0
    is_template: bool = False
    featured: bool = False
    sample_result: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
