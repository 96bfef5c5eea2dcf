# promptshare/models/collection.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from promptshare.utils.datetime_utils import DateTimeUtils

@dataclass
class Collection:
    """
    Firestore 'collections' 컬렉션의 문서 구조. 생성자만 수정할 수 있습니다.
    """
    collection_id: str
    creator_id: str
    name: str
    description: Optional[str] = None
    is_public: bool = True
    tags: List[str] = field(default_factory=list)
    prompts: List[str] = field(default_factory=list)  # 순서가 있는 prompt_id 목록
    created_at: datetime = field(default_factory=DateTimeUtils.now)
