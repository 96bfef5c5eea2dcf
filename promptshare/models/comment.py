# promptshare/models/comment.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from promptshare.utils.datetime_utils import DateTimeUtils

@dataclass
class Comment:
    """
    Firestore 'comments' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    - parent_comment_id 가 None 이면 루트 댓글, 아니면 루트 댓글에 달린 답글입니다.
    """
    comment_id: str
    prompt_id: str
    author_id: str
    content: str
    parent_comment_id: Optional[str] = None
    likes: List[str] = field(default_factory=list)
    is_edited: bool = False
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)
