# promptshare/models/follow.py
from dataclasses import dataclass, field
from datetime import datetime

from promptshare.utils.datetime_utils import DateTimeUtils

def make_follow_id(follower_id: str, following_id: str) -> str:
    """(follower, following) 쌍마다 하나뿐인 문서 ID. 유니크 제약을 문서 ID 로 강제합니다."""
    return f"{follower_id}_{following_id}"

@dataclass
class Follow:
    follow_id: str
    follower_id: str
    following_id: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)
