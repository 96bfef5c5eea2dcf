# promptshare/models/saved_prompt.py
from dataclasses import dataclass, field
from datetime import datetime

from promptshare.utils.datetime_utils import DateTimeUtils

def make_saved_id(user_id: str, prompt_id: str) -> str:
    return f"{user_id}_{prompt_id}"

@dataclass
class SavedPrompt:
    """사용자별 북마크. (user_id, prompt_id) 쌍은 유일합니다."""
    saved_id: str
    user_id: str
    prompt_id: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)
