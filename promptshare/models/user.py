# promptshare/models/user.py
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Dict

from promptshare.utils.datetime_utils import DateTimeUtils

_USER_ID_NAMESPACE = uuid.UUID("6f1d2c3a-8b4e-4c7d-9a15-2e0b7f4c9d31")

def make_user_id_for_email(email: str) -> str:
    """같은 이메일(대소문자 무시)은 항상 같은 사용자 ID 가 됩니다."""
    return uuid.uuid5(_USER_ID_NAMESPACE, email.strip().lower()).hex

class UserRole(Enum):
    USER = "user"
    ADMIN = "admin"

@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    user_id: str
    email: str
    username: str
    avatar_url: Optional[str] = None
    role: str = UserRole.USER.value
    notification_settings: Dict[str, bool] = field(default_factory=lambda: {
        "like": True, "comment": True, "follow": True
    })
    created_at: datetime = field(default_factory=DateTimeUtils.now)
