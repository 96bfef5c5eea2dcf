# promptshare/models/notification.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from promptshare.utils.datetime_utils import DateTimeUtils

class NotificationType(Enum):
    """알림 유형을 정의하는 Enum 클래스"""
    LIKE = "like"
    COMMENT = "comment"
    FOLLOW = "follow"
    SYSTEM = "system"

@dataclass
class Notification:
    """
    Firestore 'notifications' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    notification_id: str
    user_id: str                        # 알림을 받는 사용자 ID
    type: NotificationType
    message: str
    from_user_id: Optional[str] = None  # 알림을 유발한 사용자 (시스템 알림은 None)
    related_prompt_id: Optional[str] = None
    read: bool = False
    created_at: datetime = field(default_factory=DateTimeUtils.now)
