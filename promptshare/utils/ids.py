# promptshare/utils/ids.py
import time
import uuid


def new_id() -> str:
    """
    생성 시각 순으로 정렬되는 전역 고유 ID 를 만듭니다.
    앞 12자리는 밀리초 타임스탬프(16진수), 뒤 20자리는 uuid4 의 임의 값입니다.
    """
    millis = int(time.time() * 1000)
    return f"{millis:012x}{uuid.uuid4().hex[:20]}"
