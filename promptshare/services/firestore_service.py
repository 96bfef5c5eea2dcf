# promptshare/services/firestore_service.py
import logging
from typing import Any, Dict, Iterable, List, Optional

from firebase_admin import firestore
from google.api_core.exceptions import AlreadyExists, NotFound

from promptshare.core.errors import NotFoundError
from promptshare.utils.datetime_utils import DateTimeUtils

# Firestore 컬렉션 이름. 스키마 역할을 하므로 이 상수들만 사용합니다.
USERS = 'users'
PROMPTS = 'prompts'
COMMENTS = 'comments'
FOLLOWS = 'follows'
SAVED_PROMPTS = 'saved_prompts'
NOTIFICATIONS = 'notifications'
COLLECTIONS = 'collections'
REVOKED_TOKENS = 'revoked_tokens'

# Firestore 한 번의 배치 커밋에 허용되는 최대 쓰기 수
MAX_BATCH_WRITES = 500


class EntityStore:
    """
    모든 엔티티의 영속화를 담당하는 Firestore 래퍼.
    - 문서 ID 를 이용한 유니크 제약 삽입 (create 는 문서가 이미 있으면 실패)
    - ArrayUnion / ArrayRemove / Increment 를 이용한 원자적 필드 갱신
    - WriteBatch 를 이용한 다중 문서 원자적 쓰기
    """
    def __init__(self, db=None):
        self.db = db if db is not None else firestore.client()

    def collection(self, name: str):
        return self.db.collection(name)

    def document(self, collection_name: str, doc_id: str):
        return self.db.collection(collection_name).document(doc_id)

    def get(self, collection_name: str, doc_id: str) -> Optional[Dict[str, Any]]:
        """문서를 조회합니다. 없으면 None."""
        doc = self.document(collection_name, doc_id).get()
        if not doc.exists:
            return None
        return DateTimeUtils.from_firestore(doc.to_dict())

    def set(self, collection_name: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.document(collection_name, doc_id).set(DateTimeUtils.for_firestore(data))

    def create_unique(self, collection_name: str, doc_id: str, data: Dict[str, Any]) -> bool:
        """
        문서가 존재하지 않을 때만 생성합니다.
        :return: 새로 생성했으면 True, 이미 존재했으면 False
        """
        try:
            self.document(collection_name, doc_id).create(DateTimeUtils.for_firestore(data))
            return True
        except AlreadyExists:
            logging.info(f"이미 존재하는 문서 생성 요청 무시 ({collection_name}/{doc_id})")
            return False

    def update(self, collection_name: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.document(collection_name, doc_id).update(DateTimeUtils.for_firestore(data))

    def _update_existing(self, collection_name: str, doc_id: str, field_updates: Dict[str, Any]) -> None:
        """조회 이후 문서가 삭제되었으면 NotFoundError 로 바꿔 올립니다."""
        try:
            self.document(collection_name, doc_id).update(field_updates)
        except NotFound:
            raise NotFoundError(f"대상 문서가 더 이상 존재하지 않습니다 ({collection_name}/{doc_id}).")

    def add_to_set(self, collection_name: str, doc_id: str, field_name: str, value: Any) -> None:
        """배열 필드에 값을 원자적으로 추가합니다. 이미 있으면 변화가 없습니다."""
        self._update_existing(collection_name, doc_id, {field_name: firestore.ArrayUnion([value])})

    def remove_from_set(self, collection_name: str, doc_id: str, field_name: str, value: Any) -> None:
        self._update_existing(collection_name, doc_id, {field_name: firestore.ArrayRemove([value])})

    def increment(self, collection_name: str, doc_id: str, field_name: str, amount: int = 1) -> None:
        self._update_existing(collection_name, doc_id, {field_name: firestore.Increment(amount)})

    def delete(self, collection_name: str, doc_id: str) -> None:
        self.document(collection_name, doc_id).delete()

    @staticmethod
    def count(query) -> int:
        """
        문서를 모두 가져오지 않고 Firestore 의 count() 집계로 개수만 구합니다.
        """
        count_result = query.count().get()
        return count_result[0][0].value

    @staticmethod
    def docs(query) -> List[Dict[str, Any]]:
        return [DateTimeUtils.from_firestore(doc.to_dict()) for doc in query.stream()]

    def delete_atomically(self, refs: List[Any]) -> None:
        """
        여러 문서를 하나의 배치로 삭제합니다. 모두 삭제되거나 하나도 삭제되지 않습니다.
        """
        if len(refs) > MAX_BATCH_WRITES:
            raise ValueError(f"한 배치에서 삭제할 수 있는 문서 수({MAX_BATCH_WRITES})를 초과했습니다.")
        batch = self.db.batch()
        for ref in refs:
            batch.delete(ref)
        batch.commit()

    def update_in_batches(self, refs: Iterable[Any], data: Dict[str, Any]) -> int:
        """
        여러 문서에 같은 필드 갱신을 배치 단위로 적용합니다.
        :return: 갱신된 문서 수
        """
        updated = 0
        batch = self.db.batch()
        pending = 0
        for ref in refs:
            batch.update(ref, data)
            pending += 1
            if pending == MAX_BATCH_WRITES:
                batch.commit()
                updated += pending
                batch = self.db.batch()
                pending = 0
        if pending:
            batch.commit()
            updated += pending
        return updated

    def delete_in_batches(self, refs: List[Any]) -> int:
        deleted = 0
        for i in range(0, len(refs), MAX_BATCH_WRITES):
            chunk = refs[i:i + MAX_BATCH_WRITES]
            self.delete_atomically(chunk)
            deleted += len(chunk)
        return deleted
