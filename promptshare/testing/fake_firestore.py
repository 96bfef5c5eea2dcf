# promptshare/testing/fake_firestore.py
"""
테스트용 인메모리 Firestore 클라이언트.

firebase_admin.firestore.client() 가 돌려주는 클라이언트 중 이 프로젝트가 사용하는
부분만 흉내 냅니다.
- collection / document / get / set / create / update / delete
- where(filter=FieldFilter(...)), order_by, limit, offset, select, stream, count()
- batch() 기반의 원자적 다중 쓰기
- ArrayUnion / ArrayRemove / Increment 변환

모든 쓰기는 하나의 lock 아래에서 적용되므로, 동시성 테스트에서도 문서 단위의
원자성이 실제 Firestore 와 같게 유지됩니다.
"""

import copy
import threading
import uuid
from typing import Any, Dict, List, Optional

from google.api_core.exceptions import AlreadyExists, NotFound
from google.cloud.firestore_v1.transforms import ArrayRemove, ArrayUnion, Increment

ASCENDING = "ASCENDING"
DESCENDING = "DESCENDING"


def _apply_value(current: Any, value: Any) -> Any:
    if isinstance(value, ArrayUnion):
        result = list(current or [])
        for item in value.values:
            if item not in result:
                result.append(item)
        return result
    if isinstance(value, ArrayRemove):
        return [item for item in (current or []) if item not in value.values]
    if isinstance(value, Increment):
        return (current or 0) + value.value
    return copy.deepcopy(value)


def _sort_key(value: Any):
    # None 은 항상 가장 앞에 오도록 정렬합니다.
    return (value is not None, value)


def _matches(doc: Dict[str, Any], field_path: str, op: str, value: Any) -> bool:
    present = field_path in doc
    actual = doc.get(field_path)
    if op == "==":
        return present and actual == value
    if op == "!=":
        return present and actual != value
    if op == "in":
        return present and actual in value
    if op == "not-in":
        return present and actual not in value
    if op == "array-contains":
        return isinstance(actual, list) and value in actual
    if op == "array-contains-any":
        return isinstance(actual, list) and any(v in actual for v in value)
    if not present or actual is None:
        return False
    if op == "<":
        return actual < value
    if op == "<=":
        return actual <= value
    if op == ">":
        return actual > value
    if op == ">=":
        return actual >= value
    raise ValueError(f"지원하지 않는 연산자입니다: {op}")


class FakeDocumentSnapshot:
    def __init__(self, reference: "FakeDocumentReference", data: Optional[Dict[str, Any]]):
        self.reference = reference
        self.id = reference.id
        self._data = copy.deepcopy(data) if data is not None else None

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> Optional[Dict[str, Any]]:
        return copy.deepcopy(self._data) if self._data is not None else None

    def get(self, field_path: str) -> Any:
        return (self._data or {}).get(field_path)


class FakeAggregationResult:
    def __init__(self, alias: str, value: int):
        self.alias = alias
        self.value = value


class FakeAggregationQuery:
    def __init__(self, query: "FakeQuery", alias: Optional[str]):
        self._query = query
        self._alias = alias or "field_1"

    def get(self, transaction=None):
        count = sum(1 for _ in self._query.stream())
        return [[FakeAggregationResult(self._alias, count)]]


class FakeQuery:
    def __init__(self, client: "FakeFirestore", collection_name: str, filters=None,
                 orders=None, limit_count=None, offset_count=0):
        self._client = client
        self._collection_name = collection_name
        self._filters = list(filters or [])
        self._orders = list(orders or [])
        self._limit = limit_count
        self._offset = offset_count

    def _copy(self, **overrides) -> "FakeQuery":
        params = dict(filters=self._filters, orders=self._orders,
                      limit_count=self._limit, offset_count=self._offset)
        params.update(overrides)
        return FakeQuery(self._client, self._collection_name, **params)

    def where(self, field_path: str = None, op_string: str = None, value: Any = None, *, filter=None) -> "FakeQuery":
        if filter is not None:
            field_path, op_string, value = filter.field_path, filter.op_string, filter.value
        return self._copy(filters=self._filters + [(field_path, op_string, value)])

    def order_by(self, field_path: str, direction: str = ASCENDING) -> "FakeQuery":
        return self._copy(orders=self._orders + [(field_path, direction)])

    def limit(self, count: int) -> "FakeQuery":
        return self._copy(limit_count=count)

    def offset(self, count: int) -> "FakeQuery":
        return self._copy(offset_count=count)

    def select(self, field_paths) -> "FakeQuery":
        return self._copy()

    def count(self, alias: Optional[str] = None) -> FakeAggregationQuery:
        return FakeAggregationQuery(self, alias)

    def stream(self, transaction=None):
        with self._client._lock:
            documents = dict(self._client._collections.get(self._collection_name, {}))

        matched = [
            (doc_id, data) for doc_id, data in documents.items()
            if all(_matches(data, f, op, v) for f, op, v in self._filters)
        ]
        # 정렬 조건이 없으면 문서 ID 순서 (Firestore 기본 동작)
        matched.sort(key=lambda item: item[0])
        for field_path, direction in reversed(self._orders):
            matched = [item for item in matched if field_path in item[1]]
            matched.sort(key=lambda item: _sort_key(item[1].get(field_path)),
                         reverse=(direction == DESCENDING))

        matched = matched[self._offset:]
        if self._limit is not None:
            matched = matched[:self._limit]

        collection = FakeCollectionReference(self._client, self._collection_name)
        for doc_id, data in matched:
            yield FakeDocumentSnapshot(collection.document(doc_id), data)

    def get(self, transaction=None) -> List[FakeDocumentSnapshot]:
        return list(self.stream())


class FakeCollectionReference(FakeQuery):
    def __init__(self, client: "FakeFirestore", name: str):
        super().__init__(client, name)
        self.id = name

    def document(self, document_id: Optional[str] = None) -> "FakeDocumentReference":
        return FakeDocumentReference(self._client, self._collection_name, document_id or uuid.uuid4().hex[:20])


class FakeDocumentReference:
    def __init__(self, client: "FakeFirestore", collection_name: str, document_id: str):
        self._client = client
        self._collection_name = collection_name
        self.id = document_id

    @property
    def path(self) -> str:
        return f"{self._collection_name}/{self.id}"

    def get(self, field_paths=None, transaction=None) -> FakeDocumentSnapshot:
        with self._client._lock:
            data = self._client._collections.get(self._collection_name, {}).get(self.id)
            return FakeDocumentSnapshot(self, data)

    def set(self, document_data: Dict[str, Any], merge: bool = False):
        with self._client._lock:
            self._client._apply([("set", self, document_data, merge)])

    def create(self, document_data: Dict[str, Any]):
        with self._client._lock:
            self._client._apply([("create", self, document_data, False)])

    def update(self, field_updates: Dict[str, Any]):
        with self._client._lock:
            self._client._apply([("update", self, field_updates, False)])

    def delete(self):
        with self._client._lock:
            self._client._apply([("delete", self, None, False)])


class FakeWriteBatch:
    """commit() 시 모든 쓰기를 한 번에 적용하거나, 하나라도 실패하면 아무것도 적용하지 않습니다."""

    def __init__(self, client: "FakeFirestore"):
        self._client = client
        self._writes = []

    def __len__(self) -> int:
        return len(self._writes)

    def set(self, reference, document_data, merge=False):
        self._writes.append(("set", reference, document_data, merge))

    def create(self, reference, document_data):
        self._writes.append(("create", reference, document_data, False))

    def update(self, reference, field_updates):
        self._writes.append(("update", reference, field_updates, False))

    def delete(self, reference):
        self._writes.append(("delete", reference, None, False))

    def commit(self):
        if len(self._writes) > self._client.MAX_BATCH_WRITES:
            raise ValueError("한 배치에 허용된 쓰기 수를 초과했습니다.")
        with self._client._lock:
            self._client._apply(self._writes)
        self._client.committed_batches.append(len(self._writes))
        self._writes = []


class FakeFirestore:
    MAX_BATCH_WRITES = 500

    def __init__(self):
        self._collections: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self._lock = threading.RLock()
        self.committed_batches: List[int] = []

    def collection(self, name: str) -> FakeCollectionReference:
        return FakeCollectionReference(self, name)

    def batch(self) -> FakeWriteBatch:
        return FakeWriteBatch(self)

    def documents(self, collection_name: str) -> Dict[str, Dict[str, Any]]:
        """테스트 검증용: 컬렉션의 모든 문서를 복사해 반환합니다."""
        with self._lock:
            return copy.deepcopy(self._collections.get(collection_name, {}))

    def _apply(self, writes):
        # 먼저 결과 상태를 계산한 뒤 한 번에 반영하여 원자성을 보장합니다.
        staged = copy.deepcopy(self._collections)
        for kind, reference, data, merge in writes:
            collection = staged.setdefault(reference._collection_name, {})
            existing = collection.get(reference.id)
            if kind == "create":
                if existing is not None:
                    raise AlreadyExists(f"Document already exists: {reference.path}")
                collection[reference.id] = {k: _apply_value(None, v) for k, v in data.items()}
            elif kind == "set":
                base = dict(existing or {}) if merge else {}
                for key, value in data.items():
                    base[key] = _apply_value(base.get(key), value)
                collection[reference.id] = base
            elif kind == "update":
                if existing is None:
                    raise NotFound(f"No document to update: {reference.path}")
                for key, value in data.items():
                    existing[key] = _apply_value(existing.get(key), value)
            elif kind == "delete":
                collection.pop(reference.id, None)
        self._collections = staged
