# promptshare/api/collections/services.py
import logging
from dataclasses import asdict
from typing import Optional, Dict, Any, List

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from promptshare.models.collection import Collection
from promptshare.services.firestore_service import EntityStore, COLLECTIONS, USERS
from promptshare.utils.ids import new_id

class CollectionService:
    """프롬프트 컬렉션(큐레이션 목록) 생성과 조회."""
    def __init__(self, store: EntityStore, public_limit: int = 20):
        self.store = store
        self.collections_ref = store.collection(COLLECTIONS)
        self.public_limit = public_limit

    def _with_creator(self, collections: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        cache: Dict[str, Any] = {}
        for collection in collections:
            creator_id = collection.get('creator_id')
            if creator_id not in cache:
                user = self.store.get(USERS, creator_id) or {}
                cache[creator_id] = {"user_id": creator_id, "username": user.get("username"),
                                     "avatar_url": user.get("avatar_url")}
            collection['creator'] = cache[creator_id]
        return collections

    def create_collection(self, creator_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        new_collection = Collection(
            collection_id=new_id(),
            creator_id=creator_id,
            name=data['name'],
            description=data.get('description'),
            is_public=data.get('is_public', True),
            tags=data.get('tags') or []
        )
        collection_dict = asdict(new_collection)
        self.store.set(COLLECTIONS, new_collection.collection_id, collection_dict)
        logging.info(f"컬렉션 생성 완료 (collection_id: {new_collection.collection_id})")
        return self._with_creator([collection_dict])[0]

    def list_visible(self, current_user_id: Optional[str]) -> List[Dict[str, Any]]:
        """공개 컬렉션과, 로그인한 경우 본인의 비공개 컬렉션을 최신순으로 반환합니다."""
        public_query = self.collections_ref.where(filter=FieldFilter('is_public', '==', True))
        collections = {c['collection_id']: c for c in self.store.docs(public_query)}
        if current_user_id:
            own_query = self.collections_ref.where(filter=FieldFilter('creator_id', '==', current_user_id))
            for c in self.store.docs(own_query):
                collections[c['collection_id']] = c
        ordered = sorted(collections.values(), key=lambda c: c['created_at'], reverse=True)
        return self._with_creator(ordered)

    def list_public(self) -> List[Dict[str, Any]]:
        query = (self.collections_ref
                 .where(filter=FieldFilter('is_public', '==', True))
                 .order_by('created_at', direction=firestore.Query.DESCENDING)
                 .limit(self.public_limit))
        return self._with_creator(self.store.docs(query))
