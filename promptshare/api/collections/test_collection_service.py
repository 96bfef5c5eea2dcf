"""
컬렉션 생성 / 공개 범위 테스트
"""

from promptshare.api.collections.services import CollectionService


def test_private_collections_are_visible_only_to_owner(services, make_user):
    alice = make_user("alice")
    bob = make_user("bob")
    collections = services['collections']
    public = collections.create_collection(alice['user_id'], {"name": "공개 모음"})
    private = collections.create_collection(alice['user_id'], {"name": "비밀 모음", "is_public": False})

    own_view = {c['collection_id'] for c in collections.list_visible(alice['user_id'])}
    other_view = {c['collection_id'] for c in collections.list_visible(bob['user_id'])}
    anonymous_view = {c['collection_id'] for c in collections.list_visible(None)}

    assert own_view == {public['collection_id'], private['collection_id']}
    assert other_view == {public['collection_id']}
    assert anonymous_view == {public['collection_id']}
    assert public['creator']['username'] == "alice"


def test_list_public_is_capped(store, make_user):
    alice = make_user("alice")
    collections = CollectionService(store, public_limit=2)
    for i in range(3):
        collections.create_collection(alice['user_id'], {"name": f"모음 {i}"})
    collections.create_collection(alice['user_id'], {"name": "비공개", "is_public": False})

    public = collections.list_public()
    assert len(public) == 2
    assert all(c['is_public'] for c in public)
