"""
좋아요 토글(EngagementLedger) 테스트

사용법: python -m pytest promptshare/services/test_engagement_service.py -v
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from promptshare.core.errors import NotFoundError
from promptshare.services.engagement_service import LikeTarget
from promptshare.services.firestore_service import COMMENTS, NOTIFICATIONS, PROMPTS


def test_toggle_twice_restores_original_state(services, store, make_user, make_prompt):
    alice = make_user("alice")
    bob = make_user("bob")
    prompt = make_prompt(alice['user_id'])
    ledger = services['engagement']

    liked = ledger.toggle_like(bob['user_id'], prompt['prompt_id'], LikeTarget.PROMPT)
    assert liked['is_liked'] is True
    assert liked['like_count'] == 1

    unliked = ledger.toggle_like(bob['user_id'], prompt['prompt_id'], LikeTarget.PROMPT)
    assert unliked['is_liked'] is False
    assert unliked['like_count'] == 0
    assert store.get(PROMPTS, prompt['prompt_id'])['likes'] == []


def test_toggle_missing_target_raises_not_found(services, make_user):
    bob = make_user("bob")
    with pytest.raises(NotFoundError):
        services['engagement'].toggle_like(bob['user_id'], "no-such-prompt", LikeTarget.PROMPT)
    with pytest.raises(NotFoundError):
        services['engagement'].toggle_like(bob['user_id'], "no-such-comment", LikeTarget.COMMENT)


def test_like_scenario_notifies_creator_once(services, fake_db, store, make_user, make_prompt):
    """B 좋아요 -> A 알림, A 본인 좋아요 -> 알림 없음, B 취소 -> 알림 변화 없음"""
    a = make_user("creator_a")
    b = make_user("fan_b")
    prompt = make_prompt(a['user_id'], title="여행 일정 짜기")
    ledger = services['engagement']

    ledger.toggle_like(b['user_id'], prompt['prompt_id'], LikeTarget.PROMPT)
    assert store.get(PROMPTS, prompt['prompt_id'])['likes'] == [b['user_id']]
    notifications = list(fake_db.documents(NOTIFICATIONS).values())
    assert len(notifications) == 1
    assert notifications[0]['user_id'] == a['user_id']
    assert notifications[0]['from_user_id'] == b['user_id']
    assert notifications[0]['type'] == 'like'
    assert notifications[0]['related_prompt_id'] == prompt['prompt_id']
    assert "fan_b" in notifications[0]['message']
    assert "여행 일정 짜기" in notifications[0]['message']

    ledger.toggle_like(a['user_id'], prompt['prompt_id'], LikeTarget.PROMPT)
    assert set(store.get(PROMPTS, prompt['prompt_id'])['likes']) == {a['user_id'], b['user_id']}
    assert len(fake_db.documents(NOTIFICATIONS)) == 1

    ledger.toggle_like(b['user_id'], prompt['prompt_id'], LikeTarget.PROMPT)
    assert store.get(PROMPTS, prompt['prompt_id'])['likes'] == [a['user_id']]
    assert len(fake_db.documents(NOTIFICATIONS)) == 1


def test_comment_like_never_notifies(services, fake_db, store, make_user, make_prompt, make_comment):
    a = make_user("alice")
    b = make_user("bob")
    prompt = make_prompt(a['user_id'])
    comment = make_comment(prompt['prompt_id'], a['user_id'])

    result = services['engagement'].toggle_like(b['user_id'], comment['comment_id'], LikeTarget.COMMENT)

    assert result['like_count'] == 1
    assert store.get(COMMENTS, comment['comment_id'])['likes'] == [b['user_id']]
    assert fake_db.documents(NOTIFICATIONS) == {}


def test_concurrent_likes_from_different_users_are_all_kept(services, store, make_user, make_prompt):
    creator = make_user("creator")
    fans = [make_user(f"fan{i}") for i in range(20)]
    prompt = make_prompt(creator['user_id'])
    ledger = services['engagement']

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda u: ledger.toggle_like(u['user_id'], prompt['prompt_id'], LikeTarget.PROMPT), fans))

    likes = store.get(PROMPTS, prompt['prompt_id'])['likes']
    assert len(likes) == 20
    assert set(likes) == {u['user_id'] for u in fans}


def test_notification_failure_does_not_undo_like(services, store, make_user, make_prompt, monkeypatch):
    a = make_user("alice")
    b = make_user("bob")
    prompt = make_prompt(a['user_id'])

    def broken_set(*args, **kwargs):
        raise RuntimeError("firestore unavailable")

    monkeypatch.setattr(services['notifications'].store, 'set', broken_set)
    result = services['engagement'].toggle_like(b['user_id'], prompt['prompt_id'], LikeTarget.PROMPT)

    assert result['is_liked'] is True
    assert store.get(PROMPTS, prompt['prompt_id'])['likes'] == [b['user_id']]


def test_target_deleted_before_update_raises_not_found(services, fake_db, store, make_user, make_prompt, monkeypatch):
    alice = make_user("alice")
    bob = make_user("bob")
    prompt = make_prompt(alice['user_id'])
    original_get = store.get

    def get_then_delete(collection_name, doc_id):
        data = original_get(collection_name, doc_id)
        if collection_name == PROMPTS:
            store.delete(PROMPTS, doc_id)
        return data

    monkeypatch.setattr(store, 'get', get_then_delete)

    with pytest.raises(NotFoundError):
        services['engagement'].toggle_like(bob['user_id'], prompt['prompt_id'], LikeTarget.PROMPT)
    assert fake_db.documents(NOTIFICATIONS) == {}
