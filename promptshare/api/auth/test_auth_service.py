"""
로그인 사용자 생성 및 토큰 무효화 목록 테스트
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

from promptshare.services.firestore_service import REVOKED_TOKENS, USERS


def test_get_or_create_user_by_email(services, fake_db):
    profile = {"email": "Jane.Doe@example.com", "name": "Jane Doe", "picture": "https://example.com/a.png"}
    auth = services['auth']

    user, is_new = auth.get_or_create_user(profile)
    assert is_new is True
    assert user['username'] == "janedoe"
    assert user['role'] == 'user'
    assert user['avatar_url'] == "https://example.com/a.png"

    again, is_new_again = auth.get_or_create_user(profile)
    assert is_new_again is False
    assert again['user_id'] == user['user_id']
    assert len(fake_db.documents(USERS)) == 1


def test_logout_revokes_both_tokens(services, fake_db):
    auth = services['auth']
    expires = int(time.time()) + 600
    auth.logout_user("access-jti", expires, "refresh-jti", expires)

    assert set(fake_db.documents(REVOKED_TOKENS)) == {"access-jti", "refresh-jti"}
    assert auth.is_token_revoked({"jti": "access-jti"}) is True
    assert auth.is_token_revoked({"jti": "other"}) is False
    assert auth.is_token_revoked({}) is False


def test_concurrent_first_sign_in_creates_one_user(services, fake_db, monkeypatch):
    auth = services['auth']
    workers = 4
    # 모든 요청이 "사용자 없음"을 확인한 뒤에 동시에 생성을 시도하도록 맞춥니다.
    barrier = threading.Barrier(workers)
    original_create_unique = auth.store.create_unique

    def create_after_everyone_checked(*args, **kwargs):
        barrier.wait(timeout=5)
        return original_create_unique(*args, **kwargs)

    monkeypatch.setattr(auth.store, 'create_unique', create_after_everyone_checked)

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(lambda _: auth.get_or_create_user({"email": "race@example.com"}), range(workers)))

    assert [is_new for _, is_new in results].count(True) == 1
    assert len({user['user_id'] for user, _ in results}) == 1
    assert len(fake_db.documents(USERS)) == 1


def test_sign_in_finds_user_registered_without_email_key(services, fake_db, make_user):
    admin = make_user("admin", role='admin')

    user, is_new = services['auth'].get_or_create_user({"email": admin['email']})

    assert is_new is False
    assert user['user_id'] == admin['user_id']
    assert len(fake_db.documents(USERS)) == 1
