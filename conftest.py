# conftest.py
"""
공용 pytest 픽스처.

모든 테스트는 인메모리 Firestore(FakeFirestore)를 주입한 앱 인스턴스 위에서 실행됩니다.
"""

from dataclasses import asdict
from datetime import timedelta

import pytest
from flask_jwt_extended import create_access_token

from promptshare import create_app
from promptshare.models.comment import Comment
from promptshare.models.prompt import Prompt
from promptshare.models.user import User
from promptshare.services.firestore_service import COMMENTS, PROMPTS, USERS
from promptshare.testing.fake_firestore import FakeFirestore
from promptshare.utils.datetime_utils import DateTimeUtils
from promptshare.utils.ids import new_id


@pytest.fixture
def fake_db():
    return FakeFirestore()


@pytest.fixture
def app(fake_db):
    return create_app('testing', db=fake_db)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return app.services


@pytest.fixture
def store(services):
    return services['store']


@pytest.fixture
def make_user(store):
    """users 컬렉션에 사용자를 직접 만들고 딕셔너리를 돌려줍니다."""
    def _make_user(username: str, role: str = 'user', **overrides):
        user = User(user_id=new_id(), email=f"{username}@example.com", username=username, role=role)
        data = asdict(user)
        data.update(overrides)
        store.set(USERS, data['user_id'], data)
        return data
    return _make_user


@pytest.fixture
def make_prompt(store):
    """
    prompts 컬렉션에 프롬프트를 직접 만듭니다.
    age_days 를 주면 그만큼 과거에 작성된 것으로 기록합니다.
    """
    def _make_prompt(creator_id: str, title: str = "샘플 프롬프트", age_days: float = 0, **overrides):
        created_at = DateTimeUtils.now() - timedelta(days=age_days)
        prompt = Prompt(prompt_id=new_id(), creator_id=creator_id, title=title,
                        body=f"{title} 본문", created_at=created_at, updated_at=created_at)
        data = asdict(prompt)
        data.update(overrides)
        store.set(PROMPTS, data['prompt_id'], data)
        return data
    return _make_prompt


@pytest.fixture
def make_comment(store):
    def _make_comment(prompt_id: str, author_id: str, content: str = "댓글", parent_comment_id=None,
                      age_seconds: float = 0):
        created_at = DateTimeUtils.now() - timedelta(seconds=age_seconds)
        comment = Comment(comment_id=new_id(), prompt_id=prompt_id, author_id=author_id, content=content,
                          parent_comment_id=parent_comment_id, created_at=created_at, updated_at=created_at)
        data = asdict(comment)
        store.set(COMMENTS, data['comment_id'], data)
        return data
    return _make_comment


@pytest.fixture
def auth_headers(app):
    """사용자 ID 로 실제 access token 을 발급해 Authorization 헤더를 만듭니다."""
    def _auth_headers(user_id: str):
        with app.app_context():
            token = create_access_token(identity=user_id)
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers
