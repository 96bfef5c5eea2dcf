"""
로그인 / 토큰 재발급 / 로그아웃 엔드포인트 테스트
"""

from flask_jwt_extended import create_refresh_token

from promptshare.services.google_auth_service import GoogleAuthService


def test_social_login_creates_user_and_issues_tokens(app, client, monkeypatch):
    app.config['GOOGLE_CLIENT_SECRETS_PATH'] = "client_secret.json"
    monkeypatch.setattr(GoogleAuthService, 'exchange_code_for_user_info', staticmethod(
        lambda **kwargs: {"email": "dev@example.com", "name": "Dev Kim", "picture": None}
    ))

    first = client.post('/api/auth/social', json={"provider": "google", "auth_code": "code"})
    assert first.status_code == 200
    body = first.get_json()
    assert body['is_new_user'] is True
    assert body['user_info']['username'] == "devkim"

    second = client.post('/api/auth/social', json={"provider": "google", "auth_code": "code"}).get_json()
    assert second['is_new_user'] is False
    assert second['user_id'] == body['user_id']

    me = client.get("/api/notifications", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200


def test_social_login_with_bad_code(app, client, monkeypatch):
    app.config['GOOGLE_CLIENT_SECRETS_PATH'] = "client_secret.json"
    monkeypatch.setattr(GoogleAuthService, 'exchange_code_for_user_info', staticmethod(lambda **kwargs: None))

    response = client.post('/api/auth/social', json={"provider": "google", "auth_code": "bad"})
    assert response.status_code == 401
    assert client.post('/api/auth/social', json={"auth_code": "x"}).status_code == 400


def test_logout_revokes_tokens(app, client, make_user, auth_headers):
    alice = make_user("alice")
    headers = auth_headers(alice['user_id'])
    access_token = headers['Authorization'].split(" ", 1)[1]
    with app.app_context():
        refresh_token = create_refresh_token(identity=alice['user_id'])

    refreshed = client.post('/api/auth/token/refresh', headers={"Authorization": f"Bearer {refresh_token}"})
    assert refreshed.status_code == 200
    assert 'access_token' in refreshed.get_json()

    response = client.post('/api/auth/logout', json={"access_token": access_token, "refresh_token": refresh_token})
    assert response.status_code == 200

    revoked = client.get('/api/notifications', headers=headers)
    assert revoked.status_code == 401
    assert revoked.get_json()['error_code'] == "TOKEN_REVOKED"
    assert client.post('/api/auth/token/refresh',
                       headers={"Authorization": f"Bearer {refresh_token}"}).status_code == 401


def test_logout_with_garbage_token(client):
    response = client.post('/api/auth/logout', json={"access_token": "a.b.c", "refresh_token": "d.e.f"})
    assert response.status_code == 422
