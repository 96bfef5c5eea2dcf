"""
탐색 엔드포인트 테스트
"""

from datetime import timedelta

from flask_jwt_extended import create_access_token


def test_list_prompts_with_multi_value_category(client, make_user, make_prompt):
    alice = make_user("alice")
    coding = make_prompt(alice['user_id'], category='coding')
    writing = make_prompt(alice['user_id'], category='writing')
    make_prompt(alice['user_id'], category='design')

    repeated = client.get('/api/prompts?category=coding&category=writing').get_json()
    comma = client.get('/api/prompts?category=coding,writing').get_json()

    expected = {coding['prompt_id'], writing['prompt_id']}
    assert {p['prompt_id'] for p in repeated} == expected
    assert {p['prompt_id'] for p in comma} == expected


def test_list_prompts_sorted_by_trending(client, make_user, make_prompt):
    alice = make_user("alice")
    hot = make_prompt(alice['user_id'], likes=[f"u{i}" for i in range(10)], views=50)
    warm = make_prompt(alice['user_id'], likes=[f"u{i}" for i in range(14)], views=9)

    prompts = client.get('/api/prompts?sort_by=trending').get_json()
    assert [p['prompt_id'] for p in prompts] == [hot['prompt_id'], warm['prompt_id']]
    assert prompts[0]['trending_score'] == 15.0


def test_invalid_query_returns_400(client):
    assert client.get('/api/prompts?sort_by=popular').status_code == 400
    assert client.get('/api/prompts?category=cooking').status_code == 400
    assert client.get('/api/prompts/random?time_range=decade').status_code == 400


def test_random_prompt(client, make_user, make_prompt):
    alice = make_user("alice")
    assert client.get('/api/prompts/random').status_code == 404

    prompt = make_prompt(alice['user_id'], category='design')
    response = client.get('/api/prompts/random?creative=true')
    assert response.status_code == 200
    assert response.get_json()['prompt_id'] == prompt['prompt_id']
    assert client.get('/api/prompts/random?category=coding').status_code == 404


def test_discover_creators(client, make_user, make_prompt):
    alice = make_user("alice")
    make_prompt(alice['user_id'])
    make_user("lurker")

    creators = client.get('/api/users/discover').get_json()
    assert [c['username'] for c in creators] == ["alice"]
    assert creators[0]['prompt_count'] == 1


def test_public_reads_ignore_expired_token(app, client, make_user, make_prompt):
    alice = make_user("alice")
    prompt = make_prompt(alice['user_id'], likes=[alice['user_id']])
    with app.app_context():
        expired = create_access_token(identity=alice['user_id'], expires_delta=timedelta(seconds=-10))
    headers = {"Authorization": f"Bearer {expired}"}

    listed = client.get('/api/prompts', headers=headers)
    assert listed.status_code == 200
    assert [p['is_liked'] for p in listed.get_json()] == [False]

    assert client.get('/api/prompts/random', headers=headers).status_code == 200
    assert client.get(f"/api/prompts/{prompt['prompt_id']}", headers=headers).status_code == 200
    assert client.get(f"/api/prompts/{prompt['prompt_id']}/comments", headers=headers).status_code == 200
    assert client.get('/api/collections', headers=headers).status_code == 200
