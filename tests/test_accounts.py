import pytest
from rest_framework.authtoken.models import Token

pytestmark = pytest.mark.django_db


def test_register_returns_token(api_client, django_user_model):
    r = api_client.post('/api/register/', {
        'first_name': 'Grace',
        'last_name': 'Host',
        'email': 'grace@example.com',
        'password': 'long-enough-pass',
    }, format='json')

    assert r.status_code == 201, r.content
    body = r.json()
    assert body['user']['email'] == 'grace@example.com'
    assert body['user']['username'] == 'grace'
    assert Token.objects.get(key=body['token']).user.email == 'grace@example.com'
    assert 'password' not in body['user']


def test_register_rejects_duplicate_email_and_short_password(api_client, user):
    r = api_client.post('/api/register/', {
        'first_name': 'Ada',
        'email': user.email,
        'password': 'short',
    }, format='json')

    assert r.status_code == 400
    assert set(r.json()) >= {'email', 'password'}


def test_usernames_stay_unique(django_user_model):
    first = django_user_model.objects.create_user(email='sam@one.com', password='x' * 8, first_name='Sam')
    second = django_user_model.objects.create_user(email='sam@two.com', password='x' * 8, first_name='Sam')
    assert first.username == 'sam'
    assert second.username == 'sam_1'


def test_login(api_client, user):
    r = api_client.post('/api/login/', {'email': user.email, 'password': 's3cret-pass'}, format='json')
    assert r.status_code == 200, r.content
    assert r.json()['user']['id'] == user.id

    r = api_client.post('/api/login/', {'email': user.email, 'password': 'wrong-pass'}, format='json')
    assert r.status_code == 401

    r = api_client.post('/api/login/', {'email': user.email}, format='json')
    assert r.status_code == 400


def test_profile_and_logout(auth_client, user):
    r = auth_client.get('/api/profile/')
    assert r.status_code == 200
    assert r.json()['first_name'] == 'Ada'

    assert auth_client.post('/api/logout/').status_code == 200
    assert not Token.objects.filter(user=user).exists()
    assert auth_client.get('/api/profile/').status_code == 401
