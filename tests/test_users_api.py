import pytest
from rest_framework.test import APIClient

from audit.models import AuditLog
from tryon.models import TryonRequest
from tryon_backend.choices import AuditAction
from users.models import User

pytestmark = pytest.mark.django_db


def login(client, email='u1@example.com', password='secret123'):
    return client.post('/api/auth/login', {'email': email, 'password': password}, format='json')


def bearer(client, token):
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return client


def test_register(api_client):
    response = api_client.post(
        '/api/auth/register',
        {'name': 'New Person', 'email': 'New@Example.com', 'password': 'secret123'},
        format='json',
    )

    assert response.status_code == 201
    data = response.json()['data']
    assert data['user']['email'] == 'new@example.com'
    assert data['user']['role'] == 'user'
    assert 'password' not in data['user']
    assert set(data['tokens']) == {'access', 'refresh'}
    assert AuditLog.objects.filter(action=AuditAction.USER_REGISTER).count() == 1


def test_register_duplicate_email(api_client, user):
    response = api_client.post(
        '/api/auth/register',
        {'name': 'Again', 'email': 'U1@example.com', 'password': 'secret123'},
        format='json',
    )

    assert response.status_code == 400
    assert response.json()['errors']['email'] == ['Email already registered']


def test_register_short_password(api_client):
    response = api_client.post(
        '/api/auth/register',
        {'name': 'Short', 'email': 'short@example.com', 'password': '123'},
        format='json',
    )

    assert response.status_code == 400
    assert 'password' in response.json()['errors']


def test_login_and_me(api_client, user):
    response = login(api_client, email='U1@Example.com')

    assert response.status_code == 200
    token = response.json()['data']['tokens']['access']
    me = bearer(APIClient(), token).get('/api/auth/me')
    assert me.status_code == 200
    assert me.json()['data']['email'] == 'u1@example.com'


def test_login_wrong_password(api_client, user):
    response = login(api_client, password='wrong-password')

    assert response.status_code == 401
    assert response.json()['message'] == 'Invalid email or password'


def test_blocked_user_cannot_login_or_use_token(api_client, user):
    token = login(api_client).json()['data']['tokens']['access']
    user.is_blocked = True
    user.save()

    assert login(api_client).status_code == 403
    assert bearer(APIClient(), token).get('/api/auth/me').status_code == 403


def test_logout_is_audited(user_client):
    assert user_client.post('/api/auth/logout').status_code == 200
    assert AuditLog.objects.filter(action=AuditAction.USER_LOGOUT).count() == 1


def test_password_reset_flow(api_client, settings, user):
    settings.DEBUG = True

    forgot = api_client.post('/api/auth/forgot-password', {'email': 'u1@example.com'}, format='json').json()
    token = forgot['resetToken']
    user.refresh_from_db()
    assert user.reset_password_token != token

    reset = api_client.post('/api/auth/reset-password', {'token': token, 'password': 'brand-new'}, format='json')
    assert reset.status_code == 200
    assert login(api_client, password='brand-new').status_code == 200

    again = api_client.post('/api/auth/reset-password', {'token': token, 'password': 'another1'}, format='json')
    assert again.status_code == 400


def test_forgot_password_does_not_reveal_accounts(api_client, settings, user):
    settings.DEBUG = False

    known = api_client.post('/api/auth/forgot-password', {'email': 'u1@example.com'}, format='json').json()
    unknown = api_client.post('/api/auth/forgot-password', {'email': 'nobody@example.com'}, format='json').json()

    assert known == unknown


def test_profile_update_merges_body_info(user_client, user):
    user.body_gender = 'female'
    user.save()

    response = user_client.put(
        '/api/users/profile',
        {'name': 'Renamed', 'bodyInfo': {'height': 170}},
        format='json',
    )

    assert response.status_code == 200
    assert response.json()['data']['bodyInfo'] == {'gender': 'female', 'height': 170, 'bodyType': None}
    assert response.json()['data']['name'] == 'Renamed'


def test_profile_update_rejects_out_of_range_height(user_client):
    response = user_client.put('/api/users/profile', {'bodyInfo': {'height': 20}}, format='json')

    assert response.status_code == 400


def test_profile_image_replaces_previous(wired, storage, user_client, user, photo):
    user.profile_image_url = 'https://cdn.test/profiles/old.webp'
    user.save()

    response = user_client.put('/api/users/profile-image', {'image': photo()}, format='multipart')

    assert response.status_code == 200
    assert response.json()['data']['profileImage'].startswith('https://cdn.test/profiles/blob')
    assert storage.deleted == ['profiles/old.webp']


def test_change_password(user_client, user):
    wrong = user_client.put(
        '/api/users/password',
        {'currentPassword': 'nope', 'newPassword': 'secret456'},
        format='json',
    )
    assert wrong.status_code == 400

    ok = user_client.put(
        '/api/users/password',
        {'currentPassword': 'secret123', 'newPassword': 'secret456'},
        format='json',
    )
    assert ok.status_code == 200
    user.refresh_from_db()
    assert user.check_password('secret456')


def test_favorites_are_a_set(user_client, garment, make_garment):
    hidden = make_garment(name='Hidden', is_active=False)

    user_client.post(f'/api/users/favorites/{garment.pk}')
    second = user_client.post(f'/api/users/favorites/{garment.pk}')
    assert second.json()['data']['favorites'] == [garment.pk]

    assert user_client.post(f'/api/users/favorites/{hidden.pk}').status_code == 404

    listed = user_client.get('/api/users/favorites').json()['data']
    assert [row['id'] for row in listed] == [garment.pk]

    removed = user_client.delete(f'/api/users/favorites/{garment.pk}')
    assert removed.json()['data']['favorites'] == []
    assert user_client.delete(f'/api/users/favorites/{garment.pk}').status_code == 200


def test_delete_account(wired, storage, user_client, user, garment, make_tryon):
    make_tryon(user, garment)

    wrong = user_client.delete('/api/users/account', {'password': 'nope'}, format='json')
    assert wrong.status_code == 400

    response = user_client.delete('/api/users/account', {'password': 'secret123'}, format='json')

    assert response.status_code == 200
    assert not User.objects.filter(pk=user.pk).exists()
    assert TryonRequest.objects.count() == 0
    assert 'tryon/output/out.webp' in storage.deleted
    entry = AuditLog.objects.get(action=AuditAction.ACCOUNT_DELETE)
    assert entry.user_id is None
    assert entry.details['email'] == 'u1@example.com'


def test_admin_cannot_delete_own_account(wired, admin_client, admin_user):
    response = admin_client.delete('/api/users/account', {'password': 'secret123'}, format='json')

    assert response.status_code == 400
    assert User.objects.filter(pk=admin_user.pk).exists()
