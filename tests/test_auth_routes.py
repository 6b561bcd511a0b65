from tortillas.models import Role, User
from tortillas.services import credential_store


def test_register_returns_public_user(client):
    r = client.post('/api/register', json={'username': 'chef1', 'password': 'secret123'})
    assert r.status_code == 201
    body = r.get_json()
    assert body['status'] == 'success'
    assert body['data']['username'] == 'chef1'
    assert body['data']['role'] == 'user'
    assert 'password' not in body['data']
    assert 'password_hash' not in body['data']

    # registration logs the new account in
    r = client.get('/api/user')
    assert r.status_code == 200
    assert r.get_json()['data']['username'] == 'chef1'


def test_register_accepts_login_name_alias(client):
    r = client.post('/api/register', json={'loginName': 'chef2', 'password': 'secret123'})
    assert r.status_code == 201
    assert r.get_json()['data']['username'] == 'chef2'


def test_register_duplicate_is_400(client, make_user):
    make_user('chef1', 'secret123')
    r = client.post('/api/register', json={'username': 'chef1', 'password': 'whatever1'})
    assert r.status_code == 400
    body = r.get_json()
    assert body == {'status': 'error', 'message': 'Username already taken'}


def test_register_validation_is_400(client):
    r = client.post('/api/register', json={'username': 'ab', 'password': 'secret123'})
    assert r.status_code == 400
    assert r.get_json()['status'] == 'error'

    r = client.post('/api/register', data='not json', content_type='text/plain')
    assert r.status_code == 400

    r = client.post('/api/register', json=['username', 'password'])
    assert r.status_code == 400


def test_login_and_current_user(client, make_user, login):
    make_user('chef1', 'secret123')
    r = login('chef1', 'secret123')
    assert r.status_code == 200
    data = r.get_json()['data']
    assert data['username'] == 'chef1'
    assert 'password' not in data and 'password_hash' not in data

    for path in ('/api/user', '/api/currentUser'):
        r = client.get(path)
        assert r.status_code == 200
        assert r.get_json()['data']['id'] == data['id']


def test_login_errors_do_not_reveal_account_existence(client, make_user, login):
    make_user('chef1', 'secret123')
    wrong_password = login('chef1', 'wrong')
    unknown_user = login('nobody', 'secret123')

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.get_json() == unknown_user.get_json()
    assert 'chef1' not in wrong_password.get_data(as_text=True)


def test_current_user_anonymous_is_401(client):
    r = client.get('/api/currentUser')
    assert r.status_code == 401
    assert r.get_json() == {'status': 'error', 'message': 'Not authenticated'}


def test_logout_always_200(client, make_user, login):
    r = client.post('/api/logout')
    assert r.status_code == 200

    make_user('chef1', 'secret123')
    login('chef1', 'secret123')
    assert client.post('/api/logout').status_code == 200
    assert client.post('/api/logout').status_code == 200
    assert client.get('/api/user').status_code == 401


def test_chef_scenario_role_is_read_fresh(app, client, login):
    r = client.post('/api/register', json={'username': 'chef1', 'password': 'secret123'})
    assert r.status_code == 201
    assert r.get_json()['data']['role'] == 'user'
    client.post('/api/logout')

    r = login('chef1', 'wrong')
    assert r.status_code == 401
    assert 'chef1' not in r.get_json()['message']

    r = login('chef1', 'secret123')
    assert r.status_code == 200
    assert r.get_json()['data']['role'] == 'user'
    assert client.get('/api/admin/stats').status_code == 403

    with app.app_context():
        user = credential_store.find_by_login_name('chef1')
        credential_store.set_role(user, Role.ADMIN)

    # the next request already sees the new role
    assert client.get('/api/user').get_json()['data']['role'] == 'admin'
    assert client.get('/api/admin/stats').status_code == 200

    client.post('/api/logout')
    r = login('chef1', 'secret123')
    assert r.get_json()['data']['role'] == 'admin'


def test_duplicate_registration_keeps_single_account(app, client):
    first = client.post('/api/register', json={'username': 'dup', 'password': 'secret123'})
    second = app.test_client().post('/api/register', json={'username': 'dup', 'password': 'other-pass'})

    assert sorted([first.status_code, second.status_code]) == [201, 400]
    with app.app_context():
        assert User.query.filter_by(username='dup').count() == 1
        assert credential_store.verify_password(
            'secret123', credential_store.find_by_login_name('dup').password_hash)


def test_deleted_user_session_degrades_to_anonymous(app, client, make_user, login):
    user_id = make_user('ghost', 'secret123')
    login('ghost', 'secret123')
    assert client.get('/api/user').status_code == 200

    with app.app_context():
        from tortillas.extensions import db
        db.session.delete(db.session.get(User, user_id))
        db.session.commit()

    r = client.get('/api/user')
    assert r.status_code == 401
    assert client.get('/api/my-reservations').status_code == 401


def test_my_reservations_lists_only_own(client, make_user, login):
    assert client.get('/api/my-reservations').status_code == 401

    booking = {'name': 'Ana', 'phone': '555-0101', 'date': '2026-11-02',
               'time': '20:00', 'guests': '4'}
    # anonymous booking is not linked to anyone
    assert client.post('/api/reservations', json=booking).status_code == 201

    make_user('ana', 'secret123')
    login('ana', 'secret123')
    r = client.post('/api/reservations', json={**booking, 'message': 'Window seat'})
    assert r.status_code == 201

    r = client.get('/api/my-reservations')
    assert r.status_code == 200
    data = r.get_json()['data']
    assert len(data) == 1
    assert data[0]['message'] == 'Window seat'
    assert data[0]['status'] == 'pending'
