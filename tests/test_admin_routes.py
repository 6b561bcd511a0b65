import pytest
from sqlalchemy.exc import OperationalError

from tortillas.errors import ValidationError
from tortillas.extensions import db
from tortillas.models import MenuCategory, MenuItem, Reservation, ReservationStatus

ADMIN_ENDPOINTS = [
    ('get', '/api/admin/stats'),
    ('get', '/api/admin/menu/categories'),
    ('post', '/api/admin/menu/categories'),
    ('put', '/api/admin/menu/categories/1'),
    ('delete', '/api/admin/menu/categories/1'),
    ('get', '/api/admin/menu/items'),
    ('post', '/api/admin/menu/items'),
    ('get', '/api/admin/gallery'),
    ('post', '/api/admin/gallery'),
    ('get', '/api/admin/reservations'),
    ('put', '/api/admin/reservations/1/status'),
]


@pytest.mark.parametrize('method,path', ADMIN_ENDPOINTS)
def test_admin_access_control(client, make_user, login, method, path):
    r = getattr(client, method)(path, json={})
    assert r.status_code == 401
    assert r.get_json()['message'] == 'Not authenticated'

    make_user('normal', 'secret123')
    login('normal', 'secret123')
    r = getattr(client, method)(path, json={})
    assert r.status_code == 403
    assert r.get_json() == {'status': 'error', 'message': 'Forbidden'}


def test_stats(admin_client):
    admin_client.post('/api/reservations', json={
        'name': 'Ana', 'phone': '1', 'date': '2026-11-02', 'time': '20:00', 'guests': '2'})
    data = admin_client.get('/api/admin/stats').get_json()['data']
    assert data['users'] == 1
    assert data['reservations'] == 1
    assert data['pending_reservations'] == 1
    assert data['menu_items'] == 0


def test_category_crud(app, admin_client):
    r = admin_client.post('/api/admin/menu/categories',
                          json={'name': 'Tacos', 'description': 'Corn tortillas', 'order': 1})
    assert r.status_code == 201
    category = r.get_json()['data']

    r = admin_client.post('/api/admin/menu/categories', json={'name': 'Tacos'})
    assert r.status_code == 400

    r = admin_client.put(f"/api/admin/menu/categories/{category['id']}", json={'order': 5})
    assert r.status_code == 200
    assert r.get_json()['data']['order'] == 5
    assert r.get_json()['data']['name'] == 'Tacos'

    r = admin_client.post('/api/admin/menu/items', json={
        'name': 'Taco al pastor', 'description': 'Pork', 'price': 950,
        'category_id': category['id']})
    assert r.status_code == 201

    r = admin_client.delete(f"/api/admin/menu/categories/{category['id']}")
    assert r.status_code == 200
    assert admin_client.get('/api/admin/menu/categories').get_json()['data'] == []
    with app.app_context():
        assert MenuItem.query.count() == 0

    r = admin_client.delete(f"/api/admin/menu/categories/{category['id']}")
    assert r.status_code == 404


def test_menu_item_crud(admin_client):
    category = admin_client.post('/api/admin/menu/categories',
                                 json={'name': 'Entradas'}).get_json()['data']

    r = admin_client.post('/api/admin/menu/items', json={
        'name': 'Guacamole', 'description': 'Fresh', 'price': 700,
        'category_id': category['id'], 'vegetarian': True, 'featured': 'true'})
    assert r.status_code == 201
    item = r.get_json()['data']
    assert item['vegetarian'] is True
    assert item['featured'] is True
    assert item['active'] is True

    r = admin_client.put(f"/api/admin/menu/items/{item['id']}",
                         json={'price': 750, 'active': False})
    assert r.status_code == 200
    assert r.get_json()['data']['price'] == 750
    assert r.get_json()['data']['active'] is False
    assert r.get_json()['data']['name'] == 'Guacamole'

    r = admin_client.put(f"/api/admin/menu/items/{item['id']}", json={'price': 'cheap'})
    assert r.status_code == 400

    listed = admin_client.get('/api/admin/menu/items').get_json()['data']
    assert [i['price'] for i in listed] == [750]

    assert admin_client.delete(f"/api/admin/menu/items/{item['id']}").status_code == 200
    assert admin_client.delete(f"/api/admin/menu/items/{item['id']}").status_code == 404


def test_menu_item_validation(admin_client):
    r = admin_client.post('/api/admin/menu/items', json={
        'name': 'Orphan', 'description': 'No category', 'price': 100, 'category_id': 999})
    assert r.status_code == 400
    assert r.get_json()['message'] == 'Category does not exist.'

    r = admin_client.post('/api/admin/menu/items', json={'name': 'Incomplete'})
    assert r.status_code == 400

def test_out_of_range_integers_are_rejected(admin_client):
    category = admin_client.post('/api/admin/menu/categories',
                                 json={'name': 'Postres'}).get_json()['data']

    # 1e400 decodes to float('inf')
    r = admin_client.post(
        '/api/admin/menu/items',
        data='{"name": "Flan", "description": "d", "price": 1e400, "category_id": %d}'
             % category['id'],
        content_type='application/json')
    assert r.status_code == 400
    assert r.get_json()['message'] == 'price must be an integer.'

    r = admin_client.post('/api/admin/menu/items', json={
        'name': 'Flan', 'description': 'd', 'price': 10 ** 30, 'category_id': category['id']})
    assert r.status_code == 400
    assert 'at most' in r.get_json()['message']

    r = admin_client.put(f"/api/admin/menu/categories/{category['id']}",
                         json={'order': -10 ** 30})
    assert r.status_code == 400

    r = admin_client.post('/api/admin/gallery',
                          json={'title': 'Patio', 'src': '/img/p.jpg', 'order': 2 ** 31})
    assert r.status_code == 400

    r = admin_client.post('/api/admin/menu/items', json={
        'name': 'Flan', 'description': 'd', 'price': 2 ** 31 - 1, 'category_id': category['id']})
    assert r.status_code == 201


def test_duplicate_category_rename_names_the_conflict(admin_client):
    admin_client.post('/api/admin/menu/categories', json={'name': 'Tacos'})
    other = admin_client.post('/api/admin/menu/categories',
                              json={'name': 'Entradas'}).get_json()['data']

    r = admin_client.put(f"/api/admin/menu/categories/{other['id']}", json={'name': 'Tacos'})
    assert r.status_code == 400
    assert r.get_json() == {'status': 'error',
                            'message': 'A category named "Tacos" already exists.'}

    names = [c['name'] for c in admin_client.get('/api/admin/menu/categories').get_json()['data']]
    assert sorted(names) == ['Entradas', 'Tacos']


def test_error_handler_discards_pending_changes(app, admin_client):
    category = admin_client.post('/api/admin/menu/categories',
                                 json={'name': 'Tacos'}).get_json()['data']

    with app.test_request_context('/api/admin/menu/categories'):
        db.session.get(MenuCategory, category['id']).name = 'Renamed'
        response, status = app.handle_user_exception(ValidationError('order must be an integer.'))
        assert status == 400
        # a later commit, e.g. saving the session, must not persist the rename
        db.session.commit()

    with app.app_context():
        assert db.session.get(MenuCategory, category['id']).name == 'Tacos'


def test_failed_update_leaves_row_unchanged(admin_client):
    category = admin_client.post('/api/admin/menu/categories',
                                 json={'name': 'Tacos'}).get_json()['data']

    # a new client address makes the login manager mark the session stale,
    # so the session is saved on this failing request
    r = admin_client.put(f"/api/admin/menu/categories/{category['id']}",
                         json={'name': 'Renamed', 'order': 'x'},
                         headers={'X-Forwarded-For': '10.0.0.9'})
    assert r.status_code == 400

    names = [c['name'] for c in admin_client.get('/api/admin/menu/categories').get_json()['data']]
    assert names == ['Tacos']



def test_gallery_crud(admin_client):
    r = admin_client.post('/api/admin/gallery', json={'title': 'Patio', 'src': '/img/patio.jpg'})
    assert r.status_code == 201
    item = r.get_json()['data']

    r = admin_client.put(f"/api/admin/gallery/{item['id']}", json={'active': False, 'order': 3})
    assert r.status_code == 200
    assert r.get_json()['data']['active'] is False

    # hidden items stay out of the public feed
    assert admin_client.get('/api/gallery').get_json()['data'] == []
    assert len(admin_client.get('/api/admin/gallery').get_json()['data']) == 1

    r = admin_client.post('/api/admin/gallery', json={'title': 'No source'})
    assert r.status_code == 400

    assert admin_client.delete(f"/api/admin/gallery/{item['id']}").status_code == 200
    assert admin_client.put(f"/api/admin/gallery/{item['id']}", json={}).status_code == 404


def test_reservation_status(app, admin_client):
    r = admin_client.post('/api/reservations', json={
        'name': 'Ana', 'phone': '1', 'date': '2026-11-02', 'time': '20:00', 'guests': '2'})
    reservation_id = r.get_json()['data']['reservation']['id']

    r = admin_client.put(f'/api/admin/reservations/{reservation_id}/status',
                         json={'status': 'confirmed'})
    assert r.status_code == 200
    assert r.get_json()['data']['status'] == 'confirmed'

    r = admin_client.put(f'/api/admin/reservations/{reservation_id}/status',
                         json={'status': 'eaten'})
    assert r.status_code == 400

    assert admin_client.put('/api/admin/reservations/999/status',
                            json={'status': 'cancelled'}).status_code == 404

    listed = admin_client.get('/api/admin/reservations').get_json()['data']
    assert [res['status'] for res in listed] == ['confirmed']
    with app.app_context():
        assert db.session.get(Reservation, reservation_id).status is ReservationStatus.CONFIRMED


def test_storage_failure_is_generic_500(admin_client, monkeypatch):
    def broken(*args, **kwargs):
        raise OperationalError('SELECT 1', {}, Exception('database is gone'))

    monkeypatch.setattr(db.session, 'execute', broken)
    r = admin_client.get('/api/admin/gallery')
    assert r.status_code == 500
    body = r.get_json()
    assert body == {'status': 'error', 'message': 'Internal server error'}
    assert 'gone' not in r.get_data(as_text=True)
