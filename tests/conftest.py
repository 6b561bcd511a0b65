import pytest

from tortillas import create_app
from tortillas.config import TestConfig
from tortillas.extensions import db
from tortillas.models import Role
from tortillas.services import credential_store


@pytest.fixture()
def app():
    app = create_app(TestConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def make_user(app):
    """Create a user directly in the store and return its id."""
    def _make(username, password, role=Role.USER):
        with app.app_context():
            return credential_store.create_user(username, password, role=role).id
    return _make


@pytest.fixture()
def login(client):
    def _login(username, password):
        return client.post('/api/login', json={'username': username, 'password': password})
    return _login


@pytest.fixture()
def admin_client(client, make_user, login):
    make_user('boss', 'adminpass', role=Role.ADMIN)
    r = login('boss', 'adminpass')
    assert r.status_code == 200
    return client
