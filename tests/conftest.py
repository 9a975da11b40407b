from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from config import Config
from nodality import create_app, firebase_init
from nodality.decorators import SESSION_KEY
from nodality.services import auth_service
from nodality.stores.node_store import NodeStore, node_store
from nodality.stores.theme_store import ThemeStore, theme_store
from tests.fakes import FakeFirestore


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    WTF_CSRF_ENABLED = False
    FIREBASE_WEB_API_KEY = 'test-api-key'
    SOCKETIO_ASYNC_MODE = 'threading'
    THEMES_PAGE_SIZE = 2
    LOG_LEVEL = 'WARNING'


@pytest.fixture
def db(monkeypatch):
    """Fresh in-memory Firestore behind ``get_db()``."""
    fake = FakeFirestore()
    monkeypatch.setattr(firebase_init, '_app', object())
    monkeypatch.setattr(firebase_init, '_db', fake)
    return fake


@pytest.fixture
def fake_auth(monkeypatch):
    """Stand-in for ``firebase_admin.auth``."""
    auth = MagicMock()
    monkeypatch.setattr(auth_service, 'get_auth', lambda: auth)
    return auth


@pytest.fixture(autouse=True)
def reset_stores():
    theme_store.set(ThemeStore().get())
    node_store.set(NodeStore().get())
    yield


@pytest.fixture
def app(db, fake_auth):
    app = create_app(TestConfig)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(db):
    def _make_user(uid, email, admin=False):
        db.collection('users').document(uid).set({
            'email': email,
            'admin': admin,
            'createdAt': datetime(2024, 1, 1, tzinfo=timezone.utc),
        })
        return db.collection('users').document(uid)
    return _make_user


@pytest.fixture
def login_as(client, fake_auth, make_user):
    """Put a valid session cookie in the client for the given user."""
    def _login_as(uid='u1', email='writer@example.com', admin=False):
        make_user(uid, email, admin=admin)
        fake_auth.verify_session_cookie.return_value = {'uid': uid, 'email': email}
        with client.session_transaction() as sess:
            sess[SESSION_KEY] = f'cookie-{uid}'
        return uid
    return _login_as
