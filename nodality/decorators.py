import logging
from functools import wraps
from flask import jsonify, g, session

from nodality.exceptions import AuthError
from nodality.repositories import user_repository
from nodality.services import auth_service

logger = logging.getLogger(__name__)

SESSION_KEY = 'firebase_session'


def _verify_session():
    """Verify the Firebase session cookie kept in the Flask session."""
    session_cookie = session.get(SESSION_KEY)
    if not session_cookie:
        return None

    try:
        decoded = auth_service.verify_session_cookie(session_cookie)
    except AuthError:
        return None

    uid = decoded['uid']
    try:
        profile = user_repository.get_user(uid) or {}
    except Exception as e:
        logger.error('Error loading profile for %s: %s', uid, e)
        return None
    return {
        'uid': uid,
        'email': decoded.get('email') or profile.get('email'),
        'is_admin': bool(profile.get('admin', False)),
    }


class CurrentUser:
    """Proxy object providing attribute access to the current user dict."""

    def __init__(self, data=None):
        self._data = data or {}

    def __getattr__(self, name):
        if name.startswith('_'):
            raise AttributeError(name)
        return self._data.get(name)

    def get(self, key, default=None):
        return self._data.get(key, default)

    @property
    def is_authenticated(self):
        return bool(self._data)

    @property
    def uid(self):
        return self._data.get('uid', '')

    @property
    def is_admin(self):
        return bool(self._data.get('is_admin', False))

    def to_dict(self):
        return dict(self._data)


def load_current_user():
    """Load current user into g before each request."""
    if hasattr(g, '_current_user'):
        return
    g._current_user = CurrentUser(_verify_session())


def get_current_user():
    if not hasattr(g, '_current_user'):
        load_current_user()
    return g._current_user


def auth_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        user = get_current_user()
        if not user.is_authenticated:
            return jsonify({'error': 'Authentication required'}), 401
        g.current_user = user
        return f(*args, **kwargs)
    return decorated


def admin_required(f):
    @wraps(f)
    def decorated(*args, **kwargs):
        user = get_current_user()
        if not user.is_authenticated:
            return jsonify({'error': 'Authentication required'}), 401
        if not user.is_admin:
            return jsonify({'error': 'Access denied'}), 403
        g.current_user = user
        return f(*args, **kwargs)
    return decorated
