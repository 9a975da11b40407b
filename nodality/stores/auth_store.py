import logging

from nodality.exceptions import AuthError
from nodality.repositories import user_repository
from nodality.services import auth_service
from nodality.stores.writable import Writable

logger = logging.getLogger(__name__)

SIGNED_OUT = {'user': None, 'is_admin': False, 'is_loading': False}


class AuthStore(Writable):
    """Signed-in user of one client connection."""

    def __init__(self):
        super().__init__({'user': None, 'is_admin': False, 'is_loading': True})

    def login(self, email, password):
        try:
            user = auth_service.login(email, password)
        except AuthError as e:
            raise AuthError(f'Error signing in: {e}', e) from e
        self.update(lambda state: {
            **state,
            'user': {'uid': user['uid'], 'email': user['email']},
            'is_admin': user['is_admin'],
            'is_loading': False,
        })
        return user

    def logout(self):
        user = self.get()['user']
        if user is not None:
            try:
                auth_service.logout(user['uid'])
            except AuthError as e:
                raise AuthError(f'Error signing out: {e}', e) from e
        self.update(lambda state: {**state, 'user': None, 'is_admin': False})

    def reset_password(self, email):
        try:
            auth_service.send_password_reset(email)
        except AuthError as e:
            raise AuthError(f'Error sending the password reset email: {e}', e) from e

    def check_auth_state(self, session_cookie):
        """Load the user behind a session cookie.

        Never raises: an invalid cookie or a failing lookup leaves the
        store signed out.
        """
        self.update(lambda state: {**state, 'is_loading': True})
        if not session_cookie:
            self.set(dict(SIGNED_OUT))
            return
        try:
            claims = auth_service.verify_session_cookie(session_cookie)
            uid = claims['uid']
            profile = user_repository.get_user(uid) or {}
            self.set({
                'user': {'uid': uid, 'email': claims.get('email') or profile.get('email')},
                'is_admin': bool(profile.get('admin', False)),
                'is_loading': False,
            })
        except Exception as e:
            logger.error('Error checking auth state: %s', e)
            self.set(dict(SIGNED_OUT))
