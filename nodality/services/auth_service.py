"""
Authentication service.

Account management goes through the Admin SDK. Password sign-in and the
password-reset email are only available on the Identity Toolkit REST API,
which is called with the project's web API key.
"""

import logging
from datetime import timedelta

import requests as http_requests
from firebase_admin.exceptions import FirebaseError
from flask import current_app

from nodality.exceptions import AuthError
from nodality.firebase_init import get_auth
from nodality.repositories import user_repository

logger = logging.getLogger(__name__)

IDENTITY_TOOLKIT_URL = 'https://identitytoolkit.googleapis.com/v1/accounts'
PASSWORD_RESET_FAILED = 'Could not send the password reset email. Please try again.'


def _identity_toolkit(method, payload):
    """POST to an Identity Toolkit ``accounts:<method>`` endpoint."""
    api_key = current_app.config.get('FIREBASE_WEB_API_KEY')
    if not api_key:
        raise AuthError('FIREBASE_WEB_API_KEY is not configured')

    try:
        resp = http_requests.post(
            f'{IDENTITY_TOOLKIT_URL}:{method}?key={api_key}',
            json=payload,
            timeout=10,
        )
    except http_requests.RequestException as e:
        raise AuthError(str(e), e) from e

    try:
        body = resp.json()
    except ValueError:
        body = {}
    if resp.status_code != 200:
        message = body.get('error', {}).get('message') or f'HTTP {resp.status_code}'
        raise AuthError(message)
    return body


def register_user(email, password):
    """Create an account and its ``users`` profile. Returns the UserRecord."""
    try:
        user = get_auth().create_user(email=email, password=password)
    except (FirebaseError, ValueError) as e:
        logger.error('Error registering user %s: %s', email, e)
        raise AuthError(str(e), e) from e

    try:
        user_repository.create_user_profile(user.uid, email)
    except Exception as e:
        logger.exception('Error creating profile for %s', user.uid)
        raise AuthError(str(e), e) from e

    logger.info('Registered user %s', user.uid)
    return user


def login(email, password):
    """Sign in with email and password.

    Returns ``{'uid', 'email', 'id_token', 'is_admin'}``. ``is_admin`` comes
    from the ``users`` profile and is False when there is none.
    """
    try:
        result = _identity_toolkit('signInWithPassword', {
            'email': email,
            'password': password,
            'returnSecureToken': True,
        })
    except AuthError as e:
        logger.error('Error signing in %s: %s', email, e)
        raise

    uid = result['localId']
    logger.info('Signed in %s', uid)

    try:
        profile = user_repository.get_user(uid)
    except Exception as e:
        logger.exception('Error loading profile for %s', uid)
        raise AuthError(str(e), e) from e

    is_admin = False
    if profile:
        is_admin = bool(profile.get('admin', False))
    else:
        logger.info('User %s has no profile document', uid)

    return {
        'uid': uid,
        'email': result.get('email', email),
        'id_token': result['idToken'],
        'is_admin': is_admin,
    }


def logout(uid):
    """Sign a user out everywhere by revoking their refresh tokens."""
    try:
        get_auth().revoke_refresh_tokens(uid)
    except (FirebaseError, ValueError) as e:
        logger.error('Error signing out %s: %s', uid, e)
        raise AuthError(str(e), e) from e
    logger.info('Signed out %s', uid)


def send_password_reset(email):
    """Send the password reset email."""
    try:
        _identity_toolkit('sendOobCode', {
            'requestType': 'PASSWORD_RESET',
            'email': email,
        })
    except AuthError as e:
        logger.error('Error sending password reset to %s: %s', email, e)
        raise AuthError(PASSWORD_RESET_FAILED, e) from e
    logger.info('Password reset email sent to %s', email)


def create_session_cookie(id_token):
    expires_in = timedelta(days=current_app.config.get('SESSION_COOKIE_DAYS', 5))
    try:
        return get_auth().create_session_cookie(id_token, expires_in=expires_in)
    except (FirebaseError, ValueError) as e:
        logger.error('Error creating session cookie: %s', e)
        raise AuthError(str(e), e) from e


def verify_session_cookie(session_cookie):
    """Verify a session cookie. Returns the decoded claims."""
    try:
        return get_auth().verify_session_cookie(session_cookie, check_revoked=True)
    except (FirebaseError, ValueError) as e:
        raise AuthError(str(e), e) from e
