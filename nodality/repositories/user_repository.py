import logging

from nodality.firebase_init import get_db
from nodality.firestore_helpers import USERS, doc_to_dict
from nodality.models import UserProfile

logger = logging.getLogger(__name__)


def get_all_users():
    """List every user profile as ``{'id', 'email'}``."""
    try:
        return [
            {'id': doc.id, 'email': (doc.to_dict() or {}).get('email')}
            for doc in get_db().collection(USERS).stream()
        ]
    except Exception:
        logger.exception('Failed to list users')
        raise


def get_user(uid):
    """Get a user profile by UID. Returns dict or None."""
    doc = get_db().collection(USERS).document(uid).get()
    return doc_to_dict(doc)


def is_admin(uid):
    """Whether the profile of ``uid`` carries the admin flag."""
    data = get_user(uid)
    if data is None:
        return False
    return UserProfile.from_dict(data, uid).admin


def create_user_profile(uid, email, admin=False):
    """Create the profile document keyed by the Firebase Auth UID."""
    get_db().collection(USERS).document(uid).set(
        UserProfile(id=uid, email=email, admin=admin).to_dict()
    )
