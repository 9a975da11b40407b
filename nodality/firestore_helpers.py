"""
Shared Firestore helpers and collection names.

Repositories and services convert snapshots with these helpers so that
every read hands dicts with an 'id' field back to the stores.
"""

from datetime import datetime, timezone


THEMES = 'Themes'
NODES = 'Nodes'
USERS = 'users'
GROUP_CHAT = 'GroupChat'
MESSAGES = 'Messages'


def doc_to_dict(doc_snapshot):
    """Convert a Firestore DocumentSnapshot to a dict with 'id' field."""
    if not doc_snapshot.exists:
        return None
    d = doc_snapshot.to_dict() or {}
    d['id'] = doc_snapshot.id
    return d


def query_to_list(query_ref):
    """Run a query and return a list of dicts."""
    return [doc_to_dict(doc) for doc in query_ref.stream()]


def reference_id(value):
    """Return the document id behind a reference-like value.

    Accepts a DocumentReference (or snapshot), a ``{'id': ...}`` dict or a
    bare id string. Returns None for anything empty.
    """
    if not value:
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        return value.get('id') or None
    return getattr(value, 'id', None) or None


def now():
    return datetime.now(timezone.utc)
