"""
Node repository (collection: Nodes).

Nodes store ``createdBy`` and ``themeId`` as document references. Reads
replace them with the user's email and the theme's title, and turn
``createdAt`` into a display date. A reference that cannot be resolved
degrades to a placeholder string instead of failing the read.
"""

import logging
from datetime import datetime

from nodality.exceptions import NotFoundError, RepositoryError
from nodality.firebase_init import get_db
from nodality.firestore_helpers import NODES, THEMES, USERS, now, reference_id
from nodality.models import Node

logger = logging.getLogger(__name__)

DATE_FORMAT = '%m/%d/%Y'
UNKNOWN_USER = 'Unknown'
NO_THEME = 'No Theme'
UNKNOWN_DATE = 'Unknown date'


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _resolve(value, collection, field, placeholder):
    """Follow a reference and return one field of the target document."""
    if not value:
        return placeholder
    if isinstance(value, (str, dict)):
        ref_id = reference_id(value)
        if not ref_id:
            return placeholder
        snapshot = get_db().collection(collection).document(ref_id).get()
    else:
        snapshot = value.get()
    if not snapshot.exists:
        return placeholder
    return (snapshot.to_dict() or {}).get(field) or placeholder


def _format_date(value):
    if isinstance(value, datetime):
        return value.strftime(DATE_FORMAT)
    return UNKNOWN_DATE


def _denormalize(doc_snapshot):
    node = doc_snapshot.to_dict() or {}
    node['id'] = doc_snapshot.id
    node['createdAt'] = _format_date(node.get('createdAt'))
    node['createdBy'] = _resolve(node.get('createdBy'), USERS, 'email', UNKNOWN_USER)
    node['themeId'] = _resolve(node.get('themeId'), THEMES, 'title', NO_THEME)
    return node


def _reference(collection, value):
    ref_id = reference_id(value)
    if not ref_id:
        return None
    return get_db().collection(collection).document(ref_id)


# ========================================================================
# Reads
# ========================================================================

def get_all_nodes():
    """Get every node with references resolved to display values."""
    try:
        return [_denormalize(doc) for doc in get_db().collection(NODES).stream()]
    except Exception as e:
        logger.exception('Failed to get nodes')
        raise RepositoryError('Failed to get nodes.', e) from e


def get_node_by_id(node_id):
    """Get one node with references resolved. Raises NotFoundError."""
    try:
        snapshot = get_db().collection(NODES).document(node_id).get()
    except Exception as e:
        logger.exception('Failed to get node %s', node_id)
        raise RepositoryError('Failed to get node.', e) from e
    if not snapshot.exists:
        raise NotFoundError('Node does not exist.')
    try:
        return _denormalize(snapshot)
    except Exception as e:
        logger.exception('Failed to get node %s', node_id)
        raise RepositoryError('Failed to get node.', e) from e


def get_node(node_id):
    """Get the stored data of a node. Returns dict or None."""
    try:
        snapshot = get_db().collection(NODES).document(node_id).get()
    except Exception:
        logger.exception('Failed to get node %s', node_id)
        return None
    if not snapshot.exists:
        return None
    return snapshot.to_dict()


# ========================================================================
# Writes
# ========================================================================

def save_node(node):
    """Create a node, or update it when ``node`` carries an ``id``.

    ``createdBy`` and ``themeId`` may be references, ``{'id': ...}`` dicts
    or bare ids. On update, a reference left out keeps the stored one.
    Returns ``{'success': True, 'id': ...}`` or
    ``{'success': False, 'error': ...}``.
    """
    try:
        nodes = get_db().collection(NODES)
        if node.get('id'):
            node_ref = nodes.document(node['id'])
            current = node_ref.get()
            if not current.exists:
                raise NotFoundError('Node does not exist.')
            current_node = current.to_dict() or {}

            created_by = _reference(USERS, node.get('createdBy') or current_node.get('createdBy'))
            theme = _reference(THEMES, node.get('themeId') or current_node.get('themeId'))

            node_ref.update({
                'title': node.get('title', current_node.get('title')),
                'content': node.get('content', current_node.get('content')),
                'createdBy': created_by,
                'themeId': theme,
            })
        else:
            _, node_ref = nodes.add(Node(
                title=node.get('title', ''),
                content=node.get('content', ''),
                created_at=node.get('createdAt') or now(),
                created_by=_reference(USERS, node.get('createdBy')),
                theme=_reference(THEMES, node.get('themeId')),
            ).to_dict())
        return {'success': True, 'id': node_ref.id}
    except Exception as e:
        logger.error('Failed to save node: %s', e)
        return {'success': False, 'error': str(e)}


def delete_node(node_id):
    """Delete a node document."""
    try:
        get_db().collection(NODES).document(node_id).delete()
    except Exception as e:
        logger.exception('Failed to delete node %s', node_id)
        raise RepositoryError('Failed to delete node.', e) from e
