"""
Theme repository.

Thin wrapper over ``theme_service``: results are shaped for the stores and
every failure is re-raised as a RepositoryError naming the operation. A
missing theme on the chat calls surfaces as NotFoundError.
"""

import logging

from nodality.exceptions import NotFoundError, RepositoryError
from nodality.services import theme_service

logger = logging.getLogger(__name__)


def _fail(operation, error):
    logger.error('Error in %s: %s', operation, error)
    return RepositoryError(f'Error in {operation}: {error}', error)


def create_theme(title, description, image_url, created_by):
    """Create a theme. Returns ``{'message', 'theme_id'}``."""
    try:
        theme_id = theme_service.create_theme_with_auto_id(
            title, description, image_url, created_by
        )
        return {'message': 'Theme created', 'theme_id': theme_id}
    except Exception as e:
        raise _fail('create_theme', e) from e


def get_all_themes():
    try:
        return theme_service.get_themes()
    except Exception as e:
        raise _fail('get_all_themes', e) from e


def get_theme(theme_id):
    try:
        return theme_service.get_theme(theme_id)
    except Exception as e:
        raise _fail('get_theme', e) from e


def update_theme(theme_id, updated_data):
    try:
        theme_service.update_theme(theme_id, updated_data)
        return {'message': 'Theme updated'}
    except Exception as e:
        raise _fail('update_theme', e) from e


def delete_theme(theme_id):
    try:
        theme_service.delete_theme(theme_id)
        return {'message': 'Theme deleted'}
    except Exception as e:
        raise _fail('delete_theme', e) from e


def get_paginated_themes(page_size, last_visible=None):
    """Get one page of themes. Returns ``{'themes', 'last_doc'}``."""
    try:
        result = theme_service.get_themes_paginated(page_size, last_visible)
        return {
            'themes': result.get('themes') or [],
            'last_doc': result.get('last_doc'),
        }
    except Exception as e:
        raise _fail('get_paginated_themes', e) from e


def search_themes(query_text):
    """Prefix search on theme titles. Returns ``{'themes'}``."""
    try:
        return {'themes': theme_service.get_themes_by_search(query_text) or []}
    except Exception as e:
        raise _fail('search_themes', e) from e


def get_theme_messages(theme_id, limit=50):
    try:
        return theme_service.get_messages(theme_id, limit=limit)
    except NotFoundError:
        raise
    except Exception as e:
        raise _fail('get_theme_messages', e) from e


def post_theme_message(theme_id, message, sender):
    """Post to a theme's group chat. Returns ``{'message', 'message_id'}``."""
    try:
        message_id = theme_service.add_message(theme_id, message, sender)
        return {'message': 'Message sent', 'message_id': message_id}
    except NotFoundError:
        raise
    except Exception as e:
        raise _fail('post_theme_message', e) from e
