"""
Theme service (collection: Themes).

Every theme owns a ``GroupChat`` sub-collection holding one chat document,
which in turn holds the ``Messages`` sub-collection.
"""

import logging

from google.cloud.firestore_v1 import FieldFilter

from nodality.exceptions import NotFoundError
from nodality.firebase_init import get_db
from nodality.firestore_helpers import (
    GROUP_CHAT, MESSAGES, THEMES, doc_to_dict, now, query_to_list,
)
from nodality.models import ChatMessage, Theme

logger = logging.getLogger(__name__)

WELCOME_MESSAGE = 'Welcome to the group chat!'
SEARCH_UPPER_BOUND = '\uf8ff'
# Firestore rejects batches with more than 500 writes
BATCH_LIMIT = 500


def _themes():
    return get_db().collection(THEMES)


# ========================================================================
# Themes
# ========================================================================

def create_theme_with_auto_id(title, description, image_url, created_by):
    """Create a theme with an auto ID and its group chat.

    The group chat starts with a system welcome message. Returns the
    theme ID.
    """
    timestamp = now()
    _, theme_ref = _themes().add(Theme(
        title=title,
        description=description,
        image_url=image_url,
        created_by=created_by,
        created_at=timestamp,
    ).to_dict())

    _, group_chat_ref = theme_ref.collection(GROUP_CHAT).add({})
    group_chat_ref.collection(MESSAGES).add(ChatMessage(
        message=WELCOME_MESSAGE,
        sender='system',
        timestamp=timestamp,
    ).to_dict())

    logger.info('Created theme %s', theme_ref.id)
    return theme_ref.id


def get_themes():
    """Get all themes."""
    return query_to_list(_themes())


def get_theme(theme_id):
    """Get a theme by ID. Returns dict or None."""
    return doc_to_dict(_themes().document(theme_id).get())


def update_theme(theme_id, updated_data):
    """Update fields on an existing theme."""
    _themes().document(theme_id).update(updated_data)


def delete_theme(theme_id):
    """Delete a theme together with its group chats and their messages."""
    db = get_db()
    theme_ref = _themes().document(theme_id)

    refs = []
    for group_chat in theme_ref.collection(GROUP_CHAT).stream():
        refs.extend(
            message.reference
            for message in group_chat.reference.collection(MESSAGES).stream()
        )
        refs.append(group_chat.reference)
    refs.append(theme_ref)

    for i in range(0, len(refs), BATCH_LIMIT):
        batch = db.batch()
        for ref in refs[i:i + BATCH_LIMIT]:
            batch.delete(ref)
        batch.commit()

    logger.info('Deleted theme %s (%d documents)', theme_id, len(refs))


def get_themes_paginated(page_size, last_visible=None):
    """Get one page of themes ordered by creation time.

    ``last_visible`` is the last snapshot of the previous page, or its
    theme ID. Returns ``{'themes': [...], 'last_doc': snapshot or None}``.
    """
    themes = _themes()
    if isinstance(last_visible, str):
        cursor = themes.document(last_visible).get()
        last_visible = cursor if cursor.exists else None

    query = themes.order_by('createdAt', direction='ASCENDING')
    if last_visible is not None:
        query = query.start_after(last_visible)

    docs = list(query.limit(page_size).stream())
    return {
        'themes': [doc_to_dict(doc) for doc in docs],
        'last_doc': docs[-1] if docs else None,
    }


def get_themes_by_search(query_text):
    """Get themes whose title starts with ``query_text``."""
    return query_to_list(
        _themes()
        .where(filter=FieldFilter('title', '>=', query_text))
        .where(filter=FieldFilter('title', '<=', query_text + SEARCH_UPPER_BOUND))
    )


# ========================================================================
# Group chat  (Themes/{id}/GroupChat/{id}/Messages)
# ========================================================================

def _require_theme(theme_id):
    if not _themes().document(theme_id).get().exists:
        raise NotFoundError('Theme does not exist.')


def get_group_chat_id(theme_id):
    """Get the ID of the theme's group chat, or None."""
    for doc in _themes().document(theme_id).collection(GROUP_CHAT).limit(1).stream():
        return doc.id
    return None


def _messages(theme_id, group_chat_id):
    return (
        _themes().document(theme_id)
        .collection(GROUP_CHAT).document(group_chat_id)
        .collection(MESSAGES)
    )


def get_messages(theme_id, limit=50):
    """Get the most recent messages of a theme's group chat, oldest first."""
    _require_theme(theme_id)
    group_chat_id = get_group_chat_id(theme_id)
    if group_chat_id is None:
        return []
    messages = query_to_list(
        _messages(theme_id, group_chat_id)
        .order_by('timestamp', direction='DESCENDING')
        .limit(limit)
    )
    messages.reverse()
    return messages


def add_message(theme_id, message, sender):
    """Post a message to a theme's group chat. Returns the message ID.

    Creates the group chat first when the theme has none.
    """
    _require_theme(theme_id)
    group_chat_id = get_group_chat_id(theme_id)
    if group_chat_id is None:
        _, group_chat_ref = _themes().document(theme_id).collection(GROUP_CHAT).add({})
        group_chat_id = group_chat_ref.id
    _, message_ref = _messages(theme_id, group_chat_id).add(
        ChatMessage(message=message, sender=sender).to_dict()
    )
    return message_ref.id
