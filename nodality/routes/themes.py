from flask import Blueprint, jsonify, request, current_app

from nodality import socketio
from nodality.decorators import admin_required, auth_required, get_current_user
from nodality.exceptions import NotFoundError, RepositoryError
from nodality.forms import MessageForm, ThemeForm, ThemeUpdateForm, form_errors
from nodality.repositories import theme_repository
from nodality.stores.theme_store import theme_store

bp = Blueprint('themes', __name__, url_prefix='/themes')

# API field -> stored field
UPDATABLE_FIELDS = {
    'title': 'title',
    'description': 'description',
    'image_url': 'imageUrl',
}
MAX_PAGE_SIZE = 100


def theme_room(theme_id):
    return f'theme_{theme_id}'


@bp.route('')
def list_themes():
    query_text = request.args.get('q', '').strip()
    if query_text:
        try:
            result = theme_repository.search_themes(query_text)
        except RepositoryError as e:
            return jsonify({'error': e.message}), 500
        return jsonify({'themes': result['themes']})

    if 'page_size' in request.args or 'cursor' in request.args:
        page_size = request.args.get('page_size', type=int) or current_app.config['THEMES_PAGE_SIZE']
        page_size = min(max(page_size, 1), MAX_PAGE_SIZE)
        cursor = request.args.get('cursor') or None
        try:
            result = theme_repository.get_paginated_themes(page_size, cursor)
        except RepositoryError as e:
            return jsonify({'error': e.message}), 500
        last_doc = result['last_doc']
        return jsonify({
            'themes': result['themes'],
            'next_cursor': last_doc.id if last_doc is not None else None,
        })

    theme_store.fetch_themes()
    state = theme_store.get()
    if state['error']:
        return jsonify({'error': state['error']}), 500
    return jsonify({'themes': state['themes']})


@bp.route('/<theme_id>')
def get_theme(theme_id):
    try:
        theme = theme_repository.get_theme(theme_id)
    except RepositoryError as e:
        return jsonify({'error': e.message}), 500
    if not theme:
        return jsonify({'error': 'Theme not found'}), 404
    return jsonify(theme)


@bp.route('', methods=['POST'])
@auth_required
def create_theme():
    user = get_current_user()
    form = ThemeForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid theme', 'fields': form_errors(form)}), 400

    theme_id = theme_store.create_theme(
        form.title.data.strip(),
        form.description.data or '',
        form.image_url.data or None,
        user.email,
    )
    if theme_id is None:
        return jsonify({'error': theme_store.get()['error']}), 500
    return jsonify({'message': 'Theme created', 'theme_id': theme_id}), 201


@bp.route('/<theme_id>', methods=['PATCH'])
@admin_required
def update_theme(theme_id):
    form = ThemeUpdateForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid theme', 'fields': form_errors(form)}), 400

    payload = request.get_json(silent=True) or {}
    updated_data = {
        stored: getattr(form, field).data
        for field, stored in UPDATABLE_FIELDS.items()
        if field in payload
    }
    if not updated_data:
        return jsonify({'error': 'Nothing to update'}), 400

    try:
        if theme_repository.get_theme(theme_id) is None:
            return jsonify({'error': 'Theme not found'}), 404
    except RepositoryError as e:
        return jsonify({'error': e.message}), 500

    if not theme_store.update_theme(theme_id, updated_data):
        return jsonify({'error': theme_store.get()['error']}), 500
    return jsonify({'message': 'Theme updated'})


@bp.route('/<theme_id>', methods=['DELETE'])
@admin_required
def delete_theme(theme_id):
    if not theme_store.delete_theme(theme_id):
        return jsonify({'error': theme_store.get()['error']}), 500
    return jsonify({'message': 'Theme deleted'})


@bp.route('/<theme_id>/messages')
@auth_required
def list_messages(theme_id):
    limit = request.args.get('limit', 50, type=int)
    limit = min(max(limit, 1), MAX_PAGE_SIZE)
    try:
        messages = theme_repository.get_theme_messages(theme_id, limit=limit)
    except NotFoundError:
        return jsonify({'error': 'Theme not found'}), 404
    except RepositoryError as e:
        return jsonify({'error': e.message}), 500
    return jsonify({'messages': messages})


@bp.route('/<theme_id>/messages', methods=['POST'])
@auth_required
def post_message(theme_id):
    user = get_current_user()
    form = MessageForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid message', 'fields': form_errors(form)}), 400

    message_text = form.message.data.strip()
    try:
        result = theme_repository.post_theme_message(theme_id, message_text, user.email)
    except NotFoundError:
        return jsonify({'error': 'Theme not found'}), 404
    except RepositoryError as e:
        return jsonify({'error': e.message}), 500

    socketio.emit('new_theme_message', {
        'id': result['message_id'],
        'theme_id': theme_id,
        'message': message_text,
        'sender': user.email,
    }, to=theme_room(theme_id))
    return jsonify(result), 201
