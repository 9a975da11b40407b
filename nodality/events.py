from flask import request, session
from flask_socketio import emit, join_room, leave_room

from nodality import socketio
from nodality.decorators import SESSION_KEY
from nodality.exceptions import AuthError, NotFoundError, RepositoryError
from nodality.json_provider import to_jsonable
from nodality.repositories import theme_repository
from nodality.routes.themes import theme_room
from nodality.stores.auth_store import AuthStore
from nodality.stores.node_store import node_store
from nodality.stores.theme_store import theme_store

# sid -> (AuthStore, unsubscribe)
connection_auth = {}
_store_unsubscribers = []


def _themes_payload(state):
    return to_jsonable({
        'themes': state['themes'],
        'current_theme': state['current_theme'],
        'is_loading': state['is_loading'],
        'error': state['error'],
    })


def broadcast_store_changes():
    """Push every theme/node store change to all connected clients."""
    while _store_unsubscribers:
        _store_unsubscribers.pop()()

    _store_unsubscribers.append(theme_store.subscribe(
        lambda state: socketio.emit('themes', _themes_payload(state))
    ))
    _store_unsubscribers.append(node_store.subscribe(
        lambda nodes: socketio.emit('nodes', to_jsonable({'nodes': nodes}))
    ))


def _connection_store():
    entry = connection_auth.get(request.sid)
    return entry[0] if entry is not None else None


def _get_socket_user():
    store = _connection_store()
    if store is None:
        return None
    return store.get()['user']


@socketio.on('connect')
def handle_connect():
    sid = request.sid
    store = AuthStore()
    unsubscribe = store.subscribe(
        lambda state: socketio.emit('auth_state', to_jsonable(state), to=sid)
    )
    connection_auth[sid] = (store, unsubscribe)
    store.check_auth_state(session.get(SESSION_KEY))

    emit('themes', _themes_payload(theme_store.get()))
    emit('nodes', to_jsonable({'nodes': node_store.get()}))


@socketio.on('disconnect')
def handle_disconnect(*args):
    entry = connection_auth.pop(request.sid, None)
    if entry is not None:
        entry[1]()


@socketio.on('join_theme')
def handle_join_theme(data):
    user = _get_socket_user()
    if not user:
        emit('error', {'message': 'Authentication required'})
        return

    theme_id = (data or {}).get('theme_id')
    if not theme_id:
        emit('error', {'message': 'Theme ID required'})
        return

    join_room(theme_room(theme_id))
    emit('theme_joined', {'theme_id': theme_id})


@socketio.on('leave_theme')
def handle_leave_theme(data):
    theme_id = (data or {}).get('theme_id')
    if not theme_id:
        emit('error', {'message': 'Theme ID required'})
        return

    leave_room(theme_room(theme_id))
    emit('theme_left', {'theme_id': theme_id})


@socketio.on('send_theme_message')
def handle_send_theme_message(data):
    user = _get_socket_user()
    if not user:
        emit('error', {'message': 'Authentication required'})
        return

    data = data or {}
    theme_id = data.get('theme_id')
    message_text = (data.get('message') or '').strip()
    if not theme_id or not message_text:
        return

    try:
        result = theme_repository.post_theme_message(theme_id, message_text, user['email'])
    except NotFoundError:
        emit('error', {'message': 'Theme not found'})
        return
    except RepositoryError:
        emit('error', {'message': 'Could not send message'})
        return

    emit('new_theme_message', {
        'id': result['message_id'],
        'theme_id': theme_id,
        'message': message_text,
        'sender': user['email'],
    }, to=theme_room(theme_id))


@socketio.on('login')
def handle_login(data):
    data = data or {}
    email = (data.get('email') or '').strip()
    password = data.get('password') or ''
    if not email or not password:
        emit('error', {'message': 'Email and password required'})
        return

    store = _connection_store()
    if store is None:
        return
    try:
        store.login(email, password)
    except AuthError as e:
        emit('error', {'message': e.message})


@socketio.on('logout')
def handle_logout(*args):
    store = _connection_store()
    if store is None:
        return
    try:
        store.logout()
    except AuthError as e:
        emit('error', {'message': e.message})


@socketio.on('reset_password')
def handle_reset_password(data):
    email = ((data or {}).get('email') or '').strip()
    if not email:
        emit('error', {'message': 'Email required'})
        return

    store = _connection_store()
    if store is None:
        return
    try:
        store.reset_password(email)
    except AuthError as e:
        emit('error', {'message': e.message})
        return
    emit('password_reset_sent', {'email': email})


@socketio.on('select_theme')
def handle_select_theme(data):
    theme_id = (data or {}).get('theme_id')
    if not theme_id:
        emit('error', {'message': 'Theme ID required'})
        return
    theme_store.select_theme(theme_id)


@socketio.on('clear_current_theme')
def handle_clear_current_theme(*args):
    theme_store.clear_current_theme()
