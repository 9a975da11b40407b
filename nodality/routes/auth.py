from flask import Blueprint, jsonify, session
from flask_wtf.csrf import generate_csrf

from nodality.decorators import SESSION_KEY, auth_required, get_current_user
from nodality.exceptions import AuthError
from nodality.forms import (RegistrationForm, LoginForm, ForgotPasswordForm,
                            form_errors)
from nodality.services import auth_service
from nodality.stores.auth_store import AuthStore

bp = Blueprint('auth', __name__, url_prefix='/auth')


@bp.route('/csrf-token')
def csrf_token():
    return jsonify({'csrf_token': generate_csrf()})


@bp.route('/register', methods=['POST'])
def register():
    form = RegistrationForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid registration', 'fields': form_errors(form)}), 400

    try:
        user = auth_service.register_user(form.email.data, form.password.data)
    except AuthError as e:
        return jsonify({'error': e.message}), 400

    return jsonify({'uid': user.uid, 'email': form.email.data}), 201


@bp.route('/login', methods=['POST'])
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid login', 'fields': form_errors(form)}), 400

    try:
        user = AuthStore().login(form.email.data, form.password.data)
        session[SESSION_KEY] = auth_service.create_session_cookie(user['id_token'])
    except AuthError as e:
        return jsonify({'error': e.message}), 401

    return jsonify({
        'uid': user['uid'],
        'email': user['email'],
        'is_admin': user['is_admin'],
    })


@bp.route('/logout', methods=['POST'])
@auth_required
def logout():
    user = get_current_user()
    store = AuthStore()
    store.set({
        'user': {'uid': user.uid, 'email': user.email},
        'is_admin': user.is_admin,
        'is_loading': False,
    })
    session.pop(SESSION_KEY, None)
    try:
        store.logout()
    except AuthError as e:
        return jsonify({'error': e.message}), 500
    return jsonify({'message': 'Signed out'})


@bp.route('/forgot-password', methods=['POST'])
def forgot_password():
    form = ForgotPasswordForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid email', 'fields': form_errors(form)}), 400

    try:
        AuthStore().reset_password(form.email.data)
    except AuthError as e:
        return jsonify({'error': e.message}), 502
    return jsonify({'message': 'Password reset email sent'})


@bp.route('/me')
def me():
    user = get_current_user()
    if not user.is_authenticated:
        return jsonify({'user': None, 'is_admin': False})
    return jsonify({
        'user': {'uid': user.uid, 'email': user.email},
        'is_admin': user.is_admin,
    })
