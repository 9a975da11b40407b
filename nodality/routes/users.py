from flask import Blueprint, jsonify

from nodality.decorators import admin_required
from nodality.repositories import user_repository

bp = Blueprint('users', __name__, url_prefix='/users')


@bp.route('')
@admin_required
def list_users():
    try:
        users = user_repository.get_all_users()
    except Exception:
        return jsonify({'error': 'Error loading users.'}), 500
    return jsonify({'users': users})
