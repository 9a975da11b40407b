from flask import Blueprint, jsonify

from nodality.decorators import admin_required, auth_required, get_current_user
from nodality.forms import NodeForm, form_errors
from nodality.repositories import node_repository
from nodality.stores.node_store import node_store

bp = Blueprint('nodes', __name__, url_prefix='/nodes')


@bp.route('')
def list_nodes():
    node_store.fetch_nodes()
    return jsonify({'nodes': node_store.get()})


@bp.route('/<node_id>')
def get_node(node_id):
    node = node_store.get_node_by_id(node_id)
    if node is None:
        return jsonify({'error': 'Node not found'}), 404
    return jsonify(node)


@bp.route('', methods=['POST'])
@auth_required
def create_node():
    user = get_current_user()
    form = NodeForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid node', 'fields': form_errors(form)}), 400

    result = node_store.save_node({
        'title': form.title.data.strip(),
        'content': form.content.data or '',
        'createdBy': user.uid,
        'themeId': form.theme_id.data or None,
    })
    if not result['success']:
        return jsonify({'error': result['error']}), 500
    return jsonify(result), 201


@bp.route('/<node_id>', methods=['PUT'])
@auth_required
def update_node(node_id):
    form = NodeForm()
    if not form.validate_on_submit():
        return jsonify({'error': 'Invalid node', 'fields': form_errors(form)}), 400

    if node_repository.get_node(node_id) is None:
        return jsonify({'error': 'Node not found'}), 404

    result = node_store.save_node({
        'id': node_id,
        'title': form.title.data.strip(),
        'content': form.content.data or '',
        'themeId': form.theme_id.data or None,
    })
    if not result['success']:
        return jsonify({'error': result['error']}), 500
    return jsonify(result)


@bp.route('/<node_id>', methods=['DELETE'])
@admin_required
def delete_node(node_id):
    if not node_store.delete_node(node_id):
        return jsonify({'error': 'Error deleting node.'}), 500
    return jsonify({'message': 'Node deleted'})
