from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from nodality.exceptions import NotFoundError, RepositoryError
from nodality.repositories import node_repository


@pytest.fixture
def theme_ref(db):
    ref = db.collection('Themes').document('t1')
    ref.set({'title': 'Philosophy'})
    return ref


@pytest.fixture
def author_ref(make_user):
    return make_user('u1', 'writer@example.com')


def test_get_all_nodes_resolves_references(db, theme_ref, author_ref):
    db.collection('Nodes').document('n1').set({
        'title': 'Stoicism',
        'content': 'Control what you can.',
        'createdAt': datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc),
        'createdBy': author_ref,
        'themeId': theme_ref,
    })

    nodes = node_repository.get_all_nodes()

    assert nodes == [{
        'id': 'n1',
        'title': 'Stoicism',
        'content': 'Control what you can.',
        'createdAt': '03/05/2024',
        'createdBy': 'writer@example.com',
        'themeId': 'Philosophy',
    }]


def test_missing_references_degrade_to_placeholders(db):
    db.collection('Nodes').document('n1').set({'title': 'Loose', 'content': ''})

    node = node_repository.get_all_nodes()[0]

    assert node['createdBy'] == 'Unknown'
    assert node['themeId'] == 'No Theme'
    assert node['createdAt'] == 'Unknown date'


def test_dangling_references_degrade_to_placeholders(db):
    db.collection('Nodes').document('n1').set({
        'title': 'Orphan',
        'createdBy': db.collection('users').document('gone'),
        'themeId': db.collection('Themes').document('gone'),
    })

    node = node_repository.get_all_nodes()[0]

    assert node['createdBy'] == 'Unknown'
    assert node['themeId'] == 'No Theme'


def test_referenced_document_without_field_uses_placeholder(db):
    db.collection('users').document('u2').set({'admin': False})
    db.collection('Themes').document('t2').set({'description': 'untitled'})
    db.collection('Nodes').document('n1').set({
        'createdBy': db.collection('users').document('u2'),
        'themeId': db.collection('Themes').document('t2'),
    })

    node = node_repository.get_all_nodes()[0]

    assert node['createdBy'] == 'Unknown'
    assert node['themeId'] == 'No Theme'


def test_string_references_are_resolved(db, theme_ref, author_ref):
    db.collection('Nodes').document('n1').set({
        'title': 'Legacy',
        'createdBy': 'u1',
        'themeId': {'id': 't1'},
    })

    node = node_repository.get_all_nodes()[0]

    assert node['createdBy'] == 'writer@example.com'
    assert node['themeId'] == 'Philosophy'


def test_get_all_nodes_wraps_database_errors(monkeypatch):
    broken = MagicMock()
    broken.collection.return_value.stream.side_effect = RuntimeError('unavailable')
    monkeypatch.setattr(node_repository, 'get_db', lambda: broken)

    with pytest.raises(RepositoryError) as excinfo:
        node_repository.get_all_nodes()

    assert str(excinfo.value) == 'Failed to get nodes.'


def test_get_node_by_id(db, theme_ref, author_ref):
    db.collection('Nodes').document('n1').set({
        'title': 'Stoicism',
        'createdBy': author_ref,
        'themeId': theme_ref,
    })

    node = node_repository.get_node_by_id('n1')

    assert node['id'] == 'n1'
    assert node['createdBy'] == 'writer@example.com'
    assert node['themeId'] == 'Philosophy'


def test_get_node_by_id_missing(db):
    with pytest.raises(NotFoundError, match='Node does not exist.'):
        node_repository.get_node_by_id('nope')


def test_get_node_returns_raw_data(db, author_ref):
    db.collection('Nodes').document('n1').set({'title': 'Raw', 'createdBy': author_ref})

    data = node_repository.get_node('n1')

    assert data['title'] == 'Raw'
    assert data['createdBy'] == author_ref
    assert node_repository.get_node('nope') is None


def test_get_node_returns_none_on_error(monkeypatch):
    broken = MagicMock()
    broken.collection.return_value.document.return_value.get.side_effect = RuntimeError('down')
    monkeypatch.setattr(node_repository, 'get_db', lambda: broken)

    assert node_repository.get_node('n1') is None


def test_save_node_creates_with_references(db, theme_ref, author_ref):
    result = node_repository.save_node({
        'title': 'New',
        'content': 'Body',
        'createdBy': {'id': 'u1'},
        'themeId': 't1',
    })

    assert result['success'] is True
    stored = db.collection('Nodes').document(result['id']).get().to_dict()
    assert stored['title'] == 'New'
    assert stored['createdBy'] == author_ref
    assert stored['themeId'] == theme_ref
    assert isinstance(stored['createdAt'], datetime)


def test_save_node_without_references_stores_none(db):
    result = node_repository.save_node({'title': 'Loose'})

    stored = db.collection('Nodes').document(result['id']).get().to_dict()
    assert stored['createdBy'] is None
    assert stored['themeId'] is None


def test_save_node_update_keeps_existing_references(db, theme_ref, author_ref):
    created_at = datetime(2024, 1, 2, tzinfo=timezone.utc)
    db.collection('Nodes').document('n1').set({
        'title': 'Old',
        'content': 'Old body',
        'createdAt': created_at,
        'createdBy': author_ref,
        'themeId': theme_ref,
    })

    result = node_repository.save_node({'id': 'n1', 'title': 'New', 'content': 'New body'})

    assert result == {'success': True, 'id': 'n1'}
    stored = db.collection('Nodes').document('n1').get().to_dict()
    assert stored['title'] == 'New'
    assert stored['content'] == 'New body'
    assert stored['createdBy'] == author_ref
    assert stored['themeId'] == theme_ref
    assert stored['createdAt'] == created_at


def test_save_node_update_replaces_theme(db, theme_ref, author_ref):
    db.collection('Themes').document('t2').set({'title': 'Physics'})
    db.collection('Nodes').document('n1').set({
        'title': 'Old', 'createdBy': author_ref, 'themeId': theme_ref,
    })

    node_repository.save_node({'id': 'n1', 'title': 'Old', 'themeId': {'id': 't2'}})

    assert node_repository.get_node_by_id('n1')['themeId'] == 'Physics'


def test_save_node_reports_failure_instead_of_raising(db):
    result = node_repository.save_node({'id': 'missing', 'title': 'Ghost'})

    assert result['success'] is False
    assert 'Node does not exist.' in result['error']


def test_delete_node(db):
    db.collection('Nodes').document('n1').set({'title': 'Bye'})

    node_repository.delete_node('n1')

    assert node_repository.get_node('n1') is None
