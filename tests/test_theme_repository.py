from unittest.mock import patch

import pytest

from nodality.exceptions import NotFoundError, RepositoryError
from nodality.repositories import theme_repository


def test_create_theme_reports_id(db):
    result = theme_repository.create_theme('Physics', 'desc', None, 'admin@example.com')

    assert result['message'] == 'Theme created'
    assert theme_repository.get_theme(result['theme_id'])['title'] == 'Physics'


def test_update_and_delete_messages(db):
    theme_id = theme_repository.create_theme('Physics', '', None, 'x')['theme_id']

    assert theme_repository.update_theme(theme_id, {'title': 'Maths'}) == {'message': 'Theme updated'}
    assert theme_repository.get_all_themes()[0]['title'] == 'Maths'
    assert theme_repository.delete_theme(theme_id) == {'message': 'Theme deleted'}
    assert theme_repository.get_all_themes() == []


def test_update_missing_theme_raises(db):
    with pytest.raises(RepositoryError, match='^Error in update_theme: '):
        theme_repository.update_theme('missing', {'title': 'x'})


@pytest.mark.parametrize('operation, args', [
    ('create_theme', ('t', 'd', None, 'x')),
    ('get_all_themes', ()),
    ('delete_theme', ('t1',)),
    ('get_paginated_themes', (10,)),
    ('search_themes', ('q',)),
    ('get_theme_messages', ('t1',)),
    ('post_theme_message', ('t1', 'hi', 'x')),
])
def test_failures_name_the_operation(operation, args):
    with patch('nodality.repositories.theme_repository.theme_service') as service:
        for name in ('create_theme_with_auto_id', 'get_themes', 'delete_theme',
                     'get_themes_paginated', 'get_themes_by_search',
                     'get_messages', 'add_message'):
            getattr(service, name).side_effect = RuntimeError('boom')

        with pytest.raises(RepositoryError) as excinfo:
            getattr(theme_repository, operation)(*args)

    assert str(excinfo.value) == f'Error in {operation}: boom'
    assert isinstance(excinfo.value.original_error, RuntimeError)


def test_paginated_defaults_when_service_returns_nothing():
    with patch('nodality.repositories.theme_repository.theme_service') as service:
        service.get_themes_paginated.return_value = {'themes': None, 'last_doc': None}

        assert theme_repository.get_paginated_themes(5) == {'themes': [], 'last_doc': None}


def test_search_themes_wraps_results(db):
    theme_repository.create_theme('Physics', '', None, 'x')
    theme_repository.create_theme('Art', '', None, 'x')

    result = theme_repository.search_themes('Phy')

    assert [t['title'] for t in result['themes']] == ['Physics']


def test_post_and_read_messages(db):
    theme_id = theme_repository.create_theme('Physics', '', None, 'x')['theme_id']

    posted = theme_repository.post_theme_message(theme_id, 'hello', 'writer@example.com')

    assert posted['message'] == 'Message sent'
    messages = theme_repository.get_theme_messages(theme_id)
    assert [m['message'] for m in messages] == ['Welcome to the group chat!', 'hello']


def test_unknown_theme_chat_is_not_wrapped(db):
    with pytest.raises(NotFoundError):
        theme_repository.post_theme_message('ghost', 'hi', 'x')
    with pytest.raises(NotFoundError):
        theme_repository.get_theme_messages('ghost')
