import logging

from nodality.repositories import theme_repository
from nodality.stores.writable import Writable

logger = logging.getLogger(__name__)


class ThemeStore(Writable):
    """Last fetched theme list plus the currently selected theme.

    Failures are logged and kept in ``error`` instead of being raised.
    """

    def __init__(self):
        super().__init__({
            'themes': [],
            'current_theme': None,
            'is_loading': False,
            'error': None,
        })

    def _start(self):
        self.update(lambda state: {**state, 'is_loading': True, 'error': None})

    def _fail(self, message):
        self.update(lambda state: {**state, 'is_loading': False, 'error': message})

    def fetch_themes(self):
        self._start()
        try:
            themes = theme_repository.get_all_themes()
        except Exception as e:
            logger.error('Error fetching themes: %s', e)
            self._fail('Error loading themes.')
            return
        self.update(lambda state: {**state, 'themes': themes, 'is_loading': False})

    def create_theme(self, title, description, image_url, created_by):
        """Create a theme and append it to the list. Returns its ID or None."""
        self._start()
        try:
            result = theme_repository.create_theme(title, description, image_url, created_by)
        except Exception as e:
            logger.error('Error creating theme: %s', e)
            self._fail('Error creating theme.')
            return None
        theme = {
            'id': result['theme_id'],
            'title': title,
            'description': description,
            'imageUrl': image_url or None,
            'createdBy': created_by,
        }
        self.update(lambda state: {
            **state,
            'themes': [*state['themes'], theme],
            'is_loading': False,
        })
        return result['theme_id']

    def delete_theme(self, theme_id):
        """Delete a theme and drop it from the list. Returns success."""
        self._start()
        try:
            theme_repository.delete_theme(theme_id)
        except Exception as e:
            logger.error('Error deleting theme: %s', e)
            self._fail('Error deleting theme.')
            return False

        def remove(state):
            current = state['current_theme']
            if current and current['id'] == theme_id:
                current = None
            return {
                **state,
                'themes': [theme for theme in state['themes'] if theme['id'] != theme_id],
                'current_theme': current,
                'is_loading': False,
            }

        self.update(remove)
        return True

    def update_theme(self, theme_id, updated_data):
        """Update a theme and merge the change into the list. Returns success."""
        self._start()
        try:
            theme_repository.update_theme(theme_id, updated_data)
        except Exception as e:
            logger.error('Error updating theme: %s', e)
            self._fail('Error updating theme.')
            return False

        def merge(state):
            themes = [
                {**theme, **updated_data} if theme['id'] == theme_id else theme
                for theme in state['themes']
            ]
            return {**state, 'themes': themes, 'is_loading': False}

        self.update(merge)
        return True

    def select_theme(self, theme_id):
        self.update(lambda state: {
            **state,
            'current_theme': next(
                (theme for theme in state['themes'] if theme['id'] == theme_id), None
            ),
        })

    def clear_current_theme(self):
        self.update(lambda state: {**state, 'current_theme': None})


theme_store = ThemeStore()
