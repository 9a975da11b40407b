import logging

from nodality.repositories import node_repository
from nodality.stores.writable import Writable

logger = logging.getLogger(__name__)


class NodeStore(Writable):
    """Last fetched list of denormalized nodes.

    Mutations re-fetch the whole list so subscribers always see what the
    database holds.
    """

    def __init__(self):
        super().__init__([])

    def fetch_nodes(self):
        try:
            self.set(node_repository.get_all_nodes())
        except Exception as e:
            logger.error('Error fetching nodes: %s', e)

    def get_node_by_id(self, node_id):
        """Get one denormalized node, or None when it cannot be read."""
        try:
            return node_repository.get_node_by_id(node_id)
        except Exception as e:
            logger.error('Error fetching node %s: %s', node_id, e)
            return None

    def save_node(self, node):
        """Create or update a node. Returns the repository result."""
        result = node_repository.save_node(node)
        if result['success']:
            self.fetch_nodes()
        return result

    def delete_node(self, node_id):
        """Delete a node. Returns success."""
        try:
            node_repository.delete_node(node_id)
        except Exception as e:
            logger.error('Error deleting node %s: %s', node_id, e)
            return False
        self.fetch_nodes()
        return True


node_store = NodeStore()
