"""Minimal reactive container shared by the stores."""

import logging

logger = logging.getLogger(__name__)


class Writable:
    """Holds a value and notifies subscribers whenever it changes.

    ``subscribe`` calls the callback right away with the current value and
    returns a function that removes the subscription.
    """

    def __init__(self, value=None):
        self._value = value
        self._subscribers = []

    def get(self):
        return self._value

    def set(self, value):
        self._value = value
        for callback in list(self._subscribers):
            try:
                callback(value)
            except Exception:
                logger.exception('Store subscriber %r failed', callback)

    def update(self, updater):
        self.set(updater(self._value))

    def subscribe(self, callback):
        self._subscribers.append(callback)
        callback(self._value)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe
