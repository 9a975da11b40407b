"""ISO-8601 timestamps for every JSON payload, HTTP and Socket.IO alike."""

from datetime import date

from flask.json.provider import DefaultJSONProvider


def to_jsonable(value):
    """Make store values safe for the Socket.IO JSON encoder."""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


class IsoJSONProvider(DefaultJSONProvider):
    """Flask's JSON provider, but dates go out as ISO-8601 instead of HTTP dates."""

    @staticmethod
    def default(o):
        if isinstance(o, date):
            return o.isoformat()
        return DefaultJSONProvider.default(o)
