import logging
from flask import Flask
from flask_socketio import SocketIO
from flask_wtf.csrf import CSRFProtect
from config import Config
from nodality.json_provider import IsoJSONProvider

socketio = SocketIO()
csrf = CSRFProtect()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json = IsoJSONProvider(app)

    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    csrf.init_app(app)

    # Initialize Firebase
    from nodality.firebase_init import init_firebase
    init_firebase(app.config)

    # CORS origins
    allowed_origins = []
    cors_origins = app.config.get('CORS_ALLOWED_ORIGINS', '')
    if cors_origins:
        for origin in cors_origins.split(','):
            origin = origin.strip()
            if origin:
                allowed_origins.append(origin)

    socketio.init_app(
        app,
        cors_allowed_origins=allowed_origins if allowed_origins else None,
        async_mode=app.config.get('SOCKETIO_ASYNC_MODE', 'eventlet'),
    )

    # Register current_user before_request
    from nodality.decorators import load_current_user

    @app.before_request
    def before_request():
        load_current_user()

    # Register blueprints
    from nodality.routes import auth, themes, nodes, users
    app.register_blueprint(auth.bp)
    app.register_blueprint(themes.bp)
    app.register_blueprint(nodes.bp)
    app.register_blueprint(users.bp)

    from nodality import events
    events.broadcast_store_changes()

    return app
