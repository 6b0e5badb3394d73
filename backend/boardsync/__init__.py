from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

# always_connect: a refused spectator is accepted first so it can be told why
socketio = SocketIO(async_mode=None, always_connect=True)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS', '*')
    CORS(flask_app, origins=origins)
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from boardsync.main import main
    flask_app.register_blueprint(main)

    # Room services are per app instance, so separate apps never share rooms
    from boardsync.socketio_events import register_socketio_handlers
    flask_app.extensions['boardsync'] = register_socketio_handlers(flask_app.config)

    return flask_app
