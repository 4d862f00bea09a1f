import logging

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def room_for(join_code: str) -> str:
    return f"session:{join_code}"


def _allowed_origins(raw):
    if not raw or raw.strip() == '*':
        return '*'
    return [o.strip() for o in raw.split(',') if o.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Session engine: store + timers + controller, one set per app
    from typefight.services.controller import GameController
    from typefight.services.games.scheduler import SessionScheduler
    from typefight.services.sessions import SessionStore

    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/')

    def broadcast(join_code, event, payload):
        socketio.emit(event, payload, to=room_for(join_code), namespace=namespace)

    store = SessionStore(
        code_length=int(flask_app.config.get('JOIN_CODE_LENGTH', 6)),
        empty_ttl_sec=int(flask_app.config.get('EMPTY_SESSION_TTL_SEC', 600)),
    )
    controller = GameController(
        store,
        SessionScheduler(socketio),
        broadcast,
        wave_delay_sec=float(flask_app.config.get('WAVE_RESPAWN_DELAY_SEC', 5)),
        tick_tuning={
            'base_ms': int(flask_app.config.get('TYPEFLIGHT_BASE_TICK_MS', 2200)),
            'min_ms': int(flask_app.config.get('TYPEFLIGHT_MIN_TICK_MS', 450)),
            'decay_ms': int(flask_app.config.get('TYPEFLIGHT_DECAY_MS', 90000)),
        },
    )
    flask_app.extensions['typefight'] = controller

    # Import and register blueprints here
    from typefight.routes import main
    flask_app.register_blueprint(main)

    from typefight.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/session')

    # Register Socket.IO event handlers
    from typefight.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace)

    return flask_app
