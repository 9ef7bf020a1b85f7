from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)

from cocina.services.kitchen.registry import RoomRegistry

rooms = RoomRegistry()


def _allowed_origins(config):
    origins = config.get('CORS_ALLOWED_ORIGINS') or '*'
    if isinstance(origins, str):
        if origins.strip() == '*':
            return '*'
        return [o.strip() for o in origins.split(',') if o.strip()]
    return list(origins)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = _allowed_origins(flask_app.config)
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(
        flask_app,
        cors_allowed_origins=allowed_origins,
        path=flask_app.config.get('SOCKETIO_PATH', 'socket.io'),
    )
    rooms.init_app(flask_app)

    from cocina.main import main
    flask_app.register_blueprint(main)

    from cocina.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    from cocina.services.kitchen.ticker import KitchenTicker
    ticker = KitchenTicker(flask_app, rooms)
    flask_app.extensions['cocina_ticker'] = ticker
    if not flask_app.config.get('TESTING') or flask_app.config.get('ENABLE_TICKER_IN_TESTS'):
        ticker.start()

    return flask_app
