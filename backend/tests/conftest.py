import os
import sys
import pytest

# Ensure the backend root (containing the `cocina` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from cocina import create_app, rooms, socketio
from cocina.services.kitchen.ticker import KitchenTicker


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'
    ROOM_CODE_LENGTH = 6
    ROOM_CODE_MAX_ATTEMPTS = 10
    TICK_INTERVAL_SEC = 1
    COOKING_TIMEOUT_MS = 10000
    CUSTOMER_PATIENCE_MS = 60000
    CUSTOMER_RETURN_DELAY_SEC = 2
    PENALTY_POINTS = 5


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    """Factory for connected Socket.IO test clients, all disconnected on teardown."""
    clients = []

    def _connect():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _connect
    for test_client in clients:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def clock(flask_app):
    """Simulated millisecond clock shared by the registry and the ticker."""
    now = {'ms': 1_700_000_000_000}
    rooms.clock = lambda: now['ms']
    return now


@pytest.fixture()
def deferred():
    return []


@pytest.fixture()
def ticker(flask_app, clock, deferred):
    def _defer(delay, fn, *args):
        deferred.append((delay, fn, args))

    return KitchenTicker(flask_app, rooms, defer=_defer)


def events(test_client, name=None):
    received = test_client.get_received()
    if name is None:
        return received
    return [pkt for pkt in received if pkt['name'] == name]


def create_room(test_client):
    test_client.emit('createRoom')
    received = test_client.get_received()
    created = next(pkt for pkt in received if pkt['name'] == 'roomCreated')
    return created['args'][0]['roomCode']


def open_game(sio_client):
    """Two connected players in one room, queues flushed."""
    host = sio_client()
    guest = sio_client()
    code = create_room(host)
    guest.emit('joinRoom', {'roomCode': code})
    host.get_received()
    guest.get_received()
    return host, guest, code
