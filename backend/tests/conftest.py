import os
import random
import sys
import pytest

# Ensure the backend root (containing the `boardsync` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from boardsync import create_app, socketio
from boardsync.game import initial_state
from boardsync.services.registry import RoomRegistry
from boardsync.services.snapshots import AUTHORITATIVE, SnapshotStore
from boardsync.services.pipeline import ActionPipeline


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    STATIC_DIR = os.path.join(CURRENT_DIR, 'static')
    DEFAULT_ROOM = 'dev'
    MAX_SPECTATORS = None
    SYNC_MODE = 'authoritative'
    DECK_SIZE = 50
    CARD_PATH_TEMPLATE = 'deck/player_{side}/images/image ({n}).png'
    SHUFFLE_SEED = 7


class RecordingEmitter:
    """Stands in for the Socket.IO emitter in unit tests."""

    def __init__(self):
        self.sent = []

    def to_room(self, room_id, event, data, skip_sid=None):
        self.sent.append(('room', room_id, event, data, skip_sid))

    def to_sid(self, sid, event, data):
        self.sent.append(('sid', sid, event, data, None))

    def events(self, name):
        return [entry for entry in self.sent if entry[2] == name]


def named(packets, name):
    """Payloads of every ``name`` event in a get_received() batch."""
    return [pkt['args'][0] if pkt['args'] else None for pkt in packets if pkt['name'] == name]


@pytest.fixture()
def make_app():
    def _make(**overrides):
        config_class = type('OverrideConfig', (TestConfig,), overrides)
        return create_app(config_class)
    return _make


@pytest.fixture()
def flask_app(make_app):
    return make_app()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect():
    """Open Socket.IO test clients; every one is closed at teardown."""
    opened = []

    def _connect(app, **params):
        query = '&'.join(f"{k}={v}" for k, v in params.items())
        test_client = socketio.test_client(app, query_string=query or None)
        opened.append(test_client)
        return test_client

    yield _connect
    for test_client in opened:
        try:
            if test_client.is_connected():
                test_client.disconnect()
        except Exception:
            pass


@pytest.fixture()
def emitter():
    return RecordingEmitter()


@pytest.fixture()
def registry():
    return RoomRegistry(document_factory=lambda: initial_state(50))


@pytest.fixture()
def pipeline(registry, emitter):
    store = SnapshotStore(registry, emitter, AUTHORITATIVE)
    return ActionPipeline(registry, store, emitter, random.Random(3))
