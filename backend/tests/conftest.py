import os
import random
import sys
import pytest

# Ensure the backend root (containing the `typefight` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from typefight import create_app, socketio
from typefight.models import Player
from typefight.services.controller import GameController
from typefight.services.games import build_variants
from typefight.services.games.scheduler import SessionScheduler
from typefight.services.sessions import SessionStore


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    JOIN_CODE_LENGTH = 6
    EMPTY_SESSION_TTL_SEC = 600
    WAVE_RESPAWN_DELAY_SEC = 5
    TYPEFLIGHT_BASE_TICK_MS = 2200
    TYPEFLIGHT_MIN_TICK_MS = 450
    TYPEFLIGHT_DECAY_MS = 90000
    SOCKETIO_NAMESPACE = '/'
    CORS_ORIGINS = '*'
    LOG_LEVEL = 'DEBUG'


class FakeRunner:
    """Stands in for SocketIO background tasks: queues them, never sleeps."""

    def __init__(self):
        self.tasks = []
        self.sleeps = []

    def start_background_task(self, fn, *args):
        self.tasks.append((fn, args))

    def sleep(self, seconds):
        self.sleeps.append(seconds)

    def run_pending(self):
        """Run the tasks queued so far; tasks they schedule wait for the next call."""
        tasks, self.tasks = self.tasks, []
        for fn, args in tasks:
            fn(*args)
        return len(tasks)


@pytest.fixture()
def runner():
    return FakeRunner()


@pytest.fixture()
def broadcasts():
    return []


@pytest.fixture()
def controller(runner, broadcasts):
    def broadcast(join_code, event, payload):
        broadcasts.append((join_code, event, payload))

    return GameController(
        SessionStore(rng=random.Random(7)),
        SessionScheduler(runner),
        broadcast,
        variants=build_variants(rng=random.Random(42)),
        wave_delay_sec=5,
    )


@pytest.fixture()
def make_session(controller):
    def _make(*player_ids, game=None):
        session = controller.create_session()
        for pid in player_ids:
            controller.join_session(session.join_code, Player(pid, alias=pid.title()))
        if game:
            controller.start_game(session.join_code, game)
        return session
    return _make


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    # Keep timers deterministic: nothing runs unless a test asks for it
    application.extensions['typefight'].scheduler.runner = FakeRunner()
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
    )
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass
