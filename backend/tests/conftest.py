import heapq
import itertools
import os
import random
import sys
import pytest

# Ensure the backend root (containing the `mathquiz` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from mathquiz import create_app, socketio
from mathquiz.services.quiz import QuizEngine, QuizSettings
from mathquiz.services.quiz.scheduler import ScheduledTask


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ORIGINS = '*'
    QUESTION_COUNT = 10
    QUESTION_TIME_LIMIT_SEC = 60
    CORRECT_ADVANCE_DELAY_MS = 1000
    INCORRECT_ADVANCE_DELAY_MS = 2000
    TIMEOUT_ADVANCE_DELAY_MS = 2000
    FAULT_ADVANCE_DELAY_MS = 3000
    WINNER_COUNT = 3


class ManualScheduler:
    """Virtual clock: callbacks only run when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    def time(self):
        return self.now

    def call_later(self, delay, callback, *args):
        task = ScheduledTask(getattr(callback, '__name__', 'callback'))
        heapq.heappush(self._queue, (self.now + delay, next(self._seq), task, callback, args))
        return task

    def advance(self, seconds):
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, task, callback, args = heapq.heappop(self._queue)
            self.now = due
            task.run(callback, *args)
        self.now = target

    def live_tasks(self):
        return [entry[2] for entry in self._queue if entry[2].live]


class RecordingChannel:
    def __init__(self):
        self.sent = []

    def unicast(self, sid, event, payload):
        self.sent.append((sid, event, payload))

    def broadcast_all(self, event, payload):
        self.sent.append((None, event, payload))

    def events(self, name, to=None):
        return [payload for sid, event, payload in self.sent if event == name and (to is None or sid == to)]

    def clear(self):
        self.sent.clear()


@pytest.fixture()
def scheduler():
    return ManualScheduler()


@pytest.fixture()
def channel():
    return RecordingChannel()


@pytest.fixture()
def engine(channel, scheduler):
    return QuizEngine(channel, scheduler, QuizSettings(), rng=random.Random(1234))


@pytest.fixture()
def flask_app(scheduler):
    application = create_app(TestConfig, scheduler=scheduler)
    with application.app_context():
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
