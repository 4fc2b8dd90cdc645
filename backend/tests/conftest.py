import heapq
import itertools
import os
import random
import sys

import pytest

# Ensure the backend root (containing the `quizroom` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from quizroom.config import Config
from quizroom.game.models import Answer, Question
from quizroom.game.questions import QuestionBank
from quizroom.game.registry import RoomRegistry
from quizroom.game.service import GameService
from quizroom.server import create_app


class FakeScheduler:
    """Manual clock: callbacks run only when the test advances time."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()
        self.repeating = 0

    def call_later(self, delay_sec, callback):
        heapq.heappush(self._queue, (self.now + delay_sec, next(self._seq), callback))

    def call_every(self, interval_sec, callback):
        self.repeating += 1

        def _tick():
            if callback():
                self.call_later(interval_sec, _tick)

        self.call_later(interval_sec, _tick)

    def advance(self, seconds):
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            when, _, callback = heapq.heappop(self._queue)
            self.now = when
            callback()
        self.now = target

    @property
    def pending(self):
        return len(self._queue)


class RecordingChannel:
    def __init__(self):
        self.published = []
        self.subscriptions = []

    def publish(self, event, payload, to):
        self.published.append((event, payload, to))

    def subscribe(self, sid, room_code):
        self.subscriptions.append((sid, room_code))

    def payloads(self, event, to=None):
        return [p for e, p, t in self.published if e == event and (to is None or t == to)]

    def last(self, event, to=None):
        found = self.payloads(event, to)
        return found[-1] if found else None

    def clear(self):
        self.published.clear()


def make_question(prompt, *answers):
    return Question(prompt=prompt, answers=tuple(Answer(t, p) for t, p in answers))


def make_bank(size=12):
    questions = [
        make_question(f"Question {i}", (f"alpha{i}", 1), (f"beta{i}", 2), (f"ёлка{i}", 3))
        for i in range(size)
    ]
    return QuestionBank(questions, rng=random.Random(1234))


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test-secret'
    TRUST_PROXY_HEADERS = False
    SOCKETIO_ASYNC_MODE = 'threading'
    QUESTION_DURATION_SEC = 30
    QUESTION_COUNT = 10
    AUTO_RESULTS_DELAY_SEC = 3
    EMPTY_ROOM_TTL_SEC = 60


@pytest.fixture()
def scheduler():
    return FakeScheduler()


@pytest.fixture()
def channel():
    return RecordingChannel()


@pytest.fixture()
def service(scheduler, channel):
    codes = (f"ROOM{i:02d}" for i in itertools.count(1))
    return GameService(
        registry=RoomRegistry(code_factory=lambda: next(codes)),
        bank=make_bank(),
        scheduler=scheduler,
        channel=channel,
        config={
            'QUESTION_DURATION_SEC': 30,
            'QUESTION_COUNT': 10,
            'AUTO_RESULTS_DELAY_SEC': 3,
            'EMPTY_ROOM_TTL_SEC': 60,
            'DEFAULT_PLAYER_NAME': 'Player',
        },
    )


@pytest.fixture()
def flask_app(scheduler):
    application, _ = create_app(TestConfig, scheduler=scheduler, bank=make_bank())
    yield application


@pytest.fixture()
def socketio(flask_app):
    return flask_app.extensions['socketio']


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app, socketio):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        if test_client.is_connected():
            test_client.disconnect()
