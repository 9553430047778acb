"""
Shared fixtures: a scripted transport for driving connections by hand, a small
dictionary built around the base word "garden", and a coordinator app.
"""

import os
import random
import tempfile

# Keep test logs out of the working tree; must run before anagrams is imported
os.environ.setdefault('LOG_DIR', tempfile.mkdtemp(prefix='anagrams-logs-'))

import pytest

from anagrams.network.transport import Transport


# Answers for "garden": den end red / dare rang / grand / garden
GARDEN_WORDS = ["garden", "den", "end", "red", "dare", "rang", "grand", "zebra", "plot"]
GARDEN_SNAPSHOT = "den end red dare rang grand garden"


class FakeTransport(Transport):
    """
    In-memory transport. Opening succeeds immediately; tests push inbound
    messages with deliver() and simulate the coordinator hanging up with drop().
    """

    def __init__(self):
        super().__init__()
        self.route = None
        self.sent = []
        self.closed_by_client = False

    def open(self, route):
        self.route = route
        self._closed = False
        self._emit_open()

    def send(self, text):
        self.sent.append(text)

    def close(self):
        self.closed_by_client = True
        self._emit_close()

    def deliver(self, *messages):
        for message in messages:
            self._emit_message(message)

    def drop(self):
        self._emit_close()


class Recorder:
    """Callable collecting every call's arguments."""

    def __init__(self):
        self.calls = []

    def __call__(self, *args):
        self.calls.append(args[0] if len(args) == 1 else args)

    @property
    def called(self):
        return bool(self.calls)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def recorder():
    return Recorder


@pytest.fixture
def lobby_service():
    from anagrams.services.lobby_service import initialize_lobby_service
    return initialize_lobby_service()


@pytest.fixture
def app_and_socketio(lobby_service):
    from anagrams import create_app
    from anagrams.config.app_config import TestingConfig
    return create_app(TestingConfig)
