"""
Tests for SocketIOTransport over a stubbed python-socketio client.
"""

import threading

import pytest
from socketio.exceptions import ConnectionError as SocketIOConnectionError

from anagrams.network.connection import Connection, ConnectionState
from anagrams.network.transport import SocketIOTransport
from conftest import Recorder


class StubClient:
    """Stands in for socketio.Client; tests fire its handlers by hand."""

    def __init__(self, fail=False):
        self.handlers = {}
        self.connected = False
        self.fail = fail
        self.url = None
        self.auth = None
        self.sent = []

    def on(self, event, handler=None, namespace=None):
        self.handlers[event] = handler

    def connect(self, url, auth=None):
        self.url = url
        self.auth = auth
        if self.fail:
            self.handlers['connect_error']("refused")
            raise SocketIOConnectionError("refused")
        self.connected = True
        self.handlers['connect']()

    def send(self, data):
        self.sent.append(data)

    def disconnect(self):
        self.connected = False

    def fire(self, event, *args):
        self.handlers[event](*args)


@pytest.fixture
def client():
    return StubClient()


@pytest.fixture
def transport(client):
    transport = SocketIOTransport(url="http://coordinator:5000", client=client)
    transport.on_open = Recorder()
    transport.on_message = Recorder()
    transport.on_close = Recorder()
    return transport


def test_open_passes_route_in_auth(transport, client):
    transport.open("join/48213")

    assert client.url == "http://coordinator:5000"
    assert client.auth == {'route': "join/48213"}
    assert set(client.handlers) == {'connect', 'message', 'disconnect', 'connect_error'}


def test_events_wait_for_process_events(transport, client):
    transport.open("host/alice")
    client.fire('message', "48213")

    assert not transport.on_open.called
    assert not transport.on_message.called

    assert transport.process_events() == 2
    assert transport.on_open.called
    assert transport.on_message.calls == ["48213"]
    assert transport.process_events() == 0


def test_close_reported_once(transport, client):
    transport.open("host/alice")
    client.fire('disconnect', "server disconnect")
    client.fire('connect_error', None)

    transport.process_events()

    assert len(transport.on_close.calls) == 1


def test_connect_error_closes_at_once(client):
    client.fail = True
    transport = SocketIOTransport(url="http://coordinator:5000", client=client)
    closes = Recorder()
    transport.on_close = closes

    transport.open("join/00000")
    assert len(closes.calls) == 1

    transport.process_events()
    assert len(closes.calls) == 1


def test_send_needs_connection(transport, client):
    transport.send(":giveup")
    assert client.sent == []

    transport.open("host/alice")
    transport.send("den garden")
    assert client.sent == ["den garden"]


def test_local_close(transport, client):
    transport.open("host/alice")
    transport.process_events()

    transport.close()
    assert not client.connected
    assert len(transport.on_close.calls) == 1

    client.fire('disconnect', "client disconnect")
    transport.process_events()
    assert len(transport.on_close.calls) == 1


def test_process_events_waits_for_other_thread(transport, client):
    transport.open("host/alice")
    transport.process_events()

    thread = threading.Thread(target=client.fire, args=('message', "48213"))
    thread.start()
    delivered = transport.process_events(timeout=5)
    thread.join()

    assert delivered == 1
    assert transport.on_message.calls == ["48213"]


def test_process_events_timeout(transport):
    assert transport.process_events(timeout=0.01) == 0


def test_drives_connection(client):
    transport = SocketIOTransport(url="http://coordinator:5000", client=client)
    connection = Connection(transport)

    connection.join("48213")
    assert client.auth == {'route': "join/48213"}
    assert connection.state is ConnectionState.AWAITING_LOBBY_ACK

    client.fire('message', ":ok")
    assert connection.state is ConnectionState.AWAITING_LOBBY_ACK
    transport.process_events()
    assert connection.state is ConnectionState.AWAITING_NAME_ACK

    connection.send_name("carol")
    assert client.sent == ["carol"]
