"""
Transport layer for game clients.

A transport is a reliable, in-order, message-oriented duplex channel to the
lobby coordinator, opened on a route such as ``host/<name>`` or
``join/<lobby_id>``. It reports open, message and close events through
callback attributes and offers a single send(text) primitive.

SocketIOTransport queues what arrives on the python-socketio thread; the owner
delivers it with process_events() from its own loop.
"""

import queue
from abc import ABC, abstractmethod
from typing import Callable, Optional, Tuple

import socketio

from ..config.app_config import Config
from ..utils.game_logger import game_logger


class Transport(ABC):
    """Duplex text channel used by a Connection."""

    def __init__(self):
        # Callbacks
        self.on_open: Optional[Callable[[], None]] = None
        self.on_message: Optional[Callable[[str], None]] = None
        self.on_close: Optional[Callable[[], None]] = None
        self._closed = False

    @abstractmethod
    def open(self, route: str) -> None:
        """Connect to the coordinator on the given route."""

    @abstractmethod
    def send(self, text: str) -> None:
        """Send one text message."""

    @abstractmethod
    def close(self) -> None:
        """Close the channel. on_close fires once, however the channel ends."""

    def _emit_open(self) -> None:
        if self.on_open:
            self.on_open()

    def _emit_message(self, text: str) -> None:
        if self.on_message:
            self.on_message(text)

    def _emit_close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if self.on_close:
            self.on_close()


# Queued event kinds
EVENT_OPEN = "OPEN"
EVENT_MESSAGE = "MESSAGE"
EVENT_CLOSE = "CLOSE"


class SocketIOTransport(Transport):
    """
    Transport over a Socket.IO connection to the coordinator.

    The route travels in the connection's auth payload and text frames use the
    default ``message`` event. Automatic reconnection is disabled.

    python-socketio runs its handlers on a background thread. They only queue
    the event; callbacks fire when the owner calls process_events() from its
    own loop, so the game core is only ever touched from that thread.
    """

    def __init__(self, url: Optional[str] = None, client: Optional[socketio.Client] = None):
        super().__init__()
        self.url = url or Config.COORDINATOR_URL
        self.sio = client or socketio.Client(reconnection=False)
        self.event_queue: "queue.Queue[Tuple[str, Optional[str]]]" = queue.Queue()

        self.sio.on('connect', self._handle_connect)
        self.sio.on('message', self._handle_message)
        self.sio.on('disconnect', self._handle_disconnect)
        self.sio.on('connect_error', self._handle_connect_error)

    def open(self, route: str) -> None:
        self._closed = False
        try:
            self.sio.connect(self.url, auth={'route': route})
        except socketio.exceptions.ConnectionError as e:
            game_logger.logger.warning(f"Could not connect to {self.url} on route '{route}': {e}")
            self._emit_close()

    def send(self, text: str) -> None:
        if not self.sio.connected:
            game_logger.logger.warning("Dropping message sent on a closed transport")
            return
        self.sio.send(text)

    def close(self) -> None:
        if self.sio.connected:
            self.sio.disconnect()
        self._emit_close()

    def process_events(self, timeout: Optional[float] = None) -> int:
        """
        Deliver queued events to the callbacks on the calling thread.

        Args:
            timeout: Seconds to wait for a first event. None returns at once
                     when nothing is queued.

        Returns:
            int: Number of events delivered
        """
        delivered = 0
        try:
            if timeout is not None:
                self._deliver(*self.event_queue.get(timeout=timeout))
                delivered += 1
            while not self.event_queue.empty():
                self._deliver(*self.event_queue.get_nowait())
                delivered += 1
        except queue.Empty:
            pass
        return delivered

    def _deliver(self, kind: str, data: Optional[str]) -> None:
        if kind == EVENT_OPEN:
            self._emit_open()
        elif kind == EVENT_MESSAGE:
            self._emit_message(data)
        elif kind == EVENT_CLOSE:
            self._emit_close()

    # python-socketio thread

    def _handle_connect(self):
        self.event_queue.put((EVENT_OPEN, None))

    def _handle_message(self, data):
        self.event_queue.put((EVENT_MESSAGE, str(data)))

    def _handle_disconnect(self, reason=None):
        game_logger.logger.info(f"Coordinator connection closed ({reason or 'no reason given'})")
        self.event_queue.put((EVENT_CLOSE, None))

    def _handle_connect_error(self, data=None):
        game_logger.logger.warning(f"Coordinator refused connection: {data}")
        self.event_queue.put((EVENT_CLOSE, None))
