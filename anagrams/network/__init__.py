"""
Network Package

Contains the client side of multiplayer: the transport abstraction and the
connection state machine that runs the lobby handshakes.
"""

from .connection import Connection, ConnectionState, Role
from .transport import SocketIOTransport, Transport

__all__ = ['Connection', 'ConnectionState', 'Role', 'SocketIOTransport', 'Transport']
