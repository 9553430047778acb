"""
Utilities Package

Contains utility functions, decorators, and helper modules.
"""

from .decorators import websocket_connection_required
from .helpers import is_valid_player_name, lobby_room
from .game_logger import game_logger

__all__ = ['websocket_connection_required', 'is_valid_player_name', 'lobby_room', 'game_logger']
