"""
WebSocket Package

Contains the Socket.IO event handlers of the lobby coordinator.
"""

from .handlers import register_websocket_handlers

__all__ = ['register_websocket_handlers']
