"""
Coordinator Decorators

Contains decorators shared by the WebSocket handlers.
"""

from functools import wraps
from flask import request


def websocket_connection_required(f):
    """
    Decorator for WebSocket events that need a registered lobby connection.

    The connection record is passed to the handler as the ``record`` keyword;
    events from unknown sessions are dropped.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        from ..services.lobby_service import get_lobby_service
        from .game_logger import game_logger

        lobby_service = get_lobby_service()
        if not lobby_service:
            game_logger.logger.error("Lobby service unavailable")
            return

        record = lobby_service.get_connection(request.sid)
        if record is None:
            game_logger.logger.warning(f"Dropping event from unregistered session {request.sid}")
            return

        kwargs['record'] = record
        return f(*args, **kwargs)

    return decorated_function
