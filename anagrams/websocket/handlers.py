"""
WebSocket Event Handlers

Carries the text protocol over Socket.IO. A client connects with
``auth={'route': 'host/<name>'}`` or ``auth={'route': 'join/<lobby_id>'}``
and then exchanges plain ``message`` events.
"""

from flask import request
from flask_socketio import send, join_room
from ..services.lobby_service import get_lobby_service
from ..utils.decorators import websocket_connection_required
from ..utils.game_logger import game_logger
from ..utils.helpers import lobby_room


def register_websocket_handlers(socketio):
    """Register all WebSocket event handlers."""

    @socketio.on('connect')
    def handle_connect(auth=None):
        """Register the connection under its route, or refuse it."""
        lobby_service = get_lobby_service()
        if not lobby_service:
            game_logger.logger.error("Lobby service unavailable, refusing connection")
            return False

        route = auth.get('route') if isinstance(auth, dict) else None
        game_logger.log_user_action(request, 'connect', route=route)

        result = lobby_service.connect(request.sid, route)
        if not result['success'] and not result['reply']:
            game_logger.log_server_response(request, 'connect', False, result)
            return False

        dispatch_result(result)

    @socketio.on('message')
    @websocket_connection_required
    def handle_message(data, record=None):
        """Feed one protocol message to the lobby service."""
        lobby_service = get_lobby_service()
        text = str(data)

        game_logger.log_user_action(request, record['phase'], record['lobby_id'], name=record['name'])
        try:
            result = lobby_service.receive(request.sid, text)
        except Exception as e:
            game_logger.log_error(request, e, 'message', record['lobby_id'])
            return

        dispatch_result(result)

    @socketio.on('disconnect')
    def handle_disconnect(*args):
        """Announce the departure to the rest of the lobby."""
        lobby_service = get_lobby_service()
        if not lobby_service:
            return

        result = lobby_service.disconnect(request.sid)
        dispatch_result(result)


def dispatch_result(result):
    """Send what a lobby service call asked for, from inside an event handler."""
    lobby_id = result.get('lobby_id')
    game_logger.log_server_response(request, 'dispatch', result['success'], result, lobby_id)

    if result.get('room'):
        join_room(lobby_room(result['room']))

    for message in result['reply']:
        send(message)

    if lobby_id:
        for message in result['broadcast']:
            send(message, to=lobby_room(lobby_id), include_self=False)
        for message in result['broadcast_all']:
            send(message, to=lobby_room(lobby_id))
