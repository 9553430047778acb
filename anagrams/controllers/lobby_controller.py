"""
Lobby Controller

Read-only HTTP endpoints describing the coordinator's open lobbies.
"""

from flask import Blueprint, request, jsonify
from ..services.lobby_service import get_lobby_service
from ..utils.game_logger import game_logger

lobby_bp = Blueprint('lobby', __name__)


@lobby_bp.route('/lobbies', methods=['GET'])
def get_lobbies():
    """List open lobbies."""
    try:
        lobby_service = get_lobby_service()
        if not lobby_service:
            return jsonify({
                'success': False,
                'error': 'Lobby service unavailable'
            }), 500

        game_logger.log_user_action(request, 'get_lobbies')
        result = lobby_service.get_lobbies_state()
        game_logger.log_server_response(request, 'get_lobbies', True, result)
        return jsonify(result)
    except Exception as e:
        game_logger.log_error(request, e, 'get_lobbies')
        return jsonify({'success': False, 'error': str(e)}), 500


@lobby_bp.route('/lobbies/<lobby_id>', methods=['GET'])
def get_lobby_state(lobby_id):
    """Get roster, votes and progress of one lobby."""
    try:
        lobby_service = get_lobby_service()
        if not lobby_service:
            return jsonify({
                'success': False,
                'error': 'Lobby service unavailable'
            }), 500

        game_logger.log_user_action(request, 'get_lobby_state', lobby_id)

        result = lobby_service.get_lobby_state(lobby_id)
        game_logger.log_server_response(request, 'get_lobby_state', result['success'], result, lobby_id)

        if result['success']:
            return jsonify(result)
        return jsonify(result), 404

    except Exception as e:
        game_logger.log_error(request, e, 'get_lobby_state', lobby_id)
        return jsonify({'success': False, 'error': str(e)}), 500
