"""
Game Logger Module

This module provides structured logging for player actions, coordinator
responses and game events, on both the client core and the lobby coordinator.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from ..config.app_config import Config


class GameLogger:
    """
    Centralized logging system for the anagram game.

    Features:
    - Player action tracking keyed by Socket.IO session
    - Coordinator response logging
    - Game event logging (reveals, give-ups, roster changes)
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(exist_ok=True)
        self.level = getattr(logging, level.upper(), logging.INFO)

        # Setup main game logger
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Setup the main game logger with file handler."""
        logger = logging.getLogger('anagrams')
        logger.setLevel(self.level)

        # Prevent duplicate handlers
        if logger.handlers:
            logger.handlers.clear()

        # Create log file with date
        log_file = self.log_dir / f"game_log_{datetime.now().strftime('%Y-%m-%d')}.log"

        # File handler for detailed logs
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(self.level)

        # Console handler for only important messages (WARNING and above)
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)

        file_formatter = logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        console_formatter = logging.Formatter(
            '%(levelname)s: %(message)s'
        )

        file_handler.setFormatter(file_formatter)
        console_handler.setFormatter(console_formatter)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        return logger

    def _get_client_identity(self, request) -> Dict[str, Optional[str]]:
        """Extract client identity information from a Flask or Socket.IO request."""
        return {
            'client_ip': getattr(request, 'remote_addr', None) or 'unknown',
            'sid': getattr(request, 'sid', None),
        }

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          client_info: Dict[str, Optional[str]],
                          details: Dict[str, Any]) -> str:
        """Create a structured log entry."""
        log_entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'client': client_info,
            'details': details
        }
        return json.dumps(log_entry, ensure_ascii=False)

    def log_user_action(self,
                        request,
                        action: str,
                        lobby_id: Optional[str] = None,
                        **kwargs):
        """
        Log player actions arriving at the coordinator.

        Args:
            request: Flask request object (Socket.IO or HTTP)
            action: Type of action (e.g., 'host', 'join', 'attempt', 'giveup')
            lobby_id: Lobby identifier if applicable
            **kwargs: Additional details to log
        """
        client_info = self._get_client_identity(request)

        details = {
            'lobby_id': lobby_id,
            'event': getattr(request, 'event', None) or getattr(request, 'endpoint', None),
            **kwargs
        }

        log_message = self._create_log_entry('USER_ACTION', action, client_info, details)
        self.logger.info(log_message)

    def log_server_response(self,
                            request,
                            action: str,
                            success: bool,
                            response_data: Dict[str, Any],
                            lobby_id: Optional[str] = None,
                            **kwargs):
        """
        Log coordinator responses with full context.

        Args:
            request: Flask request object
            action: Action that was performed
            success: Whether the action succeeded
            response_data: Data being returned to the client
            lobby_id: Lobby identifier if applicable
            **kwargs: Additional details to log
        """
        client_info = self._get_client_identity(request)

        safe_response = self._sanitize_response_data(response_data)

        details = {
            'lobby_id': lobby_id,
            'success': success,
            'response_size': len(str(response_data)),
            'response_data': safe_response,
            **kwargs
        }

        event_type = 'SERVER_RESPONSE_SUCCESS' if success else 'SERVER_RESPONSE_ERROR'
        log_message = self._create_log_entry(event_type, action, client_info, details)

        if success:
            self.logger.info(log_message)
        else:
            self.logger.error(log_message)

    def log_game_event(self,
                       lobby_id: Optional[str],
                       event: str,
                       player: Optional[str],
                       **kwargs):
        """
        Log game-specific events (reveals, give-ups, roster changes).

        Args:
            lobby_id: Lobby identifier, or None for a solo game
            event: Type of game event (e.g., 'word_revealed', 'game_given_up')
            player: Player the event concerns, if any
            **kwargs: Additional game details
        """
        client_info = {'client_ip': None, 'sid': None}

        details = {
            'lobby_id': lobby_id,
            'player': player,
            **kwargs
        }

        log_message = self._create_log_entry('GAME_EVENT', event, client_info, details)
        self.logger.info(log_message)

    def log_error(self,
                  request,
                  error: Exception,
                  action: str,
                  lobby_id: Optional[str] = None):
        """
        Log errors with full context.

        Args:
            request: Flask request object
            error: Exception that occurred
            action: Action that was being performed
            lobby_id: Lobby identifier if applicable
        """
        client_info = self._get_client_identity(request)

        details = {
            'lobby_id': lobby_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
            'action': action
        }

        log_message = self._create_log_entry('ERROR', action, client_info, details)
        self.logger.error(log_message)

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Shorten outgoing messages so word lists do not flood the log."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = data.copy()
        for key in ('reply', 'broadcast', 'broadcast_all'):
            messages = sanitized.get(key)
            if isinstance(messages, list):
                sanitized[key] = [
                    message if len(message) <= 80 else f"{message[:77]}..."
                    for message in messages
                ]

        return sanitized


# Global logger instance
game_logger = GameLogger(Config.LOG_DIR, Config.LOG_LEVEL)
