"""
Services Package

Contains all business logic and service classes.
"""

from .game_session import GameSession
from .ledger_service import AnswerLedger
from .letter_pool import LetterPool
from .lobby_service import LobbyService, get_lobby_service, initialize_lobby_service
from .word_set_service import choose_base_word, create_word_groups, generate_word_groups

__all__ = [
    'GameSession', 'AnswerLedger', 'LetterPool',
    'LobbyService', 'get_lobby_service', 'initialize_lobby_service',
    'choose_base_word', 'create_word_groups', 'generate_word_groups'
]
