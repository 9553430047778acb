"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    AnswerEntry, Claimant, ClaimKind, ClaimResult, LookupResult,
    PlayerScoreChanged, ScoreChanged, WordRevealed
)
from .lobby import LobbySession, Player

__all__ = [
    'AnswerEntry', 'Claimant', 'ClaimKind', 'ClaimResult', 'LookupResult',
    'PlayerScoreChanged', 'ScoreChanged', 'WordRevealed',
    'LobbySession', 'Player'
]
