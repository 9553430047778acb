"""
Protocol Package

Contains the text wire format spoken between game clients and the lobby
coordinator.
"""

from .codec import (
    AllGiveUp, AttemptCommand, GiveUpVote, PlayerJoined, PlayerQuit, Signal,
    VoteCommand, WordAttempt, parse_client_command, parse_event, parse_roster,
    parse_signal, parse_snapshot
)

__all__ = [
    'AllGiveUp', 'AttemptCommand', 'GiveUpVote', 'PlayerJoined', 'PlayerQuit',
    'Signal', 'VoteCommand', 'WordAttempt', 'parse_client_command', 'parse_event',
    'parse_roster', 'parse_signal', 'parse_snapshot'
]
