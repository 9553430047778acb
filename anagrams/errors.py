"""
Error Types

Exceptions raised by the game core and passed to connection callbacks.
Claims on unknown or already claimed words are not errors; the ledger reports
them through ClaimResult instead.
"""


class AnagramsError(Exception):
    """Base class for all game errors."""


class EmptyDictionaryError(AnagramsError):
    """The dictionary holds no word that can serve as a base word."""


class GiveUpInLobbyError(AnagramsError):
    """A local give-up was requested while playing in a multiplayer lobby."""


class ProtocolParseError(AnagramsError):
    """A message did not match any known part of the wire grammar."""

    def __init__(self, message: str, payload: str = ""):
        super().__init__(message)
        self.payload = payload


class ConnectionStateError(AnagramsError):
    """An operation was attempted in a connection state that does not allow it."""


class ConnectionLost(AnagramsError):
    """The transport closed."""


class JoinError(AnagramsError):
    """Base class for joiner handshake failures."""


class LobbyNotFoundError(JoinError):
    """The lobby being joined does not exist."""


class NameTakenError(JoinError):
    """Another active player in the lobby already uses this name."""


class BadNameError(JoinError):
    """The coordinator rejected the name; another one may be sent."""
