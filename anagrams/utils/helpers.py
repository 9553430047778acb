"""
Helper Functions

Contains utility functions used by the lobby coordinator.
"""

from ..config.game_settings import CLAIMED_MARKER, MAX_NAME_LENGTH


def lobby_room(lobby_id: str) -> str:
    """Socket.IO room holding every connection of a lobby."""
    return f"lobby_{lobby_id}"


def is_valid_player_name(name: str) -> bool:
    """
    Check that a name survives the space-separated wire format.

    Names may not contain whitespace, start like a command or end with the
    marker used for departed players.
    """
    return (
        bool(name)
        and len(name) <= MAX_NAME_LENGTH
        and not any(c.isspace() for c in name)
        and not name.startswith(":")
        and not name.endswith(CLAIMED_MARKER)
    )
