"""
Lobby Data Models

Contains the client-side view of a multiplayer lobby.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set


@dataclass
class Player:
    """A multiplayer participant."""
    name: str
    score: int = 0


@dataclass
class LobbySession:
    """
    Client-side lobby state, owned by the connection.

    The roster is kept in join order. Give-up consensus is decided by the
    coordinator, so vote_set is informational only.
    """
    lobby_id: str
    host_name: Optional[str] = None
    players: List[Player] = field(default_factory=list)
    given_up: bool = False
    vote_set: Set[str] = field(default_factory=set)

    @property
    def player_names(self) -> List[str]:
        return [player.name for player in self.players]

    def get_player(self, name: str) -> Optional[Player]:
        for player in self.players:
            if player.name == name:
                return player
        return None

    def add_player(self, name: str) -> Player:
        player = Player(name=name)
        self.players.append(player)
        return player

    def remove_player(self, name: str) -> bool:
        """Remove the first player with this name. Unknown names are ignored."""
        player = self.get_player(name)
        if player is None:
            return False
        self.players.remove(player)
        self.vote_set.discard(name)
        return True

    def set_vote(self, name: str, on: bool) -> None:
        if on:
            self.vote_set.add(name)
        else:
            self.vote_set.discard(name)
