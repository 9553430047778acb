"""
Protocol Codec

Text wire format shared by game clients and the lobby coordinator. Every
message is a single text frame. Commands start with a colon; handshake
payloads (roster, word list) and the joiner's chosen name are bare text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from ..config.game_settings import BASE_WORD_LENGTH, CLAIMED_MARKER, MIN_WORD_LENGTH
from ..errors import ProtocolParseError
from ..models.game import Claimant

# Handshake signals (coordinator -> joiner)
CMD_OK = ":ok"
CMD_NO_LOBBY = ":noexist"
CMD_BAD_NAME = ":badname"
CMD_NAME_TAKEN = ":taken"

# Steady-state commands
CMD_ATTEMPT = ":attempt"
CMD_ALL_GIVE_UP = ":allgiveup"
CMD_JOIN = ":join"
CMD_QUIT = ":quit"
CMD_GIVE_UP = ":giveup"
CMD_UNGIVE_UP = ":ungiveup"

# Transport routes
ROUTE_HOST = "host"
ROUTE_JOIN = "join"

# Prefix marking a lobby identifier as seen by its host
HOST_LOBBY_PREFIX = "c"


class Signal(Enum):
    """Handshake replies a joiner can receive."""
    OK = CMD_OK
    NO_LOBBY = CMD_NO_LOBBY
    BAD_NAME = CMD_BAD_NAME
    NAME_TAKEN = CMD_NAME_TAKEN


@dataclass(frozen=True)
class WordAttempt:
    word: str
    claimant: Claimant


@dataclass(frozen=True)
class AllGiveUp:
    pass


@dataclass(frozen=True)
class PlayerJoined:
    name: str


@dataclass(frozen=True)
class PlayerQuit:
    name: str


@dataclass(frozen=True)
class GiveUpVote:
    name: str
    on: bool


ServerEvent = Union[WordAttempt, AllGiveUp, PlayerJoined, PlayerQuit, GiveUpVote]


@dataclass(frozen=True)
class AttemptCommand:
    word: str


@dataclass(frozen=True)
class VoteCommand:
    on: bool


ClientCommand = Union[AttemptCommand, VoteCommand]


def route_for(kind: str, key: str) -> str:
    """Build the transport route, e.g. ``host/alice`` or ``join/k3x9``."""
    return f"{kind}/{key}"


def parse_route(route: str) -> Tuple[str, str]:
    """
    Split a transport route into its kind and key.

    Raises:
        ProtocolParseError: If the route is not ``host/<name>`` or ``join/<id>``
    """
    kind, _, key = route.partition("/")
    if kind not in (ROUTE_HOST, ROUTE_JOIN) or not key:
        raise ProtocolParseError("Unknown route", route)
    return kind, key


def parse_signal(text: str) -> Optional[Signal]:
    """Return the handshake signal a message carries, or None."""
    try:
        return Signal(text)
    except ValueError:
        return None


def parse_event(text: str) -> ServerEvent:
    """
    Parse a steady-state message from the coordinator.

    Args:
        text: One received message

    Returns:
        The structured event

    Raises:
        ProtocolParseError: If the message matches no known command
    """
    if text == CMD_ALL_GIVE_UP:
        return AllGiveUp()

    if text.startswith(CMD_ATTEMPT + " "):
        parts = text.split(" ", 2)
        if len(parts) != 3 or not parts[1] or not parts[2]:
            raise ProtocolParseError("Malformed attempt message", text)
        word, claimant = parts[1], parts[2]
        if claimant == CLAIMED_MARKER:
            return WordAttempt(word.lower(), Claimant.system())
        return WordAttempt(word.lower(), Claimant.named(claimant))

    command, _, name = text.partition(" ")
    if not name:
        raise ProtocolParseError("Unknown or incomplete message", text)

    if command == CMD_JOIN:
        return PlayerJoined(name)
    if command == CMD_QUIT:
        return PlayerQuit(name)
    if command == CMD_GIVE_UP:
        return GiveUpVote(name, True)
    if command == CMD_UNGIVE_UP:
        return GiveUpVote(name, False)

    raise ProtocolParseError("Unknown or incomplete message", text)


def _split_marker(token: str) -> Tuple[str, bool]:
    if token.endswith(CLAIMED_MARKER):
        return token[:-len(CLAIMED_MARKER)], True
    return token, False


def parse_roster(text: str) -> List[Tuple[str, bool]]:
    """
    Decode the roster sent to a new joiner.

    Returns:
        List of (name, quit) pairs in join order. quit is True for a player
        who joined earlier and has since left.
    """
    roster = []
    for token in text.split():
        name, departed = _split_marker(token)
        if not name:
            raise ProtocolParseError("Empty player name in roster", text)
        roster.append((name, departed))
    return roster


def encode_roster(players: Iterable[Tuple[str, bool]]) -> str:
    """Encode (name, active) pairs; inactive players carry the marker."""
    return " ".join(name if active else name + CLAIMED_MARKER for name, active in players)


def parse_snapshot(text: str) -> List[Tuple[str, bool]]:
    """
    Decode a ledger snapshot.

    Returns:
        List of (word, claimed) pairs

    Raises:
        ProtocolParseError: If the snapshot is empty or holds something that
                            cannot be an answer
    """
    tokens = []
    for token in text.split():
        word, claimed = _split_marker(token)
        if not word.isalpha() or not MIN_WORD_LENGTH <= len(word) <= BASE_WORD_LENGTH:
            raise ProtocolParseError(f"Invalid word '{token}' in snapshot", text)
        tokens.append((word.lower(), claimed))

    if not tokens:
        raise ProtocolParseError("Empty snapshot", text)
    return tokens


def encode_snapshot(entries: Iterable[Tuple[str, bool]]) -> str:
    """Encode (word, claimed) pairs; claimed words carry the marker."""
    return " ".join(word + CLAIMED_MARKER if claimed else word for word, claimed in entries).strip()


# Client -> coordinator

def encode_attempt(word: str) -> str:
    return f"{CMD_ATTEMPT} {word.lower()}"


def encode_vote(on: bool) -> str:
    return CMD_GIVE_UP if on else CMD_UNGIVE_UP


def parse_client_command(text: str) -> ClientCommand:
    """
    Parse a steady-state message sent by a player to the coordinator.

    Raises:
        ProtocolParseError: If the message matches no known command
    """
    if text == CMD_GIVE_UP:
        return VoteCommand(True)
    if text == CMD_UNGIVE_UP:
        return VoteCommand(False)

    command, _, word = text.partition(" ")
    if command == CMD_ATTEMPT and word.strip():
        return AttemptCommand(word.strip().lower())

    raise ProtocolParseError("Unknown client command", text)


# Coordinator -> clients

def encode_attempt_relay(word: str, claimant: Claimant) -> str:
    name = CLAIMED_MARKER if claimant.is_system else claimant.name
    return f"{CMD_ATTEMPT} {word.lower()} {name}"


def encode_join(name: str) -> str:
    return f"{CMD_JOIN} {name}"


def encode_quit(name: str) -> str:
    return f"{CMD_QUIT} {name}"


def encode_vote_relay(name: str, on: bool) -> str:
    return f"{encode_vote(on)} {name}"
