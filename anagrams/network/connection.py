"""
Connection State Machine

Drives the host and join handshakes with the lobby coordinator and then
exchanges gameplay events in steady state. Everything runs inside transport
callbacks, one message at a time; nothing here blocks or locks.
"""

from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..config.game_settings import BASE_WORD_LENGTH
from ..errors import (
    BadNameError, ConnectionLost, ConnectionStateError, LobbyNotFoundError,
    NameTakenError, ProtocolParseError
)
from ..models.game import Claimant
from ..models.lobby import LobbySession
from ..protocol.codec import (
    HOST_LOBBY_PREFIX, ROUTE_HOST, ROUTE_JOIN,
    AllGiveUp, GiveUpVote, PlayerJoined, PlayerQuit, Signal, WordAttempt,
    encode_attempt, encode_vote, parse_event, parse_roster, parse_signal,
    parse_snapshot, route_for
)
from ..utils.game_logger import game_logger
from .transport import Transport


class Role(Enum):
    HOST = "HOST"
    JOINER = "JOINER"


class ConnectionState(Enum):
    IDLE = "IDLE"
    # Host
    AWAITING_LOBBY_ID = "AWAITING_LOBBY_ID"
    # Joiner
    AWAITING_LOBBY_ACK = "AWAITING_LOBBY_ACK"
    AWAITING_NAME_ACK = "AWAITING_NAME_ACK"
    AWAITING_ROSTER = "AWAITING_ROSTER"
    AWAITING_WORD_LIST = "AWAITING_WORD_LIST"
    # Both
    STEADY = "STEADY"
    FAILED = "FAILED"
    CLOSED = "CLOSED"


TERMINAL_STATES = (ConnectionState.FAILED, ConnectionState.CLOSED)

# A handler returns the next state and whether the same message must be
# processed again against that state.
Transition = Tuple[ConnectionState, bool]


class Connection:
    """
    One host or joiner connection to a lobby.

    Callbacks are plain attributes; unset ones are skipped. The connection owns
    the LobbySession and keeps its roster and votes current.
    """

    def __init__(self, transport: Transport):
        self.transport = transport
        self.role: Optional[Role] = None
        self.state = ConnectionState.IDLE
        self.player_name: Optional[str] = None
        self.lobby: Optional[LobbySession] = None
        self._lobby_key: Optional[str] = None
        self._snapshot: Optional[str] = None

        # Callbacks
        self.on_lobby_created: Optional[Callable[[str], None]] = None
        self.on_player_join: Optional[Callable[[str], None]] = None
        self.on_player_quit: Optional[Callable[[str], None]] = None
        self.on_word_attempt: Optional[Callable[[str, Claimant], None]] = None
        self.on_give_up_vote: Optional[Callable[[str, bool], None]] = None
        self.on_all_give_up: Optional[Callable[[], None]] = None
        self.on_game_received: Optional[Callable[[List[Tuple[str, bool]]], None]] = None
        self.on_bad_name: Optional[Callable[[BadNameError], None]] = None
        self.on_join_failed: Optional[Callable[[Exception], None]] = None
        self.on_disconnect: Optional[Callable[[ConnectionLost], None]] = None

        self._handlers: Dict[ConnectionState, Callable[[str], Transition]] = {
            ConnectionState.AWAITING_LOBBY_ID: self._await_lobby_id,
            ConnectionState.AWAITING_LOBBY_ACK: self._await_lobby_ack,
            ConnectionState.AWAITING_NAME_ACK: self._await_name_ack,
            ConnectionState.AWAITING_ROSTER: self._await_roster,
            ConnectionState.AWAITING_WORD_LIST: self._await_word_list,
            ConnectionState.STEADY: self._steady,
        }

        transport.on_open = self._handle_open
        transport.on_message = self._handle_message
        transport.on_close = self._handle_close

    @property
    def in_lobby(self) -> bool:
        return self.state is ConnectionState.STEADY

    @property
    def active(self) -> bool:
        return self.state not in TERMINAL_STATES and self.state is not ConnectionState.IDLE

    def _emit(self, callback: Optional[Callable], *args) -> None:
        if callback:
            callback(*args)

    def _require_idle(self) -> None:
        if self.state is not ConnectionState.IDLE:
            raise ConnectionStateError(f"Connection already used (state {self.state.value})")

    # Opening

    def host(self, name: str, snapshot: str) -> None:
        """
        Start hosting a lobby.

        Args:
            name: Display name of the host
            snapshot: Encoded ledger sent as soon as the transport opens
        """
        self._require_idle()
        self.role = Role.HOST
        self.player_name = name
        self._snapshot = snapshot
        self.state = ConnectionState.AWAITING_LOBBY_ID
        self.transport.open(route_for(ROUTE_HOST, name))

    def join(self, lobby_id: str) -> None:
        """Start joining an existing lobby. A name is sent once it acknowledges."""
        self._require_idle()
        self.role = Role.JOINER
        self._lobby_key = lobby_id
        self.state = ConnectionState.AWAITING_LOBBY_ACK
        self.transport.open(route_for(ROUTE_JOIN, lobby_id))

    def send_name(self, name: str) -> None:
        """
        Propose a display name while joining.

        Raises:
            ConnectionStateError: If the lobby has not acknowledged the join yet
                                  or the handshake is past name selection
        """
        if self.state is not ConnectionState.AWAITING_NAME_ACK:
            raise ConnectionStateError(f"Cannot send a name in state {self.state.value}")
        self.player_name = name
        self.transport.send(name)

    # Outgoing gameplay

    def announce_attempt(self, word: str) -> None:
        """Tell the lobby about a guess, correct or not."""
        if self.state is ConnectionState.STEADY and word:
            self.transport.send(encode_attempt(word))

    def vote_give_up(self, on: bool) -> None:
        if self.state is not ConnectionState.STEADY:
            return
        self.lobby.set_vote(self.player_name, on)
        self.transport.send(encode_vote(on))

    def close(self) -> None:
        """Leave the lobby. No disconnect notification follows."""
        if self.state in TERMINAL_STATES:
            return
        self.state = ConnectionState.CLOSED
        self.transport.close()

    # Transport events

    def _handle_open(self) -> None:
        if self.role is Role.HOST and self.state is ConnectionState.AWAITING_LOBBY_ID:
            self.transport.send(self._snapshot)

    def _handle_message(self, text: str) -> None:
        """
        Process one inbound message against the current state.

        A handler may ask for the same message to be re-dispatched against the
        state it moved to; the joiner's name acknowledgement relies on this,
        since the roster itself is the acknowledgement.
        """
        redispatch = True
        while redispatch:
            handler = self._handlers.get(self.state)
            if handler is None:
                game_logger.logger.debug(f"Ignoring message in state {self.state.value}: {text!r}")
                return

            next_state, redispatch = handler(text)
            if self.state in TERMINAL_STATES:
                return
            self.state = next_state

    def _handle_close(self) -> None:
        if self.state in TERMINAL_STATES or self.state is ConnectionState.IDLE:
            return

        if self.state is ConnectionState.AWAITING_LOBBY_ACK:
            # The coordinator drops joiners of unknown lobbies
            self.state = ConnectionState.FAILED
            self._emit(self.on_join_failed, LobbyNotFoundError(self._lobby_key))
            return

        lost = ConnectionLost(
            f"Connection lost in state {self.state.value} (player {self.player_name})"
        )
        game_logger.logger.warning(str(lost))
        self.state = ConnectionState.CLOSED
        self._emit(self.on_disconnect, lost)

    def _fail(self, error: Exception) -> Transition:
        game_logger.logger.warning(f"Join of lobby '{self._lobby_key}' failed: {error!r}")
        self.state = ConnectionState.FAILED
        self.transport.close()
        self._emit(self.on_join_failed, error)
        return ConnectionState.FAILED, False

    # Host handshake

    def _await_lobby_id(self, text: str) -> Transition:
        lobby_id = HOST_LOBBY_PREFIX + text
        self.lobby = LobbySession(lobby_id=lobby_id, host_name=self.player_name)
        game_logger.log_game_event(lobby_id, 'lobby_created', self.player_name)

        self._emit(self.on_lobby_created, lobby_id)
        self._apply_join(self.player_name)
        return ConnectionState.STEADY, False

    # Joiner handshake

    def _await_lobby_ack(self, text: str) -> Transition:
        signal = parse_signal(text)
        if signal is Signal.NO_LOBBY:
            return self._fail(LobbyNotFoundError(self._lobby_key))
        if signal is Signal.OK:
            return ConnectionState.AWAITING_NAME_ACK, False

        game_logger.logger.debug(f"Unexpected message before lobby acknowledgement: {text!r}")
        return ConnectionState.AWAITING_LOBBY_ACK, False

    def _await_name_ack(self, text: str) -> Transition:
        signal = parse_signal(text)
        if signal is Signal.BAD_NAME:
            self._emit(self.on_bad_name, BadNameError(self.player_name))
            return ConnectionState.AWAITING_NAME_ACK, False
        if signal is Signal.NAME_TAKEN:
            return self._fail(NameTakenError(self.player_name))

        # Anything else is the roster
        return ConnectionState.AWAITING_ROSTER, True

    def _await_roster(self, text: str) -> Transition:
        try:
            roster = parse_roster(text)
        except ProtocolParseError as e:
            return self._fail(e)

        host_name = roster[0][0] if roster else None
        self.lobby = LobbySession(lobby_id=self._lobby_key, host_name=host_name)
        for name, departed in roster:
            self._apply_join(name)
            if departed:
                self._apply_quit(name)

        return ConnectionState.AWAITING_WORD_LIST, False

    def _await_word_list(self, text: str) -> Transition:
        try:
            tokens = parse_snapshot(text)
        except ProtocolParseError as e:
            return self._fail(e)

        if not any(len(word) == BASE_WORD_LENGTH for word, _ in tokens):
            return self._fail(ProtocolParseError("Snapshot has no base-length word", text))

        game_logger.log_game_event(self._lobby_key, 'lobby_joined', self.player_name, words=len(tokens))
        self._emit(self.on_game_received, tokens)
        return ConnectionState.STEADY, False

    # Steady state

    def _steady(self, text: str) -> Transition:
        try:
            event = parse_event(text)
        except ProtocolParseError as e:
            game_logger.logger.warning(f"Dropping malformed message from coordinator: {e} ({text!r})")
            return ConnectionState.STEADY, False

        if isinstance(event, WordAttempt):
            self._emit(self.on_word_attempt, event.word, event.claimant)
        elif isinstance(event, AllGiveUp):
            self.lobby.given_up = True
            self._emit(self.on_all_give_up)
        elif isinstance(event, PlayerJoined):
            self._apply_join(event.name)
        elif isinstance(event, PlayerQuit):
            self._apply_quit(event.name)
        elif isinstance(event, GiveUpVote):
            self.lobby.set_vote(event.name, event.on)
            self._emit(self.on_give_up_vote, event.name, event.on)

        return ConnectionState.STEADY, False

    def _apply_join(self, name: str) -> None:
        self.lobby.add_player(name)
        self._emit(self.on_player_join, name)

    def _apply_quit(self, name: str) -> None:
        self.lobby.remove_player(name)
        self._emit(self.on_player_quit, name)
