"""
Game Session

Wires player actions and lobby events to one game's ledger and letter pool.
A composing application (UI, bot, test) owns one GameSession per player.
"""

import random
from typing import Callable, Iterable, List, Optional, Tuple

from ..config.game_settings import BASE_WORD_LENGTH, get_dictionary_statistics, load_dictionary
from ..errors import BadNameError, ConnectionLost, ConnectionStateError, GiveUpInLobbyError
from ..models.game import Claimant, ClaimResult, PlayerScoreChanged
from ..network.connection import Connection, Role
from ..network.transport import Transport
from ..utils.game_logger import game_logger
from .ledger_service import AnswerLedger, LedgerObserver
from .letter_pool import LetterPool
from .word_set_service import create_word_groups


class GameSession:
    """
    Orchestrates a single player's game.

    This class handles:
    - Solo game creation from a dictionary
    - Letter entry, backspace, shuffle and word submission
    - Hosting a lobby from the current game, or joining someone else's
    - Routing lobby events (attempts, roster, votes, give-up) to the ledger
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self.base_word: Optional[str] = None
        self.ledger: Optional[AnswerLedger] = None
        self.pool: Optional[LetterPool] = None
        self.connection: Optional[Connection] = None
        self._observers: List[LedgerObserver] = []

        # Callbacks
        self.on_game_created: Optional[Callable[[], None]] = None
        self.on_lobby_created: Optional[Callable[[str], None]] = None
        self.on_player_join: Optional[Callable[[str], None]] = None
        self.on_player_quit: Optional[Callable[[str], None]] = None
        self.on_give_up_vote: Optional[Callable[[str, bool], None]] = None
        self.on_bad_name: Optional[Callable[[BadNameError], None]] = None
        self.on_join_failed: Optional[Callable[[Exception], None]] = None
        self.on_disconnect: Optional[Callable[[ConnectionLost], None]] = None

    @property
    def in_lobby(self) -> bool:
        """True while connected to a lobby past the handshake."""
        return self.connection is not None and self.connection.in_lobby

    @property
    def player_name(self) -> Optional[str]:
        """Multiplayer name of the local player, or None when playing solo."""
        if self.connection is None or self.connection.lobby is None:
            return None
        return self.connection.player_name

    def subscribe(self, observer: LedgerObserver) -> None:
        """
        Register an observer for reveal and score notifications.

        The observer stays attached across games, including a game received
        from a lobby host.
        """
        self._observers.append(observer)
        if self.ledger is not None:
            self.ledger.subscribe(observer)

    def _emit(self, callback: Optional[Callable], *args) -> None:
        if callback:
            callback(*args)

    def _start(self, base_word: str, ledger: AnswerLedger) -> None:
        self.base_word = base_word
        self.ledger = ledger
        ledger.subscribe(self._sync_player_score)
        for observer in self._observers:
            ledger.subscribe(observer)

        self.pool = LetterPool(base_word, rng=self.rng)
        self.pool.shuffle()
        self._emit(self.on_game_created)

    def _require_game(self) -> None:
        if self.ledger is None or self.pool is None:
            raise ConnectionStateError("No game in progress")

    def _require_no_connection(self) -> None:
        if self.connection is not None and self.connection.active:
            raise ConnectionStateError("Already connected to a lobby")

    @property
    def _handshaking(self) -> bool:
        return self.connection is not None and self.connection.active and not self.connection.in_lobby

    def _require_no_handshake(self) -> None:
        # The lobby's copy of the game is not settled until the handshake ends
        if self._handshaking:
            raise ConnectionStateError("Lobby handshake in progress")

    # Solo play

    def new_game(self, dictionary: Optional[Iterable[str]] = None) -> None:
        """
        Start a solo game with a random base word from the dictionary.

        Args:
            dictionary: Valid words; loaded with load_dictionary() when omitted

        Raises:
            ConnectionStateError: If a lobby connection is active
            EmptyDictionaryError: If the dictionary has no base-length words
        """
        self._require_no_connection()
        if dictionary is None:
            dictionary = load_dictionary()
            game_logger.logger.info(f"Loaded dictionary: {get_dictionary_statistics(dictionary)}")
        base_word, groups = create_word_groups(dictionary, rng=self.rng)
        self._start(base_word, AnswerLedger(groups))

    def shuffle(self) -> None:
        self._require_game()
        self.pool.shuffle()

    def index_of_letter(self, c: str) -> int:
        self._require_game()
        return self.pool.index_of_letter(c)

    def enter_char(self, index: int) -> bool:
        self._require_game()
        return self.pool.enter_char(index)

    def backspace_char(self, index: Optional[int] = None) -> bool:
        self._require_game()
        return self.pool.backspace_char(index)

    def submit_word(self) -> ClaimResult:
        """
        Submit the composed word, clearing the input buffer.

        The attempt is announced to the lobby even when it is not an answer,
        since other players run their own lookup.

        Returns:
            ClaimResult of the local claim, so callers can tell the player
            about unknown or already found words

        Raises:
            ConnectionStateError: While a lobby handshake is in progress
        """
        self._require_game()
        self._require_no_handshake()
        word = self.pool.current_word

        name = self.player_name
        claimant = Claimant.named(name) if name else Claimant.local()
        result = self.ledger.claim(word, claimant)

        if self.connection is not None:
            self.connection.announce_attempt(word)

        while self.pool.backspace_char():
            pass
        return result

    def give_up_local(self) -> int:
        """
        Reveal every remaining word and end scoring for this game.

        Raises:
            GiveUpInLobbyError: While playing in, or connecting to, a
                                multiplayer lobby
        """
        self._require_game()
        if self.connection is not None and self.connection.active:
            raise GiveUpInLobbyError("Vote to give up instead while in a lobby")
        return self.ledger.give_up_local()

    def give_up(self, on: bool) -> None:
        """
        Give up, or cast/retract a give-up vote in a lobby.

        Args:
            on: True to give up (or vote to), False to retract a vote

        Raises:
            ConnectionStateError: While a lobby handshake is in progress
        """
        self._require_game()
        self._require_no_handshake()
        if self.in_lobby:
            self.connection.vote_give_up(on)
            self._emit(self.on_give_up_vote, self.player_name, on)
        elif on:
            self.ledger.give_up_local()

    # Multiplayer

    def host_game(self, name: str, transport: Transport) -> Connection:
        """
        Promote the current game to a hosted lobby.

        Words already found are sent to the coordinator as claimed and are
        credited to the host once the lobby exists.

        Raises:
            ConnectionStateError: Without a game, after giving up, or while
                                  already connected
        """
        self._require_game()
        self._require_no_connection()
        if self.ledger.gave_up:
            raise ConnectionStateError("Cannot host a game that was given up")

        self.connection = self._wire(Connection(transport))
        self.connection.host(name, self.ledger.snapshot())
        return self.connection

    def join_game(self, lobby_id: str, transport: Transport) -> Connection:
        """Start joining a lobby. Call send_name once the lobby acknowledges."""
        self._require_no_connection()
        self.connection = self._wire(Connection(transport))
        self.connection.join(lobby_id)
        return self.connection

    def send_name(self, name: str) -> None:
        if self.connection is None:
            raise ConnectionStateError("Not joining a lobby")
        self.connection.send_name(name)

    def leave_lobby(self) -> None:
        if self.connection is not None:
            self.connection.close()

    def _wire(self, connection: Connection) -> Connection:
        connection.on_lobby_created = self._handle_lobby_created
        connection.on_player_join = self._handle_player_join
        connection.on_player_quit = lambda name: self._emit(self.on_player_quit, name)
        connection.on_word_attempt = self._handle_word_attempt
        connection.on_give_up_vote = lambda name, on: self._emit(self.on_give_up_vote, name, on)
        connection.on_all_give_up = self._handle_all_give_up
        connection.on_game_received = self._handle_game_received
        connection.on_bad_name = lambda error: self._emit(self.on_bad_name, error)
        connection.on_join_failed = lambda error: self._emit(self.on_join_failed, error)
        connection.on_disconnect = lambda error: self._emit(self.on_disconnect, error)
        return connection

    def _handle_lobby_created(self, lobby_id: str) -> None:
        self.ledger.lobby_id = lobby_id
        self._emit(self.on_lobby_created, lobby_id)

    def _handle_player_join(self, name: str) -> None:
        connection = self.connection
        if connection.role is Role.HOST and name == connection.player_name:
            self.ledger.credit_local_claims(name)
        self._emit(self.on_player_join, name)

    def _handle_word_attempt(self, word: str, claimant: Claimant) -> None:
        if self.ledger is not None:
            self.ledger.claim(word, claimant)

    def _handle_all_give_up(self) -> None:
        if self.ledger is not None:
            self.ledger.all_players_gave_up()

    def _handle_game_received(self, tokens: List[Tuple[str, bool]]) -> None:
        lobby = self.connection.lobby
        base_word = next(word for word, _ in tokens if len(word) == BASE_WORD_LENGTH)

        # The snapshot does not say who found a word, so earlier finds score nothing here
        ledger = AnswerLedger.from_snapshot(tokens, Claimant.system(), lobby_id=lobby.lobby_id)

        game_logger.log_game_event(
            lobby.lobby_id, 'game_received', self.connection.player_name, words=len(tokens)
        )
        self._start(base_word, ledger)

    def _sync_player_score(self, event: object) -> None:
        if not isinstance(event, PlayerScoreChanged):
            return
        if self.connection is None or self.connection.lobby is None:
            return
        player = self.connection.lobby.get_player(event.name)
        if player is not None:
            player.score = event.score
