"""
Ledger Service

Contains the authoritative answer ledger for one game: which words exist,
who claimed each of them, and the scores those claims are worth.
"""

from typing import Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from ..config.game_settings import BASE_WORD_LENGTH, MIN_WORD_LENGTH, POINT_VALUES
from ..models.game import (
    AnswerEntry, Claimant, ClaimResult, LookupResult,
    PlayerScoreChanged, ScoreChanged, WordRevealed
)
from ..protocol.codec import encode_snapshot
from ..utils.game_logger import game_logger

LedgerObserver = Callable[[object], None]


class AnswerLedger:
    """
    Answer ledger and score tracker.

    This class handles:
    - Case-insensitive lookup of answers across all word groups
    - Monotonic claims: an entry, once claimed, is never reassigned to nobody
    - Aggregate and per-player scoring, disabled for good once the game is
      given up
    - Reveal and score notifications to observers (UI, network glue)
    """

    def __init__(self, groups: List[List[str]], lobby_id: Optional[str] = None):
        self.groups: List[List[AnswerEntry]] = [
            [AnswerEntry(word.lower()) for word in group] for group in groups
        ]
        self.lobby_id = lobby_id
        self.score = 0
        self.player_scores: Dict[str, int] = {}
        self.gave_up = False
        self._observers: List[LedgerObserver] = []

    @classmethod
    def from_snapshot(cls,
                      tokens: Iterable[Tuple[str, bool]],
                      claimant: Optional[Claimant] = None,
                      lobby_id: Optional[str] = None) -> "AnswerLedger":
        """
        Materialize a ledger from a host's snapshot without re-deriving words.

        Args:
            tokens: (word, claimed) pairs as decoded from the wire
            claimant: Credited with the words already claimed in the snapshot;
                      the system when omitted
            lobby_id: Lobby the snapshot came from

        Returns:
            AnswerLedger whose cached scores match its claims
        """
        claimant = claimant or Claimant.system()
        by_length: Dict[int, Dict[str, bool]] = {
            length: {} for length in range(MIN_WORD_LENGTH, BASE_WORD_LENGTH + 1)
        }
        for word, claimed in tokens:
            word = word.lower()
            group = by_length.setdefault(len(word), {})
            group[word] = group.get(word, False) or claimed

        lengths = sorted(by_length)
        ledger = cls([sorted(by_length[length]) for length in lengths], lobby_id=lobby_id)
        for group_index, length in enumerate(lengths):
            for entry in ledger.groups[group_index]:
                if by_length[length][entry.word]:
                    entry.claimant = claimant

        ledger.score, ledger.player_scores = ledger.recompute_scores()
        return ledger

    def subscribe(self, observer: LedgerObserver) -> None:
        """Register a callable receiving WordRevealed and score notifications."""
        self._observers.append(observer)

    def unsubscribe(self, observer: LedgerObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self, event: object) -> None:
        for observer in list(self._observers):
            observer(event)

    def entries(self) -> Iterator[AnswerEntry]:
        """Every entry, group by group, in sorted order."""
        for group in self.groups:
            yield from group

    def lookup(self, word: str) -> Optional[LookupResult]:
        """
        Locate a word in the ledger.

        Args:
            word: The word to check, any case

        Returns:
            LookupResult with group index, position and current claimant,
            or None if the word is not an answer in this game
        """
        word = word.lower()
        for group_index, group in enumerate(self.groups):
            for position, entry in enumerate(group):
                if entry.word == word:
                    return LookupResult(group_index, position, entry.claimant)
        return None

    def claim(self, word: str, claimant: Claimant) -> ClaimResult:
        """
        Reveal a word and credit it to a claimant, if it is an unclaimed answer.

        Unknown words and words that are already claimed leave the ledger
        untouched; the caller decides whether to tell the user.

        Args:
            word: The word that was guessed, any case
            claimant: Who guessed it

        Returns:
            ClaimResult describing what happened
        """
        found = self.lookup(word)
        if found is None:
            game_logger.logger.debug(f"Claim of unknown word '{word}' by {claimant}")
            return ClaimResult.NOT_FOUND

        if found.claimant is not None:
            game_logger.logger.debug(
                f"Claim of '{word}' by {claimant} ignored, already claimed by {found.claimant}"
            )
            return ClaimResult.ALREADY_CLAIMED

        entry = self.groups[found.group_index][found.position]
        entry.claimant = claimant
        self._notify(WordRevealed(found.group_index, found.position, entry.word, claimant))

        if not self.gave_up and not claimant.is_system:
            self._award(POINT_VALUES[len(entry.word)], claimant)

        game_logger.log_game_event(
            self.lobby_id, 'word_revealed', str(claimant), word=entry.word, score=self.score
        )
        return ClaimResult.REVEALED

    def _award(self, points: int, claimant: Claimant) -> None:
        self.score += points
        self._notify(ScoreChanged(self.score))

        if claimant.is_named:
            self.set_player_score(claimant.name, self.player_scores.get(claimant.name, 0) + points)

    def set_player_score(self, name: str, score: int) -> None:
        self.player_scores[name] = score
        self._notify(PlayerScoreChanged(name, score))

    def credit_local_claims(self, name: str) -> int:
        """
        Re-credit words the solo player found to a multiplayer name.

        Used when a solo game is promoted to a hosted lobby. Entries stay
        claimed; only the identity changes.

        Returns:
            int: Number of entries re-credited
        """
        local, named = Claimant.local(), Claimant.named(name)
        credited = 0
        for entry in self.entries():
            if entry.claimant == local:
                entry.claimant = named
                credited += 1

        _, player_scores = self.recompute_scores()
        self.set_player_score(name, player_scores.get(name, 0))
        return credited

    def _reveal_all(self, reason: str) -> int:
        revealed = 0
        if self.gave_up:
            return revealed

        self.gave_up = True
        system = Claimant.system()
        for group_index, group in enumerate(self.groups):
            for position, entry in enumerate(group):
                if entry.claimant is None:
                    entry.claimant = system
                    self._notify(WordRevealed(group_index, position, entry.word, system))
                    revealed += 1

        game_logger.log_game_event(
            self.lobby_id, reason, None, revealed=revealed, score=self.score
        )
        return revealed

    def give_up_local(self) -> int:
        """
        Reveal every unclaimed word and stop scoring.

        Only meaningful outside a multiplayer lobby; the game session enforces
        that. Calling it again has no effect.

        Returns:
            int: Number of words revealed by this call
        """
        return self._reveal_all('game_given_up')

    def all_players_gave_up(self) -> int:
        """Reveal everything after the coordinator reports give-up consensus."""
        return self._reveal_all('lobby_given_up')

    def recompute_scores(self) -> Tuple[int, Dict[str, int]]:
        """
        Derive the aggregate and per-player scores from the claims alone.

        Returns:
            Tuple of (aggregate_score, player_scores)
        """
        score = 0
        player_scores: Dict[str, int] = {}
        for entry in self.entries():
            if entry.claimant is None or entry.claimant.is_system:
                continue
            points = POINT_VALUES[len(entry.word)]
            score += points
            if entry.claimant.is_named:
                player_scores[entry.claimant.name] = player_scores.get(entry.claimant.name, 0) + points
        return score, player_scores

    def snapshot(self) -> str:
        """Encode the whole ledger for the wire."""
        return encode_snapshot((entry.word, entry.claimed) for entry in self.entries())
