"""
Game Data Models

Contains the answer ledger's data structures, claim outcomes and the
notifications the ledger sends to its observers.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ClaimKind(Enum):
    """Who can be credited with a word."""
    LOCAL = "LOCAL"
    NAMED = "NAMED"
    SYSTEM = "SYSTEM"


@dataclass(frozen=True)
class Claimant:
    """
    Identity credited with solving a word.

    LOCAL is the solo player, NAMED a multiplayer player, and SYSTEM the
    reveal performed when a game is given up.
    """
    kind: ClaimKind
    name: Optional[str] = None

    @classmethod
    def local(cls) -> "Claimant":
        return cls(ClaimKind.LOCAL)

    @classmethod
    def named(cls, name: str) -> "Claimant":
        if not name:
            raise ValueError("A named claimant needs a non-empty name")
        return cls(ClaimKind.NAMED, name)

    @classmethod
    def system(cls) -> "Claimant":
        return cls(ClaimKind.SYSTEM)

    @property
    def is_named(self) -> bool:
        return self.kind is ClaimKind.NAMED

    @property
    def is_system(self) -> bool:
        return self.kind is ClaimKind.SYSTEM

    def __str__(self) -> str:
        if self.kind is ClaimKind.NAMED:
            return self.name
        return self.kind.value.lower()


class ClaimResult(Enum):
    """Outcome of a claim against the ledger."""
    REVEALED = "REVEALED"
    ALREADY_CLAIMED = "ALREADY_CLAIMED"
    NOT_FOUND = "NOT_FOUND"


@dataclass
class AnswerEntry:
    """A correct word and whoever claimed it (None while unclaimed)."""
    word: str
    claimant: Optional[Claimant] = None

    @property
    def claimed(self) -> bool:
        return self.claimant is not None


@dataclass(frozen=True)
class LookupResult:
    """Location of a word in the ledger."""
    group_index: int
    position: int
    claimant: Optional[Claimant]


@dataclass(frozen=True)
class WordRevealed:
    """Sent to observers when an entry becomes claimed."""
    group_index: int
    position: int
    word: str
    claimant: Claimant


@dataclass(frozen=True)
class ScoreChanged:
    """Sent to observers when the aggregate score changes."""
    score: int


@dataclass(frozen=True)
class PlayerScoreChanged:
    """Sent to observers when a multiplayer player's score changes."""
    name: str
    score: int
