"""
Letter Pool

Tracks the letters a player can still pick and the word being composed.
Letters move between the two; none are ever created or lost, so the input
buffer and the occupied pool slots always add up to the base word.
"""

import random
from typing import List, Optional

EMPTY_SLOT = ""


class LetterPool:
    """Selectable letter slots plus the in-progress input buffer."""

    def __init__(self, base_word: str, rng: Optional[random.Random] = None):
        self.size = len(base_word)
        self.letters: List[str] = list(base_word.lower())
        self.buffer: List[str] = []
        self._rng = rng or random.Random()

    @property
    def current_word(self) -> str:
        return "".join(self.buffer)

    @property
    def occupied_slots(self) -> int:
        return sum(1 for letter in self.letters if letter != EMPTY_SLOT)

    def shuffle(self) -> None:
        """Randomly reorder the pool slots. The input buffer is untouched."""
        self._rng.shuffle(self.letters)

    def index_of_letter(self, c: str) -> int:
        """
        Checks if a letter is available to be typed.

        Args:
            c: The letter to check, any case

        Returns:
            int: Index of the letter in the pool, or -1 if it is not available
        """
        c = c.lower()
        if not c or c == EMPTY_SLOT:
            return -1
        try:
            return self.letters.index(c)
        except ValueError:
            return -1

    def enter_char(self, index: int) -> bool:
        """
        Move the letter at a pool slot to the end of the input buffer.

        Returns:
            bool: False if the index is out of range or the slot is empty
        """
        if not 0 <= index < self.size or self.letters[index] == EMPTY_SLOT:
            return False

        self.buffer.append(self.letters[index])
        self.letters[index] = EMPTY_SLOT
        return True

    def backspace_char(self, index: Optional[int] = None) -> bool:
        """
        Return the last letter of the input buffer to the pool.

        The letter goes to the lowest-indexed empty slot, not necessarily the
        slot it came from.

        Args:
            index: Optional buffer position the caller means to delete. Any
                   position other than the last one is rejected, which keeps
                   a stale UI from deleting the wrong letter.

        Returns:
            bool: False if there was nothing to backspace or the index is stale
        """
        if not self.buffer:
            return False
        if index is not None and index != len(self.buffer) - 1:
            return False

        letter = self.buffer.pop()
        self.letters[self.letters.index(EMPTY_SLOT)] = letter
        return True

    def clear_input(self) -> str:
        """Backspace until the buffer is empty and return what it held."""
        word = self.current_word
        while self.backspace_char():
            pass
        return word
