"""
Game Configuration Constants Module

This module defines the game rules shared by the client core and the lobby
coordinator, together with the helpers that load and validate a dictionary.
Dictionary storage itself is left to the caller; any iterable of words works.
"""

import json
import os
from typing import Dict, Final, Iterable, List, Optional

from .app_config import Config

BASE_WORD_LENGTH: Final[int] = 6
"""
Length of the base word every game is derived from.
Word derivation enumerates permutations, so this must stay small.
"""

MIN_WORD_LENGTH: Final[int] = 3
"""Shortest sub-word that counts as an answer."""

POINT_VALUES: Final[Dict[int, int]] = {
    3: 90,
    4: 160,
    5: 250,
    6: 360,
}
"""Points awarded for a revealed word, keyed by word length."""

CLAIMED_MARKER: Final[str] = "_"
"""
Suffix marking a claimed word in a ledger snapshot, or a departed player in a
roster. As an attempt claimant it stands for the give-up reveal.
"""

MAX_NAME_LENGTH: Final[int] = 20
"""Longest display name the lobby coordinator accepts."""

BUNDLED_DICTIONARY_PATH: Final[str] = os.path.join(
    os.path.dirname(os.path.abspath(__file__)), 'words.json'
)


def load_dictionary(path: Optional[str] = None) -> List[str]:
    """
    Load a dictionary from disk.

    Both a JSON array of strings and a plain text file with one word per line
    are accepted. Words are lower-cased and blank lines dropped.

    Args:
        path: File to read. Defaults to DICTIONARY_PATH from the environment,
              then to the small dictionary bundled with the package.

    Returns:
        List[str]: Lower-case words in file order

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the JSON content is not an array, or the words fail
                    validate_dictionary()
    """
    path = path or Config.DICTIONARY_PATH or BUNDLED_DICTIONARY_PATH

    with open(path, 'r', encoding='utf-8') as f:
        content = f.read()

    if path.endswith('.json'):
        try:
            raw_words = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}")
        if not isinstance(raw_words, list):
            raise ValueError("JSON file must contain an array of words")
    else:
        raw_words = content.splitlines()

    words = [str(word).strip().lower() for word in raw_words if str(word).strip()]
    validate_dictionary(words)
    return words


def validate_dictionary(dictionary: Iterable[str]) -> bool:
    """
    Validates that a dictionary can seed a game.

    Checks that every entry is alphabetic and that at least one entry has the
    base word length.

    Returns:
        bool: True if the dictionary passes all validation checks

    Raises:
        ValueError: If any validation check fails with detailed error message
    """
    words = list(dictionary)
    if not words:
        raise ValueError("Dictionary cannot be empty")

    for index, word in enumerate(words):
        if not word.isalpha():
            raise ValueError(f"Word at index {index} '{word}' contains non-alphabetic characters")

    if not any(len(word) == BASE_WORD_LENGTH for word in words):
        raise ValueError(f"Dictionary has no {BASE_WORD_LENGTH}-letter words to use as a base word")

    return True


def get_dictionary_statistics(dictionary: Iterable[str]) -> dict:
    """
    Summarizes a dictionary for logging.

    Returns:
        dict: Statistical information including:
            - total_words: Number of entries
            - base_word_candidates: Entries of the base word length
            - words_by_length: Entry counts for each answer length
    """
    words = [word.lower() for word in dictionary]
    if not words:
        return {"error": "Dictionary is empty"}

    words_by_length = {
        length: sum(1 for word in words if len(word) == length)
        for length in POINT_VALUES
    }

    return {
        "total_words": len(words),
        "base_word_candidates": words_by_length.get(BASE_WORD_LENGTH, 0),
        "words_by_length": words_by_length,
    }
