"""
Word Set Service

Derives the answer groups for a game from a base word and a dictionary.
"""

import random
from itertools import permutations
from typing import Iterable, List, Optional, Set, Tuple

from ..config.game_settings import BASE_WORD_LENGTH, MIN_WORD_LENGTH
from ..errors import EmptyDictionaryError
from ..utils.game_logger import game_logger


def normalize_dictionary(dictionary: Iterable[str]) -> List[str]:
    """Lower-case every dictionary entry."""
    return [word.lower() for word in dictionary]


def choose_base_word(dictionary: Iterable[str],
                     length: int = BASE_WORD_LENGTH,
                     rng: Optional[random.Random] = None) -> str:
    """
    Pick a base word uniformly among dictionary entries of the given length.

    Args:
        dictionary: Words to choose from, any case
        length: Required base word length
        rng: Random source; the module-level generator when omitted

    Returns:
        str: The lower-case base word

    Raises:
        EmptyDictionaryError: If no entry has the required length
    """
    rng = rng or random
    candidates = [word for word in normalize_dictionary(dictionary) if len(word) == length]
    if not candidates:
        raise EmptyDictionaryError(f"No {length}-letter words in dictionary")
    return rng.choice(candidates)


def distinct_permutations(base_word: str) -> Set[str]:
    """
    Every distinct ordering of the base word's letters.

    Repeated letters produce identical orderings, which are collapsed here.
    """
    return {"".join(letters) for letters in permutations(base_word)}


def generate_word_groups(base_word: str, dictionary: Iterable[str]) -> List[List[str]]:
    """
    Find every dictionary word spelled from a prefix of a base word permutation.

    Each distinct permutation is truncated to each answer length, deduplicated,
    filtered against the dictionary and sorted. Enumerating permutations costs
    factorial time, which is only acceptable for the fixed base length.

    Args:
        base_word: Word whose letters are rearranged
        dictionary: Valid words, any case

    Returns:
        List[List[str]]: One sorted group per length from MIN_WORD_LENGTH to
                         the base word length. Groups may be empty.

    Raises:
        ValueError: If the base word does not have the supported length
    """
    base_word = base_word.lower()
    if len(base_word) != BASE_WORD_LENGTH:
        raise ValueError(
            f"Base word must have {BASE_WORD_LENGTH} letters, got '{base_word}'"
        )

    known_words = set(normalize_dictionary(dictionary))
    orderings = distinct_permutations(base_word)

    groups = []
    for length in range(MIN_WORD_LENGTH, BASE_WORD_LENGTH + 1):
        prefixes = {ordering[:length] for ordering in orderings}
        groups.append(sorted(prefix for prefix in prefixes if prefix in known_words))

    return groups


def create_word_groups(dictionary: Iterable[str],
                       rng: Optional[random.Random] = None) -> Tuple[str, List[List[str]]]:
    """
    Choose a base word and derive its answer groups.

    Returns:
        Tuple of (base_word, groups)
    """
    words = normalize_dictionary(dictionary)
    base_word = choose_base_word(words, rng=rng)
    groups = generate_word_groups(base_word, words)

    game_logger.logger.debug(
        f"Derived {sum(len(group) for group in groups)} words from base word '{base_word}'"
    )
    return base_word, groups
