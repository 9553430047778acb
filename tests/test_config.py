"""
Tests for dictionary loading and the shared game settings.
"""

import json

import pytest

from anagrams.config.game_settings import (
    BASE_WORD_LENGTH, POINT_VALUES, get_dictionary_statistics, load_dictionary, validate_dictionary
)
from anagrams.services.game_session import GameSession
from anagrams.utils.game_logger import game_logger
from anagrams.utils.helpers import is_valid_player_name


def test_bundled_dictionary():
    words = load_dictionary()

    assert "garden" in words
    assert validate_dictionary(words)
    assert all(word == word.lower() for word in words)


def test_load_text_dictionary(tmp_path):
    path = tmp_path / "words.txt"
    path.write_text("Garden\n\nden\n  Red  \n", encoding="utf-8")

    assert load_dictionary(str(path)) == ["garden", "den", "red"]


def test_load_json_dictionary(tmp_path):
    path = tmp_path / "words.json"
    path.write_text(json.dumps(["Planet", "ant"]), encoding="utf-8")

    assert load_dictionary(str(path)) == ["planet", "ant"]


@pytest.mark.parametrize("content", ['{"words": []}', "[]", "not json"])
def test_load_invalid_json_dictionary(tmp_path, content):
    path = tmp_path / "words.json"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError):
        load_dictionary(str(path))


@pytest.mark.parametrize("content", ["garden\nd3n\n", "den\ngrand\n", "\n\n"])
def test_load_unusable_text_dictionary(tmp_path, content):
    path = tmp_path / "words.txt"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError):
        load_dictionary(str(path))


def test_new_game_logs_dictionary_statistics(rng, monkeypatch):
    logged = []
    monkeypatch.setattr(game_logger.logger, "info", logged.append)

    GameSession(rng=rng).new_game()

    assert any(message.startswith("Loaded dictionary: {'total_words'") for message in logged)


def test_validate_dictionary():
    with pytest.raises(ValueError):
        validate_dictionary([])
    with pytest.raises(ValueError):
        validate_dictionary(["garden", "d3n"])
    with pytest.raises(ValueError):
        validate_dictionary(["den", "grand"])


def test_dictionary_statistics():
    stats = get_dictionary_statistics(["garden", "den", "red", "grand"])

    assert stats["total_words"] == 4
    assert stats["base_word_candidates"] == 1
    assert stats["words_by_length"] == {3: 2, 4: 0, 5: 1, 6: 1}


def test_point_values_cover_every_length():
    assert sorted(POINT_VALUES) == list(range(3, BASE_WORD_LENGTH + 1))


@pytest.mark.parametrize("name,valid", [
    ("alice", True),
    ("", False),
    ("two words", False),
    (":ok", False),
    ("bob_", False),
    ("x" * 21, False),
])
def test_player_names(name, valid):
    assert is_valid_player_name(name) is valid
