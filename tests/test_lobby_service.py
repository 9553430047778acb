"""
Tests for the lobby coordinator's handshake, relay and consensus logic.
"""

import random

import pytest

from anagrams.services.lobby_service import LobbyService


@pytest.fixture
def service():
    return LobbyService(rng=random.Random(0))


@pytest.fixture
def lobby_id(service):
    assert service.connect("h1", "host/alice")['success']
    result = service.receive("h1", "den end garden")
    return result['reply'][0]


def join(service, sid, lobby_id, name):
    assert service.connect(sid, f"join/{lobby_id}")['reply'] == [":ok"]
    return service.receive(sid, name)


def test_host_creates_lobby(service):
    result = service.connect("h1", "host/alice")
    assert result['success']
    assert result['reply'] == []

    result = service.receive("h1", "den_ end garden")
    lobby_id = result['reply'][0]

    assert len(lobby_id) == 5 and lobby_id.isdigit()
    assert result['room'] == lobby_id
    lobby = service.get_lobby_state(lobby_id)['lobby']
    assert lobby['host'] == "alice"
    assert lobby['players'] == [{'name': 'alice', 'active': True}]
    assert (lobby['words_total'], lobby['words_claimed']) == (3, 1)


@pytest.mark.parametrize("route", [None, "", "spectate/alice", "host/", "host/:alice", "host/bob_"])
def test_refused_routes(service, route):
    result = service.connect("x", route)
    assert not result['success']
    assert result['reply'] == []
    assert service.get_connection("x") is None


def test_malformed_snapshot_rejected(service):
    service.connect("h1", "host/alice")
    result = service.receive("h1", "de")

    assert not result['success']
    assert service.lobbies == {}
    assert not service.receive("h1", "den garden")['success']


def test_join_unknown_lobby(service):
    result = service.connect("j1", "join/00000")
    assert result['reply'] == [":noexist"]
    assert not service.receive("j1", "bob")['success']


def test_join(service, lobby_id):
    result = join(service, "j1", lobby_id, "bob")

    assert result['reply'] == ["alice bob", "den end garden"]
    assert result['broadcast'] == [":join bob"]
    assert result['room'] == lobby_id


def test_host_prefixed_id_accepted(service, lobby_id):
    result = join(service, "j1", "c" + lobby_id, "bob")
    assert result['lobby_id'] == lobby_id


def test_bad_name_can_retry(service, lobby_id):
    service.connect("j1", f"join/{lobby_id}")

    assert service.receive("j1", "two words")['reply'] == [":badname"]
    assert service.receive("j1", "")['reply'] == [":badname"]
    assert service.receive("j1", "bob")['reply'][0] == "alice bob"


def test_name_taken(service, lobby_id):
    result = join(service, "j1", lobby_id, "alice")

    assert result['reply'] == [":taken"]
    assert not service.receive("j1", "bob")['success']


def test_rejected_connection_waits_for_client_close(service, lobby_id):
    result = join(service, "j1", lobby_id, "alice")
    assert 'disconnect' not in result
    assert service.get_connection("j1")['phase'] == "rejected"

    result = service.connect("j2", "join/00000")
    assert 'disconnect' not in result
    assert service.get_connection("j2")['phase'] == "rejected"

    service.disconnect("j1")
    service.disconnect("j2")
    assert service.get_connection("j1") is None
    assert service.get_connection("j2") is None
    assert service.get_lobby_state(lobby_id)['lobby']['players'] == [{'name': 'alice', 'active': True}]


def test_name_of_departed_player_can_be_reused(service, lobby_id):
    join(service, "j1", lobby_id, "bob")
    service.disconnect("j1")

    result = join(service, "j2", lobby_id, "bob")
    assert result['reply'][0] == "alice bob_ bob"


def test_attempts_are_relayed(service, lobby_id):
    join(service, "j1", lobby_id, "bob")

    result = service.receive("j1", ":attempt DEN")
    assert result['broadcast'] == [":attempt den bob"]

    service.receive("h1", ":attempt zebra")
    result = join(service, "j2", lobby_id, "carol")
    assert result['reply'][1] == "den_ end garden"


def test_malformed_command_dropped(service, lobby_id):
    result = service.receive("h1", "hello")
    assert not result['success']
    assert result['broadcast'] == []


def test_give_up_consensus(service, lobby_id):
    join(service, "j1", lobby_id, "bob")

    result = service.receive("h1", ":giveup")
    assert result['broadcast'] == [":giveup alice"]
    assert result['broadcast_all'] == []

    result = service.receive("h1", ":ungiveup")
    assert result['broadcast'] == [":ungiveup alice"]

    service.receive("h1", ":giveup")
    result = service.receive("j1", ":giveup")
    assert result['broadcast_all'] == [":allgiveup"]

    lobby = service.get_lobby_state(lobby_id)['lobby']
    assert lobby['given_up']
    assert lobby['words_claimed'] == lobby['words_total']


def test_join_after_give_up(service, lobby_id):
    join(service, "j1", lobby_id, "bob")
    service.receive("h1", ":giveup")
    service.receive("j1", ":giveup")

    result = join(service, "j2", lobby_id, "carol")

    assert result['reply'] == ["alice bob carol", "den_ end_ garden_", ":allgiveup"]
    assert result['broadcast'] == [":join carol"]
    assert result['broadcast_all'] == []


def test_join_before_give_up_gets_no_give_up(service, lobby_id):
    join(service, "j1", lobby_id, "bob")
    service.receive("j1", ":attempt garden")

    result = join(service, "j2", lobby_id, "carol")
    assert result['reply'] == ["alice bob carol", "den end garden_"]


def test_quit_completes_consensus(service, lobby_id):
    join(service, "j1", lobby_id, "bob")
    service.receive("h1", ":giveup")

    result = service.disconnect("j1")

    assert result['broadcast'] == [":quit bob"]
    assert result['broadcast_all'] == [":allgiveup"]


def test_quit_drops_vote(service, lobby_id):
    join(service, "j1", lobby_id, "bob")
    join(service, "j2", lobby_id, "carol")
    service.receive("j1", ":giveup")

    service.disconnect("j1")

    assert service.get_lobby_state(lobby_id)['lobby']['votes'] == []


def test_lobby_closes_when_empty(service, lobby_id):
    join(service, "j1", lobby_id, "bob")
    service.disconnect("h1")
    assert service.get_lobby_state(lobby_id)['success']

    service.disconnect("j1")

    assert not service.get_lobby_state(lobby_id)['success']
    assert service.get_lobbies_state()['lobbies'] == []
    assert service.connect("j2", f"join/{lobby_id}")['reply'] == [":noexist"]


def test_lobbies_summary(service, lobby_id):
    join(service, "j1", lobby_id, "bob")

    assert service.get_lobbies_state()['lobbies'] == [
        {'id': lobby_id, 'host': 'alice', 'active_players': 2, 'given_up': False}
    ]


def test_unknown_connection(service):
    assert not service.receive("nobody", ":giveup")['success']
    assert service.disconnect("nobody")['success']
