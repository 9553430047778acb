"""
Tests for the connection state machine, driven through a scripted transport.
"""

import pytest

from anagrams.errors import (
    BadNameError, ConnectionLost, ConnectionStateError, LobbyNotFoundError, NameTakenError,
    ProtocolParseError
)
from anagrams.models.game import Claimant
from anagrams.network.connection import Connection, ConnectionState, Role
from conftest import Recorder


@pytest.fixture
def connection(transport):
    return Connection(transport)


def joined(connection, transport, roster="alice bob_ carol", snapshot="den dare_ garden"):
    connection.join("48213")
    transport.deliver(":ok")
    connection.send_name("carol")
    transport.deliver(roster, snapshot)


class TestJoinHandshake:

    def test_full_handshake(self, connection, transport):
        joins, quits, games = Recorder(), Recorder(), Recorder()
        connection.on_player_join = joins
        connection.on_player_quit = quits
        connection.on_game_received = games

        connection.join("48213")
        assert transport.route == "join/48213"
        assert connection.role is Role.JOINER
        assert connection.state is ConnectionState.AWAITING_LOBBY_ACK

        transport.deliver(":ok")
        assert connection.state is ConnectionState.AWAITING_NAME_ACK

        connection.send_name("carol")
        assert transport.sent == ["carol"]

        transport.deliver("alice bob_ carol")
        assert connection.state is ConnectionState.AWAITING_WORD_LIST
        assert connection.lobby.player_names == ["alice", "carol"]
        assert connection.lobby.host_name == "alice"
        assert joins.calls == ["alice", "bob", "carol"]
        assert quits.calls == ["bob"]

        transport.deliver("den dare_ garden")
        assert connection.state is ConnectionState.STEADY
        assert connection.in_lobby
        assert games.calls == [[("den", False), ("dare", True), ("garden", False)]]

    def test_send_name_before_ack(self, connection, transport):
        connection.join("48213")
        with pytest.raises(ConnectionStateError):
            connection.send_name("carol")

    def test_bad_name_allows_retry(self, connection, transport):
        bad_names = Recorder()
        connection.on_bad_name = bad_names
        connection.join("48213")
        transport.deliver(":ok")

        connection.send_name("x:")
        transport.deliver(":badname")

        assert connection.state is ConnectionState.AWAITING_NAME_ACK
        assert isinstance(bad_names.calls[0], BadNameError)

        connection.send_name("carol")
        transport.deliver("alice carol", "den garden")
        assert connection.state is ConnectionState.STEADY
        assert connection.player_name == "carol"

    def test_name_taken_fails(self, connection, transport):
        failures = Recorder()
        connection.on_join_failed = failures
        connection.join("48213")
        transport.deliver(":ok")
        connection.send_name("alice")

        transport.deliver(":taken")

        assert connection.state is ConnectionState.FAILED
        assert isinstance(failures.calls[0], NameTakenError)
        assert transport.closed_by_client

    def test_unknown_lobby(self, connection, transport):
        failures, disconnects = Recorder(), Recorder()
        connection.on_join_failed = failures
        connection.on_disconnect = disconnects
        connection.join("99999")

        transport.deliver(":noexist")

        assert connection.state is ConnectionState.FAILED
        assert isinstance(failures.calls[0], LobbyNotFoundError)
        assert len(failures.calls) == 1
        assert not disconnects.called

    def test_close_before_ack_means_unknown_lobby(self, connection, transport):
        failures = Recorder()
        connection.on_join_failed = failures
        connection.join("99999")

        transport.drop()

        assert connection.state is ConnectionState.FAILED
        assert isinstance(failures.calls[0], LobbyNotFoundError)

    def test_word_list_without_base_word(self, connection, transport):
        failures = Recorder()
        connection.on_join_failed = failures

        joined(connection, transport, snapshot="den dare")

        assert connection.state is ConnectionState.FAILED
        assert isinstance(failures.calls[0], ProtocolParseError)

    def test_malformed_word_list(self, connection, transport):
        failures = Recorder()
        connection.on_join_failed = failures

        joined(connection, transport, snapshot="den ga$den")

        assert connection.state is ConnectionState.FAILED
        assert isinstance(failures.calls[0], ProtocolParseError)

    def test_disconnect_during_roster_wait(self, connection, transport):
        disconnects = Recorder()
        connection.on_disconnect = disconnects
        connection.join("48213")
        transport.deliver(":ok")

        transport.drop()

        assert connection.state is ConnectionState.CLOSED
        assert disconnects.called


class TestHostHandshake:

    def test_host(self, connection, transport):
        created, joins = Recorder(), Recorder()
        connection.on_lobby_created = created
        connection.on_player_join = joins

        connection.host("alice", "den_ garden")

        assert transport.route == "host/alice"
        assert transport.sent == ["den_ garden"]
        assert connection.state is ConnectionState.AWAITING_LOBBY_ID

        transport.deliver("48213")

        assert connection.state is ConnectionState.STEADY
        assert created.calls == ["c48213"]
        assert joins.calls == ["alice"]
        assert connection.lobby.lobby_id == "c48213"
        assert connection.lobby.player_names == ["alice"]

    def test_connection_is_single_use(self, connection, transport):
        connection.host("alice", "den garden")
        with pytest.raises(ConnectionStateError):
            connection.join("48213")


class TestSteadyState:

    @pytest.fixture
    def hosted(self, connection, transport):
        connection.host("alice", "den garden")
        transport.deliver("48213")
        transport.sent.clear()
        return connection

    def test_roster_events(self, hosted, transport):
        transport.deliver(":join bob", ":join carol", ":quit bob")
        assert hosted.lobby.player_names == ["alice", "carol"]

    def test_quit_of_unknown_player_is_ignored(self, hosted, transport):
        transport.deliver(":quit nobody")
        assert hosted.lobby.player_names == ["alice"]

    def test_word_attempts(self, hosted, transport):
        attempts = Recorder()
        hosted.on_word_attempt = attempts

        transport.deliver(":attempt den bob", ":attempt garden _")

        assert attempts.calls == [("den", Claimant.named("bob")), ("garden", Claimant.system())]

    def test_votes_and_give_up(self, hosted, transport):
        votes, give_ups = Recorder(), Recorder()
        hosted.on_give_up_vote = votes
        hosted.on_all_give_up = give_ups
        transport.deliver(":join bob")

        transport.deliver(":giveup bob")
        assert hosted.lobby.vote_set == {"bob"}
        transport.deliver(":ungiveup bob")
        assert hosted.lobby.vote_set == set()

        transport.deliver(":allgiveup")
        assert hosted.lobby.given_up
        assert give_ups.called
        assert votes.calls == [("bob", True), ("bob", False)]

    def test_malformed_messages_are_dropped(self, hosted, transport):
        failures = Recorder()
        hosted.on_join_failed = failures

        transport.deliver(":dance bob", ":attempt den")

        assert hosted.state is ConnectionState.STEADY
        assert not failures.called

    def test_outgoing(self, hosted, transport):
        hosted.announce_attempt("Grand")
        hosted.announce_attempt("")
        hosted.vote_give_up(True)
        hosted.vote_give_up(False)

        assert transport.sent == [":attempt grand", ":giveup", ":ungiveup"]
        assert hosted.lobby.vote_set == set()

    def test_disconnect(self, hosted, transport):
        disconnects = Recorder()
        hosted.on_disconnect = disconnects

        transport.drop()

        assert hosted.state is ConnectionState.CLOSED
        assert not hosted.active
        assert len(disconnects.calls) == 1
        assert isinstance(disconnects.calls[0], ConnectionLost)

    def test_local_close_is_silent(self, hosted, transport):
        disconnects = Recorder()
        hosted.on_disconnect = disconnects

        hosted.close()

        assert hosted.state is ConnectionState.CLOSED
        assert transport.closed_by_client
        assert not disconnects.called

    def test_nothing_sent_outside_steady_state(self, connection, transport):
        connection.announce_attempt("den")
        connection.vote_give_up(True)
        assert transport.sent == []
