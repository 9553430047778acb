"""
Lobby Service

Coordinator side of multiplayer: hosts lobbies, runs the join handshake,
enforces unique names, relays gameplay messages and decides when every player
has voted to give up.

Every operation returns a dict describing what to send, leaving the actual
Socket.IO calls to the websocket handlers:
- reply: messages for the sender
- broadcast: messages for the other members of the lobby
- broadcast_all: messages for every member of the lobby
- room: lobby the sender's connection must join
"""

import random
from typing import Dict, List, Optional

from ..errors import ProtocolParseError
from ..models.game import Claimant
from ..protocol.codec import (
    CMD_ALL_GIVE_UP, CMD_BAD_NAME, CMD_NAME_TAKEN, CMD_NO_LOBBY, CMD_OK,
    HOST_LOBBY_PREFIX, ROUTE_HOST, AttemptCommand, VoteCommand,
    encode_attempt_relay, encode_join, encode_quit, encode_roster,
    encode_snapshot, encode_vote_relay, parse_client_command, parse_route,
    parse_snapshot
)
from ..utils.game_logger import game_logger
from ..utils.helpers import is_valid_player_name

# Connection phases
PHASE_AWAITING_SNAPSHOT = "awaiting_snapshot"
PHASE_AWAITING_NAME = "awaiting_name"
PHASE_STEADY = "steady"
PHASE_REJECTED = "rejected"

LOBBY_ID_DIGITS = 5


def _result(success: bool = True, **kwargs) -> Dict:
    result = {'success': success, 'reply': [], 'broadcast': [], 'broadcast_all': []}
    result.update(kwargs)
    return result


class LobbyService:
    """
    In-memory lobby coordinator.

    Lobbies live as long as one of their players is connected. Lobby ids are
    digits only, so a host's ``c``-prefixed id can be told apart and accepted
    when a joiner pastes it.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.lobbies: Dict[str, Dict] = {}
        # Track each Socket.IO session: sid -> {'phase', 'lobby_id', 'name'}
        self.connections: Dict[str, Dict] = {}
        self._rng = rng or random.Random()

    def get_lobby_state(self, lobby_id: str) -> Dict:
        """Get the public state of one lobby."""
        lobby = self._find_lobby(lobby_id)
        if lobby is None:
            return {'success': False, 'error': 'Lobby not found'}

        return {
            'success': True,
            'lobby': {
                'id': lobby['id'],
                'host': lobby['host'],
                'players': [
                    {'name': p['name'], 'active': p['active']} for p in lobby['players']
                ],
                'votes': sorted(lobby['votes']),
                'given_up': lobby['given_up'],
                'words_total': len(lobby['words']),
                'words_claimed': sum(1 for claimed in lobby['words'].values() if claimed),
            }
        }

    def get_lobbies_state(self) -> Dict:
        """Get a summary of all open lobbies."""
        lobbies = []
        for lobby in self.lobbies.values():
            lobbies.append({
                'id': lobby['id'],
                'host': lobby['host'],
                'active_players': len(self._active_players(lobby)),
                'given_up': lobby['given_up'],
            })
        return {'success': True, 'lobbies': lobbies}

    def get_connection(self, sid: str) -> Optional[Dict]:
        return self.connections.get(sid)

    def _find_lobby(self, lobby_id: str) -> Optional[Dict]:
        lobby = self.lobbies.get(lobby_id)
        if lobby is None and lobby_id.startswith(HOST_LOBBY_PREFIX):
            lobby = self.lobbies.get(lobby_id[len(HOST_LOBBY_PREFIX):])
        return lobby

    def _new_lobby_id(self) -> str:
        while True:
            lobby_id = "".join(self._rng.choice("0123456789") for _ in range(LOBBY_ID_DIGITS))
            if lobby_id not in self.lobbies:
                return lobby_id

    def _active_players(self, lobby: Dict) -> List[Dict]:
        return [p for p in lobby['players'] if p['active']]

    def _snapshot(self, lobby: Dict) -> str:
        return encode_snapshot(lobby['words'].items())

    def _roster(self, lobby: Dict) -> str:
        return encode_roster((p['name'], p['active']) for p in lobby['players'])

    # Connection lifecycle

    def connect(self, sid: str, route: str) -> Dict:
        """
        Register a new connection opened on a ``host/`` or ``join/`` route.

        Returns:
            Dict with success False if the route is unusable and the
            connection should be refused
        """
        try:
            kind, key = parse_route(route or "")
        except ProtocolParseError as e:
            return _result(False, error=str(e))

        if kind == ROUTE_HOST:
            if not is_valid_player_name(key):
                return _result(False, error='Invalid host name')
            self.connections[sid] = {'phase': PHASE_AWAITING_SNAPSHOT, 'lobby_id': None, 'name': key}
            return _result()

        lobby = self._find_lobby(key)
        if lobby is None:
            self.connections[sid] = {'phase': PHASE_REJECTED, 'lobby_id': None, 'name': None}
            return _result(False, reply=[CMD_NO_LOBBY], error='Lobby not found')

        self.connections[sid] = {'phase': PHASE_AWAITING_NAME, 'lobby_id': lobby['id'], 'name': None}
        return _result(reply=[CMD_OK], lobby_id=lobby['id'])

    def receive(self, sid: str, text: str) -> Dict:
        """Process one message from a connection according to its phase."""
        record = self.connections.get(sid)
        if record is None:
            return _result(False, error='Unknown connection')

        phase = record['phase']
        if phase == PHASE_AWAITING_SNAPSHOT:
            return self._create_lobby(sid, record, text)
        if phase == PHASE_AWAITING_NAME:
            return self._choose_name(sid, record, text)
        if phase == PHASE_STEADY:
            return self._play(record, text)
        return _result(False, error='Connection was rejected')

    def disconnect(self, sid: str) -> Dict:
        """
        Forget a connection. A player leaving a lobby is announced to the rest,
        and the lobby is deleted once nobody is left.
        """
        record = self.connections.pop(sid, None)
        if record is None or record['phase'] != PHASE_STEADY:
            return _result()

        lobby = self.lobbies.get(record['lobby_id'])
        if lobby is None:
            return _result()

        name = record['name']
        for player in lobby['players']:
            if player['sid'] == sid:
                player['active'] = False
        lobby['votes'].discard(name)
        game_logger.log_game_event(lobby['id'], 'player_quit', name)

        if not self._active_players(lobby):
            del self.lobbies[lobby['id']]
            game_logger.log_game_event(lobby['id'], 'lobby_closed', None)
            return _result(lobby_id=lobby['id'])

        result = _result(lobby_id=lobby['id'], broadcast=[encode_quit(name)])
        result['broadcast_all'].extend(self._check_consensus(lobby))
        return result

    # Phases

    def _create_lobby(self, sid: str, record: Dict, text: str) -> Dict:
        try:
            tokens = parse_snapshot(text)
        except ProtocolParseError as e:
            record['phase'] = PHASE_REJECTED
            return _result(False, error=str(e))

        lobby_id = self._new_lobby_id()
        words: Dict[str, bool] = {}
        for word, claimed in tokens:
            words[word] = words.get(word, False) or claimed

        self.lobbies[lobby_id] = {
            'id': lobby_id,
            'host': record['name'],
            'words': words,
            'players': [],
            'votes': set(),
            'given_up': False,
        }
        self._add_player(self.lobbies[lobby_id], sid, record)
        game_logger.log_game_event(lobby_id, 'lobby_created', record['name'], words=len(words))

        return _result(reply=[lobby_id], room=lobby_id, lobby_id=lobby_id)

    def _choose_name(self, sid: str, record: Dict, text: str) -> Dict:
        lobby = self.lobbies.get(record['lobby_id'])
        if lobby is None:
            record['phase'] = PHASE_REJECTED
            return _result(False, reply=[CMD_NO_LOBBY], error='Lobby closed')

        name = text.strip()
        if not is_valid_player_name(name):
            return _result(False, reply=[CMD_BAD_NAME], error='Invalid name')

        if any(p['name'] == name for p in self._active_players(lobby)):
            record['phase'] = PHASE_REJECTED
            return _result(False, reply=[CMD_NAME_TAKEN], error='Name taken')

        record['name'] = name
        self._add_player(lobby, sid, record)
        game_logger.log_game_event(lobby['id'], 'player_joined', name)

        reply = [self._roster(lobby), self._snapshot(lobby)]
        if lobby['given_up']:
            reply.append(CMD_ALL_GIVE_UP)

        return _result(
            reply=reply,
            broadcast=[encode_join(name)],
            room=lobby['id'],
            lobby_id=lobby['id'],
        )

    def _add_player(self, lobby: Dict, sid: str, record: Dict) -> None:
        lobby['players'].append({'name': record['name'], 'sid': sid, 'active': True})
        record['lobby_id'] = lobby['id']
        record['phase'] = PHASE_STEADY

    def _play(self, record: Dict, text: str) -> Dict:
        lobby = self.lobbies.get(record['lobby_id'])
        if lobby is None:
            return _result(False, error='Lobby closed')

        try:
            command = parse_client_command(text)
        except ProtocolParseError as e:
            game_logger.logger.warning(f"Dropping malformed message from '{record['name']}': {e}")
            return _result(False, error=str(e))

        name = record['name']
        result = _result(lobby_id=lobby['id'])

        if isinstance(command, AttemptCommand):
            word = command.word
            if not lobby['given_up'] and lobby['words'].get(word) is False:
                lobby['words'][word] = True
                game_logger.log_game_event(lobby['id'], 'word_claimed', name, word=word)
            result['broadcast'].append(encode_attempt_relay(word, Claimant.named(name)))

        elif isinstance(command, VoteCommand):
            if command.on:
                lobby['votes'].add(name)
            else:
                lobby['votes'].discard(name)
            result['broadcast'].append(encode_vote_relay(name, command.on))
            result['broadcast_all'].extend(self._check_consensus(lobby))

        return result

    def _check_consensus(self, lobby: Dict) -> List[str]:
        """Give the lobby up once every active player has voted."""
        active = {p['name'] for p in self._active_players(lobby)}
        if lobby['given_up'] or not active or not active <= lobby['votes']:
            return []

        lobby['given_up'] = True
        for word in lobby['words']:
            lobby['words'][word] = True
        game_logger.log_game_event(lobby['id'], 'lobby_given_up', None, players=sorted(active))
        return [CMD_ALL_GIVE_UP]


# Global service instance
_lobby_service = None


def get_lobby_service() -> Optional[LobbyService]:
    """Get the global lobby service instance."""
    return _lobby_service


def initialize_lobby_service() -> LobbyService:
    """Initialize the global lobby service instance."""
    global _lobby_service
    _lobby_service = LobbyService()
    return _lobby_service
