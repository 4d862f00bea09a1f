from typing import Any, Dict

from flask import current_app, request
from flask_socketio import emit, join_room, leave_room

from typefight import room_for, socketio
from typefight.errors import GameError, JoinError
from typefight.models import Player, normalize_join_code

# Per-connection identity, set once at join
_sid_to_ctx: Dict[str, Dict[str, Any]] = {}


def _get_sid() -> str:
    # request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _controller():
    return current_app.extensions['typefight']


def _identity():
    ctx = _sid_to_ctx.get(_get_sid()) or {}
    return ctx.get('join_code'), ctx.get('player_id')


def _payload(data) -> Dict[str, Any]:
    return data if isinstance(data, dict) else {}


def _party_state(session):
    return {
        'players': [p.to_dict() for p in session.players],
        'gameStarted': session.started,
    }


def handle_connect(auth=None):
    emit('connected', {'sid': _get_sid()})


def handle_disconnect(reason=None):
    ctx = _sid_to_ctx.pop(_get_sid(), None)
    if not ctx:
        return
    _leave(ctx['join_code'], ctx['player_id'])


def handle_join_session(data):
    data = _payload(data)
    join_code = normalize_join_code(data.get('joinCode'))
    if not join_code:
        emit('join-error', {'success': False, 'error': 'Join code is required'})
        return
    sid = _get_sid()
    player = Player.from_dict(sid, data)
    try:
        session = _controller().join_session(join_code, player)
    except JoinError as exc:
        emit('join-error', exc.to_dict())
        return

    room = room_for(session.join_code)
    join_room(room)
    _sid_to_ctx[sid] = {'join_code': session.join_code, 'player_id': sid}

    emit('join-success', {
        'success': True,
        'joinCode': session.join_code,
        'playerId': sid,
        'players': [p.to_dict() for p in session.players],
        'gameName': session.game_name,
        'gameState': session.game_state,
    })
    emit('player-joined', {
        'player': session.get_player(sid).to_dict(),
        'players': [p.to_dict() for p in session.players],
    }, to=room)
    emit('partyState', _party_state(session), to=room)


def handle_leave_session(data=None):
    join_code, player_id = _identity()
    if not join_code or not player_id:
        return
    requested = normalize_join_code(_payload(data).get('code'))
    if requested and requested != join_code:
        # A connection can only leave the session it joined
        return
    _sid_to_ctx.pop(_get_sid(), None)
    leave_room(room_for(join_code))
    _leave(join_code, player_id)


def _leave(join_code, player_id):
    session = _controller().leave_session(join_code, player_id)
    if not session:
        return
    room = room_for(session.join_code)
    emit('player-left', {
        'playerId': player_id,
        'players': [p.to_dict() for p in session.players],
    }, to=room)
    emit('partyState', _party_state(session), to=room)


def handle_start_game(data=None):
    join_code, player_id = _identity()
    if not join_code or not player_id:
        emit('start-error', {'success': False, 'error': 'Not in a session'})
        return
    try:
        session = _controller().start_game(join_code, _payload(data).get('gameName'))
    except GameError as exc:
        emit('start-error', exc.to_dict())
        return
    emit('game-started', {'success': True, 'session': session.to_dict()}, to=room_for(session.join_code))


def handle_update_game(data=None):
    join_code, player_id = _identity()
    if not join_code or not player_id:
        emit('update-error', {'success': False, 'error': 'Not in a session'})
        return
    try:
        delta = _controller().update_game(join_code, player_id, _payload(data))
    except GameError as exc:
        emit('update-error', exc.to_dict())
        return
    emit('game-update', delta, to=room_for(join_code))


def handle_game_status(data=None):
    join_code, player_id = _identity()
    if not join_code or not player_id:
        emit('game-status-error', {'success': False, 'error': 'Not in a session'})
        return
    try:
        session = _controller().get_session(join_code)
    except GameError as exc:
        emit('game-status-error', exc.to_dict())
        return
    emit('game-status', {'success': True, 'session': session.to_dict(), 'playerId': player_id})


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on the game namespace."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('join-session', handle_join_session, namespace=namespace)
    socketio.on_event('leave-session', handle_leave_session, namespace=namespace)
    socketio.on_event('start-game', handle_start_game, namespace=namespace)
    socketio.on_event('update-game', handle_update_game, namespace=namespace)
    socketio.on_event('game-status', handle_game_status, namespace=namespace)
