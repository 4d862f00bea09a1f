"""TypeFlight: survival on a small torus grid under server-driven hazards.

Player movement and deaths are client-reported. The server owns the hazard
stream: ``tick`` is called by the controller's repeating loop, faster as the
match goes on (see ``tick_interval_ms``).
"""

import math

from typefight.services.games.base import GameVariant, event_type_of, now_ms, text_field

GRID_SIZE = 10
HAZARD_TYPES = ('fire', 'ice', 'lightning', 'bob', 'laser', 'spikes')
EVENT_HISTORY_LIMIT = 100

BASE_TICK_MS = 2200
MIN_TICK_MS = 450
TICK_DECAY_MS = 90000

DIRECTIONS = {
    'up': (0, -1),
    'down': (0, 1),
    'left': (-1, 0),
    'right': (1, 0),
}


def tick_interval_ms(elapsed_ms, base_ms=BASE_TICK_MS, min_ms=MIN_TICK_MS, decay_ms=TICK_DECAY_MS) -> int:
    """Delay before the next hazard: exponential decay clamped at ``min_ms``."""
    decay = max(0, elapsed_ms) / float(decay_ms)
    return int(max(min_ms, base_ms * math.exp(-decay)))


def _wrap(value, default=0) -> int:
    try:
        return int(round(float(value))) % GRID_SIZE
    except (TypeError, ValueError, OverflowError):
        return default


def _position_of(event):
    position = event.get('position')
    return position if isinstance(position, dict) else None


class TypeFlightVariant(GameVariant):
    name = 'typeflight'
    owns_loop = True

    def initialize(self, session):
        ids = session.player_ids
        started_at = now_ms()
        return {
            'startedAt': started_at,
            'endedAt': None,
            'elapsedMs': 0,
            'gameOver': False,
            'gridSize': GRID_SIZE,
            'players': {
                pid: {'x': (i * GRID_SIZE // max(1, len(ids))) % GRID_SIZE, 'y': GRID_SIZE // 2, 'alive': True}
                for i, pid in enumerate(ids)
            },
            'playerDeaths': 0,
            'eventCounts': {t: 0 for t in HAZARD_TYPES},
            'events': [],
        }

    def update(self, session, player_id, event):
        state = session.game_state
        event_type = event_type_of(event)

        if state.get('gameOver'):
            return self.terminal_delta(state, player_id, event_type)

        handler = {
            'move': self._move,
            'player-state': self._player_state,
            'position-update': self._position_update,
            'player-killed': self._player_killed,
            'player-revived': self._player_revived,
        }.get(event_type)
        if handler is None:
            return self.delta(player_id, event_type or 'unknown')

        delta = handler(state, player_id, event)
        if state.get('gameOver'):
            return self.terminal_delta(state, player_id, event_type)
        return delta

    def on_player_left(self, session, player_id):
        state = session.game_state
        if state.get('players', {}).pop(player_id, None) is None or state.get('gameOver'):
            return None
        if self._end_if_all_dead(state):
            return self.terminal_delta(state, player_id, 'player-left')
        return None

    # ---- player events ----

    def _move(self, state, player_id, event):
        player = state['players'].get(player_id)
        direction = text_field(event, 'direction')
        if not player or not player['alive']:
            return self.delta(player_id, 'move-ignored', direction=direction)
        dx, dy = DIRECTIONS.get(direction, (0, 0))
        player['x'] = (player['x'] + dx) % GRID_SIZE
        player['y'] = (player['y'] + dy) % GRID_SIZE
        return self.delta(player_id, 'move', direction=direction, position=self._position(player))

    def _player_state(self, state, player_id, event):
        player = self._ensure_player(state, player_id)
        position = _position_of(event) or {}
        player['x'] = _wrap(position.get('x'), player['x'])
        player['y'] = _wrap(position.get('y'), player['y'])
        delta = self.delta(player_id, 'player-state', position=self._position(player))
        if 'alive' in event:
            alive = bool(event.get('alive'))
            if player['alive'] and not alive:
                self._kill(state, player)
                delta['playerDeaths'] = state['playerDeaths']
            elif alive:
                player['alive'] = True
        delta['alive'] = player['alive']
        return delta

    def _position_update(self, state, player_id, event):
        # Older clients send a bare position correction
        player = self._ensure_player(state, player_id)
        position = _position_of(event) or {}
        player['x'] = _wrap(position.get('x'), player['x'])
        player['y'] = _wrap(position.get('y'), player['y'])
        return self.delta(player_id, 'position-update', position=self._position(player))

    def _player_killed(self, state, player_id, event):
        player = self._ensure_player(state, player_id)
        position = _position_of(event)
        if position:
            player['x'] = _wrap(position.get('x'), player['x'])
            player['y'] = _wrap(position.get('y'), player['y'])
        if player['alive']:
            self._kill(state, player)
        return self.delta(
            player_id,
            'player-killed',
            position=self._position(player),
            alive=False,
            playerDeaths=state['playerDeaths'],
        )

    def _player_revived(self, state, player_id, event):
        player = self._ensure_player(state, player_id)
        player['alive'] = True
        return self.delta(player_id, 'player-revived', position=self._position(player), alive=True)

    # ---- hazards ----

    def tick(self, session):
        """Append one random hazard; returns the broadcast payload or None once over."""
        state = session.game_state
        if state.get('gameOver'):
            return None
        now = now_ms()
        hazard_type = self.rng.choice(HAZARD_TYPES)
        counts = state['eventCounts']
        hazard = {
            'id': f'hz-{sum(counts.values()) + 1}',
            'type': hazard_type,
            'position': {'x': self.rng.randrange(GRID_SIZE), 'y': self.rng.randrange(GRID_SIZE)},
            'createdAt': now,
        }
        state['events'].append(hazard)
        counts[hazard_type] = counts.get(hazard_type, 0) + 1
        del state['events'][:-EVENT_HISTORY_LIMIT]
        state['elapsedMs'] = now - state['startedAt']
        return self.delta(
            None,
            'hazard',
            event=dict(hazard),
            eventCounts={hazard_type: counts[hazard_type]},
            elapsedMs=state['elapsedMs'],
        )

    def next_interval_ms(self, session, **tuning) -> int:
        state = session.game_state
        return tick_interval_ms(now_ms() - state.get('startedAt', now_ms()), **tuning)

    # ---- helpers ----

    def terminal_delta(self, state, player_id, trigger):
        return self.delta(
            player_id,
            'game-over',
            trigger=trigger,
            gameOver=True,
            endedAt=state.get('endedAt'),
            elapsedMs=state.get('elapsedMs'),
            eventCounts=dict(state.get('eventCounts') or {}),
            playerDeaths=state.get('playerDeaths', 0),
        )

    def _kill(self, state, player) -> None:
        player['alive'] = False
        state['playerDeaths'] += 1
        self._end_if_all_dead(state)

    @staticmethod
    def _end_if_all_dead(state) -> bool:
        players = state.get('players') or {}
        if state.get('gameOver') or not players or any(p['alive'] for p in players.values()):
            return False
        now = now_ms()
        state['gameOver'] = True
        state['endedAt'] = now
        state['elapsedMs'] = now - state['startedAt']
        return True

    @staticmethod
    def _ensure_player(state, player_id):
        players = state.setdefault('players', {})
        if player_id not in players:
            players[player_id] = {'x': 0, 'y': 0, 'alive': True}
        return players[player_id]

    @staticmethod
    def _position(player):
        return {'x': player['x'], 'y': player['y']}
