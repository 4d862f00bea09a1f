"""SpacebarInvaders: cooperative wave defense.

Players type the word on a danger to destroy it. Clearing a wave raises
``waveComplete`` once; the next wave is spawned by ``start_next_wave`` after
a delay owned by the controller. Three earth hits end the game.
"""

import math
from typing import Optional

from typefight.services.games.base import GameVariant, event_type_of, now_ms
from typefight.services.games.words import WordSource

MAX_EARTH_HITS = 3
SPAWN_INNER_BOUND = 350
SPAWN_OUTER_BOUND = 500
SPAWN_RING_GROWTH = 50


def dangers_for_wave(wave: int, player_count: int) -> int:
    """Number of dangers spawned for a wave.

    Wave 1 is a warm-up, waves 2-4 share a flat size and from wave 5 on every
    wave adds two dangers per player.
    """
    if wave <= 1:
        return 5 + player_count
    base = 5 + 3 * player_count
    if wave <= 4:
        return base
    return base + 2 * player_count * (wave - 4)


def word_length_bounds(index: int):
    """(min, max) word length for the 1-based position of a danger in its wave."""
    if index % 10 == 0:
        return 10, None  # ufo
    if index % 4 == 0:
        return 6, 9  # satellite
    return 1, 5  # asteroid


class SpacebarInvadersVariant(GameVariant):
    name = 'spacebarinvaders'

    def __init__(self, rng=None, words: Optional[WordSource] = None):
        super().__init__(rng)
        self.words = words or WordSource(rng=self.rng)

    def initialize(self, session):
        return {
            'waveNumber': 1,
            'earthHits': 0,
            'dangers': self.spawn_wave(1, len(session.players)),
            'gameOver': False,
            'waveTransitioning': False,
            'gameStartTime': now_ms(),
            'playerStats': {pid: 0 for pid in session.player_ids},
            'survivalTime': None,
        }

    def spawn_position(self, wave: int):
        angle = self.rng.random() * math.pi * 2
        outer = SPAWN_OUTER_BOUND + wave * SPAWN_RING_GROWTH
        distance = self.rng.random() * (outer - SPAWN_INNER_BOUND) + SPAWN_INNER_BOUND
        return math.cos(angle) * distance, math.sin(angle) * distance

    def spawn_wave(self, wave: int, player_count: int):
        dangers = []
        for i in range(1, dangers_for_wave(wave, player_count) + 1):
            min_length, max_length = word_length_bounds(i)
            x, y = self.spawn_position(wave)
            dangers.append({
                'id': f'w{wave}-d{i}',
                'word': self.words.word(min_length, max_length),
                'x': x,
                'y': y,
            })
        return dangers

    def update(self, session, player_id, event):
        state = session.game_state
        event_type = event_type_of(event)

        if event_type not in ('word-destroyed', 'earth-hit'):
            return self.delta(player_id, event_type or 'unknown')
        if state.get('gameOver'):
            # Terminal: nothing moves after the third hit
            return self.delta(player_id, event_type, gameOver=True)

        if event_type == 'word-destroyed':
            word = event.get('word')
            delta = self.delta(player_id, 'word-destroyed', word=word, dangerId=None)
            danger = next((d for d in state['dangers'] if d['word'] == word), None)
            if danger is None:
                return delta
            state['dangers'].remove(danger)
            stats = state.setdefault('playerStats', {})
            stats[player_id] = stats.get(player_id, 0) + 1
            delta['dangerId'] = danger['id']
            delta['destroyedCount'] = stats[player_id]
            self._close_wave_if_clear(state, delta)
            return delta

        danger_id = event.get('dangerId')
        state['earthHits'] += 1
        state['dangers'] = [d for d in state['dangers'] if d['id'] != danger_id]
        delta = self.delta(player_id, 'earth-hit', dangerId=danger_id, earthHits=state['earthHits'])
        if state['earthHits'] >= MAX_EARTH_HITS:
            state['gameOver'] = True
            state['survivalTime'] = now_ms() - state['gameStartTime']
            delta['gameOver'] = True
            delta['survivalTime'] = state['survivalTime']
            return delta
        self._close_wave_if_clear(state, delta)
        return delta

    @staticmethod
    def _close_wave_if_clear(state, delta) -> None:
        # One-shot gate: only the first event to empty the wave announces it
        if state['dangers'] or state.get('gameOver') or state.get('waveTransitioning'):
            return
        state['waveTransitioning'] = True
        delta['waveComplete'] = True
        delta['currentWaveNumber'] = state['waveNumber']

    def start_next_wave(self, session):
        """Spawn the next wave; no-op (None) unless a wave just completed."""
        state = session.game_state
        if not state.get('waveTransitioning') or state.get('gameOver'):
            return None
        state['waveNumber'] += 1
        state['dangers'] = self.spawn_wave(state['waveNumber'], len(session.players))
        state['waveTransitioning'] = False
        return self.delta(
            None,
            'wave-start',
            waveNumber=state['waveNumber'],
            dangers=[dict(d) for d in state['dangers']],
        )
