from typefight.services.games.base import GameVariant, event_type_of


def roll_words_until_pop(player_count: int, rng) -> int:
    return player_count * 20 + rng.randint(0, 9) + 1


class TextSplosionVariant(GameVariant):
    """Hot-seat elimination.

    Every completed word pumps a shared counter. When it reaches the rolled
    threshold the player at the front of ``playerOrder`` (the hot seat) is
    expired. Completing a challenge passes the hot seat to the next player.
    The last player standing wins.
    """

    name = 'textsplosion'

    def initialize(self, session):
        order = session.player_ids
        state = {
            'playerOrder': order,
            'expiredPlayers': [],
            'wordsTyped': {pid: 0 for pid in order},
            'numWordsUntilPop': roll_words_until_pop(len(order), self.rng),
            'numWordsPumped': 0,
            'finished': False,
            'winnerId': None,
        }
        if len(order) <= 1:
            state['finished'] = True
            state['winnerId'] = order[0] if order else None
        return state

    def update(self, session, player_id, event):
        state = session.game_state
        event_type = event_type_of(event)

        if event_type not in ('word-completed', 'challenge-completed'):
            return self.delta(player_id, event_type or 'unknown')
        if state.get('finished'):
            return self.delta(player_id, event_type, finished=True, winnerId=state.get('winnerId'))

        order = state['playerOrder']
        if event_type == 'challenge-completed':
            if order:
                order.append(order.pop(0))
            return self.delta(player_id, 'challenge-completed', playerOrder=list(order))

        state['numWordsPumped'] += 1
        typed = state.setdefault('wordsTyped', {})
        typed[player_id] = typed.get(player_id, 0) + 1
        delta = self.delta(
            player_id,
            'word-completed',
            numWordsPumped=state['numWordsPumped'],
            wordsTyped=typed[player_id],
        )
        if state['numWordsPumped'] >= state['numWordsUntilPop'] and order:
            expired = order.pop(0)
            state['expiredPlayers'].append(expired)
            delta['expiredPlayerId'] = expired
            delta['playerOrder'] = list(order)
            delta['expiredPlayers'] = list(state['expiredPlayers'])
            self._finish_or_reroll(state, delta)
        return delta

    def on_player_left(self, session, player_id):
        state = session.game_state
        order = state.get('playerOrder', [])
        expired = state.get('expiredPlayers', [])
        if player_id not in order and player_id not in expired:
            return None
        if player_id in expired:
            expired.remove(player_id)
        delta = self.delta(player_id, 'player-left', expiredPlayers=list(expired))
        if player_id in order:
            order.remove(player_id)
            delta['playerOrder'] = list(order)
            if not state.get('finished'):
                self._finish_or_reroll(state, delta, reset_counter=False)
        return delta

    def _finish_or_reroll(self, state, delta, reset_counter=True) -> None:
        order = state['playerOrder']
        if len(order) <= 1:
            state['finished'] = True
            state['winnerId'] = order[0] if order else None
            delta['finished'] = True
            delta['winnerId'] = state['winnerId']
            return
        if reset_counter:
            state['numWordsPumped'] = 0
            state['numWordsUntilPop'] = roll_words_until_pop(len(order), self.rng)
            delta['numWordsPumped'] = 0
            delta['numWordsUntilPop'] = state['numWordsUntilPop']
