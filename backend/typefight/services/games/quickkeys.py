from typefight.services.games.base import GameVariant, event_type_of


def _fresh_position():
    return {'index': 0, 'time': None, 'errors': 0}


class QuickKeysVariant(GameVariant):
    """Typing race over a shared text.

    Progress values are client-reported and echoed back unvalidated. The
    game is finished once every player has a completion time; no ranking is
    computed here, clients place players from their times.
    """

    name = 'quickkeys'

    def initialize(self, session):
        return {
            'finished': False,
            'textName': None,
            'playerPositions': {pid: _fresh_position() for pid in session.player_ids},
        }

    def update(self, session, player_id, event):
        state = session.game_state
        positions = state.setdefault('playerPositions', {})
        event_type = event_type_of(event)

        if event_type == 'text-selected':
            state['textName'] = event.get('textId')
            return self.delta(player_id, 'text-selected', textName=state['textName'])

        if event_type == 'word-completed':
            index = event.get('index') or 0
            errors = event.get('errors')
            position = positions.get(player_id)
            if position is not None:
                position['index'] = index
                position['errors'] = errors or position['errors']
            return self.delta(player_id, 'word-completed', index=index, errors=errors)

        if event_type == 'text-completed':
            finish_time = event.get('time')
            errors = event.get('errors') or 0
            position = positions.get(player_id)
            if position is not None:
                position['time'] = finish_time
                position['errors'] = errors
            delta = self.delta(player_id, 'text-completed', time=finish_time, errors=errors)
            if self._flip_finished(state):
                delta['finished'] = True
            return delta

        return self.delta(player_id, event_type or 'unknown')

    def on_player_left(self, session, player_id):
        state = session.game_state
        if state.get('playerPositions', {}).pop(player_id, None) is None:
            return None
        if self._flip_finished(state):
            return self.delta(player_id, 'player-left', finished=True)
        return None

    @staticmethod
    def _flip_finished(state) -> bool:
        """Set ``finished`` on its false -> true edge; True only on that edge."""
        positions = state.get('playerPositions') or {}
        all_done = bool(positions) and all(p.get('time') is not None for p in positions.values())
        if all_done and not state.get('finished'):
            state['finished'] = True
            return True
        return False
