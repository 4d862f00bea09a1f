from typefight.services.games.base import GameVariant, event_type_of, text_field

LOBBY_GAME_NAME = 'games'


class LobbyVariant(GameVariant):
    """Game selection page with exclusive, toggling votes.

    State: ``{'votes': {gameName: [playerId, ...]}}``. A player is in at most
    one game's list; voting for the same game again removes the vote. Empty
    lists are pruned. No winner is chosen here.
    """

    name = LOBBY_GAME_NAME

    def initialize(self, session):
        return {'votes': {}}

    def update(self, session, player_id, event):
        event_type = event_type_of(event)
        if event_type != 'vote':
            return self.delta(player_id, event_type or 'unknown')

        votes = session.game_state.setdefault('votes', {})
        game_name = text_field(event, 'gameName')
        if game_name:
            for other, voters in votes.items():
                if other != game_name and player_id in voters:
                    voters.remove(player_id)
            voters = votes.setdefault(game_name, [])
            if player_id in voters:
                voters.remove(player_id)
            else:
                voters.append(player_id)
            for name in [n for n, v in votes.items() if not v]:
                del votes[name]

        # The snapshot is small, so send all of it
        return self.delta(player_id, 'vote-update', votes={k: list(v) for k, v in votes.items()})

    def on_player_left(self, session, player_id):
        votes = session.game_state.get('votes') or {}
        changed = False
        for name in list(votes):
            if player_id in votes[name]:
                votes[name].remove(player_id)
                changed = True
            if not votes[name]:
                del votes[name]
        if not changed:
            return None
        return self.delta(player_id, 'vote-update', votes={k: list(v) for k, v in votes.items()})
