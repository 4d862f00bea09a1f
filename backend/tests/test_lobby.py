from typefight.models import Player, Session
from typefight.services.games import LobbyVariant


def _lobby(*player_ids):
    session = Session('LOBBY1', players=[Player(pid) for pid in player_ids])
    variant = LobbyVariant()
    session.game_name = variant.name
    session.game_state = variant.initialize(session)
    return variant, session


def vote(variant, session, player_id, game_name):
    return variant.update(session, player_id, {'type': 'vote', 'gameName': game_name})


def test_initial_state_has_no_votes():
    variant, session = _lobby('p1')
    assert session.game_state == {'votes': {}}
    assert variant.name == 'games'


def test_vote_returns_full_snapshot():
    variant, session = _lobby('p1', 'p2')
    vote(variant, session, 'p1', 'quickkeys')
    delta = vote(variant, session, 'p2', 'quickkeys')
    assert delta == {
        'gameType': 'games',
        'playerId': 'p2',
        'type': 'vote-update',
        'votes': {'quickkeys': ['p1', 'p2']},
    }


def test_votes_are_exclusive_across_games():
    variant, session = _lobby('p1')
    vote(variant, session, 'p1', 'quickkeys')
    delta = vote(variant, session, 'p1', 'typeflight')
    assert delta['votes'] == {'typeflight': ['p1']}
    assert session.game_state['votes'] == {'typeflight': ['p1']}


def test_repeat_vote_toggles_off_and_prunes():
    variant, session = _lobby('p1', 'p2')
    vote(variant, session, 'p1', 'textsplosion')
    vote(variant, session, 'p2', 'quickkeys')
    delta = vote(variant, session, 'p1', 'textsplosion')
    assert delta['votes'] == {'quickkeys': ['p2']}


def test_other_events_are_echoed():
    variant, session = _lobby('p1')
    delta = variant.update(session, 'p1', {'type': 'ready'})
    assert delta == {'gameType': 'games', 'playerId': 'p1', 'type': 'ready'}
    assert variant.update(session, 'p1', {})['type'] == 'unknown'


def test_vote_without_game_name_changes_nothing():
    variant, session = _lobby('p1')
    vote(variant, session, 'p1', 'quickkeys')
    delta = variant.update(session, 'p1', {'type': 'vote'})
    assert delta['votes'] == {'quickkeys': ['p1']}


def test_leaving_player_loses_votes():
    variant, session = _lobby('p1', 'p2')
    vote(variant, session, 'p1', 'quickkeys')
    vote(variant, session, 'p2', 'typeflight')
    delta = variant.on_player_left(session, 'p1')
    assert delta['votes'] == {'typeflight': ['p2']}
    assert variant.on_player_left(session, 'p3') is None


def test_non_string_game_name_is_ignored():
    variant, session = _lobby('p1')
    delta = variant.update(session, 'p1', {'type': 'vote', 'gameName': ['quickkeys']})
    assert delta['votes'] == {}
    assert variant.update(session, 'p1', {'type': ['vote']})['type'] == 'unknown'
