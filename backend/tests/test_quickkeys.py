from typefight.models import Player, Session
from typefight.services.games import QuickKeysVariant


def _race(*player_ids):
    session = Session('RACE01', players=[Player(pid) for pid in player_ids])
    variant = QuickKeysVariant()
    session.game_name = variant.name
    session.game_state = variant.initialize(session)
    return variant, session


def test_initialize_tracks_every_player():
    _, session = _race('p1', 'p2')
    assert session.game_state == {
        'finished': False,
        'textName': None,
        'playerPositions': {
            'p1': {'index': 0, 'time': None, 'errors': 0},
            'p2': {'index': 0, 'time': None, 'errors': 0},
        },
    }


def test_text_selected_sets_text_name():
    variant, session = _race('p1')
    delta = variant.update(session, 'p1', {'type': 'text-selected', 'textId': 'moby-dick'})
    assert delta == {'gameType': 'quickkeys', 'playerId': 'p1', 'type': 'text-selected', 'textName': 'moby-dick'}
    assert session.game_state['textName'] == 'moby-dick'
    assert session.game_state['finished'] is False


def test_word_completed_echoes_progress():
    variant, session = _race('p1', 'p2')
    delta = variant.update(session, 'p1', {'type': 'word-completed', 'index': 7, 'errors': 2})
    assert delta == {'gameType': 'quickkeys', 'playerId': 'p1', 'type': 'word-completed', 'index': 7, 'errors': 2}
    assert session.game_state['playerPositions']['p1'] == {'index': 7, 'time': None, 'errors': 2}
    assert session.game_state['playerPositions']['p2']['index'] == 0


def test_word_completed_without_errors_keeps_previous_count():
    variant, session = _race('p1')
    variant.update(session, 'p1', {'type': 'word-completed', 'index': 3, 'errors': 4})
    variant.update(session, 'p1', {'type': 'word-completed', 'index': 4})
    assert session.game_state['playerPositions']['p1'] == {'index': 4, 'time': None, 'errors': 4}


def test_finished_flips_once_when_everyone_completes():
    variant, session = _race('p1', 'p2')
    first = variant.update(session, 'p1', {'type': 'text-completed', 'time': 31000, 'errors': 1})
    assert 'finished' not in first
    assert session.game_state['finished'] is False

    second = variant.update(session, 'p2', {'type': 'text-completed', 'time': 35500, 'errors': 0})
    assert second['finished'] is True
    assert session.game_state['finished'] is True

    again = variant.update(session, 'p2', {'type': 'text-completed', 'time': 35500, 'errors': 0})
    assert 'finished' not in again
    assert 'winner' not in second and 'winnerId' not in session.game_state


def test_departed_player_no_longer_blocks_finish():
    variant, session = _race('p1', 'p2')
    variant.update(session, 'p1', {'type': 'text-completed', 'time': 20000, 'errors': 0})
    delta = variant.on_player_left(session, 'p2')
    assert delta['finished'] is True
    assert session.game_state['finished'] is True


def test_unknown_event_is_echoed():
    variant, session = _race('p1')
    assert variant.update(session, 'p1', {'type': 'cursor'}) == {
        'gameType': 'quickkeys', 'playerId': 'p1', 'type': 'cursor',
    }
