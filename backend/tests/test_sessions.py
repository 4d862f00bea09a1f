from datetime import datetime, timedelta, timezone

from typefight.models import Player, Session
from typefight.services.sessions import SessionStore


class ScriptedCodes:
    """rng stand-in that hands out join codes from a list."""

    def __init__(self, *codes):
        self.codes = list(codes)

    def choices(self, population, k):
        return list(self.codes.pop(0))


def test_create_registers_uppercase_code():
    store = SessionStore()
    session = store.create('quickkeys')
    assert len(session.join_code) == 6
    assert session.join_code == session.join_code.upper()
    assert store.lookup(session.join_code) is session
    assert session.game_name == 'quickkeys'
    assert session.started is False


def test_create_retries_until_code_is_unused():
    store = SessionStore(rng=ScriptedCodes('AAAAAA', 'AAAAAA', 'BBBBBB'))
    first = store.create()
    second = store.create()
    assert first.join_code == 'AAAAAA'
    assert second.join_code == 'BBBBBB'
    assert sorted(store.codes()) == ['AAAAAA', 'BBBBBB']


def test_lookup_normalizes_code():
    store = SessionStore()
    session = store.create()
    assert store.lookup('  ' + session.join_code.lower() + ' ') is session
    assert store.lookup('') is None
    assert store.lookup(None) is None
    assert store.lookup('NOPE99') is None


def test_rejoin_overwrites_cosmetics_without_duplicating():
    store = SessionStore()
    session = store.create()
    store.add_player(session.join_code, Player('p1', alias='Ann', color='red'))
    store.add_player(session.join_code, Player('p1', alias='Annie', color='blue', icon='star'))
    assert len(session.players) == 1
    player = session.get_player('p1')
    assert (player.alias, player.color, player.icon) == ('Annie', 'blue', 'star')


def test_add_player_to_unknown_code_is_noop():
    store = SessionStore()
    assert store.add_player('ZZZZZZ', Player('p1')) is None


def test_empty_session_is_deleted():
    store = SessionStore()
    session = store.create()
    store.add_player(session.join_code, Player('p1'))
    store.add_player(session.join_code, Player('p2'))

    store.remove_player(session.join_code, 'p1')
    assert store.lookup(session.join_code) is session

    returned = store.remove_player(session.join_code, 'p2')
    assert returned is session
    assert store.lookup(session.join_code) is None
    assert store.remove_player(session.join_code, 'p2') is None


def test_unjoined_sessions_are_pruned_after_ttl():
    store = SessionStore(empty_ttl_sec=60)
    stale = store.create()
    stale.created_at = datetime.now(timezone.utc) - timedelta(seconds=120)
    joined = store.create()
    store.add_player(joined.join_code, Player('p1'))
    joined.created_at = stale.created_at

    store.create()
    assert stale.join_code not in store
    assert joined.join_code in store


def test_session_to_dict_uses_wire_names():
    session = Session('ABC123')
    session.add_player(Player('p1', alias='Ann'))
    data = session.to_dict()
    assert data['joinCode'] == 'ABC123'
    assert data['gameName'] is None
    assert data['players'] == [{'id': 'p1', 'alias': 'Ann', 'color': None, 'font': None, 'icon': None}]
    assert data['gameState'] == {}
    assert data['started'] is False
    assert 'createdAt' in data


def test_removing_a_non_member_keeps_unjoined_session():
    store = SessionStore()
    session = store.create()
    assert store.remove_player(session.join_code, 'stranger') is None
    assert store.lookup(session.join_code) is session

    store.add_player(session.join_code, Player('p1'))
    assert store.remove_player(session.join_code, 'stranger') is None
    assert [p.id for p in session.players] == ['p1']
