import re

import pytest

from cocina.errors import CodeGenerationExhausted, InvalidRoomCode, RoomFull, UnresolvableConnection
from cocina.services.kitchen import registry as registry_module
from cocina.services.kitchen.orders import INGREDIENTS, new_game_state, random_order
from cocina.services.kitchen.registry import RoomRegistry

CODE_RE = re.compile(r'^[A-Z0-9]{6}$')


def test_codes_are_six_uppercase_alphanumerics_and_unique():
    registry = RoomRegistry()
    codes = {registry.create_room(f'sid-{i}').code for i in range(200)}
    assert len(codes) == 200
    assert all(CODE_RE.match(code) for code in codes)
    assert len(registry) == 200


def test_code_generation_gives_up_after_max_attempts(monkeypatch):
    registry = RoomRegistry()
    calls = []

    def _always_same(alphabet, k):
        calls.append(k)
        return list('AAAAAA')

    monkeypatch.setattr(registry_module.random, 'choices', _always_same)
    registry.create_room('first')
    calls.clear()
    with pytest.raises(CodeGenerationExhausted):
        registry.create_room('second')
    assert len(calls) == 10
    assert len(registry) == 1
    assert registry.room_for('second') is None


def test_code_generation_succeeds_on_last_attempt(monkeypatch):
    registry = RoomRegistry()
    candidates = iter(['AAAAAA'] * 10 + ['BBBBBB'])
    monkeypatch.setattr(registry_module.random, 'choices', lambda alphabet, k: list(next(candidates)))
    registry.create_room('first')
    room = registry.create_room('second')
    assert room.code == 'BBBBBB'


def test_initial_state():
    state = new_game_state(1234)
    assert state.team_score == 0
    assert state.level == 1
    assert state.is_cooking is False
    assert state.cooking_start_time is None
    assert [(t.x, t.y, t.width, t.height) for t in state.tables] == [(80, 280, 80, 80), (280, 280, 80, 80)]
    for table in state.tables:
        assert table.has_customer is True
        assert table.customer_timer == 1234
        assert sorted(table.order) == sorted(INGREDIENTS)


def test_random_order_is_a_permutation():
    seen = set()
    for _ in range(300):
        order = random_order()
        assert sorted(order) == sorted(INGREDIENTS)
        seen.add(tuple(order))
    # all 3! orderings show up
    assert len(seen) == 6


def test_join_assigns_slot_one_then_rejects_third():
    registry = RoomRegistry()
    room = registry.create_room('host')
    _, guest = registry.join_room(room.code.lower(), 'guest')
    assert guest.slot == 1
    with pytest.raises(RoomFull):
        registry.join_room(room.code, 'third')
    assert [p.sid for p in room.players] == ['host', 'guest']


def test_join_unknown_code_leaves_registry_untouched():
    registry = RoomRegistry()
    registry.create_room('host')
    with pytest.raises(InvalidRoomCode):
        registry.join_room('ZZZZZZ', 'guest')
    assert len(registry) == 1
    assert registry.room_for('guest') is None


def test_rejoin_after_creator_left_takes_free_slot():
    registry = RoomRegistry()
    room = registry.create_room('host')
    registry.join_room(room.code, 'guest')
    registry.remove_player('host')
    _, newcomer = registry.join_room(room.code, 'newcomer')
    assert newcomer.slot == 0
    assert sorted(p.slot for p in room.players) == [0, 1]


def test_last_player_leaving_deletes_room():
    registry = RoomRegistry()
    room = registry.create_room('host')
    registry.join_room(room.code, 'guest')

    left, deleted = registry.remove_player('guest')
    assert left is room and deleted is False
    left, deleted = registry.remove_player('host')
    assert left is room and deleted is True
    assert room.code not in registry
    with pytest.raises(UnresolvableConnection):
        registry.require_room('host')


def test_delete_room_is_idempotent_and_clears_index():
    registry = RoomRegistry()
    room = registry.create_room('host')
    assert registry.delete_room(room.code) is room
    assert registry.delete_room(room.code) is None
    assert registry.room_for('host') is None
    assert registry.remove_player('host') == (None, False)
