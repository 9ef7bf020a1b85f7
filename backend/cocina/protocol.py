"""Inbound Socket.IO payloads.

Each client event with a payload the server reads gets a small dataclass
built by ``parse_event``. Anything that does not have the expected shape
raises ``MalformedPayload`` and is dropped by the handler.
"""
from dataclasses import dataclass
from numbers import Real
from typing import Any, Dict, List, Optional

from cocina.errors import MalformedPayload
from cocina.models import Table


def _mapping(event, data) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise MalformedPayload(event, f'expected an object, got {type(data).__name__}')
    return data


def _int(event, data, key):
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedPayload(event, f'{key} must be an integer')
    return value


def _number(event, data, key):
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, Real):
        raise MalformedPayload(event, f'{key} must be a number')
    return value


def _str(event, data, key):
    value = data.get(key)
    if not isinstance(value, str):
        raise MalformedPayload(event, f'{key} must be a string')
    return value


def _str_list(event, data, key):
    value = data.get(key)
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise MalformedPayload(event, f'{key} must be a list of strings')
    return list(value)


@dataclass
class JoinRoom:
    room_code: str


@dataclass
class IngredientPicked:
    ingredient: str
    order: List[str]


@dataclass
class StartCooking:
    start_time: Real


@dataclass
class PizzaDelivered:
    score: int
    table_index: int
    raw: Dict[str, Any]


@dataclass
class NewCustomer:
    table_index: int
    customer_timer: Real
    order: List[str]
    raw: Dict[str, Any]


@dataclass
class LevelUp:
    level: int
    new_table: Optional[Table]
    raw: Dict[str, Any]


def parse_table(event, data) -> Table:
    data = _mapping(event, data)
    has_customer = data.get('hasCustomer', False)
    if not isinstance(has_customer, bool):
        raise MalformedPayload(event, 'hasCustomer must be a boolean')
    timer = data.get('customerTimer')
    if timer is not None:
        timer = _number(event, data, 'customerTimer')
    order = _str_list(event, data, 'order') if 'order' in data else []
    return Table(
        x=_number(event, data, 'x'),
        y=_number(event, data, 'y'),
        width=_number(event, data, 'width'),
        height=_number(event, data, 'height'),
        has_customer=has_customer,
        customer_timer=timer,
        order=order,
    )


def _join_room(data):
    return JoinRoom(room_code=_str('joinRoom', data, 'roomCode'))


def _ingredient_picked(data):
    return IngredientPicked(
        ingredient=_str('ingredientPicked', data, 'ingredient'),
        order=_str_list('ingredientPicked', data, 'order'),
    )


def _start_cooking(data):
    return StartCooking(start_time=_number('startCooking', data, 'startTime'))


def _pizza_delivered(data):
    return PizzaDelivered(
        score=_int('pizzaDelivered', data, 'score'),
        table_index=_int('pizzaDelivered', data, 'tableIndex'),
        raw=data,
    )


def _new_customer(data):
    return NewCustomer(
        table_index=_int('newCustomer', data, 'tableIndex'),
        customer_timer=_number('newCustomer', data, 'customerTimer'),
        order=_str_list('newCustomer', data, 'order'),
        raw=data,
    )


def _level_up(data):
    level = _int('levelUp', data, 'level')
    if level < 1:
        raise MalformedPayload('levelUp', 'level must be at least 1')
    new_table = data.get('newTable')
    return LevelUp(
        level=level,
        new_table=parse_table('levelUp', new_table) if new_table else None,
        raw=data,
    )


_PARSERS = {
    'joinRoom': _join_room,
    'ingredientPicked': _ingredient_picked,
    'startCooking': _start_cooking,
    'pizzaDelivered': _pizza_delivered,
    'newCustomer': _new_customer,
    'levelUp': _level_up,
}


def parse_event(event: str, data):
    """Validate ``data`` for ``event``.

    Events without a dedicated parser are relayed untouched, so for them
    only the top-level shape (an object or nothing) is checked and the
    mapping itself is returned.
    """
    data = _mapping(event, data)
    parser = _PARSERS.get(event)
    if parser is None:
        return data
    return parser(data)
