import random
import time
from typing import List

from cocina.models import GameState, Table

INGREDIENTS = ('queso', 'tomate', 'pepperoni')

# Canonical positions of the two tables every game starts with
STARTING_TABLES = (
    {'x': 80, 'y': 280, 'width': 80, 'height': 80},
    {'x': 280, 'y': 280, 'width': 80, 'height': 80},
)

# Sprite bootstrap sent to clients with their slot assignment
STARTING_PLAYERS = (
    {'x': 150, 'y': 150, 'speed': 4, 'carryingPizza': False, 'pizzaOrder': None},
    {'x': 200, 'y': 150, 'speed': 4, 'carryingPizza': False, 'pizzaOrder': None},
)


def now_ms() -> int:
    return int(time.time() * 1000)


def random_order() -> List[str]:
    """Uniformly random permutation of the ingredient set."""
    order = list(INGREDIENTS)
    random.shuffle(order)
    return order


def new_game_state(now: int) -> GameState:
    tables = [
        Table(has_customer=True, customer_timer=now, order=random_order(), **pos)
        for pos in STARTING_TABLES
    ]
    return GameState(tables=tables)


def starting_players():
    return [dict(p) for p in STARTING_PLAYERS]
