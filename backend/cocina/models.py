from typing import List, Optional

MAX_PLAYERS = 2
PLAYER_SLOTS = (0, 1)


class Table:
    """A service point waiting for a pizza built in ``order``."""

    def __init__(self, x, y, width, height, has_customer=False, customer_timer=None, order=None):
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.has_customer = has_customer
        self.customer_timer = customer_timer
        self.order = list(order or [])

    def seat_customer(self, customer_timer, order):
        self.has_customer = True
        self.customer_timer = customer_timer
        self.order = list(order)

    def to_dict(self):
        return {
            'x': self.x,
            'y': self.y,
            'width': self.width,
            'height': self.height,
            'hasCustomer': self.has_customer,
            'customerTimer': self.customer_timer,
            'order': list(self.order),
        }


class GameState:
    def __init__(self, tables: Optional[List[Table]] = None):
        self.team_score = 0
        self.level = 1
        self.team_ingredients: List[str] = []
        self.ingredient_order: List[str] = []
        self.is_cooking = False
        self.cooking_start_time = None
        self.tables: List[Table] = list(tables or [])

    def clear_pizza(self):
        """Drop the pizza in progress: cooking flags and both ingredient buffers."""
        self.is_cooking = False
        self.cooking_start_time = None
        self.team_ingredients = []
        self.ingredient_order = []

    def table(self, index):
        if isinstance(index, int) and 0 <= index < len(self.tables):
            return self.tables[index]
        return None

    def to_dict(self):
        return {
            'teamScore': self.team_score,
            'level': self.level,
            'teamIngredients': list(self.team_ingredients),
            'ingredientOrder': list(self.ingredient_order),
            'isCooking': self.is_cooking,
            'cookingStartTime': self.cooking_start_time,
            'tables': [t.to_dict() for t in self.tables],
        }


class Player:
    def __init__(self, sid: str, slot: int):
        self.sid = sid
        self.slot = slot

    def to_dict(self):
        return {'id': self.sid, 'playerId': self.slot}


class Room:
    def __init__(self, code: str, game_state: GameState):
        self.code = code
        self.game_state = game_state
        self.players: List[Player] = []

    @property
    def is_full(self):
        return len(self.players) >= MAX_PLAYERS

    @property
    def is_empty(self):
        return not self.players

    def free_slot(self):
        taken = {p.slot for p in self.players}
        for slot in PLAYER_SLOTS:
            if slot not in taken:
                return slot
        return None

    def add_player(self, sid: str, slot: int) -> Player:
        player = Player(sid, slot)
        self.players.append(player)
        return player

    def remove_player(self, sid: str) -> Optional[Player]:
        for i, p in enumerate(self.players):
            if p.sid == sid:
                return self.players.pop(i)
        return None

    def has_player(self, sid: str) -> bool:
        return any(p.sid == sid for p in self.players)

    def players_to_list(self):
        return [p.to_dict() for p in self.players]
