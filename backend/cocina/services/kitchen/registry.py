import random
import string
import threading
from typing import Dict, Optional, Tuple

from cocina.errors import CodeGenerationExhausted, InvalidRoomCode, RoomFull, UnresolvableConnection
from cocina.models import Player, Room
from .orders import new_game_state, now_ms

CODE_ALPHABET = string.ascii_uppercase + string.digits


def normalize_code(code) -> str:
    return str(code or '').strip().upper()


class RoomRegistry:
    """In-memory room codes -> rooms, plus the sid -> room code index.

    Socket handlers and the ticker both take ``lock`` before touching a
    room, so every mutation goes through this one serialization point.
    """

    def __init__(self, app=None, clock=now_ms):
        self.lock = threading.RLock()
        self.clock = clock
        self._default_clock = clock
        self.code_length = 6
        self.max_attempts = 10
        self._rooms: Dict[str, Room] = {}
        self._room_by_sid: Dict[str, str] = {}
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        self.code_length = int(app.config.get('ROOM_CODE_LENGTH', 6))
        self.max_attempts = int(app.config.get('ROOM_CODE_MAX_ATTEMPTS', 10))
        with self.lock:
            self.clock = self._default_clock
            self._rooms.clear()
            self._room_by_sid.clear()
        app.extensions['cocina_rooms'] = self

    def __len__(self):
        return len(self._rooms)

    def __contains__(self, code):
        return normalize_code(code) in self._rooms

    def get(self, code) -> Optional[Room]:
        return self._rooms.get(normalize_code(code))

    def all(self):
        return list(self._rooms.values())

    def generate_code(self) -> str:
        for _ in range(self.max_attempts):
            code = ''.join(random.choices(CODE_ALPHABET, k=self.code_length))
            if code not in self._rooms:
                return code
        raise CodeGenerationExhausted(self.max_attempts)

    def create_room(self, sid: str) -> Room:
        """Register a fresh room with ``sid`` as its creator in slot 0."""
        code = self.generate_code()
        room = Room(code, new_game_state(self.clock()))
        room.add_player(sid, 0)
        self._rooms[code] = room
        self._room_by_sid[sid] = code
        return room

    def joinable(self, code) -> Room:
        room = self.get(code)
        if room is None:
            raise InvalidRoomCode(code)
        if room.is_full or room.free_slot() is None:
            raise RoomFull(room.code)
        return room

    def join_room(self, code, sid: str) -> Tuple[Room, Player]:
        room = self.joinable(code)
        player = room.add_player(sid, room.free_slot())
        self._room_by_sid[sid] = room.code
        return room, player

    def room_for(self, sid: str) -> Optional[Room]:
        code = self._room_by_sid.get(sid)
        if code is None:
            return None
        return self._rooms.get(code)

    def require_room(self, sid: str) -> Room:
        room = self.room_for(sid)
        if room is None:
            raise UnresolvableConnection(sid)
        return room

    def remove_player(self, sid: str) -> Tuple[Optional[Room], bool]:
        """Take ``sid`` out of its room.

        Returns the room (or None) and whether the room was deleted
        because nobody is left in it.
        """
        code = self._room_by_sid.pop(sid, None)
        room = self._rooms.get(code) if code else None
        if room is None:
            return None, False
        room.remove_player(sid)
        if room.is_empty:
            self.delete_room(room.code)
            return room, True
        return room, False

    def delete_room(self, code) -> Optional[Room]:
        room = self._rooms.pop(normalize_code(code), None)
        if room is not None:
            for p in room.players:
                if self._room_by_sid.get(p.sid) == room.code:
                    self._room_by_sid.pop(p.sid, None)
        return room

    def reset_game(self, room: Room):
        room.game_state = new_game_state(self.clock())
        return room.game_state
